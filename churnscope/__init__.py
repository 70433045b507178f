"""
churnscope - code hotspot analysis

Correlates Git change frequency (churn) with static code complexity to
surface the files most likely to need attention.
"""

__version__ = "0.1.0"
