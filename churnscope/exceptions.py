"""Exception hierarchy for churnscope."""
from typing import Optional


class ChurnscopeError(Exception):
    """
    Base exception for all churnscope errors.

    `details` carries context such as the analyzed path; it is appended to
    the message when the error is rendered for a caller.
    """

    def __init__(self, message: str, details: Optional[dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.details = dict(details or {})

    def __str__(self) -> str:
        if not self.details:
            return self.message
        context = ", ".join(f"{key}={value}" for key, value in sorted(self.details.items()))
        return f"{self.message} [{context}]"


class InvalidInput(ChurnscopeError):
    """The requested path or configuration is unusable."""


class NotVersionControlled(ChurnscopeError):
    """The requested path is not inside a Git work tree."""


class ChurnUnavailable(ChurnscopeError):
    """Git history could not be queried."""


class ComplexityUnavailable(ChurnscopeError):
    """The analysis engine could not be run or its report could not be read."""
