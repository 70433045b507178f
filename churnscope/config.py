"""
Configuration for hotspot analysis.

Defaults can be overridden per repository with a `.churnscope.yml` file
at the analyzed path. Explicit request arguments always take precedence.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_SINCE = "1 year ago"
DEFAULT_LIMIT = 20
CONFIG_FILENAME = ".churnscope.yml"


@dataclass
class HotspotSettings:
    """Settings applied to a hotspot request when the caller omits them."""

    since: str = DEFAULT_SINCE
    limit: int = DEFAULT_LIMIT
    exclude_dirs: list[str] = field(default_factory=list)

    def resolve_since(self, since: Optional[str]) -> str:
        """Return the explicit lookback window, or the configured one."""
        return since or self.since or DEFAULT_SINCE

    def resolve_limit(self, limit: Optional[int]) -> int:
        """Return the explicit limit when positive, else the configured one."""
        if limit is not None and limit > 0:
            return limit
        if self.limit > 0:
            return self.limit
        return DEFAULT_LIMIT

    @classmethod
    def from_yaml(cls, yaml_path: Path) -> "HotspotSettings":
        """
        Load settings from a YAML file.

        Args:
            yaml_path: Path to a .churnscope.yml file

        Returns:
            HotspotSettings instance

        Example YAML:
            hotspots:
              since: "6 months ago"
              limit: 10
              exclude_dirs:
                - vendor
                - third_party
        """
        yaml_path = Path(yaml_path)
        with open(yaml_path) as f:
            config = yaml.safe_load(f) or {}

        if not isinstance(config, dict):
            raise ValueError(f"invalid {yaml_path.name}: top level must be a mapping")

        settings = cls()

        hotspots = config.get("hotspots") or {}
        if not isinstance(hotspots, dict):
            raise ValueError(f"invalid {yaml_path.name}: 'hotspots' must be a mapping")

        if "since" in hotspots and hotspots["since"]:
            settings.since = str(hotspots["since"])
        if "limit" in hotspots and hotspots["limit"] is not None:
            try:
                settings.limit = int(hotspots["limit"])
            except (TypeError, ValueError) as e:
                raise ValueError(f"invalid {yaml_path.name}: 'limit' must be an integer") from e
        exclude_dirs = hotspots.get("exclude_dirs")
        if exclude_dirs:
            if not isinstance(exclude_dirs, list):
                raise ValueError(f"invalid {yaml_path.name}: 'exclude_dirs' must be a list")
            settings.exclude_dirs = [str(d) for d in exclude_dirs]

        return settings


def load_settings(root: Path) -> HotspotSettings:
    """Load `.churnscope.yml` from root if it exists, otherwise defaults."""
    config_path = Path(root) / CONFIG_FILENAME
    if config_path.is_file():
        return HotspotSettings.from_yaml(config_path)
    return HotspotSettings()
