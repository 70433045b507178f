"""
Hotspot ranking.

A hotspot is a file that is both frequently changed and structurally
complex. Churn from Git history and complexity from the counting engine
are joined on file path, each metric is normalized against its maximum,
and files are ranked by the product of the two.
"""
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional

import pandas as pd
import yaml

from churnscope.analyzer import EngineOptions, FileComplexity, analyze_directory
from churnscope.config import DEFAULT_LIMIT, HotspotSettings, load_settings
from churnscope.exceptions import InvalidInput, NotVersionControlled
from churnscope.git_analyzer import collect_churn, is_git_repository

logger = logging.getLogger(__name__)

HOTSPOT_COLUMNS = ["path", "commit_count", "complexity", "score", "code_lines"]


@dataclass
class Hotspot:
    """A ranked file."""

    path: str
    commit_count: int
    complexity: int
    score: float
    code_lines: int

    def to_dict(self) -> dict:
        return asdict(self)


def rank_hotspots(
    churn: dict[str, int],
    complexity: dict[str, FileComplexity],
    limit: int = DEFAULT_LIMIT,
) -> list[Hotspot]:
    """
    Join churn and complexity on path and rank files by hotspot score.

    Files present on only one side are dropped: a file deleted since the
    window started has no complexity, and a file untouched in the window
    has no churn.

    score = (commits / max commits) * (complexity / max complexity),
    where a zero maximum yields a zero normalized value. Results are
    sorted by descending score, then by path.

    Args:
        churn: Mapping of path to commit count
        complexity: Mapping of path to engine metrics
        limit: Maximum number of hotspots to return (at least 1)

    Returns:
        Ranked hotspots, most significant first
    """
    limit = max(int(limit), 1)

    churn_df = pd.DataFrame(list(churn.items()), columns=["path", "commit_count"])
    complexity_df = pd.DataFrame(
        [(path, m.complexity, m.code_lines) for path, m in complexity.items()],
        columns=["path", "complexity", "code_lines"],
    )

    joined = pd.merge(churn_df, complexity_df, on="path", how="inner")
    if joined.empty:
        return []

    max_commits = joined["commit_count"].max()
    max_complexity = joined["complexity"].max()

    zeros = pd.Series(0.0, index=joined.index)
    norm_churn = joined["commit_count"] / max_commits if max_commits > 0 else zeros
    norm_complexity = joined["complexity"] / max_complexity if max_complexity > 0 else zeros
    joined["score"] = (norm_churn * norm_complexity).astype(float)

    ranked = joined.sort_values(["score", "path"], ascending=[False, True], kind="mergesort").head(limit)

    return [
        Hotspot(
            path=row.path,
            commit_count=int(row.commit_count),
            complexity=int(row.complexity),
            score=float(row.score),
            code_lines=int(row.code_lines),
        )
        for row in ranked.itertuples(index=False)
    ]


def hotspots_to_dataframe(hotspots: list) -> pd.DataFrame:
    """Tabulate hotspots (Hotspot objects or their dict form) for display or export."""
    records = [h.to_dict() if isinstance(h, Hotspot) else h for h in hotspots]
    return pd.DataFrame(records, columns=HOTSPOT_COLUMNS)


def find_hotspots(
    path: str = ".",
    since: Optional[str] = None,
    limit: Optional[int] = None,
    settings: Optional[HotspotSettings] = None,
) -> list[Hotspot]:
    """
    Rank the hotspots of a Git repository.

    Args:
        path: Repository directory (or a directory inside one)
        since: `git log --since` value; defaults to "1 year ago"
        limit: Maximum results; non-positive or None means 20
        settings: Overrides for defaults; read from .churnscope.yml if None

    Returns:
        Ranked hotspots, empty if no file has both history and complexity

    Raises:
        InvalidInput: If path is not an existing directory
        NotVersionControlled: If path is not inside a Git work tree
        ChurnUnavailable: If the Git history could not be read
        ComplexityUnavailable: If the analysis engine failed
    """
    try:
        root = Path(path or ".").resolve(strict=True)
    except (OSError, RuntimeError) as e:
        raise InvalidInput(f"invalid path: {e}", {"path": str(path)}) from e
    if not root.is_dir():
        raise InvalidInput(f"invalid path: not a directory: {root}", {"path": str(path)})

    if not is_git_repository(root):
        raise NotVersionControlled(f"not a git repository: {root}")

    if settings is None:
        try:
            settings = load_settings(root)
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise InvalidInput(f"invalid configuration: {e}", {"path": str(root)}) from e

    since = settings.resolve_since(since)
    limit = settings.resolve_limit(limit)
    logger.info("Finding hotspots in %s since %r (limit %d)", root, since, limit)

    churn = collect_churn(root, since)
    if not churn:
        logger.info("No commits in window; nothing to rank")
        return []

    complexity = analyze_directory(root, EngineOptions(exclude_dirs=list(settings.exclude_dirs)))

    hotspots = rank_hotspots(churn, complexity, limit)
    logger.debug("Ranked %d hotspots", len(hotspots))
    return hotspots
