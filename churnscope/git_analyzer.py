"""
Git history analyzer for churnscope.

Counts how many commits touched each file within a lookback window.
"""
import logging
from collections import defaultdict
from pathlib import Path

import git
from git.exc import GitCommandError, GitCommandNotFound, InvalidGitRepositoryError, NoSuchPathError

from churnscope.exceptions import ChurnUnavailable

logger = logging.getLogger(__name__)


def is_git_repository(path: Path) -> bool:
    """
    Check whether a directory lies inside a Git work tree.

    Args:
        path: Directory to check

    Returns:
        True if a Git repository is found at path or any parent
    """
    try:
        git.Repo(path, search_parent_directories=True)
    except (InvalidGitRepositoryError, NoSuchPathError):
        return False
    return True


def collect_churn(repo_path: Path, since: str) -> dict[str, int]:
    """
    Count commits per file since the given date.

    Runs `git log --since=<since> --name-only` inside repo_path. Paths are
    reported relative to repo_path, and only files below it are counted, so
    a sub-directory of a work tree can be analyzed on its own.

    Args:
        repo_path: Directory inside a Git work tree
        since: Any value accepted by `git log --since` (e.g. "6 months ago")

    Returns:
        Mapping of relative file path to number of commits touching it.
        Empty if there are no commits in the window.

    Raises:
        ChurnUnavailable: If the history could not be read
    """
    repo_path = Path(repo_path)
    try:
        repo = git.Repo(repo_path, search_parent_directories=True)
        if not repo.head.is_valid():
            # Freshly initialized repository: no history yet.
            logger.debug("No commits in %s", repo_path)
            return {}

        # -z: paths are NUL-terminated and never quoted.
        output = git.Git(str(repo_path)).log(
            f"--since={since}", "--pretty=format:", "--name-only", "--relative", "-z"
        )
    except (GitCommandError, GitCommandNotFound, InvalidGitRepositoryError, NoSuchPathError) as e:
        raise ChurnUnavailable(f"git log failed: {e}", {"path": str(repo_path)}) from e

    counts: dict[str, int] = defaultdict(int)
    for name in output.split("\0"):
        # The first path of a commit may follow the newline ending its empty header.
        name = name.lstrip("\n")
        if not name:
            continue
        counts[name] += 1

    logger.debug("Collected churn for %d files since %r", len(counts), since)
    return dict(counts)
