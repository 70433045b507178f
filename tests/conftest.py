"""Pytest fixtures and test utilities."""
import os
import tempfile
from pathlib import Path

import pytest
import git


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture(autouse=True)
def clean_git_env(monkeypatch):
    """Keep an outer repository's GIT_* variables away from test repositories."""
    for key in list(os.environ):
        if key.startswith("GIT_"):
            monkeypatch.delenv(key, raising=False)


def init_repo(repo_path: Path) -> git.Repo:
    """Initialize a Git repository with a configured test user."""
    repo_path.mkdir(parents=True, exist_ok=True)
    repo = git.Repo.init(repo_path)
    with repo.config_writer() as config:
        config.set_value("user", "name", "Test User")
        config.set_value("user", "email", "test@example.com")
    return repo


def commit_file(repo: git.Repo, name: str, content: str, message: str) -> None:
    """Write content to a file (creating directories) and commit it."""
    file_path = Path(repo.working_tree_dir) / name
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_text(content)
    repo.index.add([name])
    repo.index.commit(message)


@pytest.fixture
def empty_git_repo(temp_dir):
    """A Git repository with no commits."""
    repo_path = temp_dir / "empty_repo"
    init_repo(repo_path)
    yield repo_path


@pytest.fixture
def hotspot_repo(temp_dir):
    """
    Create a repository with one hot file and one cold file.

    - hot.go: committed 5 times, gaining a branch each time
    - cold.go: committed once, no branches
    - notes.txt: committed 3 times, not source code
    """
    repo_path = temp_dir / "hotspot_repo"
    repo = init_repo(repo_path)

    for i in range(5):
        content = "package main\n\nfunc main() {\n"
        for _ in range(i + 1):
            content += "\tif true { println() }\n"
        content += "}\n"
        commit_file(repo, "hot.go", content, f"update hot.go ({i})")

    commit_file(repo, "cold.go", "package main\n\nfunc cold() {\n\tprintln()\n}\n", "add cold.go")

    for i in range(3):
        commit_file(repo, "notes.txt", f"note {i}\n", f"notes {i}")

    yield repo_path


@pytest.fixture
def nested_repo(temp_dir):
    """
    Create a repository with source files at the root and in a sub-directory.

    - app/core.py: 3 commits, branching code
    - app/util.py: 1 commit
    - setup.py: 2 commits
    """
    repo_path = temp_dir / "nested_repo"
    repo = init_repo(repo_path)

    commit_file(repo, "setup.py", "x = 1\n", "add setup")
    commit_file(repo, "app/util.py", "def util(a):\n    return a\n", "add util")
    for i in range(3):
        body = "def core(a, b):\n"
        for j in range(i + 1):
            body += f"    if a > {j} and b:\n        return {j}\n"
        body += "    return -1\n"
        commit_file(repo, "app/core.py", body, f"core {i}")
    commit_file(repo, "setup.py", "x = 2\n", "bump setup")

    yield repo_path
