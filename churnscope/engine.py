"""
Line and complexity counting engine.

The engine is configured through the module-level `config` object rather
than call arguments: set the fields, call `process()`, then `reset()`.
It echoes progress to stdout and writes its report either to
`config.file_output` or, when that is empty, to stdout.

The configuration is process-wide state. Callers outside this module must
go through `churnscope.analyzer`, which serializes access.
"""
import json
import logging
import os
from collections import defaultdict
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import click

from churnscope.languages import LOGICAL_OPERATORS, LanguageSpec, detect_language, get_parser

logger = logging.getLogger(__name__)

# Directories never worth scanning.
ALWAYS_SKIPPED_DIRS = frozenset({
    ".git", ".hg", ".svn", "__pycache__", ".venv", "venv", ".tox", ".pytest_cache",
    ".mypy_cache", "node_modules", ".idea", ".vscode",
})

FORMATS = ("json", "json2")

# Basic COCOMO, organic project.
COCOMO_A = 2.4
COCOMO_B = 1.05
COCOMO_C = 2.5
COCOMO_D = 0.38
AVERAGE_WAGE = 56286
OVERHEAD = 2.4


class EngineError(Exception):
    """Raised when the engine is misconfigured."""


@dataclass
class EngineConfig:
    """Process-wide engine settings."""

    dir_file_paths: list[str] = field(default_factory=list)
    output_format: str = "json"
    file_output: str = ""
    per_file: bool = False
    complexity_enabled: bool = True
    cocomo_enabled: bool = False
    path_deny_list: list[str] = field(default_factory=list)
    exclude_extensions: list[str] = field(default_factory=list)
    allow_extensions: list[str] = field(default_factory=list)


config = EngineConfig()


def reset() -> None:
    """Restore every configuration field to its default."""
    global config
    config = EngineConfig()


def process() -> None:
    """Scan the configured paths and emit a report."""
    if not config.dir_file_paths:
        raise EngineError("no paths to scan")
    if config.output_format not in FORMATS:
        raise EngineError(f"unknown output format: {config.output_format}")

    file_jobs = []
    for root in config.dir_file_paths:
        if not os.path.isdir(root):
            raise EngineError(f"not a directory: {root}")
        click.echo(f"Scanning {root}...")
        for file_path, spec in _walk(Path(root)):
            job = _count_file(file_path, spec)
            if job is not None:
                file_jobs.append(job)

    click.echo(f"Counted {len(file_jobs)} files")

    summaries = _summarize(file_jobs)
    if config.output_format == "json":
        report: Any = summaries
    else:
        report = {"languageSummary": summaries}
        report.update(_cocomo(sum(s["code"] for s in summaries)))

    text = json.dumps(report, indent=2)
    if config.file_output:
        Path(config.file_output).write_text(text, encoding="utf-8")
        click.echo(f"Results written to {config.file_output}")
    else:
        click.echo(text)


def _walk(root: Path):
    """Yield (file path, language) for every recognized source file below root."""
    denied = set(config.path_deny_list) | ALWAYS_SKIPPED_DIRS
    allow = [_normalize_ext(e) for e in config.allow_extensions]
    exclude = [_normalize_ext(e) for e in config.exclude_extensions]

    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if d not in denied and not d.endswith(".egg-info"))
        for filename in sorted(filenames):
            lowered = filename.lower()
            if allow and not any(lowered.endswith(ext) for ext in allow):
                continue
            if any(lowered.endswith(ext) for ext in exclude):
                continue
            spec = detect_language(filename)
            if spec is None:
                continue
            yield Path(dirpath) / filename, spec


def _normalize_ext(ext: str) -> str:
    return "." + ext.lower().lstrip(".")


def _count_file(file_path: Path, spec: LanguageSpec) -> Optional[dict]:
    """Count lines and complexity for one file."""
    try:
        data = file_path.read_bytes()
    except OSError as e:
        logger.debug("Skipping unreadable file %s: %s", file_path, e)
        return None

    lines = data.decode("utf-8", errors="replace").splitlines()
    tree = get_parser(spec).parse(data)

    code_rows = set()
    complexity = 0
    stack = [tree.root_node]
    while stack:
        node = stack.pop()
        if node.type in spec.comment_types:
            continue
        if node.type in spec.branch_types:
            complexity += 1
        if node.child_count:
            stack.extend(node.children)
            continue
        if node.end_byte <= node.start_byte:
            continue  # zero-width recovery node
        if node.type in LOGICAL_OPERATORS:
            complexity += 1
        start_row = node.start_point[0]
        end_row = node.end_point[0]
        if end_row > start_row and node.end_point[1] == 0:
            end_row -= 1
        code_rows.update(range(start_row, end_row + 1))

    code_rows = {row for row in code_rows if row < len(lines)}
    blank = sum(1 for row, line in enumerate(lines) if not line.strip() and row not in code_rows)
    code = len(code_rows)

    return {
        "language": spec.name,
        "location": str(file_path),
        "bytes": len(data),
        "lines": len(lines),
        "code": code,
        "comment": len(lines) - code - blank,
        "blank": blank,
        "complexity": complexity if config.complexity_enabled else 0,
    }


def _summarize(file_jobs: list[dict]) -> list[dict]:
    """Aggregate file counts into one summary per language."""
    by_language = defaultdict(list)
    for job in file_jobs:
        by_language[job["language"]].append(job)

    summaries = []
    for name, jobs in by_language.items():
        summary = {
            "name": name,
            "bytes": sum(j["bytes"] for j in jobs),
            "lines": sum(j["lines"] for j in jobs),
            "code": sum(j["code"] for j in jobs),
            "comment": sum(j["comment"] for j in jobs),
            "blank": sum(j["blank"] for j in jobs),
            "complexity": sum(j["complexity"] for j in jobs),
            "count": len(jobs),
        }
        if config.per_file:
            summary["files"] = sorted(jobs, key=lambda j: j["location"])
        summaries.append(summary)

    summaries.sort(key=lambda s: (-s["code"], s["name"]))
    return summaries


def _cocomo(code_lines: int) -> dict:
    """Basic COCOMO estimates for a code base of the given size."""
    if not config.cocomo_enabled or code_lines == 0:
        return {"estimatedCost": 0.0, "estimatedScheduleMonths": 0.0, "estimatedPeople": 0.0}

    effort = COCOMO_A * (code_lines / 1000) ** COCOMO_B
    schedule = COCOMO_C * effort ** COCOMO_D
    return {
        "estimatedCost": effort * (AVERAGE_WAGE / 12) * OVERHEAD,
        "estimatedScheduleMonths": schedule,
        "estimatedPeople": effort / schedule,
    }
