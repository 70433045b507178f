"""
Complexity analysis through the shared counting engine.

The engine keeps its configuration in process-wide state and prints to
stdout, so every call in the process goes through `run_engine`, which
holds a single lock for the configure -> run -> read -> reset cycle and
mutes stdout while the engine runs.
"""
import json
import logging
import os
import tempfile
import threading
from contextlib import contextmanager, redirect_stdout
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Iterator, Optional

from churnscope import engine
from churnscope.exceptions import ComplexityUnavailable

logger = logging.getLogger(__name__)

# Guards engine.config and sys.stdout redirection.
_engine_lock = threading.Lock()


@dataclass
class EngineOptions:
    """Scan options for a single engine run."""

    output_format: str = "json"
    per_file: bool = False
    complexity: bool = True
    cocomo: bool = False
    exclude_dirs: list[str] = field(default_factory=list)
    exclude_extensions: list[str] = field(default_factory=list)
    include_extensions: list[str] = field(default_factory=list)


@dataclass
class FileComplexity:
    """Engine metrics for one source file."""

    path: str
    complexity: int
    code_lines: int


@dataclass
class LanguageSummary:
    """Aggregated engine metrics for one language."""

    name: str
    bytes: int
    lines: int
    code: int
    comment: int
    blank: int
    complexity: int
    count: int


@dataclass
class StatsReport:
    """Per-language summary plus COCOMO estimates."""

    language_summary: list[LanguageSummary]
    estimated_cost: float = 0.0
    estimated_schedule_months: float = 0.0
    estimated_people: float = 0.0


@contextmanager
def muted_stdout() -> Iterator[None]:
    """Send stdout to the null device, restoring it on every exit path."""
    with open(os.devnull, "w") as devnull, redirect_stdout(devnull):
        yield


def run_engine(root: Path, options: EngineOptions) -> Any:
    """
    Run the counting engine once over root and return its decoded report.

    Args:
        root: Absolute directory to scan
        options: Scan options

    Returns:
        The decoded JSON report

    Raises:
        ComplexityUnavailable: If the engine fails or its report cannot be read
    """
    report_path = None
    try:
        fd, report_path = tempfile.mkstemp(prefix="churnscope-", suffix=".json")
        os.close(fd)
        with _engine_lock:
            try:
                engine.config.dir_file_paths = [str(root)]
                engine.config.output_format = options.output_format
                engine.config.file_output = report_path
                engine.config.per_file = options.per_file
                engine.config.complexity_enabled = options.complexity
                engine.config.cocomo_enabled = options.cocomo
                engine.config.path_deny_list = list(options.exclude_dirs)
                engine.config.exclude_extensions = list(options.exclude_extensions)
                engine.config.allow_extensions = list(options.include_extensions)

                with muted_stdout():
                    engine.process()

                data = Path(report_path).read_text(encoding="utf-8")
                return json.loads(data)
            finally:
                engine.reset()
    except (engine.EngineError, OSError, RuntimeError, ValueError) as e:
        raise ComplexityUnavailable(f"analysis failed: {e}", {"path": str(root)}) from e
    finally:
        if report_path is not None:
            try:
                os.remove(report_path)
            except FileNotFoundError:
                pass


def analyze_directory(root: Path, options: Optional[EngineOptions] = None) -> dict[str, FileComplexity]:
    """
    Measure complexity and code lines for every source file below root.

    Args:
        root: Absolute directory to analyze
        options: Scan options; per-file output is always enabled

    Returns:
        Mapping of path relative to root (POSIX separators) to FileComplexity

    Raises:
        ComplexityUnavailable: If the engine fails or its report cannot be read
    """
    root = Path(root)
    options = replace(options or EngineOptions(), output_format="json", per_file=True, complexity=True)

    report = run_engine(root, options)

    result = {}
    try:
        for language in report:
            for job in language.get("files", []):
                rel_path = Path(os.path.relpath(job["location"], root)).as_posix()
                result[rel_path] = FileComplexity(
                    path=rel_path,
                    complexity=int(job["complexity"]),
                    code_lines=int(job["code"]),
                )
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise ComplexityUnavailable(f"unexpected engine report: {e}", {"path": str(root)}) from e

    logger.debug("Measured %d source files under %s", len(result), root)
    return result


def language_stats(
    root: Path,
    cocomo: bool = True,
    complexity: bool = True,
    exclude_dirs: Optional[list[str]] = None,
    exclude_extensions: Optional[list[str]] = None,
    include_extensions: Optional[list[str]] = None,
) -> StatsReport:
    """
    Summarize lines, complexity and estimated cost per language.

    Args:
        root: Absolute directory to analyze
        cocomo: Include COCOMO cost estimates
        complexity: Include complexity counts
        exclude_dirs: Directory names to skip
        exclude_extensions: File extensions to skip (e.g. "min.js")
        include_extensions: Only count these file extensions

    Returns:
        StatsReport for the directory

    Raises:
        ComplexityUnavailable: If the engine fails or its report cannot be read
    """
    options = EngineOptions(
        output_format="json2",
        cocomo=cocomo,
        complexity=complexity,
        exclude_dirs=exclude_dirs or [],
        exclude_extensions=exclude_extensions or [],
        include_extensions=include_extensions or [],
    )
    report = run_engine(Path(root), options)

    try:
        summaries = [
            LanguageSummary(
                name=s["name"],
                bytes=s["bytes"],
                lines=s["lines"],
                code=s["code"],
                comment=s["comment"],
                blank=s["blank"],
                complexity=s["complexity"],
                count=s["count"],
            )
            for s in report["languageSummary"]
        ]
        return StatsReport(
            language_summary=summaries,
            estimated_cost=float(report["estimatedCost"]),
            estimated_schedule_months=float(report["estimatedScheduleMonths"]),
            estimated_people=float(report["estimatedPeople"]),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise ComplexityUnavailable(f"unexpected engine report: {e}", {"path": str(root)}) from e
