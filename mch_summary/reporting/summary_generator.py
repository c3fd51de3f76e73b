"""
Step summary generator.

Takes a ResultsDocument and renders the results table, the Mermaid timing
diagram and the metadata table using Jinja2 templates, then appends the
report to a CI step summary file.
"""

import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from jinja2 import Environment, FileSystemLoader

from config import DEFAULT_REPOSITORY_URL
from utils.exceptions import ConfigError, ReportingError
from utils.logging_config import log_performance

from ..results import BenchmarkResult, ResultsDocument

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"
BASELINE_BENCHMARK = "mch:baseline"
SOURCE_PATH_TEMPLATE = "worlds/{group}/datapacks/{group}/data/{namespace}/functions/{path}.mcfunction"
SECTION_SEPARATOR = "\n\n"


@dataclass
class SummaryConfig:
    """Configuration for summary rendering."""

    source_root: Path = Path(".")
    repository_url: str = DEFAULT_REPOSITORY_URL
    baseline: str = BASELINE_BENCHMARK

    @classmethod
    def from_yaml(cls, path: Path, defaults: Optional["SummaryConfig"] = None) -> "SummaryConfig":
        """Load renderer options from a YAML file.

        Keys the file leaves out (or sets to null) take their value from
        ``defaults``. Relative ``source_root`` values resolve against the
        YAML file's directory.
        """
        defaults = defaults or cls()
        path = Path(path)
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")

        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except OSError as e:
            raise ConfigError(f"Could not read config file {path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a mapping")

        for key in ("source_root", "repository_url", "baseline"):
            value = data.get(key)
            if value is not None and not isinstance(value, str):
                raise ConfigError(f"'{key}' in {path} must be a string")

        if data.get("source_root") is None:
            source_root = defaults.source_root
        else:
            source_root = Path(data["source_root"])
            if not source_root.is_absolute():
                source_root = path.parent / source_root

        return cls(
            source_root=source_root,
            repository_url=data.get("repository_url") or defaults.repository_url,
            baseline=data.get("baseline") or defaults.baseline,
        )


def source_file_path(result: BenchmarkResult) -> str:
    """Repository-relative path of the mcfunction a benchmark measures."""
    namespace, _, path = result.benchmark.partition(":")
    return SOURCE_PATH_TEMPLATE.format(group=result.group, namespace=namespace, path=path)


def _escape_label(benchmark: str) -> str:
    """Mermaid treats ':' as a separator in section names."""
    return benchmark.replace(":", "#58;")


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _format_value(value: Any) -> str:
    if isinstance(value, list):
        return " ".join(str(v) for v in value)
    return str(value)


class SummaryGenerator:
    """Renders step summaries from ResultsDocument data."""

    def __init__(self, config: Optional[SummaryConfig] = None):
        self.config = config or SummaryConfig()
        self._env = Environment(
            loader=FileSystemLoader(str(TEMPLATE_DIR)),
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render(self, document: ResultsDocument, run_id: str) -> str:
        """
        Render the full summary for a results document.

        Args:
            document: Validated results from the benchmark harness.
            run_id: Commit SHA the source links point at.

        Returns:
            Results table, timing diagram and metadata table separated by
            blank lines, with a trailing newline.

        Raises:
            ReportingError: If a benchmark's source file cannot be read.
        """
        results = document.sorted_results()
        sections = [
            self.render_results_table(results, run_id),
            self.render_timeline(results),
            self.render_metadata_table(document),
        ]
        return SECTION_SEPARATOR.join(sections) + "\n"

    @log_performance()
    def append(self, document: ResultsDocument, run_id: str, summary_path: Path) -> str:
        """
        Render the summary and append it to ``summary_path``.

        The report is rendered completely before the file is opened, so a
        failed render leaves the summary file untouched.

        Returns:
            The rendered report.

        Raises:
            ReportingError: If rendering or writing fails.
        """
        report = self.render(document, run_id)

        summary_path = Path(summary_path)
        try:
            with open(summary_path, "a", encoding="utf-8", newline="") as f:
                f.write(report)
        except OSError as e:
            raise ReportingError(f"Failed to append summary to {summary_path}: {e}") from e

        logger.info(f"Appended summary for {len(document.results)} benchmark(s) to {summary_path}")
        return report

    def render_results_table(self, results: List[BenchmarkResult], run_id: str) -> str:
        rows = [self._build_row(result, run_id) for result in results]
        template = self._env.get_template("results_table.html.j2")
        return template.render(rows=rows)

    def render_timeline(self, results: List[BenchmarkResult]) -> str:
        bars = [
            {
                "label": _escape_label(result.benchmark),
                "error_ns": f"{result.error_ns:.6f}",
                "score_ns": _round_half_up(result.score_ns),
            }
            for result in results
        ]
        template = self._env.get_template("timeline.mmd.j2")
        return template.render(bars=bars)

    def render_metadata_table(self, document: ResultsDocument) -> str:
        metadata = [(key, _format_value(value)) for key, value in document.metadata()]
        template = self._env.get_template("metadata_table.html.j2")
        return template.render(metadata=metadata)

    def _build_row(self, result: BenchmarkResult, run_id: str) -> Dict[str, Any]:
        """Build the template context for one results table row."""
        row: Dict[str, Any] = {
            "group": result.group,
            "benchmark": result.benchmark,
            "mode": result.mode,
            "count": result.count,
            "score": f"{result.score:.6f}",
            "error": f"{result.error:.6f}",
            "unit": result.unit.value,
            "href": None,
            "code": "",
        }
        if result.benchmark == self.config.baseline:
            return row

        file = source_file_path(result)
        try:
            source = (self.config.source_root / file).read_bytes()
        except OSError as e:
            raise ReportingError(f"Failed to read source for {result.benchmark}: {e}") from e
        # Line endings are kept as-is; invalid UTF-8 becomes U+FFFD
        row["code"] = source.decode("utf-8", errors="replace")
        logger.debug(f"Embedded {file}")

        row["href"] = f"{self.config.repository_url.rstrip('/')}/blob/{run_id}/{file}"
        return row


def write_step_summary(
    document: ResultsDocument,
    run_id: str,
    summary_path: Path,
    config: Optional[SummaryConfig] = None,
) -> str:
    """Append the rendered summary for ``document`` to ``summary_path``."""
    return SummaryGenerator(config).append(document, run_id, summary_path)
