"""
Benchmark Results Model

Typed view of the results document written by the mch benchmark harness.
The document is validated once when it is loaded so the renderer can rely
on every field being present with the right type.

Document structure:
    {
      "mch_version": "0.2.0",
      "forks": 1,
      "jvm": "...", "jvm_args": ["-Xmx2G"], ...
      "results": [
        {"group": "g", "benchmark": "foo:bar", "mode": "avgt", "count": 5,
         "score": 1.2, "error": 0.1, "unit": "us/op", "scores": [...]}
      ]
    }

Usage:
    from mch_summary.results import load_results

    document = load_results(Path("../mch-results.json"))
    for result in document.sorted_results():
        print(result.benchmark, result.score_ns)
"""

import json
import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Tuple, Union

from utils.exceptions import InvalidResultsError, UnknownTimeUnitError

logger = logging.getLogger(__name__)

Number = Union[int, float]


class TimeUnit(Enum):
    """Time units the harness reports scores in."""

    NANOSECONDS = "ns/op"
    MICROSECONDS = "us/op"
    MILLISECONDS = "ms/op"
    SECONDS = "s/op"
    MINUTES = "m/op"

    @classmethod
    def parse(cls, value: Any) -> "TimeUnit":
        """Look up a unit by its wire value (e.g. ``"us/op"``)."""
        try:
            return cls(value)
        except ValueError:
            raise UnknownTimeUnitError(value) from None

    @property
    def nanoseconds(self) -> int:
        """Length of one unit in nanoseconds."""
        if self is TimeUnit.NANOSECONDS:
            return 1
        elif self is TimeUnit.MICROSECONDS:
            return 1_000
        elif self is TimeUnit.MILLISECONDS:
            return 1_000_000
        elif self is TimeUnit.SECONDS:
            return 1_000_000_000
        elif self is TimeUnit.MINUTES:
            return 60_000_000_000
        else:
            raise UnknownTimeUnitError(self.value)

    def to_nanoseconds(self, time: Number) -> Number:
        return time * self.nanoseconds


def convert_to_ns(time: Number, unit: Union[str, TimeUnit]) -> Number:
    """Convert a time in ``unit`` to nanoseconds.

    Raises:
        UnknownTimeUnitError: If ``unit`` is not one of the harness units.
    """
    if not isinstance(unit, TimeUnit):
        unit = TimeUnit.parse(unit)
    return unit.to_nanoseconds(time)


# ── Field validation ────────────────────────────────────────────────────────


def _require(data: Dict[str, Any], key: str, types: Tuple[type, ...], where: str) -> Any:
    """Fetch ``data[key]`` and check its JSON type."""
    if key not in data:
        raise InvalidResultsError(f"Missing required field '{key}' in {where}")
    value = data[key]
    # bool is an int subclass, but never a valid number here
    if isinstance(value, bool) and bool not in types:
        raise InvalidResultsError(f"Field '{key}' in {where} has type bool")
    if not isinstance(value, types):
        expected = "/".join(t.__name__ for t in types)
        raise InvalidResultsError(
            f"Field '{key}' in {where} must be {expected}, got {type(value).__name__}"
        )
    if isinstance(value, float) and not math.isfinite(value):
        raise InvalidResultsError(f"Field '{key}' in {where} must be finite, got {value}")
    return value


def _require_list(data: Dict[str, Any], key: str, item_types: Tuple[type, ...], where: str) -> List[Any]:
    items = _require(data, key, (list,), where)
    for i, item in enumerate(items):
        if isinstance(item, bool) or not isinstance(item, item_types):
            raise InvalidResultsError(f"Field '{key}[{i}]' in {where} has invalid type")
        if isinstance(item, float) and not math.isfinite(item):
            raise InvalidResultsError(f"Field '{key}[{i}]' in {where} must be finite, got {item}")
    return list(items)


# ── Records ─────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class BenchmarkResult:
    """Measurement of a single benchmark function."""

    group: str
    benchmark: str  # "namespace:path", or the baseline sentinel
    mode: str
    count: int
    score: float
    error: float
    unit: TimeUnit
    scores: List[float] = field(default_factory=list)

    @property
    def score_ns(self) -> Number:
        return self.unit.to_nanoseconds(self.score)

    @property
    def error_ns(self) -> Number:
        return self.unit.to_nanoseconds(self.error)

    @classmethod
    def from_dict(cls, data: Any, index: int = 0) -> "BenchmarkResult":
        where = f"results[{index}]"
        if not isinstance(data, dict):
            raise InvalidResultsError(f"{where} must be an object")
        return cls(
            group=_require(data, "group", (str,), where),
            benchmark=_require(data, "benchmark", (str,), where),
            mode=_require(data, "mode", (str,), where),
            count=_require(data, "count", (int,), where),
            score=_require(data, "score", (int, float), where),
            error=_require(data, "error", (int, float), where),
            unit=TimeUnit.parse(_require(data, "unit", (str,), where)),
            scores=_require_list(data, "scores", (int, float), where),
        )


@dataclass(frozen=True)
class ResultsDocument:
    """Run metadata plus the per-benchmark results of one harness run."""

    mch_version: str
    forks: int
    jvm: str
    jvm_args: List[str]
    jdk_version: str
    vm_name: str
    vm_version: str
    mc: str
    mc_args: List[str]
    mc_version: str
    warmup_iterations: int
    warmup_time: str
    measurement_iterations: int
    measurement_time: str
    results: List[BenchmarkResult] = field(default_factory=list)

    def sorted_results(self) -> List[BenchmarkResult]:
        """Results ordered by benchmark identifier (stable)."""
        return sorted(self.results, key=lambda r: r.benchmark)

    def metadata(self) -> List[Tuple[str, Any]]:
        """Run metadata as (key, value) pairs in report order."""
        return [
            ("mch_version", self.mch_version),
            ("forks", self.forks),
            ("jvm", self.jvm),
            ("jvm_args", self.jvm_args),
            ("jdk_version", self.jdk_version),
            ("vm_name", self.vm_name),
            ("vm_version", self.vm_version),
            ("mc", self.mc),
            ("mc_args", self.mc_args),
            ("mc_version", self.mc_version),
            ("warmup_iterations", self.warmup_iterations),
            ("warmup_time", self.warmup_time),
            ("measurement_iterations", self.measurement_iterations),
            ("measurement_time", self.measurement_time),
        ]

    @classmethod
    def from_dict(cls, data: Any) -> "ResultsDocument":
        """Build a document from parsed JSON.

        Raises:
            InvalidResultsError: If a required field is missing or mistyped.
        """
        where = "results document"
        if not isinstance(data, dict):
            raise InvalidResultsError("Results document must be a JSON object")

        raw_results = _require(data, "results", (list,), where)
        results = [BenchmarkResult.from_dict(r, i) for i, r in enumerate(raw_results)]

        return cls(
            mch_version=_require(data, "mch_version", (str,), where),
            forks=_require(data, "forks", (int,), where),
            jvm=_require(data, "jvm", (str,), where),
            jvm_args=_require_list(data, "jvm_args", (str,), where),
            jdk_version=_require(data, "jdk_version", (str,), where),
            vm_name=_require(data, "vm_name", (str,), where),
            vm_version=_require(data, "vm_version", (str,), where),
            mc=_require(data, "mc", (str,), where),
            mc_args=_require_list(data, "mc_args", (str,), where),
            mc_version=_require(data, "mc_version", (str,), where),
            warmup_iterations=_require(data, "warmup_iterations", (int,), where),
            warmup_time=_require(data, "warmup_time", (str,), where),
            measurement_iterations=_require(data, "measurement_iterations", (int,), where),
            measurement_time=_require(data, "measurement_time", (str,), where),
            results=results,
        )


def load_results(path: Path) -> ResultsDocument:
    """Load and validate a results JSON file.

    Raises:
        InvalidResultsError: If the file cannot be read, is not valid JSON,
            or does not match the results schema.
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise InvalidResultsError(f"Could not read results file {path}: {e}") from e
    except UnicodeDecodeError as e:
        raise InvalidResultsError(f"Results file {path} is not valid UTF-8: {e}") from e
    except json.JSONDecodeError as e:
        raise InvalidResultsError(f"Results file {path} is not valid JSON: {e}") from e

    document = ResultsDocument.from_dict(data)
    logger.info(f"Loaded {len(document.results)} benchmark result(s) from {path}")
    return document
