"""
Shared test fixtures for mch-summary.

Provides common setup: a results document, a source tree with mcfunction
files, and environment variables pointing at temporary directories.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterator

import pytest

from utils.logging_config import ROOT_LOGGER_NAME

RUN_ID = "0123456789abcdef0123456789abcdef01234567"


def make_result(
    benchmark: str = "foo:bar/baz",
    group: str = "g",
    score: float = 1.5,
    error: float = 0.25,
    unit: str = "us/op",
    count: int = 5,
) -> Dict[str, Any]:
    """Create a raw results entry as written by the harness."""
    return {
        "group": group,
        "benchmark": benchmark,
        "mode": "avgt",
        "count": count,
        "score": score,
        "error": error,
        "unit": unit,
        "scores": [score] * count,
    }


@pytest.fixture
def results_data() -> Dict[str, Any]:
    """Return a raw results document with a baseline and two benchmarks."""
    return {
        "mch_version": "0.2.0",
        "forks": 2,
        "jvm": "/usr/lib/jvm/java-17/bin/java",
        "jvm_args": ["-Xms2G", "-Xmx2G"],
        "jdk_version": "17.0.8",
        "vm_name": "OpenJDK 64-Bit Server VM",
        "vm_version": "17.0.8+7",
        "mc": "server.jar",
        "mc_args": ["--nogui"],
        "mc_version": "1.20.1",
        "warmup_iterations": 5,
        "warmup_time": "10 s",
        "measurement_iterations": 5,
        "measurement_time": "10 s",
        "results": [
            make_result("foo:bar/baz", score=1.5, error=0.25, unit="us/op"),
            make_result("mch:baseline", group="g", score=12.0, error=0.5, unit="ns/op"),
            make_result("abc:loop", group="h", score=2.0, error=0.1, unit="ms/op"),
        ],
    }


@pytest.fixture
def source_root(tmp_path: Path) -> Path:
    """Create a source tree containing the mcfunction files of results_data."""
    root = tmp_path / "repo"
    files = {
        "worlds/g/datapacks/g/data/foo/functions/bar/baz.mcfunction": "say baz\n",
        "worlds/h/datapacks/h/data/abc/functions/loop.mcfunction": "function abc:loop\n",
    }
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
    return root


@pytest.fixture
def results_file(tmp_path: Path, results_data: Dict[str, Any]) -> Path:
    """Write results_data to a JSON file."""
    f = tmp_path / "mch-results.json"
    f.write_text(json.dumps(results_data))
    return f


@pytest.fixture
def summary_file(tmp_path: Path) -> Path:
    """Step summary file with content from an earlier step."""
    f = tmp_path / "step_summary.md"
    f.write_text("## Build\n\nok\n")
    return f


@pytest.fixture
def mock_env(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
    results_file: Path,
    summary_file: Path,
    source_root: Path,
) -> Path:
    """Set environment variables the way a GitHub Actions step would."""
    monkeypatch.setenv("MCH_SUMMARY_STATE_DIR", str(tmp_path / "state"))
    monkeypatch.setenv("GITHUB_STEP_SUMMARY", str(summary_file))
    monkeypatch.setenv("GITHUB_SHA", RUN_ID)
    monkeypatch.setenv("MCH_RESULTS_PATH", str(results_file))
    monkeypatch.setenv("MCH_SOURCE_ROOT", str(source_root))
    monkeypatch.delenv("MCH_REPOSITORY_URL", raising=False)
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.delenv("DEBUG", raising=False)
    return tmp_path


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    """Drop handlers installed by setup_logging so they don't outlive a test."""
    yield
    root = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in root.handlers:
        handler.close()
    root.handlers.clear()
