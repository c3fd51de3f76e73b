"""
mch-summary — Benchmark step summaries for mcfunction benchmarks

Turns the results document written by the mch benchmark harness into a
GitHub Actions step summary.

Main components:
- results: Typed, validated view of the results JSON
- reporting: Summary rendering with Jinja2 templates
- cli: Command-line entry point used from CI steps
"""

__version__ = "0.1.0"
