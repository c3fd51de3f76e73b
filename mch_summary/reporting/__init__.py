"""
Step summary reporting module.

Renders benchmark results as HTML tables and a Mermaid timing diagram and
appends them to a CI step summary.
"""

from .summary_generator import SummaryConfig, SummaryGenerator, write_step_summary

__all__ = ["SummaryGenerator", "SummaryConfig", "write_step_summary"]
