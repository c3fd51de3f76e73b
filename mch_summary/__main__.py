"""
Entry point for running mch-summary as a module.

Usage:
    python -m mch_summary append --results ../mch-results.json
    python -m mch_summary preview
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
