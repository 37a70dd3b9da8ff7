#!/usr/bin/env python3
"""
Decide and validate one-page resume layouts.

Thin entry point over resumefit.cli for running from a checkout:

    python scripts/decide_layout.py decide outs/blocks/res_42.json -t B
    python scripts/decide_layout.py validate outs/blocks/res_42.json layout.json
    python scripts/decide_layout.py templates
"""

from resumefit.cli import app

if __name__ == "__main__":
    app()
