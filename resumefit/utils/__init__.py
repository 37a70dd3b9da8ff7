"""
Shared utilities for RESUMEFIT.

Common functionality used across contexts:
- Logger setup (loguru)
- Pipeline event logging
- Timestamps
"""

from resumefit.utils.timestamp import now_exact, session_stamp

__all__ = ["now_exact", "session_stamp"]
