"""
RESUMEFIT - one-page resume layout decisions

Decides where tailored resume content goes on a fixed one-page template, at
what font size, and what gets shed when it does not fit.

Architecture:
- Blocks Context: Normalized content blocks from the extraction stage
- Layout Context: Template constraints, the decision engine, validation, caching
- Rendering Context: Painter input and human-readable reports
"""

__version__ = "0.1.0"
