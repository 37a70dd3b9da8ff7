"""
Shared loguru setup for detailed (Tier 1) logging.

Context-specific wrappers live in contexts/{context}/logger.py and call
setup_logger() with their own context name.
"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

# Console colors per level
LEVEL_COLORS = {
    "WARNING": "<yellow>",
    "ERROR": "<red>",
    "CRITICAL": "<bold><red>",
}

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <7} | {message}"
CONSOLE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss} | <level>{level: <7}</level> | <level>{message}</level>"
)


def setup_logger(
    context_name: str,
    log_dir: Path,
    extra_provenance: Optional[dict] = None,
    console_level: str = "INFO",
) -> Path:
    """
    Configure loguru for one context session.

    Replaces any existing handlers with a DEBUG file sink at
    {log_dir}/{context_name}.log and a colorized console sink, then writes a
    provenance header (script, command, working directory, Python version).

    Args:
        context_name: Context identifier (e.g., "layout", "render")
        log_dir: Directory for this logging session
        extra_provenance: Additional key-value pairs for the provenance header
        console_level: Minimum level echoed to the console

    Returns:
        Path to log file
    """
    log_dir.mkdir(exist_ok=True, parents=True)
    log_file = log_dir / f"{context_name}.log"

    logger.remove()

    for level_name, color in LEVEL_COLORS.items():
        logger.level(level_name, color=color)

    logger.add(log_file, format=FILE_FORMAT, level="DEBUG")
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=console_level, colorize=True)

    log_provenance(extra_provenance)

    return log_file


def log_provenance(extra_context: Optional[dict] = None) -> None:
    """Log execution provenance plus any extra key-value context."""
    logger.info("=" * 80)
    logger.info(f"Script: {sys.argv[0]}")
    logger.info(f"Command: {' '.join(sys.argv)}")
    logger.info(f"Working directory: {Path.cwd()}")
    logger.info(f"Python: {sys.version.split()[0]}")

    if extra_context:
        for key, value in extra_context.items():
            logger.info(f"{key}: {value}")

    logger.info("=" * 80)
