"""
Layout context logger.

Provides logging interface for the layout context with automatic [layout] prefix.
All layout modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path

from loguru import logger

from resumefit.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[layout]"


def setup_layout_logger(log_dir: Path, template_name: str = "", verbose: bool = False) -> Path:
    """
    Setup logger for the layout context.

    Args:
        log_dir: Directory for this layout session
        template_name: Template being laid out, recorded in the provenance header
        verbose: Echo DEBUG messages (ladder steps) to the console

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="layout",
        log_dir=log_dir,
        extra_provenance={"Template": template_name} if template_name else None,
        console_level="DEBUG" if verbose else "INFO",
    )


# Wrapper functions with automatic [layout] prefix


def _log_info(message: str) -> None:
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level layout-specific logging helpers


def log_decision_start(resume_name: str, template_name: str, block_count: int) -> None:
    """Log start of a layout decision with context."""
    _log_info(f"Deciding layout: {resume_name}")
    _log_info(f"Template: {template_name}")
    _log_debug(f"  Blocks: {block_count}")


def log_decision_result(resume_name: str, decision, elapsed_time: float) -> None:
    """
    Log a layout decision with its warnings and recommendations.

    Args:
        resume_name: Resume identifier
        decision: LayoutDecision from decide_layout()
        elapsed_time: Time taken to decide
    """
    placed = len(decision.placement)
    if decision.fits:
        _log_success(
            f"{resume_name}: fits on one page, {placed} blocks placed ({elapsed_time:.3f}s)"
        )
    else:
        _log_error(
            f"{resume_name}: overflows by {decision.overflow.overflow_lines} lines "
            f"after degradation ({elapsed_time:.3f}s)"
        )
        for i, recommendation in enumerate(decision.overflow.recommendations, 1):
            _log_info(f"  Recommendation {i}: {recommendation}")

    for warning in decision.warnings:
        _log_warning(f"  {warning}")


def log_validation_result(resume_name: str, errors) -> None:
    """Log validator output for a decision."""
    if not errors:
        _log_success(f"{resume_name}: layout decision is consistent")
        return

    _log_error(f"{resume_name}: {len(errors)} validation errors")
    for i, error in enumerate(errors, 1):
        _log_error(f"  Error {i}: {error}")
