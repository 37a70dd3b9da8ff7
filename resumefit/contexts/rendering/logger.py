"""
Rendering context logger.

Provides logging interface for rendering context with automatic [render] prefix.
All rendering modules should import from this module, not from loguru directly.
"""

from loguru import logger

CONTEXT_PREFIX = "[render]"


def _log_info(message: str) -> None:
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_plan_summary(plan) -> None:
    """Log region sizes and omitted blocks of a RenderPlan."""
    sizes = ", ".join(f"{name}={len(region.items)}" for name, region in plan.regions.items())
    _log_info(f"Render plan for {plan.template_name}: {sizes}")
    if plan.omitted:
        _log_debug(f"  Omitted (no placement): {', '.join(plan.omitted)}")
