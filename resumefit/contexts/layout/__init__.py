"""
Layout Context

Responsibilities:
- Holds the template constraint table (region budgets, font sizes, spacing)
- Decides block placement, order, font size and truncation for one page
- Applies the degradation ladder when content overflows
- Validates decisions before they reach a renderer
- Caches decisions keyed by block set and template

Owns: TemplateConstraints, LayoutDecision, the decision algorithm
Never: Reads block payloads or paints pages
"""

from resumefit.contexts.layout.constraints import (
    FontSizes,
    RegionBudget,
    Spacing,
    TemplateConstraints,
)
from resumefit.contexts.layout.decision import LayoutDecision, Overflow, Placement
from resumefit.contexts.layout.decision_cache import DecisionCache, compute_cache_key
from resumefit.contexts.layout.engine import CATEGORY_ORDER, decide_layout, effective_lines
from resumefit.contexts.layout.exceptions import InvalidConstraintsError, UnknownTemplateError
from resumefit.contexts.layout.template_registry import (
    TemplateRegistry,
    get_template_constraints,
)
from resumefit.contexts.layout.validator import ValidationResult, check_decision, validate_layout

__all__ = [
    # Constraint table
    "FontSizes",
    "RegionBudget",
    "Spacing",
    "TemplateConstraints",
    "TemplateRegistry",
    "get_template_constraints",
    # Decision
    "LayoutDecision",
    "Overflow",
    "Placement",
    "CATEGORY_ORDER",
    "decide_layout",
    "effective_lines",
    # Validation
    "ValidationResult",
    "check_decision",
    "validate_layout",
    # Cache
    "DecisionCache",
    "compute_cache_key",
    # Errors
    "InvalidConstraintsError",
    "UnknownTemplateError",
]
