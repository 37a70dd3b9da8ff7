"""
Layout decision validation.

Checks a (blocks, LayoutDecision) pair for internal consistency before it is
handed to a renderer. Pure predicate: returns human-readable error strings,
an empty list meaning the pair is consistent. Any decision produced by
decide_layout() on the same blocks validates cleanly.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from resumefit.contexts.blocks.block_data_structure import ContentBlock
from resumefit.contexts.layout.constraints import TemplateConstraints
from resumefit.contexts.layout.decision import SECTIONS, LayoutDecision


class IssueTemplates:
    """Centralized issue message templates (f-string style)."""

    # Decision-level
    NOTHING_PLACED = "No block has a placement ({count} blocks supplied)"
    UNKNOWN_BLOCK = "Placement references unknown block '{block_id}'"
    UNKNOWN_SECTION = "Block '{block_id}' placed in unknown section '{section}'"

    # Header
    CONTACT_NOT_IN_HEADER = "Contact block '{block_id}' is not placed in the header"
    MULTIPLE_HEADER_BLOCKS = "Header holds {count} blocks (expected exactly one contact block)"
    NON_CONTACT_IN_HEADER = "Non-contact block '{block_id}' is placed in the header"
    CONTACT_TRUNCATED = "Contact block '{block_id}' must not be truncated"

    # Template-aware
    FONT_BELOW_FLOOR = "Block '{block_id}' font {size}pt is below the {floor}pt minimum"
    NO_SIDEBAR = "Block '{block_id}' placed in sidebar but '{template}' has no sidebar"
    BAD_MAX_LINES = "Block '{block_id}' has non-positive maxLines {max_lines}"
    TEMPLATE_MISMATCH = "Decision was made for '{decided}' but validated against '{template}'"


@dataclass
class ValidationResult:
    """
    Result of layout validation.

    Attributes:
        errors: Consistency errors (empty when valid)
        fits: Fit verdict copied from the decision
        warnings: Warnings copied from the decision
    """

    errors: List[str] = field(default_factory=list)
    fits: bool = True
    warnings: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def validate_layout(
    blocks: Sequence[ContentBlock],
    decision: LayoutDecision,
    constraints: Optional[TemplateConstraints] = None,
) -> List[str]:
    """
    Verify a decision against the block set it claims to place.

    Checks:
    - every placed id exists in blocks
    - a non-empty block set has at least one placement
    - when a contact block exists, the header holds exactly one block and it
      is the canonical (first) contact block, untruncated
    With constraints, additionally:
    - every fontSize is at least fontSizes.minBody
    - no sidebar placement on a template without a sidebar
    - maxLines, when present, is positive

    Args:
        blocks: Block set the decision was made for
        decision: LayoutDecision to check
        constraints: Optional template constraints for template-aware checks

    Returns:
        List of error strings (empty = valid)
    """
    errors: List[str] = []
    blocks_by_id = {block.id: block for block in blocks}

    if blocks and not decision.placement:
        errors.append(IssueTemplates.NOTHING_PLACED.format(count=len(blocks)))

    for block_id, placement in decision.placement.items():
        if block_id not in blocks_by_id:
            errors.append(IssueTemplates.UNKNOWN_BLOCK.format(block_id=block_id))
        if placement.section not in SECTIONS:
            errors.append(
                IssueTemplates.UNKNOWN_SECTION.format(block_id=block_id, section=placement.section)
            )

    # Header invariant
    header_ids = decision.placed_ids(section="header")
    contact = next((block for block in blocks if block.is_contact), None)

    for block_id in header_ids:
        block = blocks_by_id.get(block_id)
        if block is not None and not block.is_contact:
            errors.append(IssueTemplates.NON_CONTACT_IN_HEADER.format(block_id=block_id))

    if contact is not None:
        if len(header_ids) > 1:
            errors.append(IssueTemplates.MULTIPLE_HEADER_BLOCKS.format(count=len(header_ids)))
        if contact.id not in header_ids:
            errors.append(IssueTemplates.CONTACT_NOT_IN_HEADER.format(block_id=contact.id))
        elif decision.placement[contact.id].max_lines is not None:
            errors.append(IssueTemplates.CONTACT_TRUNCATED.format(block_id=contact.id))

    if constraints is not None:
        errors.extend(_validate_against_template(decision, constraints))

    return errors


def _validate_against_template(
    decision: LayoutDecision, constraints: TemplateConstraints
) -> List[str]:
    errors = []

    if decision.template_name != constraints.name:
        errors.append(
            IssueTemplates.TEMPLATE_MISMATCH.format(
                decided=decision.template_name, template=constraints.name
            )
        )

    floor = constraints.font_sizes.min_body
    for block_id, placement in decision.placement.items():
        if placement.font_size < floor:
            errors.append(
                IssueTemplates.FONT_BELOW_FLOOR.format(
                    block_id=block_id, size=placement.font_size, floor=floor
                )
            )
        if placement.section == "sidebar" and not constraints.has_sidebar:
            errors.append(
                IssueTemplates.NO_SIDEBAR.format(block_id=block_id, template=constraints.name)
            )
        if placement.max_lines is not None and placement.max_lines <= 0:
            errors.append(
                IssueTemplates.BAD_MAX_LINES.format(
                    block_id=block_id, max_lines=placement.max_lines
                )
            )

    return errors


def check_decision(
    blocks: Sequence[ContentBlock],
    decision: LayoutDecision,
    constraints: Optional[TemplateConstraints] = None,
) -> ValidationResult:
    """Validate and bundle errors with the decision's verdict and warnings."""
    return ValidationResult(
        errors=validate_layout(blocks, decision, constraints),
        fits=decision.fits,
        warnings=list(decision.warnings),
    )
