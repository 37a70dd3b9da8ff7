"""
Layout Decision Engine

Decides, for one block set and one template, which region each block goes
in, in what order, at what font size, and how content is shed when the page
overflows. The result is a LayoutDecision a renderer can paint verbatim.

Algorithm:
1. Partition: the first contact block is pinned to the header; any further
   contact blocks are ordinary main content.
2. Order: priority descending, then canonical category rank (CATEGORY_ORDER),
   then original input order.
3. Region assignment: everything goes to main, except that blocks of the
   sidebar's preferred categories fill the sidebar in order until the first
   one that does not fit; that block and every later preferred block spill
   back to main.
4. Accounting: each block costs its effective lines plus betweenEntries, and
   each run of a new category within a region costs betweenSections once.
   Regions are checked against their own budgets, header + regions against
   the page's maxLines.
5. Degradation ladder, only while over budget:
   a. drop the lowest-priority optional block whose removal shrinks the
      deficit, repeatedly
   b. shrink body font by fontStep, never below minBody
   c. fix every block's region, then truncate the lowest-priority remaining
      blocks (never below minBlockLines); if the page still overflows, drop
      the remaining optional blocks one at a time and truncate again
   d. report the remaining deficit with recommendations

Line accounting:
    estimatedLines is measured at the template's body size. At any other
    body size a block occupies ceil(estimatedLines * size / body) lines, so
    a font shrink buys real headroom. Truncation limits are expressed in
    lines at the final body size.

The header block is exempt from the ladder: it is never dropped, shrunk or
truncated. Same inputs always produce the same decision.
"""

import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from resumefit.contexts.blocks.block_data_structure import (
    CATEGORIES,
    MAX_PRIORITY,
    MIN_PRIORITY,
    ContentBlock,
)
from resumefit.contexts.blocks.exceptions import BlockIntegrityError
from resumefit.contexts.layout.constraints import Spacing, TemplateConstraints
from resumefit.contexts.layout.decision import LayoutDecision, Overflow, Placement, tidy_number
from resumefit.contexts.layout.exceptions import InvalidConstraintsError
from resumefit.contexts.layout.logger import _log_debug

# Resume convention for equal-priority blocks
CATEGORY_ORDER = ("experience", "education", "skills", "projects", "certifications", "custom")
CATEGORY_RANK = {category: rank for rank, category in enumerate(CATEGORY_ORDER)}
EXTRA_CONTACT_RANK = len(CATEGORY_ORDER)

EPSILON = 1e-9

# Part of the decision cache key. Bump when a ladder change can change a decision.
ENGINE_VERSION = 2


class WarningTemplates:
    """Messages for automatic decisions taken on the caller's behalf."""

    EXTRA_CONTACT = (
        "Block '{block_id}' is an additional contact block; placed in main as ordinary content"
    )
    BLOCK_DROPPED = (
        "Removed optional block '{block_id}' ({category}, priority {priority}, "
        "{lines} lines) to fit the page"
    )
    FONT_REDUCED = "Body font reduced from {old}pt to {new}pt to fit the page"
    BLOCK_TRUNCATED = (
        "Truncated block '{block_id}' ({category}) to {max_lines} lines ({removed} lines removed)"
    )


class RecommendationTemplates:
    """Remediation suggestions for overflow that survived the ladder."""

    REMOVE_BLOCK = "Remove the {category} block '{block_id}' ({lines} lines)"
    SHORTEN_BLOCK = "Shorten the {category} block '{block_id}' ({lines} lines)"
    SHORTEN_HEADER = (
        "Shorten the contact block '{block_id}' by {excess} lines to fit the {budget}-line header"
    )
    REDUCE_CONTENT = "Reduce content by {lines} lines"


@dataclass(frozen=True)
class _Candidate:
    """A non-header block with its sort key ingredients."""

    block: ContentBlock
    index: int
    rank: int
    lines: int

    @property
    def id(self) -> str:
        return self.block.id

    @property
    def sort_key(self) -> Tuple[int, int, int]:
        return (-self.block.priority, self.rank, self.index)


@dataclass
class _Usage:
    """Capacity accounting for one ladder state."""

    sections: Dict[str, str] = field(default_factory=dict)
    lines: Dict[str, int] = field(default_factory=dict)
    header: float = 0.0
    main: float = 0.0
    sidebar: float = 0.0
    header_excess: float = 0.0
    main_excess: float = 0.0
    sidebar_excess: float = 0.0
    global_excess: float = 0.0

    @property
    def total(self) -> float:
        return self.header + self.main + self.sidebar

    @property
    def reducible_deficit(self) -> float:
        """Deficit the ladder can act on (everything except the header's own budget)."""
        return max(self.main_excess, self.sidebar_excess, self.global_excess, 0.0)

    def region_deficit(self, section: str) -> float:
        """Lines that removing content from `section` would help recover."""
        region_excess = self.sidebar_excess if section == "sidebar" else self.main_excess
        return max(region_excess, self.global_excess, 0.0)

    @property
    def fits(self) -> bool:
        return self.reducible_deficit <= EPSILON and self.header_excess <= EPSILON

    @property
    def overflow_lines(self) -> float:
        return max(
            self.header_excess, self.main_excess, self.sidebar_excess, self.global_excess, 0.0
        )


# =============================================================================
# Input checks
# =============================================================================


def _check_constraints(constraints: TemplateConstraints) -> None:
    if constraints is None:
        raise InvalidConstraintsError("Template constraints are required", field_name="maxLines")
    if getattr(constraints, "max_lines", None) is None:
        raise InvalidConstraintsError(
            "Template constraints are missing 'maxLines'",
            template_name=getattr(constraints, "name", None),
            field_name="maxLines",
        )


def _check_blocks(blocks: Sequence[ContentBlock]) -> None:
    """Fail fast on structurally invalid blocks, naming the block and field."""
    seen = set()
    for block in blocks:
        if block.id in seen:
            raise BlockIntegrityError(
                f"Duplicate block id '{block.id}'", block_id=block.id, field_name="id"
            )
        seen.add(block.id)

        lines = block.estimated_lines
        if lines is None:
            raise BlockIntegrityError(
                "Block is missing metadata.estimatedLines",
                block_id=block.id,
                field_name="metadata.estimatedLines",
            )
        if (
            isinstance(lines, bool)
            or not isinstance(lines, (int, float))
            or not float(lines).is_integer()
        ):
            raise BlockIntegrityError(
                f"metadata.estimatedLines must be an integer, got {lines!r}",
                block_id=block.id,
                field_name="metadata.estimatedLines",
            )
        if lines < 0:
            raise BlockIntegrityError(
                f"metadata.estimatedLines must be non-negative, got {lines!r}",
                block_id=block.id,
                field_name="metadata.estimatedLines",
            )

        if block.category not in CATEGORIES:
            raise BlockIntegrityError(
                f"Unknown block category {block.category!r}",
                block_id=block.id,
                field_name="category",
            )

        priority = block.priority
        if (
            isinstance(priority, bool)
            or not isinstance(priority, int)
            or not MIN_PRIORITY <= priority <= MAX_PRIORITY
        ):
            raise BlockIntegrityError(
                f"priority must be an integer in {MIN_PRIORITY}..{MAX_PRIORITY}, got {priority!r}",
                block_id=block.id,
                field_name="priority",
            )


# =============================================================================
# Helper Functions
# =============================================================================


def effective_lines(estimated_lines: int, font_size: float, base_size: float) -> int:
    """Lines a block occupies at `font_size` given its estimate at `base_size`."""
    if estimated_lines <= 0:
        return 0
    return math.ceil(estimated_lines * font_size / base_size - EPSILON)


def _partition(
    blocks: Sequence[ContentBlock],
) -> Tuple[Optional[ContentBlock], List[_Candidate], List[str]]:
    """Split off the canonical contact block; everything else is a candidate."""
    contact = None
    candidates = []
    warnings = []

    for index, block in enumerate(blocks):
        if block.is_contact and contact is None:
            contact = block
            continue

        if block.is_contact:
            rank = EXTRA_CONTACT_RANK
            warnings.append(WarningTemplates.EXTRA_CONTACT.format(block_id=block.id))
        else:
            rank = CATEGORY_RANK[block.category]

        candidates.append(
            _Candidate(block=block, index=index, rank=rank, lines=int(block.estimated_lines))
        )

    return contact, candidates, warnings


def _region_cost(
    lines: int, category: str, previous_category: Optional[str], spacing: Spacing
) -> float:
    cost = lines + spacing.between_entries
    if category != previous_category:
        cost += spacing.between_sections
    return cost


def _account(
    header_lines: int,
    candidates: Sequence[_Candidate],
    constraints: TemplateConstraints,
    body_size: float,
    truncations: Optional[Dict[str, int]] = None,
    regions: Optional[Dict[str, str]] = None,
) -> _Usage:
    """
    Total up line usage for one ladder state.

    Regions are assigned from scratch unless `regions` pins each block to
    the section it already holds.
    """
    usage = _Usage(header=header_lines)
    spacing = constraints.spacing
    base_size = constraints.font_sizes.body
    truncations = truncations or {}

    for candidate in candidates:
        lines = effective_lines(candidate.lines, body_size, base_size)
        if candidate.id in truncations:
            lines = min(lines, truncations[candidate.id])
        usage.lines[candidate.id] = lines

    sidebar = constraints.sidebar
    preferred = set(sidebar.preferred_categories) if sidebar is not None else set()
    sidebar_open = True
    used = {"main": 0.0, "sidebar": 0.0}
    last_category: Dict[str, Optional[str]] = {"main": None, "sidebar": None}

    for candidate in candidates:
        category = candidate.block.category
        lines = usage.lines[candidate.id]

        if regions is not None:
            section = regions[candidate.id]
        else:
            section = "main"
            if category in preferred and sidebar_open:
                cost = _region_cost(lines, category, last_category["sidebar"], spacing)
                if used["sidebar"] + cost <= sidebar.max_lines + EPSILON:
                    section = "sidebar"
                else:
                    sidebar_open = False

        used[section] += _region_cost(lines, category, last_category[section], spacing)
        last_category[section] = category
        usage.sections[candidate.id] = section

    usage.main = used["main"]
    usage.sidebar = used["sidebar"]
    usage.header_excess = header_lines - constraints.header.max_lines if header_lines else 0.0
    usage.main_excess = usage.main - constraints.main.max_lines
    usage.sidebar_excess = usage.sidebar - sidebar.max_lines if sidebar is not None else 0.0
    usage.global_excess = usage.total - constraints.max_lines
    return usage


def _lowest_priority_optional(candidates: Sequence[_Candidate]) -> Optional[_Candidate]:
    optional = [c for c in candidates if c.block.is_optional]
    return optional[-1] if optional else None


def _helpful_optional(
    header_lines: int,
    survivors: Sequence[_Candidate],
    constraints: TemplateConstraints,
    body_size: float,
    usage: _Usage,
) -> Optional[_Candidate]:
    """Lowest-priority optional block whose removal shrinks the deficit."""
    for candidate in reversed(survivors):
        if not candidate.block.is_optional:
            continue
        remaining = [c for c in survivors if c is not candidate]
        trial = _account(header_lines, remaining, constraints, body_size)
        if trial.reducible_deficit < usage.reducible_deficit - EPSILON:
            return candidate
    return None


def _drop_warning(candidate: _Candidate, lines: int) -> str:
    return WarningTemplates.BLOCK_DROPPED.format(
        block_id=candidate.id,
        category=candidate.block.category,
        priority=candidate.block.priority,
        lines=lines,
    )


def _truncate(
    header_lines: int,
    survivors: Sequence[_Candidate],
    constraints: TemplateConstraints,
    body_size: float,
) -> Tuple[Dict[str, int], _Usage, List[Tuple[_Candidate, int, int]]]:
    """
    Cut blocks from the lowest priority up until the page fits.

    Regions are fixed before the first cut, so a shorter block never moves
    between main and sidebar. Each block is cut at most once, never below
    min(current, minBlockLines), and only when its own region or the page
    as a whole is over budget.

    Returns:
        (truncations by block id, final usage, [(candidate, before, after)])
    """
    usage = _account(header_lines, survivors, constraints, body_size)
    regions = dict(usage.sections)
    truncations: Dict[str, int] = {}
    cuts = []

    for candidate in reversed(survivors):
        if usage.reducible_deficit <= EPSILON:
            break
        need = usage.region_deficit(regions[candidate.id])
        if need <= EPSILON:
            continue

        current = usage.lines[candidate.id]
        floor = min(current, max(1, constraints.min_block_lines))
        target = max(floor, current - math.ceil(need - EPSILON))
        if target >= current:
            continue

        truncations[candidate.id] = target
        cuts.append((candidate, current, target))
        usage = _account(header_lines, survivors, constraints, body_size, truncations, regions)

    return truncations, usage, cuts


def _recommend(
    contact: Optional[ContentBlock],
    survivors: Sequence[_Candidate],
    usage: _Usage,
    constraints: TemplateConstraints,
) -> List[str]:
    """Remediation suggestions, largest line count first."""
    entries = []

    if contact is not None and usage.header_excess > EPSILON:
        entries.append(
            (
                usage.header_excess,
                0,
                RecommendationTemplates.SHORTEN_HEADER.format(
                    block_id=contact.id,
                    excess=tidy_number(usage.header_excess),
                    budget=tidy_number(constraints.header.max_lines),
                ),
            )
        )

    for order, candidate in enumerate(survivors, start=1):
        lines = usage.lines[candidate.id]
        if lines <= 0:
            continue
        template = (
            RecommendationTemplates.REMOVE_BLOCK
            if candidate.block.is_optional
            else RecommendationTemplates.SHORTEN_BLOCK
        )
        entries.append(
            (
                lines,
                order,
                template.format(
                    category=candidate.block.category, block_id=candidate.id, lines=lines
                ),
            )
        )

    entries.sort(key=lambda entry: (-entry[0], entry[1]))
    recommendations = [text for _, _, text in entries]

    if not recommendations:
        recommendations.append(
            RecommendationTemplates.REDUCE_CONTENT.format(lines=tidy_number(usage.overflow_lines))
        )
    return recommendations


# =============================================================================
# Main Decision Function
# =============================================================================


def decide_layout(
    blocks: Sequence[ContentBlock],
    constraints: TemplateConstraints,
) -> LayoutDecision:
    """
    Decide placement, font size and truncation for a block set.

    Content that does not fit is a normal outcome (fits=False with
    recommendations), not an error.

    Args:
        blocks: Content blocks in extraction order
        constraints: Template constraints to lay out against

    Returns:
        LayoutDecision keyed by block id

    Raises:
        BlockIntegrityError: A block is missing estimatedLines, has a negative
            or non-integer estimate, an out-of-range priority, or a duplicate id
        InvalidConstraintsError: Constraints are missing maxLines
    """
    _check_constraints(constraints)
    _check_blocks(blocks)

    if not blocks:
        return LayoutDecision(template_name=constraints.name)

    contact, candidates, warnings = _partition(blocks)
    survivors = sorted(candidates, key=lambda c: c.sort_key)
    header_lines = int(contact.estimated_lines) if contact is not None else 0

    body_size = constraints.font_sizes.body
    usage = _account(header_lines, survivors, constraints, body_size)
    _log_debug(
        f"Initial usage: header={usage.header} main={usage.main} sidebar={usage.sidebar} "
        f"total={usage.total}/{constraints.max_lines}"
    )

    # Without a header block the last remaining block stays so the page is
    # never empty.
    def can_drop() -> bool:
        return contact is not None or len(survivors) > 1

    # a. Drop optional blocks, lowest priority first, skipping any whose
    # removal frees nothing
    while usage.reducible_deficit > EPSILON and can_drop():
        victim = _helpful_optional(header_lines, survivors, constraints, body_size, usage)
        if victim is None:
            break
        survivors.remove(victim)
        warnings.append(_drop_warning(victim, usage.lines[victim.id]))
        _log_debug(f"Dropped optional block {victim.id}")
        usage = _account(header_lines, survivors, constraints, body_size)

    # b. Shrink body font one step at a time
    original_body = body_size
    min_body = constraints.font_sizes.min_body
    while usage.reducible_deficit > EPSILON and body_size > min_body + EPSILON:
        body_size = max(min_body, body_size - constraints.font_step)
        usage = _account(header_lines, survivors, constraints, body_size)
        _log_debug(f"Body font {tidy_number(body_size)}pt: deficit {usage.reducible_deficit}")
    if body_size != original_body:
        warnings.append(
            WarningTemplates.FONT_REDUCED.format(
                old=tidy_number(original_body), new=tidy_number(body_size)
            )
        )

    # c. Truncate, lowest priority first. Optional blocks kept by step a go
    # only once truncation alone cannot make the page fit.
    truncations, usage, cuts = _truncate(header_lines, survivors, constraints, body_size)
    while usage.reducible_deficit > EPSILON and can_drop():
        victim = _lowest_priority_optional(survivors)
        if victim is None:
            break
        survivors.remove(victim)
        lines = effective_lines(victim.lines, body_size, constraints.font_sizes.body)
        warnings.append(_drop_warning(victim, lines))
        _log_debug(f"Dropped optional block {victim.id} after truncation")
        truncations, usage, cuts = _truncate(header_lines, survivors, constraints, body_size)

    for candidate, current, target in cuts:
        warnings.append(
            WarningTemplates.BLOCK_TRUNCATED.format(
                block_id=candidate.id,
                category=candidate.block.category,
                max_lines=target,
                removed=current - target,
            )
        )
        _log_debug(f"Truncated {candidate.id}: {current} -> {target} lines")

    # Output assembly
    placement: Dict[str, Placement] = {}
    if contact is not None:
        placement[contact.id] = Placement(
            section="header", order=0, font_size=constraints.font_sizes.name
        )
    for order, candidate in enumerate(survivors, start=1):
        placement[candidate.id] = Placement(
            section=usage.sections[candidate.id],
            order=order,
            font_size=body_size,
            max_lines=truncations.get(candidate.id),
        )

    if usage.fits:
        overflow = Overflow()
    else:
        # d. Out of automatic remedies
        overflow = Overflow(
            has_overflow=True,
            overflow_lines=tidy_number(usage.overflow_lines),
            recommendations=tuple(_recommend(contact, survivors, usage, constraints)),
        )
        _log_debug(f"Overflow after ladder: {overflow.overflow_lines} lines")

    return LayoutDecision(
        template_name=constraints.name,
        placement=placement,
        fits=usage.fits,
        overflow=overflow,
        warnings=tuple(warnings),
    )
