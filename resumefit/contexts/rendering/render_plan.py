"""
Render plan adapter.

Turns a LayoutDecision plus its blocks into the ordered, region-grouped input
a painter consumes. Purely mechanical: blocks without a placement are
omitted, fontSize and maxLines are passed through verbatim, and nothing is
re-checked against capacity.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from resumefit.contexts.blocks.block_data_structure import ContentBlock
from resumefit.contexts.layout.constraints import TemplateConstraints
from resumefit.contexts.layout.decision import SECTIONS, LayoutDecision, Number
from resumefit.contexts.rendering.logger import _log_debug

# Keys holding the whole text of an entry
ENTRY_TEXT_KEYS = ("text", "content")


def get_category_title(category: str) -> str:
    """Section title for a category ("experience" -> "EXPERIENCE")."""
    return category.upper()


def extract_text_content(content: Any) -> str:
    """
    Flatten any payload to plain text for previews.

    Strings pass through; entries prefer a text-like key and otherwise join
    their scalar values; lists are flattened one item per line.
    """
    if content is None:
        return ""
    if isinstance(content, str):
        return content
    if isinstance(content, dict):
        for key in ENTRY_TEXT_KEYS:
            if content.get(key):
                return extract_text_content(content[key])
        parts = []
        for value in content.values():
            if isinstance(value, (list, tuple)):
                parts.extend(str(item) for item in value if item not in (None, ""))
            elif value not in (None, ""):
                parts.append(str(value))
        return "\n".join(parts)
    if isinstance(content, (list, tuple)):
        return "\n".join(extract_text_content(item) for item in content)
    return str(content)


@dataclass(frozen=True)
class RenderItem:
    """
    One block as the painter sees it.

    Attributes:
        block_id: Block id
        category: Block category
        kind: Block kind (header, section, list, text)
        shape: Payload shape discriminator
        content: Block payload, untouched
        order: Paint order from the decision
        font_size: Body point size from the decision
        max_lines: Truncation limit from the decision, if any
        section_title: Title to print above this block (first of a category run)
        heading_size: Point size for section_title
    """

    block_id: str
    category: str
    kind: str
    shape: str
    content: Any
    order: int
    font_size: Number
    max_lines: Optional[int] = None
    section_title: Optional[str] = None
    heading_size: Optional[Number] = None

    def text_lines(self) -> List[str]:
        """Plain-text lines of the payload, cut to max_lines when truncated."""
        lines = [line for line in extract_text_content(self.content).splitlines() if line.strip()]
        if self.max_lines is not None:
            lines = lines[: self.max_lines]
        return lines


@dataclass
class RenderRegion:
    """Ordered items of one page region."""

    name: str
    items: List[RenderItem] = field(default_factory=list)


@dataclass
class RenderPlan:
    """
    Region-grouped paint list derived from one LayoutDecision.

    Attributes:
        template_name: Template the decision was made for
        regions: header/main/sidebar regions in that order
        omitted: Ids of blocks without a placement
        fits: Fit verdict from the decision
    """

    template_name: str
    regions: Dict[str, RenderRegion] = field(default_factory=dict)
    omitted: List[str] = field(default_factory=list)
    fits: bool = True

    def items(self, section: Optional[str] = None) -> List[RenderItem]:
        if section is not None:
            region = self.regions.get(section)
            return list(region.items) if region else []
        return sorted(
            (item for region in self.regions.values() for item in region.items),
            key=lambda item: item.order,
        )


def build_render_plan(
    blocks: Sequence[ContentBlock],
    decision: LayoutDecision,
    constraints: Optional[TemplateConstraints] = None,
) -> RenderPlan:
    """
    Build the painter input for a decision.

    Args:
        blocks: Block set the decision was made for
        decision: LayoutDecision to follow verbatim
        constraints: Template constraints, used only for the heading size

    Returns:
        RenderPlan with header, main and sidebar regions
    """
    blocks_by_id = {block.id: block for block in blocks}
    heading_size = constraints.font_sizes.heading if constraints is not None else None

    plan = RenderPlan(
        template_name=decision.template_name,
        regions={name: RenderRegion(name=name) for name in SECTIONS},
        omitted=[block.id for block in blocks if block.id not in decision.placement],
        fits=decision.fits,
    )

    last_category: Dict[str, Optional[str]] = {name: None for name in SECTIONS}
    for block_id in decision.placed_ids():
        block = blocks_by_id.get(block_id)
        if block is None:
            _log_debug(f"Skipping placement for unknown block {block_id}")
            continue

        placement = decision.placement[block_id]
        section = placement.section
        if section not in plan.regions:
            _log_debug(f"Skipping block {block_id} placed in unknown section {section!r}")
            continue

        title = None
        if section != "header" and block.category != last_category[section]:
            title = get_category_title(block.category)
        last_category[section] = block.category

        plan.regions[section].items.append(
            RenderItem(
                block_id=block.id,
                category=block.category,
                kind=block.kind,
                shape=block.shape,
                content=block.content,
                order=placement.order,
                font_size=placement.font_size,
                max_lines=placement.max_lines,
                section_title=title,
                heading_size=heading_size if title else None,
            )
        )

    return plan
