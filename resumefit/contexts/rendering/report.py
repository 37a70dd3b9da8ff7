"""
Human-readable layout reports.

- format_placement_table(): aligned console table of a decision
- render_layout_report(): Markdown report rendered from a Jinja2 template
"""

from pathlib import Path
from typing import Any, List, Optional, Sequence

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from resumefit.contexts.blocks.block_data_structure import ContentBlock
from resumefit.contexts.layout.constraints import TemplateConstraints
from resumefit.contexts.layout.decision import LayoutDecision, tidy_number
from resumefit.contexts.rendering.render_plan import build_render_plan

TEMPLATES_DIR = Path(__file__).parent / "templates"
REPORT_TEMPLATE = "layout_report.md.jinja"


class Column:
    """Column definition for table formatting."""

    def __init__(self, name: str, width: int, align: str = "<"):
        """
        Args:
            name: Column header name
            width: Column width in characters
            align: Alignment ('<' left, '>' right, '^' center)
        """
        self.name = name
        self.width = width
        self.align = align

    def format_header(self) -> str:
        return f"{self.name:{self.align}{self.width}}"

    def format_value(self, value: Any) -> str:
        text = "" if value is None else str(value)
        if len(text) > self.width:
            text = text[: self.width - 1] + "…"
        return f"{text:{self.align}{self.width}}"


class TableFormatter:
    """Builder for text tables with aligned columns."""

    def __init__(self, columns: List[Column]):
        self.columns = columns
        self.total_width = sum(col.width for col in columns) + len(columns) - 1
        self.lines: List[str] = []

    def add_title(self, title: str) -> "TableFormatter":
        self.lines.append("=" * self.total_width)
        self.lines.append(title)
        self.lines.append("=" * self.total_width)
        return self

    def add_table_header(self) -> "TableFormatter":
        self.lines.append(" ".join(col.format_header() for col in self.columns))
        self.lines.append("-" * self.total_width)
        return self

    def add_row(self, values: List[Any]) -> "TableFormatter":
        """
        Raises:
            ValueError: If number of values doesn't match columns
        """
        if len(values) != len(self.columns):
            raise ValueError(f"Expected {len(self.columns)} values, got {len(values)}")
        self.lines.append(" ".join(col.format_value(v) for col, v in zip(self.columns, values)))
        return self

    def add_text(self, text: str) -> "TableFormatter":
        self.lines.append(text)
        return self

    def render(self) -> str:
        return "\n".join(self.lines)


PLACEMENT_COLUMNS = [
    Column("Order", 5, ">"),
    Column("Block", 24),
    Column("Category", 14),
    Column("Section", 8),
    Column("Font", 5, ">"),
    Column("MaxLines", 8, ">"),
    Column("Est.", 5, ">"),
]


def format_placement_table(decision: LayoutDecision, blocks: Sequence[ContentBlock]) -> str:
    """Aligned console table of placements, then verdict, warnings and recommendations."""
    blocks_by_id = {block.id: block for block in blocks}
    table = TableFormatter(PLACEMENT_COLUMNS).add_title(decision.template_name).add_table_header()

    for block_id in decision.placed_ids():
        placement = decision.placement[block_id]
        block = blocks_by_id.get(block_id)
        table.add_row(
            [
                placement.order,
                block_id,
                block.category if block else "?",
                placement.section,
                tidy_number(placement.font_size),
                placement.max_lines,
                block.estimated_lines if block else None,
            ]
        )

    omitted = [block.id for block in blocks if block.id not in decision.placement]
    table.add_text("")
    if decision.fits:
        table.add_text(f"Fits: yes ({len(decision.placement)} placed, {len(omitted)} omitted)")
    else:
        table.add_text(
            f"Fits: no (over by {tidy_number(decision.overflow.overflow_lines)} lines, "
            f"{len(omitted)} omitted)"
        )

    for warning in decision.warnings:
        table.add_text(f"  ! {warning}")
    for i, recommendation in enumerate(decision.overflow.recommendations, 1):
        table.add_text(f"  {i}. {recommendation}")

    return table.render()


def _report_environment() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )


def render_layout_report(
    decision: LayoutDecision,
    blocks: Sequence[ContentBlock],
    constraints: Optional[TemplateConstraints] = None,
) -> str:
    """
    Render a Markdown report of a decision: placements per region, blocks
    not placed, automatic adjustments and recommendations.
    """
    plan = build_render_plan(blocks, decision, constraints)
    template = _report_environment().get_template(REPORT_TEMPLATE)

    return template.render(
        template_name=decision.template_name,
        fits=decision.fits,
        overflow_lines=tidy_number(decision.overflow.overflow_lines),
        regions=[
            {
                "name": region.name,
                "items": [
                    {
                        "order": item.order,
                        "block_id": item.block_id,
                        "category": item.category,
                        "font_size": tidy_number(item.font_size),
                        "max_lines": item.max_lines,
                    }
                    for item in region.items
                ],
            }
            for region in plan.regions.values()
        ],
        omitted=plan.omitted,
        warnings=list(decision.warnings),
        recommendations=list(decision.overflow.recommendations),
    )
