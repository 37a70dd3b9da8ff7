"""
Rendering Context

Responsibilities:
- Turns a layout decision into the ordered, region-grouped input a painter consumes
- Produces human-readable layout reports (console table, Markdown)

Owns: RenderPlan, layout reports
Never: Makes placement decisions or re-checks capacity
"""

from resumefit.contexts.rendering.render_plan import (
    RenderItem,
    RenderPlan,
    RenderRegion,
    build_render_plan,
    extract_text_content,
    get_category_title,
)
from resumefit.contexts.rendering.report import format_placement_table, render_layout_report

__all__ = [
    "RenderItem",
    "RenderPlan",
    "RenderRegion",
    "build_render_plan",
    "extract_text_content",
    "get_category_title",
    "format_placement_table",
    "render_layout_report",
]
