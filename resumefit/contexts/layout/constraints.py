"""
Template Constraint Data Structures

Immutable per-template geometry: total line budget, region budgets, font
sizes and spacing overhead. Parsed from the camelCase constraint table
(templates.yaml) and never mutated afterwards.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from resumefit.contexts.layout.exceptions import InvalidConstraintsError

DEFAULT_FONT_STEP = 1.0
DEFAULT_MIN_BLOCK_LINES = 3


@dataclass(frozen=True)
class RegionBudget:
    """
    Line budget of one page region.

    Attributes:
        max_lines: Lines available in this region
        preferred_categories: Categories the region prefers (sidebar hint list)
    """

    max_lines: float
    preferred_categories: Tuple[str, ...] = ()


@dataclass(frozen=True)
class FontSizes:
    """Point sizes; min_body is a hard floor for body text."""

    name: float
    heading: float
    body: float
    min_body: float


@dataclass(frozen=True)
class Spacing:
    """Lines consumed per section boundary and per entry."""

    between_sections: float = 0.0
    between_entries: float = 0.0


@dataclass(frozen=True)
class TemplateConstraints:
    """
    Capacity model of one template.

    Attributes:
        name: Display name echoed into every LayoutDecision
        max_lines: Authoritative page line budget
        header: Header region budget
        main: Main region budget
        font_sizes: FontSizes
        spacing: Spacing
        sidebar: Optional sidebar region budget
        key: Short lookup alias (e.g., "A")
        layout_type: Template family ("single-column", "two-column", ...)
        font_step: Points removed per font shrink step
        min_block_lines: Truncation never cuts a block below this many lines
        version: Revision of this constraint set
    """

    name: str
    max_lines: float
    header: RegionBudget
    main: RegionBudget
    font_sizes: FontSizes
    spacing: Spacing = Spacing()
    sidebar: Optional[RegionBudget] = None
    key: Optional[str] = None
    layout_type: str = "single-column"
    font_step: float = DEFAULT_FONT_STEP
    min_block_lines: int = DEFAULT_MIN_BLOCK_LINES
    version: int = 1

    @property
    def has_sidebar(self) -> bool:
        return self.sidebar is not None

    def region_budget(self, section: str) -> Optional[RegionBudget]:
        """Budget for "header", "main" or "sidebar" (None if absent)."""
        return {"header": self.header, "main": self.main, "sidebar": self.sidebar}.get(section)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the camelCase constraint table format."""
        sections: Dict[str, Any] = {
            "header": {"maxLines": self.header.max_lines},
            "main": {"maxLines": self.main.max_lines},
        }
        if self.sidebar is not None:
            sections["sidebar"] = {
                "maxLines": self.sidebar.max_lines,
                "preferredCategories": list(self.sidebar.preferred_categories),
            }

        return {
            "name": self.name,
            "key": self.key,
            "type": self.layout_type,
            "version": self.version,
            "maxLines": self.max_lines,
            "sections": sections,
            "fontSizes": {
                "name": self.font_sizes.name,
                "heading": self.font_sizes.heading,
                "body": self.font_sizes.body,
                "minBody": self.font_sizes.min_body,
            },
            "spacing": {
                "betweenSections": self.spacing.between_sections,
                "betweenEntries": self.spacing.between_entries,
            },
            "fontStep": self.font_step,
            "minBlockLines": self.min_block_lines,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], key: Optional[str] = None) -> "TemplateConstraints":
        """
        Parse one constraint table entry.

        Raises:
            InvalidConstraintsError: If a required field is missing, or the
                body font is below its own floor
        """
        name = data.get("name") or key
        if not name:
            raise InvalidConstraintsError(
                "Template constraints are missing a name", field_name="name"
            )

        def require(mapping: Dict[str, Any], field_name: str, path: str) -> Any:
            value = (mapping or {}).get(field_name)
            if value is None:
                raise InvalidConstraintsError(
                    f"Template constraints are missing '{path}'",
                    template_name=name,
                    field_name=path,
                )
            return value

        max_lines = require(data, "maxLines", "maxLines")
        sections = require(data, "sections", "sections")
        header = RegionBudget(
            max_lines=require(sections.get("header"), "maxLines", "sections.header.maxLines")
        )
        main = RegionBudget(
            max_lines=require(sections.get("main"), "maxLines", "sections.main.maxLines")
        )

        sidebar = None
        if sections.get("sidebar") is not None:
            raw_sidebar = sections["sidebar"]
            sidebar = RegionBudget(
                max_lines=require(raw_sidebar, "maxLines", "sections.sidebar.maxLines"),
                preferred_categories=tuple(raw_sidebar.get("preferredCategories") or ()),
            )

        raw_fonts = require(data, "fontSizes", "fontSizes")
        font_sizes = FontSizes(
            name=require(raw_fonts, "name", "fontSizes.name"),
            heading=require(raw_fonts, "heading", "fontSizes.heading"),
            body=require(raw_fonts, "body", "fontSizes.body"),
            min_body=require(raw_fonts, "minBody", "fontSizes.minBody"),
        )
        if font_sizes.body < font_sizes.min_body:
            raise InvalidConstraintsError(
                f"Body font {font_sizes.body}pt is below its floor {font_sizes.min_body}pt",
                template_name=name,
                field_name="fontSizes.body",
            )

        raw_spacing = data.get("spacing") or {}
        spacing = Spacing(
            between_sections=raw_spacing.get("betweenSections", 0.0),
            between_entries=raw_spacing.get("betweenEntries", 0.0),
        )

        font_step = data.get("fontStep", DEFAULT_FONT_STEP)
        if font_step <= 0:
            raise InvalidConstraintsError(
                "fontStep must be positive", template_name=name, field_name="fontStep"
            )

        return cls(
            name=name,
            max_lines=max_lines,
            header=header,
            main=main,
            font_sizes=font_sizes,
            spacing=spacing,
            sidebar=sidebar,
            key=data.get("key", key),
            layout_type=data.get("type", "single-column"),
            font_step=font_step,
            min_block_lines=data.get("minBlockLines", DEFAULT_MIN_BLOCK_LINES),
            version=data.get("version", 1),
        )
