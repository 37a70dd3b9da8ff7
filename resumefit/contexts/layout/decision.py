"""
Layout Decision Data Structures

The engine's sole output, keyed by block id. Serializes to the camelCase
JSON contract consumed by the rendering collaborator:

    {
      "templateName": "Template A - Modern Single Column",
      "placement": {"contact-1": {"section": "header", "order": 0, "fontSize": 24}},
      "fits": true,
      "overflow": {"hasOverflow": false, "overflowLines": 0, "recommendations": []},
      "warnings": []
    }
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

SECTIONS = ("header", "main", "sidebar")

Number = Union[int, float]


def tidy_number(value: Number) -> Number:
    """Render whole floats as ints and round the rest to two places."""
    value = round(float(value), 2)
    return int(value) if value.is_integer() else value


@dataclass(frozen=True)
class Placement:
    """
    Where and how one block is painted.

    Attributes:
        section: "header", "main" or "sidebar"
        order: Paint order (header block is 0)
        font_size: Effective point size for this block
        max_lines: Hard truncation limit for the renderer, if any
    """

    section: str
    order: int
    font_size: Number
    max_lines: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "section": self.section,
            "order": self.order,
            "fontSize": tidy_number(self.font_size),
        }
        if self.max_lines is not None:
            data["maxLines"] = self.max_lines
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Placement":
        return cls(
            section=data["section"],
            order=data["order"],
            font_size=data["fontSize"],
            max_lines=data.get("maxLines"),
        )


@dataclass(frozen=True)
class Overflow:
    """Budget exceedance that survived the degradation ladder."""

    has_overflow: bool = False
    overflow_lines: Number = 0
    recommendations: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hasOverflow": self.has_overflow,
            "overflowLines": tidy_number(self.overflow_lines),
            "recommendations": list(self.recommendations),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Overflow":
        return cls(
            has_overflow=bool(data.get("hasOverflow", False)),
            overflow_lines=data.get("overflowLines", 0),
            recommendations=tuple(data.get("recommendations") or ()),
        )


@dataclass(frozen=True)
class LayoutDecision:
    """
    Placement, fit verdict, overflow and warnings for one block set.

    Produced fresh by every decide_layout() call; edits to the block set
    require a new decision.
    """

    template_name: str
    placement: Dict[str, Placement] = field(default_factory=dict)
    fits: bool = True
    overflow: Overflow = Overflow()
    warnings: Tuple[str, ...] = ()

    def placed_ids(self, section: Optional[str] = None) -> List[str]:
        """Placed block ids in paint order, optionally limited to one section."""
        items = sorted(self.placement.items(), key=lambda item: (item[1].order, item[0]))
        return [block_id for block_id, p in items if section is None or p.section == section]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "templateName": self.template_name,
            "placement": {block_id: p.to_dict() for block_id, p in self.placement.items()},
            "fits": self.fits,
            "overflow": self.overflow.to_dict(),
            "warnings": list(self.warnings),
        }

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LayoutDecision":
        return cls(
            template_name=data["templateName"],
            placement={
                block_id: Placement.from_dict(p)
                for block_id, p in (data.get("placement") or {}).items()
            },
            fits=bool(data.get("fits", True)),
            overflow=Overflow.from_dict(data.get("overflow") or {}),
            warnings=tuple(data.get("warnings") or ()),
        )
