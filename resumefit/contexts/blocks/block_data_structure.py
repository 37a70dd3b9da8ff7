"""
Content Block Data Structures

Defines the normalized unit of resume content produced by the extraction
stage and consumed by the layout engine and render plan.

The JSON contract uses camelCase keys:

    {
      "id": "exp-1",
      "type": "section",
      "category": "experience",
      "priority": 9,
      "content": [...],
      "metadata": {"estimatedLines": 12, "isOptional": false, "keywords": ["python"]}
    }

The layout engine only ever reads metadata.estimatedLines (plus priority,
category and isOptional). The payload in `content` is opaque to it; its
structural shape is recorded once, here, in the `shape` discriminator.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from resumefit.contexts.blocks.exceptions import BlockIntegrityError

BLOCK_KINDS = ("header", "section", "list", "text")

CATEGORIES = (
    "contact",
    "experience",
    "education",
    "skills",
    "certifications",
    "projects",
    "custom",
)

# Structural shapes a renderer has to support
SHAPES = ("entry", "entry_list", "string_list", "text")

MIN_PRIORITY = 1
MAX_PRIORITY = 10


def infer_shape(content: Any) -> str:
    """
    Derive the shape discriminator from the payload's top-level structure.

    Only used when the extraction stage did not tag the block itself.
    """
    if isinstance(content, dict):
        return "entry"
    if isinstance(content, (list, tuple)):
        if content and all(isinstance(item, dict) for item in content):
            return "entry_list"
        return "string_list"
    return "text"


@dataclass(frozen=True)
class BlockMetadata:
    """
    Sizing and survival metadata for a block.

    Attributes:
        estimated_lines: Rendered lines at the template's default body size.
            Kept as received so the engine can reject missing or negative
            values with a descriptive error.
        is_optional: Whether the block may be dropped when the page overflows
        keywords: Informational tags for tailoring/scoring collaborators
    """

    estimated_lines: Any
    is_optional: bool = False
    keywords: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ContentBlock:
    """
    One semantic unit of resume content.

    Attributes:
        id: Unique, stable identifier (join key to placement decisions)
        kind: Structural tag, one of BLOCK_KINDS (JSON key "type")
        category: Semantic tag, one of CATEGORIES
        priority: 1-10, 10 = most important
        content: Opaque payload
        metadata: BlockMetadata
        shape: Payload shape, one of SHAPES
    """

    id: str
    kind: str
    category: str
    priority: int
    content: Any = None
    metadata: BlockMetadata = field(default_factory=lambda: BlockMetadata(estimated_lines=0))
    shape: str = "text"

    @property
    def estimated_lines(self) -> Any:
        return self.metadata.estimated_lines

    @property
    def is_optional(self) -> bool:
        return self.metadata.is_optional

    @property
    def is_contact(self) -> bool:
        return self.category == "contact"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the camelCase JSON contract."""
        return {
            "id": self.id,
            "type": self.kind,
            "category": self.category,
            "priority": self.priority,
            "shape": self.shape,
            "content": self.content,
            "metadata": {
                "estimatedLines": self.metadata.estimated_lines,
                "isOptional": self.metadata.is_optional,
                "keywords": list(self.metadata.keywords),
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ContentBlock":
        """
        Parse a block record from the camelCase JSON contract.

        Raises:
            BlockIntegrityError: If id is missing, or type/category/shape are
                not recognized values
        """
        block_id = data.get("id")
        if block_id is None or str(block_id) == "":
            raise BlockIntegrityError("Block is missing its id", field_name="id")
        block_id = str(block_id)

        kind = data.get("type", data.get("kind"))
        if kind not in BLOCK_KINDS:
            raise BlockIntegrityError(
                f"Unknown block type {kind!r} (expected one of {', '.join(BLOCK_KINDS)})",
                block_id=block_id,
                field_name="type",
            )

        category = data.get("category")
        if category not in CATEGORIES:
            raise BlockIntegrityError(
                f"Unknown block category {category!r} (expected one of {', '.join(CATEGORIES)})",
                block_id=block_id,
                field_name="category",
            )

        content = data.get("content")
        shape = data.get("shape") or infer_shape(content)
        if shape not in SHAPES:
            raise BlockIntegrityError(
                f"Unknown content shape {shape!r} (expected one of {', '.join(SHAPES)})",
                block_id=block_id,
                field_name="shape",
            )

        raw_metadata = data.get("metadata") or {}
        metadata = BlockMetadata(
            estimated_lines=raw_metadata.get("estimatedLines"),
            is_optional=bool(raw_metadata.get("isOptional", False)),
            keywords=tuple(str(k) for k in raw_metadata.get("keywords") or ()),
        )

        return cls(
            id=block_id,
            kind=kind,
            category=category,
            priority=data.get("priority"),
            content=content,
            metadata=metadata,
            shape=shape,
        )


@dataclass
class ExtractionResult:
    """
    Envelope returned by the extraction collaborator.

    Attributes:
        blocks: Content blocks in extraction order
        suggested_template: Template family hint (informational only)
        total_estimated_lines: Sum of estimatedLines over all blocks
        detected_categories: Categories present, in first-seen order
    """

    blocks: List[ContentBlock]
    suggested_template: Optional[str] = None
    total_estimated_lines: int = 0
    detected_categories: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Union[Dict[str, Any], List[Dict[str, Any]]]) -> "ExtractionResult":
        """
        Parse an extraction envelope, or a bare list of block records.

        totalEstimatedLines and detectedCategories are recomputed when absent.
        """
        if isinstance(data, list):
            data = {"blocks": data}

        blocks = [ContentBlock.from_dict(record) for record in data.get("blocks") or []]

        total = data.get("totalEstimatedLines")
        if total is None:
            total = sum(
                b.estimated_lines for b in blocks if isinstance(b.estimated_lines, (int, float))
            )

        detected = data.get("detectedCategories")
        if detected is None:
            detected = list(dict.fromkeys(b.category for b in blocks))

        return cls(
            blocks=blocks,
            suggested_template=data.get("suggestedTemplate"),
            total_estimated_lines=total,
            detected_categories=list(detected),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "blocks": [b.to_dict() for b in self.blocks],
            "suggestedTemplate": self.suggested_template,
            "totalEstimatedLines": self.total_estimated_lines,
            "detectedCategories": list(self.detected_categories),
        }


def load_extraction_result(path: Union[str, Path]) -> ExtractionResult:
    """Load an extraction result (or bare block list) from a JSON file."""
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    return ExtractionResult.from_dict(data)
