"""
Blocks Context

Responsibilities:
- Defines the normalized content block model produced by extraction
- Parses the extraction collaborator's JSON envelope
- Records each payload's structural shape once, at ingestion

Owns: ContentBlock, BlockMetadata, ExtractionResult
Never: Makes placement decisions or inspects payload fields for layout
"""

from resumefit.contexts.blocks.block_data_structure import (
    BLOCK_KINDS,
    CATEGORIES,
    SHAPES,
    BlockMetadata,
    ContentBlock,
    ExtractionResult,
    infer_shape,
    load_extraction_result,
)
from resumefit.contexts.blocks.exceptions import BlockIntegrityError

__all__ = [
    "BLOCK_KINDS",
    "CATEGORIES",
    "SHAPES",
    "BlockMetadata",
    "ContentBlock",
    "ExtractionResult",
    "infer_shape",
    "load_extraction_result",
    "BlockIntegrityError",
]
