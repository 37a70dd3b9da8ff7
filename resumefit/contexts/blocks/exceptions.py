"""Custom exceptions for the blocks context with block/field references."""

from typing import Optional


class BlockIntegrityError(ValueError):
    """
    Raised when a content block is structurally invalid.

    Signals a bug in the upstream producer (the extraction stage), not a
    transient condition: callers should not retry.

    Attributes:
        message: Error description
        block_id: Id of the offending block (None if the id itself is missing)
        field_name: Name of the offending field in the JSON contract
    """

    def __init__(
        self,
        message: str,
        block_id: Optional[str] = None,
        field_name: Optional[str] = None,
    ):
        self.message = message
        self.block_id = block_id
        self.field_name = field_name

        parts = [message]
        if block_id is not None:
            parts.append(f"Block: {block_id}")
        if field_name is not None:
            parts.append(f"Field: {field_name}")

        super().__init__("\n".join(parts))
