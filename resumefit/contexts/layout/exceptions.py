"""Custom exceptions for the layout context with template references."""

from typing import Iterable, Optional


class InvalidConstraintsError(ValueError):
    """
    Raised when a template constraint set is missing a required field.

    Attributes:
        message: Error description
        template_name: Template whose constraints are invalid
        field_name: Offending field in the constraint table (camelCase path)
    """

    def __init__(
        self,
        message: str,
        template_name: Optional[str] = None,
        field_name: Optional[str] = None,
    ):
        self.message = message
        self.template_name = template_name
        self.field_name = field_name

        parts = [message]
        if template_name:
            parts.append(f"Template: {template_name}")
        if field_name:
            parts.append(f"Field: {field_name}")

        super().__init__("\n".join(parts))


class UnknownTemplateError(LookupError):
    """
    Raised when a template name does not resolve against the constraint table.

    Attributes:
        template_name: The name that was requested
        available: Names and keys that would have resolved
    """

    def __init__(self, template_name: str, available: Iterable[str] = ()):
        self.template_name = template_name
        self.available = list(available)

        message = f"Unknown template: {template_name!r}"
        if self.available:
            message += f"\nAvailable templates: {', '.join(self.available)}"

        super().__init__(message)
