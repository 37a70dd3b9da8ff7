"""
Template Constraint Registry

Loads the constraint table (YAML) and resolves template names to immutable
TemplateConstraints. A template resolves by its short key ("A"), its full
display name ("Template A - Modern Single Column"), or "Template A";
matching is case-insensitive.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from omegaconf import OmegaConf

from resumefit.contexts.layout.constraints import TemplateConstraints
from resumefit.contexts.layout.exceptions import InvalidConstraintsError, UnknownTemplateError

load_dotenv()
DEFAULT_TEMPLATES_PATH = Path(__file__).parent / "templates.yaml"
TEMPLATES_PATH = Path(os.getenv("RESUMEFIT_TEMPLATES_PATH", str(DEFAULT_TEMPLATES_PATH)))


class TemplateRegistry:
    """
    Registry for loading and caching template constraint sets.

    The table is read once on first access; each entry is parsed into a
    TemplateConstraints the first time it is requested.
    """

    def __init__(self, table_path: Optional[Path] = None):
        """
        Args:
            table_path: Path to the constraint table. Defaults to
                RESUMEFIT_TEMPLATES_PATH from environment, then the packaged table.
        """
        self.table_path = Path(table_path) if table_path is not None else TEMPLATES_PATH
        self._table: Optional[Dict[str, Dict[str, Any]]] = None
        self._cache: Dict[str, TemplateConstraints] = {}

    def _load_table(self) -> Dict[str, Dict[str, Any]]:
        if self._table is None:
            if not self.table_path.exists():
                raise FileNotFoundError(f"Template constraint table not found at {self.table_path}")
            table = OmegaConf.to_container(OmegaConf.load(self.table_path), resolve=True)
            if not table:
                raise InvalidConstraintsError(
                    f"Template constraint table is empty: {self.table_path}"
                )
            self._table = table
        return self._table

    def _resolve_key(self, template_name: str) -> str:
        table = self._load_table()
        wanted = template_name.strip().lower()

        for key, entry in table.items():
            candidates = {str(key).lower(), f"template {key}".lower()}
            if entry and entry.get("name"):
                candidates.add(str(entry["name"]).lower())
            if wanted in candidates:
                return key

        raise UnknownTemplateError(template_name, available=self.available_names())

    def get(self, template_name: str) -> TemplateConstraints:
        """
        Get constraints by key or name, parsing and caching on first access.

        Raises:
            UnknownTemplateError: If the name does not resolve
            InvalidConstraintsError: If the table entry is missing required fields
        """
        key = self._resolve_key(template_name)
        if key not in self._cache:
            self._cache[key] = TemplateConstraints.from_dict(self._load_table()[key], key=str(key))
        return self._cache[key]

    def list_templates(self) -> List[TemplateConstraints]:
        """All templates in table order."""
        return [self.get(str(key)) for key in self._load_table()]

    def available_names(self) -> List[str]:
        """Keys and display names that resolve, for error messages."""
        names = []
        for key, entry in self._load_table().items():
            names.append(str(key))
            if entry and entry.get("name"):
                names.append(str(entry["name"]))
        return names

    def clear_cache(self):
        """Drop parsed constraints and force the table to be re-read."""
        self._cache.clear()
        self._table = None

    def is_cached(self, template_name: str) -> bool:
        try:
            return self._resolve_key(template_name) in self._cache
        except UnknownTemplateError:
            return False


@lru_cache(maxsize=1)
def default_registry() -> TemplateRegistry:
    """Registry over the configured constraint table."""
    return TemplateRegistry()


def get_template_constraints(template_name: str) -> TemplateConstraints:
    """Resolve a template name against the configured constraint table."""
    return default_registry().get(template_name)
