"""Unit tests for TemplateRegistry and TemplateConstraints parsing."""

import pytest

from resumefit.contexts.layout import (
    InvalidConstraintsError,
    TemplateConstraints,
    TemplateRegistry,
    UnknownTemplateError,
    get_template_constraints,
)

CUSTOM_TABLE = """
X:
  name: Template X - Compact
  maxLines: 40
  sections:
    header:
      maxLines: 4
    main:
      maxLines: 36
  fontSizes:
    name: 20
    heading: 12
    body: 10
    minBody: 8
"""

MISSING_MAX_LINES_TABLE = """
broken:
  name: Broken Template
  sections:
    header:
      maxLines: 4
    main:
      maxLines: 36
  fontSizes:
    name: 20
    heading: 12
    body: 10
    minBody: 8
"""


@pytest.mark.unit
def test_template_registry_init():
    """Test TemplateRegistry initialization."""
    registry = TemplateRegistry()
    assert registry.table_path.exists()
    assert registry._cache == {}


@pytest.mark.unit
@pytest.mark.parametrize(
    "name", ["A", "a", "Template A", "Template A - Modern Single Column", "  template a  "]
)
def test_get_resolves_key_and_names(registry, name):
    """Test that key, "Template X" and full name all resolve."""
    constraints = registry.get(name)

    assert constraints.name == "Template A - Modern Single Column"
    assert constraints.key == "A"
    assert constraints.max_lines == 50
    assert constraints.header.max_lines == 5
    assert constraints.main.max_lines == 45
    assert not constraints.has_sidebar


@pytest.mark.unit
def test_template_caching(registry):
    """Test that constraints are cached after first load."""
    first = registry.get("B")
    assert registry.is_cached("B")
    assert registry.is_cached("Template B - Professional Two Column")

    second = registry.get("Template B")
    assert first is second


@pytest.mark.unit
def test_clear_cache(registry):
    registry.get("A")
    assert len(registry._cache) == 1

    registry.clear_cache()
    assert len(registry._cache) == 0
    assert not registry.is_cached("A")


@pytest.mark.unit
def test_unknown_template_raises(registry):
    """Test error handling for a template that is not in the table."""
    with pytest.raises(UnknownTemplateError) as exc_info:
        registry.get("Template Z")

    assert exc_info.value.template_name == "Template Z"
    assert "A" in exc_info.value.available
    assert "Template D - Modern Sidebar" in exc_info.value.available
    assert not registry.is_cached("Template Z")


@pytest.mark.unit
def test_list_templates(registry):
    keys = [constraints.key for constraints in registry.list_templates()]
    assert keys == ["A", "B", "C", "D"]


@pytest.mark.unit
def test_two_column_template_has_sidebar(template_b):
    """Test the sidebar budget and its preferred categories."""
    assert template_b.layout_type == "two-column"
    assert template_b.sidebar.preferred_categories == ("skills", "certifications", "education")
    assert (
        template_b.header.max_lines + template_b.main.max_lines + template_b.sidebar.max_lines
        == template_b.max_lines
    )


@pytest.mark.unit
def test_modern_sidebar_template_fonts(registry):
    constraints = registry.get("D")

    assert constraints.font_step == 0.5
    assert constraints.font_sizes.body == 10.5
    assert constraints.font_sizes.min_body == 8.5
    assert constraints.region_budget("sidebar").max_lines == 24


@pytest.mark.unit
def test_custom_table_path(tmp_path):
    table = tmp_path / "templates.yaml"
    table.write_text(CUSTOM_TABLE)

    constraints = TemplateRegistry(table).get("x")

    assert constraints.name == "Template X - Compact"
    assert constraints.font_step == 1.0
    assert constraints.min_block_lines == 3
    assert constraints.spacing.between_sections == 0.0


@pytest.mark.unit
def test_missing_max_lines_raises(tmp_path):
    """Test that an entry without maxLines names the template and field."""
    table = tmp_path / "templates.yaml"
    table.write_text(MISSING_MAX_LINES_TABLE)

    with pytest.raises(InvalidConstraintsError) as exc_info:
        TemplateRegistry(table).get("broken")

    assert exc_info.value.template_name == "Broken Template"
    assert exc_info.value.field_name == "maxLines"


@pytest.mark.unit
def test_empty_table_raises(tmp_path):
    table = tmp_path / "templates.yaml"
    table.write_text("{}\n")

    with pytest.raises(InvalidConstraintsError):
        TemplateRegistry(table).get("A")


@pytest.mark.unit
def test_body_below_floor_raises(template_a):
    data = template_a.to_dict()
    data["fontSizes"]["body"] = 8

    with pytest.raises(InvalidConstraintsError) as exc_info:
        TemplateConstraints.from_dict(data)

    assert exc_info.value.field_name == "fontSizes.body"


@pytest.mark.unit
def test_to_dict_from_dict_preserves_constraints(template_b):
    assert TemplateConstraints.from_dict(template_b.to_dict()) == template_b


@pytest.mark.unit
def test_get_template_constraints_uses_default_table():
    constraints = get_template_constraints("Template C")

    assert constraints.layout_type == "single-column-color"
    assert constraints is get_template_constraints("C")
