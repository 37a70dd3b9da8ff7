"""Unit tests for validate_layout() and check_decision()."""

import dataclasses

import pytest

from resumefit.contexts.layout import (
    LayoutDecision,
    Placement,
    check_decision,
    decide_layout,
    validate_layout,
)


@pytest.fixture
def blocks(make_block):
    return [
        make_block("contact-1", "contact", priority=10, lines=3),
        make_block("exp-1", "experience", priority=9, lines=10),
        make_block("skills-1", "skills", priority=6, lines=4),
    ]


def _with_placement(decision, block_id, **changes):
    placement = dict(decision.placement)
    placement[block_id] = dataclasses.replace(placement[block_id], **changes)
    return dataclasses.replace(decision, placement=placement)


@pytest.mark.unit
def test_engine_decision_is_valid(blocks, template_a):
    decision = decide_layout(blocks, template_a)

    assert validate_layout(blocks, decision) == []
    assert validate_layout(blocks, decision, template_a) == []


@pytest.mark.unit
def test_unknown_block_id(blocks, template_a):
    decision = decide_layout(blocks, template_a)
    placement = dict(decision.placement)
    placement["ghost"] = Placement(section="main", order=9, font_size=11)

    errors = validate_layout(blocks, dataclasses.replace(decision, placement=placement))

    assert errors == ["Placement references unknown block 'ghost'"]


@pytest.mark.unit
def test_unknown_section(blocks, template_a):
    decision = _with_placement(decide_layout(blocks, template_a), "exp-1", section="footer")

    errors = validate_layout(blocks, decision)

    assert errors == ["Block 'exp-1' placed in unknown section 'footer'"]


@pytest.mark.unit
def test_nothing_placed_for_non_empty_blocks(blocks, template_a):
    errors = validate_layout(blocks, LayoutDecision(template_name=template_a.name))

    assert "No block has a placement (3 blocks supplied)" in errors


@pytest.mark.unit
def test_empty_blocks_and_empty_decision_are_valid(template_a):
    assert validate_layout([], LayoutDecision(template_name=template_a.name), template_a) == []


@pytest.mark.unit
def test_contact_must_be_in_header(blocks, template_a):
    """Test that moving the contact block out of the header is caught."""
    decision = _with_placement(decide_layout(blocks, template_a), "contact-1", section="main")

    errors = validate_layout(blocks, decision)

    assert errors == ["Contact block 'contact-1' is not placed in the header"]


@pytest.mark.unit
def test_non_contact_block_in_header(blocks, template_a):
    decision = _with_placement(decide_layout(blocks, template_a), "exp-1", section="header")

    errors = validate_layout(blocks, decision)

    assert "Non-contact block 'exp-1' is placed in the header" in errors
    assert "Header holds 2 blocks (expected exactly one contact block)" in errors


@pytest.mark.unit
def test_contact_must_not_be_truncated(blocks, template_a):
    decision = _with_placement(decide_layout(blocks, template_a), "contact-1", max_lines=2)

    assert validate_layout(blocks, decision) == ["Contact block 'contact-1' must not be truncated"]


@pytest.mark.unit
def test_contactless_block_set_has_no_header_rule(make_block, template_a):
    blocks = [make_block("exp-1", "experience"), make_block("proj-1", "projects")]

    assert validate_layout(blocks, decide_layout(blocks, template_a), template_a) == []


@pytest.mark.unit
def test_template_aware_checks(blocks, template_a):
    """Test font floor, sidebar availability and maxLines with constraints."""
    decision = decide_layout(blocks, template_a)
    decision = _with_placement(decision, "exp-1", font_size=8)
    decision = _with_placement(decision, "skills-1", section="sidebar", max_lines=0)

    # Structural checks alone do not know about the template
    assert validate_layout(blocks, decision) == []

    errors = validate_layout(blocks, decision, template_a)
    assert errors == [
        "Block 'exp-1' font 8pt is below the 9pt minimum",
        f"Block 'skills-1' placed in sidebar but '{template_a.name}' has no sidebar",
        "Block 'skills-1' has non-positive maxLines 0",
    ]


@pytest.mark.unit
def test_template_mismatch(blocks, template_a, template_b):
    decision = decide_layout(blocks, template_a)

    errors = validate_layout(blocks, decision, template_b)

    assert errors == [
        f"Decision was made for '{template_a.name}' but validated against '{template_b.name}'"
    ]


@pytest.mark.unit
def test_check_decision_bundles_verdict(blocks, template_a):
    decision = decide_layout(blocks, template_a)

    result = check_decision(blocks, decision, template_a)

    assert result.is_valid
    assert result.fits is True
    assert result.warnings == []
