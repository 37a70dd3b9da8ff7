"""Unit tests for the content block model and extraction envelope."""

import json

import pytest

from resumefit.contexts.blocks import (
    BlockIntegrityError,
    ContentBlock,
    ExtractionResult,
    infer_shape,
    load_extraction_result,
)


def _record(**overrides):
    record = {
        "id": "exp-1",
        "type": "section",
        "category": "experience",
        "priority": 9,
        "content": [{"title": "Engineer", "company": "Acme"}],
        "metadata": {"estimatedLines": 12, "isOptional": False, "keywords": ["python"]},
    }
    record.update(overrides)
    return record


@pytest.mark.unit
def test_from_dict_parses_camel_case_record():
    """Test parsing a block from the JSON contract."""
    block = ContentBlock.from_dict(_record())

    assert block.id == "exp-1"
    assert block.kind == "section"
    assert block.category == "experience"
    assert block.priority == 9
    assert block.estimated_lines == 12
    assert block.is_optional is False
    assert block.metadata.keywords == ("python",)
    assert block.shape == "entry_list"
    assert not block.is_contact


@pytest.mark.unit
def test_explicit_shape_wins_over_inference():
    block = ContentBlock.from_dict(_record(content="free text", shape="entry"))
    assert block.shape == "entry"


@pytest.mark.unit
@pytest.mark.parametrize(
    "content, expected",
    [
        ({"name": "Jane"}, "entry"),
        ([{"degree": "BSc"}, {"degree": "MSc"}], "entry_list"),
        (["Python", "SQL"], "string_list"),
        ([], "string_list"),
        ("Summary paragraph", "text"),
        (None, "text"),
    ],
)
def test_infer_shape(content, expected):
    assert infer_shape(content) == expected


@pytest.mark.unit
def test_missing_id_raises():
    """Test that a record without an id is rejected."""
    record = _record()
    del record["id"]

    with pytest.raises(BlockIntegrityError) as exc_info:
        ContentBlock.from_dict(record)

    assert exc_info.value.field_name == "id"
    assert exc_info.value.block_id is None


@pytest.mark.unit
def test_unknown_type_raises():
    with pytest.raises(BlockIntegrityError) as exc_info:
        ContentBlock.from_dict(_record(type="table"))

    assert exc_info.value.block_id == "exp-1"
    assert exc_info.value.field_name == "type"
    assert "Block: exp-1" in str(exc_info.value)


@pytest.mark.unit
def test_unknown_category_raises():
    with pytest.raises(BlockIntegrityError) as exc_info:
        ContentBlock.from_dict(_record(category="hobbies"))

    assert exc_info.value.field_name == "category"


@pytest.mark.unit
def test_missing_estimated_lines_is_kept_for_the_engine():
    """Test that parsing defers the estimatedLines check to decide_layout()."""
    block = ContentBlock.from_dict(_record(metadata={"isOptional": True}))

    assert block.estimated_lines is None
    assert block.is_optional is True


@pytest.mark.unit
def test_to_dict_uses_json_contract():
    data = ContentBlock.from_dict(_record()).to_dict()

    assert data["type"] == "section"
    assert data["metadata"]["estimatedLines"] == 12
    assert data["metadata"]["isOptional"] is False
    assert data["shape"] == "entry_list"


@pytest.mark.unit
def test_extraction_result_recomputes_totals_for_bare_list():
    """Test that a bare list of records is accepted and totals are derived."""
    contact = _record(
        id="contact-1",
        type="header",
        category="contact",
        priority=10,
        content={"name": "Jane Doe"},
        metadata={"estimatedLines": 3},
    )
    result = ExtractionResult.from_dict([contact, _record()])

    assert [b.id for b in result.blocks] == ["contact-1", "exp-1"]
    assert result.total_estimated_lines == 15
    assert result.detected_categories == ["contact", "experience"]
    assert result.suggested_template is None


@pytest.mark.unit
def test_extraction_result_keeps_supplied_envelope_fields():
    result = ExtractionResult.from_dict(
        {
            "blocks": [_record()],
            "suggestedTemplate": "two-column",
            "totalEstimatedLines": 40,
            "detectedCategories": ["experience"],
        }
    )

    assert result.suggested_template == "two-column"
    assert result.total_estimated_lines == 40
    assert result.to_dict()["suggestedTemplate"] == "two-column"


@pytest.mark.unit
def test_load_extraction_result(tmp_path):
    path = tmp_path / "blocks.json"
    path.write_text(json.dumps({"blocks": [_record()], "suggestedTemplate": "modern"}))

    result = load_extraction_result(path)

    assert len(result.blocks) == 1
    assert result.suggested_template == "modern"
