"""Shared fixtures: block and template factories, isolated output paths."""

import pytest
from loguru import logger

import resumefit.cli as cli
import resumefit.contexts.layout.decision_cache as decision_cache
import resumefit.utils.event_logging as event_logging
from resumefit.contexts.blocks import BlockMetadata, ContentBlock, infer_shape
from resumefit.contexts.layout import (
    FontSizes,
    RegionBudget,
    Spacing,
    TemplateConstraints,
    TemplateRegistry,
)

KIND_BY_CATEGORY = {
    "contact": "header",
    "experience": "section",
    "education": "section",
    "projects": "section",
    "skills": "list",
    "certifications": "list",
    "custom": "text",
}


@pytest.fixture(autouse=True)
def isolated_outputs(tmp_path, monkeypatch):
    """Keep events, cache and logs under tmp_path; drop loguru sinks afterwards."""
    monkeypatch.setattr(event_logging, "PIPELINE_EVENTS_FILE", tmp_path / "events.log")
    monkeypatch.setattr(decision_cache, "LAYOUT_CACHE_PATH", tmp_path / "cache")
    monkeypatch.setattr(cli, "LOGS_PATH", tmp_path / "logs")
    yield
    logger.remove()


@pytest.fixture
def make_block():
    """Factory for ContentBlocks with sensible defaults per category."""

    def _make(block_id, category, priority=5, lines=5, optional=False, content=None):
        if content is None:
            content = f"{category} content for {block_id}"
        return ContentBlock(
            id=block_id,
            kind=KIND_BY_CATEGORY[category],
            category=category,
            priority=priority,
            content=content,
            metadata=BlockMetadata(estimated_lines=lines, is_optional=optional),
            shape=infer_shape(content),
        )

    return _make


@pytest.fixture
def make_template():
    """Factory for ad-hoc TemplateConstraints (no spacing overhead by default)."""

    def _make(
        max_lines=50,
        header=5,
        main=45,
        sidebar=None,
        preferred=(),
        between_sections=0,
        between_entries=0,
        body=11,
        min_body=9,
        font_step=1,
        min_block_lines=3,
        name="Test Template",
    ):
        return TemplateConstraints(
            name=name,
            max_lines=max_lines,
            header=RegionBudget(max_lines=header),
            main=RegionBudget(max_lines=main),
            sidebar=RegionBudget(max_lines=sidebar, preferred_categories=tuple(preferred))
            if sidebar is not None
            else None,
            font_sizes=FontSizes(name=24, heading=14, body=body, min_body=min_body),
            spacing=Spacing(between_sections=between_sections, between_entries=between_entries),
            font_step=font_step,
            min_block_lines=min_block_lines,
        )

    return _make


@pytest.fixture
def registry():
    return TemplateRegistry()


@pytest.fixture
def template_a(registry):
    return registry.get("A")


@pytest.fixture
def template_b(registry):
    return registry.get("B")
