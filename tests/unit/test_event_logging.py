"""Unit tests for JSON Lines pipeline events."""

import json

import pytest

from resumefit.utils.event_logging import get_recent_events, log_pipeline_event


@pytest.mark.unit
def test_log_and_read_events(tmp_path):
    events_file = tmp_path / "logs" / "events.log"

    log_pipeline_event("layout_decided", "res_1", "layout", events_file=events_file, fits=True)
    log_pipeline_event("layout_validated", "res_1", "cli", events_file=events_file, valid=False)
    log_pipeline_event("layout_decided", "res_2", "layout", events_file=events_file, fits=False)

    lines = events_file.read_text().splitlines()
    assert len(lines) == 3
    first = json.loads(lines[0])
    assert first["event_type"] == "layout_decided"
    assert first["resume_name"] == "res_1"
    assert first["fits"] is True
    assert "timestamp" in first

    assert [e["resume_name"] for e in get_recent_events(events_file=events_file)] == [
        "res_1",
        "res_1",
        "res_2",
    ]
    assert len(get_recent_events(resume_name="res_1", events_file=events_file)) == 2
    decided = get_recent_events(event_type="layout_decided", events_file=events_file)
    assert [e["resume_name"] for e in decided] == ["res_1", "res_2"]
    assert get_recent_events(n=1, events_file=events_file)[0]["resume_name"] == "res_2"


@pytest.mark.unit
def test_default_events_file_is_used(tmp_path):
    """Test that events go to PIPELINE_EVENTS_FILE (isolated by conftest)."""
    log_pipeline_event("layout_decided", "res_1", "layout")

    assert (tmp_path / "events.log").exists()
    assert get_recent_events()[0]["source"] == "layout"


@pytest.mark.unit
def test_malformed_lines_are_skipped(tmp_path):
    events_file = tmp_path / "events.log"
    events_file.write_text('{"event_type": "layout_decided"}\nnot json\n')

    assert get_recent_events(events_file=events_file) == [{"event_type": "layout_decided"}]


@pytest.mark.unit
def test_missing_file_has_no_events(tmp_path):
    assert get_recent_events(events_file=tmp_path / "nope.log") == []
