"""
Pipeline event logging (Tier 2 logging).

Appends one JSON object per line to the pipeline events file so that layout
runs can be correlated with extraction and rendering runs elsewhere.
For detailed within-context logging (Tier 1), use resumefit.utils.logger.

Usage:
    from resumefit.utils.event_logging import log_pipeline_event

    log_pipeline_event(
        event_type="layout_decided",
        resume_name="res_42",
        source="layout",
        template="Template A - Modern Single Column",
        fits=True,
    )
"""

import json
import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from resumefit.utils.timestamp import now_exact

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))
PIPELINE_EVENTS_FILE = Path(
    os.getenv("PIPELINE_EVENTS_FILE", str(LOGS_PATH / "pipeline_events.log"))
)


def log_pipeline_event(
    event_type: str,
    resume_name: str,
    source: str,
    events_file: Optional[Path] = None,
    **extra_fields,
) -> None:
    """
    Append an event to the pipeline event log (JSON Lines).

    Args:
        event_type: Type of event (e.g., "layout_decided", "layout_validated")
        resume_name: Resume identifier the event refers to
        source: Event source (e.g., "layout", "cli")
        events_file: Override for PIPELINE_EVENTS_FILE
        **extra_fields: Additional event-specific fields (must be JSON-serializable)
    """
    events_file = Path(events_file) if events_file else PIPELINE_EVENTS_FILE
    events_file.parent.mkdir(parents=True, exist_ok=True)

    event = {
        "timestamp": now_exact(),
        "event_type": event_type,
        "resume_name": resume_name,
        "source": source,
        **extra_fields,
    }

    with open(events_file, "a", encoding="utf-8") as f:
        f.write(json.dumps(event) + "\n")


def get_recent_events(
    n: int = 10,
    resume_name: Optional[str] = None,
    event_type: Optional[str] = None,
    events_file: Optional[Path] = None,
) -> List[dict]:
    """
    Get the last n events from the pipeline log, optionally filtered.

    Malformed lines are skipped.

    Returns:
        List of event dicts (most recent last)
    """
    events_file = Path(events_file) if events_file else PIPELINE_EVENTS_FILE
    if not events_file.exists():
        return []

    events = []
    with open(events_file, "r", encoding="utf-8") as f:
        for line in f:
            try:
                events.append(json.loads(line.strip()))
            except json.JSONDecodeError:
                continue

    if resume_name:
        events = [e for e in events if e.get("resume_name") == resume_name]

    if event_type:
        events = [e for e in events if e.get("event_type") == event_type]

    return events[-n:] if len(events) > n else events
