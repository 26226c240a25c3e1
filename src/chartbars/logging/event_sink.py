"""JSONL run event log."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from chartbars.domain.events import RunEvent


class JsonlEventSink:
    """Append one JSON line per ``RunEvent`` to a run's event log."""

    def __init__(self, path: str, run_id: str, granularity: str) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.run_id = run_id
        self.granularity = granularity

    def emit(self, event_type: str, **payload: Any) -> RunEvent:
        event = RunEvent(
            run_id=self.run_id,
            granularity=self.granularity,
            event_type=event_type,
            payload=payload,
        )
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(event.to_record(), sort_keys=True) + "\n")
        return event


def load_events(path: str | Path) -> list[dict[str, Any]]:
    """Read back an event log; a missing log has no events."""
    log_path = Path(path)
    if not log_path.exists():
        return []
    lines = log_path.read_text(encoding="utf-8").splitlines()
    return [json.loads(line) for line in lines if line.strip()]
