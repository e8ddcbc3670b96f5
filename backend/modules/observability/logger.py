"""
modules/observability/logger.py
-------------------------------
Append-only JSONL audit trail of what happened to each program.

Usage:
    from modules.observability.logger import AuditLogger

    audit = AuditLogger(enabled=True)
    audit.log(program.id, "program_generated", {"duration": 3})

One file per program: ``<LOGS_DIR>/<program_id>.jsonl``, one JSON object
per line.  When disabled (config.AUDIT_LOG_ENABLED false, the default)
``log`` is a no-op so callers never have to check.

Event types written by the engine:
    program_generated, option_selected, options_selected, option_regenerated,
    activity_switched, rest_toggled, time_updated, notes_updated,
    title_updated, day_title_updated, program_validated, venue_excluded
"""

from __future__ import annotations

import json
import os
import threading
from datetime import datetime, timezone
from pathlib import Path

import config


class AuditLogger:
    """
    Thread-safe, append-only JSONL writer keyed by program id.  Each event
    opens the program's file, appends one line and closes it again, so a
    long-running process holds no file handles between events.
    """

    def __init__(self, logs_dir: Path | str | None = None, enabled: bool | None = None) -> None:
        self.logs_dir = Path(logs_dir) if logs_dir else config.LOGS_DIR
        self.enabled = config.AUDIT_LOG_ENABLED if enabled is None else enabled
        self._lock = threading.Lock()

    # ── public API ────────────────────────────────────────────────────────

    def log(self, program_id: str, event_type: str, payload: dict) -> None:
        if not self.enabled:
            return
        record = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "program_id": program_id,
            "event_type": event_type,
            "payload": payload,
        }
        line = json.dumps(record, default=str, ensure_ascii=False) + "\n"

        with self._lock:
            os.makedirs(self.logs_dir, exist_ok=True)
            with open(self.path_for(program_id), "a", encoding="utf-8") as fh:
                fh.write(line)

    def read(self, program_id: str) -> list[dict]:
        """All records written for ``program_id`` (empty when none)."""
        path = self.path_for(program_id)
        if not path.exists():
            return []
        with open(path, encoding="utf-8") as fh:
            return [json.loads(line) for line in fh if line.strip()]

    def path_for(self, program_id: str) -> Path:
        return self.logs_dir / f"{program_id}.jsonl"
