from __future__ import annotations

import json
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict


class OpsLogger:
    """Append-only JSONL sink for per-search operational records.

    One JSON object per line, UTF-8. Every record gets a ``ts`` field
    (UTC ISO 8601) unless it already has one. Writing is serialized by a
    lock and never raises into the crawl.
    """

    def __init__(self, file_path: Path, also_stdout: bool = False) -> None:
        self.file_path = Path(file_path)
        self.also_stdout = bool(also_stdout)
        self._lock = threading.Lock()
        self.emitted = 0
        try:
            self.file_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            print(f"ops log: cannot create {self.file_path.parent}: {e}")

    @staticmethod
    def _serialize(record: Dict[str, Any]) -> str:
        payload = dict(record)
        payload.setdefault("ts", datetime.now(timezone.utc).isoformat())
        try:
            return json.dumps(payload, ensure_ascii=False)
        except (TypeError, ValueError):
            return json.dumps({"mbc_ops": 1, "_serialization_error": True, "record_str": str(record)})

    def emit(self, record: Dict[str, Any]) -> bool:
        line = self._serialize(record)
        written = False
        try:
            with self._lock:
                with self.file_path.open("a", encoding="utf-8") as f:
                    f.write(line + "\n")
                self.emitted += 1
            written = True
        except OSError as e:
            print(f"ops log: write failed ({e})")
        if self.also_stdout:
            print(line)
        return written
