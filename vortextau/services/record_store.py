"""
Chat Record Store - per-model log of completed exchanges.

File layout (single JSON document):
    {
        "<model>": [
            {"timestamp": "2026-01-01T12:00:00+00:00", "message": "...", "response": "..."},
            ...
        ]
    }

Writes are read-modify-write of the whole file, replaced atomically. A
process-local lock serializes writers inside one server; separate server
processes sharing the file still race (see DESIGN.md).

Usage:
    store = ChatRecordStore(Path("data/chat-storage.json"))
    store.append("plutus:latest", "hi", "Hello!")
    store.list_records("plutus:latest")
"""

import json
import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from threading import Lock
from typing import Any, Dict, List, Optional

from ..errors import ParseError, PersistenceError, log_error

logger = logging.getLogger(__name__)


class ChatRecordStore:
    """JSON-file store of {timestamp, message, response} records keyed by model."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = Lock()

    def _read(self) -> Dict[str, List[Dict[str, Any]]]:
        if not self.path.exists():
            return {}
        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise PersistenceError("Failed to read chat records", details=str(e), operation="read", path=str(self.path)) from e
        if not raw.strip():
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ParseError("Chat record store is not valid JSON", details=str(e), path=str(self.path)) from e
        if not isinstance(data, dict):
            raise ParseError("Chat record store must be a JSON object", path=str(self.path))
        return data

    def _write(self, data: Dict[str, List[Dict[str, Any]]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=".records-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except OSError as e:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise PersistenceError("Failed to write chat records", details=str(e), path=str(self.path)) from e

    def append(self, model: str, message: str, response: str) -> Dict[str, Any]:
        """Append one completed exchange to the model's log.

        An unreadable existing file is not overwritten.

        Raises:
            PersistenceError: file could not be read or written
            ParseError: existing file is corrupt
        """
        record = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "message": message,
            "response": response,
        }
        with self._lock:
            data = self._read()
            data.setdefault(model, []).append(record)
            self._write(data)
        logger.debug(f"Chat record saved for {model} ({len(response)} chars)")
        return record

    def list_records(self, model: Optional[str] = None) -> Dict[str, List[Dict[str, Any]]]:
        """Read the store, optionally narrowed to one model.

        A missing or unreadable store reads as empty; the failure is logged.
        """
        try:
            data = self._read()
        except (PersistenceError, ParseError) as e:
            log_error(logger, e, context="records", include_traceback=False)
            return {}
        if model is not None:
            return {model: data.get(model, [])}
        return data
