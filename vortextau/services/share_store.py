"""
Shared Chat Store - one JSON file per shared chat, keyed by a random id.

Layout: <data_dir>/shared-chats/<uuid4>.json
"""

import json
import logging
import uuid
from pathlib import Path
from typing import Any, Dict

from ..errors import NotFoundError, ParseError, PersistenceError
from ..validation import validate_share_id

logger = logging.getLogger(__name__)


class ShareStore:
    """Flat-file persistence for shared chats."""

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def _path(self, share_id: str) -> Path:
        return self.directory / f"{validate_share_id(share_id)}.json"

    def save(self, chat: Dict[str, Any]) -> str:
        """Persist a chat snapshot and return its new share id."""
        share_id = str(uuid.uuid4())
        path = self._path(share_id)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(chat, ensure_ascii=False), encoding="utf-8")
        except OSError as e:
            raise PersistenceError("Failed to share chat", details=str(e), path=str(path)) from e
        logger.info(f"Chat shared: {share_id} ({len(chat.get('messages', []))} messages)")
        return share_id

    def load(self, share_id: str) -> Dict[str, Any]:
        """Load a shared chat.

        Raises:
            ValidationError: malformed share id
            NotFoundError: no chat under that id
            ParseError: stored file is corrupt
        """
        path = self._path(share_id)
        if not path.exists():
            raise NotFoundError("Shared chat not found", resource_type="shared_chat", resource_id=share_id)
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ParseError("Shared chat is corrupt", details=str(e), path=str(path)) from e
        except OSError as e:
            raise PersistenceError("Failed to read shared chat", details=str(e), operation="read", path=str(path)) from e
