"""
Chat Store - client-side collection of chats.

Chats and messages are frozen dataclasses: a mutation replaces the stored
Chat by id and returns the new snapshot, so no caller holds a live mutable
alias. Message logs only grow by append.

Persistence is mirrored to two scopes under one key:
- durable: a JSON file (survives restarts)
- session: process memory (survives a durable write failure)

Load reads the durable scope first and falls back to the session copy when
the durable entry is absent, unreadable or corrupt. When neither scope can
be read the result is an empty collection plus a warning.
"""

import json
import logging
import time
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..errors import NotFoundError, ParseError, PersistenceError, ValidationError, log_error

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "New Chat"
ROLES = ("user", "assistant", "system")


@dataclass(frozen=True)
class Message:
    role: str
    content: str

    def to_dict(self) -> Dict[str, str]:
        return {"role": self.role, "content": self.content}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Message":
        role = data.get("role")
        content = data.get("content")
        if role not in ROLES or not isinstance(content, str):
            raise ParseError("Invalid message in stored chat", details=repr(data)[:120])
        return cls(role=role, content=content)


@dataclass(frozen=True)
class Chat:
    id: str
    title: str = DEFAULT_TITLE
    messages: Tuple[Message, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "title": self.title, "messages": [m.to_dict() for m in self.messages]}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Chat":
        if not isinstance(data, dict) or not data.get("id"):
            raise ParseError("Invalid stored chat", details=repr(data)[:120])
        messages = data.get("messages") or []
        if not isinstance(messages, list):
            raise ParseError("Invalid message list in stored chat", details=str(data.get("id")))
        return cls(
            id=str(data["id"]),
            title=str(data.get("title") or DEFAULT_TITLE),
            messages=tuple(Message.from_dict(m) for m in messages),
        )


class JsonFileStorage:
    """Durable key-value scope: one JSON object file, key -> value."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise PersistenceError("Failed to read chat storage", details=str(e), operation="read", path=str(self.path)) from e
        if not raw.strip():
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ParseError("Chat storage is not valid JSON", details=str(e), path=str(self.path)) from e
        if not isinstance(data, dict):
            raise ParseError("Chat storage must be a JSON object", path=str(self.path))
        return data

    def get(self, key: str) -> Optional[Any]:
        return self._load().get(key)

    def set(self, key: str, value: Any) -> None:
        try:
            data = self._load()
        except ParseError:
            logger.warning(f"Replacing unreadable chat storage at {self.path}")
            data = {}
        data[key] = value
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
        except OSError as e:
            raise PersistenceError("Failed to write chat storage", details=str(e), path=str(self.path)) from e


class MemoryStorage:
    """Session key-value scope held in process memory as serialized JSON."""

    def __init__(self):
        self._items: Dict[str, str] = {}

    def get(self, key: str) -> Optional[Any]:
        raw = self._items.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise ParseError("Session chat storage is not valid JSON", details=str(e)) from e

    def set(self, key: str, value: Any) -> None:
        self._items[key] = json.dumps(value, ensure_ascii=False)


class ChatStore:
    """Owns every chat; the only place chats are created, replaced or removed."""

    def __init__(
        self,
        durable: Optional[JsonFileStorage] = None,
        session: Optional[MemoryStorage] = None,
        key: str = "vortextau-chats",
        clock: Callable[[], float] = time.time,
    ):
        self.durable = durable
        self.session = session if session is not None else MemoryStorage()
        self.key = key
        self.active_id: Optional[str] = None
        self.warnings: List[str] = []
        self._chats: List[Chat] = []
        self._clock = clock

    @property
    def chats(self) -> List[Chat]:
        return list(self._chats)

    @property
    def active(self) -> Optional[Chat]:
        if self.active_id is None:
            return None
        return self._find(self.active_id)

    def _find(self, chat_id: str) -> Optional[Chat]:
        for chat in self._chats:
            if chat.id == chat_id:
                return chat
        return None

    def _replace(self, updated: Chat) -> Chat:
        self._chats = [updated if c.id == updated.id else c for c in self._chats]
        self.persist_all()
        return updated

    def _new_id(self) -> str:
        candidate = int(self._clock() * 1000)
        existing = {c.id for c in self._chats}
        while str(candidate) in existing:
            candidate += 1
        return str(candidate)

    def _warn(self, message: str) -> None:
        self.warnings.append(message)
        logger.warning(message)

    @staticmethod
    def _decode(raw: Any) -> Optional[List[Chat]]:
        if raw is None:
            return None
        if not isinstance(raw, list):
            raise ParseError("Saved chats must be a JSON array")
        return [Chat.from_dict(item) for item in raw]

    def load_all(self) -> List[Chat]:
        """Load chats from storage, durable scope first.

        An unreadable or corrupt durable scope falls back to the session copy.
        """
        chats: Optional[List[Chat]] = None
        failed = False

        if self.durable is not None:
            try:
                chats = self._decode(self.durable.get(self.key))
            except (ParseError, PersistenceError) as e:
                log_error(logger, e, context="chat store", include_traceback=False)
                failed = True

        if chats is None:
            try:
                chats = self._decode(self.session.get(self.key))
            except ParseError as e:
                log_error(logger, e, context="chat store session", include_traceback=False)
                failed = True

        if chats is None and not failed:
            logger.info("No saved chats found in storage")
        self._chats = chats or []

        if failed and self._chats:
            self._warn("Failed to read saved chats. Using the copy from this session.")
        elif failed:
            self._warn("Failed to load saved chats. Starting with a new session.")

        if self._chats and self.active_id is None:
            self.active_id = self._chats[0].id
        logger.info(f"Loaded {len(self._chats)} chats")
        return self.chats

    def persist_all(self, chats: Optional[List[Chat]] = None) -> None:
        """Write chats to both scopes; a durable failure leaves the session copy."""
        if chats is not None:
            self._chats = list(chats)
        payload = [c.to_dict() for c in self._chats]
        self.session.set(self.key, payload)
        if self.durable is None:
            return
        try:
            self.durable.set(self.key, payload)
        except PersistenceError as e:
            log_error(logger, e, context="chat store", include_traceback=False)
            self._warn("Failed to save chats. Your conversation may not persist after closing.")

    def get(self, chat_id: str) -> Chat:
        chat = self._find(chat_id)
        if chat is None:
            raise NotFoundError("Chat not found", resource_type="chat", resource_id=chat_id)
        return chat

    def create(self) -> Chat:
        """New empty chat, prepended and made active."""
        chat = Chat(id=self._new_id())
        self._chats.insert(0, chat)
        self.active_id = chat.id
        self.persist_all()
        logger.debug(f"Created chat {chat.id}")
        return chat

    def select(self, chat_id: str) -> Chat:
        chat = self.get(chat_id)
        self.active_id = chat.id
        return chat

    def rename(self, chat_id: str, title: str) -> Chat:
        title = (title or "").strip()
        if not title:
            raise ValidationError("Chat title cannot be empty", parameter="title", reason="empty")
        return self._replace(replace(self.get(chat_id), title=title))

    def delete(self, chat_id: str) -> None:
        self.get(chat_id)
        self._chats = [c for c in self._chats if c.id != chat_id]
        if self.active_id == chat_id:
            self.active_id = None
        self.persist_all()

    def append(self, chat_id: str, message: Message) -> Chat:
        """Append one message and commit; returns the updated chat."""
        chat = self.get(chat_id)
        return self._replace(replace(chat, messages=chat.messages + (message,)))

    def add_shared(self, chat: Chat) -> Chat:
        """Prepend a chat loaded from a share link unless its id is present; make it active."""
        existing = self._find(chat.id)
        if existing is None:
            self._chats.insert(0, chat)
            self.persist_all()
            existing = chat
        self.active_id = existing.id
        return existing
