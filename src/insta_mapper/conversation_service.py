"""Conversation listing and message loading from the inbox folder."""

import logging
import re
from pathlib import Path
from typing import Any, Dict, List

from .data_models import ChatThread
from .utils import load_json, natural_sort_key

logger = logging.getLogger(__name__)

MESSAGE_FILE_PATTERN = re.compile(r"^message_\d+\.json$")


class ConversationService:
    """Service for handling inbox conversation data."""

    def __init__(self, inbox_dir: Path):
        """Initialize the conversation service."""
        self.inbox_dir = Path(inbox_dir)

    def list_threads(self) -> List[ChatThread]:
        """List every conversation folder, most recently active first."""
        if not self.inbox_dir.is_dir():
            logger.warning(f"Inbox folder not found: {self.inbox_dir}")
            return []

        threads = []
        for folder in self.inbox_dir.iterdir():
            if not folder.is_dir():
                continue
            message_files = self._message_files(folder)
            if not message_files:
                continue
            threads.append(self._build_thread(folder, message_files))

        threads.sort(key=lambda t: t.last_timestamp_ms, reverse=True)
        logger.info(f"Found {len(threads)} conversations")
        return threads

    def get_messages(self, folder_name: str) -> List[Dict[str, Any]]:
        """Return all messages of a conversation in export order (newest first)."""
        folder = self._resolve_folder(folder_name)
        messages: List[Dict[str, Any]] = []
        for path in self._message_files(folder):
            data = load_json(path)
            messages.extend(m for m in data.get("messages", []) if isinstance(m, dict))
        return messages

    def _build_thread(self, folder: Path, message_files: List[Path]) -> ChatThread:
        """Create thread metadata from the conversation's message files."""
        title = ""
        participants: List[str] = []
        message_count = 0
        last_timestamp_ms = 0

        for path in message_files:
            data = load_json(path)
            if not title:
                title = data.get("title") or ""
            if not participants:
                participants = [p.get("name", "") for p in data.get("participants", [])
                                if isinstance(p, dict)]
            messages = data.get("messages", [])
            message_count += len(messages)
            for msg in messages:
                ts = msg.get("timestamp_ms", 0) if isinstance(msg, dict) else 0
                if isinstance(ts, int) and ts > last_timestamp_ms:
                    last_timestamp_ms = ts

        return ChatThread(
            folder_name=folder.name,
            title=title or folder.name,
            participants=tuple(participants),
            message_count=message_count,
            last_timestamp_ms=last_timestamp_ms,
        )

    def _resolve_folder(self, folder_name: str) -> Path:
        folder = (self.inbox_dir / folder_name).resolve()
        if folder.parent != self.inbox_dir.resolve():
            raise ValueError(f"Invalid conversation folder: {folder_name}")
        if not folder.is_dir():
            raise FileNotFoundError(f"Conversation not found: {folder_name}")
        return folder

    @staticmethod
    def _message_files(folder: Path) -> List[Path]:
        return sorted((p for p in folder.iterdir() if MESSAGE_FILE_PATTERN.match(p.name)),
                      key=lambda p: natural_sort_key(p.name))
