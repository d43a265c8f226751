"""Utility functions for Instagram Archive Mapper."""

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Union

from .config import DEFAULT_ENCODING
from .encoding import repair_encoding


logger = logging.getLogger(__name__)


def ensure_directory(path: Path) -> None:
    """Ensure directory exists."""
    path.mkdir(parents=True, exist_ok=True)


def decode_json(content: Union[str, bytes]) -> Any:
    """Parse JSON text and repair the export's text encoding."""
    if isinstance(content, bytes):
        # utf-8-sig also drops a leading byte-order mark
        content = content.decode("utf-8-sig")
    return repair_encoding(json.loads(content.lstrip("\ufeff")))


def load_json(path: Path) -> Dict[str, Any]:
    """Load and repair a JSON file, return empty dict on error."""
    if not path.exists():
        logger.error(f"JSON file not found: {path}")
        return {}
    try:
        return decode_json(path.read_bytes())
    except Exception as e:
        logger.error(f"Failed to load {path}: {e}")
        return {}


def save_json(data: Any, path: Path) -> None:
    """Save data to a JSON file."""
    ensure_directory(path.parent)
    with open(path, 'w', encoding=DEFAULT_ENCODING) as f:
        json.dump(data, f, indent=2, ensure_ascii=False)


def natural_sort_key(name: str) -> List[Union[int, str]]:
    """Sort key that orders ``followers_2.json`` before ``followers_10.json``."""
    return [int(part) if part.isdigit() else part.lower()
            for part in re.split(r'(\d+)', name)]
