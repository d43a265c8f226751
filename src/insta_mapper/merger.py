"""Merging of paginated export files belonging to one category."""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, List, Sequence, Union

from .utils import decode_json

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ArchiveFile:
    """Raw content of one archive file."""
    name: str
    content: Union[str, bytes]

    @classmethod
    def read(cls, path: Path) -> "ArchiveFile":
        return cls(name=path.name, content=Path(path).read_bytes())


def read_archive_files(paths: Sequence[Path]) -> List[ArchiveFile]:
    """Read every path, skipping and logging the ones that cannot be read."""
    files = []
    for path in paths:
        try:
            files.append(ArchiveFile.read(path))
        except OSError as e:
            logger.warning(f"Could not read {path}: {e}")
    return files


def _parse_file(file: ArchiveFile, parse_fn: Callable[[Any], List[Any]]) -> List[Any]:
    """Parse one file; a failure yields an empty list instead of raising."""
    try:
        return list(parse_fn(decode_json(file.content)))
    except Exception as e:
        logger.warning(f"Failed to parse {file.name}: {e}")
        return []


def merge_category(files: Sequence[ArchiveFile],
                   parse_fn: Callable[[Any], List[Any]],
                   max_workers: int = 1) -> List[Any]:
    """
    Parse every file of a category and concatenate the results.

    Args:
        files: Files of one category, in the order their records should appear
        parse_fn: Turns one decoded JSON document into a list of records
        max_workers: Parse files concurrently when greater than 1

    Returns:
        Records of all files in input-file order. Duplicates are kept.
    """
    if not files:
        return []

    if max_workers > 1 and len(files) > 1:
        with ThreadPoolExecutor(max_workers=min(max_workers, len(files))) as executor:
            # map() yields in submission order, not completion order
            results = list(executor.map(lambda f: _parse_file(f, parse_fn), files))
    else:
        results = [_parse_file(f, parse_fn) for f in files]

    merged: List[Any] = []
    for records in results:
        merged.extend(records)
    return merged
