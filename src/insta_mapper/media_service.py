"""Media locator: bucket listing, safe path resolution and byte-range reads."""

import logging
import re
from pathlib import Path
from typing import List, Optional, Tuple

from PIL import Image

from .config import (
    ACTIVITY_DIR_NAME,
    CONTENT_TYPES,
    DEFAULT_CONTENT_TYPE,
    MEDIA_BUCKETS,
    SUPPORTED_IMAGE_FORMATS,
    SUPPORTED_VIDEO_FORMATS,
)
from .data_models import MediaFile, MediaSlice

logger = logging.getLogger(__name__)

RANGE_PATTERN = re.compile(r"^bytes=(\d*)-(\d*)$")


def content_type_for(path: Path) -> str:
    return CONTENT_TYPES.get(Path(path).suffix.lower(), DEFAULT_CONTENT_TYPE)


def media_type_for(path: Path) -> str:
    """Infer 'image', 'video' or 'other' from the file extension."""
    ext = Path(path).suffix.lower()
    if ext in SUPPORTED_IMAGE_FORMATS:
        return "image"
    if ext in SUPPORTED_VIDEO_FORMATS:
        return "video"
    return "other"


def parse_range(range_header: str, total_size: int) -> Tuple[int, int]:
    """
    Parse a single ``bytes=`` range into inclusive (start, end) offsets.

    Supports ``bytes=start-end``, ``bytes=start-`` and ``bytes=-suffix``.
    The end offset is clamped to the last byte of the file.

    Raises:
        ValueError: If the header is malformed or the range is unsatisfiable
    """
    match = RANGE_PATTERN.match(range_header.strip())
    if not match or (not match.group(1) and not match.group(2)):
        raise ValueError(f"Malformed range header: {range_header!r}")

    first, last = match.groups()
    if not first:
        suffix = int(last)
        if suffix == 0:
            raise ValueError(f"Unsatisfiable range: {range_header!r}")
        start = max(total_size - suffix, 0)
        end = total_size - 1
    else:
        start = int(first)
        end = int(last) if last else total_size - 1
        end = min(end, total_size - 1)

    if start >= total_size or start > end:
        raise ValueError(f"Unsatisfiable range {range_header!r} for {total_size} bytes")
    return start, end


class MediaLocator:
    """Locates media files of an archive's media folder."""

    def __init__(self, media_root: Path):
        self.media_root = Path(media_root)

    @property
    def archive_root(self) -> Path:
        return self.media_root.parent

    def list_media(self, bucket: str) -> List[MediaFile]:
        """List media files of one bucket, newest first."""
        if bucket not in MEDIA_BUCKETS:
            raise ValueError(f"Unknown media bucket {bucket!r}, expected one of {MEDIA_BUCKETS}")

        bucket_dir = self.media_root / bucket
        if not bucket_dir.is_dir():
            logger.info(f"Media bucket not found: {bucket_dir}")
            return []

        files = []
        for item in bucket_dir.rglob("*"):
            if not item.is_file() or item.name.startswith("."):
                continue
            stat = item.stat()
            media_type = media_type_for(item)
            width, height = self._image_size(item) if media_type == "image" else (None, None)
            files.append(MediaFile(
                path=item.relative_to(bucket_dir).as_posix(),
                name=item.name,
                size=stat.st_size,
                modified=stat.st_mtime,
                media_type=media_type,
                width=width,
                height=height,
            ))

        files.sort(key=lambda f: f.modified, reverse=True)
        logger.info(f"Indexed {len(files)} files in {bucket}")
        return files

    def resolve(self, file_param: str) -> Path:
        """
        Resolve a requested relative path to a file inside the archive.

        Paths starting with the activity folder name resolve against the
        archive root, everything else against the media root.

        Raises:
            PermissionError: If the path escapes the archive root
            FileNotFoundError: If the file does not exist
        """
        relative = Path(file_param)
        if relative.is_absolute():
            raise PermissionError(f"Access denied: {file_param}")

        if relative.parts and relative.parts[0] == ACTIVITY_DIR_NAME:
            candidate = self.archive_root / relative
        else:
            candidate = self.media_root / relative

        resolved = candidate.resolve()
        root = self.archive_root.resolve()
        if resolved != root and root not in resolved.parents:
            raise PermissionError(f"Access denied: {file_param}")
        if not resolved.is_file():
            raise FileNotFoundError(f"File not found: {file_param}")
        return resolved

    def read_range(self, path: Path, range_header: Optional[str] = None) -> MediaSlice:
        """Read a whole file, or the byte range named by ``range_header``."""
        path = Path(path)
        total_size = path.stat().st_size
        content_type = content_type_for(path)

        if not range_header:
            return MediaSlice(0, max(total_size - 1, 0), total_size, content_type,
                              path.read_bytes(), partial=False)

        start, end = parse_range(range_header, total_size)
        with open(path, 'rb') as f:
            f.seek(start)
            data = f.read(end - start + 1)
        return MediaSlice(start, end, total_size, content_type, data, partial=True)

    @staticmethod
    def _image_size(path: Path) -> Tuple[Optional[int], Optional[int]]:
        try:
            with Image.open(path) as img:
                return img.size
        except (OSError, Image.DecompressionBombError) as e:
            logger.debug(f"Could not read image size of {path.name}: {e}")
            return None, None
