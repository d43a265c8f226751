"""Comments and likes from the activity folder, served page by page."""

import logging
import re
import threading
from pathlib import Path
from typing import List, Optional, Sequence, TypeVar

from .config import ACTIVITY_PAGE_SIZE, DEFAULT_MAX_WORKERS
from .data_models import CommentActivity, Profile
from .merger import merge_category, read_archive_files
from .normalizer import RawShape, ShapeHint, comment_from_fields, parser_for
from .utils import natural_sort_key

logger = logging.getLogger(__name__)

T = TypeVar("T")

POST_COMMENTS_PATTERN = re.compile(r"^post_comments(_\d+)?\.json$")
REELS_COMMENTS_FILE = "reels_comments.json"
LIKED_POSTS_FILE = "liked_posts.json"
LIKED_COMMENTS_FILE = "liked_comments.json"

POST_COMMENTS_HINT = ShapeHint(RawShape.MAP_OF_FIELDS, None, comment_from_fields)
REELS_COMMENTS_HINT = ShapeHint(RawShape.MAP_OF_FIELDS, "comments_reels_comments", comment_from_fields)
LIKED_POSTS_HINT = ShapeHint(RawShape.KEYED_ROOT, "likes_media_likes")
LIKED_COMMENTS_HINT = ShapeHint(RawShape.KEYED_ROOT, "likes_comment_likes")


def paginate(items: Sequence[T], page: int, per_page: int) -> List[T]:
    """Return one 1-based page of ``items``."""
    if page < 1:
        raise ValueError(f"Page must be >= 1, got {page}")
    if per_page < 1:
        raise ValueError(f"Page size must be >= 1, got {per_page}")
    start = (page - 1) * per_page
    return list(items[start:start + per_page])


class ActivityCache:
    """Parsed comments and likes of one archive.

    Loaded on the first request and kept until :meth:`invalidate` is called,
    which the import pipeline does whenever a new archive is saved.
    """

    def __init__(self, activity_dir: Path, max_workers: int = DEFAULT_MAX_WORKERS):
        self.activity_dir = Path(activity_dir)
        self.max_workers = max_workers
        self._lock = threading.Lock()
        self._comments: Optional[List[CommentActivity]] = None
        self._likes: Optional[List[Profile]] = None

    @property
    def is_loaded(self) -> bool:
        return self._comments is not None and self._likes is not None

    def invalidate(self) -> None:
        with self._lock:
            self._comments = None
            self._likes = None
        logger.debug("Activity cache invalidated")

    def comments(self) -> List[CommentActivity]:
        with self._lock:
            if self._comments is None:
                self._comments = self._load_comments()
            return self._comments

    def likes(self) -> List[Profile]:
        with self._lock:
            if self._likes is None:
                self._likes = self._load_likes()
            return self._likes

    def get_comments(self, page: int = 1, per_page: int = ACTIVITY_PAGE_SIZE) -> List[CommentActivity]:
        return paginate(self.comments(), page, per_page)

    def get_likes(self, page: int = 1, per_page: int = ACTIVITY_PAGE_SIZE) -> List[Profile]:
        return paginate(self.likes(), page, per_page)

    def search_comments(self, query: str) -> List[CommentActivity]:
        needle = query.lower()
        return [c for c in self.comments()
                if needle in c.comment.lower() or needle in c.owner.lower()]

    def search_likes(self, query: str) -> List[Profile]:
        needle = query.lower()
        return [like for like in self.likes() if needle in like.username.lower()]

    def _load_comments(self) -> List[CommentActivity]:
        comments_dir = self.activity_dir / "comments"
        if not comments_dir.is_dir():
            logger.info(f"No comments folder at {comments_dir}")
            return []

        post_files = sorted(
            (p for p in comments_dir.iterdir() if POST_COMMENTS_PATTERN.match(p.name)),
            key=lambda p: natural_sort_key(p.name),
        )
        comments = merge_category(read_archive_files(post_files),
                                  parser_for(POST_COMMENTS_HINT), self.max_workers)

        reels_file = comments_dir / REELS_COMMENTS_FILE
        if reels_file.is_file():
            comments += merge_category(read_archive_files([reels_file]), parser_for(REELS_COMMENTS_HINT))

        comments.sort(key=lambda c: c.timestamp, reverse=True)
        logger.info(f"Loaded {len(comments)} comments")
        return comments

    def _load_likes(self) -> List[Profile]:
        likes_dir = self.activity_dir / "likes"
        likes: List[Profile] = []
        for filename, hint in ((LIKED_POSTS_FILE, LIKED_POSTS_HINT),
                               (LIKED_COMMENTS_FILE, LIKED_COMMENTS_HINT)):
            path = likes_dir / filename
            if path.is_file():
                likes += merge_category(read_archive_files([path]), parser_for(hint))

        likes.sort(key=lambda like: like.timestamp, reverse=True)
        logger.info(f"Loaded {len(likes)} likes")
        return likes
