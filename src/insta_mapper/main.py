#!/usr/bin/env python3
"""Command line entry point for Instagram Archive Mapper."""

import argparse
import logging
import sqlite3
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import List, Optional

from .activity_service import ActivityCache
from .analytics import TIME_WINDOWS, filter_profiles, format_timestamp, monthly_growth
from .config import (
    ACTIVITY_DIR_NAME,
    ACTIVITY_PAGE_SIZE,
    DB_PATH,
    DEFAULT_MAX_WORKERS,
    EXPORT_PATH,
    INBOX_SUBPATH,
    INPUT_DIR,
    LOG_FORMAT,
    MEDIA_BUCKETS,
    MEDIA_DIR_NAME,
)
from .conversation_service import ConversationService
from .data_models import Category
from .media_service import MediaLocator
from .processing import Processor
from .record_store import RecordStore
from .repository import StatsRepository
from .utils import save_json

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Reconcile and browse an Instagram data export")
    parser.add_argument("--db", type=Path, default=DB_PATH, help="SQLite database path")
    parser.add_argument("--log-level", default="INFO", help="Logging level")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("import", help="Import an archive and save the snapshot")
    p.add_argument("archive", type=Path, nargs="?", default=INPUT_DIR, help="Archive root folder")
    p.add_argument("--workers", type=int, default=DEFAULT_MAX_WORKERS, help="Parallel file parsers")
    p.add_argument("--dry-run", action="store_true", help="Reconcile without saving")

    sub.add_parser("summary", help="Show category counts and monthly growth")

    p = sub.add_parser("list", help="List the profiles of one category")
    p.add_argument("category", help="Category name, e.g. notFollowingBack")
    p.add_argument("--search", default="", help="Username substring")
    p.add_argument("--since", default="all", choices=["all", *TIME_WINDOWS], help="Time window")
    p.add_argument("--sort", default="newest", choices=["newest", "oldest"])

    p = sub.add_parser("delete", help="Remove one username from one stored category")
    p.add_argument("category")
    p.add_argument("username")

    sub.add_parser("clear", help="Delete the saved snapshot")

    p = sub.add_parser("export", help="Write the saved snapshot as JSON")
    p.add_argument("--output", type=Path, default=EXPORT_PATH)

    for name in ("comments", "likes"):
        p = sub.add_parser(name, help=f"Page through your {name}")
        p.add_argument("archive", type=Path, nargs="?", default=INPUT_DIR)
        p.add_argument("--page", type=int, default=1)
        p.add_argument("--per-page", type=int, default=ACTIVITY_PAGE_SIZE)
        p.add_argument("--search", default="")

    p = sub.add_parser("chats", help="List conversations or print one")
    p.add_argument("archive", type=Path, nargs="?", default=INPUT_DIR)
    p.add_argument("--thread", help="Conversation folder name")

    p = sub.add_parser("media", help="List media files of one bucket")
    p.add_argument("bucket", choices=MEDIA_BUCKETS)
    p.add_argument("archive", type=Path, nargs="?", default=INPUT_DIR)

    return parser


@contextmanager
def _open_repository(db_path: Path):
    with RecordStore(db_path) as store:
        yield StatsRepository(store)


def cmd_summary(args) -> int:
    with _open_repository(args.db) as repository:
        stats = repository.load_stats()
    if stats is None:
        logger.error("No saved data. Run 'import' first.")
        return 1
    for category, count in stats.counts().items():
        print(f"{category:<25} {count:>7}")
    print()
    for month in monthly_growth(stats):
        print(f"{month.label:<8} +{month.followers} followers  +{month.following} following  "
              f"(total {month.total_followers} / {month.total_following})")
    return 0


def cmd_list(args) -> int:
    category = Category.parse(args.category)
    with _open_repository(args.db) as repository:
        stats = repository.load_stats()
    if stats is None:
        logger.error("No saved data. Run 'import' first.")
        return 1
    if not category.is_profile_list:
        for contact in stats.contacts:
            print(f"{contact.first_name} {contact.last_name or ''}".strip(), contact.contact_info)
        return 0
    for profile in filter_profiles(stats.get(category), args.search, args.since, args.sort):
        print(f"{profile.username:<32} {format_timestamp(profile.timestamp):<14} {profile.url}")
    return 0


def cmd_delete(args) -> int:
    category = Category.parse(args.category)
    with _open_repository(args.db) as repository:
        stats = repository.delete_profile(category, args.username)
    remaining = len(stats.get(category)) if stats else 0
    logger.info(f"{category.value} now has {remaining} entries")
    return 0


def cmd_export(args) -> int:
    with _open_repository(args.db) as repository:
        stats = repository.load_stats()
    if stats is None:
        logger.error("No saved data. Run 'import' first.")
        return 1
    save_json(stats.to_dict(), args.output)
    logger.info(f"Snapshot written to {args.output}")
    return 0


def cmd_activity(args) -> int:
    cache = ActivityCache(args.archive / ACTIVITY_DIR_NAME)
    if args.command == "comments":
        items = cache.search_comments(args.search) if args.search else cache.get_comments(args.page, args.per_page)
        for c in items:
            print(f"{format_timestamp(c.timestamp):<14} @{c.owner}: {c.comment}")
    else:
        items = cache.search_likes(args.search) if args.search else cache.get_likes(args.page, args.per_page)
        for like in items:
            print(f"{format_timestamp(like.timestamp):<14} {like.username:<32} {like.url}")
    return 0


def cmd_chats(args) -> int:
    service = ConversationService(args.archive / ACTIVITY_DIR_NAME / INBOX_SUBPATH)
    if not args.thread:
        for thread in service.list_threads():
            print(f"{thread.folder_name:<40} {thread.title:<30} {thread.message_count:>6} messages")
        return 0
    # Export order is newest first; print oldest at the top
    for msg in reversed(service.get_messages(args.thread)):
        print(f"{msg.get('sender_name', '?')}: {msg.get('content', '')}")
    return 0


def cmd_media(args) -> int:
    locator = MediaLocator(args.archive / MEDIA_DIR_NAME)
    for media in locator.list_media(args.bucket):
        dims = f"{media.width}x{media.height}" if media.width else ""
        print(f"{media.path:<60} {media.media_type:<6} {media.size:>10} {dims}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main processing function."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper()), format=LOG_FORMAT)

    try:
        if args.command == "import":
            return Processor(args.archive, args.db, max_workers=args.workers).run(dry_run=args.dry_run)
        if args.command == "clear":
            with _open_repository(args.db) as repository:
                repository.clear()
            return 0
        handlers = {
            "summary": cmd_summary,
            "list": cmd_list,
            "delete": cmd_delete,
            "export": cmd_export,
            "comments": cmd_activity,
            "likes": cmd_activity,
            "chats": cmd_chats,
            "media": cmd_media,
        }
        return handlers[args.command](args)
    except (ValueError, FileNotFoundError, PermissionError, sqlite3.Error) as e:
        logger.error(f"ERROR: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
