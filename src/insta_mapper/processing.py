"""Central orchestrator for importing an Instagram archive."""

import logging
import sqlite3
import time
from pathlib import Path
from typing import Dict, List, Optional

from tqdm import tqdm

from .activity_service import ActivityCache
from .archive_scanner import (
    SOURCES_BY_CATEGORY,
    MissingCategoryError,
    require_categories,
    scan_archive,
)
from .config import ACTIVITY_DIR_NAME, DB_PATH, DEFAULT_MAX_WORKERS
from .data_models import Category, ConnectionStats, Stats
from .merger import ArchiveFile, merge_category, read_archive_files
from .normalizer import parser_for
from .reconciliation import reconcile
from .record_store import RecordStore
from .repository import StatsRepository


logger = logging.getLogger(__name__)


class Processor:
    """Main orchestrator for the archive import process."""

    def __init__(self, archive_dir: Path, db_path: Path = DB_PATH,
                 max_workers: int = DEFAULT_MAX_WORKERS,
                 store: Optional[RecordStore] = None,
                 activity_cache: Optional[ActivityCache] = None):
        """Initialize the processor with configuration."""
        self.archive_dir = Path(archive_dir)
        self.max_workers = max_workers
        self.stats = Stats()

        self.db_path = Path(db_path)
        self._store = store
        self._owns_store = store is None
        self.activity_cache = activity_cache or ActivityCache(
            self.archive_dir / ACTIVITY_DIR_NAME, max_workers)

    @property
    def store(self) -> RecordStore:
        """Record store, opened on first use so a dry run never touches the database."""
        if self._store is None:
            self._store = RecordStore(self.db_path)
        return self._store

    @property
    def repository(self) -> StatsRepository:
        return StatsRepository(self.store)

    def close(self) -> None:
        """Close the record store if this processor opened it."""
        if self._owns_store and self._store is not None:
            self._store.close()
            self._store = None

    def run(self, dry_run: bool = False) -> int:
        """Execute the complete import workflow."""
        start_time = time.time()

        logger.info("=" * 60)
        logger.info("    INSTAGRAM ARCHIVE MAPPER - IMPORT")
        logger.info("=" * 60)

        try:
            connection_stats = self.load_archive()
            if dry_run:
                logger.info("Dry run: snapshot not saved")
            else:
                self.save(connection_stats)
        except (MissingCategoryError, FileNotFoundError, sqlite3.Error) as e:
            logger.error("=" * 60)
            logger.error(f"ERROR: {e}")
            logger.error("=" * 60)
            return 1
        finally:
            self.close()

        self._print_summary(time.time() - start_time)
        return 0

    def load_archive(self) -> ConnectionStats:
        """Scan, merge and reconcile the archive entirely in memory."""
        groups = self._scan()
        merged = self._merge(groups)

        phase_start = time.time()
        logger.info("=" * 60)
        logger.info("PHASE: RECONCILIATION")
        logger.info("=" * 60)

        followers = merged.pop(Category.FOLLOWERS)
        following = merged.pop(Category.FOLLOWING)
        connection_stats = reconcile(
            followers, following,
            **{category.field_name: records for category, records in merged.items()}
        )

        self.stats.profiles_by_category = connection_stats.counts()
        self.stats.phase_times['reconciliation'] = time.time() - phase_start
        return connection_stats

    def save(self, connection_stats: ConnectionStats) -> None:
        """Persist the snapshot, replacing any previous one."""
        phase_start = time.time()
        logger.info("=" * 60)
        logger.info("PHASE: SAVING")
        logger.info("=" * 60)

        self.repository.save_stats(connection_stats)
        self.activity_cache.invalidate()
        self.stats.phase_times['saving'] = time.time() - phase_start

    def _scan(self) -> Dict[Category, List[Path]]:
        phase_start = time.time()
        logger.info("=" * 60)
        logger.info("PHASE: ARCHIVE SCAN")
        logger.info("=" * 60)

        groups = scan_archive(self.archive_dir)
        self.stats.files_by_category = {c.value: len(paths) for c, paths in groups.items()}
        logger.info(f"Found {sum(len(p) for p in groups.values())} relationship files in {self.archive_dir}")

        require_categories(groups)
        self.stats.phase_times['scan'] = time.time() - phase_start
        return groups

    def _merge(self, groups: Dict[Category, List[Path]]) -> Dict[Category, list]:
        phase_start = time.time()
        logger.info("=" * 60)
        logger.info("PHASE: PARSING AND MERGING")
        logger.info("=" * 60)

        merged: Dict[Category, list] = {}
        with tqdm(total=len(groups), desc="Parsing categories", unit="categories") as pbar:
            for category, paths in groups.items():
                pbar.set_postfix_str(category.value)
                files = self._read_files(paths)
                parse_fn = parser_for(SOURCES_BY_CATEGORY[category].hint)
                merged[category] = merge_category(files, parse_fn, self.max_workers)
                pbar.update(1)

        self.stats.phase_times['merging'] = time.time() - phase_start
        return merged

    def _read_files(self, paths: List[Path]) -> List[ArchiveFile]:
        files = read_archive_files(paths)
        self.stats.failed_files += len(paths) - len(files)
        return files

    def _print_summary(self, total_time: float) -> None:
        """Print final import summary."""
        logger.info("=" * 60)
        logger.info("         IMPORT COMPLETE - SUMMARY")
        logger.info("=" * 60)

        for category, count in self.stats.profiles_by_category.items():
            files = self.stats.files_by_category.get(category)
            source = f" ({files} files)" if files else ""
            logger.info(f"  - {category:<25} {count:>7}{source}")
        if self.stats.failed_files:
            logger.info(f"  - Unreadable files:         {self.stats.failed_files}")

        logger.info("")
        logger.info("Processing Time:")
        for phase, duration in self.stats.phase_times.items():
            logger.info(f"  - {phase.replace('_', ' ').title():<30} {duration:.1f}s")
        logger.info(f"  - {'Total':<30} {total_time:.1f}s")
        logger.info("=" * 60)
