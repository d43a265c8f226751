"""List filtering, date formatting and monthly growth for the snapshot views."""

import time
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional

import pytz

from .config import DISPLAY_TZ
from .data_models import ConnectionStats, Profile

TIME_WINDOWS = {
    'week': 7 * 86400,
    'month': 30 * 86400,
    '3months': 90 * 86400,
    'year': 365 * 86400,
}
SORT_ORDERS = ('newest', 'oldest')


@dataclass
class MonthlyCount:
    """New followers/following recorded in one calendar month, with running totals."""
    month: str   # "2024-01"
    label: str   # "Jan 24"
    followers: int = 0
    following: int = 0
    total_followers: int = 0
    total_following: int = 0


def _to_local(timestamp: int, tz) -> datetime:
    return datetime.fromtimestamp(timestamp, tz=pytz.utc).astimezone(tz)


def format_timestamp(timestamp: int, tz=DISPLAY_TZ) -> str:
    """Format a seconds timestamp as ``"Jan 05, 2024"``, ``"N/A"`` when unknown."""
    if not timestamp:
        return "N/A"
    return _to_local(timestamp, tz).strftime('%b %d, %Y')


def filter_profiles(profiles: Iterable[Profile],
                    search: str = "",
                    time_filter: str = "all",
                    sort_order: str = "newest",
                    now: Optional[float] = None) -> List[Profile]:
    """
    Filter and sort a profile list for display.

    Args:
        profiles: Profiles of one category
        search: Case-insensitive username substring
        time_filter: 'all', 'week', 'month', '3months' or 'year'; windows
            other than 'all' drop profiles with an unknown timestamp
        sort_order: 'newest' or 'oldest'
        now: Reference time in seconds, defaults to the current time

    Returns:
        Matching profiles; ties keep their original order
    """
    if time_filter != 'all' and time_filter not in TIME_WINDOWS:
        raise ValueError(f"Unknown time filter: {time_filter}")
    if sort_order not in SORT_ORDERS:
        raise ValueError(f"Unknown sort order: {sort_order}")

    needle = search.lower()
    result = [p for p in profiles if needle in p.username.lower()]

    if time_filter != 'all':
        now = time.time() if now is None else now
        window = TIME_WINDOWS[time_filter]
        result = [p for p in result if p.timestamp and now - p.timestamp <= window]

    return sorted(result, key=lambda p: p.timestamp or 0, reverse=(sort_order == 'newest'))


def monthly_growth(stats: ConnectionStats, tz=DISPLAY_TZ) -> List[MonthlyCount]:
    """
    Count follower and following timestamps per month, oldest month first.

    Each month also carries the cumulative totals up to and including it.
    Profiles with an unknown timestamp are left out.
    """
    months = {}

    def add(profiles: Iterable[Profile], attr: str) -> None:
        for profile in profiles:
            if not profile.timestamp:
                continue
            local = _to_local(profile.timestamp, tz)
            key = local.strftime('%Y-%m')
            if key not in months:
                months[key] = MonthlyCount(month=key, label=local.strftime('%b %y'))
            setattr(months[key], attr, getattr(months[key], attr) + 1)

    add(stats.followers, 'followers')
    add(stats.following, 'following')

    growth = [months[key] for key in sorted(months)]
    total_followers = total_following = 0
    for month in growth:
        total_followers += month.followers
        total_following += month.following
        month.total_followers = total_followers
        month.total_following = total_following
    return growth
