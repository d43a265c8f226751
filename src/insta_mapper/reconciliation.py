"""Reconciliation of followers and following into relationship partitions."""

import logging
from typing import Any, Optional, Sequence

from .assembler import assemble_stats
from .data_models import ConnectionStats, Profile

logger = logging.getLogger(__name__)

DERIVED_FIELDS = ("mutual", "not_following_back", "fans")


def reconcile(followers: Optional[Sequence[Profile]],
              following: Optional[Sequence[Profile]],
              **pass_through: Optional[Sequence[Any]]) -> ConnectionStats:
    """
    Derive mutual, fans and not-following-back from the two relationship lists.

    Usernames are compared case-sensitively. ``mutual`` and
    ``not_following_back`` keep the order of ``following``, ``fans`` keeps
    the order of ``followers``. Each occurrence of a duplicated username is
    tested on its own, so duplicates carry through to the output.

    Args:
        followers: Accounts following the owner
        following: Accounts the owner follows
        **pass_through: Remaining ConnectionStats sequences, stored unchanged

    Returns:
        The assembled snapshot

    Raises:
        ValueError: If a derived category is passed through
    """
    clashing = sorted(set(pass_through) & set(DERIVED_FIELDS))
    if clashing:
        raise ValueError(f"Derived categories cannot be passed through: {', '.join(clashing)}")

    followers = tuple(followers or ())
    following = tuple(following or ())

    followers_set = {p.username for p in followers}
    following_set = {p.username for p in following}

    mutual = [p for p in following if p.username in followers_set]
    not_following_back = [p for p in following if p.username not in followers_set]
    fans = [p for p in followers if p.username not in following_set]

    logger.info(f"Reconciled {len(followers)} followers / {len(following)} following: "
                f"{len(mutual)} mutual, {len(fans)} fans, {len(not_following_back)} not following back")

    return assemble_stats(
        followers=followers,
        following=following,
        mutual=mutual,
        not_following_back=not_following_back,
        fans=fans,
        **pass_through,
    )
