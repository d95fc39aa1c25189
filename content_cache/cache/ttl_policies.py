"""
Per-key TTL, priority and tag configuration for well-known content sections.
"""
import logging
import math
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, Optional, Tuple, Union

from .core import Priority

logger = logging.getLogger("cache.ttl_policies")


@dataclass(frozen=True)
class KeyPolicy:
    """Caching defaults for one content key."""
    ttl: float
    priority: Priority
    tags: FrozenSet[str] = field(default_factory=frozenset)


# Content sections of the home document (TTL in seconds)
CONTENT_CACHE_CONFIG: Dict[str, KeyPolicy] = {
    "home.hero": KeyPolicy(
        ttl=30 * 60,              # 30 minutes, rarely edited
        priority=Priority.CRITICAL,
        tags=frozenset({"home", "hero", "landing"}),
    ),
    "home.stats": KeyPolicy(
        ttl=10 * 60,              # 10 minutes
        priority=Priority.CRITICAL,
        tags=frozenset({"home", "stats", "numbers"}),
    ),
    "home.services": KeyPolicy(
        ttl=60 * 60,              # 1 hour
        priority=Priority.HIGH,
        tags=frozenset({"home", "services", "business"}),
    ),
    "home.portfolio": KeyPolicy(
        ttl=30 * 60,              # 30 minutes
        priority=Priority.HIGH,
        tags=frozenset({"home", "portfolio", "projects"}),
    ),
    "home.pillars": KeyPolicy(
        ttl=2 * 60 * 60,          # 2 hours
        priority=Priority.MEDIUM,
        tags=frozenset({"home", "pillars", "about"}),
    ),
    "home.policies": KeyPolicy(
        ttl=4 * 60 * 60,          # 4 hours
        priority=Priority.LOW,
        tags=frozenset({"home", "policies", "corporate"}),
    ),
    "home.newsletter": KeyPolicy(
        ttl=24 * 60 * 60,         # 24 hours
        priority=Priority.LOW,
        tags=frozenset({"home", "newsletter", "marketing"}),
    ),
}


# Home document sections seeded at startup, with the priority they are seeded at
HOME_WARMUP_SECTIONS: Tuple[Tuple[str, Priority], ...] = (
    ("hero", Priority.CRITICAL),
    ("stats", Priority.CRITICAL),
    ("services", Priority.HIGH),
    ("portfolio", Priority.HIGH),
)


def get_policy_for_key(key: str) -> Optional[KeyPolicy]:
    """Look up the static policy for a key, if it is a well-known section."""
    return CONTENT_CACHE_CONFIG.get(key)


def resolve_entry_options(
    key: str,
    default_ttl: float,
    ttl: Optional[float] = None,
    priority: Optional[Union[Priority, str]] = None,
    tags: Optional[Iterable[str]] = None,
) -> Tuple[float, Priority, FrozenSet[str]]:
    """
    Resolve the TTL, priority and tags for an entry.

    Explicit options win, then the per-key table, then the global defaults
    (default_ttl, medium priority, no tags). A non-positive or missing TTL
    option falls through to the next source, as do non-finite TTLs and
    tags that cannot form a set.

    Returns:
        (ttl_seconds, priority, tags)
    """
    policy = get_policy_for_key(key)

    resolved_ttl = None
    if ttl:
        try:
            resolved_ttl = float(ttl)
        except (TypeError, ValueError):
            logger.warning(f"Invalid ttl {ttl!r} for {key}, using default")
    if resolved_ttl is not None and not math.isfinite(resolved_ttl):
        logger.warning(f"Non-finite ttl {ttl!r} for {key}, using default")
        resolved_ttl = None
    if resolved_ttl is None or resolved_ttl <= 0:
        resolved_ttl = policy.ttl if policy is not None else default_ttl

    resolved_priority = None
    if priority:
        try:
            resolved_priority = Priority.coerce(priority)
        except ValueError:
            logger.warning(f"Unknown priority {priority!r} for {key}, using default")
    if resolved_priority is None:
        resolved_priority = policy.priority if policy is not None else Priority.MEDIUM

    resolved_tags = None
    if isinstance(tags, str):
        resolved_tags = frozenset({tags})
    elif tags is not None:
        try:
            resolved_tags = frozenset(tags)
        except TypeError:
            logger.warning(f"Invalid tags {tags!r} for {key}, using default")
    if resolved_tags is None:
        resolved_tags = policy.tags if policy is not None else frozenset()

    return resolved_ttl, resolved_priority, resolved_tags
