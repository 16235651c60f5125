# Session-scoped rate limiter using rolling time windows.
#
# Each Streamlit session gets its own counters stored in st.session_state.
# This protects the AI endpoint against one user hammering "生成文章" while
# keeping thresholds high enough that normal human usage is never affected.

import time
from collections import deque
from typing import Callable, MutableMapping, Optional, Tuple

import streamlit as st

import constants

_WINDOWS = (("_min", 60), ("_hour", 3600), ("_day", 86400))


def _store(store: Optional[MutableMapping]) -> MutableMapping:
    return st.session_state if store is None else store


def _get_timestamps(store: MutableMapping, key: str) -> deque:
    """Return the rolling timestamp deque for *key*, creating it if absent."""
    if key not in store:
        store[key] = deque()
    return store[key]


def _prune(timestamps: deque, window_seconds: float, now: float) -> deque:
    """Remove entries older than *window_seconds* from the deque (in-place)."""
    cutoff = now - window_seconds
    while timestamps and timestamps[0] < cutoff:
        timestamps.popleft()
    return timestamps


def check_rate_limit(
    action: str,
    per_minute: int,
    per_hour: int,
    per_day: int,
    store: Optional[MutableMapping] = None,
    clock: Callable[[], float] = time.time,
) -> Tuple[bool, str]:
    """Check whether *action* is within rate limits.

    Returns ``(allowed, message)``.  If *allowed* is False, *message*
    contains a user-friendly Chinese explanation.
    """
    data = _store(store)
    now = clock()
    counts = {
        suffix: len(_prune(_get_timestamps(data, f"_rl_{action}{suffix}"), window, now))
        for suffix, window in _WINDOWS
    }

    if counts["_min"] >= per_minute:
        return False, f"⚠️ 操作过于频繁（每分钟上限 {per_minute} 次），请稍后再试。"
    if counts["_hour"] >= per_hour:
        return False, f"⚠️ 已达到小时上限（{per_hour} 次/小时），请稍后再试。"
    if counts["_day"] >= per_day:
        return False, f"⚠️ 已达到每日上限（{per_day} 次/天），明天再来吧。"

    return True, ""


def record_usage(
    action: str,
    store: Optional[MutableMapping] = None,
    clock: Callable[[], float] = time.time,
) -> None:
    """Record one usage event for *action*."""
    data = _store(store)
    now = clock()
    for suffix, _ in _WINDOWS:
        _get_timestamps(data, f"_rl_{action}{suffix}").append(now)


def check_article_limit(store: Optional[MutableMapping] = None) -> Tuple[bool, str]:
    """Rate-check for article generation."""
    return check_rate_limit(
        "article",
        per_minute=constants.RL_ARTICLE_PER_MINUTE,
        per_hour=constants.RL_ARTICLE_PER_HOUR,
        per_day=constants.RL_ARTICLE_PER_DAY,
        store=store,
    )


def record_article(store: Optional[MutableMapping] = None) -> None:
    record_usage("article", store=store)
