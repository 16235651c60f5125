# Round-history summaries for the session completion screen.

from typing import List

import pandas as pd

from session import LearningSession

_HISTORY_COLUMNS = ["round", "word", "meaning"]


def round_history_frame(session: LearningSession) -> pd.DataFrame:
    """One row per missed item per completed round (round numbers start at 1)."""
    rows: List[dict] = []
    for round_no, missed in enumerate(session.round_history, start=1):
        for w in missed:
            rows.append({"round": round_no, "word": w.word, "meaning": w.meaning})
    return pd.DataFrame(rows, columns=_HISTORY_COLUMNS)


def miss_counts(session: LearningSession) -> pd.DataFrame:
    """How many rounds each word was missed in, most-missed first."""
    df = round_history_frame(session)
    if df.empty:
        return pd.DataFrame(columns=["word", "meaning", "misses"])
    counts = (
        df.groupby(["word", "meaning"], sort=False)
        .size()
        .reset_index(name="misses")
        .sort_values("misses", ascending=False, kind="stable")
        .reset_index(drop=True)
    )
    return counts
