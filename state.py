# Session state helpers.

from typing import List, MutableMapping, Optional

import streamlit as st

import constants
from session import LearningSession, memorize_session, practice_session
from wordlist import Word

logger = __import__("logging").getLogger(__name__)

_SESSION_FACTORIES = {
    constants.MODE_MEMORIZE: memorize_session,
    constants.MODE_PRACTICE: practice_session,
}


def _state(store: Optional[MutableMapping]) -> MutableMapping:
    return st.session_state if store is None else store


def init_state(store: Optional[MutableMapping] = None) -> None:
    """Fill in defaults for keys not yet present."""
    data = _state(store)
    for key, default_value in constants.DEFAULT_SESSION_STATE.items():
        if key not in data:
            data[key] = list(default_value) if isinstance(default_value, list) else default_value


def get_learning_session(mode: str, store: Optional[MutableMapping] = None) -> LearningSession:
    """Return this browser session's LearningSession for *mode*, creating it on first use."""
    data = _state(store)
    key = f"session_{mode}"
    if key not in data:
        data[key] = _SESSION_FACTORIES[mode]()
    return data[key]


def set_word_list(words: List[Word], source_name: str = "", store: Optional[MutableMapping] = None) -> None:
    """Replace the word list; any running sessions and articles belong to the old list."""
    data = _state(store)
    data['words'] = list(words)
    data['word_source_name'] = source_name
    reset_modes(store)
    n = len(words)
    data['memorize_size'] = min(constants.DEFAULT_SAMPLE_SIZE, n) or 1
    data['practice_size'] = min(constants.DEFAULT_SAMPLE_SIZE, n) or 1
    data['article_size'] = min(constants.DEFAULT_ARTICLE_WORD_COUNT, n) or 1
    # widget state would otherwise keep a size bound to the previous list
    for key in ('memorize_size_input', 'practice_size_input', 'article_size_input'):
        data.pop(key, None)
    logger.info("Loaded %d words from %s", n, source_name or "text")


def reset_modes(store: Optional[MutableMapping] = None) -> None:
    data = _state(store)
    for mode in _SESSION_FACTORIES:
        key = f"session_{mode}"
        if key in data:
            data[key].reset()
    data['article_result'] = None
    data['article_error'] = ""
    data['highlighted_word'] = None


def clear_all_state(store: Optional[MutableMapping] = None) -> None:
    """Clear all session state for fresh start."""
    data = _state(store)
    reset_modes(store)
    for key, default_value in constants.DEFAULT_SESSION_STATE.items():
        data[key] = list(default_value) if isinstance(default_value, list) else default_value
