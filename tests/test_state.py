# Tests for state helpers, using a plain dict in place of st.session_state.

import constants
from session import Phase, recognition_evaluator, spelling_evaluator
from state import clear_all_state, get_learning_session, init_state, reset_modes, set_word_list
from wordlist import Word

WORDS = [Word("apple", "苹果"), Word("river", "河流"), Word("quiet", "安静的")]


def test_init_state_fills_defaults_without_overwriting():
    store = {"active_mode": "practice"}
    init_state(store)
    assert store["active_mode"] == "practice"
    assert store["words"] == []
    assert store["memorize_size"] == constants.DEFAULT_SAMPLE_SIZE
    store["words"].append(WORDS[0])
    assert constants.DEFAULT_SESSION_STATE["words"] == []


def test_get_learning_session_is_created_once_per_mode():
    store = {}
    memorize = get_learning_session(constants.MODE_MEMORIZE, store)
    practice = get_learning_session(constants.MODE_PRACTICE, store)
    assert memorize is get_learning_session(constants.MODE_MEMORIZE, store)
    assert memorize.evaluator is recognition_evaluator
    assert practice.evaluator is spelling_evaluator


def test_set_word_list_resets_sessions_and_caps_sizes():
    store = {}
    init_state(store)
    session = get_learning_session(constants.MODE_MEMORIZE, store)
    session.start(1, WORDS)
    store["article_result"] = object()
    store["memorize_size_input"] = 10

    set_word_list(WORDS, "words.txt", store)

    assert store["words"] == WORDS
    assert store["word_source_name"] == "words.txt"
    assert session.phase == Phase.NOT_STARTED
    assert store["article_result"] is None
    assert store["memorize_size"] == len(WORDS)
    assert store["article_size"] == len(WORDS)
    assert "memorize_size_input" not in store


def test_reset_modes_keeps_word_list():
    store = {}
    init_state(store)
    set_word_list(WORDS, "", store)
    get_learning_session(constants.MODE_PRACTICE, store).start(2, WORDS)
    store["highlighted_word"] = "apple"

    reset_modes(store)

    assert store["words"] == WORDS
    assert get_learning_session(constants.MODE_PRACTICE, store).phase == Phase.NOT_STARTED
    assert store["highlighted_word"] is None


def test_clear_all_state_restores_defaults():
    store = {}
    init_state(store)
    set_word_list(WORDS, "words.txt", store)
    clear_all_state(store)
    assert store["words"] == []
    assert store["word_source_name"] == ""
    assert store["memorize_size"] == constants.DEFAULT_SAMPLE_SIZE
