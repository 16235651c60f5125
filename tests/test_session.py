# Tests for the review-round LearningSession state machine.

import random
from collections import Counter

import pytest

from errors import SessionStateError, ValidationError
from session import (
    LearningSession,
    Phase,
    memorize_session,
    practice_session,
    recognition_evaluator,
    spelling_evaluator,
)
from wordlist import Word

WORDS = [
    Word("apple", "苹果"),
    Word("banana", "香蕉"),
    Word("cherry", "樱桃"),
    Word("durian", "榴莲"),
    Word("elder", "接骨木"),
]


@pytest.fixture
def session():
    return memorize_session(rng=random.Random(42))


def _snapshot(s: LearningSession):
    return (list(s.pool), s.cursor, list(s.missed), [list(r) for r in s.round_history],
            s.round_number, s.completed, s.phase)


# ---------------------------------------------------------------------------
# start
# ---------------------------------------------------------------------------

class TestStart:

    def test_samples_pool_from_source(self, session):
        session.start(3, WORDS)
        assert session.phase == Phase.PROMPT
        assert len(session.pool) == 3
        assert set(session.pool) <= set(WORDS)
        assert len(set(session.pool)) == 3
        assert session.cursor == 0
        assert session.missed == []
        assert session.round_number == 0
        assert session.completed is False

    def test_full_list_is_a_legal_sample(self, session):
        session.start(len(WORDS), WORDS)
        assert sorted(session.pool) == sorted(WORDS)

    def test_oversized_sample_fails_and_stays_not_started(self, session):
        with pytest.raises(ValidationError):
            session.start(len(WORDS) + 1, WORDS)
        assert session.phase == Phase.NOT_STARTED
        assert session.pool == []

    def test_empty_source_fails(self, session):
        with pytest.raises(ValidationError):
            session.start(1, [])
        assert session.phase == Phase.NOT_STARTED

    def test_non_positive_sample_fails(self, session):
        with pytest.raises(ValidationError):
            session.start(0, WORDS)

    def test_failed_start_leaves_running_session_untouched(self, session):
        session.start(2, WORDS)
        session.reveal(False)
        before = _snapshot(session)
        with pytest.raises(ValidationError):
            session.start(99, WORDS)
        assert _snapshot(session) == before

    def test_source_sequence_is_not_mutated(self, session):
        source = list(WORDS)
        session.start(5, source)
        assert source == WORDS


# ---------------------------------------------------------------------------
# rounds
# ---------------------------------------------------------------------------

def test_missed_word_becomes_next_round(session):
    session.start(3, WORDS)
    first, second, third = session.pool

    session.reveal(True)
    session.advance()
    assert session.current_word == second
    assert session.reveal(False) is False
    session.advance()
    session.reveal(True)
    session.advance()

    assert session.pool == [second]
    assert session.round_number == 1
    assert session.round_history == [[second]]
    assert session.missed == []
    assert session.cursor == 0
    assert session.is_review_round

    session.reveal(True)
    session.advance()
    assert session.completed is True
    assert session.phase == Phase.COMPLETED
    assert session.current_word is None


def test_round_with_every_item_missed_repeats_without_cap(session):
    session.start(2, WORDS)
    pool = list(session.pool)
    for round_no in range(1, 6):
        for _ in range(2):
            session.reveal(False)
            session.advance()
        assert session.round_number == round_no
        assert session.pool == pool
    assert not session.completed
    assert len(session.round_history) == 5


def test_position_and_pool_size(session):
    session.start(3, WORDS)
    assert (session.position, session.pool_size) == (1, 3)
    session.reveal(True)
    session.advance()
    assert (session.position, session.pool_size) == (2, 3)


def test_no_misses_completes_after_first_round(session):
    session.start(3, WORDS)
    for _ in range(3):
        session.reveal(True)
        session.advance()
    assert session.completed
    assert session.round_history == []


# ---------------------------------------------------------------------------
# mark_mastered
# ---------------------------------------------------------------------------

def test_mark_mastered_on_last_remaining_item_completes():
    s = memorize_session(rng=random.Random(1))
    s.start(2, WORDS)
    for _ in range(2):
        s.reveal(False)
        s.advance()
    assert s.round_number == 1

    s.reveal(True)
    s.advance()
    s.reveal(False)
    s.mark_mastered()
    assert s.phase == Phase.COMPLETED
    assert s.round_number == 1


def test_mark_mastered_single_word_session():
    s = practice_session(rng=random.Random(3))
    s.start(1, WORDS)
    assert s.reveal("wrong") is False
    s.mark_mastered()
    assert s.completed
    assert s.round_history == []


def test_mark_mastered_only_removes_current_item():
    dup = Word("apple", "苹果")
    s = memorize_session(rng=random.Random(0))
    s.start(2, [dup, Word("apple", "苹果")])

    s.reveal(False)
    s.advance()
    s.reveal(False)
    s.mark_mastered()

    assert s.round_number == 1
    assert s.pool == [dup]
    assert s.round_history == [[dup]]


def test_mark_mastered_after_correct_answer_keeps_earlier_misses(session):
    session.start(2, WORDS)
    first = session.current_word
    session.reveal(False)
    session.advance()
    session.reveal(True)
    session.mark_mastered()
    assert session.pool == [first]
    assert session.round_number == 1


# ---------------------------------------------------------------------------
# phase guards and reset
# ---------------------------------------------------------------------------

def test_transitions_in_wrong_phase_raise(session):
    with pytest.raises(SessionStateError):
        session.reveal(True)
    session.start(2, WORDS)
    with pytest.raises(SessionStateError):
        session.advance()
    with pytest.raises(SessionStateError):
        session.mark_mastered()
    session.reveal(False)
    with pytest.raises(SessionStateError):
        session.reveal(False)
    assert len(session.missed) == 1


def test_reset_is_idempotent(session):
    session.start(3, WORDS)
    session.reveal(False)
    session.advance()
    session.reset()
    once = _snapshot(session)
    session.reset()
    assert _snapshot(session) == once
    assert session.phase == Phase.NOT_STARTED
    assert session.pool == [] and session.round_history == []


def test_reset_from_completed_allows_restart(session):
    session.start(1, WORDS)
    session.reveal(True)
    session.advance()
    assert session.completed
    session.reset()
    session.start(2, WORDS)
    assert session.phase == Phase.PROMPT


# ---------------------------------------------------------------------------
# evaluators
# ---------------------------------------------------------------------------

def test_spelling_evaluator_ignores_case_and_outer_whitespace():
    w = Word("Apple", "苹果")
    assert spelling_evaluator("  aPPle ", w) is True
    assert spelling_evaluator("aple", w) is False
    assert spelling_evaluator("", w) is False
    assert spelling_evaluator(None, w) is False


def test_recognition_evaluator_uses_learner_flag():
    w = Word("apple", "苹果")
    assert recognition_evaluator(True, w) is True
    assert recognition_evaluator(False, w) is False


def test_practice_session_records_typed_answer():
    s = practice_session(rng=random.Random(5))
    s.start(1, [Word("apple", "苹果")])
    assert s.reveal(" APPLE ") is True
    assert s.last_correct is True
    assert s.last_response == " APPLE "
    assert s.missed == []


def test_custom_evaluator():
    s = LearningSession(lambda response, word: response == word.meaning, rng=random.Random(0))
    s.start(1, [Word("apple", "苹果")])
    assert s.reveal("苹果") is True


# ---------------------------------------------------------------------------
# property: history matches the misses that were not overridden
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("seed", [0, 1, 2, 3, 4])
def test_completed_session_history_matches_misses(seed):
    learner = random.Random(seed)
    s = memorize_session(rng=random.Random(seed))
    s.start(len(WORDS), WORDS)
    misses = Counter()

    for _ in range(1000):
        if s.completed:
            break
        word = s.current_word
        knows = learner.random() < 0.6
        s.reveal(knows)
        if not knows and learner.random() < 0.3:
            s.mark_mastered()
            continue
        if not knows:
            misses[word] += 1
        s.advance()

    assert s.completed
    assert s.missed == []
    history = Counter(w for round_missed in s.round_history for w in round_missed)
    assert history == misses
