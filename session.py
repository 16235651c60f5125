# Review-round learning session shared by the memorize and practice modes.
#
# A session walks a randomly sampled pool of words. Items the learner gets
# wrong are collected in ``missed``; when the pool is exhausted the missed
# items become the next round's pool, until a round passes with no misses.

import enum
import logging
import random
from typing import Any, Callable, List, Optional, Sequence

from errors import SessionStateError, ValidationError
from wordlist import Word

logger = logging.getLogger(__name__)

# (learner response, current word) -> correct?
Evaluator = Callable[[Any, Word], bool]


class Phase(enum.Enum):
    NOT_STARTED = "not_started"
    PROMPT = "prompt"
    FEEDBACK = "feedback"
    COMPLETED = "completed"


def recognition_evaluator(response: Any, word: Word) -> bool:
    """Memorize mode: the response is the learner's own "I know it" flag."""
    return bool(response)


def spelling_evaluator(response: Any, word: Word) -> bool:
    """Practice mode: typed answer must match the word, ignoring case and outer whitespace."""
    return str(response or "").strip().lower() == word.word.strip().lower()


class LearningSession:
    """State machine for one learning attempt.

    ``start`` -> (``reveal`` -> ``advance`` | ``mark_mastered``)* -> completed.
    ``reset`` returns to the initial state from anywhere.
    """

    def __init__(self, evaluator: Evaluator, mode: str = "", rng: Optional[random.Random] = None):
        self.evaluator = evaluator
        self.mode = mode
        self._rng = rng or random.Random()
        self.reset()

    # ---- state -------------------------------------------------------

    def reset(self) -> None:
        self.pool: List[Word] = []
        self.cursor = 0
        self.missed: List[Word] = []
        self.round_history: List[List[Word]] = []
        self.round_number = 0
        self.completed = False
        self.phase = Phase.NOT_STARTED
        self.last_correct: Optional[bool] = None
        self.last_response: Any = None
        self._flagged_current = False

    @property
    def current_word(self) -> Optional[Word]:
        if self.phase in (Phase.PROMPT, Phase.FEEDBACK):
            return self.pool[self.cursor]
        return None

    @property
    def position(self) -> int:
        """1-based index of the current item within the round."""
        return self.cursor + 1

    @property
    def pool_size(self) -> int:
        return len(self.pool)

    @property
    def is_review_round(self) -> bool:
        return self.round_number > 0

    def _require(self, *phases: Phase) -> None:
        if self.phase not in phases:
            allowed = ", ".join(p.value for p in phases)
            raise SessionStateError(f"操作无效：当前状态 {self.phase.value}，需要 {allowed}")

    # ---- transitions -------------------------------------------------

    def start(self, sample_size: int, source_words: Sequence[Word]) -> None:
        """Sample ``sample_size`` words and begin the first round."""
        words = list(source_words or [])
        if not words:
            raise ValidationError("请先上传单词文件")
        if sample_size < 1:
            raise ValidationError("单词数量至少为 1")
        if sample_size > len(words):
            raise ValidationError(f"单词数量不能超过{len(words)}个")

        pool = self._rng.sample(words, sample_size)
        self.reset()
        self.pool = pool
        self.phase = Phase.PROMPT
        logger.info("Started %s session with %d of %d words", self.mode or "learning", sample_size, len(words))

    def reveal(self, response: Any) -> bool:
        """Show feedback for the current item; record it as missed when incorrect."""
        self._require(Phase.PROMPT)
        word = self.pool[self.cursor]
        correct = bool(self.evaluator(response, word))
        if not correct:
            self.missed.append(word)
        self._flagged_current = not correct
        self.last_correct = correct
        self.last_response = response
        self.phase = Phase.FEEDBACK
        return correct

    def advance(self) -> None:
        """Move to the next item, the next review round, or completion."""
        self._require(Phase.FEEDBACK)
        self.last_correct = None
        self.last_response = None
        self._flagged_current = False

        if self.cursor < len(self.pool) - 1:
            self.cursor += 1
            self.phase = Phase.PROMPT
            return

        if self.missed:
            self.round_history.append(list(self.missed))
            self.pool = self.missed
            self.missed = []
            self.cursor = 0
            self.round_number += 1
            self.phase = Phase.PROMPT
            logger.debug("Review round %d with %d words", self.round_number, len(self.pool))
            return

        self.completed = True
        self.phase = Phase.COMPLETED
        logger.info("%s session completed after %d review rounds", self.mode or "learning", self.round_number)

    def mark_mastered(self) -> None:
        """Override: the learner now knows the current item, so it skips the next review pass."""
        self._require(Phase.FEEDBACK)
        if self._flagged_current:
            # only this showing's entry; earlier duplicates of the word stay
            self.missed.pop()
        self.advance()


def memorize_session(rng: Optional[random.Random] = None) -> LearningSession:
    return LearningSession(recognition_evaluator, mode="memorize", rng=rng)


def practice_session(rng: Optional[random.Random] = None) -> LearningSession:
    return LearningSession(spelling_evaluator, mode="practice", rng=rng)
