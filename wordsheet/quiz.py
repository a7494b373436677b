"""Quiz session over an imported word list."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional, Sequence

from wordsheet.languages import TRANSLITERATION_CODES
from wordsheet.normalizer import WordEntry

EMPTY_DATASET_MESSAGE = "Dataset contained no valid vocabulary entries."


def _now_ms() -> int:
    return int(time.time() * 1000)


def answer_matches(guess: str, translation: str) -> bool:
    return guess.strip().lower() == translation.strip().lower()


@dataclass(frozen=True)
class UserResponse:
    word: WordEntry
    user_translation: str
    is_correct: bool
    revealed_transliteration: bool
    user_transliteration: Optional[str] = None


@dataclass
class QuizSession:
    """
    Walks the entries in order, one answer per entry.

    ``clock`` returns milliseconds and is injectable for tests. The duration
    is measured from construction to the answer on the last entry.
    """

    entries: Sequence[WordEntry]
    clock: Callable[[], int] = _now_ms
    current_index: int = 0
    is_answered: bool = False
    revealed_transliteration: bool = False
    finished: bool = False
    responses: list[UserResponse] = field(default_factory=list)
    started_at: Optional[int] = None
    ended_at: Optional[int] = None

    def __post_init__(self) -> None:
        if not self.entries:
            raise ValueError(EMPTY_DATASET_MESSAGE)
        self.started_at = self.clock()

    @property
    def current(self) -> Optional[WordEntry]:
        if self.finished:
            return None
        return self.entries[self.current_index]

    def requires_transliteration(self, learning_languages: Iterable[str] = ()) -> bool:
        word = self.current
        if word is not None and word.transliteration:
            return True
        return any(code in TRANSLITERATION_CODES for code in learning_languages)

    def reveal_transliteration(self) -> Optional[str]:
        word = self.current
        if word is None or self.is_answered:
            return None
        self.revealed_transliteration = True
        return word.transliteration

    def answer(self, guess: str, transliteration_guess: Optional[str] = None) -> Optional[UserResponse]:
        """Record an answer for the current entry; a second answer is ignored."""
        word = self.current
        if word is None or self.is_answered:
            return None

        response = UserResponse(
            word=word,
            user_translation=guess,
            is_correct=answer_matches(guess, word.translation),
            revealed_transliteration=self.revealed_transliteration,
            user_transliteration=None if self.revealed_transliteration else (transliteration_guess or None),
        )
        self.responses.append(response)
        self.is_answered = True
        if self.current_index == len(self.entries) - 1:
            self.ended_at = self.clock()
        return response

    def advance(self) -> bool:
        """Move to the next entry. Returns True once the session is complete."""
        if self.finished:
            return True
        if not self.is_answered:
            return False
        if self.current_index >= len(self.entries) - 1:
            self.finished = True
            return True
        self.current_index += 1
        self.is_answered = False
        self.revealed_transliteration = False
        return False

    @property
    def accuracy(self) -> int:
        if not self.responses:
            return 0
        correct = sum(1 for response in self.responses if response.is_correct)
        # halves round up
        return int(correct * 100 / len(self.responses) + 0.5)

    @property
    def mistakes(self) -> list[UserResponse]:
        return [response for response in self.responses if not response.is_correct]

    @property
    def duration_ms(self) -> int:
        if self.started_at is None or self.ended_at is None:
            return 0
        return self.ended_at - self.started_at
