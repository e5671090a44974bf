"""
guesswork/matcher.py

Feedback: comparing a secret key with a guess, and turning the result into a
constraint on the remaining candidates.

"""

from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from colors import color  # pip install ansicolors

from guesswork.constants import (
    CHAR_ABSENT_OR_REDUNDANT,
    CHAR_CORRECT,
    CHAR_PRESENT_WRONG_LOC,
    CHAR_UNKNOWN_POSITION,
    COLOUR_ABSENT_REDUNDANT,
    COLOUR_PRESENT_RIGHT_LOCATION,
    COLOUR_PRESENT_WRONG_LOCATION,
)
from guesswork.constraint import ALWAYS_FALSE, Constraint
from guesswork.errors import MissingArgumentError
from guesswork.word import IndexedCharacter, Word


# =============================================================================
# Enums
# =============================================================================

class CharFeedback(Enum):
    """
    Possible types of feedback about each character.
    """
    ABSENT_OR_REDUNDANT = 1
    PRESENT_WRONG_LOCATION = 2
    PRESENT_RIGHT_LOCATION = 3

    @property
    def plain_str(self) -> str:
        """
        Plain string representation.
        """
        if self == CharFeedback.ABSENT_OR_REDUNDANT:
            return CHAR_ABSENT_OR_REDUNDANT
        elif self == CharFeedback.PRESENT_WRONG_LOCATION:
            return CHAR_PRESENT_WRONG_LOC
        elif self == CharFeedback.PRESENT_RIGHT_LOCATION:
            return CHAR_CORRECT
        else:
            raise AssertionError("bug")


def colourful_char(x: str, feedback: CharFeedback) -> str:
    """
    Returns a string with ANSI codes to colour the character according to the
    feedback (and then reset afterwards).
    """
    if feedback == CharFeedback.ABSENT_OR_REDUNDANT:
        colour_params = COLOUR_ABSENT_REDUNDANT
    elif feedback == CharFeedback.PRESENT_WRONG_LOCATION:
        colour_params = COLOUR_PRESENT_WRONG_LOCATION
    elif feedback == CharFeedback.PRESENT_RIGHT_LOCATION:
        colour_params = COLOUR_PRESENT_RIGHT_LOCATION
    else:
        raise AssertionError("bug")
    return color(x, **colour_params)


# =============================================================================
# Clue
# =============================================================================

class Clue:
    """
    Represents a guess and the feedback it earned: which letters were in the
    right place, which were present elsewhere, and which were absent (or
    redundant, being surplus to the copies available in the key).
    """
    TYPE = "clue"

    def __init__(self,
                 guess: Word,
                 exact: Mapping[int, str],
                 misplaced: Iterable[IndexedCharacter],
                 absent: Iterable[str],
                 key: Optional[Word] = None) -> None:
        """
        Args:
            guess: the word that was guessed
            exact: position -> character, for exact matches
            misplaced: guess characters (with their guess position) present
                elsewhere in the key
            absent: characters from the remaining guess positions
            key: the key, if known; the key always satisfies its own clue
        """
        self.guess = guess
        self.key = key
        self.exact = dict(sorted(exact.items()))  # type: Dict[int, str]
        self.misplaced = tuple(sorted(
            IndexedCharacter(*ic) for ic in misplaced
        ))  # type: Tuple[IndexedCharacter, ...]
        # Keep first-seen order for display; de-duplicate.
        self.absent = tuple(dict.fromkeys(absent))  # type: Tuple[str, ...]
        self._absent_set = frozenset(self.absent)

    # -------------------------------------------------------------------------
    # Thinking: checking a candidate against a clue
    # -------------------------------------------------------------------------

    def test(self, word: Word) -> bool:
        """
        Key thinking function: is this candidate compatible with the clue?

        - The key itself is always compatible.
        - Every exact match must be present at its position.
        - Every misplaced character must be present, somewhere other than
          where it was guessed.
        - No absent character may be present anywhere.
        """
        if len(word) != len(self.guess):
            return False
        if self.key is not None and word == self.key:
            return True
        for position, character in self.exact.items():
            if not word.matches_at(position, character):
                return False
        for ic in self.misplaced:
            if not word.contains_elsewhere(ic):
                return False
        if self._absent_set.intersection(word.charset):
            return False
        return True

    def to_constraint(self) -> Constraint:
        """
        The constraint expressed by this clue.
        """
        return Constraint.from_terms((self, ), self.pattern)

    # -------------------------------------------------------------------------
    # Per-position feedback
    # -------------------------------------------------------------------------

    @property
    def feedback(self) -> Tuple[CharFeedback, ...]:
        """
        Character-by-character feedback for the guess.
        """
        misplaced_positions = set(ic.position for ic in self.misplaced)
        feedback = []  # type: List[CharFeedback]
        for position in range(len(self.guess)):
            if position in self.exact:
                f = CharFeedback.PRESENT_RIGHT_LOCATION
            elif position in misplaced_positions:
                f = CharFeedback.PRESENT_WRONG_LOCATION
            else:
                f = CharFeedback.ABSENT_OR_REDUNDANT
            feedback.append(f)
        return tuple(feedback)

    @property
    def char_feedback_pairs(self) -> Tuple[Tuple[str, CharFeedback], ...]:
        return tuple(zip(self.guess.text, self.feedback))

    def correct(self) -> bool:
        """
        Was the guess correct?
        """
        return len(self.exact) == len(self.guess)

    # -------------------------------------------------------------------------
    # Displays and string representations
    # -------------------------------------------------------------------------

    @property
    def template(self) -> str:
        """
        The exact matches, with unknown positions shown as underscores.
        """
        return "".join(
            self.exact.get(position, CHAR_UNKNOWN_POSITION)
            for position in range(len(self.guess))
        )

    @property
    def pattern(self) -> str:
        """
        Display pattern, e.g. ``Correct: r____, Misplaced: ue, Absent: ot``.
        """
        pattern = f"Correct: {self.template}"
        if self.misplaced:
            letters = "".join(ic.character for ic in self.misplaced)
            pattern += f", Misplaced: {letters}"
        if self.absent:
            pattern += f", Absent: {''.join(self.absent)}"
        return pattern

    @property
    def feedback_str(self) -> str:
        """
        Feedback in our plain string format.
        """
        return "".join(f.plain_str for f in self.feedback)

    @property
    def plain_str(self) -> str:
        """
        Plain string representation.
        """
        return f"{self.guess}/{self.feedback_str}"

    @property
    def colourful_str(self) -> str:
        """
        Colourful string representation.
        """
        return "".join(
            colourful_char(c, f)
            for c, f in self.char_feedback_pairs
        )

    def __str__(self) -> str:
        return self.pattern

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(guess={self.guess!r}, "
            f"exact={self.exact!r}, misplaced={self.misplaced!r}, "
            f"absent={self.absent!r}, key={self.key!r})"
        )

    # -------------------------------------------------------------------------
    # Comparison
    # -------------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Clue):
            return NotImplemented
        return (
            self.guess == other.guess
            and self.key == other.key
            and self.exact == other.exact
            and self.misplaced == other.misplaced
            and self._absent_set == other._absent_set
        )

    def __hash__(self) -> int:
        return hash((self.guess, self.key, self.misplaced, self._absent_set))

    # -------------------------------------------------------------------------
    # Storage
    # -------------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """
        JSON-friendly representation.
        """
        return {
            "type": self.TYPE,
            "guess": self.guess.text,
            "key": self.key.text if self.key is not None else None,
            "exact": [[p, c] for p, c in self.exact.items()],
            "misplaced": [[ic.position, ic.character]
                          for ic in self.misplaced],
            "absent": list(self.absent),
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Clue":
        """
        Reverses :meth:`to_dict`.
        """
        key = d.get("key")
        return cls(
            guess=Word.from_text(d["guess"]),
            exact={int(p): c for p, c in d["exact"]},
            misplaced=[IndexedCharacter(int(p), c) for p, c in d["misplaced"]],
            absent=d["absent"],
            key=Word.from_text(key) if key is not None else None,
        )


# =============================================================================
# Matcher
# =============================================================================

class Matcher:
    """
    Compares a key (the secret) with a guess.
    """

    def __init__(self, key: Word, guess: Word) -> None:
        if key is None:
            raise MissingArgumentError("key")
        if guess is None:
            raise MissingArgumentError("guess")
        self.key = key
        self.guess = guess

    @classmethod
    def of(cls, key: Word, guess: Word) -> "Matcher":
        """
        Binds a key and a guess. Words of different lengths are accepted here;
        see :meth:`match`.
        """
        return cls(key, guess)

    # -------------------------------------------------------------------------
    # The comparison
    # -------------------------------------------------------------------------

    def _compare(self) -> Tuple[Dict[int, str],
                                List[IndexedCharacter],
                                List[str]]:
        """
        Returns exact matches, misplaced guess characters, and absent
        characters.

        Each key position can account for at most one guess position. Exact
        matches claim their key positions first; then each remaining guess
        position, from left to right, claims the first unclaimed key position
        holding the same character. For example, if the key has one E and the
        guess has two Es, both in the wrong place, only the first is marked
        "wrong place"; the second is absent/redundant.
        """
        key = self.key
        guess = self.guess
        n = len(key)
        key_used = [False] * n
        guess_used = [False] * n

        # Prioritize correct locations.
        exact = {}  # type: Dict[int, str]
        for i in range(n):
            if key.get(i) == guess.get(i):
                exact[i] = key.get(i)
                key_used[i] = True
                guess_used[i] = True

        # Then work in sequence.
        misplaced = []  # type: List[IndexedCharacter]
        for i in range(n):
            if guess_used[i]:
                continue
            g_char = guess.get(i)
            for j in range(n):
                if not key_used[j] and key.get(j) == g_char:
                    misplaced.append(IndexedCharacter(i, g_char))
                    key_used[j] = True
                    guess_used[i] = True
                    break

        # Anything left over is absent (or redundant).
        absent = [guess.get(i) for i in range(n) if not guess_used[i]]

        return exact, misplaced, absent

    def clue(self) -> Optional[Clue]:
        """
        The structured feedback, or ``None`` if key and guess differ in length
        (no valid feedback is possible).
        """
        if len(self.key) != len(self.guess):
            return None
        exact, misplaced, absent = self._compare()
        return Clue(self.guess, exact, misplaced, absent, key=self.key)

    def match(self) -> Constraint:
        """
        The constraint that feedback for this guess places on the key. If key
        and guess differ in length, this is :data:`ALWAYS_FALSE`.
        """
        clue = self.clue()
        if clue is None:
            return ALWAYS_FALSE
        return clue.to_constraint()

    def debug_match(self) -> str:
        """
        Detailed match information, for debugging.
        """
        if len(self.key) != len(self.guess):
            return "Size mismatch between key and guess."
        exact, misplaced, absent = self._compare()
        return "\n".join([
            f"Key: {self.key}",
            f"Guess: {self.guess}",
            f"Correct Matches: {exact}",
            f"Misplaced Matches: {[tuple(ic) for ic in misplaced]}",
            f"Absent Letters: {sorted(set(absent))}",
        ])


def match(key: Word, guess: Word) -> Constraint:
    """
    Shorthand for ``Matcher.of(key, guess).match()``.
    """
    return Matcher.of(key, guess).match()


def clue_from_strings(key: str, guess: str) -> Optional[Clue]:
    """
    Shorthand for the clue that ``guess`` earns against ``key``, as text.
    """
    return Matcher.of(Word.from_text(key), Word.from_text(guess)).clue()

