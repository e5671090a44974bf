"""
guesswork/constraint.py

Named, composable boolean tests over words.

A constraint built from feedback keeps the structured terms (clues) it was
derived from, so that it can be stored and rebuilt without losing its test. A
constraint built from an arbitrary predicate cannot be stored that way: if it is
pickled and restored, it no longer knows its test and accepts every word.

"""

import logging
from typing import Any, Callable, Dict, Optional, Tuple

from guesswork.constants import (
    EMPTY_PATTERN_PLACEHOLDER,
    IMPOSSIBLE_PATTERN,
)
from guesswork.errors import MissingArgumentError
from guesswork.word import Word

log = logging.getLogger(__name__)

PREDICATE_TYPE = Callable[[Word], bool]


# =============================================================================
# Terms
# =============================================================================

class NeverTerm:
    """
    Structured term that no word satisfies. Used for feedback that cannot
    exist, e.g. from a key and guess of different lengths.
    """
    TYPE = "never"

    pattern = IMPOSSIBLE_PATTERN

    @staticmethod
    def test(word: Word) -> bool:
        return False

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.TYPE}

    def __eq__(self, other: object) -> bool:
        return isinstance(other, NeverTerm)

    def __hash__(self) -> int:
        return hash(self.TYPE)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


def _conjunction(terms: Tuple[Any, ...]) -> PREDICATE_TYPE:
    """
    Predicate requiring every term to accept the word.
    """
    def predicate(word: Word) -> bool:
        return all(term.test(word) for term in terms)
    return predicate


def _join_patterns(first: str, second: str) -> str:
    if first and second:
        return f"{first} AND {second}"
    return first or second


# =============================================================================
# Constraint
# =============================================================================

class Constraint:
    """
    A boolean test over a :class:`Word`, with a human-readable pattern
    describing it.
    """

    def __init__(self,
                 predicate: PREDICATE_TYPE,
                 pattern: str = "",
                 terms: Optional[Tuple[Any, ...]] = None) -> None:
        """
        Args:
            predicate: the test
            pattern: display string summarizing the test
            terms: structured terms whose conjunction is equivalent to the
                predicate, if known; each has ``test(word)`` and ``to_dict()``
        """
        if predicate is None:
            raise MissingArgumentError("predicate")
        self._predicate = predicate  # type: Optional[PREDICATE_TYPE]
        self._pattern = pattern or ""
        self._terms = tuple(terms) if terms is not None else None

    # -------------------------------------------------------------------------
    # Creation
    # -------------------------------------------------------------------------

    @classmethod
    def from_predicate(cls, predicate: PREDICATE_TYPE,
                       pattern: str = "") -> "Constraint":
        """
        Creates a constraint from an arbitrary predicate. Such a constraint
        cannot be rebuilt after pickling.
        """
        return cls(predicate, pattern)

    @classmethod
    def from_terms(cls, terms: Tuple[Any, ...],
                   pattern: Optional[str] = None) -> "Constraint":
        """
        Creates a constraint accepting words that satisfy every term. The
        pattern defaults to the terms' patterns, joined with "AND".
        """
        terms = tuple(terms)
        if pattern is None:
            pattern = ""
            for term in terms:
                pattern = _join_patterns(pattern, term.pattern)
        return cls(_conjunction(terms), pattern, terms)

    @classmethod
    def restored(cls, pattern: str,
                 terms: Optional[Tuple[Any, ...]]) -> "Constraint":
        """
        Rebuilds a stored constraint from its pattern and structured terms.
        Without terms, the test is unknown and the constraint accepts every
        word.
        """
        c = cls.__new__(cls)
        c._pattern = pattern or ""
        c._terms = tuple(terms) if terms is not None else None
        if c._terms is not None:
            c._predicate = _conjunction(c._terms)
        else:
            log.debug(f"Restored constraint {c._pattern!r} without a test")
            c._predicate = None
        return c

    # -------------------------------------------------------------------------
    # Testing
    # -------------------------------------------------------------------------

    def test(self, word: Word) -> bool:
        """
        Does the word satisfy this constraint?

        A constraint whose predicate was lost (see module docstring) accepts
        everything.
        """
        if self._predicate is None:
            log.warning(f"Constraint {self} has lost its test; "
                        f"accepting {word}")
            return True
        return self._predicate(word)

    def __call__(self, word: Word) -> bool:
        return self.test(word)

    # -------------------------------------------------------------------------
    # Combination
    # -------------------------------------------------------------------------

    def and_(self, other: Optional["Constraint"]) -> "Constraint":
        """
        Logical AND with another constraint. If ``other`` is ``None``, returns
        this constraint unchanged.
        """
        if other is None:
            return self
        pattern = _join_patterns(self._pattern, other._pattern)
        if self._terms is not None and other._terms is not None:
            terms = self._terms + other._terms
        else:
            terms = None

        def predicate(word: Word) -> bool:
            return self.test(word) and other.test(word)

        return Constraint(predicate, pattern, terms)

    def __and__(self, other: "Constraint") -> "Constraint":
        if not isinstance(other, Constraint):
            return NotImplemented
        return self.and_(other)

    def with_pattern(self, pattern: str) -> "Constraint":
        """
        Returns a constraint with the same test but a different pattern.
        """
        # Not via __init__: the predicate may have been lost.
        c = self.__class__.__new__(self.__class__)
        c._predicate = self._predicate
        c._pattern = pattern or ""
        c._terms = self._terms
        return c

    # -------------------------------------------------------------------------
    # Info
    # -------------------------------------------------------------------------

    @property
    def pattern(self) -> str:
        return self._pattern

    @property
    def terms(self) -> Optional[Tuple[Any, ...]]:
        """
        The structured terms, or ``None`` for a constraint built from an
        arbitrary predicate.
        """
        return self._terms

    @property
    def is_structured(self) -> bool:
        """
        Can this constraint be stored and rebuilt exactly?
        """
        return self._terms is not None

    @property
    def has_lost_predicate(self) -> bool:
        return self._predicate is None

    # -------------------------------------------------------------------------
    # Pickling
    # -------------------------------------------------------------------------

    def __getstate__(self) -> Dict[str, Any]:
        # Functions (closures, lambdas) don't survive pickling.
        return {"pattern": self._pattern, "terms": self._terms}

    def __setstate__(self, state: Dict[str, Any]) -> None:
        c = self.restored(state["pattern"], state["terms"])
        self._pattern = c._pattern
        self._terms = c._terms
        self._predicate = c._predicate

    # -------------------------------------------------------------------------
    # Displays and string representations
    # -------------------------------------------------------------------------

    def __str__(self) -> str:
        return self._pattern or EMPTY_PATTERN_PLACEHOLDER

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._pattern!r})"


# =============================================================================
# The impossible constraint
# =============================================================================

NEVER_TERM = NeverTerm()

ALWAYS_FALSE = Constraint.from_terms((NEVER_TERM, ))
