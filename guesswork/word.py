"""
guesswork/word.py

Immutable fixed-length words, with positional access.

"""

from functools import total_ordering
from typing import FrozenSet, Iterator, NamedTuple, Sequence, Tuple

from guesswork.errors import InvalidCharacterError, MissingArgumentError


# =============================================================================
# IndexedCharacter
# =============================================================================

class IndexedCharacter(NamedTuple):
    """
    A character at a specific (zero-based) position in a word.
    """
    position: int
    character: str


# =============================================================================
# Word
# =============================================================================

@total_ordering
class Word:
    """
    Represents a word: an immutable sequence of characters.

    Words compare equal when their characters are identical, position for
    position, and are ordered lexicographically by their text. Instances are
    never modified after construction, so may be shared freely between threads.
    """
    __slots__ = ("_chars", "_charset", "_text", "_hash")

    def __init__(self, characters: Sequence[str]) -> None:
        """
        Args:
            characters: sequence of single characters

        Raises:
            MissingArgumentError: if ``characters`` is ``None``
            InvalidCharacterError: if any element is ``None`` or is not a
                single character; the exception knows the offending index
        """
        if characters is None:
            raise MissingArgumentError("characters")
        chars = tuple(characters)
        for index, c in enumerate(chars):
            if c is None:
                raise InvalidCharacterError(index)
            if not isinstance(c, str) or len(c) != 1:
                raise InvalidCharacterError(index, c)
        object.__setattr__(self, "_chars", chars)
        object.__setattr__(self, "_charset", frozenset(chars))
        object.__setattr__(self, "_text", "".join(chars))
        object.__setattr__(self, "_hash", hash(chars))

    # -------------------------------------------------------------------------
    # Creation
    # -------------------------------------------------------------------------

    @classmethod
    def from_characters(cls, characters: Sequence[str]) -> "Word":
        """
        Creates a word from a sequence of single characters (see
        :meth:`__init__`).
        """
        return cls(characters)

    @classmethod
    def from_text(cls, text: str) -> "Word":
        """
        Creates a word from a string.
        """
        if text is None:
            raise MissingArgumentError("text")
        return cls.from_characters(list(text))

    # -------------------------------------------------------------------------
    # Immutability and pickling
    # -------------------------------------------------------------------------

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError(f"{self.__class__.__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{self.__class__.__name__} is immutable")

    def __reduce__(self) -> Tuple[type, Tuple[Tuple[str, ...]]]:
        return self.__class__, (self._chars, )

    # -------------------------------------------------------------------------
    # Access
    # -------------------------------------------------------------------------

    @property
    def text(self) -> str:
        """
        The characters, concatenated.
        """
        return self._text

    @property
    def charset(self) -> FrozenSet[str]:
        """
        The distinct characters of the word.
        """
        return self._charset

    def length(self) -> int:
        """
        Number of characters.
        """
        return len(self._chars)

    def __len__(self) -> int:
        return len(self._chars)

    def get(self, index: int) -> str:
        """
        Returns the character at a zero-based position.

        Raises:
            IndexError: if ``index`` is outside ``[0, length)``; negative
                indices are not accepted
        """
        if not 0 <= index < len(self._chars):
            raise IndexError(
                f"Index {index} out of range for word of length "
                f"{len(self._chars)}")
        return self._chars[index]

    def __getitem__(self, index: int) -> str:
        return self.get(index)

    # -------------------------------------------------------------------------
    # Character tests
    # -------------------------------------------------------------------------

    def contains_anywhere(self, character: str) -> bool:
        """
        Is the character present at any position?
        """
        return character in self._charset

    def __contains__(self, character: str) -> bool:
        return character in self._charset

    def matches_at(self, position: int, character: str) -> bool:
        """
        Is this character at this position?
        """
        return self.get(position) == character

    def matches(self, ic: IndexedCharacter) -> bool:
        """
        As for :meth:`matches_at`, for an :class:`IndexedCharacter`.
        """
        return self.matches_at(ic.position, ic.character)

    def contains_elsewhere_than(self, position: int, character: str) -> bool:
        """
        Is the character in the word, but not at this position? This is how a
        misplaced letter is recognized.
        """
        return (
            character in self._charset
            and not self.matches_at(position, character)
        )

    def contains_elsewhere(self, ic: IndexedCharacter) -> bool:
        """
        As for :meth:`contains_elsewhere_than`, for an
        :class:`IndexedCharacter`.
        """
        return self.contains_elsewhere_than(ic.position, ic.character)

    # -------------------------------------------------------------------------
    # Iteration
    # -------------------------------------------------------------------------

    def __iter__(self) -> Iterator[IndexedCharacter]:
        """
        Iterates through (position, character) pairs. Each call starts afresh.
        """
        for position, character in enumerate(self._chars):
            yield IndexedCharacter(position, character)

    # -------------------------------------------------------------------------
    # Comparison
    # -------------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, Word):
            return NotImplemented
        return self._chars == other._chars

    def __lt__(self, other: "Word") -> bool:
        if not isinstance(other, Word):
            return NotImplemented
        return self._text < other._text

    def __hash__(self) -> int:
        return self._hash

    # -------------------------------------------------------------------------
    # Displays and string representations
    # -------------------------------------------------------------------------

    def __str__(self) -> str:
        return self._text

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._text!r})"
