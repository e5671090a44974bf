"""
guesswork/tests/test_word.py

"""

import pickle
import unittest

from guesswork.errors import InvalidCharacterError, MissingArgumentError
from guesswork.word import IndexedCharacter, Word


class TestWordCreation(unittest.TestCase):
    def test_from_text(self) -> None:
        w = Word.from_text("apple")
        assert w.length() == 5
        assert len(w) == 5
        assert str(w) == "apple"
        assert w.text == "apple"
        assert w == Word.from_characters(["a", "p", "p", "l", "e"])

    def test_empty_word(self) -> None:
        w = Word.from_text("")
        assert w.length() == 0
        assert list(w) == []

    def test_null_character(self) -> None:
        with self.assertRaises(InvalidCharacterError) as cm:
            Word.from_characters(["a", "b", None, "d"])
        assert cm.exception.index == 2, (
            f"Expected offending index 2, got {cm.exception.index}"
        )
        assert "index: 2" in str(cm.exception)

    def test_non_character(self) -> None:
        with self.assertRaises(InvalidCharacterError) as cm:
            Word.from_characters(["a", "bc"])
        assert cm.exception.index == 1
        with self.assertRaises(ValueError):
            Word.from_characters([1, 2])

    def test_constructor_validates(self) -> None:
        with self.assertRaises(InvalidCharacterError) as cm:
            Word(["ab", "c"])
        assert cm.exception.index == 0
        with self.assertRaises(InvalidCharacterError):
            Word(["a", None])
        with self.assertRaises(MissingArgumentError):
            Word(None)
        assert Word(["a", "b"]).text == "ab"

    def test_missing_text(self) -> None:
        with self.assertRaises(MissingArgumentError):
            Word.from_text(None)
        with self.assertRaises(TypeError):
            Word.from_characters(None)

    def test_immutable(self) -> None:
        w = Word.from_text("apple")
        with self.assertRaises(AttributeError):
            w._text = "pears"
        with self.assertRaises(AttributeError):
            del w._chars


class TestWordAccess(unittest.TestCase):
    def setUp(self) -> None:
        self.w = Word.from_text("hello")

    def test_get(self) -> None:
        assert self.w.get(0) == "h"
        assert self.w.get(4) == "o"
        assert self.w[1] == "e"
        with self.assertRaises(IndexError):
            self.w.get(5)
        with self.assertRaises(IndexError):
            self.w.get(-1)

    def test_contains(self) -> None:
        assert self.w.contains_anywhere("l")
        assert not self.w.contains_anywhere("z")
        assert "o" in self.w
        assert self.w.charset == frozenset("helo")

    def test_matches_at(self) -> None:
        assert self.w.matches_at(2, "l")
        assert not self.w.matches_at(0, "e")
        assert self.w.matches(IndexedCharacter(3, "l"))

    def test_contains_elsewhere(self) -> None:
        assert self.w.contains_elsewhere_than(0, "e"), (
            "e is at position 1, so it is elsewhere than position 0"
        )
        assert not self.w.contains_elsewhere_than(1, "e"), (
            "e is only at position 1"
        )
        assert not self.w.contains_elsewhere_than(0, "z")
        assert self.w.contains_elsewhere(IndexedCharacter(4, "h"))

    def test_iteration(self) -> None:
        pairs = list(self.w)
        assert pairs == [
            IndexedCharacter(0, "h"),
            IndexedCharacter(1, "e"),
            IndexedCharacter(2, "l"),
            IndexedCharacter(3, "l"),
            IndexedCharacter(4, "o"),
        ]
        assert pairs[1].position == 1 and pairs[1].character == "e"
        # Restartable
        assert list(self.w) == pairs

    def test_iteration_exhausted(self) -> None:
        it = iter(Word.from_text("ab"))
        next(it)
        next(it)
        with self.assertRaises(StopIteration):
            next(it)


class TestWordComparison(unittest.TestCase):
    def test_equality_and_hash(self) -> None:
        a = Word.from_text("route")
        b = Word.from_characters(list("route"))
        assert a == b
        assert hash(a) == hash(b)
        assert a != Word.from_text("rouge")
        assert len({a, b}) == 1

    def test_ordering(self) -> None:
        words = [Word.from_text(t) for t in ("route", "hello", "rebus")]
        assert [w.text for w in sorted(words)] == ["hello", "rebus", "route"]
        assert Word.from_text("abc") < Word.from_text("abd")
        assert Word.from_text("abd") >= Word.from_text("abc")

    def test_pickle(self) -> None:
        w = Word.from_text("redux")
        w2 = pickle.loads(pickle.dumps(w))
        assert w2 == w
        assert w2.charset == w.charset
        assert repr(w2) == "Word('redux')"
