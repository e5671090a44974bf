"""
guesswork/tests/test_wordlist.py

"""

import os
import tempfile
import unittest

from guesswork.constants import DEFAULT_WORDS
from guesswork.wordlist import (
    default_candidates,
    load_candidates,
    make_wordlist,
    read_words,
    word_regex,
)


class TestWordlist(unittest.TestCase):
    def setUp(self) -> None:
        self.tempdir = tempfile.TemporaryDirectory()
        self.dict_filename = os.path.join(self.tempdir.name, "words")
        self.list_filename = os.path.join(self.tempdir.name, "five.txt")
        with open(self.dict_filename, "wt") as f:
            f.write("\n".join([
                "Apple", "apple", "orange", "pears", "it's", "", "ROUTE",
                "a", "hello",
            ]) + "\n")

    def tearDown(self) -> None:
        self.tempdir.cleanup()

    def test_word_regex(self) -> None:
        regex = word_regex(5)
        assert regex.match("Apple")
        assert not regex.match("apples")
        assert not regex.match("it's")

    def test_make_wordlist(self) -> None:
        n = make_wordlist(self.dict_filename, self.list_filename)
        assert n == 4
        assert read_words(self.list_filename) == [
            "apple", "pears", "route", "hello"
        ]

    def test_make_wordlist_other_length(self) -> None:
        n = make_wordlist(self.dict_filename, self.list_filename,
                          word_length=6)
        assert n == 1
        assert read_words(self.list_filename) == ["orange"]

    def test_read_words(self) -> None:
        words = read_words(self.dict_filename)
        assert "" not in words
        assert len(words) == 8
        assert read_words(self.dict_filename, max_n=2) == ["Apple", "apple"]

    def test_load_candidates(self) -> None:
        cs = load_candidates(self.dict_filename, nproc=1)
        assert [w.text for w in cs] == [
            "apple", "hello", "pears", "route"
        ], "Lower-cased, de-duplicated, of the right length"
        assert cs.nproc == 1
        assert len(load_candidates(self.dict_filename, max_n=2)) == 2
        assert load_candidates(self.dict_filename, word_length=9) is None

    def test_default_candidates(self) -> None:
        cs = default_candidates(nproc=1)
        assert sorted(w.text for w in cs) == sorted(DEFAULT_WORDS)
