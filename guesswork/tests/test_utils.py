"""
guesswork/tests/test_utils.py

"""

import logging
import unittest

from guesswork.utils import convert_sf, prettylist, time_section
from guesswork.word import Word


class TestUtils(unittest.TestCase):
    def test_prettylist(self) -> None:
        assert prettylist(["a", "b"]) == "a, b"
        assert prettylist(Word.from_text(t) for t in ("rebus", "route")) == \
            "rebus, route"
        assert prettylist([]) == ""

    def test_convert_sf(self) -> None:
        assert convert_sf(None) is None
        assert convert_sf(2) == 2
        assert convert_sf(1.5) == 1.5
        assert convert_sf(1.23456) == 1.23
        assert convert_sf([1, 2.34567]) == [1, 2.35]

    def test_time_section(self) -> None:
        with self.assertLogs("guesswork.utils", level=logging.INFO) as cm:
            with time_section("Something", logging.INFO):
                pass
        assert "Something took" in cm.output[0]
