"""
guesswork/wordlist.py

Reading word lists into candidate sets.

"""

import logging
import re
from typing import List, Optional, Pattern, Set

from guesswork.candidates import CandidateSet, CandidateSetBuilder
from guesswork.constants import (
    DEFAULT_NPROC,
    DEFAULT_PARALLEL_THRESHOLD,
    DEFAULT_WORD_LENGTH,
    DEFAULT_WORDS,
)
from guesswork.word import Word

log = logging.getLogger(__name__)


def word_regex(word_length: int) -> Pattern:
    """
    Regular expression for an alphabetic word of the given length.
    """
    return re.compile(rf"^[A-Z]{{{word_length}}}$", re.IGNORECASE)


def make_wordlist(from_filename: str,
                  to_filename: str,
                  word_length: int = DEFAULT_WORD_LENGTH) -> int:
    """
    Reads a dictionary file and creates a list of unique lower-case words of
    the given length. Returns the number of words written.
    """
    log.info(f"Reading from {from_filename}")
    log.info(f"Writing to {to_filename}")
    regex = word_regex(word_length)
    n_read = 0
    n_written = 0
    seen = set()  # type: Set[str]
    with open(from_filename, "rt") as f, open(to_filename, "wt") as t:
        for line in f:
            n_read += 1
            word = line.strip()
            if regex.match(word):
                lowercase_word = word.lower()
                if lowercase_word not in seen:
                    t.write(lowercase_word + "\n")
                    seen.add(lowercase_word)
                    n_written += 1
    log.info(f"Read {n_read} words from {from_filename}")
    log.info(f"Wrote {n_written} ({word_length}-letter) words to "
             f"{to_filename}")
    return n_written


def read_words(wordlist_filename: str,
               max_n: int = None) -> List[str]:
    """
    Read all words, one per line, skipping blank lines.
    """
    words = []  # type: List[str]
    with open(wordlist_filename) as f:
        for line in f:
            word = line.strip()
            if not word:
                continue
            words.append(word)
            if max_n is not None and len(words) >= max_n:
                log.warning(f"Reading only {len(words)} words")
                break
    return words


def load_candidates(
        wordlist_filename: str,
        word_length: int = DEFAULT_WORD_LENGTH,
        max_n: int = None,
        nproc: int = DEFAULT_NPROC,
        parallel_threshold: int = DEFAULT_PARALLEL_THRESHOLD) \
        -> Optional[CandidateSet]:
    """
    Reads a word list and returns the (lower-cased) words of the requested
    length as a candidate set, or ``None`` if there are none.

    Args:
        wordlist_filename: file with one word per line
        word_length: keep only words of this length
        max_n: stop after this many accepted words
        nproc: passed to the candidate set
        parallel_threshold: passed to the candidate set
    """
    builder = CandidateSetBuilder(nproc=nproc,
                                  parallel_threshold=parallel_threshold)
    n_read = 0
    for text in read_words(wordlist_filename):
        n_read += 1
        text = text.lower()
        if len(text) != word_length:
            continue
        builder.add(Word.from_text(text))
        if max_n is not None and len(builder) >= max_n:
            log.warning(f"Using only {len(builder)} words")
            break
    log.info(f"Read {n_read} words from {wordlist_filename}; "
             f"{len(builder)} unique words of length {word_length}")
    return builder.build()


def default_candidates(
        nproc: int = DEFAULT_NPROC,
        parallel_threshold: int = DEFAULT_PARALLEL_THRESHOLD) -> CandidateSet:
    """
    Small built-in candidate set, for when no word list is available.
    """
    return (
        CandidateSetBuilder(nproc=nproc, parallel_threshold=parallel_threshold)
        .add_text(*DEFAULT_WORDS)
        .build()
    )
