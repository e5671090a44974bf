"""
guesswork/candidates.py

Candidate sets: the words that might still be the secret, with scoring of
potential guesses and searches for the best one.

Scoring
-------

- ``score(key, guess)`` is the number of candidates that would survive if
  ``key`` were the secret and ``guess`` were played.
- The worst-case score of a guess is the largest such number over all keys:
  the size of the set left by the least helpful feedback.
- The average-case score is the mean over all keys (every candidate being
  equally likely to be the secret).

Choosing a guess needs every pairwise score, so is O(n^2) matches, each
costing O(n) to count survivors. Scores are cached per candidate set, and large
sets are scored across several processes.

Searches visit candidates in lexicographic order and keep the first minimum
found, so ties go to the alphabetically first word.

"""

from concurrent.futures import Future, ProcessPoolExecutor
from itertools import chain
import logging
from math import ceil
from statistics import mean
import threading
from typing import (
    Any, Callable, Dict, FrozenSet, Hashable, Iterable, Iterator, List,
    Optional, Sequence, Set, Tuple, TypeVar, Union
)

from cardinal_pythonlib.lists import chunks
import numpy as np

from guesswork.constants import (
    DEFAULT_CHUNKS_PER_WORKER,
    DEFAULT_NPROC,
    DEFAULT_PARALLEL_THRESHOLD,
)
from guesswork.constraint import Constraint
from guesswork.errors import (
    EmptyCandidateSetError,
    InconsistentWordLengthError,
    MissingArgumentError,
)
from guesswork.matcher import match
from guesswork.utils import time_section
from guesswork.word import Word

log = logging.getLogger(__name__)

T = TypeVar("T")
CRITERION_TYPE = Callable[[Word], Union[int, float]]


# =============================================================================
# Helper functions
# =============================================================================

def make_np_array_words(words: Sequence[str]) -> np.ndarray:
    """
    Converts to an appropriate Numpy array type, for cheap transfer to worker
    processes.
    """
    width = max((len(w) for w in words), default=1) or 1
    return np.array(words, dtype=f"U{width}")


def count_survivors(members: Iterable[Word], key: Word, guess: Word) -> int:
    """
    How many of ``members`` are compatible with the feedback that ``guess``
    would earn if ``key`` were the secret?
    """
    constraint = match(key, guess)
    return sum(1 for w in members if constraint.test(w))


def score_block(args: Tuple[np.ndarray, Sequence[str], Sequence[str]]) \
        -> List[List[int]]:
    """
    Worker task for parallel scoring.

    The argument is a tuple: member texts, key texts, guess texts.

    Returns one list per guess, giving the score against each key in turn.
    """
    texts, key_texts, guess_texts = args
    members = [Word.from_text(str(t)) for t in texts]
    keys = [Word.from_text(str(k)) for k in key_texts]
    results = []  # type: List[List[int]]
    for g in guess_texts:
        guess = Word.from_text(str(g))
        results.append([count_survivors(members, k, guess) for k in keys])
    return results


# =============================================================================
# ScoreCache
# =============================================================================

class ScoreCache:
    """
    Thread-safe insert-if-absent map. Values are never replaced or evicted.

    :meth:`get_or_compute` computes each key's value at most once: if several
    threads ask for the same missing key together, one computes it and the
    others wait for that result. Different keys are computed concurrently.
    """

    def __init__(self) -> None:
        self._values = {}  # type: Dict[Hashable, Any]
        self._pending = {}  # type: Dict[Hashable, Future]
        self._lock = threading.Lock()

    def __contains__(self, key: Hashable) -> bool:
        return key in self._values

    def __len__(self) -> int:
        return len(self._values)

    def get(self, key: Hashable, default: Any = None) -> Any:
        return self._values.get(key, default)

    def put_if_absent(self, key: Hashable, value: T) -> T:
        """
        Stores the value unless one is already present (or being computed).
        Returns the authoritative value.
        """
        with self._lock:
            if key in self._values:
                return self._values[key]
            pending = self._pending.get(key)
            if pending is None:
                self._values[key] = value
                return value
        return pending.result()

    def get_or_compute(self, key: Hashable,
                       compute: Callable[[Hashable], T]) -> T:
        """
        Returns the cached value, computing and storing it if necessary.
        """
        try:
            return self._values[key]
        except KeyError:
            pass
        with self._lock:
            if key in self._values:
                return self._values[key]
            pending = self._pending.get(key)
            owner = pending is None
            if owner:
                pending = Future()
                self._pending[key] = pending
        if not owner:
            return pending.result()
        try:
            value = compute(key)
        except BaseException as exc:
            with self._lock:
                del self._pending[key]
            pending.set_exception(exc)
            raise
        with self._lock:
            self._values[key] = value
            del self._pending[key]
        pending.set_result(value)
        return value


# =============================================================================
# CandidateSet
# =============================================================================

class CandidateSet:
    """
    An immutable set of words of equal length, with cached scoring.

    Build one with :class:`CandidateSetBuilder`, which validates the words.
    The caches are private to each instance; a filtered set starts afresh.
    """

    def __init__(self,
                 words: Iterable[Word],
                 nproc: int = DEFAULT_NPROC,
                 parallel_threshold: int = DEFAULT_PARALLEL_THRESHOLD) -> None:
        """
        Args:
            words: the members
            nproc: number of processes to use for scoring large sets
            parallel_threshold: sets with fewer members than this are scored
                in-process

        Raises:
            InconsistentWordLengthError: if the words differ in length
        """
        self._words = frozenset(words)  # type: FrozenSet[Word]
        lengths = set(len(w) for w in self._words)
        if len(lengths) > 1:
            raise InconsistentWordLengthError(lengths)
        self._ordered = tuple(sorted(self._words))  # type: Tuple[Word, ...]
        self.nproc = nproc
        self.parallel_threshold = parallel_threshold
        self._init_caches()

    def _init_caches(self) -> None:
        self._scores = ScoreCache()  # (key, guess) -> int
        self._worst_case = ScoreCache()  # guess -> int
        self._average_case = ScoreCache()  # guess -> float

    # -------------------------------------------------------------------------
    # Pickling: members and settings only
    # -------------------------------------------------------------------------

    def __getstate__(self) -> Dict[str, Any]:
        return {
            "words": self._ordered,
            "nproc": self.nproc,
            "parallel_threshold": self.parallel_threshold,
        }

    def __setstate__(self, state: Dict[str, Any]) -> None:
        self._words = frozenset(state["words"])
        self._ordered = tuple(sorted(self._words))
        self.nproc = state["nproc"]
        self.parallel_threshold = state["parallel_threshold"]
        self._init_caches()

    # -------------------------------------------------------------------------
    # Info
    # -------------------------------------------------------------------------

    @property
    def words(self) -> FrozenSet[Word]:
        return self._words

    @property
    def ordered(self) -> Tuple[Word, ...]:
        """
        The members, in lexicographic order; this is the iteration order.
        """
        return self._ordered

    @property
    def word_length(self) -> int:
        """
        The length shared by all members (0 if there are none).
        """
        return len(self._ordered[0]) if self._ordered else 0

    def size(self, constraint: Optional[Constraint] = None) -> int:
        """
        Number of members, or, given a constraint, the number of members that
        satisfy it.
        """
        if constraint is None:
            return len(self._words)
        return sum(1 for w in self._ordered if constraint.test(w))

    def __len__(self) -> int:
        return len(self._words)

    def __contains__(self, word: Word) -> bool:
        return word in self._words

    def __iter__(self) -> Iterator[Word]:
        return iter(self._ordered)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CandidateSet):
            return NotImplemented
        return self._words == other._words

    def __hash__(self) -> int:
        return hash(self._words)

    def __str__(self) -> str:
        return (
            f"{len(self)} candidate(s) of length {self.word_length}"
        )

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}"
            f"({[w.text for w in self._ordered]!r})"
        )

    # -------------------------------------------------------------------------
    # Filtering
    # -------------------------------------------------------------------------

    def filter(self, constraint: Constraint) -> Optional["CandidateSet"]:
        """
        The members satisfying a constraint, as a new set; ``None`` if there
        are none.
        """
        return CandidateSetBuilder.of(self).filter(constraint).build()

    # -------------------------------------------------------------------------
    # Scoring
    # -------------------------------------------------------------------------

    def _require_members(self) -> None:
        if not self._words:
            raise EmptyCandidateSetError()

    def _count_pair(self, pair: Tuple[Word, Word]) -> int:
        key, guess = pair
        return count_survivors(self._ordered, key, guess)

    def score(self, key: Word, guess: Word) -> int:
        """
        Number of members that would remain if ``key`` were the secret and
        ``guess`` were played. Includes ``key`` itself.
        """
        self._require_members()
        return self._scores.get_or_compute((key, guess), self._count_pair)

    def _scores_for_guess(self, guess: Word) -> List[int]:
        """
        Score of a guess against every member as key, in canonical order.
        """
        if self._use_parallel():
            missing = [k for k in self._ordered
                       if (k, guess) not in self._scores]
            if missing:
                self._score_in_parallel(missing, [guess])
        return [self.score(key, guess) for key in self._ordered]

    def worst_case_score(self, guess: Word) -> int:
        """
        The largest number of members that could survive this guess, over
        all possible secrets.
        """
        self._require_members()
        return self._worst_case.get_or_compute(
            guess, lambda g: max(self._scores_for_guess(g)))

    def average_case_score(self, guess: Word) -> float:
        """
        The mean number of members surviving this guess, over all possible
        secrets.
        """
        self._require_members()
        return self._average_case.get_or_compute(
            guess, lambda g: float(mean(self._scores_for_guess(g))))

    def score_matrix(self) -> np.ndarray:
        """
        All pairwise scores: rows are keys, columns are guesses, both in
        canonical order.
        """
        self._require_members()
        self._prime(self._ordered)
        return np.array(
            [[self.score(key, guess) for guess in self._ordered]
             for key in self._ordered],
            dtype=np.int64
        )

    # -------------------------------------------------------------------------
    # Parallel scoring
    # -------------------------------------------------------------------------

    def _use_parallel(self) -> bool:
        return (
            self.nproc > 1
            and len(self._words) >= max(2, self.parallel_threshold)
        )

    def _prime(self, guesses: Sequence[Word]) -> None:
        """
        Fill the pairwise cache for these guesses against every key, in
        parallel, if the set is big enough to warrant it.
        """
        if not self._use_parallel():
            return
        todo = [
            g for g in guesses
            if any((k, g) not in self._scores for k in self._ordered)
        ]
        if todo:
            self._score_in_parallel(list(self._ordered), todo)

    def _score_in_parallel(self, keys: List[Word],
                           guesses: List[Word]) -> None:
        """
        Scores every (key, guess) combination across worker processes, and
        caches the results. Work is split by guess, or by key if there are
        fewer guesses than keys.
        """
        texts = make_np_array_words([w.text for w in self._ordered])
        key_texts = [k.text for k in keys]
        guess_texts = [g.text for g in guesses]
        n_chunks = self.nproc * DEFAULT_CHUNKS_PER_WORKER
        split_by_guess = len(guess_texts) >= len(key_texts)
        to_split = guess_texts if split_by_guess else key_texts
        per_chunk = max(1, ceil(len(to_split) / n_chunks))
        if split_by_guess:
            arglist = [(texts, key_texts, chunk)
                       for chunk in chunks(guess_texts, per_chunk)]
        else:
            arglist = [(texts, chunk, guess_texts)
                       for chunk in chunks(key_texts, per_chunk)]
        log.debug(
            f"Scoring {len(key_texts)} key(s) x {len(guess_texts)} guess(es) "
            f"in {len(arglist)} task(s) across {self.nproc} processes")
        with ProcessPoolExecutor(self.nproc) as executor:
            blocks = list(executor.map(score_block, arglist))
        if split_by_guess:
            columns = list(chain.from_iterable(blocks))
        else:
            columns = [
                list(chain.from_iterable(block[i] for block in blocks))
                for i in range(len(guesses))
            ]
        for guess, column in zip(guesses, columns):
            for key, s in zip(keys, column):
                self._scores.put_if_absent((key, guess), s)

    # -------------------------------------------------------------------------
    # Searching for the best guess
    # -------------------------------------------------------------------------

    def best_guess(self, criterion: CRITERION_TYPE) -> Word:
        """
        The member with the lowest score under ``criterion``. Ties go to the
        first in canonical (lexicographic) order.
        """
        self._require_members()
        best = None  # type: Optional[Word]
        best_score = None
        for guess in self._ordered:
            s = criterion(guess)
            if best is None or s < best_score:
                best = guess
                best_score = s
        return best

    def best_worst_case_guess(self) -> Word:
        """
        The member minimizing the worst-case score.
        """
        self._require_members()
        with time_section(f"Worst-case search over {len(self)} words"):
            self._prime(self._ordered)
            return self.best_guess(self.worst_case_score)

    def best_average_case_guess(self) -> Word:
        """
        The member minimizing the average-case score.
        """
        self._require_members()
        with time_section(f"Average-case search over {len(self)} words"):
            self._prime(self._ordered)
            return self.best_guess(self.average_case_score)

    def ranked_guesses(self, criterion: CRITERION_TYPE,
                       top_n: int = None) -> List[Tuple[Word, Any]]:
        """
        Members with their scores, best (lowest) first; ties in canonical
        order.
        """
        self._require_members()
        self._prime(self._ordered)
        ranked = sorted(
            ((guess, criterion(guess)) for guess in self._ordered),
            key=lambda pair: (pair[1], pair[0])
        )
        return ranked[:top_n] if top_n is not None else ranked


# =============================================================================
# CandidateSetBuilder
# =============================================================================

class CandidateSetBuilder:
    """
    Accumulates words for a :class:`CandidateSet`. Not thread-safe.
    """

    def __init__(self,
                 words: Iterable[Word] = (),
                 nproc: int = DEFAULT_NPROC,
                 parallel_threshold: int = DEFAULT_PARALLEL_THRESHOLD) -> None:
        self._words = set(words)  # type: Set[Word]
        self.nproc = nproc
        self.parallel_threshold = parallel_threshold

    @classmethod
    def of(cls, candidates: CandidateSet) -> "CandidateSetBuilder":
        """
        A builder seeded with the members (and settings) of an existing set.
        """
        if candidates is None:
            raise MissingArgumentError("candidates")
        return cls(candidates.words,
                   nproc=candidates.nproc,
                   parallel_threshold=candidates.parallel_threshold)

    def _derive(self, words: Iterable[Word]) -> "CandidateSetBuilder":
        return self.__class__(words,
                              nproc=self.nproc,
                              parallel_threshold=self.parallel_threshold)

    # -------------------------------------------------------------------------
    # Accumulating
    # -------------------------------------------------------------------------

    def add(self, word: Word) -> "CandidateSetBuilder":
        if word is None:
            raise MissingArgumentError("word")
        self._words.add(word)
        return self

    def add_all(self, words: Iterable[Word]) -> "CandidateSetBuilder":
        """
        Adds every word, skipping any ``None``.
        """
        if words is None:
            raise MissingArgumentError("words")
        self._words.update(w for w in words if w is not None)
        return self

    def add_text(self, *texts: str) -> "CandidateSetBuilder":
        return self.add_all(Word.from_text(t) for t in texts)

    def filter(self, constraint: Constraint) -> "CandidateSetBuilder":
        """
        A new builder holding only the words that satisfy the constraint.
        """
        if constraint is None:
            raise MissingArgumentError("constraint")
        return self._derive(w for w in self._words if constraint.test(w))

    # -------------------------------------------------------------------------
    # Info
    # -------------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._words)

    def is_consistent(self, word_length: int) -> bool:
        """
        Are all the words of this length?
        """
        return all(len(w) == word_length for w in self._words)

    # -------------------------------------------------------------------------
    # Building
    # -------------------------------------------------------------------------

    def build(self) -> Optional[CandidateSet]:
        """
        Returns the candidate set, or ``None`` if there are no words.

        Raises:
            InconsistentWordLengthError: if the words differ in length
        """
        if not self._words:
            return None
        return CandidateSet(self._words,
                            nproc=self.nproc,
                            parallel_threshold=self.parallel_threshold)
