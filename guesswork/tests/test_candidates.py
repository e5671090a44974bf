"""
guesswork/tests/test_candidates.py

"""

import pickle
import threading
import time
import unittest

import numpy as np

from guesswork.candidates import (
    CandidateSet,
    CandidateSetBuilder,
    ScoreCache,
    make_np_array_words,
    score_block,
)
from guesswork.errors import (
    EmptyCandidateSetError,
    InconsistentWordLengthError,
    MissingArgumentError,
)
from guesswork.matcher import match
from guesswork.word import Word

SCENARIO = ("rebus", "redux", "route", "hello")


def w(text: str) -> Word:
    return Word.from_text(text)


def scenario_set(**kwargs) -> CandidateSet:
    return CandidateSetBuilder(nproc=1, **kwargs).add_text(*SCENARIO).build()


# =============================================================================
# Builder
# =============================================================================

class TestCandidateSetBuilder(unittest.TestCase):
    def test_empty_build(self) -> None:
        assert CandidateSetBuilder().build() is None, (
            "An empty builder gives no result, not an empty set"
        )

    def test_inconsistent_lengths(self) -> None:
        builder = CandidateSetBuilder().add_text("apple", "orange")
        assert not builder.is_consistent(5)
        with self.assertRaises(InconsistentWordLengthError) as cm:
            builder.build()
        assert cm.exception.lengths == {5, 6}

    def test_duplicates(self) -> None:
        cs = CandidateSetBuilder().add_text("apple", "apple", "maple").build()
        assert len(cs) == 2

    def test_add_all_skips_none(self) -> None:
        builder = CandidateSetBuilder().add_all([w("apple"), None, w("maple")])
        assert len(builder) == 2
        with self.assertRaises(MissingArgumentError):
            builder.add_all(None)
        with self.assertRaises(MissingArgumentError):
            builder.add(None)

    def test_filter(self) -> None:
        builder = CandidateSetBuilder().add_text(*SCENARIO)
        filtered = builder.filter(match(w("rebus"), w("route")))
        assert filtered is not builder
        assert len(builder) == 4, "Filtering does not alter the source"
        assert sorted(x.text for x in filtered.build()) == ["rebus", "redux"]
        with self.assertRaises(MissingArgumentError):
            builder.filter(None)

    def test_of_inherits_settings(self) -> None:
        cs = CandidateSetBuilder(nproc=3, parallel_threshold=7) \
            .add_text(*SCENARIO).build()
        derived = CandidateSetBuilder.of(cs).build()
        assert derived == cs
        assert derived.nproc == 3 and derived.parallel_threshold == 7
        with self.assertRaises(MissingArgumentError):
            CandidateSetBuilder.of(None)


# =============================================================================
# CandidateSet
# =============================================================================

class TestCandidateSet(unittest.TestCase):
    def setUp(self) -> None:
        self.cs = scenario_set()

    def test_info(self) -> None:
        assert len(self.cs) == 4
        assert self.cs.size() == 4
        assert self.cs.word_length == 5
        assert w("route") in self.cs
        assert [x.text for x in self.cs] == [
            "hello", "rebus", "redux", "route"
        ], "Iteration is in lexicographic order"

    def test_size_with_constraint(self) -> None:
        c = match(w("rebus"), w("route"))
        assert self.cs.size(c) == 2

    def test_filter(self) -> None:
        c = match(w("rebus"), w("route"))
        filtered = self.cs.filter(c)
        assert filtered.words == frozenset({w("rebus"), w("redux")})
        assert len(self.cs) == 4
        assert filtered.filter(match(w("rebus"), w("rebus"))).ordered == (
            w("rebus"),
        )

    def test_filter_possible(self) -> None:
        cs = CandidateSetBuilder(nproc=1) \
            .add_text("coins", "scion", "paper").build()
        c = match(w("scion"), w("coins"))
        assert str(c) == "Correct: __i__, Misplaced: cons"
        assert cs.filter(c).ordered == (w("scion"), )

    def test_filter_retains_secret(self) -> None:
        for secret in self.cs:
            for guess in self.cs:
                filtered = self.cs.filter(match(secret, guess))
                assert filtered is not None and secret in filtered, (
                    f"Filtering by feedback for guess {guess} lost the "
                    f"secret {secret}"
                )

    def test_scores(self) -> None:
        assert self.cs.score(w("rebus"), w("route")) == 2
        assert self.cs.worst_case_score(w("route")) == 2
        assert self.cs.average_case_score(w("route")) == 1.5

    def test_score_counts_survivors(self) -> None:
        for key in self.cs:
            for guess in self.cs:
                c = match(key, guess)
                expected = sum(1 for m in self.cs if c.test(m))
                assert self.cs.score(key, guess) == expected
                assert expected >= 1, "The key always survives"

    def test_worst_and_average(self) -> None:
        for guess in self.cs:
            scores = [self.cs.score(k, guess) for k in self.cs]
            assert self.cs.worst_case_score(guess) == max(scores)
            assert self.cs.average_case_score(guess) == \
                sum(scores) / len(scores)

    def test_best_guesses(self) -> None:
        # rebus and redux both leave one candidate whatever the secret;
        # rebus comes first.
        assert self.cs.worst_case_score(w("rebus")) == 1
        assert self.cs.worst_case_score(w("redux")) == 1
        assert self.cs.best_worst_case_guess() == w("rebus")
        assert self.cs.best_average_case_guess() == w("rebus")

    def test_best_guess_custom(self) -> None:
        # Any function from Word to an ordered score will do.
        assert self.cs.best_guess(lambda g: -ord(g.get(0))) == w("rebus")
        assert self.cs.best_guess(lambda g: 0) == w("hello")

    def test_ranked_guesses(self) -> None:
        ranked = self.cs.ranked_guesses(self.cs.worst_case_score)
        assert [(g.text, s) for g, s in ranked] == [
            ("rebus", 1), ("redux", 1), ("hello", 2), ("route", 2),
        ]
        assert len(self.cs.ranked_guesses(self.cs.worst_case_score,
                                          top_n=2)) == 2

    def test_score_matrix(self) -> None:
        m = self.cs.score_matrix()
        assert m.shape == (4, 4)
        assert list(np.diag(m)) == [1, 1, 1, 1]
        # rows are keys, columns guesses: key rebus (1), guess route (3)
        assert m[1, 3] == 2

    def test_caching(self) -> None:
        self.cs.worst_case_score(w("route"))
        n = len(self.cs._scores)
        self.cs.worst_case_score(w("route"))
        self.cs.average_case_score(w("route"))
        assert len(self.cs._scores) == n == 4

    def test_filtered_caches_are_fresh(self) -> None:
        self.cs.worst_case_score(w("route"))
        filtered = self.cs.filter(match(w("rebus"), w("route")))
        assert len(filtered._scores) == 0

    def test_pickle(self) -> None:
        self.cs.worst_case_score(w("route"))
        cs2 = pickle.loads(pickle.dumps(self.cs))
        assert cs2 == self.cs
        assert len(cs2._scores) == 0
        assert cs2.worst_case_score(w("route")) == 2

    def test_direct_construction_checks_lengths(self) -> None:
        with self.assertRaises(InconsistentWordLengthError) as cm:
            CandidateSet([w("apple"), w("orange")], nproc=1)
        assert cm.exception.lengths == {5, 6}

    def test_empty_set_errors(self) -> None:
        empty = CandidateSet([], nproc=1)
        with self.assertRaises(EmptyCandidateSetError):
            empty.best_worst_case_guess()
        with self.assertRaises(EmptyCandidateSetError):
            empty.score(w("rebus"), w("route"))
        with self.assertRaises(EmptyCandidateSetError):
            empty.average_case_score(w("route"))


class TestParallelScoring(unittest.TestCase):
    def test_score_block(self) -> None:
        texts = make_np_array_words(list(SCENARIO))
        rows = score_block((texts, ["rebus", "redux"], ["route"]))
        assert rows == [[2, 2]]

    def test_cached_scores_not_recomputed(self) -> None:
        cs = (
            CandidateSetBuilder(nproc=2, parallel_threshold=0)
            .add_text(*SCENARIO)
            .build()
        )
        calls = []
        score_in_parallel = cs._score_in_parallel

        def recording(keys, guesses):
            calls.append((len(keys), len(guesses)))
            score_in_parallel(keys, guesses)

        cs._score_in_parallel = recording
        cs.score_matrix()
        assert cs.best_worst_case_guess() == w("rebus")
        assert cs.best_average_case_guess() == w("rebus")
        cs.ranked_guesses(cs.worst_case_score)
        assert calls == [(4, 4)], (
            f"Pairwise scores were computed in parallel more than once: "
            f"{calls}"
        )

    def test_parallel_matches_serial(self) -> None:
        serial = scenario_set()
        parallel = (
            CandidateSetBuilder(nproc=2, parallel_threshold=0)
            .add_text(*SCENARIO)
            .build()
        )
        assert parallel._use_parallel()
        for guess in serial:
            assert parallel.worst_case_score(guess) == \
                serial.worst_case_score(guess)
            assert parallel.average_case_score(guess) == \
                serial.average_case_score(guess)
        assert parallel.best_worst_case_guess() == w("rebus")
        assert (parallel.score_matrix() == serial.score_matrix()).all()


# =============================================================================
# ScoreCache
# =============================================================================

class TestScoreCache(unittest.TestCase):
    def test_put_if_absent(self) -> None:
        cache = ScoreCache()
        assert cache.put_if_absent("a", 1) == 1
        assert cache.put_if_absent("a", 2) == 1, "Values are never replaced"
        assert cache.get("a") == 1
        assert "a" in cache and len(cache) == 1

    def test_compute_once(self) -> None:
        cache = ScoreCache()
        calls = []
        lock = threading.Lock()
        n_threads = 8
        barrier = threading.Barrier(n_threads)
        results = []

        def compute(key: str) -> int:
            with lock:
                calls.append(key)
            time.sleep(0.05)
            return 42

        def worker() -> None:
            barrier.wait()
            results.append(cache.get_or_compute("k", compute))

        threads = [threading.Thread(target=worker) for _ in range(n_threads)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert calls == ["k"], f"Computed {len(calls)} times, not once"
        assert results == [42] * n_threads

    def test_compute_failure_not_cached(self) -> None:
        cache = ScoreCache()

        def fail(key: str) -> int:
            raise RuntimeError("boom")

        with self.assertRaises(RuntimeError):
            cache.get_or_compute("k", fail)
        assert "k" not in cache
        assert cache.get_or_compute("k", lambda key: 3) == 3
