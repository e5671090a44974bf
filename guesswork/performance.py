"""
guesswork/performance.py

Performance testing framework to compare guess strategies: autoplay every
secret in a word list and record how many guesses each took.

Two parallel methods:

- Ray: batches of secrets are sent to remote tasks. Ray passes Numpy arrays
  (we use ``np.array(words, dtype="U<n>")``) as read-only objects without
  copying them; see
  https://docs.ray.io/en/master/ray-core/serialization.html.

- ProcessPoolExecutor: one secret per call, chunked by ``map``. Threads would
  be slow here, as scoring is CPU-bound and limited by the GIL.

Each autoplay runs with a single process; we parallelize over secrets instead.

"""

import csv
import logging
from concurrent.futures import ProcessPoolExecutor
from statistics import mean, median
from typing import List, Optional, Tuple

from cardinal_pythonlib.lists import chunks
from cardinal_pythonlib.logs import configure_logger_for_colour
import numpy as np
import ray

from guesswork.candidates import (
    CandidateSet,
    CandidateSetBuilder,
    make_np_array_words,
)
from guesswork.constants import (
    DEFAULT_CHUNKS_PER_WORKER,
    DEFAULT_MAX_ROUNDS,
    DEFAULT_NPROC,
    DEFAULT_WORD_LENGTH,
)
from guesswork.errors import EmptyCandidateSetError
from guesswork.game import DEFAULT_STRATEGY, autoplay
from guesswork.utils import time_section
from guesswork.word import Word
from guesswork.wordlist import load_candidates

log = logging.getLogger(__name__)


# =============================================================================
# Workers
# =============================================================================

def candidates_from_array(all_words: np.ndarray) -> CandidateSet:
    """
    Single-process candidate set from a word array.
    """
    return (
        CandidateSetBuilder(nproc=1)
        .add_text(*(str(w) for w in all_words))
        .build()
    )


def autoplay_count(secret: str,
                   candidates: CandidateSet,
                   strategy: str,
                   first_guess: Optional[str] = None,
                   max_rounds: int = DEFAULT_MAX_ROUNDS,
                   log_: logging.Logger = None) -> int:
    """
    Number of guesses taken to find a secret.
    """
    clues = autoplay(
        candidates,
        secret=Word.from_text(secret),
        strategy=strategy,
        first_guess=Word.from_text(first_guess) if first_guess else None,
        max_rounds=max_rounds,
        log_=log_,
    )
    return len(clues)


def autoplay_single_arg(
        args: Tuple[str, np.ndarray, str, Optional[str], int]) -> int:
    """
    Version of :func:`autoplay_count` that takes a single argument, which is
    necessary for some of the parallel processing map functions.

    The argument is a tuple: secret, all_words, strategy, first_guess,
    max_rounds.

    Returns the number of guesses taken.
    """
    secret, all_words, strategy, first_guess, max_rounds = args
    return autoplay_count(secret, candidates_from_array(all_words),
                          strategy, first_guess, max_rounds)


@ray.remote
def autoplay_ray(secrets: List[str],
                 all_words: np.ndarray,
                 strategy: str,
                 first_guess: Optional[str] = None,
                 max_rounds: int = DEFAULT_MAX_ROUNDS,
                 loglevel: int = logging.INFO) -> List[Tuple[str, int]]:
    """
    Ray version. Batched.
    """
    # Each task configures its own logger; a reused worker process gets an
    # extra handler per batch.
    raylog = logging.getLogger(__name__)
    configure_logger_for_colour(raylog, level=loglevel)
    candidates = candidates_from_array(all_words)
    results = []  # type: List[Tuple[str, int]]
    for secret in secrets:
        with time_section(f"Word {secret}"):
            n_guesses = autoplay_count(secret, candidates, strategy,
                                       first_guess, max_rounds, log_=raylog)
        results.append((secret, n_guesses))
    return results


# =============================================================================
# Driver
# =============================================================================

def measure_strategy_performance(
        wordlist_filename: str,
        output_filename: str,
        nwords: int = None,
        nproc: int = DEFAULT_NPROC,
        strategy: str = DEFAULT_STRATEGY,
        first_guess: str = None,
        word_length: int = DEFAULT_WORD_LENGTH,
        max_rounds: int = DEFAULT_MAX_ROUNDS,
        chunks_per_worker: int = DEFAULT_CHUNKS_PER_WORKER,
        loglevel: int = logging.INFO,
        use_ray: bool = True) -> List[int]:
    """
    Test a guess strategy and report its performance statistics. Writes a CSV
    of (strategy, word, n_guesses) and returns the guess counts.
    """
    candidates = load_candidates(wordlist_filename, word_length=word_length,
                                 nproc=1)
    if candidates is None:
        raise EmptyCandidateSetError(
            f"No {word_length}-letter words in {wordlist_filename}")
    all_texts = [w.text for w in candidates.ordered]
    all_words = make_np_array_words(all_texts)
    test_words = all_texts if nwords is None else all_texts[:nwords]
    n_words = len(test_words)
    guess_counts = []  # type: List[int]
    with open(output_filename, "wt") as f, \
            time_section(f"Testing strategy {strategy}", logging.INFO):
        writer = csv.writer(f)
        writer.writerow(["strategy", "word", "n_guesses"])

        if use_ray:
            # -----------------------------------------------------------------
            # Ray method
            # -----------------------------------------------------------------
            log.info("Starting Ray")
            ray.init(num_cpus=nproc)
            words_per_chunk = max(1, n_words // (nproc * chunks_per_worker))
            pending_jobs = [
                autoplay_ray.remote(secrets, all_words, strategy,
                                    first_guess=first_guess,
                                    max_rounds=max_rounds,
                                    loglevel=loglevel)
                for secrets in chunks(test_words, words_per_chunk)
            ]
            log.info(f"Submitted {len(pending_jobs)} jobs, aiming for "
                     f"{words_per_chunk} words per job")
            while len(pending_jobs):
                log.debug(f"Waiting for a job to complete "
                          f"({len(pending_jobs)} running)...")
                done_jobs, pending_jobs = ray.wait(pending_jobs)
                for done_job in done_jobs:
                    results = ray.get(done_job)
                    log.debug(f"Retrieved {len(results)} results")
                    for word, n_guesses in results:
                        writer.writerow([strategy, word, n_guesses])
                        f.flush()  # follow the output live
                        guess_counts.append(n_guesses)
            ray.shutdown()

        else:
            # -----------------------------------------------------------------
            # ProcessPoolExecutor method
            # -----------------------------------------------------------------
            arglist = (
                (secret, all_words, strategy, first_guess, max_rounds)
                for secret in test_words
            )
            n_chunks = nproc * chunks_per_worker
            chunksize = max(1, n_words // n_chunks)
            log.debug(
                f"Aiming for {chunks_per_worker} chunks/worker with {nproc} "
                f"workers and thus {n_chunks} chunks: for {n_words} words, "
                f"chunksize = {chunksize} words/chunk"
            )
            with ProcessPoolExecutor(nproc) as executor:
                for word, n_guesses in zip(
                        test_words,
                        executor.map(autoplay_single_arg, arglist,
                                     chunksize=chunksize)):
                    writer.writerow([strategy, word, n_guesses])
                    f.flush()
                    guess_counts.append(n_guesses)

    n_tests = len(guess_counts)
    assert n_tests > 0, "No words!"
    tested = (
        f"all {n_tests} known" if nwords is None
        else f"the first {n_tests}"
    )
    log.info(
        f"Across {tested} words, strategy {strategy} took: "
        f"min {min(guess_counts)}, "
        f"median {median(guess_counts)}, "
        f"mean {mean(guess_counts)}, "
        f"max {max(guess_counts)} guesses"
    )
    return guess_counts
