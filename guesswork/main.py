#!/usr/bin/env python
"""
guesswork/main.py

Command-line entry point.

Commands:

- ``make_wordlist``: build a word list from a system dictionary.
- ``advise``: show the best opening guesses for a word list.
- ``play``: the computer plays against a given or random secret, optionally
  saving its progress after each round.
- ``test_performance``: autoplay every secret and report guess counts.

"""

import argparse
import logging
import os
import random
from typing import Optional

from cardinal_pythonlib.logs import main_only_quicksetup_rootlogger

from guesswork.candidates import CandidateSet
from guesswork.constants import (
    DEFAULT_ADVICE_TOP_N,
    DEFAULT_MAX_ROUNDS,
    DEFAULT_NPROC,
    DEFAULT_OS_DICT,
    DEFAULT_PARALLEL_THRESHOLD,
    DEFAULT_WORD_LENGTH,
    DEFAULT_WORDLIST,
)
from guesswork.game import (
    DEFAULT_STRATEGY,
    SCORERS,
    STRATEGIES,
    Game,
    GameStatus,
)
from guesswork.performance import measure_strategy_performance
from guesswork.persistence import load_game, save_game
from guesswork.utils import convert_sf, prettylist
from guesswork.word import Word
from guesswork.wordlist import (
    default_candidates,
    load_candidates,
    make_wordlist,
)

log = logging.getLogger(__name__)


# =============================================================================
# Commands
# =============================================================================

def get_candidates(wordlist_filename: str,
                   word_length: int = DEFAULT_WORD_LENGTH,
                   max_n: int = None,
                   nproc: int = DEFAULT_NPROC,
                   parallel_threshold: int = DEFAULT_PARALLEL_THRESHOLD) \
        -> CandidateSet:
    """
    Candidates from a word list, falling back to a small built-in set if the
    list is missing or has no words of the right length.
    """
    candidates = None  # type: Optional[CandidateSet]
    if os.path.isfile(wordlist_filename):
        candidates = load_candidates(wordlist_filename,
                                     word_length=word_length,
                                     max_n=max_n,
                                     nproc=nproc,
                                     parallel_threshold=parallel_threshold)
    else:
        log.warning(f"No word list at {wordlist_filename}")
    if candidates is None:
        candidates = default_candidates(nproc=nproc,
                                        parallel_threshold=parallel_threshold)
        log.warning(f"Using built-in words: "
                    f"{prettylist(w.text for w in candidates)}")
    return candidates


def advise(candidates: CandidateSet,
           strategy: str = DEFAULT_STRATEGY,
           top_n: int = DEFAULT_ADVICE_TOP_N) -> None:
    """
    Logs the best guesses for a candidate set.
    """
    scorer = SCORERS[strategy]
    ranked = candidates.ranked_guesses(lambda g: scorer(candidates, g),
                                       top_n=top_n)
    log.info(f"{candidates}. Best {len(ranked)} guesses by {strategy} "
             f"score: " +
             prettylist(f"{guess} ({convert_sf(score)})"
                        for guess, score in ranked))


def play(candidates: Optional[CandidateSet],
         secret: str = None,
         strategy: str = DEFAULT_STRATEGY,
         first_guess: str = None,
         max_rounds: int = DEFAULT_MAX_ROUNDS,
         state_file: str = None,
         resume: bool = False,
         nproc: int = DEFAULT_NPROC,
         seed: int = None) -> Game:
    """
    Plays a game with the computer choosing every guess, logging each round.

    Args:
        candidates: the starting candidates (ignored when resuming)
        secret: the secret; random if not given (ignored when resuming)
        strategy: name of the guess strategy
        first_guess: optional fixed opening guess
        max_rounds: give up after this many guesses
        state_file: JSON file to save the game to after every round
        resume: continue the game saved in ``state_file``
        nproc: number of processes for scoring a resumed game
        seed: random number seed, for choosing the secret
    """
    if resume:
        if not state_file:
            raise ValueError("Resuming requires a state file")
        state = load_game(state_file, nproc=nproc)
        game = Game.from_state(state, strategy=strategy)
        log.info(f"Resumed game: {state}")
    else:
        game = Game(candidates,
                    secret=Word.from_text(secret) if secret else None,
                    strategy=strategy,
                    rng=random.Random(seed))
        log.info(f"New game: secret of length {len(game.secret)} among "
                 f"{game.n_candidates} candidate(s)")
    for round_number in range(1, max_rounds + 1):
        if game.status == GameStatus.EXHAUSTED:
            log.warning("No candidates remain; the feedback was inconsistent")
            return game
        if round_number == 1 and first_guess and not resume:
            guess = Word.from_text(first_guess)
        else:
            guess = game.best_guess()
        clue = game.clue(guess)
        if clue is None:
            log.warning(f"Guess {guess} is the wrong length")
            return game
        if game.is_correct_guess(guess):
            log.info(f"Round {round_number}: {clue.colourful_str}. Solved!")
            return game
        game.process_guess(guess)
        log.info(f"Round {round_number}: {clue.colourful_str} "
                 f"({clue.pattern}); {game.n_candidates} candidate(s) left")
        if state_file:
            save_game(game.state(), state_file)
    log.warning(f"Abandoning after {max_rounds} guesses")
    return game


# =============================================================================
# Main
# =============================================================================

def main() -> None:
    # -------------------------------------------------------------------------
    # Arguments
    # -------------------------------------------------------------------------
    parser = argparse.ArgumentParser(
        "Word-guessing engine.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument(
        "--wordlist_filename", default=DEFAULT_WORDLIST,
        help="File containing candidate words, one per line"
    )
    parser.add_argument(
        "--word_length", type=int, default=DEFAULT_WORD_LENGTH,
        help="Word length"
    )
    parser.add_argument(
        "--nproc", type=int, default=DEFAULT_NPROC,
        help="Number of parallel processes"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true",
        help="Be verbose"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    cmd_make = "make_wordlist"
    parser_make = subparsers.add_parser(
        cmd_make,
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser_make.add_argument(
        "--source_dict", default=DEFAULT_OS_DICT,
        help="File of all dictionary words."
    )

    cmd_advise = "advise"
    parser_advise = subparsers.add_parser(
        cmd_advise,
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser_advise.add_argument(
        "--advice_top_n", type=int, default=DEFAULT_ADVICE_TOP_N,
        help="Show this many top candidates"
    )
    parser_advise.add_argument(
        "--strategy", type=str, choices=STRATEGIES.keys(),
        default=DEFAULT_STRATEGY,
        help="Strategy to score guesses by"
    )
    parser_advise.add_argument(
        "--debug_nwords", type=int,
        help="Number of words to load (debugging only)"
    )

    cmd_play = "play"
    parser_play = subparsers.add_parser(
        cmd_play,
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser_play.add_argument(
        "--secret", type=str,
        help="Word to find (if unspecified, one is chosen at random)"
    )
    parser_play.add_argument(
        "--first_guess", type=str,
        help="Fixed opening guess (saves searching the whole word list)"
    )
    parser_play.add_argument(
        "--strategy", type=str, choices=STRATEGIES.keys(),
        default=DEFAULT_STRATEGY,
        help="Strategy to use"
    )
    parser_play.add_argument(
        "--max_rounds", type=int, default=DEFAULT_MAX_ROUNDS,
        help="Give up after this many guesses"
    )
    parser_play.add_argument(
        "--state_file", type=str,
        help="JSON file to save the game to after each round"
    )
    parser_play.add_argument(
        "--resume", action="store_true",
        help="Resume the game saved in --state_file"
    )
    parser_play.add_argument(
        "--seed", type=int,
        help="Random number seed, for choosing the secret"
    )

    cmd_test_performance = "test_performance"
    parser_test_performance = subparsers.add_parser(
        cmd_test_performance,
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser_test_performance.add_argument(
        "--output", type=str, default=None,
        help="File for CSV-format output (if unspecified, a sensible default "
             "will be created based on the strategy chosen)"
    )
    parser_test_performance.add_argument(
        "--nwords", type=int,
        help="Number of words to test (if unspecified, will test all)"
    )
    parser_test_performance.add_argument(
        "--strategy", type=str, choices=STRATEGIES.keys(),
        default=DEFAULT_STRATEGY,
        help="Strategy to use"
    )
    parser_test_performance.add_argument(
        "--first_guess", type=str,
        help="Fixed opening guess (saves searching the whole word list for "
             "every secret)"
    )
    parser_test_performance.add_argument(
        "--max_rounds", type=int, default=DEFAULT_MAX_ROUNDS,
        help="Give up on a word after this many guesses"
    )
    parser_test_performance.add_argument(
        "--no_ray", action="store_true",
        help="Use a ProcessPoolExecutor rather than Ray"
    )

    args = parser.parse_args()

    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------
    loglevel = logging.DEBUG if args.verbose else logging.INFO
    main_only_quicksetup_rootlogger(level=loglevel)

    # -------------------------------------------------------------------------
    # Act
    # -------------------------------------------------------------------------
    if args.command == cmd_make:
        make_wordlist(args.source_dict, args.wordlist_filename,
                      word_length=args.word_length)
    elif args.command == cmd_advise:
        candidates = get_candidates(args.wordlist_filename,
                                    word_length=args.word_length,
                                    max_n=args.debug_nwords,
                                    nproc=args.nproc)
        advise(candidates, strategy=args.strategy, top_n=args.advice_top_n)
    elif args.command == cmd_play:
        candidates = None  # type: Optional[CandidateSet]
        if not args.resume:
            candidates = get_candidates(args.wordlist_filename,
                                        word_length=args.word_length,
                                        nproc=args.nproc)
        play(candidates,
             secret=args.secret,
             strategy=args.strategy,
             first_guess=args.first_guess,
             max_rounds=args.max_rounds,
             state_file=args.state_file,
             resume=args.resume,
             nproc=args.nproc,
             seed=args.seed)
    elif args.command == cmd_test_performance:
        output_filename = (
            args.output or f"out_{args.strategy}.csv"
        )
        measure_strategy_performance(
            wordlist_filename=args.wordlist_filename,
            output_filename=output_filename,
            nwords=args.nwords,
            nproc=args.nproc,
            strategy=args.strategy,
            first_guess=args.first_guess,
            word_length=args.word_length,
            max_rounds=args.max_rounds,
            loglevel=loglevel,
            use_ray=not args.no_ray,
        )
    else:
        raise AssertionError("argument-parsing bug")


if __name__ == '__main__':
    main()
