"""
guesswork/game.py

A game session: a secret, the candidates still consistent with the feedback so
far, and the accumulated constraint from that feedback.

Each round: choose a guess, compare it with the secret, AND the resulting
constraint into the accumulated one, and filter the candidates. The game is
resolved when one candidate is left, and exhausted if none are (which means
the feedback was inconsistent).

"""

from enum import Enum
import logging
import random
from typing import Callable, Dict, List, Optional

from guesswork.candidates import CandidateSet, CandidateSetBuilder
from guesswork.constants import DEFAULT_MAX_ROUNDS
from guesswork.constraint import Constraint
from guesswork.errors import EmptyCandidateSetError, MissingArgumentError
from guesswork.matcher import Clue, Matcher
from guesswork.utils import prettylist
from guesswork.word import Word

log = logging.getLogger(__name__)


# =============================================================================
# Strategies
# =============================================================================

STRATEGIES = {
    "worst_case": CandidateSet.best_worst_case_guess,
    "average_case": CandidateSet.best_average_case_guess,
}  # type: Dict[str, Callable[[CandidateSet], Word]]

DEFAULT_STRATEGY = "worst_case"

SCORERS = {
    "worst_case": CandidateSet.worst_case_score,
    "average_case": CandidateSet.average_case_score,
}


# =============================================================================
# Status and state
# =============================================================================

class GameStatus(Enum):
    ACTIVE = 1
    RESOLVED = 2  # one candidate left
    EXHAUSTED = 3  # no candidates left


class GameState:
    """
    Everything needed to save and restore a game in progress.
    """
    def __init__(self,
                 secret: Word,
                 candidates: Optional[CandidateSet],
                 constraint: Optional[Constraint]) -> None:
        """
        Args:
            secret: the word being guessed
            candidates: the words still possible, or ``None`` if none are
            constraint: everything learned so far, or ``None`` before the
                first guess
        """
        self.secret = secret
        self.candidates = candidates
        self.constraint = constraint

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GameState):
            return NotImplemented
        return (
            self.secret == other.secret
            and self.candidates == other.candidates
            and str(self.constraint) == str(other.constraint)
        )

    def __str__(self) -> str:
        return (
            f"Secret {self.secret}; "
            f"{len(self.candidates) if self.candidates else 0} candidate(s); "
            f"constraint: {self.constraint}"
        )


# =============================================================================
# Game
# =============================================================================

class Game:
    """
    Drives a candidate set through rounds of feedback against a secret.
    """

    def __init__(self,
                 candidates: CandidateSet,
                 secret: Word = None,
                 strategy: str = DEFAULT_STRATEGY,
                 rng: random.Random = None) -> None:
        """
        Args:
            candidates: the starting candidates (``None`` only for a saved,
                exhausted game)
            secret: the secret; if not given, chosen at random from the
                candidates
            strategy: name of the guess strategy (see ``STRATEGIES``)
            rng: random number generator for choosing the secret
        """
        if strategy not in STRATEGIES:
            raise ValueError(f"Unknown strategy {strategy!r}; choose from "
                             f"{prettylist(STRATEGIES.keys())}")
        if secret is None:
            if candidates is None:
                raise MissingArgumentError("candidates")
            if not candidates:
                raise EmptyCandidateSetError()
            rng = rng or random.Random()
            secret = rng.choice(candidates.ordered)
        self.secret = secret
        self.strategy = strategy
        self.candidates = candidates  # type: Optional[CandidateSet]
        self.constraint = None  # type: Optional[Constraint]

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @classmethod
    def from_state(cls, state: GameState,
                   strategy: str = DEFAULT_STRATEGY) -> "Game":
        """
        Resumes a saved game.
        """
        game = cls(state.candidates, secret=state.secret, strategy=strategy)
        game.constraint = state.constraint
        return game

    def state(self) -> GameState:
        return GameState(self.secret, self.candidates, self.constraint)

    @property
    def status(self) -> GameStatus:
        if not self.candidates:
            return GameStatus.EXHAUSTED
        if len(self.candidates) == 1:
            return GameStatus.RESOLVED
        return GameStatus.ACTIVE

    @property
    def n_candidates(self) -> int:
        return len(self.candidates) if self.candidates else 0

    # -------------------------------------------------------------------------
    # Playing
    # -------------------------------------------------------------------------

    def is_correct_guess(self, guess: Word) -> bool:
        return guess == self.secret

    def best_guess(self) -> Word:
        """
        The next guess, according to our strategy.
        """
        if not self.candidates:
            raise ValueError("No candidates remain")
        return STRATEGIES[self.strategy](self.candidates)

    def clue(self, guess: Word) -> Optional[Clue]:
        """
        Feedback for a guess, or ``None`` if it is the wrong length.
        """
        return Matcher.of(self.secret, guess).clue()

    def round_constraint(self, guess: Word) -> Constraint:
        """
        The constraint from this round's feedback.
        """
        return Matcher.of(self.secret, guess).match()

    def process_guess(self, guess: Word) -> Constraint:
        """
        Applies feedback for a guess: updates the accumulated constraint and
        narrows the candidates. Returns this round's constraint.
        """
        round_constraint = self.round_constraint(guess)
        if self.constraint is None:
            self.constraint = round_constraint
        else:
            self.constraint = self.constraint.and_(round_constraint)
        if self.candidates is not None:
            self.candidates = (
                CandidateSetBuilder.of(self.candidates)
                .filter(self.constraint)
                .build()
            )
        log.debug(f"Guess {guess}: {round_constraint}; "
                  f"{self.n_candidates} candidate(s) remain")
        if self.status == GameStatus.EXHAUSTED:
            log.warning(f"No candidates remain after guessing {guess}")
        return round_constraint


# =============================================================================
# Autoplay
# =============================================================================

def autoplay(candidates: CandidateSet,
             secret: Word,
             strategy: str = DEFAULT_STRATEGY,
             first_guess: Word = None,
             max_rounds: int = DEFAULT_MAX_ROUNDS,
             log_: logging.Logger = None) -> List[Clue]:
    """
    Automatically solves, and returns the clues from each guess (including the
    final successful one).

    Args:
        candidates: the starting candidates
        secret: the word to find
        strategy: name of the guess strategy
        first_guess: optional fixed opening guess, to save the (expensive)
            search over the full set
        max_rounds: give up after this many guesses
        log_: logger to use
    """
    log_ = log_ or log
    game = Game(candidates, secret=secret, strategy=strategy)
    clues = []  # type: List[Clue]
    while len(clues) < max_rounds:
        if not clues and first_guess is not None:
            guess = first_guess
        else:
            if game.status == GameStatus.EXHAUSTED:
                log_.warning(f"No candidates remain for word {secret}; "
                             f"feedback was inconsistent")
                return clues
            guess = game.best_guess()
        clue = game.clue(guess)
        if clue is None:
            log_.warning(f"Guess {guess} is the wrong length for {secret}")
            return clues
        clues.append(clue)
        if game.is_correct_guess(guess):
            log_.info(f"Word is: {guess}. "
                      f"Guesses: {prettylist(c.plain_str for c in clues)}")
            return clues
        game.process_guess(guess)
    log_.warning(f"Abandoning word {secret} after {len(clues)} guesses")
    return clues
