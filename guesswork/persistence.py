"""
guesswork/persistence.py

Saving and loading games in progress, as JSON.

The accumulated constraint is stored as its structured terms (the clues from
each round), from which its test is rebuilt on loading; so a reloaded game
filters exactly as it did before saving. A constraint built from an arbitrary
predicate has no such terms: it is saved as a pattern only, and reloads as a
constraint that accepts everything.

"""

import json
import logging
from typing import Any, Dict, List, Optional

from guesswork.candidates import CandidateSet, CandidateSetBuilder
from guesswork.constraint import NEVER_TERM, NeverTerm, Constraint
from guesswork.game import GameState
from guesswork.matcher import Clue
from guesswork.word import Word

log = logging.getLogger(__name__)

FORMAT_VERSION = 1


# =============================================================================
# Constraints
# =============================================================================

def term_from_dict(d: Dict[str, Any]) -> Any:
    """
    Rebuilds a structured term from its dictionary form.
    """
    term_type = d.get("type")
    if term_type == Clue.TYPE:
        return Clue.from_dict(d)
    if term_type == NeverTerm.TYPE:
        return NEVER_TERM
    raise ValueError(f"Unknown constraint term type: {term_type!r}")


def constraint_to_dict(constraint: Optional[Constraint]) \
        -> Optional[Dict[str, Any]]:
    if constraint is None:
        return None
    if constraint.is_structured:
        terms = [term.to_dict() for term in constraint.terms]
    else:
        log.warning(f"Constraint {constraint} has no structured form; it "
                    f"will accept every word when reloaded")
        terms = None
    return {"pattern": constraint.pattern, "terms": terms}


def constraint_from_dict(d: Optional[Dict[str, Any]]) -> Optional[Constraint]:
    if d is None:
        return None
    terms = d.get("terms")
    if terms is not None:
        terms = [term_from_dict(t) for t in terms]
    return Constraint.restored(d.get("pattern", ""), terms)


# =============================================================================
# Game state
# =============================================================================

def state_to_dict(state: GameState) -> Dict[str, Any]:
    candidates = None  # type: Optional[List[str]]
    if state.candidates is not None:
        candidates = [w.text for w in state.candidates]
    return {
        "version": FORMAT_VERSION,
        "secret": state.secret.text,
        "candidates": candidates,
        "constraint": constraint_to_dict(state.constraint),
    }


def state_from_dict(d: Dict[str, Any], **candidate_kwargs: Any) -> GameState:
    """
    Reverses :func:`state_to_dict`. Keyword arguments are passed to the
    :class:`CandidateSetBuilder` (e.g. ``nproc``).
    """
    version = d.get("version")
    if version != FORMAT_VERSION:
        raise ValueError(f"Unsupported saved-game version: {version!r}")
    candidates = None  # type: Optional[CandidateSet]
    if d.get("candidates") is not None:
        candidates = (
            CandidateSetBuilder(**candidate_kwargs)
            .add_text(*d["candidates"])
            .build()
        )
    return GameState(
        secret=Word.from_text(d["secret"]),
        candidates=candidates,
        constraint=constraint_from_dict(d.get("constraint")),
    )


def save_game(state: GameState, filename: str) -> None:
    """
    Saves a game state to a file, replacing any existing file.
    """
    with open(filename, "wt") as f:
        json.dump(state_to_dict(state), f, indent=2)
    log.debug(f"Saved game to {filename}: {state}")


def load_game(filename: str, **candidate_kwargs: Any) -> GameState:
    """
    Loads a game state saved by :func:`save_game`.
    """
    with open(filename, "rt") as f:
        state = state_from_dict(json.load(f), **candidate_kwargs)
    log.debug(f"Loaded game from {filename}: {state}")
    return state
