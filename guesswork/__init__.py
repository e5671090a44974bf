"""
guesswork

Word-guessing engine: compare a secret with a guess, turn the feedback into a
constraint on the secret, and choose the guess that narrows the candidates
most.

"""

from guesswork.candidates import CandidateSet, CandidateSetBuilder  # noqa
from guesswork.constraint import ALWAYS_FALSE, Constraint  # noqa
from guesswork.matcher import Clue, Matcher, match  # noqa
from guesswork.word import IndexedCharacter, Word  # noqa

__version__ = "1.0.0"
