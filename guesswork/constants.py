"""
guesswork/constants.py

Constants and defaults for the word-guessing engine.

"""

from multiprocessing import cpu_count
import os

# =============================================================================
# Paths
# =============================================================================

THIS_DIR = os.path.dirname(os.path.abspath(__file__))
DEFAULT_OS_DICT = "/usr/share/dict/words"
DEFAULT_WORDLIST = os.path.join(THIS_DIR, "five_letter_words.txt")

# =============================================================================
# Defining the game
# =============================================================================

DEFAULT_WORD_LENGTH = 5
DEFAULT_MAX_ROUNDS = 10

# Used when no word list can be loaded.
DEFAULT_WORDS = ("rebus", "redux", "route", "hello")

# =============================================================================
# Display
# =============================================================================

# Per-character feedback, in plain text
CHAR_ABSENT_OR_REDUNDANT = "_"
CHAR_PRESENT_WRONG_LOC = "-"
CHAR_CORRECT = "="

# Unfilled positions in a constraint's display template
CHAR_UNKNOWN_POSITION = "_"

# Shown for a constraint without a pattern
EMPTY_PATTERN_PLACEHOLDER = "Constraint[]"
IMPOSSIBLE_PATTERN = "Impossible"

# Colours and styles for displaying feedback, via the ansicolors package
COLOUR_ABSENT_REDUNDANT = dict(fg="white", bg="black", style="bold")
COLOUR_PRESENT_WRONG_LOCATION = dict(fg="white", bg="yellow", style="bold")
COLOUR_PRESENT_RIGHT_LOCATION = dict(fg="white", bg="green", style="bold")

DEFAULT_ADVICE_TOP_N = 10
DEFAULT_SIG_FIGURES = 3

# =============================================================================
# Performance
# =============================================================================

DEFAULT_NPROC = cpu_count()

# Candidate sets smaller than this are scored in-process.
DEFAULT_PARALLEL_THRESHOLD = 500

# Work units per worker when splitting scoring across processes.
DEFAULT_CHUNKS_PER_WORKER = 4
