"""
guesswork/utils.py

Formatting and timing helpers.

"""

from contextlib import contextmanager
import logging
from timeit import default_timer as timer
from typing import Any, Generator, Iterable, Union

from cardinal_pythonlib.maths_py import round_sf

from guesswork.constants import DEFAULT_SIG_FIGURES

log = logging.getLogger(__name__)

SCORE_TYPE = Union[None, float, int, Iterable[Union[int, float]]]


# =============================================================================
# Formatting
# =============================================================================

def prettylist(words: Iterable[Any]) -> str:
    """
    Formats a wordlist.
    """
    return ", ".join(str(x) for x in words)


def convert_sf(x: SCORE_TYPE,
               sig_fig: int = DEFAULT_SIG_FIGURES) -> SCORE_TYPE:
    """
    Formats things to a certain number of significant figures.
    """
    if x is None or isinstance(x, int):
        return x
    if isinstance(x, float):
        return round_sf(x, sig_fig)
    results = []
    for y in x:
        if isinstance(y, float):
            results.append(round_sf(y, sig_fig))
        else:
            results.append(y)
    return results


# =============================================================================
# Timing
# =============================================================================

@contextmanager
def time_section(name: str,
                 loglevel: int = logging.DEBUG) -> Generator[None, None, None]:
    start = timer()
    try:
        yield
    finally:
        end = timer()
        log.log(loglevel, f"{name} took {end - start} s")
