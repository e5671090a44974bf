"""
guesswork/errors.py

Exceptions raised by the word-guessing engine.

All are fatal to the call that raised them, not to the process. Building a
candidate set from nothing is not an error: the builder returns ``None``.

"""


class GuessworkError(Exception):
    """
    Base class for all our exceptions.
    """
    pass


class MissingArgumentError(GuessworkError, TypeError):
    """
    A required argument was ``None``.
    """
    def __init__(self, name: str) -> None:
        super().__init__(f"{name} cannot be None")
        self.name = name


class InvalidCharacterError(GuessworkError, ValueError):
    """
    A character sequence contains something that is not a character, such as
    ``None``.
    """
    def __init__(self, index: int, character: object = None) -> None:
        if character is None:
            msg = f"Null character found at index: {index}"
        else:
            msg = f"Invalid character {character!r} found at index: {index}"
        super().__init__(msg)
        self.index = index
        self.character = character


class CandidateSetError(GuessworkError):
    """
    Problems with a candidate set.
    """
    pass


class EmptyCandidateSetError(CandidateSetError):
    """
    Scoring or searching was attempted on a candidate set with no members.
    """
    def __init__(self, msg: str = "Candidate set is empty") -> None:
        super().__init__(msg)


class InconsistentWordLengthError(CandidateSetError, ValueError):
    """
    Words supplied for one candidate set differ in length.
    """
    def __init__(self, lengths=None) -> None:
        msg = "Words in candidate set have inconsistent length"
        if lengths:
            msg += f" (found lengths {sorted(lengths)})"
        super().__init__(msg)
        self.lengths = set(lengths or ())
