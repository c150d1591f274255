"""Exception classes for Runeflow.

Three kinds of failure exist:

- Clean end-of-input: ``EndOfInput``. Latched by a machine but never
  reported by ``StateMachine.err()``.
- Data errors: source read faults (latched verbatim) and application
  errors such as ``TokenizeError`` (latched through a controller).
- Programming errors: ``MachineConfigError``. Always raised, never latched.
"""

from __future__ import annotations


class RuneflowError(Exception):
    """Base exception for all Runeflow errors.

    Mappers signal failure by raising a subclass of this.
    """

    pass


class EndOfInput(EOFError):
    """The source is exhausted.

    Raised by ``RuneReader.read()``. Not a user-visible error, and not a
    RuneflowError: a mapper cannot report it as a failure.
    """

    def __init__(self, message: str = "end of input") -> None:
        super().__init__(message)


# Marker latched by a StateMachine when it substitutes a rune for end-of-input.
END_OF_INPUT = EndOfInput()


class TokenizeError(RuneflowError):
    """Error raised by a mapper while recognizing a token.

    When latched through a controller without an offset, the machine
    fills in how many code points it had consumed.
    """

    def __init__(self, message: str, offset: int | None = None) -> None:
        """Initialize tokenize error with optional location.

        Args:
            message: Error description
            offset: Number of code points consumed when the error occurred
        """
        self.message = message
        self.offset = offset
        super().__init__(message)

    def __str__(self) -> str:
        if self.offset is None:
            return self.message
        return f"offset {self.offset}: {self.message}"


class MachineConfigError(RuneflowError):
    """A machine was configured or driven incorrectly.

    Raised for an unsupported end-of-input policy, an invalid substitute
    rune, or an attempt to latch end-of-input as an error. This is a
    caller bug, not a data error.
    """

    pass


def is_clean_eof(err: BaseException | None) -> bool:
    """Return True if err marks a clean end-of-input."""
    return isinstance(err, EndOfInput)
