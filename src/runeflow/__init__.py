"""
Runeflow — rune-at-a-time state machines for Python

A small engine for building lexers out of state functions. A state is a
function taking a controller and one code point and returning the next
state, or None to end the pass.

Quick Start:
    >>> from runeflow import MachineConfig, StateMachine
    >>> def initial(ctrl, rune):
    ...     return None if rune == ";" else initial
    >>> machine = StateMachine("a;b;", MachineConfig(initial))
    >>> while machine.run():
    ...     pass
    >>> machine.err() is None
    True

    >>> # Or tokenize whitespace-delimited words with a mapper
    >>> from runeflow import tokenize
    >>> def words(buf):
    ...     return buf[:-1].decode() if buf[-1:].isspace() else None
    >>> list(tokenize("  foo bar\\n", words))
    ['foo', 'bar']
"""

from runeflow.config import (
    STOP,
    Delegate,
    EOFPolicy,
    MachineConfig,
    Stop,
    Substitute,
    TokenizerOptions,
)
from runeflow.errors import (
    END_OF_INPUT,
    EndOfInput,
    MachineConfigError,
    RuneflowError,
    TokenizeError,
)
from runeflow.machine import StateMachine
from runeflow.protocols import Controller, EOFFunc, Mapper, StateFunc
from runeflow.scanner import Scanner, tokenize
from runeflow.source import RuneReader
from runeflow.tokenizer import WhitespaceTokenizer

__version__ = "0.1.0"

__all__ = [  # noqa: RUF022 — grouped by category for maintainability
    # Version
    "__version__",
    # Driver
    "StateMachine",
    "RuneReader",
    "Controller",
    "StateFunc",
    "EOFFunc",
    # Configuration
    "MachineConfig",
    "EOFPolicy",
    "Stop",
    "STOP",
    "Delegate",
    "Substitute",
    "TokenizerOptions",
    # Tokenizing
    "Mapper",
    "WhitespaceTokenizer",
    "Scanner",
    "tokenize",
    # Errors
    "RuneflowError",
    "EndOfInput",
    "END_OF_INPUT",
    "TokenizeError",
    "MachineConfigError",
]
