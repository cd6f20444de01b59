"""
Argscan parsing engine: one left-to-right scan of argv against a Table.

What this module provides
- Parser(table, reporter=...)
  • parse(argv) scans the tokens once, writing caller-owned slots and calling
    handlers as it goes, and returns the number of errors found.
  • errors / faults expose the outcome of the last scan.
  • finalize() turns a failed scan into a ScanExit for callers that stop on errors.

Scan state machine (one token at a time, argv[0] skipped)
- DEFAULT
  • token is a Unary name        → slot := token, on_set(unary)
  • token is a Keyword name      → remember it, go to AWAITING_VALUE
  • token is a Unary negation    → slot := None, on_clear(unary)
  • token is exactly "--"        → go to POSITIONAL_ONLY for good
  • other "--..." token          → INVALID_ARGUMENT
  • other "-x..." token          → flag cluster (see below)
  • anything else (including "-") → positional assignment
- AWAITING_VALUE
  • the token, whatever it looks like, is the keyword's value:
    slot := token, on_set(keyword), back to DEFAULT
  • input ending here is EXPECTED_ARGUMENT_AFTER (the keyword's slot is untouched)
- POSITIONAL_ONLY
  • every token goes to positional assignment

Flag clusters ("-abc")
- each character after '-' selects the Unary with that flag; its slot receives
  the whole token ("-abc"), then on_set runs.
- the first unknown character is INVALID_FLAG; the rest of *that token* is
  skipped, scanning continues with the next token.

Positional assignment
- a cursor remembers the last positional filled; the search resumes there
  instead of restarting at the top of the table.
- a positional with a slot takes one token; a slotless positional takes every
  token that reaches it (catch-all).
- with no positional left, the token is UNEXPECTED_ARGUMENT and the cursor parks
  past the end so later positional tokens fail immediately.

Error policy
- nothing in the input aborts the scan: every error is counted, handed to the
  reporter (if any) and scanning goes on. The count is the failure signal.
- exceptions raised by handlers are the caller's own and propagate unchanged.

Example
    >>> from argscan import Parser, Table, Unary, Keyword, Positional, Slot
    >>> foo, key, first, second = Slot(), Slot(), Slot(), Slot()
    >>> parser = Parser(Table(
    ...     Unary("--foo", flag="f", negation="--no-foo", slot=foo),
    ...     Keyword("--key", slot=key),
    ...     Positional(first),
    ...     Positional(second),
    ... ))
    >>> parser.parse(["prog", "-f", "--key", "v", "a", "b"])
    0
    >>> foo.value, key.value, first.value, second.value
    ('-f', 'v', 'a', 'b')
"""
import copy
import os.path
import shlex
import sys
from collections.abc import Iterable
from enum import Enum

from .arguments import Kind
from .faults import *
from .tables import Table
from .utils import *


class State(Enum):
    """States of the top-level dispatcher."""
    DEFAULT = "default"
    AWAITING_VALUE = "awaiting-value"
    POSITIONAL_ONLY = "positional-only"


class _State:
    """
    Per-scan parser state, created at the start of parse() and dropped at its end.

    - errors: number of errors so far (only ever incremented).
    - faults: the faults reported so far, in order.
    - cursor: table index of the last positional filled; None before the first
      one, len(table) once positionals are exhausted.
    - state: current dispatcher state.
    - pending / pending_index: keyword waiting for its value and its argv index.
    - index: argv index of the token being processed.
    """

    __slots__ = ("prog", "errors", "faults", "cursor", "state", "pending", "pending_index", "index")

    def __init__(self, prog):
        self.prog = prog
        self.errors = 0
        self.faults = []
        self.cursor = None
        self.state = State.DEFAULT
        self.pending = None
        self.pending_index = None
        self.index = 0


def _tokenize(argv):
    """
    Normalize parse() input into a list of tokens (argv[0] included).

    - Unset: sys.argv.
    - str: split shell-style (shlex.split); the first word is the program name.
    - Iterable[str]: taken as-is (no trimming; tokens are matched verbatim).
    """
    if argv is Unset:
        return list(sys.argv)
    if isinstance(argv, str):
        return shlex.split(argv)
    if isinstance(argv, Iterable):
        tokens = list(argv)
        for token in tokens:
            if not isinstance(token, str):
                raise TypeError("parse() argument must be a string or an iterable of strings")
        return tokens
    raise TypeError("parse() argument must be a string or an iterable of strings")


class Parser:
    """
    Scanner binding a Table to an optional reporter.

    Parameters
    - table: Table
      The descriptors to scan against; shared, never modified.
    - reporter: Unset | Callable[[ScanFault], Any]
      Called once per error, synchronously, as soon as it is found. When omitted
      errors are only counted (see errors/faults after the scan).

    A Parser may run any number of sequential scans; each starts from a fresh
    state. It is not reentrant: calling parse() from one of its own handlers
    raises RuntimeError.
    """

    __slots__ = ("_table", "_reporter", "_last", "_scanning")

    def __init__(self, table, /, reporter=Unset):
        if not isinstance(table, Table):
            raise TypeError("parser 'table' must be a table")
        if reporter is not Unset and not callable(reporter):
            raise TypeError("parser 'reporter' must be callable")
        self._table = table
        self._reporter = coalesce(reporter)
        self._last = None
        self._scanning = False

    @property
    def table(self):
        return self._table

    @property
    def reporter(self):
        return self._reporter

    @property
    def errors(self):
        """Error count of the last scan (0 before any scan)."""
        return self._last.errors if self._last else 0

    @property
    def faults(self):
        """Faults of the last scan, in the order they were reported."""
        return tuple(self._last.faults) if self._last else ()

    @property
    def cursor(self):
        """
        Positional cursor of the last scan as a Kind-tagged pair.

        - (Kind.POSITIONAL, index): the positional filled last.
        - (Kind.END, len(table)): positionals were exhausted.
        - None: no positional token was seen.
        """
        if self._last is None or self._last.cursor is None:
            return None
        if self._last.cursor >= len(self._table):
            return Kind.END, self._last.cursor
        return Kind.POSITIONAL, self._last.cursor

    def __repr__(self):
        return "parser(table=%r, reporter=%r, errors=%d)" % (self._table, self._reporter, self.errors)

    def parse(self, argv=Unset, /):
        """
        Scan `argv` once and return the number of errors.

        Parameters
        - argv: Unset | str | Iterable[str]
          Full argument vector; argv[0] is the program name and is never parsed.
          Unset reads sys.argv; a string is split shell-style.

        Returns
        - int: error count (0 means every token was accepted).

        Raises
        - TypeError for a malformed argv, RuntimeError when reentered from a handler.
          Input errors never raise.
        """
        tokens = _tokenize(argv)
        if self._scanning:
            raise RuntimeError("parse() cannot be called while the same parser is scanning")

        prog = os.path.basename(tokens[0]) if tokens else None
        self._last = state = _State(prog)
        self._scanning = True
        try:
            for index, token in enumerate(tokens[1:], start=1):
                state.index = index
                match state.state:
                    case State.DEFAULT:
                        self._dispatch(state, token)
                    case State.AWAITING_VALUE:
                        self._accept(state, token)
                    case State.POSITIONAL_ONLY:
                        self._assign(state, token)

            if state.state is State.AWAITING_VALUE:
                self._fault(state, ExpectedArgumentAfterError(
                    "expected an argument after %r at %s position" % (
                        state.pending.name, ordinal(state.pending_index)
                    ),
                    title="expected argument",
                    code=FaultCode.EXPECTED_ARGUMENT_AFTER,
                    hint="pass a value after it (for example: %s <value>)" % state.pending.name,
                    token=state.pending.name,
                    index=state.pending_index,
                    argument=state.pending,
                ))
        finally:
            self._scanning = False

        return state.errors

    def finalize(self, *, shell=False, **options):
        """
        Stop on a failed scan.

        - no errors in the last scan: returns None.
        - otherwise builds a ScanExit of the last scan's faults and triggers it:
          shell=False raises it, shell=True prints it to stderr and exits with 1.
        """
        if not self.errors:
            return
        trigger(ScanExit(self.faults), shell=shell, prog=self._last.prog, **options)

    def _fault(self, state, fault):
        state.errors += 1
        if state.prog:
            fault = copy.replace(fault, prog=state.prog)
        state.faults.append(fault)
        if self._reporter is not None:
            self._reporter(fault)

    def _dispatch(self, state, token):
        argument, negated = self._table.lookup(token)

        if argument is not None:
            if negated:
                if argument.slot is not None:
                    argument.slot.value = None
                if argument.on_clear is not None:
                    argument.on_clear(argument)
            elif argument.kind is Kind.UNARY:
                self._set(argument, token)
            else:
                state.pending = argument
                state.pending_index = state.index
                state.state = State.AWAITING_VALUE
            return

        if token.startswith("-") and len(token) >= 2:
            if token == "--":
                state.state = State.POSITIONAL_ONLY
            elif token.startswith("--"):
                self._fault(state, InvalidArgumentError(
                    "invalid argument %r at %s position" % (token, ordinal(state.index)),
                    title="invalid argument",
                    code=FaultCode.INVALID_ARGUMENT,
                    hint="check the spelling; long options must match exactly "
                         "(use '--' before values that start with '-')",
                    token=token,
                    index=state.index,
                ))
            else:
                self._expand(state, token)
            return

        self._assign(state, token)

    def _accept(self, state, token):
        argument = state.pending
        state.pending = None
        state.pending_index = None
        state.state = State.DEFAULT
        self._set(argument, token)

    def _expand(self, state, token):
        for position, character in enumerate(token[1:], start=1):
            argument = self._table.flagged(character)
            if argument is None:
                self._fault(state, InvalidFlagError(
                    "invalid flag %r in argument %r at %s position" % (character, token, ordinal(state.index)),
                    title="invalid flag",
                    code=FaultCode.INVALID_FLAG,
                    hint="remove %r from the cluster; the remaining flags of this argument were skipped" % character,
                    token=token,
                    index=state.index,
                    position=position,
                    flag=character,
                ))
                # Only this token is abandoned; the scan goes on with the next one.
                break
            self._set(argument, token)

    def _assign(self, state, token):
        table = self._table
        for index in range(0 if state.cursor is None else state.cursor, len(table)):
            argument = table[index]
            if argument.kind is not Kind.POSITIONAL:
                continue
            # A slotted positional takes one token; a slotless one keeps taking them.
            if index == state.cursor and argument.slot is not None:
                continue
            state.cursor = index
            self._set(argument, token)
            return

        state.cursor = len(table)
        self._fault(state, UnexpectedArgumentError(
            "unexpected positional argument %r at %s position" % (token, ordinal(state.index)),
            title="unexpected positional",
            code=FaultCode.UNEXPECTED_ARGUMENT,
            hint="remove this extra value (only %d positional%s accepted)" % (
                len(table.positionals), "" if len(table.positionals) == 1 else "s"
            ),
            token=token,
            index=state.index,
        ))

    @staticmethod
    def _set(argument, token):
        if argument.slot is not None:
            argument.slot.value = token
        if argument.on_set is not None:
            argument.on_set(argument)


__all__ = (
    "State",
    "Parser",
)
