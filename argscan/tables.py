"""
Argument tables: the ordered, immutable set of descriptors a parser scans against.

What this module provides
- Table(*arguments)
  • An explicitly sized, read-only Sequence of Unary/Keyword/Positional descriptors,
    kept in declaration order (order decides positional assignment and help output).
  • Validated once at construction:
      – every entry must be a descriptor;
      – a spelling (name or negation) may be claimed only once across the table;
      – a flag character may be claimed only once across the table.
    Duplicates are rejected with ValueError instead of being silently shadowed.
  • Warns (UnreachablePositionalWarning) when a slotless, catch-all Positional is
    followed by other Positionals that can therefore never receive a token.
  • Lookup helpers used by the parser: lookup(token) and flagged(character).

- describe(table, file=...)
  • Prints every descriptor's help text in table order. Pure read-only iteration:
    printing twice produces the same output and never touches a slot.

Sharing
- A Table is safe to share across any number of sequential scans and parsers;
  nothing in it changes after construction.
"""
import sys
import warnings
from collections.abc import Sequence

from rich.console import Console
from rich.text import Text

from .arguments import Kind, Unary, Keyword, Positional
from .faults import FaultCode, UnreachablePositionalWarning
from .utils import *


class Table(Sequence):
    """
    Ordered, immutable collection of argument descriptors.

    Indexing, len(), iteration and slicing behave like a tuple. The kind-filtered
    views (unaries, keywords, positionals) keep declaration order.
    """

    __slots__ = ("_arguments", "_spellings", "_flags")

    def __init__(self, *arguments):
        spellings = {}
        flags = {}

        for index, argument in enumerate(arguments):
            if not isinstance(argument, Unary | Keyword | Positional):
                raise TypeError("table entries must be unary, keyword or positional arguments (got %r at index %d)" % (
                    type(argument).__name__, index
                ))

            # Name and negation share one namespace: both are matched against whole tokens.
            for negated, spelling in enumerate(argument.spellings):
                if spelling in spellings:
                    raise ValueError("duplicate spelling %r in table (indices %d and %d)" % (
                        spelling, spellings[spelling][0], index
                    ))
                spellings[spelling] = (index, bool(negated))

            if argument.kind is Kind.UNARY and argument.flag is not None:
                if argument.flag in flags:
                    raise ValueError("duplicate flag %r in table (indices %d and %d)" % (
                        argument.flag, flags[argument.flag], index
                    ))
                flags[argument.flag] = index

        object.__setattr__(self, "_arguments", arguments)
        object.__setattr__(self, "_spellings", spellings)
        object.__setattr__(self, "_flags", flags)
        for argument in arguments:
            object.__setattr__(argument, "_tabled", True)

        self._check_reachability()

    def _check_reachability(self):
        catchall = None
        for index, argument in enumerate(self._arguments):
            if argument.kind is not Kind.POSITIONAL:
                continue
            if catchall is not None:
                warnings.warn(UnreachablePositionalWarning(
                    "positional at index %d can never receive a token" % index,
                    title="unreachable positional",
                    code=FaultCode.UNREACHABLE_POSITIONAL,
                    hint="the positional without a slot at index %d takes every remaining token; "
                         "move it last or give it a slot" % catchall,
                    index=index,
                    argument=argument,
                ), stacklevel=3)
            elif argument.slot is None:
                catchall = index

    def __setattr__(self, name, value):
        raise AttributeError("table is immutable")

    def __delattr__(self, name):
        raise AttributeError("table is immutable")

    def __getitem__(self, index):
        if isinstance(index, slice):
            # The shape was already checked (and warned about) once.
            with warnings.catch_warnings():
                warnings.simplefilter("ignore", UnreachablePositionalWarning)
                return Table(*self._arguments[index])
        return self._arguments[index]

    def __len__(self):
        return len(self._arguments)

    def __iter__(self):
        return iter(self._arguments)

    def __repr__(self):
        return "table(%s)" % ", ".join(map(repr, self._arguments))

    def __rich_repr__(self):
        yield from self._arguments

    @property
    def unaries(self):
        return tuple(argument for argument in self._arguments if argument.kind is Kind.UNARY)

    @property
    def keywords(self):
        return tuple(argument for argument in self._arguments if argument.kind is Kind.KEYWORD)

    @property
    def positionals(self):
        return tuple(argument for argument in self._arguments if argument.kind is Kind.POSITIONAL)

    def lookup(self, token, /):
        """
        Resolve a whole token against names and negations.

        Returns
        - (argument, negated) when `token` is a Unary/Keyword name (negated=False)
          or a Unary negation (negated=True).
        - (None, False) otherwise. Positionals are never matched by name.
        """
        try:
            index, negated = self._spellings[token]
        except KeyError:
            return None, False
        return self._arguments[index], negated

    def flagged(self, character, /):
        """Return the Unary claiming `character` as its flag, or None."""
        try:
            return self._arguments[self._flags[character]]
        except KeyError:
            return None

    def descriptions(self):
        """Yield each descriptor's help text, in order, skipping those without one."""
        for argument in self._arguments:
            if argument.descr is not None:
                yield argument.descr


def describe(table, /, file=Unset):
    """
    Print the help text of every descriptor in `table`, one entry per line block.

    Parameters
    - table: Table
    - file: Unset | TextIO
      Destination stream; defaults to sys.stdout (resolved at call time).

    Notes
    - Help text is printed verbatim: strings are not parsed as rich markup and
      long lines are not re-wrapped. Pre-styled rich Text is kept as-is.
    - Read-only: calling it repeatedly yields identical output.
    """
    if not isinstance(table, Table):
        raise TypeError("describe() argument must be a table")

    console = Console(file=coalesce(file, sys.stdout), highlight=False)
    for descr in table.descriptions():
        console.print(descr if isinstance(descr, Text) else Text(descr), soft_wrap=True)


__all__ = (
    "Table",
    "describe",
)
