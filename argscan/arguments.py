r"""
Argscan argument descriptors and decorators.

Overview
- Descriptors
  • Unary: presence-only option (e.g. --foo), optionally with a cluster flag
    character ('f' as in -abf) and a negation spelling (e.g. --no-foo).
  • Keyword: named option consuming the next token as its value (e.g. --key VAL).
  • Positional: unnamed value assigned by left-to-right position.

- Decorators
  • @unary(...), @keyword(...), @positional(...): build a descriptor and bind the
    decorated function as its on_set handler.
  • @<unary>.negated: bind the on_clear handler of an existing Unary.

- Kind
  • Tag shared by all descriptors (UNARY, KEYWORD, POSITIONAL). END marks the end
    of a table and is only ever observed as the exhausted positional cursor.

Handlers
- Handlers receive the descriptor itself as their only argument, after the
  slot (if any) has been written:
      @unary("--special")
      def special(argument):
          print("special handler called", argument.name)

Metadata (sanitized on construction)
- name / negation: non-empty strings without whitespace.
- flag: a single non-space character other than '-'.
- slot: a Slot instance (argscan.slots) or omitted.
- on_set / on_clear: callables or omitted.
- descr: non-empty (after trimming) string or rich Text, or omitted.

Duplicate spellings across descriptors are checked by the Table, not here:
a descriptor does not know its neighbours.

Quick example:
    >>> from argscan import Slot, Unary, Keyword, Positional
    >>> foo = Slot()
    >>> Unary("--foo", flag="f", negation="--no-foo", slot=foo)
    unary(name='--foo', flag='f', negation='--no-foo', slot=slot(None), ...)
"""
import re
from enum import IntEnum

from rich.text import Text

from .slots import Slot
from .utils import *


class Kind(IntEnum):
    """
    Tag of an argument descriptor.

    END is never stored in a table: tables are explicitly sized, so END only
    names the position past the last descriptor (see Parser cursor semantics).
    """
    END = 0
    UNARY = 1
    KEYWORD = 2
    POSITIONAL = 3

    def __str__(self):
        return self.name.lower()


class ArgumentType(type):
    """
    Metaclass giving descriptors stable introspection.

    Responsibilities
    - Derive __typename__ from the class name ("Unary" -> "unary") for messages.
    - Expose every name in __introspectable__ as a read-only property (mirror()).
    - Provide __repr__/__rich_repr__ listing __displayable__ (or __introspectable__).
    - Seal concrete descriptor classes against subclassing; the parser
      dispatches on `kind`, and a subclass could not add behaviour it would honour.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
                "__slots__": tuple(
                    "_" + name for name in namespace.get("__introspectable__", ())
                ) + ("_tabled",),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return "%s(%s)" % (
                type(self).__typename__,
                ", ".join("%s=%r" % pair for pair in self.__rich_repr__()),
            )
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        @rename("__setattr__")
        def __setattr__(self, name, value):
            raise AttributeError(f"{type(self).__typename__} attributes are read-only")
        self.__setattr__ = __setattr__

        @rename("__delattr__")
        def __delattr__(self, name):
            raise AttributeError(f"{type(self).__typename__} attributes are read-only")
        self.__delattr__ = __delattr__

        @rename("__init_subclass__")
        def __init_subclass__(cls, **options):  # NOQA: F-841
            raise TypeError(f"type {self.__name__!r} is not an acceptable base type")
        self.__init_subclass__ = classmethod(__init_subclass__)

        return self


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: validate fields shared by every descriptor (slot, on_set, descr).

    - slot: Slot | Unset. Stored as None when omitted.
    - on_set: callable | Unset. Stored as None when omitted.
    - descr: str | Text | Unset; strings are trimmed and must not end up empty.
      Rich Text is kept as-is so callers can pre-style help lines.

    Mutates `metadata` in place.
    """
    if not isinstance(slot := metadata["slot"], Slot | Unset):
        raise TypeError(f"{cls.__typename__} 'slot' must be a slot")
    metadata["slot"] = coalesce(slot)

    if not callable(on_set := metadata["on_set"]) and on_set is not Unset:
        raise TypeError(f"{cls.__typename__} 'on_set' must be callable")
    metadata["on_set"] = coalesce(on_set)

    if not isinstance(descr := metadata["descr"], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not descr.strip():
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    # Leading spaces are part of the help layout (column alignment); only blank
    # strings are rejected, trailing whitespace is dropped.
    metadata["descr"] = descr.rstrip() if isinstance(descr, str) else coalesce(descr)


def _sanitize_spelling(cls, field, spelling, /):
    """
    Internal: validate one command-line spelling (a name or a negation).

    Spellings are compared verbatim against tokens, so any non-empty string
    without whitespace is accepted ("--foo", "-x", "+v", "help").
    """
    if not isinstance(spelling, str):
        raise TypeError(f"{cls.__typename__} '{field}' must be a string")
    if not spelling:
        raise ValueError(f"{cls.__typename__} '{field}' cannot be empty")
    if re.search(r"\s", spelling):
        raise ValueError(f"{cls.__typename__} '{field}' cannot contain whitespace")
    # "--" is the positional-only marker and "-" is a plain positional token.
    if spelling in ("-", "--"):
        raise ValueError(f"{cls.__typename__} '{field}' cannot be {spelling!r}")
    return spelling


def _sanitize_named_metadata(cls, metadata, /):
    """
    Internal: validate the canonical name of Unary and Keyword descriptors.
    """
    metadata["name"] = _sanitize_spelling(cls, "name", metadata["name"])


def _sanitize_unary_metadata(cls, metadata, /):
    """
    Internal: validate unary-only fields (flag, negation, on_clear).

    - flag: Unset | one character, not '-' and not whitespace.
    - negation: Unset | spelling, different from the unary's own name.
    - on_clear: Unset | callable; only meaningful together with a negation.
    """
    if (flag := metadata["flag"]) is not Unset:
        if not isinstance(flag, str):
            raise TypeError(f"{cls.__typename__} 'flag' must be a string")
        if len(flag) != 1:
            raise ValueError(f"{cls.__typename__} 'flag' must be a single character")
        if flag == "-" or flag.isspace():
            raise ValueError(f"{cls.__typename__} 'flag' cannot be {flag!r}")
    metadata["flag"] = coalesce(flag)

    if (negation := metadata["negation"]) is not Unset:
        negation = _sanitize_spelling(cls, "negation", negation)
        if negation == metadata["name"]:
            raise ValueError(f"{cls.__typename__} 'negation' must differ from its name")
    metadata["negation"] = coalesce(negation)

    if not callable(on_clear := metadata["on_clear"]) and on_clear is not Unset:
        raise TypeError(f"{cls.__typename__} 'on_clear' must be callable")
    if on_clear is not Unset and metadata["negation"] is None:
        raise TypeError(f"{cls.__typename__} 'on_clear' requires a 'negation'")
    metadata["on_clear"] = coalesce(on_clear)


def _build(cls, metadata, /):
    """
    Internal: allocate a descriptor and store sanitized metadata in private fields.

    Descriptors reject attribute assignment; the fields are written here once.
    Afterwards only the decorators bind a missing handler, @negated only
    before the descriptor joins a Table.
    """
    self = object.__new__(cls)
    for name, object_ in metadata.items():
        object.__setattr__(self, "_" + name, object_)
    object.__setattr__(self, "_tabled", False)
    return self


class Unary(metaclass=ArgumentType):
    """
    Presence-only option.

    On its name (or its flag inside a cluster) the parser writes the matching
    token into the slot and calls on_set; on its negation it writes None and
    calls on_clear.
    """

    kind = Kind.UNARY

    __introspectable__ = (
        "name",
        "flag",
        "negation",
        "slot",
        "on_set",
        "on_clear",
        "descr",
    )

    def __new__(
            cls,
            name,
            /,
            flag=Unset,
            negation=Unset,
            slot=Unset,
            on_set=Unset,
            on_clear=Unset,
            descr=Unset,
    ):
        """
        Construct a Unary descriptor.

        Parameters
        - name: str
          Canonical spelling, matched verbatim (e.g. "--foo").
        - flag: Unset | str
          Single character usable in a flag cluster (e.g. 'f' in "-fb").
        - negation: Unset | str
          Spelling that clears the value (e.g. "--no-foo").
        - slot: Unset | Slot
          Receives the matching token, or None on negation.
        - on_set / on_clear: Unset | Callable[[Unary], Any]
          Called after the slot write on match / negated match.
        - descr: Unset | str | Text
          Help text printed by describe().
        """
        metadata = {
            "name": name,
            "flag": flag,
            "negation": negation,
            "slot": slot,
            "on_set": on_set,
            "on_clear": on_clear,
            "descr": descr,
        }
        _sanitize_metadata(cls, metadata)
        _sanitize_named_metadata(cls, metadata)
        _sanitize_unary_metadata(cls, metadata)
        return _build(cls, metadata)

    @property
    def spellings(self):
        """Every token spelling that selects this unary (name first)."""
        return (self.name,) if self._negation is None else (self.name, self._negation)

    def negated(self, callback, /):
        """
        Decorator binding `callback` as this unary's on_clear handler.

            @unary("--baz", negation="--no-baz")
            def baz(argument): ...

            @baz.negated
            def no_baz(argument): ...

        Returns the unary itself, mirroring the @unary decorator.
        """
        if not callable(callback):
            raise TypeError("@negated must be applied to a callable")
        if self._negation is None:
            raise TypeError(f"{type(self).__typename__} {self._name!r} has no negation")
        if self._on_clear is not None:
            raise TypeError("@negated must be applied only once")
        if self._tabled:
            raise TypeError(f"{type(self).__typename__} {self._name!r} is already in a table")
        object.__setattr__(self, "_on_clear", callback)
        return self


class Keyword(metaclass=ArgumentType):
    """
    Named option whose value is the next token on the command line.

    The next token is taken verbatim, even when it looks like an option
    ("--key --foo" stores "--foo"). A keyword given as the last token is an
    error and leaves the slot untouched.
    """

    kind = Kind.KEYWORD

    __introspectable__ = (
        "name",
        "slot",
        "on_set",
        "descr",
    )

    def __new__(cls, name, /, slot=Unset, on_set=Unset, descr=Unset):
        metadata = {
            "name": name,
            "slot": slot,
            "on_set": on_set,
            "descr": descr,
        }
        _sanitize_metadata(cls, metadata)
        _sanitize_named_metadata(cls, metadata)
        return _build(cls, metadata)

    @property
    def spellings(self):
        return (self.name,)


class Positional(metaclass=ArgumentType):
    """
    Unnamed value assigned by position.

    Each positional with a slot takes exactly one token. A positional without a
    slot is a catch-all: once reached, it takes every remaining positional token
    and calls on_set for each of them, so positionals declared after it are
    unreachable (the Table warns about that).

    Handlers only receive the descriptor. A catch-all therefore cannot tell
    which token it was called for; give the positional a slot when the token
    itself matters (one slot holds one token).
    """

    kind = Kind.POSITIONAL

    __introspectable__ = (
        "slot",
        "on_set",
        "descr",
    )

    def __new__(cls, slot=Unset, /, on_set=Unset, descr=Unset):
        metadata = {
            "slot": slot,
            "on_set": on_set,
            "descr": descr,
        }
        _sanitize_metadata(cls, metadata)
        return _build(cls, metadata)

    @property
    def spellings(self):
        return ()


def _decorator(cls, typename, arguments, options, /):
    """
    Internal: shared body of the @unary/@keyword/@positional decorators.
    """
    argument = cls(*arguments, **options)

    @rename(typename)
    def wrapper(callback, /):
        if not callable(callback):
            raise TypeError(f"@{typename}() must be applied to a callable")
        if argument.on_set is not None:
            raise TypeError(f"@{typename}() must be applied only once")
        object.__setattr__(argument, "_on_set", callback)
        return argument

    return wrapper


def unary(*args, **kwargs):
    """
    Decorator/factory binding the decorated function as a Unary's on_set.

        @unary("--special", descr=" --special    Calls a special function.")
        def special(argument):
            ...

    Arguments are forwarded to Unary(...). Returns the Unary.
    """
    return _decorator(Unary, "unary", args, kwargs)


def keyword(*args, **kwargs):
    """
    Decorator/factory binding the decorated function as a Keyword's on_set.

        @keyword("--key", slot=key)
        def on_key(argument):
            ...
    """
    return _decorator(Keyword, "keyword", args, kwargs)


def positional(*args, **kwargs):
    """
    Decorator/factory binding the decorated function as a Positional's on_set.

    Without a slot the result is a catch-all positional:

        @positional()
        def collect(argument):
            ...
    """
    return _decorator(Positional, "positional", args, kwargs)


__all__ = (
    # Tag
    "Kind",

    # Descriptors
    "Unary",
    "Keyword",
    "Positional",

    # Decorators
    "unary",
    "keyword",
    "positional",
)

# Not part of the public API.
del ArgumentType
