"""
Argscan utilities (internal helpers shared by descriptors, tables and the parser)

Scope
- Small building blocks that keep the public layers consistent.
- Exported, but designed primarily for use inside the package.

Overview
- UnsetType / Unset
  • Singleton sentinel for “value not provided”, distinct from None.
  • None is meaningful in argscan: a slot holding None is an *absent* value
    (written by a negation), so parameters default to Unset instead.

- coalesce(value, default=None)
  • Replace Unset with a concrete default; None/""/0 are preserved.

- rename(callable, name) / @rename("name")
  • Assign stable __name__/__qualname__ to decorator wrappers.

- mirror("attr")
  • Read-only property exposing the private backing field self._attr as-is.
    Descriptors hold references (slots, handlers) that must keep their identity,
    so nothing is copied.

- ordinal(number)
  • English ordinal label (“first”, “second”, “11th”) for position-first messages.

Quick examples
    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> ordinal(3)
    'third'
"""
import builtins
import functools
from typing import final


@final
class UnsetType:
    """
    Sentinel type representing a parameter that was not provided.

    Characteristics
    - Boolean-false, but distinct from None.
    - repr(Unset) -> "Unset".
    - Sealed: subclassing raises TypeError.
    - Singleton: UnsetType() always yields the same instance.
    - Usable in isinstance() unions: isinstance(x, str | Unset).
    """

    def __or__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Return `object` unless it is Unset, in which case return `default`.

    Falsey values (None, "", 0) are returned unchanged; only the sentinel is
    substituted.
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set __name__/__qualname__ on a callable, or build a decorator that will.

    Forms
    - rename(callable, name) -> callable (renamed in place)
    - rename(name)           -> decorator

    Raises
    - TypeError on wrong arity, non-callable targets, non-string names, or
      callables whose names cannot be updated (built-ins).
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def mirror(name, /):
    """
    Define a read-only property reading the private field "_{name}".

    The value is returned by reference. A descriptor's slot must be the very
    object the caller handed in, otherwise writes made by the parser would be
    invisible to the caller.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return getattr(self, "_" + name)

    return property(getter)


@functools.cache
def ordinal(number, /):
    """
    Return a human-friendly ordinal label for a 1-based position.

    - 1..10 are rendered as words ("first"…"tenth").
    - Other numbers use numeric ordinals with English suffixes (11th, 21st, 102nd).
    """
    if not isinstance(number, int) or isinstance(number, bool):
        raise TypeError("ordinal() argument must be an integer")
    if number < 1:
        raise ValueError("ordinal() argument must be a positive integer")

    try:
        return (
            "first", "second", "third", "fourth", "fifth",
            "sixth", "seventh", "eighth", "ninth", "tenth",
        )[number - 1]
    except IndexError:
        pass

    # 11th, 12th, 13th (and 111th, 112th, ...)
    if 10 < number % 100 < 20:
        return f"{number}th"
    return f"{number}%s" % {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


Unset = UnsetType()
"""
Sentinel for “not provided”.

Use Unset as a parameter default wherever None already means something (an
absent slot value, an unset handler) and resolve it with coalesce().
"""


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "ordinal",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
