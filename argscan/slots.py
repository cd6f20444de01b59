"""
Caller-owned value slots.

A Slot is a tiny mutable cell the caller creates, keeps a reference to, and
hands to an argument descriptor. During a scan the parser only ever assigns
`slot.value`; it never creates, replaces or drops a slot, so the caller reads the
result from the same object after parse() returns.

Values written by the parser
- unary name or flag cluster  → the matching token itself (e.g. "--foo", "-fb")
- unary negation             → None (absent)
- keyword                    → the token following the keyword
- positional                 → the positional token

YES
- A non-empty placeholder to use as the initial value of a unary slot whose
  option is “on by default”; a later negation clears it to None.

Example
    >>> foo = Slot(YES)
    >>> foo.value
    'YES'
    >>> foo.clear(); bool(foo)
    False
"""
from rich.text import Text

YES = "YES"


class Slot:
    """
    Mutable holder for one string value (or None when absent).

    Truthiness follows presence: a slot is truthy when its value is not None,
    including the empty string (an explicitly supplied empty keyword value is
    still a supplied value).
    """

    __slots__ = ("value",)

    def __init__(self, value=None, /):
        if not isinstance(value, str | None):
            raise TypeError("slot value must be a string or None")
        self.value = value

    def clear(self):
        """Mark the value as absent."""
        self.value = None

    def __bool__(self):
        return self.value is not None

    def __repr__(self):
        return "slot(%r)" % (self.value,)

    def __rich__(self):
        if self.value is None:
            return Text("slot(absent)", style="dim")
        return Text.assemble("slot(", (repr(self.value), "green"), ")")

    def __init_subclass__(cls, **options):
        raise TypeError("type 'Slot' is not an acceptable base type")


__all__ = (
    "Slot",
    "YES",
)
