"""
Argscan faults (scan errors, table warnings) and rendering.

Scope
- FaultCode: stable numeric identifiers for every user-facing issue, grouped by
  domain so logs and searches stay predictable.
- ScanFault and its four subclasses: the complete taxonomy of scan errors.
  Faults are *values*: the parser never raises them. It counts each one and
  hands it to the caller's reporter, then keeps scanning.
- TableWarning: developer-facing warnings about a table's shape, emitted through
  the warnings module when the table is built.
- ScanExit: ExceptionGroup of the faults of one scan, for callers that want an
  exception (Parser.finalize()).
- trigger(): render a fault (or exit group) with runtime options.
- report(): the stock reporter, printing each fault to stderr as it happens.

Payloads
- fault.token: the offending command-line token, verbatim.
- fault.index: the token's position in argv (argv[0] is the program name, so the
  first real argument is index 1).
- fault.position / fault.flag (INVALID_FLAG only): offset of the offending
  character within the token and the character itself ("-abc", 3, "c").

Host configuration (read from __main__, all optional)
- __prog__:   program name shown in headers (defaults to the parsed argv[0]).
- __styles__: mapping overriding style names used by the renderers.
- __codes__:  mapping FaultCode -> label replacing the numeric code in headers.
"""
import copy
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import *

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - named arguments (1111x)
      • INVALID_ARGUMENT: a '--' token that matches no name or negation.
      • INVALID_FLAG: a character of a '-' cluster that matches no flag.
      • EXPECTED_ARGUMENT_AFTER: a keyword given as the last token.
    - positionals (1112x)
      • UNEXPECTED_ARGUMENT: a positional token with no positional left to take it.
    - table warnings (1212x)
      • UNREACHABLE_POSITIONAL: a positional shadowed by a catch-all positional.
    """
    # --- named argument errors (1111x) ---
    INVALID_ARGUMENT            = 11111
    INVALID_FLAG                = 11112
    EXPECTED_ARGUMENT_AFTER     = 11113

    # --- positional errors (1112x) ---
    UNEXPECTED_ARGUMENT         = 11121

    # --- table warnings (1212x) ---
    UNREACHABLE_POSITIONAL      = 12121

    def normalize(self):
        """
        return a host-normalized label for this code.

        __main__.__codes__ may map codes to friendlier labels; otherwise the
        numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _renderer(options, defaults, /):
    """
    Internal: build the (styler, text) helper pair shared by every renderer.

    - styler(name) resolves a style name against `defaults` merged with
      __main__.__styles__, or "" when colors are off.
    - text(fragment, style) wraps a fragment into rich Text, dropping the style
      when colors are off and keeping pre-built Text untouched.
    """
    styles = defaultdict(str, defaults | getattr(__import__("__main__"), "__styles__", {}))
    colorful = options.get("colorful", True)

    def styler(style):
        return styles[style] if colorful else ""

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if isinstance(fragment, Text):
            return fragment if colorful else Text(fragment.plain)
        return Text(str(fragment), style if colorful else "")

    return styler, text


def _prog(options):
    return getattr(__import__("__main__"), "__prog__", options.get("prog") or "argscan")


class ScanFault(Exception):
    """
    Base of the four scan errors.

    Constructed by the parser with a lowercased one-line message and options:
    code, title, hint, token, index, and (INVALID_FLAG) position/flag. Rendering
    options (prog, colorful, fancy) are merged in later via trigger()/copy.replace.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(coalesce(message, ""))
        self.message = coalesce(message, "")
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code")

    @property
    def token(self):
        return self.options.get("token")

    @property
    def index(self):
        return self.options.get("index")

    @property
    def position(self):
        return self.options.get("position")

    @property
    def flag(self):
        return self.options.get("flag")

    def __rich__(self):
        styler, text = _renderer(self.options, {
            # header parts
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "error-title": "bold #FF4DA6",

            # body
            "error-message": "#C8C8D0",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        })

        header = Text.assemble(
            "[ ",
            text(_prog(self.options), styler("prog-name")),
            " — ",
            text(self.code.normalize() if self.code else "", styler("code")),
            " | ",
            text(str(self.options.get("title", "error")).title(), styler("error-title")),
            " ]"
        )
        body = [text(self.message, styler("error-message"))]
        if hint := self.options.get("hint"):
            body.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))

        if self.options.get("fancy", False):
            try:
                width = int((console.width - 4) * self.options["ratio"])
            except KeyError:
                width = None
            return Panel(Group(*body), title=header, title_align="left", width=width)

        return Group(header, *body)

    def __trigger__(self):
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class InvalidArgumentError(ScanFault): ...
class InvalidFlagError(ScanFault): ...
class ExpectedArgumentAfterError(ScanFault): ...
class UnexpectedArgumentError(ScanFault): ...


class TableWarning(Warning):
    """
    Base of table-shape warnings (developer-facing, emitted at Table construction).
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(coalesce(message, ""))
        self.message = coalesce(message, "")
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code")

    def __rich__(self):
        styler, text = _renderer(self.options, {
            "code": "bold #FFB400",
            "warning-title": "bold #FFC2E0",
            "warning-message": "#D6D6DE",
            "hint-arrow": "#B8EFAF dim",
            "hint": "italic #B8EFAF",
        })

        header = Text.assemble(
            "[ ",
            text(self.code.normalize() if self.code else "", styler("code")),
            " | ",
            text(str(self.options.get("title", "warning")).title(), styler("warning-title")),
            " ]"
        )
        body = [text(self.message, styler("warning-message"))]
        if hint := self.options.get("hint"):
            body.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))
        return Group(header, *body)

    def __trigger__(self):
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class UnreachablePositionalWarning(TableWarning): ...


class ScanExit(ExceptionGroup[ScanFault]):
    """
    All faults of one scan, bundled for callers that stop on errors.

    Options
    - shell: when True, __trigger__ prints every fault and exits with status 1;
      otherwise it raises the group.
    - prog, colorful, fancy: forwarded to each fault when rendering.
    """

    def __new__(cls, exceptions, **options):
        return super().__new__(cls, "bad invocation", exceptions)

    def __init__(self, exceptions, **options):
        super().__init__("bad invocation", tuple(exceptions))
        self.options = MappingProxyType(options)

    def __rich__(self):
        styler, text = _renderer(self.options, {
            "prog-name": "bold #E6E6F0",
            "title": "bold #FF4DA6",
        })

        header = Text.assemble(
            "[ ",
            text(_prog(self.options), styler("prog-name")),
            " — ",
            text("%s (%d)" % (self.message.title(), len(self.exceptions)), styler("title")),
            " ]"
        )
        shared = {name: self.options[name] for name in ("prog", "colorful", "fancy") if name in self.options}
        renders = [copy.replace(exception, ratio=2/3, **shared) for exception in self.exceptions]

        if self.options.get("fancy", False):
            return Panel(Group(*renders), title=header, title_align="left")
        return Group(header, *renders)

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.exceptions, **{**self.options, **overrides})


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ (ScanFault, TableWarning, ScanExit).
    - options are merged with copy.replace() before __trigger__ runs; the original
      fault is left unchanged.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def report(fault, /, *, colorful=True, fancy=False):
    """
    stock reporter: print `fault` to stderr as soon as the parser finds it.

    use functools.partial to change the rendering options:
        Parser(table, reporter=functools.partial(report, fancy=True))
    """
    trigger(fault, colorful=colorful, fancy=fancy)


__all__ = (
    "FaultCode",
    "ScanFault",
    "InvalidArgumentError",
    "InvalidFlagError",
    "ExpectedArgumentAfterError",
    "UnexpectedArgumentError",
    "TableWarning",
    "UnreachablePositionalWarning",
    "ScanExit",
    "trigger",
    "report",
)
