import sys

from rich.pretty import pprint

from argscan import *

__prog__ = "example"

# Values which can be set by command-line arguments.
foo = Slot(YES)
bar = Slot()
baz = Slot()
key = Slot("default key value")
help = Slot()
pos1 = Slot("default pos1 value")
pos2 = Slot()


@unary("--special", descr=" --special    Calls a special function.")
def special(argument):
    print("special handler called")


table = Table(
    Unary(
        "--foo", flag="f", negation="--no-foo", slot=foo,
        descr=" -f, --foo    Sets foo.\n"
              " --no-foo     Unsets foo.",
    ),
    Unary("--bar", flag="b", slot=bar, descr=" -b, --bar    Sets bar."),
    Unary(
        "--baz", negation="--no-baz", slot=baz,
        descr=" --baz        Sets baz.\n"
              " --no-baz     Unsets baz.",
    ),
    Keyword("--key", slot=key, descr=" --key <val>  Sets key to val."),
    special,
    Unary("--help", flag="h", slot=help, descr=" --help       Prints this message."),
    Positional(pos1, descr=" pos1         Positional argument 1."),
    Positional(pos2, descr=" pos2         Positional argument 2."),
)


def main(argv=None):
    parser = Parser(table, reporter=report)
    if parser.parse(sys.argv if argv is None else argv):
        print("exiting due to invocation errors", file=sys.stderr)
        return 1

    if help:
        print("Usage: example [options] [pos1] [pos2]")
        describe(table)
        return 0

    pprint({
        "foo": "YES" if foo else "NO",
        "bar": "YES" if bar else "NO",
        "baz": "YES" if baz else "NO",
        "key": key.value,
        "pos1": pos1.value,
        "pos2": pos2.value,
    })
    return 0


if __name__ == '__main__':
    sys.exit(main())
