"""
Sample application: a git-like tool with add, commit and clone verbs.

    python -m verbum add -f a.txt -v
    python -m verbum help add
"""
import sys

from rich.pretty import pprint

from verbum import *
from verbum.logging import configure_logging
from verbum.utils import Unset

__styles__ = {
    "heading": "bold #22C55E",
}


@option("-f", "--file", required=True, help="Set file.")
def file(value):
    if value != value.strip():
        raise ValueError("file name cannot start or end with spaces")
    return value


verbose = OptionSpec("-v", "--verbose", type=bool, help="Set output to verbose messages.")

REGISTRY = (
    RegistryBuilder()
    .register(VerbSpec("add", verbose, file, help="Add file contents to the index."))
    .register(VerbSpec("commit", verbose, help="Record changes to the repository."))
    .register(VerbSpec("clone", verbose, help="Clone a repository into a new directory."))
    .build()
)

SETTINGS = ParserSettings(
    program="verbum",
    heading="Myapp 2.0.0-beta",
    copyright="Copyright (c) 2019 Global.com",
)


def run(values):
    pprint(dict(values))


def main(argv=None):
    configure_logging()
    return invoke(
        REGISTRY,
        {"add": run, "commit": run, "clone": run},
        Unset if argv is None else argv,
        settings=SETTINGS,
    )


if __name__ == "__main__":
    sys.exit(main())
