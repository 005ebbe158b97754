"""
Runner: parse, print and dispatch in one call, returning a process exit code.

Exit codes
- 0: a verb was bound and its handler returned None (or the handler's int result).
- 0: help or version information was printed.
- 2: the arguments could not be bound (errors and contextual help on stderr).
"""
import shlex
import sys
from collections.abc import Iterable, Mapping

from rich.console import Console

from .binder import Parser
from .help import HelpAssembler
from .outcomes import *
from .utils import *


def _tokens(argv):
    if argv is Unset:
        return sys.argv[1:]
    if isinstance(argv, str):
        return shlex.split(argv)
    if isinstance(argv, Iterable):
        tokens = list(argv)
        for token in tokens:
            if not isinstance(token, str):
                raise TypeError("invoke() 'argv' must be a string or an iterable of strings")
        return tokens
    raise TypeError("invoke() 'argv' must be a string or an iterable of strings")


def invoke(registry, handlers, argv=Unset, *, settings=None, sentences=None, console=None):
    """
    Run one command line against registry and return its exit code.

    Parameters
    - registry: SchemaRegistry of the application's verbs.
    - handlers: mapping from verb token to a callable receiving Bound.values.
    - argv:
      • Unset: read sys.argv[1:].
      • str: split with shlex.split.
      • Iterable[str]: used as-is.
    - settings: ParserSettings shared by parsing and help.
    - sentences: SentenceBuilder or sentence table for help and error text.
    - console: rich Console for every output; by default help and version go to
      stdout and failures to stderr.

    Raises
    - LookupError: a verb was bound but handlers has no entry for it.
    - Whatever the handler raises.
    """
    if not isinstance(handlers, Mapping):
        raise TypeError("invoke() 'handlers' must be a mapping")
    for token, handler in handlers.items():
        registry.lookup(token)
        if not callable(handler):
            raise TypeError(f"invoke() handler for {token!r} must be callable")

    parser = Parser(registry, settings)
    assembler = HelpAssembler(registry, sentences=sentences, settings=parser.settings)
    outcome = parser.parse(_tokens(argv))

    match outcome:
        case Bound(verb, values):
            try:
                handler = next(handler for token, handler in handlers.items() if registry.lookup(token).token == verb)
            except StopIteration:
                raise LookupError(f"invoke() has no handler for verb {verb!r}") from None
            result = handler(values)
            return result if isinstance(result, int) and not isinstance(result, bool) else outcome.exit_code
        case HelpRequested(verb):
            (console or Console()).print(assembler.renderable(verb))
        case VersionRequested():
            settings = parser.settings
            (console or Console()).print(settings.version or settings.heading or assembler.program, highlight=False)
        case Failed(errors):
            (console or Console(stderr=True)).print(assembler.renderable(outcome.verb, errors))
        case NoVerb():
            (console or Console(stderr=True)).print(assembler.renderable())
    return outcome.exit_code


__all__ = (
    "invoke",
)
