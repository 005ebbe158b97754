r"""
Tokenizer and binder: turn an argument vector into a parse outcome.

Grammar
- verb selection: the first token names the verb (case-insensitive, aliases
  allowed); with exactly one default verb, empty input or a leading option binds
  against that verb instead.
- options: "-x", "--name", "--name value" and "--name=value"; boolean flags are
  presence-only but accept a following (or inline) "true"/"false".
- "--" ends option parsing; everything after it is a positional value.
- positional values go to the verb's is_default option.

Faults are collected as ParseError values in discovery order and returned inside
Failed; nothing raised by user input escapes the parser.

Quick example:
    >>> outcome = parse(["add", "-f", "a.txt", "-v"], schema)
    >>> outcome
    bound(verb='add', values=mappingproxy({'file': 'a.txt', 'verbose': True}))
"""
import logging
import re
from collections import deque
from collections.abc import Iterable

from .faults import *
from .outcomes import *
from .registry import SchemaRegistry
from .settings import DEFAULTS, ParserSettings
from .utils import *

logger = logging.getLogger(__name__)

_LONG = re.compile(r"--(?P<name>[^\W\d_](?:-?[^\W_]+)*)(?:=(?P<value>.*))?", re.DOTALL)
_SHORT = re.compile(r"-(?P<name>[^\W_])(?:=(?P<value>.*))?", re.DOTALL)
_INTEGER = re.compile(r"[+-]?\d+")
_BOOLEANS = {"true": True, "false": False}


def _convert(option, raw, settings):
    """
    Internal: coerce one raw string to the option's type; ValueError when it cannot.
    """
    if option.type is int:
        if not _INTEGER.fullmatch(raw):
            raise ValueError("invalid integer %r" % raw)
        return int(raw)
    if option.choices:
        if raw in option.choices:
            return raw
        if settings.case_insensitive_choices:
            for choice in option.choices:
                if choice.casefold() == raw.casefold():
                    return choice
        raise ValueError("invalid choice %r" % raw)
    return raw


class Parser:
    """
    Binds argument vectors against a SchemaRegistry.

    A parser holds no per-call state, so one instance may serve concurrent
    parse() calls.
    """

    def __init__(self, registry, settings=None):
        if not isinstance(registry, SchemaRegistry):
            raise TypeError("parser 'registry' must be a schema-registry")
        if settings is None:
            settings = DEFAULTS
        elif not isinstance(settings, ParserSettings):
            raise TypeError("parser 'settings' must be parser-settings")

        self._registry = registry
        self._settings = settings
        self._switches = {}
        for verb in registry.verbs:
            switches = {}
            for option in verb.options:
                for name in option.names:
                    if (key := settings.fold(name)) in switches:
                        raise ValueError(f"parser {verb.token!r} option {name!r} collides with {key!r}")
                    switches[key] = option
            self._switches[verb.token] = switches

    @property
    def registry(self):
        return self._registry

    @property
    def settings(self):
        return self._settings

    def parse(self, args, /):
        """
        parse an argument vector (without the program name) into a ParseOutcome.

        phases
        - configuration: more than one default verb fails every parse.
        - requests: help/version tokens short-circuit everything else.
        - selection: pick the verb from the first token (or the default verb).
        - walk: bind options left to right, collecting faults.
        - setters: pass each final value through its option's setter.
        - constraints: set/group ambiguity, exclusive sets, groups, required options.
        """
        if isinstance(args, str) or not isinstance(args, Iterable):
            raise TypeError("parse() argument must be an iterable of strings")
        tokens = list(args)
        for token in tokens:
            if not isinstance(token, str):
                raise TypeError("parse() argument must be an iterable of strings")

        logger.debug("parse started: %r", tokens)
        outcome = self._parse(tokens)
        logger.debug("parse finished: %s (exit code %d)", type(outcome).__typename__, outcome.exit_code)
        return outcome

    def _parse(self, tokens):
        defaults = self._registry.defaults
        if len(defaults) > 1:
            logger.error("multiple default verbs: %s", ", ".join(verb.token for verb in defaults))
            return Failed([MultipleDefaultVerbsError()])

        verb, rest = self._select(tokens, defaults)
        if (request := self._requested(tokens, verb)) is not None:
            return request

        if not len(self._registry):
            return NoVerb()
        if verb is None:
            if not tokens:
                return Failed([NoVerbSelectedError()])
            return Failed([BadVerbSelectedError(tokens[0])])
        return self._bind(verb, rest)

    def _select(self, tokens, defaults):
        default = defaults[0] if len(defaults) == 1 else None
        if not tokens or tokens[0].startswith("-") and tokens[0] != "-":
            return default, tokens
        return self._registry.get(tokens[0]), tokens[1:]

    def _requested(self, tokens, verb):
        """
        Internal: HelpRequested/VersionRequested when the input asks for them, else None.

        Declared verbs and options shadow the automatic names.
        """
        settings = self._settings
        if tokens:
            word = tokens[0].casefold()
            if settings.auto_help and word == "help" and "help" not in self._registry:
                target = self._registry.get(tokens[1]) if len(tokens) > 1 else None
                return HelpRequested(target.token if target is not None else None)
            if settings.auto_version and word == "version" and "version" not in self._registry:
                return VersionRequested()

        switches = self._switches[verb.token] if verb is not None else {}
        for token in tokens:
            if token == "--":
                break
            if (key := settings.fold(token)) in switches:
                continue
            if settings.auto_help and key in ("--help", "-h"):
                return HelpRequested(verb.token if verb is not None else None)
            if settings.auto_version and key == "--version":
                return VersionRequested()
        return None

    def _is_switch(self, switches, token):
        # Negative numbers are values unless an option is literally named that way.
        if not token.startswith("-") or token == "-":
            return False
        return not _INTEGER.fullmatch(token) or self._settings.fold(token) in switches

    def _bind(self, verb, args):
        switches = self._switches[verb.token]
        positional = verb.positional
        tokens = deque(args)
        errors = []
        values = {}
        seen = []
        extras = []
        literal = False

        while tokens:
            token = tokens.popleft()

            if not literal and token == "--":
                literal = True
                continue

            if literal or not self._is_switch(switches, token):
                if positional is None or (extras and not positional.sequence):
                    errors.append(BadFormatTokenError(token))
                    continue
                if not extras:
                    if positional.long in seen and not positional.repeatable:
                        errors.append(RepeatedOptionError(positional.long))
                    elif positional.long not in seen:
                        seen.append(positional.long)
                extras.append(token)
                continue

            match = _LONG.fullmatch(token) or _SHORT.fullmatch(token)
            if match is None:
                errors.append(BadFormatTokenError(token))
                continue

            option = switches.get(self._settings.fold(token[:match.end("name")]))
            if option is None:
                errors.append(UnknownOptionError(token))
                continue

            if option.long in seen and not option.repeatable:
                errors.append(RepeatedOptionError(option.long))
                self._take(option, match["value"], tokens, switches, errors)
                continue
            if option.long not in seen:
                seen.append(option.long)

            value = self._take(option, match["value"], tokens, switches, errors)
            if value is not Unset:
                self._store(option, value, values)

        if extras:
            if positional.sequence:
                value = self._coerce_sequence(positional, None, extras, errors)
            else:
                value = self._coerce(positional, None, extras[0], errors)
            if value is not Unset:
                self._store(positional, value, values)

        self._apply_setters(verb, seen, values, errors)
        self._check_constraints(verb, seen, errors)

        if errors:
            return Failed(errors, verb=verb.token)
        return Bound(verb.token, {long: values[long] for long in seen if long in values})

    def _take(self, option, inline, tokens, switches, errors):
        """
        Internal: consume and coerce the value(s) of one occurrence; Unset on failure.
        """
        if option.type is bool:
            if inline is not None:
                raw = inline
            elif tokens and tokens[0].casefold() in _BOOLEANS:
                raw = tokens.popleft()
            else:
                return True
            try:
                return _BOOLEANS[raw.casefold()]
            except KeyError:
                errors.append(BadFormatConversionError(option.long))
                return Unset

        if option.sequence:
            raws = [] if inline is None else [inline]
            while tokens and not self._is_switch(switches, tokens[0]):
                raws.append(tokens.popleft())
            return self._coerce_sequence(option, option.long, raws, errors)

        if inline is not None:
            raw = inline
        elif tokens and not self._is_switch(switches, tokens[0]):
            raw = tokens.popleft()
        else:
            errors.append(MissingValueOptionError(option.long))
            return Unset
        return self._coerce(option, option.long, raw, errors)

    def _coerce(self, option, name, raw, errors):
        try:
            return _convert(option, raw, self._settings)
        except ValueError:
            errors.append(BadFormatConversionError(name))
            return Unset

    def _coerce_sequence(self, option, name, raws, errors):
        minimum, maximum = option.arity
        if len(raws) < minimum or maximum is not None and len(raws) > maximum:
            errors.append(SequenceOutOfRangeError(name))
            return Unset
        try:
            return tuple(_convert(option, raw, self._settings) for raw in raws)
        except ValueError:
            errors.append(BadFormatConversionError(name))
            return Unset

    @staticmethod
    def _store(option, value, values):
        # repeatable sequences extend; everything else keeps the last value
        if option.sequence and option.long in values:
            values[option.long] += value
        else:
            values[option.long] = value

    def _apply_setters(self, verb, seen, values, errors):
        for long in seen:
            setter = coalesce(verb.option(long).setter)
            if setter is None or long not in values:
                continue
            try:
                values[long] = setter(values[long])
            except Exception as exception:
                logger.warning("setter of %s option %r failed: %r", verb.token, long, exception)
                errors.append(SetValueExceptionError(long, str(exception)))
                del values[long]

    @staticmethod
    def _check_constraints(verb, seen, errors):
        for option in verb.options:
            if option.set_name is not None and option.group is not None:
                errors.append(GroupOptionAmbiguityError(option.long))

        present = [verb.option(long) for long in seen]
        active = {option.set_name for option in present if option.set_name is not None}
        if len(active) > 1:
            for option in present:
                if option.set_name is not None:
                    errors.append(MutuallyExclusiveSetError(option.long, option.set_name))

        groups = {}
        for option in verb.options:
            if option.group is not None:
                groups.setdefault(option.group, []).append(option.long)
        for group, names in groups.items():
            if not any(name in seen for name in names):
                errors.append(MissingGroupOptionError(group, tuple(names)))

        for option in verb.options:
            if not option.required or option.long in seen:
                continue
            if option.set_name is not None and active and option.set_name not in active:
                continue
            errors.append(MissingRequiredOptionError(None if option.is_default else option.long))


def parse(args, registry, settings=None):
    """
    parse args against registry in one step; see Parser.parse().
    """
    return Parser(registry, settings).parse(args)


def _occurrences(items, arity, plain, repeatable):
    """
    Internal: split sequence items into the fewest "--name=first rest..." occurrences.

    Every occurrence holds an arity-bounded count of items and only its first item
    may look like an option. None when no such split exists.
    """
    minimum, maximum = arity
    best = [()] + [None] * len(items)
    for end in range(1, len(items) + 1):
        for start in reversed(range(end)):
            if start < end - 1 and not plain(items[start + 1]):
                break
            if maximum is not None and end - start > maximum:
                break
            if end - start < minimum or best[start] is None:
                continue
            if best[end] is None or len(best[start]) + 1 < len(best[end]):
                best[end] = (*best[start], items[start:end])
    if best[-1] is None or not repeatable and len(best[-1]) > 1:
        return None
    return best[-1]


def unparse(registry, bound, /):
    """
    serialize a Bound outcome back into tokens that parse to an equal outcome.

    Every value is written in the inline "--name=value" form, so values that look
    like options survive. Sequences are split into occurrences whose later items
    never look like options; the positional sequence goes last, after "--".
    Setters run again on re-parse, so round-trips assume idempotent setters.

    Raises ValueError for hand-built values no argument vector can produce.
    """
    if not isinstance(bound, Bound):
        raise TypeError("unparse() argument must be a bound outcome")
    verb = registry.lookup(bound.verb)
    names = {name.casefold() for option in verb.options for name in option.names}

    def plain(item):
        # Mirrors Parser._is_switch: a value the walk keeps collecting.
        if not item.startswith("-") or item == "-":
            return True
        return bool(_INTEGER.fullmatch(item)) and item.casefold() not in names

    tokens = [verb.token]
    tail = []
    for option in verb.options:
        if option.long not in bound:
            continue
        value = bound[option.long]
        name = "--" + option.long
        if option.type is bool:
            tokens.append(name if value else name + "=false")
            continue
        if not option.sequence:
            tokens.append(f"{name}={value}")
            continue

        items = tuple(map(str, value))
        minimum, maximum = option.arity
        if option.is_default and items and minimum <= len(items) and (maximum is None or len(items) <= maximum):
            tail = ["--", *items]
            continue
        if not items:
            if minimum:
                raise ValueError(f"unparse() cannot serialize empty {option.long!r}")
            tokens.append(name)
            continue
        occurrences = _occurrences(items, option.arity, plain, option.repeatable)
        if occurrences is None:
            raise ValueError(f"unparse() cannot serialize {option.long!r} items {items!r}")
        for first, *rest in occurrences:
            tokens.extend((f"{name}={first}", *rest))
    return tokens + tail


__all__ = (
    "Parser",
    "parse",
    "unparse",
)
