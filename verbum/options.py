r"""
Verbum schema specifications: options, verbs and the option decorator.

Overview
- Specs
  • OptionSpec: a named, typed input declared under a verb (flag, valued, enum or sequence).
  • VerbSpec: a named subcommand holding an ordered sequence of OptionSpec.

- Decorators
  • @option(...): build an OptionSpec and bind the decorated function as its setter.
    The setter receives the coerced value and returns the value to bind; anything
    it raises is reported as a set-value error instead of escaping the parser.

Metadata (sanitized on construction)
- OptionSpec
  • names: one long name ("--file") and at most one short name ("-f").
  • type: bool | str | int; choices turn a str option into an enum-of-string.
  • sequence/arity: sequence options collect several values, arity=(min, max)
    bounds the count (max may be None for unbounded).
  • required, help, metavar, set_name, group, is_default, repeatable, hidden.
- VerbSpec
  • token: case-insensitive verb name; aliases add extra tokens.
  • options: unique short/long names, at most one is_default option.
  • help, is_default (default verb), hidden.

Validation highlights
- Names must match r"--[^\W\d_](-?[^\W_]+)*" (long) or r"-[^\W_]" (short).
- Booleans cannot be sequences, carry choices or absorb positional values.
- help/metavar/set_name/group strings are trimmed; empty strings are rejected.

Quick example:
    >>> add = VerbSpec(
    ...     "add",
    ...     OptionSpec("-f", "--file", required=True, help="Set file."),
    ...     OptionSpec("-v", "--verbose", type=bool, help="Set output to verbose messages."),
    ...     help="Add file contents to the index.",
    ... )
"""
import builtins
import re
from collections.abc import Iterable, Set
from types import MethodType

from .utils import *


def _sanitize_strings(cls, metadata, *names):
    """
    Internal: trim optional string fields, reject empties, resolve Unset to None.
    """
    for name in names:
        if not isinstance(object := metadata[name], str | UnsetType):
            raise TypeError(f"{cls.__typename__} {name!r} must be a string")
        elif isinstance(object, str) and not (object := object.strip()):
            raise ValueError(f"{cls.__typename__} {name!r} cannot be empty")
        metadata[name] = coalesce(object)


def _sanitize_names(cls, metadata, /):
    r"""
    Internal: split raw names into a long name and an optional short name.

    Accepted forms
    - long: "--file", "--dry-run" (unicode letters allowed, no underscores)
    - short: "-f" (a single letter or digit)

    Exactly one long name is required; at most one short name is allowed. The
    stored forms drop the dashes ("file", "f").
    """
    short = long = None
    if not metadata["names"]:
        raise TypeError(f"{cls.__typename__} must specify at least one name")

    for name in metadata["names"]:
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} names must be strings")
        elif not (name := name.strip()):
            raise ValueError(f"{cls.__typename__} names cannot be empty-strings")
        elif re.fullmatch(r"--[^\W\d_](-?[^\W_]+)*", name):
            if long is not None:
                raise ValueError(f"{cls.__typename__} cannot declare more than one long name")
            long = name[2:]
        elif re.fullmatch(r"-[^\W_]", name):
            if short is not None:
                raise ValueError(f"{cls.__typename__} cannot declare more than one short name")
            short = name[1:]
        else:
            raise ValueError(f"{cls.__typename__} names must be valid shell-style option names ({name!r})")

    if long is None:
        raise TypeError(f"{cls.__typename__} must specify a long name")

    metadata["short"] = short
    metadata["long"] = long
    del metadata["names"]


def _sanitize_value_metadata(cls, metadata, /):
    """
    Internal: validate type, choices, sequence and arity.

    Rules
    - type must be one of bool, str, int.
    - choices must be an iterable of unique non-empty strings and requires type=str.
    - arity is only meaningful for sequences; it defaults to (1, None) there.
    - booleans are presence flags: no sequence, no choices, no positional binding.
    """
    if metadata["type"] not in (bool, str, int):
        raise TypeError(f"{cls.__typename__} 'type' must be one of bool, str or int")

    if isinstance(choices := metadata["choices"], str) or not isinstance(choices, Iterable):
        raise TypeError(f"{cls.__typename__} 'choices' must be an iterable of strings")
    sanitized = []
    for choice in choices:
        if not isinstance(choice, str) or not choice.strip():
            raise TypeError(f"{cls.__typename__} 'choices' must be an iterable of non-empty strings")
        if choice in sanitized:
            raise ValueError(f"{cls.__typename__} 'choices' cannot contain duplicates")
        sanitized.append(choice)
    if isinstance(choices, Set):
        sanitized.sort()
    if sanitized and metadata["type"] is not str:
        raise TypeError(f"{cls.__typename__} 'choices' require type=str")
    metadata["choices"] = tuple(sanitized)

    if metadata["type"] is bool:
        if metadata["sequence"]:
            raise TypeError(f"{cls.__typename__} boolean options cannot be sequences")
        if metadata["is_default"]:
            raise TypeError(f"{cls.__typename__} boolean options cannot receive positional values")

    if not metadata["sequence"]:
        if metadata["arity"] is not Unset:
            raise TypeError(f"{cls.__typename__} 'arity' requires sequence=True")
        metadata["arity"] = None
        return

    match coalesce(metadata["arity"], (1, None)):
        case (int() as minimum, int() | None as maximum) if not isinstance(minimum, bool):
            pass
        case _:
            raise TypeError(f"{cls.__typename__} 'arity' must be a (min, max) pair of integers")
    if minimum < 0:
        raise ValueError(f"{cls.__typename__} 'arity' minimum cannot be negative")
    if maximum is not None and maximum < max(minimum, 1):
        raise ValueError(f"{cls.__typename__} 'arity' maximum must be at least the minimum and one")
    metadata["arity"] = (minimum, maximum)


class OptionSpec(metaclass=SpecType):
    """
    Named, typed option specification.

    Highlights
    - Identity: the long name (without dashes) keys the bound value.
    - Types: bool (presence flag, optional true/false value), str, int, enum-of-string
      through choices, and sequences of str/int bounded by arity.
    - Constraints: required, set_name (mutually-exclusive set), group (at least
      one member of the group must be supplied), repeatable.
    - Positional: is_default marks the option that receives unbound values.
    - Setter: bound by the @option(...) decorator; called once with the final coerced
      value (a tuple for sequences) and its return value is bound.

    Properties
    - The names listed in __introspectable__ are exposed as read-only attributes.
    """

    __introspectable__ = (
        "short",
        "long",
        "type",
        "required",
        "choices",
        "sequence",
        "arity",
        "help",
        "metavar",
        "set_name",
        "group",
        "is_default",
        "repeatable",
        "hidden",
        "setter",
    )
    __displayable__ = (
        "short",
        "long",
        "type",
        "required",
        "choices",
        "sequence",
        "arity",
        "set_name",
        "group",
        "is_default",
    )

    def __init__(
            self,
            *names,
            type=str,
            required=False,
            choices=(),
            sequence=False,
            arity=Unset,
            help=Unset,
            metavar=Unset,
            set_name=Unset,
            group=Unset,
            is_default=False,
            repeatable=False,
            hidden=False,
    ):
        """
        Construct an OptionSpec with the provided metadata.

        Parameters
        - names: "--long" and optionally "-s".
        - type: bool | str | int
          Target type of each value.
        - required: bool
          Report a missing-required error when not supplied.
        - choices: Iterable[str]
          Allowed values for an enum-of-string option.
        - sequence: bool
          Collect consecutive values; arity=(min, max) bounds their count.
        - help: Unset | str
          One-line description for the help table.
        - metavar: Unset | str
          Value label for usage lines (defaults to the upper-cased long name).
        - set_name: Unset | str
          Mutually-exclusive set; options from different sets cannot be combined.
        - group: Unset | str
          At-least-one group; some member of the group must be supplied.
        - is_default: bool
          Receive positional values not bound to an option name.
        - repeatable: bool
          Allow the option more than once (scalars keep the last value, sequences extend).
        - hidden: bool
          Suppress from help output.
        """
        cls = builtins.type(self)
        metadata = {
            "names": names,
            "type": type,
            "required": bool(required),
            "choices": choices,
            "sequence": bool(sequence),
            "arity": arity,
            "help": help,
            "metavar": metavar,
            "set_name": set_name,
            "group": group,
            "is_default": bool(is_default),
            "repeatable": bool(repeatable),
            "hidden": bool(hidden),
        }
        _sanitize_names(cls, metadata)
        _sanitize_strings(cls, metadata, "help", "metavar", "set_name", "group")
        _sanitize_value_metadata(cls, metadata)

        if metadata["required"] and metadata["hidden"]:
            raise TypeError(f"{cls.__typename__} required options cannot be hidden")

        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        self._setter = Unset  # Bound by the @option(...) decorator.

    @property
    def names(self):
        """
        The option as typed on a command line: ("-f", "--file") or ("--file",).
        """
        return tuple(filter(None, ("-" + self.short if self.short else None, "--" + self.long)))

    @property
    def takes_value(self):
        """
        Whether the option consumes tokens (everything except boolean flags).
        """
        return self.type is not bool

    def __option__(self):
        """
        Introspection hook: identify this spec as an OptionSpec.
        """
        return self


def _resolve_option(x):
    """
    Return the concrete OptionSpec from an OptionSpec or an @option(...) wrapper.
    """
    if not hasattr(x, "__option__") or not callable(x.__option__):
        raise TypeError("verb-spec options must be option-specs")
    if not isinstance(option := x.__option__(), OptionSpec):
        raise TypeError("__option__() non-option returned")
    return option


class VerbSpec(metaclass=SpecType):
    """
    Named subcommand specification selecting which options apply.

    Invariants (checked on construction)
    - short and long names are unique within the verb.
    - at most one option has is_default=True.
    - the token and aliases are non-empty verb-shaped words.
    """

    __introspectable__ = (
        "token",
        "options",
        "help",
        "is_default",
        "hidden",
        "aliases",
    )

    def __init__(self, token, /, *options, help=Unset, is_default=False, hidden=False, aliases=()):
        cls = type(self)
        metadata = {
            "help": help,
        }
        _sanitize_strings(cls, metadata, "help")

        tokens = []
        for name in (token, *aliases):
            if not isinstance(name, str):
                raise TypeError(f"{cls.__typename__} tokens must be strings")
            elif not re.fullmatch(r"[^\W_][\w-]*", name := name.strip()):
                raise ValueError(f"{cls.__typename__} token {name!r} must be a word")
            elif name.casefold() in map(str.casefold, tokens):
                raise ValueError(f"{cls.__typename__} tokens cannot contain duplicates")
            tokens.append(name)

        options = tuple(map(_resolve_option, options))
        shorts = set()
        longs = set()
        defaults = []
        for option in options:
            if option.short is not None:
                if option.short in shorts:
                    raise ValueError(f"{cls.__typename__} {tokens[0]!r} short name '-{option.short}' is already in use")
                shorts.add(option.short)
            if option.long in longs:
                raise ValueError(f"{cls.__typename__} {tokens[0]!r} long name '--{option.long}' is already in use")
            longs.add(option.long)
            if option.is_default:
                defaults.append(option)
        if len(defaults) > 1:
            raise ValueError(f"{cls.__typename__} {tokens[0]!r} can declare at most one default option")

        self._token = tokens[0]
        self._aliases = tuple(tokens[1:])
        self._options = options
        self._help = metadata["help"]
        self._is_default = bool(is_default)
        self._hidden = bool(hidden)

    @property
    def tokens(self):
        """
        The token followed by its aliases.
        """
        return (self.token, *self.aliases)

    @property
    def positional(self):
        """
        The option receiving unbound values, or None.
        """
        return next((option for option in self._options if option.is_default), None)

    def option(self, long, /):
        """
        Return the option declared with the given long name (without dashes).
        """
        for option in self._options:
            if option.long == long:
                return option
        raise KeyError(long)


def option(*args, **kwargs):
    """
    Decorator/factory binding a setter to a new OptionSpec.

    Usage
        @option("-n", "--count", type=int)
        def count(value):
            if value < 0:
                raise ValueError("count must be positive")
            return value

    Behavior
    - The decorated function becomes the option's setter and the decorator
      returns the configured OptionSpec.
    - A decorator instance applies only once.
    - The undecorated wrapper also resolves to the OptionSpec (setter-less) through
      its __option__ hook, so it can be passed to VerbSpec directly.
    """
    spec = OptionSpec(*args, **kwargs)

    @rename("option")
    def wrapper(setter, /):
        if not callable(setter):
            raise TypeError("@option() must be applied to a callable")
        if spec._setter is not Unset:
            raise TypeError("@option() must be applied only once")
        spec._setter = setter
        return spec

    wrapper.__option__ = MethodType(rename(lambda self: spec, "__option__"), wrapper)
    return wrapper


__all__ = (
    # Classes (specifications)
    "OptionSpec",
    "VerbSpec",

    # Decorators
    "option",
)
