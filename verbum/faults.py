"""
Verbum faults: the closed parse-error taxonomy and schema exceptions.

Scope
- ErrorType: canonical, stable numeric tags for every parse error kind. Codes
  are grouped by domain (routing, tokens, values, constraints) so logs and
  searches stay predictable.
- ParseError and its variants: immutable values produced by the binder. Each
  carries enough context to render without re-parsing and supports structural
  pattern matching through __match_args__.
- SchemaError and its subclasses: programmer errors raised at registration or
  render time (duplicate verbs, unknown verb lookups, unmapped sentences).

Parse errors are never raised; they are collected in discovery order inside a
Failed outcome. Schema errors are raised immediately.
"""
from enum import IntEnum

from .utils import SpecType


class ErrorType(IntEnum):
    """
    canonical parse error tags (stable identifiers).

    grouping
    - routing (101xx): BAD_VERB_SELECTED, NO_VERB_SELECTED, MULTIPLE_DEFAULT_VERBS
    - tokens (102xx): UNKNOWN_OPTION, BAD_FORMAT_TOKEN, REPEATED_OPTION
    - values (103xx): MISSING_VALUE_OPTION, BAD_FORMAT_CONVERSION,
      SEQUENCE_OUT_OF_RANGE, SET_VALUE_EXCEPTION
    - constraints (104xx): MISSING_REQUIRED_OPTION, MUTUALLY_EXCLUSIVE_SET,
      MISSING_GROUP_OPTION, GROUP_OPTION_AMBIGUITY

    spacing leaves room for additions without reshuffling existing codes.
    """
    # --- routing ---
    BAD_VERB_SELECTED       = 10101
    NO_VERB_SELECTED        = 10102
    MULTIPLE_DEFAULT_VERBS  = 10103

    # --- tokens ---
    UNKNOWN_OPTION          = 10201
    BAD_FORMAT_TOKEN        = 10202
    REPEATED_OPTION         = 10203

    # --- values ---
    MISSING_VALUE_OPTION    = 10301
    BAD_FORMAT_CONVERSION   = 10302
    SEQUENCE_OUT_OF_RANGE   = 10303
    SET_VALUE_EXCEPTION     = 10304

    # --- constraints ---
    MISSING_REQUIRED_OPTION = 10401
    MUTUALLY_EXCLUSIVE_SET  = 10402
    MISSING_GROUP_OPTION    = 10403
    GROUP_OPTION_AMBIGUITY  = 10404


class ParseError(metaclass=SpecType):
    """
    Base of every parse error value.

    Subclasses declare their tag and the fields they carry in
    __introspectable__; fields are exposed read-only and take part in value
    equality, so two errors describing the same fault compare equal.
    """
    tag = None

    def __init__(self, *fields):
        names = type(self).__introspectable__
        if len(fields) != len(names):
            raise TypeError("%s takes %d arguments but %d were given" % (
                type(self).__typename__, len(names), len(fields)
            ))
        for name, object in zip(names, fields):
            setattr(self, "_" + name, object)

    def __init_subclass__(cls, **options):
        super().__init_subclass__(**options)
        if not isinstance(cls.tag, ErrorType):
            raise TypeError(f"{cls.__typename__} must declare an error tag")
        if cls.tag in _variants:
            raise TypeError(f"{cls.__typename__} tag {cls.tag.name} is already declared")
        _variants[cls.tag] = cls


_variants = {}


class UnknownOptionError(ParseError):
    tag = ErrorType.UNKNOWN_OPTION
    __introspectable__ = ("token",)


class MissingValueOptionError(ParseError):
    tag = ErrorType.MISSING_VALUE_OPTION
    __introspectable__ = ("name",)


class BadFormatTokenError(ParseError):
    tag = ErrorType.BAD_FORMAT_TOKEN
    __introspectable__ = ("token",)


class BadFormatConversionError(ParseError):
    """A value could not be coerced; name is None for positional values."""
    tag = ErrorType.BAD_FORMAT_CONVERSION
    __introspectable__ = ("name",)


class MissingRequiredOptionError(ParseError):
    """A required option is absent; name is None for the positional value."""
    tag = ErrorType.MISSING_REQUIRED_OPTION
    __introspectable__ = ("name",)


class SequenceOutOfRangeError(ParseError):
    tag = ErrorType.SEQUENCE_OUT_OF_RANGE
    __introspectable__ = ("name",)


class BadVerbSelectedError(ParseError):
    tag = ErrorType.BAD_VERB_SELECTED
    __introspectable__ = ("token",)


class NoVerbSelectedError(ParseError):
    tag = ErrorType.NO_VERB_SELECTED
    __introspectable__ = ()


class RepeatedOptionError(ParseError):
    tag = ErrorType.REPEATED_OPTION
    __introspectable__ = ("name",)


class SetValueExceptionError(ParseError):
    """An option setter raised; message is the text of the raised exception."""
    tag = ErrorType.SET_VALUE_EXCEPTION
    __introspectable__ = ("name", "message")


class MutuallyExclusiveSetError(ParseError):
    """One supplied option whose set collides with another supplied set."""
    tag = ErrorType.MUTUALLY_EXCLUSIVE_SET
    __introspectable__ = ("name", "set_name")


class MissingGroupOptionError(ParseError):
    tag = ErrorType.MISSING_GROUP_OPTION
    __introspectable__ = ("group", "names")


class GroupOptionAmbiguityError(ParseError):
    tag = ErrorType.GROUP_OPTION_AMBIGUITY
    __introspectable__ = ("name",)


class MultipleDefaultVerbsError(ParseError):
    tag = ErrorType.MULTIPLE_DEFAULT_VERBS
    __introspectable__ = ()


def variant(tag, /):
    """
    return the ParseError subclass registered for an ErrorType tag.
    """
    if not isinstance(tag, ErrorType):
        raise TypeError("variant() argument must be an error-type")
    return _variants[tag]


class SchemaError(Exception):
    """
    Base of programmer errors: raised immediately, never deferred to end users.
    """


class DuplicateVerbError(SchemaError, ValueError):
    def __init__(self, token, /):
        super().__init__("verb %r is already registered" % token)
        self.token = token


class UnknownVerbError(SchemaError, LookupError):
    def __init__(self, token, /):
        super().__init__("verb %r is not registered" % token)
        self.token = token


class UnmappedSentenceError(SchemaError, LookupError):
    def __init__(self, keys, /):
        self.keys = tuple(keys)
        super().__init__("sentence table does not map: %s" % ", ".join(map(_keyname, self.keys)))


def _keyname(key):
    return getattr(key, "name", None) or getattr(key, "__name__", None) or repr(key)


__all__ = (
    "ErrorType",
    "ParseError",
    "UnknownOptionError",
    "MissingValueOptionError",
    "BadFormatTokenError",
    "BadFormatConversionError",
    "MissingRequiredOptionError",
    "SequenceOutOfRangeError",
    "BadVerbSelectedError",
    "NoVerbSelectedError",
    "RepeatedOptionError",
    "SetValueExceptionError",
    "MutuallyExclusiveSetError",
    "MissingGroupOptionError",
    "GroupOptionAmbiguityError",
    "MultipleDefaultVerbsError",
    "SchemaError",
    "DuplicateVerbError",
    "UnknownVerbError",
    "UnmappedSentenceError",
    "variant",
)
