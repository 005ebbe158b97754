"""
Sentence tables: every user-visible string the library renders.

A table maps
- each ErrorType member to a callable taking the error and returning its message,
- SetConflict to a callable taking the conflict,
- each Sentence member to a callable producing structural text (HELP_COMMAND and
  VERSION_COMMAND receive an is_option flag).

SentenceBuilder checks a table up front, so a missing or unknown entry fails at
construction instead of at render time. Locales are whole or partial tables:

    >>> builder = SentenceBuilder(ENGLISH | {Sentence.USAGE_HEADING: lambda: "USO:"})
    >>> builder.render(Sentence.USAGE_HEADING)
    'USO:'
"""
from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType

from .faults import ErrorType, ParseError, UnmappedSentenceError
from .sets import SetConflict
from .utils import *


class Sentence(Enum):
    """
    structural text keys.
    """
    REQUIRED_WORD = "required-word"
    ERRORS_HEADING = "errors-heading"
    USAGE_HEADING = "usage-heading"
    OPTION_GROUP_WORD = "option-group-word"
    HELP_COMMAND = "help-command"
    VERSION_COMMAND = "version-command"


def _quoted(names):
    return ", ".join("'%s'" % name for name in names)


def _set_conflict(conflict):
    if not conflict.names or not conflict.incompatible:
        raise ValueError("set conflict requires present and incompatible names")
    many = len(conflict.names) > 1
    return "%s: %s %s not compatible with: %s." % (
        pluralize("Option") if many else "Option",
        _quoted(conflict.names),
        "are" if many else "is",
        _quoted(conflict.incompatible),
    )


def _missing_required(error):
    if error.name is None:
        return "A required value not bound to option name is missing."
    return "Required option '%s' is missing." % error.name


def _bad_conversion(error):
    if error.name is None:
        return "A value not bound to option name is defined with a bad format."
    return "Option '%s' is defined with a bad format." % error.name


def _out_of_range(error):
    if error.name is None:
        return "A sequence value not bound to option name is defined with few items than required."
    return "A sequence option '%s' is defined with fewer or more items than required." % error.name


ENGLISH = MappingProxyType({
    ErrorType.BAD_FORMAT_TOKEN: lambda error: "Token '%s' is not recognized." % error.token,
    ErrorType.MISSING_VALUE_OPTION: lambda error: "Option '%s' has no value." % error.name,
    ErrorType.UNKNOWN_OPTION: lambda error: "Option '%s' is unknown." % error.token,
    ErrorType.MISSING_REQUIRED_OPTION: _missing_required,
    ErrorType.BAD_FORMAT_CONVERSION: _bad_conversion,
    ErrorType.SEQUENCE_OUT_OF_RANGE: _out_of_range,
    ErrorType.BAD_VERB_SELECTED: lambda error: "Verb '%s' is not recognized." % error.token,
    ErrorType.NO_VERB_SELECTED: lambda error: "No verb selected.",
    ErrorType.REPEATED_OPTION: lambda error: "Option '%s' is defined multiple times." % error.name,
    ErrorType.SET_VALUE_EXCEPTION: lambda error: "Error setting value to option '%s': %s" % (
        error.name, error.message
    ),
    ErrorType.MUTUALLY_EXCLUSIVE_SET: lambda error: "Option '%s' from set '%s' is not compatible with options of other sets." % (
        error.name, error.set_name
    ),
    ErrorType.MISSING_GROUP_OPTION: lambda error: "At least one option from group '%s' (%s) is required." % (
        error.group, ", ".join(error.names)
    ),
    ErrorType.GROUP_OPTION_AMBIGUITY: lambda error: "Both SetName and Group are not allowed in option: (%s)" % error.name,
    ErrorType.MULTIPLE_DEFAULT_VERBS: lambda error: "More than one default verb is not allowed.",
    SetConflict: _set_conflict,
    Sentence.REQUIRED_WORD: lambda: "Required.",
    Sentence.ERRORS_HEADING: lambda: "ERROR(S):",
    Sentence.USAGE_HEADING: lambda: "USAGE:",
    Sentence.OPTION_GROUP_WORD: lambda: "Group",
    Sentence.HELP_COMMAND: lambda is_option: (
        "Display this help screen." if is_option else "Display more information on a specific command."
    ),
    Sentence.VERSION_COMMAND: lambda is_option: "Display version information.",
})
"""
Default English table.
"""

JAPANESE = MappingProxyType(ENGLISH | {
    ErrorType.MISSING_REQUIRED_OPTION: lambda error: (
        "A required value not bound to option name is missing."
        if error.name is None else
        "要求されたオプション '%s' がありません." % error.name
    ),
    Sentence.REQUIRED_WORD: lambda: "要求.",
    Sentence.ERRORS_HEADING: lambda: "エラー:",
    Sentence.USAGE_HEADING: lambda: "使い方:",
    Sentence.OPTION_GROUP_WORD: lambda: "グループ",
})
"""
Japanese structural text over the English table.
"""

_KEYS = (*ErrorType, SetConflict, *Sentence)


class SentenceBuilder:
    """
    Renders parse errors, set conflicts and structural sentences from a table.
    """

    def __init__(self, table=ENGLISH):
        if not isinstance(table, Mapping):
            raise TypeError("sentence-builder 'table' must be a mapping")
        if missing := [key for key in _KEYS if key not in table]:
            raise UnmappedSentenceError(missing)
        if unknown := [key for key in table if key not in _KEYS]:
            raise TypeError("sentence-builder table has unknown key(s): %s" % ", ".join(map(repr, unknown)))
        for key in _KEYS:
            if not callable(table[key]):
                raise TypeError(f"sentence-builder entry for {getattr(key, 'name', None) or key.__name__} must be callable")
        self._table = MappingProxyType({key: table[key] for key in _KEYS})

    @property
    def table(self):
        return self._table

    def override(self, entries, /):
        """
        return a new builder whose table is this one updated with entries.
        """
        return type(self)(self._table | dict(entries))

    def render(self, object, /, *args):
        """
        render a ParseError, a SetConflict or a Sentence (with its arguments).
        """
        match object:
            case ParseError():
                return self._table[object.tag](object)
            case SetConflict():
                return self._table[SetConflict](object)
            case Sentence():
                return self._table[object](*args)
            case _:
                raise TypeError("render() argument must be a parse-error, a set-conflict or a sentence")


__all__ = (
    "Sentence",
    "SentenceBuilder",
    "ENGLISH",
    "JAPANESE",
)
