"""
Parse outcomes: the immutable values returned by the binder.

- Bound(verb, values): the verb token and the coerced values of every supplied
  option, keyed by long name.
- Failed(errors): the ordered, non-empty error list. The verb parsed so far (if
  any) travels along for contextual help but does not take part in equality.
- NoVerb(): the registry declares no verbs, so there is nothing to select.
- HelpRequested(verb): "--help", "-h" or a leading "help" was seen.
- VersionRequested(): "--version" or a leading "version" was seen.

Every outcome exposes exit_code following the usual convention (0 on success and
on help/version requests, 2 on usage errors).
"""
from .faults import ParseError
from .utils import *


class ParseOutcome(metaclass=SpecType):
    exit_code = 0

    def __init__(self, *fields):
        names = type(self).__introspectable__
        if len(fields) != len(names):
            raise TypeError("%s takes %d arguments but %d were given" % (
                type(self).__typename__, len(names), len(fields)
            ))
        for name, object in zip(names, fields):
            setattr(self, "_" + name, object)


class Bound(ParseOutcome):
    __introspectable__ = ("verb", "values")

    def __init__(self, verb, values):
        if not isinstance(verb, str):
            raise TypeError(f"{type(self).__typename__} 'verb' must be a string")
        super().__init__(verb, dict(values))

    def __getitem__(self, name):
        return self._values[name]

    def __contains__(self, name):
        return name in self._values

    def get(self, name, default=None, /):
        return self._values.get(name, default)


class Failed(ParseOutcome):
    __introspectable__ = ("errors",)
    exit_code = 2

    def __init__(self, errors, verb=None):
        errors = tuple(errors)
        if not errors:
            raise ValueError(f"{type(self).__typename__} requires at least one error")
        for error in errors:
            if not isinstance(error, ParseError):
                raise TypeError(f"{type(self).__typename__} errors must be parse-errors")
        super().__init__(errors)
        self._verb = verb

    @property
    def verb(self):
        """
        Token of the verb selected before the failure, or None.
        """
        return self._verb


class NoVerb(ParseOutcome):
    __introspectable__ = ()
    exit_code = 2


class HelpRequested(ParseOutcome):
    __introspectable__ = ("verb",)

    def __init__(self, verb=None):
        super().__init__(verb)


class VersionRequested(ParseOutcome):
    __introspectable__ = ()


__all__ = (
    "ParseOutcome",
    "Bound",
    "Failed",
    "NoVerb",
    "HelpRequested",
    "VersionRequested",
)
