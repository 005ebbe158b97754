"""
Verbum utilities (internal helpers, carefully exposed)

Scope
- Small building blocks shared by the schema, fault, outcome and settings layers.

Overview
- UnsetType / Unset
  • Singleton sentinel for "value not provided", distinct from None.
- coalesce(value, default=None)
  • Replace Unset with a concrete default; None/0/""/[] are preserved.
- rename(callable, name) / @rename("name")
  • Assign stable __name__/__qualname__ to generated callables.
- mirror("attr")
  • Read-only property exposing a private backing field (self._attr), copying containers.
- pluralize(text)
  • Best-effort English pluralization used by the sentence tables.
- SpecType
  • Metaclass giving value types a typename, mirrored read-only fields, a stable
    repr/rich repr and value equality.

Quick examples
    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> pluralize("Option")
    'Options'
"""
import builtins
import functools
import operator
import re
from collections.abc import Sequence, Mapping, Set
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None and 0.
    - Printable: repr(Unset) -> "Unset".
    - Non-subclassable and a singleton per process.
    """

    def __or__(self, other, /):
        """
        Support PEP 604 unions in annotations (e.g., str | UnsetType).
        """
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    def __reduce__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        """
        Disallow subclassing to preserve sentinel semantics.
        """
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Resolve the Unset sentinel to a concrete default.

    Returns object unless it is Unset, in which case default is returned.
    Falsey values like None, 0, "" or () are preserved as-is.
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set a stable __name__/__qualname__ on a callable, or return a decorator
    that will do so later.

    Forms
    - rename(callable, name) -> callable
    - rename(name) -> decorator
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def _immortalize(object):
    """
    Shallow-freeze containers for public exposure.

    - Sequence (non-string) -> tuple
    - Mapping -> read-only dict copy (MappingProxyType over a fresh dict)
    - Set -> frozenset
    - Anything else -> returned as-is
    """
    if isinstance(object, Sequence) and not isinstance(object, (str, bytes, bytearray)):
        return tuple(object)
    elif isinstance(object, Mapping):
        return MappingProxyType(dict(object))
    elif isinstance(object, Set):
        return frozenset(object)
    return object


def mirror(name, /):
    """
    Define a read-only property that mirrors the private backing attribute "_{name}".

    Containers are handed out frozen so the public API cannot mutate internal state.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _immortalize(getattr(self, "_" + name))

    return property(getter)


def _freeze(object):
    # Hashable snapshot used by value equality; unhashable leaves compare by repr.
    if isinstance(object, Mapping):
        return frozenset((key, _freeze(value)) for key, value in object.items())
    if isinstance(object, Sequence) and not isinstance(object, (str, bytes, bytearray)):
        return tuple(map(_freeze, object))
    if isinstance(object, Set):
        return frozenset(map(_freeze, object))
    try:
        hash(object)
    except TypeError:
        return repr(object)
    return object


class SpecType(type):
    """
    Metaclass that turns declarative classes into introspectable value types.

    Responsibilities
    - Expose every name listed in __introspectable__ as a read-only property
      (backed by "_{name}") using mirror().
    - Provide stable __repr__/__rich_repr__ implementations for diagnostics.
    - Provide value equality and hashing over the introspectable fields.
    - Set __match_args__ to the introspectable fields for class patterns.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used as the prefix of validation messages.
    - __displayable__ (if set) narrows which fields __rich_repr__ shows.
    """
    __introspectable__ = ()
    __displayable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            } | ({
                "__match_args__": tuple(namespace["__introspectable__"]),
            } if "__introspectable__" in namespace else {}),
        )

        if "__repr__" not in namespace:
            @rename("__repr__")
            def __repr__(self):
                return f"{type(self).__typename__}({', '.join(map(functools.partial(operator.mod, '%s=%r'), self.__rich_repr__()))})"
            self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__displayable__ or type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        @rename("__eq__")
        def __eq__(self, other):
            if type(self) is not type(other):
                return NotImplemented
            return all(
                _freeze(getattr(self, name)) == _freeze(getattr(other, name))
                for name in type(self).__introspectable__
            )
        self.__eq__ = __eq__

        @rename("__hash__")
        def __hash__(self):
            return hash((type(self).__name__, *(
                _freeze(getattr(self, name)) for name in type(self).__introspectable__
            )))
        self.__hash__ = __hash__

        return self


@functools.cache
def pluralize(text, /):
    """
    Best-effort English pluralizer for messages and labels.

    For phrases, only the last lexical word is pluralized; casing of that word
    is preserved (UPPER, Title, lower).

    Examples
    - pluralize("Option")          -> "Options"
    - pluralize("category")        -> "categories"
    - pluralize("command option")  -> "command options"
    - pluralize("SERIES")          -> "SERIES"
    """
    if not isinstance(text, str):
        raise TypeError("pluralize() argument must be a string")

    if not text:
        return text

    match = re.search(r'(\S+)(\s*)$', text)
    if not match:
        return text

    head = text[:match.start(1)]
    last = match.group(1)
    trail = match.group(2)

    lower = last.lower()

    uncountables = {
        "series", "species", "information", "equipment", "news", "data",
    }
    irregulars = {
        "person": "people",
        "child": "children",
        "index": "indices",
        "matrix": "matrices",
        "criterion": "criteria",
        "analysis": "analyses",
        "ellipsis": "ellipses",
    }
    if lower in uncountables:
        plural = lower
    elif lower in irregulars:
        plural = irregulars[lower]
    elif lower.endswith(("s", "sh", "ch", "x", "z")):
        plural = lower + "es"
    elif lower.endswith("y") and len(lower) > 1 and lower[-2] not in "aeiou":
        plural = lower[:-1] + "ies"
    elif lower.endswith("fe") and len(lower) > 2:
        plural = lower[:-2] + "ves"
    elif lower.endswith("f") and len(lower) > 1:
        plural = lower[:-1] + "ves"
    else:
        plural = lower + "s"

    if last.isupper() and len(last) > 1:
        plural = plural.upper()
    elif last[:1].isupper():
        plural = plural[:1].upper() + plural[1:]

    return head + plural + trail


Unset = UnsetType()
"""
Internal sentinel for "not provided".

Use Unset as a default when None is a meaningful value; materialize with coalesce().
"""


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "pluralize",

    # Types
    "UnsetType",
    "SpecType",

    # Constants
    "Unset",
)
