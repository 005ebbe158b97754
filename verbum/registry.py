"""
Schema registry: the process-wide, read-only table of verbs.

Lifecycle
- RegistryBuilder collects VerbSpec declarations (register) and rejects duplicate
  tokens case-insensitively, aliases included.
- build() freezes the declarations into a SchemaRegistry. SchemaRegistry has no
  mutating methods, so once built it is safe to share between threads.

Lookups are case-insensitive and resolve aliases to their verb.
"""
import logging
from types import MappingProxyType

from .faults import DuplicateVerbError, UnknownVerbError
from .options import VerbSpec
from .utils import *

logger = logging.getLogger(__name__)


class RegistryBuilder:
    """
    Mutable staging area for verb declarations (single writer).
    """

    def __init__(self):
        self._verbs = []
        self._tokens = {}

    def register(self, verb, /):
        """
        add a verb; fails with DuplicateVerbError when any of its tokens is taken.

        returns the builder to allow chaining.
        """
        if not isinstance(verb, VerbSpec):
            raise TypeError("register() argument must be a verb-spec")
        for token in verb.tokens:
            if token.casefold() in self._tokens:
                raise DuplicateVerbError(token)
        for token in verb.tokens:
            self._tokens[token.casefold()] = verb
        self._verbs.append(verb)
        return self

    def build(self):
        """
        freeze the declarations into an immutable SchemaRegistry.
        """
        registry = SchemaRegistry.__new__(SchemaRegistry)
        registry._verbs = tuple(self._verbs)
        registry._tokens = MappingProxyType(dict(self._tokens))
        logger.debug("registry built: %s", ", ".join(verb.token for verb in registry._verbs))
        return registry


class SchemaRegistry:
    """
    Immutable mapping from verb token to VerbSpec.

    Behaves like a read-only mapping keyed by primary tokens in declaration
    order; lookup() and "in" are case-insensitive and accept aliases.
    """
    __slots__ = ("_verbs", "_tokens")

    def __init__(self, *verbs):
        builder = RegistryBuilder()
        for verb in verbs:
            builder.register(verb)
        built = builder.build()
        object.__setattr__(self, "_verbs", built._verbs)
        object.__setattr__(self, "_tokens", built._tokens)

    def __setattr__(self, name, value, /):
        if hasattr(self, "_tokens"):
            raise AttributeError("schema-registry is read-only")
        object.__setattr__(self, name, value)

    def lookup(self, token, /):
        """
        return the VerbSpec for token (case-insensitive) or fail with UnknownVerbError.
        """
        if not isinstance(token, str):
            raise TypeError("lookup() argument must be a string")
        try:
            return self._tokens[token.casefold()]
        except KeyError:
            raise UnknownVerbError(token) from None

    def get(self, token, default=None, /):
        try:
            return self.lookup(token)
        except UnknownVerbError:
            return default

    @property
    def verbs(self):
        """
        All verbs in declaration order.
        """
        return self._verbs

    @property
    def defaults(self):
        """
        Verbs marked is_default, in declaration order.
        """
        return tuple(verb for verb in self._verbs if verb.is_default)

    def __contains__(self, token):
        return isinstance(token, str) and token.casefold() in self._tokens

    def __getitem__(self, token):
        return self.lookup(token)

    def __iter__(self):
        return iter(verb.token for verb in self._verbs)

    def __len__(self):
        return len(self._verbs)

    def __repr__(self):
        return "schema-registry(%s)" % ", ".join(map(repr, self))

    def __rich_repr__(self):
        for verb in self._verbs:
            yield verb.token, verb


def registry(*verbs):
    """
    build a SchemaRegistry from VerbSpec declarations in one step.
    """
    return SchemaRegistry(*verbs)


__all__ = (
    "RegistryBuilder",
    "SchemaRegistry",
    "registry",
)
