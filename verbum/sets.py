"""
Error aggregation for rendering: mutually-exclusive set violations are grouped
into SetConflict items, one per offending set.

aggregate() never alters the authoritative Failed.errors list; it returns a new
tuple for display.
"""
from .faults import GroupOptionAmbiguityError, MissingGroupOptionError, MutuallyExclusiveSetError
from .utils import *


class SetConflict(metaclass=SpecType):
    """
    Options of one set supplied together with options of other sets.

    - set_name: the offending set.
    - names: its present members (deduplicated, input order).
    - incompatible: present members of every other set (deduplicated, input order).
    """
    __introspectable__ = ("set_name", "names", "incompatible")

    def __init__(self, set_name, names, incompatible):
        self._set_name = set_name
        self._names = tuple(names)
        self._incompatible = tuple(incompatible)


def _unique(names):
    return tuple(dict.fromkeys(names))


def aggregate(errors, /):
    """
    return errors with each set's MutuallyExclusiveSetError entries replaced, in
    place of the first one, by a single SetConflict.

    Options named by a GroupOptionAmbiguityError or listed by a
    MissingGroupOptionError are left out of every conflict; a conflict left
    without names or without incompatible names is dropped.
    """
    errors = tuple(errors)
    suppressed = set()
    for error in errors:
        if isinstance(error, GroupOptionAmbiguityError):
            suppressed.add(error.name)
        elif isinstance(error, MissingGroupOptionError):
            suppressed.update(error.names)

    members = {}
    for error in errors:
        if isinstance(error, MutuallyExclusiveSetError) and error.name not in suppressed:
            members.setdefault(error.set_name, []).append(error.name)

    conflicts = {}
    for set_name, names in members.items():
        incompatible = _unique(
            name for other, peers in members.items() if other != set_name for name in peers
        )
        if names and incompatible:
            conflicts[set_name] = SetConflict(set_name, _unique(names), incompatible)

    aggregated = []
    for error in errors:
        if not isinstance(error, MutuallyExclusiveSetError):
            aggregated.append(error)
        elif (conflict := conflicts.pop(error.set_name, None)) is not None:
            aggregated.append(conflict)
    return tuple(aggregated)


__all__ = (
    "SetConflict",
    "aggregate",
)
