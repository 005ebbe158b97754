"""
Parser settings: the knobs shared by the binder, the help assembler and the runner.

Fields
- case_sensitive: match option names exactly (default False: "--FILE" finds "--file").
- case_insensitive_choices: accept enum values in any case, binding the declared spelling.
- auto_help: honor "--help"/"-h" anywhere and a leading "help" verb.
- auto_version: honor "--version" anywhere and a leading "version" verb.
- program: program name shown in usage lines (defaults to the script name).
- heading: first line of help output (e.g. "myapp 2.0.0").
- copyright: second line of help output.
- version: text printed for version requests (falls back to heading).
- width: wrap width of rendered help text.
- colorful: keep rich styles when rendering to a terminal.

Settings are read-only; use replace(**overrides) to derive a variant.
"""
from .utils import *


class ParserSettings(metaclass=SpecType):
    __introspectable__ = (
        "case_sensitive",
        "case_insensitive_choices",
        "auto_help",
        "auto_version",
        "program",
        "heading",
        "copyright",
        "version",
        "width",
        "colorful",
    )

    def __init__(
            self,
            *,
            case_sensitive=False,
            case_insensitive_choices=False,
            auto_help=True,
            auto_version=True,
            program=Unset,
            heading=Unset,
            copyright=Unset,
            version=Unset,
            width=80,
            colorful=False,
    ):
        cls = type(self)
        metadata = {
            "program": program,
            "heading": heading,
            "copyright": copyright,
            "version": version,
        }
        for name, object in metadata.items():
            if not isinstance(object, str | UnsetType | None):
                raise TypeError(f"{cls.__typename__} {name!r} must be a string")
            elif isinstance(object, str) and not (object := object.strip()):
                raise ValueError(f"{cls.__typename__} {name!r} cannot be empty")
            metadata[name] = coalesce(object)

        if not isinstance(width, int) or isinstance(width, bool):
            raise TypeError(f"{cls.__typename__} 'width' must be an integer")
        if width < 40:
            raise ValueError(f"{cls.__typename__} 'width' must be at least 40")

        self._case_sensitive = bool(case_sensitive)
        self._case_insensitive_choices = bool(case_insensitive_choices)
        self._auto_help = bool(auto_help)
        self._auto_version = bool(auto_version)
        self._program = metadata["program"]
        self._heading = metadata["heading"]
        self._copyright = metadata["copyright"]
        self._version = metadata["version"]
        self._width = width
        self._colorful = bool(colorful)

    def replace(self, **overrides):
        """
        return a copy of these settings with the given fields replaced.
        """
        if unknown := overrides.keys() - set(type(self).__introspectable__):
            raise TypeError(f"{type(self).__typename__} has no field(s): {', '.join(sorted(unknown))}")
        return type(self)(**{name: getattr(self, name) for name in type(self).__introspectable__} | overrides)

    def fold(self, text, /):
        """
        normalize an option name for lookups under the case policy.
        """
        return text if self.case_sensitive else text.casefold()


DEFAULTS = ParserSettings()


__all__ = (
    "ParserSettings",
    "DEFAULTS",
)
