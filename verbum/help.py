"""
Help assembler: schema and (optional) errors rendered as a help document.

Layout
- heading and copyright lines (from ParserSettings), when set.
- errors section: one line per aggregated error (set violations grouped in place).
- usage line.
- without a verb: the verb index (token and help, declaration order).
- with a verb: the option list (names, metavar, required marker, help, set and
  group annotations), then the automatic --help/--version entries.

Palette keys
- heading, copyright, usage-label, program-name, usage-section
- errors-label, error
- verbs-table, verb, verb-description
- option-name, metavar, choice, argument-description, required-word, annotation

Customization
- Define a mapping named __styles__ in __main__ to override any palette entry.
- Styles apply only when settings.colorful is True; plain text is the default.
"""
import sys
from collections import defaultdict
from collections.abc import Mapping
from pathlib import Path

from rich.console import Console, Group
from rich.table import Table
from rich.text import Text

from .options import VerbSpec
from .registry import SchemaRegistry
from .sentences import Sentence, SentenceBuilder
from .sets import aggregate
from .settings import DEFAULTS, ParserSettings


class HelpAssembler:
    """
    Builds help renderables for one registry with one sentence table.
    """

    def __init__(self, registry, *, sentences=None, settings=None):
        if not isinstance(registry, SchemaRegistry):
            raise TypeError("help-assembler 'registry' must be a schema-registry")
        if sentences is None:
            sentences = SentenceBuilder()
        elif isinstance(sentences, Mapping):
            sentences = SentenceBuilder(sentences)
        elif not isinstance(sentences, SentenceBuilder):
            raise TypeError("help-assembler 'sentences' must be a sentence-builder or a table")
        if settings is None:
            settings = DEFAULTS
        elif not isinstance(settings, ParserSettings):
            raise TypeError("help-assembler 'settings' must be parser-settings")

        self._registry = registry
        self._sentences = sentences
        self._settings = settings
        self._styles = defaultdict(str, {
            # === Head sections ===
            "heading": "bold #FF4D94",
            "copyright": "#737373",
            "usage-label": "bold #00E6FF",
            "program-name": "bold #FF4D94",
            "usage-section": "bold #36C5F0",

            # === Errors ===
            "errors-label": "bold #EF4444",
            "error": "bold #FFD600",

            # === Verb index ===
            "verbs-table": "#4B5563",
            "verb": "bold #36C5F0",
            "verb-description": "#9CA3AF",

            # === Options ===
            "option-name": "bold #00E6FF",
            "metavar": "bold #FFD600",
            "choice": "bold #FF4D94",
            "argument-description": "#9CA3AF",
            "required-word": "bold #EF4444",
            "annotation": "italic #737373",
        } | getattr(__import__("__main__"), "__styles__", {}))

    @property
    def sentences(self):
        return self._sentences

    def _styler(self, style):
        return self._styles[style] if self._settings.colorful else ""

    def _text(self, fragment, style=""):
        return Text(str(fragment), self._styler(style))

    def _resolve(self, verb):
        if verb is None or isinstance(verb, VerbSpec):
            return verb
        if isinstance(verb, str):
            return self._registry.lookup(verb)
        raise TypeError("help verb must be a verb-spec, a token or None")

    def renderable(self, verb=None, errors=()):
        """
        return a rich Group with the help document for verb (or the verb index).
        """
        verb = self._resolve(verb)
        renders = []

        head = Text()
        if self._settings.heading is not None:
            head.append(self._text(self._settings.heading, "heading")).append("\n")
        if self._settings.copyright is not None:
            head.append(self._text(self._settings.copyright, "copyright")).append("\n")
        if head:
            renders.append(head)

        if errors := aggregate(errors):
            section = Text()
            section.append(self._text(self._sentences.render(Sentence.ERRORS_HEADING), "errors-label")).append("\n")
            for item in errors:
                section.append("  ").append(self._text(self._sentences.render(item), "error")).append("\n")
            renders.append(section)

        renders.append(self._usage(verb))
        if verb is None:
            renders.append(self._index())
        else:
            renders.append(self._options(verb))
        return Group(*renders)

    def render(self, verb=None, errors=()):
        """
        return the help document as plain text.
        """
        console = Console(
            width=self._settings.width,
            color_system=None,
            force_terminal=False,
            highlight=False,
        )
        with console.capture() as capture:
            console.print(self.renderable(verb, errors))
        return "\n".join(line.rstrip() for line in capture.get().rstrip().splitlines())

    @property
    def program(self):
        """
        Program name for usage lines: settings.program or the script name.
        """
        return self._settings.program or Path(sys.argv[0]).name or "app"

    def _metavar(self, option):
        if option.choices:
            metavar = Text.assemble(
                "{",
                Text(",").join(self._text(choice, "choice") for choice in option.choices),
                "}",
            )
        else:
            metavar = self._text(option.metavar or option.long.upper(), "metavar")
        if option.sequence:
            metavar.append("...")
        return metavar

    def _usage(self, verb):
        usage = Text()
        usage.append(self._text(self._sentences.render(Sentence.USAGE_HEADING), "usage-label")).append(" ")
        usage.append(self._text(self.program, "program-name"))

        if verb is None:
            usage.append(" ").append(self._text("<verb> [options]", "usage-section"))
            return usage.append("\n")

        usage.append(" ").append(self._text(verb.token, "usage-section"))
        for option in verb.options:
            if option.hidden or option.is_default:
                continue
            input = Text.assemble(self._text("--" + option.long, "option-name"))
            if option.takes_value:
                input.append(" ").append(self._metavar(option))
            usage.append(" ").append(input if option.required else Text.assemble("[", input, "]"))
        if (positional := verb.positional) is not None and not positional.hidden:
            metavar = self._metavar(positional)
            usage.append(" ").append(metavar if positional.required else Text.assemble("[", metavar, "]"))
        return usage.append("\n")

    def _index(self):
        table = Table(
            box=None,
            show_header=False,
            padding=(0, 4, 0, 2),
            style=self._styler("verbs-table"),
        )
        table.add_column("verb", no_wrap=True)
        table.add_column("help")

        for verb in self._registry.verbs:
            if verb.hidden:
                continue
            table.add_row(self._text(verb.token, "verb"), self._text(verb.help or "", "verb-description"))
        if self._settings.auto_help and "help" not in self._registry:
            table.add_row(
                self._text("help", "verb"),
                self._text(self._sentences.render(Sentence.HELP_COMMAND, False), "verb-description"),
            )
        if self._settings.auto_version and "version" not in self._registry:
            table.add_row(
                self._text("version", "verb"),
                self._text(self._sentences.render(Sentence.VERSION_COMMAND, False), "verb-description"),
            )
        return table

    def _options(self, verb):
        rows = []
        for option in verb.options:
            if option.hidden:
                continue
            names = Text(", ").join(self._text(name, "option-name") for name in option.names)
            if option.takes_value:
                names.append(" ").append(self._metavar(option))

            descr = Text()
            if option.required:
                descr.append(self._text(self._sentences.render(Sentence.REQUIRED_WORD), "required-word")).append(" ")
            if option.help:
                descr.append(self._text(option.help, "argument-description"))
            if option.group is not None:
                descr.append(" " if descr else "").append(self._text("(%s: %s)" % (
                    self._sentences.render(Sentence.OPTION_GROUP_WORD), option.group
                ), "annotation"))
            if option.set_name is not None:
                descr.append(" " if descr else "").append(self._text("[%s]" % option.set_name, "annotation"))
            rows.append((names, descr))

        # The binder honors whichever automatic names the verb leaves undeclared.
        fold = self._settings.fold
        declared = {fold(name) for option in verb.options for name in option.names}
        if self._settings.auto_help and (helps := [name for name in ("-h", "--help") if fold(name) not in declared]):
            rows.append((
                Text(", ").join(self._text(name, "option-name") for name in helps),
                self._text(self._sentences.render(Sentence.HELP_COMMAND, True), "argument-description"),
            ))
        if self._settings.auto_version and fold("--version") not in declared:
            rows.append((
                self._text("--version", "option-name"),
                self._text(self._sentences.render(Sentence.VERSION_COMMAND, True), "argument-description"),
            ))

        padding = 2
        indent = min(max((names.cell_len for names, _ in rows), default=0) + padding + 4, self._settings.width // 2)
        console = Console(width=self._settings.width)

        section = Text()
        for names, descr in rows:
            line = Text(" " * padding).append(names)
            descr.rstrip()
            if line.cell_len >= indent:
                line.append("\n").append(" " * indent)
            else:
                line.append(" " * (indent - line.cell_len))
            wrapped = descr.wrap(console, self._settings.width - indent)
            try:
                line.append(wrapped.pop(0))
            except IndexError:
                pass
            for segment in wrapped:
                line.append("\n").append(" " * indent).append(segment)
            section.append(line).append("\n")
        return section


def build_help(registry, verb=None, errors=(), *, sentences=None, settings=None):
    """
    render help for registry as plain text; see HelpAssembler.
    """
    return HelpAssembler(registry, sentences=sentences, settings=settings).render(verb, errors)


__all__ = (
    "HelpAssembler",
    "build_help",
)
