"""
Binder module behavioral tests (parse, Parser, unparse).

Scope
- Validate verb selection (unknown/empty/default verbs, aliases, multiple defaults).
- Validate the token grammar (short/long/inline forms, "--", malformed tokens).
- Validate coercion (bool/int/choices/sequences/positional values).
- Validate constraints (required, repeated, sets, groups, ambiguity) and setter faults.
- Validate help/version requests and re-serialization round-trips.

Conventions
- Test method names follow CamelCase per project convention.
- Outcomes are compared by value.
"""
import unittest
from unittest import TestCase

from verbum import (
    BadFormatConversionError,
    BadFormatTokenError,
    BadVerbSelectedError,
    Bound,
    Failed,
    GroupOptionAmbiguityError,
    HelpRequested,
    MissingGroupOptionError,
    MissingRequiredOptionError,
    MissingValueOptionError,
    MultipleDefaultVerbsError,
    MutuallyExclusiveSetError,
    NoVerb,
    NoVerbSelectedError,
    OptionSpec,
    Parser,
    ParserSettings,
    RepeatedOptionError,
    SequenceOutOfRangeError,
    SetValueExceptionError,
    UnknownOptionError,
    VerbSpec,
    VersionRequested,
    option,
    parse,
    registry,
    unparse,
)


def verbose():
    return OptionSpec("-v", "--verbose", type=bool, help="Set output to verbose messages.")


@option("--port", type=int)
def port(value):
    if value <= 0:
        raise ValueError("port must be positive")
    return value


@option("--name")
def name(value):
    return value.title()


SCHEMA = registry(
    VerbSpec("add", OptionSpec("-f", "--file", required=True, help="Set file."), verbose()),
    VerbSpec("commit", verbose()),
    VerbSpec("clone", OptionSpec("--url", is_default=True, required=True), verbose()),
    VerbSpec("tag", OptionSpec("--names", sequence=True, arity=(1, 3))),
    VerbSpec(
        "seek",
        OptionSpec("-n", "--count", type=int),
        OptionSpec("--ports", type=int, sequence=True, arity=(0, None)),
        OptionSpec("--mode", choices=("fast", "slow")),
    ),
    VerbSpec("cat", OptionSpec("--files", sequence=True, arity=(2, None), is_default=True), verbose()),
    VerbSpec("take", OptionSpec("--count", type=int, is_default=True)),
    VerbSpec(
        "build",
        OptionSpec("-I", "--include", sequence=True, repeatable=True),
        OptionSpec("--level", type=int, repeatable=True),
    ),
    VerbSpec("serve", port, name, OptionSpec("-h", "--host")),
    VerbSpec(
        "fetch",
        OptionSpec("--url", set_name="web"),
        OptionSpec("--mirror", set_name="web"),
        OptionSpec("--path", set_name="local"),
        verbose(),
    ),
    VerbSpec(
        "sync",
        OptionSpec("--url", set_name="web", required=True),
        OptionSpec("--path", set_name="local", required=True),
    ),
    VerbSpec(
        "pick",
        OptionSpec("--red", type=bool, group="color"),
        OptionSpec("--blue", type=bool, group="color"),
    ),
    VerbSpec("odd", OptionSpec("--alpha", set_name="letters", group="greek")),
    VerbSpec("remove", aliases=("rm",)),
)


class TestVerbSelection(TestCase):
    """Behavioral tests for selecting the verb."""

    def testBoundScenario(self):
        self.assertEqual(
            parse(["add", "-f", "a.txt", "-v"], SCHEMA),
            Bound("add", {"file": "a.txt", "verbose": True}),
        )

    def testMissingRequiredScenario(self):
        self.assertEqual(parse(["add"], SCHEMA), Failed([MissingRequiredOptionError("file")]))

    def testBadVerbScenario(self):
        self.assertEqual(parse(["push"], SCHEMA), Failed([BadVerbSelectedError("push")]))

    def testNoVerbScenario(self):
        self.assertEqual(parse([], SCHEMA), Failed([NoVerbSelectedError()]))

    def testLeadingOptionWithoutDefaultVerb(self):
        self.assertEqual(parse(["-v"], SCHEMA), Failed([BadVerbSelectedError("-v")]))

    def testVerbIgnoresCase(self):
        self.assertEqual(parse(["COMMIT"], SCHEMA), Bound("commit", {}))

    def testAliasBindsToVerb(self):
        self.assertEqual(parse(["RM"], SCHEMA), Bound("remove", {}))

    def testFailedCarriesVerb(self):
        self.assertEqual(parse(["add"], SCHEMA).verb, "add")
        self.assertIsNone(parse(["push"], SCHEMA).verb)

    def testDefaultVerb(self):
        schema = registry(VerbSpec("run", verbose(), is_default=True), VerbSpec("stop"))
        self.assertEqual(parse([], schema), Bound("run", {}))
        self.assertEqual(parse(["-v"], schema), Bound("run", {"verbose": True}))
        self.assertEqual(parse(["stop"], schema), Bound("stop", {}))
        self.assertEqual(parse(["jump"], schema), Failed([BadVerbSelectedError("jump")]))

    def testMultipleDefaultVerbsFailEveryParse(self):
        schema = registry(VerbSpec("a", is_default=True), VerbSpec("b", is_default=True))
        for args in ([], ["a"], ["b", "--help"]):
            with self.subTest(args=args), self.assertLogs("verbum.binder", level="ERROR"):
                self.assertEqual(parse(args, schema), Failed([MultipleDefaultVerbsError()]))

    def testEmptyRegistryHasNoVerb(self):
        self.assertEqual(parse([], registry()), NoVerb())
        self.assertEqual(parse(["add"], registry()), NoVerb())

    def testArgumentsMustBeStrings(self):
        with self.assertRaises(TypeError):
            parse("add", SCHEMA)
        with self.assertRaises(TypeError):
            parse(["add", 3], SCHEMA)


class TestTokenGrammar(TestCase):
    """Behavioral tests for option tokens."""

    def testUnknownTokensAreKeptVerbatim(self):
        for token in ("--nope", "-x", "--Nope=3", "--help-me"):
            with self.subTest(token=token):
                outcome = parse(["add", "-f", "a", token], SCHEMA)
                self.assertIsInstance(outcome, Failed)
                self.assertIn(UnknownOptionError(token), outcome.errors)

    def testRequiredIsIndependentOfOtherErrors(self):
        self.assertEqual(
            parse(["add", "--bogus"], SCHEMA),
            Failed([UnknownOptionError("--bogus"), MissingRequiredOptionError("file")]),
        )
        self.assertEqual(
            parse(["add", "--bogus", "-f", "a"], SCHEMA),
            Failed([UnknownOptionError("--bogus")]),
        )

    def testOptionNamesIgnoreCaseByDefault(self):
        self.assertEqual(parse(["add", "--FILE", "a", "-V"], SCHEMA), Bound("add", {"file": "a", "verbose": True}))

    def testCaseSensitiveOptionNames(self):
        settings = ParserSettings(case_sensitive=True)
        self.assertEqual(
            parse(["add", "--FILE", "a"], SCHEMA, settings),
            Failed([
                UnknownOptionError("--FILE"),
                BadFormatTokenError("a"),
                MissingRequiredOptionError("file"),
            ]),
        )

    def testInlineValue(self):
        self.assertEqual(parse(["add", "--file=b.txt"], SCHEMA), Bound("add", {"file": "b.txt"}))
        self.assertEqual(parse(["add", "-f=b.txt"], SCHEMA), Bound("add", {"file": "b.txt"}))
        self.assertEqual(parse(["add", "--file="], SCHEMA), Bound("add", {"file": ""}))
        self.assertEqual(parse(["add", "--file=-x"], SCHEMA), Bound("add", {"file": "-x"}))

    def testMissingValue(self):
        self.assertEqual(parse(["add", "-f"], SCHEMA), Failed([MissingValueOptionError("file")]))
        self.assertEqual(parse(["add", "-f", "-v"], SCHEMA), Failed([MissingValueOptionError("file")]))

    def testMalformedOptionTokens(self):
        for token in ("---x", "--a_b", "-ab"):
            with self.subTest(token=token):
                self.assertEqual(
                    parse(["add", "-f", "a", token], SCHEMA),
                    Failed([BadFormatTokenError(token)]),
                )

    def testStrayPositionalWithoutDefaultOption(self):
        self.assertEqual(parse(["add", "-f", "a", "extra"], SCHEMA), Failed([BadFormatTokenError("extra")]))

    def testDiscoveryOrderIsPreserved(self):
        self.assertEqual(
            parse(["add", "--x", "-f", "a", "-f", "b", "stray"], SCHEMA),
            Failed([
                UnknownOptionError("--x"),
                RepeatedOptionError("file"),
                BadFormatTokenError("stray"),
            ]),
        )

    def testDoubleDashEndsOptions(self):
        self.assertEqual(
            parse(["cat", "--", "--help", "-v"], SCHEMA),
            Bound("cat", {"files": ("--help", "-v")}),
        )

    def testSingleDashIsAValue(self):
        self.assertEqual(parse(["add", "-f", "-"], SCHEMA), Bound("add", {"file": "-"}))

    def testOptionCollision(self):
        schema = registry(VerbSpec("x", OptionSpec("-f", "--file"), OptionSpec("-F", "--force", type=bool)))
        with self.assertRaises(ValueError):
            Parser(schema)
        Parser(schema, ParserSettings(case_sensitive=True))


class TestCoercion(TestCase):
    """Behavioral tests for typed values."""

    def testBooleanValues(self):
        self.assertEqual(parse(["commit", "-v", "false"], SCHEMA), Bound("commit", {"verbose": False}))
        self.assertEqual(parse(["commit", "-v", "TRUE"], SCHEMA), Bound("commit", {"verbose": True}))
        self.assertEqual(parse(["commit", "--verbose=False"], SCHEMA), Bound("commit", {"verbose": False}))
        self.assertEqual(
            parse(["commit", "--verbose=maybe"], SCHEMA),
            Failed([BadFormatConversionError("verbose")]),
        )

    def testIntegers(self):
        self.assertEqual(parse(["seek", "-n", "12"], SCHEMA), Bound("seek", {"count": 12}))
        self.assertEqual(parse(["seek", "-n", "-3"], SCHEMA), Bound("seek", {"count": -3}))
        self.assertEqual(parse(["seek", "-n", "x"], SCHEMA), Failed([BadFormatConversionError("count")]))
        self.assertEqual(parse(["seek", "-n", "1.5"], SCHEMA), Failed([BadFormatConversionError("count")]))

    def testIntegerSequences(self):
        self.assertEqual(parse(["seek", "--ports", "80", "443"], SCHEMA), Bound("seek", {"ports": (80, 443)}))
        self.assertEqual(parse(["seek", "--ports"], SCHEMA), Bound("seek", {"ports": ()}))
        self.assertEqual(parse(["seek", "--ports", "80", "x"], SCHEMA), Failed([BadFormatConversionError("ports")]))

    def testChoices(self):
        self.assertEqual(parse(["seek", "--mode", "fast"], SCHEMA), Bound("seek", {"mode": "fast"}))
        self.assertEqual(parse(["seek", "--mode", "FAST"], SCHEMA), Failed([BadFormatConversionError("mode")]))
        self.assertEqual(
            parse(["seek", "--mode", "FAST"], SCHEMA, ParserSettings(case_insensitive_choices=True)),
            Bound("seek", {"mode": "fast"}),
        )

    def testSequenceArity(self):
        self.assertEqual(parse(["tag", "--names"], SCHEMA), Failed([SequenceOutOfRangeError("names")]))
        for count in (1, 2, 3):
            names = tuple("n%d" % index for index in range(count))
            with self.subTest(count=count):
                self.assertEqual(parse(["tag", "--names", *names], SCHEMA), Bound("tag", {"names": names}))
        self.assertEqual(
            parse(["tag", "--names", "a", "b", "c", "d"], SCHEMA),
            Failed([SequenceOutOfRangeError("names")]),
        )

    def testSequenceStopsAtNextOption(self):
        self.assertEqual(
            parse(["cat", "a", "b", "-v"], SCHEMA),
            Bound("cat", {"files": ("a", "b"), "verbose": True}),
        )

    def testPositionalValue(self):
        self.assertEqual(parse(["clone", "http://x"], SCHEMA), Bound("clone", {"url": "http://x"}))
        self.assertEqual(parse(["clone", "--url", "http://x"], SCHEMA), Bound("clone", {"url": "http://x"}))

    def testMissingPositionalHasNoName(self):
        self.assertEqual(parse(["clone"], SCHEMA), Failed([MissingRequiredOptionError(None)]))
        self.assertEqual(parse(["clone", "-v"], SCHEMA), Failed([MissingRequiredOptionError(None)]))

    def testExtraScalarPositional(self):
        self.assertEqual(parse(["clone", "a", "b"], SCHEMA), Failed([BadFormatTokenError("b")]))

    def testPositionalAfterNamedIsRepeated(self):
        self.assertEqual(parse(["clone", "--url", "a", "b"], SCHEMA), Failed([RepeatedOptionError("url")]))

    def testPositionalConversionHasNoName(self):
        self.assertEqual(parse(["take", "x"], SCHEMA), Failed([BadFormatConversionError(None)]))
        self.assertEqual(parse(["take", "7"], SCHEMA), Bound("take", {"count": 7}))

    def testPositionalArityHasNoName(self):
        self.assertEqual(parse(["cat", "a"], SCHEMA), Failed([SequenceOutOfRangeError(None)]))

    def testRepeatableOptions(self):
        self.assertEqual(
            parse(["build", "-I", "a", "b", "--level", "1", "-I", "c", "--level", "2"], SCHEMA),
            Bound("build", {"include": ("a", "b", "c"), "level": 2}),
        )

    def testRepeatedOption(self):
        self.assertEqual(parse(["add", "-f", "a", "--file", "b"], SCHEMA), Failed([RepeatedOptionError("file")]))


class TestSetters(TestCase):
    """Behavioral tests for @option setters."""

    def testSetterReturnValueIsBound(self):
        self.assertEqual(parse(["serve", "--name", "ada"], SCHEMA), Bound("serve", {"name": "Ada"}))

    def testSetterFailureBecomesError(self):
        with self.assertLogs("verbum.binder", level="WARNING"):
            outcome = parse(["serve", "--port", "0"], SCHEMA)
        self.assertEqual(outcome, Failed([SetValueExceptionError("port", "port must be positive")]))

    def testSetterFailureDoesNotStopParsing(self):
        with self.assertLogs("verbum.binder", level="WARNING"):
            outcome = parse(["serve", "--port", "0", "--bogus", "--name", "bo"], SCHEMA)
        self.assertEqual(
            outcome,
            Failed([UnknownOptionError("--bogus"), SetValueExceptionError("port", "port must be positive")]),
        )

    def testSetterReceivesFinalSequenceOnce(self):
        calls = []

        @option("--items", sequence=True, repeatable=True)
        def items(values):
            calls.append(values)
            return values

        schema = registry(VerbSpec("pack", items))
        self.assertEqual(
            parse(["pack", "--items", "a", "--items", "b"], schema),
            Bound("pack", {"items": ("a", "b")}),
        )
        self.assertEqual(calls, [("a", "b")])


class TestConstraints(TestCase):
    """Behavioral tests for sets, groups and required options."""

    def testSetsCombineWithUnsetOptions(self):
        self.assertEqual(
            parse(["fetch", "--url", "a", "--mirror", "b", "-v"], SCHEMA),
            Bound("fetch", {"url": "a", "mirror": "b", "verbose": True}),
        )

    def testMutuallyExclusiveSets(self):
        self.assertEqual(
            parse(["fetch", "--url", "a", "--path", "b", "--mirror", "c"], SCHEMA),
            Failed([
                MutuallyExclusiveSetError("url", "web"),
                MutuallyExclusiveSetError("path", "local"),
                MutuallyExclusiveSetError("mirror", "web"),
            ]),
        )

    def testRequiredOptionOfInactiveSetIsSkipped(self):
        self.assertEqual(parse(["sync", "--url", "a"], SCHEMA), Bound("sync", {"url": "a"}))
        self.assertEqual(parse(["sync", "--path", "b"], SCHEMA), Bound("sync", {"path": "b"}))
        self.assertEqual(
            parse(["sync"], SCHEMA),
            Failed([MissingRequiredOptionError("url"), MissingRequiredOptionError("path")]),
        )

    def testMissingGroup(self):
        self.assertEqual(parse(["pick"], SCHEMA), Failed([MissingGroupOptionError("color", ("red", "blue"))]))
        self.assertEqual(parse(["pick", "--blue"], SCHEMA), Bound("pick", {"blue": True}))

    def testSetAndGroupAmbiguity(self):
        self.assertEqual(
            parse(["odd", "--alpha", "x"], SCHEMA),
            Failed([GroupOptionAmbiguityError("alpha")]),
        )


class TestRequests(TestCase):
    """Behavioral tests for help and version requests."""

    def testHelpAnywhere(self):
        self.assertEqual(parse(["add", "--help"], SCHEMA), HelpRequested("add"))
        self.assertEqual(parse(["add", "--bogus", "-f", "--HELP"], SCHEMA), HelpRequested("add"))
        self.assertEqual(parse(["-h"], SCHEMA), HelpRequested(None))
        self.assertEqual(parse(["push", "--help"], SCHEMA), HelpRequested(None))

    def testHelpVerb(self):
        self.assertEqual(parse(["help"], SCHEMA), HelpRequested(None))
        self.assertEqual(parse(["help", "commit"], SCHEMA), HelpRequested("commit"))
        self.assertEqual(parse(["HELP", "rm"], SCHEMA), HelpRequested("remove"))
        self.assertEqual(parse(["help", "push"], SCHEMA), HelpRequested(None))

    def testVersion(self):
        self.assertEqual(parse(["version"], SCHEMA), VersionRequested())
        self.assertEqual(parse(["add", "-f", "a", "--version"], SCHEMA), VersionRequested())

    def testDeclaredOptionShadowsHelp(self):
        self.assertEqual(parse(["serve", "-h", "localhost"], SCHEMA), Bound("serve", {"host": "localhost"}))
        self.assertEqual(parse(["serve", "--help"], SCHEMA), HelpRequested("serve"))

    def testDeclaredVerbShadowsHelp(self):
        schema = registry(VerbSpec("help", OptionSpec("--topic")))
        self.assertEqual(parse(["help", "--topic", "x"], schema), Bound("help", {"topic": "x"}))

    def testHelpAfterDoubleDashIsAValue(self):
        self.assertEqual(parse(["cat", "a", "--", "--help"], SCHEMA), Bound("cat", {"files": ("a", "--help")}))

    def testAutomaticNamesCanBeDisabled(self):
        settings = ParserSettings(auto_help=False, auto_version=False)
        self.assertEqual(
            parse(["add", "--help"], SCHEMA, settings),
            Failed([UnknownOptionError("--help"), MissingRequiredOptionError("file")]),
        )
        self.assertEqual(parse(["help"], SCHEMA, settings), Failed([BadVerbSelectedError("help")]))
        self.assertEqual(parse(["version"], SCHEMA, settings), Failed([BadVerbSelectedError("version")]))


class TestUnparse(TestCase):
    """Behavioral tests for re-serializing bound outcomes."""

    def assertRoundTrip(self, args, settings=None):
        outcome = parse(args, SCHEMA, settings)
        self.assertIsInstance(outcome, Bound)
        self.assertEqual(parse(unparse(SCHEMA, outcome), SCHEMA, settings), outcome)

    def testRoundTrips(self):
        cases = (
            ["add", "-f", "a.txt", "-v"],
            ["add", "--file=-dash.txt", "-v", "false"],
            ["add", "--file="],
            ["commit"],
            ["clone", "http://example.com/repo.git"],
            ["tag", "--names", "a", "b", "c"],
            ["seek", "-n", "-3", "--ports", "1", "-2", "--mode", "slow"],
            ["seek", "--ports"],
            ["cat", "x", "-", "y"],
            ["cat", "--", "a", "-b"],
            ["cat", "-v", "--", "--help", "-3"],
            ["build", "-I", "a", "-I", "b", "--level", "3"],
            ["build", "-I", "a", "-I=-b"],
            ["build", "-I=-a", "b", "-I=--", "-I=-c", "d", "e"],
            ["serve", "--name", "ada", "--port", "80"],
            ["fetch", "--url", "u", "--mirror", "m"],
            ["pick", "--red", "--blue"],
            ["RM"],
        )
        for args in cases:
            with self.subTest(args=args):
                self.assertRoundTrip(args)

    def testRoundTripWithInsensitiveChoices(self):
        self.assertRoundTrip(["seek", "--mode", "SLOW"], ParserSettings(case_insensitive_choices=True))

    def testUnparseUsesInlineForm(self):
        self.assertEqual(
            unparse(SCHEMA, Bound("add", {"file": "a.txt", "verbose": False})),
            ["add", "--file=a.txt", "--verbose=false"],
        )

    def testPositionalSequenceIsWrittenLast(self):
        self.assertEqual(
            unparse(SCHEMA, parse(["cat", "--", "a", "-b", "-v"], SCHEMA)),
            ["cat", "--", "a", "-b", "-v"],
        )
        self.assertEqual(
            unparse(SCHEMA, parse(["cat", "a", "b", "-v"], SCHEMA)),
            ["cat", "--verbose", "--", "a", "b"],
        )

    def testRepeatableSequenceIsSplitAtOptionLikeItems(self):
        self.assertEqual(
            unparse(SCHEMA, parse(["build", "-I", "a", "b", "-I=-c", "d"], SCHEMA)),
            ["build", "--include=a", "b", "--include=-c", "d"],
        )

    def testUnparseRejectsValuesNoInputProduces(self):
        with self.assertRaises(ValueError):
            unparse(SCHEMA, Bound("tag", {"names": ("a", "-b")}))
        with self.assertRaises(ValueError):
            unparse(SCHEMA, Bound("tag", {"names": ()}))

    def testUnparseRequiresBound(self):
        with self.assertRaises(TypeError):
            unparse(SCHEMA, Failed([NoVerbSelectedError()]))


if __name__ == "__main__":
    unittest.main()
