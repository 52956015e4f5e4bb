"""
Presentation type tests (validators, union, registry lifecycle).

Conventions
- Registry tests build isolated PresentationTypeRegistry instances; only the
  lifecycle tests touch the default registry, and they restore it.
"""
import unittest
from unittest import TestCase

from armature.faults import ValidationError, DuplicateTypeNameError, UnknownTypeNameError
from armature.presentation import *
from armature.results import Ok, Err
from armature.tokens import Value, Keyword, Number, Reference


def is_even(token):
    return isinstance(token, Number) and token.value % 2 == 0


class TestSimpleTypeValidator(TestCase):
    def testAccepts(self):
        validator = simple_type_validator("even", is_even)
        self.assertEqual(validator(Number(4)), Ok(True))

    def testRejectsWithUniformMessage(self):
        validator = simple_type_validator("even", is_even)
        outcome = validator(Value("spam"))
        self.assertTrue(outcome.is_err())
        self.assertIsInstance(outcome.err, ValidationError)
        self.assertEqual(outcome.err.message, "expected even, got spam")
        self.assertEqual(outcome.err.token, Value("spam"))
        self.assertEqual(outcome.err.expected, ("even",))

    def testAdvertisesExpectedNames(self):
        self.assertEqual(simple_type_validator("even", is_even).__expected__, ("even",))

    def testRejectsBadArguments(self):
        with self.assertRaises(ValueError):
            simple_type_validator(" ", is_even)
        with self.assertRaises(TypeError):
            simple_type_validator("even", "not callable")


class TestBuiltinTypes(TestCase):
    def testString(self):
        self.assertTrue(StringPresentationType.validate(Value("alice")).is_ok())
        self.assertTrue(StringPresentationType.validate(Keyword("alice")).is_err())

    def testKeyword(self):
        self.assertTrue(KeywordPresentationType.validate(Keyword("room")).is_ok())
        self.assertTrue(KeywordPresentationType.validate(Value("--room")).is_err())

    def testNumber(self):
        self.assertTrue(NumberPresentationType.validate(Number(3)).is_ok())
        self.assertTrue(NumberPresentationType.validate(Value("3")).is_err())

    def testReferences(self):
        user = Reference("@", "alice:example.org")
        alias = Reference("#", "lobby:example.org")
        opaque = Reference("!", "abc:example.org")
        self.assertTrue(UserPresentationType.validate(user).is_ok())
        self.assertTrue(UserPresentationType.validate(alias).is_err())
        self.assertTrue(RoomPresentationType.validate(alias).is_ok())
        self.assertTrue(RoomPresentationType.validate(opaque).is_ok())
        self.assertTrue(RoomAliasPresentationType.validate(opaque).is_err())
        self.assertTrue(RoomIDPresentationType.validate(opaque).is_ok())
        for token in (user, alias, opaque):
            with self.subTest(token=token):
                self.assertTrue(ReferencePresentationType.validate(token).is_ok())
        self.assertTrue(ReferencePresentationType.validate(Value("alice")).is_err())


class TestUnion(TestCase):
    def setUp(self):
        self.validator = union(UserPresentationType, NumberPresentationType)

    def testAcceptsFirstBranchAlone(self):
        self.assertTrue(self.validator(Reference("@", "alice:example.org")).is_ok())

    def testAcceptsSecondBranchAlone(self):
        self.assertTrue(self.validator(Number(12)).is_ok())

    def testAcceptsBothBranches(self):
        validator = union(StringPresentationType, simple_type_validator("short", lambda token: len(str(token)) < 5))
        self.assertTrue(validator(Value("abc")).is_ok())

    def testRejectsWithEveryAttemptedName(self):
        outcome = self.validator(Value("spam"))
        self.assertTrue(outcome.is_err())
        self.assertEqual(outcome.err.expected, ("user", "number"))
        self.assertIn("user", outcome.err.message)
        self.assertIn("number", outcome.err.message)
        self.assertEqual(outcome.err.message, "expected one of user, number, got spam")

    def testNestedUnionsFlattenNames(self):
        validator = union(self.validator, RoomPresentationType, UserPresentationType)
        self.assertEqual(validator.__expected__, ("user", "number", "room"))
        self.assertEqual(validator(Keyword("x")).err.expected, ("user", "number", "room"))

    def testRequiresBranches(self):
        with self.assertRaises(TypeError):
            union()


class TestRegistry(TestCase):
    def setUp(self):
        self.registry = PresentationTypeRegistry()
        self.even = simple_type_validator("even", is_even)

    def testRegisterThenFind(self):
        registered = self.registry.register("even", self.even)
        self.assertTrue(registered.is_ok())
        self.assertEqual(self.registry.find("even"), Ok(PresentationType("even", self.even)))

    def testDuplicateRegistrationFailsAndKeepsFirst(self):
        self.assertTrue(self.registry.register("even", self.even).is_ok())
        other = simple_type_validator("even", lambda token: False)
        outcome = self.registry.register("even", other)
        self.assertTrue(outcome.is_err())
        self.assertIsInstance(outcome.err, DuplicateTypeNameError)
        self.assertEqual(outcome.err.name, "even")
        self.assertIs(self.registry.find("even").ok.validator, self.even)
        self.assertEqual(len(self.registry), 1)

    def testUnknownNameIsAnError(self):
        outcome = self.registry.find("missing")
        self.assertTrue(outcome.is_err())
        self.assertIsInstance(outcome.err, UnknownTypeNameError)
        self.assertEqual(outcome.err.name, "missing")

    def testUnwrapMakesMisconfigurationLoud(self):
        with self.assertRaises(UnknownTypeNameError):
            self.registry.find("missing").unwrap()

    def testRegistriesAreIsolated(self):
        self.registry.register("even", self.even)
        self.assertNotIn("even", PresentationTypeRegistry())

    def testSeededRegistry(self):
        registry = PresentationTypeRegistry(BUILTINS)
        self.assertEqual(set(registry.names()), {presentation.name for presentation in BUILTINS})

    def testRejectsInvalidRegistrations(self):
        with self.assertRaises(TypeError):
            self.registry.register("even", "not callable")
        with self.assertRaises(ValueError):
            self.registry.register("", self.even)


class TestDefaultRegistryLifecycle(TestCase):
    def tearDown(self):
        shutdown()
        init()

    def testBuiltinsAreInstalled(self):
        for presentation in BUILTINS:
            with self.subTest(name=presentation.name):
                self.assertEqual(find_presentation_type(presentation.name), Ok(presentation))

    def testInitIsIdempotent(self):
        before = len(default_registry())
        init()
        self.assertEqual(len(default_registry()), before)

    def testShutdownClears(self):
        shutdown()
        self.assertTrue(find_presentation_type("string").is_err())
        init()
        self.assertTrue(find_presentation_type("string").is_ok())

    def testMakePresentationType(self):
        even = make_presentation_type("even", simple_type_validator("even", is_even))
        self.assertEqual(find_presentation_type("even"), Ok(even))
        with self.assertRaises(DuplicateTypeNameError):
            make_presentation_type("even", simple_type_validator("even", is_even))

    def testRegisterOnDefaultRegistry(self):
        self.assertTrue(register_presentation_type("even", simple_type_validator("even", is_even)).is_ok())
        self.assertIsInstance(register_presentation_type("string", is_even), Err)

    def testInitFailsWhenBuiltinNameIsTaken(self):
        shutdown()
        register_presentation_type("string", simple_type_validator("string", is_even))
        with self.assertRaises(DuplicateTypeNameError):
            init()


if __name__ == "__main__":
    unittest.main()
