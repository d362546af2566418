"""Tests for sword.callbacks: callback variants and normalization."""

import os.path

import pytest

from sword.callbacks import BoundCallback, ClassCallback, FunctionCallback, as_callback
from sword.errors import ConfigurationError
from sword.registry import Registry


class Greeter:
    def __init__(self, greeting: str = "hello") -> None:
        self.greeting = greeting

    def greet(self, name: str) -> str:
        return f"{self.greeting} {name}"

    @staticmethod
    def shout(name: str) -> str:
        return name.upper()


def index() -> str:
    return "index"


class TestAsCallback:
    def test_function(self) -> None:
        assert as_callback(index) == FunctionCallback(index)

    def test_lambda(self) -> None:
        fn = lambda: None  # noqa: E731
        assert as_callback(fn) == FunctionCallback(fn)

    def test_class_tuple(self) -> None:
        assert as_callback((Greeter, "shout")) == ClassCallback(Greeter, "shout")

    def test_name_tuple(self) -> None:
        assert as_callback(("greeter", "greet")) == ClassCallback("greeter", "greet")

    def test_bound_tuple(self) -> None:
        greeter = Greeter()
        assert as_callback((greeter, "greet")) == BoundCallback(greeter, "greet")

    def test_variant_passes_through(self) -> None:
        cb = ClassCallback(Greeter, "shout")
        assert as_callback(cb) is cb

    @pytest.mark.parametrize("value", [42, "index", (Greeter, 1), (1, 2, 3), None])
    def test_invalid(self, value: object) -> None:
        with pytest.raises(ConfigurationError, match="not a valid route callback"):
            as_callback(value)


class TestResolve:
    def test_function(self) -> None:
        assert FunctionCallback(index).resolve()() == "index"

    def test_class_static_method(self) -> None:
        assert ClassCallback(Greeter, "shout").resolve()("bob") == "BOB"

    def test_import_string(self) -> None:
        assert ClassCallback("os:path", "join").resolve() is os.path.join

    def test_registered_name_uses_shared_instance(self) -> None:
        registry = Registry()
        registry.register("greeter", Greeter, ["hi"])

        handler = ClassCallback("greeter", "greet").resolve(registry)
        assert handler("bob") == "hi bob"
        assert handler.__self__ is registry.resolve("greeter")

    def test_bound(self) -> None:
        greeter = Greeter("hey")
        assert BoundCallback(greeter, "greet").resolve()("bob") == "hey bob"

    def test_missing_method(self) -> None:
        with pytest.raises(ConfigurationError, match="no callable 'missing'"):
            ClassCallback(Greeter, "missing").resolve()

    def test_non_callable_attribute(self) -> None:
        with pytest.raises(ConfigurationError):
            BoundCallback(Greeter(), "greeting").resolve()

    def test_unregistered_name_without_module(self) -> None:
        with pytest.raises(ConfigurationError):
            ClassCallback("greeter", "greet").resolve(Registry())


class TestNames:
    def test_function(self) -> None:
        assert FunctionCallback(index).name == "index"

    def test_class(self) -> None:
        assert ClassCallback(Greeter, "shout").name == "Greeter.shout"

    def test_registered_name(self) -> None:
        assert ClassCallback("greeter", "greet").name == "greeter.greet"

    def test_bound(self) -> None:
        assert BoundCallback(Greeter(), "greet").name == "Greeter.greet"
