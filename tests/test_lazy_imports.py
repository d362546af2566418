"""Tests for sword.__init__: lazy imports cover all public names."""

import pytest

import sword


@pytest.mark.parametrize("name", sword.__all__)
def test_all_names_resolve(name: str) -> None:
    """Every name in __all__ must resolve via __getattr__ without error."""
    obj = getattr(sword, name)
    assert obj is not None, f"sword.{name} resolved to None"


def test_resolved_names_match_modules() -> None:
    from sword.engine import Engine
    from sword.routing.router import Router

    assert sword.Engine is Engine
    assert sword.Router is Router


def test_unknown_name_raises_attribute_error() -> None:
    """Accessing an unregistered name raises AttributeError."""
    with pytest.raises(AttributeError, match="no attribute"):
        sword.__getattr__("ThisDoesNotExist")
