# tests/conftest.py
import pytest

from unitalgebra.units.registry import _bootstrap_default_registry


@pytest.fixture()
def reg():
    """Fresh, fully-bootstrapped registry so tests never share registrations."""
    return _bootstrap_default_registry()


@pytest.fixture()
def ns(reg):
    return reg.as_namespace()
