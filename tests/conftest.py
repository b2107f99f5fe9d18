"""Shared pytest fixtures."""

from collections import defaultdict
from unittest.mock import MagicMock

import jinja2
import pytest

from skjema.lib.hooks import hooks
from skjema.storage import clear_memory_storage
from skjema.theme import Theme

CONTROL_TEMPLATES = {
    "control.html": "<input{{ attributes }}>",
    "control.checkbox.html": "<input type=\"checkbox\"{{ attributes }}{% if value %} checked{% endif %}>",
    "form.html": "<form>{{ controls }}</form>",
}


@pytest.fixture
def clean_hooks():
    """Save and restore hooks state around a test."""
    original_filters = {name: list(handlers) for name, handlers in hooks._filters.items()}
    original_actions = {name: list(handlers) for name, handlers in hooks._actions.items()}
    yield hooks
    hooks._filters = defaultdict(list, original_filters)
    hooks._actions = defaultdict(list, original_actions)


@pytest.fixture(autouse=True)
def clean_memory_storage():
    yield
    clear_memory_storage()


@pytest.fixture
def theme_factory():
    """Factory fixture that returns a Theme over in-memory templates."""
    def _make(templates=None):
        environment = jinja2.Environment(
            loader=jinja2.DictLoader(CONTROL_TEMPLATES if templates is None else templates),
            autoescape=True,
        )
        return Theme(environment)
    return _make


@pytest.fixture
def theme(theme_factory):
    return theme_factory()


@pytest.fixture
def mock_request_factory():
    """Factory fixture that returns mock requests with posted form data."""
    def _make(form_data=None):
        request = MagicMock()

        async def _form():
            return form_data or {}

        request.form = _form
        return request
    return _make
