"""Tests for FormContainer from skjema/container.py."""

import pytest

from skjema.container import FormContainer
from skjema.controls import FormControlCheckbox, FormControlSubmit, FormControlText
from skjema.exceptions import MissingFieldError


class FormControlCounter(FormControlText, register=False):
    def pre_out(self):
        return "<script>counter()</script>"


def make_form():
    form = FormContainer("profile", action="/profile")
    form.append("text", "email", "memory:profile", "Email")
    form.append(FormControlCheckbox("newsletter", "memory:profile"))
    form.append(FormControlSubmit("save", caption="Save"))
    return form


class TestBuilding:
    def test_append_sets_back_reference(self):
        form = make_form()
        assert form["email"].container is form
        assert form["email"].caption == "Email"
        assert list(form.controls) == ["email", "newsletter", "save"]
        assert "email" in form
        assert len(form) == 3

    def test_append_instance_with_args_raises(self):
        with pytest.raises(TypeError):
            FormContainer("x").append(FormControlText("a"), "extra")

    def test_remove_clears_back_reference(self):
        form = make_form()
        control = form.remove("email")
        assert control.container is None
        assert "email" not in form


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_process_request_validate_save_load(self, mock_request_factory):
        form = make_form()
        form["email"].add_validator("validate_required")
        request = mock_request_factory({"email": "a@b.com", "newsletter": "on"})

        await form.process_request(request)
        assert await form.validate() == {}
        await form.save()

        fresh = make_form()
        await fresh.load()
        assert fresh["email"].value == "a@b.com"
        assert fresh["newsletter"].value is True

    @pytest.mark.asyncio
    async def test_validate_returns_only_failing_controls(self):
        form = make_form()
        form["email"].add_validator("validate_required", "Email is required")
        form.process({"email": ""})

        errors = await form.validate()

        assert errors == {"email": ["Email is required"]}
        assert form.errors == errors

    def test_process_missing_field_propagates(self):
        form = make_form()
        with pytest.raises(MissingFieldError):
            form.process({"newsletter": "on"})


class TestRendering:
    def test_renders_controls_inside_form_template(self, theme):
        form = FormContainer("contact")
        form.append(FormControlText("name"))
        html = form.get(theme)
        assert html == '<form><input name="name" id="name"></form>'
        assert theme.depth == 0

    def test_pre_out_emitted_once_per_type(self, theme):
        form = FormContainer("counters")
        form.append(FormControlCounter("a"))
        form.append(FormControlCounter("b"))
        html = str(form.get(theme))
        assert html.count("<script>counter()</script>") == 1
        assert html.index("<script>") < html.index('name="a"')

    def test_form_specific_template(self, theme_factory):
        theme = theme_factory({"form.contact.html": "contact: {{ controls }}", "control.html": "<i>"})
        form = FormContainer("contact")
        form.append(FormControlText("name"))
        assert form.get(theme) == "contact: <i>"

    def test_open_tag(self):
        assert FormContainer("profile", action="/p?a=1&b=2").open_tag() == (
            '<form method="post" action="/p?a=1&amp;b=2" id="profile">'
        )
