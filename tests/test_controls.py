"""Tests for the concrete controls and the control type registry."""

import pytest

from skjema.config import FormsConfig, Settings
from skjema.controls import (
    FormControl,
    FormControlCheckbox,
    FormControlEmail,
    FormControlPassword,
    FormControlSelect,
    FormControlStatic,
    FormControlSubmit,
    FormControlText,
    FormControlTextArea,
    create,
    from_args,
    get_control_class,
    registered_types,
)
from skjema.controls.registry import derive_type_name
from skjema.exceptions import InvalidControlTypeError
from skjema.storage import MemoryStorage
from skjema.theme import create_theme


@pytest.fixture
def bundled_theme():
    """Theme over the package's own control templates."""
    return create_theme(Settings(forms=FormsConfig()))


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

class TestRegistry:
    def test_builtin_types_registered(self):
        assert {"text", "password", "email", "hidden", "textarea", "checkbox", "select", "submit", "static"} <= set(
            registered_types()
        )

    def test_derive_type_name(self):
        assert derive_type_name(FormControlTextArea) == "textarea"

        class DatePicker:
            pass

        assert derive_type_name(DatePicker) == "unknown"

    def test_explicit_type_name(self):
        class DatePicker(FormControl, type_name="datepicker"):
            pass

        assert DatePicker.control_type() == "datepicker"
        assert get_control_class("datepicker") is DatePicker
        assert DatePicker("when").get_template() == ["control.datepicker", "control"]

    def test_unregistered_subclass(self):
        class FormControlScratch(FormControl, register=False):
            pass

        assert FormControlScratch.control_type() == "scratch"
        with pytest.raises(InvalidControlTypeError):
            get_control_class("scratch")

    def test_lookup_is_case_insensitive(self):
        assert get_control_class("TextArea") is FormControlTextArea

    def test_create_by_type(self):
        control = create("select", "country", None, {"class": "wide"})
        assert isinstance(control, FormControlSelect)
        assert control.name == "country"
        assert control.properties == {"class": "wide"}


class TestFromArgs:
    def test_pads_missing_arguments(self):
        control = from_args(["text", "email"])
        assert type(control) is FormControlText
        assert control.name == "email"
        assert control.storage is None
        assert control.caption is None
        assert control.properties == {}

    def test_all_arguments(self):
        control = from_args(
            ["checkbox", "agree", "memory:prefs", "I agree", {"class": "tick"}, {"wrap": "<p>%s</p>"}]
        )
        assert type(control) is FormControlCheckbox
        assert isinstance(control.storage, MemoryStorage)
        assert control.caption == "I agree"
        assert control.properties == {"class": "tick"}
        assert control.get_setting("wrap") == "<p>%s</p>"

    def test_unknown_type_raises(self):
        with pytest.raises(InvalidControlTypeError) as exc_info:
            from_args(["bogus", "x"])
        assert exc_info.value.control_type == "bogus"
        assert '"bogus"' in str(exc_info.value)
        assert "text" in exc_info.value.available

    def test_non_string_type_raises(self):
        with pytest.raises(InvalidControlTypeError):
            from_args([None, "x"])

    def test_too_many_arguments(self):
        with pytest.raises(TypeError):
            from_args(["text", "x", None, None, None, None, "extra"])


# ---------------------------------------------------------------------------
# Concrete controls
# ---------------------------------------------------------------------------

class TestCheckbox:
    def test_missing_input_means_unchecked(self):
        control = FormControlCheckbox("agree")
        control.process({})
        assert control.value is False

    @pytest.mark.parametrize("submitted", ["on", "1", "yes"])
    def test_submitted_input_means_checked(self, submitted):
        control = FormControlCheckbox("agree")
        control.process({"agree": submitted})
        assert control.value is True

    def test_renders_checked(self, theme):
        control = FormControlCheckbox("agree").set_value(True)
        assert control.get(theme) == '<input type="checkbox" value="1" name="agree" id="agree" checked>'

    def test_renders_unchecked(self, theme):
        control = FormControlCheckbox("agree").set_value(False)
        assert control.get(theme) == '<input type="checkbox" value="1" name="agree" id="agree">'


class TestTextControls:
    def test_password_value_not_rendered(self, theme):
        control = FormControlPassword("pw").set_value("secret")
        assert control.get(theme) == '<input name="pw" id="pw">'

    def test_textarea_value_is_content_not_attribute(self, bundled_theme):
        control = FormControlTextArea("bio").set_value("Hello <world>")
        html = control.get(bundled_theme)
        assert '<textarea name="bio" id="bio">Hello &lt;world&gt;</textarea>' in html
        assert "value=" not in html

    @pytest.mark.asyncio
    async def test_email_validates_format(self):
        control = FormControlEmail("email").set_value("not-an-email")
        assert await control.validate() == ["Value must be a valid Email Address."]
        control.set_value("a@b.com")
        assert await control.validate() == []

    def test_bundled_text_template(self, bundled_theme):
        control = FormControlEmail("email", caption="Email").set_value("a@b.com")
        html = control.get(bundled_theme)
        assert '<label for="email">Email</label>' in html
        assert '<input type="email" value="a@b.com" name="email" id="email">' in html
        assert f'id="{control.control_id()}"' in html

    def test_theme_directory_overrides_bundled(self, tmp_path):
        (tmp_path / "control.text.html").write_text("custom {{ control.name }}")
        theme = create_theme(Settings(forms=FormsConfig(template_dirs=[str(tmp_path)])))
        assert FormControlText("email").get(theme) == "custom email"


class TestSelect:
    def test_set_options_from_list_and_mapping(self):
        control = FormControlSelect("color").set_options(["red", "blue"])
        assert control.options == {"red": "red", "blue": "blue"}
        control.set_options({1: "One"})
        assert control.options == {"1": "One"}

    def test_is_selected(self):
        control = FormControlSelect("color").set_value(2)
        assert control.is_selected("2")
        assert not control.is_selected("3")
        control.set_value(["a", "b"])
        assert control.is_selected("b")

    def test_renders_options(self, bundled_theme):
        control = FormControlSelect("country", caption="Country")
        control.set_options({"no": "Norway", "se": "Sweden"}).set_value("no")
        html = control.get(bundled_theme)
        assert '<select name="country" id="country">' in html
        assert '<option value="no" selected>Norway</option>' in html
        assert '<option value="se">Sweden</option>' in html


class TestSubmitAndStatic:
    def test_submit_label_and_no_storage(self, theme):
        control = FormControlSubmit("save", "memory:x", caption="Save profile")
        assert control.storage is None
        assert control.get(theme) == '<input value="Save profile" name="save" id="save">'

    def test_submit_process_tolerates_missing(self):
        control = FormControlSubmit("save")
        control.process({})
        assert control.value is None

    def test_static_renders_value_only(self, bundled_theme):
        control = FormControlStatic("notice").set_value("Read carefully")
        html = control.get(bundled_theme)
        assert "Read carefully" in html
        assert "name=" not in html

    def test_static_ignores_submitted_data(self):
        control = FormControlStatic("notice").set_value("kept")
        control.process({})
        assert control.value == "kept"
