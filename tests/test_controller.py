"""Tests for FormController: registration, validation passes and notifications."""

import logging
from unittest.mock import MagicMock

import pytest

from formforge import (
    Field,
    FormConfig,
    FormController,
    FormEvent,
    MissingNameError,
    MultiArgStringRuleError,
    RuleNotFoundError,
    RuleOutcome,
    RuleRegistry,
    register_builtin_rules,
)


@pytest.fixture(autouse=True)
def setup_registry():
    RuleRegistry.clear()
    register_builtin_rules()
    yield
    RuleRegistry.clear()
    register_builtin_rules()


@pytest.fixture
def handlers():
    return {
        "on_valid": MagicMock(),
        "on_invalid": MagicMock(),
        "on_change": MagicMock(),
    }


@pytest.fixture
def form(handlers):
    return FormController(**handlers)


def make_field(name: str = "foo", value=None, **kwargs) -> Field:
    """Helper to create a Field for testing."""
    return Field(name, value=value, **kwargs)


# =============================================================================
# Single-field validation
# =============================================================================


class TestFieldValidation:
    def test_field_without_rules_is_valid(self, form):
        field = make_field(value="bar")
        form.attach(field)
        assert field.is_valid is True
        assert field.is_required is False
        assert field.computed_errors == []

    def test_required_field_with_value_is_valid(self, form, handlers):
        field = make_field(value="bar", required=True)
        form.attach(field)
        assert field.is_valid is True
        assert field.is_required is False
        handlers["on_valid"].assert_called_once()
        handlers["on_invalid"].assert_not_called()

    def test_required_field_without_value_is_invalid(self, form, handlers):
        field = make_field(required=True)
        form.attach(field)
        assert field.is_valid is False
        assert field.is_required is True
        assert field.computed_errors is None
        handlers["on_invalid"].assert_called_once()
        handlers["on_valid"].assert_not_called()

    def test_required_overrides_passing_rules(self, form):
        field = make_field(value="", validations="isEmail", required=True)
        form.attach(field)
        assert field.is_valid is False
        assert field.is_required is True

    def test_required_message_from_rule_specific_override(self, form):
        field = make_field(
            value="",
            required=True,
            validation_error="Generic",
            validation_errors={"isDefaultRequiredValue": "Email is required"},
        )
        form.attach(field)
        assert field.computed_errors == ["Email is required"]

    def test_required_message_falls_back_to_generic(self, form):
        field = make_field(value="", required=True, validation_error="Generic")
        form.attach(field)
        assert field.computed_errors == ["Generic"]

    def test_conditionally_required(self, form):
        newsletter = make_field("newsletter", value=True)
        email = make_field(
            "email",
            value="",
            required={"isNewsletterOn": lambda value, values, args: values.get("newsletter") is True},
        )
        form.attach(newsletter)
        form.attach(email)
        assert email.is_required is True
        assert email.is_valid is False

        newsletter.set_value(False)
        assert email.is_required is False
        assert email.is_valid is True

    def test_failed_rule_uses_rule_message(self, form):
        field = make_field(
            value="abc",
            validations="isNumeric,minLength:5",
            validation_errors={"isNumeric": "Numbers only", "minLength": "Too short"},
        )
        form.attach(field)
        assert field.is_valid is False
        assert field.computed_errors == ["Numbers only", "Too short"]

    def test_failed_rule_messages_are_deduplicated(self, form):
        field = make_field(
            value="abc",
            validations="isNumeric,minLength:5",
            validation_error="Invalid value",
        )
        form.attach(field)
        assert field.computed_errors == ["Invalid value"]

    def test_failed_rule_without_any_message(self, form):
        field = make_field(value="nope", validations="isEmail")
        form.attach(field)
        assert field.is_valid is False
        assert field.computed_errors == []

    def test_predicate_messages_take_precedence(self, form):
        RuleRegistry.register(
            "isAvailable", lambda value, values, args: RuleOutcome(False, "Username is taken")
        )
        field = make_field(
            value="bob",
            validations="isAvailable",
            required=True,
            validation_error="Generic",
        )
        form.attach(field)
        assert field.computed_errors == ["Username is taken"]

    def test_predicate_message_beats_required_message(self, form):
        field = make_field(
            value="",
            validations={"notBlank": lambda value, values, args: "Say something"},
            required=True,
            validation_error="Required",
        )
        form.attach(field)
        assert field.is_valid is False
        assert field.computed_errors == ["Say something"]

    def test_is_valid_value_is_a_dry_run(self, form):
        field = make_field("email", value="a@example.com", validations="isEmail")
        form.attach(field)
        assert form.is_valid_value(field, "nope") is False
        assert form.is_valid_value(field, "b@example.com") is True
        assert field.value == "a@example.com"
        assert field.is_valid is True


# =============================================================================
# Attach / detach
# =============================================================================


class TestAttachDetach:
    def test_attach_appends_in_order(self, form):
        a, b = make_field("a"), make_field("b")
        form.attach(a)
        form.attach(b)
        assert form.fields == [a, b]
        assert a.form is form

    def test_attach_twice_is_deduplicated(self, form):
        field = make_field()
        form.attach(field)
        form.attach(field)
        assert form.fields == [field]

    def test_identity_not_name(self, form):
        first, second = make_field("dup", value=1), make_field("dup", value=2)
        form.attach(first)
        form.attach(second)
        assert len(form.fields) == 2

        form.detach(first)
        assert form.fields == [second]

    def test_attach_without_name_raises(self, form):
        with pytest.raises(MissingNameError):
            form.attach(make_field(""))
        assert form.fields == []

    def test_multi_arg_string_rule_rejected(self):
        with pytest.raises(MultiArgStringRuleError):
            make_field(value="foo", validations="isLength:3:7")

    def test_unknown_rule_surfaces_on_attach(self, form):
        with pytest.raises(RuleNotFoundError):
            form.attach(make_field(value="x", validations="noSuchRule"))

    def test_detach_unknown_field_is_noop(self, form):
        a = make_field("a")
        form.attach(a)
        form.detach(make_field("a"))
        assert form.fields == [a]

    def test_detach_clears_form_reference(self, form):
        field = make_field()
        form.attach(field)
        form.detach(field)
        assert field.form is None

    def test_attach_then_detach_leaves_validity_unchanged(self, form):
        form.attach(make_field("a", value="ok"))
        assert form.is_valid is True

        invalid = make_field("b", required=True)
        form.attach(invalid)
        assert form.is_valid is False

        form.detach(invalid)
        assert form.is_valid is True

    def test_detaching_only_field_leaves_empty_form_valid(self, form):
        assert form.is_valid is True

        field = make_field("b", required=True)
        form.attach(field)
        assert form.is_valid is False

        form.detach(field)
        assert form.fields == []
        assert form.is_valid is True

    def test_duplicate_name_logged_once_on_attach(self, form, caplog):
        form.attach(make_field("dup", value=1))
        with caplog.at_level(logging.DEBUG, logger="formforge"):
            form.attach(make_field("dup", value=2))
            form.validate_form()
        assert caplog.text.count("Duplicate field name 'dup'") == 1
        assert form.get_current_values() == {"dup": 2}

    def test_detaching_last_invalid_field_makes_form_valid(self, form, handlers):
        form.attach(make_field("a", value="ok"))
        invalid = make_field("b", value="nope", validations="isEmail")
        form.attach(invalid)
        assert form.is_valid is False

        handlers["on_valid"].reset_mock()
        form.detach(invalid)
        assert form.is_valid is True
        handlers["on_valid"].assert_called_once()


# =============================================================================
# Full-form passes
# =============================================================================


class TestValidateForm:
    def test_form_validity_is_and_of_fields(self, form):
        fields = [
            make_field("a", value="x"),
            make_field("b", value="a@example.com", validations="isEmail"),
            make_field("c", value="", required=True),
        ]
        for field in fields:
            form.attach(field)
        assert form.is_valid == all(f.is_valid for f in fields)
        assert form.is_valid is False

    def test_cross_field_rule_revalidated_on_sibling_change(self, form):
        password = make_field("password", value="s3cret")
        confirm = make_field("confirm", value="s3cret", validations={"equalsField": "password"})
        form.attach(password)
        form.attach(confirm)
        assert confirm.is_valid is True

        password.set_value("changed")
        assert confirm.is_valid is False
        assert form.is_valid is False

    def test_one_notification_per_pass(self, form, handlers):
        form.attach(make_field("a", value="x"))
        form.attach(make_field("b", value="y"))
        handlers["on_valid"].reset_mock()

        form.validate_form()
        handlers["on_valid"].assert_called_once()

    def test_empty_form_sets_change_latch_without_notifying(self, form, handlers):
        assert form.can_change is False
        form.validate_form()
        assert form.can_change is True
        handlers["on_valid"].assert_not_called()
        handlers["on_invalid"].assert_not_called()

    def test_field_attached_mid_pass_joins_next_pass(self):
        events = []
        form = FormController()
        late = make_field("late", required=True)

        def on_valid():
            events.append("valid")
            if late not in form.fields:
                form.attach(late)

        form.on(FormEvent.VALID, on_valid)
        form.on("invalid", lambda: events.append("invalid"))

        form.attach(make_field("early", value="x"))

        assert events == ["valid", "invalid"]
        assert form.fields[-1] is late
        assert form.is_valid is False

    def test_handler_errors_propagate(self):
        form = FormController(on_valid=MagicMock(side_effect=RuntimeError("handler failed")))
        with pytest.raises(RuntimeError, match="handler failed"):
            form.attach(make_field(value="x"))

    def test_logs_pass_completion(self, form, caplog):
        with caplog.at_level(logging.DEBUG, logger="formforge"):
            form.attach(make_field("email", value="x"))
        assert "Attached field 'email'" in caplog.text
        assert "Validation pass complete" in caplog.text


# =============================================================================
# Change notifications
# =============================================================================


class TestChangeNotification:
    def test_no_change_event_before_first_pass(self, form, handlers):
        form.attach(make_field(value="bar"))
        handlers["on_change"].assert_not_called()
        assert form.can_change is True

    def test_change_event_on_value_change(self, form, handlers):
        field = make_field(value="bar")
        form.attach(field)

        field.set_value("baz")
        handlers["on_change"].assert_called_once_with({"foo": "baz"}, True)

    def test_change_event_reports_unchanged(self, form, handlers):
        field = make_field(value="bar")
        form.attach(field)

        field.set_value("bar")
        handlers["on_change"].assert_called_once_with({"foo": "bar"}, False)


# =============================================================================
# Change detection and reset
# =============================================================================


class TestChangeDetection:
    def test_not_changed_after_attach(self, form):
        form.attach(make_field("a", value="x"))
        assert form.is_changed() is False

    def test_changed_after_divergence(self, form):
        field = make_field("a", value="x")
        form.attach(field)
        field.set_value("y")
        assert form.is_changed() is True

    def test_nested_values_compared_structurally(self, form):
        field = make_field("tags", value={"names": ["a", "b"]})
        form.attach(field)
        field.set_value({"names": ["a", "b"]})
        assert form.is_changed() is False

        field.set_value({"names": ["a", "c"]})
        assert form.is_changed() is True

    def test_in_place_mutation_is_detected(self, form):
        field = make_field("tags", value=["a"])
        form.attach(field)
        field.value.append("b")
        assert form.is_changed() is True

    def test_reset_restores_pristine(self, form):
        field = make_field("a", value="x")
        form.attach(field)
        field.set_value("y")

        form.reset()
        assert field.value == "x"
        assert field.is_pristine is True
        assert form.is_changed() is False

    def test_reset_with_data(self, form):
        a, b = make_field("a", value="x"), make_field("b", value="y")
        form.attach(a)
        form.attach(b)
        b.set_value("changed")

        form.reset({"a": "override"})
        assert a.value == "override"
        assert b.value == "y"
        assert form.is_changed() is True

    def test_reset_revalidates_and_notifies(self):
        on_reset = MagicMock()
        form = FormController(on_reset=on_reset)
        field = make_field("email", value="a@example.com", validations="isEmail")
        form.attach(field)
        field.set_value("nope")
        assert form.is_valid is False

        form.reset()
        assert form.is_valid is True
        on_reset.assert_called_once_with()


# =============================================================================
# Submit
# =============================================================================


class TestSubmit:
    def test_valid_submit(self):
        on_submit, on_valid_submit, on_invalid_submit = MagicMock(), MagicMock(), MagicMock()
        form = FormController(
            on_submit=on_submit,
            on_valid_submit=on_valid_submit,
            on_invalid_submit=on_invalid_submit,
        )
        field = make_field("user.name", value="Ada")
        form.attach(field)

        form.submit()

        on_submit.assert_called_once_with(
            {"user": {"name": "Ada"}}, form.reset_model, form.update_fields_with_error
        )
        on_valid_submit.assert_called_once()
        on_invalid_submit.assert_not_called()
        assert field.form_submitted is True
        assert field.is_pristine is False
        assert form.form_submitted is True

    def test_invalid_submit(self):
        on_valid_submit, on_invalid_submit = MagicMock(), MagicMock()
        form = FormController(on_valid_submit=on_valid_submit, on_invalid_submit=on_invalid_submit)
        form.attach(make_field(required=True))

        form.submit()

        on_invalid_submit.assert_called_once()
        on_valid_submit.assert_not_called()

    def test_submit_handlers_see_validity_at_submit_time(self):
        on_invalid_submit = MagicMock()
        form = FormController(
            on_submit=lambda model, reset, invalidate: invalidate({"foo": "bar"}, True),
            on_invalid_submit=on_invalid_submit,
        )
        form.attach(make_field(value="x"))

        form.submit()
        assert form.is_valid is False
        on_invalid_submit.assert_not_called()

    def test_reset_model_callback(self):
        form = FormController(on_submit=lambda model, reset, invalidate: reset())
        field = make_field(value="x")
        form.attach(field)
        field.set_value("y")

        form.submit()
        assert field.value == "x"

    def test_reset_clears_submitted_state(self, form):
        field = make_field(value="x")
        form.attach(field)
        form.submit()

        form.reset()
        assert field.form_submitted is False
        assert form.form_submitted is False


# =============================================================================
# Configuration
# =============================================================================


class TestFormConfig:
    def test_defaults(self):
        form = FormController()
        assert form.is_form_disabled() is False
        assert form.prevent_external_invalidation is False

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("FORMFORGE_DISABLED", "true")
        monkeypatch.setenv("FORMFORGE_PREVENT_EXTERNAL_INVALIDATION", "1")
        monkeypatch.setenv("FORMFORGE_PATH_SEPARATOR", "/")
        config = FormConfig.from_env()
        assert config == FormConfig(
            disabled=True, prevent_external_invalidation=True, path_separator="/"
        )

    def test_from_env_defaults(self, monkeypatch):
        for name in (
            "FORMFORGE_DISABLED",
            "FORMFORGE_PREVENT_EXTERNAL_INVALIDATION",
            "FORMFORGE_PATH_SEPARATOR",
        ):
            monkeypatch.delenv(name, raising=False)
        assert FormConfig.from_env() == FormConfig()

    def test_keyword_overrides_config(self):
        form = FormController(FormConfig(disabled=True), disabled=False)
        assert form.is_form_disabled() is False

    def test_path_separator(self):
        form = FormController(FormConfig(path_separator="/"))
        form.attach(make_field("a/b", value=1))
        assert form.get_model() == {"a": {"b": 1}}
