"""Tests for the validation engine."""

import pytest

from formcraft.models.field_definitions import (
    CheckboxField,
    DateField,
    DropdownField,
    ErrorMessages,
    NumberField,
    Option,
    RadioField,
    TextareaField,
    TextField,
    ValidationRules,
    parse_field,
)
from formcraft.models.form import FormDefinition
from formcraft.models.validation_result import ValidationErrorKind
from formcraft.validation import (
    check_field,
    is_empty,
    parse_date,
    parse_number,
    validate_field,
    validate_field_definition,
    validate_form,
    validate_form_definition,
)

RULE_SETS = [
    ValidationRules(min_length=3),
    ValidationRules(max_length=1, pattern=r"^\d+$"),
    ValidationRules(min=10, max=20),
    ValidationRules(min="2024-01-01", max="2024-12-31"),
    ValidationRules(custom_validation=lambda value: "always wrong"),
]

FIELD_FACTORIES = [
    lambda **kw: TextField(label="Text", **kw),
    lambda **kw: TextField(type="email", label="Email", **kw),
    lambda **kw: NumberField(label="Age", **kw),
    lambda **kw: TextareaField(label="Bio", **kw),
    lambda **kw: DropdownField(label="Pick", options=[Option(label="A", value="a")], **kw),
    lambda **kw: RadioField(label="One", options=[Option(label="A", value="a")], **kw),
    lambda **kw: CheckboxField(label="Many", options=[Option(label="A", value="a")], **kw),
    lambda **kw: DateField(label="When", **kw),
]


def _options(*values):
    return [Option(id=str(index), label=value.upper(), value=value) for index, value in enumerate(values)]


class TestHelpers:
    """Tests for emptiness and parsing helpers."""

    @pytest.mark.parametrize("value", [None, "", "   ", [], (), ["", None], ["  "]])
    def test_empty_values(self, value):
        """Test values that count as empty."""
        assert is_empty(value)

    @pytest.mark.parametrize("value", ["x", 0, False, ["a"]])
    def test_non_empty_values(self, value):
        """Test values that are not empty."""
        assert not is_empty(value)

    def test_parse_number(self):
        """Test number parsing."""
        assert parse_number("3.5") == 3.5
        assert parse_number(7) == 7.0
        assert parse_number("seven") is None
        assert parse_number(True) is None
        assert parse_number("nan") is None
        assert parse_number(10**400) is None

    def test_parse_date(self):
        """Test date parsing into comparable instants."""
        assert parse_date("2024-01-01") < parse_date("2024-01-01T00:00:01")
        assert parse_date("2024-01-01T02:00:00+02:00") == parse_date("2024-01-01")
        assert parse_date("31/12/2024") is None
        assert parse_date("") is None
        assert parse_date("0001-01-01T00:00:00+01:00") is None


class TestEmptyAndRequired:
    """Tests for required-ness and the empty-optional skip."""

    @pytest.mark.parametrize("rules", RULE_SETS)
    @pytest.mark.parametrize("make_field", FIELD_FACTORIES)
    @pytest.mark.parametrize("value", ["", None])
    def test_empty_optional_never_fails(self, make_field, rules, value, registry):
        """Test that empty optional fields skip every rule."""
        field = make_field(required=False, validation=rules)
        assert validate_field(field, value, registry) is None

    @pytest.mark.parametrize("make_field", FIELD_FACTORIES)
    @pytest.mark.parametrize("value", ["", None, []])
    def test_required_empty_always_fails(self, make_field, value, registry):
        """Test that empty required fields always produce a message."""
        field = make_field(required=True)
        problem = check_field(field, value, registry)
        assert problem is not None
        assert problem.error_type == ValidationErrorKind.REQUIRED
        assert problem.message

    def test_required_message_uses_label(self, registry):
        """Test the default required message."""
        field = TextField(label="Full name", required=True)
        assert validate_field(field, "", registry) == "Full name is required"

    def test_required_message_override(self, registry):
        """Test a custom required message."""
        field = TextField(label="Name", required=True, error_messages=ErrorMessages(required="Tell us!"))
        assert validate_field(field, None, registry) == "Tell us!"

    def test_whitespace_is_empty(self, registry):
        """Test that whitespace-only input does not satisfy required."""
        field = TextField(label="Name", required=True)
        assert validate_field(field, "   ", registry) == "Name is required"

    def test_required_single_checkbox_must_be_checked(self, registry):
        """Test a required boolean checkbox."""
        field = CheckboxField(label="Accept terms", required=True)
        problem = check_field(field, False, registry)
        assert problem.error_type == ValidationErrorKind.REQUIRED
        assert validate_field(field, True, registry) is None

    def test_optional_single_checkbox(self, registry):
        """Test that an optional toggle accepts both states."""
        field = CheckboxField(label="Newsletter")
        assert validate_field(field, False, registry) is None
        assert validate_field(field, True, registry) is None


class TestGenericRules:
    """Tests for length, pattern, range and custom rules."""

    def test_text_min_length_after_required(self, registry):
        """Test that a required value can still be too short."""
        field = TextField(label="Code", required=True, validation=ValidationRules(min_length=3))
        problem = check_field(field, "ab", registry)
        assert problem.error_type == ValidationErrorKind.LENGTH
        assert problem.message == "Must be at least 3 characters"
        assert validate_field(field, "abc", registry) is None

    def test_max_length(self, registry):
        """Test the maximum length rule."""
        field = TextareaField(label="Bio", validation=ValidationRules(max_length=5))
        assert validate_field(field, "123456", registry) == "Must be at most 5 characters"

    def test_length_counts_selections(self, registry):
        """Test that length rules count items of multi-valued fields."""
        field = CheckboxField(
            label="Toppings",
            options=_options("a", "b", "c"),
            validation=ValidationRules(min_length=2),
        )
        assert validate_field(field, ["a"], registry) == "Select at least 2 options"
        assert validate_field(field, ["a", "b"], registry) is None

    def test_pattern(self, registry):
        """Test the pattern rule and its override."""
        field = TextField(
            label="Zip",
            validation=ValidationRules(pattern=r"^\d{5}$"),
            error_messages=ErrorMessages(pattern="Five digits please"),
        )
        problem = check_field(field, "1234a", registry)
        assert problem.error_type == ValidationErrorKind.PATTERN
        assert problem.message == "Five digits please"
        assert validate_field(field, "12345", registry) is None

    def test_invalid_pattern_is_skipped(self, registry):
        """Test that a broken pattern does not block submission."""
        field = TextField(label="X", validation=ValidationRules(pattern="(unclosed"))
        assert validate_field(field, "anything", registry) is None

    def test_number_range(self, registry):
        """Test numeric min and max."""
        field = NumberField(label="Age", validation=ValidationRules(min=18, max=99))
        assert check_field(field, "17", registry).error_type == ValidationErrorKind.RANGE
        assert validate_field(field, 17, registry) == "Value must be at least 18"
        assert validate_field(field, "100", registry) == "Value must be at most 99"
        assert validate_field(field, "42", registry) is None

    def test_non_numeric_value(self, registry):
        """Test that non-numeric input is a format failure, not a range failure."""
        field = NumberField(label="Age", validation=ValidationRules(min=18))
        problem = check_field(field, "old", registry)
        assert problem.error_type == ValidationErrorKind.FORMAT
        assert problem.message == "Please enter a valid number"

    def test_number_without_rules(self, registry):
        """Test the number type check without bounds."""
        field = NumberField(label="Count")
        assert validate_field(field, "12", registry) is None
        assert check_field(field, "twelve", registry).error_type == ValidationErrorKind.FORMAT

    def test_date_min(self, registry):
        """Test a date lower bound."""
        field = DateField(label="Start", validation=ValidationRules(min="2024-01-01"))
        problem = check_field(field, "2023-12-31", registry)
        assert problem.error_type == ValidationErrorKind.RANGE
        assert problem.message == "Date must be on or after 2024-01-01"
        assert validate_field(field, "2024-06-01", registry) is None
        assert validate_field(field, "2024-01-01", registry) is None

    def test_date_max(self, registry):
        """Test a date upper bound with an override."""
        field = DateField(
            label="End",
            validation=ValidationRules(max="2024-12-31"),
            error_messages=ErrorMessages(max="Too late"),
        )
        assert validate_field(field, "2025-01-01", registry) == "Too late"

    def test_unparseable_date(self, registry):
        """Test that an invalid date is a format failure distinct from range."""
        field = DateField(label="Start", validation=ValidationRules(min="2024-01-01"))
        problem = check_field(field, "not a date", registry)
        assert problem.error_type == ValidationErrorKind.FORMAT
        assert problem.message == "Please enter a valid date"

    def test_min_max_ignored_for_text(self, registry):
        """Test that min/max do not apply to plain text fields."""
        field = TextField(label="Name", validation=ValidationRules(min=10))
        assert validate_field(field, "abc", registry) is None

    def test_custom_validation_verbatim(self, registry):
        """Test that custom validator messages are used as is."""
        rules = ValidationRules(custom_validation=lambda value: None if value == "ok" else "Say ok")
        field = TextField(label="X", validation=rules)
        problem = check_field(field, "nope", registry)
        assert problem.error_type == ValidationErrorKind.CUSTOM
        assert problem.message == "Say ok"
        assert validate_field(field, "ok", registry) is None

    def test_custom_validation_override(self, registry):
        """Test substituting a uniform custom message."""
        field = TextField(
            label="X",
            validation=ValidationRules(custom_validation=lambda value: "specific"),
            error_messages=ErrorMessages(custom_validation="Uniform message"),
        )
        assert validate_field(field, "a", registry) == "Uniform message"

    def test_first_failure_wins(self, registry):
        """Test that only the first failing rule is reported."""
        field = TextField(
            label="X",
            validation=ValidationRules(
                min_length=5,
                pattern=r"^\d+$",
                custom_validation=lambda value: "custom",
            ),
        )
        problem = check_field(field, "ab", registry)
        assert problem.error_type == ValidationErrorKind.LENGTH
        assert problem.message == "Must be at least 5 characters"

    def test_generic_rules_before_type_rules(self, registry):
        """Test that generic rules run before the type's own checks."""
        field = TextField(type="email", label="Email", validation=ValidationRules(min_length=10))
        assert check_field(field, "a@b", registry).error_type == ValidationErrorKind.LENGTH


class TestTypeRules:
    """Tests for type-specific rules."""

    @pytest.mark.parametrize(
        "kind,good,bad",
        [
            ("email", "ada@example.com", "ada@example"),
            ("url", "https://example.com/path", "example.com"),
            ("tel", "+1 (555) 123-4567", "call me"),
        ],
    )
    def test_formats(self, kind, good, bad, registry):
        """Test the email, url and phone format checks."""
        field = TextField(type=kind, label=kind)
        assert validate_field(field, good, registry) is None
        assert check_field(field, bad, registry).error_type == ValidationErrorKind.FORMAT

    @pytest.mark.parametrize("value", ["x@y..z", "a@b.c.", ".a@b.com", "two@@example.com"])
    def test_malformed_emails(self, value, registry):
        """Test that malformed addresses are rejected."""
        field = TextField(type="email", label="Email")
        assert validate_field(field, value, registry) == "Please enter a valid email address"

    @pytest.mark.parametrize("value", ["http://exa mple.com", "http://:80", "https://[::1", "ftp://example.com"])
    def test_malformed_urls(self, value, registry):
        """Test that malformed or non-web addresses are format failures."""
        field = TextField(type="url", label="Website")
        assert check_field(field, value, registry).error_type == ValidationErrorKind.FORMAT

    def test_email_message_falls_back_to_pattern(self, registry):
        """Test that an email field uses the pattern message override."""
        field = TextField(type="email", label="Email", error_messages=ErrorMessages(pattern="Bad address"))
        assert validate_field(field, "nope", registry) == "Bad address"

        field = TextField(type="email", label="Email", error_messages=ErrorMessages(type="Typed", pattern="Bad"))
        assert validate_field(field, "nope", registry) == "Typed"

    def test_out_of_range_number_and_date(self, registry):
        """Test that values too large to convert are format failures, not errors."""
        number = NumberField(label="Count", validation=ValidationRules(min=1))
        when = DateField(label="When", validation=ValidationRules(min="2024-01-01"))
        assert check_field(number, 10**400, registry).error_type == ValidationErrorKind.FORMAT
        assert check_field(NumberField(label="Count"), 10**400, registry).error_type == ValidationErrorKind.FORMAT
        assert check_field(when, "0001-01-01T00:00:00+01:00", registry).error_type == ValidationErrorKind.FORMAT
        assert check_field(DateField(label="When"), "0001-01-01T00:00:00+01:00", registry) is not None

    def test_empty_entries_in_selections(self, registry):
        """Test that blank entries in a multi-select are ignored."""
        options = _options("a", "b")
        multi = DropdownField(label="Pick", multiple=True, options=options)
        assert validate_field(multi, ["a", ""], registry) is None
        assert validate_field(multi, ["", None], registry) is None

        required_multi = DropdownField(label="Pick", multiple=True, required=True, options=options)
        required_group = CheckboxField(label="Tick", required=True, options=options)
        assert check_field(required_multi, [""], registry).error_type == ValidationErrorKind.REQUIRED
        assert check_field(required_group, ["", None], registry).error_type == ValidationErrorKind.REQUIRED

    def test_empty_entries_do_not_count_towards_length(self, registry):
        """Test that length rules count only real selections."""
        field = CheckboxField(label="Tick", options=_options("a", "b"), validation=ValidationRules(min_length=2))
        assert validate_field(field, ["a", ""], registry) == "Select at least 2 options"

    def test_dropdown_membership(self, registry):
        """Test dropdown option membership."""
        field = DropdownField(label="Pick", options=_options("a", "b"))
        problem = check_field(field, "c", registry)
        assert problem.error_type == ValidationErrorKind.OPTION
        assert problem.message == "Please select a valid option"
        assert validate_field(field, "a", registry) is None

    def test_multi_dropdown_membership(self, registry):
        """Test membership for every selected value."""
        field = DropdownField(label="Pick", multiple=True, options=_options("a", "b"))
        assert validate_field(field, ["a", "b"], registry) is None
        assert check_field(field, ["a", "z"], registry).error_type == ValidationErrorKind.OPTION

    def test_single_dropdown_rejects_list(self, registry):
        """Test that a single-select dropdown rejects several values."""
        field = DropdownField(label="Pick", options=_options("a", "b"))
        assert check_field(field, ["a", "b"], registry).error_type == ValidationErrorKind.FORMAT

    def test_radio_membership(self, registry):
        """Test radio option membership with an override."""
        field = RadioField(
            label="Size",
            options=_options("s", "m"),
            error_messages=ErrorMessages(option="Choose a listed size"),
        )
        assert validate_field(field, "xl", registry) == "Choose a listed size"
        assert validate_field(field, "m", registry) is None

    def test_checkbox_group(self, registry):
        """Test a required checkbox group."""
        field = CheckboxField(label="Pick", required=True, options=[Option(id="1", value="x", label="X")])
        assert check_field(field, [], registry).error_type == ValidationErrorKind.REQUIRED
        assert validate_field(field, ["x"], registry) is None
        assert check_field(field, ["y"], registry).error_type == ValidationErrorKind.OPTION

    def test_date_attribute_bounds(self, registry):
        """Test the date field's own min_date/max_date."""
        field = DateField(label="Day", min_date="2024-03-01", max_date="2024-03-31")
        assert validate_field(field, "2024-03-15", registry) is None
        assert check_field(field, "2024-02-28", registry).error_type == ValidationErrorKind.RANGE
        assert validate_field(field, "2024-04-01", registry) == "Date must be on or before 2024-03-31"

    def test_blank_date_bounds_ignored(self, registry):
        """Test that empty min_date/max_date strings are ignored."""
        field = DateField(label="Day", min_date="", max_date="")
        assert validate_field(field, "1999-01-01", registry) is None


class TestValidateForm:
    """Tests for form-level validation."""

    def test_one_failing_field(self, registry):
        """Test that only the failing field appears in the error map."""
        fields = [
            TextField(id="name", label="Name", required=True),
            TextField(id="email", type="email", label="Email"),
            DropdownField(id="colour", label="Colour", options=_options("red")),
        ]
        values = {"name": "Ada", "email": "not-an-email", "colour": "red"}

        result = validate_form(fields, values, registry)

        assert result.is_valid is False
        assert result.errors == {"email": "Please enter a valid email address"}
        assert [failure.field_id for failure in result.failures] == ["email"]

    def test_all_valid(self, registry):
        """Test a fully valid form."""
        fields = [TextField(id="a", label="A"), NumberField(id="b", label="B")]
        result = validate_form(fields, {"a": "x", "b": "3"}, registry)
        assert result.is_valid
        assert result.errors == {}

    def test_missing_values_are_empty(self, registry):
        """Test that absent keys are validated as empty."""
        fields = [TextField(id="a", label="A", required=True), TextField(id="b", label="B")]
        result = validate_form(fields, {}, registry)
        assert result.errors == {"a": "A is required"}

    def test_errors_follow_field_order(self, registry):
        """Test deterministic error order."""
        fields = [TextField(id=name, label=name, required=True) for name in ("c", "a", "b")]
        result = validate_form(fields, {}, registry)
        assert list(result.errors) == ["c", "a", "b"]

    def test_round_trip_keeps_outcomes(self, registry):
        """Test that storing and reloading fields keeps order and outcomes."""
        form = FormDefinition(
            title="T",
            fields=[
                TextField(id="a", label="A", required=True, validation=ValidationRules(min_length=2)),
                DateField(id="b", label="B", validation=ValidationRules(min="2024-01-01")),
                CheckboxField(id="c", label="C", options=_options("x")),
            ],
        )
        values = {"a": "x", "b": "2023-01-01", "c": ["x"]}
        loaded = FormDefinition.model_validate(form.to_storage())

        assert [field.id for field in loaded.fields] == ["a", "b", "c"]
        assert validate_form(loaded.fields, values, registry) == validate_form(form.fields, values, registry)


class TestDefinitionChecks:
    """Tests for structural checks on field and form definitions."""

    def test_valid_definition(self):
        """Test a well-formed field."""
        field = DropdownField(label="Pick", options=_options("a", "b"))
        assert validate_field_definition(field) == {}

    def test_label_and_options_required(self):
        """Test missing label and empty option list."""
        errors = validate_field_definition(DropdownField(label=" ", options=[]))
        assert errors == {"label": "Label is required", "options": "At least one option is required"}

    def test_option_problems(self):
        """Test blank and duplicate option entries."""
        field = RadioField(
            label="Pick",
            options=[
                Option(label="A", value="a"),
                Option(label="", value="a"),
                Option(label="C", value=""),
            ],
        )
        errors = validate_field_definition(field)
        assert errors["option-1-label"] == "Option label is required"
        assert errors["option-1-value"] == "Option values must be unique"
        assert errors["option-2-value"] == "Option value is required"

    def test_single_checkbox_needs_no_options(self):
        """Test that a plain checkbox has no option requirements."""
        assert validate_field_definition(CheckboxField(label="Agree")) == {}

    def test_rule_consistency(self):
        """Test contradictory or broken rules."""
        too_long = TextField(label="X", validation=ValidationRules(min_length=5, max_length=2))
        broken = TextField(label="X", validation=ValidationRules(pattern="(oops"))
        dates = DateField(label="X", min_date="2024-05-01", max_date="2024-01-01")
        assert validate_field_definition(too_long)["validation"] == "Minimum length cannot exceed maximum length"
        assert validate_field_definition(broken)["validation"].startswith("Invalid pattern")
        assert validate_field_definition(dates)["validation"] == "Minimum cannot exceed maximum"

    def test_form_definition(self):
        """Test publish-time checks of a whole form."""
        form = FormDefinition(
            title="",
            fields=[
                parse_field({"id": "ok", "type": "text", "label": "Fine"}),
                parse_field({"id": "bad", "type": "dropdown", "label": "Pick", "options": []}),
            ],
        )
        assert validate_form_definition(form) == {
            "title": "Title is required",
            "bad": "At least one option is required",
        }
