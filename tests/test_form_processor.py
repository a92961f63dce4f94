import logging

import pytest

from contact_form.config import DEFAULT_FORM_DEFINITION
from contact_form.forms.factory import FormFactory
from contact_form.forms.processor import REQUIRED_MESSAGE, FormDataProcessor


@pytest.fixture
def contact_form():
    return FormFactory().create(DEFAULT_FORM_DEFINITION)


@pytest.fixture
def processor():
    return FormDataProcessor()


def test_valid_submission_returns_submitted_values(contact_form, processor, submission):
    result = processor.process(contact_form, submission)

    assert result.is_valid()
    assert not result.has_errors()
    assert result.get_processed_data() == submission


def test_values_are_stripped_and_unknown_keys_dropped(contact_form, processor, submission):
    data = {key: f"  {value} " for key, value in submission.items()}
    data["utm_source"] = "newsletter"

    result = processor.process(contact_form, data)

    assert result.is_valid()
    assert result.get_processed_data() == submission


def test_empty_request_is_not_submitted(contact_form, processor):
    result = processor.process(contact_form, {"unrelated": "x"})

    assert not result.is_valid()
    assert not result.has_errors()
    assert result.get_processed_data() == {}


def test_short_message_is_invalid(contact_form, processor, submission):
    submission["message"] = "x" * 50

    result = processor.process(contact_form, submission)

    assert not result.is_valid()
    assert result.has_errors()
    assert result.get_form().errors == {"message": "Must be at least 160 characters long."}
    # Submitted input is kept for re-rendering
    assert result.get_form().data["message"] == "x" * 50


@pytest.mark.parametrize("field", ["name", "email", "telephone", "company", "subject", "message"])
def test_missing_required_field(contact_form, processor, submission, field):
    submission[field] = "   "

    result = processor.process(contact_form, submission)

    assert not result.is_valid()
    assert result.get_form().errors[field] == REQUIRED_MESSAGE


@pytest.mark.parametrize(
    "field, value",
    [
        ("name", "x" * 51),
        ("email", "not-an-email"),
        ("telephone", "call me maybe"),
        ("telephone", "+5691234567890123"),
        ("company", "AB"),
        ("subject", "Too short"),
        ("message", "x" * 2001),
    ],
)
def test_constraint_violations(contact_form, processor, submission, field, value):
    submission[field] = value

    result = processor.process(contact_form, submission)

    assert not result.is_valid()
    assert set(result.get_form().errors) == {field}


def test_typed_fields_are_coerced(processor):
    form = FormFactory().create({
        "schema": {
            "type": "object",
            "properties": {
                "seats": {"type": "integer", "minimum": 1, "maximum": 500},
                "budget": {"type": "number"},
                "newsletter": {"type": "boolean"},
                "plan": {"type": "string", "enum": ["basic", "pro"]},
                "website": {"type": "string", "format": "uri"},
            },
            "required": ["seats"],
        }
    })

    result = processor.process(form, {
        "seats": "25",
        "budget": "1200.50",
        "newsletter": "on",
        "plan": "pro",
        "website": "https://acme.io",
    })

    assert result.is_valid()
    assert result.get_processed_data() == {
        "seats": 25,
        "budget": 1200.5,
        "newsletter": True,
        "plan": "pro",
        "website": "https://acme.io",
    }


def test_typed_field_errors(processor):
    form = FormFactory().create({
        "schema": {
            "type": "object",
            "properties": {
                "seats": {"type": "integer", "maximum": 10},
                "plan": {"type": "string", "enum": ["basic", "pro"]},
                "code": {"type": "string", "pattern": "^[A-Z]{3}$"},
            },
        }
    })

    result = processor.process(form, {"seats": "11", "plan": "gold", "code": "abc"})

    assert set(result.get_form().errors) == {"seats", "plan", "code"}

    result = processor.process(form, {"seats": "ten"})
    assert result.get_form().errors == {"seats": "This field must be a whole number."}


def test_absent_optional_fields_are_omitted(processor):
    form = FormFactory().create({
        "schema": {
            "type": "object",
            "properties": {"name": {"type": "string"}, "company": {"type": "string"}},
            "required": ["name"],
        }
    })

    result = processor.process(form, {"name": "Jane", "company": ""})

    assert result.is_valid()
    assert result.get_processed_data() == {"name": "Jane"}


def test_rejected_submission_logs_warning(contact_form, processor, submission, caplog):
    submission["message"] = "too short"

    with caplog.at_level(logging.WARNING, logger="contact_form.forms.processor"):
        processor.process(contact_form, submission)

    [record] = caplog.records
    assert record.levelno == logging.WARNING
    assert "message" in record.getMessage()
    # Submitted values stay out of the log
    assert "too short" not in record.getMessage()
