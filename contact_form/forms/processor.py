"""Validation and normalization of submitted form data"""
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional
from email_validator import EmailNotValidError, validate_email
import logging
import re

from contact_form.forms.definition import FieldSchema
from contact_form.forms.form import Form

logger = logging.getLogger(__name__)

TEL_PATTERN = re.compile(r"^\+?[0-9][0-9 ().-]*[0-9]$")
URI_PATTERN = re.compile(r"^https?://[^\s/$.?#][^\s]*$", re.IGNORECASE)

TRUE_VALUES = {"1", "true", "on", "yes"}
FALSE_VALUES = {"0", "false", "off", "no"}

REQUIRED_MESSAGE = "This field is required."


class FieldError(ValueError):
    """A submitted value broke one of its field's constraints"""


@dataclass
class ProcessResult:
    """Outcome of processing one submission"""
    form: Form
    processed_data: Optional[Dict[str, Any]] = None
    submitted: bool = True

    def is_valid(self) -> bool:
        return self.submitted and not self.form.has_errors

    def has_errors(self) -> bool:
        return self.form.has_errors

    def get_form(self) -> Form:
        return self.form

    def get_processed_data(self) -> Dict[str, Any]:
        return dict(self.processed_data or {})


def _clean(value: Any) -> Any:
    """Strip text and treat blanks as missing"""
    if isinstance(value, (list, tuple)):
        value = value[-1] if value else None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    return value


def _coerce(schema: FieldSchema, value: Any) -> Any:
    if schema.type == "string":
        if not isinstance(value, str):
            raise FieldError("This field must be text.")
        return value

    if schema.type == "boolean":
        if isinstance(value, bool):
            return value
        text = str(value).lower()
        if text in TRUE_VALUES:
            return True
        if text in FALSE_VALUES:
            return False
        raise FieldError("This field must be yes or no.")

    if isinstance(value, bool):
        raise FieldError("This field must be a number.")
    try:
        if schema.type == "integer":
            if isinstance(value, float) and not value.is_integer():
                raise ValueError(value)
            return int(value)
        return float(value)
    except (TypeError, ValueError):
        if schema.type == "integer":
            raise FieldError("This field must be a whole number.")
        raise FieldError("This field must be a number.")


def _check_format(schema: FieldSchema, value: str) -> None:
    if schema.format == "email":
        try:
            validate_email(value, check_deliverability=False)
        except EmailNotValidError:
            raise FieldError("Please enter a valid email address.")
    elif schema.format == "tel":
        if not TEL_PATTERN.match(value):
            raise FieldError("Please enter a valid telephone number.")
    elif schema.format == "uri":
        if not URI_PATTERN.match(value):
            raise FieldError("Please enter a valid URL.")


def validate_field(schema: FieldSchema, value: Any) -> Any:
    """
    Check a single present value against its field schema

    Returns:
        The normalized value

    Raises:
        FieldError: On the first constraint that fails
    """
    value = _coerce(schema, value)

    if isinstance(value, str):
        if schema.min_length is not None and len(value) < schema.min_length:
            raise FieldError(f"Must be at least {schema.min_length} characters long.")
        if schema.max_length is not None and len(value) > schema.max_length:
            raise FieldError(f"Must be at most {schema.max_length} characters long.")
        _check_format(schema, value)
        if schema.pattern is not None and not re.search(schema.pattern, value):
            raise FieldError("This value has an invalid format.")

    if schema.enum is not None and value not in schema.enum:
        raise FieldError("Please choose one of the allowed values.")

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        if schema.minimum is not None and value < schema.minimum:
            raise FieldError(f"Must be at least {schema.minimum:g}.")
        if schema.maximum is not None and value > schema.maximum:
            raise FieldError(f"Must be at most {schema.maximum:g}.")

    return value


class FormDataProcessor:
    """Validates submitted data against a form"""

    def process(self, form: Form, data: Mapping[str, Any]) -> ProcessResult:
        properties = form.definition.form_schema.properties
        required = set(form.definition.required)

        submitted = {name: data[name] for name in properties if name in data}
        if not submitted:
            # Nothing for this form in the request
            return ProcessResult(form=form.bind({}), submitted=False)

        display: Dict[str, Any] = {}
        values: Dict[str, Any] = {}
        errors: Dict[str, str] = {}

        for name, schema in properties.items():
            value = _clean(submitted.get(name))
            if value is None:
                if name in required:
                    errors[name] = REQUIRED_MESSAGE
                continue

            display[name] = value
            try:
                values[name] = validate_field(schema, value)
            except FieldError as e:
                errors[name] = str(e)

        if errors:
            logger.warning(f"Submission rejected, invalid fields: {', '.join(sorted(errors))}")
            return ProcessResult(form=form.bind(display, errors))

        return ProcessResult(form=form.bind(display), processed_data=values)
