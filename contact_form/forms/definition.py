"""Form definition models

A form definition is a JSON-Schema subset (``schema``) plus a layout
(``uischema``) listing the controls in display order. Definitions are
checked when they are loaded so a broken file never reaches a submission.
"""
from pathlib import Path
from typing import Any, Dict, List, Literal, Mapping, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator
import logging
import yaml

from contact_form.exceptions import FormDefinitionError

logger = logging.getLogger(__name__)

SCOPE_PREFIX = "#/properties/"

DefinitionSource = Union[str, Path, Mapping[str, Any], "FormDefinition"]


class FieldSchema(BaseModel):
    """Constraints for a single field"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: Literal["string", "integer", "number", "boolean"] = "string"
    title: Optional[str] = None
    description: Optional[str] = None
    min_length: Optional[int] = Field(None, alias="minLength", ge=0)
    max_length: Optional[int] = Field(None, alias="maxLength", ge=0)
    format: Optional[Literal["email", "tel", "uri"]] = None
    pattern: Optional[str] = None
    enum: Optional[List[Any]] = None
    minimum: Optional[float] = None
    maximum: Optional[float] = None

    @model_validator(mode="after")
    def check_bounds(self):
        if (
            self.min_length is not None
            and self.max_length is not None
            and self.min_length > self.max_length
        ):
            raise ValueError("minLength cannot be greater than maxLength")
        if (
            self.minimum is not None
            and self.maximum is not None
            and self.minimum > self.maximum
        ):
            raise ValueError("minimum cannot be greater than maximum")
        return self


class ObjectSchema(BaseModel):
    """Top level ``schema`` block"""
    model_config = ConfigDict(frozen=True)

    type: Literal["object"] = "object"
    properties: Dict[str, FieldSchema]
    required: List[str] = []

    @model_validator(mode="after")
    def check_required(self):
        unknown = [name for name in self.required if name not in self.properties]
        if unknown:
            raise ValueError(f"required fields not in properties: {', '.join(unknown)}")
        return self


class Control(BaseModel):
    """A single input in the layout"""
    model_config = ConfigDict(frozen=True)

    type: Literal["Control"] = "Control"
    label: Optional[str] = None
    scope: str
    options: Dict[str, Any] = {}

    @property
    def field_name(self) -> str:
        return self.scope[len(SCOPE_PREFIX):]


class Layout(BaseModel):
    """Top level ``uischema`` block"""
    model_config = ConfigDict(frozen=True)

    type: Literal["VerticalLayout", "HorizontalLayout"] = "VerticalLayout"
    elements: List[Control] = []


class FormDefinition(BaseModel):
    """Schema plus layout of a submittable form"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    form_schema: ObjectSchema = Field(..., alias="schema")
    uischema: Optional[Layout] = None

    @model_validator(mode="after")
    def check_scopes(self):
        if self.uischema is None:
            return self
        for control in self.uischema.elements:
            if not control.scope.startswith(SCOPE_PREFIX):
                raise ValueError(f"unsupported control scope: {control.scope}")
            if control.field_name not in self.form_schema.properties:
                raise ValueError(f"control scope points to unknown field: {control.scope}")
        return self

    @property
    def required(self) -> List[str]:
        return self.form_schema.required

    def controls(self) -> List[Control]:
        """Controls in display order

        Without a layout every property gets a control, in schema order.
        """
        if self.uischema is not None and self.uischema.elements:
            return list(self.uischema.elements)
        return [
            Control(label=field.title or name, scope=f"{SCOPE_PREFIX}{name}")
            for name, field in self.form_schema.properties.items()
        ]

    def to_dict(self) -> Dict[str, Any]:
        """Plain mapping in the same shape as the YAML file"""
        return self.model_dump(by_alias=True, exclude_none=True)


def load_definition(source: DefinitionSource) -> FormDefinition:
    """
    Load a form definition

    Args:
        source: YAML file path, inline mapping, or an already loaded definition

    Returns:
        The validated FormDefinition

    Raises:
        FormDefinitionError: If the file can't be read or the definition is invalid
    """
    if isinstance(source, FormDefinition):
        return source

    if isinstance(source, (str, Path)):
        path = Path(source)
        try:
            with path.open("r", encoding="utf-8") as fh:
                raw = yaml.safe_load(fh)
        except OSError as e:
            raise FormDefinitionError(f"Form definition {path} could not be read: {e}")
        except yaml.YAMLError as e:
            raise FormDefinitionError(f"Form definition {path} is not valid YAML: {e}")
        origin = str(path)
    else:
        raw = source
        origin = "inline definition"

    if not isinstance(raw, Mapping):
        raise FormDefinitionError(f"Form definition in {origin} must be a mapping")

    try:
        definition = FormDefinition.model_validate(dict(raw))
    except ValidationError as e:
        logger.error(f"Invalid form definition in {origin}: {e}")
        raise FormDefinitionError(f"Form definition in {origin} is invalid: {e}")

    return definition
