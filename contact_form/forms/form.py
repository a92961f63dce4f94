"""Form instances bound to submitted data"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from contact_form.forms.definition import FormDefinition

INPUT_TYPES = {
    "email": "email",
    "tel": "tel",
    "uri": "url",
}


@dataclass(frozen=True)
class FieldView:
    """What a template needs to draw one input"""
    name: str
    label: str
    value: Any
    error: Optional[str]
    required: bool
    multi: bool
    input_type: str
    min_length: Optional[int] = None
    max_length: Optional[int] = None


@dataclass
class Form:
    """A form definition together with the data and errors of one request"""
    definition: FormDefinition
    data: Dict[str, Any] = field(default_factory=dict)
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def bind(self, data: Dict[str, Any], errors: Optional[Dict[str, str]] = None) -> "Form":
        """Copy of this form carrying the given data and errors"""
        return Form(self.definition, dict(data), dict(errors or {}))

    def fields(self) -> List[FieldView]:
        views = []
        properties = self.definition.form_schema.properties
        for control in self.definition.controls():
            name = control.field_name
            schema = properties[name]
            if schema.type in ("integer", "number"):
                input_type = "number"
            elif schema.type == "boolean":
                input_type = "checkbox"
            else:
                input_type = INPUT_TYPES.get(schema.format, "text")
            views.append(FieldView(
                name=name,
                label=control.label or schema.title or name,
                value=self.data.get(name, ""),
                error=self.errors.get(name),
                required=name in self.definition.required,
                multi=bool(control.options.get("multi")),
                input_type=input_type,
                min_length=schema.min_length,
                max_length=schema.max_length,
            ))
        return views

    def to_dict(self) -> Dict[str, Any]:
        """Client-side rendering payload"""
        definition = self.definition.to_dict()
        return {
            "schema": definition["schema"],
            "uischema": definition.get("uischema"),
            "data": self.data,
            "errors": self.errors,
        }
