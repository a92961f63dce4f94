"""Form factory"""
import logging

from contact_form.forms.definition import DefinitionSource, load_definition
from contact_form.forms.form import Form

logger = logging.getLogger(__name__)


class FormFactory:
    """Builds empty forms from a definition source"""

    def create(self, definition: DefinitionSource) -> Form:
        loaded = load_definition(definition)
        logger.debug(f"Created form with fields: {', '.join(loaded.form_schema.properties)}")
        return Form(loaded)
