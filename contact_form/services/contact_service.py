"""Contact form service

Handles the contact form definition, processing of submissions and delivery
of the processed data to the configured webhook.
"""
import hashlib
import hmac
import json
import time
import httpx
from typing import Any, Dict, Mapping, Optional, Union
import logging

from contact_form.config import DEFAULT_FORM_DEFINITION, Settings
from contact_form.exceptions import CaptchaError, ConfigurationError, DeliveryError
from contact_form.forms.definition import DefinitionSource
from contact_form.forms.factory import FormFactory
from contact_form.forms.form import Form
from contact_form.forms.processor import FormDataProcessor, ProcessResult
from contact_form.models.contact import WebhookPayload
from contact_form.services.captcha_service import CaptchaVerifier

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "X-Signature"


def serialize_payload(payload: WebhookPayload) -> bytes:
    """Exact bytes that are posted and signed"""
    return json.dumps(
        payload.model_dump(), separators=(",", ":"), ensure_ascii=False
    ).encode("utf-8")


def sign_payload(body: bytes, secret_key: str) -> str:
    """Hex HMAC-SHA256 of the body"""
    return hmac.new(secret_key.encode("utf-8"), body, hashlib.sha256).hexdigest()


class ContactService:
    """Contact form configuration, processing and webhook delivery"""

    def __init__(
        self,
        settings: Settings,
        host: Optional[str] = None,
        remote_ip: Optional[str] = None,
        form_factory: Optional[FormFactory] = None,
        form_data_processor: Optional[FormDataProcessor] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            settings: Application settings
            host: Host of the current request, used when no source is configured
            remote_ip: Client address, forwarded to the captcha provider
            form_factory: Builds forms from definitions
            form_data_processor: Validates submitted data
            transport: HTTP transport for outbound calls (tests inject a mock)
        """
        self.settings = settings
        self.host = host
        self.remote_ip = remote_ip
        self.form_factory = form_factory or FormFactory()
        self.form_data_processor = form_data_processor or FormDataProcessor()
        self.transport = transport

        self.webhook_url = settings.webhook_url
        self.webhook_secret_key = settings.webhook_secret_key
        self.captcha_site_key = settings.captcha_site_key
        self.captcha_secret_key = settings.captcha_secret_key

    def create_form(self, form_definition: Optional[DefinitionSource] = None) -> Form:
        """
        Create a new form instance

        Args:
            form_definition: YAML path or mapping, defaults to the configured definition
        """
        if form_definition is None:
            form_definition = self.settings.contact_form_definition or DEFAULT_FORM_DEFINITION
        return self.form_factory.create(form_definition)

    def process(
        self,
        data: Mapping[str, Any],
        form: Union[Form, DefinitionSource, None] = None,
    ) -> ProcessResult:
        """
        Process submitted form data

        Args:
            data: Raw submitted values
            form: Form instance or definition to validate against

        Returns:
            The result of the form processing
        """
        if not isinstance(form, Form):
            form = self.create_form(form)
        return self.form_data_processor.process(form, data)

    def get_captcha_site_key(self) -> Optional[str]:
        return self.captcha_site_key

    async def send_to_webhook(
        self,
        data: Dict[str, Any],
        meta: Optional[Dict[str, Any]] = None,
        captcha_token: Optional[str] = None,
    ) -> Any:
        """
        Send the processed data to the webhook

        Args:
            data: Processed form data
            meta: Extra meta data, overrides the base meta keys
            captcha_token: Captcha response submitted with the form

        Returns:
            The decoded JSON response of the webhook

        Raises:
            ConfigurationError: If the webhook URL or the source isn't configured
            CaptchaError: If captcha is enabled and the token is missing or rejected
            DeliveryError: If the webhook call fails
        """
        if not self.webhook_url:
            raise ConfigurationError("Webhook URL is not configured for the contact form.")

        await self.validate_captcha(data, captcha_token)

        return await self._send_message(data, meta or {})

    async def validate_captcha(self, data: Mapping[str, Any], token: Optional[str] = None) -> None:
        """Verify the captcha token when captcha is configured"""
        if not self.captcha_site_key or not self.captcha_secret_key:
            return

        token = token or data.get(self.settings.captcha_response_field)
        if not token:
            logger.warning("Captcha is enabled but no captcha response was submitted")
            raise CaptchaError()

        verifier = CaptchaVerifier(
            self.captcha_secret_key,
            self.settings.captcha_verify_url,
            timeout=self.settings.webhook_timeout,
            transport=self.transport,
        )
        await verifier.verify(token, self.remote_ip)

    def build_payload(self, data: Dict[str, Any], meta: Dict[str, Any]) -> WebhookPayload:
        source = self.settings.contact_source or self.host
        if not source:
            raise ConfigurationError("Parameter form.contact.source is not configured.")

        base = {
            "source": source,
            "form": self.settings.contact_form_type,
            "timestamp": int(time.time()),
        }
        return WebhookPayload(meta={**base, **meta}, data=data)

    async def _send_message(self, data: Dict[str, Any], meta: Dict[str, Any]) -> Any:
        payload = self.build_payload(data, meta)
        body = serialize_payload(payload)

        headers = {"Content-Type": "application/json"}
        if self.webhook_secret_key:
            headers[SIGNATURE_HEADER] = sign_payload(body, self.webhook_secret_key)

        try:
            async with httpx.AsyncClient(
                transport=self.transport,
                timeout=self.settings.webhook_timeout,
                follow_redirects=True,
            ) as client:
                response = await client.post(self.webhook_url, content=body, headers=headers)
            response.raise_for_status()
            result = response.json() if response.content else {}
        except httpx.TimeoutException as e:
            logger.error(f"Webhook timed out after {self.settings.webhook_timeout}s: {e}")
            raise DeliveryError(f"the webhook did not respond in time ({e})")
        except httpx.HTTPError as e:
            logger.error(f"Webhook delivery failed: {e}")
            raise DeliveryError(str(e))
        except ValueError as e:
            logger.error(f"Webhook returned a non JSON response: {e}")
            raise DeliveryError(f"invalid response from webhook ({e})")

        logger.info(
            f"Delivered {payload.meta.get('form')} submission from {payload.meta.get('source')} to webhook"
        )
        return result
