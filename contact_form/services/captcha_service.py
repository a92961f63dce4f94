"""Captcha token verification"""
import httpx
from typing import Optional
from pydantic import ValidationError
import logging

from contact_form.exceptions import CaptchaError
from contact_form.models.contact import CaptchaVerification

logger = logging.getLogger(__name__)


class CaptchaVerifier:
    """Checks tokens against a siteverify endpoint"""

    def __init__(
        self,
        secret_key: str,
        verify_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.secret_key = secret_key
        self.verify_url = verify_url
        self.timeout = timeout
        self.transport = transport

    async def verify(self, token: str, remote_ip: Optional[str] = None) -> CaptchaVerification:
        """
        Verify a captcha response token

        Args:
            token: Token submitted by the browser widget
            remote_ip: Client IP, forwarded to the provider when known

        Returns:
            The provider's verification result

        Raises:
            CaptchaError: If the provider rejects the token or can't be reached
        """
        form = {"secret": self.secret_key, "response": token}
        if remote_ip:
            form["remoteip"] = remote_ip

        try:
            async with httpx.AsyncClient(transport=self.transport, timeout=self.timeout) as client:
                response = await client.post(self.verify_url, data=form)
            response.raise_for_status()
            result = CaptchaVerification.model_validate(response.json())
        except httpx.HTTPError as e:
            logger.error(f"Captcha provider request failed: {e}")
            raise CaptchaError()
        except (ValueError, ValidationError) as e:
            logger.error(f"Captcha provider returned an unexpected response: {e}")
            raise CaptchaError()

        if not result.success:
            logger.warning(f"Captcha rejected: {', '.join(result.error_codes) or 'no error codes'}")
            raise CaptchaError()

        return result
