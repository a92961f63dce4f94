"""Contact webhook Pydantic models"""
from pydantic import BaseModel, Field
from typing import Dict, Any, List, Optional


class WebhookPayload(BaseModel):
    """Body posted to the contact webhook"""
    meta: Dict[str, Any]
    data: Dict[str, Any]


class CaptchaVerification(BaseModel):
    """Siteverify response (reCAPTCHA, Turnstile and hCaptcha share this shape)"""
    success: bool
    error_codes: List[str] = Field(default_factory=list, alias="error-codes")
    hostname: Optional[str] = None
    challenge_ts: Optional[str] = None
    action: Optional[str] = None
