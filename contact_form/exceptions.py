"""Contact form error types"""


class ContactFormError(Exception):
    """Base class for contact form failures shown back to the user"""


class ConfigurationError(ContactFormError):
    """A required setting is missing"""


class FormDefinitionError(ContactFormError):
    """The form definition could not be read or is invalid"""


class CaptchaError(ContactFormError):
    """The captcha token was missing or rejected"""

    DEFAULT_MESSAGE = "Captcha verification failed. Please try again."

    def __init__(self, message: str = DEFAULT_MESSAGE):
        super().__init__(message)


class DeliveryError(ContactFormError):
    """The webhook could not be reached or rejected the submission"""

    def __init__(self, cause: str):
        self.cause = cause
        super().__init__(f"Error sending the message: {cause}")
