"""Contact form endpoints"""
from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from starlette.concurrency import run_in_threadpool
from typing import Any, Dict, Optional
import logging

from contact_form.config import PACKAGE_DIR, Settings, get_settings
from contact_form.forms.form import Form
from contact_form.services.contact_service import ContactService

logger = logging.getLogger(__name__)
router = APIRouter()
templates = Jinja2Templates(directory=str(PACKAGE_DIR / "templates"))

FORM_TYPE = "contact"
TEMPLATE_INDEX = "contact/index.html"
TEMPLATE_SUCCESS = "contact/success.html"
URI_SUCCESS = "/contact/success"

FORM_ERROR_MESSAGE = "There were errors in the form. Please fix them and try again."


def get_contact_service(
    request: Request, settings: Settings = Depends(get_settings)
) -> ContactService:
    """Contact service bound to the current request"""
    return ContactService(
        settings,
        host=request.url.hostname,
        remote_ip=request.client.host if request.client else None,
    )


async def read_submission(request: Request) -> Dict[str, Any]:
    """Submitted values from a JSON or form-encoded body"""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        body = await request.json()
        return body if isinstance(body, dict) else {}

    form = await request.form()
    # Uploads are not part of the contact form
    return {key: value for key, value in form.items() if isinstance(value, str)}


def render_form(
    request: Request,
    service: ContactService,
    form: Optional[Form],
    error: Optional[str] = None,
) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        TEMPLATE_INDEX,
        {
            "captcha_site_key": service.get_captcha_site_key(),
            "form": form,
            "error": error,
        },
    )


@router.get("", response_class=HTMLResponse)
async def index(request: Request, service: ContactService = Depends(get_contact_service)):
    """Render the contact form"""
    # Definition parsing reads the YAML file
    form = await run_in_threadpool(service.create_form)
    return render_form(request, service, form)


@router.post("", response_class=HTMLResponse)
async def submit(request: Request, service: ContactService = Depends(get_contact_service)):
    """Process the data sent by the user (PUBLIC endpoint)"""
    form = None

    try:
        form = await run_in_threadpool(service.create_form)
        data = await read_submission(request)
        result = service.process(data, form)

        # Show the form again with the submitted values and field errors
        if not result.is_valid():
            return render_form(
                request,
                service,
                result.get_form(),
                FORM_ERROR_MESSAGE if result.has_errors() else None,
            )

        meta = {"form": FORM_TYPE}
        await service.send_to_webhook(
            result.get_processed_data(),
            meta,
            captcha_token=data.get(service.settings.captcha_response_field),
        )

        return RedirectResponse(URI_SUCCESS, status_code=303)

    except Exception as e:
        logger.error(f"Contact form submission error: {e}")
        return render_form(request, service, form, str(e))


@router.get("/success", response_class=HTMLResponse)
async def success(request: Request):
    """Render the success page"""
    return templates.TemplateResponse(request, TEMPLATE_SUCCESS, {})
