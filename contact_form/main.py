"""Main FastAPI application"""
from fastapi import FastAPI
from fastapi.responses import RedirectResponse
from contextlib import asynccontextmanager
import logging

from contact_form.config import get_settings
from contact_form.middleware.cors import setup_cors
from contact_form.middleware.error_handler import ErrorHandlerMiddleware
from contact_form.routers import contact

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    if not settings.webhook_url:
        logger.warning("WEBHOOK_URL is not set, contact submissions will be rejected")
    logger.info(
        f"Contact form ready (definition: {settings.contact_form_definition}, "
        f"captcha: {'enabled' if settings.captcha_enabled else 'disabled'}, "
        f"signed webhook: {'yes' if settings.webhook_secret_key else 'no'})"
    )
    yield


app = FastAPI(
    title="Contact Form",
    description="Schema-driven contact form forwarding submissions to a webhook",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# Setup CORS
setup_cors(app)

# Add error handling middleware
app.add_middleware(ErrorHandlerMiddleware)


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": "contact-form",
        "webhook": "configured" if settings.webhook_url else "missing",
        "captcha": "enabled" if settings.captcha_enabled else "disabled",
    }


@app.get("/", include_in_schema=False)
async def root():
    """Root endpoint"""
    return RedirectResponse("/contact")


app.include_router(contact.router, prefix="/contact", tags=["Contact"])

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.host, port=settings.port)
