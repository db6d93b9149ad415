"""
FastAPI application factory for the CroweCode Intelligence service.

The registry, settings and vendor transport are injected so tests (and
anything embedding the service) get their own instances instead of a module
global. Every failure path answers with a branded {"error": ...} body; vendor
names, status codes and error bodies only go to the logs.
"""
import sys
import time
import logging
from datetime import datetime
from pathlib import Path
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .client import VendorClient
from .config import Settings, get_settings
from .errors import ProviderNotConfiguredError, VendorError
from .models import (
    Capabilities,
    ChatRequest,
    ErrorResponse,
    HealthResponse,
    ServiceInfo,
    SwitchRequest,
    SwitchResponse,
)
from .normalizer import extract_content, normalize_chat, parse_analysis
from .provider import ProviderRegistry
from .stats import RequestStats
from .translator import build_analysis_payload, build_chat_payload


logger = logging.getLogger(__name__)


NOT_CONFIGURED_MESSAGE = "CroweCode Intelligence is not configured. Please contact support."
CHAT_UNAVAILABLE_MESSAGE = "CroweCode Intelligence is experiencing high demand. Please try again."
ANALYSIS_UNAVAILABLE_MESSAGE = "CroweCode Intelligence temporarily unavailable"
SERVICE_ERROR_MESSAGE = "CroweCode Intelligence service error. Our team has been notified."

SERVICE_FEATURES = [
    "Code Generation",
    "Bug Detection",
    "Refactoring",
    "Documentation",
    "Multi-language Support",
]

CAPABILITY_FEATURES = [
    "256K context window",
    "Advanced reasoning",
    "Multi-step execution",
    "Code optimization",
    "Security analysis",
    "Pattern recognition",
]


def setup_logging(settings: Settings) -> logging.Logger:
    """Configure logging with file and console handlers."""
    log_level = getattr(logging, settings.log_level.upper())

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    # Console handler (always)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # File handler (if configured)
    if settings.log_path:
        try:
            log_path = Path(settings.log_path)
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_path)
            file_handler.setLevel(log_level)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)
            root_logger.info("Logging to file: %s", log_path)
        except OSError as e:
            root_logger.error("Failed to set up file logging: %s", e)

    return logging.getLogger(__name__)


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(ErrorResponse(error=message).model_dump(), status_code=status_code)


def create_app(
    settings: Optional[Settings] = None,
    registry: Optional[ProviderRegistry] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        settings: Service settings. Defaults to get_settings().
        registry: Provider registry. Defaults to one built from settings.
        transport: Optional httpx transport for the vendor client, used by
                   tests to stand in for the upstream vendor.

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()
    registry = registry if registry is not None else ProviderRegistry.from_settings(settings)
    vendor = VendorClient(timeout=settings.vendor_timeout, transport=transport)
    stats = RequestStats()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("CroweCode Intelligence starting up")
        logger.info("Providers registered: %d, active: %s", len(registry), registry.active_key)
        if not registry.has_any():
            logger.warning("No AI providers configured; chat requests will fail")

        yield

        logger.info("CroweCode Intelligence shutting down")
        await vendor.aclose()

    app = FastAPI(
        title="CroweCode Intelligence",
        description="Branded AI chat and code-analysis API",
        version=settings.version,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.registry = registry
    app.state.stats = stats

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        logger.error("Invalid request to %s: %s", request.url.path, exc.errors())
        return _error(SERVICE_ERROR_MESSAGE, 500)

    @app.get("/health", response_model=HealthResponse)
    async def health():
        """Liveness check."""
        return HealthResponse(status="healthy", timestamp=datetime.now().isoformat())

    @app.get("/api/ai", response_model=ServiceInfo)
    async def service_info():
        """Service descriptor; status reflects whether any provider is configured."""
        return ServiceInfo(
            service=registry.display_name(),
            status="operational" if registry.has_any() else "not_configured",
            version=settings.version,
            features=SERVICE_FEATURES,
        )

    @app.get("/api/ai/capabilities", response_model=Capabilities)
    async def capabilities():
        return Capabilities(
            name="CroweCode™ Intelligence System",
            version=settings.version,
            features=CAPABILITY_FEATURES,
            powered_by="Proprietary Neural Network",
        )

    @app.get("/api/ai/status")
    async def status():
        """Provider selection diagnostics and request statistics."""
        return {
            "service": registry.display_name(),
            "model": registry.model_info(),
            "providers": registry.status(),
            "stats": stats.get_summary(),
        }

    @app.post("/api/ai/provider", response_model=SwitchResponse)
    async def switch_provider(request: SwitchRequest):
        """Explicitly change the active provider. Unknown keys are ignored."""
        switched = registry.switch_active(request.key)
        return SwitchResponse(switched=switched, active=registry.active_key)

    @app.post("/api/ai")
    async def chat(request: ChatRequest):
        """Chat or code-analysis completion."""
        mode = "analyze" if request.is_analysis else "chat"
        start_time = time.time()

        try:
            # Read the selection once; a concurrent switch can't change this request
            provider = registry.require_active()

            if mode == "analyze":
                payload = build_analysis_payload(
                    provider,
                    code=request.code,
                    language=request.language,
                    file_path=request.file_path,
                )
            else:
                messages = [m.model_dump() for m in request.messages]
                payload = build_chat_payload(provider, messages, request.temperature)

            logger.debug("AI request: mode=%s, provider=%s", mode, provider.key)

            envelope = await vendor.complete(provider, payload)
            content = extract_content(envelope)
            latency_ms = int((time.time() - start_time) * 1000)

            if mode == "analyze":
                analysis = parse_analysis(content)
                stats.record_success(mode, latency_ms, fallback=not analysis.parsed)
                return JSONResponse(analysis.result)

            stats.record_success(mode, latency_ms)
            return JSONResponse(normalize_chat(content).model_dump())

        except ProviderNotConfiguredError as e:
            logger.error("AI request rejected: %s", e)
            return _error(NOT_CONFIGURED_MESSAGE, 500)

        except VendorError as e:
            latency_ms = int((time.time() - start_time) * 1000)
            stats.record_failure(mode, latency_ms, "vendor_unavailable")
            logger.error("AI provider error (status=%s): %s", e.status_code, e)
            message = ANALYSIS_UNAVAILABLE_MESSAGE if mode == "analyze" else CHAT_UNAVAILABLE_MESSAGE
            return _error(message, 503)

        except Exception as e:
            latency_ms = int((time.time() - start_time) * 1000)
            stats.record_failure(mode, latency_ms, type(e).__name__)
            logger.error("Internal error: %s", e, exc_info=True)
            return _error(SERVICE_ERROR_MESSAGE, 500)

    return app
