"""
WeShare Gateway - REST façade over the WeShare chaincode.
Main FastAPI application forwarding requests to a Fabric network.
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional, Type, TypeVar

from fastapi import FastAPI, Request
from pydantic import BaseModel, ValidationError

from . import __version__
from .config import settings
from .ledger import FabricIntegration, LedgerIntegration
from .models import CompleteShareRequest, InitUserRequest, ShoppingRequest, form_to_dict
from .transactions import TransactionService

# Configure logging
log_handlers = [logging.StreamHandler()]
if settings.log_file:
    log_handlers.append(logging.FileHandler(settings.log_file))
logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=log_handlers
)
logger = logging.getLogger(__name__)

# Global integration instances
ledger: Optional[LedgerIntegration] = None
transaction_service: Optional[TransactionService] = None

FAILURE = {"success": "false"}

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")

RequestModel = TypeVar("RequestModel", bound=BaseModel)


async def read_body(request: Request, model: Type[RequestModel]) -> Optional[RequestModel]:
    """
    Parse a JSON or form-encoded body into a request model.

    Returns None when the body cannot be parsed or does not fit the model;
    an empty body yields a model with every field unset.
    """
    content_type = request.headers.get("content-type", "")
    try:
        if content_type.startswith(FORM_CONTENT_TYPES):
            form = await request.form()
            data = form_to_dict(form.multi_items())
        else:
            raw = await request.body()
            data = await request.json() if raw.strip() else {}
        return model.model_validate(data)
    except (ValueError, ValidationError) as e:
        logger.error(f"Invalid {request.url.path} request body: {e}")
        return None


def build_ledger() -> LedgerIntegration:
    """Create the Fabric integration from settings."""
    return FabricIntegration(settings.model_dump())


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown."""
    global ledger, transaction_service

    logger.info("Starting WeShare gateway...")
    try:
        ledger = build_ledger()
        transaction_service = TransactionService(ledger, settings.required_identity)
        logger.info(
            f"Ledger integration ready: channel={settings.channel_name} "
            f"chaincode={settings.chaincode_name}"
        )
    except Exception as exc:
        logger.error(f"Failed to initialize ledger integration: {exc}", exc_info=True)
        ledger = None
        transaction_service = None

    yield

    logger.info("Shutting down WeShare gateway...")


app = FastAPI(
    title="WeShare Gateway",
    description="REST gateway for the WeShare chaincode",
    version=__version__,
    lifespan=lifespan
)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "WeShare Gateway",
        "version": __version__,
        "status": "running"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    if not ledger:
        return {"status": "degraded", "ledger": "unavailable"}
    report = await ledger.health_check()
    healthy = report.pop("healthy", False)
    return {
        "status": "healthy" if healthy else "degraded",
        "channel": settings.channel_name,
        "chaincode": settings.chaincode_name,
        **report
    }


@app.get("/query")
async def query(userId: Optional[str] = None):
    """Evaluate the query transaction for a user."""
    if not transaction_service:
        logger.error("Ledger integration not available")
        return FAILURE
    return await transaction_service.query(userId)


@app.post("/initUser")
async def init_user(request: Request):
    """Submit the initUser transaction."""
    body = await read_body(request, InitUserRequest)
    if body is None:
        return FAILURE
    if not transaction_service:
        logger.error("Ledger integration not available")
        return FAILURE
    return await transaction_service.init_user(body.user_id)


@app.post("/completeShare")
async def complete_share(request: Request):
    """Submit the completeShare transaction for a sharer and its listeners."""
    body = await read_body(request, CompleteShareRequest)
    if body is None:
        return FAILURE
    logger.info(f"completeShare userArr: {body.user_arr}")
    if not transaction_service:
        logger.error("Ledger integration not available")
        return FAILURE
    return await transaction_service.complete_share(body.user_arr)


@app.post("/shopping")
async def shopping(request: Request):
    """Submit the shopping transaction."""
    body = await read_body(request, ShoppingRequest)
    if body is None:
        return FAILURE
    if not transaction_service:
        logger.error("Ledger integration not available")
        return FAILURE
    return await transaction_service.shopping(body.shopping_arr)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "weshare_gateway.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload
    )
