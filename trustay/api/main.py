"""
FastAPI application - Main entry point
"""

from dotenv import load_dotenv

load_dotenv()

import logging
import os
from datetime import datetime

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from trustay import __version__
from trustay.api.dependencies import get_config, get_metadata_store
from trustay.api.endpoints.contracts import contracts_api
from trustay.api.endpoints.messages import messages_api
from trustay.api.endpoints.roommate_applications import roommate_applications_api
from trustay.error_handler import ErrorHandler
from trustay.integrations.clients import should_use_real_integrations

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

error_handler = ErrorHandler()

# Initialize FastAPI app
app = FastAPI(
    title="Trustay API",
    description="Backend-for-frontend for contract signing and roommate applications",
    version=__version__,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(contracts_api, prefix="/api/contracts")
app.include_router(roommate_applications_api, prefix="/api/roommate-applications")
app.include_router(messages_api, prefix="/api/messages")


@app.exception_handler(Exception)
async def unhandled_exception(request: Request, exc: Exception):
    payload = error_handler.handle_exception(exc, {"path": request.url.path, "method": request.method})
    return JSONResponse(status_code=500, content=payload)


# ============================================================================
# ENDPOINTS
# ============================================================================
@app.get("/health", tags=["Health"])
async def health_check(config=Depends(get_config), metadata_store=Depends(get_metadata_store)):
    """Health check (integrations mode, metadata store)."""
    return {
        "status": "healthy",
        "version": __version__,
        "integrations": "real" if should_use_real_integrations(config) else "mock",
        "metadata_store": metadata_store.ping(),
        "timestamp": datetime.now().isoformat(),
    }


def run() -> None:
    """Serve the BFF with uvicorn; API_HOST and API_PORT override the defaults."""
    host = os.getenv("API_HOST", "127.0.0.1")
    port = int(os.getenv("API_PORT", "8000"))
    logger.info("Starting Trustay API on %s:%s", host, port)
    uvicorn.run("trustay.api.main:app", host=host, port=port)


if __name__ == "__main__":
    run()
