import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.applications import Starlette
from starlette.routing import Mount

from formdeck.auth import router as auth_router
from formdeck.config import get_settings
from formdeck.exceptions import AuthenticationError, IntegrationError, NotFoundError, RateLimitError
from formdeck.mcp_server import mcp
from formdeck.routers.dashboard import router as dashboard_router

logger = logging.getLogger(__name__)


# --- FastAPI app ---

api = FastAPI(title="Formdeck", version="0.1.0")
api.include_router(auth_router)
api.include_router(dashboard_router)


@api.get("/api/status")
def api_status() -> dict:
    settings = get_settings()
    return {"backend": settings.api_base_url, "service_token_configured": bool(settings.api_token)}


# --- Exception handlers ---

@api.exception_handler(AuthenticationError)
async def auth_error_handler(request: Request, exc: AuthenticationError):
    return JSONResponse(status_code=401, content={"error_code": "auth_error", "message": str(exc)})


@api.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"error_code": "not_found", "message": str(exc)})


@api.exception_handler(IntegrationError)
async def integration_error_handler(request: Request, exc: IntegrationError):
    logger.warning("Backend failure on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=502, content={"error_code": "integration_error", "message": str(exc)})


@api.exception_handler(RateLimitError)
async def rate_limit_error_handler(request: Request, exc: RateLimitError):
    return JSONResponse(status_code=429, content={"error_code": "rate_limit", "message": str(exc)})


# --- Starlette root app ---

mcp_app = mcp.http_app(path="/", stateless_http=True)

app = Starlette(
    routes=[
        Mount("/mcp", app=mcp_app),
        Mount("/", app=api),
    ],
)


def run():
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "formdeck.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
