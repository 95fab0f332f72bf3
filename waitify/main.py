import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from database.connection import init_db
from waitify.api import api_router

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("Starting Waitify API")
    init_db()
    yield
    # Shutdown


class OpenCORSMiddleware(BaseHTTPMiddleware):
    """CORS for any origin. Auth is a bearer token, never a cookie."""

    ALLOW_HEADERS = "authorization, x-client-info, apikey, content-type"
    ALLOW_METHODS = "GET, POST, PUT, DELETE, OPTIONS, PATCH"

    async def dispatch(self, request: Request, call_next):
        # Handle preflight requests
        if request.method == "OPTIONS":
            response = Response(status_code=200)
        else:
            response = await call_next(request)

        response.headers["Access-Control-Allow-Origin"] = "*"
        response.headers["Access-Control-Allow-Methods"] = self.ALLOW_METHODS
        response.headers["Access-Control-Allow-Headers"] = self.ALLOW_HEADERS
        return response


def create_app() -> FastAPI:
    app = FastAPI(
        title="Waitify",
        description="Waitlists, reservations and appointments for service businesses",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(OpenCORSMiddleware)

    # Include all routes
    app.include_router(api_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
