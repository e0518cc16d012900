# main.py

# Setup root logger FIRST so every module logger inherits the format
import logging

logging.basicConfig(
    level=logging.INFO,  # LOG_LEVEL overrides this in main()
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger()  # Use root logger

# Let uvicorn's records reach the root handler
uvicorn_logger = logging.getLogger("uvicorn")
uvicorn_logger.propagate = True
uvicorn_logger.setLevel(logging.INFO)

# Now import everything else AFTER logger is configured
import sys
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from core.config import load_settings
from core.exceptions import ConfigError, StoreConnectionError
from core.firebase import connect_firestore
from core.store import DeviceInfoStore
from routes import device_info

CORS_METHODS = ["GET", "POST", "PUT", "DELETE"]


def create_app(store: DeviceInfoStore, cors_origins=("*",)) -> FastAPI:
    app = FastAPI(title="Device Info API", docs_url=None)
    app.state.store = store

    allow_credentials = "*" not in cors_origins
    if not allow_credentials:
        logger.warning("CORS allows any origin, credentials are disabled. Set CORS_ORIGINS to allow them.")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(cors_origins),
        allow_credentials=allow_credentials,
        allow_methods=CORS_METHODS,
        allow_headers=["*"],
    )

    # Contains the endpoints of the API
    app.include_router(device_info.router, prefix="/api", tags=["Device Info"])

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request, exc):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request, exc):
        logger.warning(f"Rejected request body for {request.url}: {exc.errors()}")
        return JSONResponse(status_code=422, content={"message": "Invalid request body"})

    @app.middleware("http")
    async def log_requests(request, call_next):
        logger.info(f"🚀 Incoming request: {request.method} {request.url}")
        try:
            response = await call_next(request)
            logger.info(f"✅ Response status: {response.status_code} for {request.url}")
            return response
        except Exception as e:
            logger.error(f"❌ Exception while processing request {request.url}: {str(e)}")
            raise e

    @app.get("/", response_class=PlainTextResponse)
    async def root():
        return "Hi, It works!"

    return app


def main():
    try:
        settings = load_settings()
    except ConfigError as e:
        logger.error(f"❌ {e}")
        sys.exit(1)

    logging.getLogger().setLevel(settings.log_level)

    try:
        client = connect_firestore(settings)
    except (ConfigError, StoreConnectionError) as e:
        logger.error(f"❌ {e}")
        sys.exit(1)

    app = create_app(DeviceInfoStore(client), cors_origins=settings.cors_origins)

    import uvicorn
    logger.info(f"Server starting at port no {settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port)


# Local runner
if __name__ == "__main__":
    main()
