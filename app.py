from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from routers.entry import entry_router
from routers.rooms import rooms_router
from backend import RedisBackend, get_redis_backend
from errors import AuthError, StoreError
from logging_config import get_logger, setup_logging
import os

# Setup logging
log_level = os.getenv("LOG_LEVEL", "INFO")
log_file = os.getenv("LOG_FILE", None)
setup_logging(log_level=log_level, log_file=log_file)
logger = get_logger(__name__)

app = FastAPI()

# Configure CORS to allow all origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Allow all origins
    allow_credentials=True,
    allow_methods=["*"],  # Allow all HTTP methods
    allow_headers=["*"],  # Allow all headers
)

app.include_router(entry_router)
app.include_router(rooms_router)


@app.exception_handler(AuthError)
async def auth_error_handler(request: Request, exc: AuthError):
    # Reason stays in the logs so the client learns nothing about room state
    logger.warning(f"Unauthorized {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=401, content={"error": "Unauthorized"})


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    logger.error(f"Store error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=503, content={"error": "Store unavailable"})


@app.get("/health")
def health(backend: RedisBackend = Depends(get_redis_backend)):
    backend.ping()
    return {"status": "ok"}


logger.info("FastAPI application initialized")
