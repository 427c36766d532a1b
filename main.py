import logging
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.staticfiles import StaticFiles

from magus.api.routers import auth, chat, users
from magus.core.config import DEFAULT_AUTH_SECRET, get_settings
from magus.core.exceptions import MagusError
from magus.core.logging_config import setup_logging
from magus.models.chat import HealthResponse
from magus.web import pages
from magus.web.guard import PageGuardMiddleware

# --- Application Setup ---
setup_logging()  # Initialize logging first
settings = get_settings()
app = FastAPI(
    title="Magus",
    description="Authenticated chat with a user administration screen.",
    version="1.0.0",
)
logger = logging.getLogger(__name__)

# --- Exception Handlers ---
def jsonable_errors(exc: RequestValidationError):
    return [{"loc": list(e.get("loc", ())), "msg": e.get("msg")} for e in exc.errors()]

@app.exception_handler(MagusError)
async def magus_exception_handler(request: Request, exc: MagusError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    # Malformed JSON or wrongly typed fields; missing fields are reported by the services
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request body", "errors": jsonable_errors(exc)},
    )

# --- Middleware ---
app.add_middleware(PageGuardMiddleware, settings=settings)

# --- Routers ---
app.include_router(auth.router, prefix="/api/auth", tags=["Authentication"])
app.include_router(chat.router, prefix="/api/chat", tags=["Chat"])
app.include_router(users.router, prefix="/api/users", tags=["Users"])
app.include_router(pages.router)
app.mount("/static", StaticFiles(directory=str(pages.STATIC_DIR)), name="static")

# --- Health ---
@app.get("/health", response_model=HealthResponse, tags=["Health"], summary="Health Check")
async def health_check():
    """Liveness probe; does not touch DynamoDB or the chat backend."""
    return HealthResponse()

# --- Lifecycle Events ---
@app.on_event("startup")
async def startup_event():
    logger.info("--- Starting Magus ---")
    logger.info("Log level set to: %s", settings.LOG_LEVEL)
    logger.info("User table: %s (%s)", settings.MAGUS_USER_AUTH_TABLE_NAME, settings.AWS_DEFAULT_REGION)
    logger.info("Chat backend: %s", settings.CHAT_BACKEND)
    if settings.DYNAMODB_ENDPOINT_URL:
        logger.warning("Using local DynamoDB endpoint: %s", settings.DYNAMODB_ENDPOINT_URL)
    if settings.AUTH_SECRET.get_secret_value() == DEFAULT_AUTH_SECRET:
        logger.warning("AUTH_SECRET is the built-in default; set it before deploying.")
    logger.info("Application startup complete.")

@app.on_event("shutdown")
async def shutdown_event():
    logger.info("--- Shutting down Magus ---")
