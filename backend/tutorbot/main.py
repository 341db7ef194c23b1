import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tutorbot.core.config import get_settings, settings
from tutorbot.core.database import init_db
from tutorbot.core.security import ADMIN_HEADER, password_matches, require_admin
from tutorbot.api import admin, generate, history

logger = logging.getLogger(__name__)

ADMIN_PREFIX = "/api/admin"


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Configure logging based on debug setting
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s" if settings.debug
        else "%(levelname)-8s %(name)s: %(message)s",
    )

    missing = settings.missing_startup_values()
    if missing:
        logger.critical(f"Missing required configuration: {', '.join(missing)}")
        raise RuntimeError(f"Missing required configuration: {', '.join(missing)}")

    init_db()
    logger.info(f"{settings.app_name} started (bot {settings.bot_id}, model {settings.gemini_model})")

    yield


app = FastAPI(title=settings.app_name, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies and query params are client errors: 400, not 422."""
    # Body parsing runs before route dependencies, so check the admin secret here too
    if request.url.path.startswith(ADMIN_PREFIX):
        if not password_matches(request.headers.get(ADMIN_HEADER), get_settings().admin_password):
            logger.warning(f"Admin access denied for {request.method} {request.url.path}")
            return JSONResponse(status_code=403, content={"detail": "Access denied"})

    problems = []
    for err in exc.errors():
        where = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        problems.append(f"{where}: {err.get('msg')}" if where else str(err.get("msg")))
    logger.debug(f"Validation error on {request.method} {request.url.path}: {problems}")
    return JSONResponse(status_code=400, content={"detail": "; ".join(problems)})


app.include_router(generate.router, tags=["chat"])
app.include_router(history.router, prefix="/api/chat", tags=["history"])
app.include_router(
    admin.router,
    prefix=ADMIN_PREFIX,
    tags=["admin"],
    dependencies=[Depends(require_admin)],
)


@app.get("/api/health")
async def health():
    return {"status": "ok", "app": settings.app_name}
