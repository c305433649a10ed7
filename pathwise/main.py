import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from pathwise.core import config
from pathwise.core.errors import error_body, register_exception_handlers
from pathwise.core.logging_config import setup_logging, sanitize_log_data
from pathwise.core.rate_limit import check_rate_limit

# ✅ Import All API Routes
from pathwise.api.routes import auth, profile, career, resume_reviewer, profile_reviewer, health

logger = logging.getLogger(__name__)


# ============================================
# ✅ STARTUP
# ============================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(config.LOG_LEVEL)
    logger.info(f"Starting Pathwise API: {sanitize_log_data({'environment': config.ENVIRONMENT, 'database_url': config.DATABASE_URL, 'llm_model': config.LLM_MODEL, 'openai_api_key': config.OPENAI_API_KEY})}")

    from pathwise.db.init_db import init_db
    try:
        init_db()
    except Exception as e:
        logger.critical(f"Database initialization failed, shutting down: {e}", exc_info=True)
        raise

    yield
    logger.info("Pathwise API stopped")


# ============================================
# ✅ FASTAPI APP INIT
# ============================================

app = FastAPI(title="Pathwise API", version="1.0.0", lifespan=lifespan)

# ✅ Per-IP rate limit on every request
@app.middleware("http")
async def rate_limit_middleware(request: Request, call_next):
    try:
        check_rate_limit(request)
    except HTTPException as e:
        return JSONResponse(status_code=e.status_code, content=error_body(e.detail))
    return await call_next(request)


# Added last so it wraps the rate limiter and 429s carry CORS headers
app.add_middleware(
    CORSMiddleware,
    allow_origins=[config.FRONTEND_URL],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type"],
)


register_exception_handlers(app)


# ============================================
# ✅ REGISTER ALL ROUTERS
# ============================================

app.include_router(auth.router)
app.include_router(profile.router)
app.include_router(career.router)
app.include_router(resume_reviewer.router)
app.include_router(profile_reviewer.router)
app.include_router(health.router)

app.mount(
    "/uploads/avatars",
    StaticFiles(directory=os.path.join(config.UPLOAD_DIR, "avatars"), check_dir=False),
    name="avatars",
)


@app.get("/")
def root():
    return {"success": True, "status": "Pathwise API running"}
