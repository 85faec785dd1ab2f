import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from catalog import get_config
from routers.admin import router as admin_router

# Routers
from routers.attempts import router as attempts_router
from routers.health import router as health_router
from routers.progress import router as progress_router
from routers.questions import router as levels_router
from routers.sessions import router as sessions_router

logger = logging.getLogger("maths-drills")
logging.basicConfig(level=logging.INFO)

DEFAULT_ORIGINS = "http://localhost:3000,http://127.0.0.1:3000"
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", DEFAULT_ORIGINS).split(",") if o.strip()]

app = FastAPI(title="Maths Facts Drills API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*", "x-api-key", "x-admin-token"],
)

# fail fast on a broken curriculum
_config = get_config()
logger.info("serving %d levels, required streak %d", len(_config.levels), _config.required_streak)


@app.get("/")
def health_root():
    return {"ok": True}


app.include_router(levels_router)  # /levels/...
app.include_router(sessions_router)  # /sessions/...
app.include_router(attempts_router)  # /attempts/...
app.include_router(progress_router)  # /mastery, /progress/...
app.include_router(admin_router)  # /admin/...
app.include_router(health_router)  # /health/...
