import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import crud
from .config import settings
from .db import SessionLocal, init_models
from .routers import contexts, health, ingest, projects, tasks

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_models()
    if settings.seed_default_contexts:
        async with SessionLocal() as session:
            await crud.seed_default_contexts(session)
    logger.info("taskdesk %s started (env=%s)", VERSION, settings.app_env)
    yield


app = FastAPI(title="taskdesk - Task Service", version=VERSION, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


app.include_router(health.router, prefix="/health", tags=["health"])
app.include_router(contexts.router, prefix="/contexts", tags=["contexts"])
app.include_router(projects.router, prefix="/projects", tags=["projects"])
app.include_router(tasks.router, prefix="/tasks", tags=["tasks"])
app.include_router(ingest.router, prefix="/ingest", tags=["ingest"])


@app.get("/")
def root():
    return {"ok": True, "service": "taskdesk", "version": VERSION}
