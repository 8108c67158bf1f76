from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging

from .config import settings
from .dependencies import build_registry
from .routers import exam_routers, student_routers

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # one registry per process; running timers are cancelled on shutdown
    if getattr(app.state, "registry", None) is None:
        app.state.registry = build_registry(settings)
    yield
    app.state.registry.close_all()


app = FastAPI(title="Diver exam sessions", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(exam_routers.router, prefix="/api")
app.include_router(student_routers.router, prefix="/api", tags=["Sessions"])
