import logging

from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware

from quiz_admin.config import configure_logging, get_settings
from quiz_admin.routers.admin_router import admin_router
from quiz_admin.routers.session_router import session_router
from quiz_admin.seed import seed
from quiz_admin.storage import memory

settings = get_settings()
configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="quiz-admin")
app.include_router(admin_router)
app.include_router(session_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Routes
@app.get("/", include_in_schema=False)
def root_get():
    return {"ok": True, "service": "quiz-admin", "docs": "/docs"}


@app.head("/", include_in_schema=False)
def root_head():
    return Response(status_code=200)


@app.get("/healthz", include_in_schema=False)
def health_get():
    return {"ok": True}


@app.head("/healthz", include_in_schema=False)
def health_head():
    return Response(status_code=200)


@app.on_event("startup")
async def load_demo_data():
    if settings.seed_demo and not memory.BACKEND.quizzes:
        seed(memory.BACKEND)
        logger.info("Seeded %d demo quizzes", len(memory.BACKEND.quizzes))
