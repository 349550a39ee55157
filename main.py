import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import settings

# Routers
from routers.backup import router as backup_router
from routers.files import router as files_router
from routers.folders import router as folders_router
from routers.health import router as health_router
from routers.marks_sections import router as marks_sections_router
from routers.questions import router as questions_router
from routers.seed import router as seed_router
from routers.statistics import router as statistics_router
from routers.subjects import router as subjects_router
from routers.systems import router as systems_router

logger = logging.getLogger("question-bank")
logging.basicConfig(level=settings.LOG_LEVEL)

app = FastAPI(title="Question Bank API")

# Allow calls from the dashboard
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(Exception)
async def unhandled_error(request: Request, exc: Exception):
    logger.exception("unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "internal_error"})


@app.get("/")
def health_root():
    return {"ok": True}


app.include_router(subjects_router)  # /subjects/...
app.include_router(systems_router)  # /systems/...
app.include_router(marks_sections_router)  # /marks-sections/...
app.include_router(questions_router)  # /questions/..., /featured
app.include_router(folders_router)  # /folders/...
app.include_router(files_router)  # /files/...
app.include_router(statistics_router)  # /statistics/...
app.include_router(backup_router)  # /backup
app.include_router(seed_router)  # /seed/...
app.include_router(health_router)  # /health/...
