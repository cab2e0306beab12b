from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api import applications, auth, functions, jobs, notifications, users
from app.bootstrap import ensure_default_admin
from app.config import settings
from app.database import Base, engine
from app.errors import JobBoardError, ValidationFailed
from app.log import get_logger
from app.models import application, email, job, notification, user  # noqa: F401


log = get_logger(__name__)

app = FastAPI(title=settings.app_name)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(JobBoardError)
async def handle_job_board_error(request: Request, exc: JobBoardError) -> JSONResponse:
    if exc.status_code >= 500:
        log.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    body: dict[str, object] = {"detail": exc.message}
    if isinstance(exc, ValidationFailed):
        body["errors"] = exc.errors
    return JSONResponse(status_code=exc.status_code, content=body)


@app.on_event("startup")
def on_startup() -> None:
    settings.ensure_directories()
    Base.metadata.create_all(bind=engine)
    ensure_default_admin(engine)


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(users.router, prefix="/api/users", tags=["users"])
app.include_router(jobs.router, prefix="/api/jobs", tags=["jobs"])
app.include_router(applications.router, prefix="/api/applications", tags=["applications"])
app.include_router(notifications.router, prefix="/api/notifications", tags=["notifications"])
app.include_router(functions.router, prefix="/api/functions", tags=["functions"])
