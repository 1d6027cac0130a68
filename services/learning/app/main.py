import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.assessment.router import router as assessment_router
from app.config import Settings
from app.database import init_db
from app.lms.router import router as lms_router
from app.progress.router import router as progress_router
from app.users.router import router as users_router
from shared.middleware.error_handler import error_envelope_middleware, http_exception_handler
from shared.middleware.request_id import request_id_middleware


def get_settings() -> Settings:
    return Settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    if not app.state.db_ready:
        init_db(get_settings().learning_database_url)
    yield


SWAGGER_DESCRIPTION = """\
## LearnHub Learning Service

Courses, lessons, quizzes, enrollments and per-user progress.

### Domain Tags

| Tag | Description |
|-----|-------------|
| **Users** | Registration and password check |
| **LMS** | Course catalog, lessons, enrollment |
| **Assessment** | Quizzes and scored attempts |
| **Progress** | Lesson completion and course progress |

### Progress rules

- A quiz attempt scores `round(100 * correct / questions)`; it passes when
  the score reaches the quiz's passing score.
- Completing a lesson recomputes the enrollment's progress for that course.
  An enrollment is completed once every lesson of the course is completed.

```
UserProgress.is_completed:    false → true
UserEnrollment.is_completed:  false → true
```
"""


def create_app(*, db_ready: bool = False) -> FastAPI:
    """Build the application.

    ``db_ready`` skips database setup at startup, for callers that have
    already installed a session factory.
    """
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(levelname)s:%(name)s: %(message)s",
    )

    app = FastAPI(
        title="LearnHub Learning",
        version="0.1.0",
        description=SWAGGER_DESCRIPTION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.db_ready = db_ready
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        max_age=600,
    )
    app.middleware("http")(error_envelope_middleware)
    app.middleware("http")(request_id_middleware)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    app.include_router(users_router, prefix="/api/v1")
    app.include_router(lms_router, prefix="/api/v1")
    app.include_router(assessment_router, prefix="/api/v1")
    app.include_router(progress_router, prefix="/api/v1")

    @app.get("/health", tags=["Health"])
    async def health() -> dict:
        return {"status": "ok", "service": "learning"}

    return app


app = create_app()
