import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from app.core.config import settings
from app.core.database import init_db
from app.core.exceptions import AppException
from app.core.logging import configure_logging
from app.endpoints import organization, category, user, course, lesson, lesson_item, enrollment, review, learning_path
from app.middleware.exceptions import app_exception_handler, global_exception_handler, http_exception_handler, validation_exception_handler
from app.middleware.logging import RequestLoggingMiddleware

configure_logging()
logger = logging.getLogger("app")

@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.AUTO_CREATE_TABLES:
        init_db()
        logger.info("Database tables ensured")
    logger.info(f"{settings.PROJECT_NAME} {settings.VERSION} started")
    yield
    logger.info(f"{settings.PROJECT_NAME} shutting down")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(RequestLoggingMiddleware)

app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

app.include_router(organization.router, prefix="/organizations", tags=["Organizations"])
app.include_router(category.router, prefix="/categories", tags=["Categories"])
app.include_router(user.router, prefix="/users", tags=["Users"])
app.include_router(course.router, prefix="/courses", tags=["Courses"])
app.include_router(lesson.router, prefix="/lessons", tags=["Lessons"])
app.include_router(lesson_item.router, prefix="/lesson-items", tags=["Lesson Items"])
app.include_router(enrollment.router, prefix="/enrollments", tags=["Enrollments"])
app.include_router(review.router, prefix="/reviews", tags=["Reviews"])
app.include_router(learning_path.router, prefix="/learning-paths", tags=["Learning Paths"])

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
