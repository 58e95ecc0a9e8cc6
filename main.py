import sys
import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.config import get_settings
from app.application.exceptions import ConflictError, InvalidInputError, NotFoundError
from app.presentation.api.routers.subject_router import router as subject_router
from app.presentation.api.routers.system_router import router as system_router
from app.presentation.api.routers.marks_router import router as marks_router
from app.presentation.api.routers.question_router import router as question_router
from app.presentation.api.routers.folder_router import router as folder_router
from app.presentation.api.routers.file_router import router as file_router
from app.presentation.api.routers.stats_router import router as stats_router
from app.presentation.api.routers.backup_router import router as backup_router
from app.presentation.api.routers.autobackup_router import router as autobackup_router

# Configure logging
logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[
        logging.StreamHandler(sys.stdout)
    ]
)
logger = logging.getLogger(__name__)


def _error_response(status_code: int, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


def create_app() -> FastAPI:
    app = FastAPI(title="Exam Question Bank API")

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return _error_response(404, exc)

    @app.exception_handler(ConflictError)
    async def conflict_handler(request: Request, exc: ConflictError):
        logger.warning(f"Conflict on {request.method} {request.url.path}: {exc}")
        return _error_response(409, exc)

    @app.exception_handler(InvalidInputError)
    async def invalid_input_handler(request: Request, exc: InvalidInputError):
        logger.warning(f"Rejected {request.method} {request.url.path}: {exc}")
        return _error_response(400, exc)

    # Global Exception Handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Global unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"detail": "An internal server error occurred."}
        )

    # Include routers
    app.include_router(subject_router)
    app.include_router(system_router)
    app.include_router(marks_router)
    app.include_router(question_router)
    app.include_router(folder_router)
    app.include_router(file_router)
    app.include_router(stats_router)
    app.include_router(backup_router)
    app.include_router(autobackup_router)

    # Optional root endpoint
    @app.get("/")
    def root():
        return {"message": "Welcome to the Exam Question Bank API"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
