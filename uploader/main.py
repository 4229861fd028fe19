"""
FastAPI application entry point.
Builds the app from explicit settings. Loads env vars.

Run with `uploader-server`, or `uvicorn uploader.main:create_app --factory`.
"""

import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from uploader.config import Settings
from uploader.errors import UploadError
from uploader.router import router
from uploader.schemas import ErrorResponse
from uploader.storage import FileStore

logger = logging.getLogger(__name__)

INDEX_PAGE = Path(__file__).parent / "static" / "index.html"


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    if settings is None:
        # Load .env from the working directory the server is started from
        load_dotenv(dotenv_path=Path.cwd() / ".env")
        settings = Settings.from_env()

    store = FileStore(settings.upload_dir)
    store.ensure_directory()

    app = FastAPI(title="File Upload Server")
    app.state.settings = settings
    app.state.store = store

    # ---------------------------------------------------------
    # CORS MUST BE ADDED BEFORE ROUTES
    # ---------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(UploadError)
    async def handle_upload_error(request: Request, exc: UploadError) -> JSONResponse:
        return _error(exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        # Unknown routes, wrong methods and malformed multipart bodies
        return _error(exc.status_code, str(exc.detail))

    app.include_router(router)

    @app.get("/", include_in_schema=False)
    def index() -> FileResponse:
        return FileResponse(INDEX_PAGE, media_type="text/html")

    @app.get("/health")
    def health():
        return {"ok": True}

    logger.info("Storing uploads in %s", store.directory.resolve())
    return app


def run() -> None:
    import uvicorn

    load_dotenv(dotenv_path=Path.cwd() / ".env")
    settings = Settings.from_env()
    logging.basicConfig(level=settings.log_level)
    logger.info("Upload server listening on http://%s:%d", settings.host, settings.port)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
