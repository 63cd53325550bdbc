import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from clipworker import __version__
from clipworker.core.config import Settings, get_settings
from clipworker.core.errors import PipelineError, ValidationError
from clipworker.schemas.jobs import (
    AudioRequest,
    AudioResponse,
    ClipRequest,
    ClipResponse,
)
from clipworker.services.downloader import Downloader
from clipworker.services.pipeline import (
    MediaPipeline,
    audio_operation,
    clip_operation,
)
from clipworker.services.storage import SupabaseStorage
from clipworker.services.transcoder import Transcoder

logger = logging.getLogger(__name__)


def build_pipeline(settings: Settings) -> MediaPipeline:
    return MediaPipeline(
        downloader=Downloader(timeout=settings.FETCH_TIMEOUT),
        transcoder=Transcoder(settings.FFMPEG_BIN),
        storage=SupabaseStorage.from_settings(settings),
        scratch_dir=settings.SCRATCH_DIR,
        bucket=settings.STORAGE_BUCKET,
    )


def get_pipeline(request: Request) -> MediaPipeline:
    return request.app.state.pipeline


def _require(req) -> None:
    missing = req.missing_fields()
    if missing:
        raise ValidationError(
            "Missing required parameters: " + ", ".join(missing)
        )


def create_app(
    settings: Optional[Settings] = None,
    pipeline: Optional[MediaPipeline] = None,
) -> FastAPI:
    settings = settings or get_settings()
    pipeline = pipeline or build_pipeline(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.pipeline.transcoder.check_available()
        logger.info("FFmpeg worker running on port %s", settings.PORT)
        logger.info("Running in low-memory streaming mode")
        yield

    app = FastAPI(
        title="FFmpeg Clip Worker",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.pipeline = pipeline

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # =========================
    # ERROR RESPONSES
    # =========================

    @app.exception_handler(PipelineError)
    async def pipeline_error_handler(request: Request, exc: PipelineError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def body_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid request body"},
        )

    # =========================
    # ENDPOINTS
    # =========================

    @app.get("/", response_class=PlainTextResponse)
    def health():
        return "FFmpeg worker alive"

    @app.post("/clip", response_model=ClipResponse)
    def api_clip(
        req: ClipRequest,
        pipeline: MediaPipeline = Depends(get_pipeline),
    ):
        _require(req)
        logger.info(
            "Processing clip: %s (%ss - %ss)",
            req.file_name,
            req.start_time,
            req.end_time,
        )
        op = clip_operation(req, pipeline.ffmpeg_bin)
        return pipeline.run(op, req.input_url)

    @app.post("/extract-audio", response_model=AudioResponse)
    def api_extract_audio(
        req: AudioRequest,
        pipeline: MediaPipeline = Depends(get_pipeline),
    ):
        _require(req)
        logger.info("Extracting audio from: %s", req.input_url)
        op = audio_operation(req, pipeline.ffmpeg_bin)
        return pipeline.run(op, req.input_url)

    return app
