"""Download -> ffmpeg -> upload -> public URL.

Both endpoints run the same four stages; an ``Operation`` carries the parts
that differ (ffmpeg arguments, storage key, content type, result field).
Scratch files live inside ``scratch_file`` scopes, so they are removed on
every exit path.
"""

import logging
import time
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional

from clipworker.core.errors import PipelineError
from clipworker.schemas.jobs import AudioRequest, ClipRequest
from clipworker.services.downloader import Downloader
from clipworker.services.scratch import ensure_scratch_dir, scratch_file
from clipworker.services.storage import Storage
from clipworker.services.transcoder import Transcoder, audio_args, clip_args

logger = logging.getLogger(__name__)

MIN_AUDIO_BYTES = 1024


@dataclass
class Operation:
    name: str
    input_prefix: str
    input_suffix: str
    output_prefix: str
    output_suffix: str
    build_args: Callable[[Path, Path], List[str]]
    key: str
    content_type: str
    result_field: str
    inspect_output: Optional[Callable[[Path], None]] = None


# ==================================================
# OPERATIONS
# ==================================================
def clip_operation(req: ClipRequest, ffmpeg: str = "ffmpeg") -> Operation:
    return Operation(
        name="clip",
        input_prefix="input",
        input_suffix=".mp4",
        output_prefix="output",
        output_suffix=".mp4",
        build_args=lambda src, dest: clip_args(
            ffmpeg, src, dest, req.start_time, req.end_time
        ),
        key=req.file_name,
        content_type="video/mp4",
        result_field="clippedUrl",
    )


def audio_storage_key(file_name: Optional[str]) -> str:
    if file_name:
        return f"{file_name}_audio.wav"
    return f"audio_{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}.wav"


def warn_if_small(path: Path) -> None:
    size = path.stat().st_size
    if size < MIN_AUDIO_BYTES:
        logger.warning("Extracted audio is very small! (%d bytes)", size)


def audio_operation(req: AudioRequest, ffmpeg: str = "ffmpeg") -> Operation:
    return Operation(
        name="extract-audio",
        input_prefix="audio_input",
        input_suffix=".mp4",
        output_prefix="audio_output",
        output_suffix=".wav",
        build_args=lambda src, dest: audio_args(ffmpeg, src, dest),
        key=audio_storage_key(req.file_name),
        content_type="audio/wav",
        result_field="audioUrl",
        inspect_output=warn_if_small,
    )


# ==================================================
# PIPELINE
# ==================================================
class MediaPipeline:
    """Runs an ``Operation`` against injected collaborators."""

    def __init__(
        self,
        downloader: Downloader,
        transcoder: Transcoder,
        storage: Storage,
        scratch_dir,
        bucket: str,
    ):
        self.downloader = downloader
        self.transcoder = transcoder
        self.storage = storage
        self.scratch_dir = ensure_scratch_dir(scratch_dir)
        self.bucket = bucket

    @property
    def ffmpeg_bin(self) -> str:
        return self.transcoder.ffmpeg_bin

    def run(self, op: Operation, input_url: str) -> dict:
        logger.info("[%s] start: %s -> %s", op.name, input_url, op.key)
        try:
            with scratch_file(
                self.scratch_dir, op.input_prefix, op.input_suffix
            ) as src, scratch_file(
                self.scratch_dir, op.output_prefix, op.output_suffix
            ) as dest:
                # 1. FETCH
                self.downloader.fetch(input_url, src)

                # 2. TRANSCODE
                self.transcoder.run(op.build_args(src, dest), description=op.name)
                logger.info("Output file size: %d bytes", dest.stat().st_size)
                if op.inspect_output:
                    op.inspect_output(dest)

                # 3. UPLOAD
                self.storage.upload(
                    self.bucket, op.key, dest, op.content_type, overwrite=True
                )

                # 4. PUBLIC URL
                url = self.storage.get_public_url(self.bucket, op.key)
        except PipelineError:
            logger.exception("[%s] failed", op.name)
            raise
        except Exception as e:
            logger.exception("[%s] failed", op.name)
            raise PipelineError(str(e)) from e

        logger.info("[%s] success: %s", op.name, url)
        return {op.result_field: url}
