"""ffmpeg invocation.

Argument builders return the command line as a list; ``Transcoder.run`` is
the only place that spawns a process.
"""

import logging
import subprocess
from pathlib import Path
from typing import List

from clipworker.core.errors import TranscodeError

logger = logging.getLogger(__name__)

# =========================
# OUTPUT FORMAT
# =========================
TARGET_W, TARGET_H = 1080, 1920

VERTICAL_FILTER = (
    f"scale={TARGET_W}:{TARGET_H}:force_original_aspect_ratio=decrease,"
    f"pad={TARGET_W}:{TARGET_H}:(ow-iw)/2:(oh-ih)/2"
)

AUDIO_SAMPLE_RATE = 16000


def clip_args(ffmpeg: str, src: Path, dest: Path, start, end) -> List[str]:
    # -threads 1 keeps memory flat when many clips run side by side
    return [
        ffmpeg,
        "-ss", str(start),
        "-to", str(end),
        "-i", str(src),
        "-vf", VERTICAL_FILTER,
        "-c:v", "libx264",
        "-c:a", "aac",
        "-preset", "ultrafast",
        "-crf", "30",
        "-threads", "1",
        "-y",
        str(dest),
    ]


def audio_args(ffmpeg: str, src: Path, dest: Path) -> List[str]:
    return [
        ffmpeg,
        "-i", str(src),
        "-vn",
        "-ac", "1",
        "-ar", str(AUDIO_SAMPLE_RATE),
        "-c:a", "pcm_s16le",
        "-threads", "1",
        "-y",
        str(dest),
    ]


class Transcoder:
    def __init__(self, ffmpeg_bin: str = "ffmpeg"):
        self.ffmpeg_bin = ffmpeg_bin

    def check_available(self) -> bool:
        """Probe ``ffmpeg -version``; log a warning instead of failing startup."""
        try:
            subprocess.run(
                [self.ffmpeg_bin, "-version"],
                capture_output=True,
                check=True,
            )
        except (subprocess.CalledProcessError, OSError):
            logger.warning(
                "%s not found or not runnable; transcode requests will fail",
                self.ffmpeg_bin,
            )
            return False
        return True

    def run(self, args: List[str], description: str = "") -> None:
        logger.info("Running: %s  [%s]", " ".join(args), description)
        try:
            result = subprocess.run(
                args,
                capture_output=True,
                text=True,
                errors="replace",  # stderr echoes raw container metadata
                check=False,
            )
        except OSError as e:
            raise TranscodeError(
                f"{args[0]} not found or not executable", stderr=str(e)
            ) from e

        if result.returncode != 0:
            logger.error(
                "ffmpeg failed (rc=%d)\nstderr: %s",
                result.returncode,
                result.stderr,
            )
            raise TranscodeError(
                f"Command failed with exit code {result.returncode}: "
                f"{' '.join(args)}",
                stderr=result.stderr,
            )
        logger.info("ffmpeg finished [%s]", description)
