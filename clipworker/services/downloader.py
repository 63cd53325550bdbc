import logging
from pathlib import Path
from typing import Optional

import requests

from clipworker.core.errors import FetchError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


class Downloader:
    """Streams a remote file to disk without holding it in memory."""

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout

    def fetch(self, url: str, dest: Path) -> int:
        logger.info("Downloading %s", url)
        try:
            with requests.get(url, stream=True, timeout=self.timeout) as r:
                if not 200 <= r.status_code < 300:
                    raise FetchError(
                        f"Failed to fetch video: HTTP {r.status_code}"
                    )
                written = 0
                with open(dest, "wb") as f:
                    for chunk in r.iter_content(CHUNK_SIZE):
                        if chunk:
                            f.write(chunk)
                            written += len(chunk)
        except requests.RequestException as e:
            raise FetchError(f"Failed to fetch video: {e}") from e

        if written == 0:
            raise FetchError("No response body")

        logger.info("Saved %d bytes to %s", written, dest)
        return written
