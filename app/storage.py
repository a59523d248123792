"""
Image file sink.

Payloads are written to ``<root>/<article_id>/<identifier><suffix>``.
Every file gets a freshly generated identifier, so concurrent uploads for
the same article never contend for a path.  Blocking file I/O runs in
Starlette's threadpool to keep the event loop free.
"""
import logging
from pathlib import Path, PurePath

from starlette.concurrency import run_in_threadpool

from app.errors import ImageWriteError

logger = logging.getLogger(__name__)

# Upload suffixes longer than this are dropped rather than trusted.
_MAX_SUFFIX_LENGTH = 10


def image_suffix(filename: str | None) -> str:
    """Return the lower-cased extension of *filename* (``".png"``), or ``""``."""
    if not filename:
        return ""
    suffix = PurePath(filename).suffix.lower()
    if len(suffix) > _MAX_SUFFIX_LENGTH or not suffix[1:].isalnum():
        return ""
    return suffix


class ImageStorage:
    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def path_for(self, article_id: str, identifier: str, filename: str | None = None) -> Path:
        return self.root / article_id / f"{identifier}{image_suffix(filename)}"

    async def write(self, path: Path, content: bytes) -> str:
        """Write *content* to *path* and return the stored path as a string."""
        try:
            await run_in_threadpool(self._write, path, content)
        except OSError as exc:
            logger.error("Writing image %s failed: %s", path, exc)
            raise ImageWriteError(f"Failed to write image file {path.name}") from exc
        return str(path)

    async def remove(self, path: str | Path) -> bool:
        """
        Delete a previously written image.  Returns False (and logs) when
        the file could not be removed; callers use this for cleanup only.
        """
        try:
            await run_in_threadpool(Path(path).unlink, missing_ok=True)
        except OSError as exc:
            logger.warning("Could not remove orphaned image %s: %s", path, exc)
            return False
        return True

    @staticmethod
    def _write(path: Path, content: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        # "xb" refuses to overwrite an existing file
        with open(path, "xb") as fh:
            fh.write(content)
