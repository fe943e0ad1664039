"""
Binary object storage for ad media, keyed by path.
"""
import logging
import secrets
import string
from pathlib import Path, PurePosixPath

from signage.core.config import settings

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {
    "image": {"png", "jpg", "jpeg", "gif", "webp"},
    "video": {"mp4", "mov", "webm", "mkv", "avi"},
}


class StorageError(Exception):
    """Raised when an object cannot be stored, read or removed"""

    def __init__(self, message: str, path: str | None = None):
        self.message = message
        self.path = path
        super().__init__(message)

    def __str__(self) -> str:
        if self.path:
            return f"Storage Error ({self.path}): {self.message}"
        return f"Storage Error: {self.message}"


def allowed_file(filename: str, media_type: str) -> bool:
    return "." in filename and filename.rsplit(".", 1)[1].lower() in ALLOWED_EXTENSIONS.get(media_type, set())


def random_object_name(filename: str) -> str:
    """Random 13-character base name that keeps the upload's extension."""
    alphabet = string.ascii_lowercase + string.digits
    stem = "".join(secrets.choice(alphabet) for _ in range(13))
    ext = filename.rsplit(".", 1)[1].lower() if "." in filename else "bin"
    return f"{stem}.{ext}"


class MediaStorage:
    """Stores objects under a root directory and exposes them under a URL prefix."""

    def __init__(self, root: Path, url_prefix: str):
        self.root = Path(root)
        self.url_prefix = url_prefix.rstrip("/")

    def _resolve(self, path: str) -> Path:
        relative = PurePosixPath(path)
        if relative.is_absolute() or ".." in relative.parts:
            raise StorageError("Invalid object path", path)
        return self.root.joinpath(*relative.parts)

    def upload(self, path: str, data: bytes) -> str:
        target = self._resolve(path)
        if target.exists():
            raise StorageError("Object already exists", path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as e:
            raise StorageError(str(e), path) from e
        logger.info(f"Stored object {path} ({len(data)} bytes)")
        return path

    def retrieve(self, path: str) -> Path:
        target = self._resolve(path)
        if not target.is_file():
            raise StorageError("Object not found", path)
        return target

    def remove(self, path: str) -> None:
        target = self._resolve(path)
        try:
            target.unlink()
        except FileNotFoundError as e:
            raise StorageError("Object not found", path) from e
        except OSError as e:
            raise StorageError(str(e), path) from e
        logger.info(f"Removed object {path}")

    def public_url(self, path: str) -> str:
        return f"{self.url_prefix}/{path}"

    def path_from_url(self, url: str) -> str | None:
        """Recover the object path from a public URL, or None for foreign URLs."""
        marker = f"{self.url_prefix}/"
        if marker not in url:
            return None
        path = url.split(marker, 1)[1].strip()
        return path or None


def get_media_storage() -> MediaStorage:
    return MediaStorage(settings.MEDIA_ROOT, settings.MEDIA_URL_PREFIX)
