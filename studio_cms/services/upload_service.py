"""
Image upload storage and the public image listing.

Uploaded files land in ``<public>/images/uploads`` under a generated name
(``image_<millis>_<random><ext>``) and are served back from
``/images/uploads/<name>``. The server filesystem path is never returned.
"""

import secrets
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, BinaryIO, Dict, List, Optional

from studio_cms.models.upload import UploadedFileMeta
from studio_cms.services.validator import validate_payload
from studio_cms.utils.exceptions import (
    FileOperationError,
    FileTooLargeError,
    InvalidFileError,
    ValidationError,
)
from studio_cms.utils.files import ensure_directory
from studio_cms.utils.logger import get_logger
from studio_cms.utils.timestamps import utc_now_iso

logger = get_logger(__name__)

FIELD_NAME = "image"
IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}
CHUNK_SIZE = 64 * 1024

MIME_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
}


def generate_filename(original_name: Optional[str], mimetype: str) -> str:
    """Collision-resistant name: field, epoch millis, 9 random digits, extension"""
    ext = Path(original_name or "").suffix
    if ext.lower() not in IMAGE_EXTENSIONS:
        ext = MIME_EXTENSIONS.get(mimetype, "")
    millis = int(time.time() * 1000)
    suffix = secrets.randbelow(10 ** 9)
    return f"{FIELD_NAME}_{millis}_{suffix}{ext}"


class UploadService:
    """Stores uploaded images and lists the public image tree"""

    def __init__(self, images_dir: Path, uploads_dir: Path, max_size: int, allowed_types: List[str]):
        self.images_dir = Path(images_dir)
        self.uploads_dir = Path(uploads_dir)
        self.max_size = max_size
        self.allowed_types = list(allowed_types)

    def store(self, stream: BinaryIO, original_name: Optional[str], mimetype: Optional[str]) -> Dict[str, Any]:
        """
        Copy an uploaded file into the uploads directory.

        Raises:
            InvalidFileError: MIME type not allowed or metadata rejected
            FileTooLargeError: More than ``max_size`` bytes were sent
            FileOperationError: The file could not be written
        """
        mimetype = (mimetype or "").lower()
        if mimetype not in self.allowed_types:
            raise InvalidFileError(
                "Invalid file type",
                details=[{"field": "mimetype", "message": f"must be one of {', '.join(self.allowed_types)}", "value": mimetype}],
            )

        filename = generate_filename(original_name, mimetype)
        target = ensure_directory(self.uploads_dir) / filename
        size = self._copy_limited(stream, target)

        try:
            validate_payload(
                UploadedFileMeta,
                {"mimetype": mimetype, "size": size, "filename": filename},
                context={"allowed_types": self.allowed_types, "max_size": self.max_size},
            )
        except ValidationError as e:
            target.unlink(missing_ok=True)
            raise InvalidFileError("Invalid file upload", details=e.details)

        return {
            "path": f"/images/uploads/{filename}",
            "originalName": original_name or filename,
            "size": size,
            "mimetype": mimetype,
            "uploadedAt": utc_now_iso(),
        }

    def _copy_limited(self, stream: BinaryIO, target: Path) -> int:
        size = 0
        try:
            with open(target, "wb") as buffer:
                while True:
                    chunk = stream.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    size += len(chunk)
                    if size > self.max_size:
                        raise FileTooLargeError(f"File too large. Maximum size is {self.max_size} bytes")
                    buffer.write(chunk)
        except FileTooLargeError:
            target.unlink(missing_ok=True)
            raise
        except OSError as e:
            target.unlink(missing_ok=True)
            raise FileOperationError(f"Failed to store upload: {e}")
        return size

    def list_images(self) -> List[Dict[str, Any]]:
        """Every image under the public images directory, flattened"""
        images: List[Dict[str, Any]] = []
        self._walk(self.images_dir, "", images)
        images.sort(key=lambda image: image["path"])
        return images

    def _walk(self, directory: Path, base_path: str, images: List[Dict[str, Any]]) -> None:
        try:
            entries = sorted(directory.iterdir(), key=lambda entry: entry.name)
        except OSError as e:
            # Unreadable directories are skipped
            logger.warning("Failed to read image directory", directory=str(directory), error=str(e))
            return

        for entry in entries:
            relative = f"{base_path}/{entry.name}" if base_path else entry.name
            try:
                if entry.is_dir():
                    self._walk(entry, relative, images)
                elif entry.is_file() and entry.suffix.lower() in IMAGE_EXTENSIONS:
                    stats = entry.stat()
                    images.append({
                        "name": entry.name,
                        "path": f"/images/{relative}",
                        "size": stats.st_size,
                        "modified": datetime.fromtimestamp(stats.st_mtime, tz=timezone.utc)
                        .isoformat(timespec="milliseconds")
                        .replace("+00:00", "Z"),
                        "folder": base_path or "root",
                    })
            except OSError as e:
                logger.warning("Failed to stat image", path=relative, error=str(e))
