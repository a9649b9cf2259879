"""
Local storage for uploaded payment slips.
"""

import uuid
from pathlib import Path
from typing import Optional

from staysync.config.settings import Settings
from staysync.core.exceptions import ValidationError
from staysync.core.logging import get_logger

logger = get_logger(__name__)

ALLOWED_IMAGE_TYPES = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/heic": "heic",
}


class SlipStorage:
    """Writes slip images under ``<UPLOAD_DIR>/slips`` and returns their relative path."""

    def __init__(self, upload_dir: str, max_size: int):
        self.root = Path(upload_dir)
        self.max_size = max_size

    @classmethod
    def from_settings(cls, settings: Settings) -> "SlipStorage":
        return cls(settings.UPLOAD_DIR, settings.MAX_SLIP_SIZE)

    def save(self, bill_id: str, content: bytes, content_type: Optional[str]) -> str:
        """
        Validate and persist a slip image.

        Raises:
            ValidationError: If the upload is empty, not an image or too large
        """
        if not content:
            raise ValidationError("Slip image is required", field="slip")
        extension = ALLOWED_IMAGE_TYPES.get((content_type or "").lower())
        if extension is None:
            raise ValidationError("Slip must be a JPEG, PNG, WEBP or HEIC image", field="slip")
        if len(content) > self.max_size:
            raise ValidationError(
                f"Slip image exceeds {self.max_size // (1024 * 1024)} MB",
                field="slip",
            )

        directory = self.root / "slips"
        directory.mkdir(parents=True, exist_ok=True)
        filename = f"{bill_id}-{uuid.uuid4().hex[:8]}.{extension}"
        (directory / filename).write_bytes(content)

        logger.info("Slip stored", extra={"bill_id": bill_id, "size": len(content)})
        return f"slips/{filename}"
