"""Attachment Service - Image upload storage for tickets"""
import os
import uuid
from typing import List, Optional, Sequence
from fastapi import UploadFile

from ..domain.models import Attachment
from ..domain.errors import (
    AttachmentTooLargeError, InvalidMimeTypeError, ValidationError
)
from ..config.settings import settings
from ..utils.logger import get_logger

logger = get_logger(__name__)

# Public URL prefix the uploads directory is mounted under
UPLOADS_URL_PREFIX = "uploads"


class AttachmentService:
    """
    Stores uploaded files on disk

    Only the original filename and the public path are kept on the ticket;
    there is no content hashing or deduplication.
    """

    def __init__(self, base_path: Optional[str] = None):
        self.base_path = base_path or settings.uploads_path
        self._ensure_storage_dir()

    def _ensure_storage_dir(self):
        """Ensure storage directory exists"""
        os.makedirs(self.base_path, exist_ok=True)

    def validate_uploads(self, files: Sequence[UploadFile]) -> None:
        """Check count and mime types before anything touches the disk"""
        if len(files) > settings.max_attachments_per_ticket:
            raise ValidationError(
                f"A ticket can have at most {settings.max_attachments_per_ticket} images",
                details={"count": len(files), "max": settings.max_attachments_per_ticket}
            )

        for file in files:
            content_type = file.content_type or "application/octet-stream"
            if content_type not in settings.allowed_mime_types_list:
                raise InvalidMimeTypeError(
                    f"File type {content_type} is not allowed",
                    details={
                        "filename": file.filename,
                        "mime_type": content_type,
                        "allowed": settings.allowed_mime_types_list
                    }
                )

    async def save_uploads(self, files: Sequence[UploadFile]) -> List[Attachment]:
        """
        Validate and store uploaded images

        All-or-nothing: if any file is rejected, files already written by
        this call are removed again.
        """
        self.validate_uploads(files)

        saved: List[Attachment] = []
        try:
            for file in files:
                saved.append(await self._save_one(file))
        except Exception:
            self.remove(saved)
            raise
        return saved

    async def _save_one(self, file: UploadFile) -> Attachment:
        content = await file.read()
        file_size = len(content)

        if file_size > settings.attachments_max_bytes:
            raise AttachmentTooLargeError(
                f"File exceeds maximum size of {settings.attachments_max_mb}MB",
                details={
                    "filename": file.filename,
                    "size_bytes": file_size,
                    "max_bytes": settings.attachments_max_bytes
                }
            )

        original_filename = file.filename or "unnamed"
        stored_filename = f"{uuid.uuid4().hex[:12]}_{self._sanitize_filename(original_filename)}"
        storage_path = os.path.join(self.base_path, stored_filename)

        with open(storage_path, "wb") as f:
            f.write(content)

        logger.info(f"Stored attachment {stored_filename} ({file_size} bytes)")
        return Attachment(
            filename=original_filename,
            path=f"{UPLOADS_URL_PREFIX}/{stored_filename}"
        )

    def remove(self, attachments: Sequence[Attachment]) -> None:
        """Delete stored files; missing files are logged and skipped"""
        for attachment in attachments:
            file_path = os.path.join(self.base_path, os.path.basename(attachment.path))
            try:
                os.remove(file_path)
            except FileNotFoundError:
                logger.warning(f"Attachment file already gone: {file_path}")
            except OSError as e:
                logger.error(f"Failed to delete attachment {file_path}: {e}")

    def _sanitize_filename(self, filename: str) -> str:
        """Sanitize filename for storage"""
        # Remove directory separators and dangerous characters
        safe = filename.replace("/", "_").replace("\\", "_").replace("..", "_")
        # Limit length
        if len(safe) > 100:
            name, ext = os.path.splitext(safe)
            safe = name[:96] + ext
        return safe
