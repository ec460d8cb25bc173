"""
Log upload handling shared by the API routers.

The scanner buffers whole payloads, so uploads are capped before any
scanning happens.
"""

import io
import logging

from fastapi import UploadFile, status

from mtgassistant.config import settings
from mtgassistant.models.failure import FailureKind, KnownError

logger = logging.getLogger(__name__)


class LogTooLargeError(KnownError):
    """Raised when an uploaded log exceeds the configured size limit."""

    def __init__(self, limit: int):
        self.limit = limit
        super().__init__(
            kind=FailureKind.PAYLOAD_TOO_LARGE,
            message="The uploaded log is too large.",
            detail=f"limit: {limit} bytes",
            suggestion="Restart the Arena client to start a fresh log, then upload again.",
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
        )


async def read_log_upload(upload: UploadFile) -> io.BytesIO:
    """
    Read an uploaded log into memory, enforcing the size limit.

    Raises:
        LogTooLargeError: If the upload exceeds settings.max_log_size_bytes
        KnownError: If the upload is empty
    """
    limit = settings.max_log_size_bytes
    content = await upload.read(limit + 1)
    if len(content) > limit:
        logger.warning("Rejected log upload %s: over %d bytes", upload.filename, limit)
        raise LogTooLargeError(limit)
    if not content:
        raise KnownError(
            kind=FailureKind.INVALID_INPUT,
            message="The uploaded log is empty.",
            suggestion="Upload the output_log.txt file written by the Arena client.",
        )
    return io.BytesIO(content)
