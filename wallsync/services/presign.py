"""Client for the presign relay.

The relay receives ``{dir, filename, contentType}`` and answers either
``{fileExists: true, publicUrl}`` or ``{uploadUrl, key, publicUrl,
thumbnailTemplate}``. Errors come back as non-2xx with ``{error}``.
"""

from __future__ import annotations

import logging

from pydantic import ValidationError as PydanticValidationError

from wallsync.core.exceptions import PresignError, RetryExhaustedError
from wallsync.models.upload import PresignResult

from .base import RelayClient, error_message

logger = logging.getLogger(__name__)


class PresignClient(RelayClient):
    """Obtains single-use write URLs for object storage."""

    def presign(self, directory: str, filename: str, content_type: str) -> PresignResult:
        """Request a write credential for ``directory/filename``.

        Raises:
            PresignError: If the relay is unreachable, refuses, or answers
                with something that is not a presign response.
        """
        payload = {"dir": directory, "filename": filename, "contentType": content_type}
        logger.debug("Presigning %s/%s (%s)", directory, filename, content_type)

        try:
            resp = self.post_json(payload, operation=f"presign {filename}")
        except RetryExhaustedError as e:
            raise PresignError(str(e), filename=filename) from e

        if not resp.is_success:
            raise PresignError(
                error_message(resp), status_code=resp.status_code, filename=filename
            )

        try:
            result = PresignResult.model_validate(resp.json())
        except (ValueError, PydanticValidationError) as e:
            raise PresignError(f"Malformed presign response: {e}", filename=filename) from e

        if not result.file_exists and not result.upload_url:
            raise PresignError("Presign response has no uploadUrl", filename=filename)

        return result
