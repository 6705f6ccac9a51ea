"""Client for the object delete relay (``{key}`` -> ``{success: true}``)."""

from __future__ import annotations

from wallsync.core.exceptions import DeleteError, RetryExhaustedError
from wallsync.core.logging import get_audit_logger
from wallsync.core.validation import validate_object_key

from .base import RelayClient, error_message


class DeleteClient(RelayClient):
    """Removes objects from the bucket through the delete relay."""

    def delete(self, key: str) -> bool:
        """Delete one object by key.

        Raises:
            DeleteError: If the relay fails or does not confirm.
        """
        key = validate_object_key(key)
        audit = get_audit_logger()

        try:
            resp = self.post_json({"key": key}, operation=f"delete {key}")
        except RetryExhaustedError as e:
            audit.log_operation("delete", key=key, success=False)
            raise DeleteError(key, str(e)) from e

        if not resp.is_success:
            audit.log_operation("delete", key=key, success=False)
            raise DeleteError(key, error_message(resp))

        try:
            data = resp.json()
        except ValueError:
            data = {}

        if not (isinstance(data, dict) and data.get("success")):
            audit.log_operation("delete", key=key, success=False)
            raise DeleteError(key, "relay did not confirm deletion")

        audit.log_operation("delete", key=key)
        return True
