from typing import Optional

from panic_service.errors import DependencyReadError
from panic_service.logger import get_logger
from panic_service.responses import ApiResponse, message_response
from panic_service.store import RecordStore

logger = get_logger("lookup")

MISSING_ID_MESSAGE = "Panic ID is missing in the request path."
NOT_FOUND_MESSAGE = "Panic event not found."
READ_FAILED_MESSAGE = "Failed to retrieve panic event data."


class LookupService:
    """Read-only access to a single panic record by id."""

    def __init__(self, store: RecordStore):
        self.store = store

    def get(self, panic_id: Optional[str]) -> ApiResponse:
        if not panic_id or not panic_id.strip():
            logger.warning("lookup.missing_id")
            return message_response(400, MISSING_ID_MESSAGE)

        try:
            record = self.store.get(panic_id)
        except DependencyReadError as e:
            logger.error("lookup.read_failed", extra={"panic_id": panic_id, "error": str(e)})
            return message_response(500, READ_FAILED_MESSAGE)

        if record is None:
            logger.warning("lookup.not_found", extra={"panic_id": panic_id})
            return message_response(404, NOT_FOUND_MESSAGE)

        logger.info("lookup.found", extra={"panic_id": panic_id, "status": record.status.value})
        return ApiResponse(200, record.public_view())
