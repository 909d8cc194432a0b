"""Intake service: validate, store, then queue a panic event.

Write-then-publish is a best-effort sequence, not a transaction. If the
store write fails nothing exists and the caller can retry. If the publish
fails after the write, the RECEIVED record stays in the table unqueued and
the caller gets a distinct 500 carrying the panicId for manual remediation.
"""
from typing import Callable, Optional

from panic_service.errors import DependencyWriteError, ValidationError
from panic_service.logger import get_logger
from panic_service.models import PanicRecord, PanicRequest, new_panic_id, utc_now
from panic_service.queue import QueuePublisher
from panic_service.responses import ApiResponse, message_response
from panic_service.store import RecordStore

logger = get_logger("intake")

CREATED_MESSAGE = "Panic event received successfully."
SAVE_FAILED_MESSAGE = "Failed to save panic event data."
QUEUE_FAILED_MESSAGE = (
    "Panic event created but failed to queue for processing. Please contact support."
)


class IntakeService:
    def __init__(
        self,
        store: RecordStore,
        queue: QueuePublisher,
        id_factory: Callable[[], str] = new_panic_id,
        clock: Callable[[], str] = utc_now,
    ):
        self.store = store
        self.queue = queue
        self.id_factory = id_factory
        self.clock = clock

    def create(self, body: Optional[str], source_ip: Optional[str] = None) -> ApiResponse:
        panic_id = self.id_factory()
        logger.info("intake.start", extra={"panic_id": panic_id, "source_ip": source_ip})

        try:
            request = PanicRequest.parse(body)
        except ValidationError as e:
            logger.warning(
                "intake.validation_failed",
                extra={"panic_id": panic_id, "reason": e.message},
            )
            return message_response(e.status_code, e.message, panic_id)

        record = PanicRecord.received(panic_id, request, source_ip, self.clock())

        # 1) Durable write; nothing is published unless this succeeds
        try:
            self.store.put(record)
        except DependencyWriteError as e:
            logger.error("intake.store_failed", extra={"panic_id": panic_id, "error": str(e)})
            return message_response(500, SAVE_FAILED_MESSAGE, panic_id)
        logger.info("intake.stored", extra={"panic_id": panic_id})

        # 2) Publish the reduced message for the worker
        try:
            message_id = self.queue.publish(record.queue_message())
        except DependencyWriteError as e:
            logger.error(
                "intake.queue_failed_after_store: record is RECEIVED but will not be processed",
                extra={"panic_id": panic_id, "error": str(e)},
            )
            return message_response(500, QUEUE_FAILED_MESSAGE, panic_id)

        logger.info(
            "intake.enqueued",
            extra={"panic_id": panic_id, "message_id": message_id},
        )
        return message_response(201, CREATED_MESSAGE, panic_id)
