"""Processing worker: advances queued panic records out of RECEIVED.

The update is a deterministic function of the message, so a redelivered
message lands the record in the same status. If processing ever grows
external calls, redelivery safety has to be re-checked.
"""
from typing import Any, Callable, Dict, Iterable, List

from panic_service.errors import (
    DependencyUpdateError,
    MalformedMessageError,
    TransitionRejectedError,
)
from panic_service.logger import get_logger
from panic_service.models import PanicStatus, QueueMessage, utc_now
from panic_service.store import RecordStore

logger = get_logger("worker")


def processing_message(processed_at: str) -> str:
    return f"Successfully processed by panic worker at {processed_at}."


class ProcessingWorker:
    def __init__(
        self,
        store: RecordStore,
        clock: Callable[[], str] = utc_now,
        target_status: PanicStatus = PanicStatus.PROCESSED_SIMPLE,
    ):
        if not target_status.terminal:
            raise ValueError(f"target_status must be terminal, got {target_status.value}")
        self.store = store
        self.clock = clock
        self.target_status = target_status

    def process_record(self, record: Dict[str, Any]) -> None:
        """
        Process one SQS record.

        Raises MalformedMessageError for bodies that can never succeed,
        TransitionRejectedError when the record is missing or already in
        another terminal state, and DependencyUpdateError when DynamoDB fails.
        """
        message_id = record.get("messageId", "<no-id>")
        message = QueueMessage.from_json(record.get("body"), message_id)

        processed_at = self.clock()
        logger.info(
            "worker.processing",
            extra={"panic_id": message.panic_id, "message_id": message_id},
        )

        self.store.partial_update(
            message.panic_id,
            self.target_status,
            processed_at,
            processing_message(processed_at),
        )
        logger.info(
            "worker.updated",
            extra={
                "panic_id": message.panic_id,
                "message_id": message_id,
                "status": self.target_status.value,
            },
        )

    def process_batch(self, records: Iterable[Dict[str, Any]]) -> List[str]:
        """Process every record; return the messageIds that must be redelivered."""
        failures = []
        for rec in records:
            message_id = rec.get("messageId", "<no-id>")
            try:
                self.process_record(rec)
            except MalformedMessageError as e:
                # Retrying cannot fix the content; let SQS delete it
                logger.error(
                    "worker.malformed_message",
                    extra={
                        "message_id": message_id,
                        "reason": e.reason,
                        "body_preview": str(rec.get("body"))[:200],
                    },
                )
            except TransitionRejectedError as e:
                logger.warning(
                    "worker.transition_rejected",
                    extra={"message_id": message_id, "panic_id": e.panic_id},
                )
            except DependencyUpdateError as e:
                logger.error(
                    "worker.update_failed",
                    extra={"message_id": message_id, "panic_id": e.panic_id, "error": str(e)},
                )
                if "messageId" not in rec:
                    # SQS cannot redeliver a record it cannot identify; fail the whole batch
                    raise
                failures.append(message_id)
        return failures
