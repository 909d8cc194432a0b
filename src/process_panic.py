from typing import Optional

from panic_service.clients import get_client
from panic_service.config import Settings, load_settings
from panic_service.logger import get_logger
from panic_service.store import RecordStore
from panic_service.worker import ProcessingWorker

logger = get_logger("process_panic")

_worker: Optional[ProcessingWorker] = None
_worker_settings: Optional[Settings] = None


def _get_worker(settings: Settings) -> ProcessingWorker:
    global _worker, _worker_settings
    if _worker is None or _worker_settings != settings:
        store = RecordStore(get_client("dynamodb", settings.region), settings.table_name)
        _worker = ProcessingWorker(store)
        _worker_settings = settings
    return _worker


def lambda_handler(event, context):
    records = event.get("Records", [])
    logger.info("process_panic.lambda_start: received %d records", len(records))

    # Missing configuration fails the whole batch; ConfigurationError propagates
    # so SQS retries every message and eventually dead-letters them.
    settings = load_settings(require_table=True)

    failed_ids = _get_worker(settings).process_batch(records)
    if failed_ids:
        logger.warning(
            "process_panic.partial_failure: %d of %d records will be retried",
            len(failed_ids),
            len(records),
            extra={"failed_message_ids": failed_ids},
        )

    # SQS partial batch response: only these messages stay on the queue
    return {"batchItemFailures": [{"itemIdentifier": mid} for mid in failed_ids]}
