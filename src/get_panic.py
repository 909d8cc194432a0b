from typing import Optional

from panic_service.clients import get_client
from panic_service.config import Settings, load_settings
from panic_service.errors import ConfigurationError
from panic_service.logger import get_logger
from panic_service.lookup import LookupService
from panic_service.responses import MISSING_CONFIGURATION, message_response
from panic_service.store import RecordStore

logger = get_logger("get_panic")

_service: Optional[LookupService] = None
_service_settings: Optional[Settings] = None


def _get_service(settings: Settings) -> LookupService:
    global _service, _service_settings
    if _service is None or _service_settings != settings:
        _service = LookupService(
            RecordStore(get_client("dynamodb", settings.region), settings.table_name)
        )
        _service_settings = settings
    return _service


def lambda_handler(event, context):
    panic_id = (event.get("pathParameters") or {}).get("id")
    logger.info("get_panic.lambda_start", extra={"panic_id": panic_id})

    try:
        settings = load_settings(require_table=True)
    except ConfigurationError as e:
        logger.error("get_panic.env_error", extra={"missing": e.missing})
        return message_response(500, MISSING_CONFIGURATION).to_proxy()

    try:
        response = _get_service(settings).get(panic_id)
    except Exception:
        logger.exception("get_panic.unhandled_error", extra={"panic_id": panic_id})
        return message_response(500, "Failed to retrieve panic event data.").to_proxy()

    return response.to_proxy()
