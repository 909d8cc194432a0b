import base64
import json
from typing import Optional

from panic_service.clients import get_client
from panic_service.config import Settings, load_settings
from panic_service.errors import ConfigurationError
from panic_service.intake import IntakeService
from panic_service.logger import get_logger
from panic_service.queue import QueuePublisher
from panic_service.responses import MISSING_CONFIGURATION, message_response
from panic_service.store import RecordStore

logger = get_logger("create_panic")

# Reuse the service (and its AWS clients) across invocations
_service: Optional[IntakeService] = None
_service_settings: Optional[Settings] = None


def _get_service(settings: Settings) -> IntakeService:
    global _service, _service_settings
    if _service is None or _service_settings != settings:
        store = RecordStore(get_client("dynamodb", settings.region), settings.table_name)
        queue = QueuePublisher(get_client("sqs", settings.region), settings.queue_url)
        _service = IntakeService(store, queue)
        _service_settings = settings
    return _service


def _extract_body(event: dict) -> Optional[str]:
    """
    Return the raw request body string.

    - For API Gateway proxy events: event["body"], base64-decoded when flagged.
    - For direct tests: the body may already be a dict.
    """
    body = event.get("body")
    if isinstance(body, dict):
        return json.dumps(body)
    if body and event.get("isBase64Encoded"):
        try:
            return base64.b64decode(body).decode("utf-8")
        except (ValueError, UnicodeDecodeError):
            # Undecodable bodies fail JSON validation downstream
            return body
    return body


def _source_ip(event: dict) -> Optional[str]:
    ctx = event.get("requestContext") or {}
    # REST API (v1) and HTTP API (v2) put the caller address in different places
    return (ctx.get("identity") or {}).get("sourceIp") or (ctx.get("http") or {}).get("sourceIp")


def lambda_handler(event, context):
    logger.info(
        "create_panic.lambda_start",
        extra={"request_id": getattr(context, "aws_request_id", None)},
    )

    # 1) Load environment configuration lazily
    try:
        settings = load_settings(require_table=True, require_queue=True)
    except ConfigurationError as e:
        # Misconfiguration is a 500, not a 4xx
        logger.error("create_panic.env_error", extra={"missing": e.missing})
        return message_response(500, MISSING_CONFIGURATION).to_proxy()

    # 2) Validate, store, enqueue; the service answers every expected failure itself
    try:
        response = _get_service(settings).create(_extract_body(event), _source_ip(event))
    except Exception:
        logger.exception("create_panic.unhandled_error")
        return message_response(500, "Internal server error.").to_proxy()

    return response.to_proxy()
