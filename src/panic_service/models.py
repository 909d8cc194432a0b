"""Panic record, request and queue message types."""
import json
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Context, Decimal
from enum import Enum
from typing import Any, Dict, Optional

from panic_service.errors import MalformedMessageError, ValidationError

UNKNOWN_IP = "unknown"

# DynamoDB numbers carry at most 38 significant digits
_NUMBER_CONTEXT = Context(prec=38)

PUBLIC_FIELDS = (
    "panicId",
    "status",
    "receivedAt",
    "processedAt",
    "userId",
    "appIdSource",
    "processingMessage",
)


class PanicStatus(str, Enum):
    RECEIVED = "RECEIVED"
    PROCESSED_SIMPLE = "PROCESSED_SIMPLE"
    COMPLETED = "COMPLETED"
    ERROR = "ERROR"

    @property
    def terminal(self) -> bool:
        return self is not PanicStatus.RECEIVED


def new_panic_id() -> str:
    return str(uuid.uuid4())


def utc_now() -> str:
    """UTC timestamp with millisecond precision, e.g. 2026-10-19T08:15:30.123Z."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _parse_float(text: str) -> Decimal:
    return _NUMBER_CONTEXT.create_decimal(text)


def _parse_int(text: str):
    if len(text.lstrip("-")) <= 38:
        return int(text)
    return _NUMBER_CONTEXT.create_decimal(text)


def _reject_constant(name: str):
    # NaN and Infinity cannot be stored in DynamoDB
    raise ValueError(f"unsupported JSON constant {name}")


def _required_string(payload: Dict[str, Any], name: str) -> str:
    value = payload.get(name)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{name} is required and must be a non-empty string.")
    return value.strip()


@dataclass(frozen=True)
class PanicRequest:
    """Validated POST /panic body. ``raw`` keeps the caller's payload verbatim."""

    user_id: str
    app_id_source: str
    raw: Dict[str, Any]

    @classmethod
    def parse(cls, body: Optional[str]) -> "PanicRequest":
        """
        Validate a raw request body, short-circuiting on the first problem:
        missing body, malformed JSON (or not an object), userId, appIdSource.

        JSON numbers are read as Decimal, rounded to 38 significant digits,
        so the payload can be stored in DynamoDB as-is.
        """
        if body is None or body == "":
            raise ValidationError("Request body is required.")

        try:
            payload = json.loads(
                body,
                parse_float=_parse_float,
                parse_int=_parse_int,
                parse_constant=_reject_constant,
            )
        except (TypeError, ValueError):
            raise ValidationError("Invalid JSON format in request body.")

        if not isinstance(payload, dict):
            raise ValidationError("Invalid JSON format in request body.")

        user_id = _required_string(payload, "userId")
        app_id_source = _required_string(payload, "appIdSource")
        return cls(user_id=user_id, app_id_source=app_id_source, raw=payload)


@dataclass
class PanicRecord:
    panic_id: str
    status: PanicStatus
    received_at: str
    user_id: str
    app_id_source: str
    ip_address: str = UNKNOWN_IP
    initial_payload: Dict[str, Any] = field(default_factory=dict)
    processed_at: Optional[str] = None
    processing_message: Optional[str] = None

    @classmethod
    def received(
        cls,
        panic_id: str,
        request: PanicRequest,
        ip_address: Optional[str],
        received_at: str,
    ) -> "PanicRecord":
        return cls(
            panic_id=panic_id,
            status=PanicStatus.RECEIVED,
            received_at=received_at,
            user_id=request.user_id,
            app_id_source=request.app_id_source,
            ip_address=ip_address or UNKNOWN_IP,
            initial_payload=request.raw,
        )

    def to_item(self) -> Dict[str, Any]:
        """Attribute map as stored in DynamoDB; unset optional fields are omitted."""
        item = {
            "panicId": self.panic_id,
            "status": self.status.value,
            "receivedAt": self.received_at,
            "userId": self.user_id,
            "appIdSource": self.app_id_source,
            "ipAddress": self.ip_address,
            "initialPayload": self.initial_payload,
        }
        if self.processed_at is not None:
            item["processedAt"] = self.processed_at
        if self.processing_message is not None:
            item["processingMessage"] = self.processing_message
        return item

    @classmethod
    def from_item(cls, item: Dict[str, Any]) -> "PanicRecord":
        return cls(
            panic_id=item["panicId"],
            status=PanicStatus(item["status"]),
            received_at=item.get("receivedAt"),
            user_id=item.get("userId"),
            app_id_source=item.get("appIdSource"),
            ip_address=item.get("ipAddress", UNKNOWN_IP),
            initial_payload=item.get("initialPayload") or {},
            processed_at=item.get("processedAt"),
            processing_message=item.get("processingMessage"),
        )

    def public_view(self) -> Dict[str, Any]:
        """Lookup projection: never exposes initialPayload or ipAddress; unset fields are left out."""
        item = self.to_item()
        return {name: item[name] for name in PUBLIC_FIELDS if item.get(name) is not None}

    def queue_message(self) -> "QueueMessage":
        return QueueMessage(
            panic_id=self.panic_id,
            user_id=self.user_id,
            app_id_source=self.app_id_source,
            ip_address=self.ip_address,
        )


@dataclass(frozen=True)
class QueueMessage:
    """Reduced projection of a PanicRecord sent to the processing queue."""

    panic_id: str
    user_id: Optional[str] = None
    app_id_source: Optional[str] = None
    ip_address: Optional[str] = None

    def to_json(self) -> str:
        return json.dumps(
            {
                "panicId": self.panic_id,
                "userId": self.user_id,
                "appIdSource": self.app_id_source,
                "ipAddress": self.ip_address,
            }
        )

    @classmethod
    def from_json(cls, raw: Optional[str], message_id: Optional[str] = None) -> "QueueMessage":
        try:
            data = json.loads(raw or "")
        except (TypeError, ValueError):
            raise MalformedMessageError("message body is not valid JSON", message_id)

        if not isinstance(data, dict):
            raise MalformedMessageError("message body is not a JSON object", message_id)

        panic_id = data.get("panicId")
        if not isinstance(panic_id, str) or not panic_id.strip():
            raise MalformedMessageError("missing or invalid panicId", message_id)

        return cls(
            panic_id=panic_id.strip(),
            user_id=data.get("userId"),
            app_id_source=data.get("appIdSource"),
            ip_address=data.get("ipAddress"),
        )
