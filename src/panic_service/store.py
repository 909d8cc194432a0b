"""DynamoDB-backed record store for panic records."""
from decimal import DecimalException
from typing import Any, Dict, Optional

from boto3.dynamodb.types import TypeDeserializer, TypeSerializer
from botocore.exceptions import BotoCoreError, ClientError

from panic_service.errors import (
    DependencyReadError,
    DependencyUpdateError,
    DependencyWriteError,
    TransitionRejectedError,
)
from panic_service.models import PanicRecord, PanicStatus

_serializer = TypeSerializer()
_deserializer = TypeDeserializer()


def _serialize(item: Dict[str, Any]) -> Dict[str, Dict]:
    return {k: _serializer.serialize(v) for k, v in item.items()}


def _deserialize(item: Dict[str, Dict]) -> Dict[str, Any]:
    return {k: _deserializer.deserialize(v) for k, v in item.items()}


def _is_conditional_check_failed(exc: ClientError) -> bool:
    return exc.response.get("Error", {}).get("Code") == "ConditionalCheckFailedException"


class RecordStore:
    """
    Panic records keyed by ``panicId``.

    Wraps a low-level ``boto3.client("dynamodb")``; callers inject the client
    so tests can pass a stub.
    """

    def __init__(self, client, table_name: str):
        self.client = client
        self.table_name = table_name

    def put(self, record: PanicRecord) -> None:
        try:
            item = _serialize(record.to_item())
        except (DecimalException, TypeError) as e:
            # Numbers outside DynamoDB's range cannot be stored
            raise DependencyWriteError("store.put", record.panic_id, f"unstorable item: {e}") from e

        try:
            self.client.put_item(TableName=self.table_name, Item=item)
        except (BotoCoreError, ClientError) as e:
            raise DependencyWriteError("store.put", record.panic_id, str(e)) from e

    def get(self, panic_id: str) -> Optional[PanicRecord]:
        try:
            resp = self.client.get_item(
                TableName=self.table_name,
                Key={"panicId": {"S": panic_id}},
                ConsistentRead=True,
            )
        except (BotoCoreError, ClientError) as e:
            raise DependencyReadError("store.get", panic_id, str(e)) from e

        item = resp.get("Item")
        if not item:
            return None
        try:
            return PanicRecord.from_item(_deserialize(item))
        except (KeyError, ValueError) as e:
            raise DependencyReadError("store.get", panic_id, f"unreadable item: {e}") from e

    def partial_update(
        self,
        panic_id: str,
        status: PanicStatus,
        processed_at: str,
        processing_message: str,
    ) -> None:
        """
        Set status, processedAt and processingMessage without reading first.

        Only applies to an existing record whose status is RECEIVED or already
        ``status``, so repeating the same update converges and status never
        moves backwards.
        """
        try:
            self.client.update_item(
                TableName=self.table_name,
                Key={"panicId": {"S": panic_id}},
                UpdateExpression=(
                    "SET #status = :status, #processedAt = :processedAt, "
                    "#processingMessage = :processingMessage"
                ),
                ConditionExpression=(
                    "attribute_exists(#panicId) AND #status IN (:received, :status)"
                ),
                ExpressionAttributeNames={
                    "#panicId": "panicId",
                    "#status": "status",
                    "#processedAt": "processedAt",
                    "#processingMessage": "processingMessage",
                },
                ExpressionAttributeValues={
                    ":status": {"S": status.value},
                    ":received": {"S": PanicStatus.RECEIVED.value},
                    ":processedAt": {"S": processed_at},
                    ":processingMessage": {"S": processing_message},
                },
                ReturnValues="UPDATED_NEW",
            )
        except ClientError as e:
            if _is_conditional_check_failed(e):
                raise TransitionRejectedError(panic_id, status.value) from e
            raise DependencyUpdateError("store.partial_update", panic_id, str(e)) from e
        except BotoCoreError as e:
            raise DependencyUpdateError("store.partial_update", panic_id, str(e)) from e
