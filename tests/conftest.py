import json
import os

import pytest
from botocore.exceptions import ClientError

from panic_service.queue import QueuePublisher
from panic_service.store import RecordStore

EVENTS_DIR = os.path.join(os.path.dirname(__file__), "events")

TABLE_NAME = "PanicEventsTable-Test"
QUEUE_URL = "https://sqs.us-east-1.amazonaws.com/123456789012/PanicProcessingQueue-Test"


def load_event(name):
    with open(os.path.join(EVENTS_DIR, name), "r", encoding="utf-8") as f:
        return json.load(f)


def client_error(code, operation):
    return ClientError({"Error": {"Code": code, "Message": f"stubbed {code}"}}, operation)


class StubDynamoDB:
    """
    Stand-in for boto3.client("dynamodb") holding items in their wire format.

    update_item evaluates only the condition RecordStore sends:
    the item must exist with status in (:received, :status).
    """

    def __init__(self):
        self.items = {}
        self.calls = []
        self.fail_on = {}

    def _maybe_fail(self, op):
        if op in self.fail_on:
            raise self.fail_on[op]

    def put_item(self, TableName, Item, **kwargs):
        self.calls.append(("put_item", {"TableName": TableName, "Item": Item, **kwargs}))
        self._maybe_fail("put_item")
        self.items[Item["panicId"]["S"]] = dict(Item)
        return {}

    def get_item(self, TableName, Key, **kwargs):
        self.calls.append(("get_item", {"TableName": TableName, "Key": Key, **kwargs}))
        self._maybe_fail("get_item")
        item = self.items.get(Key["panicId"]["S"])
        return {"Item": dict(item)} if item else {}

    def update_item(self, TableName, Key, ExpressionAttributeValues, **kwargs):
        self.calls.append(
            (
                "update_item",
                {
                    "TableName": TableName,
                    "Key": Key,
                    "ExpressionAttributeValues": ExpressionAttributeValues,
                    **kwargs,
                },
            )
        )
        self._maybe_fail("update_item")
        item = self.items.get(Key["panicId"]["S"])
        allowed = {
            ExpressionAttributeValues[":received"]["S"],
            ExpressionAttributeValues[":status"]["S"],
        }
        if item is None or item["status"]["S"] not in allowed:
            raise client_error("ConditionalCheckFailedException", "UpdateItem")
        item["status"] = ExpressionAttributeValues[":status"]
        item["processedAt"] = ExpressionAttributeValues[":processedAt"]
        item["processingMessage"] = ExpressionAttributeValues[":processingMessage"]
        return {"Attributes": {}}

    def count(self, op):
        return sum(1 for name, _ in self.calls if name == op)


class StubSQS:
    def __init__(self):
        self.sent = []
        self.error = None

    def send_message(self, QueueUrl, MessageBody, **kwargs):
        if self.error is not None:
            raise self.error
        self.sent.append({"QueueUrl": QueueUrl, "MessageBody": MessageBody, **kwargs})
        return {"MessageId": f"msg-{len(self.sent)}"}


@pytest.fixture
def ddb():
    return StubDynamoDB()


@pytest.fixture
def sqs():
    return StubSQS()


@pytest.fixture
def store(ddb):
    return RecordStore(ddb, TABLE_NAME)


@pytest.fixture
def queue(sqs):
    return QueuePublisher(sqs, QUEUE_URL)


@pytest.fixture
def aws_env(monkeypatch):
    monkeypatch.setenv("DYNAMODB_TABLE_NAME", TABLE_NAME)
    monkeypatch.setenv("SQS_QUEUE_URL", QUEUE_URL)
    monkeypatch.setenv("AWS_REGION", "us-east-1")


@pytest.fixture
def no_aws_env(monkeypatch):
    monkeypatch.delenv("DYNAMODB_TABLE_NAME", raising=False)
    monkeypatch.delenv("SQS_QUEUE_URL", raising=False)
