import json

import pytest

from conftest import client_error
from panic_service.intake import (
    CREATED_MESSAGE,
    QUEUE_FAILED_MESSAGE,
    SAVE_FAILED_MESSAGE,
    IntakeService,
)
from panic_service.lookup import LookupService


@pytest.fixture
def intake(store, queue):
    return IntakeService(store, queue)


def test_valid_event_is_stored_then_queued(intake, ddb, sqs):
    body = json.dumps(
        {
            "userId": " user-123 ",
            "appIdSource": "test-app",
            "ipAddress": "192.168.1.1",
            "customField": "customValue",
        }
    )

    resp = intake.create(body, "123.123.123.123")

    assert resp.status_code == 201
    assert resp.body["message"] == CREATED_MESSAGE
    panic_id = resp.body["panicId"]

    item = ddb.items[panic_id]
    assert item["status"] == {"S": "RECEIVED"}
    assert item["userId"] == {"S": "user-123"}
    assert item["ipAddress"] == {"S": "123.123.123.123"}
    assert item["initialPayload"]["M"]["customField"] == {"S": "customValue"}
    assert "receivedAt" in item

    assert len(sqs.sent) == 1
    assert json.loads(sqs.sent[0]["MessageBody"]) == {
        "panicId": panic_id,
        "userId": "user-123",
        "appIdSource": "test-app",
        "ipAddress": "123.123.123.123",
    }


def test_panic_ids_are_distinct_and_visible_as_received(intake, store):
    body = '{"userId": "u1", "appIdSource": "app1"}'
    first = intake.create(body).body["panicId"]
    second = intake.create(body).body["panicId"]

    assert first != second
    lookup = LookupService(store)
    for panic_id in (first, second):
        resp = lookup.get(panic_id)
        assert resp.status_code == 200
        assert resp.body["status"] == "RECEIVED"


def test_missing_transport_ip_is_unknown(intake, ddb):
    panic_id = intake.create('{"userId": "u1", "appIdSource": "app1"}', None).body["panicId"]
    assert ddb.items[panic_id]["ipAddress"] == {"S": "unknown"}


@pytest.mark.parametrize(
    "body",
    [
        None,
        "",
        "{oops",
        '{"appIdSource": "app1"}',
        '{"userId": "", "appIdSource": "app1"}',
        '{"userId": "   ", "appIdSource": "app1"}',
        '{"userId": "u1"}',
        '{"userId": "u1", "appIdSource": " "}',
    ],
)
def test_invalid_requests_touch_nothing(intake, ddb, sqs, body):
    resp = intake.create(body, "1.1.1.1")

    assert resp.status_code == 400
    assert resp.body["message"]
    assert resp.body["panicId"]
    assert ddb.calls == []
    assert sqs.sent == []


def test_store_failure_skips_publish(intake, ddb, sqs):
    ddb.fail_on["put_item"] = client_error("InternalServerError", "PutItem")

    resp = intake.create('{"userId": "u1", "appIdSource": "app1"}')

    assert resp.status_code == 500
    assert resp.body["message"] == SAVE_FAILED_MESSAGE
    assert sqs.sent == []
    assert ddb.items == {}


def test_publish_failure_after_store_reports_partial_failure(intake, ddb, sqs):
    sqs.error = client_error("ServiceUnavailable", "SendMessage")

    resp = intake.create('{"userId": "u1", "appIdSource": "app1"}')

    assert resp.status_code == 500
    assert resp.body["message"] == QUEUE_FAILED_MESSAGE
    panic_id = resp.body["panicId"]
    # Not rolled back
    assert ddb.items[panic_id]["status"] == {"S": "RECEIVED"}


def test_injected_id_factory_and_clock(store, queue, ddb):
    intake = IntakeService(
        store,
        queue,
        id_factory=lambda: "fixed-id",
        clock=lambda: "2026-10-19T08:00:00.000Z",
    )

    resp = intake.create('{"userId": "u1", "appIdSource": "app1"}')

    assert resp.body["panicId"] == "fixed-id"
    assert ddb.items["fixed-id"]["receivedAt"] == {"S": "2026-10-19T08:00:00.000Z"}


@pytest.mark.parametrize(
    "extra",
    [
        {"flag": True, "nothing": None, "nested": {"a": [1, "two", 3.5]}},
        {"tags": [], "meta": {}},
    ],
)
def test_extra_fields_of_any_json_type_are_kept(intake, store, extra):
    body = json.dumps({"userId": "u1", "appIdSource": "app1", **extra})

    resp = intake.create(body)

    assert resp.status_code == 201
    payload = store.get(resp.body["panicId"]).initial_payload
    for key in extra:
        assert key in payload


def test_long_numbers_are_rounded_and_stored(intake, store):
    body = (
        '{"userId": "u1", "appIdSource": "app1",'
        ' "lat": 3.14159265358979323846264338327950288419716939937510,'
        ' "count": 123456789012345678901234567890123456789012345678901}'
    )

    resp = intake.create(body)

    assert resp.status_code == 201
    payload = store.get(resp.body["panicId"]).initial_payload
    assert str(payload["lat"]).startswith("3.14159265358979323846")


@pytest.mark.parametrize("number", ["1e400", "-1e400", "1e-400"])
def test_unstorable_number_is_a_save_failure(intake, ddb, sqs, number):
    body = '{"userId": "u1", "appIdSource": "app1", "n": %s}' % number

    resp = intake.create(body)

    assert resp.status_code == 500
    assert resp.body["message"] == SAVE_FAILED_MESSAGE
    assert resp.body["panicId"]
    assert ddb.items == {}
    assert sqs.sent == []
