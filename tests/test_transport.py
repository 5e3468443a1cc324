from __future__ import annotations

import json

import httpx
import pytest

from src.field_bldr.controller import FieldDefinitionController
from src.field_bldr.transport import HttpSubmissionTransport
from src.field_bldr.types import SubmissionStatus

DOCUMENT = {
    "labelValue": "Region",
    "typeValue": "Multi-Select",
    "required": False,
    "defaultValue": "Asia",
    "choices": ["Europe", "Asia"],
    "order": "Display Choices in Alphabetical Order",
}

URL = "https://collector.example/fields"


def _transport(handler, signals, *, retries=0):
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return HttpSubmissionTransport(URL, client=client, signals=signals, retries=retries)


def test_posts_json_document(signals):
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, text="ok")

    transport = _transport(handler, signals)
    try:
        result = transport.send(DOCUMENT).result(timeout=5)
    finally:
        transport.close()

    assert result.ok
    assert result.status_code == 200
    assert result.attempts == 1
    assert len(seen) == 1
    request = seen[0]
    assert request.method == "POST"
    assert str(request.url) == URL
    assert request.headers["Content-Type"] == "application/json"
    assert json.loads(request.content) == DOCUMENT


def test_http_error_status_is_reported_not_raised(signals):
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(500)

    transport = _transport(handler, signals, retries=3)
    try:
        result = transport.send(DOCUMENT).result(timeout=5)
    finally:
        transport.close()

    assert result.status == SubmissionStatus.FAILED
    assert result.status_code == 500
    assert "500" in result.error
    assert len(calls) == 1


def test_connection_errors_are_retried(signals):
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        if len(calls) < 3:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(201)

    transport = _transport(handler, signals, retries=2)
    try:
        result = transport.send(DOCUMENT).result(timeout=5)
    finally:
        transport.close()

    assert result.ok
    assert result.attempts == 3
    assert signals.counters.get("transport.ok") == 1


def test_gives_up_after_retries(signals):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    transport = _transport(handler, signals, retries=1)
    try:
        result = transport.send(DOCUMENT).result(timeout=5)
    finally:
        transport.close()

    assert not result.ok
    assert result.attempts == 2
    assert "ConnectError" in result.error
    assert signals.counters.get("transport.failed") == 1


@pytest.mark.parametrize("status", [200, 503])
def test_callback_receives_result(signals, status):
    received = []

    transport = _transport(lambda request: httpx.Response(status), signals)
    try:
        future = transport.send(DOCUMENT, on_result=received.append)
        future.result(timeout=5)
    finally:
        transport.close()

    assert len(received) == 1
    assert received[0].ok is (status == 200)


def test_callback_errors_are_logged_not_raised(signals, caplog):
    def boom(_result):
        raise RuntimeError("view went away")

    transport = _transport(lambda request: httpx.Response(200), signals)
    with caplog.at_level("ERROR", logger="field_bldr.test"):
        try:
            transport.send(DOCUMENT, on_result=boom).result(timeout=5)
        finally:
            transport.close()

    assert "view went away" in caplog.text


def test_send_after_close_reports_failure(signals):
    received = []
    transport = _transport(lambda request: httpx.Response(200), signals)
    transport.close()

    future = transport.send(DOCUMENT, on_result=received.append)

    result = future.result(timeout=0)
    assert not result.ok
    assert result.attempts == 0
    assert "transport closed" in result.error
    assert received == [result]
    assert signals.counters.get("transport.failed") == 1


def test_controller_submit_after_transport_close_does_not_raise(signals):
    transport = _transport(lambda request: httpx.Response(200), signals)
    transport.close()
    controller = FieldDefinitionController(transport, signals=signals)
    controller.set_label("Region")
    controller.set_default_value("Asia")
    results = []

    controller.submit(on_result=results.append)

    assert len(results) == 1
    assert not results[0].ok
