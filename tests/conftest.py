from __future__ import annotations

import logging
from concurrent.futures import Future

import pytest

from src.field_bldr.controller import FieldDefinitionController
from src.field_bldr.instrumentation import InstrumentPolicy, LogMode, Signals
from src.field_bldr.types import SubmissionResult, SubmissionStatus


class FakeTransport:
    """Records documents and resolves immediately, on the calling thread."""

    def __init__(self, status: SubmissionStatus = SubmissionStatus.OK) -> None:
        self.sent = []
        self.status = status

    def send(self, document, on_result=None):
        self.sent.append(document)
        result = SubmissionResult(
            status=self.status,
            url="fake://collector",
            status_code=200 if self.status == SubmissionStatus.OK else 503,
            error=None if self.status == SubmissionStatus.OK else "Collector answered HTTP 503",
        )
        future: Future = Future()
        future.set_result(result)
        if on_result is not None:
            on_result(result)
        return future


@pytest.fixture()
def signals():
    return Signals(logging.getLogger("field_bldr.test"), policy=InstrumentPolicy(mode=LogMode.DEBUG))


@pytest.fixture()
def transport():
    return FakeTransport()


@pytest.fixture()
def controller(transport, signals):
    return FieldDefinitionController(transport, signals=signals)


def add_choices(controller: FieldDefinitionController, *values: str) -> None:
    for value in values:
        controller.buffer_choice_input(value)
        controller.add_buffered_choice()
