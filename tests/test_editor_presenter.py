from __future__ import annotations

import threading

import pytest

from src.field_bldr.controller import FieldDefinitionController
from src.field_bldr.editor_presenter import (
    CANCEL_MESSAGE,
    SUBMITTED_MESSAGE,
    FieldBuilderPresenter,
    QueuedDispatch,
)
from src.field_bldr.types import SubmissionStatus

from conftest import FakeTransport


@pytest.fixture()
def alerts():
    return []


@pytest.fixture()
def presenter(controller, alerts):
    return FieldBuilderPresenter(controller, alert=alerts.append)


def test_inputs_forward_to_controller(presenter, controller):
    presenter.on_label_changed("Region")
    presenter.on_default_changed("Asia")
    presenter.on_required_toggled(True)
    presenter.on_choice_typed("Europe")

    snap = controller.snapshot
    assert (snap.label, snap.default_value, snap.required, snap.pending_choice_input) == (
        "Region",
        "Asia",
        True,
        "Europe",
    )


def test_add_and_remove_choice(presenter, controller, alerts):
    presenter.on_choice_typed("Europe")
    assert presenter.on_add_choice() is True
    assert controller.snapshot.choices == ("Europe",)

    assert presenter.on_remove_choice() is True
    assert presenter.on_remove_choice() is False
    assert alerts == ["No more choices to remove"]


def test_rejected_choice_alerts_with_message(presenter, alerts):
    presenter.on_choice_typed("  ")
    assert presenter.on_add_choice() is False
    assert alerts == ["Blank or null input not permitted for field choices."]


def test_save_success_alerts_submitted(presenter, alerts, transport):
    presenter.on_label_changed("Region")
    presenter.on_default_changed("Asia")

    assert presenter.on_save() is True
    assert alerts == [SUBMITTED_MESSAGE]
    assert presenter.last_result.ok
    assert len(transport.sent) == 1


def test_save_validation_failure_alerts(presenter, alerts, transport):
    assert presenter.on_save() is False
    assert alerts == ["Submit error: 'Field Label' field is required. Form not submitted."]
    assert transport.sent == []


def test_transport_failure_alerts(signals, alerts):
    controller = FieldDefinitionController(FakeTransport(SubmissionStatus.FAILED), signals=signals)
    presenter = FieldBuilderPresenter(controller, alert=alerts.append)
    presenter.on_label_changed("Region")
    presenter.on_default_changed("Asia")

    assert presenter.on_save() is True
    assert len(alerts) == 1
    assert alerts[0].startswith("Submit error: Collector answered HTTP 503")


def test_results_go_through_dispatch(controller, alerts):
    queued = []
    presenter = FieldBuilderPresenter(controller, alert=alerts.append, dispatch=queued.append)
    presenter.on_label_changed("Region")
    presenter.on_default_changed("Asia")
    presenter.on_save()

    assert alerts == []
    queued.pop()()
    assert alerts == [SUBMITTED_MESSAGE]


def test_clear_resets(presenter, controller):
    presenter.on_label_changed("Region")
    presenter.on_clear()
    assert controller.snapshot.label == ""


def test_cancel_without_close_hook_shows_notice(presenter, alerts):
    presenter.on_cancel()
    assert alerts == [CANCEL_MESSAGE]


def test_cancel_with_close_hook(controller, alerts):
    closed = []
    presenter = FieldBuilderPresenter(controller, alert=alerts.append, on_close=lambda: closed.append(True))
    presenter.on_cancel()
    assert closed == [True]
    assert alerts == []


def test_load_spec_reports_rejected_choices(presenter, controller, alerts, tmp_path):
    path = tmp_path / "spec.yml"
    path.write_text("field:\n  label: Region\n  default: Asia\n  choices: [Europe, Europe]\n", encoding="utf-8")

    assert presenter.load_spec(path) is True
    assert controller.snapshot.choices == ("Europe",)
    assert len(alerts) == 1
    assert "'Europe'" in alerts[0]


def test_load_missing_spec_alerts(presenter, alerts, tmp_path):
    assert presenter.load_spec(tmp_path / "nope.yml") is False
    assert alerts[0].startswith("Could not load field spec")


def test_load_non_utf8_spec_alerts_and_keeps_state(presenter, controller, alerts, tmp_path):
    presenter.on_label_changed("Unsaved")
    path = tmp_path / "latin1.yml"
    path.write_bytes(b"field:\n  label: R\xe9gion\n")

    assert presenter.load_spec(path) is False
    assert len(alerts) == 1
    assert alerts[0].startswith("Could not load field spec")
    assert "not UTF-8 text" in alerts[0]
    assert controller.snapshot.label == "Unsaved"


def test_queued_dispatch_runs_callbacks_on_draining_thread():
    dispatch = QueuedDispatch()
    ran_on = []

    worker = threading.Thread(target=lambda: dispatch(lambda: ran_on.append(threading.get_ident())))
    worker.start()
    worker.join(timeout=5)

    assert ran_on == []
    assert dispatch.drain() == 1
    assert ran_on == [threading.get_ident()]
    assert dispatch.drain() == 0


def test_results_from_worker_thread_wait_for_drain(controller, alerts):
    dispatch = QueuedDispatch()
    presenter = FieldBuilderPresenter(controller, alert=alerts.append, dispatch=dispatch)
    presenter.on_label_changed("Region")
    presenter.on_default_changed("Asia")

    worker = threading.Thread(target=presenter.on_save)
    worker.start()
    worker.join(timeout=5)

    assert alerts == []
    assert dispatch.drain() == 1
    assert alerts == [SUBMITTED_MESSAGE]
