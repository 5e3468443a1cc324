# src/field_bldr/transport.py

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from typing import Protocol

import httpx

from .errors import TransportError
from .instrumentation import Cat, Signals
from .serialization import encode_document
from .types import SubmissionCallback, SubmissionDocument, SubmissionResult, SubmissionStatus
from .. import config


JSON_HEADERS = {"Content-Type": "application/json"}


class SubmissionTransport(Protocol):
    """Delivers a submission document to the collector without blocking the caller."""

    def send(
        self,
        document: SubmissionDocument,
        on_result: SubmissionCallback | None = None,
    ) -> Future[SubmissionResult]:
        ...


class HttpSubmissionTransport:
    """
    POSTs submission documents to the collector on a worker thread.

    send() returns straight away with a Future; the result (success or
    failure) is handed to on_result from the worker thread and never raised
    back into the caller. Connection errors and timeouts are retried up to
    ``retries`` extra times; HTTP error statuses are not retried.
    """

    def __init__(
        self,
        url: str | None = None,
        *,
        client: httpx.Client | None = None,
        signals: Signals | None = None,
        retries: int | None = None,
        max_workers: int | None = None,
    ) -> None:
        self.url = url or config.COLLECTOR_URL
        self.retries = config.TRANSPORT_RETRIES if retries is None else max(0, retries)
        self.signals = signals or Signals()
        self._owns_client = client is None
        self._client = client or httpx.Client(
            timeout=httpx.Timeout(config.HTTP_TIMEOUT, connect=config.CONNECT_TIMEOUT),
        )
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers or config.TRANSPORT_MAX_WORKERS,
            thread_name_prefix="fb-transport",
        )

    def send(
        self,
        document: SubmissionDocument,
        on_result: SubmissionCallback | None = None,
    ) -> Future[SubmissionResult]:
        body = encode_document(document)
        try:
            future = self._executor.submit(self._deliver, body)
        except RuntimeError as e:
            # Executor already shut down.
            self.signals.emit_signal(Cat.TRANSPORT, f"Submission not queued: {e}", level="error")
            self.signals.counters.inc("transport.failed")
            future = Future()
            future.set_result(SubmissionResult(
                status=SubmissionStatus.FAILED,
                url=self.url,
                attempts=0,
                error=f"transport closed ({e})",
            ))
            if on_result is not None:
                self._notify(on_result, future)
            return future

        self.signals.emit_signal(Cat.TRANSPORT, "Queued submission", url=self.url, bytes=len(body))
        if on_result is not None:
            future.add_done_callback(lambda f: self._notify(on_result, f))
        return future

    def _notify(self, on_result: SubmissionCallback, future: Future[SubmissionResult]) -> None:
        try:
            on_result(future.result())
        except Exception as e:
            self.signals.emit_signal(Cat.TRANSPORT, f"Submission callback raised: {e!r}", level="error")

    def _deliver(self, body: str) -> SubmissionResult:
        attempts = 0
        last_error: TransportError | None = None
        while attempts <= self.retries:
            attempts += 1
            try:
                response = self._post_once(body)
            except TransportError as e:
                last_error = e
                self.signals.emit_signal(
                    Cat.TRANSPORT,
                    f"Submission attempt failed: {e}",
                    level="warning",
                    a=attempts,
                    retryable=e.retryable,
                )
                if not e.retryable:
                    break
                continue

            self.signals.emit_signal(
                Cat.TRANSPORT,
                "Form Submitted",
                a=attempts,
                status=response.status_code,
            )
            self.signals.counters.inc("transport.ok")
            return SubmissionResult(
                status=SubmissionStatus.OK,
                url=self.url,
                status_code=response.status_code,
                attempts=attempts,
                body=response.text,
            )

        self.signals.counters.inc("transport.failed")
        return SubmissionResult(
            status=SubmissionStatus.FAILED,
            url=self.url,
            status_code=last_error.status_code if last_error else None,
            attempts=attempts,
            error=str(last_error) if last_error else "unknown transport failure",
        )

    def _post_once(self, body: str) -> httpx.Response:
        try:
            response = self._client.post(self.url, content=body.encode("utf-8"), headers=JSON_HEADERS)
        except httpx.TransportError as e:
            raise TransportError(f"{type(e).__name__}: {e}", retryable=True) from e

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise TransportError(
                f"Collector answered HTTP {response.status_code}",
                status_code=response.status_code,
            ) from e
        return response

    def close(self) -> None:
        self._executor.shutdown(wait=True)
        if self._owns_client:
            self._client.close()
