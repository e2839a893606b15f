"""Run Dramatiq workers inside tests."""

from __future__ import annotations

import contextlib
import typing as typ

from dramatiq import Worker

if typ.TYPE_CHECKING:
    from dramatiq.brokers.stub import StubBroker


@contextlib.contextmanager
def running_worker(broker: StubBroker) -> typ.Iterator[Worker]:
    """Run a worker over every queue declared on *broker* so far.

    Subscribe handlers before entering: queues declared afterwards are
    not consumed.
    """
    worker = Worker(broker, worker_timeout=100)
    worker.start()
    try:
        yield worker
    finally:
        worker.stop()
