"""Bounded producer/consumer runner for multi-file jobs."""

import queue
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Generic, Iterable, Optional, TypeVar

from nofmt.log import get_logger

logger = get_logger(__name__)

T = TypeVar("T")
R = TypeVar("R")

_DONE = object()


@dataclass
class Outcome(Generic[T, R]):
    """Result of running the worker on one item.

    Attributes:
        item: The work item
        result: Worker return value, if it succeeded
        error: Exception raised by the worker, if it failed
    """

    item: T
    result: Optional[R] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def run_pool(
    items: Iterable[T],
    worker: Callable[[T], R],
    jobs: int = 4,
    queue_size: int = 16,
    on_outcome: Optional[Callable[[Outcome[T, R]], None]] = None,
) -> list[Outcome[T, R]]:
    """Run `worker` over `items` on `jobs` threads.

    A single producer thread iterates `items` into a bounded queue, so a
    slow pool holds back discovery instead of buffering everything. A
    failing item is recorded in its Outcome and never stops the others.

    Args:
        items: Work items; iterated on the producer thread
        worker: Called once per item on a consumer thread
        jobs: Number of consumer threads
        queue_size: Maximum number of items waiting in the queue
        on_outcome: Called with each Outcome in production order, as soon
            as it and every earlier item have finished; calls are
            serialized

    Returns:
        Outcomes in the order the items were produced

    Raises:
        Exception: Whatever iterating `items` or the first failing
            `on_outcome` call raised, after the consumers have finished
            every item produced
    """
    jobs = max(1, jobs)
    work: queue.Queue = queue.Queue(maxsize=max(1, queue_size))
    outcomes: dict[int, Outcome[T, R]] = {}
    callback_errors: list[Exception] = []
    next_index = 0
    lock = threading.Lock()

    def produce() -> None:
        try:
            for index, item in enumerate(items):
                work.put((index, item))
        finally:
            for _ in range(jobs):
                work.put(_DONE)

    def release() -> None:
        # Hand out the contiguous run of finished outcomes; caller holds lock
        nonlocal next_index
        while next_index in outcomes:
            outcome = outcomes[next_index]
            next_index += 1
            if not on_outcome:
                continue
            try:
                on_outcome(outcome)
            except Exception as e:
                logger.error("reporting %s failed: %s", outcome.item, e)
                callback_errors.append(e)

    def consume() -> None:
        while True:
            task = work.get()
            if task is _DONE:
                return
            index, item = task
            try:
                outcome = Outcome(item=item, result=worker(item))
            except Exception as e:
                logger.debug("%s failed: %s", item, e)
                outcome = Outcome(item=item, error=e)
            with lock:
                outcomes[index] = outcome
                release()

    with ThreadPoolExecutor(max_workers=jobs + 1) as pool:
        producer = pool.submit(produce)
        consumers = [pool.submit(consume) for _ in range(jobs)]
        for consumer in consumers:
            consumer.result()
        producer.result()

    if callback_errors:
        raise callback_errors[0]
    return [outcomes[index] for index in sorted(outcomes)]
