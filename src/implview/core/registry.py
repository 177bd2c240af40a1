from __future__ import annotations

import logging
import threading
from collections import deque
from dataclasses import dataclass, field
from typing import Callable, Generic, TypeVar


logger = logging.getLogger(__name__)

P = TypeVar("P")
Consumer = Callable[[P], object]


class ConsumerAlreadyRegisteredError(RuntimeError):
    """Raised when a second consumer is registered on the same registry."""


@dataclass(frozen=True)
class Pending(Generic[P]):
    """No consumer yet: payloads wait in `buffer` in arrival order."""

    buffer: list[P] = field(default_factory=list)


@dataclass(frozen=True)
class Active(Generic[P]):
    consumer: Consumer[P]


class ImplementorRegistry(Generic[P]):
    """Hands submitted payloads to a single consumer, whenever it shows up.

    Data tables and the consumer that renders them load independently, so
    either one may arrive first:

    - before a consumer is registered, `submit()` buffers the payload;
    - `register_consumer()` flips the registry to active and replays the
      buffer in arrival order;
    - afterwards `submit()` delivers synchronously.

    The registry never inspects payloads and never catches exceptions raised
    by the consumer.
    """

    def __init__(self, *, buffer: list[P] | None = None, consumer: Consumer[P] | None = None) -> None:
        self._lock = threading.RLock()
        self._state: Pending[P] | Active[P] = Pending(buffer=list(buffer) if buffer is not None else [])
        # Payloads accepted for delivery but not yet handed to the consumer.
        self._outbox: deque[P] = deque()
        self._delivering = False
        if consumer is not None:
            self.register_consumer(consumer)

    @property
    def state(self) -> Pending[P] | Active[P]:
        """Snapshot of the current state; the pending buffer is copied."""
        with self._lock:
            state = self._state
            if isinstance(state, Pending):
                return Pending(buffer=list(state.buffer))
            return state

    @property
    def is_active(self) -> bool:
        with self._lock:
            return isinstance(self._state, Active)

    def pending_count(self) -> int:
        with self._lock:
            if isinstance(self._state, Pending):
                return len(self._state.buffer)
            return len(self._outbox)

    def submit(self, payload: P) -> None:
        with self._lock:
            state = self._state
            if isinstance(state, Pending):
                state.buffer.append(payload)
                logger.debug("buffered payload (%d pending)", len(state.buffer))
                return
            self._outbox.append(payload)
            self._deliver_locked(state.consumer)

    def register_consumer(self, consumer: Consumer[P]) -> None:
        with self._lock:
            active = self._activate_locked(consumer)
            self._deliver_locked(active.consumer)

    def _activate_locked(self, consumer: Consumer[P]) -> Active[P]:
        state = self._state
        if isinstance(state, Active):
            raise ConsumerAlreadyRegisteredError("consumer already registered")
        active = Active(consumer=consumer)
        self._outbox.extend(state.buffer)
        self._state = active
        logger.debug("consumer registered, replaying %d buffered payload(s)", len(state.buffer))
        return active

    def _deliver_locked(self, consumer: Consumer[P]) -> None:
        # A consumer that submits while being called re-enters here; its
        # payload is queued behind the ones already waiting.
        if self._delivering:
            return
        self._delivering = True
        try:
            while self._outbox:
                consumer(self._outbox.popleft())
        finally:
            self._delivering = False
