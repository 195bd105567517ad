# src/code_suggestions/core/gate.py
"""
Single-flight gate limiting the server to one in-flight model call.

The gate is not a queue: a caller that finds it busy is expected to answer
immediately with the busy response instead of waiting.
"""

import logging
from contextlib import contextmanager
from enum import Enum

app_logger = logging.getLogger("quart.app")


class GateState(Enum):
    IDLE = "idle"
    BUSY = "busy"


class ProcessingGate:
    """
    Two-state flag shared by all requests of one server process.

    `try_acquire()` and `release()` never await, so on a single event loop
    the check-and-set in `try_acquire()` cannot interleave with another
    request.
    """

    def __init__(self):
        self._state = GateState.IDLE

    @property
    def state(self) -> GateState:
        return self._state

    @property
    def is_busy(self) -> bool:
        return self._state is GateState.BUSY

    def try_acquire(self) -> bool:
        if self._state is GateState.BUSY:
            return False
        self._state = GateState.BUSY
        return True

    def release(self):
        self._state = GateState.IDLE

    @contextmanager
    def hold(self):
        """
        Scoped acquisition. Yields True when the gate was taken; the gate is
        then released on every exit path. Yields False (and releases nothing)
        when another call already holds it.
        """
        acquired = self.try_acquire()
        try:
            yield acquired
        finally:
            if acquired:
                self.release()
                app_logger.debug("Processing gate released.")
