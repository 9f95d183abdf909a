from contextlib import contextmanager
from threading import Lock

from paladin.errors import ProtocolError


class Guard:
    """Mutual exclusion between protected regions and resource release.

    Not reentrant: entering twice from the same holder deadlocks.
    """

    def __init__(self) -> None:
        self.lock = Lock()

    def enter(self) -> None:
        self.lock.acquire()

    def leave(self) -> None:
        try:
            self.lock.release()

        except RuntimeError as e:
            raise ProtocolError("leave called without holding the guard") from e

    def locked(self) -> bool:
        return self.lock.locked()

    @contextmanager
    def protect(self):
        self.enter()

        try:
            yield

        finally:
            self.leave()
