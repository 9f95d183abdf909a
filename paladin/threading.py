from contextlib import contextmanager
from queue import Queue, Full
from threading import Lock

from paladin.events import Event


@contextmanager
def use_lock(lock: Lock):
    lock.acquire()

    try:
        yield

    finally:
        lock.release()


class Rendezvous:
    """Single slot shared by the runner and the signal listener.

    The first event posted takes the slot; later posts are dropped without
    blocking their producer.
    """

    def __init__(self) -> None:
        self.queue: Queue = Queue(maxsize=1)

    def post(self, event: Event) -> bool:
        try:
            self.queue.put_nowait(event)

        except Full:
            return False

        return True

    def wait(self) -> Event:
        return self.queue.get()
