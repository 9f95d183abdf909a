"""Protection of critical resources against asynchronous interruption signals.

A ``Paladin`` receives three callbacks:

- an opener that obtains the resource,
- a closer that releases it,
- a runner that is called in between; the application should live
  entirely within this function.

The closer is always called exactly once after a successful open, whether
the runner finished or an interruption arrived first.
"""

import signal
import threading
from threading import Lock, Thread
from typing import Callable, Generic, Optional, Protocol, TypeVar

from paladin.config import PaladinConfig
from paladin.errors import AcquisitionError, ProtocolError, ReleaseError
from paladin.events import Interrupted, TaskFinished
from paladin.guard import Guard
from paladin.listener import SignalListener
from paladin.logging import get_logger
from paladin.threading import Rendezvous, use_lock


class Closeable(Protocol):
    def close(self) -> None:
        ...


R = TypeVar("R")

Opener = Callable[[], R]
Closer = Callable[[R], None]
Runner = Callable[[R], None]


def close_resource(resource: Closeable) -> None:
    resource.close()


class Paladin(Generic[R]):
    def __init__(self, config: Optional[PaladinConfig] = None) -> None:
        if config is None:
            config = PaladinConfig()

        self.config = config
        self.logger = get_logger(mode=config.log_mode, level=config.log_level)

        # the signal that ended the last interrupted run
        self.signal: Optional[signal.Signals] = None

        self.guard = Guard()
        self.state_lock = Lock()
        self.running: bool = False

        # held on behalf of the runner until it is allowed to start
        self.enter()

    @property
    def interrupted(self) -> bool:
        return self.signal is not None

    def enter(self) -> None:
        """Enter a critical section that must be finished before the resource is released.

        A typical use case is a transaction: if the runner writes a set of
        records that must be written completely or not at all, the sequence
        of writes should be protected::

            paladin.enter()
            operation1()
            operation2()
            paladin.leave()

        Single writes usually need no protection; the resource is always
        closed before ``run`` returns.
        """

        self.guard.enter()

    def leave(self) -> None:
        self.guard.leave()

    def protect(self):
        return self.guard.protect()

    def run(
        self,
        opener: Opener,
        closer: Optional[Closer],
        runner: Runner,
    ) -> None:
        """Obtain the resource, run ``runner`` on it and release it.

        The runner is started on its own thread once ``opener`` returns, and
        ``run`` waits for the first of the runner returning or one of the
        configured signals arriving. Either way the closer is called once any
        protected region in progress has been left. If a signal ended the run
        it is stored in ``self.signal``; a run that is not interrupted leaves
        ``self.signal`` as it was, and a later interrupted run replaces it.
        A paladin is normally used for a single run.

        If ``closer`` is None, the resource's own ``close`` is called.

        Raises:
            AcquisitionError: ``opener`` raised; neither runner nor closer is called.
            ReleaseError: ``closer`` raised.
            ProtocolError: ``run`` is already in progress on this instance or
                is called outside the main thread.
        """

        if threading.current_thread() is not threading.main_thread():
            raise ProtocolError("run must be called from the main thread")

        with use_lock(self.state_lock):
            if self.running:
                raise ProtocolError("run is already in progress on this paladin")

            self.running = True

        try:
            sig = self._run(opener, closer, runner)

        finally:
            with use_lock(self.state_lock):
                self.running = False

        if sig is not None and self.config.reraise:
            self.logger.debug(f"raising {sig.name} again")
            signal.raise_signal(sig)

    def _run(
        self, opener: Opener, closer: Optional[Closer], runner: Runner
    ) -> Optional[signal.Signals]:
        if closer is None:
            closer = close_resource

        rendezvous = Rendezvous()
        listener = SignalListener(self.config.signals, rendezvous, self.logger)
        listener.install()

        try:
            try:
                resource = opener()

            except Exception as e:
                raise AcquisitionError(f"could not open: {e}") from e

            self.logger.debug("resource opened; starting runner")

            # allow runner to enter critical sections
            self.leave()

            task = Thread(
                target=self._run_task,
                args=(runner, resource, rendezvous),
                name="paladin-runner",
                daemon=True,
            )
            task.start()

            event = rendezvous.wait()

            # block runner from entering critical sections
            self.enter()

            sig = None
            if isinstance(event, Interrupted):
                sig = event.signal
                self.signal = sig
                self.logger.debug(f"interrupted by {sig.name}; closing resource")

            else:
                self.logger.debug("runner finished; closing resource")

            try:
                closer(resource)

            except Exception as e:
                raise ReleaseError(f"could not close: {e}") from e

            return sig

        finally:
            listener.remove()

    def _run_task(self, runner: Runner, resource, rendezvous: Rendezvous) -> None:
        try:
            runner(resource)

        except Exception:
            self.logger.exception("runner raised an exception")

        finally:
            if not rendezvous.post(TaskFinished()):
                self.logger.debug("runner finished after an interruption")
