import logging
import signal
import socket
from threading import Thread
from typing import Any, Dict, Optional, Sequence

from paladin.events import Interrupted
from paladin.threading import Rendezvous
from paladin.logging import get_logger

# signal numbers are never 0, so a zero byte can stop the listener thread
STOP = 0


class SignalListener:
    """Turns the first delivery of any of ``signals`` into an ``Interrupted`` event.

    The Python-level handler does nothing; delivery is observed through the
    signal wakeup fd, which CPython writes from the C-level handler whatever
    thread the signal lands on. This keeps the handler free of locks, so it
    can run while the main thread is blocked on the rendezvous or the guard.

    ``install`` and ``remove`` touch process-wide signal state and must be
    called from the main thread.
    """

    def __init__(
        self,
        signals: Sequence[signal.Signals],
        rendezvous: Rendezvous,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.signals = tuple(signals)
        self.numbers = frozenset(int(s) for s in self.signals)
        self.rendezvous = rendezvous
        self.logger = logger if logger is not None else get_logger()

        self.previous_handlers: Dict[signal.Signals, Any] = {}
        self.previous_wakeup_fd: int = -1
        self.wakeup_fd_set: bool = False
        self.recv_sock: Optional[socket.socket] = None
        self.send_sock: Optional[socket.socket] = None
        self.thread: Optional[Thread] = None
        self.installed: bool = False

    def handler(self, signum, frame):
        pass

    def install(self) -> None:
        if self.installed:
            raise RuntimeError("signal listener is already installed")

        self.recv_sock, self.send_sock = socket.socketpair()
        self.send_sock.setblocking(False)

        self.thread = Thread(target=self.listen, name="paladin-listener", daemon=True)
        self.thread.start()
        self.installed = True

        try:
            # wakeup fd before handlers: a delivery in between reaches the
            # previous handler instead of being dropped by ours
            self.previous_wakeup_fd = signal.set_wakeup_fd(
                self.send_sock.fileno(), warn_on_full_buffer=False
            )
            self.wakeup_fd_set = True

            for sig in self.signals:
                self.previous_handlers[sig] = signal.signal(sig, self.handler)

        except BaseException:
            self.remove()

            raise

        names = ", ".join(sig.name for sig in self.signals)
        self.logger.debug(f"listening for {names}")

    def listen(self) -> None:
        fired = False

        while True:
            data = self.recv_sock.recv(256)

            if not data:
                return

            for num in data:
                if num == STOP:
                    return

                if fired or num not in self.numbers:
                    continue

                fired = True
                sig = signal.Signals(num)

                if self.rendezvous.post(Interrupted(sig)):
                    self.logger.debug(f"received {sig.name}")

                else:
                    self.logger.debug(f"received {sig.name} after the runner finished")

    def remove(self) -> None:
        if not self.installed:
            return

        try:
            # handlers before the wakeup fd, the reverse of install
            for sig, previous in self.previous_handlers.items():
                # None means the previous handler was not installed from Python
                if previous is None:
                    previous = signal.SIG_DFL

                signal.signal(sig, previous)

        finally:
            self.previous_handlers.clear()

            if self.wakeup_fd_set:
                signal.set_wakeup_fd(self.previous_wakeup_fd)
                self.wakeup_fd_set = False

            self.send_sock.setblocking(True)
            self.send_sock.send(bytes([STOP]))
            self.thread.join()

            self.recv_sock.close()
            self.send_sock.close()
            self.installed = False
