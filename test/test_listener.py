import os
import signal

import pytest

from paladin.events import Interrupted
from paladin.listener import SignalListener
from paladin.threading import Rendezvous

pytestmark = pytest.mark.skipif(
    not hasattr(signal, "SIGUSR1"), reason="needs SIGUSR1 and SIGUSR2"
)


def test_first_signal_becomes_event():
    rendezvous = Rendezvous()
    listener = SignalListener([signal.SIGUSR1], rendezvous)
    handler = signal.getsignal(signal.SIGUSR1)

    listener.install()

    try:
        os.kill(os.getpid(), signal.SIGUSR1)
        os.kill(os.getpid(), signal.SIGUSR1)

        assert rendezvous.wait() == Interrupted(signal.SIGUSR1)

    finally:
        listener.remove()

    assert signal.getsignal(signal.SIGUSR1) == handler
    assert not listener.thread.is_alive()


def test_other_handled_signals_are_ignored():
    received = []
    previous = signal.signal(signal.SIGUSR2, lambda signum, frame: received.append(signum))

    rendezvous = Rendezvous()
    listener = SignalListener([signal.SIGUSR1], rendezvous)
    listener.install()

    try:
        os.kill(os.getpid(), signal.SIGUSR2)
        os.kill(os.getpid(), signal.SIGUSR1)

        assert rendezvous.wait() == Interrupted(signal.SIGUSR1)

    finally:
        listener.remove()
        signal.signal(signal.SIGUSR2, previous)

    assert received == [signal.SIGUSR2]


def test_install_twice_is_rejected():
    listener = SignalListener([signal.SIGUSR1], Rendezvous())
    listener.install()

    try:
        with pytest.raises(RuntimeError):
            listener.install()

    finally:
        listener.remove()


def test_remove_without_install_is_a_no_op():
    SignalListener([signal.SIGUSR1], Rendezvous()).remove()


def signal_before_wakeup_fd(monkeypatch, sig, call):
    """Deliver ``sig`` right before the ``call``-th call to ``signal.set_wakeup_fd``."""

    set_wakeup_fd = signal.set_wakeup_fd
    calls = []

    def wrapped(*args, **kwargs):
        calls.append(args)

        if len(calls) == call:
            os.kill(os.getpid(), sig)

        return set_wakeup_fd(*args, **kwargs)

    monkeypatch.setattr(signal, "set_wakeup_fd", wrapped)

    return calls


def test_signal_during_install_is_not_lost(monkeypatch):
    received = []
    previous = signal.signal(signal.SIGUSR1, lambda signum, frame: received.append(signum))

    rendezvous = Rendezvous()
    listener = SignalListener([signal.SIGUSR1], rendezvous)
    signal_before_wakeup_fd(monkeypatch, signal.SIGUSR1, 1)

    try:
        listener.install()
        listener.remove()

    finally:
        signal.signal(signal.SIGUSR1, previous)

    # our handler was not installed yet, so the previous one saw it
    assert received == [signal.SIGUSR1]


def test_signal_during_remove_is_not_lost(monkeypatch):
    received = []
    previous = signal.signal(signal.SIGUSR1, lambda signum, frame: received.append(signum))

    rendezvous = Rendezvous()
    listener = SignalListener([signal.SIGUSR1], rendezvous)
    calls = signal_before_wakeup_fd(monkeypatch, signal.SIGUSR1, 2)

    try:
        listener.install()
        listener.remove()

    finally:
        signal.signal(signal.SIGUSR1, previous)

    assert len(calls) == 2
    # the previous handler is back before the wakeup fd is restored
    assert received == [signal.SIGUSR1]
    assert signal.set_wakeup_fd(-1) == -1
