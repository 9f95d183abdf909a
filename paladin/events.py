from dataclasses import dataclass
import signal
from typing import Union


@dataclass(frozen=True)
class Interrupted:
    signal: signal.Signals


@dataclass(frozen=True)
class TaskFinished:
    pass


Event = Union[Interrupted, TaskFinished]
