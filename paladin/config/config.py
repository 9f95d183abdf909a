import logging
import signal
from typing import List

from pydantic import BaseModel, StrictBool, StrictStr, validator

from paladin.logging import LOG_MODES


class Config(BaseModel):
    class Config:
        extra = "forbid"


def resolve_signal(value) -> signal.Signals:
    if isinstance(value, signal.Signals):
        return value

    if isinstance(value, bool):
        raise ValueError(f"invalid signal: {value!r}")

    if isinstance(value, int):
        try:
            return signal.Signals(value)

        except ValueError:
            raise ValueError(f"unknown signal number: {value}")

    if isinstance(value, str):
        name = value.strip().upper()

        if not name.startswith("SIG"):
            name = "SIG" + name

        try:
            return signal.Signals[name]

        except KeyError:
            raise ValueError(f"unknown signal name: {value}")

    raise ValueError(f"invalid signal: {value!r}")


class PaladinConfig(Config):
    signals: List[signal.Signals] = [signal.SIGINT]
    reraise: StrictBool = False
    log_mode: StrictStr = "rich"
    log_level: StrictStr = "INFO"

    @validator("signals", pre=True, allow_reuse=True)
    def check_signals(cls, v):
        if isinstance(v, (str, int)):
            v = [v]

        if not isinstance(v, (list, tuple)):
            raise ValueError(f"signals must be a signal or a list of signals, got {v!r}")

        signals = []

        for s in v:
            sig = resolve_signal(s)

            if sig not in signals:
                signals.append(sig)

        if len(signals) == 0:
            raise ValueError("at least one signal is required")

        return signals

    @validator("log_mode", allow_reuse=True)
    def check_log_mode(cls, v):
        if v not in LOG_MODES:
            raise ValueError(f"log_mode must be one of {LOG_MODES}")

        return v

    @validator("log_level", allow_reuse=True)
    def check_log_level(cls, v):
        level = v.upper()

        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level: {v}")

        return level
