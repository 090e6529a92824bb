"""Outcome of a reconcile or finalize pass."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Status(str, Enum):
    """Phase recorded on every reconciled object."""

    WAITING = "Waiting"
    CREATED = "Created"
    TERMINATED = "Terminated"
    ERROR = "Error"


@dataclass(frozen=True)
class Result:
    """Three-way outcome returned by controllers.

    ``Created`` and ``Terminated`` are success, ``Waiting`` asks to be
    retried after a short fixed delay, ``Error`` is fatal and is not retried
    automatically. Transient failures are not results: they are raised.
    """

    status: Status
    reason: str = ""

    @classmethod
    def created(cls, reason: str = "") -> Result:
        return cls(Status.CREATED, reason)

    @classmethod
    def terminated(cls, reason: str = "") -> Result:
        return cls(Status.TERMINATED, reason)

    @classmethod
    def waiting(cls, reason: str) -> Result:
        return cls(Status.WAITING, reason)

    @classmethod
    def error(cls, reason: str) -> Result:
        return cls(Status.ERROR, reason)

    @property
    def requeue(self) -> bool:
        return self.status is Status.WAITING

    @property
    def fatal(self) -> bool:
        return self.status is Status.ERROR
