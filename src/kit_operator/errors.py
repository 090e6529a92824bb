"""Exception types raised by the operator."""

from __future__ import annotations


class ConfigurationError(Exception):
    """Raised when configuration validation fails."""


class ObjectNotFound(Exception):
    """Raised when a desired-state object does not exist in the store."""

    def __init__(self, kind: str, namespace: str, name: str):
        super().__init__(f"{kind} {namespace}/{name} not found")
        self.kind = kind
        self.namespace = namespace
        self.name = name


class InconsistentStateError(Exception):
    """Raised when the cloud reports a state that retrying cannot fix.

    For example, more than one external resource answering to a name that
    the operator treats as unique.
    """


class ReconcileCancelled(Exception):
    """Raised when a pass observes shutdown or its deadline expiring."""
