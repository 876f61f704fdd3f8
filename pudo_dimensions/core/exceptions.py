"""Project-wide custom exceptions."""

from __future__ import annotations

from typing import Iterable

from pudo_dimensions.models.enums import ExecutionPhase


# HTTP status for each failure phase of an engine call
PHASE_STATUS_CODES = {
    ExecutionPhase.CONNECT: 502,
    ExecutionPhase.ENGINE_REJECT: 502,
    ExecutionPhase.TRANSPORT: 504,
    ExecutionPhase.SUBMIT: 500,
}

# Caller-facing summaries; the internal message stays in the server logs
PHASE_SUMMARIES = {
    ExecutionPhase.CONNECT: 'Could not connect to the analytics engine',
    ExecutionPhase.ENGINE_REJECT: 'The analytics engine rejected the query',
    ExecutionPhase.TRANSPORT: 'Communication with the analytics engine failed',
    ExecutionPhase.SUBMIT: 'The query could not be submitted',
}


class PudoApiError(Exception):
    """Base exception for the PUDO dimensions service."""


class InvalidRequestError(PudoApiError):
    """Raised when caller input is rejected before any engine call."""

    status_code = 400


class QueryNotFoundError(InvalidRequestError):
    """Raised when a catalog lookup names an unknown query."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown query '{name}'")
        self.name = name


class ExecutionError(PudoApiError):
    """Raised when an engine call fails; ``phase`` says where it failed."""

    def __init__(self, phase: ExecutionPhase, message: str) -> None:
        super().__init__(f"[{phase.value}] {message}")
        self.phase = phase
        self.message = message

    @property
    def status_code(self) -> int:
        return PHASE_STATUS_CODES[self.phase]

    @property
    def summary(self) -> str:
        return PHASE_SUMMARIES[self.phase]


def redact(message: str, secrets: Iterable[str]) -> str:
    """Replace every non-empty secret occurring in ``message`` with ``***``."""
    for secret in secrets:
        if secret:
            message = message.replace(secret, '***')
    return message
