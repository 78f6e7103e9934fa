from __future__ import annotations


class FetchFailure(RuntimeError):
    """A single transaction could not be retrieved from the RPC node."""

    def __init__(self, signature: str, cause: str) -> None:
        super().__init__(f"{signature}: {cause}")
        self.signature = signature
        self.cause = cause


class MalformedPayload(ValueError):
    """Instruction data does not match the expected trade event layout."""


class PipelineError(RuntimeError):
    """Pipeline bookkeeping broke; the run result cannot be trusted."""
