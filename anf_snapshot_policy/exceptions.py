"""Exception taxonomy for the provisioning and cleanup phases."""

from __future__ import annotations


class AnfSampleError(Exception):
    """Base class for every failure that ends a phase of the sample.

    ``step`` names the operation that failed (e.g. ``"create-account"``)
    and is used as the prefix of the console message.
    """

    def __init__(self, message: str, step: str = "") -> None:
        self.message = message
        self.step = step
        super().__init__(message)

    def __str__(self) -> str:
        if self.step:
            return f"{self.step}: {self.message}"
        return self.message


class ConfigError(AnfSampleError):
    """Auth descriptor or settings could not be read."""


class PreconditionError(AnfSampleError):
    """The delegated subnet is missing or could not be looked up."""


class ProvisioningError(AnfSampleError):
    """A create call for account, pool, snapshot policy or volume failed."""


class ReadinessTimeout(AnfSampleError):
    """A poll loop exhausted its attempt budget."""

    def __init__(self, resource_id: str, attempts: int, waiting_for: str = "ready", step: str = "") -> None:
        self.resource_id = resource_id
        self.attempts = attempts
        self.waiting_for = waiting_for
        super().__init__(
            f"{resource_id} not {waiting_for} after {attempts} attempts",
            step=step,
        )


class CleanupError(AnfSampleError):
    """A delete call failed; the remaining cleanup steps are skipped."""
