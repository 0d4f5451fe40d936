"""Exceptions raised while provisioning a droplet."""


class ProvisionError(Exception):
    """Base class for every error that aborts a run."""


class UserDataError(ProvisionError):
    """The cloud-init document could not be read."""


class ConfigError(ProvisionError):
    """Required configuration is missing."""


class PrerequisiteError(ProvisionError):
    """A required external tool is not installed."""


class SshKeyLookupError(ProvisionError):
    """The named SSH key could not be resolved by the provider."""

    def __init__(self, name: str, reason: str = ""):
        self.name = name
        message = f"cannot look up SSH key '{name}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class EngineError(ProvisionError):
    """The automation engine reported a failure."""


class StepError(ProvisionError):
    """A run step failed; wraps the underlying cause."""

    def __init__(self, step: str, cause: Exception):
        self.step = step
        self.cause = cause
        super().__init__(f"failed to {step}: {cause}")


class MissingOutputError(ProvisionError):
    """The stack finished without an expected output."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"stack output '{key}' is missing")
