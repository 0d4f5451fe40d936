"""Run settings for the droplet stack."""
import os
from dataclasses import dataclass, field, replace
from typing import Mapping, Optional

from droplet.errors import ConfigError

# SSH_HOST holds the name of an SSH key registered in the DigitalOcean account.
SSH_KEY_ENV = "SSH_HOST"
TOKEN_ENV = "DIGITALOCEAN_TOKEN"
TOKEN_CONFIG_KEY = "digitalocean:token"


@dataclass(frozen=True)
class Settings:
    """Everything a run needs besides the backend itself."""

    project_name: str = "nixostest"
    stack_name: str = "dev"
    resource_name: str = "temp-drop"
    image: str = "ubuntu-22-10-x64"
    size: str = "s-2vcpu-2gb-amd"
    region: str = "sgp1"
    user_data_path: str = "nixos.yml"
    plugin_name: str = "digitalocean"
    plugin_version: str = "v4"
    ssh_key_name: str = ""
    token: str = field(default="", repr=False)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> "Settings":
        """Build settings from the environment, then apply non-None overrides."""
        if environ is None:
            environ = os.environ
        settings = cls(
            ssh_key_name=environ.get(SSH_KEY_ENV, ''),
            token=environ.get(TOKEN_ENV, ''),
        )
        overrides = {key: value for key, value in overrides.items() if value is not None}
        return replace(settings, **overrides)

    def require_token(self) -> str:
        if not self.token:
            raise ConfigError(f"{TOKEN_ENV} is not set")
        return self.token

