"""Pulumi Automation API and DigitalOcean implementations of the backend."""
import re
from typing import Any, Callable, Dict, Optional

import pulumi
import pulumi_digitalocean as digitalocean
import sh
from pulumi import automation as auto

from droplet.engine import DropletHandle, DropletSpec, Engine, Provider, Stack
from droplet.errors import EngineError, PrerequisiteError, SshKeyLookupError
from droplet.utils import command_exists, is_verbose, log_info


def get_pulumi_version() -> Optional[str]:
    """Get the installed Pulumi CLI version."""
    try:
        output = str(sh.pulumi("version")).strip()
    except Exception:  # non-zero exit or a broken install
        return None

    # Release builds print a single tag such as "v3.137.0"; dev builds may add a suffix
    match = re.match(r"v?(\d+\.\d+\.\d+)", output)
    return match.group(1) if match else None


def check_pulumi_cli() -> Optional[str]:
    """Make sure the pulumi binary the Automation API drives is available."""
    if not command_exists('pulumi'):
        raise PrerequisiteError("pulumi CLI not found in PATH")

    version = get_pulumi_version()
    log_info(f"Using pulumi {version or '(unknown version)'}")
    return version


def _echo(line: str) -> None:
    print(line, end='' if line.endswith('\n') else '\n')


def _output_handler() -> Optional[Callable[[str], None]]:
    return _echo if is_verbose() else None


class DigitalOceanProvider(Provider):
    """Resource calls made inside the inline Pulumi program."""

    def lookup_ssh_key(self, name: str) -> str:
        try:
            key = digitalocean.get_ssh_key(name=name)
        except Exception as e:  # invoke failures surface as plain exceptions
            raise SshKeyLookupError(name, str(e)) from e
        return key.fingerprint

    def create_droplet(self, resource_name: str, spec: DropletSpec) -> DropletHandle:
        droplet = digitalocean.Droplet(
            resource_name,
            image=spec.image,
            size=spec.size,
            region=spec.region,
            ssh_keys=list(spec.ssh_keys),
            user_data=spec.user_data,
        )
        return DropletHandle(ipv4_address=droplet.ipv4_address, name=droplet.name)

    def export(self, name: str, value: Any) -> None:
        pulumi.export(name, value)


class PulumiStack(Stack):
    """Adapts a pulumi.automation Stack to the driver's interface."""

    def __init__(self, stack: auto.Stack):
        self._stack = stack

    def install_plugin(self, name: str, version: str) -> None:
        try:
            self._stack.workspace.install_plugin(name, version)
        except auto.CommandError as e:
            raise EngineError(str(e)) from e

    def set_config(self, key: str, value: str, secret: bool = False) -> None:
        try:
            self._stack.set_config(key, auto.ConfigValue(value=value, secret=secret))
        except auto.CommandError as e:
            raise EngineError(str(e)) from e

    def refresh(self) -> None:
        try:
            self._stack.refresh(on_output=_output_handler())
        except auto.CommandError as e:
            raise EngineError(str(e)) from e

    def destroy(self) -> None:
        try:
            self._stack.destroy(on_output=_output_handler())
        except auto.CommandError as e:
            raise EngineError(str(e)) from e

    def up(self) -> Dict[str, Any]:
        try:
            result = self._stack.up(on_output=_output_handler())
        except auto.CommandError as e:
            raise EngineError(str(e)) from e
        return {key: output.value for key, output in result.outputs.items()}

    def preview(self) -> Dict[str, int]:
        try:
            result = self._stack.preview(on_output=_output_handler())
        except auto.CommandError as e:
            raise EngineError(str(e)) from e
        # change_summary is keyed by OpType members
        return {getattr(op, 'value', op): count for op, count in result.change_summary.items()}


class PulumiEngine(Engine):
    """Stacks backed by the Pulumi state store of the current login."""

    def select_stack(self, project_name: str, stack_name: str,
                     program: Callable[[], None]) -> PulumiStack:
        try:
            stack = auto.create_or_select_stack(
                stack_name=stack_name,
                project_name=project_name,
                program=program,
            )
        except auto.CommandError as e:
            raise EngineError(str(e)) from e
        return PulumiStack(stack)
