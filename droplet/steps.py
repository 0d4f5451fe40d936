"""Provisioning workflow steps."""
from typing import Any, Callable, Dict

from droplet.config import TOKEN_CONFIG_KEY, Settings
from droplet.engine import (
    IP_OUTPUT, NAME_OUTPUT, DropletHandle, DropletSpec, Engine, Mode, Provider, Stack,
)
from droplet.errors import EngineError, MissingOutputError, StepError
from droplet.userdata import load_user_data
from droplet.utils import log_action, log_debug, log_info


def declare_deployment(provider: Provider, settings: Settings, user_data: str) -> DropletHandle:
    """Declare the droplet and its outputs. Runs inside the engine's program."""
    fingerprint = provider.lookup_ssh_key(settings.ssh_key_name)

    droplet = provider.create_droplet(
        settings.resource_name,
        DropletSpec(
            image=settings.image,
            size=settings.size,
            region=settings.region,
            ssh_keys=[fingerprint],
            user_data=user_data,
        ),
    )

    provider.export(IP_OUTPUT, droplet.ipv4_address)
    provider.export(NAME_OUTPUT, droplet.name)
    return droplet


def build_program(provider: Provider, settings: Settings, user_data: str) -> Callable[[], None]:
    """Wrap the declaration as the zero-argument program the engine runs."""
    def program() -> None:
        declare_deployment(provider, settings, user_data)
    return program


def _run_step(step: str, func: Callable[..., Any], *args, **kwargs) -> Any:
    try:
        return func(*args, **kwargs)
    except EngineError as e:
        raise StepError(step, e) from e


def prepare_stack(stack: Stack, settings: Settings) -> None:
    """Install the provider plugin and store the access token."""
    log_action(f"Installing {settings.plugin_name} plugin {settings.plugin_version}...")
    _run_step("install DO plugin", stack.install_plugin, settings.plugin_name, settings.plugin_version)

    log_debug(f"Setting {TOKEN_CONFIG_KEY} (secret)")
    _run_step("set the provider token", stack.set_config, TOKEN_CONFIG_KEY, settings.token, secret=True)


def refresh_stack(stack: Stack, dry_run: bool = False) -> None:
    """Refresh the stack state against the live provider."""
    if dry_run:
        log_action("[DRY RUN] Would refresh the stack")
        return

    log_action("Refreshing the stack...")
    _run_step("refresh the stack", stack.refresh)


def destroy_stack(stack: Stack, dry_run: bool = False) -> None:
    """Tear down every resource in the stack."""
    if dry_run:
        log_action("[DRY RUN] Would destroy stack")
        return

    log_info("destroying stack...")
    _run_step("destroy stack", stack.destroy)
    log_info("stack destroyed")


def read_outputs(outputs: Dict[str, Any]) -> Dict[str, Any]:
    """Pick the droplet IP and name out of the stack outputs."""
    for key in (IP_OUTPUT, NAME_OUTPUT):
        if key not in outputs:
            raise MissingOutputError(key)
    return {IP_OUTPUT: outputs[IP_OUTPUT], NAME_OUTPUT: outputs[NAME_OUTPUT]}


def bring_up_stack(stack: Stack, dry_run: bool = False) -> Dict[str, Any]:
    """Create or update the droplet and report its address and name."""
    if dry_run:
        log_action("[DRY RUN] Would bring up the stack")
        changes = _run_step("preview the stack", stack.preview)
        for op, count in sorted(changes.items()):
            log_info(f"{op}: {count}")
        return {}

    log_info("bringing up the stack...")
    outputs = read_outputs(_run_step("bring up the stack", stack.up))
    log_info(f"Done, droplet IP {outputs[IP_OUTPUT]}")
    log_info(f"droplet Name {outputs[NAME_OUTPUT]}")
    return outputs


def provision_droplet(settings: Settings, mode: Mode, engine: Engine, provider: Provider,
                      dry_run: bool = False) -> Dict[str, Any]:
    """Main workflow: prepare the stack, refresh it, then destroy or bring it up."""
    # Phase 1: Local inputs, before anything talks to the provider
    user_data = load_user_data(settings.user_data_path)
    settings.require_token()

    # Phase 2: Stack selection and configuration
    program = build_program(provider, settings, user_data)
    log_info(f"Selecting stack {settings.project_name}/{settings.stack_name}...")
    stack = _run_step("select the stack", engine.select_stack,
                      settings.project_name, settings.stack_name, program)
    prepare_stack(stack, settings)

    # Phase 3: Sync state with the provider
    refresh_stack(stack, dry_run=dry_run)

    # Phase 4: Apply
    if mode is Mode.DESTROY:
        destroy_stack(stack, dry_run=dry_run)
        return {}
    return bring_up_stack(stack, dry_run=dry_run)
