"""CLI interface for the droplet tool."""
from typing import List, Optional, Sequence

import typer

from . import automation
from . import config
from . import steps
from . import utils
from .engine import Mode
from .errors import ProvisionError


def select_mode(args: Sequence[str]) -> Mode:
    """Only a first argument of exactly "destroy" tears the stack down."""
    if args and args[0] == "destroy":
        return Mode.DESTROY
    return Mode.CREATE


def main(
    args: Optional[List[str]] = typer.Argument(None, help='Pass "destroy" to tear the droplet down'),
    dry_run: bool = typer.Option(False, "--dry-run", help="Preview changes without applying them"),
    user_data: Optional[str] = typer.Option(None, "--user-data", help="Cloud-init file for the droplet [default: nixos.yml]"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Stream Pulumi engine output"),
):
    """Provision or destroy a DigitalOcean droplet with Pulumi."""
    utils.setup_logging(verbose)

    mode = select_mode(args or [])
    settings = config.Settings.from_env(user_data_path=user_data)
    utils.log_debug(f"Mode: {mode.value}, {settings!r}")

    try:
        automation.check_pulumi_cli()
        steps.provision_droplet(
            settings,
            mode,
            automation.PulumiEngine(),
            automation.DigitalOceanProvider(),
            dry_run=dry_run,
        )
    except ProvisionError as e:
        utils.log_error(str(e))
        raise typer.Exit(1)

    if dry_run:
        typer.echo("✅ Dry run complete!")
    elif mode is Mode.DESTROY:
        typer.echo("✅ Droplet destroyed!")
    else:
        typer.echo("✅ Droplet is up!")


app = typer.Typer(
    name="droplet",
    help="Provision a single DigitalOcean droplet from a cloud-init file.",
    add_completion=False,
)
# Unknown option-like tokens fall through to args and select create mode.
app.command(context_settings={"ignore_unknown_options": True})(main)


if __name__ == "__main__":
    app()
