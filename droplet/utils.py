"""Utility functions for the droplet tool."""
import shutil
import sys

_verbose = False


def command_exists(command: str) -> bool:
    """Check if a command exists in the system PATH."""
    return shutil.which(command) is not None


def log_info(message: str) -> None:
    """Log an informational message."""
    print(f"[INFO] {message}")


def log_action(message: str) -> None:
    """Log an action being performed."""
    print(f"  -> {message}")


def log_error(message: str) -> None:
    """Log an error message to stderr."""
    print(f"[ERROR] {message}", file=sys.stderr)


def log_debug(message: str) -> None:
    """Log a message only when verbose output is enabled."""
    if _verbose:
        print(f"[DEBUG] {message}")


def is_verbose() -> bool:
    return _verbose


def setup_logging(verbose: bool = False) -> None:
    """Setup logging configuration."""
    global _verbose
    _verbose = verbose
