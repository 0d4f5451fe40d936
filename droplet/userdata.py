"""Cloud-init user data loading."""
from pathlib import Path
from typing import Union

from droplet.errors import UserDataError
from droplet.utils import log_debug


def load_user_data(path: Union[str, Path]) -> str:
    """Read the cloud-init document verbatim.

    The content is handed to the droplet as-is; line endings are not
    translated and nothing is parsed or templated.
    """
    try:
        with open(path, 'r', encoding='utf-8', newline='') as f:
            content = f.read()
    except UnicodeDecodeError as e:
        raise UserDataError(f"cannot read config file: {path} is not valid UTF-8 ({e.reason} at byte {e.start})") from e
    except OSError as e:
        raise UserDataError(f"cannot read config file: {e}") from e

    log_debug(f"Loaded {len(content)} characters of user data from {path}")
    return content
