"""Tests for cloud-init user data loading."""
import pytest

from droplet.errors import UserDataError
from droplet.userdata import load_user_data


def test_load_user_data_verbatim(tmp_path):
    """Test the document is returned exactly as stored."""
    content = "#cloud-config\npackages:\n  - git\n# {{ not a template }}\n"
    path = tmp_path / "nixos.yml"
    path.write_text(content)

    assert load_user_data(path) == content


def test_load_user_data_keeps_line_endings(tmp_path):
    """Test CRLF line endings are not translated."""
    path = tmp_path / "nixos.yml"
    path.write_bytes(b"#cloud-config\r\nruncmd: []\r\n")

    assert load_user_data(str(path)) == "#cloud-config\r\nruncmd: []\r\n"


def test_load_user_data_empty_file(tmp_path):
    """Test an empty document is passed through as an empty string."""
    path = tmp_path / "nixos.yml"
    path.write_text("")

    assert load_user_data(path) == ""


def test_load_user_data_missing_file(tmp_path):
    """Test a missing file raises UserDataError."""
    with pytest.raises(UserDataError, match="cannot read config file"):
        load_user_data(tmp_path / "nixos.yml")


def test_load_user_data_directory(tmp_path):
    """Test a directory path is reported as unreadable."""
    with pytest.raises(UserDataError):
        load_user_data(tmp_path)


def test_load_user_data_not_utf8(tmp_path):
    """Test a readable file with invalid UTF-8 names the encoding problem."""
    path = tmp_path / "nixos.yml"
    path.write_bytes(b"#cloud-config\n\xff\xfe\n")

    with pytest.raises(UserDataError, match="is not valid UTF-8") as exc_info:
        load_user_data(path)

    assert "at byte 14" in str(exc_info.value)
