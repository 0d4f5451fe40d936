"""Shared fixtures: an in-memory engine and provider standing in for Pulumi."""
import pytest

from droplet import utils
from droplet.config import Settings
from droplet.engine import DropletHandle, Engine, Provider, Stack
from droplet.errors import EngineError, SshKeyLookupError


class FakeProvider(Provider):
    """Records every declaration instead of calling DigitalOcean."""

    def __init__(self, keys=None, ip="203.0.113.10"):
        self.keys = {"laptop-key": "3b:16:bf:e4:8b:00:8b:b8:59:8c:a9:d3:f0:19:45:fa"} if keys is None else keys
        self.ip = ip
        self.lookups = []
        self.droplets = []
        self.exports = {}

    def lookup_ssh_key(self, name):
        self.lookups.append(name)
        if name not in self.keys:
            raise SshKeyLookupError(name, "not found")
        return self.keys[name]

    def create_droplet(self, resource_name, spec):
        self.droplets.append((resource_name, spec))
        return DropletHandle(ipv4_address=self.ip, name=f"{resource_name}-4f0c2a1")

    def export(self, name, value):
        self.exports[name] = value


class FakeStack(Stack):
    """Runs the program on up/preview, fails on the operations in fail_on."""

    def __init__(self, program, provider, fail_on=()):
        self.program = program
        self.provider = provider
        self.fail_on = set(fail_on)
        self.calls = []
        self.plugins = []
        self.config = {}

    def _record(self, op):
        self.calls.append(op)
        if op in self.fail_on:
            raise EngineError(f"{op} exploded")

    def _run_program(self):
        try:
            self.program()
        except Exception as e:
            raise EngineError(f"program failed: {e}") from e

    def install_plugin(self, name, version):
        self._record("install_plugin")
        self.plugins.append((name, version))

    def set_config(self, key, value, secret=False):
        self._record("set_config")
        self.config[key] = (value, secret)

    def refresh(self):
        self._record("refresh")

    def destroy(self):
        self._record("destroy")

    def up(self):
        self._record("up")
        self._run_program()
        return dict(self.provider.exports)

    def preview(self):
        self._record("preview")
        self._run_program()
        return {"create": len(self.provider.droplets)}


class FakeEngine(Engine):
    def __init__(self, provider, fail_on=()):
        self.provider = provider
        self.fail_on = fail_on
        self.selected = None
        self.stack = None

    def select_stack(self, project_name, stack_name, program):
        if "select_stack" in self.fail_on:
            raise EngineError("no backend login")
        self.selected = (project_name, stack_name)
        self.stack = FakeStack(program, self.provider, self.fail_on)
        return self.stack


@pytest.fixture(autouse=True)
def quiet_logging():
    utils.setup_logging(False)
    yield
    utils.setup_logging(False)


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def engine(provider):
    return FakeEngine(provider)


@pytest.fixture
def user_data_file(tmp_path):
    path = tmp_path / "nixos.yml"
    path.write_text("#cloud-config\n")
    return path


@pytest.fixture
def settings(user_data_file):
    return Settings(
        ssh_key_name="laptop-key",
        token="dop_v1_secret",
        user_data_path=str(user_data_file),
    )


@pytest.fixture
def make_engine(provider):
    def _make(fail_on=()):
        return FakeEngine(provider, fail_on)
    return _make
