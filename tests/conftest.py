"""
Pytest configuration and shared fixtures for hostconfig-agent tests.
"""

import asyncio
import re
from typing import Dict, List, Optional, Set, Tuple
from unittest.mock import AsyncMock, Mock

import pytest

from src.hostconfig_agent.core.command_runner import CommandResult
from src.hostconfig_agent.operations.host_state import HostState

ANY_VALUE = object()


class FakeHostState(HostState):
    """In-memory host: hostname file, live hostname, hosts file and mDNS."""

    def __init__(self, hostname: Optional[str] = "gateway", hosts: Optional[str] = None):
        self.hostname_file = hostname
        self.live_hostname = hostname
        if hosts is None:
            hosts = f"127.0.0.1\tlocalhost\n127.0.1.1\t{hostname}\n"
        self.hosts_file = hosts
        self.mdns_restarts = 0
        self.calls: List[Tuple] = []
        self._failures: Dict[str, Set] = {}

    def fail_on(self, method: str, value=ANY_VALUE):
        """Make ``method`` report failure, optionally only for one argument."""
        self._failures.setdefault(method, set()).add(value)

    def _fails(self, method: str, value=None) -> bool:
        failures = self._failures.get(method, set())
        return ANY_VALUE in failures or value in failures

    async def read_hostname_file(self):
        await asyncio.sleep(0)
        self.calls.append(("read_hostname_file",))
        if self._fails("read_hostname_file") or self.hostname_file is None:
            return None
        return self.hostname_file.strip()

    async def write_hostname_file(self, hostname):
        await asyncio.sleep(0)
        self.calls.append(("write_hostname_file", hostname))
        if self._fails("write_hostname_file", hostname):
            return False
        self.hostname_file = hostname
        return True

    async def get_live_hostname(self):
        self.calls.append(("get_live_hostname",))
        return self.live_hostname

    async def set_live_hostname(self, hostname):
        await asyncio.sleep(0)
        self.calls.append(("set_live_hostname", hostname))
        if self._fails("set_live_hostname", hostname):
            return False
        self.live_hostname = hostname
        return True

    async def restart_mdns(self):
        await asyncio.sleep(0)
        self.calls.append(("restart_mdns",))
        if self._fails("restart_mdns"):
            return False
        self.mdns_restarts += 1
        return True

    async def replace_hosts_alias(self, old, new):
        await asyncio.sleep(0)
        self.calls.append(("replace_hosts_alias", old, new))
        if self._fails("replace_hosts_alias", new):
            return False
        if old:
            pattern = rf"^(127\.0\.1\.1[ \t]+){re.escape(old)}(?=[ \t]|$)"
        else:
            pattern = r"^(127\.0\.1\.1[ \t]+).*$"
        self.hosts_file = re.sub(
            pattern, lambda match: match.group(1) + new, self.hosts_file, flags=re.M
        )
        return True

    def call_names(self) -> List[str]:
        """Names of the methods called so far, in order."""
        return [call[0] for call in self.calls]


@pytest.fixture
def fake_host():
    """An in-memory host whose hostname is 'gateway'."""
    return FakeHostState()


@pytest.fixture
def mock_runner():
    """A command runner whose run() succeeds unless told otherwise."""
    runner = Mock()
    runner.run = AsyncMock(return_value=CommandResult(succeeded=True))
    return runner


@pytest.fixture
def config_file(tmp_path):
    """Write a YAML config file and return its path."""

    def _write(content: str) -> str:
        path = tmp_path / "hostconfig-agent.yaml"
        path.write_text(content, encoding="utf-8")
        return str(path)

    return _write
