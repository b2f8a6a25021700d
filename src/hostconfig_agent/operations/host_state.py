"""
Host state access for hostname operations.

The hostname file, the hosts file, the live (kernel) hostname and the mDNS
responder are the only external state a hostname change touches. They are
reached through ``HostState`` so the transition logic can run against an
in-memory host in tests.
"""

import logging
import re
from abc import ABC, abstractmethod
from typing import Optional

from src.i18n import _
from src.hostconfig_agent.core.command_runner import PrivilegedCommandRunner
from src.hostconfig_agent.core.config import ConfigManager
from src.hostconfig_agent.operations.config_file_editor import ConfigFileEditor
from src.hostconfig_agent.operations.service_controller import ServiceController

LOOPBACK_ALIAS_ADDRESS = "127.0.1.1"

# Characters with special meaning in a sed ERE or as the s/// delimiter.
_SED_SPECIAL = re.compile(r"([\\/.^$*+?()\[\]{}|&])")


def sed_escape(text: str) -> str:
    """Escape ``text`` for literal use in a sed -E pattern or replacement."""
    return _SED_SPECIAL.sub(r"\\\1", text)


class HostState(ABC):
    """External state touched by a hostname change."""

    @abstractmethod
    async def read_hostname_file(self) -> Optional[str]:
        """Return the trimmed hostname file content, or None if unreadable."""

    @abstractmethod
    async def write_hostname_file(self, hostname: str) -> bool:
        """Replace the hostname file's line with ``hostname``."""

    @abstractmethod
    async def get_live_hostname(self) -> Optional[str]:
        """Return the kernel's current hostname, or None if it can't be read."""

    @abstractmethod
    async def set_live_hostname(self, hostname: str) -> bool:
        """Set the kernel's current hostname."""

    @abstractmethod
    async def restart_mdns(self) -> bool:
        """Restart the mDNS responder so it advertises the current hostname."""

    @abstractmethod
    async def replace_hosts_alias(self, old: str, new: str) -> bool:
        """
        Point the loopback alias line of the hosts file at ``new``.

        Only ``127.0.1.1<whitespace>old`` is rewritten. With an empty ``old``
        every name on the alias line is replaced.
        """


class SystemHostState(HostState):
    """HostState backed by the real files and commands of this machine."""

    def __init__(
        self,
        runner: PrivilegedCommandRunner,
        editor: Optional[ConfigFileEditor] = None,
        services: Optional[ServiceController] = None,
        config_manager: Optional[ConfigManager] = None,
    ):
        config = config_manager or ConfigManager(None)
        self.runner = runner
        self.editor = editor or ConfigFileEditor(runner)
        self.services = services or ServiceController(runner)
        self.hostname_file = config.get_hostname_file()
        self.hosts_file = config.get_hosts_file()
        self.mdns_service = config.get_service_name("mdns")
        self.logger = logging.getLogger(__name__)

    async def read_hostname_file(self) -> Optional[str]:
        return await self.editor.read_text(self.hostname_file, strip=True)

    async def write_hostname_file(self, hostname: str) -> bool:
        # sed is the simplest way to rewrite a root-owned file in place.
        return await self.editor.substitute_line_privileged(
            self.hostname_file, "^.*$", sed_escape(hostname)
        )

    async def get_live_hostname(self) -> Optional[str]:
        result = await self.runner.run("hostname", privileged=False)
        if not result:
            return None
        return result.stdout.strip()

    async def set_live_hostname(self, hostname: str) -> bool:
        result = await self.runner.run("hostname", [hostname])
        return result.succeeded

    async def restart_mdns(self) -> bool:
        return await self.services.restart(self.mdns_service)

    async def replace_hosts_alias(self, old: str, new: str) -> bool:
        address = sed_escape(LOOPBACK_ALIAS_ADDRESS)
        if old:
            pattern = f"^({address}[ \\t]+){sed_escape(old)}([ \\t]|$)"
            replacement = f"\\1{sed_escape(new)}\\2"
        else:
            self.logger.warning(
                _("Original hostname unknown, rewriting the whole %s alias line"),
                LOOPBACK_ALIAS_ADDRESS,
            )
            pattern = f"^({address}[ \\t]+).*$"
            replacement = f"\\1{sed_escape(new)}"

        return await self.editor.substitute_line_privileged(
            self.hosts_file, pattern, replacement, extended=True, global_replace=True
        )
