"""
Raspbian platform interface.

Single entry point bundling the hostname, LAN and service operations for a
Raspbian-style host.
"""

from typing import Any, Dict, Optional

from src.hostconfig_agent.core.command_runner import PrivilegedCommandRunner
from src.hostconfig_agent.core.config import ConfigManager
from src.hostconfig_agent.operations.config_file_editor import ConfigFileEditor
from src.hostconfig_agent.operations.host_state import HostState, SystemHostState
from src.hostconfig_agent.operations.hostname_operations import HostnameOperations
from src.hostconfig_agent.operations.hostname_types import HostnameChangeResult
from src.hostconfig_agent.operations.lan_operations import LanOperations
from src.hostconfig_agent.operations.service_controller import ServiceController
from src.hostconfig_agent.operations.system_control import SystemControl


class RaspbianPlatform:  # pylint: disable=too-many-instance-attributes
    """Host configuration operations for a Raspbian device."""

    def __init__(
        self,
        config_manager: Optional[ConfigManager] = None,
        runner: Optional[PrivilegedCommandRunner] = None,
        host_state: Optional[HostState] = None,
    ):
        self.config = config_manager or ConfigManager(None)
        self.runner = runner or PrivilegedCommandRunner(self.config)
        self.editor = ConfigFileEditor(self.runner)
        self.services = ServiceController(self.runner)
        self.host_state = host_state or SystemHostState(
            self.runner, self.editor, self.services, self.config
        )
        self.hostname_operations = HostnameOperations(self.host_state, self.config)
        self.lan_operations = LanOperations(self.editor, self.services, self.config)
        self.system_control = SystemControl(self.runner, self.services, self.config)

    async def get_hostname(self) -> str:
        """Get the persisted hostname."""
        return await self.hostname_operations.get_hostname()

    async def set_hostname(self, hostname: str) -> HostnameChangeResult:
        """Change the hostname; the result is truthy on success."""
        return await self.hostname_operations.set_hostname(hostname)

    async def get_lan_mode(self) -> Dict[str, Any]:
        """Get ``{"mode": ..., "options": {...}}`` for the LAN interface."""
        config = await self.lan_operations.get_lan_mode()
        return config.to_dict()

    async def set_lan_mode(
        self, mode: str, options: Optional[Dict[str, Any]] = None
    ) -> bool:
        """Set the LAN mode and options."""
        return await self.lan_operations.set_lan_mode(mode, options)

    async def get_dhcp_server_status(self) -> bool:
        """Check whether the DHCP server is running."""
        return await self.system_control.get_dhcp_server_status()

    async def set_dhcp_server_status(self, enabled: bool) -> bool:
        """Enable or disable the DHCP server."""
        return await self.system_control.set_dhcp_server_status(enabled)

    async def get_mdns_server_status(self) -> bool:
        """Check whether the mDNS responder is running."""
        return await self.system_control.get_mdns_server_status()

    async def set_mdns_server_status(self, enabled: bool) -> bool:
        """Enable or disable the mDNS responder."""
        return await self.system_control.set_mdns_server_status(enabled)

    async def get_ssh_server_status(self) -> bool:
        """Check whether the SSH server is enabled."""
        return await self.system_control.get_ssh_server_status()

    async def set_ssh_server_status(self, enabled: bool) -> bool:
        """Enable or disable the SSH server."""
        return await self.system_control.set_ssh_server_status(enabled)

    async def restart_gateway(self) -> bool:
        """Restart the gateway service."""
        return await self.system_control.restart_gateway()

    async def restart_system(self) -> bool:
        """Reboot the machine."""
        return await self.system_control.restart_system()
