"""
System control operations module for hostconfig-agent.
Handles service toggles (DHCP, mDNS, SSH), gateway restart and reboot.
"""

import logging
from typing import Optional

from src.i18n import _
from src.hostconfig_agent.core.command_runner import PrivilegedCommandRunner
from src.hostconfig_agent.core.config import ConfigManager
from src.hostconfig_agent.operations.service_controller import ServiceController


class SystemControl:
    """Handles system control operations for the agent."""

    def __init__(
        self,
        runner: PrivilegedCommandRunner,
        services: Optional[ServiceController] = None,
        config_manager: Optional[ConfigManager] = None,
    ):
        config = config_manager or ConfigManager(None)
        self.runner = runner
        self.services = services or ServiceController(runner)
        self.dhcp_service = config.get_service_name("dhcp")
        self.mdns_service = config.get_service_name("mdns")
        self.gateway_service = config.get_service_name("gateway")
        self.logger = logging.getLogger(__name__)

    async def get_dhcp_server_status(self) -> bool:
        """Check whether the DHCP server is running."""
        return await self.services.is_active(self.dhcp_service)

    async def set_dhcp_server_status(self, enabled: bool) -> bool:
        """Start and enable, or stop and disable, the DHCP server."""
        return await self.services.set_enabled(self.dhcp_service, enabled)

    async def get_mdns_server_status(self) -> bool:
        """Check whether the mDNS responder is running."""
        return await self.services.is_active(self.mdns_service)

    async def set_mdns_server_status(self, enabled: bool) -> bool:
        """Start and enable, or stop and disable, the mDNS responder."""
        return await self.services.set_enabled(self.mdns_service, enabled)

    async def get_ssh_server_status(self) -> bool:
        """
        Check whether the SSH server is enabled.

        ``raspi-config nonint get_ssh`` prints 0 when SSH is enabled.
        """
        result = await self.runner.run("raspi-config", ["nonint", "get_ssh"])
        if not result:
            return False
        return result.stdout.strip() == "0"

    async def set_ssh_server_status(self, enabled: bool) -> bool:
        """Enable or disable the SSH server (do_ssh 0 enables, 1 disables)."""
        arg = "0" if enabled else "1"
        result = await self.runner.run("raspi-config", ["nonint", "do_ssh", arg])
        if not result:
            self.logger.error(
                _("Failed to %s SSH server"), "enable" if enabled else "disable"
            )
        return result.succeeded

    async def restart_gateway(self) -> bool:
        """Restart the gateway service, usually the caller's own process."""
        # Probably never observed when the gateway restarts itself.
        return await self.services.restart(self.gateway_service)

    async def restart_system(self) -> bool:
        """Reboot the machine."""
        self.logger.info(_("Rebooting system"))
        result = await self.runner.run("reboot")
        return result.succeeded
