"""
Service controller for hostconfig-agent.
Starts, stops, enables, disables and queries systemd units.
"""

import logging

from src.i18n import _
from src.hostconfig_agent.core.command_runner import PrivilegedCommandRunner


class ServiceController:
    """Thin wrapper around systemctl."""

    def __init__(self, runner: PrivilegedCommandRunner):
        self.runner = runner
        self.logger = logging.getLogger(__name__)

    async def is_active(self, service_name: str) -> bool:
        """Return True iff ``systemctl is-active`` exits zero."""
        result = await self.runner.run("systemctl", ["is-active", service_name])
        return result.succeeded

    async def set_enabled(self, service_name: str, enabled: bool) -> bool:
        """
        Start and enable, or stop and disable, a service.

        Both sub-steps must succeed. A failure of the second leaves the first
        in effect (e.g. started but not enabled); that state is reported as a
        failure and left alone.
        """
        action = "start" if enabled else "stop"
        result = await self.runner.run("systemctl", [action, service_name])
        if not result:
            self.logger.error(_("Failed to %s %s"), action, service_name)
            return False

        action = "enable" if enabled else "disable"
        result = await self.runner.run("systemctl", [action, service_name])
        if not result:
            self.logger.warning(
                _("%s is %s but could not be %sd"),
                service_name,
                "running" if enabled else "stopped",
                action,
            )
            return False

        self.logger.info(
            _("Service %s %s"), service_name, "enabled" if enabled else "disabled"
        )
        return True

    async def restart(self, service_name: str) -> bool:
        """Restart a service."""
        result = await self.runner.run("systemctl", ["restart", service_name])
        if not result:
            self.logger.error(_("Failed to restart %s"), service_name)
        return result.succeeded
