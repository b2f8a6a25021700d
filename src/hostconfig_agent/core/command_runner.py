"""
Privileged command runner for hostconfig-agent.

Executes external commands under ``sudo`` and reports the outcome as a value.
A non-zero exit status is an ordinary result, not an exception; only the
caller decides whether it is fatal.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from src.i18n import _
from src.hostconfig_agent.core import async_utils
from src.hostconfig_agent.core.config import ConfigManager


class CommandFailure(str, Enum):
    """Why a command did not succeed."""

    EXIT_STATUS = "exit_status"
    LAUNCH_FAILURE = "launch_failure"
    TIMEOUT = "timeout"


@dataclass
class CommandResult:
    """Outcome of one command invocation."""

    succeeded: bool
    stdout: str = ""
    stderr: str = ""
    returncode: Optional[int] = None
    failure: Optional[CommandFailure] = None

    def __bool__(self) -> bool:
        return self.succeeded


class PrivilegedCommandRunner:
    """Runs commands with elevated privilege, one at a time."""

    def __init__(self, config_manager: Optional[ConfigManager] = None):
        config = config_manager or ConfigManager(None)
        self.privilege = config.get_privilege_command()
        self.timeout = config.get_command_timeout()
        self.logger = logging.getLogger(__name__)

    async def run(
        self,
        command: str,
        args: Optional[List[str]] = None,
        input_data: Optional[str] = None,
        privileged: bool = True,
    ) -> CommandResult:
        """
        Run ``command`` with ``args`` and wait for it to exit.

        Args:
            command: Executable name or path
            args: Arguments passed verbatim (no shell interpretation)
            input_data: Optional text for the child's stdin
            privileged: Prefix the privilege command (sudo) when True

        Returns:
            CommandResult; ``succeeded`` is True iff the exit code is zero
        """
        cmd = [command, *(args or [])]
        if privileged:
            cmd = [*self.privilege, *cmd]

        self.logger.debug("Running command: %s", cmd)
        try:
            result = await async_utils.run_command_async(
                cmd, timeout=self.timeout, input_data=input_data
            )
        except asyncio.TimeoutError:
            self.logger.warning(
                _("Command timed out after %s seconds: %s"), self.timeout, cmd
            )
            return CommandResult(succeeded=False, failure=CommandFailure.TIMEOUT)
        except OSError as error:
            self.logger.warning(_("Failed to launch command %s: %s"), cmd, error)
            return CommandResult(
                succeeded=False,
                stderr=str(error),
                failure=CommandFailure.LAUNCH_FAILURE,
            )

        if result.returncode != 0:
            self.logger.warning(
                _("Command %s exited with status %d: %s"),
                cmd,
                result.returncode,
                result.stderr.strip(),
            )
            return CommandResult(
                succeeded=False,
                stdout=result.stdout,
                stderr=result.stderr,
                returncode=result.returncode,
                failure=CommandFailure.EXIT_STATUS,
            )

        return CommandResult(
            succeeded=True,
            stdout=result.stdout,
            stderr=result.stderr,
            returncode=result.returncode,
        )
