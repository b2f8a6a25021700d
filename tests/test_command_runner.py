"""
Tests for the privileged command runner.
"""

# pylint: disable=redefined-outer-name

import asyncio
from unittest.mock import AsyncMock, Mock, patch

import pytest

from src.hostconfig_agent.core.async_utils import AsyncProcessResult
from src.hostconfig_agent.core.command_runner import (
    CommandFailure,
    CommandResult,
    PrivilegedCommandRunner,
)

RUN_COMMAND = "src.hostconfig_agent.core.async_utils.run_command_async"


@pytest.fixture
def runner():
    """A runner with the default sudo prefix and timeout."""
    return PrivilegedCommandRunner()


class TestCommandResult:
    """Tests for CommandResult."""

    def test_truthiness(self):
        """Truthy iff the command succeeded."""
        assert CommandResult(succeeded=True)
        assert not CommandResult(succeeded=False)


class TestPrivilegedCommandRunner:
    """Tests for PrivilegedCommandRunner.run."""

    def test_defaults(self, runner):
        """sudo -n and a 30 second timeout by default."""
        assert runner.privilege == ["sudo", "-n"]
        assert runner.timeout == 30.0

    def test_config_overrides(self):
        """Prefix and timeout come from configuration."""
        config = Mock()
        config.get_privilege_command.return_value = ["doas"]
        config.get_command_timeout.return_value = 5.0

        runner = PrivilegedCommandRunner(config)

        assert runner.privilege == ["doas"]
        assert runner.timeout == 5.0

    @pytest.mark.asyncio
    async def test_success(self, runner):
        """Zero exit is success with captured output."""
        mock_run = AsyncMock(return_value=AsyncProcessResult(0, "active\n", ""))
        with patch(RUN_COMMAND, mock_run):
            result = await runner.run("systemctl", ["is-active", "ssh"])

        assert result.succeeded is True
        assert result.stdout == "active\n"
        assert result.returncode == 0
        assert result.failure is None
        mock_run.assert_awaited_once_with(
            ["sudo", "-n", "systemctl", "is-active", "ssh"],
            timeout=30.0,
            input_data=None,
        )

    @pytest.mark.asyncio
    async def test_nonzero_exit_is_not_an_exception(self, runner):
        """Non-zero exit is reported, not raised."""
        mock_run = AsyncMock(return_value=AsyncProcessResult(3, "", "inactive"))
        with patch(RUN_COMMAND, mock_run):
            result = await runner.run("systemctl", ["is-active", "ssh"])

        assert result.succeeded is False
        assert result.returncode == 3
        assert result.stderr == "inactive"
        assert result.failure == CommandFailure.EXIT_STATUS

    @pytest.mark.asyncio
    async def test_launch_failure(self, runner):
        """A missing binary is a launch failure."""
        mock_run = AsyncMock(side_effect=FileNotFoundError("sudo"))
        with patch(RUN_COMMAND, mock_run):
            result = await runner.run("hostname", ["x"])

        assert result.succeeded is False
        assert result.failure == CommandFailure.LAUNCH_FAILURE
        assert result.returncode is None

    @pytest.mark.asyncio
    async def test_permission_denied_is_launch_failure(self, runner):
        """Permission errors while spawning are launch failures too."""
        mock_run = AsyncMock(side_effect=PermissionError("denied"))
        with patch(RUN_COMMAND, mock_run):
            result = await runner.run("hostname", ["x"])

        assert result.failure == CommandFailure.LAUNCH_FAILURE

    @pytest.mark.asyncio
    async def test_timeout(self, runner):
        """A hung command is reported as a timeout failure."""
        mock_run = AsyncMock(side_effect=asyncio.TimeoutError())
        with patch(RUN_COMMAND, mock_run):
            result = await runner.run("systemctl", ["restart", "avahi-daemon.service"])

        assert result.succeeded is False
        assert result.failure == CommandFailure.TIMEOUT

    @pytest.mark.asyncio
    async def test_unprivileged(self, runner):
        """privileged=False runs the command without sudo."""
        mock_run = AsyncMock(return_value=AsyncProcessResult(0, "pi\n", ""))
        with patch(RUN_COMMAND, mock_run):
            await runner.run("hostname", privileged=False)

        assert mock_run.await_args.args[0] == ["hostname"]

    @pytest.mark.asyncio
    async def test_input_data_is_forwarded(self, runner):
        """stdin content is passed through."""
        mock_run = AsyncMock(return_value=AsyncProcessResult(0, "", ""))
        with patch(RUN_COMMAND, mock_run):
            await runner.run("tee", ["/etc/hostname"], input_data="pi\n")

        assert mock_run.await_args.kwargs["input_data"] == "pi\n"
