"""
Hostname operations module for hostconfig-agent.

Changes the hostname in four ordered steps (hostname file, live hostname,
mDNS responder restart, hosts file alias line) and undoes the completed steps
when a later one fails, so the hostname file and the live hostname never stay
out of step without a rollback attempt.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

from src.i18n import _
from src.hostconfig_agent.core.config import ConfigManager
from src.hostconfig_agent.operations.host_state import HostState
from src.hostconfig_agent.operations.hostname_types import (
    HostConfigSnapshot,
    HostnameChangeResult,
    HostnameValidationError,
    TransitionState,
    TransitionStep,
    TransitionStepFailure,
    UnrecoverableDivergence,
    normalize_hostname,
)


@dataclass
class PlannedStep:
    """One forward action of a hostname change and its inverse."""

    step: TransitionStep
    reached: TransitionState
    apply: Callable[[], Awaitable[bool]]
    undo: Optional[Callable[[], Awaitable[bool]]] = None


class HostnameOperations:
    """Handles hostname change operations for the agent."""

    def __init__(
        self, host_state: HostState, config_manager: Optional[ConfigManager] = None
    ):
        config = config_manager or ConfigManager(None)
        self.host_state = host_state
        self.rollback_on_hosts_failure = config.should_rollback_on_hosts_failure()
        self.state = TransitionState.IDLE
        self._lock = asyncio.Lock()
        self.logger = logging.getLogger(__name__)

    async def get_hostname(self) -> str:
        """Return the persisted hostname, or an empty string if unreadable."""
        return await self.host_state.read_hostname_file() or ""

    async def change_hostname(self, parameters: Dict[str, Any]) -> Dict[str, Any]:
        """
        Change the system hostname.

        Args:
            parameters: Dict containing 'new_hostname' key

        Returns:
            Dict with success status and result/error message
        """
        new_hostname = (parameters.get("new_hostname") or "").strip()
        if not new_hostname:
            return {"success": False, "error": _("No hostname specified")}

        result = await self.set_hostname(new_hostname)
        return result.to_dict()

    async def set_hostname(self, candidate: str) -> HostnameChangeResult:
        """
        Change the hostname to ``candidate`` (lowercased).

        Concurrent calls on the same instance are serialized.
        """
        async with self._lock:
            self.state = TransitionState.VALIDATING
            try:
                hostname = normalize_hostname(candidate)
            except HostnameValidationError as error:
                self.state = TransitionState.IDLE
                self.logger.warning(_("Rejected hostname %r: %s"), candidate, error)
                return HostnameChangeResult(
                    success=False,
                    failed_step=TransitionStep.VALIDATE,
                    error=str(error),
                )

            snapshot = await self._take_snapshot()
            return await self._run_transition(hostname, snapshot)

    async def _take_snapshot(self) -> HostConfigSnapshot:
        original = await self.host_state.read_hostname_file()
        if original is None:
            self.logger.warning(
                _("Could not read current hostname, rollback will be best-effort")
            )
            original = ""
        return HostConfigSnapshot(original=original)

    def _plan(self, hostname: str, snapshot: HostConfigSnapshot) -> List[PlannedStep]:
        state = self.host_state
        original = snapshot.original
        return [
            PlannedStep(
                TransitionStep.WRITE_HOSTNAME_FILE,
                TransitionState.FILE_UPDATED,
                lambda: state.write_hostname_file(hostname),
                lambda: self._restore_hostname_file(original),
            ),
            PlannedStep(
                TransitionStep.APPLY_KERNEL_HOSTNAME,
                TransitionState.KERNEL_UPDATED,
                lambda: state.set_live_hostname(hostname),
                lambda: self._restore_live_hostname(original),
            ),
            # The responder is restarted once more after the other undos,
            # see _rollback.
            PlannedStep(
                TransitionStep.RESTART_MDNS_SERVICE,
                TransitionState.SERVICE_RESTARTED,
                state.restart_mdns,
            ),
            PlannedStep(
                TransitionStep.UPDATE_HOSTS_FILE,
                TransitionState.HOSTS_UPDATED,
                lambda: state.replace_hosts_alias(original, hostname),
            ),
        ]

    async def _restore_hostname_file(self, original: str) -> bool:
        if not original:
            # Never write an empty hostname.
            return False
        return await self.host_state.write_hostname_file(original)

    async def _restore_live_hostname(self, original: str) -> bool:
        if not original:
            return False
        return await self.host_state.set_live_hostname(original)

    async def _run_transition(
        self, hostname: str, snapshot: HostConfigSnapshot
    ) -> HostnameChangeResult:
        self.logger.info(
            _("Changing hostname from %r to %r"), snapshot.original, hostname
        )
        completed: List[PlannedStep] = []
        try:
            for planned in self._plan(hostname, snapshot):
                if not await planned.apply():
                    raise TransitionStepFailure(planned.step)
                completed.append(planned)
                self.state = planned.reached
        except TransitionStepFailure as failure:
            self.logger.error(
                _("Hostname change to %r failed: %s"), hostname, failure
            )
            if (
                failure.step is TransitionStep.UPDATE_HOSTS_FILE
                and not self.rollback_on_hosts_failure
            ):
                # The file and live hostname already agree on the new name;
                # only the alias line lags behind.
                completed = []
            rolled_back, diverged = await self._rollback(completed)
            self.state = TransitionState.IDLE
            return HostnameChangeResult(
                success=False,
                hostname=hostname,
                original=snapshot.original,
                failed_step=failure.step,
                error=str(failure),
                rolled_back=rolled_back,
                diverged=diverged,
            )

        self.state = TransitionState.IDLE
        self.logger.info(_("Hostname changed to %s"), hostname)
        return HostnameChangeResult(
            success=True, hostname=hostname, original=snapshot.original
        )

    async def _rollback(
        self, completed: List[PlannedStep]
    ) -> Tuple[List[TransitionStep], bool]:
        """Undo ``completed`` steps, newest first. Returns (undone steps, diverged)."""
        rolled_back: List[TransitionStep] = []
        diverged = False

        for planned in reversed(completed):
            if planned.undo is None:
                continue
            try:
                if not await planned.undo():
                    raise UnrecoverableDivergence(planned.step)
            except UnrecoverableDivergence as divergence:
                self.logger.error(
                    _("%s; hostname file and live hostname may disagree"),
                    divergence,
                )
                diverged = True
                continue
            rolled_back.append(planned.step)
            self.logger.info(_("Rolled back step %s"), planned.step.value)

        if any(p.step is TransitionStep.RESTART_MDNS_SERVICE for p in completed):
            if await self.host_state.restart_mdns():
                rolled_back.append(TransitionStep.RESTART_MDNS_SERVICE)
            else:
                self.logger.warning(
                    _("mDNS responder could not be restarted after rollback")
                )

        return rolled_back, diverged
