"""
Type definitions for hostname operations.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from src.i18n import _

MAX_HOSTNAME_LENGTH = 63
HOSTNAME_PATTERN = re.compile(r"^[a-z0-9]([a-z0-9-]*[a-z0-9])?$")


class TransitionStep(str, Enum):
    """Ordered steps of a hostname change."""

    VALIDATE = "validate"
    WRITE_HOSTNAME_FILE = "write_hostname_file"
    APPLY_KERNEL_HOSTNAME = "apply_kernel_hostname"
    RESTART_MDNS_SERVICE = "restart_mdns_service"
    UPDATE_HOSTS_FILE = "update_hosts_file"


class TransitionState(str, Enum):
    """Where a hostname change currently stands."""

    IDLE = "idle"
    VALIDATING = "validating"
    FILE_UPDATED = "file_updated"
    KERNEL_UPDATED = "kernel_updated"
    SERVICE_RESTARTED = "service_restarted"
    HOSTS_UPDATED = "hosts_updated"


class HostnameValidationError(ValueError):
    """The candidate hostname is not a valid RFC 1123 label."""


class TransitionStepFailure(RuntimeError):
    """A step of the hostname change did not succeed."""

    def __init__(self, step: TransitionStep, message: Optional[str] = None):
        self.step = step
        super().__init__(message or _("Step %s failed") % step.value)


class UnrecoverableDivergence(RuntimeError):
    """Undoing a step failed; the host may be left inconsistent."""

    def __init__(self, step: TransitionStep):
        self.step = step
        super().__init__(_("Rollback of step %s failed") % step.value)


def normalize_hostname(candidate: str) -> str:
    """
    Lowercase ``candidate`` and check it is a single RFC 1123 label.

    Raises:
        HostnameValidationError: if it is empty, longer than 63 characters,
            contains characters outside [a-z0-9-] or starts/ends with '-'
    """
    if not isinstance(candidate, str):
        raise HostnameValidationError(_("Invalid hostname format"))
    hostname = candidate.lower()
    if len(hostname) > MAX_HOSTNAME_LENGTH or not HOSTNAME_PATTERN.fullmatch(hostname):
        raise HostnameValidationError(_("Invalid hostname format"))
    return hostname


@dataclass(frozen=True)
class HostConfigSnapshot:
    """Hostname file content captured before a change; the rollback target."""

    original: str


@dataclass
class HostnameChangeResult:
    """Outcome of a hostname change; truthy iff it succeeded."""

    success: bool
    hostname: str = ""
    original: str = ""
    failed_step: Optional[TransitionStep] = None
    error: Optional[str] = None
    rolled_back: List[TransitionStep] = field(default_factory=list)
    diverged: bool = False

    def __bool__(self) -> bool:
        return self.success

    def to_dict(self) -> Dict[str, Any]:
        """Render as a command response."""
        if self.success:
            return {
                "success": True,
                "result": _("Hostname changed to %s") % self.hostname,
            }
        response: Dict[str, Any] = {
            "success": False,
            "error": self.error,
            "failed_step": self.failed_step.value if self.failed_step else None,
            "rolled_back": [step.value for step in self.rolled_back],
        }
        if self.diverged:
            response["diverged"] = True
        return response
