"""
Tests for hostname type definitions and validation.
"""

import pytest

from src.hostconfig_agent.operations.hostname_types import (
    HostnameChangeResult,
    HostnameValidationError,
    TransitionStep,
    TransitionStepFailure,
    UnrecoverableDivergence,
    normalize_hostname,
)


class TestNormalizeHostname:
    """Tests for normalize_hostname."""

    @pytest.mark.parametrize(
        "candidate,expected",
        [
            ("myhost", "myhost"),
            ("My-Host", "my-host"),
            ("a", "a"),
            ("9lives", "9lives"),
            ("a-b-c-1", "a-b-c-1"),
            ("X" * 63, "x" * 63),
        ],
    )
    def test_valid(self, candidate, expected):
        """Valid labels come back lowercased."""
        assert normalize_hostname(candidate) == expected

    @pytest.mark.parametrize(
        "candidate",
        ["", "-", "-bad-", "bad-", "-bad", "my_host", "my host", "host.example.com",
         "a" * 64, "host!", None, 42],
    )
    def test_invalid(self, candidate):
        """Anything that isn't a single RFC 1123 label is rejected."""
        with pytest.raises(HostnameValidationError):
            normalize_hostname(candidate)

    def test_validation_error_is_a_value_error(self):
        """Callers can catch it as ValueError."""
        assert issubclass(HostnameValidationError, ValueError)


class TestErrors:
    """Tests for the transition error types."""

    def test_step_failure_carries_step(self):
        """The failed step is kept on the exception."""
        failure = TransitionStepFailure(TransitionStep.APPLY_KERNEL_HOSTNAME)
        assert failure.step is TransitionStep.APPLY_KERNEL_HOSTNAME
        assert "apply_kernel_hostname" in str(failure)

    def test_divergence_carries_step(self):
        """The step whose undo failed is kept on the exception."""
        divergence = UnrecoverableDivergence(TransitionStep.WRITE_HOSTNAME_FILE)
        assert divergence.step is TransitionStep.WRITE_HOSTNAME_FILE
        assert "write_hostname_file" in str(divergence)


class TestHostnameChangeResult:
    """Tests for HostnameChangeResult."""

    def test_truthiness_follows_success(self):
        """The result can be used where a boolean is expected."""
        assert HostnameChangeResult(success=True, hostname="a")
        assert not HostnameChangeResult(success=False)

    def test_success_dict(self):
        """Success renders a result message."""
        result = HostnameChangeResult(success=True, hostname="pi")
        assert result.to_dict() == {"success": True, "result": "Hostname changed to pi"}

    def test_failure_dict(self):
        """Failure renders the step, the error and what was undone."""
        result = HostnameChangeResult(
            success=False,
            failed_step=TransitionStep.RESTART_MDNS_SERVICE,
            error="boom",
            rolled_back=[TransitionStep.APPLY_KERNEL_HOSTNAME],
        )
        assert result.to_dict() == {
            "success": False,
            "error": "boom",
            "failed_step": "restart_mdns_service",
            "rolled_back": ["apply_kernel_hostname"],
        }
