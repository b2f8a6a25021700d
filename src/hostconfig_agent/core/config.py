"""
Configuration management for hostconfig-agent.
Reads YAML configuration files and provides configuration data.
"""

import copy
import logging
import os
from typing import Any, Dict, List, Optional

import yaml

from src.i18n import _

SYSTEM_CONFIG = "/etc/hostconfig-agent.yaml"
LOCAL_CONFIG = "./hostconfig-agent.yaml"

DEFAULT_CONFIG: Dict[str, Any] = {
    "paths": {
        "hostname_file": "/etc/hostname",
        "hosts_file": "/etc/hosts",
        "lan_interface_file": "/etc/network/interfaces.d/eth0",
    },
    "lan": {"interface": "eth0"},
    "services": {
        "dhcp": "dnsmasq.service",
        "mdns": "avahi-daemon.service",
        "networking": "networking.service",
        "gateway": "mozilla-iot-gateway.service",
    },
    "commands": {"privilege": ["sudo", "-n"], "timeout": 30},
    "hostname": {"rollback_on_hosts_failure": False},
    "logging": {"level": "INFO|WARNING|ERROR|CRITICAL", "file": None},
    "i18n": {"language": "en"},
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively overlay ``override`` onto a copy of ``base``."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class ConfigManager:
    """Manages configuration for hostconfig-agent."""

    def __init__(self, config_file: Optional[str] = "hostconfig-agent.yaml"):
        """
        Load configuration.

        Passing ``None`` skips the file entirely and yields the built-in
        defaults, which is what components use when constructed without a
        config manager.
        """
        self.logger = logging.getLogger(__name__)
        self.config_data: Dict[str, Any] = copy.deepcopy(DEFAULT_CONFIG)
        self.config_file = (
            self._determine_config_path(config_file) if config_file else None
        )
        if self.config_file:
            self.load_config()

    def _determine_config_path(self, default_filename: str) -> str:
        """
        Determine configuration file path.

        Priority order:
        1. Absolute path as given (tests, explicit --config)
        2. /etc/hostconfig-agent.yaml
        3. ./hostconfig-agent.yaml
        4. The given relative filename
        """
        if os.path.isabs(default_filename):
            return default_filename
        if os.path.exists(SYSTEM_CONFIG):
            return SYSTEM_CONFIG
        if os.path.exists(LOCAL_CONFIG):
            return LOCAL_CONFIG
        if os.path.exists(default_filename):
            return default_filename
        return SYSTEM_CONFIG

    def load_config(self) -> None:
        """Load configuration from the YAML file on top of the defaults."""
        if not os.path.exists(self.config_file):
            raise FileNotFoundError(
                _("Configuration file '%s' not found. Expected locations: %s")
                % (self.config_file, f"{SYSTEM_CONFIG} or {LOCAL_CONFIG}")
            )

        try:
            with open(self.config_file, "r", encoding="utf-8") as file:
                loaded = yaml.safe_load(file) or {}
        except yaml.YAMLError as e:
            raise ValueError(_("Invalid YAML in configuration file: %s") % e) from e
        except OSError as e:
            raise RuntimeError(_("Failed to load configuration file: %s") % e) from e

        if not isinstance(loaded, dict):
            raise ValueError(
                _("Invalid YAML in configuration file: %s")
                % _("top level must be a mapping")
            )

        self.config_data = _merge(DEFAULT_CONFIG, loaded)
        self.logger.debug("Loaded configuration from %s", self.config_file)

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation.

        Args:
            key_path: Dot-separated path to the configuration key (e.g., 'paths.hosts_file')
            default: Default value if key is not found

        Returns:
            Configuration value or default
        """
        value = self.config_data
        try:
            for key in key_path.split("."):
                value = value[key]
            return value
        except (KeyError, TypeError):
            return default

    def get_hostname_file(self) -> str:
        """Get path of the persistent hostname file."""
        return self.get("paths.hostname_file")

    def get_hosts_file(self) -> str:
        """Get path of the hosts file."""
        return self.get("paths.hosts_file")

    def get_lan_interface_file(self) -> str:
        """Get path of the LAN interface definition file."""
        return self.get("paths.lan_interface_file")

    def get_lan_interface(self) -> str:
        """Get name of the LAN interface."""
        return self.get("lan.interface", "eth0")

    def get_service_name(self, role: str) -> str:
        """Get the unit name for a service role (dhcp, mdns, networking, gateway)."""
        return self.get(f"services.{role}")

    def get_privilege_command(self) -> List[str]:
        """Get the privilege escalation prefix."""
        privilege = self.get("commands.privilege", ["sudo", "-n"])
        if isinstance(privilege, str):
            return privilege.split()
        return list(privilege or [])

    def get_command_timeout(self) -> Optional[float]:
        """Get per-command timeout in seconds, None to disable."""
        timeout = self.get("commands.timeout", 30)
        return float(timeout) if timeout else None

    def should_rollback_on_hosts_failure(self) -> bool:
        """Check if a failed hosts-file update should roll back the hostname change."""
        return bool(self.get("hostname.rollback_on_hosts_failure", False))

    def get_log_levels(self) -> str:
        """Get pipe-separated logging levels configuration."""
        return self.get("logging.level", "INFO|WARNING|ERROR|CRITICAL")

    def get_log_file(self) -> Optional[str]:
        """Get log file path if specified."""
        return self.get("logging.file")

    def get_language(self) -> str:
        """Get configured language/locale."""
        return self.get("i18n.language", "en")
