"""
LAN addressing operations for hostconfig-agent.

The LAN interface is described by an ifupdown stanza in
/etc/network/interfaces.d/eth0. A missing file means the interface is left to
DHCP.
"""

import ipaddress
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from src.i18n import _
from src.hostconfig_agent.core.config import ConfigManager
from src.hostconfig_agent.operations.config_file_editor import ConfigFileEditor
from src.hostconfig_agent.operations.service_controller import ServiceController


class LanMode(str, Enum):
    """Supported LAN addressing modes."""

    STATIC = "static"
    DHCP = "dhcp"


@dataclass
class LanOptions:
    """Static addressing options."""

    ipaddr: Optional[str] = None
    netmask: Optional[str] = None
    gateway: Optional[str] = None
    dns: List[str] = field(default_factory=list)

    def is_empty(self) -> bool:
        """True when no option is set."""
        return not (self.ipaddr or self.netmask or self.gateway or self.dns)

    def to_dict(self) -> Dict[str, Any]:
        """Only the options that are set."""
        options: Dict[str, Any] = {}
        if self.ipaddr:
            options["ipaddr"] = self.ipaddr
        if self.netmask:
            options["netmask"] = self.netmask
        if self.gateway:
            options["gateway"] = self.gateway
        if self.dns:
            options["dns"] = list(self.dns)
        return options

    @classmethod
    def from_dict(cls, options: Optional[Dict[str, Any]]) -> "LanOptions":
        """Build from a plain dict, ignoring unknown keys."""
        options = options or {}
        dns = options.get("dns") or []
        if isinstance(dns, str):
            dns = dns.split()
        return cls(
            ipaddr=options.get("ipaddr"),
            netmask=options.get("netmask"),
            gateway=options.get("gateway"),
            dns=list(dns),
        )


@dataclass
class LanConfig:
    """LAN addressing mode and, for static mode, its options."""

    mode: str
    options: LanOptions = field(default_factory=LanOptions)

    def to_dict(self) -> Dict[str, Any]:
        """Render as ``{"mode": ..., "options": {...}}``."""
        return {"mode": self.mode, "options": self.options.to_dict()}


def parse_interface_stanza(content: str) -> LanConfig:
    """Parse an ifupdown stanza into a LanConfig."""
    mode = LanMode.STATIC.value
    options = LanOptions()

    for line in content.strip().splitlines():
        parts = line.split()
        if not parts:
            continue
        keyword = parts[0]
        if keyword == "iface" and len(parts) >= 4:
            mode = parts[3]
        elif keyword == "address" and len(parts) >= 2:
            options.ipaddr = parts[1]
        elif keyword == "netmask" and len(parts) >= 2:
            options.netmask = parts[1]
        elif keyword == "gateway" and len(parts) >= 2:
            options.gateway = parts[1]
        elif keyword == "dns-nameservers":
            options.dns = parts[1:]

    if mode != LanMode.STATIC.value:
        options = LanOptions()
    return LanConfig(mode=mode, options=options)


def render_interface_stanza(interface: str, config: LanConfig) -> str:
    """Render a LanConfig as an ifupdown stanza."""
    lines = [f"auto {interface}", f"iface {interface} inet {config.mode}"]
    options = config.options
    if options.ipaddr:
        lines.append(f"    address {options.ipaddr}")
    if options.netmask:
        lines.append(f"    netmask {options.netmask}")
    if options.gateway:
        lines.append(f"    gateway {options.gateway}")
    if options.dns:
        lines.append(f"    dns-nameservers {' '.join(options.dns)}")
    return "\n".join(lines) + "\n"


def validate_lan_config(config: LanConfig) -> Optional[str]:
    """Return an error message if ``config`` can't be written, else None."""
    valid_modes = [mode.value for mode in LanMode]
    if config.mode not in valid_modes:
        return _("Invalid LAN mode: %s") % config.mode

    if config.mode == LanMode.DHCP.value:
        if not config.options.is_empty():
            return _("Addressing options are not allowed in DHCP mode")
        return None

    options = config.options
    if not options.ipaddr:
        return _("Static mode requires an address")

    try:
        ipaddress.IPv4Address(options.ipaddr)
        if options.gateway:
            ipaddress.IPv4Address(options.gateway)
        if options.netmask:
            ipaddress.IPv4Network(f"0.0.0.0/{options.netmask}")
        for server in options.dns:
            ipaddress.ip_address(server)
    except ValueError as error:
        return _("Invalid address: %s") % error
    return None


class LanOperations:
    """Reads and writes the LAN addressing mode."""

    def __init__(
        self,
        editor: ConfigFileEditor,
        services: ServiceController,
        config_manager: Optional[ConfigManager] = None,
    ):
        config = config_manager or ConfigManager(None)
        self.editor = editor
        self.services = services
        self.interface_file = config.get_lan_interface_file()
        self.interface = config.get_lan_interface()
        self.networking_service = config.get_service_name("networking")
        self.logger = logging.getLogger(__name__)

    async def get_lan_mode(self) -> LanConfig:
        """Read the LAN mode and options fresh from disk."""
        content = await self.editor.read_text(self.interface_file)
        if content is None:
            return LanConfig(mode=LanMode.DHCP.value)
        return parse_interface_stanza(content)

    async def set_lan_mode(
        self, mode: str, options: Optional[Dict[str, Any]] = None
    ) -> bool:
        """Write the LAN stanza and restart networking."""
        config = LanConfig(mode=mode, options=LanOptions.from_dict(options))
        error = validate_lan_config(config)
        if error:
            self.logger.error(_("Refusing to set LAN mode: %s"), error)
            return False

        stanza = render_interface_stanza(self.interface, config)
        if not await self.editor.write_text_privileged(self.interface_file, stanza):
            return False

        self.logger.info(_("LAN mode set to %s"), mode)
        return await self.services.restart(self.networking_service)
