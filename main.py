"""
Command line entry point for hostconfig-agent.

Reads or changes the hostname, LAN addressing mode and service toggles of the
local device and prints the outcome as JSON.
"""

import argparse
import asyncio
import json
import logging
import os
import sys
from typing import Any, List, Optional

from src.i18n import _, set_language
from src.hostconfig_agent.core.config import LOCAL_CONFIG, SYSTEM_CONFIG, ConfigManager
from src.hostconfig_agent.operations.platform_interface import RaspbianPlatform
from src.hostconfig_agent.utils.logging_formatter import UTCTimestampFormatter
from src.hostconfig_agent.utils.verbosity_logger import get_logger

LOG_FORMAT = "%(levelname)s: %(name)s: %(message)s"

SERVICE_COMMANDS = {
    "dhcp": ("get_dhcp_server_status", "set_dhcp_server_status"),
    "mdns": ("get_mdns_server_status", "set_mdns_server_status"),
    "ssh": ("get_ssh_server_status", "set_ssh_server_status"),
}


class HostConfigAgent:
    """Wires configuration, logging and the platform interface together."""

    def __init__(self, config_file: Optional[str] = None):
        if config_file is None and any(
            os.path.exists(path) for path in (SYSTEM_CONFIG, LOCAL_CONFIG)
        ):
            config_file = "hostconfig-agent.yaml"
        self.config = ConfigManager(config_file)
        set_language(self.config.get_language())
        self.setup_logging()
        self.logger = get_logger(__name__, self.config)
        self.platform = RaspbianPlatform(self.config)

    def setup_logging(self):
        """Set up file logging, plus console logging when requested."""
        log_level = self.config.get_log_levels().split("|")[0].strip().upper()
        level = getattr(logging, log_level, logging.INFO)
        log_file = self.config.get_log_file()

        if not log_file:
            env_log_dir = os.environ.get("HOSTCONFIG_LOG_DIR")
            logs_dir = env_log_dir or os.path.join(os.getcwd(), "logs")
            os.makedirs(logs_dir, exist_ok=True)
            log_file = os.path.join(logs_dir, "hostconfig-agent.log")

        root_logger = logging.getLogger()
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)

        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(UTCTimestampFormatter(LOG_FORMAT))
        root_logger.addHandler(file_handler)
        root_logger.setLevel(level)

        if os.environ.get("HOSTCONFIG_LOG_CONSOLE", "").lower() in ("1", "true", "yes"):
            console_handler = logging.StreamHandler()
            console_handler.setLevel(level)
            console_handler.setFormatter(UTCTimestampFormatter(LOG_FORMAT))
            root_logger.addHandler(console_handler)

    async def dispatch(self, args: argparse.Namespace) -> Any:
        """Run the operation selected on the command line."""
        platform = self.platform
        self.logger.debug("Dispatching command %s", args.command)

        if args.command == "get-hostname":
            return {"hostname": await platform.get_hostname()}
        if args.command == "set-hostname":
            result = await platform.set_hostname(args.hostname)
            return result.to_dict()
        if args.command == "get-lan":
            return await platform.get_lan_mode()
        if args.command == "set-lan":
            options = {
                "ipaddr": args.ipaddr,
                "netmask": args.netmask,
                "gateway": args.gateway,
                "dns": args.dns,
            }
            options = {key: value for key, value in options.items() if value}
            return {"success": await platform.set_lan_mode(args.mode, options)}
        if args.command in SERVICE_COMMANDS:
            getter, setter = SERVICE_COMMANDS[args.command]
            if args.state is None:
                return {"enabled": await getattr(platform, getter)()}
            return {"success": await getattr(platform, setter)(args.state == "on")}
        if args.command == "restart-gateway":
            return {"success": await platform.restart_gateway()}
        if args.command == "reboot":
            return {"success": await platform.restart_system()}
        raise ValueError(_("Unknown command: %s") % args.command)


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        prog="hostconfig-agent",
        description=_("Manage hostname, LAN mode and services of this device."),
    )
    parser.add_argument(
        "--config",
        "-c",
        default=os.getenv("HOSTCONFIG_CONFIG"),
        help=_("Path to the YAML configuration file."),
    )
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("get-hostname", help=_("Print the hostname."))
    set_hostname = commands.add_parser("set-hostname", help=_("Change the hostname."))
    set_hostname.add_argument("hostname")

    commands.add_parser("get-lan", help=_("Print the LAN mode and options."))
    set_lan = commands.add_parser("set-lan", help=_("Set the LAN mode."))
    set_lan.add_argument("mode", choices=["static", "dhcp"])
    set_lan.add_argument("--ipaddr")
    set_lan.add_argument("--netmask")
    set_lan.add_argument("--gateway")
    set_lan.add_argument("--dns", nargs="+")

    for name in SERVICE_COMMANDS:
        service = commands.add_parser(name, help=_("Query or toggle %s.") % name)
        service.add_argument("state", nargs="?", choices=["on", "off"])

    commands.add_parser("restart-gateway", help=_("Restart the gateway service."))
    commands.add_parser("reboot", help=_("Reboot the device."))
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Parse arguments, run the command and print its JSON result."""
    args = build_parser().parse_args(argv)
    try:
        agent = HostConfigAgent(args.config)
    except (FileNotFoundError, ValueError, RuntimeError) as error:
        print(json.dumps({"success": False, "error": str(error)}))
        return 1

    output = asyncio.run(agent.dispatch(args))
    print(json.dumps(output))
    if isinstance(output, dict) and output.get("success") is False:
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
