"""Command-line interface for the hue_adapter package."""

import argparse
import asyncio
import logging
import sys

from hue_adapter import AdapterManager, BridgeAdapter, HueLight, JsonFileStorage
from hue_adapter._internal.console import (
    BOLD,
    CYAN,
    GREEN,
    MAGENTA,
    RED,
    YELLOW,
    color_swatch,
    console,
    styled_text,
)
from hue_adapter.bridge import DEFAULT_TIMEOUT, discover_bridges
from hue_adapter.pairing import DEFAULT_PAIRING_TIMEOUT, PairingStatus

DISABLE_STYLING = False


def styled_for_cli(text: str, style: str) -> str:
    """Apply styling if enabled, otherwise return plain text.

    This helper makes tests less brittle by allowing them to match
    on the plain text content.
    """
    if DISABLE_STYLING:
        return text
    return styled_text(text, style)


def parse_args(
    argv: list[str] | None = None,
) -> tuple[argparse.ArgumentParser, argparse.Namespace]:
    """Parse command line arguments.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Tuple of (parser, parsed_args)
    """
    parser = argparse.ArgumentParser(
        description="Pair with a Philips Hue bridge and control its lights"
    )
    parser.add_argument(
        "--host", help="IP address of the Hue bridge (auto-detected if not provided)"
    )
    parser.add_argument(
        "--bridge-id", help="Identifier of the bridge (defaults to the host when --host is given)"
    )
    parser.add_argument("--storage-path", help="Path to the file storing bridge usernames")
    parser.add_argument(
        "--request-timeout",
        type=float,
        default=DEFAULT_TIMEOUT,
        help="Timeout of a single bridge request in seconds",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    subparsers.add_parser("discover", help="Find bridges on the local network")

    pair_parser = subparsers.add_parser("pair", help="Pair with the bridge")
    pair_parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_PAIRING_TIMEOUT,
        help="Seconds to wait for the link button to be pressed",
    )

    subparsers.add_parser("list", aliases=["ls"], help="List lights")

    set_parser = subparsers.add_parser("set", help="Set light state")
    set_parser.add_argument("name", help="Light name or ID")
    on_off = set_parser.add_mutually_exclusive_group()
    on_off.add_argument("--on", action="store_true", help="Turn on")
    on_off.add_argument("--off", action="store_true", help="Turn off")
    set_parser.add_argument("--color", help="Set color as hex, e.g. '#ff8800'")

    return parser, parser.parse_args(argv)


async def resolve_bridge(args: argparse.Namespace) -> tuple[str, str] | None:
    """Work out the (bridge id, ip) to talk to.

    An explicit ``--host`` wins; otherwise the first bridge reported by the
    discovery service is used.
    """
    if args.host:
        return args.bridge_id or args.host, args.host

    bridges = await discover_bridges(timeout=args.request_timeout)
    if not bridges:
        return None
    if args.bridge_id:
        for bridge in bridges:
            if bridge.get("id") == args.bridge_id:
                return bridge["id"], bridge["internalipaddress"]
        return None
    return bridges[0]["id"], bridges[0]["internalipaddress"]


def find_light(adapter: BridgeAdapter, name: str) -> HueLight | None:
    """Find a light by bridge-local id first, then by name."""
    light = adapter.registry.get(name)
    if light is not None:
        return light
    for light in adapter.devices:
        if light.name == name:
            return light
    return None


def light_formatter(light: HueLight) -> str:
    status = "ON" if light.on else "OFF"
    status_styled = styled_for_cli(f"{status:<3}", GREEN if light.on else RED)
    name_styled = styled_for_cli(f"{light.name:<25}", CYAN)
    swatch = "" if DISABLE_STYLING else color_swatch(light.color) + " "
    return f"{light.light_id:>3}  {name_styled} {status_styled}  {swatch}{light.color}"


async def run_discover(args: argparse.Namespace) -> int:
    bridges = await discover_bridges(timeout=args.request_timeout)
    if not bridges:
        console.error("No bridges found. Specify the bridge with --host.")
        return 1

    console.info(styled_for_cli(f"BRIDGES ({len(bridges)}):", YELLOW + BOLD))
    for bridge in bridges:
        console.info(f"  {bridge.get('id', '?'):<20} {bridge.get('internalipaddress', '?')}")
    return 0


async def run_pair(adapter: BridgeAdapter, timeout: float) -> int:
    if adapter.paired:
        console.success(f"Already paired with bridge {adapter.bridge_id}")
        return 0

    console.warning("Press the link button on your bridge.")
    adapter.start_pairing(timeout)
    status = await adapter.pairing.wait()

    if status is PairingStatus.SUCCEEDED:
        console.success(f"Paired with bridge {adapter.bridge_id}")
        console.info(f"Found {len(adapter.devices)} lights")
        return 0

    console.error(f"Pairing with bridge {adapter.bridge_id} {status.value}")
    return 1


async def run_list(adapter: BridgeAdapter) -> int:
    lights = adapter.devices
    console.info(styled_for_cli(f"LIGHTS ({len(lights)}):", YELLOW + BOLD))
    console.table(lights, light_formatter)
    return 0


async def run_set(adapter: BridgeAdapter, args: argparse.Namespace) -> int:
    light = find_light(adapter, args.name)
    if light is None:
        console.error(f"Light '{args.name}' not found")
        return 1

    changed = False
    try:
        if args.color is not None:
            await light.set_property("color", args.color)
            changed = True
    except ValueError as e:
        console.error(str(e))
        return 1

    if args.on:
        await light.set_property("on", True)
        changed = True
    elif args.off:
        await light.set_property("on", False)
        changed = True

    if changed:
        console.success(f"Updated light '{light.name}'")
    else:
        console.warning("No changes specified")
    return 0


async def run(parser: argparse.ArgumentParser, args: argparse.Namespace) -> int:
    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "discover":
        return await run_discover(args)

    target = await resolve_bridge(args)
    if target is None:
        console.error(
            "No bridge available. Please specify --host or make sure the bridge is online."
        )
        return 1
    bridge_id, ip = target
    console.info(
        f"{styled_for_cli('Using bridge', MAGENTA)} {styled_for_cli(bridge_id, YELLOW)} at {ip}"
    )

    manager = AdapterManager()
    adapter = BridgeAdapter(
        manager,
        bridge_id,
        ip,
        storage=JsonFileStorage(args.storage_path),
        timeout=args.request_timeout,
    )
    await adapter.load()

    if args.command == "pair":
        return await run_pair(adapter, args.timeout)

    if not adapter.paired:
        console.error(f"Bridge {bridge_id} is not paired. Run 'hue-adapter pair' first.")
        return 1

    if args.command in ["list", "ls"]:
        return await run_list(adapter)
    if args.command == "set":
        return await run_set(adapter, args)
    return 1


def main(argv: list[str] | None = None) -> int:
    """Run the hue-adapter command-line interface.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    parser, args = parse_args(argv)

    log_level = logging.DEBUG if args.debug else logging.WARNING
    logging.basicConfig(level=log_level)

    return asyncio.run(run(parser, args))


if __name__ == "__main__":
    sys.exit(main())
