"""VaultGen CLI entry point.

Subcommands:
    generate   build one layout and print it as an ASCII map (or JSON)
    server     run the Flask/Socket.IO API server

Configuration comes from flags, then DUNGEON_* environment variables (an
optional .env file is loaded first). Run `python run.py --help` for details.
"""

import argparse
import json
import os
import sys
from textwrap import dedent

from colorama import Fore, Style
from colorama import init as _color_init
from dotenv import load_dotenv

_color_init()


def _color_enabled() -> bool:
    # Plain output when not a real terminal (e.g., during pytest capture)
    try:
        return sys.stdout.isatty()
    except Exception:  # pragma: no cover
        return False


def _load_version() -> str:
    try:
        with open(os.path.join(os.path.dirname(os.path.abspath(__file__)), "VERSION"), "r", encoding="utf-8") as f:
            return f.read().strip()
    except OSError:
        return "0.1.0"


__version__ = _load_version()


def parse_args(argv: list[str]) -> argparse.Namespace:
    description = """
    VaultGen dungeon layout generator

    Assemble a dungeon by attaching room templates door to door with a
    backtracking search, or serve layouts over HTTP / Socket.IO.
    """

    epilog = dedent(
        """
        Environment variables:
          DUNGEON_ITERATION_THRESHOLD  Search calls per attempt before restarting (default: 5000)
          DUNGEON_MAX_SIZE             Max rooms per layout, 0 = no cap (default: 30)
          DUNGEON_MAX_ATTEMPTS         Attempts before giving up, 0 = retry forever (default: 100)
          DUNGEON_PRUNE_BLOCKED        Prune doors that can never be resolved (default: 1)
          DUNGEON_SEED                 Fixed seed for reproducible layouts
          DUNGEON_CATALOG              Path to a JSON room catalog
          HOST / PORT                  Server bind address (default: 0.0.0.0:5000)

        Examples:
          # Print a layout for seed 42
          python run.py generate --seed 42

          # Use a custom catalog and emit JSON
          python run.py generate --catalog rooms.json --json

          # Run the API server on port 8080
          python run.py server --port 8080
        """
    )

    parser = argparse.ArgumentParser(
        prog="VaultGen",
        description=dedent(description),
        epilog=epilog,
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument(
        "--env-file",
        dest="env_file",
        help="Path to a .env file to load before processing flags",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"VaultGen {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")

    gen_parser = subparsers.add_parser(
        "generate",
        help="Generate one layout and print it",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    gen_parser.add_argument("--seed", type=int, default=None, help="Seed (default: env DUNGEON_SEED or random)")
    gen_parser.add_argument("--threshold", type=int, default=None, help="Iteration budget per attempt")
    gen_parser.add_argument("--max-size", dest="max_size", type=int, default=None, help="Room cap, 0 = none")
    gen_parser.add_argument(
        "--max-attempts", dest="max_attempts", type=int, default=None, help="Attempt cap, 0 = retry forever"
    )
    gen_parser.add_argument("--catalog", default=None, help="JSON room catalog path")
    gen_parser.add_argument(
        "--no-prune",
        dest="no_prune",
        action="store_true",
        help="Keep trying rooms whose doors open onto occupied cells (slower, same layouts)",
    )
    gen_parser.add_argument("--json", action="store_true", help="Print the layout as JSON instead of a map")
    gen_parser.set_defaults(command="generate")

    server_parser = subparsers.add_parser(
        "server",
        help="Run the Socket.IO web server",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Run the Flask/Socket.IO server",
    )
    server_parser.add_argument("--host", default=None, help="Host interface to bind (default: env HOST or 0.0.0.0)")
    server_parser.add_argument("--port", type=int, default=None, help="Port to listen on (default: env PORT or 5000)")
    server_parser.add_argument("--debug", action="store_true", help="Enable Flask debug mode")
    server_parser.set_defaults(command="server")

    # If no subcommand provided, default to generate
    if len(argv) == 0:
        argv = ["generate"]
    args = parser.parse_args(argv)
    if args.command is None:
        args = parser.parse_args(list(argv) + ["generate"])
    return args


def _build_config(args):
    from vaultgen.dungeon import GeneratorConfig

    cfg = GeneratorConfig.from_env()
    if args.threshold is not None:
        cfg.apply("DUNGEON_ITERATION_THRESHOLD", args.threshold)
    if args.max_size is not None:
        cfg.apply("DUNGEON_MAX_SIZE", args.max_size)
    if args.max_attempts is not None:
        cfg.apply("DUNGEON_MAX_ATTEMPTS", args.max_attempts)
    if args.catalog:
        cfg.apply("DUNGEON_CATALOG", args.catalog)
    if args.no_prune:
        cfg.prune_blocked = False
    if args.seed is not None:
        cfg.seed = args.seed
    cfg.validate()
    return cfg


def run_generate(args) -> int:
    from vaultgen.dungeon import (
        CatalogError,
        DungeonGenerator,
        InfeasibleConfigurationError,
        RoomCatalog,
        TextPresenter,
        default_catalog,
    )

    try:
        cfg = _build_config(args)
        catalog = RoomCatalog.from_json(cfg.catalog_path) if cfg.catalog_path else default_catalog()
    except (CatalogError, ValueError, OSError) as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1
    presenter = TextPresenter(catalog)
    gen = DungeonGenerator(cfg, catalog=catalog, presenter=presenter)
    try:
        layout = gen.generate()
    except InfeasibleConfigurationError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1

    if args.json:
        data = layout.to_dict()
        data["metrics"] = gen.metrics
        print(json.dumps(data, indent=2))
        return 0

    color = _color_enabled()

    def label(text: str) -> str:
        return f"{Fore.YELLOW}{text}{Style.RESET_ALL}" if color else text

    def value(val) -> str:
        return f"{Fore.GREEN}{val}{Style.RESET_ALL}" if color else str(val)

    divider = (Fore.MAGENTA + "=" * 40 + Style.RESET_ALL) if color else "=" * 40
    lines = [
        divider,
        f"  {label('Seed:'):12} {value(layout.seed)}",
        f"  {label('Rooms:'):12} {value(layout.rooms)}",
        f"  {label('Target at:'):12} {value(f'{layout.target_coord.x},{layout.target_coord.y}')}"
        f" (distance {layout.target_distance})",
        f"  {label('Attempts:'):12} {value(layout.attempts)}",
        divider,
        presenter.render(),
    ]
    print("\n".join(lines))
    return 0


def main(argv: list[str]) -> int:
    args = parse_args(argv)
    if getattr(args, "env_file", None):
        load_dotenv(args.env_file)
    else:
        # Load default .env if present (no error if missing)
        load_dotenv()

    mode = (getattr(args, "command", None) or "generate").lower()
    if mode == "generate":
        return run_generate(args)

    host = getattr(args, "host", None) or os.getenv("HOST", "0.0.0.0")
    port = int(getattr(args, "port", None) or os.getenv("PORT", "5000"))
    from vaultgen.logging_utils import log
    from vaultgen.server import start_server

    log.info(event="startup", mode=mode, host=host, port=port)
    start_server(host, port, bool(getattr(args, "debug", False)))
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
