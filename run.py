"""levelgen CLI entry point.

Generates a level (default subcommand) or serves the HTTP API. Accepts
configuration via flags and environment variables, with optional .env loading.

Run `python run.py --help` for details.
"""

import argparse
import os
import sys
from textwrap import dedent

from colorama import Fore, Style
from colorama import init as _color_init
from dotenv import load_dotenv

_color_init()
# Disable colors if output is not a real terminal (e.g., during pytest capture)
_COLOR_ENABLED = sys.stdout.isatty()

SUBCOMMANDS = ("generate", "serve")

EXIT_BAD_PARAMS = 2
EXIT_GENERATION_FAILED = 1


def _load_version() -> str:
    path = os.path.join(os.path.dirname(os.path.abspath(__file__)), "VERSION")
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read().strip()
    except FileNotFoundError:
        return "0.1.0"


__version__ = _load_version()


def _paint(color: str, text: str) -> str:
    return f"{color}{text}{Style.RESET_ALL}" if _COLOR_ENABLED else text


def _add_generate_flags(p: argparse.ArgumentParser):
    g = p.add_argument_group("layout")
    g.add_argument("--width", "-w", type=int, default=None, help="Overall map width in tiles (default 80)")
    g.add_argument("--height", "-H", type=int, default=None, help="Overall map height in tiles (default 25)")
    g.add_argument("--rooms", "-r", type=int, default=None, help="Target number of rooms (default 12)")
    g.add_argument("--min-room", "-m", dest="min_room", type=int, default=None, help="Minimum room dimension (default 4)")
    g.add_argument("--max-room", "-M", dest="max_room", type=int, default=None, help="Maximum room dimension (default 10)")
    g.add_argument("--margin", type=int, default=None, help="Minimum gap between rooms (default 1)")
    g.add_argument("--seed", "-s", default=None, help="RNG seed; integers or any text (hashed)")
    g.add_argument("--mode", default=None, help="Generation mode: marble|classic (default marble)")

    m = p.add_argument_group("marble")
    m.add_argument("--channel-width", dest="channel_width", type=int, default=None, help="Channel width in tiles (default 2)")
    m.add_argument("--corner-radius", dest="corner_radius", type=int, default=None, help="Corner radius in tiles (default 2)")
    m.add_argument("--enable-elevation", dest="enable_elevation", action="store_true", default=None, help="Assign room elevations")
    m.add_argument("--max-elevation", dest="max_elevation", type=int, default=None, help="Largest |elevation| (default 3)")
    m.add_argument(
        "--max-elevation-change",
        dest="max_elevation_change",
        type=int,
        default=None,
        help="Largest step between neighbors after smoothing (default 1)",
    )
    m.add_argument("--enable-obstacles", dest="enable_obstacles", action="store_true", default=None, help="Scatter obstacles in large rooms")
    m.add_argument("--obstacle-density", dest="obstacle_density", type=float, default=None, help="Obstacle chance per eligible cell (default 0.3)")
    m.add_argument("--trend-x", dest="trend_x", type=float, default=None, help="Trend vector x component")
    m.add_argument("--trend-y", dest="trend_y", type=float, default=None, help="Trend vector y component")
    m.add_argument("--trend-z", dest="trend_z", type=float, default=None, help="Trend vector elevation component")
    m.add_argument("--trend-strength", dest="trend_strength", type=float, default=None, help="Trend strength 0..1 (default 0.5)")
    m.add_argument("--start-x", dest="start_x", type=int, default=None, help="Trend origin x (default map center)")
    m.add_argument("--start-y", dest="start_y", type=int, default=None, help="Trend origin y (default map center)")

    o = p.add_argument_group("output")
    o.add_argument("--json-path", "-o", dest="json_path", default=None, help="Write level to JSON file path")
    o.add_argument("--print-json", dest="print_json", action="store_true", help="Print JSON to stdout")
    o.add_argument("--no-ascii", dest="no_ascii", action="store_true", help="Disable ASCII preview")
    o.add_argument("--html-path", dest="html_path", default=None, help="Write isometric HTML view to this path")
    o.add_argument("--html-only", dest="html_only", action="store_true", help="Only write HTML (skip ASCII and JSON)")


def parse_args(argv: list[str]) -> argparse.Namespace:
    description = """
    Marble level generator

    Generate a level (rooms, rounded channels, elevation, tiles and obstacles)
    or serve the generator over HTTP. If no subcommand is given, `generate`
    is assumed.
    """

    epilog = dedent(
        """
        Environment variables:
          HOST                              Bind address for `serve` (default: 0.0.0.0)
          PORT                              Port for `serve` (default: 5000)
          FLASK_DEBUG                       1 enables debug mode for `serve`
          LEVELGEN_LOG_LEVEL                debug|info|warn|error (default: info)
          LEVELGEN_LOG_JSON                 1 for JSON log lines
          LEVELGEN_ENABLE_GENERATION_METRICS 0 disables phase timing/metrics
          LEVELGEN_DISABLE_CACHE            1 disables the HTTP level cache

        Examples:
          # ASCII preview of a seeded level
          python run.py --seed 42

          # Elevation, obstacles and an isometric view
          python run.py generate -s 888 --enable-elevation --enable-obstacles --html-path out/level.html

          # Export JSON only
          python run.py generate --seed castle --no-ascii -o out/level.json

          # Serve the HTTP API on a custom port
          python run.py serve --port 8080
        """
    )

    parser = argparse.ArgumentParser(
        prog="levelgen",
        description=dedent(description),
        epilog=epilog,
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"levelgen {__version__}",
    )

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--env-file",
        dest="env_file",
        help="Path to a .env file to load before processing flags",
    )

    subparsers = parser.add_subparsers(dest="command")

    gen_parser = subparsers.add_parser(
        "generate",
        parents=[common],
        help="Generate a level and print/write it",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Generate one level from the given parameters",
    )
    _add_generate_flags(gen_parser)
    gen_parser.set_defaults(command="generate")

    serve_parser = subparsers.add_parser(
        "serve",
        parents=[common],
        help="Run the HTTP API server",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Serve /api/level, /api/level/metrics and /level/view",
    )
    serve_parser.add_argument("--host", default=None, help="Host interface to bind (default: env HOST or 0.0.0.0)")
    serve_parser.add_argument("--port", type=int, default=None, help="Port to listen on (default: env PORT or 5000)")
    serve_parser.add_argument("--debug", action="store_true", help="Enable Flask debug mode")
    serve_parser.set_defaults(command="serve")

    # If no subcommand provided, default to generate
    if not argv or argv[0] not in SUBCOMMANDS + ("-h", "--help", "--version"):
        argv = ["generate", *argv]

    return parser.parse_args(argv)


def _write(path: str, text: str):
    from levelgen.utils.serialize import write_text

    write_text(path, text)


def run_generate(args: argparse.Namespace) -> int:
    from levelgen.generation import ClassificationGap, ConfigurationError, generate, params_from_mapping
    from levelgen.rendering.ascii import legend, to_ascii
    from levelgen.rendering.isometric import generate_html
    from levelgen.utils.serialize import level_to_json

    if args.print_json:
        # stdout carries the document; keep routine log lines off it
        os.environ.setdefault("LEVELGEN_LOG_LEVEL", "error")
    try:
        params = params_from_mapping(vars(args))
    except ConfigurationError as e:
        print(_paint(Fore.RED, f"[ERROR] {e}"), file=sys.stderr)
        return EXIT_BAD_PARAMS
    try:
        level = generate(params)
    except ClassificationGap as e:
        print(_paint(Fore.RED, f"[ERROR] {e}"), file=sys.stderr)
        return EXIT_GENERATION_FAILED

    for diag in level.diagnostics:
        print(_paint(Fore.YELLOW, f"[WARN] {diag.message}"), file=sys.stderr)

    if not args.no_ascii and not args.html_only:
        print(to_ascii(level))
        print(legend(level))

    if not args.html_only:
        text = level_to_json(level)
        if args.print_json:
            print(text)
        if args.json_path:
            _write(args.json_path, text)

    if args.html_path:
        _write(args.html_path, generate_html(level))
        print(f"Isometric visualization written to: {args.html_path}", file=sys.stderr if args.print_json else sys.stdout)
    return 0


def run_serve(args: argparse.Namespace) -> int:  # pragma: no cover (runtime only)
    from levelgen.logging_utils import log
    from levelgen.server import start_server

    host = args.host or os.getenv("HOST", "0.0.0.0")
    port = int(args.port or os.getenv("PORT", "5000"))
    debug = bool(args.debug or os.getenv("FLASK_DEBUG") == "1")

    title = _paint(Fore.CYAN + Style.BRIGHT, "Level Generator Server")

    def label(text: str) -> str:
        return _paint(Fore.YELLOW, text)

    def value(val) -> str:
        return _paint(Fore.GREEN, str(val))

    divider = _paint(Fore.MAGENTA, "=" * 40)
    lines = [
        divider,
        f"  {title}",
        divider,
        f"  {label('Host:'):12} {value(host)}",
        f"  {label('Port:'):12} {value(port)}",
        f"  {label('Debug:'):12} {value('YES' if debug else 'NO')}",
        f"  {label('Cache:'):12} {value('off' if os.getenv('LEVELGEN_DISABLE_CACHE') == '1' else 'on')}",
        divider,
        "",
    ]
    print("\n".join(lines))
    log.info(event="listen", host=host, port=port, debug=debug)
    start_server(host=host, port=port, debug=debug)
    return 0


def main(argv: list[str]) -> int:
    args = parse_args(argv)
    # Load .env if requested, else the default one when present
    if getattr(args, "env_file", None):
        load_dotenv(args.env_file)
    else:
        load_dotenv()

    if args.command == "serve":
        return run_serve(args)
    return run_generate(args)


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
