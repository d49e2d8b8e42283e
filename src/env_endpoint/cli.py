"""CLI interface for env-endpoint.

Usage:
    # Full report (stdout: JSON)
    python -m env_endpoint.cli --config app.yml report

    # One property source; exits 1 if it does not exist
    python -m env_endpoint.cli --config app.yml source application

    # Override the masking policy from the config file
    python -m env_endpoint.cli --masking none --mask-pattern '.*password.*' report

    # Run the HTTP sidecar
    python -m env_endpoint.cli --config app.yml serve --port 18792

The CLI always enables the endpoint, whatever the config file says.
"""

from __future__ import annotations
import argparse
import json
import logging
import sys

from .config import DEFAULT_CONFIG, DEFAULT_PORT, create_endpoint, load_config, load_from_yaml
from .endpoint import MASKING_MODES, EnvironmentEndpoint
from .errors import EnvEndpointError


def _build_endpoint(args: argparse.Namespace) -> EnvironmentEndpoint:
    cfg = load_from_yaml(args.config) if args.config else load_config({})
    cfg["enabled"] = True
    if args.masking:
        cfg["masking"] = args.masking
    if args.mask_pattern:
        cfg["mask_patterns"] = cfg["mask_patterns"] + args.mask_pattern
    if args.no_environ:
        cfg["include_environ"] = False
    return create_endpoint(cfg)


def _dump(data: object) -> None:
    json.dump(data, sys.stdout, indent=2, ensure_ascii=False, default=str)
    sys.stdout.write("\n")


def cmd_report(args: argparse.Namespace) -> int:
    """Print the full environment report."""
    endpoint = _build_endpoint(args)
    _dump(endpoint.get_environment_info(args.principal))
    return 0


def cmd_source(args: argparse.Namespace) -> int:
    """Print a single property source."""
    endpoint = _build_endpoint(args)
    info = endpoint.get_properties(args.name, args.principal)
    if info is None:
        sys.stderr.write(f"Property source {args.name!r} not found\n")
        return 1
    _dump(info)
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    """Run the HTTP sidecar."""
    from .server import serve

    serve(_build_endpoint(args), port=args.port, host=args.host)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="env_endpoint",
        description="Environment report with masked configuration values",
    )
    parser.add_argument("--config", default=DEFAULT_CONFIG, help="YAML config path")
    parser.add_argument("--log-level", default="WARNING", help="Logging level")
    parser.add_argument("--masking", choices=MASKING_MODES, help="Masking mode override")
    parser.add_argument(
        "--mask-pattern", action="append", default=[],
        help="Extra mask pattern (repeatable)",
    )
    parser.add_argument("--no-environ", action="store_true", help="Leave out environment variables")
    parser.add_argument("--principal", default=None, help="Requester identity passed to the filter")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("report", help="Print the full report")
    p_source = sub.add_parser("source", help="Print one property source")
    p_source.add_argument("name")
    p_serve = sub.add_parser("serve", help="Run the HTTP sidecar")
    p_serve.add_argument("--port", type=int, default=DEFAULT_PORT)
    p_serve.add_argument("--host", default="127.0.0.1")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    cmds = {
        "report": cmd_report,
        "source": cmd_source,
        "serve": cmd_serve,
    }
    try:
        return cmds[args.command](args)
    except EnvEndpointError as e:
        sys.stderr.write(f"error: {e}\n")
        return 2


if __name__ == "__main__":
    sys.exit(main())
