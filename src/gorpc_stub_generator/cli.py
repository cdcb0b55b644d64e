"""Command-line interface for generating net/rpc stubs for Go interfaces."""

from __future__ import annotations

import argparse
import logging
from collections.abc import Sequence

from gorpc_stub_generator.config import DEFAULT_GOFMT, DEFAULT_IMPORTS, GeneratorConfig
from gorpc_stub_generator.errors import GeneratorError
from gorpc_stub_generator.go_types import DEFAULT_RPC_CLIENT_TYPE
from gorpc_stub_generator.run import run

logger = logging.getLogger(__name__)


def _add_format_arguments(parser: argparse.ArgumentParser):
    """Add the arguments that control formatting of the output.

    Args:
        parser (argparse.ArgumentParser): The parser to add the arguments to.
    """
    parser.add_argument(
        "--gofmt",
        type=str,
        default=DEFAULT_GOFMT,
        help="gofmt executable used to format the output.",
    )

    parser.add_argument(
        "--no-format",
        dest="no_format",
        default=False,
        action="store_true",
        help="write the output without running gofmt.",
    )


def setup_parser() -> argparse.ArgumentParser:
    """Setup for the parser.

    Returns:
        argparse.ArgumentParser: The parser after setup.
    """
    parser = argparse.ArgumentParser(description="Generate net/rpc service and client stubs for a Go interface.")

    parser.add_argument(
        "-s",
        "--source",
        type=str,
        required=True,
        help="Go source file that declares the interface.",
    )

    parser.add_argument(
        "-t",
        "--type",
        type=str,
        required=True,
        help="name of the interface to generate stubs for.",
    )

    parser.add_argument(
        "-o",
        "--target",
        type=str,
        default="",
        help="output file; defaults to the source file with its extension replaced by 'rpc.go'.",
    )

    parser.add_argument(
        "-i",
        "--imports",
        type=str,
        default=",".join(DEFAULT_IMPORTS),
        help="comma-separated imports of the output; an entry may be 'alias path'.",
    )

    parser.add_argument(
        "-p",
        "--package",
        type=str,
        default="",
        help="package of the output; defaults to the package of the source file.",
    )

    parser.add_argument(
        "--service",
        type=str,
        default="",
        help="name the service is registered under; defaults to the interface name.",
    )

    parser.add_argument(
        "--rpc-client-type",
        dest="rpc_client_type",
        type=str,
        default=DEFAULT_RPC_CLIENT_TYPE,
        help="type of the client handle wrapped by the generated client.",
    )

    parser.add_argument(
        "--qualify-types",
        dest="qualify_types",
        default=False,
        action="store_true",
        help="prefix request and response types with the interface name.",
    )

    _add_format_arguments(parser)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point of the stub generator.

    Args:
        argv (Sequence[str] | None, optional): Run arguments. Defaults to None.

    Returns:
        int: Error code.
    """
    logging.basicConfig(level=logging.INFO)

    parser = setup_parser()
    args = parser.parse_args(argv)

    config = GeneratorConfig.from_args(args)
    logger.debug("Configuration: %s", config)

    try:
        run(config)
    except GeneratorError as e:
        logger.error("%s", e)
        return 1

    return 0
