"""Configuration of a generation run."""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from pathlib import Path

from gorpc_stub_generator.go_types import DEFAULT_RPC_CLIENT_TYPE, RPC_IMPORT
from gorpc_stub_generator.imports import ImportEntry

DEFAULT_IMPORTS = (RPC_IMPORT,)
TARGET_SUFFIX = "rpc.go"
DEFAULT_GOFMT = "gofmt"


def parse_imports(value: str) -> tuple[str, ...]:
    """Split a comma-separated list of imports, dropping empty entries."""
    return tuple(part.strip() for part in value.split(",") if part.strip())


def derive_target(source: str | Path) -> Path:
    """The default output path for a source file.

    The extension of the source file is replaced, so `arith.go` becomes `arithrpc.go`.

    Args:
        source (str | Path): The source file path.

    Returns:
        Path: The output path.
    """
    source_path = Path(source)
    stem = source_path.stem if source_path.suffix else source_path.name
    return source_path.with_name(stem + TARGET_SUFFIX)


@dataclass(frozen=True)
class GeneratorConfig:
    """All options of one generation run.

    Attributes:
        source: The Go file that declares the interface.
        type_name: The name of the interface.
        target: The output file; derived from `source` if None.
        imports: Imports added to the generated file, either `path` or `alias path`.
        package: The package of the generated file; the source package if None.
        service: The name the service is registered under; the interface name if None.
        rpc_client_type: The type of the client handle wrapped by the generated client.
        qualify_types: Prefix request and response type names with the interface name.
        run_formatter: Whether to run gofmt on the generated source.
        gofmt: The gofmt executable.
    """

    source: str
    type_name: str
    target: str | None = None
    imports: tuple[str, ...] = DEFAULT_IMPORTS
    package: str | None = None
    service: str | None = None
    rpc_client_type: str = DEFAULT_RPC_CLIENT_TYPE
    qualify_types: bool = False
    run_formatter: bool = True
    gofmt: str = DEFAULT_GOFMT

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> GeneratorConfig:
        """Create the configuration from parsed command-line arguments.

        Args:
            args (argparse.Namespace): The parsed arguments of `cli.setup_parser`.

        Returns:
            GeneratorConfig: The configuration.
        """
        return cls(
            source=args.source,
            type_name=args.type,
            target=args.target or None,
            imports=parse_imports(args.imports),
            package=args.package or None,
            service=args.service or None,
            rpc_client_type=args.rpc_client_type,
            qualify_types=args.qualify_types,
            run_formatter=not args.no_format,
            gofmt=args.gofmt,
        )

    @property
    def target_path(self) -> Path:
        """The output file."""
        if self.target:
            return Path(self.target)
        return derive_target(self.source)

    @property
    def service_name(self) -> str:
        """The name the service is registered under."""
        return self.service or self.type_name

    def package_for(self, source_package: str) -> str:
        """The package of the generated file, given the package of the source file."""
        return self.package or source_package

    @property
    def import_entries(self) -> list[ImportEntry]:
        """The configured imports, parsed."""
        return [ImportEntry.parse(spec) for spec in self.imports]
