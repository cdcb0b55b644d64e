"""Top-level module for stub generation."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from gorpc_stub_generator.config import GeneratorConfig
from gorpc_stub_generator.errors import FormatterError, OutputError
from gorpc_stub_generator.extractor import extract_interface
from gorpc_stub_generator.model import build_generation_model
from gorpc_stub_generator.parser import parse_file
from gorpc_stub_generator.writer import Writer

logger = logging.getLogger(__name__)


def format_source(raw_source: str, gofmt: str = "gofmt") -> str:
    """Formats Go source with gofmt.

    Args:
        raw_source (str): The unformatted source.
        gofmt (str, optional): The gofmt executable. Defaults to "gofmt".

    Raises:
        FormatterError: If gofmt cannot be run or rejects the source.

    Returns:
        str: The formatted source.
    """
    try:
        result = subprocess.run(
            [gofmt],
            input=raw_source,
            capture_output=True,
            text=True,
            check=True,
        )
    except FileNotFoundError as e:
        raise FormatterError(f"{gofmt} not found; install Go or pass --no-format") from e
    except subprocess.CalledProcessError as e:
        logger.debug("Unformatted source:\n%s", raw_source)
        raise FormatterError(f"{gofmt} failed: {e.stderr.strip()}") from e

    return result.stdout


def generate_stubs(config: GeneratorConfig) -> str:
    """Parse the source file and render the stubs of the configured interface.

    Args:
        config (GeneratorConfig): The run configuration.

    Returns:
        str: The generated source, formatted unless formatting is disabled.
    """
    source = parse_file(config.source)
    interface, discovered_imports = extract_interface(source, config.type_name)
    model = build_generation_model(config, source.package, interface, discovered_imports)

    writer = Writer(model)
    writer.generate()
    output = writer.dumps()

    if config.run_formatter:
        output = format_source(output, config.gofmt)
    return output


def write_output(output: str, target: Path):
    """Write the generated source.

    Args:
        output (str): The generated source.
        target (Path): The output file, created or truncated.

    Raises:
        OutputError: If the file cannot be written.
    """
    try:
        with open(target, "w", encoding="utf8") as output_file:
            output_file.write(output)
    except OSError as e:
        raise OutputError(f"failed to write {target}: {e.strerror or e}") from e


def run(config: GeneratorConfig) -> Path:
    """Run the stub generation for one interface.

    Nothing is written if any step fails.

    Args:
        config (GeneratorConfig): The run configuration.

    Returns:
        Path: The written output file.
    """
    output = generate_stubs(config)

    target = config.target_path
    write_output(output, target)

    logger.info("Wrote RPC stubs for %s to '%s'.", config.type_name, target)
    return target
