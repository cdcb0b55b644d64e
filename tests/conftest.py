"""Pytest configuration and fixtures for gorpc stub generator tests."""

from __future__ import annotations

import shutil
import textwrap
from pathlib import Path

import pytest

from gorpc_stub_generator.config import GeneratorConfig
from gorpc_stub_generator.extractor import extract_interface
from gorpc_stub_generator.go_ast import SourceFile
from gorpc_stub_generator.model import Interface, build_generation_model
from gorpc_stub_generator.parser import parse_source
from gorpc_stub_generator.writer import Writer

# Test directory structure
TESTS_DIR = Path(__file__).parent
SOURCES_DIR = TESTS_DIR / "sources"

ARITH_SOURCE = SOURCES_DIR / "arith.go"
STORE_SOURCE = SOURCES_DIR / "store.go"
ARITH_REFERENCE = TESTS_DIR / "ref_arithrpc.go_nocheck"

HAS_GOFMT = shutil.which("gofmt") is not None


def parse_go(text: str, filename: str = "test.go") -> SourceFile:
    """Parse an indented snippet of Go source."""
    return parse_source(textwrap.dedent(text), filename)


def extract_go(text: str, type_name: str) -> Interface:
    """Parse a snippet of Go source and extract one interface from it."""
    interface, _ = extract_interface(parse_go(text), type_name)
    return interface


def render_go(text: str, type_name: str, **options) -> str:
    """Render the unformatted stubs of an interface declared in a snippet of Go source.

    Args:
        text: The Go source.
        type_name: The interface name.
        **options: Further fields of `GeneratorConfig`.

    Returns:
        The generated source.
    """
    source = parse_go(text)
    interface, imports = extract_interface(source, type_name)
    config = GeneratorConfig(source="test.go", type_name=type_name, **options)
    writer = Writer(build_generation_model(config, source.package, interface, imports))
    writer.generate()
    return writer.dumps()


@pytest.fixture
def go_source(tmp_path):
    """Write Go source to a temporary file.

    Returns:
        A function taking the source text and an optional file name, returning the file path.
    """

    def _write(text: str, name: str = "service.go") -> Path:
        path = tmp_path / name
        path.write_text(textwrap.dedent(text), encoding="utf8")
        return path

    return _write


@pytest.fixture
def arith_copy(tmp_path) -> Path:
    """A copy of the arith example in a temporary directory, so outputs land there."""
    target = tmp_path / ARITH_SOURCE.name
    shutil.copy(ARITH_SOURCE, target)
    return target


@pytest.fixture
def reference_lines() -> list[str]:
    """Lines of the reference output for the arith example."""
    with open(ARITH_REFERENCE, encoding="utf8") as ref_file:
        return ref_file.readlines()
