"""Import handling for generated stubs.

Parameter and result types may refer to other packages (`time.Duration`). The stub
file needs the same imports, so every qualifier is looked up in the import list of
the source file and the matching import is carried over.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass

from gorpc_stub_generator.errors import ConfigurationError
from gorpc_stub_generator.go_ast import ImportDecl, Position

logger = logging.getLogger(__name__)

_MAJOR_VERSION_SEGMENT = re.compile(r"^v[0-9]+$")
_GOPKG_VERSION_SUFFIX = re.compile(r"\.v[0-9]+$")


def package_name(import_path: str) -> str:
    """Guess the package name of an import path.

    This is the last path segment, skipping a trailing major version (`example.com/mod/v2`
    is package `mod`) and stripping gopkg.in style versions (`gopkg.in/yaml.v3` is `yaml`).

    Args:
        import_path (str): The import path.

    Returns:
        str: The package name.
    """
    segments = [segment for segment in import_path.split("/") if segment]
    if not segments:
        return import_path

    if len(segments) > 1 and _MAJOR_VERSION_SEGMENT.match(segments[-1]):
        segments.pop()

    name = segments[-1]
    if segments[0] == "gopkg.in":
        name = _GOPKG_VERSION_SUFFIX.sub("", name)
    return name


@dataclass(frozen=True)
class ImportEntry:
    """An import of the generated file, optionally with an alias."""

    path: str
    alias: str | None = None

    @classmethod
    def parse(cls, spec: str) -> ImportEntry:
        """Parse an import given on the command line.

        Either a bare path (`net/rpc`) or an alias followed by the path (`pb example.com/api`).
        Surrounding quotes of the path are removed.

        Args:
            spec (str): The import specification.

        Raises:
            ConfigurationError: If the specification has more than two parts.

        Returns:
            ImportEntry: The import entry.
        """
        parts = spec.split()
        if len(parts) == 2:
            alias, path = parts
            return cls(path.strip('"'), alias)
        if len(parts) == 1:
            return cls(parts[0].strip('"'))
        raise ConfigurationError(f"invalid import specification: {spec!r}")

    def render(self) -> str:
        """The import spec as Go source, e.g. `pb "example.com/api"`."""
        if self.alias:
            return f'{self.alias} "{self.path}"'
        return f'"{self.path}"'

    def _sort_key(self) -> tuple[str, str]:
        return self.path, self.alias or ""


class ImportSet:
    """The set of imports of a generated file.

    Duplicates are dropped. Iteration is sorted by path, so rendering does not depend on
    the order in which imports were discovered.
    """

    def __init__(self, entries: Iterable[ImportEntry] = ()):
        self._entries: set[ImportEntry] = set(entries)

    def add(self, path: str, alias: str | None = None):
        """Add an import.

        Args:
            path (str): The import path.
            alias (str | None, optional): An explicit package alias. Defaults to None.
        """
        self._entries.add(ImportEntry(path, alias))

    def union(self, other: ImportSet) -> ImportSet:
        """A new set holding the imports of both sets."""
        return ImportSet(self._entries | other._entries)

    @property
    def paths(self) -> list[str]:
        """The import paths, sorted."""
        return [entry.path for entry in self]

    def __iter__(self) -> Iterator[ImportEntry]:
        return iter(sorted(self._entries, key=ImportEntry._sort_key))

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, item: object) -> bool:
        if isinstance(item, str):
            return any(entry.path == item for entry in self._entries)
        return item in self._entries

    def __repr__(self) -> str:
        return f"ImportSet({[entry.render() for entry in self]})"


class ImportResolver:
    """Resolves package qualifiers against the imports of a source file."""

    def __init__(self, source_imports: Sequence[ImportDecl], import_set: ImportSet):
        """Initialize the resolver.

        Args:
            source_imports (Sequence[ImportDecl]): The imports of the source file. The sequence
                may still grow while the file is traversed.
            import_set (ImportSet): The set that resolved imports are added to.
        """
        self._source_imports = source_imports
        self.import_set = import_set

    def find(self, qualifier: str) -> ImportDecl | None:
        """Find the source import that a package qualifier refers to.

        An aliased import matches on its alias only, any other import on its package name.

        Args:
            qualifier (str): The package qualifier, e.g. `time` in `time.Duration`.

        Returns:
            ImportDecl | None: The matching import, if any.
        """
        for source_import in self._source_imports:
            if source_import.alias is not None:
                if source_import.alias == qualifier:
                    return source_import
            elif package_name(source_import.path) == qualifier:
                return source_import
        return None

    def resolve(self, qualifier: str, position: Position | None = None) -> bool:
        """Add the import that a package qualifier refers to.

        Args:
            qualifier (str): The package qualifier.
            position (Position | None, optional): Where the qualifier was used, for diagnostics.

        Returns:
            bool: Whether a matching import was found.
        """
        source_import = self.find(qualifier)
        if source_import is None:
            logger.warning("%s: no import found for package '%s'", position or "<unknown>", qualifier)
            return False

        self.import_set.add(source_import.path, source_import.alias)
        return True
