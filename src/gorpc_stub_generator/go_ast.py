"""Source model of a parsed Go file.

Only the parts of Go that matter for stub generation are modelled. Declarations and
type expressions are closed sets of variants; everything the generator does not need
to look into is kept as an opaque declaration.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Position:
    """A location in a source file."""

    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"


# Type expressions


@dataclass(frozen=True)
class TypeExpr:
    """Base class of all type expressions."""

    position: Position


@dataclass(frozen=True)
class Ident(TypeExpr):
    """A plain type name, e.g. `int` or `Point`."""

    name: str


@dataclass(frozen=True)
class Qualified(TypeExpr):
    """A type name qualified by a package, e.g. `time.Duration`."""

    package: str
    name: str


@dataclass(frozen=True)
class Pointer(TypeExpr):
    """A pointer type, e.g. `*Point`."""

    elem: TypeExpr


@dataclass(frozen=True)
class Array(TypeExpr):
    """An array or slice type.

    A `length` of None denotes a slice (`[]T`), otherwise the length expression is kept
    as source text (`[4]T`, `[N]T`).
    """

    elem: TypeExpr
    length: str | None = None


@dataclass(frozen=True)
class Map(TypeExpr):
    """A map type, e.g. `map[string]int`."""

    key: TypeExpr
    value: TypeExpr


@dataclass(frozen=True)
class UnsupportedType(TypeExpr):
    """A type the generator cannot reproduce, like a func or chan literal or a generic instance."""

    kind: str


# Fields and interfaces


@dataclass(frozen=True)
class FieldDecl:
    """One entry of a parameter or result list.

    Identifiers sharing a type are kept together, so `a, b int` is a single field with
    two names. Unnamed parameters and results have an empty `names` list.
    """

    names: list[str]
    type: TypeExpr
    position: Position
    variadic: bool = False


@dataclass(frozen=True)
class MethodSpec:
    """A method declared inside an interface type."""

    name: str
    params: list[FieldDecl]
    results: list[FieldDecl]
    position: Position


@dataclass(frozen=True)
class InterfaceType:
    """An interface type: its methods and the names of embedded types."""

    methods: list[MethodSpec]
    embedded: list[str]
    position: Position


@dataclass(frozen=True)
class OpaqueType:
    """Any type definition other than an interface."""

    position: Position


# Declarations


@dataclass(frozen=True)
class ImportDecl:
    """A single import spec, e.g. `"time"` or `pb "example.com/api/v2"`."""

    path: str
    alias: str | None
    position: Position


@dataclass(frozen=True)
class TypeDecl:
    """A type declaration, `type Name T` or `type Name = T`."""

    name: str
    type: InterfaceType | OpaqueType
    position: Position
    alias: bool = False


@dataclass(frozen=True)
class OtherDecl:
    """A func, method, var or const declaration, which the generator skips."""

    keyword: str
    position: Position


Decl = ImportDecl | TypeDecl | OtherDecl


@dataclass
class SourceFile:
    """A parsed Go source file."""

    filename: str
    package: str
    decls: list[Decl] = field(default_factory=list)

    @property
    def imports(self) -> list[ImportDecl]:
        """All import specs of the file, in source order."""
        return [decl for decl in self.decls if isinstance(decl, ImportDecl)]
