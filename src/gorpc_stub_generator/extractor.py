"""Find an interface in a parsed source file and turn it into the generation model."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from gorpc_stub_generator import go_ast
from gorpc_stub_generator.errors import UnsupportedTypeError, ValidationError
from gorpc_stub_generator.go_types import ERROR_TYPE
from gorpc_stub_generator.helper import is_exported
from gorpc_stub_generator.imports import ImportResolver, ImportSet
from gorpc_stub_generator.model import Interface, Method, Type

logger = logging.getLogger(__name__)

# Locals of the generated client methods; parameters and results must not shadow them.
RESERVED_NAMES = {"err", "_c", "_request", "_response"}


def format_type(expr: go_ast.TypeExpr) -> str:
    """Print a type expression as Go source.

    Args:
        expr (go_ast.TypeExpr): The type expression.

    Raises:
        UnsupportedTypeError: If the type cannot be carried over RPC, like funcs or channels.

    Returns:
        str: The type, e.g. `map[string]*time.Time`.
    """
    if isinstance(expr, go_ast.Ident):
        return expr.name
    if isinstance(expr, go_ast.Qualified):
        return f"{expr.package}.{expr.name}"
    if isinstance(expr, go_ast.Pointer):
        return "*" + format_type(expr.elem)
    if isinstance(expr, go_ast.Array):
        length = expr.length if expr.length is not None else ""
        return f"[{length}]{format_type(expr.elem)}"
    if isinstance(expr, go_ast.Map):
        return f"map[{format_type(expr.key)}]{format_type(expr.value)}"
    if isinstance(expr, go_ast.UnsupportedType):
        raise UnsupportedTypeError(f"{expr.kind} types are not supported in RPC interfaces", expr.position)
    raise UnsupportedTypeError(f"unsupported type expression {type(expr).__name__}", expr.position)


def qualified_references(expr: go_ast.TypeExpr) -> list[go_ast.Qualified]:
    """All package-qualified type names within a type expression, in source order."""
    if isinstance(expr, go_ast.Qualified):
        return [expr]
    if isinstance(expr, go_ast.Pointer):
        return qualified_references(expr.elem)
    if isinstance(expr, go_ast.Array):
        references = qualified_references(expr.elem)
        if expr.length is not None and "." in expr.length:
            package, name = expr.length.split(".", 1)
            references.insert(0, go_ast.Qualified(expr.position, package, name))
        return references
    if isinstance(expr, go_ast.Map):
        return qualified_references(expr.key) + qualified_references(expr.value)
    return []


class TypeFormatter:
    """Turns parameter and result fields into model types, recording the imports they need."""

    def __init__(self, resolver: ImportResolver):
        self.resolver = resolver

    def format_field(self, field: go_ast.FieldDecl) -> Type:
        """Turn a field of a parameter or result list into a model type.

        Args:
            field (go_ast.FieldDecl): The field.

        Raises:
            ValidationError: If the field is unnamed, uses the blank identifier or is variadic.
            UnsupportedTypeError: If the field type cannot be carried over RPC.

        Returns:
            Type: The model type.
        """
        if not field.names:
            raise ValidationError("RPC interface parameters and results must all be named", field.position)
        if "_" in field.names:
            raise ValidationError("the blank identifier cannot name an RPC parameter or result", field.position)
        if field.variadic:
            raise ValidationError(f"variadic parameter {field.names[-1]} is not supported", field.position)

        signature = format_type(field.type)
        for reference in qualified_references(field.type):
            self.resolver.resolve(reference.package, reference.position)

        type_ = Type.from_names(field.names, signature)
        for local, public in zip(type_.local_names, type_.public_names):
            if not is_exported(public):
                logger.warning("%s: field for %s is not exported and will not be transmitted", field.position, local)
        return type_


class InterfaceExtractor:
    """Extracts one interface from a parsed source file.

    Declarations are visited in source order. Imports seen so far are what package
    qualifiers resolve against, and the first type declaration with the wanted name wins.
    """

    def __init__(self, source: go_ast.SourceFile, type_name: str):
        self.source = source
        self.type_name = type_name
        self.imports = ImportSet()

        self._source_imports: list[go_ast.ImportDecl] = []
        self._formatter = TypeFormatter(ImportResolver(self._source_imports, self.imports))

    def extract(self) -> Interface:
        """Find and validate the interface.

        Raises:
            ValidationError: If the type is missing, is not an interface, has no methods,
                or has a method that cannot be turned into RPC calls.

        Returns:
            Interface: The interface. Imports needed by its types are collected in `imports`.
        """
        for decl in self.source.decls:
            if isinstance(decl, go_ast.ImportDecl):
                self._source_imports.append(decl)
            elif isinstance(decl, go_ast.TypeDecl):
                if decl.name == self.type_name:
                    return self._extract_interface(decl)
            elif not isinstance(decl, go_ast.OtherDecl):
                raise TypeError(f"unknown declaration {decl!r}")

        raise ValidationError(f"type {self.type_name} not found in {self.source.filename}")

    def _extract_interface(self, decl: go_ast.TypeDecl) -> Interface:
        if not isinstance(decl.type, go_ast.InterfaceType):
            raise ValidationError(f"type {decl.name} is not an interface", decl.position)

        for embedded in decl.type.embedded:
            logger.warning("%s: skipping embedded interface %s of %s", decl.type.position, embedded, decl.name)

        methods = tuple(self._extract_method(spec) for spec in decl.type.methods)
        if not methods:
            raise ValidationError(f"interface {decl.name} has no methods", decl.position)

        logger.debug("Found interface %s with %d methods", decl.name, len(methods))
        return Interface(decl.name, methods)

    def _extract_method(self, spec: go_ast.MethodSpec) -> Method:
        parameters = tuple(self._formatter.format_field(field) for field in spec.params)

        results: list[Type] = []
        has_error = False
        for index, field in enumerate(spec.results):
            result = self._formatter.format_field(field)
            if result.signature != ERROR_TYPE:
                results.append(result)
                continue

            is_last = index == len(spec.results) - 1
            if not is_last or len(result.local_names) != 1:
                raise ValidationError(f"method {spec.name} must have error as last return value", field.position)
            has_error = True

        if not has_error:
            raise ValidationError(f"method {spec.name} must have error as last return value", spec.position)

        _check_field_names(spec, spec.params, parameters)
        _check_field_names(spec, spec.results, results)

        for type_ in (*parameters, *results):
            for name in type_.local_names:
                if name in RESERVED_NAMES:
                    raise ValidationError(
                        f"name {name} of method {spec.name} is reserved by the generated client", spec.position
                    )

        return Method(spec.name, parameters, tuple(results))


def _check_field_names(spec: go_ast.MethodSpec, fields: Sequence[go_ast.FieldDecl], types: Sequence[Type]) -> None:
    """Reject names that turn into the same request or response struct field."""
    seen: dict[str, str] = {}
    for field, type_ in zip(fields, types):
        for local, public in zip(type_.local_names, type_.public_names):
            if public in seen:
                raise ValidationError(
                    f"names {seen[public]} and {local} of method {spec.name} both become field {public}",
                    field.position,
                )
            seen[public] = local


def extract_interface(source: go_ast.SourceFile, type_name: str) -> tuple[Interface, ImportSet]:
    """Extract an interface and the imports its types need.

    Args:
        source (go_ast.SourceFile): The parsed source file.
        type_name (str): The interface name.

    Returns:
        tuple[Interface, ImportSet]: The interface and the imports.
    """
    extractor = InterfaceExtractor(source, type_name)
    interface = extractor.extract()
    return interface, extractor.imports
