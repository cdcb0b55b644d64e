"""Parse Go source files into the model of `go_ast`.

The grammar lives in `go.lark` and is read by an LALR parser. Go terminates
statements with semicolons that the lexer inserts at line ends; `GoSemicolonInserter`
does the same as a post-lexer, so the grammar can treat semicolons as ordinary tokens.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from functools import cache
from pathlib import Path

from lark import Lark, Token, Transformer, v_args
from lark.exceptions import UnexpectedCharacters, UnexpectedInput, UnexpectedToken, VisitError
from lark.lark import PostLex

from gorpc_stub_generator import go_ast
from gorpc_stub_generator.errors import GoSyntaxError, OutputError

logger = logging.getLogger(__name__)

GRAMMAR_FILE = "go.lark"

# Token types after which a line break ends the statement.
_TERMINATING_TYPES = {"NAME", "NUMBER", "STRING", "RUNE"}
_TERMINATING_VALUES = {")", "]", "}", "++", "--"}

# Value of semicolons inserted at line breaks, so that errors can say "newline".
_IMPLICIT_SEMICOLON = "\n"


def _ends_statement(token: Token) -> bool:
    if token.type in _TERMINATING_TYPES:
        return True
    return token.type != "_SEMI" and token.value in _TERMINATING_VALUES


class GoSemicolonInserter(PostLex):
    """Turn line breaks into semicolons following the rules of the Go lexer.

    A line break becomes a semicolon if the last token on the line is an identifier,
    a literal, one of `++ -- ) ] }`; otherwise it is dropped. A general comment that
    spans lines counts as a line break.
    """

    always_accept = ("_NL", "BLOCK_COMMENT")

    def process(self, stream: Iterator[Token]) -> Iterator[Token]:
        last: Token | None = None

        for token in stream:
            if token.type == "BLOCK_COMMENT" and "\n" not in token.value:
                continue

            if token.type in ("_NL", "BLOCK_COMMENT"):
                if last is not None and _ends_statement(last):
                    last = Token.new_borrow_pos("_SEMI", _IMPLICIT_SEMICOLON, token)
                    yield last
                continue

            last = token
            yield token

        if last is not None and _ends_statement(last):
            yield Token.new_borrow_pos("_SEMI", _IMPLICIT_SEMICOLON, last)


@dataclass
class _ParamEntry:
    """One comma-separated entry of a parameter list, before names and types are grouped."""

    name: str | None
    type: go_ast.TypeExpr | None
    position: go_ast.Position
    variadic: bool = False


def _unquote(literal: str) -> str:
    return literal[1:-1]


@v_args(meta=True)
class GoTransformer(Transformer):
    """Transforms a parse tree of `go.lark` into a `go_ast.SourceFile`."""

    def __init__(self, filename: str):
        super().__init__()
        self.filename = filename

    def _position(self, meta) -> go_ast.Position:
        if meta.empty:
            return go_ast.Position(self.filename, 0, 0)
        return go_ast.Position(self.filename, meta.line, meta.column)

    def start(self, meta, children) -> go_ast.SourceFile:
        package, *groups = children

        decls: list[go_ast.Decl] = []
        for group in groups:
            if isinstance(group, list):
                decls.extend(group)
            else:
                decls.append(group)

        return go_ast.SourceFile(filename=self.filename, package=package, decls=decls)

    def package_clause(self, meta, children) -> str:
        return str(children[0])

    # Imports

    def import_decl(self, meta, children) -> list[go_ast.ImportDecl]:
        return list(children)

    def plain_import(self, meta, children) -> go_ast.ImportDecl:
        return go_ast.ImportDecl(_unquote(children[0]), None, self._position(meta))

    def named_import(self, meta, children) -> go_ast.ImportDecl:
        alias, path = children
        return go_ast.ImportDecl(_unquote(path), str(alias), self._position(meta))

    def dot_import(self, meta, children) -> go_ast.ImportDecl:
        return go_ast.ImportDecl(_unquote(children[0]), ".", self._position(meta))

    # Declarations

    def func_decl(self, meta, children) -> go_ast.OtherDecl:
        return go_ast.OtherDecl("func", self._position(meta))

    def var_decl(self, meta, children) -> go_ast.OtherDecl:
        return go_ast.OtherDecl("var", self._position(meta))

    def const_decl(self, meta, children) -> go_ast.OtherDecl:
        return go_ast.OtherDecl("const", self._position(meta))

    def type_decl(self, meta, children) -> list[go_ast.TypeDecl]:
        return list(children)

    def type_spec(self, meta, children) -> go_ast.TypeDecl:
        name, type_def = children
        return go_ast.TypeDecl(str(name), type_def, self._position(meta))

    def alias_spec(self, meta, children) -> go_ast.TypeDecl:
        name, type_def = children
        return go_ast.TypeDecl(str(name), type_def, self._position(meta), alias=True)

    def opaque_type(self, meta, children) -> go_ast.OpaqueType:
        return go_ast.OpaqueType(self._position(meta))

    # Interfaces

    def interface_type(self, meta, children) -> go_ast.InterfaceType:
        methods = [child for child in children if isinstance(child, go_ast.MethodSpec)]
        embedded = [child for child in children if isinstance(child, str)]
        return go_ast.InterfaceType(methods, embedded, self._position(meta))

    def embedded_type(self, meta, children) -> str:
        return ".".join(str(child) for child in children)

    def method_spec(self, meta, children) -> go_ast.MethodSpec:
        name, params, *rest = children
        results = rest[0] if rest else []
        return go_ast.MethodSpec(str(name), params, results, self._position(meta))

    def result_type(self, meta, children) -> list[go_ast.FieldDecl]:
        return [go_ast.FieldDecl([], children[0], self._position(meta))]

    def parameters(self, meta, entries: list[_ParamEntry]) -> list[go_ast.FieldDecl]:
        """Group parameter entries the way Go does.

        Either every entry carries a type and all of them are unnamed (`(int, string)`),
        or names are listed with their type following the last name (`(a, b int, c string)`).
        """
        if not any(entry.name is not None and entry.type is not None for entry in entries):
            return [
                go_ast.FieldDecl(
                    [],
                    entry.type if entry.type is not None else go_ast.Ident(entry.position, str(entry.name)),
                    entry.position,
                    entry.variadic,
                )
                for entry in entries
            ]

        fields: list[go_ast.FieldDecl] = []
        pending: list[_ParamEntry] = []
        for entry in entries:
            if entry.type is None:
                pending.append(entry)
                continue

            if entry.name is None:
                raise GoSyntaxError("mixed named and unnamed parameters", entry.position)

            names = [str(p.name) for p in pending] + [entry.name]
            first = pending[0] if pending else entry
            fields.append(go_ast.FieldDecl(names, entry.type, first.position, entry.variadic))
            pending = []

        if pending:
            raise GoSyntaxError("mixed named and unnamed parameters", pending[0].position)

        return fields

    def bare_param(self, meta, children) -> _ParamEntry:
        return _ParamEntry(str(children[0]), None, self._position(meta))

    def named_param(self, meta, children) -> _ParamEntry:
        name, type_expr = children
        return _ParamEntry(str(name), type_expr, self._position(meta))

    def variadic_param(self, meta, children) -> _ParamEntry:
        name, type_expr = children
        return _ParamEntry(str(name), type_expr, self._position(meta), variadic=True)

    def unnamed_param(self, meta, children) -> _ParamEntry:
        return _ParamEntry(None, children[0], self._position(meta))

    def unnamed_variadic_param(self, meta, children) -> _ParamEntry:
        return _ParamEntry(None, children[0], self._position(meta), variadic=True)

    # Type expressions

    def ident_type(self, meta, children) -> go_ast.Ident:
        return go_ast.Ident(self._position(meta), str(children[0]))

    def qualified_type(self, meta, children) -> go_ast.Qualified:
        package, name = children
        return go_ast.Qualified(self._position(meta), str(package), str(name))

    def generic_type(self, meta, children) -> go_ast.UnsupportedType:
        return go_ast.UnsupportedType(self._position(meta), "generic")

    def qualified_generic_type(self, meta, children) -> go_ast.UnsupportedType:
        return go_ast.UnsupportedType(self._position(meta), "generic")

    def paren_type(self, meta, children) -> go_ast.UnsupportedType:
        return go_ast.UnsupportedType(self._position(meta), "parenthesized")

    def pointer_type(self, meta, children) -> go_ast.Pointer:
        return go_ast.Pointer(self._position(meta), children[0])

    def slice_type(self, meta, children) -> go_ast.Array:
        return go_ast.Array(self._position(meta), children[0])

    def array_type(self, meta, children) -> go_ast.Array:
        length, elem = children
        return go_ast.Array(self._position(meta), elem, length)

    def array_length(self, meta, children) -> str:
        return ".".join(str(child) for child in children)

    def map_type(self, meta, children) -> go_ast.Map:
        key, value = children
        return go_ast.Map(self._position(meta), key, value)

    def func_type(self, meta, children) -> go_ast.UnsupportedType:
        return go_ast.UnsupportedType(self._position(meta), "func")

    def chan_type(self, meta, children) -> go_ast.UnsupportedType:
        return go_ast.UnsupportedType(self._position(meta), "chan")

    def struct_type(self, meta, children) -> go_ast.UnsupportedType:
        return go_ast.UnsupportedType(self._position(meta), "struct")

    def interface_literal(self, meta, children) -> go_ast.UnsupportedType:
        return go_ast.UnsupportedType(self._position(meta), "interface")


@cache
def get_parser() -> Lark:
    """The shared LALR parser for `go.lark`."""
    return Lark.open(
        GRAMMAR_FILE,
        rel_to=__file__,
        parser="lalr",
        postlex=GoSemicolonInserter(),
        propagate_positions=True,
        maybe_placeholders=False,
    )


def _describe(error: UnexpectedInput) -> str:
    if isinstance(error, UnexpectedToken):
        token = error.token
        if token.type == "$END":
            return "unexpected end of file"
        if token.type == "_SEMI" and token.value == _IMPLICIT_SEMICOLON:
            return "unexpected newline"
        return f"unexpected {token.value!r}"

    if isinstance(error, UnexpectedCharacters):
        return f"invalid character {error.char!r}"

    return str(error)


def parse_source(text: str, filename: str = "<source>") -> go_ast.SourceFile:
    """Parse Go source text.

    Args:
        text (str): The source text.
        filename (str, optional): The file name used in positions. Defaults to "<source>".

    Raises:
        GoSyntaxError: If the text is not valid Go, as far as the generator understands it.

    Returns:
        go_ast.SourceFile: The parsed file.
    """
    try:
        tree = get_parser().parse(text)
    except UnexpectedInput as e:
        line = getattr(e, "line", None)
        column = getattr(e, "column", None)
        position = None
        if isinstance(line, int) and line > 0:
            position = go_ast.Position(filename, line, column if isinstance(column, int) else 0)
        raise GoSyntaxError(_describe(e), position) from e

    try:
        return GoTransformer(filename).transform(tree)
    except VisitError as e:
        if isinstance(e.orig_exc, GoSyntaxError):
            raise e.orig_exc from None
        raise


def parse_file(path: str | Path) -> go_ast.SourceFile:
    """Read and parse a Go source file.

    Args:
        path (str | Path): Path of the source file.

    Raises:
        OutputError: If the file cannot be read.
        GoSyntaxError: If the file cannot be parsed.

    Returns:
        go_ast.SourceFile: The parsed file.
    """
    try:
        text = Path(path).read_text(encoding="utf8")
    except OSError as e:
        raise OutputError(f"failed to read {path}: {e.strerror or e}") from e

    logger.debug("Parsing %s", path)
    return parse_source(text, str(path))
