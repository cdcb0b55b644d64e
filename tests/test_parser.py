"""Tests for parsing Go source files."""

from __future__ import annotations

import pytest
from conftest import STORE_SOURCE, parse_go

from gorpc_stub_generator import go_ast
from gorpc_stub_generator.errors import GoSyntaxError, OutputError
from gorpc_stub_generator.parser import parse_file


def _interface(source: go_ast.SourceFile, name: str) -> go_ast.InterfaceType:
    for decl in source.decls:
        if isinstance(decl, go_ast.TypeDecl) and decl.name == name:
            assert isinstance(decl.type, go_ast.InterfaceType)
            return decl.type
    raise AssertionError(f"type {name} not found")


def _method(source: go_ast.SourceFile, interface: str, name: str) -> go_ast.MethodSpec:
    for method in _interface(source, interface).methods:
        if method.name == name:
            return method
    raise AssertionError(f"method {name} not found")


class TestDeclarations:
    """Test the top-level structure of a file."""

    def test_package_clause(self):
        source = parse_go("package arith\n", "arith.go")
        assert source.package == "arith"
        assert source.filename == "arith.go"
        assert source.decls == []

    def test_leading_comments(self):
        source = parse_go(
            """
            // Copyright notice.

            //go:build linux

            /* Package doc. */
            package arith
            """
        )
        assert source.package == "arith"

    def test_single_and_grouped_imports(self):
        source = parse_go(
            """
            package p

            import "fmt"
            import (
                "time"
                pb "example.com/api/v2"
                . "strings"
                _ "embed"
            )
            """
        )
        imports = [(imp.path, imp.alias) for imp in source.imports]
        assert imports == [
            ("fmt", None),
            ("time", None),
            ("example.com/api/v2", "pb"),
            ("strings", "."),
            ("embed", "_"),
        ]

    def test_import_position(self):
        source = parse_go(
            """
            package p

            import "fmt"
            """
        )
        assert str(source.imports[0].position) == "test.go:4:8"

    def test_other_declarations_are_skipped(self):
        source = parse_go(
            """
            package p

            var ErrClosed = errors.New("closed: }")

            const (
                A = iota
                B
            )

            func (s *server) Handle(x, y int) (int, error) {
                if x > y {
                    return x - y, nil
                }
                r := '}'
                raw := `{
                `
                _ = r
                _ = raw
                return 0, nil
            }

            func Map[T any](xs []T, f func(T) T) []T {
                for i := range xs {
                    xs[i] = f(xs[i])
                }
                return xs
            }
            """
        )
        assert [decl.keyword for decl in source.decls] == ["var", "const", "func", "func"]

    def test_type_declarations(self):
        source = parse_go(
            """
            package p

            type Point struct {
                X, Y int
            }

            type ID = string

            type Handler func(int) error

            type (
                List []Point
                Service interface {
                    Ping() (err error)
                }
            )
            """
        )
        decls = {decl.name: decl for decl in source.decls}
        assert list(decls) == ["Point", "ID", "Handler", "List", "Service"]
        assert isinstance(decls["Point"].type, go_ast.OpaqueType)
        assert decls["ID"].alias is True
        assert isinstance(decls["ID"].type, go_ast.OpaqueType)
        assert isinstance(decls["Handler"].type, go_ast.OpaqueType)
        assert isinstance(decls["Service"].type, go_ast.InterfaceType)
        assert decls["Service"].alias is False

    def test_parse_file(self):
        source = parse_file(STORE_SOURCE)
        assert source.package == "store"
        assert [imp.path for imp in source.imports] == [
            "errors",
            "time",
            "example.com/api/v2",
            "embed",
            "gopkg.in/yaml.v3",
        ]
        assert len(_interface(source, "Store").methods) == 4

    def test_parse_missing_file(self, tmp_path):
        with pytest.raises(OutputError, match="failed to read"):
            parse_file(tmp_path / "missing.go")


class TestInterfaces:
    """Test method specs inside interface types."""

    def test_grouped_parameters(self):
        source = parse_go(
            """
            package p

            type Arith interface {
                Add(a, b int, c string) (sum int, err error)
            }
            """
        )
        method = _method(source, "Arith", "Add")
        assert [(field.names, field.type.name) for field in method.params] == [(["a", "b"], "int"), (["c"], "string")]
        assert [field.names for field in method.results] == [["sum"], ["err"]]

    def test_unnamed_parameters(self):
        source = parse_go(
            """
            package p

            type T interface {
                Foo(int, *Point, time.Duration) error
            }
            """
        )
        method = _method(source, "T", "Foo")
        assert all(field.names == [] for field in method.params)
        assert isinstance(method.params[0].type, go_ast.Ident)
        assert isinstance(method.params[1].type, go_ast.Pointer)
        assert isinstance(method.params[2].type, go_ast.Qualified)
        assert len(method.results) == 1
        assert method.results[0].names == []
        assert method.results[0].type.name == "error"

    def test_no_results(self):
        source = parse_go(
            """
            package p

            type T interface { Fire() }
            """
        )
        method = _method(source, "T", "Fire")
        assert method.params == []
        assert method.results == []

    def test_variadic_parameter(self):
        source = parse_go(
            """
            package p

            type Logger interface {
                Log(format string, args ...string) (err error)
            }
            """
        )
        params = _method(source, "Logger", "Log").params
        assert params[0].variadic is False
        assert params[1].variadic is True
        assert params[1].names == ["args"]

    def test_type_expressions(self):
        source = parse_go(
            """
            package p

            type T interface {
                Get(keys []string, index map[string]*pb.Item, buf [16]byte, grid [N][M]int) (err error)
            }
            """
        )
        keys, index, buf, grid = (field.type for field in _method(source, "T", "Get").params)

        assert isinstance(keys, go_ast.Array) and keys.length is None
        assert isinstance(index, go_ast.Map)
        assert isinstance(index.value, go_ast.Pointer)
        assert index.value.elem.package == "pb"
        assert isinstance(buf, go_ast.Array) and buf.length == "16"
        assert isinstance(grid, go_ast.Array) and grid.length == "N"
        assert isinstance(grid.elem, go_ast.Array) and grid.elem.length == "M"

    @pytest.mark.parametrize(
        "type_text, kind",
        [
            ("func(int) error", "func"),
            ("chan int", "chan"),
            ("<-chan int", "chan"),
            ("struct{ X int }", "struct"),
            ("interface{}", "interface"),
            ("List[int]", "generic"),
            ("pb.Page[string, *Item]", "generic"),
            ("(int)", "parenthesized"),
        ],
    )
    def test_unsupported_type_literals(self, type_text, kind):
        source = parse_go(
            f"""
            package p

            type T interface {{
                Foo(x {type_text}) (err error)
            }}
            """
        )
        field_type = _method(source, "T", "Foo").params[0].type
        assert isinstance(field_type, go_ast.UnsupportedType)
        assert field_type.kind == kind

    def test_generic_result_type(self):
        source = parse_go(
            """
            package p

            type T interface {
                Page() List[int]
            }
            """
        )
        result = _method(source, "T", "Page").results[0]
        assert result.names == []
        assert isinstance(result.type, go_ast.UnsupportedType)
        assert result.type.kind == "generic"

    def test_embedded_interfaces(self):
        source = parse_go(
            """
            package p

            type ReadCloser interface {
                io.Reader
                Closer
                Close() (err error)
            }
            """
        )
        interface = _interface(source, "ReadCloser")
        assert interface.embedded == ["io.Reader", "Closer"]
        assert [method.name for method in interface.methods] == ["Close"]

    def test_multiline_signature_and_comments(self):
        source = parse_go(
            """
            package p

            type T interface { // trailing comment
                /* A method
                   with a long comment. */
                Foo(
                    a int,
                    b string,
                ) (
                    n int, // count
                    err error,
                )
            }
            """
        )
        method = _method(source, "T", "Foo")
        assert [field.names for field in method.params] == [["a"], ["b"]]
        assert [field.names for field in method.results] == [["n"], ["err"]]

    def test_method_position(self):
        source = parse_go(
            """
            package p

            type T interface {
                Foo() (err error)
            }
            """
        )
        assert str(_method(source, "T", "Foo").position) == "test.go:5:5"


class TestSyntaxErrors:
    """Test diagnostics for invalid source."""

    def test_mixed_named_and_unnamed_parameters(self):
        with pytest.raises(GoSyntaxError, match="mixed named and unnamed parameters"):
            parse_go(
                """
                package p

                type T interface {
                    Foo(a int, string) (err error)
                }
                """
            )

    def test_missing_package_clause(self):
        with pytest.raises(GoSyntaxError):
            parse_go("type T interface{}\n")

    def test_unexpected_newline(self):
        with pytest.raises(GoSyntaxError, match="unexpected newline") as exc_info:
            parse_go(
                """
                package p

                type T interface {
                    Foo(a int) (err error
                }
                """
            )
        assert exc_info.value.position is not None
        assert exc_info.value.position.line == 5
        assert str(exc_info.value).startswith("test.go:5:")

    def test_unexpected_end_of_file(self):
        with pytest.raises(GoSyntaxError, match="unexpected end of file"):
            parse_go(
                """
                package p

                type T interface {
                """
            )

    def test_invalid_character(self):
        with pytest.raises(GoSyntaxError, match="invalid character '@'") as exc_info:
            parse_go(
                """
                package p

                var x = 1 @ 2
                """
            )
        assert exc_info.value.position.line == 4
