"""Helper functionality that is used in other modules of this package."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gorpc_stub_generator.model import Type

INDENT = "\t"


def public_name(name: str) -> str:
    """The exported form of a Go identifier.

    Only a leading ASCII lowercase letter is changed, so `_id` and non-ASCII names stay as
    they are. E.g. `result` becomes `Result`.

    Args:
        name (str): The identifier.

    Returns:
        str: The identifier with its first letter in upper case.
    """
    first = name[:1]
    if first.isascii() and first.islower():
        return first.upper() + name[1:]
    return name


def is_exported(name: str) -> bool:
    """Whether a Go identifier is visible outside its package."""
    return name[:1].isupper()


def field_list(
    types: Sequence[Type],
    prefix: str = "",
    delimiter: str = ", ",
    with_types: bool = False,
    public: bool = False,
) -> str:
    """Render a list of parameters or results.

    Names of one type are joined by ", ", each prefixed with `prefix`. With `with_types`,
    the type follows the names of its group. Groups are joined by `delimiter`.

    Args:
        types (Sequence[Type]): The parameter or result groups.
        prefix (str, optional): Prepended to every name, e.g. `request.`. Defaults to "".
        delimiter (str, optional): Placed between groups. Defaults to ", ".
        with_types (bool, optional): Whether to append the type of each group. Defaults to False.
        public (bool, optional): Whether to use the exported names. Defaults to False.

    Returns:
        str: The rendered list.

    Examples:
        >>> field_list([Type.from_names(["a", "b"], "int")], with_types=True)
        'a, b int'
        >>> field_list([Type.from_names(["a", "b"], "int")], prefix="request.", public=True)
        'request.A, request.B'
    """
    groups: list[str] = []
    for type_ in types:
        names = type_.public_names if public else type_.local_names
        group = ", ".join(f"{prefix}{name}" for name in names)
        if with_types:
            group = f"{group} {type_.signature}"
        groups.append(group)
    return delimiter.join(groups)


def public_fields(types: Sequence[Type]) -> list[str]:
    """Struct field lines with exported names and types, one per group, e.g. `A, B int`."""
    return [field_list([type_], with_types=True, public=True) for type_ in types]


def refs_with_prefix(types: Sequence[Type], prefix: str = "") -> str:
    """The local names, comma-separated and prefixed."""
    return field_list(types, prefix=prefix)


def public_refs_with_prefix(types: Sequence[Type], prefix: str = "") -> str:
    """The exported names, comma-separated and prefixed, e.g. `request.A, request.B`."""
    return field_list(types, prefix=prefix, public=True)


def function_args(types: Sequence[Type]) -> str:
    """The local names with their types, as in a function signature, e.g. `a, b int`."""
    return field_list(types, with_types=True)


def new_struct(name: str, fields: Sequence[str]) -> list[str]:
    """Create the lines of a struct type declaration.

    Args:
        name (str): The type name.
        fields (Sequence[str]): The field lines, without indentation.

    Returns:
        list[str]: The declaration lines.
    """
    if not fields:
        return [f"type {name} struct{{}}"]
    return [f"type {name} struct {{", *(INDENT + line for line in fields), "}"]


def new_function(
    name: str,
    parameters: str = "",
    results: str | None = None,
    receiver: str | None = None,
) -> str:
    """Create the opening line of a function declaration.

    Args:
        name (str): The function name.
        parameters (str, optional): The rendered parameter list. Defaults to "".
        results (str | None, optional): The rendered results, e.g. `error` or `(n int, err error)`.
            Defaults to None.
        receiver (str | None, optional): The receiver of a method, e.g. `s *ArithService`. Defaults to None.

    Returns:
        str: The line, ending with the opening brace of the body.
    """
    line = "func "
    if receiver:
        line += f"({receiver}) "
    line += f"{name}({parameters})"
    if results:
        line += f" {results}"
    return line + " {"


def new_function_body(lines: Sequence[str]) -> list[str]:
    """Indent the body statements of a function and close it."""
    return [*(INDENT + line for line in lines), "}"]
