"""The language-neutral description of an RPC interface that the writer renders."""

from __future__ import annotations

from dataclasses import dataclass, field

from gorpc_stub_generator.config import GeneratorConfig
from gorpc_stub_generator.go_types import RPC_IMPORT
from gorpc_stub_generator.helper import public_name
from gorpc_stub_generator.imports import ImportSet


@dataclass(frozen=True)
class Type:
    """A group of parameters or results that share one type, like `a, b int`.

    Attributes:
        public_names: The names as exported struct fields (`A`, `B`).
        local_names: The names as written in the interface (`a`, `b`).
        signature: The type as Go source (`int`).
    """

    public_names: tuple[str, ...]
    local_names: tuple[str, ...]
    signature: str

    def __post_init__(self):
        if not self.local_names:
            raise ValueError("a type needs at least one name")
        if len(self.public_names) != len(self.local_names):
            raise ValueError("public and local names differ in length")
        if not self.signature:
            raise ValueError("a type needs a signature")

    @classmethod
    def from_names(cls, names: list[str] | tuple[str, ...], signature: str) -> Type:
        """Create a type from the names as written in the interface."""
        return cls(tuple(public_name(name) for name in names), tuple(names), signature)


@dataclass(frozen=True)
class Method:
    """An interface method. The trailing error result is not part of `results`."""

    name: str
    parameters: tuple[Type, ...]
    results: tuple[Type, ...]


@dataclass(frozen=True)
class Interface:
    """An interface and its methods, in declaration order."""

    name: str
    methods: tuple[Method, ...]


@dataclass
class GenerationModel:
    """Everything the writer needs to render the stubs of one interface.

    Attributes:
        package: The package of the generated file.
        service: The name the service is registered under.
        type_name: The interface name.
        rpc_client_type: The type of the client handle wrapped by the generated client.
        imports: The imports of the generated file.
        methods: The interface methods, in declaration order.
        qualify_types: Prefix request and response type names with the interface name.
    """

    package: str
    service: str
    type_name: str
    rpc_client_type: str
    imports: ImportSet
    methods: list[Method] = field(default_factory=list)
    qualify_types: bool = False


def build_generation_model(
    config: GeneratorConfig, source_package: str, interface: Interface, discovered_imports: ImportSet
) -> GenerationModel:
    """Combine configuration and extraction results.

    Args:
        config (GeneratorConfig): The run configuration.
        source_package (str): The package of the source file.
        interface (Interface): The extracted interface.
        discovered_imports (ImportSet): Imports needed by the parameter and result types.

    Returns:
        GenerationModel: The model to render.
    """
    imports = ImportSet(config.import_entries).union(discovered_imports)
    if RPC_IMPORT not in imports:
        imports.add(RPC_IMPORT)

    return GenerationModel(
        package=config.package_for(source_package),
        service=config.service_name,
        type_name=interface.name,
        rpc_client_type=config.rpc_client_type,
        imports=imports,
        methods=list(interface.methods),
        qualify_types=config.qualify_types,
    )
