from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gorpc_stub_generator.model import GenerationModel, Method


@dataclass
class ServiceGenerationContext:
    """Names of the generated types and constructors of one interface.

    Attributes:
        interface_name: The interface the stubs are generated for (e.g. "Arith")
        service_type_name: The server-side dispatcher type (e.g. "ArithService")
        client_type_name: The client-side proxy type (e.g. "ArithClient")
        service_name: The name the service is registered under (e.g. "Arith")
    """

    interface_name: str
    service_type_name: str
    client_type_name: str
    service_name: str

    @property
    def new_service_name(self) -> str:
        return f"New{self.service_type_name}"

    @property
    def register_service_name(self) -> str:
        return f"Register{self.service_type_name}"

    @property
    def dial_client_name(self) -> str:
        return f"Dial{self.client_type_name}"

    @property
    def new_client_name(self) -> str:
        return f"New{self.client_type_name}"

    @classmethod
    def create(cls, model: GenerationModel) -> ServiceGenerationContext:
        """Factory method to create the context from a generation model.

        Args:
            model: The generation model

        Returns:
            A fully initialized ServiceGenerationContext
        """
        return cls(
            interface_name=model.type_name,
            service_type_name=f"{model.type_name}Service",
            client_type_name=f"{model.type_name}Client",
            service_name=model.service,
        )


@dataclass
class MethodGenerationContext:
    """Context object containing the names needed to generate one method.

    Attributes:
        method: The interface method
        request_type_name: The struct carrying the parameters (e.g. "AddRequest")
        response_type_name: The struct carrying the results (e.g. "AddResponse")
        remote_name: The name the client calls (e.g. "Arith.Add")
    """

    method: Method
    request_type_name: str
    response_type_name: str
    remote_name: str

    @classmethod
    def create(cls, model: GenerationModel, method: Method) -> MethodGenerationContext:
        """Factory method to create the context with the type names of a method.

        With `qualify_types`, request and response types are prefixed with the interface
        name, so the stubs of several interfaces can share one package.

        Args:
            model: The generation model
            method: The method

        Returns:
            A fully initialized MethodGenerationContext
        """
        prefix = model.type_name if model.qualify_types else ""
        return cls(
            method=method,
            request_type_name=f"{prefix}{method.name}Request",
            response_type_name=f"{prefix}{method.name}Response",
            remote_name=f"{model.service}.{method.name}",
        )
