"""Render the Go source of RPC stubs for an interface.

For an interface `T` the output holds a server-side dispatcher `TService` that
implements the net/rpc calling convention on top of an implementation of `T`, and a
client-side proxy `TClient` whose methods have the signatures of `T`.
"""

from __future__ import annotations

import logging

from gorpc_stub_generator import helper
from gorpc_stub_generator.go_types import DEFAULT_NETWORK, GENERATOR_NAME, RPC_SERVER_TYPE
from gorpc_stub_generator.model import GenerationModel, Method
from gorpc_stub_generator.writer_dto import MethodGenerationContext, ServiceGenerationContext

logger = logging.getLogger(__name__)

# Methods that the generated client declares itself.
CLIENT_METHOD_NAMES = {"Close"}


class Writer:
    """A class that handles writing the stub file, based on a generation model."""

    def __init__(self, model: GenerationModel):
        """Initialize the writer.

        Args:
            model (GenerationModel): The model to render.
        """
        self.model = model
        self.service = ServiceGenerationContext.create(model)
        self.lines: list[str] = []

        self.header = f"// Code generated by {GENERATOR_NAME}. DO NOT EDIT."

    @property
    def imports(self) -> list[str]:
        """The import specs of the generated file, sorted by path."""
        return [entry.render() for entry in self.model.imports]

    def _add_declaration(self, lines: list[str] | str):
        """Add a top-level declaration, separated from the previous one by a blank line."""
        self.lines.append("")
        if isinstance(lines, str):
            self.lines.append(lines)
        else:
            self.lines.extend(lines)

    def _add_function(self, declaration: str, body: list[str]):
        self._add_declaration([declaration, *helper.new_function_body(body)])

    def gen_service(self):
        """Generate the dispatcher type with its constructor and registration function."""
        interface = self.service.interface_name
        service_type = self.service.service_type_name

        self._add_declaration(helper.new_struct(service_type, [f"impl {interface}"]))
        self._add_function(
            helper.new_function(self.service.new_service_name, f"impl {interface}", f"*{service_type}"),
            [f"return &{service_type}{{impl}}"],
        )
        self._add_function(
            helper.new_function(
                self.service.register_service_name, f"server {RPC_SERVER_TYPE}, impl {interface}", "error"
            ),
            [f'return server.RegisterName("{self.service.service_name}", {self.service.new_service_name}(impl))'],
        )

    def gen_method_types(self, context: MethodGenerationContext):
        """Generate the request and response structs of a method."""
        method = context.method
        self._add_declaration(helper.new_struct(context.request_type_name, helper.public_fields(method.parameters)))
        self._add_declaration(helper.new_struct(context.response_type_name, helper.public_fields(method.results)))

    def gen_dispatcher(self, context: MethodGenerationContext):
        """Generate the service method that unpacks a request and calls the implementation."""
        method = context.method

        targets = "err"
        if method.results:
            targets = f"{helper.public_refs_with_prefix(method.results, 'response.')}, err"
        arguments = helper.public_refs_with_prefix(method.parameters, "request.")

        self._add_function(
            helper.new_function(
                method.name,
                f"request *{context.request_type_name}, response *{context.response_type_name}",
                "(err error)",
                receiver=f"s *{self.service.service_type_name}",
            ),
            [f"{targets} = s.impl.{method.name}({arguments})", "return"],
        )

    def gen_client(self):
        """Generate the proxy type with its constructors and `Close`."""
        client_type = self.service.client_type_name
        rpc_client_type = self.model.rpc_client_type

        self._add_declaration(helper.new_struct(client_type, [f"client {rpc_client_type}"]))
        self._add_function(
            helper.new_function(self.service.dial_client_name, "addr string", f"(*{client_type}, error)"),
            [
                f'client, err := rpc.Dial("{DEFAULT_NETWORK}", addr)',
                f"return &{client_type}{{client}}, err",
            ],
        )
        self._add_function(
            helper.new_function(self.service.new_client_name, f"client {rpc_client_type}", f"*{client_type}"),
            [f"return &{client_type}{{client}}"],
        )
        self._add_function(
            helper.new_function("Close", results="error", receiver=f"_c *{client_type}"),
            ["return _c.client.Close()"],
        )

    def gen_proxy(self, context: MethodGenerationContext):
        """Generate the client method that packs the arguments and performs the call."""
        method = context.method

        results = "err error"
        returns = "err"
        if method.results:
            results = f"{helper.function_args(method.results)}, err error"
            returns = f"{helper.public_refs_with_prefix(method.results, '_response.')}, err"

        self._add_function(
            helper.new_function(
                method.name,
                helper.function_args(method.parameters),
                f"({results})",
                receiver=f"_c *{self.service.client_type_name}",
            ),
            [
                f"_request := &{context.request_type_name}{{{helper.refs_with_prefix(method.parameters)}}}",
                f"_response := &{context.response_type_name}{{}}",
                f'err = _c.client.Call("{context.remote_name}", _request, _response)',
                f"return {returns}",
            ],
        )

    def _method_contexts(self) -> list[MethodGenerationContext]:
        return [MethodGenerationContext.create(self.model, method) for method in self.model.methods]

    def _check_method(self, method: Method):
        if method.name in CLIENT_METHOD_NAMES:
            logger.warning(
                "Method %s of %s clashes with the generated %s.%s",
                method.name,
                self.service.interface_name,
                self.service.client_type_name,
                method.name,
            )

    def generate(self):
        """Generate all declarations. Calling it again starts over."""
        self.lines = []
        contexts = self._method_contexts()

        self.gen_service()
        for context in contexts:
            self._check_method(context.method)
            self.gen_method_types(context)
            self.gen_dispatcher(context)

        self.gen_client()
        for context in contexts:
            self.gen_proxy(context)

    def dumps(self) -> str:
        """Generates the Go source of the stub file.

        Returns:
            str: The output string, not yet formatted by gofmt.
        """
        if not self.lines:
            self.generate()

        out: list[str] = [self.header, "", f"package {self.model.package}", ""]
        out.append("import (")
        out.extend(helper.INDENT + spec for spec in self.imports)
        out.append(")")
        out.extend(self.lines)

        return "\n".join(out) + "\n"
