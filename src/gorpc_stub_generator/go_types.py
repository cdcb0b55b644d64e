"""Names from the Go language and the net/rpc runtime that generated stubs rely on."""

from __future__ import annotations

# Result type that carries the RPC error; must be the last result of every method.
ERROR_TYPE = "error"

# Import path of the RPC runtime. Generated code always refers to it as `rpc`.
RPC_IMPORT = "net/rpc"

DEFAULT_RPC_CLIENT_TYPE = "*rpc.Client"
RPC_SERVER_TYPE = "*rpc.Server"
DEFAULT_NETWORK = "tcp"

GENERATOR_NAME = "gorpc-stub-generator"
