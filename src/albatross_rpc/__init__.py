__version__ = "0.3.0"

__all__ = [
    # Envelope
    "JSONRPC_VERSION",
    "Request",
    "Response",
    "JsonRpcError",
    "index_by_id",
    # Unwrap
    "Unwrappable",
    "unwrap",
    # Transport
    "BasicAuth",
    "HttpClient",
    "is_valid_url",
    # Node API
    "AlbatrossClient",
    "Account",
    "Block",
    "ReturnAccount",
    "Slot",
    "Slots",
    "Transaction",
    # Units
    "LUNA_PER_NIM",
    "MAX_SUPPLY_LUNA",
    "luna_to_nim",
    "nim_to_luna",
    # Config
    "RpcSettings",
    "load_settings",
    # Errors
    "AlbatrossError",
    "ConfigurationError",
    "DecodeError",
    "SerializationError",
    "TransportError",
    "UnitParseError",
]

from .errors import (
    AlbatrossError,
    ConfigurationError,
    DecodeError,
    SerializationError,
    TransportError,
    UnitParseError,
)
from .protocol.envelope import JSONRPC_VERSION, JsonRpcError, Request, Response, index_by_id
from .protocol.unwrap import Unwrappable, unwrap
from .transport import BasicAuth, HttpClient, is_valid_url
from .models import Account, Block, ReturnAccount, Slot, Slots, Transaction
from .node import AlbatrossClient
from .units import LUNA_PER_NIM, MAX_SUPPLY_LUNA, luna_to_nim, nim_to_luna
from .config import RpcSettings, load_settings
