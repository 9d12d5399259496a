"""
Protocol - JSON-RPC 2.0 envelope handling for the Albatross client.

Provides the request/response envelope types, the bundled envelope
schemas, and the generic ``unwrap`` used to turn a raw payload into
a typed value.
"""
