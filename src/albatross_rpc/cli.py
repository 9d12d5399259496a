"""
Albatross CLI

Command-line access to an Albatross node's JSON-RPC interface.

Commands:
  block-number  - Show the current block height
  block         - Show a block (latest, by number or by hash)
  account       - Show an account and its balance
  accounts      - List accounts held by the node wallet
  tx            - Show a transaction
  call          - Call any RPC method with JSON params
  convert       - Convert between NIM and Luna (offline)
"""

from __future__ import annotations

import json
import logging
import sys
from dataclasses import replace
from typing import NoReturn, Optional

import click

from . import __version__
from .config import ENV_PASSWORD, ENV_TIMEOUT, ENV_URL, ENV_USERNAME, load_settings
from .errors import AlbatrossError, UnitParseError
from .models import Block
from .node import AlbatrossClient
from .units import luna_to_nim, nim_to_luna


# ============ Helpers ============


def _fail(exc: object, exit_code: int) -> NoReturn:
    click.secho(f"ERROR: {exc}", fg="red", err=True)
    sys.exit(exit_code)


def _client(ctx: click.Context) -> AlbatrossClient:
    options = ctx.obj or {}
    try:
        settings = load_settings()
        if options.get("url"):
            settings = replace(settings, url=options["url"])
        if options.get("username"):
            settings = replace(settings, username=options["username"])
        if options.get("password") is not None:
            settings = replace(settings, password=options["password"])
        if options.get("timeout") is not None:
            settings = replace(settings, timeout=options["timeout"])
        return AlbatrossClient(settings.build_client())
    except AlbatrossError as exc:
        _fail(exc, exc.exit_code)


def _echo_block(block: Block) -> None:
    click.echo(f"  Number:    {block.number}")
    click.echo(f"  Type:      {block.type}")
    click.echo(f"  Epoch:     {block.epoch}")
    click.echo(f"  Batch:     {block.batch}")
    click.echo(f"  Timestamp: {block.timestamp}")
    if block.is_election_block:
        click.echo("  Election:  yes")
    if block.producer is not None:
        click.echo(f"  Producer:  {block.producer.validator} (slot {block.producer.slot_number})")
    if isinstance(block.transactions, list):
        click.echo(f"  Txs:       {len(block.transactions)}")


# ============ Main CLI Group ============


@click.group()
@click.version_option(version=__version__, prog_name="albatross")
@click.option("--url", envvar=ENV_URL, default=None, help="Node RPC URL")
@click.option("--username", envvar=ENV_USERNAME, default=None, help="RPC basic auth username")
@click.option("--password", envvar=ENV_PASSWORD, default=None, help="RPC basic auth password")
@click.option("--timeout", envvar=ENV_TIMEOUT, default=None, type=float, help="Request timeout in seconds")
@click.option("--verbose", "-v", is_flag=True, help="Log RPC traffic to stderr")
@click.pass_context
def cli(
    ctx: click.Context,
    url: Optional[str],
    username: Optional[str],
    password: Optional[str],
    timeout: Optional[float],
    verbose: bool,
) -> None:
    """Albatross - JSON-RPC client for Nimiq Albatross nodes."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    ctx.obj = {"url": url, "username": username, "password": password, "timeout": timeout}


# ============ Blockchain ============


@cli.command("block-number")
@click.pass_context
def block_number(ctx: click.Context) -> None:
    """Show the current block height."""
    client = _client(ctx)
    try:
        click.echo(client.get_block_number())
    except AlbatrossError as exc:
        _fail(exc, exc.exit_code)


@cli.command()
@click.option("--number", "-n", type=int, default=None, help="Block number")
@click.option("--hash", "block_hash", default=None, help="Block hash")
@click.option("--transactions", is_flag=True, help="Include transactions")
@click.pass_context
def block(ctx: click.Context, number: Optional[int], block_hash: Optional[str], transactions: bool) -> None:
    """Show a block. Without --number or --hash, shows the latest block."""
    if number is not None and block_hash is not None:
        raise click.UsageError("Use either --number or --hash, not both.")

    client = _client(ctx)
    try:
        if number is not None:
            result = client.get_block_by_number(number, include_transactions=transactions)
        elif block_hash is not None:
            result = client.get_block_by_hash(block_hash, include_transactions=transactions)
        else:
            result = client.get_latest_block(include_transactions=transactions)
    except AlbatrossError as exc:
        _fail(exc, exc.exit_code)
    if result is None:
        _fail("Block not found", 1)

    _echo_block(result)


@cli.command()
@click.argument("tx_hash")
@click.pass_context
def tx(ctx: click.Context, tx_hash: str) -> None:
    """Show a transaction by hash."""
    client = _client(ctx)
    try:
        result = client.get_transaction_by_hash(tx_hash)
    except AlbatrossError as exc:
        _fail(exc, exc.exit_code)
    if result is None:
        _fail(f"Transaction not found: {tx_hash}", 1)

    click.echo(f"  Hash:  {result.hash}")
    click.echo(f"  From:  {result.from_ or '-'}")
    click.echo(f"  To:    {result.to or '-'}")
    if result.value is not None:
        click.echo(f"  Value: {result.value_nim} NIM")
    if result.block_number is not None:
        click.echo(f"  Block: {result.block_number}")


# ============ Accounts ============


@cli.command()
@click.argument("address")
@click.pass_context
def account(ctx: click.Context, address: str) -> None:
    """Show an account and its balance."""
    client = _client(ctx)
    try:
        result = client.get_account(address)
    except AlbatrossError as exc:
        _fail(exc, exc.exit_code)
    if result is None:
        _fail(f"Account not found: {address}", 1)

    click.echo(f"Address: {result.address}")
    click.echo(f"Type:    {result.type}")
    click.echo(f"Balance: {result.balance_nim} NIM ({result.balance} Luna)")


@cli.command()
@click.pass_context
def accounts(ctx: click.Context) -> None:
    """List accounts held by the node wallet."""
    client = _client(ctx)
    try:
        addresses = client.list_accounts()
    except AlbatrossError as exc:
        _fail(exc, exc.exit_code)

    if not addresses:
        click.echo("No accounts.")
        return
    for address in addresses:
        click.echo(address)


# ============ Generic ============


@cli.command()
@click.argument("method")
@click.argument("params_json", default="[]")
@click.pass_context
def call(ctx: click.Context, method: str, params_json: str) -> None:
    """Call METHOD with PARAMS_JSON (a JSON array) and print the result."""
    try:
        params = json.loads(params_json)
        if not isinstance(params, list):
            raise ValueError("Params must be a JSON array")
    except (json.JSONDecodeError, ValueError) as exc:
        _fail(f"Invalid params: {exc}", 2)

    client = _client(ctx)
    try:
        result = client.call_method(method, *params)
    except AlbatrossError as exc:
        _fail(exc, exc.exit_code)

    click.echo(json.dumps(result, indent=2, sort_keys=True))


# ============ Units ============


@cli.group()
def convert() -> None:
    """Convert between NIM and Luna."""
    pass


@convert.command("to-nim")
@click.argument("luna", type=int)
def convert_to_nim(luna: int) -> None:
    """Convert a Luna amount to NIM."""
    try:
        click.echo(luna_to_nim(luna))
    except UnitParseError as exc:
        _fail(exc, 2)


@convert.command("to-luna")
@click.argument("nim")
def convert_to_luna(nim: str) -> None:
    """Convert a NIM amount to Luna."""
    try:
        click.echo(nim_to_luna(nim))
    except UnitParseError as exc:
        _fail(exc, 2)


# ============ Entry Points ============


def main() -> None:
    """Albatross CLI entry point."""
    cli()


if __name__ == "__main__":
    main()
