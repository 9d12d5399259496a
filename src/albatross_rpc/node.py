"""
Node - One Python method per Albatross RPC method.

Each method builds a request with the node's positional parameter
list, sends it and unwraps the result. Optional trailing parameters
are keyword arguments; when omitted, their default is still sent in
its position. A null result comes back as None.
"""

from __future__ import annotations

from typing import Any, Optional, TypeVar

from .protocol.envelope import Request, Response
from .protocol.unwrap import unwrap
from .models import Account, Block, ReturnAccount, Slot, Transaction
from .transport import BasicAuth, HttpClient, DEFAULT_TIMEOUT

T = TypeVar("T")


class AlbatrossClient:
    """Typed wrapper around an ``HttpClient`` for the Albatross RPC API."""

    def __init__(self, http: HttpClient) -> None:
        self.http = http

    @classmethod
    def from_url(
        cls,
        url: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> "AlbatrossClient":
        auth = BasicAuth(username, password or "") if username is not None else None
        return cls(HttpClient(url, auth=auth, timeout=timeout))

    # ============ Generic ============

    def send(self, method: str, *params: Any) -> Response:
        return self.http.call(Request.new(method, *params))

    def call_method(self, method: str, *params: Any, result_type: Any = Any) -> Any:
        """Call any RPC method and unwrap its result as ``result_type``."""
        return unwrap(result_type, self.send(method, *params))

    def _call(self, result_type: type[T], method: str, *params: Any) -> T:
        return unwrap(result_type, self.send(method, *params))

    # ============ Blockchain ============

    def get_block_number(self) -> int:
        return self._call(int, "getBlockNumber")

    def get_batch_number(self) -> int:
        return self._call(int, "getBatchNumber")

    def get_epoch_number(self) -> int:
        return self._call(int, "getEpochNumber")

    def get_latest_block(self, include_transactions: bool = False) -> Block:
        return self._call(Block, "getLatestBlock", include_transactions)

    def get_block_by_number(self, number: int, include_transactions: bool = False) -> Block:
        return self._call(Block, "getBlockByNumber", number, include_transactions)

    def get_block_by_hash(self, block_hash: str, include_transactions: bool = False) -> Block:
        return self._call(Block, "getBlockByHash", block_hash, include_transactions)

    def get_slot_at(self, block_number: int, view_number: Optional[int] = None) -> Slot:
        return self._call(Slot, "getSlotAt", block_number, view_number)

    def get_transaction_by_hash(self, tx_hash: str) -> Transaction:
        return self._call(Transaction, "getTransactionByHash", tx_hash)

    def get_transactions_by_address(self, address: str, max_count: Optional[int] = None) -> list[Transaction]:
        return self._call(list[Transaction], "getTransactionsByAddress", address, max_count)

    # ============ Accounts ============

    def get_account(self, address: str) -> Account:
        return self._call(Account, "getAccount", address)

    def list_accounts(self) -> list[str]:
        return self._call(list[str], "listAccounts")

    def create_account(self, passphrase: Optional[str] = None) -> ReturnAccount:
        return self._call(ReturnAccount, "createAccount", passphrase)

    def import_raw_key(self, key_data: str, passphrase: Optional[str] = None) -> str:
        return self._call(str, "importRawKey", key_data, passphrase)

    def is_account_imported(self, address: str) -> bool:
        return self._call(bool, "isAccountImported", address)

    def lock_account(self, address: str) -> None:
        self._call(Optional[Any], "lockAccount", address)

    def unlock_account(
        self,
        address: str,
        passphrase: Optional[str] = None,
        duration: Optional[int] = None,
    ) -> bool:
        return self._call(bool, "unlockAccount", address, passphrase, duration)

    def is_account_unlocked(self, address: str) -> bool:
        return self._call(bool, "isAccountUnlocked", address)

    # ============ Transactions ============

    def send_basic_transaction(
        self,
        wallet: str,
        recipient: str,
        value: int,
        fee: int,
        validity_start_height: int,
    ) -> str:
        """
        Send NIM from an unlocked wallet.

        Args:
            wallet: Sender address (must be imported and unlocked)
            recipient: Recipient address
            value: Amount in Luna
            fee: Fee in Luna
            validity_start_height: Block number from which the transaction is valid

        Returns:
            Transaction hash
        """
        return self._call(
            str, "sendBasicTransaction", wallet, recipient, value, fee, validity_start_height
        )

    # ============ Network ============

    def is_consensus_established(self) -> bool:
        return self._call(bool, "isConsensusEstablished")

    def get_peer_count(self) -> int:
        return self._call(int, "getPeerCount")

    def get_peer_list(self) -> list[str]:
        return self._call(list[str], "getPeerList")


__all__ = ["AlbatrossClient"]
