"""
Relay service - builds, signs and submits emitBurn transactions.
"""
import logging
import threading
from contextlib import nullcontext
from dataclasses import dataclass

from eth_account.datastructures import SignedTransaction
from eth_account.signers.local import LocalAccount
from web3 import Web3

from .core.blockchain import ContractTarget, get_web3, load_account
from .core.config import Settings
from .core.errors import (
    GasPriceFetchError,
    NonceFetchError,
    SigningError,
    SubmissionError,
)
from .encoding import DecodePolicy, parse_address, parse_bytes32

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RelayContext:
    """Everything a submitter needs, fixed for the life of the process."""

    w3: Web3
    account: LocalAccount
    contract: ContractTarget
    chain_id: int
    gas_limit: int
    decode_policy: DecodePolicy = DecodePolicy.ZERO_FILL
    serialize_submissions: bool = True

    @classmethod
    def from_settings(cls, settings: Settings) -> "RelayContext":
        """Connect, parse the key and ABI. Raises ConfigurationError on bad input."""
        account = load_account(settings.PRIVATE_KEY)
        contract = ContractTarget.from_config(settings.CONTRACT_ADDRESS, settings.CONTRACT_ABI)
        w3 = get_web3(settings.ETHEREUM_RPC)

        logger.info(f"Relayer account {account.address} targeting {contract.address} on chain {settings.CHAIN_ID}")

        return cls(
            w3=w3,
            account=account,
            contract=contract,
            chain_id=settings.CHAIN_ID,
            gas_limit=settings.GAS_LIMIT,
            decode_policy=DecodePolicy.from_flag(settings.STRICT_INPUT_DECODING),
            serialize_submissions=settings.SERIALIZE_SUBMISSIONS,
        )


class TransactionSubmitter:
    """
    Performs the emitBurn call lifecycle for one relayer account.

    Each call reads the pending nonce and gas price from the node, packs the
    arguments, signs a legacy transaction and submits it. The first failing
    step raises its own ``RelayError`` subclass and nothing is retried.

    When ``serialize_submissions`` is set, nonce lookup through submission
    runs under a lock so concurrent calls never sign with the same nonce.
    Without it two calls can read the same pending nonce and the node keeps
    at most one of them.
    """

    def __init__(self, context: RelayContext):
        self.context = context
        self._lock = threading.Lock() if context.serialize_submissions else nullcontext()

    @property
    def sender(self) -> str:
        return self.context.account.address

    def call_contract(self, ephemeral_public_key: str, burn_address: str) -> str:
        """Relay emitBurn(ephemeralPublicKey, burnAddress) and return the transaction hash."""
        w3 = self.context.w3
        from_address = self.sender

        with self._lock:
            try:
                nonce = w3.eth.get_transaction_count(from_address, "pending")
            except Exception as e:
                raise NonceFetchError(f"failed to get nonce: {e}") from e

            try:
                gas_price = w3.eth.gas_price
            except Exception as e:
                raise GasPriceFetchError(f"failed to get gas price: {e}") from e

            ephemeral_bytes = parse_bytes32(ephemeral_public_key, self.context.decode_policy)
            burn_addr = parse_address(burn_address, self.context.decode_policy)

            data = self.context.contract.pack(ephemeral_bytes, burn_addr)
            logger.info(
                f"Packed data for {self.context.contract.function_name}: "
                f"ephemeralPublicKey={ephemeral_bytes.hex()}, burnAddress={burn_addr}"
            )

            signed = self.sign(self.build_transaction(nonce, gas_price, data))

            try:
                tx_hash = w3.eth.send_raw_transaction(signed.raw_transaction)
            except Exception as e:
                raise SubmissionError(f"failed to send transaction: {e}") from e

        tx_hash_hex = Web3.to_hex(tx_hash)
        logger.info(f"Transaction sent with hash: {tx_hash_hex} (nonce {nonce})")
        return tx_hash_hex

    def build_transaction(self, nonce: int, gas_price: int, data: bytes) -> dict:
        """Unsigned legacy transaction calling the contract with no value attached."""
        return {
            "nonce": nonce,
            "gasPrice": gas_price,
            "gas": self.context.gas_limit,
            "to": self.context.contract.address,
            "value": 0,
            "data": data,
            "chainId": self.context.chain_id,
        }

    def sign(self, transaction: dict) -> SignedTransaction:
        try:
            return self.context.account.sign_transaction(transaction)
        except Exception as e:
            raise SigningError(f"failed to sign transaction: {e}") from e
