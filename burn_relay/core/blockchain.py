"""
Blockchain interaction utilities.
"""
import json
import logging

from eth_account import Account
from eth_account.signers.local import LocalAccount
from eth_utils import decode_hex
from web3 import Web3

from .errors import ConfigurationError, EncodingError

logger = logging.getLogger(__name__)

EMIT_BURN_FUNCTION = "emitBurn"


def get_web3(rpc_url: str) -> Web3:
    """Get Web3 instance for the node. Connectivity is checked per call, not here."""
    w3 = Web3(Web3.HTTPProvider(rpc_url))

    try:
        if not w3.is_connected():
            logger.warning(f"Node at {rpc_url} is not reachable yet, relay calls will fail until it is")
    except Exception as e:
        logger.warning(f"Could not check connection to {rpc_url}: {e}")

    return w3


def load_account(private_key: str) -> LocalAccount:
    """Get account from private key."""
    try:
        return Account.from_key(private_key)
    except Exception as e:
        raise ConfigurationError(f"Failed to parse private key: {e}") from e


def load_contract_abi(raw_abi: str) -> list:
    """
    Parse a contract ABI from JSON text.

    Accepts either a bare ABI array or a Hardhat artifact object with an
    ``abi`` key.
    """
    try:
        parsed = json.loads(raw_abi)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Failed to parse contract ABI: {e}") from e

    if isinstance(parsed, dict):
        parsed = parsed.get("abi")

    if not isinstance(parsed, list):
        raise ConfigurationError("Failed to parse contract ABI: expected a JSON array or an artifact with an 'abi' key")

    return parsed


class ContractTarget:
    """The relayed contract: its address and the ABI used to pack calls."""

    def __init__(self, address: str, abi: list, function_name: str = EMIT_BURN_FUNCTION):
        try:
            self.address = Web3.to_checksum_address(address)
        except Exception as e:
            raise ConfigurationError(f"Invalid contract address {address!r}: {e}") from e

        self.abi = abi
        self.function_name = function_name

        # Packing never touches the network, so the codec gets its own offline instance
        try:
            self._contract = Web3().eth.contract(address=self.address, abi=self.abi)
        except Exception as e:
            raise ConfigurationError(f"Failed to parse contract ABI: {e}") from e

    @classmethod
    def from_config(cls, address: str, raw_abi: str) -> "ContractTarget":
        return cls(address, load_contract_abi(raw_abi))

    def pack(self, ephemeral_public_key: bytes, burn_address: str) -> bytes:
        """Pack the call data for emitBurn(bytes32 ephemeralPublicKey, address burnAddress)."""
        try:
            data = self._contract.encode_abi(self.function_name, args=[ephemeral_public_key, burn_address])
        except Exception as e:
            raise EncodingError(f"failed to pack contract call: {e}") from e

        return decode_hex(data)
