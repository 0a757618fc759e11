"""
Argument encoding for the emitBurn call.

Caller input arrives as loose hex text. These helpers turn it into the
fixed-width values the contract expects. What happens to text that is not
hex is decided by a ``DecodePolicy``: the default zero-fills and logs a
warning, the strict policy raises ``MalformedInputError``.
"""
import binascii
import logging
from enum import Enum

from eth_utils import to_checksum_address

from .core.errors import MalformedInputError

logger = logging.getLogger(__name__)

BYTES32_LENGTH = 32
ADDRESS_LENGTH = 20
ZERO_BYTES32 = bytes(BYTES32_LENGTH)
ZERO_ADDRESS = to_checksum_address("0x" + "00" * ADDRESS_LENGTH)


class DecodePolicy(str, Enum):
    ZERO_FILL = "zero_fill"
    STRICT = "strict"

    @classmethod
    def from_flag(cls, strict: bool) -> "DecodePolicy":
        return cls.STRICT if strict else cls.ZERO_FILL


def _strip_prefix(text: str) -> str:
    if text.startswith("0x"):
        return text[2:]
    return text


def _decode_hex(text: str) -> bytes:
    try:
        return binascii.unhexlify(text)
    except ValueError as e:
        raise MalformedInputError(f"invalid hex value {text!r}: {e}") from e


def _fallback(policy: DecodePolicy, error: MalformedInputError, default, kind: str):
    if policy is DecodePolicy.STRICT:
        raise error
    logger.warning(f"failed to parse {kind}, using zero value: {error}")
    return default


def parse_bytes32(value: str, policy: DecodePolicy = DecodePolicy.ZERO_FILL) -> bytes:
    """
    Convert a hex string to a 32-byte value.

    Handles both with and without 0x prefix. Shorter values are left-padded
    with zeros, longer ones keep only their first 32 bytes.
    """
    hex_str = _strip_prefix(value)
    if len(hex_str) < 2 * BYTES32_LENGTH:
        hex_str = hex_str.rjust(2 * BYTES32_LENGTH, "0")

    try:
        decoded = _decode_hex(hex_str)
    except MalformedInputError as e:
        return _fallback(policy, e, ZERO_BYTES32, "bytes32")

    return decoded[:BYTES32_LENGTH]


def parse_address(value: str, policy: DecodePolicy = DecodePolicy.ZERO_FILL) -> str:
    """
    Convert a hex string to a checksummed 20-byte address.

    Input longer than an address keeps its trailing 20 bytes, shorter input
    is left-padded, matching how the network client reads loose addresses.
    """
    hex_str = _strip_prefix(value)
    if len(hex_str) % 2 == 1:
        hex_str = "0" + hex_str

    try:
        decoded = _decode_hex(hex_str)
    except MalformedInputError as e:
        return _fallback(policy, e, ZERO_ADDRESS, "address")

    raw = decoded[-ADDRESS_LENGTH:].rjust(ADDRESS_LENGTH, b"\x00")
    return to_checksum_address("0x" + raw.hex())
