import json
import threading

import pytest
from fastapi.testclient import TestClient

from burn_relay.core.blockchain import ContractTarget
from burn_relay.encoding import DecodePolicy
from burn_relay.main import create_app
from burn_relay.relay_service import RelayContext, TransactionSubmitter

# Hardhat's first default account
TEST_PRIVATE_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
TEST_SENDER = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
CONTRACT_ADDRESS = "0x5FbDB2315678afecb367f032d93F642f64180aa3"
CHAIN_ID = 11155111
GAS_LIMIT = 100000
CANNED_TX_HASH = "0x" + "ab" * 32

EMIT_BURN_ABI = [
    {
        "type": "function",
        "name": "emitBurn",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "ephemeralPublicKey", "type": "bytes32", "internalType": "bytes32"},
            {"name": "burnAddress", "type": "address", "internalType": "address"},
        ],
        "outputs": [],
    },
    {
        "type": "event",
        "name": "Burn",
        "anonymous": False,
        "inputs": [
            {"name": "ephemeralPublicKey", "type": "bytes32", "indexed": False, "internalType": "bytes32"},
            {"name": "burnAddress", "type": "address", "indexed": True, "internalType": "address"},
        ],
    },
]


class NodeDown(Exception):
    pass


class StubEth:
    """
    Stand-in for ``w3.eth`` with canned answers.

    The pending nonce is ``base_nonce`` plus the number of accepted
    submissions, like a node that sees its own mempool. Any step named in
    ``fail`` raises ``NodeDown``.
    """

    def __init__(self, base_nonce=7, gas_price=2_000_000_000, tx_hash=CANNED_TX_HASH):
        self.base_nonce = base_nonce
        self._gas_price = gas_price
        self.tx_hash = tx_hash
        self.fail = set()
        self.calls = []
        self.nonce_queries = []
        self.returned_nonces = []
        self.sent = []
        self.nonce_barrier = None
        self._mutex = threading.Lock()

    def get_transaction_count(self, address, block_identifier="latest"):
        self.calls.append("nonce")
        self.nonce_queries.append((address, block_identifier))
        if "nonce" in self.fail:
            raise NodeDown("connection refused")
        with self._mutex:
            nonce = self.base_nonce + len(self.sent)
            self.returned_nonces.append(nonce)
        if self.nonce_barrier is not None:
            self.nonce_barrier.wait(timeout=5)
        return nonce

    @property
    def gas_price(self):
        self.calls.append("gas_price")
        if "gas_price" in self.fail:
            raise NodeDown("gas price unavailable")
        return self._gas_price

    def send_raw_transaction(self, raw):
        self.calls.append("send")
        if "send" in self.fail:
            raise NodeDown("nonce too low")
        with self._mutex:
            self.sent.append(bytes(raw))
        return bytes.fromhex(self.tx_hash[2:])


class StubNode:
    def __init__(self, **kwargs):
        self.eth = StubEth(**kwargs)


@pytest.fixture
def stub_node():
    return StubNode()


@pytest.fixture
def contract_target():
    return ContractTarget.from_config(CONTRACT_ADDRESS, json.dumps(EMIT_BURN_ABI))


def make_submitter(node, contract, policy=DecodePolicy.ZERO_FILL, serialize=True):
    from eth_account import Account

    context = RelayContext(
        w3=node,
        account=Account.from_key(TEST_PRIVATE_KEY),
        contract=contract,
        chain_id=CHAIN_ID,
        gas_limit=GAS_LIMIT,
        decode_policy=policy,
        serialize_submissions=serialize,
    )
    return TransactionSubmitter(context)


@pytest.fixture
def submitter(stub_node, contract_target):
    return make_submitter(stub_node, contract_target)


@pytest.fixture
def client(submitter):
    app = create_app(submitter)
    with TestClient(app) as c:
        yield c
