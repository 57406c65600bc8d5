"""
Bonecoin - Pytest Configuration
=================================
Fixtures e configurazione per testing.

Last Updated: 2026-10-16
Version: 1.0.0
"""

import pytest
from typing import Optional, Set

# Internal imports
from bonecoin.config import WalletSettings, get_test_config
from bonecoin.domain.genesis import get_genesis_id
from bonecoin.domain.models import (
    Address,
    Block,
    BlockId,
    Coin,
    Input,
    Transaction,
    ALICE,
    BOB,
)
from bonecoin.errors import LedgerUnavailableError
from bonecoin.network.ledger import LedgerSource
from bonecoin.network.mock_node import MockNode
from bonecoin.wallet.light_wallet import LightWallet


# ============================================================================
# CONFIGURATION FIXTURES
# ============================================================================

@pytest.fixture
def test_config():
    """Test configuration"""
    return get_test_config()


def make_settings(**overrides) -> WalletSettings:
    """Test configuration con override (nessun .env, retry immediati)"""
    values = {
        "log_level": "DEBUG",
        "enable_console": False,
        "ledger_retry_backoff_seconds": 0.0,
    }
    values.update(overrides)
    return WalletSettings(_env_file=None, **values)


# ============================================================================
# NODE FIXTURES
# ============================================================================

@pytest.fixture
def node():
    """Mock node con solo genesis"""
    return MockNode()


@pytest.fixture
def genesis_id():
    return get_genesis_id()


# ============================================================================
# WALLET FIXTURES
# ============================================================================

@pytest.fixture
def wallet_with_alice(test_config):
    """Wallet che traccia solo Alice"""
    return LightWallet([ALICE], settings=test_config)


@pytest.fixture
def wallet_with_alice_and_bob(test_config):
    """Wallet che traccia Alice e Bob"""
    return LightWallet([ALICE, BOB], settings=test_config)


# ============================================================================
# TRANSACTION HELPERS
# ============================================================================

def marker_tx() -> Transaction:
    """
    Transazione riconoscibile per marcare il lato nuovo di un fork.

    Evita di ricreare per sbaglio la stessa chain (i blocchi sono
    content-addressed).
    """
    return Transaction(
        inputs=[Input.dummy()],
        outputs=[Coin(value=123, owner=Address.custom(123))],
    )


def mint_tx(value: int, owner: Address) -> Transaction:
    """Transazione che crea un coin da un input fittizio"""
    return Transaction(inputs=[Input.dummy()], outputs=[Coin(value=value, owner=owner)])


@pytest.fixture
def funded_node(node, genesis_id):
    """Nodo con un coin da 100 ad Alice a altezza 1"""
    node.add_block_as_best(genesis_id, [mint_tx(100, ALICE)])
    return node


@pytest.fixture
def funded_wallet(wallet_with_alice, funded_node):
    """Wallet Alice sincronizzato su funded_node"""
    wallet_with_alice.sync(funded_node)
    return wallet_with_alice


# ============================================================================
# LEDGER HELPERS
# ============================================================================

class FlakyLedger(LedgerSource):
    """
    Ledger che delega a un MockNode ma può fallire o nascondere blocchi.

    Attributes:
        failing_heights: Altezze per cui best_block_at_height solleva
            sempre LedgerUnavailableError
        withheld: Blocchi che whole_block non restituisce
        failures_left: Prossime query che falliscono (qualunque tipo)
    """

    def __init__(self, node: MockNode):
        self.node = node
        self.failing_heights: Set[int] = set()
        self.withheld: Set[BlockId] = set()
        self.failures_left = 0
        self.calls = 0

    def _consume_failure(self, what: str) -> None:
        if self.failures_left > 0:
            self.failures_left -= 1
            raise LedgerUnavailableError(f"{what} timed out", code="LEDGER_TIMEOUT")

    def best_block_at_height(self, height: int) -> Optional[BlockId]:
        self.calls += 1
        self._consume_failure("best_block_at_height")
        if height in self.failing_heights:
            raise LedgerUnavailableError(f"height {height} unavailable", code="LEDGER_TIMEOUT")
        return self.node.best_block_at_height(height)

    def whole_block(self, block_id: BlockId) -> Optional[Block]:
        self.calls += 1
        self._consume_failure("whole_block")
        if block_id in self.withheld:
            return None
        return self.node.whole_block(block_id)


# ============================================================================
# HELPER FIXTURES
# ============================================================================

@pytest.fixture
def marker():
    """Factory marker_tx()"""
    return marker_tx


@pytest.fixture
def mint():
    """Factory mint_tx(value, owner)"""
    return mint_tx


@pytest.fixture
def settings_factory():
    """Factory make_settings(**overrides)"""
    return make_settings


@pytest.fixture
def flaky_ledger(node):
    """FlakyLedger sopra il mock node"""
    return FlakyLedger(node)
