"""
Общие fixtures для тестов staking ledger.

Каждый тест получает независимые экземпляры Oracle, Registry и Ledger
(никакого глобального состояния).
"""

import pytest

from src.access import StaticAuthorizer
from src.core.domain import FeeTier
from src.events import RecordingEventSink
from src.ledger import InMemoryAssetTransferBackend, StakingLedger
from src.oracle import ExchangeRateOracle
from src.registry import CurrencyRegistry

ADMIN = "0xAdmin"
ALICE = "0xAlice"
BOB = "0xBob"
TREASURY = "0xTreasury"

USD_TOKEN = "0xUSDz"
EGP_TOKEN = "0xEGPz"


class FakeClock:
    """Детерминированные часы: каждый вызов сдвигает время на step_ms."""

    def __init__(self, start_ms: int = 1_700_000_000_000, step_ms: int = 1_000):
        self.now_ms = start_ms
        self.step_ms = step_ms

    def __call__(self) -> int:
        current = self.now_ms
        self.now_ms += self.step_ms
        return current


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def authorizer():
    return StaticAuthorizer([ADMIN])


@pytest.fixture
def sink():
    """Sink с проверкой payload по JSON Schema контрактам."""
    return RecordingEventSink(validate=True)


@pytest.fixture
def oracle(authorizer, sink, clock):
    return ExchangeRateOracle(authorizer, event_sink=sink, clock=clock)


@pytest.fixture
def registry(authorizer, sink, clock):
    return CurrencyRegistry(authorizer, event_sink=sink, clock=clock)


@pytest.fixture
def transfers():
    backend = InMemoryAssetTransferBackend()
    for account in (ALICE, BOB):
        backend.mint(USD_TOKEN, account, 1_000_000)
        backend.mint(EGP_TOKEN, account, 1_000_000)
    return backend


@pytest.fixture
def ledger(oracle, registry, transfers, sink, clock):
    return StakingLedger(oracle, registry, transfers, event_sink=sink, clock=clock)


@pytest.fixture
def usd_egp_ledger(ledger, oracle, registry):
    """Ledger с конфигурацией исходного развертывания: USD/EGP, 10 bps, курсы 4859 и 2."""
    registry.add_currency(ADMIN, USD_TOKEN, "USD", 10, FeeTier.TIER1)
    registry.add_currency(ADMIN, EGP_TOKEN, "EGP", 10, FeeTier.TIER2)
    oracle.set_rate(ADMIN, "USD", "EGP", 4859)
    oracle.set_rate(ADMIN, "EGP", "USD", 2)
    return ledger
