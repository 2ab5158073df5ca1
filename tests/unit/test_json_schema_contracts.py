"""
Tests for JSON Schema Contract Validators

Комплексное тестирование JSON Schema валидаторов событий:
- Валидность самих схем
- Валидация правильных payload
- Детекция нарушений required полей, типов и constraints
- Интеграция с Pydantic моделями событий
"""

import json

import pytest
from jsonschema import ValidationError

from src.core.contracts import (
    CurrencyAddedValidator,
    FeesCollectedValidator,
    RateChangedValidator,
    SchemaLoader,
    StakedValidator,
    WithdrawnValidator,
    validate_event,
    validate_event_payload,
)
from src.core.domain import (
    CurrencyAdded,
    EventType,
    FeesCollected,
    FeeTier,
    RateChanged,
    Staked,
    Withdrawn,
)


# =============================================================================
# FIXTURES - VALID DATA SAMPLES
# =============================================================================


@pytest.fixture
def valid_currency_added():
    return {
        "event_type": "currency_added",
        "seq": 0,
        "ts_utc_ms": 1700000000000,
        "currency_id": 0,
        "token_id": "0xUSDz",
        "iso_code": "USD",
        "fee_bps": 10,
        "fee_tier": "Tier1",
        "admin": "0xAdmin",
    }


@pytest.fixture
def valid_withdrawn():
    return {
        "event_type": "withdrawn",
        "seq": 3,
        "ts_utc_ms": 1700000003000,
        "owner": "0xAlice",
        "iso_code": "USD",
        "amount": 1000,
        "fee": 1,
        "net": 999,
        "principal_after": 0,
        "custody_after": 1,
    }


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class TestSchemaLoader:
    def test_all_event_schemas_present(self):
        loader = SchemaLoader()
        assert set(loader.available()) >= {e.value for e in EventType}

    @pytest.mark.parametrize("name", [e.value for e in EventType])
    def test_schema_meta_valid(self, name):
        schema = SchemaLoader().load_schema(name)
        assert schema["properties"]["event_type"]["const"] == name

    def test_missing_schema(self):
        with pytest.raises(FileNotFoundError):
            SchemaLoader().load_schema("does_not_exist")

    def test_missing_directory(self, tmp_path):
        with pytest.raises(RuntimeError):
            SchemaLoader(tmp_path / "nope")

    def test_invalid_schema_rejected(self, tmp_path):
        (tmp_path / "broken.json").write_text(json.dumps({"type": 12}), encoding="utf-8")
        with pytest.raises(ValueError):
            SchemaLoader(tmp_path).load_schema("broken")


# =============================================================================
# VALIDATORS
# =============================================================================


class TestCurrencyAddedContract:
    def test_valid(self, valid_currency_added):
        CurrencyAddedValidator().validate(valid_currency_added)

    def test_missing_required(self, valid_currency_added):
        del valid_currency_added["token_id"]
        assert not CurrencyAddedValidator().is_valid(valid_currency_added)

    def test_fee_bps_above_max(self, valid_currency_added):
        valid_currency_added["fee_bps"] = 10_001
        with pytest.raises(ValidationError):
            CurrencyAddedValidator().validate(valid_currency_added)

    def test_unknown_tier(self, valid_currency_added):
        valid_currency_added["fee_tier"] = "Tier9"
        errors = list(CurrencyAddedValidator().iter_errors(valid_currency_added))
        assert len(errors) == 1

    def test_additional_properties_rejected(self, valid_currency_added):
        valid_currency_added["extra"] = True
        assert not CurrencyAddedValidator().is_valid(valid_currency_added)


class TestWithdrawnContract:
    def test_valid(self, valid_withdrawn):
        WithdrawnValidator().validate(valid_withdrawn)

    def test_zero_amount_rejected(self, valid_withdrawn):
        valid_withdrawn["amount"] = 0
        with pytest.raises(ValidationError):
            WithdrawnValidator().validate(valid_withdrawn)

    def test_string_amount_rejected(self, valid_withdrawn):
        valid_withdrawn["amount"] = "1000"
        with pytest.raises(ValidationError):
            validate_event_payload("withdrawn", valid_withdrawn)

    def test_uint256_amounts_accepted(self, valid_withdrawn):
        valid_withdrawn["amount"] = 2**256 - 1
        valid_withdrawn["net"] = 2**256 - 1
        valid_withdrawn["fee"] = 0
        WithdrawnValidator().validate(valid_withdrawn)


# =============================================================================
# PYDANTIC EVENT MODELS ↔ CONTRACTS
# =============================================================================


class TestEventModelsMatchContracts:
    def test_currency_added(self):
        event = CurrencyAdded(
            seq=0,
            ts_utc_ms=1,
            currency_id=0,
            token_id="0xUSDz",
            iso_code="USD",
            fee_bps=10,
            fee_tier=FeeTier.TIER1,
            admin="0xAdmin",
        )
        assert event.payload()["fee_tier"] == "Tier1"
        validate_event(event)

    def test_rate_changed_first_write(self):
        event = RateChanged(seq=0, ts_utc_ms=1, from_code="USD", to_code="EGP", rate=4859, admin="0xAdmin")
        assert event.previous_rate is None
        RateChangedValidator().validate(event.payload())

    def test_staked(self):
        event = Staked(
            seq=1, ts_utc_ms=1, owner="0xAlice", iso_code="USD",
            amount=1000, principal_after=1000, custody_after=1000,
        )
        assert event.schema_name == "staked"
        StakedValidator().validate(event.payload())

    def test_withdrawn(self):
        event = Withdrawn(
            seq=2, ts_utc_ms=2, owner="0xAlice", iso_code="USD",
            amount=1000, fee=1, net=999, principal_after=0, custody_after=1,
        )
        validate_event(event)

    def test_fees_collected(self):
        event = FeesCollected(
            seq=3, ts_utc_ms=3, iso_code="USD", amount=1,
            recipient="0xTreasury", admin="0xAdmin", custody_after=0,
        )
        FeesCollectedValidator().validate(event.payload())
