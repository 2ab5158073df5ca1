"""
ExchangeRate — Направленный курс конверсии

Конвенция курса:
    rate = (единиц to_code за одну единицу from_code) × RATE_SCALE

    rate = 4859 для USD→EGP означает 1 USD = 0.4859 EGP.
    rate = 2 для EGP→USD означает 1 EGP = 0.0002 USD.

Курсы НЕ симметричны: rate(A→B) и rate(B→A) — независимые записи,
rate(A→B) * rate(B→A) == RATE_SCALE² не гарантируется.
"""

from pydantic import BaseModel, Field

from src.core.config import RATE_SCALE


class ExchangeRate(BaseModel):
    """Направленный fixed-point курс (immutable)."""

    from_code: str = Field(..., min_length=1, description="Исходная валюта")
    to_code: str = Field(..., min_length=1, description="Целевая валюта")
    rate: int = Field(..., gt=0, description="Курс × RATE_SCALE")
    updated_ts_utc_ms: int = Field(..., ge=0, description="Время последней записи (UTC, миллисекунды)")

    model_config = {"frozen": True}

    @property
    def pair(self) -> tuple[str, str]:
        return (self.from_code, self.to_code)

    def as_decimal_str(self, rate_scale: int = RATE_SCALE) -> str:
        """
        Курс в десятичной записи для отображения.

        Examples:
            4859 → "0.4859", 2 → "0.0002", 25000 → "2.5000"
        """
        digits = len(str(rate_scale)) - 1
        whole, frac = divmod(self.rate, rate_scale)
        return f"{whole}.{frac:0{digits}d}"
