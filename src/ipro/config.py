from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
import json
import os
import sys

from ipro.domain.errors import InvalidRangeError, NegativeQuantityError, ValidationError
from ipro.domain.money import to_amount
from ipro.domain.validation import as_int


@dataclass(frozen=True)
class AppPaths:
    base_dir: Path
    logs_dir: Path
    reports_dir: Path
    settings_path: Path


@dataclass(frozen=True)
class PricingConfig:
    tax_rate: Decimal = Decimal("0.18")
    shipping_fee: Decimal = Decimal("25000")
    minor_digits: int = 0

    def __post_init__(self) -> None:
        # accepts floats/strings from JSON and env; stored as exact Decimals
        rate = to_amount(self.tax_rate)
        fee = to_amount(self.shipping_fee)
        digits = as_int(self.minor_digits, "Minor digits")
        if rate < 0 or rate > 1:
            raise InvalidRangeError(f"Tax rate must be within [0, 1]. Received: {rate}")
        if fee < 0:
            raise NegativeQuantityError(f"Shipping fee must be >= 0. Received: {fee}")
        if digits < 0:
            raise ValidationError(f"Minor digits must be >= 0. Received: {digits}")
        object.__setattr__(self, "tax_rate", rate)
        object.__setattr__(self, "shipping_fee", fee)
        object.__setattr__(self, "minor_digits", digits)


@dataclass(frozen=True)
class Settings:
    pricing: PricingConfig = field(default_factory=PricingConfig)
    currency: str = "RWF"
    log_level: str = "INFO"


def _windows_appdata() -> Path:
    return Path(os.environ.get("APPDATA", str(Path.home() / "AppData" / "Roaming")))


def _mac_app_support() -> Path:
    return Path.home() / "Library" / "Application Support"


def get_app_paths(app_name: str = "InventoryPro") -> AppPaths:
    if sys.platform.startswith("win"):
        base = _windows_appdata() / app_name
    elif sys.platform == "darwin":
        base = _mac_app_support() / app_name
    else:
        base = Path.home() / f".{app_name.lower()}"

    logs = base / "logs"
    reports = base / "reports"

    base.mkdir(parents=True, exist_ok=True)
    logs.mkdir(parents=True, exist_ok=True)
    reports.mkdir(parents=True, exist_ok=True)

    return AppPaths(base_dir=base, logs_dir=logs, reports_dir=reports, settings_path=base / "settings.json")


def make_pricing_config(tax_rate: object = "0.18", shipping_fee: object = 25000, minor_digits: object = 0) -> PricingConfig:
    return PricingConfig(tax_rate=tax_rate, shipping_fee=shipping_fee, minor_digits=minor_digits)


def load_settings(path: Path | str | None = None, env: dict | None = None) -> Settings:
    """
    Resolution order (later wins):
      defaults -> JSON settings file -> IPRO_* environment variables
    """
    env = os.environ if env is None else env
    raw: dict = {}
    if path is not None and Path(path).exists():
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
        if not isinstance(raw, dict):
            raise ValidationError(f"Settings file must hold a JSON object: {path}")

    pricing_raw = dict(raw.get("pricing") or {})
    if env.get("IPRO_TAX_RATE"):
        pricing_raw["tax_rate"] = env["IPRO_TAX_RATE"]
    if env.get("IPRO_SHIPPING_FEE"):
        pricing_raw["shipping_fee"] = env["IPRO_SHIPPING_FEE"]

    currency = env.get("IPRO_CURRENCY") or raw.get("currency") or "RWF"
    minor_digits = pricing_raw.get("minor_digits", 0)

    pricing = make_pricing_config(
        tax_rate=pricing_raw.get("tax_rate", "0.18"),
        shipping_fee=pricing_raw.get("shipping_fee", 25000),
        minor_digits=minor_digits,
    )
    log_level = env.get("IPRO_LOG_LEVEL") or raw.get("log_level") or "INFO"
    return Settings(
        pricing=pricing,
        currency=str(currency).strip().upper(),
        log_level=str(log_level).strip().upper(),
    )
