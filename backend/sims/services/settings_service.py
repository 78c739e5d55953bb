"""
Settings Service

The settings table is a key -> text store. This module owns the conversion
between the stored strings and the numbers the rest of the system uses:
numeric keys come out as floats and go back in as strings, and a literal 0
survives the round trip as 0.
"""
import math
from typing import Any, Dict, Mapping, Union

from sqlalchemy.orm import Session

from sims.exceptions import InvalidInputError
from sims.logging_config import get_logger
from sims.models.setting import Setting
from sims.services.pricing_service import PricingSettings

logger = get_logger(__name__)

SettingValue = Union[float, str]

DEFAULT_NUMERIC_SETTINGS: Dict[str, float] = {
    "spool_weight": 1000,
    "filament_markup": 20,
    "hourly_rate": 20,
    "wear_tear_markup": 5,
    "platform_fees": 7,
    "filament_spool_price": 18,
    "desired_profit_margin": 55,
    "packaging_cost": 0.5,
}

DEFAULT_TEXT_SETTINGS: Dict[str, str] = {
    "company_name_1": "Super Fantastic",
    "company_name_2": "Cedar & Sail",
}


def format_number(value: float) -> str:
    """Render a number for storage: 20.0 -> '20', 0 -> '0', 0.5 -> '0.5'."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def parse_numeric_setting(key: str, value: Any) -> float:
    """
    Validate one incoming numeric setting.

    Accepts numbers and numeric strings ("0", "18.5").

    Raises:
        InvalidInputError: not a finite, non-negative number
    """
    if isinstance(value, bool) or value is None:
        raise InvalidInputError(f"Setting {key} must be a number", field=key)
    if isinstance(value, str):
        value = value.strip()
        if not value:
            raise InvalidInputError(f"Setting {key} must not be empty", field=key)
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidInputError(f"Setting {key} must be a number, got {value!r}", field=key)
    if math.isnan(number) or math.isinf(number):
        raise InvalidInputError(f"Setting {key} must be a finite number", field=key)
    if number < 0:
        raise InvalidInputError(f"Setting {key} must not be negative", field=key)
    return number


def _decode(key: str, stored: str) -> SettingValue:
    if key in DEFAULT_TEXT_SETTINGS:
        return stored
    try:
        return float(stored)
    except (TypeError, ValueError):
        fallback = float(DEFAULT_NUMERIC_SETTINGS.get(key, 0))
        logger.warning(
            f"Stored setting {key} is not numeric, using {fallback}",
            extra={"setting_key": key, "stored_value": stored},
        )
        return fallback


def ensure_default_settings(db: Session) -> int:
    """
    Insert any known setting that is missing. Existing values are untouched.

    Returns:
        Number of settings created
    """
    existing = {key for (key,) in db.query(Setting.key).all()}

    created = 0
    for key, value in DEFAULT_NUMERIC_SETTINGS.items():
        if key not in existing:
            db.add(Setting(key=key, value=format_number(value)))
            created += 1
    for key, value in DEFAULT_TEXT_SETTINGS.items():
        if key not in existing:
            db.add(Setting(key=key, value=value))
            created += 1

    if created:
        db.commit()
        logger.info(f"Seeded {created} default settings")
    return created


def get_settings_map(db: Session) -> Dict[str, SettingValue]:
    """All settings, numeric keys as floats and text keys as strings."""
    return {row.key: _decode(row.key, row.value) for row in db.query(Setting).order_by(Setting.key).all()}


def get_pricing_snapshot(db: Session) -> PricingSettings:
    """Current pricing parameters as an immutable snapshot."""
    return PricingSettings.from_mapping(get_settings_map(db))


def update_settings(db: Session, values: Mapping[str, Any]) -> Dict[str, SettingValue]:
    """
    Validate and store several settings in one transaction.

    Raises:
        InvalidInputError: unknown key or invalid value; nothing is written
    """
    encoded: Dict[str, str] = {}
    for key, value in values.items():
        if key in DEFAULT_NUMERIC_SETTINGS:
            encoded[key] = format_number(parse_numeric_setting(key, value))
        elif key in DEFAULT_TEXT_SETTINGS:
            if value is None:
                raise InvalidInputError(f"Setting {key} must be text", field=key)
            encoded[key] = str(value).strip()
        else:
            raise InvalidInputError(f"Unknown setting: {key}", field=key)

    try:
        rows = {row.key: row for row in db.query(Setting).filter(Setting.key.in_(list(encoded))).all()}
        for key, text in encoded.items():
            row = rows.get(key)
            if row is None:
                db.add(Setting(key=key, value=text))
            else:
                row.value = text
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("Settings updated", extra={"setting_keys": sorted(encoded)})
    return get_settings_map(db)
