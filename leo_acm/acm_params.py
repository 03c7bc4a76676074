"""ACM configuration parameters, validation and loading.

This module provides:
- A frozen data class holding the full configuration surface of the selector
  (channel, MODCOD lists, implementation gap, hysteresis and dwell).
- Validation that raises ConfigurationError before any grid is built.
- A tolerant regex-based parser for free-form parameter text, plus loaders for
  YAML/JSON mappings.

Defaults follow the Q-band LEO reference study:
- 250 MHz occupied bandwidth with a 0.9 roll-off (Rs = B / (1 + alpha)).
- Square-QAM orders 4/16/64/256 and code rates 1/2, 3/4, 9/10.
- 1.2 dB implementation gap to the Shannon bound.
- 0.5 dB extra margin to step up, 0.2 dB shortfall to step down, 3 s dwell.
"""
import json
import logging
import math
import re
from dataclasses import dataclass, fields, replace
from fractions import Fraction
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

import yaml

from .errors import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ACMParameters:
    bandwidth_hz: float = 250e6
    roll_off: float = 0.9
    modulation_orders: Tuple[int, ...] = (4, 16, 64, 256)
    code_rates: Tuple[float, ...] = (0.5, 0.75, 0.9)
    implementation_gap_db: float = 1.2
    upgrade_hysteresis_db: float = 0.5
    downgrade_hysteresis_db: float = 0.2
    min_dwell_s: float = 3.0


# camelCase keys as used by upstream pipelines
_ALIASES = {
    "bandwidthHz": "bandwidth_hz",
    "rollOff": "roll_off",
    "modulationOrders": "modulation_orders",
    "codeRates": "code_rates",
    "implementationGapDb": "implementation_gap_db",
    "upgradeHysteresisDb": "upgrade_hysteresis_db",
    "downgradeHysteresisDb": "downgrade_hysteresis_db",
    "minDwellSeconds": "min_dwell_s",
    "min_dwell_seconds": "min_dwell_s",
}


def is_square_qam_order(m: int) -> bool:
    """True for 4, 16, 64, 256, ... (even power of two, at least 4)."""
    if isinstance(m, bool) or not isinstance(m, int) or m < 4:
        return False
    k = m.bit_length() - 1
    return m == (1 << k) and k % 2 == 0


def _check_non_negative(name: str, value: float) -> None:
    if not math.isfinite(value) or value < 0:
        raise ConfigurationError(f"{name} must be a finite value >= 0, got {value!r}")


def validate_params(params: ACMParameters) -> None:
    """Raise ConfigurationError if any parameter is outside its valid range."""
    if not math.isfinite(params.bandwidth_hz) or params.bandwidth_hz <= 0:
        raise ConfigurationError(f"bandwidth_hz must be positive, got {params.bandwidth_hz!r}")
    if not (0.0 < params.roll_off < 1.0):
        raise ConfigurationError(f"roll_off must lie in (0, 1), got {params.roll_off!r}")
    if not params.modulation_orders:
        raise ConfigurationError("modulation_orders must not be empty")
    if not params.code_rates:
        raise ConfigurationError("code_rates must not be empty")
    for m in params.modulation_orders:
        if not is_square_qam_order(m):
            raise ConfigurationError(f"modulation order {m!r} is not a square-QAM order")
    for rc in params.code_rates:
        if not (0.0 < rc <= 1.0):
            raise ConfigurationError(f"code rate {rc!r} outside (0, 1]")
    _check_non_negative("implementation_gap_db", params.implementation_gap_db)
    _check_non_negative("upgrade_hysteresis_db", params.upgrade_hysteresis_db)
    _check_non_negative("downgrade_hysteresis_db", params.downgrade_hysteresis_db)
    _check_non_negative("min_dwell_s", params.min_dwell_s)


def _parse_rate(token: str) -> float:
    token = token.strip()
    try:
        if "/" in token:
            return float(Fraction(token))
        return float(token)
    except (ValueError, ZeroDivisionError) as e:
        raise ConfigurationError(f"code rate {token!r} is not a number or fraction") from e


def _parse_order(value: Any) -> int:
    try:
        return int(value) if isinstance(value, int) else int(str(value).strip())
    except ValueError as e:
        raise ConfigurationError(f"modulation order {value!r} is not an integer") from e


def _parse_list(value: str) -> list[str]:
    return [t for t in re.split(r"[,\s;]+", value.strip()) if t]


def _parse_number_with_unit(value: str) -> Optional[float]:
    # a bare number is taken as Hz
    m = re.search(r"([0-9]+(?:\.[0-9]+)?(?:e[+-]?[0-9]+)?)\s*(Hz|kHz|MHz|GHz)?", value, re.IGNORECASE)
    if not m:
        return None
    num = float(m.group(1))
    unit = (m.group(2) or "hz").lower()
    scale = {"hz": 1.0, "khz": 1e3, "mhz": 1e6, "ghz": 1e9}[unit]
    return num * scale


def parse_params_text(text: str, defaults: Optional[ACMParameters] = None) -> ACMParameters:
    """Parse free-form parameter text; fields that are not found keep their defaults.

    Recognized lines (case-insensitive, ':' or '='):
        Bandwidth: 250 MHz
        Roll-off: 0.9
        Modulation orders: 4, 16, 64, 256
        Code rates: 1/2, 3/4, 9/10
        Implementation gap: 1.2 dB
        Upgrade hysteresis: 0.5 dB
        Downgrade hysteresis: 0.2 dB
        Minimum dwell: 3 s

    The result is not validated; call validate_params or build a grid from it.
    """
    if defaults is None:
        defaults = ACMParameters()
    updates: Dict[str, Any] = {}

    m = re.search(r"(occupied\s+)?bandwidth\s*[:=]\s*([^\n]+)", text, re.IGNORECASE)
    if m:
        parsed = _parse_number_with_unit(m.group(2))
        if parsed is None:
            raise ConfigurationError(f"bandwidth {m.group(2).strip()!r} has no numeric value")
        updates["bandwidth_hz"] = parsed

    m = re.search(r"roll[\s-]*off(\s*factor)?\s*[:=]\s*([0-9]*\.?[0-9]+)", text, re.IGNORECASE)
    if m:
        updates["roll_off"] = float(m.group(2))

    m = re.search(r"modulation\s+orders?\s*[:=]\s*([^\n]+)", text, re.IGNORECASE)
    if m:
        updates["modulation_orders"] = tuple(_parse_order(t) for t in _parse_list(m.group(1)))

    m = re.search(r"code\s+rates?\s*[:=]\s*([^\n]+)", text, re.IGNORECASE)
    if m:
        updates["code_rates"] = tuple(_parse_rate(t) for t in _parse_list(m.group(1)))

    m = re.search(r"implementation\s+(gap|loss)\s*[:=]\s*([0-9]*\.?[0-9]+)\s*dB", text, re.IGNORECASE)
    if m:
        updates["implementation_gap_db"] = float(m.group(2))

    m = re.search(r"up(grade)?\s+hysteresis\s*[:=]\s*([0-9]*\.?[0-9]+)\s*dB", text, re.IGNORECASE)
    if m:
        updates["upgrade_hysteresis_db"] = float(m.group(2))

    m = re.search(r"down(grade)?\s+hysteresis\s*[:=]\s*([0-9]*\.?[0-9]+)\s*dB", text, re.IGNORECASE)
    if m:
        updates["downgrade_hysteresis_db"] = float(m.group(2))

    m = re.search(r"(min(imum)?\s+)?dwell(\s+time)?\s*[:=]\s*([0-9]*\.?[0-9]+)\s*s", text, re.IGNORECASE)
    if m:
        updates["min_dwell_s"] = float(m.group(4))

    return replace(defaults, **updates)


def params_from_mapping(data: Mapping[str, Any], defaults: Optional[ACMParameters] = None) -> ACMParameters:
    """Build parameters from a dict (snake_case or camelCase keys).

    Unknown keys are ignored with a warning. Code rates may be given as
    fraction strings ("3/4").
    """
    if defaults is None:
        defaults = ACMParameters()
    known = {f.name for f in fields(ACMParameters)}
    updates: Dict[str, Any] = {}
    for key, value in data.items():
        name = _ALIASES.get(key, key)
        if name not in known:
            logger.warning("Ignoring unknown ACM parameter %r", key)
            continue
        if name == "modulation_orders":
            value = tuple(_parse_order(v) for v in _as_iterable(value))
        elif name == "code_rates":
            value = tuple(_parse_rate(str(v)) for v in _as_iterable(value))
        else:
            try:
                value = float(value)
            except (TypeError, ValueError) as e:
                raise ConfigurationError(f"{key} must be a number, got {value!r}") from e
        updates[name] = value
    return replace(defaults, **updates)


def _as_iterable(value: Any) -> Iterable[Any]:
    if isinstance(value, str):
        return _parse_list(value)
    if isinstance(value, (int, float)):
        return [value]
    if isinstance(value, (list, tuple)):
        return value
    raise ConfigurationError(f"expected a list of values, got {value!r}")


def load_params_from_file(path: str | Path, defaults: Optional[ACMParameters] = None) -> ACMParameters:
    """Load parameters from a YAML, JSON or free-form text file.

    Raises:
        FileNotFoundError: if the file does not exist.
        ConfigurationError: if the file cannot be parsed or holds values that are
            not numbers where numbers are expected.
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Parameter file not found at: {p.resolve()}")
    suffix = p.suffix.lower()
    with p.open("r", encoding="utf-8", errors="ignore") as f:
        try:
            if suffix in (".yaml", ".yml"):
                data = yaml.safe_load(f) or {}
            elif suffix == ".json":
                data = json.load(f)
            else:
                return parse_params_text(f.read(), defaults)
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"{p.name}: cannot parse parameters: {e}") from e
    # allow the parameters to sit under an "acm" section
    if isinstance(data, dict) and isinstance(data.get("acm"), dict):
        data = data["acm"]
    if not isinstance(data, dict):
        raise ConfigurationError(f"{p.name}: expected a mapping of ACM parameters")
    return params_from_mapping(data, defaults)
