"""Loaders for C/N0 pass traces.

This module reads the per-pass C/N0 sequences produced by the upstream
propagation/noise pipeline:
- long-format CSV with columns pass_id, time_s, cno_dbhz (empty cell -> NaN)
- JSON {"passes": {"<id>": [cno, ...]}} with null for missing samples, or
  {"<id>": {"time_s": [...], "cno_dbhz": [...]}} when the times are known

Gaps must be explicit NaN markers. A CSV whose time column skips or repeats
samples, or lists a pass out of time order, is rejected, since decisions would
no longer line up with time.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Optional

import numpy as np
import pandas as pd

from .pass_driver import CnoPass

logger = logging.getLogger(__name__)

_REQUIRED_COLUMNS = ("pass_id", "time_s", "cno_dbhz")


def _check_cadence(pass_id: str, times: np.ndarray, rtol: float = 1e-6) -> Optional[float]:
    if times.size < 2:
        return None
    steps = np.diff(times)
    if np.any(steps <= 0):
        raise ValueError(f"pass {pass_id}: time_s must be strictly increasing in file order")
    cadence = float(steps[0])
    if not np.allclose(steps, cadence, rtol=rtol, atol=1e-9):
        raise ValueError(f"pass {pass_id}: non-uniform sample cadence (gaps must be NaN rows)")
    return cadence


def _as_samples(values) -> np.ndarray:
    return np.array([np.nan if v is None else float(v) for v in values], dtype=float)


def load_cno_passes_csv(path: str | Path) -> Dict[str, CnoPass]:
    df = pd.read_csv(path, dtype={"pass_id": str})
    missing = [c for c in _REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"{Path(path).name}: missing columns {missing}")
    df["cno_dbhz"] = pd.to_numeric(df["cno_dbhz"], errors="coerce")
    passes: Dict[str, CnoPass] = {}
    for pid, grp in df.groupby("pass_id", sort=False):
        times = grp["time_s"].to_numpy(dtype=float)
        cadence = _check_cadence(str(pid), times)
        passes[str(pid)] = CnoPass(cno_dbhz=grp["cno_dbhz"].to_numpy(dtype=float), times_s=times, cadence_s=cadence)
    return passes


def load_cno_passes_json(path: str | Path) -> Dict[str, CnoPass]:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    raw = data.get("passes") if isinstance(data, dict) else data
    if isinstance(raw, list):
        raw = {str(i + 1): v for i, v in enumerate(raw)}
    if not isinstance(raw, dict):
        raise ValueError(f"{Path(path).name}: expected a 'passes' mapping or list")
    passes: Dict[str, CnoPass] = {}
    for pid, values in raw.items():
        if isinstance(values, dict):
            # {"time_s": [...], "cno_dbhz": [...]}
            cno = _as_samples(values.get("cno_dbhz", []))
            if values.get("time_s") is None:
                passes[str(pid)] = CnoPass(cno_dbhz=cno)
                continue
            times = np.asarray(values["time_s"], dtype=float)
            if times.size != cno.size:
                raise ValueError(f"pass {pid}: {times.size} times for {cno.size} samples")
            passes[str(pid)] = CnoPass(cno_dbhz=cno, times_s=times, cadence_s=_check_cadence(str(pid), times))
        else:
            passes[str(pid)] = CnoPass(cno_dbhz=_as_samples(values))
    return passes


def load_cno_passes(path: str | Path) -> Dict[str, CnoPass]:
    """Load C/N0 passes from CSV or JSON, keyed by pass id.

    Each pass keeps the times it was sampled at when the file has them, so the
    dwell timer and data volume follow the file's real cadence.
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"C/N0 file not found at: {p.resolve()}")
    if p.suffix.lower() == ".json":
        passes = load_cno_passes_json(p)
    else:
        passes = load_cno_passes_csv(p)
    logger.info("Loaded %d passes from %s", len(passes), p.name)
    return passes
