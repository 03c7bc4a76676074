"""Per-candidate Eb/N0 evaluation of C/N0 samples.

Eb/N0_i [dB] = C/N0 [dB-Hz] - 10 log10(Rb_i) for every candidate i. A missing
or non-finite sample yields NaN for every candidate; the engine reads that as
"no measurement" rather than deriving a decision from it.
"""

import math
from typing import Optional, Sequence

import numpy as np

from .link_budget import ebno_db_from_cno
from .modcod import CandidateGrid


def is_valid_sample(cno_dbhz: Optional[float]) -> bool:
    if cno_dbhz is None:
        return False
    try:
        return math.isfinite(float(cno_dbhz))
    except (TypeError, ValueError):
        return False


def evaluate_ebno_db(cno_dbhz: Optional[float], grid: CandidateGrid) -> np.ndarray:
    """Eb/N0 (dB) of one C/N0 sample for every candidate, in grid order."""
    if not is_valid_sample(cno_dbhz):
        return np.full(len(grid), np.nan)
    return ebno_db_from_cno(float(cno_dbhz), grid.info_rates_bps)


def ebno_matrix_db(cno_series: Sequence[float], grid: CandidateGrid) -> np.ndarray:
    """T x N matrix of Eb/N0 for a whole pass; rows for invalid samples are NaN."""
    cno = np.asarray(cno_series, dtype=float).reshape(-1, 1)
    cno = np.where(np.isfinite(cno), cno, np.nan)
    return cno - 10.0 * np.log10(grid.info_rates_bps)[np.newaxis, :]


def ebno_series_db(cno_series: Sequence[float], bit_rate_bps: float) -> np.ndarray:
    """Eb/N0 trace of a pass at a fixed bit rate."""
    if bit_rate_bps <= 0:
        raise ValueError("Bit rate must be positive")
    cno = np.asarray(cno_series, dtype=float)
    return np.where(np.isfinite(cno), ebno_db_from_cno(cno, bit_rate_bps), np.nan)
