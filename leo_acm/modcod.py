"""MODCOD candidate grid.

Builds the static set of (modulation order, code rate) operating points and
their theoretical performance:
- information bit rate Rb = Rs * log2(M) * Rc with Rs = B / (1 + alpha)
- required Eb/N0 at the Shannon bound for eta = log2(M) * Rc / (1 + alpha),
  plus a fixed implementation gap

Candidates are kept in ascending (bit rate, modulation order) order. Among
equal-throughput candidates the lower order is preferred, since a sparser
constellation is more robust at the same rate. The fallback candidate is the
first one in that order (lowest throughput, lowest order).
"""

import logging
from dataclasses import dataclass, field
from fractions import Fraction
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from .acm_params import ACMParameters, validate_params
from .link_budget import (
    symbol_rate_hz,
    info_bit_rate_bps,
    spectral_efficiency_bps_hz,
    shannon_required_ebno_db,
)

logger = logging.getLogger(__name__)


def modulation_name(modulation_order: int) -> str:
    if modulation_order == 4:
        return "QPSK"
    return f"{modulation_order}-QAM"


def code_rate_label(code_rate: float) -> str:
    frac = Fraction(code_rate).limit_denominator(100)
    if frac == 1:
        return "1/1"
    return f"{frac.numerator}/{frac.denominator}"


@dataclass(frozen=True)
class Candidate:
    modulation_order: int
    code_rate: float
    info_bit_rate_bps: float
    spectral_eff_bps_hz: float
    required_ebno_db: float  # Shannon bound + implementation gap (dB)

    @property
    def bits_per_symbol(self) -> int:
        return self.modulation_order.bit_length() - 1

    @property
    def label(self) -> str:
        return f"{modulation_name(self.modulation_order)} {code_rate_label(self.code_rate)}"

    def sort_key(self) -> Tuple[float, int]:
        return (self.info_bit_rate_bps, self.modulation_order)


@dataclass(frozen=True)
class CandidateGrid:
    """Ordered, immutable MODCOD grid for one run."""
    candidates: Tuple[Candidate, ...]
    bandwidth_hz: float
    roll_off: float
    info_rates_bps: np.ndarray = field(init=False, repr=False, compare=False)
    required_ebno_db: np.ndarray = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        ordered = tuple(sorted(self.candidates, key=Candidate.sort_key))
        object.__setattr__(self, "candidates", ordered)
        rates = np.array([c.info_bit_rate_bps for c in ordered], dtype=float)
        req = np.array([c.required_ebno_db for c in ordered], dtype=float)
        rates.setflags(write=False)
        req.setflags(write=False)
        object.__setattr__(self, "info_rates_bps", rates)
        object.__setattr__(self, "required_ebno_db", req)

    def __len__(self) -> int:
        return len(self.candidates)

    def __iter__(self):
        return iter(self.candidates)

    def __getitem__(self, index: int) -> Candidate:
        return self.candidates[index]

    @property
    def symbol_rate_hz(self) -> float:
        return symbol_rate_hz(self.bandwidth_hz, self.roll_off)

    @property
    def fallback_index(self) -> int:
        return 0

    @property
    def fallback(self) -> Candidate:
        return self.candidates[0]

    def index_of(self, modulation_order: int, code_rate: float) -> int:
        for i, c in enumerate(self.candidates):
            if c.modulation_order == modulation_order and abs(c.code_rate - code_rate) < 1e-12:
                return i
        raise KeyError(f"No candidate M={modulation_order}, Rc={code_rate}")

    def best_index(self, mask: Sequence[bool]) -> Optional[int]:
        """Index of the highest-rate candidate where mask is True, lower M on ties.

        Returns None when the mask selects nothing.
        """
        best: Optional[int] = None
        for i, ok in enumerate(mask):
            if not ok:
                continue
            if best is None:
                best = i
                continue
            c, b = self.candidates[i], self.candidates[best]
            if c.info_bit_rate_bps > b.info_bit_rate_bps or (
                c.info_bit_rate_bps == b.info_bit_rate_bps and c.modulation_order < b.modulation_order
            ):
                best = i
        return best


def _unique(values: Iterable, what: str) -> List:
    out: List = []
    for v in values:
        if v in out:
            logger.warning("Duplicate %s %r ignored", what, v)
            continue
        out.append(v)
    return out


def make_candidate(
    modulation_order: int,
    code_rate: float,
    bandwidth_hz: float,
    roll_off: float,
    implementation_gap_db: float = 0.0,
) -> Candidate:
    rs = symbol_rate_hz(bandwidth_hz, roll_off)
    eta = spectral_efficiency_bps_hz(modulation_order, code_rate, roll_off)
    return Candidate(
        modulation_order=modulation_order,
        code_rate=code_rate,
        info_bit_rate_bps=info_bit_rate_bps(rs, modulation_order, code_rate),
        spectral_eff_bps_hz=eta,
        required_ebno_db=shannon_required_ebno_db(eta, implementation_gap_db),
    )


def build_candidate_grid(params: ACMParameters | None = None) -> CandidateGrid:
    """Build the MODCOD grid (orders x code rates) from validated parameters.

    Raises:
        ConfigurationError: if any parameter is invalid; no partial grid is returned.
    """
    if params is None:
        params = ACMParameters()
    validate_params(params)
    orders = _unique(params.modulation_orders, "modulation order")
    rates = _unique(params.code_rates, "code rate")
    cands = [
        make_candidate(m, rc, params.bandwidth_hz, params.roll_off, params.implementation_gap_db)
        for m in orders
        for rc in rates
    ]
    grid = CandidateGrid(candidates=tuple(cands), bandwidth_hz=params.bandwidth_hz, roll_off=params.roll_off)
    logger.debug(
        "Built %d-candidate grid, Rs=%.3f Msym/s, fallback %s",
        len(grid), grid.symbol_rate_hz / 1e6, grid.fallback.label,
    )
    return grid
