"""Link-adaptation state machine (MODCOD selection with hysteresis).

One call to LinkAdaptationEngine.step consumes a single C/N0 sample and the
caller-owned DecisionState for the pass, updates that state and returns the
Decision for the sample. Rules are evaluated in strict priority order:

1) Invalid sample (NaN, inf, None): force the fallback candidate, restart the
   dwell timer, forced=True.
2) Uninitialized: pick the best candidate meeting its required Eb/N0; if none
   does, the fallback with forced=True.
3) Margin deficit beyond the downgrade hysteresis: re-run the base feasibility
   search and switch at once (no dwell on the way down). No feasible candidate
   means fallback with forced=True.
4) Dwell elapsed and no deficit: upgrade to the best strictly-faster candidate
   meeting required Eb/N0 + upgrade hysteresis, if any.
5) Otherwise hold.

The decision margin is always measured against the resulting candidate and may
be negative; it is NaN for an invalid sample.

Notes:
- The state is never shared between passes. The engine itself holds only
  immutable configuration and can be reused across passes and threads.
- The deficit path searches the base feasibility set rather than a stricter
  "safe" set, so a re-selection after a fade lands on the fastest feasible mode.
"""

import logging
import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

import numpy as np

from .acm_params import ACMParameters, validate_params
from .ebno import evaluate_ebno_db, is_valid_sample
from .errors import ConfigurationError
from .modcod import Candidate, CandidateGrid, build_candidate_grid

logger = logging.getLogger(__name__)


class Transition(str, Enum):
    INIT = "init"
    HOLD = "hold"
    UPGRADE = "upgrade"
    DOWNGRADE = "downgrade"
    FALLBACK = "fallback"


@dataclass
class DecisionState:
    """Mutable per-pass state: active candidate index and last switch time."""
    active_index: Optional[int] = None
    last_transition_s: Optional[float] = None

    @property
    def is_active(self) -> bool:
        return self.active_index is not None

    def copy(self) -> "DecisionState":
        return replace(self)


@dataclass(frozen=True)
class Decision:
    time_s: float
    cno_dbhz: float
    candidate: Candidate
    margin_db: float  # Eb/N0 - required Eb/N0 of the active candidate (dB)
    forced: bool
    transition: Transition

    @property
    def modulation_order(self) -> int:
        return self.candidate.modulation_order

    @property
    def code_rate(self) -> float:
        return self.candidate.code_rate

    @property
    def info_bit_rate_bps(self) -> float:
        return self.candidate.info_bit_rate_bps


class LinkAdaptationEngine:
    def __init__(
        self,
        grid: CandidateGrid,
        upgrade_hysteresis_db: float = 0.5,
        downgrade_hysteresis_db: float = 0.2,
        min_dwell_s: float = 3.0,
    ):
        for name, value in (
            ("upgrade_hysteresis_db", upgrade_hysteresis_db),
            ("downgrade_hysteresis_db", downgrade_hysteresis_db),
            ("min_dwell_s", min_dwell_s),
        ):
            if not math.isfinite(value) or value < 0:
                raise ConfigurationError(f"{name} must be a finite value >= 0, got {value!r}")
        if len(grid) == 0:
            raise ConfigurationError("candidate grid is empty")
        self.grid = grid
        self.upgrade_hysteresis_db = float(upgrade_hysteresis_db)
        self.downgrade_hysteresis_db = float(downgrade_hysteresis_db)
        self.min_dwell_s = float(min_dwell_s)

    @classmethod
    def from_params(cls, params: ACMParameters | None = None) -> "LinkAdaptationEngine":
        if params is None:
            params = ACMParameters()
        validate_params(params)
        return cls(
            build_candidate_grid(params),
            upgrade_hysteresis_db=params.upgrade_hysteresis_db,
            downgrade_hysteresis_db=params.downgrade_hysteresis_db,
            min_dwell_s=params.min_dwell_s,
        )

    def new_state(self) -> DecisionState:
        return DecisionState()

    def _best_feasible(self, meets: np.ndarray) -> tuple[int, bool]:
        idx = self.grid.best_index(meets)
        if idx is None:
            return self.grid.fallback_index, True
        return idx, False

    def _switch(self, state: DecisionState, idx: int, time_s: float) -> Transition:
        cur = state.active_index
        rates = self.grid.info_rates_bps
        kind = Transition.UPGRADE if rates[idx] > rates[cur] else Transition.DOWNGRADE
        logger.debug(
            "t=%.1f s %s %s -> %s",
            time_s, kind.value, self.grid[cur].label, self.grid[idx].label,
        )
        state.active_index = idx
        state.last_transition_s = time_s
        return kind

    def step(self, state: DecisionState, time_s: float, cno_dbhz: Optional[float]) -> Decision:
        """Advance the state by one sample and return its decision. Never raises."""
        grid = self.grid
        req = grid.required_ebno_db
        ebno = evaluate_ebno_db(cno_dbhz, grid)
        forced = False

        if not is_valid_sample(cno_dbhz):
            state.active_index = grid.fallback_index
            state.last_transition_s = time_s
            logger.debug("t=%.1f s invalid C/N0 sample, forcing %s", time_s, grid.fallback.label)
            return Decision(
                time_s=time_s,
                cno_dbhz=math.nan,
                candidate=grid.fallback,
                margin_db=math.nan,
                forced=True,
                transition=Transition.FALLBACK,
            )

        meets = ebno >= req
        if not state.is_active:
            idx, forced = self._best_feasible(meets)
            state.active_index = idx
            state.last_transition_s = time_s
            transition = Transition.INIT
        else:
            cur = state.active_index
            margin_cur = ebno[cur] - req[cur]
            last = state.last_transition_s if state.last_transition_s is not None else -math.inf
            transition = Transition.HOLD
            if margin_cur < -self.downgrade_hysteresis_db:
                idx, forced = self._best_feasible(meets)
                if idx != cur:
                    transition = self._switch(state, idx, time_s)
            elif time_s - last >= self.min_dwell_s:
                rates = grid.info_rates_bps
                higher = (rates > rates[cur]) & (ebno >= req + self.upgrade_hysteresis_db)
                idx = grid.best_index(higher)
                if idx is not None and idx != cur:
                    transition = self._switch(state, idx, time_s)

        if forced:
            logger.debug("t=%.1f s no feasible MODCOD, holding fallback %s", time_s, grid.fallback.label)
        active = state.active_index
        return Decision(
            time_s=time_s,
            cno_dbhz=float(cno_dbhz),
            candidate=grid[active],
            margin_db=float(ebno[active] - req[active]),
            forced=forced,
            transition=transition,
        )
