"""Pass runner for the MODCOD selector.

A pass is an ordered, fixed-cadence sequence of C/N0 samples (dB-Hz) with gaps
marked as NaN. This module feeds a pass through the LinkAdaptationEngine one
sample at a time, threading a DecisionState that belongs to that pass alone:
- PassRun is a lazy, restartable iterable; every iteration starts from a fresh
  copy of the initial state, so re-iterating yields the same decisions.
- run_pass materializes one pass into a PassResult.
- run_passes processes many passes independently (no state crosses passes).
- CnoPass bundles one pass's samples with the times they were taken at.

Stopping iteration part way through is safe; the partially used state is simply
dropped.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Mapping, Optional, Sequence, Union

import numpy as np

from .engine import Decision, DecisionState, LinkAdaptationEngine

logger = logging.getLogger(__name__)


@dataclass
class CnoPass:
	"""C/N0 samples of one pass together with their sample times.

	times_s is None when only the samples are known; the caller's cadence then
	applies. cadence_s is the measured sample step, or None for passes too short
	to have one.
	"""
	cno_dbhz: np.ndarray
	times_s: Optional[np.ndarray] = None
	cadence_s: Optional[float] = None

	def __len__(self) -> int:
		return int(np.asarray(self.cno_dbhz).size)


PassSamples = Union[Sequence[float], CnoPass]


class PassRun:
	"""Lazy decision sequence for one pass.

	Args:
		engine: configured LinkAdaptationEngine
		cno_dbhz: C/N0 samples (NaN for missing measurements)
		times_s: optional explicit sample times; must match cno_dbhz in length
		cadence_s / start_s: used to derive times when times_s is not given
		initial_state: state to start from (copied on each iteration); defaults
			to a fresh uninitialized state
	"""

	def __init__(
		self,
		engine: LinkAdaptationEngine,
		cno_dbhz: Sequence[float],
		times_s: Optional[Sequence[float]] = None,
		cadence_s: float = 1.0,
		start_s: float = 0.0,
		initial_state: Optional[DecisionState] = None,
		pass_id: Optional[str] = None,
	):
		self.engine = engine
		self.cno_dbhz = np.asarray(cno_dbhz, dtype=float).ravel()
		if times_s is None:
			if cadence_s <= 0:
				raise ValueError("cadence_s must be positive")
			self.times_s = start_s + cadence_s * np.arange(self.cno_dbhz.size, dtype=float)
		else:
			self.times_s = np.asarray(times_s, dtype=float).ravel()
			if self.times_s.size != self.cno_dbhz.size:
				raise ValueError(
					f"times_s has {self.times_s.size} entries but {self.cno_dbhz.size} samples were given"
				)
		self.cadence_s = float(cadence_s)
		self.initial_state = initial_state
		self.pass_id = pass_id

	def __len__(self) -> int:
		return int(self.cno_dbhz.size)

	def __iter__(self) -> Iterator[Decision]:
		state = self.initial_state.copy() if self.initial_state is not None else self.engine.new_state()
		for t, cno in zip(self.times_s, self.cno_dbhz):
			yield self.engine.step(state, float(t), float(cno))


@dataclass
class PassResult:
	"""Materialized decisions for one pass."""
	pass_id: str
	decisions: List[Decision]
	cadence_s: float = 1.0

	def __len__(self) -> int:
		return len(self.decisions)

	def modulation_orders(self) -> np.ndarray:
		return np.array([d.modulation_order for d in self.decisions], dtype=int)

	def code_rates(self) -> np.ndarray:
		return np.array([d.code_rate for d in self.decisions], dtype=float)

	def info_bit_rates_bps(self) -> np.ndarray:
		return np.array([d.info_bit_rate_bps for d in self.decisions], dtype=float)

	def margins_db(self) -> np.ndarray:
		return np.array([d.margin_db for d in self.decisions], dtype=float)

	def forced(self) -> np.ndarray:
		return np.array([d.forced for d in self.decisions], dtype=bool)


def run_pass(
	engine: LinkAdaptationEngine,
	cno_dbhz: Sequence[float],
	pass_id: str = "0",
	times_s: Optional[Sequence[float]] = None,
	cadence_s: float = 1.0,
	start_s: float = 0.0,
	initial_state: Optional[DecisionState] = None,
) -> PassResult:
	"""Run the selector over one pass and collect every decision."""
	run = PassRun(
		engine,
		cno_dbhz,
		times_s=times_s,
		cadence_s=cadence_s,
		start_s=start_s,
		initial_state=initial_state,
		pass_id=pass_id,
	)
	logger.info("Pass %s: %d samples", pass_id, len(run))
	decisions = list(run)
	n_forced = sum(1 for d in decisions if d.forced)
	logger.info("Pass %s done: %d forced fallback samples", pass_id, n_forced)
	return PassResult(pass_id=str(pass_id), decisions=decisions, cadence_s=cadence_s)


def run_passes(
	engine: LinkAdaptationEngine,
	passes: Union[Mapping[str, PassSamples], Iterable[PassSamples]],
	cadence_s: float = 1.0,
) -> List[PassResult]:
	"""Run every pass independently.

	passes may be a mapping {pass_id: samples} or a plain sequence of sample
	arrays (ids are then "1", "2", ... in order). A CnoPass carrying its own
	times is run on those times and its measured cadence; cadence_s applies to
	bare sample arrays only.
	"""
	if isinstance(passes, Mapping):
		items = [(str(k), v) for k, v in passes.items()]
	else:
		items = [(str(i + 1), v) for i, v in enumerate(passes)]
	results = []
	for pid, samples in items:
		if isinstance(samples, CnoPass):
			step = samples.cadence_s if samples.cadence_s is not None else cadence_s
			results.append(run_pass(engine, samples.cno_dbhz, pass_id=pid, times_s=samples.times_s, cadence_s=step))
		else:
			results.append(run_pass(engine, samples, pass_id=pid, cadence_s=cadence_s))
	return results
