from typing import Dict, Iterable, List, Sequence, Tuple

import numpy as np

from .engine import Decision, Transition
from .link_budget import snr_db_from_cno, shannon_capacity_bps_hz
from .modcod import code_rate_label


def spectral_efficiency_series(decisions: Sequence[Decision], bandwidth_hz: float) -> np.ndarray:
    """eta(t) = Rb(t) / B in b/s/Hz of occupied bandwidth."""
    rb = np.array([d.info_bit_rate_bps for d in decisions], dtype=float)
    return rb / bandwidth_hz


def shannon_efficiency_series(decisions: Sequence[Decision], bandwidth_hz: float) -> np.ndarray:
    """Fraction of Shannon capacity achieved: eta(t) / log2(1 + SNR(t)).

    NaN where the sample was invalid or the capacity is not positive.
    """
    eta = spectral_efficiency_series(decisions, bandwidth_hz)
    cno = np.array([d.cno_dbhz for d in decisions], dtype=float)
    cap = shannon_capacity_bps_hz(snr_db_from_cno(cno, bandwidth_hz))
    with np.errstate(divide="ignore", invalid="ignore"):
        frac = eta / cap
    frac[~np.isfinite(frac)] = np.nan
    return frac


def empirical_cdf(values: Iterable[float]) -> Tuple[np.ndarray, np.ndarray]:
    """Sorted finite values and their CDF levels (k / n)."""
    v = np.asarray(list(values), dtype=float)
    v = np.sort(v[np.isfinite(v)])
    if v.size == 0:
        return np.zeros(1), np.ones(1)
    return v, np.arange(1, v.size + 1) / v.size


def mode_time_share(decisions: Sequence[Decision]) -> Dict[str, float]:
    """Percentage of samples spent in each MODCOD, ordered by (M, Rc)."""
    counts: Dict[Tuple[int, float], int] = {}
    for d in decisions:
        key = (d.modulation_order, d.code_rate)
        counts[key] = counts.get(key, 0) + 1
    total = len(decisions)
    share: Dict[str, float] = {}
    for m, rc in sorted(counts):
        share[f"M={m}, Rc={code_rate_label(rc)}"] = 100.0 * counts[(m, rc)] / total
    return share


def pass_summary(decisions: Sequence[Decision], cadence_s: float = 1.0) -> dict:
    """Compute simple per-pass statistics from decisions.

    Returns a dict with sample/forced counts, switch counts, rate and margin stats
    and the delivered data volume (sum of Rb * cadence).
    """
    n = len(decisions)
    if n == 0:
        return {
            "samples": 0, "forced": 0, "forced_fraction": 0.0,
            "upgrades": 0, "downgrades": 0, "switches": 0,
            "mean_rate_bps": 0.0, "min_margin_db": float("nan"),
            "mean_margin_db": float("nan"), "data_volume_bits": 0.0,
        }
    rb = np.array([d.info_bit_rate_bps for d in decisions], dtype=float)
    margins = np.array([d.margin_db for d in decisions], dtype=float)
    finite = margins[np.isfinite(margins)]
    n_forced = sum(1 for d in decisions if d.forced)
    ups = sum(1 for d in decisions if d.transition == Transition.UPGRADE)
    downs = sum(1 for d in decisions if d.transition == Transition.DOWNGRADE)
    switches = sum(
        1 for prev, cur in zip(decisions, decisions[1:]) if prev.candidate != cur.candidate
    )
    return {
        "samples": n,
        "forced": n_forced,
        "forced_fraction": n_forced / n,
        "upgrades": ups,
        "downgrades": downs,
        "switches": switches,
        "mean_rate_bps": float(rb.mean()),
        "min_margin_db": float(finite.min()) if finite.size else float("nan"),
        "mean_margin_db": float(finite.mean()) if finite.size else float("nan"),
        "data_volume_bits": float(rb.sum() * cadence_s),
    }


def summaries_to_table(summaries: Dict[str, dict]) -> List[List[str]]:
    """Per-pass summary dicts to a printable table."""
    table = [["pass", "samples", "forced", "upgrades", "downgrades", "mean_rate_mbps", "min_margin_db", "volume_gbit"]]
    for pid, s in summaries.items():
        table.append([
            str(pid),
            str(s["samples"]),
            str(s["forced"]),
            str(s["upgrades"]),
            str(s["downgrades"]),
            f"{s['mean_rate_bps'] / 1e6:.2f}",
            f"{s['min_margin_db']:.2f}",
            f"{s['data_volume_bits'] / 1e9:.3f}",
        ])
    return table
