"""Closed-form link quantities used by the MODCOD selector.

Functions:
- symbol_rate_hz: symbol rate from occupied bandwidth and roll-off.
- info_bit_rate_bps: information bit rate of a (M, Rc) pair.
- spectral_efficiency_bps_hz: information bits per second per Hz of occupied bandwidth.
- shannon_required_ebno_db: Eb/N0 at the Shannon bound plus an implementation gap.
- ebno_db_from_cno: convert C/N0 (dB-Hz) into Eb/N0 (dB) for a given bit rate.
- snr_db_from_cno: SNR within the occupied bandwidth.
- shannon_capacity_bps_hz: log2(1 + SNR).
"""

import math

import numpy as np


def symbol_rate_hz(bandwidth_hz: float, roll_off: float) -> float:
    """Rs = B / (1 + alpha)."""
    if bandwidth_hz <= 0:
        raise ValueError("Bandwidth must be positive")
    return bandwidth_hz / (1.0 + roll_off)


def bits_per_symbol(modulation_order: int) -> float:
    return math.log2(modulation_order)


def info_bit_rate_bps(symbol_rate: float, modulation_order: int, code_rate: float) -> float:
    """Rb = Rs * log2(M) * Rc.

    log2(M) * Rc is formed first so that pairs with the same information bits
    per symbol (e.g. 16-QAM 3/4 and 64-QAM 1/2) give identical rates.
    """
    return symbol_rate * (bits_per_symbol(modulation_order) * code_rate)


def spectral_efficiency_bps_hz(modulation_order: int, code_rate: float, roll_off: float) -> float:
    """eta = log2(M) * Rc / (1 + alpha)."""
    return (bits_per_symbol(modulation_order) * code_rate) / (1.0 + roll_off)


def shannon_required_ebno_db(eta_bps_hz: float, implementation_gap_db: float = 0.0) -> float:
    """Minimum Eb/N0 for spectral efficiency eta, plus an implementation gap.

    Eb/N0_req [dB] = 10 log10((2^eta - 1) / eta) + gap.
    Tends to the -1.59 dB Shannon limit as eta -> 0.
    """
    if eta_bps_hz <= 0:
        raise ValueError("Spectral efficiency must be positive")
    return 10.0 * math.log10((2.0 ** eta_bps_hz - 1.0) / eta_bps_hz) + implementation_gap_db


def ebno_db_from_cno(cno_dbhz, bit_rate_bps):
    """Eb/N0 [dB] = C/N0 [dB-Hz] - 10 log10(Rb).

    Works on scalars or numpy arrays; NaN inputs propagate.
    """
    return np.asarray(cno_dbhz, dtype=float) - 10.0 * np.log10(bit_rate_bps)


def snr_db_from_cno(cno_dbhz, bandwidth_hz: float):
    """SNR [dB] in the occupied bandwidth: C/N0 - 10 log10(B)."""
    return np.asarray(cno_dbhz, dtype=float) - 10.0 * math.log10(bandwidth_hz)


def shannon_capacity_bps_hz(snr_db):
    """Shannon capacity per Hz, log2(1 + SNR)."""
    return np.log2(1.0 + 10.0 ** (np.asarray(snr_db, dtype=float) / 10.0))
