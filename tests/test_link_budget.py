import math

import numpy as np
import pytest

from leo_acm.link_budget import (
    symbol_rate_hz,
    info_bit_rate_bps,
    spectral_efficiency_bps_hz,
    shannon_required_ebno_db,
    ebno_db_from_cno,
    snr_db_from_cno,
    shannon_capacity_bps_hz,
)


def test_symbol_and_bit_rate():
    rs = symbol_rate_hz(250e6, 0.9)
    assert abs(rs - 250e6 / 1.9) < 1e-6
    assert abs(info_bit_rate_bps(rs, 16, 0.75) - rs * 3.0) < 1e-6
    # 16-QAM 3/4 and 64-QAM 1/2 carry the same information bits per symbol
    assert info_bit_rate_bps(rs, 16, 0.75) == info_bit_rate_bps(rs, 64, 0.5)


def test_symbol_rate_rejects_bad_bandwidth():
    with pytest.raises(ValueError):
        symbol_rate_hz(0.0, 0.5)


def test_required_ebno_approaches_shannon_limit():
    # -1.59 dB as eta -> 0
    assert abs(shannon_required_ebno_db(1e-6) - 10 * math.log10(math.log(2))) < 1e-3
    # eta = 1 b/s/Hz needs exactly 0 dB plus the gap
    assert abs(shannon_required_ebno_db(1.0, 1.2) - 1.2) < 1e-12


def test_required_ebno_increases_with_eta():
    etas = [0.5, 1.0, 2.0, 3.0, 4.0]
    req = [shannon_required_ebno_db(e) for e in etas]
    assert all(b > a for a, b in zip(req, req[1:]))
    assert abs(spectral_efficiency_bps_hz(4, 0.5, 0.9) - 1.0 / 1.9) < 1e-12


def test_ebno_and_snr_conversions():
    assert abs(float(ebno_db_from_cno(90.0, 1e8)) - 10.0) < 1e-9
    assert np.isnan(ebno_db_from_cno(np.nan, 1e8))
    assert abs(float(snr_db_from_cno(90.0, 1e6)) - 30.0) < 1e-9
    assert abs(float(shannon_capacity_bps_hz(0.0)) - 1.0) < 1e-12
