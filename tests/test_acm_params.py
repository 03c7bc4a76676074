import json

import pytest

from leo_acm.acm_params import (
    ACMParameters,
    is_square_qam_order,
    load_params_from_file,
    params_from_mapping,
    parse_params_text,
    validate_params,
)
from leo_acm.errors import ConfigurationError


def test_parse_params_text_simple():
    text = """
    Occupied bandwidth: 125 MHz
    Roll-off factor: 0.35
    Modulation orders: 4, 16, 64
    Code rates: 1/2, 2/3, 5/6
    Implementation gap: 2.0 dB
    Upgrade hysteresis: 1.0 dB
    Downgrade hysteresis: 0.3 dB
    Minimum dwell: 5 s
    """
    p = parse_params_text(text)
    assert abs(p.bandwidth_hz - 125e6) < 1
    assert p.roll_off == 0.35
    assert p.modulation_orders == (4, 16, 64)
    assert p.code_rates == pytest.approx((0.5, 2 / 3, 5 / 6))
    assert p.implementation_gap_db == 2.0
    assert p.upgrade_hysteresis_db == 1.0
    assert p.downgrade_hysteresis_db == 0.3
    assert p.min_dwell_s == 5.0


def test_parse_defaults_when_missing():
    p = parse_params_text("Nothing useful here. Roll-off: 0.25")
    assert p.roll_off == 0.25
    assert p.bandwidth_hz == ACMParameters().bandwidth_hz
    assert p.code_rates == ACMParameters().code_rates


def test_mapping_accepts_camel_case():
    p = params_from_mapping({
        "bandwidthHz": 100e6,
        "rollOff": 0.2,
        "modulationOrders": [4, 16],
        "codeRates": ["1/2", 0.75],
        "minDwellSeconds": 2,
    })
    assert p.bandwidth_hz == 100e6
    assert p.modulation_orders == (4, 16)
    assert p.code_rates == (0.5, 0.75)
    assert p.min_dwell_s == 2.0


def test_load_yaml_and_json(tmp_path):
    y = tmp_path / "acm.yaml"
    y.write_text("acm:\n  bandwidth_hz: 50.0e6\n  code_rates: [0.5, 0.9]\n  upgrade_hysteresis_db: 0.8\n", encoding="utf-8")
    p = load_params_from_file(y)
    assert p.bandwidth_hz == 50e6
    assert p.code_rates == (0.5, 0.9)
    assert p.upgrade_hysteresis_db == 0.8

    j = tmp_path / "acm.json"
    j.write_text(json.dumps({"modulationOrders": [4], "downgradeHysteresisDb": 0.1}), encoding="utf-8")
    p = load_params_from_file(j)
    assert p.modulation_orders == (4,)
    assert p.downgrade_hysteresis_db == 0.1

    t = tmp_path / "acm.txt"
    t.write_text("Bandwidth: 36 MHz\n", encoding="utf-8")
    assert abs(load_params_from_file(t).bandwidth_hz - 36e6) < 1


def test_load_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_params_from_file(tmp_path / "missing.yaml")
    bad = tmp_path / "bad.yaml"
    bad.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_params_from_file(bad)


def test_square_qam_orders():
    assert [m for m in (2, 4, 8, 16, 32, 64, 256, 1024) if is_square_qam_order(m)] == [4, 16, 64, 256, 1024]
    assert not is_square_qam_order(True)


def test_bandwidth_bare_number_is_hz():
    assert parse_params_text("Bandwidth: 250000000\n").bandwidth_hz == 250e6
    assert parse_params_text("Bandwidth = 2.5e8 Hz\n").bandwidth_hz == 250e6


def test_zero_bandwidth_is_kept_and_rejected_on_validation():
    p = parse_params_text("Bandwidth: 0 MHz\n")
    assert p.bandwidth_hz == 0.0
    with pytest.raises(ConfigurationError):
        validate_params(p)


def test_text_values_that_are_not_numbers_raise():
    with pytest.raises(ConfigurationError):
        parse_params_text("Modulation orders: QPSK\n")
    with pytest.raises(ConfigurationError):
        parse_params_text("Code rates: 1/2, half\n")
    with pytest.raises(ConfigurationError):
        parse_params_text("Code rates: 1/0\n")
    with pytest.raises(ConfigurationError):
        parse_params_text("Bandwidth: wide\n")


def test_mapping_values_that_are_not_numbers_raise():
    with pytest.raises(ConfigurationError):
        params_from_mapping({"bandwidthHz": "250 MHz"})
    with pytest.raises(ConfigurationError):
        params_from_mapping({"modulationOrders": ["QPSK", "16QAM"]})
    with pytest.raises(ConfigurationError):
        params_from_mapping({"codeRates": ["3/4", "x"]})
    with pytest.raises(ConfigurationError):
        params_from_mapping({"min_dwell_s": [1, 2]})


def test_unparsable_files_raise_configuration_error(tmp_path):
    y = tmp_path / "acm.yaml"
    y.write_text('bandwidthHz: "250 MHz"\n', encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_params_from_file(y)
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_params_from_file(broken)
