import json

import numpy as np
import pytest

from leo_acm.loaders import load_cno_passes


def test_load_csv_with_gap(tmp_path):
    p = tmp_path / "cno.csv"
    p.write_text(
        "pass_id,time_s,cno_dbhz\n"
        "1,0,85.0\n1,1,\n1,2,84.5\n"
        "2,10,80.0\n2,11,81.0\n",
        encoding="utf-8",
    )
    passes = load_cno_passes(p)
    assert list(passes) == ["1", "2"]
    assert np.isnan(passes["1"].cno_dbhz[1])
    assert passes["2"].cno_dbhz.tolist() == [80.0, 81.0]
    assert passes["2"].times_s.tolist() == [10.0, 11.0]
    assert passes["2"].cadence_s == 1.0


def test_csv_keeps_sub_second_cadence(tmp_path):
    p = tmp_path / "cno.csv"
    p.write_text("pass_id,time_s,cno_dbhz\n7,0.0,85\n7,0.5,85\n7,1.0,86\n", encoding="utf-8")
    passes = load_cno_passes(p)
    assert passes["7"].cadence_s == 0.5
    assert passes["7"].times_s.tolist() == [0.0, 0.5, 1.0]


def test_single_sample_pass_has_no_cadence(tmp_path):
    p = tmp_path / "cno.csv"
    p.write_text("pass_id,time_s,cno_dbhz\n1,4.0,85\n", encoding="utf-8")
    passes = load_cno_passes(p)
    assert passes["1"].cadence_s is None
    assert passes["1"].times_s.tolist() == [4.0]


def test_csv_with_omitted_sample_is_rejected(tmp_path):
    p = tmp_path / "cno.csv"
    p.write_text("pass_id,time_s,cno_dbhz\n1,0,85\n1,1,85\n1,3,85\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_cno_passes(p)


def test_csv_rows_out_of_time_order_are_rejected(tmp_path):
    p = tmp_path / "cno.csv"
    p.write_text("pass_id,time_s,cno_dbhz\n1,1,84\n1,0,85\n1,2,86\n", encoding="utf-8")
    with pytest.raises(ValueError, match="file order"):
        load_cno_passes(p)


def test_csv_missing_columns(tmp_path):
    p = tmp_path / "cno.csv"
    p.write_text("pass,t,cno\n1,0,85\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_cno_passes(p)


def test_load_json(tmp_path):
    p = tmp_path / "cno.json"
    p.write_text(json.dumps({"passes": {"ul1": [85.0, None, 84.0]}}), encoding="utf-8")
    passes = load_cno_passes(p)
    assert np.isnan(passes["ul1"].cno_dbhz[1])
    assert passes["ul1"].cno_dbhz[2] == 84.0
    assert passes["ul1"].times_s is None


def test_load_json_with_times(tmp_path):
    p = tmp_path / "cno.json"
    p.write_text(
        json.dumps({"passes": {"dl": {"time_s": [5.0, 5.5, 6.0], "cno_dbhz": [85.0, None, 84.0]}}}),
        encoding="utf-8",
    )
    passes = load_cno_passes(p)
    assert passes["dl"].cadence_s == 0.5
    assert passes["dl"].times_s.tolist() == [5.0, 5.5, 6.0]
    assert np.isnan(passes["dl"].cno_dbhz[1])


def test_json_times_must_match_samples(tmp_path):
    p = tmp_path / "cno.json"
    p.write_text(json.dumps({"passes": {"dl": {"time_s": [0, 1], "cno_dbhz": [85.0]}}}), encoding="utf-8")
    with pytest.raises(ValueError):
        load_cno_passes(p)


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_cno_passes(tmp_path / "nope.csv")
