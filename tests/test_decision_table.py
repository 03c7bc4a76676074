import csv

from leo_acm.acm_params import ACMParameters
from leo_acm.decision_table import (
    COLUMNS,
    decisions_to_frame,
    decisions_to_table,
    results_to_frame,
    save_decisions_csv,
)
from leo_acm.engine import LinkAdaptationEngine
from leo_acm.pass_driver import run_passes


def _results():
    eng = LinkAdaptationEngine.from_params(ACMParameters())
    return run_passes(eng, {"a": [85.0, float("nan"), 85.0], "b": [87.0, 87.0]})


def test_table_and_frame():
    res = _results()
    table = decisions_to_table(res[0].decisions, "a")
    assert table[0] == COLUMNS
    assert table[2][7] == "1"
    assert table[2][8] == "fallback"
    df = decisions_to_frame(res[0].decisions, "a")
    assert list(df.columns) == COLUMNS
    assert df["forced"].tolist() == [False, True, False]
    assert df["modulation_order"].iloc[0] == 4
    both = results_to_frame(res)
    assert len(both) == 5
    assert set(both["pass_id"]) == {"a", "b"}


def test_save_csv(tmp_path):
    out = tmp_path / "decisions.csv"
    save_decisions_csv(_results(), out)
    with out.open(newline="", encoding="utf-8") as f:
        rows = list(csv.reader(f))
    assert rows[0] == COLUMNS
    assert len(rows) == 6
