"""Decision export: printable tables, CSV files and pandas frames.

The per-sample decisions (selected MODCOD, bit rate, margin, forced flag) are the
output contract of the selector and the feature/label source for downstream
models, so we keep the column names stable:

	pass_id, time_s, cno_dbhz, modulation_order, code_rate,
	info_bit_rate_bps, margin_db, forced, transition
"""

import csv
from pathlib import Path
from typing import Iterable, List, Sequence

import pandas as pd

from .engine import Decision
from .pass_driver import PassResult


COLUMNS = [
	"pass_id", "time_s", "cno_dbhz", "modulation_order", "code_rate",
	"info_bit_rate_bps", "margin_db", "forced", "transition",
]


def decisions_to_table(decisions: Iterable[Decision], pass_id: str = "") -> List[List[str]]:
	"""Convert decisions to a simple table (strings) for printing or CSV export."""
	table = [list(COLUMNS)]
	for d in decisions:
		table.append([
			str(pass_id),
			f"{d.time_s:.1f}",
			f"{d.cno_dbhz:.3f}",
			str(d.modulation_order),
			f"{d.code_rate:.4g}",
			f"{d.info_bit_rate_bps:.1f}",
			f"{d.margin_db:.3f}",
			"1" if d.forced else "0",
			d.transition.value,
		])
	return table


def print_table(table: List[List[str]]) -> None:
	"""Pretty-print a simple table to the console."""
	widths = [max(len(row[i]) for row in table) for i in range(len(table[0]))]
	for row in table:
		line = "  ".join(cell.ljust(widths[j]) for j, cell in enumerate(row))
		print(line)


def save_decisions_csv(results: Sequence[PassResult], path: str | Path) -> None:
	"""Save the decisions of every pass to one CSV file (header written once)."""
	p = Path(path)
	with p.open("w", newline="", encoding="utf-8") as f:
		writer = csv.writer(f)
		writer.writerow(COLUMNS)
		for res in results:
			writer.writerows(decisions_to_table(res.decisions, res.pass_id)[1:])


def decisions_to_frame(decisions: Iterable[Decision], pass_id: str = "") -> pd.DataFrame:
	"""One row per sample; NaN margin/C/N0 on invalid samples."""
	rows = [
		{
			"pass_id": pass_id,
			"time_s": d.time_s,
			"cno_dbhz": d.cno_dbhz,
			"modulation_order": d.modulation_order,
			"code_rate": d.code_rate,
			"info_bit_rate_bps": d.info_bit_rate_bps,
			"margin_db": d.margin_db,
			"forced": d.forced,
			"transition": d.transition.value,
		}
		for d in decisions
	]
	return pd.DataFrame(rows, columns=COLUMNS)


def results_to_frame(results: Sequence[PassResult]) -> pd.DataFrame:
	"""Concatenate the frames of several passes."""
	frames = [decisions_to_frame(r.decisions, r.pass_id) for r in results]
	if not frames:
		return pd.DataFrame(columns=COLUMNS)
	return pd.concat(frames, ignore_index=True)
