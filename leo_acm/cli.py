"""CLI to run the ACM selector over C/N0 passes and save decisions as CSV.

Usage:
    python -m leo_acm.cli --cno passes.csv --params acm.yaml --out decisions.csv --summary
"""

import argparse
import logging
from pathlib import Path

from .acm_params import ACMParameters, load_params_from_file
from .decision_table import print_table, save_decisions_csv
from .engine import LinkAdaptationEngine
from .errors import ConfigurationError
from .kpi import pass_summary, summaries_to_table
from .loaders import load_cno_passes
from .pass_driver import run_passes

logger = logging.getLogger(__name__)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Run adaptive MODCOD selection over C/N0 passes")
    parser.add_argument("--cno", type=Path, required=True, help="C/N0 passes (CSV or JSON)")
    parser.add_argument("--params", type=Path, default=None, help="ACM parameters (YAML, JSON or text)")
    parser.add_argument("--cadence", type=float, default=1.0, help="sample cadence in seconds for passes without a time column")
    parser.add_argument("--out", type=Path, default=None, help="decision CSV to write")
    parser.add_argument("--summary", action="store_true", help="print per-pass KPIs")
    parser.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        params = load_params_from_file(args.params) if args.params is not None else ACMParameters()
        engine = LinkAdaptationEngine.from_params(params)
    except ConfigurationError as e:
        logger.error("Invalid ACM configuration: %s", e)
        return 2

    # CSV passes carry their own sample times; --cadence covers the rest
    passes = load_cno_passes(args.cno)
    results = run_passes(engine, passes, cadence_s=args.cadence)

    if args.out is not None:
        args.out.parent.mkdir(parents=True, exist_ok=True)
        save_decisions_csv(results, args.out)
        print(f"Saved {sum(len(r) for r in results)} decisions to {args.out}")
    if args.summary:
        summaries = {r.pass_id: pass_summary(r.decisions, r.cadence_s) for r in results}
        print_table(summaries_to_table(summaries))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
