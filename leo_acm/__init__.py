from .errors import ConfigurationError
from .acm_params import (
    ACMParameters,
    validate_params,
    parse_params_text,
    params_from_mapping,
    load_params_from_file,
)
from .link_budget import (
    symbol_rate_hz,
    info_bit_rate_bps,
    spectral_efficiency_bps_hz,
    shannon_required_ebno_db,
    ebno_db_from_cno,
    snr_db_from_cno,
    shannon_capacity_bps_hz,
)
from .modcod import Candidate, CandidateGrid, build_candidate_grid
from .ebno import is_valid_sample, evaluate_ebno_db, ebno_matrix_db, ebno_series_db
from .engine import Decision, DecisionState, LinkAdaptationEngine, Transition
from .pass_driver import CnoPass, PassRun, PassResult, run_pass, run_passes
from .acm import LinkResults, run_acm
from .kpi import (
    spectral_efficiency_series,
    shannon_efficiency_series,
    empirical_cdf,
    mode_time_share,
    pass_summary,
)
from .decision_table import (
    decisions_to_table,
    save_decisions_csv,
    decisions_to_frame,
    results_to_frame,
)
from .loaders import load_cno_passes

__all__ = [
    "ConfigurationError",
    "ACMParameters",
    "validate_params",
    "parse_params_text",
    "params_from_mapping",
    "load_params_from_file",
    "symbol_rate_hz",
    "info_bit_rate_bps",
    "spectral_efficiency_bps_hz",
    "shannon_required_ebno_db",
    "ebno_db_from_cno",
    "snr_db_from_cno",
    "shannon_capacity_bps_hz",
    "Candidate",
    "CandidateGrid",
    "build_candidate_grid",
    "is_valid_sample",
    "evaluate_ebno_db",
    "ebno_matrix_db",
    "ebno_series_db",
    "Decision",
    "DecisionState",
    "LinkAdaptationEngine",
    "Transition",
    "CnoPass",
    "PassRun",
    "PassResult",
    "run_pass",
    "run_passes",
    "LinkResults",
    "run_acm",
    "spectral_efficiency_series",
    "shannon_efficiency_series",
    "empirical_cdf",
    "mode_time_share",
    "pass_summary",
    "decisions_to_table",
    "save_decisions_csv",
    "decisions_to_frame",
    "results_to_frame",
    "load_cno_passes",
]
