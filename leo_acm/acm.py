"""Uplink/downlink ACM runs.

Runs the same MODCOD selector separately over the uplink and downlink C/N0
passes of a campaign. Both directions share one configuration and one
candidate grid; they never share decision state.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Mapping, Union

from .acm_params import ACMParameters
from .engine import LinkAdaptationEngine
from .pass_driver import PassResult, PassSamples, run_passes

logger = logging.getLogger(__name__)

Passes = Union[Mapping[str, PassSamples], Iterable[PassSamples]]


@dataclass
class LinkResults:
    uplink: List[PassResult]
    downlink: List[PassResult]


def run_acm(
    cno_ul_passes: Passes,
    cno_dl_passes: Passes,
    params: ACMParameters | None = None,
    cadence_s: float = 1.0,
) -> LinkResults:
    """Select MODCODs for every uplink and downlink pass.

    Raises:
        ConfigurationError: for invalid params (before any pass is processed).
    """
    engine = LinkAdaptationEngine.from_params(params)
    uplink = run_passes(engine, cno_ul_passes, cadence_s=cadence_s)
    logger.info("Uplink ACM done over %d passes", len(uplink))
    downlink = run_passes(engine, cno_dl_passes, cadence_s=cadence_s)
    logger.info("Downlink ACM done over %d passes", len(downlink))
    return LinkResults(uplink=uplink, downlink=downlink)
