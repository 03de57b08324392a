"""
Station screening by taxi ETA.

A taxi ride to or from a station is only worth considering when it is long
enough to beat walking and short enough to stay cheap. Stations whose batch
ETA falls inside a minutes window survive; when too few survive the primary
window, the expanded window is applied to the same input instead.
"""

import logging
from typing import List, Optional, Sequence, Tuple

from app.schemas.driving import EtaResult
from app.schemas.location import Station

logger = logging.getLogger(__name__)

TAXI_ROI_WINDOW_PRIMARY: Tuple[int, int] = (6, 9)
TAXI_ROI_WINDOW_EXPAND: Tuple[int, int] = (5, 12)
MIN_PRIMARY_SURVIVORS = 5
MAX_STATION_CANDIDATES = 15


def screen_stations_by_eta(
    stations: Sequence[Station],
    eta_results: Sequence[EtaResult],
    window: Tuple[int, int],
) -> List[Station]:
    """
    Keep stations whose paired ETA, in minutes, lies within ``window`` inclusive.

    Stations and ETA results are paired by position; surplus entries on either
    side are ignored, as are ETAs without a positive duration.
    """
    low, high = window
    screened: List[Station] = []
    for station, eta in zip(stations, eta_results):
        if not eta or not eta.duration_sec:
            continue
        duration_min = eta.duration_sec / 60
        if low <= duration_min <= high:
            screened.append(station)
    return screened


def select_candidate_stations(
    stations: Sequence[Station], eta_results: Optional[Sequence[EtaResult]]
) -> List[Station]:
    """
    Screen stations with the primary window, falling back to the expanded one,
    then cap the list before precise per-station calls.

    The expanded result replaces the primary result; it is not merged with it.
    Without batch ETAs the stations pass through unscreened.
    """
    if eta_results is None:
        selected = list(stations)
    else:
        selected = screen_stations_by_eta(stations, eta_results, TAXI_ROI_WINDOW_PRIMARY)
        if len(selected) < MIN_PRIMARY_SURVIVORS:
            logger.debug(
                "Only %d stations in primary ETA window, retrying with %s",
                len(selected),
                TAXI_ROI_WINDOW_EXPAND,
            )
            selected = screen_stations_by_eta(stations, eta_results, TAXI_ROI_WINDOW_EXPAND)

    return selected[:MAX_STATION_CANDIDATES]
