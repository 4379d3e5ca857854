"""
Grid-tied inverter sizing from array DC power and electrical extremes.

    AC window      = DC power × [0.9, 1.1]
    Voc rating     ≥ array Voc × 1.15
    Isc rating     ≥ array Isc × 1.25
"""
from __future__ import annotations

from typing import Optional

from shams.knowledge.jordan_data import DESIGN_DEFAULTS
from shams.models import GridPhase, InverterSizingInput, InverterSizingResult

DC_AC_RATIO_MIN = 0.9
DC_AC_RATIO_MAX = 1.1
DESIGN_POINT_RATIO = 0.95
VOC_SAFETY_FACTOR = 1.15
ISC_SAFETY_FACTOR = 1.25

PHASE_LABELS_AR = {
    GridPhase.SINGLE: "أحادي الطور",
    GridPhase.THREE: "ثلاثي الطور",
}

PHASE_LABELS_EN = {
    GridPhase.SINGLE: "Single-Phase",
    GridPhase.THREE: "Three-Phase",
}


def infer_grid_phase(total_dc_power: float) -> GridPhase:
    if total_dc_power > DESIGN_DEFAULTS["three_phase_threshold_kw"]:
        return GridPhase.THREE
    return GridPhase.SINGLE


def recommended_inverter_ac_size(total_dc_power: float) -> float:
    """Single-point AC rating used for whole-system designs."""
    return total_dc_power * DESIGN_POINT_RATIO


def calculate_inverter_size(data: InverterSizingInput) -> InverterSizingResult:
    phase: Optional[GridPhase] = data.grid_phase
    phase = GridPhase(phase) if phase is not None else infer_grid_phase(data.total_dc_power)

    return InverterSizingResult(
        min_inverter_size=data.total_dc_power * DC_AC_RATIO_MIN,
        max_inverter_size=data.total_dc_power * DC_AC_RATIO_MAX,
        recommended_voc=data.max_voc * VOC_SAFETY_FACTOR,
        recommended_isc=data.max_isc * ISC_SAFETY_FACTOR,
        grid_phase=phase,
        grid_phase_label=PHASE_LABELS_AR[phase],
    )
