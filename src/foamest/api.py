from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .comparison import compare, compute_actuals
from .aggregate import estimate_job
from .document import load_document
from .models import ActualResult, BusinessSettings, Comparison, EstimateResult
from .state import EstimateState


@dataclass(frozen=True)
class JobReport:
    """Everything derived from one estimate state: quoted totals, actuals and their comparison."""

    state: EstimateState
    settings: BusinessSettings
    estimate: EstimateResult
    actual: ActualResult
    comparison: Comparison


def evaluate(state: EstimateState, settings: Optional[BusinessSettings] = None) -> JobReport:
    """Recompute every total for ``state``; nothing is cached between calls."""

    settings = settings or BusinessSettings()
    estimate = estimate_job(state.areas, state.global_inputs, settings)
    actual = compute_actuals(estimate, state.global_inputs, state.actuals, settings)
    return JobReport(
        state=state,
        settings=settings,
        estimate=estimate,
        actual=actual,
        comparison=compare(estimate, actual, state.global_inputs),
    )


def evaluate_file(path: Path, settings: Optional[BusinessSettings] = None) -> JobReport:
    """Programmatic interface: load a saved estimate document and evaluate it."""

    return evaluate(load_document(path), settings)


__all__ = ["JobReport", "evaluate", "evaluate_file"]
