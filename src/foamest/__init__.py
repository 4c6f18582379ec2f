"""Cost, price and profit estimating for spray foam insulation jobs."""

from .aggregate import estimate_job
from .api import JobReport, evaluate, evaluate_file
from .comparison import compare_job
from .document import load_document, save_document
from .errors import (
    ApplicationRemovalRejected,
    DocumentError,
    EstimateError,
    InvalidPitchFormat,
    MarkupBelowFloorRejected,
)
from .models import Actuals, Area, BusinessSettings, FoamApplication, GlobalInputs
from .state import EstimateState, new_estimate

__all__ = [
    "estimate_job",
    "compare_job",
    "evaluate",
    "evaluate_file",
    "JobReport",
    "load_document",
    "save_document",
    "EstimateError",
    "InvalidPitchFormat",
    "MarkupBelowFloorRejected",
    "ApplicationRemovalRejected",
    "DocumentError",
    "Actuals",
    "Area",
    "BusinessSettings",
    "FoamApplication",
    "GlobalInputs",
    "EstimateState",
    "new_estimate",
]
