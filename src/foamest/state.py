"""
Immutable estimate state and the reducers that edit it.

Every reducer takes an :class:`EstimateState` and returns a new one; nothing is
mutated and no totals are stored. Cross-field rules (square footage versus
dimensions, markup versus quoted price) are resolved synchronously inside the
reducer that receives the edit.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields, replace
from typing import Callable, Iterable, Optional, Tuple

from . import markup
from .errors import ApplicationRemovalRejected, InvalidPitchFormat, UnknownEntity
from .foam import default_application, reset_to_defaults
from .geometry import parse_pitch
from .models import (
    ACTUAL_FIELDS,
    GENERAL,
    OPEN_CELL,
    Actuals,
    Area,
    EstimateMetadata,
    FoamApplication,
    GlobalInputs,
    normalize_area_type,
)
from .numeric import coerce_non_negative, coerce_optional

logger = logging.getLogger(__name__)

_AREA_NUMERIC_FIELDS = ("area_sqft", "length", "width")
_APPLICATION_NUMERIC_FIELDS = ("foam_thickness", "material_price", "material_markup", "board_feet_per_set")


@dataclass(frozen=True)
class EstimateState:
    metadata: EstimateMetadata = field(default_factory=EstimateMetadata)
    global_inputs: GlobalInputs = field(default_factory=GlobalInputs)
    areas: Tuple[Area, ...] = ()
    actuals: Actuals = field(default_factory=Actuals)

    def area(self, area_id: int) -> Area:
        for area in self.areas:
            if area.id == area_id:
                return area
        raise UnknownEntity(f"No area with id {area_id}")

    def application(self, area_id: int, app_id: int) -> FoamApplication:
        for app in self.area(area_id).foam_applications:
            if app.id == app_id:
                return app
        raise UnknownEntity(f"No foam application {app_id} in area {area_id}")


def _next_id(ids: Iterable[int]) -> int:
    return max(ids, default=0) + 1


def _next_application_id(state: EstimateState) -> int:
    return _next_id(app.id for area in state.areas for app in area.foam_applications)


def _field_names(cls) -> set[str]:
    return {f.name for f in fields(cls)}


def _check_fields(cls, changes: dict) -> None:
    unknown = set(changes) - _field_names(cls)
    if unknown:
        raise TypeError(f"Unknown {cls.__name__} field(s): {', '.join(sorted(unknown))}")


def normalize_area(area: Area, edited: Iterable[str] = ()) -> Area:
    """
    Resolve which size description of ``area`` is authoritative.

    A positive manual square footage clears the dimensions; positive
    dimensions clear the manual square footage and its pitch opt-in. When both
    are present the field in ``edited`` wins, otherwise square footage does.
    """

    edited = set(edited)
    has_sqft = area.area_sqft > 0
    has_dims = area.length > 0 or area.width > 0
    if not (has_sqft and has_dims):
        if has_dims:
            return replace(area, area_sqft=0.0, apply_pitch_to_manual_area=False)
        return area
    if edited & {"length", "width"} and "area_sqft" not in edited:
        return replace(area, area_sqft=0.0, apply_pitch_to_manual_area=False)
    return replace(area, length=0.0, width=0.0)


def _replace_area(state: EstimateState, area_id: int, update: Callable[[Area], Area]) -> EstimateState:
    current = state.area(area_id)
    updated = update(current)
    areas = tuple(updated if area.id == area_id else area for area in state.areas)
    return replace(state, areas=areas)


def _replace_application(
    state: EstimateState,
    area_id: int,
    app_id: int,
    update: Callable[[FoamApplication], FoamApplication],
) -> EstimateState:
    state.application(area_id, app_id)

    def _apply(area: Area) -> Area:
        apps = tuple(update(app) if app.id == app_id else app for app in area.foam_applications)
        return replace(area, foam_applications=apps)

    return _replace_area(state, area_id, _apply)


def new_estimate(metadata: Optional[EstimateMetadata] = None) -> EstimateState:
    """A blank estimate holding one general area sprayed with default open cell."""

    state = EstimateState(metadata=metadata or EstimateMetadata())
    return add_area(state)


# Global inputs


def update_global_inputs(state: EstimateState, **changes: object) -> EstimateState:
    _check_fields(GlobalInputs, changes)
    cleaned = {name: coerce_non_negative(value) for name, value in changes.items()}
    return replace(state, global_inputs=replace(state.global_inputs, **cleaned))


def commit_charged_labor_rate(state: EstimateState, value: object) -> EstimateState:
    """Derive the labor markup from an edited charged rate.

    Raises :class:`~foamest.errors.MarkupBelowFloorRejected` when the rate is
    below the actual labor rate; the caller keeps the previous state.
    """

    inputs = markup.commit_charged_labor_rate(state.global_inputs, value)
    logger.debug("labor markup derived => %.4f%%", inputs.labor_markup)
    return replace(state, global_inputs=inputs)


def update_metadata(state: EstimateState, **changes: object) -> EstimateState:
    _check_fields(EstimateMetadata, changes)
    cleaned = {name: "" if value is None else str(value) for name, value in changes.items()}
    return replace(state, metadata=replace(state.metadata, **cleaned))


# Areas


def add_area(
    state: EstimateState,
    name: Optional[str] = None,
    area_type: str = GENERAL,
    foam_type: str = OPEN_CELL,
) -> EstimateState:
    area_id = _next_id(area.id for area in state.areas)
    area = Area(
        id=area_id,
        name=name or f"Area {len(state.areas) + 1}",
        foam_applications=(default_application(_next_application_id(state), foam_type),),
        area_type=normalize_area_type(area_type) or GENERAL,
    )
    return replace(state, areas=state.areas + (area,))


def remove_area(state: EstimateState, area_id: int) -> EstimateState:
    state.area(area_id)
    return replace(state, areas=tuple(area for area in state.areas if area.id != area_id))


def update_area(state: EstimateState, area_id: int, **changes: object) -> EstimateState:
    """
    Apply field edits to one area.

    Numeric fields are clamped, ``area_type`` is normalized and ``roof_pitch``
    must parse; an unparseable pitch raises
    :class:`~foamest.errors.InvalidPitchFormat` and the edit is not applied.
    """

    _check_fields(Area, changes)
    if "id" in changes or "foam_applications" in changes:
        raise TypeError("Area id and foam applications are edited through their own reducers")
    cleaned = dict(changes)
    for name in _AREA_NUMERIC_FIELDS:
        if name in cleaned:
            cleaned[name] = coerce_non_negative(cleaned[name])
    if "area_type" in cleaned:
        area_type = normalize_area_type(cleaned["area_type"])
        if area_type is None:
            raise ValueError(f"Unknown area type {cleaned['area_type']!r}")
        cleaned["area_type"] = area_type
    if "roof_pitch" in cleaned:
        pitch = str(cleaned["roof_pitch"]).strip()
        parse_pitch(pitch)
        cleaned["roof_pitch"] = pitch
    if "name" in cleaned:
        cleaned["name"] = str(cleaned["name"])
    if "apply_pitch_to_manual_area" in cleaned:
        cleaned["apply_pitch_to_manual_area"] = bool(cleaned["apply_pitch_to_manual_area"])

    return _replace_area(
        state,
        area_id,
        lambda area: normalize_area(replace(area, **cleaned), edited=cleaned.keys()),
    )


def set_roof_pitch(state: EstimateState, area_id: int, pitch: str) -> Tuple[EstimateState, Optional[str]]:
    """Form-friendly pitch edit returning ``(state, error_message)`` instead of raising."""

    try:
        return update_area(state, area_id, roof_pitch=pitch), None
    except InvalidPitchFormat as exc:
        logger.debug("Rejected roof pitch edit on area %s: %s", area_id, exc)
        return state, str(exc)


# Foam applications


def add_foam_application(state: EstimateState, area_id: int, foam_type: str = OPEN_CELL) -> EstimateState:
    app = default_application(_next_application_id(state), foam_type)
    return _replace_area(
        state,
        area_id,
        lambda area: replace(area, foam_applications=area.foam_applications + (app,)),
    )


def remove_foam_application(state: EstimateState, area_id: int, app_id: int) -> EstimateState:
    area = state.area(area_id)
    state.application(area_id, app_id)
    if len(area.foam_applications) <= 1:
        raise ApplicationRemovalRejected(f"{area.name or 'Area'} must keep at least one foam application")
    return _replace_area(
        state,
        area_id,
        lambda current: replace(
            current,
            foam_applications=tuple(app for app in current.foam_applications if app.id != app_id),
        ),
    )


def update_foam_application(state: EstimateState, area_id: int, app_id: int, **changes: object) -> EstimateState:
    _check_fields(FoamApplication, changes)
    if "id" in changes:
        raise TypeError("Foam application ids cannot be edited")
    if "foam_type" in changes:
        return set_foam_type(state, area_id, app_id, str(changes.pop("foam_type")), **changes)
    cleaned = {name: coerce_non_negative(value) for name, value in changes.items()}
    return _replace_application(state, area_id, app_id, lambda app: replace(app, **cleaned))


def set_foam_type(state: EstimateState, area_id: int, app_id: int, foam_type: str, **changes: object) -> EstimateState:
    """Re-select the foam type; the application takes that type's defaults before ``changes`` apply."""

    cleaned = {name: coerce_non_negative(value) for name, value in changes.items() if name in _APPLICATION_NUMERIC_FIELDS}
    return _replace_application(
        state,
        area_id,
        app_id,
        lambda app: replace(reset_to_defaults(app, foam_type), **cleaned),
    )


def commit_price_per_sqft(state: EstimateState, area_id: int, app_id: int, value: object) -> EstimateState:
    """Derive an application's material markup from an edited price per square foot."""

    return _replace_application(
        state,
        area_id,
        app_id,
        lambda app: markup.commit_price_per_sqft(app, value),
    )


# Actuals


def update_actual(state: EstimateState, name: str, value: object) -> EstimateState:
    """Record an actual; ``None`` or a blank entry clears it back to unset."""

    if name not in ACTUAL_FIELDS:
        raise TypeError(f"Unknown actual field {name!r}")
    return replace(state, actuals=replace(state.actuals, **{name: coerce_optional(value)}))


def clear_actuals(state: EstimateState) -> EstimateState:
    return replace(state, actuals=Actuals())


__all__ = [
    "EstimateState",
    "normalize_area",
    "new_estimate",
    "update_global_inputs",
    "commit_charged_labor_rate",
    "update_metadata",
    "add_area",
    "remove_area",
    "update_area",
    "set_roof_pitch",
    "add_foam_application",
    "remove_foam_application",
    "update_foam_application",
    "set_foam_type",
    "commit_price_per_sqft",
    "update_actual",
    "clear_actuals",
]
