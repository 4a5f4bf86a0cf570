"""JSON import/export helpers."""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import ValidationError

from lambda_morph.core.invariants import validate_unit
from lambda_morph.core.ir import TransformationUnit
from lambda_morph.exceptions import UnitInvariantViolation


def unit_to_dict(unit: TransformationUnit) -> dict:
    return unit.model_dump(mode="json")


def unit_from_dict(data: dict) -> TransformationUnit:
    """Build a unit from plain data, rejecting anything that breaks its invariants."""
    try:
        unit = TransformationUnit.model_validate(data)
    except ValidationError as e:
        raise UnitInvariantViolation(
            [f"{'.'.join(str(p) for p in err['loc']) or 'unit'}: {err['msg']}" for err in e.errors()]
        ) from e
    violations = validate_unit(unit)
    if violations:
        raise UnitInvariantViolation(violations)
    return unit


def export_unit(unit: TransformationUnit, path: str | Path) -> None:
    """Write one unit to a JSON file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(unit.model_dump_json(indent=2))


def import_unit(path: str | Path) -> TransformationUnit:
    """Read one unit from a JSON file."""
    path = Path(path)
    return unit_from_dict(json.loads(path.read_text()))


def export_units(units: list[TransformationUnit] | tuple[TransformationUnit, ...], path: str | Path) -> None:
    """Write a list of units as a JSON array."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps([unit_to_dict(u) for u in units], indent=2))


def import_units(path: str | Path) -> list[TransformationUnit]:
    path = Path(path)
    return [unit_from_dict(d) for d in json.loads(path.read_text())]
