"""
Floor-plan layout engine

Keeps the table placements of one floor plan and rejects any addition, move
or resize that would leave a table outside the floor, inside the service
margin along the walls, or overlapping another active table. Every operation
validates first and writes second, so a rejected request leaves the stored
placement untouched.
"""

from datetime import datetime
from enum import Enum
from typing import Dict, Iterable, List, Optional
import uuid

from tableside.core.config import get_settings
from tableside.core.exceptions import (
    ConflictError, NotFoundError, PositionError, ValidationError
)
from tableside.core.geometry import Rect, contains, inset, overlaps
from tableside.models.floor_plan import FloorPlan
from tableside.models.table_placement import TablePlacement

OUT_OF_BOUNDS = "out_of_bounds"
TOO_CLOSE_TO_EDGE = "too_close_to_edge"
OVERLAPS_TABLE = "overlaps_table"


class Direction(str, Enum):
    """Nudge direction on the floor grid (y grows downwards)"""
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


def overlap_violation(table_id: uuid.UUID) -> str:
    return f"{OVERLAPS_TABLE}:{table_id}"


def boundary_violations(candidate: Rect, floor_width: int, floor_height: int,
                        margin_distance: int) -> List[str]:
    """Boundary and margin violations of a rectangle on a floor of the given size"""
    floor = Rect(0, 0, floor_width, floor_height)
    violations = []
    if not contains(floor, candidate):
        violations.append(OUT_OF_BOUNDS)
    if not contains(inset(floor, margin_distance), candidate):
        violations.append(TOO_CLOSE_TO_EDGE)
    return violations


def validate_placement(
    floor_plan: FloorPlan,
    candidate: Rect,
    placements: Iterable[TablePlacement] = (),
    excluding_table_id: Optional[uuid.UUID] = None,
    margin_distance: Optional[int] = None,
) -> List[str]:
    """Violated rules for placing candidate on floor_plan; empty means valid.

    The candidate is checked against every active placement except the one
    belonging to ``excluding_table_id``.
    """
    if margin_distance is None:
        margin_distance = get_settings().FLOOR_MARGIN_DISTANCE

    violations = boundary_violations(candidate, floor_plan.width, floor_plan.height, margin_distance)
    for placement in placements:
        if not placement.is_active or placement.table_id == excluding_table_id:
            continue
        if overlaps(candidate, placement.rect):
            violations.append(overlap_violation(placement.table_id))
    return violations


def _require_size(width: int, height: int, what: str) -> None:
    if width is None or height is None or width < 1 or height < 1:
        raise ValidationError(f"{what} width and height must be positive, got {width}x{height}")


class FloorPlanLayout:
    """Table placements of a single floor plan"""

    def __init__(
        self,
        floor_plan: FloorPlan,
        placements: Iterable[TablePlacement] = (),
        margin_distance: Optional[int] = None,
    ):
        """
        Args:
            floor_plan: Floor plan whose bounds constrain the placements
            placements: Placements already stored for this floor plan
            margin_distance: Service-access buffer along the walls (grid units),
                defaults to the configured FLOOR_MARGIN_DISTANCE
        """
        self.floor_plan = floor_plan
        self.margin_distance = (
            get_settings().FLOOR_MARGIN_DISTANCE if margin_distance is None else margin_distance
        )
        self._placements: Dict[uuid.UUID, TablePlacement] = {
            placement.table_id: placement for placement in placements
        }

    @property
    def placements(self) -> List[TablePlacement]:
        return list(self._placements.values())

    def get(self, table_id: uuid.UUID) -> TablePlacement:
        placement = self._placements.get(table_id)
        if placement is None:
            raise NotFoundError(f"Table {table_id} is not placed on floor plan {self.floor_plan.id}")
        return placement

    def validate_placement(self, candidate: Rect,
                           excluding_table_id: Optional[uuid.UUID] = None) -> List[str]:
        return validate_placement(
            self.floor_plan,
            candidate,
            self._placements.values(),
            excluding_table_id=excluding_table_id,
            margin_distance=self.margin_distance,
        )

    def add_table(self, placement: TablePlacement) -> TablePlacement:
        """Place a new table; checked against every existing placement"""
        if placement.table_id in self._placements:
            raise ConflictError(f"Table {placement.table_id} is already placed on this floor plan")
        _require_size(placement.width, placement.height, "Table")
        if placement.seats is None or placement.seats < 1:
            raise ValidationError("A table needs at least one seat")

        violations = self.validate_placement(placement.rect)
        if violations:
            raise PositionError(violations)

        placement.floor_plan_id = self.floor_plan.id
        self._placements[placement.table_id] = placement
        return placement

    def move(self, table_id: uuid.UUID, direction, step: Optional[int] = None) -> TablePlacement:
        """Nudge a table by step grid units, clamped to the floor"""
        if step is None:
            step = get_settings().DEFAULT_MOVE_STEP
        if step < 1:
            raise ValidationError(f"Move step must be positive, got {step}")
        try:
            direction = Direction(direction)
        except ValueError:
            raise ValidationError(f"Unknown direction: {direction}")

        placement = self.get(table_id)
        x, y = placement.x_position, placement.y_position
        if direction == Direction.UP:
            y = max(0, y - step)
        elif direction == Direction.DOWN:
            y = min(self.floor_plan.height - placement.height, y + step)
        elif direction == Direction.LEFT:
            x = max(0, x - step)
        else:
            x = min(self.floor_plan.width - placement.width, x + step)

        return self._commit(placement, Rect(x, y, placement.width, placement.height))

    def reposition(self, table_id: uuid.UUID, x: int, y: int) -> TablePlacement:
        return self.place(table_id, x=x, y=y)

    def resize(self, table_id: uuid.UUID, width: int, height: int) -> TablePlacement:
        return self.place(table_id, width=width, height=height)

    def place(self, table_id: uuid.UUID, x: Optional[int] = None, y: Optional[int] = None,
              width: Optional[int] = None, height: Optional[int] = None) -> TablePlacement:
        """Reposition and/or resize in one validated step; omitted values are kept"""
        placement = self.get(table_id)
        candidate = Rect(
            placement.x_position if x is None else x,
            placement.y_position if y is None else y,
            placement.width if width is None else width,
            placement.height if height is None else height,
        )
        _require_size(candidate.width, candidate.height, "Table")
        return self._commit(placement, candidate)

    def remove_table(self, table_id: uuid.UUID) -> Optional[TablePlacement]:
        """Take a table off the floor plan; returns the removed placement"""
        return self._placements.pop(table_id, None)

    def resize_floor(self, width: int, height: int) -> FloorPlan:
        """Change the floor bounds, refusing if an active table would no longer fit.

        Violations are reported per table as ``<table_id>:<code>``.
        """
        _require_size(width, height, "Floor plan")
        violations = []
        for placement in self._placements.values():
            if not placement.is_active:
                continue
            for code in boundary_violations(placement.rect, width, height, self.margin_distance):
                violations.append(f"{placement.table_id}:{code}")
        if violations:
            raise PositionError(violations, detail="Floor plan resize would strand existing tables")

        self.floor_plan.width = width
        self.floor_plan.height = height
        self.floor_plan.updated_at = datetime.now()
        return self.floor_plan

    def audit(self) -> Dict[uuid.UUID, List[str]]:
        """Violations of every active placement; empty when the layout is valid"""
        report = {}
        for placement in self._placements.values():
            if not placement.is_active:
                continue
            violations = self.validate_placement(placement.rect, excluding_table_id=placement.table_id)
            if violations:
                report[placement.table_id] = violations
        return report

    def _commit(self, placement: TablePlacement, candidate: Rect) -> TablePlacement:
        violations = self.validate_placement(candidate, excluding_table_id=placement.table_id)
        if violations:
            raise PositionError(violations)

        placement.x_position = candidate.x
        placement.y_position = candidate.y
        placement.width = candidate.width
        placement.height = candidate.height
        placement.updated_at = datetime.now()
        return placement
