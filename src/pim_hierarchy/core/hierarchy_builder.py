# core/hierarchy_builder.py

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Sequence

import regex as re

from .models import CardinalityScore, HeaderLevel, HierarchyLevel

logger = logging.getLogger(__name__)

# Names generated by add_level(); these follow renumbering
_AUTO_NAME = re.compile(r"^Level \d+$")

PARENT_LEVEL_NAME = "Parent"
VARIANT_LEVEL_NAME = "Variant"
SKU_LEVEL_NAME = "SKU"


class HierarchyInvariantError(RuntimeError):
    """Raised when level numbering or header ownership is corrupted."""


class HierarchyBuilder:
    """
    Editable product hierarchy.

    Responsibilities:
        - Build the default Parent → Variant → SKU proposal from header scores
        - Support add / remove / move / reorder edits
        - Keep header sets disjoint and level numbers contiguous (1..N)
        - Report levels whose record ID is missing, without repairing them

    Every edit re-checks the invariants and returns the list of
    incomplete-level warnings, so callers can surface them immediately.
    """

    # ============================================================
    # Initialization
    # ============================================================

    def __init__(
        self,
        levels: Optional[Iterable[HierarchyLevel]] = None,
        unassigned: Optional[Iterable[str]] = None,
    ):
        self._levels: List[HierarchyLevel] = [lvl.copy() for lvl in (levels or [])]
        self._unassigned: List[str] = list(unassigned or [])
        self.check_invariants()

    @classmethod
    def from_scores(
        cls,
        scores: Sequence[CardinalityScore],
        uom_headers: Iterable[str] = (),
        record_id_suggestion: Optional[str] = None,
        record_name_suggestion: Optional[str] = None,
    ) -> "HierarchyBuilder":
        """
        Default proposal:

            level1 headers (non-UOM)          → Level 1 "Parent"
            level2 headers (non-UOM)          → Level 2 "Variant"
            level3 headers + all UOM headers  → final "SKU" level

        Headers without any data are left unassigned. Groups that end up
        empty do not create a level.
        """
        uom = set(uom_headers)
        parent: List[str] = []
        variant: List[str] = []
        sku: List[str] = []
        unassigned: List[str] = []

        for s in scores:
            if s.completeness == 0.0:
                unassigned.append(s.header)
            elif s.header in uom:
                sku.append(s.header)
            elif s.classification is HeaderLevel.LEVEL1:
                parent.append(s.header)
            elif s.classification is HeaderLevel.LEVEL2:
                variant.append(s.header)
            else:
                sku.append(s.header)

        by_header = {s.header: s for s in scores}
        levels: List[HierarchyLevel] = []

        for name, headers in (
            (PARENT_LEVEL_NAME, parent),
            (VARIANT_LEVEL_NAME, variant),
        ):
            if not headers:
                continue
            levels.append(
                HierarchyLevel(
                    level=len(levels) + 1,
                    name=name,
                    headers=headers,
                    record_id=_pick_level_record_id(headers, by_header),
                )
            )

        if sku:
            levels.append(
                HierarchyLevel(
                    level=len(levels) + 1,
                    name=SKU_LEVEL_NAME,
                    headers=sku,
                    record_id=record_id_suggestion if record_id_suggestion in sku else None,
                    record_name=record_name_suggestion if record_name_suggestion in sku else None,
                )
            )

        builder = cls(levels, unassigned)
        for warning in builder.incomplete_level_warnings():
            logger.warning(warning)
        return builder

    @classmethod
    def from_levels(
        cls,
        levels: Iterable[HierarchyLevel],
        headers: Sequence[str],
    ) -> "HierarchyBuilder":
        """
        Rebuild state from a caller-edited hierarchy.

        Headers that are not on any level land in the unassigned pool;
        level headers unknown to the dataset are rejected.
        """
        levels = [lvl.copy() for lvl in levels]
        known = set(headers)
        placed = set()
        for lvl in levels:
            unknown = [h for h in lvl.headers if h not in known]
            if unknown:
                raise ValueError(f"Level {lvl.level} has unknown headers: {unknown}")
            placed.update(lvl.headers)
        unassigned = [h for h in headers if h not in placed]
        return cls(levels, unassigned)

    # ============================================================
    # Read access
    # ============================================================

    @property
    def levels(self) -> List[HierarchyLevel]:
        return [lvl.copy() for lvl in self._levels]

    @property
    def unassigned(self) -> List[str]:
        return list(self._unassigned)

    def snapshot(self) -> Dict[str, object]:
        return {"levels": self.levels, "unassigned": self.unassigned}

    def get_level(self, level: int) -> HierarchyLevel:
        return self._level(level).copy()

    def location_of(self, header: str) -> Optional[int]:
        """Level number holding `header`, None when unassigned."""
        for lvl in self._levels:
            if header in lvl.headers:
                return lvl.level
        if header in self._unassigned:
            return None
        raise ValueError(f"Header '{header}' is not part of this hierarchy.")

    def _level(self, level: int) -> HierarchyLevel:
        if not isinstance(level, int) or not 1 <= level <= len(self._levels):
            raise ValueError(
                f"Level {level!r} does not exist (hierarchy has {len(self._levels)} levels)."
            )
        return self._levels[level - 1]

    # ============================================================
    # Edits
    # ============================================================

    def add_level(self, name: Optional[str] = None) -> List[str]:
        number = len(self._levels) + 1
        self._levels.append(HierarchyLevel(level=number, name=name or f"Level {number}"))
        return self.check_invariants()

    def remove_level(self, level: int) -> List[str]:
        self._level(level)
        removed = self._levels.pop(level - 1)
        self._unassigned.extend(removed.headers)
        self._renumber()
        return self.check_invariants()

    def move_header(
        self,
        header: str,
        from_level: Optional[int],
        to_level: Optional[int],
    ) -> List[str]:
        """
        Move `header` between levels; None stands for the unassigned pool.

        Moving a level's record ID completes the move and leaves that level
        incomplete. A replacement is never chosen automatically.
        """
        if to_level is not None:
            target = self._level(to_level)

        if from_level == to_level:
            if header not in (self._unassigned if from_level is None else self._level(from_level).headers):
                raise ValueError(f"Header '{header}' is not at the source location.")
            return self.check_invariants()

        if from_level is None:
            if header not in self._unassigned:
                raise ValueError(f"Header '{header}' is not in the unassigned pool.")
            self._unassigned.remove(header)
        else:
            source = self._level(from_level)
            if header not in source.headers:
                raise ValueError(f"Header '{header}' is not on level {from_level}.")
            source.headers.remove(header)
            if source.record_id == header:
                source.record_id = None
            if source.record_name == header:
                source.record_name = None

        if to_level is None:
            self._unassigned.append(header)
        else:
            target.headers.append(header)

        warnings = self.check_invariants()
        for w in warnings:
            logger.warning(w)
        return warnings

    def reorder_levels(self, new_order: Sequence[int]) -> List[str]:
        """`new_order` lists the current level numbers in their new order."""
        current = list(range(1, len(self._levels) + 1))
        if sorted(new_order) != current:
            raise ValueError(
                f"New order {list(new_order)} is not a permutation of levels {current}."
            )
        self._levels = [self._levels[i - 1] for i in new_order]
        self._renumber()
        return self.check_invariants()

    def set_record_id(self, level: int, header: str) -> List[str]:
        lvl = self._level(level)
        if header not in lvl.headers:
            raise ValueError(f"Header '{header}' is not on level {level}.")
        lvl.record_id = header
        return self.check_invariants()

    def set_record_name(self, level: int, header: Optional[str]) -> List[str]:
        lvl = self._level(level)
        if header is not None and header not in lvl.headers:
            raise ValueError(f"Header '{header}' is not on level {level}.")
        lvl.record_name = header
        return self.check_invariants()

    # ============================================================
    # Invariants
    # ============================================================

    def _renumber(self) -> None:
        """Ensures level numbers become 1..N in list order."""
        for i, lvl in enumerate(self._levels, start=1):
            if _AUTO_NAME.match(lvl.name):
                lvl.name = f"Level {i}"
            lvl.level = i

    def check_invariants(self) -> List[str]:
        """
        Raise on structural corruption, return incomplete-level warnings.

        Structural: level numbers are exactly 1..N, and every header lives
        in exactly one place (one level or the unassigned pool).
        """
        numbers = [lvl.level for lvl in self._levels]
        if numbers != list(range(1, len(self._levels) + 1)):
            raise HierarchyInvariantError(f"Level numbers are not contiguous: {numbers}")

        seen: Dict[str, str] = {}
        places = [(f"level {lvl.level}", lvl.headers) for lvl in self._levels]
        places.append(("unassigned", self._unassigned))
        for place, headers in places:
            for h in headers:
                if h in seen:
                    raise HierarchyInvariantError(
                        f"Header '{h}' is on both {seen[h]} and {place}."
                    )
                seen[h] = place

        for lvl in self._levels:
            if lvl.record_id is not None and lvl.record_id not in lvl.headers:
                raise HierarchyInvariantError(
                    f"Record ID '{lvl.record_id}' is not a header of level {lvl.level}."
                )

        return self.incomplete_level_warnings()

    def incomplete_level_warnings(self) -> List[str]:
        return [
            f"Level {lvl.level} ({lvl.name}) has no record ID."
            for lvl in self._levels
            if lvl.record_id is None
        ]


def _pick_level_record_id(
    headers: Sequence[str],
    by_header: Dict[str, CardinalityScore],
) -> Optional[str]:
    """Most complete header, then most distinct values, then left-most."""
    best: Optional[str] = None
    best_key = None
    for h in headers:
        s = by_header.get(h)
        if s is None or s.completeness == 0.0:
            continue
        key = (s.completeness, s.unique_count)
        if best_key is None or key > best_key:
            best, best_key = h, key
    return best
