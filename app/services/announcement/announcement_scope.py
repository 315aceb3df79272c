"""
Announcement scope resolution.

Keeps the diocese -> church -> class selections of an announcement
hierarchically consistent. Every operation clamps the selection instead of
rejecting input, so the resolver has no failure modes:

- every selected church belongs to a selected diocese
- every selected class belongs to a selected church

Pure in-memory logic; the catalog is loaded by the scope repository.
"""

from typing import Dict, Iterable, List, Optional

from app.models.base.enums import ScopeDimension
from app.schemas.announcement.announcement_targeting import ScopeCatalog


def dedupe(ids: Iterable[str]) -> List[str]:
    """Drop duplicates and blanks, keeping first-seen order."""
    seen = set()
    result = []
    for value in ids or ():
        if value is None:
            continue
        value = str(value)
        if not value or value in seen:
            continue
        seen.add(value)
        result.append(value)
    return result


class ScopeResolver:
    """
    Mutable selection state over a ScopeCatalog.

    Usage:
        resolver = ScopeResolver(catalog)
        resolver.set_diocese_selection(["d1"])
        resolver.select_all_in_dimension(ScopeDimension.CHURCH)
        resolver.as_dict()
    """

    def __init__(
        self,
        catalog: ScopeCatalog,
        diocese_ids: Optional[Iterable[str]] = None,
        church_ids: Optional[Iterable[str]] = None,
        class_ids: Optional[Iterable[str]] = None,
    ):
        self.catalog = catalog
        self._diocese_ids: List[str] = []
        self._church_ids: List[str] = []
        self._class_ids: List[str] = []

        self._church_parents = catalog.parent_map(ScopeDimension.CHURCH)
        self._class_parents = catalog.parent_map(ScopeDimension.CLASS)
        self._known_dioceses = {option.id for option in catalog.dioceses}

        if diocese_ids or church_ids or class_ids:
            self.normalize(diocese_ids or [], church_ids or [], class_ids or [])

    # ==================== Selection state ====================

    @property
    def diocese_ids(self) -> List[str]:
        return list(self._diocese_ids)

    @property
    def church_ids(self) -> List[str]:
        return list(self._church_ids)

    @property
    def class_ids(self) -> List[str]:
        return list(self._class_ids)

    def selected(self, dimension: ScopeDimension) -> List[str]:
        if dimension == ScopeDimension.DIOCESE:
            return self.diocese_ids
        if dimension == ScopeDimension.CHURCH:
            return self.church_ids
        return self.class_ids

    # ==================== Operations ====================

    def set_diocese_selection(self, ids: Iterable[str]) -> "ScopeResolver":
        """Replace the diocese set; churches and classes outside it are pruned."""
        self._diocese_ids = [
            diocese_id for diocese_id in dedupe(ids)
            if diocese_id in self._known_dioceses
        ]
        self._prune_churches()
        return self

    def set_church_selection(self, ids: Iterable[str]) -> "ScopeResolver":
        """Replace the church set, clamped to churches of the selected dioceses."""
        allowed = set(self._diocese_ids)
        self._church_ids = [
            church_id for church_id in dedupe(ids)
            if self._church_parents.get(church_id) in allowed
        ]
        self._prune_classes()
        return self

    def set_class_selection(self, ids: Iterable[str]) -> "ScopeResolver":
        """Replace the class set, clamped to classes of the selected churches."""
        allowed = set(self._church_ids)
        self._class_ids = [
            class_id for class_id in dedupe(ids)
            if self._class_parents.get(class_id) in allowed
        ]
        return self

    def select_all_in_dimension(self, dimension: ScopeDimension) -> "ScopeResolver":
        """
        Select every candidate available under the parent selection.

        No-op for churches and classes while the parent selection is empty.
        """
        dimension = ScopeDimension(dimension)
        if dimension == ScopeDimension.DIOCESE:
            return self.set_diocese_selection(self.available(dimension))
        if dimension == ScopeDimension.CHURCH:
            if not self._diocese_ids:
                return self
            return self.set_church_selection(self.available(dimension))
        if not self._church_ids:
            return self
        return self.set_class_selection(self.available(dimension))

    def clear_dimension(self, dimension: ScopeDimension) -> "ScopeResolver":
        """Deselect a dimension and everything below it."""
        dimension = ScopeDimension(dimension)
        if dimension == ScopeDimension.DIOCESE:
            return self.set_diocese_selection([])
        if dimension == ScopeDimension.CHURCH:
            return self.set_church_selection([])
        return self.set_class_selection([])

    def available(self, dimension: ScopeDimension) -> List[str]:
        """Candidates selectable in a dimension given the parent selection."""
        dimension = ScopeDimension(dimension)
        if dimension == ScopeDimension.DIOCESE:
            return [option.id for option in self.catalog.dioceses]
        if dimension == ScopeDimension.CHURCH:
            parents = set(self._diocese_ids)
        else:
            parents = set(self._church_ids)
        return [
            option.id for option in self.catalog.options(dimension)
            if option.parent_id in parents
        ]

    def is_all_selected(self, dimension: ScopeDimension) -> bool:
        """True when a non-empty candidate set is fully selected."""
        candidates = self.available(dimension)
        if not candidates:
            return False
        return set(candidates).issubset(self.selected(dimension))

    def normalize(
        self,
        diocese_ids: Iterable[str],
        church_ids: Iterable[str],
        class_ids: Iterable[str],
    ) -> "ScopeResolver":
        """Apply a full selection top-down, clamping each level."""
        self.set_diocese_selection(diocese_ids)
        self.set_church_selection(church_ids)
        self.set_class_selection(class_ids)
        return self

    def as_dict(self) -> Dict[str, List[str]]:
        return {
            "diocese_ids": self.diocese_ids,
            "church_ids": self.church_ids,
            "class_ids": self.class_ids,
        }

    # ==================== Cascades ====================

    def _prune_churches(self) -> None:
        allowed = set(self._diocese_ids)
        self._church_ids = [
            church_id for church_id in self._church_ids
            if self._church_parents.get(church_id) in allowed
        ]
        self._prune_classes()

    def _prune_classes(self) -> None:
        allowed = set(self._church_ids)
        self._class_ids = [
            class_id for class_id in self._class_ids
            if self._class_parents.get(class_id) in allowed
        ]
