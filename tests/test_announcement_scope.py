import pytest

from app.models.base.enums import ScopeDimension
from app.schemas.announcement import ScopeCatalog, ScopeOption
from app.services.announcement.announcement_scope import ScopeResolver, dedupe


@pytest.fixture
def scope_catalog():
    return ScopeCatalog(
        dioceses=(
            ScopeOption(id="d-north", name="Diocese North"),
            ScopeOption(id="d-south", name="Diocese South"),
        ),
        churches=(
            ScopeOption(id="c-mark", name="St Mark", parent_id="d-north"),
            ScopeOption(id="c-luke", name="St Luke", parent_id="d-north"),
            ScopeOption(id="c-paul", name="St Paul", parent_id="d-south"),
        ),
        classes=(
            ScopeOption(id="k-grade1", name="Grade 1", parent_id="c-mark"),
            ScopeOption(id="k-grade2", name="Grade 2", parent_id="c-mark"),
            ScopeOption(id="k-youth", name="Youth", parent_id="c-paul"),
        ),
    )


@pytest.fixture
def resolver(scope_catalog):
    return ScopeResolver(
        scope_catalog,
        diocese_ids=["d-north", "d-south"],
        church_ids=["c-mark", "c-paul"],
        class_ids=["k-grade1", "k-youth"],
    )


def test_dedupe_keeps_first_seen_order_and_drops_blanks():
    assert dedupe(["b", "a", "", None, "b", "c"]) == ["b", "a", "c"]


def test_clearing_dioceses_empties_lower_levels(resolver):
    resolver.set_diocese_selection([])

    assert resolver.diocese_ids == []
    assert resolver.church_ids == []
    assert resolver.class_ids == []


def test_narrowing_dioceses_prunes_orphaned_children(resolver):
    resolver.set_diocese_selection(["d-north"])

    assert resolver.church_ids == ["c-mark"]
    assert resolver.class_ids == ["k-grade1"]


def test_unknown_diocese_ids_are_dropped(scope_catalog):
    resolver = ScopeResolver(scope_catalog).set_diocese_selection(["d-north", "d-missing"])
    assert resolver.diocese_ids == ["d-north"]


def test_church_selection_is_clamped_to_selected_dioceses(scope_catalog):
    resolver = ScopeResolver(scope_catalog).set_diocese_selection(["d-south"])
    resolver.set_church_selection(["c-mark", "c-paul"])
    assert resolver.church_ids == ["c-paul"]


def test_class_selection_is_clamped_to_selected_churches(scope_catalog):
    resolver = ScopeResolver(scope_catalog).normalize(["d-north"], ["c-mark"], [])
    resolver.set_class_selection(["k-grade2", "k-youth"])
    assert resolver.class_ids == ["k-grade2"]


def test_select_all_churches_without_dioceses_is_noop(scope_catalog):
    resolver = ScopeResolver(scope_catalog)
    resolver.select_all_in_dimension(ScopeDimension.CHURCH)
    assert resolver.church_ids == []


def test_select_all_classes_without_churches_is_noop(scope_catalog):
    resolver = ScopeResolver(scope_catalog).set_diocese_selection(["d-north"])
    resolver.select_all_in_dimension(ScopeDimension.CLASS)
    assert resolver.class_ids == []


def test_select_all_respects_parent_selection(scope_catalog):
    resolver = ScopeResolver(scope_catalog).set_diocese_selection(["d-north"])

    resolver.select_all_in_dimension(ScopeDimension.CHURCH)
    assert resolver.church_ids == ["c-mark", "c-luke"]
    assert resolver.is_all_selected(ScopeDimension.CHURCH)

    resolver.select_all_in_dimension(ScopeDimension.CLASS)
    assert resolver.class_ids == ["k-grade1", "k-grade2"]


def test_select_all_dioceses(scope_catalog):
    resolver = ScopeResolver(scope_catalog).select_all_in_dimension(ScopeDimension.DIOCESE)
    assert resolver.diocese_ids == ["d-north", "d-south"]
    assert resolver.is_all_selected(ScopeDimension.DIOCESE)


def test_available_follows_parent_selection(scope_catalog):
    resolver = ScopeResolver(scope_catalog)
    assert resolver.available(ScopeDimension.DIOCESE) == ["d-north", "d-south"]
    assert resolver.available(ScopeDimension.CHURCH) == []

    resolver.set_diocese_selection(["d-south"])
    assert resolver.available(ScopeDimension.CHURCH) == ["c-paul"]


def test_is_all_selected_is_false_without_candidates(scope_catalog):
    assert ScopeResolver(scope_catalog).is_all_selected(ScopeDimension.CLASS) is False


def test_clear_dimension_cascades_down(resolver):
    resolver.clear_dimension(ScopeDimension.CHURCH)

    assert resolver.diocese_ids == ["d-north", "d-south"]
    assert resolver.church_ids == []
    assert resolver.class_ids == []


def test_normalize_clamps_inconsistent_input(scope_catalog):
    resolver = ScopeResolver(scope_catalog).normalize(
        ["d-south", "d-south"],
        ["c-mark", "c-paul"],
        ["k-grade1", "k-youth"],
    )

    assert resolver.as_dict() == {
        "diocese_ids": ["d-south"],
        "church_ids": ["c-paul"],
        "class_ids": ["k-youth"],
    }
