from datetime import datetime, timezone

import pytest

from app.models.base.enums import AnnouncementDisplayType, ScopeDimension, UserRole
from app.models.user import User
from app.schemas.announcement import ScopeResolveRequest
from app.services.announcement import audience_matches, display_type_for


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


NOW = utc(2024, 1, 5)
UNSCOPED = {"diocese_ids": [], "church_ids": [], "class_ids": []}


def feed_titles(result):
    assert result.is_success, result.message
    return [item.title for item in result.data.items]


class TestDisplayType:
    @pytest.mark.parametrize(
        "types,expected",
        [
            (["urgent"], AnnouncementDisplayType.URGENT),
            (["class", "urgent"], AnnouncementDisplayType.URGENT),
            (["class"], AnnouncementDisplayType.CLASS),
            (["event"], AnnouncementDisplayType.GENERAL),
            (["Urgent"], AnnouncementDisplayType.GENERAL),
            ([], AnnouncementDisplayType.GENERAL),
            (None, AnnouncementDisplayType.GENERAL),
        ],
    )
    def test_display_type(self, types, expected):
        assert display_type_for(types) == expected


class TestAudienceMatches:
    def make_user(self, **fields):
        data = {"id": "u-x", "role": UserRole.STUDENT}
        data.update(fields)
        return User(**data)

    def test_role_must_be_targeted(self):
        teacher = self.make_user(role=UserRole.TEACHER)
        assert audience_matches(["student", "parent"], UNSCOPED, teacher) is False

    def test_empty_role_list_targets_everyone(self):
        teacher = self.make_user(role=UserRole.TEACHER)
        assert audience_matches([], UNSCOPED, teacher) is True

    def test_unscoped_reaches_users_without_placement(self):
        assert audience_matches(["student"], UNSCOPED, self.make_user()) is True

    def test_class_scope_overrides_broader_dimensions(self):
        scope = {"diocese_ids": ["d-north"], "church_ids": ["c-mark"], "class_ids": ["k-grade1"]}
        same_church_other_class = self.make_user(
            diocese_id="d-north", church_id="c-mark", class_id="k-grade2"
        )
        in_class = self.make_user(diocese_id="d-north", church_id="c-mark", class_id="k-grade1")

        assert audience_matches(["student"], scope, same_church_other_class) is False
        assert audience_matches(["student"], scope, in_class) is True

    def test_church_scope_applies_when_no_class_is_selected(self):
        scope = {"diocese_ids": ["d-north"], "church_ids": ["c-luke"], "class_ids": []}
        assert audience_matches(["student"], scope, self.make_user(diocese_id="d-north", church_id="c-luke")) is True
        assert audience_matches(["student"], scope, self.make_user(diocese_id="d-north", church_id="c-mark")) is False


class TestFeed:
    def test_feed_applies_roles_and_most_specific_scope(
        self, targeting_service, users, announcement_factory
    ):
        announcement_factory(title="Everyone", publish_from=utc(2024, 1, 1))
        announcement_factory(
            title="South", publish_from=utc(2024, 1, 2), scope={"diocese_ids": ["d-south"]}
        )
        announcement_factory(
            title="St Mark",
            publish_from=utc(2024, 1, 3),
            scope={"diocese_ids": ["d-north"], "church_ids": ["c-mark"]},
        )
        announcement_factory(
            title="Grade 1",
            publish_from=utc(2024, 1, 4),
            scope={"diocese_ids": ["d-north"], "church_ids": ["c-mark"], "class_ids": ["k-grade1"]},
        )
        announcement_factory(
            title="Teachers", publish_from=utc(2024, 1, 4), target_roles=["teacher"]
        )

        assert feed_titles(targeting_service.feed_for_user(users["student"], NOW)) == [
            "Grade 1", "St Mark", "Everyone",
        ]
        assert feed_titles(targeting_service.feed_for_user(users["parent"], NOW)) == [
            "St Mark", "Everyone",
        ]
        assert feed_titles(targeting_service.feed_for_user(users["luke_student"], NOW)) == [
            "Everyone",
        ]
        assert feed_titles(targeting_service.feed_for_user(users["south_student"], NOW)) == [
            "South", "Everyone",
        ]
        assert feed_titles(targeting_service.feed_for_user(users["teacher"], NOW)) == [
            "Teachers",
        ]

    def test_feed_only_contains_active_announcements(
        self, targeting_service, users, announcement_factory
    ):
        announcement_factory(title="Active", publish_from=utc(2024, 1, 1), publish_to=utc(2024, 1, 8))
        announcement_factory(title="Scheduled", publish_from=utc(2024, 2, 1))
        announcement_factory(title="Expired", publish_from=utc(2023, 12, 1), publish_to=utc(2023, 12, 8))
        announcement_factory(title="Deactivated", publish_from=utc(2024, 1, 1), is_deleted=True)

        assert feed_titles(targeting_service.feed_for_user(users["student"], NOW)) == ["Active"]

    def test_feed_items_carry_display_type(self, targeting_service, users, announcement_factory):
        announcement_factory(title="Storm", types=["urgent", "class"])

        item = targeting_service.feed_for_user(users["student"], NOW).data.items[0]

        assert item.display_type == AnnouncementDisplayType.URGENT
        assert item.is_read is False

    def test_type_filter_and_unread_only(self, targeting_service, users, announcement_factory):
        urgent = announcement_factory(title="Urgent", publish_from=utc(2024, 1, 3), types=["urgent"])
        announcement_factory(title="Event", publish_from=utc(2024, 1, 2), types=["event"])
        announcement_factory(title="Plain", publish_from=utc(2024, 1, 1))
        targeting_service.mark_viewed(users["student"], [urgent.id], now=NOW)

        filtered = targeting_service.feed_for_user(users["student"], NOW, types=["urgent", "event"])
        assert feed_titles(filtered) == ["Urgent", "Event"]
        # unread count ignores the filters
        assert filtered.data.unread_count == 2

        unread = targeting_service.feed_for_user(users["student"], NOW, unread_only=True)
        assert feed_titles(unread) == ["Event", "Plain"]
        assert unread.data.total == 2


class TestReadTracking:
    def test_mark_viewed_and_unread_count(self, targeting_service, users, announcement_factory):
        first = announcement_factory(title="First")
        second = announcement_factory(title="Second")

        assert targeting_service.unread_count(users["student"], NOW).data.unread_count == 2

        result = targeting_service.mark_viewed(users["student"], [first.id, first.id], now=NOW)
        assert result.data.marked == [first.id]

        again = targeting_service.mark_viewed(users["student"], [first.id], now=NOW)
        assert again.data.marked == []

        counts = targeting_service.unread_count(users["student"], NOW).data
        assert counts.unread_count == 1
        assert counts.viewed_total == 1
        items = {item.id: item for item in targeting_service.feed_for_user(users["student"], NOW).data.items}
        assert items[first.id].is_read is True
        assert items[second.id].is_read is False

    def test_read_state_is_per_user(self, targeting_service, users, announcement_factory):
        entity = announcement_factory()
        targeting_service.mark_viewed(users["student"], [entity.id], now=NOW)

        assert targeting_service.unread_count(users["parent"], NOW).data.unread_count == 1

    def test_ids_outside_the_feed_are_ignored(self, targeting_service, users, announcement_factory):
        hidden = announcement_factory(title="Teachers only", target_roles=["teacher"])

        result = targeting_service.mark_viewed(users["student"], [hidden.id, "missing"], now=NOW)

        assert result.data.marked == []


class TestScopePreview:
    def test_select_all_runs_top_down(self, targeting_service, catalog):
        result = targeting_service.preview_scope(
            ScopeResolveRequest(
                diocese_ids=["d-north"],
                select_all=[ScopeDimension.CLASS, ScopeDimension.CHURCH],
            )
        )

        assert result.is_success
        data = result.data
        assert data.church_ids == ["c-luke", "c-mark"]
        assert data.class_ids == ["k-grade1", "k-grade2"]
        assert data.all_selected == {"diocese": False, "church": True, "class": True}
        assert data.available["church"] == ["c-luke", "c-mark"]

    def test_clear_is_applied_before_select_all(self, targeting_service, catalog):
        result = targeting_service.preview_scope(
            ScopeResolveRequest(
                diocese_ids=["d-north"],
                church_ids=["c-mark"],
                class_ids=["k-grade1"],
                clear=[ScopeDimension.DIOCESE],
                select_all=[ScopeDimension.CHURCH],
            )
        )

        assert result.data.diocese_ids == []
        assert result.data.church_ids == []
        assert result.data.class_ids == []
        assert result.data.available["diocese"] == ["d-north", "d-south"]

    def test_inconsistent_selection_is_clamped(self, targeting_service, catalog):
        result = targeting_service.preview_scope(
            ScopeResolveRequest(diocese_ids=["d-south"], church_ids=["c-mark"], class_ids=["k-grade1"])
        )

        assert result.data.diocese_ids == ["d-south"]
        assert result.data.church_ids == []
        assert result.data.class_ids == []
