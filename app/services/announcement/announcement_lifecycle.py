"""
Announcement lifecycle rules.

Status is derived, never stored:

    deactivated  is_deleted is set (timestamps ignored)
    scheduled    now < publish_from
    expired      publish_to is set and now > publish_to
    active       otherwise

Transitions are pure functions returning a new LifecycleState.
"""

from dataclasses import dataclass, fields, replace
from datetime import datetime, timedelta
from typing import Any, Dict, Mapping, Optional, Tuple

from app.models.announcement.announcement import DEACTIVATION_FIELDS
from app.models.base.enums import AnnouncementStatus, PublishRangePreset
from app.utils.datetime_utils import DateTimeHelper

PROTECTED_FIELDS = ("id",)


@dataclass(frozen=True)
class LifecycleState:
    """Snapshot of the fields that drive an announcement's status."""

    publish_from: datetime
    publish_to: Optional[datetime] = None
    is_deleted: bool = False
    deactivated_reason: Optional[str] = None
    deactivated_at: Optional[datetime] = None
    deactivated_by: Optional[str] = None

    @classmethod
    def from_entity(cls, entity: Any) -> "LifecycleState":
        return cls(
            publish_from=DateTimeHelper.ensure_utc(entity.publish_from),
            publish_to=DateTimeHelper.ensure_utc(entity.publish_to),
            is_deleted=bool(entity.is_deleted),
            deactivated_reason=getattr(entity, "deactivated_reason", None),
            deactivated_at=DateTimeHelper.ensure_utc(getattr(entity, "deactivated_at", None)),
            deactivated_by=getattr(entity, "deactivated_by", None),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def compute_status(state: LifecycleState, now: Optional[datetime] = None) -> AnnouncementStatus:
    """Derive the display status at ``now``."""
    if state.is_deleted:
        return AnnouncementStatus.DEACTIVATED

    now = DateTimeHelper.ensure_utc(now) or DateTimeHelper.now()
    publish_from = DateTimeHelper.ensure_utc(state.publish_from)
    publish_to = DateTimeHelper.ensure_utc(state.publish_to)

    if now < publish_from:
        return AnnouncementStatus.SCHEDULED
    if publish_to is not None and now > publish_to:
        return AnnouncementStatus.EXPIRED
    return AnnouncementStatus.ACTIVE


def deactivate(
    state: LifecycleState,
    reason: Optional[str],
    actor: Optional[str],
    now: Optional[datetime] = None,
) -> LifecycleState:
    """
    Soft-delete an announcement.

    Applying it to an already deactivated state re-stamps reason, time and
    actor.
    """
    reason = (reason or "").strip() or None
    return replace(
        state,
        is_deleted=True,
        deactivated_reason=reason,
        deactivated_at=DateTimeHelper.ensure_utc(now) or DateTimeHelper.now(),
        deactivated_by=actor,
    )


def soft_delete(
    state: LifecycleState,
    actor: Optional[str],
    now: Optional[datetime] = None,
) -> LifecycleState:
    """Deactivate without touching a reason recorded earlier."""
    return replace(
        state,
        is_deleted=True,
        deactivated_at=DateTimeHelper.ensure_utc(now) or DateTimeHelper.now(),
        deactivated_by=actor,
    )


def compute_republish_to(
    now: datetime,
    old_from: Optional[datetime],
    old_to: Optional[datetime],
) -> Optional[datetime]:
    """
    Shift the original publish window to start at ``now``.

    Returns None for open-ended or non-positive windows, and ``old_to``
    unchanged when there is no start to measure from.
    """
    if old_to is None:
        return None
    old_to = DateTimeHelper.ensure_utc(old_to)
    if old_from is None:
        return old_to

    duration = old_to - DateTimeHelper.ensure_utc(old_from)
    if duration <= timedelta(0):
        return None
    return DateTimeHelper.ensure_utc(now) + duration


def republish(
    state: LifecycleState,
    now: Optional[datetime] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> Tuple[LifecycleState, Dict[str, Any]]:
    """
    Revive an announcement into a new publish window starting at ``now``.

    Returns the new state and the full update payload. ``overrides`` (an
    edit submitted together with the republish) are merged last and win over
    the computed window; ``id`` is never taken from them.
    """
    now = DateTimeHelper.ensure_utc(now) or DateTimeHelper.now()

    payload: Dict[str, Any] = {"is_deleted": False}
    payload.update({name: None for name in DEACTIVATION_FIELDS})
    payload.update({
        "publish_from": now,
        "publish_to": compute_republish_to(now, state.publish_from, state.publish_to),
    })

    for key, value in (overrides or {}).items():
        if key in PROTECTED_FIELDS:
            continue
        payload[key] = value

    state_fields = {f.name for f in fields(LifecycleState)}
    new_state = replace(
        state,
        **{key: value for key, value in payload.items() if key in state_fields}
    )
    return new_state, payload


def quick_range(publish_from: datetime, preset: PublishRangePreset) -> Optional[datetime]:
    """End of the publish window for one of the form's quick ranges."""
    preset = PublishRangePreset(preset)
    publish_from = DateTimeHelper.ensure_utc(publish_from)

    if preset == PublishRangePreset.NO_END:
        return None
    if preset == PublishRangePreset.WEEK:
        return DateTimeHelper.add_days(publish_from, 7)
    if preset == PublishRangePreset.ONE_MONTH:
        return DateTimeHelper.add_months(publish_from, 1)
    return DateTimeHelper.end_of_month(publish_from)

