"""Which assignments a student can see right now.

Pure functions over already-loaded rows. ``now`` is always supplied by the
caller so results are reproducible in tests.
"""

from collections.abc import Iterable, Collection
from datetime import datetime

from lms.core.utils import as_utc


def is_visible(now: datetime, available_from: datetime | None, available_to: datetime | None) -> bool:
    """True when ``now`` falls inside the (inclusive, optionally open) window."""
    now = as_utc(now)
    if available_from is not None and as_utc(available_from) > now:
        return False
    if available_to is not None and as_utc(available_to) < now:
        return False
    return True


def _sort_key(assignment):
    course = assignment.course
    unit = assignment.unit
    created_at = assignment.created_at
    return (
        course.name if course is not None else "",
        # Assignments without a unit sort after those with one
        (unit is None, unit.order if unit is not None else 0),
        (created_at is None, as_utc(created_at) if created_at is not None else datetime.min),
    )


def sort_assignments(assignments: Iterable) -> list:
    """Course name, then unit order (unit-less last), then creation time. Stable."""
    return sorted(assignments, key=_sort_key)


def visible_assignments(
    assignments: Iterable,
    enrolled_course_ids: Collection[int],
    organization_id: int | None,
    now: datetime,
) -> list:
    """Filter a catalog down to what an enrolled student may see.

    An assignment is kept when it is published, belongs to one of the
    student's enrolled courses, its course is in the student's organization,
    and ``now`` is inside its availability window.

    The result is ordered by course name, unit order (unit-less last) and
    creation time; the sort is stable so ties keep their input order.
    """
    if not enrolled_course_ids:
        return []

    enrolled = set(enrolled_course_ids)
    visible = [
        a for a in assignments
        if a.published
        and a.course_id in enrolled
        and a.course is not None
        and a.course.organization_id == organization_id
        and is_visible(now, a.available_from, a.available_to)
    ]
    return sort_assignments(visible)
