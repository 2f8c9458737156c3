"""Bundle uploaded resources for display.

Teachers often upload several files at once (slides, audio, worksheet). The
resource list shows those bundles as one entry:

1. Resources sharing a ``label`` are bundled together, one bundle per label,
   even if the label has a single resource.
2. Everything else is bundled by upload time. Walking the list in order, the
   first unbundled resource becomes an anchor and every later unbundled
   resource uploaded within ``window`` of the anchor joins it. Membership is
   measured against the anchor only, so this is not a transitive cluster:
   two uploads 4 minutes apart can land in different bundles when an
   earlier anchor claims one of them.

Bundles of one from step 2 are returned as the bare resource.
"""

import os
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import timedelta

from lms.core.utils import as_utc

DEFAULT_WINDOW = timedelta(minutes=5)
TITLE_PREFIX_LENGTH = 40


@dataclass(frozen=True)
class ResourceGroup:
    """A derived, never-persisted bundle of resources."""

    id: str
    title: str
    description: str
    resources: tuple = field(default_factory=tuple)
    label: str | None = None

    @property
    def total_size(self) -> int:
        return sum(r.file_size or 0 for r in self.resources)

    @property
    def file_types(self) -> list[str]:
        return sorted({r.type for r in self.resources if r.type})

    @property
    def created_at(self):
        return self.resources[0].created_at if self.resources else None


def _title_prefix(title: str) -> str:
    stem, ext = os.path.splitext(title or "")
    # Only strip things that look like file extensions ("notes.pdf", not "Ch. 3")
    if ext and " " not in ext and len(ext) <= 5:
        title = stem
    title = title.strip()
    if len(title) > TITLE_PREFIX_LENGTH:
        title = title[:TITLE_PREFIX_LENGTH].rstrip() + "..."
    return title


def _make_group(group_id: str, members: list, label: str | None = None) -> ResourceGroup:
    count = len(members)
    types = sorted({r.type for r in members if r.type})
    # The count is always followed by "Resources", even for a one-member label bundle
    return ResourceGroup(
        id=group_id,
        title=f"{count} Resources - {_title_prefix(members[0].title)}",
        description=f"{count} resources ({', '.join(types) or 'no type'})",
        resources=tuple(members),
        label=label,
    )


def _group_by_label(resources: Sequence) -> tuple[list[ResourceGroup], set]:
    buckets: dict[str, list] = {}
    for resource in resources:
        if resource.label:
            buckets.setdefault(resource.label, []).append(resource)

    groups = []
    consumed = set()
    for label, members in buckets.items():
        members = sorted(members, key=lambda r: as_utc(r.created_at))
        groups.append(_make_group(f"label:{label}", members, label=label))
        consumed.update(r.id for r in members)
    return groups, consumed


def group_resources(resources: Sequence, window: timedelta = DEFAULT_WINDOW) -> list:
    """Return label bundles first, then upload-time bundles and singles.

    Every input resource appears exactly once in the output, either bare or
    inside one group. The input is not modified.
    """
    groups, consumed = _group_by_label(resources)
    result: list = list(groups)

    remaining = [r for r in resources if r.id not in consumed]
    for index, anchor in enumerate(remaining):
        if anchor.id in consumed:
            continue
        anchor_time = as_utc(anchor.created_at)
        members = [anchor]
        consumed.add(anchor.id)
        for other in remaining[index + 1:]:
            if other.id in consumed:
                continue
            if abs(as_utc(other.created_at) - anchor_time) <= window:
                members.append(other)
                consumed.add(other.id)

        if len(members) > 1:
            result.append(_make_group(f"window:{anchor.id}", members))
        else:
            result.append(anchor)

    return result
