"""Snapshot diffing: turn two process tables into lifecycle events."""

from typing import Iterable, List

from ..models.filter_policy import FilterPolicy
from ..models.lifecycle_event import LifecycleAction, LifecycleEvent
from ..models.process_record import ProcessSnapshot


def diff_snapshots(
    previous: ProcessSnapshot, current: ProcessSnapshot
) -> List[LifecycleEvent]:
    """Compare two snapshots and return created and closed events.

    Created records come from ``current``; closed records come from
    ``previous`` since the process no longer exists to be queried. A pid
    present in both snapshots yields nothing, even if a different image now
    runs under it. Events carry the timestamp of ``current``.

    Args:
        previous: Snapshot from the prior cycle
        current: Snapshot just taken

    Returns:
        Created events (ascending pid) followed by closed events
    """
    previous_ids = previous.ids()
    current_ids = current.ids()
    timestamp = current.taken_at

    events = [
        LifecycleEvent(
            timestamp=timestamp,
            process=current.records[pid],
            action=LifecycleAction.CREATED,
        )
        for pid in sorted(current_ids - previous_ids)
    ]
    events.extend(
        LifecycleEvent(
            timestamp=timestamp,
            process=previous.records[pid],
            action=LifecycleAction.CLOSED,
        )
        for pid in sorted(previous_ids - current_ids)
    )
    return events


def apply_filter(
    events: Iterable[LifecycleEvent], policy: FilterPolicy
) -> List[LifecycleEvent]:
    """Keep only the events whose process the policy allows."""
    return [event for event in events if policy.allows(event.process)]
