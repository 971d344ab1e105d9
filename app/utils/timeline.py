"""
Milestone-annotated progress timeline.
"""
from typing import Iterable, List

MILESTONE_STEP = 10
COMPLETE = 100


def build_timeline(updates: Iterable) -> List[dict]:
    """
    Annotate chronologically ordered progress updates.

    ``progress_change`` is the difference to the previous update; the first
    update has no baseline so its change is its own percent. An entry is a
    milestone when it jumps by MILESTONE_STEP or more, or reaches 100%.

    Args:
        updates: ProgressUpdate-like objects ordered by date ascending

    Returns:
        One dict per update, in input order
    """
    timeline = []
    previous = None
    for update in updates:
        percent = update.progress_percent
        change = percent - previous if previous is not None else percent
        timeline.append({
            "id": update.id,
            "date": update.date,
            "description": update.description,
            "progress_percent": percent,
            "progress_change": change,
            "images": list(update.images or []),
            "is_milestone": change >= MILESTONE_STEP or percent == COMPLETE,
        })
        previous = percent
    return timeline


def milestones(timeline: List[dict]) -> List[dict]:
    return [entry for entry in timeline if entry["is_milestone"]]
