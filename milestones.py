"""
Milestone detection for streak and points transitions, and rank changes.

A milestone m is crossed when before < m <= after. One state change reports at
most one milestone: the largest one crossed.
"""

from typing import Iterable, Optional, Tuple

from exceptions import ConfigurationError, MalformedInputError
from models import Metric, UserMetricTransition


class MilestoneSet:
    """An immutable, strictly ascending set of positive integer thresholds."""

    def __init__(self, values: Iterable[int]):
        values = tuple(values)
        if not values:
            raise ConfigurationError("Milestone set is empty.")
        for value in values:
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                raise ConfigurationError(f"Milestone {value!r} is not a positive integer.")
        if any(a >= b for a, b in zip(values, values[1:])):
            raise ConfigurationError(f"Milestones must be strictly ascending: {values}")
        self._values = values

    @property
    def values(self) -> Tuple[int, ...]:
        return self._values

    def __iter__(self):
        return iter(self._values)

    def __len__(self):
        return len(self._values)

    def __contains__(self, value):
        return value in self._values

    def __repr__(self):
        return f"MilestoneSet{self._values}"


# --- STATIC MILESTONE CONFIGURATION ---
STREAK_MILESTONES = MilestoneSet([3, 5, 7, 10, 14, 21, 30, 50, 100, 200])
POINTS_MILESTONES = MilestoneSet([100, 250, 500, 750, 1000, 2500, 5000, 10000])


def detect_milestone(before: int, after: int, milestones: MilestoneSet) -> Optional[int]:
    """
    Returns the largest milestone crossed going from `before` to `after`, or None.

    A decrease or an unchanged value never produces a milestone.
    """
    if after <= before:
        return None
    crossed = None
    for milestone in milestones:
        if milestone > after:
            break
        if milestone > before:
            crossed = milestone
    return crossed


def detect_transition(transition: UserMetricTransition, milestones: MilestoneSet) -> Optional[int]:
    if transition.metric == Metric.RANK:
        raise MalformedInputError("Rank transitions have no numeric milestones.")
    return detect_milestone(transition.before, transition.after, milestones)


def detect_rank_change(transition: UserMetricTransition) -> Optional[Tuple[str, str]]:
    """(old_rank, new_rank) when the label changed, otherwise None."""
    if transition.metric != Metric.RANK:
        raise MalformedInputError(f"Expected a rank transition, got {transition.metric.value}.")
    if transition.before == transition.after:
        return None
    return transition.before, transition.after
