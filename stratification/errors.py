"""
Exceptions and warnings raised by the stratification library.
"""

from typing import Iterable


class PreconditionError(ValueError):
    """Malformed design inputs (shapes, ratios, number of groups)."""


class InvalidGroupIdError(ValueError):
    """
    One or more fixed group ids fall outside 1..n_groups.

    All offending ids are reported at once and kept in ``group_ids``.
    """

    def __init__(self, group_ids: Iterable[int], n_groups: int):
        self.group_ids = sorted(set(int(g) for g in group_ids))
        self.n_groups = n_groups
        ids = ', '.join(str(g) for g in self.group_ids)
        noun = 'Group' if len(self.group_ids) == 1 else 'Groups'
        verb = 'is' if len(self.group_ids) == 1 else 'are'
        super().__init__(
            f"{noun} {ids} {verb} not compatible with the specified group_ratios "
            f"(valid ids are 1..{n_groups})"
        )


class CapacityExceededWarning(UserWarning):
    """Some strata have more geos fixed to a group than its ratio allows."""
