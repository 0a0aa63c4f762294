import enum


class Role(str, enum.Enum):
    dispatcher = "dispatcher"
    supervisor = "supervisor"
    manager = "manager"

    @property
    def rank(self) -> int:
        return _ROLE_RANK[self]

    def at_least(self, other: "Role") -> bool:
        """True when this role carries at least the privileges of `other`."""
        return self.rank >= other.rank

    @property
    def is_supervisor(self) -> bool:
        return self.at_least(Role.supervisor)


_ROLE_RANK = {
    Role.dispatcher: 0,
    Role.supervisor: 1,
    Role.manager: 2,
}


class ShiftPattern(str, enum.Enum):
    four_by_ten = "4x10"
    three_by_twelve_plus_four = "3x12+4"


class ShiftCategory(str, enum.Enum):
    early = "early"
    day = "day"
    swing = "swing"
    graveyard = "graveyard"


class ShiftStatus(str, enum.Enum):
    scheduled = "scheduled"
    in_progress = "in_progress"
    completed = "completed"
    missed = "missed"
    cancelled = "cancelled"


# scheduled -> in_progress -> completed | missed; cancelled from any open state
_STATUS_TRANSITIONS = {
    ShiftStatus.scheduled: {ShiftStatus.in_progress, ShiftStatus.missed, ShiftStatus.cancelled},
    ShiftStatus.in_progress: {ShiftStatus.completed, ShiftStatus.missed, ShiftStatus.cancelled},
    ShiftStatus.completed: set(),
    ShiftStatus.missed: set(),
    ShiftStatus.cancelled: set(),
}


def can_transition(current: ShiftStatus, new: ShiftStatus) -> bool:
    return new in _STATUS_TRANSITIONS[current]


class TimeOffType(str, enum.Enum):
    vacation = "vacation"
    sick = "sick"
    personal = "personal"
    other = "other"


class TimeOffStatus(str, enum.Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class ConflictType(str, enum.Enum):
    overlap = "overlap"
    rest_period = "rest_period"
    hours_exceeded = "hours_exceeded"
    pattern_violation = "pattern_violation"

    @property
    def is_hard(self) -> bool:
        return self in (ConflictType.overlap, ConflictType.rest_period)
