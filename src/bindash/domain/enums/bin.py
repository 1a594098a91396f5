from enum import Enum


class BinStatus(str, Enum):
    EMPTY = "empty"
    HALF = "half"
    FULL = "full"
    MAINTENANCE = "maintenance"


class CollectionStatus(str, Enum):
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    MISSED = "missed"
