from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import List, Optional

from pymongo import DESCENDING, ReturnDocument

CATEGORIES = [
    "Work",
    "Personal",
    "Health",
    "Finance",
    "Shopping",
    "Learning",
    "Other",
]

# Mongo keeps datetimes at millisecond precision.
TIMESTAMP_RESOLUTION = timedelta(milliseconds=1)

DAY_FORMAT = "%Y-%m-%d"
# Attempts at a compare-and-set edit before giving up on a busy record.
UPDATE_ATTEMPTS = 5

LIST_ORDER = [("date", DESCENDING), ("created_at", DESCENDING), ("_id", DESCENDING)]
DAY_ORDER = [("created_at", DESCENDING), ("_id", DESCENDING)]


def utcnow() -> datetime:
    """Naive UTC now, truncated to what Mongo can store."""
    now = datetime.now(timezone.utc).replace(tzinfo=None)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def next_updated_at(previous: Optional[datetime]) -> datetime:
    """Timestamp for an edit; always later than ``previous``."""
    now = utcnow()
    if previous is not None and now <= previous:
        return previous + TIMESTAMP_RESOLUTION
    return now


def parse_day(value) -> Optional[date]:
    """Parse a strict YYYY-MM-DD day; compact and ISO-week forms are rejected."""
    try:
        return datetime.strptime(str(value).strip(), DAY_FORMAT).date()
    except ValueError:
        return None


@dataclass
class Task:
    description: str
    date: str  # YYYY-MM-DD
    category: str
    created_at: datetime
    updated_at: datetime
    id: Optional[str] = None

    @classmethod
    def from_doc(cls, doc) -> "Task":
        return cls(
            id=str(doc["_id"]),
            description=doc.get("description") or "",
            date=doc.get("date") or "",
            category=doc.get("category") or "",
            created_at=doc["created_at"],
            updated_at=doc["updated_at"],
        )

    @property
    def day(self) -> Optional[date]:
        return parse_day(self.date)

    def to_dict(self):
        return {
            "id": self.id,
            "description": self.description,
            "date": self.date,
            "category": self.category,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }


def new_task_doc(description: str, day: str, category: str):
    now = utcnow()
    return {
        "description": description,
        "date": day,
        "category": category,
        "created_at": now,
        "updated_at": now,
    }


def fetch_tasks(collection, day: Optional[str] = None) -> List[Task]:
    """All tasks, newest date first; a single day is ordered by creation."""
    if day:
        cursor = collection.find({"date": day}).sort(DAY_ORDER)
    else:
        cursor = collection.find({}).sort(LIST_ORDER)
    return [Task.from_doc(doc) for doc in cursor]


class ConcurrentUpdateError(RuntimeError):
    """The record kept changing underneath a description edit."""


def update_description(collection, oid, description: str):
    """Replace ``description`` and advance ``updated_at``.

    The write only lands if ``updated_at`` still holds the value it was
    computed from, so concurrent edits never share a timestamp. Returns the
    updated document, or None when the task does not exist.
    """
    for _ in range(UPDATE_ATTEMPTS):
        current = collection.find_one({"_id": oid}, {"updated_at": 1})
        if current is None:
            return None
        previous = current.get("updated_at")
        doc = collection.find_one_and_update(
            {"_id": oid, "updated_at": previous},
            {"$set": {"description": description, "updated_at": next_updated_at(previous)}},
            return_document=ReturnDocument.AFTER,
        )
        if doc is not None:
            return doc
    raise ConcurrentUpdateError(f"Task {oid} changed during {UPDATE_ATTEMPTS} update attempts")
