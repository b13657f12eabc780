"""Profile and log repositories on top of a document store."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from foodlens.adapters.document_store import DocumentStore
from foodlens.domain.models import LogRecord, Profile
from foodlens.domain.progression import BadgeId
from foodlens.services.tracking import LogRepository, ProfileRepository


@dataclass
class DocumentProfileRepository(ProfileRepository):
    """Stores the profile as a single document."""

    store: DocumentStore
    namespace: str = "foodlens"

    @property
    def key(self) -> str:
        """Document key holding the profile."""
        return f"{self.namespace}:user"

    def get_profile(self) -> Profile | None:
        """Return the stored profile, if any."""
        document = self.store.get(self.key)
        if not isinstance(document, dict):
            return None
        return profile_from_document(document)

    def save_profile(self, profile: Profile) -> None:
        """Replace the stored profile."""
        self.store.put(self.key, profile_to_document(profile))

    def delete_profile(self) -> None:
        """Remove the stored profile."""
        self.store.delete(self.key)


@dataclass
class DocumentLogRepository(LogRepository):
    """Stores all log records as one ordered document."""

    store: DocumentStore
    namespace: str = "foodlens"

    @property
    def key(self) -> str:
        """Document key holding the log collection."""
        return f"{self.namespace}:logs"

    def list_logs(self) -> list[LogRecord]:
        """Return all log records in insertion order."""
        document = self.store.get(self.key)
        if not isinstance(document, list):
            return []
        return [log_from_document(row) for row in document]

    def get_log(self, log_id: UUID) -> LogRecord | None:
        """Return a log record by id."""
        for log in self.list_logs():
            if log.id == log_id:
                return log
        return None

    def append_log(self, record: LogRecord) -> None:
        """Append a log record."""
        rows = self._rows()
        rows.append(log_to_document(record))
        self.store.put(self.key, rows)

    def delete_log(self, log_id: UUID) -> bool:
        """Delete a log record by id and report whether it existed."""
        rows = self._rows()
        remaining = [row for row in rows if row.get("id") != str(log_id)]
        if len(remaining) == len(rows):
            return False
        self.store.put(self.key, remaining)
        return True

    def clear_logs(self) -> None:
        """Remove every log record."""
        self.store.delete(self.key)

    def _rows(self) -> list[dict[str, object]]:
        document = self.store.get(self.key)
        return list(document) if isinstance(document, list) else []


def profile_to_document(profile: Profile) -> dict[str, object]:
    """Serialize a profile, including derived display fields."""
    bmi_category = profile.bmi_category
    return {
        "username": profile.username,
        "email": profile.email,
        "dailyCalories": profile.daily_calories,
        "activityLevel": profile.activity_level,
        "age": profile.age,
        "totalXP": profile.total_xp,
        "currentLevel": profile.current_level,
        "badges": [badge.value for badge in profile.badges],
        "streak": profile.streak_length,
        "lastHealthyDate": profile.last_qualifying_date.isoformat()
        if profile.last_qualifying_date
        else None,
        "weight": profile.weight,
        "weightUnit": profile.weight_unit,
        "height": profile.height,
        "heightUnit": profile.height_unit,
        "bmi": profile.bmi,
        "bmiCategory": bmi_category.value if bmi_category else None,
    }


def profile_from_document(document: dict[str, object]) -> Profile:
    """Parse a stored profile; derived fields are recomputed, not read."""
    last_date = document.get("lastHealthyDate")
    badges = []
    for raw in document.get("badges") or []:
        try:
            badges.append(BadgeId(raw))
        except ValueError:
            continue
    return Profile(
        username=str(document.get("username") or ""),
        email=str(document.get("email") or ""),
        daily_calories=int(document.get("dailyCalories") or 2200),
        activity_level=document.get("activityLevel"),
        age=_optional_int(document.get("age")),
        total_xp=int(document.get("totalXP") or 0),
        badges=tuple(dict.fromkeys(badges)),
        streak_length=int(document.get("streak") or 0),
        last_qualifying_date=date.fromisoformat(last_date) if last_date else None,
        weight=_optional_float(document.get("weight")),
        weight_unit=str(document.get("weightUnit") or "kg"),
        height=_optional_float(document.get("height")),
        height_unit=str(document.get("heightUnit") or "cm"),
    )


def log_to_document(record: LogRecord) -> dict[str, object]:
    """Serialize a log record."""
    return {
        "id": str(record.id),
        "timestamp": record.timestamp.isoformat(),
        "dish": record.dish_name,
        "calories": record.calories,
        "protein": record.protein,
        "carbs": record.carbs,
        "fat": record.fat,
        "healthScore": record.health_score,
        "xp": record.xp_awarded,
    }


def log_from_document(row: dict[str, object]) -> LogRecord:
    """Parse a stored log record."""
    return LogRecord(
        id=UUID(str(row["id"])),
        timestamp=datetime.fromisoformat(str(row["timestamp"])),
        dish_name=str(row.get("dish", "")),
        calories=float(row.get("calories") or 0.0),
        protein=float(row.get("protein") or 0.0),
        carbs=float(row.get("carbs") or 0.0),
        fat=float(row.get("fat") or 0.0),
        health_score=int(row.get("healthScore") or 0),
        xp_awarded=int(row.get("xp") or 0),
    )


def _optional_float(value: object) -> float | None:
    if isinstance(value, int | float):
        return float(value)
    return None


def _optional_int(value: object) -> int | None:
    if isinstance(value, int | float):
        return int(value)
    return None
