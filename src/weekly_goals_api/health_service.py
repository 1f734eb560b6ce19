"""
Body-weight tracking fed by a health app export webhook.

The export posts named metric series (``weight_body_mass``,
``body_fat_percentage``, ``lean_body_mass``) with dated samples. Samples are
merged by calendar day into one weight entry per day; a day that already has
an entry is overwritten, so re-sending the same export is harmless.
"""

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal

from sqlmodel import Session, select

from weekly_goals_api import dates
from weekly_goals_api.common.error_handlers import ValidationError, safe_execute
from weekly_goals_api.models import (
    HealthMetric,
    HealthSyncPayload,
    HealthSyncResponse,
    UserProfile,
    WeightEntry,
)

logger = logging.getLogger(__name__)

DEFAULT_USER_KEY = "default"
DEFAULT_HEIGHT_INCHES = Decimal("70")
DEFAULT_HISTORY_DAYS = 90

WEIGHT_METRIC = "weight_body_mass"
BODY_FAT_METRIC = "body_fat_percentage"
LEAN_MASS_METRIC = "lean_body_mass"

_ONE_DECIMAL = Decimal("0.1")


def _one_decimal(value: float | Decimal) -> Decimal:
    return Decimal(str(value)).quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP)


def calculate_bmi(weight_lbs: float | Decimal, height_inches: float | Decimal) -> Decimal:
    """BMI from imperial units, rounded to one decimal"""
    weight = Decimal(str(weight_lbs))
    height = Decimal(str(height_inches))
    if height <= 0:
        raise ValueError("height_inches must be positive")
    return _one_decimal(weight / (height * height) * 703)


def sample_day(value: str) -> date:
    """Calendar day of an export timestamp such as ``2026-01-05 07:12:00 -0500``"""
    try:
        return date.fromisoformat(value.split(" ")[0])
    except ValueError as e:
        raise ValidationError(f"Invalid sample date: {value!r}", "date") from e


@dataclass
class DailyMeasurements:
    weight: float | None = None
    body_fat_percentage: float | None = None
    muscle_mass: float | None = None


def group_by_day(metrics: list[HealthMetric]) -> dict[date, DailyMeasurements]:
    """Merge the supported metric series into per-day measurements"""
    fields = {
        WEIGHT_METRIC: "weight",
        BODY_FAT_METRIC: "body_fat_percentage",
        LEAN_MASS_METRIC: "muscle_mass",
    }
    days: dict[date, DailyMeasurements] = {}
    for metric in metrics:
        field = fields.get(metric.name)
        if field is None:
            continue
        for point in metric.data:
            measurements = days.setdefault(sample_day(point.date), DailyMeasurements())
            setattr(measurements, field, point.qty)
    return days


class HealthService:
    """Weight history queries and health export ingestion"""

    def __init__(self, user_key: str = DEFAULT_USER_KEY):
        self.user_key = user_key

    def get_height_inches(self, session: Session) -> Decimal:
        profile = session.exec(
            select(UserProfile).where(UserProfile.user_key == self.user_key)
        ).first()
        if profile is not None and profile.height_inches:
            return Decimal(profile.height_inches)
        return DEFAULT_HEIGHT_INCHES

    def get_weight_entries(
        self,
        session: Session,
        days: int = DEFAULT_HISTORY_DAYS,
        today: date | None = None,
    ) -> list[WeightEntry]:
        """
        Weight history, newest first.

        Args:
            session: Database session
            days: Look-back window in days; zero or less returns everything
            today: Reference date for the window, defaults to today in UTC
        """
        statement = select(WeightEntry)
        if days > 0:
            since = (today or dates.today_utc()) - timedelta(days=days)
            statement = statement.where(WeightEntry.recorded_on >= since)
        statement = statement.order_by(WeightEntry.recorded_on.desc())
        return list(session.exec(statement).all())

    def sync_health_data(
        self, session: Session, payload: HealthSyncPayload
    ) -> HealthSyncResponse:
        """
        Upsert one weight entry per day found in a health export.

        Days with body fat or lean mass samples but no weight are ignored.

        Raises:
            ValidationError: The payload carries no metrics or a sample date
                cannot be parsed
        """
        metrics = payload.data.metrics if payload.data else None
        if not metrics:
            raise ValidationError("No metrics found in payload", "metrics")

        weight_metric = next((m for m in metrics if m.name == WEIGHT_METRIC), None)
        if weight_metric is None or not weight_metric.data:
            return HealthSyncResponse(
                message="No weight data to process", inserted=0, updated=0
            )

        measurements = {
            day: values
            for day, values in group_by_day(metrics).items()
            if values.weight
        }
        height = self.get_height_inches(session)

        def sync_operation():
            existing = {
                entry.recorded_on: entry
                for entry in session.exec(
                    select(WeightEntry).where(
                        WeightEntry.user_key == self.user_key,
                        WeightEntry.recorded_on.in_(list(measurements)),
                    )
                ).all()
            }
            inserted = updated = 0
            for day, values in sorted(measurements.items()):
                entry = existing.get(day)
                if entry is None:
                    entry = WeightEntry(
                        user_key=self.user_key, recorded_on=day, weight=Decimal(0)
                    )
                    inserted += 1
                else:
                    updated += 1
                entry.weight = _one_decimal(values.weight)
                entry.body_fat_percentage = (
                    _one_decimal(values.body_fat_percentage)
                    if values.body_fat_percentage
                    else None
                )
                entry.muscle_mass = (
                    _one_decimal(values.muscle_mass) if values.muscle_mass else None
                )
                entry.bmi = calculate_bmi(values.weight, height)
                session.add(entry)
            session.flush()
            return HealthSyncResponse(
                message="Health data synced", inserted=inserted, updated=updated
            )

        result = safe_execute(session, sync_operation)
        logger.info(
            f"⚖️ Health sync: {result.inserted} inserted, {result.updated} updated"
        )
        return result


health_service = HealthService()
