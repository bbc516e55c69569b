"""
Training Service - handles the trainer's calendar: bookings, conflict checks
and the month / week / day views.
"""
from typing import Optional

from .base import (
    HTTPException, uuid, logging, date, datetime,
    get_db_session, TrainingORM, validation_error
)
from . import calendar_helper
from .validation import validate_training, is_valid_time

logger = logging.getLogger("gymbucket")

MIN_CALENDAR_YEAR = 1900
MAX_CALENDAR_YEAR = 2999


class TrainingService:
    """Service for managing trainings on a trainer's calendar."""

    def _training_to_dict(self, t: TrainingORM) -> dict:
        return {
            "id": t.id,
            "date": t.date,
            "start_time": t.start_time,
            "end_time": calendar_helper.training_end_time(t.start_time, t.duration),
            "duration": t.duration,
            "duration_label": calendar_helper.format_duration(t.duration),
            "client_name": t.client_name,
            "location": t.location,
            "notes": t.notes or "",
            "status": t.status,
            "created_at": t.created_at,
            "updated_at": t.updated_at
        }

    def _load_trainings(self, db, trainer_id: str) -> list:
        trainings = db.query(TrainingORM).filter(
            TrainingORM.trainer_id == trainer_id
        ).order_by(TrainingORM.date, TrainingORM.start_time).all()
        return [self._training_to_dict(t) for t in trainings]

    def _parse_date(self, value: str):
        try:
            parsed = calendar_helper.parse_date(value)
        except (TypeError, ValueError):
            raise HTTPException(status_code=400, detail=f"Invalid date: {value}")
        self._check_year(parsed.year)
        return parsed

    def _check_year(self, year: int):
        if not MIN_CALENDAR_YEAR <= year <= MAX_CALENDAR_YEAR:
            raise HTTPException(
                status_code=400,
                detail=f"Year must be between {MIN_CALENDAR_YEAR} and {MAX_CALENDAR_YEAR}"
            )

    def get_trainings(self, trainer_id: str, client: Optional[str] = None,
                      status: Optional[str] = None, on_date: Optional[str] = None) -> list:
        """List the trainer's trainings, optionally filtered by client, status and date."""
        db = get_db_session()
        try:
            trainings = self._load_trainings(db, trainer_id)
            if on_date:
                trainings = calendar_helper.trainings_for_date(trainings, self._parse_date(on_date))
            return calendar_helper.filter_trainings(trainings, client, status)
        finally:
            db.close()

    def get_training(self, training_id: str, trainer_id: str) -> dict:
        db = get_db_session()
        try:
            training = db.query(TrainingORM).filter(
                TrainingORM.id == training_id,
                TrainingORM.trainer_id == trainer_id
            ).first()
            if not training:
                raise HTTPException(status_code=404, detail="Training not found")
            return self._training_to_dict(training)
        finally:
            db.close()

    def create_training(self, data: dict, trainer_id: str, today: Optional[date] = None) -> dict:
        """Validate and book a new training."""
        db = get_db_session()
        try:
            existing = self._load_trainings(db, trainer_id)
            errors = validate_training(data, existing, today=today)
            if errors:
                logger.info(f"Rejected training for trainer {trainer_id}: {errors}")
                raise validation_error("Training validation failed", errors)

            now = datetime.utcnow().isoformat()
            training = TrainingORM(
                id=str(uuid.uuid4()),
                trainer_id=trainer_id,
                date=data["date"],
                start_time=data["start_time"],
                duration=data["duration"],
                client_name=data["client_name"].strip(),
                location=data["location"].strip(),
                notes=data.get("notes") or "",
                status=data.get("status") or "confirmed",
                created_at=now,
                updated_at=now
            )
            db.add(training)
            db.commit()
            db.refresh(training)

            logger.info(f"Training {training.id} booked on {training.date} {training.start_time} for trainer {trainer_id}")
            return self._training_to_dict(training)
        except HTTPException:
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Error creating training: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to create training: {str(e)}")
        finally:
            db.close()

    def update_training(self, training_id: str, updates: dict, trainer_id: str,
                        today: Optional[date] = None) -> dict:
        """Edit a training in place. Trainings dated in the past are read-only."""
        db = get_db_session()
        try:
            training = db.query(TrainingORM).filter(
                TrainingORM.id == training_id,
                TrainingORM.trainer_id == trainer_id
            ).first()
            if not training:
                raise HTTPException(status_code=404, detail="Training not found")

            if calendar_helper.is_past_date(training.date, today):
                raise HTTPException(status_code=400, detail="Cannot edit a training in the past")

            merged = self._training_to_dict(training)
            merged.update({k: v for k, v in updates.items() if v is not None})

            existing = self._load_trainings(db, trainer_id)
            errors = validate_training(merged, existing, exclude_id=training_id, today=today)
            if errors:
                raise validation_error("Training validation failed", errors)

            training.date = merged["date"]
            training.start_time = merged["start_time"]
            training.duration = merged["duration"]
            training.client_name = merged["client_name"].strip()
            training.location = merged["location"].strip()
            training.notes = merged.get("notes") or ""
            training.status = merged["status"]
            training.updated_at = datetime.utcnow().isoformat()

            db.commit()
            db.refresh(training)
            logger.info(f"Training {training_id} updated by trainer {trainer_id}")
            return self._training_to_dict(training)
        except HTTPException:
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Error updating training {training_id}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to update training: {str(e)}")
        finally:
            db.close()

    def delete_training(self, training_id: str, trainer_id: str) -> dict:
        db = get_db_session()
        try:
            training = db.query(TrainingORM).filter(
                TrainingORM.id == training_id,
                TrainingORM.trainer_id == trainer_id
            ).first()
            if not training:
                raise HTTPException(status_code=404, detail="Training not found")

            db.delete(training)
            db.commit()
            logger.info(f"Training {training_id} deleted by trainer {trainer_id}")
            return {"status": "success", "message": "Training deleted"}
        except HTTPException:
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Error deleting training {training_id}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to delete training: {str(e)}")
        finally:
            db.close()

    def check_conflict(self, trainer_id: str, date_str: str, start_time: str,
                       duration: int, exclude_id: Optional[str] = None) -> dict:
        """
        Look for an existing training overlapping the proposed slot.

        Returns:
            {"conflict": training dict or None}
        """
        if not is_valid_time(start_time):
            raise HTTPException(status_code=400, detail=f"Invalid time: {start_time}")
        if duration is None or duration <= 0:
            raise HTTPException(status_code=400, detail="Duration must be positive")
        self._parse_date(date_str)

        db = get_db_session()
        try:
            existing = self._load_trainings(db, trainer_id)
            conflict = calendar_helper.find_conflict(existing, date_str, start_time, duration, exclude_id)
            return {"conflict": conflict}
        finally:
            db.close()

    # Calendar views

    def get_month_view(self, trainer_id: str, year: int, month: int,
                       selected: Optional[str] = None, today: Optional[date] = None) -> dict:
        if not 1 <= month <= 12:
            raise HTTPException(status_code=400, detail=f"Invalid month: {month}")
        self._check_year(year)
        reference = date(year, month, 1)
        selected_date = self._parse_date(selected) if selected else None

        db = get_db_session()
        try:
            trainings = self._load_trainings(db, trainer_id)
        finally:
            db.close()

        previous_month = calendar_helper.shift_month(reference, -1)
        next_month = calendar_helper.shift_month(reference, 1)
        return {
            "year": year,
            "month": month,
            "month_name": calendar_helper.MONTH_NAMES[month - 1],
            "previous": {"year": previous_month.year, "month": previous_month.month},
            "next": {"year": next_month.year, "month": next_month.month},
            "days": calendar_helper.build_month_grid(reference, trainings, selected_date, today)
        }

    def get_week_view(self, trainer_id: str, reference: str, today: Optional[date] = None) -> dict:
        reference_date = self._parse_date(reference)

        db = get_db_session()
        try:
            trainings = self._load_trainings(db, trainer_id)
        finally:
            db.close()

        days = calendar_helper.build_week_view(reference_date, trainings, today)
        return {
            "start": days[0]["date"],
            "end": days[-1]["date"],
            "days": days
        }

    def get_day_view(self, trainer_id: str, day: str) -> dict:
        day_date = self._parse_date(day)

        db = get_db_session()
        try:
            trainings = self._load_trainings(db, trainer_id)
        finally:
            db.close()

        return {
            "date": day_date.isoformat(),
            "day_name": calendar_helper.DAY_NAMES_FULL[day_date.weekday()],
            "slots": calendar_helper.build_day_view(day_date, trainings)
        }


# Singleton instance
training_service = TrainingService()


def get_training_service() -> TrainingService:
    """Dependency injection helper."""
    return training_service
