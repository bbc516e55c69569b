"""
Client Service - handles the trainer's client roster and the dashboard summary.
"""
from typing import Optional

from .base import (
    HTTPException, uuid, json, logging, date,
    get_db_session, ClientORM, TrainingORM, WorkoutPlanORM, load_json_list, validation_error
)
from . import calendar_helper
from .validation import is_valid_email, is_valid_phone

logger = logging.getLogger("gymbucket")


class ClientService:
    """Service for managing a trainer's clients."""

    def _client_to_dict(self, client: ClientORM) -> dict:
        return {
            "id": client.id,
            "name": client.name,
            "email": client.email,
            "phone": client.phone,
            "created_at": client.created_at
        }

    def get_clients(self, trainer_id: str, search: Optional[str] = None) -> list:
        db = get_db_session()
        try:
            query = db.query(ClientORM).filter(ClientORM.trainer_id == trainer_id)
            clients = [self._client_to_dict(c) for c in query.order_by(ClientORM.name).all()]
        finally:
            db.close()

        if search:
            term = search.lower()
            clients = [c for c in clients if term in c["name"].lower()]
        return clients

    def get_client(self, client_id: str, trainer_id: str) -> dict:
        db = get_db_session()
        try:
            client = db.query(ClientORM).filter(
                ClientORM.id == client_id,
                ClientORM.trainer_id == trainer_id
            ).first()
            if not client:
                raise HTTPException(status_code=404, detail="Client not found")
            return self._client_to_dict(client)
        finally:
            db.close()

    def create_client(self, data: dict, trainer_id: str) -> dict:
        errors = []
        name = (data.get("name") or "").strip()
        if not name:
            errors.append("Client name is required")
        if data.get("email") and not is_valid_email(data["email"]):
            errors.append("Invalid email format")
        if not is_valid_phone(data.get("phone")):
            errors.append("Invalid phone number format")
        if errors:
            raise validation_error("Client validation failed", errors)

        db = get_db_session()
        try:
            client = ClientORM(
                id=str(uuid.uuid4()),
                trainer_id=trainer_id,
                name=name,
                email=data.get("email") or None,
                phone=data.get("phone") or None
            )
            db.add(client)
            db.commit()
            db.refresh(client)
            logger.info(f"Client '{name}' added to roster of trainer {trainer_id}")
            return self._client_to_dict(client)
        except Exception as e:
            db.rollback()
            logger.error(f"Error creating client: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to create client: {str(e)}")
        finally:
            db.close()

    def delete_client(self, client_id: str, trainer_id: str) -> dict:
        db = get_db_session()
        try:
            client = db.query(ClientORM).filter(
                ClientORM.id == client_id,
                ClientORM.trainer_id == trainer_id
            ).first()
            if not client:
                raise HTTPException(status_code=404, detail="Client not found")

            plans = db.query(WorkoutPlanORM).filter(
                WorkoutPlanORM.created_by == trainer_id,
                WorkoutPlanORM.client_assignments_json.contains(client_id)
            ).all()
            for plan in plans:
                assignments = load_json_list(plan.client_assignments_json)
                plan.client_assignments_json = json.dumps([cid for cid in assignments if cid != client_id])

            db.delete(client)
            db.commit()
            logger.info(f"Client {client_id} removed by trainer {trainer_id}")
            return {"status": "success", "message": "Client removed"}
        except HTTPException:
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Error removing client {client_id}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to remove client: {str(e)}")
        finally:
            db.close()

    def get_dashboard(self, trainer_id: str, today: Optional[date] = None) -> dict:
        """Homepage summary: roster size and today's sessions."""
        today = today or date.today()
        db = get_db_session()
        try:
            total_clients = db.query(ClientORM).filter(ClientORM.trainer_id == trainer_id).count()
            todays = db.query(TrainingORM).filter(
                TrainingORM.trainer_id == trainer_id,
                TrainingORM.date == today.isoformat()
            ).order_by(TrainingORM.start_time).all()
        finally:
            db.close()

        sessions = [
            {
                "id": t.id,
                "client_name": t.client_name,
                "start_time": t.start_time,
                "end_time": calendar_helper.training_end_time(t.start_time, t.duration),
                "duration": t.duration,
                "location": t.location,
                "status": t.status
            }
            for t in todays
        ]
        # Cancelled sessions stay on the calendar but are not counted here
        active = [s for s in sessions if s["status"] != "cancelled"]

        return {
            "date": today.isoformat(),
            "total_clients": total_clients,
            "todays_sessions": len(active),
            "upcoming_trainings": active
        }


# Singleton instance
client_service = ClientService()

def get_client_service() -> ClientService:
    """Dependency injection helper."""
    return client_service
