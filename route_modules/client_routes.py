"""
Client Routes - API endpoints for the trainer's client roster and dashboard.
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from auth import get_current_user
from models import ClientRequest
from models_orm import UserORM
from service_modules.client_service import ClientService, get_client_service

router = APIRouter()


def require_trainer(user: UserORM):
    if user.role not in ("trainer", "admin"):
        raise HTTPException(status_code=403, detail="Only trainers can access this endpoint")


@router.get("/api/clients")
async def get_clients(
    search: Optional[str] = None,
    service: ClientService = Depends(get_client_service),
    current_user: UserORM = Depends(get_current_user)
):
    require_trainer(current_user)
    return service.get_clients(current_user.id, search)


@router.post("/api/clients")
async def create_client(
    client: ClientRequest,
    service: ClientService = Depends(get_client_service),
    current_user: UserORM = Depends(get_current_user)
):
    require_trainer(current_user)
    return service.create_client(client.model_dump(), current_user.id)


@router.get("/api/clients/{client_id}")
async def get_client(
    client_id: str,
    service: ClientService = Depends(get_client_service),
    current_user: UserORM = Depends(get_current_user)
):
    require_trainer(current_user)
    return service.get_client(client_id, current_user.id)


@router.delete("/api/clients/{client_id}")
async def delete_client(
    client_id: str,
    service: ClientService = Depends(get_client_service),
    current_user: UserORM = Depends(get_current_user)
):
    require_trainer(current_user)
    return service.delete_client(client_id, current_user.id)


@router.get("/api/dashboard")
async def get_dashboard(
    service: ClientService = Depends(get_client_service),
    current_user: UserORM = Depends(get_current_user)
):
    """Roster size and today's sessions for the homepage."""
    require_trainer(current_user)
    return service.get_dashboard(current_user.id)
