# app/api/api_service.py

from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.user import User
from ..schemas.catalog import ServiceItemRead, ServiceQuestionRead, ServiceRead
from ..services import catalog_service
from .dependencies import get_current_admin

router = APIRouter(
    # Note: NO prefix here, because main.py already does `prefix="/api/v1/services"`
    tags=["Services"],
)


@router.get("/", response_model=List[ServiceRead])
def list_services(response: Response, db: Session = Depends(get_db)):
    """Full catalog tree: services with their sub-services and specialties."""
    services = catalog_service.get_all_services(db)
    response.headers["Cache-Control"] = "public, max-age=300"
    return services


@router.delete("/cache", status_code=status.HTTP_204_NO_CONTENT)
def clear_services_cache(_admin: User = Depends(get_current_admin)):
    catalog_service.clear_services_cache()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/questions", response_model=List[ServiceQuestionRead])
def list_questions(
    service_id: Optional[str] = None,
    sub_service_id: Optional[str] = None,
    specialty_id: Optional[str] = None,
    db: Session = Depends(get_db),
):
    """Questions for the first catalog level given (service, sub-service, specialty)."""
    return catalog_service.get_questions(db, service_id, sub_service_id, specialty_id)


@router.get("/items", response_model=List[ServiceItemRead])
def list_items(
    service_id: Optional[str] = None,
    sub_service_id: Optional[str] = None,
    specialty_id: Optional[str] = None,
    db: Session = Depends(get_db),
):
    return catalog_service.get_service_items(db, service_id, sub_service_id, specialty_id)
