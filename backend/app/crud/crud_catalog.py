from typing import Iterable, Optional

from sqlalchemy.orm import Session

from ..models.service import Service, SubService, Specialty
from ..models.service_question import ServiceQuestion, QuestionOption
from ..models.service_item import ServiceItem


def get_services(db: Session) -> list[Service]:
    return db.query(Service).order_by(Service.name).all()


def get_sub_services(db: Session) -> list[SubService]:
    return db.query(SubService).order_by(SubService.name).all()


def get_specialties(db: Session) -> list[Specialty]:
    return db.query(Specialty).order_by(Specialty.name).all()


def _level_filter(model, service_id: Optional[str], sub_service_id: Optional[str], specialty_id: Optional[str]):
    """Return the filter for the first catalog id provided, or None."""
    if service_id:
        return model.service_id == service_id
    if sub_service_id:
        return model.sub_service_id == sub_service_id
    if specialty_id:
        return model.specialty_id == specialty_id
    return None


def get_questions(
    db: Session,
    service_id: Optional[str] = None,
    sub_service_id: Optional[str] = None,
    specialty_id: Optional[str] = None,
) -> list[ServiceQuestion]:
    criterion = _level_filter(ServiceQuestion, service_id, sub_service_id, specialty_id)
    if criterion is None:
        return []
    return db.query(ServiceQuestion).filter(criterion).all()


def get_options_for_questions(db: Session, question_ids: Iterable[str]) -> list[QuestionOption]:
    ids = list(question_ids)
    if not ids:
        return []
    return db.query(QuestionOption).filter(QuestionOption.question_id.in_(ids)).all()


def get_service_items(
    db: Session,
    service_id: Optional[str] = None,
    sub_service_id: Optional[str] = None,
    specialty_id: Optional[str] = None,
) -> list[ServiceItem]:
    criterion = _level_filter(ServiceItem, service_id, sub_service_id, specialty_id)
    if criterion is None:
        return []
    return db.query(ServiceItem).filter(criterion).all()
