from typing import Optional, List

from pydantic import BaseModel

from ..models.service_item import ServiceItemType


class SpecialtyRead(BaseModel):
    id: str
    name: str
    sub_service_id: str

    model_config = {"from_attributes": True}


class SubServiceRead(BaseModel):
    id: str
    name: str
    service_id: str
    specialties: List[SpecialtyRead] = []


class ServiceRead(BaseModel):
    """One node of the catalog tree returned by ``GET /services/``."""

    id: str
    name: str
    sub_services: List[SubServiceRead] = []


class QuestionOptionRead(BaseModel):
    id: str
    question_id: str
    option_text: str

    model_config = {"from_attributes": True}


class ServiceQuestionRead(BaseModel):
    id: str
    question: str
    service_id: Optional[str] = None
    sub_service_id: Optional[str] = None
    specialty_id: Optional[str] = None
    options: List[QuestionOptionRead] = []


class ServiceItemRead(BaseModel):
    id: str
    name: str
    type: ServiceItemType
    service_id: Optional[str] = None
    sub_service_id: Optional[str] = None
    specialty_id: Optional[str] = None

    model_config = {"from_attributes": True}
