"""Service catalog retrieval with a process-local TTL cache.

The catalog (services -> sub-services -> specialties) changes rarely and is
read on every quote wizard load, so the assembled tree is kept in memory for
``settings.SERVICES_CACHE_TTL`` seconds. When the database is unreachable the
last good tree is served instead of an error.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.config import settings
from ..crud import crud_catalog
from ..schemas.catalog import (
    QuestionOptionRead,
    ServiceItemRead,
    ServiceQuestionRead,
    ServiceRead,
    SpecialtyRead,
    SubServiceRead,
)

logger = logging.getLogger(__name__)

_services_cache: Optional[List[ServiceRead]] = None
_last_fetch_time: float = 0.0
_cache_lock = threading.Lock()


def _now() -> float:
    return time.monotonic()


def _build_tree(services, sub_services, specialties) -> List[ServiceRead]:
    tree: List[ServiceRead] = []
    for service in services:
        subs = []
        for sub in sub_services:
            if sub.service_id != service.id:
                continue
            subs.append(
                SubServiceRead(
                    id=sub.id,
                    name=sub.name,
                    service_id=sub.service_id,
                    specialties=[
                        SpecialtyRead.model_validate(sp)
                        for sp in specialties
                        if sp.sub_service_id == sub.id
                    ],
                )
            )
        tree.append(ServiceRead(id=service.id, name=service.name, sub_services=subs))
    return tree


def get_all_services(db: Session) -> List[ServiceRead]:
    """Return the full catalog tree, served from cache while fresh."""
    global _services_cache, _last_fetch_time

    now = _now()
    with _cache_lock:
        if _services_cache is not None and now - _last_fetch_time < settings.SERVICES_CACHE_TTL:
            logger.debug("Returning cached services data")
            return _services_cache

    try:
        logger.info("Fetching services from database")
        services = crud_catalog.get_services(db)
        sub_services = crud_catalog.get_sub_services(db)
        specialties = crud_catalog.get_specialties(db)
    except SQLAlchemyError as exc:
        logger.error("Error fetching services: %s", exc)
        db.rollback()
        with _cache_lock:
            return _services_cache or []

    if not services:
        logger.info("No services found in database")
        return []

    tree = _build_tree(services, sub_services, specialties)
    with _cache_lock:
        _services_cache = tree
        _last_fetch_time = now
    logger.info("Services fetched and cached", extra={"service_count": len(tree)})
    return tree


def clear_services_cache() -> None:
    global _services_cache, _last_fetch_time
    with _cache_lock:
        _services_cache = None
        _last_fetch_time = 0.0
    logger.info("Services cache cleared")


def get_questions(
    db: Session,
    service_id: Optional[str] = None,
    sub_service_id: Optional[str] = None,
    specialty_id: Optional[str] = None,
) -> List[ServiceQuestionRead]:
    """Questions for one catalog level, each with its answer options.

    Only the first id given is used, checked in the order service,
    sub-service, specialty.
    """
    try:
        questions = crud_catalog.get_questions(db, service_id, sub_service_id, specialty_id)
        if not questions:
            return []
        options = crud_catalog.get_options_for_questions(db, [q.id for q in questions])
    except SQLAlchemyError as exc:
        logger.error("Error fetching questions: %s", exc)
        db.rollback()
        return []

    return [
        ServiceQuestionRead(
            id=q.id,
            question=q.question,
            service_id=q.service_id,
            sub_service_id=q.sub_service_id,
            specialty_id=q.specialty_id,
            options=[
                QuestionOptionRead.model_validate(opt)
                for opt in options
                if opt.question_id == q.id
            ],
        )
        for q in questions
    ]


def get_service_items(
    db: Session,
    service_id: Optional[str] = None,
    sub_service_id: Optional[str] = None,
    specialty_id: Optional[str] = None,
) -> List[ServiceItemRead]:
    try:
        items = crud_catalog.get_service_items(db, service_id, sub_service_id, specialty_id)
    except SQLAlchemyError as exc:
        logger.error("Error fetching service items: %s", exc)
        db.rollback()
        return []
    return [ServiceItemRead.model_validate(item) for item in items]
