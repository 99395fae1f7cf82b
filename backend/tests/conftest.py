from pathlib import Path
from datetime import datetime
from decimal import Decimal

from dotenv import load_dotenv
import pytest

# Load environment variables for tests before any app module reads settings
load_dotenv(Path(__file__).resolve().parents[1] / '.env.test')

from fastapi.testclient import TestClient  # noqa: E402
from jose import jwt  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.main import app  # noqa: E402
from app.core.config import settings  # noqa: E402
from app.database import Base, get_db  # noqa: E402
from app.models import (  # noqa: E402
    ProviderService,
    ProviderSettings,
    Service,
    Specialty,
    SubService,
    User,
    UserRole,
)
from app.services import catalog_service  # noqa: E402
from app.utils import redis_cache  # noqa: E402


@pytest.fixture(autouse=True)
def reset_caches(monkeypatch):
    """Start every test with an empty catalog cache and no Redis."""
    catalog_service.clear_services_cache()
    monkeypatch.setattr(redis_cache, "_redis_client", redis_cache._NullRedis())
    yield
    catalog_service.clear_services_cache()
    app.dependency_overrides.clear()


@pytest.fixture
def Session():
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    factory = sessionmaker(bind=engine, expire_on_commit=False)
    yield factory
    engine.dispose()


@pytest.fixture
def db(Session):
    session = Session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(Session):
    def override_db():
        db = Session()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_db
    return TestClient(app)


def auth_headers(user: User) -> dict:
    token = jwt.encode({"sub": user.id}, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    return {"Authorization": f"Bearer {token}"}


def make_user(db, role=UserRole.CLIENT, **kwargs) -> User:
    user = User(role=role, **kwargs)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_catalog(db):
    """Create Limpeza > Residencial > Pós-obra and return the three rows."""
    service = Service(name="Limpeza")
    db.add(service)
    db.flush()
    sub = SubService(name="Residencial", service_id=service.id)
    db.add(sub)
    db.flush()
    specialty = Specialty(name="Pós-obra", sub_service_id=sub.id)
    db.add(specialty)
    db.commit()
    return service, sub, specialty


def make_provider(
    db,
    name: str,
    *,
    service_id=None,
    sub_service_id=None,
    specialty_id=None,
    base_price="100.00",
    latitude=None,
    longitude=None,
    radius=None,
    with_settings=True,
    created_at=None,
) -> User:
    provider = User(
        name=name,
        email=f"{name.lower().replace(' ', '.')}@example.com",
        phone="11999990000",
        role=UserRole.PROVIDER,
        created_at=created_at or datetime.utcnow(),
    )
    db.add(provider)
    db.flush()
    if with_settings:
        db.add(
            ProviderSettings(
                provider_id=provider.id,
                bio=f"{name} bio",
                service_radius_km=radius,
                latitude=latitude,
                longitude=longitude,
                city="São Paulo",
                neighborhood="Centro",
            )
        )
    db.add(
        ProviderService(
            provider_id=provider.id,
            service_id=service_id,
            sub_service_id=sub_service_id,
            specialty_id=specialty_id,
            base_price=Decimal(base_price),
        )
    )
    db.commit()
    db.refresh(provider)
    return provider
