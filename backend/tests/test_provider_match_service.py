import logging
from types import SimpleNamespace
from decimal import Decimal

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base
from app.models import ProviderItemPrice, ProviderService, Quote, QuoteProvider, ServiceItem
from app.schemas.provider_match import ProviderInfo, ProviderMatch, QuoteDetails
from app.services import provider_match_service
from app.services.geocode import GeocodeResult

from conftest import make_catalog, make_provider, make_user

SAO_PAULO = GeocodeResult(lat=-23.5505, lng=-46.6333)
RIO = (-22.9068, -43.1729)
PINHEIROS = (-23.5614, -46.6820)


def fixed_geocoder(result=SAO_PAULO):
    return lambda address: result


def details_for(**kwargs) -> QuoteDetails:
    kwargs.setdefault("address", {"street": "Av. Paulista", "number": "1000", "city": "São Paulo", "state": "SP"})
    return QuoteDetails(**kwargs)


def test_within_radius_sorts_before_outside_regardless_of_distance(db):
    _, sub, _ = make_catalog(db)
    far = make_provider(db, "Far Reach", sub_service_id=sub.id, latitude=RIO[0], longitude=RIO[1], radius=500)
    near = make_provider(db, "Near Small", sub_service_id=sub.id, latitude=PINHEIROS[0], longitude=PINHEIROS[1], radius=1)

    matches = provider_match_service.find_matching_providers(
        db, details_for(sub_service_id=sub.id), geocoder=fixed_geocoder()
    )

    assert [m.provider.user_id for m in matches] == [far.id, near.id]
    assert matches[0].is_within_radius is True
    assert matches[1].is_within_radius is False
    assert matches[0].distance_km > matches[1].distance_km


def test_zero_radius_is_always_eligible(db):
    service, _, _ = make_catalog(db)
    make_provider(db, "Everywhere", service_id=service.id, latitude=RIO[0], longitude=RIO[1], radius=0)

    matches = provider_match_service.find_matching_providers(
        db, details_for(service_id=service.id), geocoder=fixed_geocoder()
    )

    assert len(matches) == 1
    assert matches[0].is_within_radius is True
    assert matches[0].distance_km == pytest.approx(357, abs=15)


def test_missing_radius_uses_default(db):
    service, _, _ = make_catalog(db)
    make_provider(db, "Defaults", service_id=service.id, latitude=RIO[0], longitude=RIO[1], radius=None)

    matches = provider_match_service.find_matching_providers(
        db, details_for(service_id=service.id), geocoder=fixed_geocoder()
    )

    assert matches[0].is_within_radius is False


def test_relevance_orders_when_radius_status_is_equal():
    def match(relevance, distance):
        return ProviderMatch(
            provider=ProviderInfo(user_id=f"p{relevance}"),
            distance_km=distance,
            is_within_radius=True,
            relevance=relevance,
        )

    ranked = sorted(
        [match(1, 0.5), match(3, 40.0), match(2, 2.0)],
        key=provider_match_service.match_sort_key,
    )

    assert [m.relevance for m in ranked] == [3, 2, 1]


def test_unknown_distance_sorts_last_within_tier():
    known = ProviderMatch(provider=ProviderInfo(user_id="a"), distance_km=80.0, is_within_radius=True, relevance=2)
    unknown = ProviderMatch(provider=ProviderInfo(user_id="b"), distance_km=None, is_within_radius=True, relevance=2)
    close = ProviderMatch(provider=ProviderInfo(user_id="c"), distance_km=1.0, is_within_radius=True, relevance=2)

    ranked = sorted([unknown, known, close], key=provider_match_service.match_sort_key)

    assert [m.provider.user_id for m in ranked] == ["c", "a", "b"]


def test_relevance_tier_levels(db):
    service, sub, specialty = make_catalog(db)
    offering = ProviderService(service_id=service.id, sub_service_id=sub.id, specialty_id=specialty.id)

    assert provider_match_service.relevance_tier(offering, details_for(specialty_id=specialty.id)) == 3
    assert provider_match_service.relevance_tier(offering, details_for(sub_service_id=sub.id)) == 2
    assert provider_match_service.relevance_tier(offering, details_for(service_id=service.id)) == 1


def test_total_price_without_items_equals_base_price(db):
    _, _, specialty = make_catalog(db)
    make_provider(db, "Base Only", specialty_id=specialty.id, base_price="187.35")

    matches = provider_match_service.find_matching_providers(
        db, details_for(specialty_id=specialty.id), geocoder=fixed_geocoder()
    )

    assert matches[0].total_price == Decimal("187.35")
    assert matches[0].relevance == 3


def test_total_price_uses_provider_item_prices(db):
    service, _, _ = make_catalog(db)
    provider = make_provider(db, "Priced", service_id=service.id, base_price="100.00")
    priced = ServiceItem(name="Janela", service_id=service.id)
    unpriced = ServiceItem(name="Porta", service_id=service.id)
    db.add_all([priced, unpriced])
    db.flush()
    db.add(ProviderItemPrice(provider_id=provider.id, item_id=priced.id, price_per_unit=Decimal("30.00")))
    db.commit()

    matches = provider_match_service.find_matching_providers(
        db,
        details_for(service_id=service.id, items={priced.id: 2, unpriced.id: 1}),
        geocoder=fixed_geocoder(),
    )

    # 100 base + 2 x 30 + 1 x 100
    assert matches[0].total_price == Decimal("260.00")


def test_falls_back_to_sub_service_when_specialty_has_no_offerings(db):
    _, sub, specialty = make_catalog(db)
    provider = make_provider(db, "Generalist", sub_service_id=sub.id)

    matches = provider_match_service.find_matching_providers(
        db,
        details_for(specialty_id=specialty.id, sub_service_id=sub.id),
        geocoder=fixed_geocoder(),
    )

    assert [m.provider.user_id for m in matches] == [provider.id]
    assert matches[0].relevance == 2


def test_most_specific_level_wins_without_merging(db):
    service, sub, specialty = make_catalog(db)
    specialist = make_provider(db, "Specialist", specialty_id=specialty.id, sub_service_id=sub.id)
    make_provider(db, "Generalist", service_id=service.id)

    matches = provider_match_service.find_matching_providers(
        db,
        details_for(service_id=service.id, sub_service_id=sub.id, specialty_id=specialty.id),
        geocoder=fixed_geocoder(),
    )

    assert [m.provider.user_id for m in matches] == [specialist.id]


def test_duplicate_offerings_keep_cheapest(db):
    _, sub, _ = make_catalog(db)
    provider = make_provider(db, "Twice", sub_service_id=sub.id, base_price="200.00")
    db.add(ProviderService(provider_id=provider.id, sub_service_id=sub.id, base_price=Decimal("150.00")))
    db.commit()

    matches = provider_match_service.find_matching_providers(
        db, details_for(sub_service_id=sub.id), geocoder=fixed_geocoder()
    )

    assert len(matches) == 1
    assert matches[0].total_price == Decimal("150.00")


def test_no_offerings_returns_empty_list(db):
    service, _, _ = make_catalog(db)

    assert provider_match_service.find_matching_providers(
        db, details_for(service_id=service.id), geocoder=fixed_geocoder()
    ) == []


def test_unknown_client_location(db, caplog):
    service, _, _ = make_catalog(db)
    located = make_provider(db, "Located", service_id=service.id, latitude=RIO[0], longitude=RIO[1], radius=50)
    nowhere = make_provider(db, "Nowhere", service_id=service.id, with_settings=False)

    caplog.set_level(logging.WARNING, logger="app.services.provider_match_service")
    matches = provider_match_service.find_matching_providers(
        db, details_for(service_id=service.id), geocoder=fixed_geocoder(None)
    )

    by_id = {m.provider.user_id: m for m in matches}
    assert by_id[located.id].distance_km is None
    assert by_id[located.id].is_within_radius is False
    assert by_id[nowhere.id].is_within_radius is True
    assert [m.provider.user_id for m in matches] == [nowhere.id, located.id]
    assert any("Could not geocode" in r.getMessage() for r in caplog.records)


def test_geocoder_exception_is_not_fatal(db):
    service, _, _ = make_catalog(db)
    make_provider(db, "Still Listed", service_id=service.id)

    def broken(address):
        raise RuntimeError("maps down")

    matches = provider_match_service.find_matching_providers(
        db, details_for(service_id=service.id), geocoder=broken
    )

    assert len(matches) == 1
    assert matches[0].distance_km is None


def test_failing_provider_is_skipped(db, monkeypatch):
    service, _, _ = make_catalog(db)
    good = make_provider(db, "Good", service_id=service.id)
    bad = make_provider(db, "Bad", service_id=service.id)

    original = provider_match_service.crud_provider.get_specialty_names

    def flaky(session, provider_id):
        if provider_id == bad.id:
            raise RuntimeError("boom")
        return original(session, provider_id)

    monkeypatch.setattr(provider_match_service.crud_provider, "get_specialty_names", flaky)

    matches = provider_match_service.find_matching_providers(
        db, details_for(service_id=service.id), geocoder=fixed_geocoder()
    )

    assert [m.provider.user_id for m in matches] == [good.id]


def test_failure_before_processing_returns_empty(db, monkeypatch):
    def broken(*args, **kwargs):
        raise RuntimeError("database unavailable")

    monkeypatch.setattr(provider_match_service, "resolve_offerings", broken)

    assert provider_match_service.find_matching_providers(
        db, details_for(service_id="svc"), geocoder=fixed_geocoder()
    ) == []


def test_provider_info_is_populated(db):
    _, sub, specialty = make_catalog(db)
    provider = make_provider(db, "Maria Silva", specialty_id=specialty.id, sub_service_id=sub.id)
    db.add_all([
        Quote(provider_id=provider.id, rating=4),
        Quote(provider_id=provider.id, rating=5),
        Quote(provider_id=provider.id, rating=None),
    ])
    db.commit()

    matches = provider_match_service.find_matching_providers(
        db, details_for(specialty_id=specialty.id), geocoder=fixed_geocoder()
    )

    info = matches[0].provider
    assert info.name == "Maria Silva"
    assert info.bio == "Maria Silva bio"
    assert info.city == "São Paulo"
    assert info.specialties == ["Pós-obra"]
    assert info.average_rating == pytest.approx(4.5)


def test_provider_details(db):
    service, _, _ = make_catalog(db)
    provider = make_provider(db, "Detail", service_id=service.id)

    details = provider_match_service.get_provider_details(db, provider.id)

    assert details.provider.user_id == provider.id
    assert details.portfolio_items == []
    assert details.rating == 0.0
    assert details.total_price == Decimal("0")


def test_provider_details_missing_provider(db):
    assert provider_match_service.get_provider_details(db, "missing") is None


def test_send_quote_requires_login(db):
    result = provider_match_service.send_quote_to_provider(db, details_for(service_id="svc"), "provider")

    assert result.success is False
    assert result.requires_login is True
    assert result.reason == "login_required"


def test_send_quote_requires_quote_id(db):
    result = provider_match_service.send_quote_to_provider(
        db, details_for(service_id="svc", client_id="client"), "provider"
    )

    assert result.success is False
    assert result.requires_login is True
    assert result.reason == "missing_quote_id"


def test_send_quote_unknown_quote(db):
    client = make_user(db, email="client@example.com")
    result = provider_match_service.send_quote_to_provider(
        db, details_for(service_id="svc", client_id=client.id, quote_id="nope"), "provider"
    )

    assert result.reason == "quote_not_found"


def test_send_quote_links_once(db):
    service, _, _ = make_catalog(db)
    client = make_user(db, email="client@example.com")
    provider = make_provider(db, "Receiver", service_id=service.id)
    quote = Quote(client_id=client.id, service_id=service.id)
    db.add(quote)
    db.commit()
    details = details_for(service_id=service.id, client_id=client.id, quote_id=quote.id)

    first = provider_match_service.send_quote_to_provider(db, details, provider.id)
    second = provider_match_service.send_quote_to_provider(db, details, provider.id)

    assert first.success is True
    assert first.message == "Quote sent successfully"
    assert first.quote_id == quote.id
    assert second.success is False
    assert second.reason == "already_sent"


@pytest.fixture
def fk_db():
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _fk_on(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON;")
        cursor.close()

    Base.metadata.create_all(engine)
    session = sessionmaker(bind=engine, expire_on_commit=False)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


def seed_quote(session):
    service, _, _ = make_catalog(session)
    client = make_user(session, email="client@example.com")
    quote = Quote(client_id=client.id, service_id=service.id)
    session.add(quote)
    session.commit()
    return service, client, quote


def test_send_quote_unknown_provider(fk_db):
    service, client, quote = seed_quote(fk_db)

    result = provider_match_service.send_quote_to_provider(
        fk_db, details_for(service_id=service.id, client_id=client.id, quote_id=quote.id), "no-such-provider"
    )

    assert result.success is False
    assert result.reason == "provider_not_found"
    assert fk_db.query(QuoteProvider).count() == 0


def test_send_quote_duplicate_with_foreign_keys_on(fk_db):
    service, client, quote = seed_quote(fk_db)
    provider = make_provider(fk_db, "Receiver", service_id=service.id)
    details = details_for(service_id=service.id, client_id=client.id, quote_id=quote.id)

    assert provider_match_service.send_quote_to_provider(fk_db, details, provider.id).success is True
    assert provider_match_service.send_quote_to_provider(fk_db, details, provider.id).reason == "already_sent"


def test_send_quote_concurrent_duplicate_insert(fk_db, monkeypatch):
    service, client, quote = seed_quote(fk_db)
    provider = make_provider(fk_db, "Receiver", service_id=service.id)
    details = details_for(service_id=service.id, client_id=client.id, quote_id=quote.id)
    provider_match_service.send_quote_to_provider(fk_db, details, provider.id)
    # the existence check misses a link inserted by another request
    monkeypatch.setattr(provider_match_service.crud_quote, "get_quote_provider", lambda *args: None)

    result = provider_match_service.send_quote_to_provider(fk_db, details, provider.id)

    assert result.reason == "already_sent"


def test_send_quote_foreign_key_violation_is_an_error(db, monkeypatch):
    service, client, quote = seed_quote(db)
    provider = make_provider(db, "Receiver", service_id=service.id)

    def fk_failure(session, quote_id, provider_id):
        raise IntegrityError("INSERT", {}, Exception("FOREIGN KEY constraint failed"))

    monkeypatch.setattr(provider_match_service.crud_quote, "add_quote_provider", fk_failure)

    result = provider_match_service.send_quote_to_provider(
        db, details_for(service_id=service.id, client_id=client.id, quote_id=quote.id), provider.id
    )

    assert result.success is False
    assert result.reason == "error"


def test_provider_details_survives_bad_portfolio_row(db, monkeypatch):
    service, _, _ = make_catalog(db)
    provider = make_provider(db, "Broken Portfolio", service_id=service.id)
    monkeypatch.setattr(
        provider_match_service.crud_provider,
        "get_portfolio",
        lambda session, provider_id: [SimpleNamespace(id="p1", image_url=None, description=None)],
    )

    details = provider_match_service.get_provider_details(db, provider.id)

    assert details.provider.user_id == provider.id
    assert details.portfolio_items == []


def test_provider_details_non_database_failure_returns_none(db, monkeypatch):
    service, _, _ = make_catalog(db)
    provider = make_provider(db, "Broken Settings", service_id=service.id)

    def broken(session, provider_id):
        raise ValueError("corrupt settings row")

    monkeypatch.setattr(provider_match_service.crud_provider, "get_settings", broken)

    assert provider_match_service.get_provider_details(db, provider.id) is None
