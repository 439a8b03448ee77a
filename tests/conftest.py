import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from geomappable import config
from tests.functions import PLACES
from tests.models import Base, Company, Location, Store


@pytest.fixture(autouse=True)
def reset_config():
    config.reset_defaults()
    yield
    config.reset_defaults()


@pytest.fixture
def engine():
    engine = create_engine('sqlite://')
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def places(session):
    """The locations in PLACES, plus one without coordinates"""
    acme = Company(name='Acme')
    locations = {
        name: Location(name=name, lat=lat, lng=lng, company=acme)
        for name, (lat, lng) in PLACES.items()
    }
    session.add_all(locations.values())
    session.add(Location(name='Nowhere', lat=None, lng=None))
    session.commit()
    return locations


@pytest.fixture
def stores(session, places):
    stores = {
        'Pier': Store(name='Pier', location=places['Ferry Building']),
        'Downtown SJ': Store(name='Downtown SJ', location=places['San Jose']),
    }
    session.add_all(stores.values())
    session.commit()
    return stores
