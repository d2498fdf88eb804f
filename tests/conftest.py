import pytest

from sql_connector.schema.discovery import SchemaDiscovery
from sql_connector.schema.identifiers import IdentifierPolicy
from sql_connector.schema.type_mappings import TypeMapper
from tests.fakes import FakeDriver, FakeMetadata

SYSTEM_SCHEMAS = ("SYS", "SYSTEM", "PUBLIC", "XS$NULL")


@pytest.fixture
def policy() -> IdentifierPolicy:
    return IdentifierPolicy(SYSTEM_SCHEMAS)


@pytest.fixture
def make_discovery(policy):
    def _make(metadata: FakeMetadata):
        driver = FakeDriver(metadata)
        discovery = SchemaDiscovery(
            connector_id="test",
            driver=driver,
            connection_url="fake://db",
            connection_properties={"user": "scott", "password": "tiger", "fetch_size": "10000"},
            identifier_policy=policy,
            type_mapper=TypeMapper(),
        )
        return discovery, driver

    return _make
