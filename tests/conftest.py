"""Shared fixtures: fake HTTP backends and wired containers."""

import pytest

from app.container import Container
from app.models.api import DataSourceSettings
from app.services.macros import VariableStore
from tests.fakes import FakeBackend


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def datasource_settings() -> DataSourceSettings:
    return DataSourceSettings.model_validate(
        {
            "apis": [
                {
                    "id": "DataService",
                    "name": "Data",
                    "url": "http://data.local/v1",
                    "queryParams": "token=abc",
                    "headers": [["X-Key", "k1"]],
                },
                {"id": "DomainService", "name": "Domain", "url": "http://domain.local"},
            ]
        }
    )


@pytest.fixture
def make_container(backend, datasource_settings):
    """Factory for containers talking to the fake backend."""

    def _make(settings: DataSourceSettings | None = None, variables: dict | None = None) -> Container:
        return Container(
            settings or datasource_settings,
            variables=VariableStore(variables or {}),
            transport=backend.transport,
        )

    return _make
