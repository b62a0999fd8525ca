import pytest

from apicdn.app import CdnApp
from apicdn.component import ComponentRegistry
from apicdn.config import AwsConfig
from apicdn.context import AppContext, _ContextStore


@pytest.fixture(autouse=True)
def clean_registries():
    ComponentRegistry._instances.clear()
    ComponentRegistry._registered_names.clear()
    CdnApp._reset()


@pytest.fixture(autouse=True)
def app_context():
    _ContextStore.clear()
    _ContextStore.set(
        AppContext(
            name="test",
            env="test",
            aws=AwsConfig(profile="default", region="us-east-1"),
        )
    )
