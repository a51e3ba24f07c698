"""
Test configuration and fixtures for the Azure table wrapper.

Every test runs against the in-memory fake service client from
tests.helpers; no storage account or emulator is needed.
"""

import os
from unittest.mock import patch

import pytest

from azure_table_wrapper import AzureTableConfig, ConstructionPlanRegistry
from tests.helpers import Customer, FakeTableServiceClient, Order, ShopDatabase


@pytest.fixture(autouse=True)
def clean_environment():
    """Keep developer environment variables out of AzureTableConfig defaults."""
    keys = ("AZURE_STORAGE_CONNECTION_STRING", "AZURE_TABLE_PREFIX", "AZURE_TABLE_DEBUG_LOGGING")
    with patch.dict(os.environ, {}, clear=False):
        for key in keys:
            os.environ.pop(key, None)
        yield


@pytest.fixture
def table_config():
    """Configuration without prefix for testing."""
    return AzureTableConfig(connection_string="UseDevelopmentStorage=true", table_prefix="")


@pytest.fixture
def service_client():
    """Fresh in-memory table service."""
    return FakeTableServiceClient()


@pytest.fixture
def plan_registry():
    """Isolated construction plan registry."""
    return ConstructionPlanRegistry()


@pytest.fixture
def shop_db(service_client, table_config, plan_registry):
    """ShopDatabase bound to the fake service."""
    return ShopDatabase(service_client, config=table_config, plan_registry=plan_registry)


@pytest.fixture
def sample_customer():
    return Customer(partition_key="emea", row_key="42", name="Ada Lovelace", email="ada@example.com", age=36)


@pytest.fixture
def sample_customers():
    """Customers spread over partitions that differ only in case."""
    return [
        Customer(partition_key="emea", row_key="1", name="Ada", age=36),
        Customer(partition_key="EMEA", row_key="2", name="Grace", age=45),
        Customer(partition_key="Emea", row_key="3", name="Alan", age=41),
        Customer(partition_key="apac", row_key="4", name="Hedy", age=29),
        Customer(partition_key="amer", row_key="5", name="Linus", age=17),
    ]


@pytest.fixture
def sample_order():
    return Order(partition_key="emea", row_key="order-1", product="Analytical Engine", quantity=2)
