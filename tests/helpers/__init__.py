"""
Test helpers for the Azure table wrapper.

Provides an in-memory fake of the azure-data-tables clients and the sample
schemas the tests run against.
"""

from .fake_tables import (
    FakePipelineResponse,
    FakeTableClient,
    FakeTableServiceClient,
    StoredEntity,
    http_error,
)
from .schemas import ArchiveDatabase, Customer, Order, ShopDatabase

__all__ = [
    'FakePipelineResponse',
    'FakeTableClient',
    'FakeTableServiceClient',
    'StoredEntity',
    'http_error',
    'ArchiveDatabase',
    'Customer',
    'Order',
    'ShopDatabase',
]
