"""
Core components of the table mapping layer.

- TableGateway: one SDK call per entity operation, status code captured
- Table / EntityQuery: typed CRUD and lazy queries on one table
- TableField / ConstructionPlan: explicit schema declarations and their cached binding plan
- Database: schema base class owning the service client
"""

from .database import Database
from .schema import (
    ConstructionPlan,
    ConstructionPlanRegistry,
    TableBinding,
    TableField,
    default_plan_registry,
)
from .table import EntityQuery, Table
from .table_gateway import StatusCapture, TableGateway, map_status_error

__all__ = [
    "Database",
    "ConstructionPlan",
    "ConstructionPlanRegistry",
    "TableBinding",
    "TableField",
    "default_plan_registry",
    "EntityQuery",
    "Table",
    "StatusCapture",
    "TableGateway",
    "map_status_error",
]
