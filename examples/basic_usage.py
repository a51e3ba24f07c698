#!/usr/bin/env python3
"""
Basic usage example for the Azure table wrapper.

This example demonstrates:
1. Declaring entities and a database schema
2. Connecting (missing tables are created on first use)
3. Insert, get, update and delete with optimistic concurrency
4. Partition queries and structured queries

Run it against Azurite (`azurite-table`) or set AZURE_STORAGE_CONNECTION_STRING.
"""

import os
from typing import Optional

from azure_table_wrapper import (
    AzureTableConfig,
    Database,
    RetrieveOperationError,
    TableEntity,
    TableField,
    TableQuery,
    UpdateOperationError,
)


class Customer(TableEntity):
    name: str
    email: Optional[str] = None
    age: Optional[int] = None


class Order(TableEntity):
    product: str
    quantity: int = 1


class ShopDatabase(Database):
    Customers = TableField(Customer)
    Orders = TableField(Order)


def main():
    """Walk through the table operations."""

    # 1. Configure the connection
    print("1. Connecting...")
    if os.getenv("AZURE_STORAGE_CONNECTION_STRING"):
        config = AzureTableConfig.from_env()
    else:
        config = AzureTableConfig.for_local_development()
    db = ShopDatabase.from_config(config)
    print(f"   Tables ready: {[table.table_name for table in db.tables.values()]}")

    # 2. Insert
    print("2. Inserting customers...")
    ada = Customer(partition_key="emea", row_key="ada", name="Ada Lovelace", age=36)
    db.Customers.insert(ada)
    db.Customers.insert(Customer(partition_key="EMEA", row_key="alan", name="Alan Turing", age=41))
    db.Customers.insert(Customer(partition_key="amer", row_key="grace", name="Grace Hopper", age=45))

    # 3. Get and update
    print("3. Updating Ada...")
    fetched = db.Customers.get("emea", "ada")
    fetched.email = "ada@example.com"
    db.Customers.update(fetched)

    try:
        # ada still carries the etag from the insert
        ada.age = 37
        db.Customers.update(ada)
    except UpdateOperationError as e:
        print(f"   Stale update rejected with status {e.status_code}")

    # 4. Partition queries, case-insensitive
    print("4. Customers in EMEA:")
    for customer in db.Customers.all("emea"):
        print(f"   {customer.partition_key}/{customer.row_key}: {customer.name}")

    # 5. Structured query
    print("5. Customers over 40:")
    for customer in db.Customers.execute_query(TableQuery(query_filter="age gt @age", parameters={"age": 40})):
        print(f"   {customer.name}")

    # 6. Delete
    print("6. Deleting customers...")
    for customer in list(db.Customers.query()):
        db.Customers.delete(customer)

    try:
        db.Customers.get("emea", "ada")
    except RetrieveOperationError as e:
        print(f"   Ada is gone (status {e.status_code})")

    db.close()


if __name__ == "__main__":
    main()
