import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

# Load environment variables from .env file if it exists
load_dotenv()

# Well-known Azurite development account, published in the Azure Storage docs
AZURITE_CONNECTION_STRING = (
    "DefaultEndpointsProtocol=http;"
    "AccountName=devstoreaccount1;"
    "AccountKey=Eby8vdM02xNOcqFlqUwJPLlmEtlCDXJ1OUzFT50uSRZ6IFsuFq2UVErCz4I6tq/K1SZFPTOtr/KBHBeksoGMGw==;"
    "TableEndpoint=http://127.0.0.1:10002/devstoreaccount1;"
)


class AzureTableConfig(BaseModel):
    """Configuration for Azure Table Storage connection and table naming."""

    connection_string: Optional[str] = Field(
        default_factory=lambda: os.getenv("AZURE_STORAGE_CONNECTION_STRING"),
        description="Storage account connection string, parsed by the azure-data-tables SDK"
    )

    # Table configuration
    table_prefix: str = Field(
        default_factory=lambda: os.getenv("AZURE_TABLE_PREFIX", ""),
        description="Prefix to add to all table names"
    )

    # Logging settings
    enable_debug_logging: bool = Field(
        default_factory=lambda: os.getenv("AZURE_TABLE_DEBUG_LOGGING", "false").lower() == "true",
        description="Enable debug logging for table operations"
    )

    @field_validator('connection_string')
    @classmethod
    def validate_connection_string(cls, v):
        """Reject blank connection strings; parsing itself is left to the SDK."""
        if v is not None and not v.strip():
            raise ValueError("Connection string must not be empty")
        return v

    @field_validator('table_prefix')
    @classmethod
    def validate_table_prefix(cls, v):
        """Table names are alphanumeric, so the prefix must be too."""
        if v and not v.isalnum():
            raise ValueError(f"Table prefix must be alphanumeric: {v!r}")
        return v

    def get_table_name(self, base_name: str) -> str:
        """Get the full table name with prefix.

        Args:
            base_name: Declared table name

        Returns:
            Table name as created in the storage account
        """
        return f"{self.table_prefix}{base_name}"

    @classmethod
    def from_env(cls) -> 'AzureTableConfig':
        """Create configuration from environment variables.

        Returns:
            AzureTableConfig instance
        """
        return cls()

    @classmethod
    def for_local_development(cls) -> 'AzureTableConfig':
        """Create configuration for a local Azurite emulator.

        Returns:
            AzureTableConfig instance pointing at Azurite's default table endpoint
        """
        return cls(
            connection_string=AZURITE_CONNECTION_STRING,
            enable_debug_logging=True
        )

    model_config = ConfigDict(
        validate_assignment=True
    )
