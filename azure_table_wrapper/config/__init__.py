from .config import AZURITE_CONNECTION_STRING, AzureTableConfig

__all__ = [
    "AZURITE_CONNECTION_STRING",
    "AzureTableConfig",
]
