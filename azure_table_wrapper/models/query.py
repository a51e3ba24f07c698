from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class TableQuery(BaseModel):
    """Structured query passed through to the table store.

    query_filter is an OData filter expression; values are bound through
    ``@name`` placeholders resolved from ``parameters``, e.g.
    ``TableQuery(query_filter="Age gt @age", parameters={"age": 30})``.
    """

    query_filter: Optional[str] = Field(default=None, description="OData filter expression")
    parameters: Dict[str, Any] = Field(default_factory=dict, description="Values for @name placeholders")
    select: Optional[List[str]] = Field(default=None, description="Properties to return")
    results_per_page: Optional[int] = Field(default=None, gt=0, description="Page size requested from the store")
    top: Optional[int] = Field(default=None, gt=0, description="Stop after this many entities")

    model_config = ConfigDict(frozen=True)

    @property
    def is_filtered(self) -> bool:
        return bool(self.query_filter)

    def to_kwargs(self) -> Dict[str, Any]:
        """Build keyword arguments for TableClient.query_entities / list_entities."""
        kwargs: Dict[str, Any] = {}
        if self.query_filter:
            kwargs['query_filter'] = self.query_filter
            if self.parameters:
                kwargs['parameters'] = dict(self.parameters)
        if self.select:
            kwargs['select'] = list(self.select)
        if self.results_per_page:
            kwargs['results_per_page'] = self.results_per_page
        return kwargs
