from pydantic import BaseModel, Field
from typing import List, Literal, Union


class BulkExportRequest(BaseModel):
    page_ids: List[Union[int, str]] = Field(..., min_length=1, alias="pageIds")
    format: Literal["markdown", "html", "pdf"] = "markdown"

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {"pageIds": [1, 2], "format": "markdown"}
        }
