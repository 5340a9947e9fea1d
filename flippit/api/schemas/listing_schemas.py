from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class CreateListingResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    item_id: str = Field(serialization_alias="itemId")
    url: str


class ErrorResponse(BaseModel):
    error: str
    details: str | None = None


class GenerateListingRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    query_text: str = Field(default="", alias="queryText")
    msrp_price: float | None = Field(default=None, alias="msrpPrice")
    platform: Literal["ebay", "facebook", "craigslist"] = "ebay"


class GenerateListingResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str
    description: str
    suggested_price: float | None = Field(default=None, serialization_alias="suggestedPrice")


class ConsentCallbackResponse(BaseModel):
    code: str | None = None
    error: str | None = None
