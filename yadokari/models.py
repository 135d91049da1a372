# yadokari/models.py
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

IdentityKey = Tuple[str, str, int]


class Listing(BaseModel):
    """One rental unit as published by the listing source."""
    model_config = ConfigDict(frozen=True, populate_by_name=True, coerce_numbers_to_str=True)

    # Stable identifier from the source (required)
    id: str
    name: str
    normal_rent: str = Field(..., alias="normalRent")
    row_span: int = Field(..., alias="rowSpan", description="Source-specific grouping weight")

    detail_url: Optional[str] = Field(None, alias="detailUrl")
    image_url: Optional[str] = Field(None, alias="imageUrl")
    discounted_rent: Optional[str] = Field(None, alias="discountedRent")
    normal_common_fee: Optional[str] = Field(None, alias="normalCommonFee")
    discounted_common_fee: Optional[str] = Field(None, alias="discountedCommonFee")
    unit_type: Optional[str] = Field(None, alias="unitType")
    floor_area_text: Optional[str] = Field(None, alias="floorAreaText")
    access_text: Optional[str] = Field(None, alias="accessText")
    category_label: Optional[str] = Field(None, alias="categoryLabel")
    region_label: Optional[str] = Field(None, alias="regionLabel")

    @property
    def identity_key(self) -> IdentityKey:
        # Any change in rent or grouping makes the listing fresh again
        return (self.id, self.normal_rent, self.row_span)


# ---------- Webhook wire models ----------

class EventPayload(BaseModel):
    channel: str
    user: Optional[str] = None
    text: str = ""


class EventRequest(BaseModel):
    token: str
    challenge: Optional[str] = None
    event: Optional[EventPayload] = None


class EventResponse(BaseModel):
    ok: bool
    challenge: Optional[str] = None


# ---------- Authenticated inbound events ----------

@dataclass(frozen=True)
class Handshake:
    challenge: Optional[str]


@dataclass(frozen=True)
class MessageEvent:
    channel: str
    source_user: Optional[str]
    text: str


InboundEvent = Union[Handshake, MessageEvent]
