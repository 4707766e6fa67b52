from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional


class ColissimoTimelineEventSchema(BaseModel):
    """Colissimo timeline checkpoint"""
    model_config = ConfigDict(extra="ignore")

    code: Optional[str] = Field(None, description="Colissimo status code (e.g. DI1)")
    date: Optional[str] = Field(None, description="Event date (ISO-8601), events without one are skipped")
    label: Optional[str] = Field(None, description="Event label, events without one are skipped")
    site_code: Optional[str] = Field(None, alias="siteCode", description="Site code")
    site_name: Optional[str] = Field(None, alias="siteName", description="Site name")
    country_code: Optional[str] = Field(None, alias="countryCode", description="Country code")


class ColissimoCodeLabelSchema(BaseModel):
    """Generic code/label pair (status, product)"""
    model_config = ConfigDict(extra="ignore")

    code: str = Field(..., description="Code")
    label: Optional[str] = Field(None, description="Label")


class ColissimoParcelSchema(BaseModel):
    """Colissimo parcel"""
    model_config = ConfigDict(extra="ignore")

    parcel_number: str = Field(..., alias="parcelNumber", description="Parcel number")
    timeline: List[ColissimoTimelineEventSchema] = Field(default_factory=list, description="Checkpoints")
    status: Optional[ColissimoCodeLabelSchema] = Field(None, description="Current status")
    delivery_date: Optional[str] = Field(None, alias="deliveryDate", description="Delivery date")
    product: Optional[ColissimoCodeLabelSchema] = Field(None, description="Product")


class ColissimoErrorSchema(BaseModel):
    """Colissimo error object"""
    model_config = ConfigDict(extra="ignore")

    code: Optional[str] = Field(None, description="Error code")
    message: Optional[str] = Field(None, description="Error message")


class ColissimoTrackingResponseSchema(BaseModel):
    """Colissimo timeline API response envelope"""
    model_config = ConfigDict(extra="ignore")

    parcel: Optional[ColissimoParcelSchema] = Field(None, description="Parcel data")
    error: Optional[ColissimoErrorSchema] = Field(None, description="Error data")
