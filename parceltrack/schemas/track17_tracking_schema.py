from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional


class Track17EventSchema(BaseModel):
    """17TRACK checkpoint"""
    model_config = ConfigDict(extra="ignore")

    a: Optional[str] = Field(None, description="Location")
    c: Optional[str] = Field(None, description="Country code")
    d: Optional[str] = Field(None, description="Description/message")
    z: Optional[str] = Field(None, description="Datetime (ISO format), events without one are skipped")


class Track17AddressSchema(BaseModel):
    """17TRACK origin/destination/ETA block"""
    model_config = ConfigDict(extra="ignore")

    a: Optional[str] = Field(None, description="Origin address")
    b: Optional[str] = Field(None, description="Destination address")
    d: Optional[str] = Field(None, description="Estimated delivery")


class Track17TrackSchema(BaseModel):
    """17TRACK track block"""
    model_config = ConfigDict(extra="ignore")

    e: int = Field(0, description="Error code (0 = success)")
    z0: Optional[Track17EventSchema] = Field(None, description="Latest event")
    z1: List[Track17EventSchema] = Field(default_factory=list, description="Event history")
    z2: Optional[Track17AddressSchema] = Field(None, description="Origin/destination/ETA")
    w1: Optional[int] = Field(None, description="Current status code")


class Track17AcceptedSchema(BaseModel):
    """17TRACK accepted tracking"""
    model_config = ConfigDict(extra="ignore")

    no: str = Field(..., description="Tracking number")
    carrier: Optional[int] = Field(None, description="17TRACK carrier code")
    track: Optional[Track17TrackSchema] = Field(None, description="Tracking data")


class Track17ErrorSchema(BaseModel):
    model_config = ConfigDict(extra="ignore")

    code: Optional[int] = Field(None, description="Error code")
    message: Optional[str] = Field(None, description="Error message")


class Track17RejectedSchema(BaseModel):
    """17TRACK rejected tracking"""
    model_config = ConfigDict(extra="ignore")

    number: Optional[str] = Field(None, description="Tracking number")
    error: Optional[Track17ErrorSchema] = Field(None, description="Rejection reason")


class Track17DataSchema(BaseModel):
    model_config = ConfigDict(extra="ignore")

    accepted: Optional[List[Track17AcceptedSchema]] = Field(default_factory=list)
    rejected: Optional[List[Track17RejectedSchema]] = Field(default_factory=list)


class Track17ResponseSchema(BaseModel):
    """17TRACK API response envelope"""
    model_config = ConfigDict(extra="ignore")

    code: int = Field(..., description="Envelope code (0 = success)")
    data: Track17DataSchema = Field(default_factory=Track17DataSchema)


class Track17RequestItemSchema(BaseModel):
    """One item of the batch request body"""

    number: str = Field(..., description="Tracking number")
    carrier: Optional[int] = Field(None, description="17TRACK carrier code, omitted for auto-detection")
