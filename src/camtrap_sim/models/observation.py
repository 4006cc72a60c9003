"""
Observation Records
===================

This module defines the Pydantic model for a single camera-trap record.

Input Contract (one row of the trap result table):
    {
        "longitude": 512340.0,
        "latitude": 4410250.0,
        "group_size": 2,
        "date": "2015-06-03",
        "time": "21:14:05"
    }

Guarantees:
    - Many records may share one camera location (repeated detections).
    - group_size may be 0 (camera active, nothing photographed).
    - Coordinates are expected in a projected system (metres); reprojection
      from longitude/latitude happens before records reach this package.

Example:
    from camtrap_sim.models.observation import ObservationRecord

    record = ObservationRecord(longitude=10.0, latitude=20.0, group_size=1)
    print(record.location)
"""

from typing import Optional, Tuple

from pydantic import BaseModel, Field


class ObservationRecord(BaseModel):
    """
    One camera-trap record (immutable).
    
    Attributes:
        longitude: Camera x coordinate
        latitude: Camera y coordinate
        group_size: Number of animals in the picture
        date: Date of the picture, as recorded
        time: Time of day of the picture, as recorded
    """
    
    longitude: float = Field(
        ...,
        description="Camera x coordinate (projected units)",
    )
    
    latitude: float = Field(
        ...,
        description="Camera y coordinate (projected units)",
    )
    
    group_size: int = Field(
        default=0,
        ge=0,
        description="Number of animals photographed",
    )
    
    date: Optional[str] = Field(
        default=None,
        description="Date of the picture",
    )
    
    time: Optional[str] = Field(
        default=None,
        description="Time of day of the picture (HH:MM:SS)",
    )
    
    @property
    def location(self) -> Tuple[float, float]:
        """Exact (longitude, latitude) pair identifying the camera."""
        return (self.longitude, self.latitude)
    
    class Config:
        """Pydantic model configuration."""
        
        frozen = True
        json_schema_extra = {
            "example": {
                "longitude": 512340.0,
                "latitude": 4410250.0,
                "group_size": 2,
                "date": "2015-06-03",
                "time": "21:14:05",
            }
        }
