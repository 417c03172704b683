"""
Pydantic models for the challenge search index.
"""

import json
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# ============================================================================
# Indexed Record
# ============================================================================

class Challenge(BaseModel):
    """
    Snapshot of a challenge as handed over by the record store.

    Unknown fields are kept so that the raw payload written to the index
    round-trips whatever the record store sent.
    """
    model_config = ConfigDict(extra="allow")

    challenge_id: str = Field(..., min_length=1, description="Record store id")
    name: str = Field(..., description="Title")
    challenge_type: str = Field(..., min_length=1, description="Primary category (code, design, ...)")
    platforms: List[str] = Field(default_factory=list)
    technologies: List[str] = Field(default_factory=list)
    total_prize_money: float = Field(0, ge=0)
    participant_count: int = Field(0, ge=0)
    is_open: bool = Field(True, description="Open for registration/submission")
    community_name: Optional[str] = None
    end_date: Optional[Union[datetime, date, str]] = None

    @field_validator("platforms", "technologies", mode="before")
    @classmethod
    def parse_names(cls, v):
        if v is None:
            return []
        if isinstance(v, str):
            return [part.strip() for part in v.split(",") if part.strip()]
        return v

    @field_validator("community_name", mode="before")
    @classmethod
    def blank_community_is_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @property
    def end_date_sort_value(self) -> str:
        """ISO rendering so lexical order is chronological order."""
        if self.end_date is None:
            return ""
        if isinstance(self.end_date, (datetime, date)):
            return self.end_date.isoformat()
        return self.end_date

    def raw_data(self) -> Dict[str, Any]:
        """JSON-safe payload stored in the raw data hash."""
        return self.model_dump(mode="json")

    def to_json(self) -> str:
        return json.dumps(self.raw_data(), sort_keys=True)

    @classmethod
    def from_json(cls, data: str) -> "Challenge":
        return cls.model_validate(json.loads(data))


# ============================================================================
# Filter Values
# ============================================================================

class RangeFilter(BaseModel):
    """A numeric {min, max} filter; an omitted bound falls back to a default."""
    model_config = ConfigDict(extra="forbid")

    min: Optional[float] = None
    max: Optional[float] = None

    @field_validator("min", "max", mode="before")
    @classmethod
    def blank_bound_is_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @model_validator(mode="after")
    def validate_bounds(self):
        """Ensure min <= max when both are set."""
        if self.min is not None and self.max is not None and self.min > self.max:
            raise ValueError(f"min ({self.min}) must be <= max ({self.max})")
        return self

    def bounds(self, default_min: float, default_max: float) -> tuple:
        low = self.min if self.min is not None else default_min
        high = self.max if self.max is not None else default_max
        return low, high


# ============================================================================
# Results
# ============================================================================

class ReconcileResult(BaseModel):
    """Outcome of a full resync pass."""
    removed_ids: List[str] = Field(default_factory=list)
    upserted: int = 0


class IndexStats(BaseModel):
    """Sizes of the main index structures."""
    backend: str = "redis"
    key_root: str
    indexed: int
    open: int
    closed: int
    categories: int
    platforms: int
    technologies: int
    communities: int
