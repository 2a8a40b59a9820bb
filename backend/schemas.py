from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class NumberCheckRequest(BaseModel):
    numbers: List[str] = Field(..., description="Ticket numbers to check against the latest draw.")

    @field_validator("numbers", mode="before")
    @classmethod
    def coerce_numbers(cls, value):
        if not isinstance(value, list):
            return []
        return [str(n).strip() for n in value]

    @field_validator("numbers")
    @classmethod
    def validate_numbers(cls, value: List[str]) -> List[str]:
        if not value:
            raise ValueError("numbers[] is required")
        return value


class PrizeMatchResponse(BaseModel):
    prize: str
    match: str


class NumberCheckResult(BaseModel):
    number: str
    matches: List[PrizeMatchResponse]


class LotteryResultResponse(BaseModel):
    date: Optional[str] = None
    firstPrize: Optional[str] = None
    nearFirstPrize: Optional[List[str]] = None
    front3: List[str] = Field(default_factory=list)
    last3: List[str] = Field(default_factory=list)
    last2: Optional[str] = None
    prize2: Optional[List[str]] = None
    prize3: Optional[List[str]] = None
    prize4: Optional[List[str]] = None
    prize5: Optional[List[str]] = None
    source: str
    fetchedAt: str


class HealthResponse(BaseModel):
    status: str
    timestamp: str
    services: dict
    uptime: int
