# -*- coding: utf-8 -*-
"""FatSecret: Pydantic models."""

from __future__ import annotations

import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class FatSecretKeys(BaseModel):
    model_config = ConfigDict(frozen=True)

    consumer_key: str = Field(..., min_length=1)
    consumer_secret: str = Field(..., min_length=1)


class TokenPair(BaseModel):
    model_config = ConfigDict(frozen=True)

    token: str
    token_secret: str


class AuthState(str, Enum):
    init = "init"
    has_request_token = "has_request_token"
    has_auth_code = "has_auth_code"
    has_access_token = "has_access_token"


class DiaryRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    from_date: datetime.date
    to_date: datetime.date

    @model_validator(mode="after")
    def _check_order(self) -> "DiaryRange":
        if self.from_date > self.to_date:
            raise ValueError(f"from_date {self.from_date} is after to_date {self.to_date}")
        return self


class DayAggregate(BaseModel):
    date_int: int
    date: datetime.date
    calories: float = 0.0
    carbohydrate: float = 0.0
    fat: float = 0.0
    protein: float = 0.0
    extra: Dict[str, Any] = Field(default_factory=dict, description="Unrecognized raw fields")


class MonthSummary(BaseModel):
    from_date_int: int
    to_date_int: int
    days: List[DayAggregate] = Field(default_factory=list)


class FoodEntry(BaseModel):
    food_entry_id: int
    food_id: int
    serving_id: int
    date_int: int
    date: datetime.date
    food_entry_name: str = ""
    food_entry_description: str = ""
    meal: str = ""

    number_of_units: float = 0.0
    calories: float = 0.0
    carbohydrate: float = 0.0
    protein: float = 0.0
    fat: float = 0.0
    saturated_fat: float = 0.0
    polyunsaturated_fat: float = 0.0
    monounsaturated_fat: float = 0.0
    trans_fat: float = 0.0
    cholesterol: float = 0.0
    sodium: float = 0.0
    potassium: float = 0.0
    fiber: float = 0.0
    sugar: float = 0.0
    added_sugars: float = 0.0
    vitamin_a: float = 0.0
    vitamin_c: float = 0.0
    vitamin_d: float = 0.0
    calcium: float = 0.0
    iron: float = 0.0

    extra: Dict[str, Any] = Field(default_factory=dict, description="Unrecognized raw fields")


class DiaryResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    actual_from_date: Optional[datetime.date] = None
    actual_to_date: Optional[datetime.date] = None
    day_aggregates: List[DayAggregate] = Field(default_factory=list)
    entries: List[FoodEntry] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
