"""Pydantic schemas."""
from farmledger.schemas.auth import Token, UserCreate, UserLogin, UserResponse
from farmledger.schemas.breakeven import (
    AssumptionsResponse,
    AssumptionsUpdate,
    BreakEvenMetricsResponse,
    DataQualityResponse,
    DataSource,
    MetricsResponse,
    MonthlyProjectionResponse,
    SuggestedAssumptionsResponse,
)
from farmledger.schemas.farm import FarmCreate, FarmMemberAdd, FarmResponse
from farmledger.schemas.records import ExpenseCreate, ExpenseResponse, SaleCreate, SaleResponse

__all__ = [
    "Token",
    "UserCreate",
    "UserLogin",
    "UserResponse",
    "AssumptionsResponse",
    "AssumptionsUpdate",
    "BreakEvenMetricsResponse",
    "DataQualityResponse",
    "DataSource",
    "MetricsResponse",
    "MonthlyProjectionResponse",
    "SuggestedAssumptionsResponse",
    "FarmCreate",
    "FarmMemberAdd",
    "FarmResponse",
    "ExpenseCreate",
    "ExpenseResponse",
    "SaleCreate",
    "SaleResponse",
]
