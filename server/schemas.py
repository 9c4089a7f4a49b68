"""Pydantic request/response schemas for the solution viewer API."""

from typing import Any, Dict, List, Optional, Union
from pydantic import BaseModel, Field


# ---- Solutions ----

class SolutionsRequest(BaseModel):
    challenge: Dict[str, Any]
    locale: Optional[str] = None


class SolutionSchema(BaseModel):
    reference: str
    tokens: List[List[str]]
    is_complex: bool
    summary: str
    score: Optional[float] = None


class CountsSchema(BaseModel):
    display: str
    plural: int


class SolutionsResponse(BaseModel):
    locale: str
    solutions: List[SolutionSchema]
    counts: CountsSchema


# ---- Scoring / browsing ----

class ScoreRequest(BaseModel):
    challenge: Dict[str, Any]
    answer: str = Field(default="", max_length=2000)
    locale: Optional[str] = None
    filters: List[str] = Field(default_factory=list)
    sort_type: Optional[str] = Field(default=None, pattern="^(similarity|alphabetical)$")
    sort_direction: Optional[str] = Field(default=None, pattern="^(asc|desc)$")
    page: int = Field(default=1, ge=1)
    page_size: Optional[Union[int, str]] = None


class PageSchema(BaseModel):
    page: int
    page_count: int
    page_size: Union[int, str]
    first_index: int
    last_index: int
    total: int


class ScoreResponse(BaseModel):
    locale: str
    answer: str
    sort_type: str
    filters: List[Dict[str, Any]]
    solutions: List[SolutionSchema]
    page: PageSchema
    counts: CountsSchema


# ---- Evaluation ----

class EvaluateRequest(BaseModel):
    challenge: Dict[str, Any]
    answer: str = Field(..., max_length=2000)
    is_correct: bool
    locale: Optional[str] = None


class DiffTokenSchema(BaseModel):
    value: str
    count: int
    added: bool
    removed: bool
    ignorable: bool


class EvaluateResponse(BaseModel):
    closest: Optional[SolutionSchema] = None
    correction: Optional[List[DiffTokenSchema]] = None


# ---- Diff ----

class DiffRequest(BaseModel):
    left: str = Field(..., max_length=2000)
    right: str = Field(..., max_length=2000)
    locale: str = ""


class DiffResponse(BaseModel):
    equivalent: bool
    tokens: List[DiffTokenSchema] = Field(default_factory=list)
    significant_length: int = 0
