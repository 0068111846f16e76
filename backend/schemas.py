from __future__ import annotations

from typing import Any, Dict, List, Literal, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from scraper.types import LottoType

from .errors import MalformedRequestError

RequestModel = TypeVar("RequestModel", bound=BaseModel)


class StartScrapeRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    lotto_type: LottoType = Field(..., description="Lottery to scrape, e.g. 'thai'.")


class StartScrapeResponse(BaseModel):
    message: str
    lotto_type: str


class DrawRecordModel(BaseModel):
    draw_date: str
    first_prize: str
    last_two_digits: Optional[str] = None


class StatusResponse(BaseModel):
    is_running: bool
    lotto_type: Optional[str] = None
    progress: List[str]
    results: List[DrawRecordModel]


class AnalyzeRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    numbers: List[str] = Field(..., description="Numbers ordered oldest first.")

    @field_validator("numbers")
    @classmethod
    def validate_numbers(cls, value: List[str]) -> List[str]:
        if len(value) > 10000:
            raise ValueError("At most 10000 numbers can be analysed at once.")
        return value


class AnalyzeScrapedRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    field: Literal["first_prize", "last_two_digits"] = "first_prize"


class PredictionModel(BaseModel):
    prediction: str
    confidence: str
    method: str
    alternatives: List[str]


class AnalysisResponse(BaseModel):
    statistical_summary: Dict[str, Any]
    pattern_analysis: Dict[str, Any]
    prediction_output: PredictionModel
    detailed_explanation: Dict[str, str]


def parse_payload(model: Type[RequestModel], payload: Any) -> RequestModel:
    if not isinstance(payload, Mapping):
        raise MalformedRequestError("Request body must be a JSON object.")
    try:
        return model(**payload)
    except ValidationError as exc:
        first = exc.errors()[0]
        location = ".".join(str(part) for part in first.get("loc", ())) or "body"
        raise MalformedRequestError(f"Invalid request field '{location}': {first.get('msg')}") from exc
