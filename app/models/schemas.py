from pydantic import BaseModel, ConfigDict, Field, StringConstraints, field_validator
from pydantic.alias_generators import to_camel
from typing import Optional, List, Literal, Dict, Any, Annotated
from datetime import date, datetime
from enum import Enum

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
EARLIEST_SOWING_DATE = date(1900, 1, 1)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StrictCamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")


# ---------- Crops ----------

class CropContext(CamelModel):
    id: NonEmptyStr
    crop_name: NonEmptyStr
    field_size: NonEmptyStr
    location: NonEmptyStr
    sowing_date: NonEmptyStr
    additional_info: Optional[str] = None

    @field_validator("sowing_date")
    @classmethod
    def sowing_date_is_iso(cls, value: str) -> str:
        try:
            datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            raise ValueError("sowingDate must be an ISO date string")
        return value


class NewCrop(CamelModel):
    crop_name: str = Field(..., min_length=2, description="Crop name is required.")
    field_size: str = Field(..., min_length=1, description="Field size is required.")
    location: str = Field(..., min_length=2, description="Location is required.")
    sowing_date: date
    additional_info: Optional[str] = None

    @field_validator("sowing_date")
    @classmethod
    def sowing_date_in_range(cls, value: date) -> date:
        if value > date.today() or value < EARLIEST_SOWING_DATE:
            raise ValueError("sowingDate must be between 1900-01-01 and today")
        return value


class CropCreatedResponse(CamelModel):
    id: str
    message: str


# ---------- Market analysis ----------

class TrendDirection(str, Enum):
    UPWARD = "Upward"
    DOWNWARD = "Downward"
    STABLE = "Stable"
    VOLATILE = "Volatile"


class MarketAnalysisInput(CamelModel):
    commodity: NonEmptyStr
    location: NonEmptyStr
    market: Optional[str] = None
    user_notes: Optional[str] = None
    query: Optional[str] = None
    language: Optional[str] = None


class CurrentPrice(CamelModel):
    price: float
    unit: NonEmptyStr
    market: NonEmptyStr


class DailyPriceRange(CamelModel):
    low: float
    high: float
    unit: NonEmptyStr


class CorePriceInfo(CamelModel):
    current_price: CurrentPrice
    daily_price_range: DailyPriceRange


class PriceTrend(CamelModel):
    direction: TrendDirection
    period: NonEmptyStr


class PriceChange(CamelModel):
    change: float
    percentage_change: float


class HistoricalTrendAnalysis(CamelModel):
    price_trend: PriceTrend
    price_change: PriceChange


class MarketStatus(CamelModel):
    status: NonEmptyStr
    impact: NonEmptyStr


class MarketDynamics(CamelModel):
    supply_status: MarketStatus
    demand_status: MarketStatus


class ActionableInsight(CamelModel):
    recommendation: NonEmptyStr
    reasoning: NonEmptyStr


class SourceAttribution(CamelModel):
    data_source: NonEmptyStr
    last_updated: NonEmptyStr


class MarketAnalysisResult(CamelModel):
    market_summary: NonEmptyStr
    core_price_info: CorePriceInfo
    historical_trend_analysis: HistoricalTrendAnalysis
    market_dynamics: MarketDynamics
    actionable_insight: ActionableInsight
    additional_info: SourceAttribution


# ---------- Post-harvest ----------

class PostHarvestInput(CamelModel):
    crop_context: CropContext
    estimated_yield: Optional[str] = None
    language: Optional[str] = None


class PostHarvestAdvice(StrictCamelModel):
    storage_recommendations: NonEmptyStr
    transportation_options: NonEmptyStr
    market_linkages: NonEmptyStr
    value_addition_opportunities: NonEmptyStr
    pricing_strategy: NonEmptyStr
    quality_control_measures: NonEmptyStr
    post_harvest_handling: NonEmptyStr
    waste_management: NonEmptyStr


# ---------- Current crop agent ----------

class AdviceIcon(str, Enum):
    BOT = "Bot"
    TRENDING_UP = "TrendingUp"
    LANDMARK = "Landmark"
    FLASK_CONICAL = "FlaskConical"
    SHIELD_ALERT = "ShieldAlert"
    DROPLET = "Droplet"
    INFO = "Info"


class CropAgentQuery(CamelModel):
    query: Annotated[str, StringConstraints(strip_whitespace=True, min_length=5)]
    crop_context: CropContext
    language: Optional[str] = None


class AdviceItem(CamelModel):
    title: NonEmptyStr
    content: NonEmptyStr
    icon: Optional[AdviceIcon] = None


class CropAgentAdvice(CamelModel):
    summary: NonEmptyStr
    structured_advice: List[AdviceItem]


# ---------- Conversation ----------

class Message(CamelModel):
    role: Literal["user", "model"]
    content: str


class ChatRequest(CamelModel):
    query: NonEmptyStr
    language: Optional[str] = None
    history: List[Message] = Field(default_factory=list)


class ChatResponse(CamelModel):
    reply: str


class SpeechRequest(CamelModel):
    text: NonEmptyStr


class SpeechResult(CamelModel):
    audio_data_uri: str


# ---------- Page sessions ----------

class SessionCreatedResponse(CamelModel):
    session_id: str
    result_policy: str


class SessionQueryRequest(CamelModel):
    selected_crop_id: Optional[str] = None
    query: Optional[str] = None
    language: Optional[str] = None


class SessionMarketRequest(CamelModel):
    selected_crop_id: Optional[str] = None
    language: Optional[str] = None


class SessionPostHarvestRequest(CamelModel):
    selected_crop_id: Optional[str] = None
    estimated_yield: Optional[str] = None
    language: Optional[str] = None


class SessionChatRequest(CamelModel):
    query: str
    language: Optional[str] = None


class SessionSnapshot(CamelModel):
    session_id: str
    state: Dict[str, Any]
    messages: List[Message]
    audio: Dict[str, Any]
