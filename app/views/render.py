"""Turn validated flow results into ordered display sections.

Every icon comes from an enumeration keyed by a schema enum or a schema
field, so a section can never point at an icon that does not exist.
"""
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Dict, List, Optional
from app.models.schemas import (
    AdviceIcon,
    CropAgentAdvice,
    MarketAnalysisResult,
    PostHarvestAdvice,
    TrendDirection,
)


@dataclass(frozen=True)
class DisplaySection:
    key: str
    title: str
    content: str
    icon: Optional[str] = None


class PostHarvestSection(Enum):
    STORAGE = ("storage_recommendations", "Storage Recommendations", "Warehouse")
    TRANSPORTATION = ("transportation_options", "Transportation Options", "Truck")
    MARKET_LINKAGES = ("market_linkages", "Market Linkages", "Store")
    VALUE_ADDITION = ("value_addition_opportunities", "Value Addition Opportunities", "Sparkles")
    PRICING = ("pricing_strategy", "Pricing Strategy", "BadgePercent")
    QUALITY_CONTROL = ("quality_control_measures", "Quality Control Measures", "Microscope")
    HANDLING = ("post_harvest_handling", "Post-Harvest Handling", "Package")
    WASTE = ("waste_management", "Waste Management", "Recycle")

    def __init__(self, field_name: str, title: str, icon: str):
        self.field_name = field_name
        self.title = title
        self.icon = icon


class TrendIcon(Enum):
    UPWARD = ("ArrowUp", "green")
    DOWNWARD = ("ArrowDown", "red")
    STABLE = ("Minus", "gray")
    VOLATILE = ("BarChart", "yellow")

    def __init__(self, icon: str, tone: str):
        self.icon = icon
        self.tone = tone


def trend_icon(direction: TrendDirection) -> TrendIcon:
    # member names mirror TrendDirection one to one
    return TrendIcon[direction.name]


def advice_icon(icon: Optional[AdviceIcon]) -> Optional[str]:
    return icon.value if icon is not None else None


def post_harvest_sections(advice: PostHarvestAdvice) -> List[DisplaySection]:
    return [
        DisplaySection(
            key=section.name.lower(),
            title=section.title,
            content=getattr(advice, section.field_name),
            icon=section.icon,
        )
        for section in PostHarvestSection
    ]


def crop_agent_sections(advice: CropAgentAdvice) -> List[DisplaySection]:
    return [
        DisplaySection(key=f"advice-{index}", title=item.title, content=item.content, icon=advice_icon(item.icon))
        for index, item in enumerate(advice.structured_advice)
    ]


def market_analysis_card(result: MarketAnalysisResult) -> Dict[str, Any]:
    price = result.core_price_info.current_price
    price_range = result.core_price_info.daily_price_range
    trend = result.historical_trend_analysis.price_trend
    change = result.historical_trend_analysis.price_change
    dynamics = result.market_dynamics
    icon = trend_icon(trend.direction)

    return {
        "summary": result.market_summary,
        "currentPrice": f"{price.price:,.2f} {price.unit}",
        "market": price.market,
        "dailyRange": f"{price_range.low:,.2f} - {price_range.high:,.2f} {price_range.unit}",
        "trend": {
            "direction": trend.direction.value,
            "period": trend.period,
            "icon": icon.icon,
            "tone": icon.tone,
        },
        "change": f"{change.change:+.2f} ({change.percentage_change:+.2f}%)",
        "supply": {"status": dynamics.supply_status.status, "impact": dynamics.supply_status.impact},
        "demand": {"status": dynamics.demand_status.status, "impact": dynamics.demand_status.impact},
        "recommendation": result.actionable_insight.recommendation,
        "reasoning": result.actionable_insight.reasoning,
        "source": f"{result.additional_info.data_source} (updated {result.additional_info.last_updated})",
    }


def render_result(result: Any) -> Dict[str, Any]:
    if isinstance(result, PostHarvestAdvice):
        return {"kind": "post_harvest", "sections": [asdict(s) for s in post_harvest_sections(result)]}
    if isinstance(result, MarketAnalysisResult):
        return {"kind": "market_analysis", "card": market_analysis_card(result)}
    if isinstance(result, CropAgentAdvice):
        return {
            "kind": "crop_agent",
            "summary": result.summary,
            "sections": [asdict(s) for s in crop_agent_sections(result)],
        }
    raise TypeError(f"No view for result type {type(result).__name__}")
