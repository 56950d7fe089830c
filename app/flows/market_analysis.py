from typing import Any
from app.flows.common import validate_input, validate_output, resolve_language, or_placeholder, generate_json
from app.models.schemas import MarketAnalysisInput, MarketAnalysisResult
from app.services.prompts import MARKET_ANALYSIS_PROMPT


def build_market_analysis_prompt(request: MarketAnalysisInput) -> str:
    return MARKET_ANALYSIS_PROMPT.format(
        commodity=request.commodity,
        location=request.location,
        market=or_placeholder(request.market, "Nearest major mandi"),
        user_notes=or_placeholder(request.user_notes),
        query=or_placeholder(request.query, f"Provide a market analysis for {request.commodity} in {request.location}"),
        language=resolve_language(request.language),
    )


async def market_analysis(payload: Any) -> MarketAnalysisResult:
    request = validate_input(MarketAnalysisInput, payload)
    data = await generate_json(build_market_analysis_prompt(request), "MarketAnalysisOutput")
    return validate_output(MarketAnalysisResult, data, "MarketAnalysisOutput")
