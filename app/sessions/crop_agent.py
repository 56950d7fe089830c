import logging
from typing import Any, Awaitable, Callable, Dict, Optional, Set
from app.core.errors import FlowError, SubmissionInProgress, ValidationError
from app.flows.current_crop_agent import ask_current_crop_agent
from app.flows.market_analysis import market_analysis
from app.flows.post_harvest import get_post_harvest_advice
from app.models.schemas import CropContext
from app.services.crop_service import get_current_crop
from app.sessions.form_state import (
    Action,
    Failed,
    FormState,
    Idle,
    ResultPolicy,
    Submitting,
    Succeeded,
    describe_state,
)
from app.views.render import render_result

logger = logging.getLogger(__name__)

Flow = Callable[[Any], Awaitable[Any]]

FAILURE_MESSAGES = {
    Action.QUERY: "The agent could not process your request.",
    Action.MARKET_ANALYSIS: "Could not fetch market analysis.",
    Action.POST_HARVEST: "Could not fetch post-harvest advice.",
}


class CropAgentSession:
    """Page state of the current-crop agent.

    The three actions share one result slot. Each action may have at most one
    submission in flight; different actions may overlap, and ``policy``
    decides which response ends up in the slot when they resolve out of order.
    """

    def __init__(
        self,
        policy: ResultPolicy = ResultPolicy.LAST_WRITE_WINS,
        lookup_crop: Callable[[str], Awaitable[Optional[CropContext]]] = get_current_crop,
        flows: Optional[Dict[Action, Flow]] = None,
    ):
        self.policy = policy
        self.state: FormState = Idle()
        self._lookup_crop = lookup_crop
        self._flows: Dict[Action, Flow] = {
            Action.QUERY: ask_current_crop_agent,
            Action.MARKET_ANALYSIS: market_analysis,
            Action.POST_HARVEST: get_post_harvest_advice,
        }
        if flows:
            self._flows.update(flows)
        self._in_flight: Set[Action] = set()
        self._issued = 0

    @property
    def is_submitting(self) -> bool:
        return bool(self._in_flight)

    def is_pending(self, action: Action) -> bool:
        return action in self._in_flight

    async def select_crop(self, crop_id: Optional[str]) -> CropContext:
        crop = await self._lookup_crop(crop_id) if crop_id else None
        if crop is None:
            raise ValidationError("Please select a crop first.", field="selectedCropId")
        return crop

    async def ask(self, crop_id: Optional[str], query: Optional[str], language: Optional[str] = None) -> FormState:
        if not query or len(query.strip()) < 5:
            raise ValidationError("Please enter a question with at least 5 characters.", field="query")
        crop = await self.select_crop(crop_id)
        return await self._run(Action.QUERY, {
            "query": query,
            "cropContext": crop,
            "language": language,
        })

    async def analyse_market(self, crop_id: Optional[str], language: Optional[str] = None) -> FormState:
        crop = await self.select_crop(crop_id)
        return await self._run(Action.MARKET_ANALYSIS, {
            "commodity": crop.crop_name,
            "location": crop.location,
            "query": f"Provide a market analysis for {crop.crop_name} in {crop.location}",
            "language": language,
        })

    async def post_harvest_help(self, crop_id: Optional[str], estimated_yield: Optional[str], language: Optional[str] = None) -> FormState:
        if not estimated_yield or not estimated_yield.strip():
            raise ValidationError("Please provide an estimated yield.", field="yield")
        crop = await self.select_crop(crop_id)
        return await self._run(Action.POST_HARVEST, {
            "cropContext": crop,
            "estimatedYield": estimated_yield,
            "language": language,
        })

    async def _run(self, action: Action, payload: Dict[str, Any]) -> FormState:
        if action in self._in_flight:
            raise SubmissionInProgress(f"{action.value} is already being submitted")

        self._in_flight.add(action)
        self._issued += 1
        ticket = self._issued
        self.state = Submitting(action, ticket)
        logger.info(f"Submitting {action.value} (request {ticket})")

        try:
            result = await self._flows[action](payload)
        except FlowError as e:
            logger.error(f"{action.value} request {ticket} failed: {str(e)}", exc_info=True)
            self._commit(Failed(action, ticket, FAILURE_MESSAGES[action]))
        except Exception:
            logger.error(f"{action.value} request {ticket} raised unexpectedly", exc_info=True)
            self._commit(Failed(action, ticket, FAILURE_MESSAGES[action]))
            raise
        else:
            self._commit(Succeeded(action, ticket, result))
        finally:
            self._in_flight.discard(action)

        return self.state

    def _commit(self, state: FormState) -> bool:
        if self.policy is ResultPolicy.LATEST_REQUEST and state.ticket != self._issued:
            logger.warning(
                f"Discarding stale {state.action.value} response (request {state.ticket}, latest {self._issued})"
            )
            return False
        self.state = state
        return True

    def snapshot(self) -> Dict[str, Any]:
        described = describe_state(self.state)
        if isinstance(self.state, Succeeded):
            described["result"] = self.state.result.model_dump(by_alias=True, mode="json")
            described["view"] = render_result(self.state.result)
        return described
