"""Cut optimization endpoint."""

import asyncio
import logging

from fastapi import APIRouter
from starlette.concurrency import run_in_threadpool

from cut_optimizer.application.config import OptimizeRequest
from cut_optimizer.application.dtos import OptimizationOutput
from cut_optimizer.web.dependencies import OptimizeCommandDep, SettingsDep
from cut_optimizer.web.exceptions import RequestTimeoutError
from cut_optimizer.web.schemas import ErrorResponseSchema

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/optimize", tags=["optimize"])

# Extra seconds allowed for building the response after the engine budget
RESPONSE_GRACE = 1.0


@router.post(
    "",
    response_model=OptimizationOutput,
    responses={
        400: {"model": ErrorResponseSchema},
        408: {"model": ErrorResponseSchema},
        413: {"model": ErrorResponseSchema},
        503: {"model": ErrorResponseSchema},
    },
)
async def optimize(
    request: OptimizeRequest,
    command: OptimizeCommandDep,
    settings: SettingsDep,
) -> OptimizationOutput:
    """Optimize a cut list against the given stock sheets.

    The optimization runs in a worker thread. Its budget is capped to the
    server timeout, so a slow request normally returns the best layout
    found in time rather than failing.

    Args:
        request: Pieces, stock sheets and options.
        command: Injected OptimizeCommand.
        settings: Injected server settings.

    Returns:
        The winning layout with per-sheet placements and totals.

    Raises:
        RequestTimeoutError: If the optimization overruns the server timeout.
    """
    try:
        outcome = await asyncio.wait_for(
            run_in_threadpool(command.execute, request, settings.timeout),
            timeout=settings.timeout + RESPONSE_GRACE,
        )
    except asyncio.TimeoutError as e:
        logger.error("Optimization exceeded %s seconds", settings.timeout)
        raise RequestTimeoutError(settings.timeout) from e

    return outcome.output
