"""GitHub summarizer API route.

Every failure on this route, including authentication and body parsing,
uses the ``{"success": false, "error": ...}`` body instead of the shared
error handlers.
"""

from collections.abc import Awaitable, Callable

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute
from loguru import logger

from keydash.core.application.security import get_current_user_id
from keydash.core.domain.exceptions import DomainException
from keydash.core.interfaces.http.exceptions import validation_error_message
from keydash.modules.summarizer.application.dependencies import (
    get_github_summarizer_service,
)
from keydash.modules.summarizer.application.service import GithubSummarizerService
from keydash.modules.summarizer.interfaces.schemas import (
    SummarizeErrorResponse,
    SummarizeRequest,
    SummarizeResponse,
    SummaryData,
)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=SummarizeErrorResponse(error=message).model_dump(),
    )


class SummarizerRoute(APIRoute):
    """Renders errors from dependencies, body parsing and the endpoint alike."""

    def get_route_handler(self) -> Callable[[Request], Awaitable[Response]]:
        handler = super().get_route_handler()

        async def summarizer_route_handler(request: Request) -> Response:
            try:
                return await handler(request)
            except RequestValidationError as e:
                return _error(status.HTTP_400_BAD_REQUEST, validation_error_message(e))
            except DomainException as e:
                if e.http_status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
                    logger.error(f"{e.error_code}: {e.message}")
                return _error(e.http_status_code, e.message)
            except HTTPException:
                raise
            except Exception as e:
                logger.exception(f"Error in github summarizer: {e}")
                return _error(
                    status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error"
                )

        return summarizer_route_handler


router = APIRouter(tags=["summarizer"], route_class=SummarizerRoute)


@router.post(
    "/github-summarizer",
    response_model=SummarizeResponse,
    summary="Summarize a GitHub repository",
    description="Spends one use of the given key on a README summary.",
    responses={
        400: {"model": SummarizeErrorResponse},
        401: {"model": SummarizeErrorResponse},
        404: {"model": SummarizeErrorResponse},
        500: {"model": SummarizeErrorResponse},
    },
)
async def summarize_github_repository(
    request: SummarizeRequest,
    user_id: str = Depends(get_current_user_id),
    service: GithubSummarizerService = Depends(get_github_summarizer_service),
) -> SummarizeResponse | JSONResponse:
    if not request.api_key:
        return _error(status.HTTP_400_BAD_REQUEST, "API key is required")
    if not request.github_url:
        return _error(status.HTTP_400_BAD_REQUEST, "GitHub URL is required")

    outcome = await service.summarize_repository(
        user_id=user_id,
        api_key=request.api_key,
        github_url=request.github_url,
    )
    return SummarizeResponse(data=SummaryData.model_validate(outcome.model_dump()))
