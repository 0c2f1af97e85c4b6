"""API Key API routes.

All routes act on the session user's own keys only.
"""

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse

from keydash.core.application.security import get_current_user_id
from keydash.modules.api_keys.application.dependencies import get_api_key_service
from keydash.modules.api_keys.application.service import ApiKeyService
from keydash.modules.api_keys.domain.entities import ApiKey
from keydash.modules.api_keys.domain.exceptions import ApiKeyInvalidError
from keydash.modules.api_keys.interfaces.schemas import (
    ApiKeyResponse,
    ApiKeyWriteRequest,
    DeletedResponse,
    GeneratedKeyResponse,
    KeyValidationResponse,
    ValidatedKeyData,
)

router = APIRouter(prefix="/keys", tags=["api-keys"])


def _to_response(api_key: ApiKey) -> ApiKeyResponse:
    return ApiKeyResponse(
        id=api_key.id,
        name=api_key.name,
        usage=api_key.usage_count,
        key=api_key.key_value,
    )


@router.get(
    "",
    response_model=list[ApiKeyResponse],
    summary="List API keys",
    description="Lists the current user's keys ordered by name.",
)
async def list_api_keys(
    user_id: str = Depends(get_current_user_id),
    service: ApiKeyService = Depends(get_api_key_service),
) -> list[ApiKeyResponse]:
    keys = await service.list_keys(user_id)
    return [_to_response(k) for k in keys]


@router.post(
    "",
    response_model=ApiKeyResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create API key",
)
async def create_api_key(
    request: ApiKeyWriteRequest,
    user_id: str = Depends(get_current_user_id),
    service: ApiKeyService = Depends(get_api_key_service),
) -> ApiKeyResponse:
    name, key = request.require_fields()
    created = await service.create_key(user_id=user_id, name=name, key_value=key)
    return _to_response(created)


@router.get(
    "/generate",
    response_model=GeneratedKeyResponse,
    summary="Generate a key value",
    description="Returns a fresh default key value; nothing is stored.",
)
async def generate_api_key_value(
    _user_id: str = Depends(get_current_user_id),
) -> GeneratedKeyResponse:
    return GeneratedKeyResponse(key=ApiKeyService.generate_key_value())


@router.get(
    "/validate",
    response_model=KeyValidationResponse,
    response_model_exclude_none=True,
    summary="Validate an API key",
    description="Validates one of the caller's keys and counts the check as a use.",
    responses={400: {"description": "Missing key parameter"}},
)
async def validate_api_key(
    key: str | None = Query(None, description="API key to validate"),
    user_id: str = Depends(get_current_user_id),
    service: ApiKeyService = Depends(get_api_key_service),
) -> KeyValidationResponse | JSONResponse:
    if not key:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"valid": False, "error": "API key parameter is required"},
        )

    try:
        api_key, usage_count = await service.validate_and_record(key, user_id)
    except ApiKeyInvalidError as e:
        return KeyValidationResponse(valid=False, error=e.message)

    return KeyValidationResponse(
        valid=True,
        message="API key is valid",
        data=ValidatedKeyData(id=api_key.id, name=api_key.name, usage_count=usage_count),
    )


@router.put("/{key_id}", response_model=ApiKeyResponse, summary="Update API key")
async def update_api_key(
    key_id: str,
    request: ApiKeyWriteRequest,
    user_id: str = Depends(get_current_user_id),
    service: ApiKeyService = Depends(get_api_key_service),
) -> ApiKeyResponse:
    name, key = request.require_fields()
    updated = await service.update_key(
        key_id=key_id, user_id=user_id, name=name, key_value=key
    )
    return _to_response(updated)


@router.delete("/{key_id}", response_model=DeletedResponse, summary="Delete API key")
async def delete_api_key(
    key_id: str,
    user_id: str = Depends(get_current_user_id),
    service: ApiKeyService = Depends(get_api_key_service),
) -> DeletedResponse:
    await service.delete_key(key_id=key_id, user_id=user_id)
    return DeletedResponse()
