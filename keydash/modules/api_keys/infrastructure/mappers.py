"""API Key entity-model mappers."""

from keydash.core.infrastructure.database.mapper import BaseMapper
from keydash.modules.api_keys.domain.entities import ApiKey
from keydash.modules.api_keys.infrastructure.models import ApiKeyModel


class ApiKeyMapper(BaseMapper[ApiKey, ApiKeyModel]):
    """API Key entity-model mapper."""

    def to_domain(self, model: ApiKeyModel) -> ApiKey:
        return ApiKey(
            id=model.id,
            user_id=model.user_id,
            name=model.name,
            key_value=model.key_value,
            usage_count=model.usage_count,
        )

    def to_model(self, entity: ApiKey) -> ApiKeyModel:
        return ApiKeyModel(
            id=entity.id,
            user_id=entity.user_id,
            name=entity.name,
            key_value=entity.key_value,
            usage_count=entity.usage_count,
        )
