"""User directory lookups backed by the store's user table."""

from interview_notifications.config import settings
from interview_notifications.models.domain.interview_domain import DirectoryUser
from interview_notifications.services.infrastructure.store_client import (
    StoreClient,
    get_store_client,
)

LIST_USERS_FOR_CRON = "users:getAllUsersForCron"


class UserDirectory:
    """Read-only access to users keyed by identity-provider subject id."""

    def __init__(self, client: StoreClient, service_token: str | None = None):
        self.client = client
        self.service_token = service_token

    async def list_users(self) -> list[DirectoryUser]:
        documents = await self.client.query(LIST_USERS_FOR_CRON, token=self.service_token)
        return [DirectoryUser.model_validate(doc) for doc in documents or []]

    async def users_by_id(self) -> dict[str, DirectoryUser]:
        """One listing, indexed by external id."""
        return {user.external_id: user for user in await self.list_users()}


def get_user_directory() -> UserDirectory:
    return UserDirectory(get_store_client(), settings.INTERVIEW_STORE_TOKEN)
