from datetime import timedelta

from fastapi import Header

from ...application.services import (
    ConnectionService,
    PostScheduler,
    PublishOrchestrator,
    TokenLifecycleManager,
)
from ...config import settings
from ...domain.platform import Platform
from ...domain.ports import CredentialStore
from ...infrastructure import InMemoryCredentialStore, PlatformAdapterFactory
from ...infrastructure.oauth import LinkedInOAuthClient
from ...infrastructure.persistence import Database, SqlAlchemyCredentialStore

DEFAULT_TENANT = "default"

# Singleton instances
_database: Database | None = None
_credential_store: CredentialStore | None = None
_linkedin_client: LinkedInOAuthClient | None = None
_orchestrator: PublishOrchestrator | None = None
_post_scheduler: PostScheduler | None = None
_connection_service: ConnectionService | None = None


def get_tenant_id(x_tenant_id: str | None = Header(default=None)) -> str:
    return (x_tenant_id or "").strip() or DEFAULT_TENANT


def uses_database() -> bool:
    return settings.credential_store == "database"


def get_database() -> Database:
    global _database
    if _database is None:
        _database = Database(settings.database_url)
    return _database


def get_credential_store() -> CredentialStore:
    global _credential_store
    if _credential_store is None:
        if uses_database():
            _credential_store = SqlAlchemyCredentialStore(get_database())
        else:
            _credential_store = InMemoryCredentialStore()
    return _credential_store


def get_linkedin_client() -> LinkedInOAuthClient:
    global _linkedin_client
    if _linkedin_client is None:
        _linkedin_client = LinkedInOAuthClient(
            client_id=settings.linkedin_client_id,
            client_secret=settings.linkedin_client_secret,
            redirect_uri=settings.linkedin_redirect_uri,
            scope=settings.linkedin_scope,
            timeout=settings.http_timeout_seconds,
        )
    return _linkedin_client


def get_orchestrator() -> PublishOrchestrator:
    global _orchestrator
    if _orchestrator is None:
        store = get_credential_store()
        _orchestrator = PublishOrchestrator(
            store=store,
            adapters=PlatformAdapterFactory.get_all_adapters(settings),
            token_managers={
                Platform.LINKEDIN: TokenLifecycleManager(
                    Platform.LINKEDIN.value, store, get_linkedin_client()
                ),
            },
            timeout=settings.publish_timeout_seconds,
        )
    return _orchestrator


def get_post_scheduler() -> PostScheduler:
    global _post_scheduler
    if _post_scheduler is None:
        _post_scheduler = PostScheduler(
            get_orchestrator(),
            retention=timedelta(hours=settings.scheduled_post_retention_hours),
        )
    return _post_scheduler


def get_connection_service() -> ConnectionService:
    global _connection_service
    if _connection_service is None:
        _connection_service = ConnectionService(get_credential_store(), get_linkedin_client())
    return _connection_service
