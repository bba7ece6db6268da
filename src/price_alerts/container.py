"""DI container. Built once in the app lifespan; routes resolve it through deps.py."""
from dependency_injector import containers, providers
from sqlalchemy.engine import Engine

from price_alerts.catalog import (HttpProductCatalog, ProductCatalog,
                                  SqlProductCatalog)
from price_alerts.config import Settings, get_settings
from price_alerts.db.sessions import create_db_engine
from price_alerts.services import (AlertEvaluator, AnonymousAlertService,
                                   NotificationDispatcher, NotificationService)
from price_alerts.store import AlertStore, AnonymousAlertStore
from price_alerts.transport import (ConnectionRegistry, EmailTransport,
                                    LoggingEmailTransport,
                                    ResendEmailTransport)


def build_catalog(settings: Settings, engine: Engine) -> ProductCatalog:
    """HTTP catalog when CATALOG_URL is set, otherwise the shared product table."""
    if settings.catalog_url:
        return HttpProductCatalog(settings.catalog_url, timeout=settings.catalog_timeout_seconds)
    return SqlProductCatalog(engine)


def build_email_transport(settings: Settings) -> EmailTransport:
    if settings.resend_api_key:
        return ResendEmailTransport(settings.resend_api_key, settings.from_email)
    return LoggingEmailTransport()


class Container(containers.DeclarativeContainer):
    settings = providers.Singleton(get_settings)

    engine = providers.Singleton(
        create_db_engine,
        settings.provided.database_url,
        echo=settings.provided.sql_echo,
    )
    catalog = providers.Singleton(build_catalog, settings, engine)
    email_transport = providers.Singleton(build_email_transport, settings)
    registry = providers.Singleton(ConnectionRegistry)

    alert_store = providers.Singleton(AlertStore, engine, catalog)
    anonymous_store = providers.Singleton(AnonymousAlertStore, engine, catalog)

    evaluator = providers.Singleton(AlertEvaluator, alert_store, anonymous_store)
    dispatcher = providers.Singleton(
        NotificationDispatcher,
        store=alert_store,
        catalog=catalog,
        registry=registry,
        email_transport=email_transport,
    )
    notification_service = providers.Singleton(
        NotificationService,
        store=alert_store,
        evaluator=evaluator,
        dispatcher=dispatcher,
        catalog=catalog,
        email_transport=email_transport,
        frontend_url=settings.provided.frontend_url,
    )
    anonymous_service = providers.Singleton(
        AnonymousAlertService,
        store=anonymous_store,
        catalog=catalog,
        email_transport=email_transport,
        frontend_url=settings.provided.frontend_url,
        verification_ttl_hours=settings.provided.anonymous_verification_ttl_hours,
    )


def init_container() -> Container:
    return Container()
