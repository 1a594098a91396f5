from dependency_injector import containers, providers

from bindash.config import Settings
from bindash.db.session import build_engine, build_session_factory
from bindash.report.producer import build_producer


class Container(containers.DeclarativeContainer):
    wiring_config = containers.WiringConfiguration(modules=["bindash.api.deps", "bindash.api.auth"])

    settings = providers.Singleton(Settings)

    engine = providers.Singleton(
        build_engine,
        database_url=settings.provided.database_url,
        echo=settings.provided.debug,
    )

    session_factory = providers.Singleton(
        build_session_factory,
        engine=engine,
    )

    storage = providers.Singleton(Settings.storage_config, settings)

    dashboard_config = providers.Singleton(Settings.dashboard_config, settings)

    producer = providers.Singleton(
        build_producer,
        engine=settings.provided.excel_engine,
    )
