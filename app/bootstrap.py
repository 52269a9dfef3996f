"""Application bootstrap wiring for startup validation and dependency assembly."""

from dataclasses import dataclass
from datetime import timedelta

from fastapi import FastAPI

from app.analytics import PortfolioAnalyticsSnapshotService
from app.api import create_api_application
from app.config import AppSettings, config_configure_logging, config_load_settings
from app.db import (
    SQLAlchemyAnalyticsSnapshotService,
    SQLAlchemyDatabaseHealthService,
    SQLAlchemyTradeRepositoryService,
    db_create_engine,
)
from app.jobs import AnalyticsRecalculationOrchestrator, AnalyticsRecalculationScheduler


@dataclass(frozen=True)
class BootstrapComponents:
    """Runtime components shared by HTTP and batch entrypoints.

    Attributes:
        settings: Validated application settings.
        db_health_service: Database health service.
        trade_repository: Trade repository service.
        snapshot_service: Analytics snapshot service.
        recalculation_orchestrator: Batch recompute orchestrator.
    """

    settings: AppSettings
    db_health_service: SQLAlchemyDatabaseHealthService
    trade_repository: SQLAlchemyTradeRepositoryService
    snapshot_service: PortfolioAnalyticsSnapshotService
    recalculation_orchestrator: AnalyticsRecalculationOrchestrator


def bootstrap_create_components() -> BootstrapComponents:
    """Load settings, configure logging and wire DB, analytics and job services.

    Returns:
        BootstrapComponents: Wired runtime components.

    Raises:
        SettingsLoadError: Raised when startup configuration validation fails.
    """

    settings = config_load_settings()
    config_configure_logging(level=settings.log_level)
    engine = db_create_engine(database_url=settings.database_url)
    trade_repository = SQLAlchemyTradeRepositoryService(engine=engine)
    snapshot_service = PortfolioAnalyticsSnapshotService(
        trade_repository=trade_repository,
        snapshot_repository=SQLAlchemyAnalyticsSnapshotService(engine=engine),
        default_label=settings.analytics_default_label,
        freshness_window=timedelta(hours=settings.analytics_freshness_hours),
        report_timezone=settings.analytics_report_timezone,
    )
    return BootstrapComponents(
        settings=settings,
        db_health_service=SQLAlchemyDatabaseHealthService(engine=engine),
        trade_repository=trade_repository,
        snapshot_service=snapshot_service,
        recalculation_orchestrator=AnalyticsRecalculationOrchestrator(
            trade_repository=trade_repository,
            snapshot_service=snapshot_service,
        ),
    )


def bootstrap_create_application() -> FastAPI:
    """Assemble the runtime application after validating startup configuration.

    Returns:
        FastAPI: Fully initialized FastAPI application instance.

    Raises:
        SettingsLoadError: Raised when startup configuration validation fails.
    """

    components = bootstrap_create_components()
    settings = components.settings
    recalculation_scheduler = None
    if settings.analytics_scheduler_enabled:
        recalculation_scheduler = AnalyticsRecalculationScheduler(
            orchestrator=components.recalculation_orchestrator,
            hour=settings.analytics_recalculate_hour,
            minute=settings.analytics_recalculate_minute,
            timezone=settings.analytics_report_timezone,
        )
    return create_api_application(
        settings=settings,
        db_health_service=components.db_health_service,
        trade_repository=components.trade_repository,
        snapshot_service=components.snapshot_service,
        recalculation_scheduler=recalculation_scheduler,
    )


def bootstrap_create_recalculation_orchestrator() -> AnalyticsRecalculationOrchestrator:
    """Build the batch recompute orchestrator for non-HTTP trigger surfaces.

    Returns:
        AnalyticsRecalculationOrchestrator: Fully wired orchestrator instance.

    Raises:
        SettingsLoadError: Raised when startup configuration validation fails.
    """

    return bootstrap_create_components().recalculation_orchestrator
