"""Database layer package for all SQL and persistence boundaries."""

from .analytics_snapshot import SQLAlchemyAnalyticsSnapshotService
from .health import SQLAlchemyDatabaseHealthService
from .interfaces import (
	AnalyticsSnapshotRepositoryPort,
	DatabaseHealthPort,
	OptionLegCreateRequest,
	StoredAnalyticsSnapshotRecord,
	TradeCreateRequest,
	TradeRepositoryPort,
	TradeUpdateRequest,
	TradeWriteRepositoryPort,
)
from .engine import db_create_engine
from .trades import SQLAlchemyTradeRepositoryService

__all__ = [
	"AnalyticsSnapshotRepositoryPort",
	"DatabaseHealthPort",
	"OptionLegCreateRequest",
	"StoredAnalyticsSnapshotRecord",
	"TradeCreateRequest",
	"TradeRepositoryPort",
	"TradeUpdateRequest",
	"TradeWriteRepositoryPort",
	"SQLAlchemyAnalyticsSnapshotService",
	"SQLAlchemyDatabaseHealthService",
	"SQLAlchemyTradeRepositoryService",
	"db_create_engine",
]
