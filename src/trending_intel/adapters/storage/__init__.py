"""SQLite storage adapters."""

from trending_intel.adapters.storage.analysis_store import SQLiteAnalysisStore
from trending_intel.adapters.storage.database import Database
from trending_intel.adapters.storage.subscriber_registry import SQLiteSubscriberRegistry

__all__ = ["Database", "SQLiteAnalysisStore", "SQLiteSubscriberRegistry"]
