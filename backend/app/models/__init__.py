# Models package
from app.models.cache import CacheKey, CacheSnapshot, CallResult, SourceTracker
from app.models.finding import CheckRun, Finding, Status

__all__ = ["CacheKey", "CacheSnapshot", "CallResult", "SourceTracker", "CheckRun", "Finding", "Status"]
