"""Remote health records API infrastructure package."""

from .health_records_client import HealthRecordsApiClient

__all__ = ["HealthRecordsApiClient"]
