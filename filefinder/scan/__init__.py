"""Directory scanning, classification, and matching."""

from filefinder.scan.coordinator import ScanCoordinator, run_search
from filefinder.scan.models import ScanReport, SearchConfig, SearchConfigError

__all__ = ["ScanCoordinator", "ScanReport", "SearchConfig", "SearchConfigError", "run_search"]
