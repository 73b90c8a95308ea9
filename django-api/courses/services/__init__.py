from courses.services.conflict_detector import ConflictDetector
from courses.services.schedule_service import ScheduleService
from courses.services.series_service import SeriesService

__all__ = ["ConflictDetector", "ScheduleService", "SeriesService"]
