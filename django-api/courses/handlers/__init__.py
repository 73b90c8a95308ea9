from courses.handlers.views import (
    SchedulePreviewView,
    SchedulePublishView,
    SeriesDetailView,
    SeriesSessionListView,
)

__all__ = [
    "SchedulePreviewView",
    "SchedulePublishView",
    "SeriesDetailView",
    "SeriesSessionListView",
]
