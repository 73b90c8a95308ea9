from django.urls import path

from courses.handlers import (
    SchedulePreviewView,
    SchedulePublishView,
    SeriesDetailView,
    SeriesSessionListView,
)

urlpatterns = [
    path("series/<str:series_id>", SeriesDetailView.as_view(), name="series-detail"),
    path(
        "series/<str:series_id>/sessions",
        SeriesSessionListView.as_view(),
        name="series-session-list",
    ),
    path(
        "series/<str:series_id>/schedule/preview",
        SchedulePreviewView.as_view(),
        name="series-schedule-preview",
    ),
    path(
        "series/<str:series_id>/schedule/publish",
        SchedulePublishView.as_view(),
        name="series-schedule-publish",
    ),
]
