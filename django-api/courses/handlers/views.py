"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses (see handlers/errors.py)
- Never contain business logic
- Never expose internal error details
"""

from django.core.cache import cache
from django.utils import timezone
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from courses.cache import series_detail_key, series_sessions_key
from courses.conf import get_config
from courses.domain import CallerIdentity, CustomSession, SeriesId
from courses.domain.errors import InvalidSeriesIdError
from courses.handlers.serializers import (
    PreviewResultSerializer,
    PreviewScheduleInputSerializer,
    PublishResultSerializer,
    PublishScheduleInputSerializer,
    SeriesSerializer,
    SessionSerializer,
)
from courses.services import ScheduleService, SeriesService
from courses.stores import DjangoSeriesStore, DjangoSessionStore


def series_service() -> SeriesService:
    return SeriesService(DjangoSeriesStore(), DjangoSessionStore())


def schedule_service() -> ScheduleService:
    return ScheduleService(
        DjangoSeriesStore(),
        DjangoSessionStore(),
        config=get_config(),
        tz=timezone.get_default_timezone(),
    )


def _parse_series_id(raw: str) -> int:
    try:
        return SeriesId.from_string(raw).value
    except ValueError:
        raise InvalidSeriesIdError() from None


def _identity(request: Request) -> CallerIdentity:
    return request.user.identity


class SeriesDetailView(APIView):
    """Handler for GET /api/series/{series_id}"""

    permission_classes = [AllowAny]

    def get(self, request: Request, series_id: str) -> Response:
        sid = _parse_series_id(series_id)
        key = series_detail_key(sid)
        data = cache.get(key)
        if data is None:
            series = series_service().get_series(str(sid))
            data = SeriesSerializer(series).data
            cache.set(key, data, get_config().cache_timeout)
        return Response(data)


class SeriesSessionListView(APIView):
    """Handler for GET /api/series/{series_id}/sessions"""

    permission_classes = [AllowAny]

    def get(self, request: Request, series_id: str) -> Response:
        sid = _parse_series_id(series_id)
        key = series_sessions_key(sid)
        data = cache.get(key)
        if data is None:
            sessions = series_service().get_sessions_for_series(str(sid))
            data = {"results": SessionSerializer(sessions, many=True).data}
            cache.set(key, data, get_config().cache_timeout)
        return Response(data)


class SchedulePreviewView(APIView):
    """Handler for POST /api/series/{series_id}/schedule/preview"""

    permission_classes = [IsAuthenticated]

    def post(self, request: Request, series_id: str) -> Response:
        sid = _parse_series_id(series_id)
        params = PreviewScheduleInputSerializer(data=request.data)
        params.is_valid(raise_exception=True)

        result = schedule_service().preview_schedule(
            _identity(request),
            sid,
            enable_conflict_check=params.validated_data["enableConflictCheck"],
            candidate_lead_coach_id=params.validated_data.get("leadCoachId"),
        )
        return Response(PreviewResultSerializer(result).data)


class SchedulePublishView(APIView):
    """Handler for POST /api/series/{series_id}/schedule/publish"""

    permission_classes = [IsAuthenticated]

    def post(self, request: Request, series_id: str) -> Response:
        sid = _parse_series_id(series_id)
        params = PublishScheduleInputSerializer(data=request.data)
        params.is_valid(raise_exception=True)
        data = params.validated_data

        custom_sessions = [
            CustomSession(
                starts_at=item["startTime"],
                ends_at=item["endTime"],
                location_text=item.get("locationText"),
                remark=item.get("remark"),
            )
            for item in data.get("customSessions", [])
        ]
        result = schedule_service().publish_schedule(
            _identity(request),
            sid,
            preview_hash=data["previewHash"],
            selected_keys=data.get("selectedKeys"),
            dry_run=data["dryRun"],
            lead_coach_id=data.get("leadCoachId"),
            custom_sessions=custom_sessions,
            enable_conflict_check=data["enableConflictCheck"],
        )
        return Response(PublishResultSerializer(result).data)
