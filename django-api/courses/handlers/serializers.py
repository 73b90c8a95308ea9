"""Serializers for request parsing and domain model responses."""

from rest_framework import serializers

from courses.domain import Checked, NotChecked


class SeriesSerializer(serializers.Serializer):
    """Serializer for Series domain model."""

    id = serializers.IntegerField(source="id.value")
    catalogId = serializers.IntegerField(source="catalog_id")
    publisherType = serializers.CharField(source="publisher_type.value")
    publisherId = serializers.IntegerField(source="publisher_id")
    title = serializers.CharField()
    description = serializers.CharField(allow_null=True)
    remark = serializers.CharField(allow_null=True)
    venueType = serializers.CharField(source="venue_type.value")
    classMode = serializers.CharField(source="class_mode.value")
    startDate = serializers.DateField(source="start_date")
    endDate = serializers.DateField(source="end_date")
    recurrenceRule = serializers.CharField(source="recurrence_rule", allow_null=True)
    sessionDurationMinutes = serializers.IntegerField(source="session_duration_minutes")
    leaveCutoffHours = serializers.IntegerField(source="leave_cutoff_hours")
    maxLearners = serializers.IntegerField(source="max_learners.value")
    pricePerSession = serializers.SerializerMethodField()
    teachingFeeRef = serializers.SerializerMethodField()
    status = serializers.CharField(source="status.value")
    publishedAt = serializers.DateTimeField(source="published_at", allow_null=True)
    createdAt = serializers.DateTimeField(source="created_at")
    updatedAt = serializers.DateTimeField(source="updated_at")

    def get_pricePerSession(self, obj) -> str | None:
        return str(obj.price_per_session) if obj.price_per_session is not None else None

    def get_teachingFeeRef(self, obj) -> str | None:
        return str(obj.teaching_fee_ref) if obj.teaching_fee_ref is not None else None


class SessionSerializer(serializers.Serializer):
    """Serializer for Session domain model."""

    id = serializers.IntegerField(source="id.value")
    seriesId = serializers.IntegerField(source="series_id.value")
    occurrenceKey = serializers.CharField(source="occurrence_key")
    startTime = serializers.DateTimeField(source="starts_at")
    endTime = serializers.DateTimeField(source="ends_at")
    locationText = serializers.CharField(source="location_text")
    leadCoachId = serializers.IntegerField(source="lead_coach_id", allow_null=True)
    status = serializers.CharField(source="status.value")
    leaveCutoffHoursOverride = serializers.IntegerField(
        source="leave_cutoff_hours_override", allow_null=True
    )
    remark = serializers.CharField(allow_null=True)


class OccurrenceSerializer(serializers.Serializer):
    """Serializer for a previewed Occurrence."""

    occurrenceKey = serializers.CharField(source="key")
    startDateTime = serializers.DateTimeField(source="starts_at")
    endDateTime = serializers.DateTimeField(source="ends_at")
    date = serializers.DateField(source="day")
    weekdayIndex = serializers.IntegerField(source="weekday_index")
    conflict = serializers.SerializerMethodField()

    def get_conflict(self, obj) -> dict | None:
        match obj.conflict:
            case NotChecked():
                return None
            case Checked(count=count):
                return {"hasConflict": count > 0, "count": count}


class PreviewResultSerializer(serializers.Serializer):
    series = SeriesSerializer()
    occurrences = OccurrenceSerializer(many=True)
    previewHash = serializers.CharField(source="preview_hash")
    defaultLeadCoachId = serializers.IntegerField(
        source="default_lead_coach_id", allow_null=True
    )


class PublishResultSerializer(serializers.Serializer):
    seriesId = serializers.IntegerField(source="series_id.value")
    status = serializers.CharField(source="status.value")
    publishedAt = serializers.DateTimeField(source="published_at", allow_null=True)
    createdSessions = serializers.IntegerField(source="created_sessions")
    dryRun = serializers.BooleanField(source="dry_run")
    conflictingKeys = serializers.ListField(
        source="conflicting_keys", child=serializers.CharField(), allow_null=True
    )


class PreviewScheduleInputSerializer(serializers.Serializer):
    enableConflictCheck = serializers.BooleanField(default=True)
    leadCoachId = serializers.IntegerField(min_value=1, required=False, allow_null=True)


class CustomSessionInputSerializer(serializers.Serializer):
    startTime = serializers.DateTimeField()
    endTime = serializers.DateTimeField()
    locationText = serializers.CharField(
        max_length=255, required=False, allow_blank=True, allow_null=True
    )
    remark = serializers.CharField(
        max_length=512, required=False, allow_blank=True, allow_null=True
    )


class PublishScheduleInputSerializer(serializers.Serializer):
    previewHash = serializers.CharField(max_length=128)
    selectedKeys = serializers.ListField(
        child=serializers.CharField(max_length=64), required=False, allow_null=True
    )
    dryRun = serializers.BooleanField(default=False)
    leadCoachId = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    customSessions = CustomSessionInputSerializer(many=True, required=False)
    enableConflictCheck = serializers.BooleanField(default=False)
