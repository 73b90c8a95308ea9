"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/models.py.
"""

from django.db import models


class CourseSeries(models.Model):
    """Persistence model for recurring course series."""

    class Status(models.TextChoices):
        PLANNED = "PLANNED"
        PUBLISHED = "PUBLISHED"
        CLOSED = "CLOSED"
        FINISHED = "FINISHED"

    class PublisherType(models.TextChoices):
        COACH = "COACH"
        MANAGER = "MANAGER"

    class VenueType(models.TextChoices):
        SANDA_GYM = "SANDA_GYM"
        TRACK_FIELD = "TRACK_FIELD"
        CUSTOMER_HOME = "CUSTOMER_HOME"

    class ClassMode(models.TextChoices):
        SMALL_CLASS = "SMALL_CLASS"
        LARGE_CLASS = "LARGE_CLASS"

    catalog_id = models.PositiveIntegerField()
    publisher_type = models.CharField(max_length=16, choices=PublisherType.choices)
    publisher_id = models.PositiveIntegerField()
    title = models.CharField(max_length=120)
    description = models.CharField(max_length=512, blank=True, null=True)
    remark = models.CharField(max_length=512, blank=True, null=True)
    venue_type = models.CharField(
        max_length=16, choices=VenueType.choices, default=VenueType.SANDA_GYM
    )
    class_mode = models.CharField(
        max_length=16, choices=ClassMode.choices, default=ClassMode.SMALL_CLASS
    )
    start_date = models.DateField()
    end_date = models.DateField()
    recurrence_rule = models.CharField(max_length=200, blank=True, null=True)
    session_duration_minutes = models.PositiveIntegerField(default=60)
    leave_cutoff_hours = models.PositiveIntegerField(default=12)
    max_learners = models.PositiveIntegerField(default=1)
    price_per_session = models.DecimalField(
        max_digits=10, decimal_places=2, blank=True, null=True
    )
    teaching_fee_ref = models.DecimalField(
        max_digits=10, decimal_places=2, blank=True, null=True
    )
    status = models.CharField(max_length=16, choices=Status.choices, default=Status.PLANNED)
    published_at = models.DateTimeField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    created_by = models.PositiveIntegerField(blank=True, null=True)
    updated_by = models.PositiveIntegerField(blank=True, null=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="series_status_idx"),
            models.Index(fields=["publisher_type", "publisher_id"], name="series_publisher_idx"),
            models.Index(fields=["catalog_id"], name="series_catalog_idx"),
        ]

    def __str__(self) -> str:
        return self.title


class CourseSession(models.Model):
    """Persistence model for materialized series sessions."""

    class Status(models.TextChoices):
        SCHEDULED = "SCHEDULED"
        CANCELED = "CANCELED"
        FINISHED = "FINISHED"

    series = models.ForeignKey(
        CourseSeries, on_delete=models.CASCADE, related_name="sessions"
    )
    occurrence_key = models.CharField(max_length=64)
    starts_at = models.DateTimeField()
    ends_at = models.DateTimeField()
    location_text = models.CharField(max_length=255)
    lead_coach_id = models.PositiveIntegerField(blank=True, null=True)
    status = models.CharField(
        max_length=16, choices=Status.choices, default=Status.SCHEDULED
    )
    leave_cutoff_hours_override = models.PositiveIntegerField(blank=True, null=True)
    remark = models.CharField(max_length=512, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["starts_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["series", "occurrence_key"],
                name="uniq_session_series_occurrence",
            ),
        ]
        indexes = [
            models.Index(fields=["series", "starts_at"], name="session_series_start_idx"),
            models.Index(fields=["lead_coach_id", "starts_at"], name="session_coach_start_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.series.title} - {self.starts_at}"
