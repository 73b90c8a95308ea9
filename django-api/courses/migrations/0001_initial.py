import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="CourseSeries",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("catalog_id", models.PositiveIntegerField()),
                (
                    "publisher_type",
                    models.CharField(choices=[("COACH", "Coach"), ("MANAGER", "Manager")], max_length=16),
                ),
                ("publisher_id", models.PositiveIntegerField()),
                ("title", models.CharField(max_length=120)),
                ("description", models.CharField(blank=True, max_length=512, null=True)),
                ("remark", models.CharField(blank=True, max_length=512, null=True)),
                (
                    "venue_type",
                    models.CharField(
                        choices=[
                            ("SANDA_GYM", "Sanda Gym"),
                            ("TRACK_FIELD", "Track Field"),
                            ("CUSTOMER_HOME", "Customer Home"),
                        ],
                        default="SANDA_GYM",
                        max_length=16,
                    ),
                ),
                (
                    "class_mode",
                    models.CharField(
                        choices=[("SMALL_CLASS", "Small Class"), ("LARGE_CLASS", "Large Class")],
                        default="SMALL_CLASS",
                        max_length=16,
                    ),
                ),
                ("start_date", models.DateField()),
                ("end_date", models.DateField()),
                ("recurrence_rule", models.CharField(blank=True, max_length=200, null=True)),
                ("session_duration_minutes", models.PositiveIntegerField(default=60)),
                ("leave_cutoff_hours", models.PositiveIntegerField(default=12)),
                ("max_learners", models.PositiveIntegerField(default=1)),
                ("price_per_session", models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ("teaching_fee_ref", models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("PLANNED", "Planned"),
                            ("PUBLISHED", "Published"),
                            ("CLOSED", "Closed"),
                            ("FINISHED", "Finished"),
                        ],
                        default="PLANNED",
                        max_length=16,
                    ),
                ),
                ("published_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("created_by", models.PositiveIntegerField(blank=True, null=True)),
                ("updated_by", models.PositiveIntegerField(blank=True, null=True)),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["status"], name="series_status_idx"),
                    models.Index(fields=["publisher_type", "publisher_id"], name="series_publisher_idx"),
                    models.Index(fields=["catalog_id"], name="series_catalog_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="CourseSession",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("occurrence_key", models.CharField(max_length=64)),
                ("starts_at", models.DateTimeField()),
                ("ends_at", models.DateTimeField()),
                ("location_text", models.CharField(max_length=255)),
                ("lead_coach_id", models.PositiveIntegerField(blank=True, null=True)),
                (
                    "status",
                    models.CharField(
                        choices=[("SCHEDULED", "Scheduled"), ("CANCELED", "Canceled"), ("FINISHED", "Finished")],
                        default="SCHEDULED",
                        max_length=16,
                    ),
                ),
                ("leave_cutoff_hours_override", models.PositiveIntegerField(blank=True, null=True)),
                ("remark", models.CharField(blank=True, max_length=512, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "series",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="sessions",
                        to="courses.courseseries",
                    ),
                ),
            ],
            options={
                "ordering": ["starts_at"],
                "indexes": [
                    models.Index(fields=["series", "starts_at"], name="session_series_start_idx"),
                    models.Index(fields=["lead_coach_id", "starts_at"], name="session_coach_start_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("series", "occurrence_key"),
                        name="uniq_session_series_occurrence",
                    ),
                ],
            },
        ),
    ]
