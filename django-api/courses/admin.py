from django.contrib import admin

from courses.models import CourseSeries, CourseSession


class CourseSessionInline(admin.TabularInline):
    model = CourseSession
    extra = 0
    fields = ["occurrence_key", "starts_at", "ends_at", "lead_coach_id", "status"]
    readonly_fields = ["occurrence_key"]


@admin.register(CourseSeries)
class CourseSeriesAdmin(admin.ModelAdmin):
    list_display = ["title", "status", "start_date", "end_date", "published_at"]
    list_filter = ["status", "venue_type", "class_mode"]
    search_fields = ["title", "description"]
    inlines = [CourseSessionInline]


@admin.register(CourseSession)
class CourseSessionAdmin(admin.ModelAdmin):
    list_display = ["series", "occurrence_key", "starts_at", "ends_at", "lead_coach_id", "status"]
    list_filter = ["status", "series"]
