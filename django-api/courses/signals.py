"""Django signals for cache invalidation."""

from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from courses.cache import invalidate_series, invalidate_series_sessions
from courses.models import CourseSeries, CourseSession


@receiver([post_save, post_delete], sender=CourseSeries)
def invalidate_series_cache(sender, instance, **kwargs):
    """Invalidate caches when a series is saved or deleted."""
    invalidate_series(instance.pk)


@receiver([post_save, post_delete], sender=CourseSession)
def invalidate_session_cache(sender, instance, **kwargs):
    """Invalidate the series sessions cache when a session is saved or deleted."""
    invalidate_series_sessions(instance.series_id)
