from courses.stores.django_store import DjangoSeriesStore, DjangoSessionStore
from courses.stores.interfaces import SeriesStore, SessionStore

__all__ = ["DjangoSeriesStore", "DjangoSessionStore", "SeriesStore", "SessionStore"]
