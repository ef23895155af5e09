from datetime import datetime, timedelta, timezone as dt_timezone
from decimal import Decimal

import pytest

from booking.models import Movie, Show, Theater, UserPoints


# Monday 2 June 2025, 10:00 UTC
NOW = datetime(2025, 6, 2, 10, 0, tzinfo=dt_timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def user(django_user_model):
    return django_user_model.objects.create_user(username='alice', email='alice@example.com', password='pw')


@pytest.fixture
def other_user(django_user_model):
    return django_user_model.objects.create_user(username='bob', email='bob@example.com', password='pw')


@pytest.fixture
def staff_user(django_user_model):
    return django_user_model.objects.create_user(username='admin', password='pw', is_staff=True)


@pytest.fixture
def movie(db):
    return Movie.objects.create(title='Neon Skies', duration_min=118, genre='Action', rating='PG-13')


@pytest.fixture
def other_movie(db):
    return Movie.objects.create(title='Echoes of Orion', duration_min=110, genre='Drama', rating='PG')


@pytest.fixture
def theater(db):
    return Theater.objects.create(name='Grand Cinema', location='Downtown')


@pytest.fixture
def make_show(movie, theater, now):
    def _make_show(hours_ahead=30, **kwargs):
        kwargs.setdefault('movie', movie)
        kwargs.setdefault('theater', theater)
        kwargs.setdefault('start_time', now + timedelta(hours=hours_ahead))
        kwargs.setdefault('total_seats', 100)
        kwargs.setdefault('base_price', Decimal('10.00'))
        return Show.objects.create(**kwargs)

    return _make_show


@pytest.fixture
def show(make_show):
    return make_show()


@pytest.fixture
def give_points():
    def _give_points(user, points):
        return UserPoints.objects.create(user=user, total_points=points, available_points=points)

    return _give_points
