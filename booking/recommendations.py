"""
Movie recommendations built from booking history and stated preferences.
"""
from collections import Counter
from datetime import timedelta

from django.db.models import Count
from django.utils import timezone

from .models import Booking, Movie, UserPreference

HISTORY_SIZE = 20
PREFERENCE_WEIGHT = 3
TOP_GENRES = 3
TOP_TIME_SLOTS = 2
LIMIT = 10
SIMILAR_LIMIT = 5


def time_slot(hour):
    if hour < 12:
        return 'morning'
    if hour < 17:
        return 'afternoon'
    if hour < 21:
        return 'evening'
    return 'night'


def analyze_genre_preferences(bookings, favorite_genres=()):
    counts = Counter(booking.show.movie.genre for booking in bookings)
    for genre in favorite_genres:
        counts[genre] += PREFERENCE_WEIGHT
    return [genre for genre, _ in counts.most_common(TOP_GENRES)]


def analyze_time_preferences(bookings):
    counts = Counter(time_slot(timezone.localtime(b.show.start_time).hour) for b in bookings)
    return [slot for slot, _ in counts.most_common(TOP_TIME_SLOTS)]


def get_personalized_recommendations(user, now=None):
    now = now or timezone.now()
    history = list(
        Booking.objects.filter(user=user)
        .select_related('show__movie')
        .order_by('-created_at')[:HISTORY_SIZE]
    )
    preference = UserPreference.objects.filter(user=user).first()
    favorite_genres = preference.favorite_genres if preference else []

    genres = analyze_genre_preferences(history, favorite_genres)
    time_slots = analyze_time_preferences(history)

    movies = Movie.objects.filter(genre__in=genres, shows__start_time__gt=now) \
        .distinct() \
        .order_by('-average_rating', '-total_reviews')[:LIMIT]

    return {
        'preferred_genres': genres,
        'preferred_times': time_slots,
        'movies': list(movies),
    }


def get_trending_movies(now=None):
    now = now or timezone.now()
    week_ago = now - timedelta(days=7)
    return Movie.objects.filter(shows__start_time__gt=week_ago) \
        .annotate(booking_count=Count('shows__bookings')) \
        .order_by('-booking_count', '-average_rating')[:LIMIT]


def get_new_releases():
    return Movie.objects.filter(is_new_release=True).order_by('-release_date', '-id')[:LIMIT]


def get_similar_movies(movie_id):
    movie = Movie.objects.filter(pk=movie_id).first()
    if movie is None:
        return Movie.objects.none()

    return Movie.objects.filter(genre=movie.genre) \
        .exclude(pk=movie.pk) \
        .order_by('-average_rating')[:SIMILAR_LIMIT]
