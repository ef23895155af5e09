import logging

from django.utils import timezone
from django.utils.dateparse import parse_date

from .exceptions import BadRequest, NotFound
from .forms import MovieForm, ShowForm, TheaterForm
from .models import Movie, ReservedSeat, Show, Theater

logger = logging.getLogger(__name__)


def _save_form(form):
    if not form.is_valid():
        raise BadRequest(form.errors.as_json())
    return form.save()


# ---------------- MOVIES ----------------
def list_movies(genre=None, language=None):
    movies = Movie.objects.all().order_by('title')

    if genre:
        movies = movies.filter(genre=genre)

    if language:
        movies = movies.filter(language=language)

    return movies


def get_movie(movie_id):
    movie = Movie.objects.filter(pk=movie_id).first()
    if movie is None:
        raise NotFound('Movie not found')
    return movie


def create_movie(data):
    movie = _save_form(MovieForm(data))
    logger.info("Movie %s created: %s", movie.pk, movie.title)
    return movie


# ---------------- THEATERS ----------------
def list_theaters():
    return Theater.objects.all().order_by('name')


def create_theater(data):
    theater = _save_form(TheaterForm(data))
    logger.info("Theater %s created: %s", theater.pk, theater.name)
    return theater


# ---------------- SHOWS ----------------
def list_shows(movie_id=None, theater_id=None, date=None, now=None):
    shows = Show.objects.select_related('movie', 'theater').order_by('start_time')

    if movie_id:
        shows = shows.filter(movie_id=movie_id)

    if theater_id:
        shows = shows.filter(theater_id=theater_id)

    if date:
        day = parse_date(date) if isinstance(date, str) else date
        if day is None:
            raise BadRequest(f'Invalid date: {date}')
        shows = shows.filter(start_time__date=day)
    else:
        shows = shows.filter(start_time__gt=now or timezone.now())

    return shows


def get_show(show_id):
    show = Show.objects.select_related('movie', 'theater').filter(pk=show_id).first()
    if show is None:
        raise NotFound('Show not found')
    return show


def create_show(data):
    show = _save_form(ShowForm(data))
    logger.info("Show %s created for movie %s at %s", show.pk, show.movie_id, show.start_time)
    return show


def get_show_seats(show_id):
    show = get_show(show_id)
    reserved = ReservedSeat.objects.filter(show=show).order_by('seat_no') \
        .values_list('seat_no', flat=True)
    return {
        'show_id': show.pk,
        'total_seats': show.total_seats,
        'reserved_seats': list(reserved),
    }
