import logging
from decimal import Decimal, ROUND_HALF_UP

from django.db import transaction
from django.db.models import Avg, Count

from .exceptions import BadRequest, NotFound
from .forms import ReviewForm
from .models import Movie, MovieReview

logger = logging.getLogger(__name__)


def update_movie_rating(movie_id):
    stats = MovieReview.objects.filter(movie_id=movie_id, is_visible=True) \
        .aggregate(average=Avg('rating'), total=Count('id'))

    average = Decimal('0.0')
    if stats['average'] is not None:
        average = Decimal(str(stats['average'])).quantize(Decimal('0.1'), rounding=ROUND_HALF_UP)

    Movie.objects.filter(pk=movie_id).update(average_rating=average, total_reviews=stats['total'])
    return average


@transaction.atomic
def create_review(user, data):
    form = ReviewForm(data)
    if not form.is_valid():
        raise BadRequest(form.errors.as_json())

    review = form.save(commit=False)
    review.user = user
    review.save()
    update_movie_rating(review.movie_id)

    logger.info("User %s reviewed movie %s: %s/5", user.pk, review.movie_id, review.rating)
    return review


def get_movie_reviews(movie_id):
    if not Movie.objects.filter(pk=movie_id).exists():
        raise NotFound('Movie not found')
    return MovieReview.objects.filter(movie_id=movie_id, is_visible=True).select_related('user')


def get_user_reviews(user):
    return MovieReview.objects.filter(user=user).select_related('movie')


@transaction.atomic
def delete_review(user, review_id):
    review = MovieReview.objects.filter(pk=review_id, user=user).first()
    if review is None:
        raise NotFound('Review not found')

    movie_id = review.movie_id
    review.delete()
    update_movie_rating(movie_id)
    return True
