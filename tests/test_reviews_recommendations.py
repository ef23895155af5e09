from datetime import date
from decimal import Decimal

import pytest

from booking import recommendations, reviews, services
from booking.exceptions import BadRequest, NotFound
from booking.models import Movie, UserPreference


def review(user, movie, rating, comment='Worth watching'):
    return reviews.create_review(user, {'movie': movie.pk, 'rating': rating, 'comment': comment})


# ---------------- REVIEWS ----------------
def test_reviews_update_movie_average(movie, user, other_user, staff_user):
    review(user, movie, 4)
    review(other_user, movie, 5)
    review(staff_user, movie, 5)

    movie.refresh_from_db()
    assert movie.average_rating == Decimal('4.7')
    assert movie.total_reviews == 3


@pytest.mark.parametrize('rating', [0, 6])
def test_rating_out_of_range(movie, user, rating):
    with pytest.raises(BadRequest):
        review(user, movie, rating)


def test_review_needs_a_comment(movie, user):
    with pytest.raises(BadRequest):
        reviews.create_review(user, {'movie': movie.pk, 'rating': 3, 'comment': ''})


def test_hidden_reviews_are_not_listed_or_counted(movie, user, other_user):
    review(user, movie, 2)
    hidden = review(other_user, movie, 5)
    hidden.is_visible = False
    hidden.save()
    reviews.update_movie_rating(movie.pk)

    assert [r.user_id for r in reviews.get_movie_reviews(movie.pk)] == [user.pk]
    movie.refresh_from_db()
    assert movie.average_rating == Decimal('2.0')


def test_reviews_for_unknown_movie(db):
    with pytest.raises(NotFound):
        reviews.get_movie_reviews(404)


def test_delete_review_recomputes_rating(movie, user, other_user):
    mine = review(user, movie, 1)
    review(other_user, movie, 4)

    reviews.delete_review(user, mine.pk)

    movie.refresh_from_db()
    assert movie.average_rating == Decimal('4.0')
    assert movie.total_reviews == 1


def test_deleting_last_review_resets_rating(movie, user):
    mine = review(user, movie, 3)
    reviews.delete_review(user, mine.pk)

    movie.refresh_from_db()
    assert movie.average_rating == Decimal('0.0')
    assert movie.total_reviews == 0


def test_cannot_delete_someone_elses_review(movie, user, other_user):
    theirs = review(other_user, movie, 3)
    with pytest.raises(NotFound):
        reviews.delete_review(user, theirs.pk)


def test_user_reviews(movie, other_movie, user, other_user):
    review(user, movie, 3)
    review(user, other_movie, 4)
    review(other_user, movie, 5)

    assert {r.movie_id for r in reviews.get_user_reviews(user)} == {movie.pk, other_movie.pk}


# ---------------- RECOMMENDATIONS ----------------
@pytest.mark.parametrize('hour, slot', [
    (9, 'morning'), (12, 'afternoon'), (16, 'afternoon'), (17, 'evening'), (20, 'evening'), (21, 'night'),
])
def test_time_slots(hour, slot):
    assert recommendations.time_slot(hour) == slot


def test_personalized_mixes_history_and_stated_preferences(make_show, movie, other_movie, user, now):
    services.create_booking(user, make_show().pk, [1], now=now)
    make_show(hours_ahead=50, movie=other_movie)
    Movie.objects.filter(pk=other_movie.pk).update(average_rating=Decimal('4.5'))
    UserPreference.objects.create(user=user, favorite_genres=['Drama'])

    result = recommendations.get_personalized_recommendations(user, now=now)

    assert result['preferred_genres'] == ['Drama', 'Action']
    # the booked show starts Tuesday 16:00 UTC
    assert result['preferred_times'] == ['afternoon']
    assert [m.title for m in result['movies']] == ['Echoes of Orion', 'Neon Skies']


def test_personalized_without_history(user, now):
    result = recommendations.get_personalized_recommendations(user, now=now)
    assert result == {'preferred_genres': [], 'preferred_times': [], 'movies': []}


def test_trending_orders_by_bookings(make_show, movie, other_movie, user, other_user, now):
    action_show = make_show()
    drama_show = make_show(movie=other_movie)
    services.create_booking(user, action_show.pk, [1], now=now)
    services.create_booking(other_user, action_show.pk, [2], now=now)
    services.create_booking(user, drama_show.pk, [1], now=now)

    trending = list(recommendations.get_trending_movies(now=now))

    assert [m.title for m in trending] == ['Neon Skies', 'Echoes of Orion']
    assert trending[0].booking_count == 2


def test_new_releases_newest_first(db):
    Movie.objects.create(title='Old', duration_min=90, genre='Drama', release_date=date(2025, 1, 1), is_new_release=True)
    Movie.objects.create(title='Fresh', duration_min=90, genre='Drama', release_date=date(2025, 5, 1), is_new_release=True)
    Movie.objects.create(title='Classic', duration_min=90, genre='Drama', release_date=date(1999, 1, 1))

    assert [m.title for m in recommendations.get_new_releases()] == ['Fresh', 'Old']


def test_similar_movies_share_genre(movie, other_movie):
    sequel = Movie.objects.create(title='Neon Skies II', duration_min=120, genre='Action')

    assert list(recommendations.get_similar_movies(movie.pk)) == [sequel]
    assert list(recommendations.get_similar_movies(404)) == []
