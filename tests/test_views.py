from datetime import timedelta
from types import SimpleNamespace
from unittest import mock

import pytest
import stripe
from django.utils import timezone

from booking.models import Booking, Movie, ReservedSeat, Show


@pytest.fixture
def upcoming_show(make_show):
    # views price against the real clock
    return make_show(start_time=timezone.now() + timedelta(days=3))


@pytest.fixture
def alice(client, user):
    client.force_login(user)
    return client


@pytest.fixture
def admin(client, staff_user):
    client.force_login(staff_user)
    return client


def book(client, show, seats, **extra):
    return client.post('/api/bookings', {'showId': show.pk, 'seats': seats, **extra},
                       content_type='application/json')


# ---------------- AUTH ----------------
def test_booking_requires_login(client, upcoming_show):
    response = book(client, upcoming_show, [1])
    assert response.status_code == 401
    assert response.json() == {'error': 'Authentication required'}


def test_admin_list_requires_staff(alice):
    assert alice.get('/api/bookings').status_code == 403


def test_analytics_requires_staff(alice):
    assert alice.get('/api/analytics/revenue').status_code == 403
    assert alice.get('/api/admin-dashboard/').status_code == 403


def test_wrong_method_is_rejected(alice):
    assert alice.get('/api/bookings/1/cancel').status_code == 405


# ---------------- BOOKINGS ----------------
def test_create_booking(alice, upcoming_show):
    response = book(alice, upcoming_show, [4, 5], paymentMethod='upi')

    assert response.status_code == 201
    data = response.json()
    assert data['seats'] == [4, 5]
    assert data['amount_paid'] == '20.00'
    assert data['original_amount'] == '20.00'
    assert data['discount'] == '0.00'
    assert data['points_earned'] == 2
    assert data['payment_method'] == 'upi'
    assert data['status'] == Booking.CONFIRMED


def test_create_booking_accepts_snake_case(alice, upcoming_show):
    response = alice.post('/api/bookings', {'show_id': upcoming_show.pk, 'seats': [1]},
                          content_type='application/json')
    assert response.status_code == 201


def test_conflicting_booking_returns_409(client, upcoming_show, user, other_user):
    client.force_login(other_user)
    book(client, upcoming_show, [7])
    client.force_login(user)

    response = book(client, upcoming_show, [6, 7])

    assert response.status_code == 409
    assert response.json() == {'error': 'Seats 7 are already booked', 'seats': [7]}


def test_missing_show_id_is_400(alice):
    response = alice.post('/api/bookings', {'seats': [1]}, content_type='application/json')
    assert response.status_code == 400


def test_invalid_json_is_400(alice):
    response = alice.post('/api/bookings', 'not json', content_type='application/json')
    assert response.status_code == 400
    assert response.json() == {'error': 'Request body must be valid JSON'}


def test_unknown_show_is_404(alice):
    response = alice.post('/api/bookings', {'showId': 999, 'seats': [1]}, content_type='application/json')
    assert response.status_code == 404


def test_my_bookings_and_detail(alice, upcoming_show):
    booking_id = book(alice, upcoming_show, [1]).json()['id']

    mine = alice.get('/api/bookings/my').json()
    assert [b['id'] for b in mine] == [booking_id]
    assert mine[0]['show']['movie']['title'] == 'Neon Skies'

    detail = alice.get(f'/api/bookings/{booking_id}').json()
    assert detail['can_cancel'] is True
    assert detail['can_reschedule'] is True


def test_detail_of_another_users_booking_is_404(client, upcoming_show, user, other_user):
    client.force_login(other_user)
    booking_id = book(client, upcoming_show, [1]).json()['id']
    client.force_login(user)

    assert client.get(f'/api/bookings/{booking_id}').status_code == 404


def test_cancel_booking(alice, upcoming_show):
    booking_id = book(alice, upcoming_show, [1, 2]).json()['id']

    response = alice.put(f'/api/bookings/{booking_id}/cancel', {'reason': 'Sick'},
                         content_type='application/json')

    assert response.status_code == 200
    data = response.json()
    assert data['refund_amount'] == '18.00'
    assert data['message'] == 'Booking cancelled. Refund of $18.00 will be processed.'
    assert not ReservedSeat.objects.filter(show=upcoming_show).exists()

    again = alice.put(f'/api/bookings/{booking_id}/cancel', content_type='application/json')
    assert again.status_code == 400


def test_reschedule_booking(alice, make_show, upcoming_show):
    later = make_show(start_time=upcoming_show.start_time + timedelta(days=1))
    booking_id = book(alice, upcoming_show, [3]).json()['id']

    response = alice.put(f'/api/bookings/{booking_id}/reschedule', {'newShowId': later.pk},
                         content_type='application/json')

    assert response.status_code == 200
    new_booking = Booking.objects.get(pk=response.json()['new_booking_id'])
    assert new_booking.show == later
    assert new_booking.original_booking_id == booking_id


def test_reschedule_requires_new_show(alice, upcoming_show):
    booking_id = book(alice, upcoming_show, [3]).json()['id']
    response = alice.put(f'/api/bookings/{booking_id}/reschedule', {}, content_type='application/json')
    assert response.status_code == 400


def test_admin_sees_all_bookings(client, upcoming_show, user, other_user, staff_user):
    for who, seat in ((user, 1), (other_user, 2)):
        client.force_login(who)
        book(client, upcoming_show, [seat])
    client.force_login(staff_user)

    response = client.get('/api/bookings')

    assert response.status_code == 200
    assert len(response.json()) == 2


# ---------------- CHECKOUT ----------------
def test_checkout_opens_stripe_session(alice, upcoming_show):
    booking_id = book(alice, upcoming_show, [1, 2]).json()['id']
    session = SimpleNamespace(id='cs_test_123', url='https://checkout.stripe.test/cs_test_123')

    with mock.patch('booking.payments.stripe.checkout.Session.create', return_value=session) as create:
        response = alice.post(f'/api/bookings/{booking_id}/checkout')

    assert response.status_code == 200
    assert response.json() == {'booking_id': booking_id, 'session_id': 'cs_test_123', 'url': session.url}
    line_item = create.call_args.kwargs['line_items'][0]
    assert line_item['price_data']['unit_amount'] == 2000
    assert Booking.objects.get(pk=booking_id).checkout_session_id == 'cs_test_123'


def test_checkout_provider_error_is_502(alice, upcoming_show):
    booking_id = book(alice, upcoming_show, [1]).json()['id']

    with mock.patch('booking.payments.stripe.checkout.Session.create',
                    side_effect=stripe.StripeError('card network down')):
        response = alice.post(f'/api/bookings/{booking_id}/checkout')

    assert response.status_code == 502
    assert Booking.objects.get(pk=booking_id).checkout_session_id == ''


# ---------------- CATALOG ----------------
def test_movies_are_public(client, movie):
    response = client.get('/api/movies')
    assert response.status_code == 200
    assert [m['title'] for m in response.json()] == ['Neon Skies']


def test_movie_filter_by_genre(client, movie, other_movie):
    response = client.get('/api/movies', {'genre': 'Drama'})
    assert [m['title'] for m in response.json()] == ['Echoes of Orion']


def test_staff_can_create_catalog_entries(admin, theater):
    response = admin.post('/api/movies', {
        'title': 'Paper Moons', 'duration_min': 95, 'genre': 'Comedy', 'language': 'English',
    }, content_type='application/json')
    assert response.status_code == 201
    movie_id = response.json()['id']
    assert Movie.objects.get(pk=movie_id).cast == []

    response = admin.post('/api/shows', {
        'movieId': movie_id,
        'theaterId': theater.pk,
        'startTime': (timezone.now() + timedelta(days=2)).isoformat(),
        'totalSeats': 50,
        'basePrice': '12.00',
    }, content_type='application/json')
    assert response.status_code == 201
    show = Show.objects.get(pk=response.json()['id'])
    assert str(show.current_price) == '12.00'


def test_invalid_movie_is_400(admin):
    response = admin.post('/api/movies', {'title': 'No genre'}, content_type='application/json')
    assert response.status_code == 400


def test_customers_cannot_create_movies(alice):
    response = alice.post('/api/movies', {'title': 'X'}, content_type='application/json')
    assert response.status_code == 403


def test_show_seats(client, alice, upcoming_show):
    book(alice, upcoming_show, [9, 3])

    response = client.get(f'/api/shows/{upcoming_show.pk}/seats')

    assert response.json() == {'show_id': upcoming_show.pk, 'total_seats': 100, 'reserved_seats': [3, 9]}


def test_upcoming_shows_listed(client, make_show, upcoming_show):
    make_show(start_time=timezone.now() - timedelta(hours=3))
    response = client.get('/api/shows')
    assert [s['id'] for s in response.json()] == [upcoming_show.pk]


# ---------------- PRICING & SEATS ----------------
def test_show_pricing_endpoint(client, upcoming_show):
    data = client.get(f'/api/pricing/show/{upcoming_show.pk}').json()
    assert data['base_price'] == '10.00'
    assert data['available_seats'] == 100


def test_update_pricing_is_staff_only(alice, upcoming_show):
    assert alice.post(f'/api/pricing/update/{upcoming_show.pk}').status_code == 403


def test_update_pricing(admin, upcoming_show):
    response = admin.post(f'/api/pricing/update/{upcoming_show.pk}')
    assert response.status_code == 200
    assert response.json()['booked_seats'] == 0


def test_seat_map_endpoint(client, upcoming_show):
    data = client.get(f'/api/seat-recommendations/{upcoming_show.pk}/seat-map').json()
    assert data['seats_per_row'] == 10
    assert data['available_seats'] == 100


def test_group_recommendations_endpoint(client, upcoming_show):
    data = client.get(f'/api/seat-recommendations/{upcoming_show.pk}', {'groupSize': 3}).json()
    assert all(len(r['seats']) == 3 for r in data)


def test_bad_group_size(client, upcoming_show):
    response = client.get(f'/api/seat-recommendations/{upcoming_show.pk}', {'groupSize': 'two'})
    assert response.status_code == 400


# ---------------- LOYALTY ----------------
def test_loyalty_points_and_redeem(alice, upcoming_show, user, give_points):
    give_points(user, 150)

    assert alice.get('/api/loyalty/points').json()['available_points'] == 150

    response = alice.post('/api/loyalty/redeem', {'points': 100}, content_type='application/json')
    assert response.json() == {'points_redeemed': 100, 'discount': '1.00'}

    response = alice.post('/api/loyalty/redeem', {'points': 100}, content_type='application/json')
    assert response.status_code == 400
    assert response.json() == {'error': 'Insufficient loyalty points'}


def test_loyalty_benefits(alice):
    data = alice.get('/api/loyalty/benefits').json()
    assert data['tier'] == 'Bronze'
    assert data['birthday_bonus'] == 100


def test_booking_with_points_over_http(alice, upcoming_show, user, give_points):
    give_points(user, 500)

    response = book(alice, upcoming_show, [1, 2], pointsToRedeem=500)

    assert response.status_code == 201
    assert response.json()['discount'] == '5.00'
    assert response.json()['amount_paid'] == '15.00'


# ---------------- ADMIN DASHBOARD ----------------
def test_admin_dashboard(client, upcoming_show, user, staff_user):
    client.force_login(user)
    book(client, upcoming_show, [1, 2, 3])
    client.force_login(staff_user)

    data = client.get('/api/admin-dashboard/').json()

    assert data['total_revenue'] == '30.00'
    assert data['most_popular_movie'] == {'movie__title': 'Neon Skies', 'seats_booked': 3, 'revenue': '30.00'}
