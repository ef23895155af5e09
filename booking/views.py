import json
from datetime import datetime, time, timedelta
from functools import wraps

from django.http import JsonResponse
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from . import analytics, catalog, loyalty, payments, pricing, recommendations, reviews, seats, services
from .exceptions import BadRequest, BookingError, PermissionDenied, Unauthorized
from .serializers import (
    booking_to_dict,
    movie_to_dict,
    points_to_dict,
    review_to_dict,
    show_to_dict,
    theater_to_dict,
)


# ---------------- HELPERS ----------------
def api_view(*methods, login=True, staff=False):
    """JSON endpoint: method check, auth gate and BookingError -> error response."""
    def decorator(view):
        @wraps(view)
        def wrapper(request, *args, **kwargs):
            if login and not request.user.is_authenticated:
                return JsonResponse({'error': 'Authentication required'}, status=401)
            if staff and not request.user.is_staff:
                return JsonResponse({'error': 'Admin access required'}, status=403)
            try:
                return view(request, *args, **kwargs)
            except BookingError as exc:
                return JsonResponse(exc.as_dict(), status=exc.status_code)

        return csrf_exempt(require_http_methods(list(methods))(wrapper))

    return decorator


def require_staff(request):
    if not request.user.is_authenticated:
        raise Unauthorized('Authentication required')
    if not request.user.is_staff:
        raise PermissionDenied('Admin access required')


def read_json(request):
    if not request.body:
        return {}
    try:
        data = json.loads(request.body)
    except ValueError:
        raise BadRequest('Request body must be valid JSON')
    if not isinstance(data, dict):
        raise BadRequest('Request body must be a JSON object')
    return data


def pick(data, *keys, default=None):
    for key in keys:
        if key in data:
            return data[key]
    return default


def int_param(value, name):
    try:
        return int(value)
    except (TypeError, ValueError):
        raise BadRequest(f'{name} must be an integer')


def parse_moment(value, end_of_day=False):
    moment = parse_datetime(value)
    if moment is None:
        day = parse_date(value)
        if day is None:
            raise BadRequest(f'Invalid date: {value}')
        moment = datetime.combine(day, time.max if end_of_day else time.min)
    if timezone.is_naive(moment):
        moment = timezone.make_aware(moment)
    return moment


def date_range(request):
    end = request.GET.get('endDate')
    start = request.GET.get('startDate')
    end = parse_moment(end, end_of_day=True) if end else timezone.now()
    start = parse_moment(start) if start else end - timedelta(days=30)
    if start > end:
        raise BadRequest('startDate must be before endDate')
    return start, end


# ---------------- MOVIES ----------------
@api_view('GET', 'POST', login=False)
def movie_list(request):
    if request.method == 'POST':
        require_staff(request)
        movie = catalog.create_movie(read_json(request))
        return JsonResponse(movie_to_dict(movie), status=201)

    movies = catalog.list_movies(
        genre=request.GET.get('genre'),
        language=request.GET.get('language'),
    )
    return JsonResponse([movie_to_dict(m) for m in movies], safe=False)


@api_view('GET', login=False)
def movie_detail(request, movie_id):
    return JsonResponse(movie_to_dict(catalog.get_movie(movie_id)))


# ---------------- THEATERS ----------------
@api_view('GET', 'POST', login=False)
def theater_list(request):
    if request.method == 'POST':
        require_staff(request)
        theater = catalog.create_theater(read_json(request))
        return JsonResponse(theater_to_dict(theater), status=201)

    return JsonResponse([theater_to_dict(t) for t in catalog.list_theaters()], safe=False)


# ---------------- SHOWS ----------------
@api_view('GET', 'POST', login=False)
def show_list(request):
    if request.method == 'POST':
        require_staff(request)
        data = read_json(request)
        show = catalog.create_show({
            'movie': pick(data, 'movieId', 'movie_id', 'movie'),
            'theater': pick(data, 'theaterId', 'theater_id', 'theater'),
            'start_time': pick(data, 'startTime', 'start_time'),
            'total_seats': pick(data, 'totalSeats', 'total_seats'),
            'base_price': pick(data, 'basePrice', 'base_price'),
            'current_price': pick(data, 'currentPrice', 'current_price'),
            'is_premium': pick(data, 'isPremium', 'is_premium', default=False),
            'is_special_screening': pick(data, 'isSpecialScreening', 'is_special_screening', default=False),
        })
        return JsonResponse(show_to_dict(catalog.get_show(show.pk)), status=201)

    shows = catalog.list_shows(
        movie_id=request.GET.get('movieId'),
        theater_id=request.GET.get('theaterId'),
        date=request.GET.get('date'),
    )
    return JsonResponse([show_to_dict(s) for s in shows], safe=False)


@api_view('GET', login=False)
def show_detail(request, show_id):
    return JsonResponse(show_to_dict(catalog.get_show(show_id)))


@api_view('GET', login=False)
def show_seats(request, show_id):
    return JsonResponse(catalog.get_show_seats(show_id))


# ---------------- BOOKINGS ----------------
@api_view('GET', 'POST')
def booking_list(request):
    if request.method == 'GET':
        require_staff(request)
        bookings = services.get_all_bookings()
        return JsonResponse([booking_to_dict(b) for b in bookings], safe=False)

    data = read_json(request)
    show_id = pick(data, 'showId', 'show_id')
    if show_id is None:
        raise BadRequest('showId is required')

    result = services.create_booking(
        request.user,
        int_param(show_id, 'showId'),
        pick(data, 'seats'),
        points_to_redeem=pick(data, 'pointsToRedeem', 'points_to_redeem', default=0),
        payment_method=pick(data, 'paymentMethod', 'payment_method'),
    )

    response = booking_to_dict(result['booking'], nested=False)
    response.update({
        'original_amount': result['original_amount'],
        'discount': result['discount'],
        'points_earned': result['points_earned'],
    })
    return JsonResponse(response, status=201)


@api_view('GET')
def my_bookings(request):
    bookings = services.get_user_bookings(request.user)
    return JsonResponse([booking_to_dict(b) for b in bookings], safe=False)


@api_view('GET')
def booking_detail(request, booking_id):
    booking = services.get_booking_details(request.user, booking_id)
    data = booking_to_dict(booking)
    data['can_cancel'] = services.can_cancel(booking)
    data['can_reschedule'] = services.can_reschedule(booking)
    return JsonResponse(data)


@api_view('PUT')
def cancel_booking(request, booking_id):
    data = read_json(request)
    return JsonResponse(services.cancel_booking(request.user, booking_id, reason=data.get('reason')))


@api_view('PUT')
def reschedule_booking(request, booking_id):
    data = read_json(request)
    new_show_id = pick(data, 'newShowId', 'new_show_id')
    if new_show_id is None:
        raise BadRequest('newShowId is required')
    result = services.reschedule_booking(request.user, booking_id, int_param(new_show_id, 'newShowId'))
    return JsonResponse(result)


@api_view('POST')
def booking_checkout(request, booking_id):
    return JsonResponse(payments.create_checkout_session(request.user, booking_id))


# ---------------- PRICING ----------------
@api_view('GET', login=False)
def show_pricing(request, show_id):
    return JsonResponse(pricing.get_show_pricing(show_id))


@api_view('GET', login=False)
def all_shows_pricing(request):
    return JsonResponse(pricing.get_all_shows_pricing(), safe=False)


@api_view('POST', staff=True)
def update_pricing(request, show_id):
    show = pricing.update_show_pricing(show_id)
    return JsonResponse({
        'show_id': show.pk,
        'current_price': show.current_price,
        'price_multiplier': show.price_multiplier,
        'booked_seats': show.booked_seats,
    })


@api_view('GET', login=False)
def predict_pricing(request, show_id):
    return JsonResponse({'show_id': show_id, 'predicted_price': pricing.predict_optimal_price(show_id)})


# ---------------- SEAT RECOMMENDATIONS ----------------
@api_view('GET', login=False)
def seat_recommendations(request, show_id):
    group_size = int_param(request.GET.get('groupSize', 1), 'groupSize')
    return JsonResponse(seats.get_recommended_seats(show_id, group_size), safe=False)


@api_view('GET', login=False)
def seat_map(request, show_id):
    return JsonResponse(seats.get_seat_map(show_id))


# ---------------- LOYALTY ----------------
@api_view('GET')
def loyalty_points(request):
    return JsonResponse(points_to_dict(loyalty.get_user_points(request.user)))


@api_view('POST')
def loyalty_redeem(request):
    data = read_json(request)
    points = pick(data, 'points')
    if isinstance(points, bool) or not isinstance(points, int):
        raise BadRequest('points must be an integer')
    discount = loyalty.redeem_points(request.user, points)
    return JsonResponse({'points_redeemed': points, 'discount': discount})


@api_view('GET')
def loyalty_benefits(request):
    points = loyalty.get_user_points(request.user)
    return JsonResponse({'tier': points.tier, **loyalty.get_tier_benefits(points.tier)})


# ---------------- REVIEWS ----------------
@api_view('POST')
def review_create(request):
    data = read_json(request)
    review = reviews.create_review(request.user, {
        'movie': pick(data, 'movieId', 'movie_id', 'movie'),
        'rating': pick(data, 'rating'),
        'comment': pick(data, 'comment', default=''),
    })
    return JsonResponse(review_to_dict(review), status=201)


@api_view('GET', login=False)
def movie_reviews(request, movie_id):
    return JsonResponse([review_to_dict(r) for r in reviews.get_movie_reviews(movie_id)], safe=False)


@api_view('GET')
def my_reviews(request):
    return JsonResponse([review_to_dict(r) for r in reviews.get_user_reviews(request.user)], safe=False)


@api_view('DELETE')
def review_delete(request, review_id):
    reviews.delete_review(request.user, review_id)
    return JsonResponse({'deleted': True, 'id': review_id})


# ---------------- RECOMMENDATIONS ----------------
@api_view('GET')
def personalized_recommendations(request):
    result = recommendations.get_personalized_recommendations(request.user)
    result['movies'] = [movie_to_dict(m) for m in result['movies']]
    return JsonResponse(result)


@api_view('GET', login=False)
def trending_movies(request):
    return JsonResponse([movie_to_dict(m) for m in recommendations.get_trending_movies()], safe=False)


@api_view('GET', login=False)
def new_releases(request):
    return JsonResponse([movie_to_dict(m) for m in recommendations.get_new_releases()], safe=False)


@api_view('GET', login=False)
def similar_movies(request, movie_id):
    return JsonResponse([movie_to_dict(m) for m in recommendations.get_similar_movies(movie_id)], safe=False)


# ---------------- ANALYTICS (ADMIN) ----------------
@api_view('GET', staff=True)
def revenue_analytics(request):
    return JsonResponse(analytics.get_revenue_analytics(*date_range(request)))


@api_view('GET', staff=True)
def popular_movies(request):
    return JsonResponse(analytics.get_popular_movies(*date_range(request)), safe=False)


@api_view('GET', staff=True)
def peak_hours(request):
    return JsonResponse(analytics.get_peak_booking_hours(*date_range(request)), safe=False)


@api_view('GET', staff=True)
def theater_occupancy(request):
    return JsonResponse(analytics.get_theater_occupancy(*date_range(request)), safe=False)


@api_view('GET', staff=True)
def customer_insights(request):
    return JsonResponse(analytics.get_customer_insights(*date_range(request)))


@api_view('GET', staff=True)
def admin_dashboard(request):
    return JsonResponse(analytics.get_dashboard())
