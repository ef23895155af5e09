"""
Admin reporting over confirmed bookings.

All figures only count CONFIRMED bookings; cancelled and rescheduled ones
are excluded from revenue.
"""
import math
from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.db.models import Count, Sum
from django.db.models.functions import ExtractHour, TruncDate

from .models import Booking, ReservedSeat, Show
from .pricing import to_cents

ZERO = Decimal('0.00')


def confirmed_bookings(start, end):
    return Booking.objects.filter(status=Booking.CONFIRMED, created_at__range=(start, end))


def _revenue(start, end):
    return to_cents(confirmed_bookings(start, end).aggregate(total=Sum('amount_paid'))['total'] or ZERO)


def revenue_growth(start, end):
    """Percent change against the equally long period right before ``start``."""
    days = max(math.ceil((end - start).total_seconds() / 86400), 1)
    previous_start = start - timedelta(days=days)

    current = _revenue(start, end)
    previous = _revenue(previous_start, start)
    if previous > 0:
        return float((current - previous) / previous * 100)
    return 0.0


def get_revenue_analytics(start, end):
    bookings = confirmed_bookings(start, end)
    totals = bookings.aggregate(revenue=Sum('amount_paid'), count=Count('id'))
    total_revenue = to_cents(totals['revenue'] or ZERO)
    total_bookings = totals['count']

    daily = bookings.annotate(date=TruncDate('created_at')) \
        .values('date') \
        .annotate(revenue=Sum('amount_paid')) \
        .order_by('date')

    return {
        'total_revenue': total_revenue,
        'total_bookings': total_bookings,
        'average_booking_value': to_cents(total_revenue / total_bookings) if total_bookings else ZERO,
        'daily_revenue': [{'date': row['date'], 'revenue': to_cents(row['revenue'])} for row in daily],
        'revenue_growth': revenue_growth(start, end),
    }


def get_popular_movies(start, end, limit=10):
    rows = confirmed_bookings(start, end) \
        .values('show__movie_id', 'show__movie__title') \
        .annotate(booking_count=Count('id'), total_revenue=Sum('amount_paid')) \
        .order_by('-booking_count', 'show__movie__title')[:limit]

    return [
        {
            'movie_id': row['show__movie_id'],
            'title': row['show__movie__title'],
            'booking_count': row['booking_count'],
            'total_revenue': to_cents(row['total_revenue'] or ZERO),
        }
        for row in rows
    ]


def get_peak_booking_hours(start, end):
    rows = confirmed_bookings(start, end) \
        .annotate(hour=ExtractHour('created_at')) \
        .values('hour') \
        .annotate(booking_count=Count('id')) \
        .order_by('hour')
    return [{'hour': row['hour'], 'booking_count': row['booking_count']} for row in rows]


def get_theater_occupancy(start, end):
    shows = Show.objects.filter(start_time__range=(start, end))

    rows = shows.values('theater_id', 'theater__name') \
        .annotate(total_shows=Count('id'), total_seats=Sum('total_seats'), booked_seats=Sum('booked_seats')) \
        .order_by('theater__name')

    revenue = dict(
        Booking.objects.filter(status=Booking.CONFIRMED, show__in=shows)
        .values('show__theater_id')
        .annotate(total=Sum('amount_paid'))
        .values_list('show__theater_id', 'total')
    )

    return [
        {
            'theater_id': row['theater_id'],
            'theater_name': row['theater__name'],
            'total_shows': row['total_shows'],
            'occupancy_rate': row['booked_seats'] / row['total_seats'] * 100 if row['total_seats'] else 0.0,
            'total_revenue': to_cents(revenue.get(row['theater_id']) or ZERO),
        }
        for row in rows
    ]


def get_customer_insights(start, end):
    User = get_user_model()
    customers = User.objects.filter(bookings__created_at__range=(start, end)).distinct()

    total = customers.count()
    new_customers = customers.filter(date_joined__range=(start, end)).count()
    repeat_customers = customers.filter(date_joined__lt=start).count()

    return {
        'new_customers': new_customers,
        'repeat_customers': repeat_customers,
        'customer_retention_rate': repeat_customers / total * 100 if total else 0.0,
    }


def get_dashboard():
    confirmed = Booking.objects.filter(status=Booking.CONFIRMED)

    # 💰 TOTAL REVENUE
    total_revenue = to_cents(confirmed.aggregate(total=Sum('amount_paid'))['total'] or ZERO)

    # 🎬 MOVIE-WISE STATS
    revenue_by_movie = confirmed.values('show__movie__title') \
        .annotate(revenue=Sum('amount_paid'))
    seats_by_movie = dict(
        ReservedSeat.objects.filter(booking__status=Booking.CONFIRMED)
        .values('show__movie__title')
        .annotate(seats=Count('id'))
        .values_list('show__movie__title', 'seats')
    )

    movie_stats = sorted(
        (
            {
                'movie__title': row['show__movie__title'],
                'seats_booked': seats_by_movie.get(row['show__movie__title'], 0),
                'revenue': to_cents(row['revenue']),
            }
            for row in revenue_by_movie
        ),
        key=lambda stat: stat['seats_booked'],
        reverse=True,
    )

    # 🔥 MOST POPULAR MOVIE
    most_popular_movie = movie_stats[0] if movie_stats else None

    return {
        'total_revenue': total_revenue,
        'movie_stats': movie_stats,
        'most_popular_movie': most_popular_movie,
    }
