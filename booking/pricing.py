"""
Demand based pricing for shows.

A show's current price is its base price times a multiplier built from
independent factors, applied in a fixed order:

    occupancy tier -> time to show -> weekend -> prime time -> flags

Recalculation only touches the Show row. Bookings keep the amount they paid.
"""
import logging
from decimal import Decimal, ROUND_HALF_UP

from django.db import transaction
from django.db.models import Count, Q
from django.utils import timezone

from .exceptions import NotFound
from .models import Booking, Show

logger = logging.getLogger(__name__)

CENTS = Decimal('0.01')
MULTIPLIER_PLACES = Decimal('0.000001')

# (occupancy strictly above, multiplier), checked top down
OCCUPANCY_TIERS = [
    (0.8, Decimal('1.5')),
    (0.6, Decimal('1.3')),
    (0.4, Decimal('1.15')),
]
LOW_OCCUPANCY = 0.2
LOW_OCCUPANCY_MULTIPLIER = Decimal('0.9')

LAST_MINUTE_HOURS = 2
LAST_MINUTE_MULTIPLIER = Decimal('1.2')
EARLY_BIRD_HOURS = 168
EARLY_BIRD_MULTIPLIER = Decimal('0.95')

WEEKEND_DAYS = (4, 5)  # Friday, Saturday
WEEKEND_MULTIPLIER = Decimal('1.1')

PRIME_TIME_HOURS = range(18, 23)  # 18:00 - 22:59
PRIME_TIME_MULTIPLIER = Decimal('1.05')

PREMIUM_MULTIPLIER = Decimal('1.25')
SPECIAL_SCREENING_MULTIPLIER = Decimal('1.4')
NEW_RELEASE_MULTIPLIER = Decimal('1.15')


def to_cents(amount):
    return Decimal(amount).quantize(CENTS, rounding=ROUND_HALF_UP)


def hours_until(start_time, now=None):
    now = now or timezone.now()
    return (start_time - now).total_seconds() / 3600


def occupancy_multiplier(occupancy_rate):
    for threshold, multiplier in OCCUPANCY_TIERS:
        if occupancy_rate > threshold:
            return multiplier
    if occupancy_rate < LOW_OCCUPANCY:
        return LOW_OCCUPANCY_MULTIPLIER
    return Decimal('1.0')


def calculate_multiplier(occupancy_rate, start_time, now=None, is_premium=False,
                         is_special_screening=False, is_new_release=False):
    multiplier = occupancy_multiplier(occupancy_rate)

    hours = hours_until(start_time, now)
    if hours < LAST_MINUTE_HOURS:
        multiplier *= LAST_MINUTE_MULTIPLIER
    elif hours > EARLY_BIRD_HOURS:
        multiplier *= EARLY_BIRD_MULTIPLIER

    local_start = timezone.localtime(start_time) if timezone.is_aware(start_time) else start_time
    if local_start.weekday() in WEEKEND_DAYS:
        multiplier *= WEEKEND_MULTIPLIER

    if local_start.hour in PRIME_TIME_HOURS:
        multiplier *= PRIME_TIME_MULTIPLIER

    if is_premium:
        multiplier *= PREMIUM_MULTIPLIER
    if is_special_screening:
        multiplier *= SPECIAL_SCREENING_MULTIPLIER
    if is_new_release:
        multiplier *= NEW_RELEASE_MULTIPLIER

    return multiplier


def calculate_dynamic_price(show, occupancy_rate, now=None):
    """Return ``(price, multiplier)`` for ``show`` at the given occupancy."""
    multiplier = calculate_multiplier(
        occupancy_rate,
        show.start_time,
        now=now,
        is_premium=show.is_premium,
        is_special_screening=show.is_special_screening,
        is_new_release=show.movie.is_new_release,
    )
    return to_cents(Decimal(str(show.base_price)) * multiplier), multiplier


def count_confirmed_seats(show_id):
    return Booking.objects.filter(show_id=show_id, status=Booking.CONFIRMED) \
        .aggregate(seats=Count('reserved_seats'))['seats'] or 0


@transaction.atomic
def update_show_pricing(show_id, now=None):
    try:
        show = Show.objects.select_for_update().select_related('movie').get(pk=show_id)
    except Show.DoesNotExist:
        raise NotFound('Show not found')

    booked = count_confirmed_seats(show_id)
    occupancy = booked / show.total_seats if show.total_seats else 0.0
    old_price = show.current_price
    price, multiplier = calculate_dynamic_price(show, occupancy, now=now)

    show.current_price = price
    show.price_multiplier = multiplier.quantize(MULTIPLIER_PLACES, rounding=ROUND_HALF_UP)
    show.booked_seats = booked
    show.save(update_fields=['current_price', 'price_multiplier', 'booked_seats'])

    logger.info("Repriced show %s: %s -> %s (occupancy %.2f, x%s)",
                show.pk, old_price, price, occupancy, show.price_multiplier)
    return show


def get_show_pricing(show_id):
    show = Show.objects.filter(pk=show_id).first()
    if show is None:
        raise NotFound('Show not found')

    return {
        'show_id': show.pk,
        'base_price': show.base_price,
        'current_price': show.price,
        'price_multiplier': show.price_multiplier,
        'occupancy_rate': show.occupancy_rate,
        'available_seats': show.total_seats - show.booked_seats,
        'last_updated': timezone.now(),
    }


def get_all_shows_pricing(now=None):
    now = now or timezone.now()
    shows = Show.objects.filter(start_time__gte=now) \
        .select_related('movie', 'theater') \
        .annotate(confirmed_seats=Count(
            'reserved_seats', filter=Q(reserved_seats__booking__status=Booking.CONFIRMED)))

    return [
        {
            'show_id': show.pk,
            'movie_title': show.movie.title,
            'theater_name': show.theater.name,
            'start_time': show.start_time,
            'base_price': show.base_price,
            'current_price': show.price,
            'occupancy_rate': show.confirmed_seats / show.total_seats if show.total_seats else 0.0,
            'available_seats': show.total_seats - show.confirmed_seats,
        }
        for show in shows
    ]


def predict_optimal_price(show_id, now=None):
    """Price the show as if it had the average occupancy of similar upcoming shows."""
    now = now or timezone.now()
    show = Show.objects.select_related('movie').filter(pk=show_id).first()
    if show is None:
        raise NotFound('Show not found')

    similar = Show.objects.filter(movie__genre=show.movie.genre, start_time__gte=now)[:10]
    rates = [s.occupancy_rate for s in similar]
    average = sum(rates) / len(rates) if rates else show.occupancy_rate

    price, _ = calculate_dynamic_price(show, average, now=now)
    return price
