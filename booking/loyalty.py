import logging
from decimal import Decimal, ROUND_FLOOR

from django.db import transaction

from .exceptions import BadRequest
from .models import UserPoints

logger = logging.getLogger(__name__)

POINTS_RATE = Decimal('0.1')      # points earned per dollar paid
POINT_VALUE = Decimal('0.01')     # dollars per redeemed point

# minimum total spent -> tier, highest first
TIER_THRESHOLDS = [
    (Decimal('1000'), UserPoints.PLATINUM),
    (Decimal('500'), UserPoints.GOLD),
    (Decimal('200'), UserPoints.SILVER),
]

TIER_BENEFITS = {
    UserPoints.BRONZE: {
        'points_multiplier': 1,
        'early_booking': False,
        'free_upgrades': 0,
        'birthday_bonus': 100,
    },
    UserPoints.SILVER: {
        'points_multiplier': 1.2,
        'early_booking': True,
        'free_upgrades': 1,
        'birthday_bonus': 200,
    },
    UserPoints.GOLD: {
        'points_multiplier': 1.5,
        'early_booking': True,
        'free_upgrades': 2,
        'birthday_bonus': 300,
    },
    UserPoints.PLATINUM: {
        'points_multiplier': 2,
        'early_booking': True,
        'free_upgrades': 5,
        'birthday_bonus': 500,
    },
}


def get_user_points(user, for_update=False):
    queryset = UserPoints.objects.select_for_update() if for_update else UserPoints.objects
    points, _ = queryset.get_or_create(user=user)
    return points


def calculate_points(amount_paid):
    return int((Decimal(amount_paid) * POINTS_RATE).to_integral_value(rounding=ROUND_FLOOR))


def calculate_tier(total_spent):
    for threshold, tier in TIER_THRESHOLDS:
        if total_spent >= threshold:
            return tier
    return UserPoints.BRONZE


def points_value(points):
    return Decimal(points) * POINT_VALUE


@transaction.atomic
def add_points(user, booking):
    """Credit points for a confirmed booking and return how many were earned."""
    points = get_user_points(user, for_update=True)
    earned = calculate_points(booking.amount_paid)

    points.total_points += earned
    points.available_points += earned
    points.total_bookings += 1
    points.total_spent = Decimal(points.total_spent) + Decimal(booking.amount_paid)
    points.tier = calculate_tier(points.total_spent)
    points.save()

    logger.info("User %s earned %s points for booking %s (tier %s)",
                user.pk, earned, booking.pk, points.tier)
    return earned


@transaction.atomic
def redeem_points(user, points_to_redeem):
    """Deduct points and return their dollar value."""
    if points_to_redeem <= 0:
        raise BadRequest('Points to redeem must be positive')

    points = get_user_points(user, for_update=True)
    if points.available_points < points_to_redeem:
        raise BadRequest('Insufficient loyalty points')

    points.available_points -= points_to_redeem
    points.save(update_fields=['available_points', 'updated_at'])

    logger.info("User %s redeemed %s points", user.pk, points_to_redeem)
    return points_value(points_to_redeem)


@transaction.atomic
def restore_points(user, points_to_restore):
    points = get_user_points(user, for_update=True)
    points.available_points += points_to_restore
    points.save(update_fields=['available_points', 'updated_at'])
    logger.info("Restored %s points to user %s", points_to_restore, user.pk)
    return points


def get_tier_benefits(tier):
    return TIER_BENEFITS[tier]
