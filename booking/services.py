"""
Booking transactions: create, cancel and reschedule.

Every operation runs inside one ``transaction.atomic()`` block. The show row
is locked with ``select_for_update`` before seats are checked, and the
``(show, seat_no)`` unique constraint on ReservedSeat is the final guard
against double booking: an IntegrityError rolls the whole block back and is
reported as SeatUnavailable.
"""
import logging
from decimal import Decimal

from django.conf import settings
from django.core.mail import send_mail
from django.db import IntegrityError, transaction
from django.db.models import F
from django.utils import timezone

from . import loyalty
from .exceptions import BadRequest, NotFound, SeatUnavailable
from .models import Booking, ReservedSeat, Show
from .pricing import hours_until, to_cents, update_show_pricing

logger = logging.getLogger(__name__)

# hours until show (strictly above) -> share of amount refunded
REFUND_TIERS = [
    (24, Decimal('0.9')),
    (2, Decimal('0.5')),
]
NO_REFUND = Decimal('0')

RESCHEDULE_CUTOFF_HOURS = 2
DEFAULT_PAYMENT_METHOD = 'card'


def refund_percentage(hours_until_show):
    for threshold, percentage in REFUND_TIERS:
        if hours_until_show > threshold:
            return percentage
    return NO_REFUND


def clean_seats(seats):
    if not isinstance(seats, (list, tuple)) or not seats:
        raise BadRequest('At least one seat is required')

    cleaned = []
    for seat in seats:
        if isinstance(seat, bool) or not isinstance(seat, int) or seat < 1:
            raise BadRequest(f'Invalid seat number: {seat!r}')
        cleaned.append(seat)

    if len(set(cleaned)) != len(cleaned):
        raise BadRequest('Duplicate seat numbers in request')
    return sorted(cleaned)


def check_seats_fit(show, seats):
    outside = [s for s in seats if s > show.total_seats]
    if outside:
        raise BadRequest(f"Seats {', '.join(map(str, outside))} do not exist for this show")


def taken_seats(show_id, seats):
    return list(
        ReservedSeat.objects.filter(show_id=show_id, seat_no__in=seats)
        .order_by('seat_no')
        .values_list('seat_no', flat=True)
    )


def reserve_seats(show, booking, seats):
    ReservedSeat.objects.bulk_create(
        [ReservedSeat(show=show, seat_no=seat, booking=booking) for seat in seats]
    )


def make_transaction_id(prefix, user):
    return f"{prefix}_{int(timezone.now().timestamp() * 1000)}_{user.pk}"


def lock_show(show_id, message='Show not found'):
    show = Show.objects.select_for_update().select_related('movie').filter(pk=show_id).first()
    if show is None:
        raise NotFound(message)
    return show


def lock_shows(*show_ids):
    """Lock several shows in primary key order; returns them keyed by id."""
    shows = Show.objects.select_for_update().select_related('movie') \
        .filter(pk__in=show_ids).order_by('pk')
    return {show.pk: show for show in shows}


# ---------------- CREATE ----------------
def create_booking(user, show_id, seats, points_to_redeem=0, payment_method=None, now=None):
    seats = clean_seats(seats)
    points_to_redeem = points_to_redeem or 0
    if isinstance(points_to_redeem, bool) or not isinstance(points_to_redeem, int) or points_to_redeem < 0:
        raise BadRequest('pointsToRedeem must be a non-negative integer')

    try:
        with transaction.atomic():
            show = lock_show(show_id)
            check_seats_fit(show, seats)

            taken = taken_seats(show.pk, seats)
            if taken:
                logger.warning("Seat conflict on show %s: %s", show.pk, taken)
                raise SeatUnavailable(taken)

            subtotal = to_cents(Decimal(str(show.price)) * len(seats))
            discount = Decimal('0.00')
            points_used = 0

            # never redeem more points than the subtotal is worth
            if points_to_redeem:
                points_used = min(points_to_redeem, int(subtotal / loyalty.POINT_VALUE))
                if points_used:
                    discount = to_cents(loyalty.redeem_points(user, points_used))

            booking = Booking.objects.create(
                user=user,
                show=show,
                seats=seats,
                amount_paid=subtotal - discount,
                points_used=points_used,
                payment_method=payment_method or DEFAULT_PAYMENT_METHOD,
                transaction_id=make_transaction_id('TXN', user),
            )
            reserve_seats(show, booking, seats)
            Show.objects.filter(pk=show.pk).update(booked_seats=F('booked_seats') + len(seats))

            booking.points_earned = loyalty.add_points(user, booking)
            booking.save(update_fields=['points_earned', 'updated_at'])

            update_show_pricing(show.pk, now=now)
            transaction.on_commit(lambda: send_booking_confirmation(booking))
    except IntegrityError:
        # lost the race for a seat after the pre-check passed
        taken = taken_seats(show_id, seats)
        if not taken:
            raise
        logger.warning("Unique seat constraint hit on show %s: %s", show_id, taken)
        raise SeatUnavailable(taken)

    logger.info("Booking %s created: user %s, show %s, seats %s, paid %s",
                booking.pk, user.pk, show_id, seats, booking.amount_paid)
    return {
        'booking': booking,
        'original_amount': subtotal,
        'discount': discount,
        'points_earned': booking.points_earned,
    }


def send_booking_confirmation(booking):
    if not booking.user.email:
        return

    show = booking.show
    subject = "Movie Ticket Confirmation"
    message = f"""
Hello {booking.user.get_username()},

Your movie ticket has been successfully booked!

Movie: {show.movie.title}
Theater: {show.theater.name}
Show time: {timezone.localtime(show.start_time):%d %b %Y, %I:%M %p}
Seats: {', '.join(str(s) for s in booking.seats)}
Amount Paid: ${booking.amount_paid}
Points Earned: {booking.points_earned}
Transaction: {booking.transaction_id}

Enjoy your show!
"""
    send_mail(
        subject,
        message,
        settings.DEFAULT_FROM_EMAIL,
        [booking.user.email],
        fail_silently=True,
    )
    logger.info("Confirmation email queued for booking %s", booking.pk)


# ---------------- CANCEL ----------------
def cancel_booking(user, booking_id, reason=None, now=None):
    with transaction.atomic():
        booking = Booking.objects.select_for_update().select_related('show') \
            .filter(pk=booking_id, user=user).first()
        if booking is None:
            raise NotFound('Booking not found')
        if booking.status != Booking.CONFIRMED:
            raise BadRequest('Booking cannot be cancelled')

        percentage = refund_percentage(hours_until(booking.show.start_time, now))
        refund_amount = to_cents(Decimal(booking.amount_paid) * percentage)

        booking.status = Booking.CANCELLED
        booking.cancellation_reason = reason
        booking.refund_percentage = percentage
        booking.refund_amount = refund_amount
        booking.save(update_fields=[
            'status', 'cancellation_reason', 'refund_percentage', 'refund_amount', 'updated_at',
        ])

        booking.reserved_seats.all().delete()

        if booking.points_used:
            loyalty.restore_points(user, booking.points_used)

        update_show_pricing(booking.show_id, now=now)

    logger.info("Booking %s cancelled: refund %s (%s)", booking.pk, refund_amount, percentage)
    return {
        'booking_id': booking.pk,
        'refund_amount': refund_amount,
        'refund_percentage': percentage,
        'message': f"Booking cancelled. Refund of ${refund_amount:.2f} will be processed.",
    }


# ---------------- RESCHEDULE ----------------
def reschedule_booking(user, booking_id, new_show_id, now=None):
    try:
        with transaction.atomic():
            original = Booking.objects.select_for_update().select_related('show') \
                .filter(pk=booking_id, user=user).first()
            if original is None:
                raise NotFound('Original booking not found')
            if original.status != Booking.CONFIRMED:
                raise BadRequest('Booking cannot be rescheduled')

            shows = lock_shows(original.show_id, new_show_id)
            new_show = shows.get(new_show_id)
            if new_show is None:
                raise NotFound('New show not found')
            old_show = shows[original.show_id]
            if old_show.movie_id != new_show.movie_id:
                raise BadRequest('Can only reschedule to the same movie')
            if old_show.pk == new_show.pk:
                raise BadRequest('Booking is already for this show')

            seats = list(original.seats)
            check_seats_fit(new_show, seats)
            taken = taken_seats(new_show.pk, seats)
            if taken:
                raise SeatUnavailable(
                    taken,
                    f"Seats {', '.join(map(str, taken))} are not available for the new show",
                )

            price_difference = to_cents(
                (Decimal(str(new_show.price)) - Decimal(str(old_show.price))) * len(seats)
            )
            new_amount = max(Decimal(original.amount_paid) + price_difference, Decimal('0.00'))

            original.status = Booking.RESCHEDULED
            original.save(update_fields=['status', 'updated_at'])
            original.reserved_seats.all().delete()

            new_booking = Booking.objects.create(
                user=user,
                show=new_show,
                seats=seats,
                amount_paid=new_amount,
                original_booking=original,
                payment_method=original.payment_method,
                transaction_id=make_transaction_id('RSCH', user),
            )
            reserve_seats(new_show, new_booking, seats)

            update_show_pricing(old_show.pk, now=now)
            update_show_pricing(new_show.pk, now=now)
    except IntegrityError:
        taken = taken_seats(new_show_id, seats)
        if not taken:
            raise
        logger.warning("Unique seat constraint hit rescheduling booking %s", booking_id)
        raise SeatUnavailable(taken)

    if price_difference > 0:
        message = f"Booking rescheduled. Additional payment of ${price_difference:.2f} required."
    elif price_difference < 0:
        message = f"Booking rescheduled. Refund of ${abs(price_difference):.2f} will be processed."
    else:
        message = 'Booking rescheduled successfully.'

    logger.info("Booking %s rescheduled to %s on show %s (difference %s)",
                original.pk, new_booking.pk, new_show.pk, price_difference)
    return {
        'new_booking_id': new_booking.pk,
        'price_difference': price_difference,
        'new_amount': new_amount,
        'message': message,
    }


# ---------------- QUERIES ----------------
def get_user_bookings(user):
    return Booking.objects.filter(user=user).select_related('show__movie', 'show__theater')


def get_all_bookings():
    return Booking.objects.select_related('user', 'show__movie', 'show__theater')


def can_cancel(booking, now=None):
    if booking.status != Booking.CONFIRMED:
        return False
    return hours_until(booking.show.start_time, now) > 0


def can_reschedule(booking, now=None):
    if booking.status != Booking.CONFIRMED:
        return False
    return hours_until(booking.show.start_time, now) > RESCHEDULE_CUTOFF_HOURS


def get_booking_details(user, booking_id):
    booking = get_user_bookings(user).prefetch_related('reserved_seats').filter(pk=booking_id).first()
    if booking is None:
        raise NotFound('Booking not found')
    return booking
