import logging

import stripe
from django.conf import settings

from .exceptions import BadRequest, NotFound, PaymentError
from .models import Booking

logger = logging.getLogger(__name__)


def create_checkout_session(user, booking_id):
    """Open a Stripe Checkout session for the amount a booking owes."""
    booking = Booking.objects.select_related('show__movie').filter(pk=booking_id, user=user).first()
    if booking is None:
        raise NotFound('Booking not found')
    if booking.status != Booking.CONFIRMED:
        raise BadRequest('Only confirmed bookings can be paid')

    unit_amount = int(booking.amount_paid * 100)
    if unit_amount <= 0:
        raise BadRequest('Nothing to pay for this booking')

    stripe.api_key = settings.STRIPE_SECRET_KEY
    try:
        session = stripe.checkout.Session.create(
            payment_method_types=['card'],
            line_items=[{
                'price_data': {
                    'currency': settings.STRIPE_CURRENCY,
                    'product_data': {
                        'name': f"{booking.show.movie.title} - seats {', '.join(map(str, booking.seats))}",
                    },
                    'unit_amount': unit_amount,
                },
                'quantity': 1,
            }],
            mode='payment',
            metadata={'booking_id': booking.pk, 'transaction_id': booking.transaction_id},
            success_url=settings.CHECKOUT_SUCCESS_URL,
            cancel_url=settings.CHECKOUT_CANCEL_URL,
        )
    except stripe.StripeError as exc:
        logger.error("Stripe checkout failed for booking %s: %s", booking.pk, exc)
        raise PaymentError(f'Payment provider error: {exc}') from exc

    booking.checkout_session_id = session.id
    booking.save(update_fields=['checkout_session_id', 'updated_at'])

    logger.info("Checkout session %s opened for booking %s (%s cents)", session.id, booking.pk, unit_amount)
    return {'booking_id': booking.pk, 'session_id': session.id, 'url': session.url}
