"""Model -> dict conversion for JSON responses."""


def movie_to_dict(movie):
    return {
        'id': movie.pk,
        'title': movie.title,
        'description': movie.description,
        'duration_min': movie.duration_min,
        'language': movie.language,
        'genre': movie.genre,
        'rating': movie.rating,
        'release_date': movie.release_date,
        'poster_url': movie.poster_url,
        'director': movie.director,
        'cast': movie.cast,
        'average_rating': movie.average_rating,
        'total_reviews': movie.total_reviews,
        'is_new_release': movie.is_new_release,
    }


def theater_to_dict(theater):
    return {
        'id': theater.pk,
        'name': theater.name,
        'location': theater.location,
        'wheelchair_accessible': theater.wheelchair_accessible,
        'hearing_loop_available': theater.hearing_loop_available,
        'amenities': theater.amenities,
        'contact_number': theater.contact_number,
    }


def show_to_dict(show, nested=True):
    data = {
        'id': show.pk,
        'movie_id': show.movie_id,
        'theater_id': show.theater_id,
        'start_time': show.start_time,
        'total_seats': show.total_seats,
        'base_price': show.base_price,
        'current_price': show.price,
        'price_multiplier': show.price_multiplier,
        'booked_seats': show.booked_seats,
        'available_seats': show.total_seats - show.booked_seats,
        'is_premium': show.is_premium,
        'is_special_screening': show.is_special_screening,
    }
    if nested:
        data['movie'] = movie_to_dict(show.movie)
        data['theater'] = theater_to_dict(show.theater)
    return data


def booking_to_dict(booking, nested=True):
    data = {
        'id': booking.pk,
        'user_id': booking.user_id,
        'show_id': booking.show_id,
        'seats': booking.seats,
        'amount_paid': booking.amount_paid,
        'status': booking.status,
        'cancellation_reason': booking.cancellation_reason,
        'refund_percentage': booking.refund_percentage,
        'refund_amount': booking.refund_amount,
        'original_booking_id': booking.original_booking_id,
        'points_earned': booking.points_earned,
        'points_used': booking.points_used,
        'payment_method': booking.payment_method,
        'transaction_id': booking.transaction_id,
        'created_at': booking.created_at,
        'updated_at': booking.updated_at,
    }
    if nested:
        data['show'] = show_to_dict(booking.show)
    return data


def points_to_dict(points):
    return {
        'total_points': points.total_points,
        'available_points': points.available_points,
        'tier': points.tier,
        'total_bookings': points.total_bookings,
        'total_spent': points.total_spent,
    }


def review_to_dict(review):
    return {
        'id': review.pk,
        'user_id': review.user_id,
        'movie_id': review.movie_id,
        'rating': review.rating,
        'comment': review.comment,
        'created_at': review.created_at,
    }
