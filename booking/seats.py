"""
Seat map and seat recommendations.

Seats are numbered 1..total_seats and laid out row by row on a square-ish
grid of ``ceil(sqrt(total_seats))`` seats per row. The scoring helpers are
plain functions over integers; only the two entry points at the bottom read
reservations from the database.
"""
import math

from .exceptions import BadRequest, NotFound
from .models import ReservedSeat, Show

BASE_SCORE = 100
IDEAL_ROW_DEPTH = 0.4
OPTIMAL_BAND = (0.3, 0.7)
ROW_PENALTY = 5
SEAT_PENALTY = 3
GROUP_CENTER_PENALTY = 2
OPTIMAL_BAND_BONUS = 20
CENTER_BONUS = 15
CENTER_RADIUS = 2
GROUP_BONUS = 30

SINGLE_LIMIT = 10
GROUP_LIMIT = 5


def grid_size(total_seats):
    """Return ``(seats_per_row, total_rows)``."""
    seats_per_row = math.ceil(math.sqrt(total_seats))
    total_rows = math.ceil(total_seats / seats_per_row)
    return seats_per_row, total_rows


def seat_position(seat_number, seats_per_row):
    row = math.ceil(seat_number / seats_per_row)
    seat_in_row = (seat_number - 1) % seats_per_row + 1
    return row, seat_in_row


def available_seats(total_seats, occupied):
    return [n for n in range(1, total_seats + 1) if n not in occupied]


def score_single_seat(seat_number, total_seats):
    seats_per_row, total_rows = grid_size(total_seats)
    row, seat_in_row = seat_position(seat_number, seats_per_row)

    score = BASE_SCORE
    reason = 'Available seat'

    ideal_row = math.ceil(total_rows * IDEAL_ROW_DEPTH)
    score -= abs(row - ideal_row) * ROW_PENALTY

    center_seat = math.ceil(seats_per_row / 2)
    seat_distance = abs(seat_in_row - center_seat)
    score -= seat_distance * SEAT_PENALTY

    low, high = OPTIMAL_BAND
    if math.ceil(total_rows * low) <= row <= math.ceil(total_rows * high):
        score += OPTIMAL_BAND_BONUS
        reason = 'Optimal viewing distance'

    if seat_distance <= CENTER_RADIUS:
        score += CENTER_BONUS
        reason = 'Center seating area'

    return score, reason


def single_seat_recommendations(free_seats, total_seats, limit=SINGLE_LIMIT):
    recommendations = []
    for seat_number in free_seats:
        score, reason = score_single_seat(seat_number, total_seats)
        recommendations.append({'seat_number': seat_number, 'score': score, 'reason': reason})

    # stable sort keeps lower seat numbers first on ties
    recommendations.sort(key=lambda r: r['score'], reverse=True)
    return recommendations[:limit]


def group_seat_recommendations(free_seats, group_size, total_seats, limit=GROUP_LIMIT):
    seats_per_row, total_rows = grid_size(total_seats)
    # a group never spans rows
    if group_size > seats_per_row:
        return []

    ideal_row = math.ceil(total_rows * IDEAL_ROW_DEPTH)
    free = set(free_seats)
    recommendations = []

    for first in free_seats:
        last = first + group_size - 1
        row = math.ceil(first / seats_per_row)
        if row != math.ceil(last / seats_per_row):
            continue
        if not all(seat in free for seat in range(first, last + 1)):
            continue
        block = list(range(first, last + 1))

        score = BASE_SCORE
        score -= abs(row - ideal_row) * ROW_PENALTY

        group_center = (block[0] + block[-1]) / 2
        row_center = (row - 1) * seats_per_row + seats_per_row / 2
        score -= abs(group_center - row_center) * GROUP_CENTER_PENALTY

        score += GROUP_BONUS

        recommendations.append({
            'seat_number': block[0],
            'seats': block,
            'score': score,
            'reason': f'{group_size} consecutive seats together',
        })

    recommendations.sort(key=lambda r: r['score'], reverse=True)
    return recommendations[:limit]


def build_seat_map(total_seats, occupied):
    seats_per_row, total_rows = grid_size(total_seats)
    seat_map = []
    for row in range(1, total_rows + 1):
        row_seats = []
        for seat in range(1, seats_per_row + 1):
            seat_number = (row - 1) * seats_per_row + seat
            if seat_number <= total_seats:
                row_seats.append({
                    'seat_number': seat_number,
                    'is_occupied': seat_number in occupied,
                    'row': row,
                    'seat_in_row': seat,
                })
        seat_map.append(row_seats)

    return {
        'seat_map': seat_map,
        'total_seats': total_seats,
        'available_seats': total_seats - len(occupied),
        'seats_per_row': seats_per_row,
        'total_rows': total_rows,
    }


def _show_and_occupied(show_id):
    show = Show.objects.filter(pk=show_id).first()
    if show is None:
        raise NotFound('Show not found')
    occupied = set(ReservedSeat.objects.filter(show=show).values_list('seat_no', flat=True))
    return show, occupied


def get_recommended_seats(show_id, group_size=1):
    if group_size < 1:
        raise BadRequest('groupSize must be at least 1')

    show, occupied = _show_and_occupied(show_id)
    free_seats = available_seats(show.total_seats, occupied)

    if group_size == 1:
        return single_seat_recommendations(free_seats, show.total_seats)
    return group_seat_recommendations(free_seats, group_size, show.total_seats)


def get_seat_map(show_id):
    show, occupied = _show_and_occupied(show_id)
    return build_seat_map(show.total_seats, occupied)
