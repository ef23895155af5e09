from decimal import Decimal

from django.conf import settings
from django.db import models


class Movie(models.Model):
    GENRE_CHOICES = [
        ('Action', 'Action'),
        ('Comedy', 'Comedy'),
        ('Drama', 'Drama'),
        ('Horror', 'Horror'),
        ('Romance', 'Romance'),
        ('Sci-Fi', 'Sci-Fi'),
        ('Thriller', 'Thriller'),
        ('Animation', 'Animation'),
    ]

    LANGUAGE_CHOICES = [
        ('English', 'English'),
        ('Hindi', 'Hindi'),
        ('Tamil', 'Tamil'),
    ]

    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    duration_min = models.PositiveIntegerField()
    language = models.CharField(max_length=20, choices=LANGUAGE_CHOICES, default='English')
    genre = models.CharField(max_length=20, choices=GENRE_CHOICES)
    rating = models.CharField(max_length=10, blank=True)  # PG, PG-13, R ...
    release_date = models.DateField(null=True, blank=True)
    poster_url = models.URLField(blank=True)
    director = models.CharField(max_length=100, blank=True)
    cast = models.JSONField(default=list, blank=True)
    average_rating = models.DecimalField(max_digits=3, decimal_places=1, default=Decimal('0.0'))
    total_reviews = models.PositiveIntegerField(default=0)
    is_new_release = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.title


class Theater(models.Model):
    name = models.CharField(max_length=100)
    location = models.CharField(max_length=255)
    wheelchair_accessible = models.BooleanField(default=True)
    hearing_loop_available = models.BooleanField(default=False)
    amenities = models.JSONField(default=list, blank=True)
    contact_number = models.CharField(max_length=20, blank=True)

    def __str__(self):
        return self.name


class Show(models.Model):
    movie = models.ForeignKey(Movie, on_delete=models.CASCADE, related_name='shows')
    theater = models.ForeignKey(Theater, on_delete=models.CASCADE, related_name='shows')
    start_time = models.DateTimeField()
    total_seats = models.PositiveIntegerField()
    base_price = models.DecimalField(max_digits=10, decimal_places=2)
    current_price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    price_multiplier = models.DecimalField(max_digits=12, decimal_places=6, default=Decimal('1.0'))
    booked_seats = models.PositiveIntegerField(default=0)
    is_premium = models.BooleanField(default=False)
    is_special_screening = models.BooleanField(default=False)

    class Meta:
        ordering = ['start_time']

    def __str__(self):
        return f"{self.movie.title} @ {self.theater.name} - {self.start_time:%d %b %Y %H:%M}"

    def save(self, *args, **kwargs):
        if self.current_price is None:
            self.current_price = self.base_price
        super().save(*args, **kwargs)

    @property
    def price(self):
        return self.current_price if self.current_price is not None else self.base_price

    @property
    def occupancy_rate(self):
        if not self.total_seats:
            return 0.0
        return self.booked_seats / self.total_seats


class Booking(models.Model):
    CONFIRMED = 'CONFIRMED'
    CANCELLED = 'CANCELLED'
    RESCHEDULED = 'RESCHEDULED'
    REFUNDED = 'REFUNDED'

    STATUS_CHOICES = [
        (CONFIRMED, 'Confirmed'),
        (CANCELLED, 'Cancelled'),
        (RESCHEDULED, 'Rescheduled'),
        (REFUNDED, 'Refunded'),
    ]

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='bookings')
    show = models.ForeignKey(Show, on_delete=models.CASCADE, related_name='bookings')
    seats = models.JSONField(default=list)
    amount_paid = models.DecimalField(max_digits=10, decimal_places=2)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=CONFIRMED)
    cancellation_reason = models.CharField(max_length=255, blank=True, null=True)
    refund_percentage = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True)
    refund_amount = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    original_booking = models.ForeignKey(
        'self', on_delete=models.SET_NULL, null=True, blank=True, related_name='reschedules'
    )
    points_earned = models.PositiveIntegerField(default=0)
    points_used = models.PositiveIntegerField(default=0)
    payment_method = models.CharField(max_length=30, default='card')
    transaction_id = models.CharField(max_length=100, blank=True)
    checkout_session_id = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"#{self.pk} {self.show.movie.title} - seats {self.seats} - ${self.amount_paid}"


class ReservedSeat(models.Model):
    show = models.ForeignKey(Show, on_delete=models.CASCADE, related_name='reserved_seats')
    seat_no = models.PositiveIntegerField()
    booking = models.ForeignKey(Booking, on_delete=models.CASCADE, related_name='reserved_seats')

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=['show', 'seat_no'], name='unique_seat_per_show'),
        ]

    def __str__(self):
        return f"Seat {self.seat_no} - show #{self.show_id}"


class UserPoints(models.Model):
    BRONZE = 'Bronze'
    SILVER = 'Silver'
    GOLD = 'Gold'
    PLATINUM = 'Platinum'

    TIER_CHOICES = [
        (BRONZE, 'Bronze'),
        (SILVER, 'Silver'),
        (GOLD, 'Gold'),
        (PLATINUM, 'Platinum'),
    ]

    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='points')
    total_points = models.PositiveIntegerField(default=0)
    available_points = models.PositiveIntegerField(default=0)
    tier = models.CharField(max_length=10, choices=TIER_CHOICES, default=BRONZE)
    total_bookings = models.PositiveIntegerField(default=0)
    total_spent = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name_plural = 'user points'

    def __str__(self):
        return f"{self.user} - {self.available_points} pts ({self.tier})"


class UserPreference(models.Model):
    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='preference')
    favorite_genres = models.JSONField(default=list, blank=True)
    favorite_directors = models.JSONField(default=list, blank=True)
    preferred_show_times = models.JSONField(default=list, blank=True)
    notify_new_releases = models.BooleanField(default=True)
    notify_price_drops = models.BooleanField(default=True)

    def __str__(self):
        return f"Preferences of {self.user}"


class MovieReview(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='reviews')
    movie = models.ForeignKey(Movie, on_delete=models.CASCADE, related_name='reviews')
    rating = models.PositiveSmallIntegerField()
    comment = models.TextField()
    is_visible = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"{self.movie.title} - {self.rating}/5"
