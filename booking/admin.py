from django.contrib import admin

from .models import Booking, Movie, MovieReview, ReservedSeat, Show, Theater, UserPoints, UserPreference


@admin.register(Movie)
class MovieAdmin(admin.ModelAdmin):
    list_display = ('title', 'genre', 'language', 'average_rating', 'is_new_release')
    list_filter = ('genre', 'language', 'is_new_release')
    search_fields = ('title', 'director')


@admin.register(Theater)
class TheaterAdmin(admin.ModelAdmin):
    list_display = ('name', 'location', 'wheelchair_accessible')


@admin.register(Show)
class ShowAdmin(admin.ModelAdmin):
    list_display = ('movie', 'theater', 'start_time', 'booked_seats', 'total_seats', 'base_price', 'current_price')
    list_filter = ('theater', 'is_premium', 'is_special_screening')
    readonly_fields = ('current_price', 'price_multiplier', 'booked_seats')


class ReservedSeatInline(admin.TabularInline):
    model = ReservedSeat
    extra = 0
    readonly_fields = ('show', 'seat_no')


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ('id', 'user', 'show', 'amount_paid', 'status', 'created_at')
    list_filter = ('status', 'payment_method')
    search_fields = ('transaction_id', 'user__username')
    inlines = [ReservedSeatInline]


admin.site.register(UserPoints)
admin.site.register(UserPreference)
admin.site.register(MovieReview)
