from django.urls import path
from . import views

urlpatterns = [
    # catalog
    path('movies', views.movie_list, name='movie_list'),
    path('movies/<int:movie_id>', views.movie_detail, name='movie_detail'),
    path('theaters', views.theater_list, name='theater_list'),
    path('shows', views.show_list, name='show_list'),
    path('shows/<int:show_id>', views.show_detail, name='show_detail'),
    path('shows/<int:show_id>/seats', views.show_seats, name='show_seats'),

    # bookings
    path('bookings', views.booking_list, name='booking_list'),
    path('bookings/my', views.my_bookings, name='my_bookings'),
    path('bookings/<int:booking_id>', views.booking_detail, name='booking_detail'),
    path('bookings/<int:booking_id>/cancel', views.cancel_booking, name='cancel_booking'),
    path('bookings/<int:booking_id>/reschedule', views.reschedule_booking, name='reschedule_booking'),
    path('bookings/<int:booking_id>/checkout', views.booking_checkout, name='booking_checkout'),

    # pricing
    path('pricing/show/<int:show_id>', views.show_pricing, name='show_pricing'),
    path('pricing/all-shows', views.all_shows_pricing, name='all_shows_pricing'),
    path('pricing/update/<int:show_id>', views.update_pricing, name='update_pricing'),
    path('pricing/predict/<int:show_id>', views.predict_pricing, name='predict_pricing'),

    # seats
    path('seat-recommendations/<int:show_id>', views.seat_recommendations, name='seat_recommendations'),
    path('seat-recommendations/<int:show_id>/seat-map', views.seat_map, name='seat_map'),

    # loyalty
    path('loyalty/points', views.loyalty_points, name='loyalty_points'),
    path('loyalty/redeem', views.loyalty_redeem, name='loyalty_redeem'),
    path('loyalty/benefits', views.loyalty_benefits, name='loyalty_benefits'),

    # reviews
    path('reviews', views.review_create, name='review_create'),
    path('reviews/my', views.my_reviews, name='my_reviews'),
    path('reviews/movie/<int:movie_id>', views.movie_reviews, name='movie_reviews'),
    path('reviews/<int:review_id>', views.review_delete, name='review_delete'),

    # recommendations
    path('recommendations/personalized', views.personalized_recommendations, name='personalized_recommendations'),
    path('recommendations/trending', views.trending_movies, name='trending_movies'),
    path('recommendations/new-releases', views.new_releases, name='new_releases'),
    path('recommendations/similar/<int:movie_id>', views.similar_movies, name='similar_movies'),

    # analytics
    path('analytics/revenue', views.revenue_analytics, name='revenue_analytics'),
    path('analytics/popular-movies', views.popular_movies, name='popular_movies'),
    path('analytics/peak-hours', views.peak_hours, name='peak_hours'),
    path('analytics/theater-occupancy', views.theater_occupancy, name='theater_occupancy'),
    path('analytics/customer-insights', views.customer_insights, name='customer_insights'),
    path('admin-dashboard/', views.admin_dashboard, name='admin_dashboard'),
]
