from django import forms

from .models import Movie, MovieReview, Show, Theater


class MovieForm(forms.ModelForm):
    class Meta:
        model = Movie
        fields = [
            'title', 'description', 'duration_min', 'language', 'genre', 'rating',
            'release_date', 'poster_url', 'director', 'cast', 'is_new_release',
        ]

    def clean_cast(self):
        return self.cleaned_data.get('cast') or []


class TheaterForm(forms.ModelForm):
    class Meta:
        model = Theater
        fields = [
            'name', 'location', 'wheelchair_accessible', 'hearing_loop_available',
            'amenities', 'contact_number',
        ]

    def clean_amenities(self):
        return self.cleaned_data.get('amenities') or []


class ShowForm(forms.ModelForm):
    class Meta:
        model = Show
        fields = [
            'movie', 'theater', 'start_time', 'total_seats', 'base_price', 'current_price',
            'is_premium', 'is_special_screening',
        ]

    def clean_total_seats(self):
        total_seats = self.cleaned_data['total_seats']
        if total_seats < 1:
            raise forms.ValidationError('A show needs at least one seat.')
        return total_seats


class ReviewForm(forms.ModelForm):
    class Meta:
        model = MovieReview
        fields = ['movie', 'rating', 'comment']

    def clean_rating(self):
        rating = self.cleaned_data['rating']
        if not 1 <= rating <= 5:
            raise forms.ValidationError('Rating must be between 1 and 5.')
        return rating
