from django.urls import path, re_path
from . import views

app_name = 'rides'

urlpatterns = [
    # Browse & share
    path('', views.ride_list, name='ride-list'),
    path('share/', views.create_ride_posting, name='share-ride'),
    re_path(r'^(?P<vehicle>bike|car|auto)/$', views.ride_list, name='vehicle-ride-list'),

    # Booking & Your Rides
    path('book/', views.book_ride, name='book-ride'),
    path('mine/', views.my_rides, name='my-rides'),
    path('mine/<str:ride_id>/', views.remove_my_ride, name='remove-my-ride'),
    path('mine/<str:ride_id>/retry-delete/', views.retry_listing_removal, name='retry-listing-removal'),
]
