"""URL configuration for the blog app."""

from django.urls import path

from . import views

app_name = 'blog'

urlpatterns = [
    # Home feed: paginated list of published posts (?page=N)
    path('', views.post_list, name='post_list'),
]
