"""
EastGate Django adapter URL routing.
"""

from django.urls import path

from adapters.django_api import views


urlpatterns = [
    path("auth/login", views.login_view),
    path("auth/logout", views.logout_view),
    path("auth/session", views.session_view),
    path("auth/rotate", views.rotate_credentials_view),
    path("guests/register", views.guest_register_view),
    path("staff/accounts", views.staff_list_view),
    path("staff/provision", views.staff_provision_view),
    path("staff/remove", views.staff_remove_view),
    path("mutations", views.mutation_view),
    path("data/<str:resource>", views.scoped_collection_view),
]
