"""
URL configuration for authentication app.

URL structure:
    /api/v1/auth/register/    - Registration
    /api/v1/users/            - User directory

Note:
    The dj-rest-auth URLs (login/, logout/, user/, token/refresh/, ...) are
    included under /api/v1/auth/ in config/urls.py.
"""

from django.urls import path

from authentication.views import RegisterView, UserDirectoryView

app_name = "authentication"

urlpatterns = [
    path("auth/register/", RegisterView.as_view(), name="register"),
    path("users/", UserDirectoryView.as_view(), name="user-directory"),
]
