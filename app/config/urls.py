"""
URL configuration for Pairchat.

The `urlpatterns` list routes URLs to views. This is the root URL configuration
that includes all app-specific routes.

URL Structure:
    /admin/                        - Django admin interface
    /health/                       - Health check endpoint (for load balancers, Docker)
    /api/schema/                   - OpenAPI schema (YAML)
    /api/docs/                     - Swagger UI
    /api/redoc/                    - ReDoc
    /api/v1/auth/                  - Authentication endpoints
        register/                  - User registration (custom)
        login/                     - Email/password login (dj-rest-auth, JWT)
        logout/                    - Logout
        user/                      - Current user (GET/PUT/PATCH)
        token/refresh/             - Refresh an access token
        token/verify/              - Verify a token
        password/change/           - Change password
    /api/v1/users/                 - User directory (everyone except you)
    /api/v1/conversations/         - Conversation list / find-or-create
    /api/v1/conversations/{id}/    - Conversation detail
    /api/v1/messages/              - Message list (?conversationId=) / send

For more information, see:
https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""

from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import (
    SpectacularAPIView,
    SpectacularRedocView,
    SpectacularSwaggerView,
)

from core.views import health_check

# =============================================================================
# API v1 Routes
# =============================================================================
# All routes here are prefixed with /api/v1/ automatically
api_v1_patterns = [
    # Registration and user directory
    path("", include("authentication.urls")),
    # Login, logout, current user, token refresh (dj-rest-auth)
    path("auth/", include("dj_rest_auth.urls")),
    # Conversations and messages
    path("", include("chat.urls")),
]

urlpatterns = [
    # Documentation
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path(
        "api/docs/",
        SpectacularSwaggerView.as_view(url_name="schema"),
        name="swagger-ui",
    ),
    path("api/redoc/", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
    # Admin
    path("admin/", admin.site.urls),
    # Health check (Docker, Kubernetes, load balancers)
    path("health/", health_check, name="health_check"),
    # API v1
    path("api/v1/", include(api_v1_patterns)),
]

# =============================================================================
# Admin Site Customization
# =============================================================================
admin.site.site_header = "Pairchat Admin"
admin.site.site_title = "Pairchat Admin Portal"
admin.site.index_title = "Users, conversations and messages"
