"""
Authentication views.

This module provides API views for:
- Registration with name, email and password
- The user directory

Related files:
    - serializers.py: Request/response serialization
    - services.py: RegistrationService, UserDirectoryService
    - urls.py: URL routing

Note:
    Login and session endpoints are handled by dj-rest-auth:
    - Login: /api/v1/auth/login/
    - Logout: /api/v1/auth/logout/
    - Current user: /api/v1/auth/user/
    - Token refresh: /api/v1/auth/token/refresh/
"""

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.tokens import RefreshToken

from authentication.serializers import (
    RegisterResponseSerializer,
    RegisterSerializer,
    UserDirectorySerializer,
    UserSerializer,
    UserSummarySerializer,
)
from authentication.services import RegistrationService, UserDirectoryService

# Service error codes that are not plain 400s
ERROR_STATUS_CODES = {
    "EMAIL_EXISTS": status.HTTP_409_CONFLICT,
    "USER_NOT_FOUND": status.HTTP_404_NOT_FOUND,
}


class RegisterView(APIView):
    """
    Create an account.

    POST /api/v1/auth/register/

    The response carries a JWT pair so clients can log the new user in
    without a second round trip.
    """

    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(
        summary="Register",
        description="Create an account with name, email and password.",
        tags=["Auth"],
        request=RegisterSerializer,
        responses={
            201: RegisterResponseSerializer,
            400: OpenApiResponse(description="Validation failed"),
            409: OpenApiResponse(description="Email already registered"),
        },
    )
    def post(self, request):
        """
        Request body:
            {
                "name": "Alice",
                "email": "alice@x.com",
                "password": "pw1"
            }
        """
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = RegistrationService.register(**serializer.validated_data)
        if not result.success:
            return Response(
                result.to_response(),
                status=ERROR_STATUS_CODES.get(
                    result.error_code, status.HTTP_400_BAD_REQUEST
                ),
            )

        refresh = RefreshToken.for_user(result.data)
        return Response(
            {
                "user": UserSerializer(result.data).data,
                "tokens": {
                    "access": str(refresh.access_token),
                    "refresh": str(refresh),
                },
            },
            status=status.HTTP_201_CREATED,
        )


class UserDirectoryView(APIView):
    """
    GET /api/v1/users/

    Lists every active user except the caller.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="List users",
        description="Everyone you can start a conversation with. Excludes yourself.",
        tags=["Users"],
        responses={200: UserDirectorySerializer},
    )
    def get(self, request):
        users = UserDirectoryService.list_users(request.user)
        return Response({"users": UserSummarySerializer(users, many=True).data})
