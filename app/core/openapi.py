"""
OpenAPI schema customizations for drf-spectacular.

Groups the generated operations into tags for ReDoc/Swagger UI and gives
the dj-rest-auth endpoints readable summaries.

Tags:
- Auth (login, logout, tokens, password change)
- Auth - User (current user)
- Users (registration-free directory listing)
- Chat - Conversations
- Chat - Messages
"""

# Natural language summaries for dj-rest-auth endpoints
# Maps operation_id to (summary, description)
DJ_REST_AUTH_SUMMARIES = {
    "auth_login_create": (
        "Log in",
        "Authenticate with email and password to receive JWT tokens.",
    ),
    "auth_logout_create": (
        "Log out",
        "Blacklist the given refresh token.",
    ),
    "auth_user_retrieve": (
        "Get current user",
        "Retrieve the currently authenticated user's details.",
    ),
    "auth_user_update": (
        "Update current user",
        "Full update of the currently authenticated user's details.",
    ),
    "auth_user_partial_update": (
        "Partially update current user",
        "Partial update of the currently authenticated user's details.",
    ),
    "auth_password_change_create": (
        "Change password",
        "Change password for the currently authenticated user.",
    ),
    "auth_token_refresh_create": (
        "Refresh access token",
        "Get a new access token using a valid refresh token.",
    ),
    "auth_token_verify_create": (
        "Verify token",
        "Verify that an access token is valid.",
    ),
}

TAG_DESCRIPTIONS = [
    {
        "name": "Auth",
        "description": "Registration, login, logout and token management.",
    },
    {
        "name": "Auth - User",
        "description": "Current user retrieval and updates.",
    },
    {
        "name": "Users",
        "description": "Directory of everyone you can start a conversation with.",
    },
    {
        "name": "Chat - Conversations",
        "description": "Two-person conversations, found or created per pair of users.",
    },
    {
        "name": "Chat - Messages",
        "description": "Message history and sending. Clients poll the list endpoint.",
    },
]


def group_endpoints(result, generator, request, public):
    """
    Postprocessing hook to group API endpoints by function.

    Chat and directory views set their tags via @extend_schema; this hook
    handles the dj-rest-auth views, which we cannot decorate.
    """
    paths = result.get("paths", {})

    for path, methods in paths.items():
        for method, operation in methods.items():
            if not isinstance(operation, dict):
                continue

            operation_id = operation.get("operationId", "")

            if operation_id in DJ_REST_AUTH_SUMMARIES:
                summary, description = DJ_REST_AUTH_SUMMARIES[operation_id]
                operation["summary"] = summary
                operation["description"] = description

            if operation_id.startswith("auth_user_"):
                operation["tags"] = ["Auth - User"]
            elif operation_id.startswith("auth_"):
                operation["tags"] = ["Auth"]

    result["tags"] = TAG_DESCRIPTIONS

    return result
