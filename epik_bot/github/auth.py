"""GitHub App authentication.

Handles JWT generation for GitHub App auth. The private key comes from the
environment, never from source control.

GitHub App auth flow:
1. Generate a JWT signed with the App's private key
2. Exchange the JWT for a short-lived installation access token
3. Use the installation token for API calls scoped to that installation
"""

import time

import jwt


def create_app_jwt(app_id: str, private_key: str) -> str:
    """Create a JWT for authenticating as the GitHub App.

    JWTs are valid for up to 10 minutes. We use 9 minutes
    to avoid clock-skew rejections.
    """
    if not app_id or not private_key:
        raise ValueError(
            "GitHub App credentials not configured. "
            "Set GITHUB_APP_ID and GITHUB_PRIVATE_KEY."
        )

    now = int(time.time())
    payload = {
        "iat": now - 60,  # Backdate 60s to handle clock skew
        "exp": now + (9 * 60),  # 9 minutes
        "iss": app_id,
    }

    return jwt.encode(payload, private_key, algorithm="RS256")
