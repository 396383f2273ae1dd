# budgetwise_client/services/auth_service.py


class AuthService:
    """Registration, login and the token-based account flows."""

    def __init__(self, api):
        self.api = api

    def register(self, user_data):
        return self.api.post("/auth/register/", json=user_data, default_error="Registration failed")

    def login(self, credentials):
        return self.api.post("/auth/login/", json=credentials, default_error="Login failed")

    def forgot_password(self, email):
        return self.api.post("/auth/forgot-password/", json={"email": email},
                             default_error="Password reset request failed")

    def reset_password(self, token, password):
        return self.api.post("/auth/reset-password/", json={"token": token, "password": password},
                             default_error="Password reset failed")

    def verify_email(self, token):
        return self.api.get("/auth/verify-email", params={"token": token},
                            default_error="Could not verify email")

    def resend_verification(self, email):
        return self.api.post("/auth/resend-verification/", json={"email": email},
                             default_error="Failed to resend verification email")
