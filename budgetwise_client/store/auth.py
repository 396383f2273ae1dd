# budgetwise_client/store/auth.py
"""Authentication gate.

    anonymous --login--> authenticating --ok--> authenticated
                               |--failure--> anonymous
                               |--unverified email--> verification-required
    verification-required --resend--> verification-required
    verification-required --login ok--> authenticated
    authenticated --logout / account deleted--> anonymous

Token and user snapshot are persisted on login and removed on logout.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ..api import ApiError
from ..config import (
    ADMIN_ROLE,
    DEFAULT_ROUTE,
    FORGOT_PASSWORD_ROUTE,
    LOGIN_ROUTE,
    TOKEN_KEY,
    USER_KEY,
)
from ..utils.errors import (
    ALREADY_VERIFIED,
    TOKEN_EXPIRED,
    TOKEN_USED,
    ValidationError,
    classify_error,
    friendly_message,
    is_verification_required,
)
from ..utils.validation import validate_password_reset, validate_registration
from .base import Observable

logger = logging.getLogger(__name__)

ANONYMOUS = "anonymous"
AUTHENTICATING = "authenticating"
AUTHENTICATED = "authenticated"
VERIFICATION_REQUIRED = "verification-required"

# verify-email outcomes; the first three are not errors
VERIFIED = "verified"
OUTCOME_ALREADY_VERIFIED = "already_verified"
OUTCOME_TOKEN_USED = "token_used"
OUTCOME_EXPIRED = "expired"
OUTCOME_FAILED = "failed"


@dataclass
class AuthState:
    status: str = ANONYMOUS
    user: Optional[dict] = None
    token: Optional[str] = None
    loading: bool = False
    error: Optional[str] = None
    message: Optional[str] = None
    email_verification_required: bool = False
    unverified_email: Optional[str] = None
    # address the server says the link went to; may differ from what was typed
    verification_email: Optional[str] = None
    redirect_to: Optional[str] = None

    @property
    def is_authenticated(self):
        return self.status == AUTHENTICATED

    @property
    def is_admin(self):
        return self.is_authenticated and bool(self.user) and self.user.get("role") == ADMIN_ROLE


class AuthGate(Observable):
    name = "auth"

    def __init__(self, service, storage):
        super().__init__()
        self.service = service
        self.storage = storage
        self.state = self.initial_state()

    def initial_state(self):
        token = self.storage.get(TOKEN_KEY)
        user = self.storage.get(USER_KEY)
        if token:
            return AuthState(status=AUTHENTICATED, token=token, user=user or {})
        return AuthState()

    def _set(self, **changes):
        with self._lock:
            for key, value in changes.items():
                setattr(self.state, key, value)
        self._notify()

    def _persist(self, token, user):
        self.storage.set(TOKEN_KEY, token)
        self.storage.set(USER_KEY, user)

    def _forget(self):
        self.storage.remove(TOKEN_KEY)
        self.storage.remove(USER_KEY)

    # ---------------- Login / logout ----------------
    def login(self, username, password):
        self._set(status=AUTHENTICATING, loading=True, error=None, message=None)
        try:
            payload = self.service.login({"username": username, "password": password})
        except ApiError as e:
            if is_verification_required(e):
                # the submitted identifier is kept as typed
                self._set(status=VERIFICATION_REQUIRED, loading=False, error=e.message,
                          email_verification_required=True, unverified_email=username,
                          verification_email=e.payload.get("email"))
            else:
                self._set(status=ANONYMOUS, loading=False, error=friendly_message(e))
            return False

        token = payload.get("token") or payload.get("access_token")
        if not token:
            logger.error("Login response carried no token")
            self._set(status=ANONYMOUS, loading=False, error="Login failed")
            return False

        user = dict(payload.get("user") or {})
        if payload.get("role") and not user.get("role"):
            user["role"] = payload["role"]
        self._persist(token, user)
        self._set(status=AUTHENTICATED, loading=False, token=token, user=user,
                  message="Login successful!", email_verification_required=False,
                  unverified_email=None, verification_email=None, redirect_to=None)
        return True

    def logout(self, message=None):
        self._forget()
        self._set(status=ANONYMOUS, user=None, token=None, loading=False, error=None,
                  message=message, redirect_to=LOGIN_ROUTE)

    def account_deleted(self):
        self.logout(message="Account deleted successfully!")

    def update_user(self, changes):
        """Merge profile edits into the persisted user snapshot."""
        if not self.state.is_authenticated:
            return
        user = {**(self.state.user or {}), **changes}
        self.storage.set(USER_KEY, user)
        self._set(user=user)

    # ---------------- Account flows ----------------
    def register(self, data):
        payload_in = validate_registration(data)
        self._set(loading=True, error=None, message=None)
        try:
            payload = self.service.register(payload_in)
        except ApiError as e:
            self._set(loading=False, error=friendly_message(e))
            return False

        message = payload.get("message") or "Registration successful! Please login."
        if payload.get("email_verification_required"):
            self._set(loading=False, message=message, status=VERIFICATION_REQUIRED,
                      email_verification_required=True, unverified_email=payload_in["email"],
                      verification_email=payload.get("email") or payload_in["email"])
        else:
            self._set(loading=False, message=message)
        return True

    def forgot_password(self, email):
        if not email:
            raise ValidationError({"email": "Email is required"})
        return self._simple(lambda: self.service.forgot_password(email),
                            "Password reset link sent to your email!")

    def reset_password(self, token, password, confirm_password=None):
        if not token:
            # nothing to reset without a token: send the user back to request one
            self._set(redirect_to=FORGOT_PASSWORD_ROUTE)
            return False
        validate_password_reset(password, password if confirm_password is None else confirm_password)
        ok = self._simple(lambda: self.service.reset_password(token, password),
                          "Password reset successful! Please login.")
        if ok:
            self._set(redirect_to=LOGIN_ROUTE)
        return ok

    def resend_verification(self, email=None):
        email = email or self.state.verification_email or self.state.unverified_email
        if not email:
            raise ValidationError({"email": "Enter your email to resend the verification link"})
        # the verification flag stays until the user logs in successfully
        return self._simple(lambda: self.service.resend_verification(email),
                            "Verification email sent successfully!")

    def verify_email(self, token):
        if not token:
            self._set(error="Verification token is missing")
            return OUTCOME_FAILED
        self._set(loading=True, error=None, message=None)
        try:
            payload = self.service.verify_email(token)
        except ApiError as e:
            kind = classify_error(e)
            if kind == TOKEN_USED:
                self._set(loading=False, message=friendly_message(e))
                return OUTCOME_TOKEN_USED
            if kind == ALREADY_VERIFIED:
                self._set(loading=False, message=friendly_message(e), redirect_to=LOGIN_ROUTE)
                return OUTCOME_ALREADY_VERIFIED
            if kind == TOKEN_EXPIRED:
                self._set(loading=False, error=friendly_message(e))
                return OUTCOME_EXPIRED
            self._set(loading=False, error=e.message)
            return OUTCOME_FAILED

        self._set(loading=False, message=payload.get("message") or "Email verified successfully!",
                  redirect_to=LOGIN_ROUTE)
        return VERIFIED

    def _simple(self, call, success_message):
        self._set(loading=True, error=None, message=None)
        try:
            payload = call()
        except ApiError as e:
            self._set(loading=False, error=friendly_message(e))
            return False
        self._set(loading=False, message=(payload or {}).get("message") or success_message)
        return True

    # ---------------- Local reducers ----------------
    def clear_error(self):
        self._set(error=None)

    def clear_message(self):
        self._set(message=None)

    def clear_redirect(self):
        self._set(redirect_to=None)

    # ---------------- Route gate ----------------
    def resolve_route(self, route, requires_admin=False):
        """Route to render, or where to send the user instead."""
        if not self.state.is_authenticated:
            return LOGIN_ROUTE
        if requires_admin and not self.state.is_admin:
            return DEFAULT_ROUTE
        return route
