# budgetwise_client/utils/errors.py
"""Business-rule rejections from the server, mapped to friendlier text.

A structured `code` from the error body is trusted first; servers that only
send prose are classified by substring as a fallback.
"""

TOKEN_USED = "token_used"
TOKEN_EXPIRED = "token_expired"
ALREADY_VERIFIED = "already_verified"
VERIFICATION_REQUIRED = "email_verification_required"
DUPLICATE_USERNAME = "duplicate_username"
DUPLICATE_EMAIL = "duplicate_email"
INVALID_CREDENTIALS = "invalid_credentials"

KNOWN_CODES = {
    TOKEN_USED,
    TOKEN_EXPIRED,
    ALREADY_VERIFIED,
    VERIFICATION_REQUIRED,
    DUPLICATE_USERNAME,
    DUPLICATE_EMAIL,
    INVALID_CREDENTIALS,
}

# order matters: "already been used" must win over the generic "expired"
SUBSTRING_RULES = [
    ("already been used", TOKEN_USED),
    ("expired", TOKEN_EXPIRED),
    ("already verified", ALREADY_VERIFIED),
    ("verify your email", VERIFICATION_REQUIRED),
    ("email verification required", VERIFICATION_REQUIRED),
    ("username already", DUPLICATE_USERNAME),
    ("email already", DUPLICATE_EMAIL),
    ("invalid credentials", INVALID_CREDENTIALS),
    ("invalid username or password", INVALID_CREDENTIALS),
]

FRIENDLY_MESSAGES = {
    TOKEN_USED: "This verification link has already been used. You can log in now.",
    TOKEN_EXPIRED: "This link has expired. Please request a new one.",
    ALREADY_VERIFIED: "Your email is already verified. You can log in now.",
    VERIFICATION_REQUIRED: "Please verify your email address before logging in.",
    DUPLICATE_USERNAME: "That username is already taken.",
    DUPLICATE_EMAIL: "An account with that email already exists.",
    INVALID_CREDENTIALS: "Incorrect username or password.",
}


class ValidationError(ValueError):
    """Form-level check failed; `errors` maps field name to message."""

    def __init__(self, errors):
        self.errors = dict(errors)
        super().__init__("; ".join(f"{k}: {v}" for k, v in self.errors.items()))


def classify_error(error):
    """Known rejection kind for an ApiError (or a bare message), else None."""
    payload = getattr(error, "payload", None) or {}
    if payload.get("email_verification_required"):
        return VERIFICATION_REQUIRED
    code = getattr(error, "code", None)
    if code:
        code = code.lower()
        return code if code in KNOWN_CODES else None
    message = getattr(error, "message", error)
    text = str(message or "").lower()
    for needle, kind in SUBSTRING_RULES:
        if needle in text:
            return kind
    return None


def friendly_message(error):
    kind = classify_error(error)
    if kind in FRIENDLY_MESSAGES:
        return FRIENDLY_MESSAGES[kind]
    return getattr(error, "message", None) or str(error)


def is_verification_required(error):
    return classify_error(error) == VERIFICATION_REQUIRED
