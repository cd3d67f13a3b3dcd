import secrets

def generate_session_id() -> str:
    return secrets.token_urlsafe(24)

def normalize_email(email: str) -> str:
    return email.strip().lower()
