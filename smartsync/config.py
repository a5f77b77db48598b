import os

SECRET_KEY = os.environ.get("SECRET_KEY", "smartsync-secret-key")
ALGORITHM = os.environ.get("ALGORITHM", "HS256")
# 0 (the default) issues tokens without an exp claim
ACCESS_TOKEN_EXPIRE_MINUTES = float(os.environ.get("ACCESS_TOKEN_EXPIRE_MINUTES", 0))

# Default to local SQLite for dev/tests; override via env in Docker/Prod
DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite:///./smartsync.db")

SESSION_SECRET = os.environ.get("SESSION_SECRET", "smartsync-session-secret")
SESSION_COOKIE = os.environ.get("SESSION_COOKIE", "session")
SESSION_MAX_AGE = int(os.environ.get("SESSION_MAX_AGE", 24 * 60 * 60))
SESSION_HTTPS_ONLY = os.environ.get("SESSION_HTTPS_ONLY", "true").lower() not in ("0", "false", "no")

GOOGLE_CLIENT_ID = os.environ.get("GOOGLE_CLIENT_ID", "")
GOOGLE_CLIENT_SECRET = os.environ.get("GOOGLE_CLIENT_SECRET", "")
APP_URL = os.environ.get("APP_URL", "http://localhost:3000")
GOOGLE_REDIRECT_URI = f"{APP_URL.rstrip('/')}/auth/callback"

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
LOG_DIR = os.environ.get("LOG_DIR")

PIX_CNPJ = os.environ.get("PIX_CNPJ", "27900115000199")
PIX_MERCHANT_NAME = os.environ.get("PIX_MERCHANT_NAME", "BrandBuilder")
PIX_MERCHANT_CITY = os.environ.get("PIX_MERCHANT_CITY", "SAO PAULO")
QR_SERVICE_URL = os.environ.get("QR_SERVICE_URL", "https://api.qrserver.com/v1/create-qr-code/")
