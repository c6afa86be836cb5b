import os
from dotenv import load_dotenv

load_dotenv()

def _split_csv(value: str) -> list[str]:
	return [part.strip() for part in value.split(",") if part.strip()]

class Settings:
	APP_NAME = os.getenv("APP_NAME", "Review Site API")
	DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./review_site.db")

	# No default: the app refuses to start without a signing secret.
	JWT_SECRET = os.getenv("JWT_SECRET", "")
	JWT_ALG = os.getenv("JWT_ALG", "HS256")

	# One week
	ACCESS_TOKEN_EXPIRES_MIN = int(os.getenv("ACCESS_TOKEN_EXPIRES_MIN", str(7 * 24 * 60)))

	MIN_PASSWORD_LENGTH = int(os.getenv("MIN_PASSWORD_LENGTH", "8"))

	API_PREFIX = os.getenv("API_PREFIX", "").rstrip("/")
	ALLOW_ORIGINS = _split_csv(os.getenv("ALLOW_ORIGINS", "*"))

	SEED_CATALOG = os.getenv("SEED_CATALOG", "true").lower() == "true"

	LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

settings = Settings()
