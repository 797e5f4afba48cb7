import re
from datetime import timedelta
from typing import List, Optional
from urllib.parse import quote_plus

from pydantic_settings import BaseSettings

_EXPIRY_PATTERN = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*([smhdw]?)\s*$", re.IGNORECASE)
_EXPIRY_UNITS = {
    "": "seconds",
    "s": "seconds",
    "m": "minutes",
    "h": "hours",
    "d": "days",
    "w": "weeks",
}


def parse_expiry(value: str) -> timedelta:
    """
    Parse a token lifetime such as ``"900"``, ``"15m"``, ``"1d"`` or ``"10d"``.

    A bare number is read as seconds.
    """
    match = _EXPIRY_PATTERN.match(value or "")
    if not match:
        raise ValueError(f"Invalid expiry value: {value!r}")
    amount, unit = match.groups()
    delta = timedelta(**{_EXPIRY_UNITS[unit.lower()]: float(amount)})
    if delta.total_seconds() <= 0:
        raise ValueError(f"Expiry must be positive: {value!r}")
    return delta


class Settings(BaseSettings):

    # Application
    APP_NAME: str = "Music Share API"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    PORT: int = 8000

    # Comma separated list of allowed origins
    CORS_ORIGIN: str = "http://localhost:3000"

    # Database (MongoDB). MONGODB_URI wins over the DB_* parts when set.
    MONGODB_URI: Optional[str] = None
    DB_HOST: str = "localhost"
    DB_PORT: int = 27017
    DB_USERNAME: Optional[str] = None
    DB_PASSWORD: Optional[str] = None
    DB_NAME: str = "music_share"

    # Security
    ACCESS_TOKEN_SECRET: Optional[str] = None
    ACCESS_TOKEN_EXPIRY: Optional[str] = None
    REFRESH_TOKEN_SECRET: Optional[str] = None
    REFRESH_TOKEN_EXPIRY: Optional[str] = None
    JWT_ALGORITHM: str = "HS256"

    # Asset host (Cloudinary)
    CLOUDINARY_CLOUD_NAME: Optional[str] = None
    CLOUDINARY_API_KEY: Optional[str] = None
    CLOUDINARY_API_SECRET: Optional[str] = None
    CLOUDINARY_MAIN_FOLDER: str = "music-share"

    # Multipart uploads are spooled here before they reach the asset host
    TEMP_UPLOAD_DIR: str = "./public/temp"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    @property
    def cors_origins(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGIN.split(",") if o.strip()]

    @property
    def mongo_uri(self) -> str:
        if self.MONGODB_URI:
            return self.MONGODB_URI
        if self.DB_USERNAME and self.DB_PASSWORD:
            credentials = (
                f"{quote_plus(self.DB_USERNAME)}:{quote_plus(self.DB_PASSWORD)}@"
            )
            return (
                f"mongodb://{credentials}{self.DB_HOST}:{self.DB_PORT}/"
                "?authSource=admin"
            )
        return f"mongodb://{self.DB_HOST}:{self.DB_PORT}/"


settings = Settings()
