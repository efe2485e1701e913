from pydantic_settings import BaseSettings
from pydantic import field_validator
from sqlalchemy.engine import make_url


class Settings(BaseSettings):
    DATABASE_URL: str = "postgresql+asyncpg://user:password@db:5432/property_db"
    REDIS_URL: str = "redis://localhost:6379/0"
    REVERSE_GEOCODE_URL: str = "https://api.bigdatacloud.net/data/reverse-geocode-client"
    SEARCH_RATE_LIMIT_TIMES: int = 30
    SEARCH_RATE_LIMIT_SECONDS: int = 60
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False
    PORT: int = 7860

    @field_validator("DATABASE_URL")
    def encode_database_url(cls, v):
        """
        Parses and re-encodes the database URL to handle special characters in the password.
        sslmode is dropped from the query string; asyncpg gets its SSL context from database.py.
        """
        if v:
            try:
                url = make_url(v)
                query = {k: val for k, val in url.query.items() if k != 'sslmode'}
                url = url.set(query=query)
                return url.render_as_string(hide_password=False)
            except Exception:
                # If parsing fails, return the original value.
                return v
        return v

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
