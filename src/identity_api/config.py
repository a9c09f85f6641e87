from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Default token lifetime (7 days) in milliseconds
DEFAULT_TOKEN_LIFETIME_MS = 7 * 24 * 60 * 60 * 1000


class Settings(BaseSettings):
    server_host: str = "0.0.0.0"
    server_port: int = 8080
    log_level: str = "INFO"

    # Full SQLAlchemy URL, e.g. postgresql+asyncpg://db:5432/identity
    database_url: str = Field(default="", validation_alias="DATABASE_URL")
    # When set, these override any credentials embedded in database_url
    db_user: str = Field(default="", validation_alias="DB_USER")
    db_password: str = Field(default="", validation_alias="DB_PASSWORD")
    db_pool_size: int = 10
    db_max_overflow: int = 10
    db_pool_recycle: int = 3600  # seconds
    db_pool_pre_ping: bool = True

    # No defaults for the secret and issuer: a blank value is rejected when the
    # token service is built.
    jwt_secret: str = Field(default="", validation_alias="JWT_SECRET")
    jwt_issuer: str = Field(default="", validation_alias="JWT_ISSUER")
    jwt_token_lifetime: int = Field(
        default=DEFAULT_TOKEN_LIFETIME_MS, validation_alias="JWT_TOKEN_LIFETIME"
    )

    # pbkdf2_sha256 work factor
    password_hash_rounds: int = 29000

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        populate_by_name=True,
        extra="ignore",
    )
