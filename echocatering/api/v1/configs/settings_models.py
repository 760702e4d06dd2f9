from pydantic import AliasChoices, Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class FastAPIConfig(BaseSettings):
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=5002)
    workers: int = Field(default=1)
    reload: bool = Field(default=False)
    logging_level: str = Field(default="INFO")
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    model_config = SettingsConfigDict(env_prefix="ECHO_FASTAPI_")


class MongoDBConfig(BaseSettings):
    host: str = Field(default="localhost")
    port: int = Field(default=27017)
    db_name: str = Field(default="echo-catering")
    uri: str | None = Field(
        default=None, description="Full connection string, takes precedence over host/port"
    )

    model_config = SettingsConfigDict(env_prefix="ECHO_MONGODB_")

    @computed_field
    @property
    def url(self) -> str:
        if self.uri:
            return self.uri
        return f"mongodb://{self.host}:{self.port}"


class AuthConfig(BaseSettings):
    jwt_secret: str = Field(default="change-me")
    algorithm: str = Field(default="HS256")
    token_lifetime_minutes: int = Field(default=60 * 24)
    unauthenticated_mode: bool = Field(default=False, description="Skip token verification")
    anonymous_user_email: str = Field(default="admin@localhost")
    admin_email: str | None = Field(default=None, description="Admin account created at startup")
    admin_password: str | None = Field(default=None)

    model_config = SettingsConfigDict(env_prefix="ECHO_AUTH_", case_sensitive=False)


class StripeConfig(BaseSettings):
    secret_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("ECHO_STRIPE_SECRET_KEY", "STRIPE_SECRET_KEY"),
    )
    location_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("ECHO_STRIPE_LOCATION_ID", "STRIPE_LOCATION_ID"),
    )
    currency: str = Field(default="usd")

    model_config = SettingsConfigDict(env_prefix="ECHO_STRIPE_", populate_by_name=True)


class CloudinaryConfig(BaseSettings):
    cloud_name: str | None = Field(
        default=None,
        validation_alias=AliasChoices("ECHO_CLOUDINARY_CLOUD_NAME", "CLOUDINARY_CLOUD_NAME"),
    )
    api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("ECHO_CLOUDINARY_API_KEY", "CLOUDINARY_API_KEY"),
    )
    api_secret: str | None = Field(
        default=None,
        validation_alias=AliasChoices("ECHO_CLOUDINARY_API_SECRET", "CLOUDINARY_API_SECRET"),
    )
    api_base_url: str = Field(default="https://api.cloudinary.com/v1_1")
    timeout: float = Field(default=15.0)

    model_config = SettingsConfigDict(env_prefix="ECHO_CLOUDINARY_", populate_by_name=True)

    @property
    def configured(self) -> bool:
        return bool(self.cloud_name and self.api_key and self.api_secret)


class MediaConfig(BaseSettings):
    gallery_prefix: str = Field(default="echo-catering/gallery")
    logo_prefix: str = Field(default="echo-catering/logo")
    max_results: int = Field(default=500, le=500)
    cache_ttl_seconds: float = Field(default=15.0)

    model_config = SettingsConfigDict(env_prefix="ECHO_MEDIA_")


class LoggingConfig(BaseSettings):
    verbosity_level: str = Field(default="INFO")

    model_config = SettingsConfigDict(env_prefix="ECHO_LOGGING_")


class Settings(BaseSettings):
    fastapi: FastAPIConfig = Field(default_factory=FastAPIConfig)
    mongodb: MongoDBConfig = Field(default_factory=MongoDBConfig)
    auth: AuthConfig = Field(default_factory=AuthConfig)
    stripe: StripeConfig = Field(default_factory=StripeConfig)
    cloudinary: CloudinaryConfig = Field(default_factory=CloudinaryConfig)
    media: MediaConfig = Field(default_factory=MediaConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = SettingsConfigDict(env_prefix="ECHO_")
