from echocatering.api.v1.configs.settings_models import (
    CloudinaryConfig,
    FastAPIConfig,
    MongoDBConfig,
    Settings,
    StripeConfig,
)


def test_defaults():
    settings = Settings()
    assert settings.fastapi.port == 5002
    assert settings.mongodb.db_name == "echo-catering"
    assert settings.media.gallery_prefix == "echo-catering/gallery"
    assert settings.media.cache_ttl_seconds == 15


def test_prefixed_env_vars(monkeypatch):
    monkeypatch.setenv("ECHO_FASTAPI_PORT", "8080")
    monkeypatch.setenv("ECHO_MONGODB_HOST", "mongo")
    assert FastAPIConfig().port == 8080
    assert MongoDBConfig().url == "mongodb://mongo:27017"


def test_mongodb_uri_takes_precedence(monkeypatch):
    monkeypatch.setenv("ECHO_MONGODB_URI", "mongodb+srv://cluster.example.net/echo")
    assert MongoDBConfig().url == "mongodb+srv://cluster.example.net/echo"


def test_stripe_conventional_env_names(monkeypatch):
    monkeypatch.setenv("STRIPE_SECRET_KEY", "sk_test_123")
    monkeypatch.setenv("STRIPE_LOCATION_ID", "tml_abc")
    config = StripeConfig()
    assert config.secret_key == "sk_test_123"
    assert config.location_id == "tml_abc"


def test_cloudinary_configured_needs_all_credentials(monkeypatch):
    monkeypatch.setenv("CLOUDINARY_CLOUD_NAME", "echo")
    monkeypatch.setenv("CLOUDINARY_API_KEY", "key")
    monkeypatch.delenv("CLOUDINARY_API_SECRET", raising=False)
    monkeypatch.delenv("ECHO_CLOUDINARY_API_SECRET", raising=False)
    assert CloudinaryConfig().configured is False

    monkeypatch.setenv("ECHO_CLOUDINARY_API_SECRET", "secret")
    assert CloudinaryConfig().configured is True
