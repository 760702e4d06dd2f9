from echocatering.api.v1.configs.logging_init import initialize_loggers, logger
from echocatering.api.v1.configs.settings_models import Settings

# Overwrite priority: environment variables > default values
settings = Settings()

initialize_loggers(verbose_level=settings.logging.verbosity_level)

MONGODB_URL = settings.mongodb.url
logger.debug(f"MongoDB database: {settings.mongodb.db_name}")
