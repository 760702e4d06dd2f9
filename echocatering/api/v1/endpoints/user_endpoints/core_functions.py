from echocatering.api.v1.configs.config import settings
from echocatering.api.v1.configs.logging_init import logger
from echocatering.models.models.users import UserBeanie, hash_password, verify_password


async def authenticate_user(email: str, password: str) -> UserBeanie | None:
    """Return the active user matching ``email`` and ``password``, else None."""
    user = await UserBeanie.find_one({"email": email.strip().lower()})
    if user is None or not user.is_active:
        logger.debug(f"Login refused for unknown or inactive user {email}")
        return None
    if not verify_password(user.password, password):
        logger.debug(f"Wrong password for {email}")
        return None
    return user


async def ensure_admin_user() -> UserBeanie | None:
    """Create the configured admin account if it does not exist yet."""
    email, password = settings.auth.admin_email, settings.auth.admin_password
    if not email or not password:
        return None

    existing = await UserBeanie.find_one({"email": email.strip().lower()})
    if existing is not None:
        return existing

    user = UserBeanie(email=email, password=hash_password(password), role="admin")
    await user.insert()
    logger.info(f"Created admin account {user.email}")
    return user
