from decimal import Decimal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    APP_NAME: str = "POS Backend"
    DATABASE_URL: str = "sqlite:///./pos.db"

    # Engine-wide isolation level. "AUTOCOMMIT" means the connection cannot
    # run multi-statement transactions, so order creation uses compensation.
    DB_ISOLATION_LEVEL: str = ""
    SQL_ECHO: bool = False

    # Max allowed difference between client and server order totals
    PRICE_TOLERANCE: Decimal = Decimal("0.01")

    LOG_LEVEL: str = "INFO"

    # Purge endpoints are only mounted for operators
    ENABLE_ADMIN_ROUTES: bool = False

    model_config = {"env_file": ".env"}


settings = Settings()
