import os
import logging
from typing import List, Optional
from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, ValidationError, field_validator
from core.exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_PORT = 4002
APPLICATION_DEFAULT = "default"


class Settings(BaseModel):
    # Path to a service account key, or "default" for Application Default Credentials
    database: str
    firestore_project: Optional[str] = None
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    cors_origins: List[str] = ["*"]
    db_connect_retries: int = 3
    db_connect_backoff_seconds: float = 2.0
    log_level: str = "INFO"

    @field_validator("port")
    @classmethod
    def validate_port(cls, port):
        if port < 1 or port > 65535:
            raise ValueError("Port must be between 1 and 65535")
        return port

    @field_validator("db_connect_retries")
    @classmethod
    def validate_retries(cls, retries):
        if retries < 1:
            raise ValueError("At least one connection attempt is required")
        return retries

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_origins(cls, origins):
        if isinstance(origins, str):
            origins = [o.strip() for o in origins.split(",") if o.strip()]
        return origins or ["*"]

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, level):
        level = level.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level '{level}'")
        return level

    @property
    def uses_application_default(self) -> bool:
        return self.database == APPLICATION_DEFAULT


# Environment variable -> Settings field
ENV_FIELDS = {
    "DATABASE": "database",
    "FIRESTORE_PROJECT": "firestore_project",
    "HOST": "host",
    "PORT": "port",
    "CORS_ORIGINS": "cors_origins",
    "DB_CONNECT_RETRIES": "db_connect_retries",
    "DB_CONNECT_BACKOFF_SECONDS": "db_connect_backoff_seconds",
    "LOG_LEVEL": "log_level",
}


def load_settings(environ=None, dotenv: bool = True) -> Settings:
    """Build Settings from the process environment.

    A ``.env`` file in the working directory is loaded first unless
    ``dotenv`` is False. Values already set in the environment win.
    Raises ConfigError when DATABASE is missing or a value does not parse.
    """
    if dotenv:
        load_dotenv(find_dotenv(usecwd=True))
    if environ is None:
        environ = os.environ

    values = {
        field: environ[name]
        for name, field in ENV_FIELDS.items()
        if environ.get(name) not in (None, "")
    }

    if "database" not in values:
        raise ConfigError("DATABASE is not defined in the environment or .env file")

    try:
        return Settings(**values)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
