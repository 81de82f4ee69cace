from pydantic_settings import BaseSettings
from pydantic import Field
from typing import List

class Settings(BaseSettings):
    # App Info
    app_name: str = "Sales API"
    version: str = "1.0.0"
    debug: bool = False

    # Database
    database_url: str = Field(
        default="sqlite:///./sales.db",
        description="URL de conexión SQLAlchemy"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Nivel de logging raíz")

    # CORS
    allowed_origins: List[str] = ["http://localhost:3000"]

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    class Config:
        env_file = ".env"
        case_sensitive = False

settings = Settings()
