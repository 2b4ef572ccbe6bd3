from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from dotenv import load_dotenv
load_dotenv()


class Settings(BaseSettings):
    """Runtime configuration. Every field can be overridden through the environment or .env."""
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: str = "sqlite:///./learning_paths.db"
    ollama_base_url: str = "http://localhost:11434"
    ollama_model: str = "qwen:latest"
    generation_timeout_seconds: float = 60.0
    # Reduced-dependency mode: deterministic templates instead of the live model.
    use_template_generation: bool = False
    max_write_retries: int = 5
    jwt_secret_key: str = "change-me-in-production"


settings = Settings()

_connect_args = {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}
engine = create_engine(settings.database_url, connect_args=_connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()

def create_db():
    # Import models so their tables are registered on Base.metadata.
    import api.models.models  # noqa: F401
    Base.metadata.create_all(bind=engine)


def get_settings() -> Settings:
    return settings


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
