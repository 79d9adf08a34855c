"""Application configuration for ICD-10 Core.

Settings come from environment variables (or a local ``.env``).  The database
is PostgreSQL by default; any SQLAlchemy URL in ``DATABASE_URL`` wins, which is
how tests and local runs point the service at SQLite.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_db: str = "icd10_core"
    postgres_user: str = "postgres"
    postgres_password: str = "postgres"

    database_url: str | None = None

    # CSV read by load_icd10/startup_bootstrap; the bundled sample when unset.
    icd10_csv_path: str | None = None
    # JSON or CSV appended by load_synonyms; its vocabularies are applied at startup.
    synonym_config_path: str | None = None

    # Comma-separated.
    cors_origins: str = "http://localhost:3000"

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def sqlalchemy_database_uri(self) -> str:
        if self.database_url:
            return self.database_url

        return (
            f"postgresql+psycopg2://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )


settings = Settings()
