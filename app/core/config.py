from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    database_url: str = "sqlite:///./wildlife.db"
    project_name: str = "Wildlife Sightings API"
    api_v1_prefix: str = "/api/v1"

    # JWT signing for access tokens issued by POST /auth/login
    jwt_secret: str = "dev-secret-change-me"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60

    # iNaturalist is used to confirm species names before a sighting is stored
    inaturalist_api_url: str = "https://api.inaturalist.org/v1"
    species_validation_enabled: bool = True

    # Photo storage: files land in upload_dir and are served under photo_base_url
    upload_dir: str = "./uploads"
    photo_base_url: str = "/uploads"
    max_photo_bytes: int = 10 * 1024 * 1024

    cors_origins: list[str] = ["*"]

    # Debug flag
    debug: bool = Field(default=False, alias="DEBUG")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )


settings = Settings()
