from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):

    DATABASE_URL: str
    JWT_SECRET: str
    AWS_ACCESS_KEY_ID: str
    AWS_SECRET_ACCESS_KEY: str
    AWS_S3_BUCKET_NAME: str
    AWS_S3_ENDPOINT_URL: str
    AWS_S3_REGION: str
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 30

    IMAGE_MAX_WIDTH: int = 1920
    IMAGE_QUALITY: int = 80
    REQUEST_TIMEOUT_SECONDS: float = 30.0

    DEBUG: bool = False

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    @property
    def s3_base_url(self) -> str:
        return self.AWS_S3_ENDPOINT_URL.rstrip("/") + "/" + self.AWS_S3_BUCKET_NAME


# Global settings object, imported everywhere
settings = Settings()
