import os
from pydantic_settings import BaseSettings
from dotenv import load_dotenv
from typing import Optional

# Load environment variables from .env file
load_dotenv()

class Settings(BaseSettings):
    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Azure Storage Queue
    # DSN is either azurequeue://<account>:<key>@<host>
    # or azurequeue-connection-string://<raw connection string>
    AZURE_QUEUE_DSN: str = (os.getenv("AZURE_QUEUE_DSN", "") or "").strip().strip('"').strip("'")
    AZURE_QUEUE_NAME: str = os.getenv("AZURE_QUEUE_NAME", "")
    AZURE_QUEUE_VISIBILITY_TIMEOUT: Optional[int] = None
    AZURE_QUEUE_RESULTS_LIMIT: int = int(os.getenv("AZURE_QUEUE_RESULTS_LIMIT", "1"))
    AZURE_QUEUE_TIME_TO_LIVE: Optional[int] = None
    AZURE_QUEUE_BODY_ONLY: bool = os.getenv("AZURE_QUEUE_BODY_ONLY", "False").lower() == "true"

    # Dev consumer
    AZURE_QUEUE_POLL_INTERVAL_SECONDS: float = float(os.getenv("AZURE_QUEUE_POLL_INTERVAL_SECONDS", "5"))

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"

# Create settings instance
settings = Settings()
