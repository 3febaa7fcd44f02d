from pydantic_settings import BaseSettings
from pydantic import field_validator
from typing import Optional, List, Union


class Settings(BaseSettings):
    # Database
    database_url: str

    # Firebase
    firebase_project_id: str
    firebase_credentials_path: str
    firebase_check_revoked: bool = False

    # API
    api_v1_str: str = "/api/v1"
    api_base_url: Optional[str] = None

    # Environment
    environment: str = "development"
    debug: bool = True

    # Admin routes: comma-separated emails; a Firebase "admin" custom claim also grants access
    admin_emails: str = ""

    # Plans / entitlements
    plans_cache_ttl_seconds: int = 300
    upgrade_redirect: str = "/dashboard/subscription"
    near_limit_percentage: float = 80.0

    # Shipping
    default_estimated_days: int = 7

    # Analytics (Firestore event log)
    analytics_enabled: bool = True

    # CORS
    cors_origins: List[str] = ["http://localhost:5000"]

    @field_validator('cors_origins', mode='before')
    @classmethod
    def parse_cors_origins(cls, v: Union[str, List[str]]) -> List[str]:
        """Parse CORS origins from environment variable (comma-separated) or use default list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(',') if origin.strip()]
        return v

    @property
    def admin_email_list(self) -> List[str]:
        return [email.strip().lower() for email in self.admin_emails.split(',') if email.strip()]

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"  # Allow extra fields from environment


settings = Settings()
