"""
Application configuration settings loaded from environment variables.
Uses pydantic_settings for validation and type conversion.
"""
from pydantic_settings import BaseSettings
from typing import Optional

class Settings(BaseSettings):
    """
    Application settings class with environment variable validation.

    Attributes:
        database_url: Database connection string
        access_token_secret: Secret used to sign access tokens
        refresh_token_secret: Secret used to sign refresh tokens (must differ from the access secret)
        algorithm: Algorithm used for JWT encoding (typically HS256)
        access_token_expire_minutes: Access token lifetime in minutes
        refresh_token_expire_days: Refresh token lifetime in days
        reset_token_expire_minutes: Password reset token lifetime in minutes
        cookie_secure: Whether session cookies carry the Secure flag

        # Email settings
        mail_username: SMTP server username
        mail_password: SMTP server password
        mail_from: Sender email address
        mail_port: SMTP server port
        mail_server: SMTP server hostname
        mail_starttls: Whether to use STARTTLS
        mail_ssl_tls: Whether to use SSL/TLS
        use_credentials: Whether to use credentials for SMTP
        validate_certs: Whether to validate certificates

        # Frontend settings
        frontend_url: Base URL used to build the password reset link

        # Payment gateway settings
        payment_gateway_url: Base URL of the card tokenization API
        payment_gateway_api_key: API key for the gateway
        payment_gateway_api_pin: API pin paired with the key
        payment_gateway_timeout: Request timeout in seconds
    """
    # Database settings
    database_url: str = "sqlite:///./portal.db"

    # JWT settings
    access_token_secret: str
    refresh_token_secret: str
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60
    refresh_token_expire_days: int = 1
    reset_token_expire_minutes: int = 60
    cookie_secure: bool = False

    # Email settings
    mail_username: str
    mail_password: str
    mail_from: str
    mail_port: int = 587
    mail_server: str
    mail_starttls: bool = True
    mail_ssl_tls: bool = False
    use_credentials: bool = True
    validate_certs: bool = True

    # Frontend settings
    frontend_url: str = "http://localhost:3000"

    # Payment gateway settings
    payment_gateway_url: str = "https://sandbox.usaepay.com/api/v2"
    payment_gateway_api_key: Optional[str] = None
    payment_gateway_api_pin: Optional[str] = None
    payment_gateway_timeout: float = 30.0

    class Config:
        """Configuration for environment variables loading"""
        env_file = ".env"
        case_sensitive = False

# Create settings instance
settings = Settings()
