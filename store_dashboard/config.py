import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


class Settings:
    # API Configuration
    API_TITLE = "Multi-Store Dashboard"
    API_VERSION = "1.0.0"
    API_DESCRIPTION = "Fetch and aggregate shop, product and order data across connected Shopify stores"

    # Server Configuration
    HOST = os.getenv("HOST", "0.0.0.0")
    PORT = int(os.getenv("PORT", 8000))
    DEBUG = os.getenv("DEBUG", "false").lower() == "true"

    # Shopify Admin API
    SHOPIFY_API_VERSION = os.getenv("SHOPIFY_API_VERSION", "2024-10")
    SHOPIFY_TOKEN_HEADER = "X-Shopify-Access-Token"

    # Request Configuration
    REQUEST_TIMEOUT = int(os.getenv("REQUEST_TIMEOUT", 30))
    VERIFY_MAX_RETRIES = int(os.getenv("VERIFY_MAX_RETRIES", 3))

    # 0 means one in-flight request per store, no cap
    MAX_CONCURRENT_FETCHES = int(os.getenv("MAX_CONCURRENT_FETCHES", 0))

    # Database Configuration (connected stores)
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./store_dashboard.db")

    # Logging Configuration
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Security Configuration
    ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")


# Create settings instance
settings = Settings()


# Environment check
def get_environment():
    """Get current environment"""
    return os.getenv("ENVIRONMENT", "development")


def is_production():
    """Check if running in production"""
    return get_environment().lower() == "production"


def is_development():
    """Check if running in development"""
    return get_environment().lower() == "development"
