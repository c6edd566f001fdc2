import os
from dotenv import load_dotenv

load_dotenv()


class Settings:
    API_BASE_URL: str = os.getenv("API_BASE_URL", "http://localhost:8000")
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./storefront.db")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "info")

    # Page size of the public product listing
    PRODUCTS_LIMIT: int = int(os.getenv("PRODUCTS_LIMIT", "8"))
    LATEST_PRODUCTS_LIMIT: int = int(os.getenv("LATEST_PRODUCTS_LIMIT", "5"))


settings = Settings()
