from os import getenv

class Settings:
    DATABASE_URL = getenv("DATABASE_URL", "sqlite:///./knowledge_base.db")
    DEBUG = getenv("DEBUG", "false").lower() in ("1", "true", "yes")

    JWT_SECRET = getenv("JWT_SECRET", "dev-secret-change-in-prod")
    JWT_EXPIRE_MIN = int(getenv("JWT_EXPIRE_MIN", "15"))  #expire au bout de 15 minutes
    JWT_REFRESH_EXPIRE_MIN = int(getenv("JWT_REFRESH_EXPIRE_MIN", "43200"))  #expire au bout d'1 mois

    # temps réel
    SSE_KEEPALIVE_SECONDS = float(getenv("SSE_KEEPALIVE_SECONDS", "30"))
    SYNC_INTERVAL_SECONDS = float(getenv("SYNC_INTERVAL_SECONDS", "2"))

    COPY_SUFFIX = getenv("COPY_SUFFIX", " (Copy)")

settings = Settings()
