from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # App
    environment: str = "development"
    debug: bool = True
    log_level: str = "INFO"
    allowed_origins: str = "http://localhost:3000,http://localhost:5173"
    service_prefix: str = "/api/copy"
    version: str = "2.0"
    host: str = "0.0.0.0"
    port: int = 8000

    # Key-value store
    kv_backend: str = "redis"  # "redis" | "memory"
    redis_url: str = "redis://localhost:6379/0"
    kv_namespace: str = "seedcopy"

    # Auth provider (BaaS)
    baas_url: str = ""
    baas_service_key: str = ""
    baas_anon_key: str = ""
    baas_jwt_secret: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    jwt_audience: str = "authenticated"
    access_token_expire_minutes: int = 60

    # AI completion provider
    ai_service: str = "zhipu-ai"
    ai_api_key: str = ""
    ai_base_url: str = "https://open.bigmodel.cn/api/paas/v4"
    ai_model: str = "glm-4-plus"
    ai_temperature: float = 0.8
    ai_max_tokens: int = 2000
    ai_timeout_seconds: float = 30.0

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


settings = Settings()
