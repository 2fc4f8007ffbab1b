from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    app_name: str = "Circuitry WIRE Solver"
    debug: bool = True
    env: str = "development"
    log_level: str = "INFO"

    # Server
    backend_host: str = "0.0.0.0"
    backend_port: int = 8000
    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:5174",
        "http://localhost:3000",
    ]

    # Solver
    solver_rel_tolerance: float = 1e-9
    solver_abs_tolerance: float = 1e-12

    # Worksheet answer checking (relative error)
    worksheet_tolerance: float = 0.01

    # Problem catalog. Empty = packaged practice_problems.json
    problem_catalog_path: str = ""

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
