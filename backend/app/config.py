from typing import Optional

from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    # Directory holding cards.json, recipes.json, explore_drops.json and shop.json.
    # Empty means the data bundled with kitchen_core.
    DATA_ROOT: Optional[str] = None
    # Fixed seed for reproducible games (leave unset for a fresh seed per game)
    RNG_SEED: Optional[int] = None
    VERBOSE: bool = True
    MAX_ENERGY: int = 3
    STARTING_COINS: int = 10

    class Config:
        env_file = ".env"

settings = Settings()
