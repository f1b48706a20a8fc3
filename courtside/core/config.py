from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./courtside.db"
    SECRET_KEY: str = "YOUR_SECRET_KEY_HERE"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"

settings = Settings()

# Stamina economy
INITIAL_STAMINA = 10.0
MAX_STAMINA = 20.0
TOURNAMENT_FEE = 2.0
BASE_REWARD = 0.3

# Match verification
WITNESS_POOL_SIZE = 5
WITNESS_REQUEST_EXPIRY_MINUTES = 15

# Grouping
GROUP_TARGET_SIZE = 4

# Ranking points awarded at tournament completion
WINNER_POINTS = 10
RUNNER_UP_POINTS = 7
SEMIFINALIST_POINTS = 5
