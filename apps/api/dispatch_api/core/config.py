from pydantic_settings import BaseSettings, SettingsConfigDict

from dispatch_api.scheduling.rules import SchedulingRules


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: str = "sqlite:///./dispatch.db"
    jwt_secret_key: str = "your-secret-key-change-in-production"  # Default for development
    jwt_algorithm: str = "HS256"

    log_level: str = "INFO"
    log_json: bool = False

    # Scheduling rules
    min_rest_hours: float = 10
    fully_rested_hours: float = 24
    max_generation_months: int = 6
    pending_time_off_blocks: bool = False

    def scheduling_rules(self) -> SchedulingRules:
        return SchedulingRules(
            min_rest_hours=self.min_rest_hours,
            fully_rested_hours=self.fully_rested_hours,
            max_generation_months=self.max_generation_months,
            pending_time_off_blocks=self.pending_time_off_blocks,
        )


settings = Settings()
