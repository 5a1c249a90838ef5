"""Application configuration."""
import os
from dataclasses import dataclass
from typing import Optional
from dotenv import load_dotenv

load_dotenv()


def _optional_int(value: Optional[str]) -> Optional[int]:
    """Parse an optional integer environment value."""
    if value is None or value.strip() == "":
        return None
    return int(value)


@dataclass
class Config:
    """Application configuration loaded from environment variables."""
    
    # Table
    starting_fiches: int = int(os.getenv("STARTING_FICHES", "20"))
    human_players: int = int(os.getenv("HUMAN_PLAYERS", "1"))
    
    # Agents
    agent_competence: float = float(os.getenv("AGENT_COMPETENCE", "0.85"))
    agent_delay_seconds: float = float(os.getenv("AGENT_DELAY", "0"))
    
    # Seed for the shared random source (unset = nondeterministic)
    random_seed: Optional[int] = _optional_int(os.getenv("RANDOM_SEED"))
    
    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


config = Config()
