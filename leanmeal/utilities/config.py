"""Configuration management for the leanmeal tool server."""
import os
from typing import Final, Optional
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file if it exists
env_path = Path(__file__).parent.parent.parent / '.env'
if env_path.exists():
    load_dotenv(env_path)

# File Paths
BASE_DIR: Final[Path] = Path(__file__).parent.parent
DATA_DIR: Final[Path] = BASE_DIR / 'data'

# Application Settings
APP_HOST: Final[str] = os.getenv('LEANMEAL_HOST', '0.0.0.0')
APP_PORT: Final[int] = int(os.getenv('LEANMEAL_PORT', '8000'))
LOG_LEVEL: Final[str] = os.getenv('LEANMEAL_LOG_LEVEL', 'INFO').upper()

# Data files
FOODS_FILE: Final[Path] = Path(os.getenv('LEANMEAL_FOODS_FILE', str(DATA_DIR / 'foods.json')))
MENUS_FILE: Final[Path] = Path(os.getenv('LEANMEAL_MENUS_FILE', str(DATA_DIR / 'menus.json')))

# Seed for meal composition and plan picks; unset means system randomness
_seed = os.getenv('LEANMEAL_RANDOM_SEED')
RANDOM_SEED: Final[Optional[int]] = int(_seed) if _seed else None
