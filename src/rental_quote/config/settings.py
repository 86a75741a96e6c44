"""
Centralized settings and path configuration for the quote tool.
"""
import os
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv


CATALOG_FILE_NAMES = ('catalogo_normalizado_2025.csv', 'catalog.csv', 'catalog.json')


def get_project_root() -> Path:
    """Get the project root directory (where pyproject.toml lives)."""
    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / 'pyproject.toml').exists() or (parent / 'data').is_dir():
            return parent
    # Fallback to 3 levels up from this file
    return Path(__file__).resolve().parent.parent.parent.parent


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")


@dataclass
class Settings:
    """Application settings with sensible defaults."""

    # Project paths
    project_root: Path
    data_dir: Path

    # Pricing constants, fixed for the process lifetime
    iva_rate: float = 0.16
    default_deposit_rate: float = 0.0

    # HTTP
    cors_origin: str = "*"
    company_name: str = "Medio Angular"

    catalog_candidates: tuple = field(default_factory=tuple)

    @property
    def sequence_file(self) -> Path:
        return self.data_dir / 'sequence.json'

    @property
    def catalog_file(self) -> Optional[Path]:
        """First existing catalog file, or None when there is none."""
        for candidate in self.catalog_candidates:
            if candidate.exists():
                return candidate
        return None

    @classmethod
    def load(cls, project_root: Optional[Path] = None) -> 'Settings':
        """Load settings from the environment (and a .env file if present)."""
        load_dotenv()
        root = project_root or get_project_root()

        data_dir = Path(os.getenv('QUOTE_DATA_DIR') or root / 'data')

        return cls(
            project_root=root,
            data_dir=data_dir,
            iva_rate=_env_float('IVA_RATE', 0.16),
            default_deposit_rate=_env_float('DEFAULT_DEPOSIT_RATE', 0.0),
            cors_origin=os.getenv('CORS_ORIGIN') or "*",
            company_name=os.getenv('COMPANY_NAME') or "Medio Angular",
            catalog_candidates=tuple(data_dir / name for name in CATALOG_FILE_NAMES),
        )


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings
