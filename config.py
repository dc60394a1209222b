"""Configuration management for Hearthbudget.

Reads configuration from ~/.config/hearthbudget.toml and creates default config if needed.
"""

from pathlib import Path
from dataclasses import dataclass
from typing import Optional
import tomllib
import tomli_w


@dataclass
class Config:
    """Application configuration."""

    base_dir: Path
    db_data_dir: Path
    db_filename: str
    log_level: str
    log_dir: Path
    seed_on_signup: bool = True
    catalog_path: Optional[Path] = None
    enable_reset: bool = False

    @property
    def db_path(self) -> Path:
        """Get the full database path (data_dir/filename)."""
        return self.db_data_dir / self.db_filename

    @classmethod
    def default(cls) -> "Config":
        """Create a Config with default values."""
        home = Path.home()
        base_dir = home / "data" / "hearthbudget"
        return cls(
            base_dir=base_dir,
            db_data_dir=base_dir / "db",
            db_filename="hearthbudget.db",
            log_level="INFO",
            log_dir=base_dir / "logs",
        )


def get_config_path() -> Path:
    """Get the path to the config file."""
    return Path.home() / ".config" / "hearthbudget.toml"


def get_migrations_dir() -> Path:
    """Get the path to the migrations directory.

    This is always relative to the code location, not configurable.
    """
    return Path(__file__).parent / "db" / "migrations"


def get_default_catalog_path() -> Path:
    """Get the path to the bundled default category catalog."""
    return Path(__file__).parent / "db" / "seed" / "default_categories.json"


def load_config() -> Config:
    """Load configuration from file, creating default if it doesn't exist.

    Returns:
        Config object with loaded or default values.
    """
    config_path = get_config_path()

    if not config_path.exists():
        config = Config.default()
        _write_config(config)
        return config

    with open(config_path, "rb") as f:
        data = tomllib.load(f)

    # Parse with defaults for any missing values
    base_dir = Path(data.get("base_dir", Path.home() / "data" / "hearthbudget"))

    db_config = data.get("database", {})
    db_data_dir = Path(db_config.get("data_dir", base_dir / "db"))
    db_filename = db_config.get("filename", "hearthbudget.db")

    log_config = data.get("logging", {})
    log_level = log_config.get("level", "INFO")
    log_dir = Path(log_config.get("log_dir", base_dir / "logs"))

    seeding_config = data.get("seeding", {})
    seed_on_signup = seeding_config.get("seed_on_signup", True)
    catalog_path = seeding_config.get("catalog_path")

    maintenance_config = data.get("maintenance", {})
    enable_reset = maintenance_config.get("enable_reset", False)

    return Config(
        base_dir=base_dir,
        db_data_dir=db_data_dir,
        db_filename=db_filename,
        log_level=log_level,
        log_dir=log_dir,
        seed_on_signup=seed_on_signup,
        catalog_path=Path(catalog_path) if catalog_path else None,
        enable_reset=enable_reset,
    )


def _write_config(config: Config) -> None:
    """Write config to the config file.

    Args:
        config: Config object to write.
    """
    config_path = get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    seeding = {"seed_on_signup": config.seed_on_signup}
    # TOML has no null, so an unset override is simply left out
    if config.catalog_path is not None:
        seeding["catalog_path"] = str(config.catalog_path)

    data = {
        "base_dir": str(config.base_dir),
        "database": {
            "data_dir": str(config.db_data_dir),
            "filename": config.db_filename,
        },
        "logging": {
            "level": config.log_level,
            "log_dir": str(config.log_dir),
        },
        "seeding": seeding,
        "maintenance": {
            "enable_reset": config.enable_reset,
        },
    }

    with open(config_path, "wb") as f:
        tomli_w.dump(data, f)
