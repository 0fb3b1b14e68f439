"""Configuration management for Tallybook.

Settings live in ~/.config/tallybook.toml; a file with defaults is written on
first use. Every key is optional, so old config files keep working when new
settings are added.
"""

from pathlib import Path
from dataclasses import dataclass
from typing import Optional
import tomllib
import tomli_w

DEFAULT_OWNER_ID = "default"
DEFAULT_CSV_ENCODING = "utf-8-sig"


@dataclass
class Config:
    """Application configuration."""

    base_dir: Path
    db_data_dir: Path
    db_filename: str
    log_level: str
    log_dir: Path
    owner_id: str = DEFAULT_OWNER_ID
    enable_reset: bool = False
    csv_encoding: str = DEFAULT_CSV_ENCODING  # utf-8-sig also strips Excel's BOM
    seed_file: Optional[Path] = None  # None = bundled default taxonomy

    @property
    def db_path(self) -> Path:
        """Get the full database path (data_dir/filename)."""
        return self.db_data_dir / self.db_filename

    @property
    def seed_path(self) -> Path:
        """Category taxonomy used by `categories seed`."""
        return self.seed_file or get_seed_path()

    @classmethod
    def default(cls) -> "Config":
        """Create a Config with default values."""
        return cls.from_toml({})

    @classmethod
    def from_toml(cls, data: dict) -> "Config":
        """Build a Config from parsed TOML, filling in missing keys."""
        base_dir = Path(data.get("base_dir", Path.home() / "data" / "tallybook"))

        database = data.get("database", {})
        logging_section = data.get("logging", {})
        owner = data.get("owner", {})
        ingestion = data.get("ingestion", {})
        categories = data.get("categories", {})

        seed_file = categories.get("seed_file")
        return cls(
            base_dir=base_dir,
            db_data_dir=Path(database.get("data_dir", base_dir / "db")),
            db_filename=database.get("filename", "tallybook.db"),
            log_level=logging_section.get("level", "INFO"),
            log_dir=Path(logging_section.get("log_dir", base_dir / "logs")),
            owner_id=owner.get("id", DEFAULT_OWNER_ID),
            enable_reset=data.get("enable_reset", False),
            csv_encoding=ingestion.get("encoding", DEFAULT_CSV_ENCODING),
            seed_file=Path(seed_file).expanduser() if seed_file else None,
        )

    def to_toml(self) -> dict:
        """Convert to the TOML layout read by from_toml."""
        data = {
            "base_dir": str(self.base_dir),
            "enable_reset": self.enable_reset,
            "database": {
                "data_dir": str(self.db_data_dir),
                "filename": self.db_filename,
            },
            "logging": {
                "level": self.log_level,
                "log_dir": str(self.log_dir),
            },
            "owner": {"id": self.owner_id},
            "ingestion": {"encoding": self.csv_encoding},
        }
        # TOML has no null; an absent key means "use the bundled taxonomy"
        if self.seed_file is not None:
            data["categories"] = {"seed_file": str(self.seed_file)}
        return data


def get_config_path() -> Path:
    """Get the path to the config file."""
    return Path.home() / ".config" / "tallybook.toml"


def get_migrations_dir() -> Path:
    """Get the path to the migrations directory.

    This is always relative to the code location, not configurable.
    """
    return Path(__file__).parent / "db" / "migrations"


def get_seed_path() -> Path:
    """Get the path to the bundled default category taxonomy."""
    return Path(__file__).parent / "db" / "seed" / "categories.json"


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration from file, creating default if it doesn't exist.

    Args:
        config_path: Alternative config file, mainly for tests.

    Returns:
        Config object with loaded or default values.
    """
    config_path = config_path or get_config_path()

    if not config_path.exists():
        config = Config.default()
        _write_config(config, config_path)
        return config

    with open(config_path, "rb") as f:
        return Config.from_toml(tomllib.load(f))


def _write_config(config: Config, config_path: Path) -> None:
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "wb") as f:
        tomli_w.dump(config.to_toml(), f)
