"""
Configuration management using Pydantic models loaded from YAML.
"""

from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from .domain.models import GridConfig, RequiredAttribute, SelectionMode


class GridDefaults(BaseModel):
    """
    Default grid settings.

    Hours are not range checked here; the grid clamps them when it is built.
    """
    start_hour: float = 8
    end_hour: float = 16
    block_size_minutes: int = 60
    include_saturday: bool = False
    include_sunday: bool = False

    @field_validator("block_size_minutes")
    @classmethod
    def validate_block_size(cls, value: int) -> int:
        """Ensure the block size is positive."""
        if value <= 0:
            raise ValueError("block_size_minutes must be greater than zero")
        return value

    def to_grid_config(self) -> GridConfig:
        return GridConfig(
            start_hour=self.start_hour,
            end_hour=self.end_hour,
            block_size_minutes=self.block_size_minutes,
            include_saturday=self.include_saturday,
            include_sunday=self.include_sunday,
        )


class RequiredAttributeConfig(BaseModel):
    """Attribute every new student must provide."""
    name: str
    values: Optional[List[str]] = None  # None: free-form text

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Required attribute name cannot be blank")
        return value.strip()

    def to_required_attribute(self) -> RequiredAttribute:
        values = tuple(self.values) if self.values else None
        return RequiredAttribute(name=self.name, values=values)


class AppConfig(BaseModel):
    """Application configuration."""
    grid: GridDefaults = Field(default_factory=GridDefaults)
    default_mode: SelectionMode = SelectionMode.AVAILABLE
    required_attributes: List[RequiredAttributeConfig] = Field(default_factory=list)

    @field_validator("required_attributes")
    @classmethod
    def validate_required_attributes(
        cls, value: List[RequiredAttributeConfig]
    ) -> List[RequiredAttributeConfig]:
        """Ensure required attribute names are unique."""
        seen: set[str] = set()
        for attribute in value:
            key = attribute.name.lower()
            if key in seen:
                raise ValueError(f"Duplicate required attribute detected: {attribute.name}")
            seen.add(key)
        return value

    def to_grid_config(self) -> GridConfig:
        return self.grid.to_grid_config()

    def get_required_attributes(self) -> List[RequiredAttribute]:
        return [attr.to_required_attribute() for attr in self.required_attributes]

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        return cls(**data)


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """
    Load the given config file, or the default one if it exists.

    Falls back to built-in defaults when no path is given and no default
    file is present.
    """
    if config_path is not None:
        return AppConfig.load_from_yaml(config_path)

    default_path = get_default_config_path()
    if default_path.exists():
        return AppConfig.load_from_yaml(default_path)
    return AppConfig()
