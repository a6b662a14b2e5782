"""
Pydantic model for application configuration.
Provides robust validation for all settings.
"""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, field_validator

DEFAULT_CATALOG_URL = (
    "https://raw.githubusercontent.com/maplestory-music/maplebgm-db/prod/bgm.min.json"
)
DEFAULT_BUILD_URL = "https://maple-pod.github.io/bgm/build.json"


class BuildConfig(BaseModel):
    """A validated configuration model for a dataset build."""

    model_config = ConfigDict(validate_assignment=True, str_strip_whitespace=True)

    # Archive input
    archive_dir: Path = Path("wz")
    string_archive: str = "String.wz"
    map_archive: str = "Map002.wz"

    # Output
    dist_dir: Path = Path("dist")
    output_filename: str = "bgm.json"
    indent: int = 2

    # Remote feeds
    catalog_url: str = DEFAULT_CATALOG_URL
    build_url: str = DEFAULT_BUILD_URL
    request_timeout: float = 60.0

    @field_validator("catalog_url", "build_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Ensures feed URLs use HTTP(S)."""
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"Feed URL must start with http:// or https://: {v!r}")
        return v

    @field_validator("output_filename")
    @classmethod
    def validate_output_filename(cls, v: str) -> str:
        """The output must be a bare .json file name inside the output directory."""
        if not v or "/" in v or "\\" in v or v in (".", ".."):
            raise ValueError("Output filename must be a plain file name.")
        if not v.endswith(".json"):
            raise ValueError("Output filename must end with '.json'.")
        return v

    @field_validator("string_archive", "map_archive")
    @classmethod
    def validate_archive_name(cls, v: str) -> str:
        if not v:
            raise ValueError("Archive names cannot be empty.")
        return v

    @field_validator("request_timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("Request timeout must be positive.")
        return v

    @field_validator("indent")
    @classmethod
    def validate_indent(cls, v: int) -> int:
        if v < 0 or v > 8:
            raise ValueError("Indent must be between 0 and 8.")
        return v

    @property
    def string_archive_path(self) -> Path:
        return self.archive_dir / self.string_archive

    @property
    def map_archive_path(self) -> Path:
        return self.archive_dir / self.map_archive

    @property
    def output_path(self) -> Path:
        return self.dist_dir / self.output_filename

    @classmethod
    def get_ini_keys(cls) -> list[str]:
        """Returns all keys that are expected in the INI file, in declaration order."""
        return list(cls.model_fields)
