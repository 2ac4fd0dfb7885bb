"""
Configuration data models for nodebug.

These models define the structure of .nodebug.json and
~/.config/nodebug/config.json files, with validation and type safety via
Pydantic.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from nodebug.core.restart.models import FLAG_SEPARATOR, RestartSettings


class PhpConfig(BaseModel):
    """
    PHP runtime settings.

    Which interpreter to run and how it is told to load an explicit ini.
    """
    binary: str = Field(
        default="php",
        min_length=1,
        description="PHP binary name or path"
    )
    extension: str = Field(
        default="xdebug",
        pattern=r"^[A-Za-z0-9_]+$",
        description="Debugging extension to disable on restart"
    )
    config_flag: str = Field(
        default="-c",
        min_length=1,
        description="Option that points PHP at an explicit ini file"
    )
    scan_dir_var: str = Field(
        default="PHP_INI_SCAN_DIR",
        min_length=1,
        description="Environment variable listing additional ini directories"
    )


class RestartConfig(BaseModel):
    """
    Restart behavior.

    Controls the environment variables shared with the restarted process.
    """
    env_prefix: str = Field(
        default="NODEBUG",
        pattern=r"^[A-Z][A-Z0-9_]*$",
        description="Prefix for the ALLOW, VERSION and ORIGINAL_INIS variables"
    )
    marker: str = Field(
        default="internal",
        min_length=1,
        description="Flag value identifying a restarted process"
    )
    escape_meta: bool = Field(
        default=True,
        description="Escape cmd.exe metacharacters in the restart command (Windows)"
    )
    inject_ansi: bool = Field(
        default=True,
        description="Pass --ansi to the script when output is a color terminal"
    )

    @field_validator("marker")
    @classmethod
    def validate_marker(cls, v: str) -> str:
        """The marker is the first flag segment, so it cannot contain the separator."""
        if FLAG_SEPARATOR in v:
            raise ValueError(f"marker must not contain '{FLAG_SEPARATOR}'")
        return v


class NodebugConfig(BaseModel):
    """
    Top-level nodebug configuration.

    Loaded from defaults, user config, project config, and env vars.

    Example:
        >>> config = NodebugConfig(restart=RestartConfig(env_prefix="COMPOSER"))
        >>> config.allow_var
        'COMPOSER_ALLOW_XDEBUG'
    """
    php: PhpConfig = Field(
        default_factory=PhpConfig,
        description="PHP runtime settings"
    )
    restart: RestartConfig = Field(
        default_factory=RestartConfig,
        description="Restart behavior"
    )

    model_config = ConfigDict(
        extra="allow",  # Allow extra fields for forward compatibility
        validate_assignment=True,
    )

    @property
    def allow_var(self) -> str:
        return f"{self.restart.env_prefix}_ALLOW_{self.php.extension.upper()}"

    @property
    def version_var(self) -> str:
        return f"{self.restart.env_prefix}_{self.php.extension.upper()}_VERSION"

    @property
    def original_inis_var(self) -> str:
        return f"{self.restart.env_prefix}_ORIGINAL_INIS"

    def to_restart_settings(self) -> RestartSettings:
        """Flatten into the settings consumed by the restart core."""
        return RestartSettings(
            allow_var=self.allow_var,
            version_var=self.version_var,
            original_inis_var=self.original_inis_var,
            scan_dir_var=self.php.scan_dir_var,
            marker=self.restart.marker,
            config_flag=self.php.config_flag,
            extension=self.php.extension,
            escape_meta=self.restart.escape_meta,
            inject_ansi=self.restart.inject_ansi,
        )
