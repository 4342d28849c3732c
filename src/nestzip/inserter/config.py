"""Configuration schema for nested insertion."""

from typing import Literal, Optional

from pydantic import BaseModel, Field, ConfigDict
from nestzip.common import LoggingConfig


class InsertionConfig(BaseModel):
    """Options threaded through every step of a nested insertion."""
    
    model_config = ConfigDict(extra='forbid')
    
    no_overwrite: bool = Field(
        default=False,
        description="Fail instead of replacing an entry that already exists"
    )
    verbose: bool = Field(
        default=False,
        description="Trace every resolution, extraction, deletion and insertion step"
    )
    backend: Literal["file", "memory"] = Field(
        default="file",
        description="Archive back-end: 'file' rewrites through a temp file, 'memory' rewrites in memory"
    )
    staging_dir: Optional[str] = Field(
        default=None,
        description="Directory for staged copies of nested archives (system temp dir if unset)"
    )


class NestZipConfig(BaseModel):
    """Root configuration for nestzip."""
    
    model_config = ConfigDict(extra='forbid')
    
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    insertion: InsertionConfig = Field(default_factory=InsertionConfig)
