"""Reader configuration model.

This module provides the ReaderConfig Pydantic model, the root of the
gitview configuration.
"""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

from gitview.config._models._logging import LoggingConfig


class ReaderConfig(BaseModel):
    """Settings for opening and reading a repository.

    Attributes:
        git_executable: Name or path of the git binary to spawn.
        metadata_dir: Name of the metadata directory that marks a working copy.
        logging: Logging settings.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="forbid")

    git_executable: str = Field(default="git", min_length=1)
    metadata_dir: str = Field(default=".git", min_length=1)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
