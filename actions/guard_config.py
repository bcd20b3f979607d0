# Folder: issuewatch/actions/guard_config.py
#
# Settings the reporter checks before touching GitHub.
#
# One process-wide instance, created lazily on first access.
# Configure it once at startup:
#
#   configure(github_token="...", github_repository="owner/repo")
#
# Tests call reset_configuration() to start from clean defaults.

import logging
import os
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

import config

logger = logging.getLogger(__name__)

DEFAULT_ENVIRONMENT = "development"


class GuardConfig(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    # Required - reporting stays off until both are set
    github_token: Optional[str] = None
    github_repository: Optional[str] = None      # "owner/repo"

    # Environments where reporting is active
    environments: List[str] = Field(default_factory=lambda: ["production"])

    # Optional issue metadata
    labels: List[str] = Field(default_factory=list)
    assignees: List[str] = Field(default_factory=list)

    # Exception class names to skip (subclasses are skipped too)
    ignored_exceptions: List[str] = Field(default_factory=list)

    # False = report inline, in the caller's thread
    asynchronous: bool = True

    @classmethod
    def from_env(cls) -> "GuardConfig":
        """Build from the values config.py read out of the environment / .env"""
        return cls(
            github_token=config.GITHUB_TOKEN,
            github_repository=config.GITHUB_REPO,
            environments=list(config.REPORT_ENVIRONMENTS),
            labels=list(config.ISSUE_LABELS),
            assignees=list(config.ISSUE_ASSIGNEES),
            ignored_exceptions=list(config.IGNORED_EXCEPTIONS),
            asynchronous=config.REPORT_ASYNC,
        )

    def is_valid(self) -> bool:
        return bool((self.github_token or "").strip()) and \
            bool((self.github_repository or "").strip())

    def current_environment(self) -> str:
        return (
            os.getenv("APP_ENV")
            or os.getenv("FLASK_ENV")
            or DEFAULT_ENVIRONMENT
        )

    def reporting_enabled(self) -> bool:
        return self.is_valid() and self.current_environment() in self.environments


# Process-wide instance
_configuration: Optional[GuardConfig] = None


def configuration() -> GuardConfig:
    """Same object every call until reset_configuration()"""
    global _configuration

    if _configuration is None:
        _configuration = GuardConfig()

    return _configuration


def configure(**settings) -> GuardConfig:
    """Set fields on the process-wide config. Unknown names raise."""
    current = configuration()

    unknown = [name for name in settings if name not in GuardConfig.model_fields]
    if unknown:
        raise AttributeError(f"Unknown setting: {', '.join(unknown)}")

    # Validate everything up front so a bad value leaves nothing half-applied
    updated = GuardConfig.model_validate({**current.model_dump(), **settings})
    for name in settings:
        setattr(current, name, getattr(updated, name))

    logger.debug(f"Issuewatch configured for {current.github_repository}")
    return current


def reset_configuration() -> GuardConfig:
    global _configuration
    _configuration = GuardConfig()
    return _configuration
