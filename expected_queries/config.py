"""
Configuration

Settings for query recording, read from the environment (prefix
``EXPECTED_QUERIES_``) or a local ``.env`` file.
"""

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Reserved table key in an expectation map holding per-operation defaults.
ALL_TABLES_KEY = "_all_"


class Settings(BaseSettings):
    """Library-wide defaults. Recorders copy these at construction time."""

    model_config = SettingsConfigDict(
        env_prefix="EXPECTED_QUERIES_",
        env_file=".env",
        extra="ignore",
    )

    # Stack frames whose module name has one of these labels as a dotted
    # segment ("sqlalchemy" matches sqlalchemy.engine.base) are dropped.
    STACK_TRACE_IGNORE: List[str] = Field(
        default_factory=lambda: [
            "sqlalchemy",
            "expected_queries",
            "pluggy",
            "_pytest",
            "contextlib",
        ],
        description="Labels of infrastructure frames to trim from stack traces",
    )
    CAPTURE_STACK_TRACE: bool = Field(
        True, description="Capture a stack trace for every recorded query"
    )
    RESOLVE_SUBSELECT: bool = Field(
        False,
        description="Attribute 'SELECT ... FROM (subselect)' to the inner table",
    )


settings = Settings()
