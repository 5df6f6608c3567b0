from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, field_validator, model_validator

from ghclosebot.core.modes import RunMode


class PermissionConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    write: bool = True


class RuntimeConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    mode: RunMode = RunMode.ACTIVE
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        if value.upper() not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError("Unsupported log level")
        return value.upper()


class GitHubConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    token: str
    api_base: HttpUrl = Field(default="https://api.github.com")
    permissions: PermissionConfig = Field(default_factory=PermissionConfig)
    # Comments by this login are ignored so the bot never answers itself.
    bot_login: str | None = None
    timeout_seconds: float = 20.0

    @field_validator("timeout_seconds")
    @classmethod
    def validate_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("timeout_seconds must be positive")
        return value


class WebhookConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    host: str = "0.0.0.0"
    port: int = Field(default=8888, ge=1, le=65535)
    path: str = "/webhook"
    secret: str | None = None

    @field_validator("path")
    @classmethod
    def validate_path(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError("webhook.path must start with '/'")
        return value


class StatesConfig(BaseModel):
    """State strings as the platform reports and accepts them."""

    model_config = ConfigDict(frozen=True)

    opened: str = "open"
    closed: str = "closed"

    @model_validator(mode="after")
    def validate_distinct(self) -> "StatesConfig":
        if not self.opened.strip() or not self.closed.strip():
            raise ValueError("states.opened and states.closed must not be empty")
        if self.opened == self.closed:
            raise ValueError("states.opened and states.closed must differ")
        return self


class TemplatesConfig(BaseModel):
    """Comment texts. ``{commenter}`` and ``{action}`` are replaced literally."""

    model_config = ConfigDict(frozen=True)

    issue_no_permission: str = (
        "@{commenter} you can't {action} an issue unless you are the author of it or a collaborator."
    )
    pr_no_permission: str = (
        "@{commenter} you can't {action} a pull request unless you are the author of it or a collaborator."
    )
    issue_needs_linked_pr: str = (
        "@{commenter} this issue can not be closed until a pull request is linked to it."
    )
    list_linked_pr_failed: str = (
        "@{commenter} listing the pull requests linked to this issue failed, please try again."
    )

    @field_validator(
        "issue_no_permission",
        "pr_no_permission",
        "issue_needs_linked_pr",
        "list_linked_pr_failed",
    )
    @classmethod
    def validate_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("comment templates must not be empty")
        return value


class RepoPolicyConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    # Entries are "org" or "org/repo"; shell-style globs are accepted.
    repos: list[str]
    excluded_repos: list[str] = Field(default_factory=list)
    need_issue_has_a_linked_pr: bool = False

    @field_validator("repos")
    @classmethod
    def validate_repos(cls, value: list[str]) -> list[str]:
        names = [name.strip() for name in value if name and name.strip()]
        if not names:
            raise ValueError("repos must be a non-empty list")
        return names

    @field_validator("excluded_repos")
    @classmethod
    def validate_excluded_repos(cls, value: list[str]) -> list[str]:
        return [name.strip() for name in value if name and name.strip()]


class BotConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    runtime: RuntimeConfig = Field(default_factory=RuntimeConfig)
    github: GitHubConfig
    webhook: WebhookConfig = Field(default_factory=WebhookConfig)
    states: StatesConfig = Field(default_factory=StatesConfig)
    templates: TemplatesConfig = Field(default_factory=TemplatesConfig)
    policies: list[RepoPolicyConfig]

    @field_validator("policies")
    @classmethod
    def validate_policies(cls, value: list[RepoPolicyConfig]) -> list[RepoPolicyConfig]:
        if not value:
            raise ValueError("policies must not be empty")
        return value
