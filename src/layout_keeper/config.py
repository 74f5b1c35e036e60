"""Configuration for layout-keeper."""

from pydantic import BaseModel, Field

# Windows that belong to the desktop itself rather than the user.
DEFAULT_EXCLUDE = ["nemo-desktop", "Desktop"]


class Config(BaseModel):
    """Runtime settings. All durations are in milliseconds."""

    original_width: int = Field(gt=0)
    original_height: int = Field(gt=0)

    poll_period_ms: int = Field(default=5000, ge=1)
    capture_debounce_ms: int = Field(default=2000, ge=0)
    restore_settle_ms: int = Field(default=2000, ge=0)

    exclude: list[str] = Field(default_factory=lambda: list(DEFAULT_EXCLUDE))

    escalation_target: str | None = None
    escalation_delay_ms: int = Field(default=0, ge=0)

    # Window manager quirks
    fullscreen_settle_ms: int = Field(default=1000, ge=0)
    activate_refresh_ms: int = Field(default=3000, ge=0)

    @property
    def original_size(self) -> tuple[int, int]:
        return (self.original_width, self.original_height)

    @property
    def poll_period(self) -> float:
        return self.poll_period_ms / 1000

    @property
    def capture_debounce(self) -> float:
        return self.capture_debounce_ms / 1000

    @property
    def restore_settle(self) -> float:
        return self.restore_settle_ms / 1000

    @property
    def escalation_delay(self) -> float:
        return self.escalation_delay_ms / 1000

    @property
    def fullscreen_settle(self) -> float:
        return self.fullscreen_settle_ms / 1000

    @property
    def activate_refresh(self) -> float:
        return self.activate_refresh_ms / 1000


def parse_exclude(value: str | None) -> list[str]:
    """Split a comma separated title list, dropping empty entries."""
    if not value:
        return []
    return [title for title in value.split(",") if title]
