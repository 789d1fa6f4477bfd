"""Timing models for per-file compile tracking."""

from pydantic import BaseModel, Field


class TimestampEvent(BaseModel):
    """A labelled point in time during a file's compilation."""

    label: str
    time_ms: float


class FileStat(BaseModel):
    """Timing record for one successfully compiled file.

    Attributes:
        filename: Absolute path of the compiled file
        package_name: Owning package, filled in when the report is built
        timestamps: Events in the order they were recorded
    """

    filename: str
    package_name: str | None = None
    timestamps: list[TimestampEvent] = Field(default_factory=list)


class PackageStats(BaseModel):
    """Aggregated compile cost for one package."""

    name: str
    file_count: int = Field(default=0, description="Number of compiled files")
    compile_time_ms: float = Field(default=0.0, description="Summed compile time in ms")

    @property
    def average_ms(self) -> float:
        """Mean compile time per file."""
        return self.compile_time_ms / self.file_count if self.file_count else 0.0
