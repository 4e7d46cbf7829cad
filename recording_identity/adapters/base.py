"""Base types for adapters.

This module defines the LedgerSink protocol and WriteResult model
used by adapters that write ledger rows to external systems.
"""

from typing import Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

from recording_identity.reconciliation.schemas import LedgerRow


class WriteResult(BaseModel):
    """Result of a write operation to an external system.

    Captures success/failure status along with metadata about
    the write operation (external IDs, URLs, timing).
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    success: bool = Field(description="Whether the write succeeded")
    dry_run: bool = Field(default=False, description="True if this was a dry run")
    item_count: int = Field(default=0, description="Number of rows written")
    external_id: str | None = Field(
        default=None, description="External ID (spreadsheet ID)"
    )
    url: str | None = Field(default=None, description="Web view link if available")
    tabs_written: list[str] = Field(
        default_factory=list, description="Worksheets fully written, in write order"
    )
    error_message: str | None = Field(
        default=None, description="Error message if failed"
    )
    duration_ms: int | None = Field(
        default=None, description="Operation duration in milliseconds"
    )


@runtime_checkable
class LedgerSink(Protocol):
    """Protocol for destinations that accept ledger rows.

    Sinks implement this protocol for structural subtyping -
    they don't need to inherit, just implement the methods.
    """

    async def write_rows(
        self, spreadsheet_id: str, rows: list[LedgerRow], *, dry_run: bool = False
    ) -> WriteResult:
        """Append ledger rows.

        Args:
            spreadsheet_id: Destination spreadsheet
            rows: Rows to append
            dry_run: If True, validate but don't actually write

        Returns:
            WriteResult with operation outcome
        """
        ...

    async def health_check(self) -> bool:
        """Check if the sink is configured and can connect."""
        ...
