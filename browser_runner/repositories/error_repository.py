"""Run error repository."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from browser_runner.repositories.base import BaseRepository


class RunError:
    """Run error entity model."""

    def __init__(
        self,
        id: int,
        run_id: int,
        error_type: str,
        error_message: str,
        error_details: Optional[str] = None,
        error_code: Optional[str] = None,
        occurred_at: Optional[datetime] = None,
    ):
        """Initialize run error entity."""
        self.id = id
        self.run_id = run_id
        self.error_type = error_type
        self.error_message = error_message
        self.error_details = error_details
        self.error_code = error_code
        self.occurred_at = occurred_at

    def to_dict(self) -> Dict[str, Any]:
        """Convert run error to dictionary."""
        return {
            "id": self.id,
            "run_id": self.run_id,
            "error_type": self.error_type,
            "error_message": self.error_message,
            "error_details": self.error_details,
            "error_code": self.error_code,
            "occurred_at": self.occurred_at,
        }


class RunErrorRepository(BaseRepository[RunError]):
    """Repository for ``browser_automation_run_errors``."""

    def _row_to_error(self, row: Any) -> RunError:
        return RunError(
            id=row["id"],
            run_id=row["run_id"],
            error_type=row["error_type"],
            error_message=row["error_message"],
            error_details=row.get("error_details"),
            error_code=row.get("error_code"),
            occurred_at=row.get("occurred_at"),
        )

    async def get_by_id(self, id: int) -> Optional[RunError]:
        """
        Get error by ID.

        Args:
            id: Error ID

        Returns:
            RunError or None if not found
        """
        async with self.db.get_connection() as conn:
            row = await conn.fetchrow(
                "SELECT * FROM browser_automation_run_errors WHERE id = $1", id
            )
            return self._row_to_error(row) if row else None

    async def get_all(self, limit: int = 100) -> List[RunError]:
        """
        Get most recent errors.

        Args:
            limit: Maximum number of errors to return

        Returns:
            List of errors
        """
        async with self.db.get_connection() as conn:
            rows = await conn.fetch(
                "SELECT * FROM browser_automation_run_errors ORDER BY occurred_at DESC LIMIT $1",
                limit,
            )
            return [self._row_to_error(row) for row in rows]

    async def get_by_run_id(self, run_id: int) -> List[RunError]:
        """
        Get the errors recorded for a run.

        Args:
            run_id: Run ID

        Returns:
            List of errors
        """
        async with self.db.get_connection() as conn:
            rows = await conn.fetch(
                "SELECT * FROM browser_automation_run_errors WHERE run_id = $1 ORDER BY id",
                run_id,
            )
            return [self._row_to_error(row) for row in rows]

    async def insert(
        self,
        run_id: int,
        error_message: str,
        error_details: Optional[str],
        error_code: Optional[str],
        error_type: str,
    ) -> int:
        """
        Write the classified error of a failed run.

        Args:
            run_id: Run ID
            error_message: Human-readable message
            error_details: Original failure text kept for diagnosis
            error_code: Stable reference (e.g. "S001"), if any
            error_type: Classified error code (e.g. "EXTERNAL_ERROR")

        Returns:
            Created error ID
        """
        async with self.db.get_connection() as conn:
            return await conn.fetchval(
                """
                INSERT INTO browser_automation_run_errors
                    (run_id, error_type, error_message, error_details, error_code)
                VALUES ($1, $2, $3, $4, $5)
                RETURNING id
                """,
                run_id,
                error_type,
                error_message,
                error_details,
                error_code,
            )
