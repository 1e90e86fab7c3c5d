"""Run result repository."""

import json
from datetime import datetime
from typing import Any, Dict, List, Optional

from browser_runner.core.enums import RunStatus
from browser_runner.models.database import Database
from browser_runner.repositories.base import BaseRepository


class RunResult:
    """Run result entity model."""

    def __init__(
        self,
        id: int,
        run_id: int,
        type: str,
        result_data: Optional[str],
        is_processed: bool = False,
        created_at: Optional[datetime] = None,
    ):
        """Initialize run result entity."""
        self.id = id
        self.run_id = run_id
        self.type = type
        self.result_data = result_data
        self.is_processed = is_processed
        self.created_at = created_at

    @property
    def data(self) -> Any:
        """Decoded result payload."""
        return json.loads(self.result_data) if self.result_data else None

    def to_dict(self) -> Dict[str, Any]:
        """Convert run result to dictionary."""
        return {
            "id": self.id,
            "run_id": self.run_id,
            "type": self.type,
            "result_data": self.data,
            "is_processed": self.is_processed,
            "created_at": self.created_at,
        }


class RunResultRepository(BaseRepository[RunResult]):
    """Repository for ``browser_automation_run_results``."""

    def _row_to_result(self, row: Any) -> RunResult:
        return RunResult(
            id=row["id"],
            run_id=row["run_id"],
            type=row["type"],
            result_data=row.get("result_data"),
            is_processed=bool(row.get("is_processed", False)),
            created_at=row.get("created_at"),
        )

    async def get_by_id(self, id: int) -> Optional[RunResult]:
        """
        Get result by ID.

        Args:
            id: Result ID

        Returns:
            RunResult or None if not found
        """
        async with self.db.get_connection() as conn:
            row = await conn.fetchrow(
                "SELECT * FROM browser_automation_run_results WHERE id = $1", id
            )
            return self._row_to_result(row) if row else None

    async def get_all(self, limit: int = 100) -> List[RunResult]:
        """
        Get most recent results.

        Args:
            limit: Maximum number of results to return

        Returns:
            List of results
        """
        async with self.db.get_connection() as conn:
            rows = await conn.fetch(
                "SELECT * FROM browser_automation_run_results ORDER BY created_at DESC LIMIT $1",
                limit,
            )
            return [self._row_to_result(row) for row in rows]

    async def get_by_run_id(self, run_id: int) -> List[RunResult]:
        """
        Get the results written for a run.

        Args:
            run_id: Run ID

        Returns:
            List of results (at most one for a run executed by the runner)
        """
        async with self.db.get_connection() as conn:
            rows = await conn.fetch(
                "SELECT * FROM browser_automation_run_results WHERE run_id = $1 ORDER BY id",
                run_id,
            )
            return [self._row_to_result(row) for row in rows]

    async def get_unprocessed(self, run_type: str, limit: int = 100) -> List[RunResult]:
        """
        Get results of one type not yet consumed downstream.

        Args:
            run_type: Run type of the results
            limit: Maximum number of results to return

        Returns:
            List of unprocessed results, oldest first
        """
        async with self.db.get_connection() as conn:
            rows = await conn.fetch(
                """
                SELECT * FROM browser_automation_run_results
                WHERE type = $1 AND is_processed = FALSE
                ORDER BY created_at ASC
                LIMIT $2
                """,
                run_type,
                limit,
            )
            return [self._row_to_result(row) for row in rows]

    async def insert(self, run_id: int, run_type: str, result_data: Any) -> int:
        """
        Write the result of a successful run.

        Args:
            run_id: Run ID
            run_type: Run type
            result_data: JSON-serializable result payload

        Returns:
            Created result ID
        """
        async with self.db.get_connection() as conn:
            return await conn.fetchval(
                """
                INSERT INTO browser_automation_run_results (run_id, type, result_data)
                VALUES ($1, $2, $3)
                RETURNING id
                """,
                run_id,
                run_type,
                json.dumps(result_data, default=str),
            )

    async def mark_processed(self, run_id: int) -> bool:
        """
        Flag a run's result as consumed and move the run to PROCESSED.

        Both writes happen in one transaction.

        Args:
            run_id: Run ID

        Returns:
            True if a COMPLETED run was moved to PROCESSED
        """
        async with self.db.get_connection() as conn:
            async with conn.transaction():
                await conn.execute(
                    "UPDATE browser_automation_run_results SET is_processed = TRUE WHERE run_id = $1",
                    run_id,
                )
                result = await conn.execute(
                    """
                    UPDATE browser_automation_runs
                    SET status = $1, updated_at = NOW()
                    WHERE id = $2 AND status = $3
                    """,
                    RunStatus.PROCESSED.value,
                    run_id,
                    RunStatus.COMPLETED.value,
                )
            return Database.parse_command_tag(result) > 0
