"""Browser automation run repository."""

from typing import Any, Dict, List, Optional

from loguru import logger

from browser_runner.core.enums import RunStatus, SessionStatus
from browser_runner.models.database import Database
from browser_runner.models.run import RunRecord
from browser_runner.repositories.base import BaseRepository

_RUN_COLUMNS = """
    id, browser_config_id, user_id, tenant, type, payload, status, scheduled_at,
    created_at, updated_at, started_at, finished_at, run_duration, retry_count,
    triggered_by, priority, log_location
"""


class RunRepository(BaseRepository[RunRecord]):
    """Repository for ``browser_automation_runs``."""

    async def get_by_id(self, id: int) -> Optional[RunRecord]:
        """
        Get run by ID.

        Args:
            id: Run ID

        Returns:
            RunRecord or None if not found
        """
        async with self.db.get_connection() as conn:
            row = await conn.fetchrow(
                f"SELECT {_RUN_COLUMNS} FROM browser_automation_runs WHERE id = $1",
                id,
            )
            return RunRecord.from_row(row) if row else None

    async def get_all(self, limit: int = 100) -> List[RunRecord]:
        """
        Get most recently created runs.

        Args:
            limit: Maximum number of runs to return

        Returns:
            List of runs
        """
        async with self.db.get_connection() as conn:
            rows = await conn.fetch(
                f"""
                SELECT {_RUN_COLUMNS} FROM browser_automation_runs
                ORDER BY created_at DESC
                LIMIT $1
                """,
                limit,
            )
            return [RunRecord.from_row(row) for row in rows]

    async def get_scheduled(self, limit: int = 50) -> List[RunRecord]:
        """
        Get runs waiting for dispatch, highest priority first.

        Runs without a schedule time are treated as due immediately. Runs whose
        browser session is not VALID are left for after re-authentication.

        Args:
            limit: Maximum number of runs to return

        Returns:
            Due SCHEDULED runs ordered by priority then schedule time
        """
        async with self.db.get_connection() as conn:
            rows = await conn.fetch(
                f"""
                SELECT {_RUN_COLUMNS} FROM browser_automation_runs r
                WHERE r.status = $1
                  AND (r.scheduled_at IS NULL OR r.scheduled_at <= NOW())
                  AND NOT EXISTS (
                      SELECT 1 FROM browser_configs c
                      WHERE c.id = r.browser_config_id AND c.session_status <> $3
                  )
                ORDER BY r.priority DESC, r.scheduled_at ASC NULLS FIRST, r.id ASC
                LIMIT $2
                """,
                RunStatus.SCHEDULED.value,
                limit,
                SessionStatus.VALID.value,
            )
            return [RunRecord.from_row(row) for row in rows]

    async def list_for_user(self, user_id: str, tenant: str, limit: int = 100) -> List[RunRecord]:
        """
        List a user's runs, newest first.

        Args:
            user_id: Owning user
            tenant: Owning tenant
            limit: Maximum number of runs to return

        Returns:
            List of runs
        """
        async with self.db.get_connection() as conn:
            rows = await conn.fetch(
                f"""
                SELECT {_RUN_COLUMNS} FROM browser_automation_runs
                WHERE user_id = $1 AND tenant = $2
                ORDER BY created_at DESC
                LIMIT $3
                """,
                user_id,
                tenant,
                limit,
            )
            return [RunRecord.from_row(row) for row in rows]

    async def create(self, data: Dict[str, Any]) -> int:
        """
        Create a new SCHEDULED run.

        Args:
            data: Run data (browser_config_id, user_id, tenant, type, payload,
                scheduled_at, priority, triggered_by)

        Returns:
            Created run ID

        Raises:
            ValueError: If required fields are missing
        """
        required = ("browser_config_id", "user_id", "tenant", "type")
        missing = [key for key in required if data.get(key) is None]
        if missing:
            raise ValueError(f"Missing required run fields: {', '.join(missing)}")

        async with self.db.get_connection() as conn:
            run_id = await conn.fetchval(
                """
                INSERT INTO browser_automation_runs
                    (browser_config_id, user_id, tenant, type, payload, status,
                     scheduled_at, priority, triggered_by)
                VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9)
                RETURNING id
                """,
                data["browser_config_id"],
                data["user_id"],
                data["tenant"],
                data["type"],
                data.get("payload"),
                RunStatus.SCHEDULED.value,
                data.get("scheduled_at"),
                data.get("priority", 0),
                data.get("triggered_by"),
            )
            logger.info(f"Run created: {run_id} ({data['type']})")
            return run_id

    async def update_by_id(self, run: RunRecord) -> bool:
        """
        Persist a run's lifecycle fields.

        Args:
            run: Run whose status and timing fields should be written

        Returns:
            True if a row was updated
        """
        async with self.db.get_connection() as conn:
            result = await conn.execute(
                """
                UPDATE browser_automation_runs
                SET status = $1,
                    started_at = $2,
                    finished_at = $3,
                    run_duration = $4,
                    retry_count = $5,
                    log_location = $6,
                    updated_at = COALESCE($7, NOW())
                WHERE id = $8
                """,
                run.status.value,
                run.started_at,
                run.finished_at,
                run.run_duration,
                run.retry_count,
                run.log_location,
                run.updated_at,
                run.id,
            )
            return Database.parse_command_tag(result) > 0
