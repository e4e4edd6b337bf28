"""Structured logging for trip and destination mutations."""

import logging
from typing import Any

logger = logging.getLogger(__name__)


class StructuredMutationLogger:
    """Structured logger for engine mutations."""

    def log_mutation(
        self,
        *,
        entity: str,
        operation: str,
        outcome: str,
        name: str | None = None,
        **fields: Any,
    ) -> None:
        """Log a mutation attempt with structured data.

        Accepted mutations go out at DEBUG, rejections at INFO. Rejections are
        always raised to the caller as well; logging never replaces the error.
        """
        log_data: dict[str, Any] = {
            "entity": entity,
            "operation": operation,
            "outcome": outcome,
        }
        if name is not None:
            log_data["name"] = name
        log_data.update(fields)

        log_msg = f"{entity}.{operation} - {outcome}"

        if outcome == "accepted":
            logger.debug(log_msg, extra={"structured": log_data})
        else:
            logger.info(log_msg, extra={"structured": log_data})


mutation_log = StructuredMutationLogger()
