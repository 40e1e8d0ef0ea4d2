"""
Error types raised by the skill tracker

Only two kinds ever reach a caller: ValidationError for bad input to a
mutator and FormatError for a rejected import. StorageError stops at the
repository and ConfigurationError at CLI start-up.
"""

from datetime import datetime, timezone
from typing import Optional, Dict, Any
from uuid import uuid4
import logging

logger = logging.getLogger(__name__)


class SkillTrackerError(Exception):
    """
    Root of the tracker's error types

    Every instance carries an error id, the operation that failed and a
    context dict, and is logged once when created, so that a swallowed
    StorageError still leaves a trace.

    Example:
        raise SkillTrackerError(
            message="Failed to import snapshot",
            operation="import_snapshot",
            context={"size": 1024}
        )
    """

    def __init__(
        self,
        message: str,
        request_id: Optional[str] = None,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        user_message: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.request_id = request_id or str(uuid4())
        self.operation = operation
        self.context = context or {}
        self.cause = cause
        self.user_message = user_message or "Something went wrong while updating your tracker."
        self.timestamp = datetime.now(timezone.utc)

        self._log_error()

    def _log_error(self) -> None:
        where = f" during {self.operation}" if self.operation else ""
        extra = {
            "error_type": self.__class__.__name__,
            "request_id": self.request_id,
            "operation": self.operation,
            "error_context": self.context,
        }
        # Tracebacks only when wrapping a lower-level failure
        logger.error(
            f"{self.__class__.__name__}{where}: {self.message}",
            extra=extra,
            exc_info=self.cause,
        )

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready form printed by the CLI"""
        data = {
            "error": self.__class__.__name__,
            "message": self.message,
            "user_message": self.user_message,
            "request_id": self.request_id,
            "timestamp": self.timestamp.isoformat(),
        }
        if self.operation:
            data["operation"] = self.operation
        if self.context:
            data["context"] = self.context
        return data


# ==========================================
# Validation Errors (Caller Input)
# ==========================================

class ValidationError(SkillTrackerError):
    """
    Raised when caller input to a mutator is invalid

    Examples:
    - Empty habit or skill name
    - Unknown habit id on edit
    - Reorder index out of range

    Example:
        raise ValidationError(
            message="Habit name cannot be empty",
            field="name",
            value="   "
        )
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        **kwargs
    ):
        self.field = field
        self.value = value
        super().__init__(
            message=message,
            user_message=f"Invalid {field}: {message}" if field else message,
            context={"field": field, "value": value},
            **kwargs
        )


# ==========================================
# Import/Export Format Errors
# ==========================================

class FormatError(SkillTrackerError):
    """
    Snapshot document could not be decoded

    Raised for UTF-8 failures, malformed JSON and schema mismatches.
    The import that raised it has made no state change.
    """

    def __init__(
        self,
        message: str,
        stage: Optional[str] = None,
        **kwargs
    ):
        self.stage = stage
        super().__init__(
            message=message,
            user_message="The imported data is not a valid skill-tracker export.",
            context={"stage": stage},
            **kwargs
        )


# ==========================================
# Storage Errors
# ==========================================

class StorageError(SkillTrackerError):
    """Key-value store read or write failed"""

    def __init__(
        self,
        message: str,
        key: Optional[str] = None,
        **kwargs
    ):
        self.key = key
        super().__init__(
            message=message,
            user_message="Your data could not be saved right now. It will be saved on the next change.",
            context={"key": key},
            **kwargs
        )


# ==========================================
# Configuration Errors
# ==========================================

class ConfigurationError(SkillTrackerError):
    """System configuration is invalid or missing"""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        **kwargs
    ):
        self.config_key = config_key
        super().__init__(
            message=message,
            user_message="The tracker is not properly configured. Check your environment settings.",
            context={"config_key": config_key},
            **kwargs
        )
