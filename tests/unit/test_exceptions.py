"""Unit tests for custom exception hierarchy"""
import logging
from datetime import datetime

from skill_tracker.exceptions import (
    SkillTrackerError,
    ValidationError,
    FormatError,
    StorageError,
    ConfigurationError,
)


class TestSkillTrackerError:
    """Test base exception class"""

    def test_basic_exception(self):
        """Test basic exception creation"""
        error = SkillTrackerError("Test error")
        assert error.message == "Test error"
        assert error.user_message == "Something went wrong while updating your tracker."
        assert error.request_id is not None
        assert isinstance(error.timestamp, datetime)
        assert error.timestamp.tzinfo is not None

    def test_exception_with_context(self):
        """Test exception with full context"""
        error = SkillTrackerError(
            message="Import failed",
            request_id="req-1",
            operation="import_snapshot",
            context={"size": 1024},
            user_message="Could not import your data"
        )
        assert error.request_id == "req-1"
        assert error.operation == "import_snapshot"
        assert error.context["size"] == 1024
        assert error.user_message == "Could not import your data"

    def test_exception_with_cause(self):
        """Test exception wrapping another exception"""
        original_error = ValueError("Invalid value")
        error = SkillTrackerError(message="Validation failed", cause=original_error)
        assert error.cause is original_error

    def test_to_dict(self):
        """Test exception serialization"""
        error_dict = SkillTrackerError(message="Test error").to_dict()
        assert error_dict["error"] == "SkillTrackerError"
        assert error_dict["message"] == "Test error"
        assert "request_id" in error_dict
        assert "timestamp" in error_dict
        assert "operation" not in error_dict

    def test_to_dict_includes_operation_and_context(self):
        error_dict = SkillTrackerError(
            message="Import failed",
            operation="import_snapshot",
            context={"stage": "json"}
        ).to_dict()
        assert error_dict["operation"] == "import_snapshot"
        assert error_dict["context"] == {"stage": "json"}

    def test_logs_on_creation(self, caplog):
        """Test that creating an error logs it"""
        with caplog.at_level(logging.ERROR, logger="skill_tracker.exceptions"):
            SkillTrackerError(message="Something broke", operation="test")

        assert "SkillTrackerError during test: Something broke" in caplog.text


class TestSubclasses:
    """Test specialised errors"""

    def test_validation_error(self):
        """Test validation error with field"""
        error = ValidationError(message="Habit name cannot be empty", field="name", value="  ")
        assert error.field == "name"
        assert error.value == "  "
        assert error.context == {"field": "name", "value": "  "}
        assert "Invalid name" in error.user_message
        assert isinstance(error, SkillTrackerError)

    def test_format_error_stage(self):
        error = FormatError(message="Bad JSON", stage="json", operation="import_snapshot")
        assert error.stage == "json"
        assert error.context == {"stage": "json"}
        assert error.operation == "import_snapshot"

    def test_storage_error(self):
        cause = OSError("disk full")
        error = StorageError(message="Write failed", key="skill_tracker.skills", cause=cause)
        assert error.key == "skill_tracker.skills"
        assert error.cause is cause
        assert "saved" in error.user_message

    def test_configuration_error(self):
        error = ConfigurationError(message="Bad timezone", config_key="TRACKER_TIMEZONE")
        assert error.config_key == "TRACKER_TIMEZONE"
        assert error.to_dict()["error"] == "ConfigurationError"
