"""
Pipeline Errors

Every error aborts the run. Each carries the stage it was raised in plus
whatever context (file path, column, dtype) is needed to diagnose it.
"""

from typing import Any, Dict, Optional


class PipelineError(Exception):
    """Base class for all pipeline failures."""

    stage: str = "pipeline"

    def __init__(self, message: str, stage: Optional[str] = None, **context: Any):
        super().__init__(message)
        self.message = message
        if stage is not None:
            self.stage = stage
        self.context: Dict[str, Any] = context

    def to_log(self) -> Dict[str, Any]:
        """Key/value view for structured logging"""
        return {"error": self.message, "stage": self.stage, **self.context}


class SourceNotFoundError(PipelineError):
    """Raised when an input directory or file is missing."""
    stage = "load"


class SchemaMismatchError(PipelineError):
    """Raised when column sets disagree or column names collide."""
    stage = "load"


class ColumnNotFoundError(PipelineError):
    """Raised when an expected column is absent."""
    pass


class JoinKeyTypeError(PipelineError):
    """Raised when join keys have incompatible dtypes."""
    stage = "join"


class DuplicateKeyError(PipelineError):
    """Raised when a reference table key is not unique."""
    stage = "join"


class WriteError(PipelineError):
    """Raised when the output artifact cannot be persisted."""
    stage = "persist"
