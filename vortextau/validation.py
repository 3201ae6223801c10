"""
VortexTau Validation - input checks and startup configuration checks.

Input checks raise ValidationError and run before any network call.
Startup checks never abort: the only hard requirement (the search
credential) is enforced per request by /search.

Usage:
    from vortextau.validation import validate_user_text, validate_startup
    text = validate_user_text(raw, max_length=5000)
    result = validate_startup()
"""

import logging
import re
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Any, List, Optional

from .errors import ValidationError

logger = logging.getLogger(__name__)

MAX_INPUT_LENGTH = 5000

# uuid4 hex with dashes; anything else could escape the share directory
_SHARE_ID_PATTERN = re.compile(r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$")


def validate_user_text(text: Optional[str], max_length: int = MAX_INPUT_LENGTH) -> str:
    """Check a user turn before anything is sent anywhere.

    Length is counted in code points (len() of a str).

    Raises:
        ValidationError: empty, whitespace-only, or longer than max_length
    """
    if text is None or not text.strip():
        raise ValidationError("Message is empty", parameter="message", reason="empty")
    if len(text) > max_length:
        raise ValidationError(
            f"Message too long (max {max_length:,} characters)",
            details=f"Received {len(text):,} characters",
            parameter="message",
            reason="too_long",
        )
    return text


def validate_share_id(share_id: str) -> str:
    """Validate a share id before it is turned into a file path."""
    if not share_id or not _SHARE_ID_PATTERN.match(share_id):
        raise ValidationError("Invalid share id", parameter="shareId")
    return share_id.lower()


# =============================================================================
# STARTUP VALIDATION
# =============================================================================


@dataclass
class ValidationIssue:
    """A single validation issue."""

    category: str
    severity: str  # "critical" or "warning"
    message: str
    details: Optional[str] = None


@dataclass
class ValidationResult:
    """Result of startup validation."""

    success: bool
    issues: List[ValidationIssue] = field(default_factory=list)
    checks_performed: Dict[str, bool] = field(default_factory=dict)
    duration_ms: float = 0.0

    def add_issue(self, category: str, severity: str, message: str, details: Optional[str] = None) -> None:
        self.issues.append(ValidationIssue(category=category, severity=severity, message=message, details=details))

    def get_warnings(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity == "warning"]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "success": self.success,
            "duration_ms": round(self.duration_ms, 2),
            "checks_performed": self.checks_performed,
            "warning_count": len(self.get_warnings()),
            "issues": [
                {"category": i.category, "severity": i.severity, "message": i.message, "details": i.details}
                for i in self.issues
            ],
        }


def validate_config(result: ValidationResult, config=None) -> None:
    """
    Validate configuration settings.

    Checks:
    - Search credential present (only /search depends on it)
    - Default model and backend URL set
    - Data directory parent exists
    - Timeout values are sensible
    """
    if config is None:
        from .config import runtime_config as config

    if not config.serp_api_key:
        result.add_issue(
            "config",
            "warning",
            "SERP_API_KEY is not set",
            details="/search will answer 500 and turns will not be augmented with web results",
        )

    if not config.default_model.strip():
        result.add_issue("config", "warning", "No default model configured", details="Set VORTEXTAU_DEFAULT_MODEL")

    if not config.ollama_url.startswith(("http://", "https://")):
        result.add_issue("config", "warning", f"Backend URL looks invalid: {config.ollama_url!r}")

    if config.llm_timeout < 30:
        result.add_issue(
            "config",
            "warning",
            f"LLM timeout ({config.llm_timeout}s) is very short",
            details="Long answers may be cut off mid-stream",
        )

    data_dir = Path(config.data_dir)
    if not data_dir.parent.exists():
        result.add_issue("config", "warning", f"Parent directory for data dir doesn't exist: {data_dir.parent}")

    result.checks_performed["config"] = True


def validate_startup(config=None) -> Dict[str, Any]:
    """
    Run all startup validation checks and log warnings.

    Returns:
        Dict with validation results summary
    """
    start_time = time.perf_counter()
    result = ValidationResult(success=True)

    validate_config(result, config)

    result.duration_ms = (time.perf_counter() - start_time) * 1000

    warnings = result.get_warnings()
    for w in warnings:
        logger.warning(f"Validation warning [{w.category}]: {w.message}")
        if w.details:
            logger.warning(f"  Details: {w.details}")

    logger.info(f"Startup validation complete: {len(warnings)} warnings in {result.duration_ms:.1f}ms")
    return result.to_dict()
