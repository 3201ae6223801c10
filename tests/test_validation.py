"""
Tests for input validation and startup checks.
"""

import uuid

import pytest

from vortextau.config import RuntimeConfig
from vortextau.errors import ErrorCode, ValidationError
from vortextau.validation import MAX_INPUT_LENGTH, validate_share_id, validate_startup, validate_user_text


class TestUserText:
    def test_accepts_normal_text(self):
        assert validate_user_text("Hello") == "Hello"

    @pytest.mark.parametrize("text", ["", "   ", "\n\t", None])
    def test_rejects_empty(self, text):
        with pytest.raises(ValidationError) as exc:
            validate_user_text(text)
        assert exc.value.code == ErrorCode.VALIDATION_EMPTY_INPUT

    def test_boundary(self):
        assert validate_user_text("a" * MAX_INPUT_LENGTH)
        with pytest.raises(ValidationError) as exc:
            validate_user_text("a" * (MAX_INPUT_LENGTH + 1))
        assert exc.value.code == ErrorCode.VALIDATION_INPUT_TOO_LONG
        assert exc.value.message == "Message too long (max 5,000 characters)"

    def test_counts_code_points_not_bytes(self):
        assert validate_user_text("🙂" * MAX_INPUT_LENGTH)

    def test_custom_limit(self):
        with pytest.raises(ValidationError):
            validate_user_text("abcd", max_length=3)


class TestShareId:
    def test_valid(self):
        share_id = str(uuid.uuid4())
        assert validate_share_id(share_id.upper()) == share_id

    @pytest.mark.parametrize("bad", ["", "../secrets", "abc", "1234567890", str(uuid.uuid4()) + "/x"])
    def test_invalid(self, bad):
        with pytest.raises(ValidationError):
            validate_share_id(bad)


class TestStartup:
    def test_missing_key_is_a_warning_only(self, tmp_path):
        config = RuntimeConfig()
        config.serp_api_key = ""
        config.data_dir = str(tmp_path / "data")

        summary = validate_startup(config)

        assert summary["success"] is True
        assert summary["checks_performed"]["config"] is True
        assert any("SERP_API_KEY" in issue["message"] for issue in summary["issues"])

    def test_clean_config(self, tmp_path):
        config = RuntimeConfig()
        config.serp_api_key = "k"
        config.data_dir = str(tmp_path / "data")
        config.llm_timeout = 180
        config.default_model = "m"
        config.ollama_url = "http://localhost:11434"
        assert validate_startup(config)["warning_count"] == 0
