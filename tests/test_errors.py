"""
Tests for the VortexTau error handling module.
"""

from fastapi import FastAPI
from starlette.testclient import TestClient

from vortextau.errors import (
    ErrorCode,
    VortexError,
    ValidationError,
    ConfigurationError,
    RetrievalError,
    GenerationError,
    PersistenceError,
    ParseError,
    NotFoundError,
    error_response,
    success_response,
    install_exception_handlers,
)


class TestErrorCodes:
    """Test error code enum."""

    def test_error_codes_are_strings(self):
        assert ErrorCode.VALIDATION_INPUT_TOO_LONG.value == "VALIDATION_INPUT_TOO_LONG"
        assert ErrorCode.CONFIG_MISSING_CREDENTIAL == "CONFIG_MISSING_CREDENTIAL"

    def test_error_codes_have_categories(self):
        """Every code carries its category prefix."""
        prefixes = ("VALIDATION_", "CONFIG_", "RETRIEVAL_", "GENERATION_", "PERSISTENCE_", "PARSE_", "NOT_FOUND_", "INTERNAL_")
        assert all(c.value.startswith(prefixes) for c in ErrorCode)


class TestVortexError:
    """Test base VortexError exception."""

    def test_basic_creation(self):
        err = VortexError("Test error")
        assert err.message == "Test error"
        assert err.details is None
        assert err.code == ErrorCode.INTERNAL_UNEXPECTED
        assert err.recoverable is False
        assert err.status_code == 500

    def test_with_context(self):
        err = VortexError("Test error", foo="bar", count=42)
        assert err.context == {"foo": "bar", "count": 42}

    def test_str_representation(self):
        assert str(VortexError("Test error", details="More info")) == "Test error - More info"
        assert str(VortexError("Test error")) == "Test error"

    def test_to_dict(self):
        d = VortexError("Test error", details="More info", key="value").to_dict()
        assert d == {
            "code": "INTERNAL_UNEXPECTED",
            "message": "Test error",
            "details": "More info",
            "recoverable": False,
            "context": {"key": "value"},
        }

    def test_override_code_and_recoverable(self):
        err = VortexError("x", code=ErrorCode.PARSE_JSON_FAILED, recoverable=True)
        assert err.code == ErrorCode.PARSE_JSON_FAILED
        assert err.recoverable is True


class TestSubclasses:
    """Codes and statuses chosen by each subclass."""

    def test_validation_reasons(self):
        assert ValidationError("x", reason="empty").code == ErrorCode.VALIDATION_EMPTY_INPUT
        assert ValidationError("x", reason="too_long").code == ErrorCode.VALIDATION_INPUT_TOO_LONG
        err = ValidationError("x", parameter="message")
        assert err.code == ErrorCode.VALIDATION_INVALID_FORMAT
        assert err.context == {"parameter": "message"}
        assert err.status_code == 400

    def test_configuration_error(self):
        err = ConfigurationError("SERP API key not configured", setting="SERP_API_KEY")
        assert err.code == ErrorCode.CONFIG_MISSING_CREDENTIAL
        assert err.recoverable is False
        assert err.context == {"setting": "SERP_API_KEY"}

    def test_retrieval_error_types(self):
        assert RetrievalError("x").code == ErrorCode.RETRIEVAL_NETWORK_ERROR
        err = RetrievalError("x", status=502, error_type="status")
        assert err.code == ErrorCode.RETRIEVAL_BAD_STATUS
        assert err.context == {"status": 502}
        assert RetrievalError("x", error_type="response").code == ErrorCode.RETRIEVAL_BAD_RESPONSE

    def test_generation_error_types(self):
        assert GenerationError("x").code == ErrorCode.GENERATION_STREAM_FAILED
        assert GenerationError("x", error_type="unavailable").code == ErrorCode.GENERATION_UNAVAILABLE
        assert GenerationError("x", error_type="truncated").code == ErrorCode.GENERATION_STREAM_TRUNCATED
        assert GenerationError("x", model="m").context == {"model": "m"}

    def test_persistence_error_operation(self):
        assert PersistenceError("x", operation="read").code == ErrorCode.PERSISTENCE_READ_FAILED
        assert PersistenceError("x").code == ErrorCode.PERSISTENCE_WRITE_FAILED

    def test_parse_error_source(self):
        assert ParseError("x").code == ErrorCode.PARSE_JSON_FAILED
        assert ParseError("x", source="stream").code == ErrorCode.PARSE_STREAM_EVENT

    def test_not_found_resource_type(self):
        err = NotFoundError("x", resource_type="shared_chat", resource_id="abc")
        assert err.code == ErrorCode.NOT_FOUND_SHARED_CHAT
        assert err.status_code == 404
        assert NotFoundError("x", resource_type="chat").code == ErrorCode.NOT_FOUND_CHAT

    def test_all_inherit_from_base(self):
        for cls in (ValidationError, ConfigurationError, RetrievalError, GenerationError, PersistenceError, ParseError, NotFoundError):
            assert issubclass(cls, VortexError)


class TestResponses:
    """Test response builders."""

    def test_error_response_from_vortex_error(self):
        resp = error_response(ConfigurationError("SERP API key not configured"))
        assert resp == {"error": "SERP API key not configured", "code": "CONFIG_MISSING_CREDENTIAL", "recoverable": False}

    def test_error_response_message_override(self):
        resp = error_response(RetrievalError("upstream 502"), "Failed to fetch search results")
        assert resp["error"] == "Failed to fetch search results"
        assert resp["code"] == "RETRIEVAL_NETWORK_ERROR"

    def test_error_response_hides_foreign_exception(self):
        resp = error_response(RuntimeError("secret path /etc/x"))
        assert resp["error"] == "Internal server error"
        assert resp["code"] == "INTERNAL_UNEXPECTED"
        assert "secret" not in str(resp)

    def test_success_response(self):
        assert success_response(shareId="abc") == {"shareId": "abc"}
        assert success_response({"a": 1}, b=2) == {"a": 1, "b": 2}
        assert success_response() == {}


class TestExceptionHandlers:
    """VortexError raised in a route becomes a JSON response with its status."""

    def _app(self, exc):
        app = FastAPI()
        install_exception_handlers(app)

        @app.get("/boom")
        def boom():
            raise exc

        return TestClient(app)

    def test_not_found_maps_to_404(self):
        resp = self._app(NotFoundError("Shared chat not found", resource_type="shared_chat")).get("/boom")
        assert resp.status_code == 404
        assert resp.json()["error"] == "Shared chat not found"
        assert resp.json()["code"] == "NOT_FOUND_SHARED_CHAT"

    def test_validation_maps_to_400(self):
        resp = self._app(ValidationError("Invalid share id")).get("/boom")
        assert resp.status_code == 400
