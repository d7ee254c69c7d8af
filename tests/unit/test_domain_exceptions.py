"""Tests for domain and storage exceptions (error_code, message, details)."""

from app.domain.exceptions import (
    AuthenticationException,
    ClienteleException,
    ClientNotFoundException,
    CredentialException,
    EmailAlreadyExistsException,
    ResourceNotFoundException,
    ValidationException,
)
from app.infrastructure.exceptions import (
    IdentityProviderError,
    MediaNotFoundError,
    StorageDownloadError,
    StorageException,
    StorageUploadError,
)


def test_clientele_exception_default_error_code() -> None:
    """Base ClienteleException uses class name as error_code when not provided."""
    exc = ClienteleException("Something failed")
    assert exc.message == "Something failed"
    assert exc.error_code == "ClienteleException"
    assert exc.details == {}


def test_clientele_exception_custom_error_code_and_details() -> None:
    """ClienteleException accepts custom error_code and details."""
    exc = ClienteleException("Oops", error_code="CUSTOM", details={"key": "value"})
    assert exc.to_dict() == {
        "error": "CUSTOM",
        "message": "Oops",
        "details": {"key": "value"},
    }


def test_validation_exception() -> None:
    """ValidationException sets VALIDATION_ERROR and optional field in details."""
    exc = ValidationException("Invalid format", field="email")
    assert exc.error_code == "VALIDATION_ERROR"
    assert exc.details == {"field": "email"}


def test_validation_exception_without_field() -> None:
    exc = ValidationException("Invalid")
    assert exc.details == {}


def test_email_already_exists_is_validation_error() -> None:
    """Duplicate email is a ValidationException with its own code."""
    exc = EmailAlreadyExistsException()
    assert isinstance(exc, ValidationException)
    assert exc.error_code == "EMAIL_EXISTS"
    assert exc.details == {"field": "email"}


def test_authentication_exception() -> None:
    """AuthenticationException sets AUTHENTICATION_ERROR and default message."""
    exc = AuthenticationException()
    assert exc.message == "Authentication failed"
    assert exc.error_code == "AUTHENTICATION_ERROR"


def test_client_not_found_is_resource_not_found() -> None:
    exc = ClientNotFoundException("a@x.com", key="email")
    assert isinstance(exc, ResourceNotFoundException)
    assert exc.error_code == "RESOURCE_NOT_FOUND"
    assert exc.details == {
        "resource_type": "client",
        "resource_id": "a@x.com",
        "lookup_key": "email",
    }


def test_not_found_and_authentication_are_distinct() -> None:
    """Unknown account and wrong password never share a type or code."""
    not_found = ClientNotFoundException("x")
    auth = AuthenticationException()
    assert not isinstance(not_found, AuthenticationException)
    assert not isinstance(auth, ResourceNotFoundException)
    assert not_found.error_code != auth.error_code


def test_credential_exception() -> None:
    assert CredentialException("bad hash").error_code == "CREDENTIAL_ERROR"


def test_storage_exceptions() -> None:
    """Storage errors extend StorageException with distinct codes."""
    missing = MediaNotFoundError("m1")
    upload = StorageUploadError("a.png", "boom")
    download = StorageDownloadError("m1", "missing chunk 1 of 3")
    for exc in (missing, upload, download):
        assert isinstance(exc, StorageException)
        assert isinstance(exc, ClienteleException)
    assert missing.error_code == "MEDIA_NOT_FOUND"
    assert missing.details == {"object_id": "m1"}
    assert upload.error_code == "STORAGE_UPLOAD_ERROR"
    assert upload.details["reason"] == "boom"
    assert download.error_code == "STORAGE_DOWNLOAD_ERROR"


def test_identity_provider_error_is_not_storage() -> None:
    exc = IdentityProviderError("google", "timeout")
    assert not isinstance(exc, StorageException)
    assert exc.error_code == "IDENTITY_PROVIDER_ERROR"
