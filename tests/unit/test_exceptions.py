from formparams.exceptions import (
    FormValidationError,
    PackageError,
    RefinementError,
    SchemaError,
    SettingsError,
    UnknownFieldError,
)


def test_root_exception_hierarchy() -> None:
    assert issubclass(SettingsError, PackageError)
    assert issubclass(SchemaError, PackageError)
    assert issubclass(UnknownFieldError, PackageError)
    assert issubclass(FormValidationError, PackageError)
    assert issubclass(RefinementError, ValueError)


def test_exception_messages() -> None:
    assert str(UnknownFieldError(key="x", known_keys=("a", "b"))) == "Unknown field 'x'. Expected one of: a, b"
    assert str(FormValidationError(errors={"b": "Required", "a": "Required"})) == "Form validation failed: a, b"
    assert str(SettingsError(exc=ValueError("boom"))) == "Failed to load settings: boom"


def test_refinement_error_keeps_path() -> None:
    error = RefinementError("Min must be less than Max", path=["min"])

    assert error.path == ("min",)
    assert error.message == "Min must be less than Max"
    assert str(error) == "Min must be less than Max"
