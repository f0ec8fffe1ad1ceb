"""FormParams package."""

from formparams.backends import PydanticSchema, as_form_schema, error_messages
from formparams.exceptions import (
    FormValidationError,
    PackageError,
    RefinementError,
    SchemaError,
    SettingsError,
    UnknownFieldError,
)
from formparams.form_validation import FormValidationController, use_form_validation
from formparams.introspection import input_props, use_form_input_props
from formparams.logging import configure_logging, get_logger
from formparams.params import get_form_data, get_params, get_params_or_fail, get_search_params
from formparams.settings import Settings, get_settings
from formparams.typing.models import Control, FormControls, ValidationOutcome

__version__ = "0.1.0"

# Initialize package logger at import time via `get_logger`.
logger = get_logger("formparams")

__all__ = [
    "Control",
    "FormControls",
    "FormValidationController",
    "FormValidationError",
    "PackageError",
    "PydanticSchema",
    "RefinementError",
    "SchemaError",
    "Settings",
    "SettingsError",
    "UnknownFieldError",
    "ValidationOutcome",
    "__version__",
    "as_form_schema",
    "configure_logging",
    "error_messages",
    "get_form_data",
    "get_logger",
    "get_params",
    "get_params_or_fail",
    "get_search_params",
    "get_settings",
    "input_props",
    "logger",
    "use_form_input_props",
    "use_form_validation",
]
