"""Schema engine backends."""

from formparams.backends.pydantic_schema import PydanticSchema, as_form_schema, error_messages

__all__ = ["PydanticSchema", "as_form_schema", "error_messages"]
