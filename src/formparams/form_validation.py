"""Per-field validation state for interactive forms."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from formparams.backends.pydantic_schema import as_form_schema
from formparams.logging import get_logger
from formparams.processing.coercion import ABSENT, coerce_tree
from formparams.processing.paths import decode_entries
from formparams.settings import Settings, get_settings
from formparams.typing.enums import FieldKind
from formparams.typing.models import FieldState, FormValidationState

if TYPE_CHECKING:
    from formparams.typing.models import FieldTypeDescriptor
    from formparams.typing.protocol import ControlSource, FormSchema

logger = get_logger(__name__)

Listener = Callable[[FormValidationState], None]
ServerErrors = Mapping[str, str | list[str] | None]

# Fields spread over several controls, e.g. checkbox groups or `address.city` inputs.
_GROUPED_KINDS = frozenset({FieldKind.ARRAY, FieldKind.OBJECT})


def initial_state(schema: FormSchema) -> FormValidationState:
    """Build the untouched state of every declared field.

    Args:
        schema (FormSchema): Schema capability.

    Returns:
        FormValidationState: State with every field untouched and unsuccessful.
    """
    fields = {
        key: FieldState(key=key, required=schema.introspect(key).is_required) for key in schema.field_keys
    }
    return FormValidationState(success=False, field=fields)


def reconcile(state: FormValidationState, server_errors: ServerErrors) -> FormValidationState:
    """Seed field states from externally produced errors.

    Fields with an error become touched and unsuccessful; every other field is
    marked successful but stays untouched.

    Args:
        state (FormValidationState): Current state.
        server_errors (ServerErrors): Errors by field key, e.g. returned by a server.

    Returns:
        FormValidationState: Reconciled state.
    """
    fields: dict[str, FieldState] = {}
    for key, field in state.field.items():
        error = server_errors.get(key)
        if error is None:
            fields[key] = field.model_copy(update={"success": True, "touched": False, "error": None})
        else:
            fields[key] = field.model_copy(update={"success": False, "touched": True, "error": error})
    return _derive(fields)


def apply_field_result(
    state: FormValidationState,
    key: str,
    *,
    value: Any,
    error: str | list[str] | None,
) -> FormValidationState:
    """Record the outcome of validating one field.

    Args:
        state (FormValidationState): Current state.
        key (str): Field key.
        value (Any): Coerced field value, ``None`` when absent.
        error (str | list[str] | None): Field error, ``None`` when valid.

    Returns:
        FormValidationState: New state with form-level success recomputed.
    """
    fields = dict(state.field)
    fields[key] = fields[key].model_copy(
        update={"touched": True, "success": error is None, "error": error, "value": value},
    )
    return _derive(fields)


def _derive(fields: dict[str, FieldState]) -> FormValidationState:
    return FormValidationState(success=all(field.success for field in fields.values()), field=fields)


@dataclass
class FormRef:
    """Mutable handle on the form currently rendered, if any."""

    current: ControlSource | None = None


class FormValidationController:
    """State store driven by blur and change events of a form.

    Transitions are applied serially in call order; each call runs the
    decode, coerce and validate pipeline for one field to completion and
    notifies subscribers with the resulting state.
    """

    def __init__(
        self,
        schema: Any,
        server_errors: ServerErrors | None = None,
        *,
        form: ControlSource | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._schema = as_form_schema(schema, settings=self._settings)
        self._listeners: list[Listener] = []
        self.form_ref = FormRef(current=form)

        state = initial_state(self._schema)
        if server_errors is not None:
            state = reconcile(state, server_errors)
        self._state = state

    @property
    def validation(self) -> FormValidationState:
        """Return the current form validation state."""
        return self._state

    def bind_form(self, form: ControlSource | None) -> None:
        """Point the controller at the controls of a rendered form."""
        self.form_ref.current = form

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener called with every new state.

        Args:
            listener (Listener): Callback receiving the new state.

        Returns:
            Callable[[], None]: Function removing the listener.
        """
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def validate(self, key: str, raw_value: Any = None) -> FormValidationState:
        """Validate one field, e.g. on blur or checkbox change.

        Array and object fields collect every control of the bound form named
        after the field, including ``key[]`` and ``key.child`` names; other
        fields use `raw_value`, falling back to the form controls when it is
        ``None``.

        Args:
            key (str): Field key.
            raw_value (Any): Value of the control that fired the event.

        Returns:
            FormValidationState: Updated state.
        """
        descriptor = self._schema.introspect(key)
        entries = self._collect_entries(key, descriptor, raw_value)
        coerced = coerce_tree(
            decode_entries(entries, (key,)),
            {key: descriptor},
            policy=self._settings.repeated_key_policy,
        )
        result = self._schema.validate(coerced)

        messages = [issue.message for issue in result.issues if issue.path and issue.path[0] == key]
        error: str | list[str] | None = None
        if messages:
            error = messages[0] if len(messages) == 1 else messages

        value = coerced.get(key, ABSENT)
        self._commit(apply_field_result(self._state, key, value=None if value is ABSENT else value, error=error))
        logger.debug("Field validated", extra={"field": key, "success": error is None})
        return self._state

    def revalidate(self, key: str, raw_value: Any = None) -> FormValidationState:
        """Validate one field only if it has already been touched, e.g. on change.

        Args:
            key (str): Field key.
            raw_value (Any): Value of the control that fired the event.

        Returns:
            FormValidationState: Current or updated state.
        """
        self._schema.introspect(key)
        if not self._state.field[key].touched:
            return self._state
        return self.validate(key, raw_value)

    def _collect_entries(
        self,
        key: str,
        descriptor: FieldTypeDescriptor,
        raw_value: Any,
    ) -> list[tuple[str, Any]]:
        form = self.form_ref.current
        if form is not None and (descriptor.unwrap().kind in _GROUPED_KINDS or raw_value is None):
            return list(form.entries_for(key))
        if raw_value is None:
            return []
        if isinstance(raw_value, list | tuple):
            return [(key, value) for value in raw_value]
        return [(key, raw_value)]

    def _commit(self, state: FormValidationState) -> None:
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.warning("Validation listener failed", extra={"listener": repr(listener)})


def use_form_validation(
    schema: Any,
    server_errors: ServerErrors | None = None,
    *,
    form: ControlSource | None = None,
    settings: Settings | None = None,
) -> FormValidationController:
    """Create the validation controller for one form lifetime.

    The controller exposes ``validation``, ``validate``, ``revalidate`` and
    ``form_ref``.

    Args:
        schema (Any): Pydantic model class or `FormSchema`.
        server_errors (ServerErrors | None): Errors to seed the state with.
        form (ControlSource | None): Form controls handle.
        settings (Settings | None): Runtime settings.

    Returns:
        FormValidationController: Controller for the form.
    """
    return FormValidationController(schema, server_errors, form=form, settings=settings)
