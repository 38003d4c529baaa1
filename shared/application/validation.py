"""Run DRF input serializers and surface their errors as domain errors."""

from typing import Any, Mapping, Type

from rest_framework import serializers

from shared.domain.exceptions import DomainValidationError


def _flatten(detail: Any) -> Any:
    """Turn DRF ErrorDetail trees into plain lists/dicts of strings"""
    if isinstance(detail, Mapping):
        return {key: _flatten(value) for key, value in detail.items()}
    if isinstance(detail, (list, tuple)):
        return [_flatten(item) for item in detail]
    return str(detail)


def _first_message(errors: Any) -> str:
    if isinstance(errors, Mapping):
        for field, value in errors.items():
            message = _first_message(value)
            return message if field == 'non_field_errors' else f"{field}: {message}"
    if isinstance(errors, list) and errors:
        return _first_message(errors[0])
    return str(errors)


def validate_input(serializer_class: Type[serializers.Serializer], data: Any, **kwargs) -> Any:
    """
    Validate ``data`` with ``serializer_class`` and return the serializer

    Raises DomainValidationError with the field error mapping in ``details``.
    """
    serializer = serializer_class(data=data if data is not None else {}, **kwargs)
    if not serializer.is_valid():
        errors = _flatten(serializer.errors)
        raise DomainValidationError(_first_message(errors), details=errors)
    return serializer
