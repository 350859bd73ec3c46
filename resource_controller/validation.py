"""
Request validation on top of marshmallow

A FormRequest bundles the rules and custom messages of one action:

    from marshmallow import fields, validate

    class StoreUserRequest(FormRequest):
        def rules(self):
            return {
                'name': fields.Str(required=True, validate=validate.Length(max=80)),
                'email': fields.Email(required=True),
            }

        def messages(self):
            return {'email.required': 'We need your email.'}

make_validator() turns input + rules + messages into a Validator.
"""

import copy
from typing import Any, Dict, List, Mapping, Optional

from marshmallow import EXCLUDE, Schema, ValidationError
from marshmallow.fields import Field


class FormRequest:
    """Validation rules and messages for a single action. Both default to empty."""

    def rules(self) -> Dict[str, Field]:
        return {}

    def messages(self) -> Dict[str, str]:
        """
        Custom messages keyed '<field>.<error key>'

        Only the field's own error keys can be overridden: required, null,
        invalid and the type-specific keys in the field's error_messages.
        Messages raised by validators passed as validate= (Length, Range,
        Email, ...) are not looked up here; set their error= argument instead:

            fields.Str(validate=validate.Length(max=80, error='Too long.'))
        """
        return {}


class Validator:
    """
    Result of validating input against a set of rules

    Validation runs the first time the outcome is asked for. Input keys
    without a rule are ignored.
    """

    def __init__(self, data: Mapping[str, Any], rules: Mapping[str, Field]):
        self.data = dict(data)
        self.rules = dict(rules)
        self._schema = Schema.from_dict(self.rules, name='FormRequestSchema')(unknown=EXCLUDE)
        self._errors: Optional[Dict[str, List[str]]] = None
        self._validated: Optional[Dict[str, Any]] = None

    def _run(self):
        if self._errors is not None:
            return
        try:
            self._validated = self._schema.load(self.data)
            self._errors = {}
        except ValidationError as e:
            self._validated = None
            self._errors = e.normalized_messages()

    def fails(self) -> bool:
        self._run()
        return bool(self._errors)

    def passes(self) -> bool:
        return not self.fails()

    def errors(self) -> Dict[str, List[str]]:
        """Field name -> list of messages. Empty when validation passed."""
        self._run()
        return self._errors

    def validated(self) -> Dict[str, Any]:
        """
        Cleaned input

        Raises:
            ValidationError: if the input did not pass the rules
        """
        self._run()
        if self._errors:
            raise ValidationError(self._errors)
        return self._validated


def _apply_messages(rules, messages):
    """
    Return rules with custom messages applied

    Message keys are '<field>.<error key>', e.g. 'email.required' or
    'age.invalid'. Fields are copied before their messages change.
    """
    rules = dict(rules)
    for key, message in messages.items():
        field_name, _, error_key = key.rpartition('.')
        if not field_name or field_name not in rules:
            continue
        field = copy.copy(rules[field_name])
        field.error_messages = {**field.error_messages, error_key: message}
        rules[field_name] = field
    return rules


def make_validator(data, rules=None, messages=None) -> Validator:
    """Build a Validator over data. No rules means the validator always passes."""
    rules = rules or {}
    if messages:
        rules = _apply_messages(rules, messages)
    return Validator(data, rules)


__all__ = [
    'FormRequest',
    'Validator',
    'make_validator',
]
