import pytest
from marshmallow import ValidationError, fields, validate

from resource_controller.validation import FormRequest, Validator, make_validator


class TestFormRequest:
    def test_defaults_are_empty(self):
        form_request = FormRequest()
        assert form_request.rules() == {}
        assert form_request.messages() == {}


class TestValidator:
    def test_no_rules_passes(self):
        validator = make_validator({'anything': 'goes'})
        assert validator.passes()
        assert validator.fails() is False
        assert validator.errors() == {}
        assert validator.validated() == {}

    def test_unknown_fields_are_ignored(self):
        validator = make_validator({'name': 'Ada', 'role': 'admin'}, {'name': fields.Str(required=True)})
        assert validator.passes()
        assert validator.validated() == {'name': 'Ada'}

    def test_errors(self):
        rules = {
            'name': fields.Str(required=True),
            'age': fields.Int(validate=validate.Range(min=18)),
        }
        validator = make_validator({'age': 12}, rules)
        assert validator.fails()
        assert set(validator.errors()) == {'name', 'age'}
        assert validator.errors()['name'] == ['Missing data for required field.']

    def test_validated_raises_when_failing(self):
        validator = make_validator({}, {'name': fields.Str(required=True)})
        with pytest.raises(ValidationError):
            validator.validated()

    def test_validated_deserializes(self):
        validator = make_validator({'age': '42'}, {'age': fields.Int()})
        assert validator.validated() == {'age': 42}

    def test_runs_once(self):
        validator = Validator({'name': 'Ada'}, {'name': fields.Str()})
        validator.fails()
        validator.data['name'] = 123
        assert validator.passes()


class TestMessages:
    def test_custom_message(self):
        rules = {'email': fields.Email(required=True)}
        validator = make_validator({}, rules, {'email.required': 'We need your email.'})
        assert validator.errors() == {'email': ['We need your email.']}

    def test_custom_invalid_message(self):
        rules = {'age': fields.Int()}
        validator = make_validator({'age': 'old'}, rules, {'age.invalid': 'Age must be a number.'})
        assert validator.errors() == {'age': ['Age must be a number.']}

    def test_rules_are_not_mutated(self):
        field = fields.Str(required=True)
        make_validator({}, {'name': field}, {'name.required': 'Name, please.'}).errors()
        assert field.error_messages['required'] == 'Missing data for required field.'

    def test_messages_for_unknown_fields_are_ignored(self):
        validator = make_validator({}, {'name': fields.Str()}, {'nickname.required': 'x', 'bogus': 'y'})
        assert validator.passes()

    def test_validator_messages_are_not_overridden(self):
        rules = {'name': fields.Str(validate=validate.Length(min=3))}
        validator = make_validator({'name': 'Al'}, rules, {'name.length': 'Too short.'})
        assert validator.errors() == {'name': ['Shorter than minimum length 3.']}

    def test_validator_error_argument(self):
        rules = {'name': fields.Str(validate=validate.Length(min=3, error='Too short.'))}
        validator = make_validator({'name': 'Al'}, rules)
        assert validator.errors() == {'name': ['Too short.']}
