import pytest
from babel.messages.catalog import Catalog
from babel.messages.mofile import write_mo
from jinja2 import DictLoader
from marshmallow import fields

from resource_controller import AbstractResourceController, FormRequest, ResourceControllerApp
from resource_controller.http import wants_json

TEMPLATES = {
    'default/users/index.html': 'users:{% for user in users %}{{ user.name }};{% endfor %}',
    'default/users/ajax/index.html': 'partial:{{ users|length }}',
    'default/users/edit.html': 'edit:{{ user.name }}',
    # default/users/create.html is deliberately absent
}

# Spanish catalog for controller messages
SPANISH = {
    'resource_controller.propertynotset': 'Falta la propiedad %(property)s.',
    'resource_controller.viewnotfound': 'Vista no encontrada: %(view)s',
}


def write_catalog(directory, locale, messages):
    """Compile messages into directory/<locale>/LC_MESSAGES/messages.mo"""
    catalog = Catalog(locale=locale)
    for msgid, msgstr in messages.items():
        catalog.add(msgid, msgstr)

    target = directory / locale / 'LC_MESSAGES'
    target.mkdir(parents=True)
    with open(target / 'messages.mo', 'wb') as fh:
        write_mo(fh, catalog)
    return directory


class UserRepository:
    def __init__(self):
        self.items = {}
        self.next_id = 1

    def all(self):
        return list(self.items.values())

    def find(self, key):
        return self.items.get(str(key))

    def create(self, data):
        user = dict(data, id=self.next_id)
        self.items[str(self.next_id)] = user
        self.next_id += 1
        return user

    def delete(self, key):
        return self.items.pop(str(key), None)


class UserRequest(FormRequest):
    def rules(self):
        return {
            'name': fields.Str(required=True),
            'email': fields.Email(required=True),
        }

    def messages(self):
        return {'email.required': 'We need your email.'}


class UsersController(AbstractResourceController):
    alias = 'admin'
    theme = 'default'
    resource_name = 'users'
    repository = UserRepository
    form_request = UserRequest

    def index(self, request):
        return self.render_view('index', users=self.repository.all())

    def create(self, request):
        return self.render_view('create')

    def store(self, request):
        validator = self.validate_rules()
        if validator.fails():
            return self.redirect_back_with_errors(validator)

        user = self.repository.create(validator.validated())
        if wants_json(request):
            return self.valid_success_json_response('Created', user)
        return self.redirect_with_flash(self.success_flash_message_key, 'User created')

    def show(self, request, key):
        user = self.repository.find(key)
        if user is None:
            return self.valid_not_found_json_response()
        return self.valid_success_json_response(data=user)

    def edit(self, request, key):
        return self.render_view('edit', user=self.repository.find(key))

    def update(self, request, key):
        return self.valid_success_json_response('Updated')

    def destroy(self, request, key):
        if self.repository.delete(key) is None:
            return self.valid_not_found_json_response()
        return self.valid_success_json_response('Deleted')


@pytest.fixture
def rc_app():
    app = ResourceControllerApp("test-app", secret_key="test-secret", log_level="DEBUG")
    app.flask_app.testing = True
    app.flask_app.jinja_env.loader = DictLoader(TEMPLATES)
    app.container.singleton(UserRepository)
    UsersController.register(app.flask_app)
    return app


@pytest.fixture
def flask_app(rc_app):
    return rc_app.flask_app


@pytest.fixture
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture
def spanish_app(tmp_path):
    write_catalog(tmp_path, 'es', SPANISH)
    app = ResourceControllerApp("test-app-es", secret_key="test-secret",
                                translation_directories=[str(tmp_path)], default_locale='es')
    app.flask_app.testing = True
    app.flask_app.jinja_env.loader = DictLoader(TEMPLATES)
    app.container.singleton(UserRepository)
    UsersController.register(app.flask_app)
    return app.flask_app
