import pytest
from collections import OrderedDict

from resource_controller import Container, ControllerError
from resource_controller.controller import get_container


class Service:
    pass


class TestContainer:
    @pytest.fixture
    def container(self):
        return Container()

    def test_make_class(self, container):
        assert isinstance(container.make(Service), Service)
        assert container.make(Service) is not container.make(Service)

    def test_make_dotted_path(self, container):
        assert isinstance(container.make('collections.OrderedDict'), OrderedDict)

    def test_make_bad_path(self, container):
        with pytest.raises(ControllerError, match=r"Target \[nowhere.Missing\] cannot be imported"):
            container.make('nowhere.Missing')

    def test_make_not_instantiable(self, container):
        with pytest.raises(ControllerError, match="is not instantiable"):
            container.make(42)

    def test_bind_factory(self, container):
        container.bind('services.main', lambda: Service())
        assert container.has('services.main') is True
        assert isinstance(container.make('services.main'), Service)
        assert container.make('services.main') is not container.make('services.main')

    def test_bind_defaults_to_abstract(self, container):
        container.bind(Service)
        assert isinstance(container.make(Service), Service)

    def test_singleton(self, container):
        container.singleton(Service)
        assert container.make(Service) is container.make(Service)

    def test_instance(self, container):
        service = Service()
        container.instance('service', service)
        assert container.make('service') is service

    def test_rebind_drops_cached_instance(self, container):
        container.singleton(Service)
        first = container.make(Service)
        container.bind(Service)
        assert container.make(Service) is not first

    def test_list_bindings(self, container):
        container.bind('factory', Service)
        container.singleton(Service)
        assert container.list_bindings() == {
            'factory': 'factory',
            f'{__name__}.Service': 'singleton',
        }
        assert container.has('missing') is False


def test_get_container_uses_app_container(rc_app, flask_app):
    with flask_app.app_context():
        assert get_container() is rc_app.container


def test_get_container_outside_app():
    assert isinstance(get_container(), Container)
