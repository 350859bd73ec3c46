"""
Dependency container for controller collaborators

Controllers name their repository and form request by class or by dotted
import path. The container turns those names into instances.

Usage:
    container = Container()
    container.singleton(UserRepository, lambda: UserRepository(db.session))
    container.bind('repositories.users', UserRepository)

    repo = container.make(UserRepository)
    repo = container.make('myapp.repositories.UserRepository')
"""

from typing import Any, Callable, Dict, Union
import logging

from werkzeug.utils import ImportStringError, import_string

from .exceptions import ControllerError

Abstract = Union[str, type]


class Container:
    """
    Registry of factories keyed by class or name

    Unbound classes are built by calling them without arguments. Unbound
    strings are treated as dotted import paths.
    """

    def __init__(self, logger=None):
        self._bindings: Dict[Abstract, Callable[[], Any]] = {}
        self._shared: Dict[Abstract, bool] = {}
        self._instances: Dict[Abstract, Any] = {}
        self.logger = logger or logging.getLogger(__name__)

    def bind(self, abstract: Abstract, factory: Callable[[], Any] = None):
        """
        Register a factory for abstract

        Args:
            abstract: Class or name the factory is looked up by
            factory: Zero-argument callable. Defaults to abstract itself.
        """
        self._bindings[abstract] = factory or abstract
        self._shared[abstract] = False
        self._instances.pop(abstract, None)
        self.logger.debug(f"Bound {self._label(abstract)}")

    def singleton(self, abstract: Abstract, factory: Callable[[], Any] = None):
        """Register a factory whose first result is reused"""
        self.bind(abstract, factory)
        self._shared[abstract] = True

    def instance(self, abstract: Abstract, obj: Any):
        """Register an already built object"""
        self._bindings[abstract] = lambda: obj
        self._shared[abstract] = True
        self._instances[abstract] = obj

    def has(self, abstract: Abstract) -> bool:
        return abstract in self._bindings

    def make(self, abstract: Abstract) -> Any:
        """
        Resolve abstract to an instance

        Raises:
            ControllerError: if abstract cannot be imported or built
        """
        if abstract in self._instances:
            return self._instances[abstract]

        if abstract in self._bindings:
            obj = self._bindings[abstract]()
            if self._shared.get(abstract):
                self._instances[abstract] = obj
            return obj

        if isinstance(abstract, str):
            try:
                target = import_string(abstract)
            except ImportStringError as e:
                raise ControllerError(f"Target [{abstract}] cannot be imported: {e.exception}") from e
            return target()

        if isinstance(abstract, type):
            return abstract()

        raise ControllerError(f"Target [{abstract!r}] is not instantiable.")

    def list_bindings(self) -> Dict[str, str]:
        """List all bindings (for debugging)"""
        return {
            self._label(abstract): 'singleton' if self._shared.get(abstract) else 'factory'
            for abstract in self._bindings
        }

    @staticmethod
    def _label(abstract: Abstract) -> str:
        if isinstance(abstract, type):
            return f"{abstract.__module__}.{abstract.__qualname__}"
        return str(abstract)


__all__ = [
    'Container',
]
