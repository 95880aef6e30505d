"""
Controller base class and the controller hierarchy.

A controller groups handler methods under a path. Controllers form a tree:
a child's full path is its parent's full path joined with its own path.

    class Api(PinupController):
        def init(self):
            self.path = 'api'
            self.pin(Users)

    @pin('admin', parent=Users)     # declared child, pinned by Users itself
    class Admin(PinupController):
        def init(self):
            pass
"""

import inspect
import logging
import os
from abc import ABC, abstractmethod
from enum import Enum
from typing import List, Optional, Tuple

from pinup.decorators.jwt_auth import AUTH_ATTR
from pinup.decorators.routing import DATA_ATTR, ROUTES_ATTR
from pinup.exceptions import ControllerError
from pinup.options import MethodType
from pinup.utils.paths import join_path, normalize_path

logger = logging.getLogger(__name__)

# Every class decorated with @pin, in declaration order
provider: List[type] = []


class ControllerType(Enum):
    DEFAULT = 0
    CUSTOM = 1
    VIEW = 2
    LOGIN = 3
    RESOLVER = 4


def _is_controller_class(cls) -> bool:
    return inspect.isclass(cls) and issubclass(cls, PinupController)


class PinupController(ABC):
    """
    Base class for controllers.

    Subclasses implement init(), which the router calls once before the
    controller's routes are registered. init() is the place to set the
    path, pin children and mount static directories.
    """

    default_path = '/'

    def __init__(self):
        self._parent: Optional['PinupController'] = None
        self._children: List['PinupController'] = []
        self._path = normalize_path(self.default_path) or '/'
        self._type = ControllerType.DEFAULT
        self.static_dirs: List[Tuple[str, str]] = []

        for child_cls in type(self).__dict__.get('declared_children', ()):
            self.pin(child_cls)

    def __repr__(self):
        return f"<{type(self).__name__} {self.full_path}>"

    @property
    def name(self) -> str:
        return type(self).__name__

    @property
    def parent(self) -> Optional['PinupController']:
        return self._parent

    @property
    def children(self) -> List['PinupController']:
        return self._children

    @property
    def type(self) -> ControllerType:
        return self._type

    @type.setter
    def type(self, value: ControllerType):
        self._type = value

    @property
    def path(self) -> str:
        return self._path

    @path.setter
    def path(self, value: str):
        self._path = normalize_path(value) or '/'

    @property
    def full_path(self) -> str:
        if self._parent is not None:
            return join_path(self._parent.full_path, self.path)
        return self.path

    @property
    def methods(self) -> List[MethodType]:
        """Route descriptors of this controller, one per declared path."""
        descriptors = []
        for name, function in self._handlers():
            bound = getattr(self, name)
            for method, paths in getattr(function, ROUTES_ATTR):
                for path in paths:
                    descriptors.append(MethodType(
                        method=method,
                        name=name,
                        path=[path],
                        parent=self,
                        action=bound,
                        data=dict(getattr(function, DATA_ATTR, {})),
                        auth=getattr(function, AUTH_ATTR, False)
                    ))
        return descriptors

    def _handlers(self):
        # Base classes first so handlers keep their definition order;
        # an override replaces the inherited handler in place.
        handlers = {}
        for klass in reversed(type(self).__mro__):
            for name, attr in vars(klass).items():
                if callable(attr) and hasattr(attr, ROUTES_ATTR):
                    handlers[name] = attr
        return handlers.items()

    @abstractmethod
    def init(self):
        """Configure the controller: path, children, static directories."""

    def pin(self, child_cls) -> 'PinupController':
        """
        Attach a child controller.

        Args:
            child_cls: PinupController subclass to instantiate

        Returns:
            self, so pins can be chained

        Raises:
            ControllerError: if child_cls is not a PinupController subclass
        """
        if not _is_controller_class(child_cls):
            raise ControllerError(
                f"Class '{getattr(child_cls, '__name__', child_cls)}' is not assignable "
                f"to parameter of Controller class"
            )
        child = child_cls()
        child._parent = self
        self._children.append(child)
        logger.debug(f"Pinned {child.name} under {self.name}")
        return self

    def files(self, local_path: str, dir: str = '') -> None:
        """
        Serve a local directory under this controller's path.

        Args:
            local_path: Directory on disk
            dir: URL path below the controller's full path
        """
        self.static_dirs.append((join_path(self.full_path, dir), os.path.relpath(local_path)))


def pin(path: str, parent=None):
    """
    Class decorator that sets a controller's default path.

    The class is recorded in `provider`. With parent given, the class is
    declared as a child of parent and pinned whenever parent is created.

    Args:
        path: Default path of the controller
        parent: Controller class to nest under (optional)

    Raises:
        ControllerError: if parent is not a PinupController subclass
    """
    if parent is not None and not _is_controller_class(parent):
        raise ControllerError(
            f"Parent class '{getattr(parent, '__name__', parent)}' is not assignable "
            f"to parameter of Controller class"
        )

    def decorator(cls):
        if not _is_controller_class(cls):
            raise ControllerError(
                f"Class '{cls.__name__}' is not assignable to parameter of Controller class"
            )
        cls.default_path = path
        if parent is not None:
            children = parent.__dict__.get('declared_children')
            if children is None:
                children = []
                parent.declared_children = children
            children.append(cls)
        provider.append(cls)
        return cls

    return decorator
