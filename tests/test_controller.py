"""
Tests for the controller base class, the pin class decorator and route
metadata collection.
"""

import pytest

from pinup import PinupController, ControllerType, pin, provider, pins, need, auth
from pinup.exceptions import ControllerError


class Leaf(PinupController):
    def init(self):
        self.path = 'leaf'

    @pins.get('', 'alias')
    def index(self, rec, options):
        return None

    @pins.post('create')
    @need.body(['name'])
    def create(self, rec, options):
        return None

    @auth()
    @pins.delete(':id')
    def remove(self, rec, options):
        return None

    def helper(self):
        """Not a route"""


class Branch(PinupController):
    def init(self):
        self.path = '/branch/'
        self.pin(Leaf)


class TestControllerPaths:
    """Tests for path and hierarchy handling"""

    def test_default_path(self):
        assert Leaf().path == '/'

    def test_path_is_normalized(self):
        controller = Leaf()
        controller.path = 'api//v1/'
        assert controller.path == '/api/v1'

    def test_full_path_follows_parent(self):
        """Test a child's full path is joined onto its parent's"""
        branch = Branch()
        branch.init()
        leaf = branch.children[0]
        leaf.init()

        assert leaf.parent is branch
        assert branch.full_path == '/branch'
        assert leaf.full_path == '/branch/leaf'

    def test_pin_returns_self(self):
        branch = Branch()
        assert branch.pin(Leaf).pin(Leaf) is branch
        assert len(branch.children) == 2

    def test_pin_rejects_non_controller(self):
        """Test pinning a class that is not a controller raises"""
        class NotAController:
            pass

        with pytest.raises(ControllerError, match="NotAController"):
            Branch().pin(NotAController)

    def test_abstract_init_required(self):
        class Incomplete(PinupController):
            pass

        with pytest.raises(TypeError):
            Incomplete()

    def test_type_default_and_setter(self):
        controller = Leaf()
        assert controller.type is ControllerType.DEFAULT
        controller.type = ControllerType.LOGIN
        assert controller.type is ControllerType.LOGIN

    def test_files_registers_static_dir(self, tmp_path):
        """Test files mounts a directory below the controller's full path"""
        branch = Branch()
        branch.init()
        branch.files(str(tmp_path), 'assets')

        url_path, local_dir = branch.static_dirs[0]
        assert url_path == '/branch/assets'
        assert local_dir.endswith(tmp_path.name)


class TestMethodCollection:
    """Tests for collecting decorated handlers into route descriptors"""

    def test_one_descriptor_per_path(self):
        methods = Leaf().methods
        index_paths = [m.path for m in methods if m.name == 'index']
        assert index_paths == [[''], ['alias']]

    def test_definition_order_kept(self):
        names = [m.name for m in Leaf().methods]
        assert names == ['index', 'index', 'create', 'remove']

    def test_descriptor_fields(self):
        """Test method, data sources and auth flag are recorded"""
        leaf = Leaf()
        leaf.init()
        by_name = {m.name: m for m in leaf.methods}

        assert by_name['create'].method == 'post'
        assert by_name['create'].data == {'body': ['name']}
        assert by_name['create'].auth is False
        assert by_name['remove'].method == 'delete'
        assert by_name['remove'].auth is True
        assert by_name['remove'].full_path == '/leaf/:id'
        assert by_name['remove'].endpoint == '/:id'
        assert by_name['index'].parent is leaf

    def test_actions_are_bound(self):
        leaf = Leaf()
        action = leaf.methods[0].action
        assert action.__self__ is leaf

    def test_decorator_order_independent(self):
        """Test route and need decorators stack in either order"""
        class Either(PinupController):
            def init(self):
                pass

            @need.query(['q'])
            @pins.get('a')
            def outer_need(self, rec, options):
                return None

            @pins.get('b')
            @need.query(['q'])
            def outer_route(self, rec, options):
                return None

        methods = {m.name: m for m in Either().methods}
        assert methods['outer_need'].data == {'query': ['q']}
        assert methods['outer_route'].data == {'query': ['q']}

    def test_subclass_override_replaces_handler(self):
        class Child(Leaf):
            @pins.get('replaced')
            def index(self, rec, options):
                return None

        paths = [m.path for m in Child().methods if m.name == 'index']
        assert paths == [['replaced']]

    def test_unknown_method_rejected(self):
        from pinup.decorators.routing import route

        with pytest.raises(ValueError):
            route('head', 'x')


class TestPinDecorator:
    """Tests for the @pin class decorator"""

    def test_sets_default_path_and_registers(self):
        @pin('reports')
        class Reports(PinupController):
            def init(self):
                pass

        assert Reports().path == '/reports'
        assert Reports in provider

    def test_declared_child_pinned_by_parent(self):
        """Test a class declared with parent= is pinned when the parent is created"""
        class Parent(PinupController):
            def init(self):
                self.path = 'parent'

        @pin('kid', parent=Parent)
        class Kid(PinupController):
            def init(self):
                pass

        parent = Parent()
        parent.init()
        assert [type(c) for c in parent.children] == [Kid]
        assert parent.children[0].full_path == '/parent/kid'

    def test_declared_children_not_shared_with_subclasses(self):
        class Parent(PinupController):
            def init(self):
                pass

        class OtherParent(Parent):
            pass

        @pin('kid', parent=Parent)
        class Kid(PinupController):
            def init(self):
                pass

        assert OtherParent().children == []

    def test_invalid_parent(self):
        """Test a non-controller parent is rejected"""
        class Plain:
            pass

        with pytest.raises(ControllerError, match="Parent class 'Plain'"):
            pin('x', parent=Plain)

    def test_invalid_class(self):
        with pytest.raises(ControllerError):
            @pin('x')
            class Plain:
                pass
