"""Unit tests for the stub_* helpers of skinnyspec.helpers.stubs."""

import pytest

from skinnyspec.adapters.web import Controller
from skinnyspec.config import Settings
from skinnyspec.helpers import ControllerSpec, StubCollection, define_request

# pylint: disable=redefined-outer-name


class Gizmo:
    def __init__(self, **attributes):
        self.id = None
        self.__dict__.update(attributes)

    @classmethod
    def find(cls, *args, **options):
        raise RuntimeError("no database")

    @classmethod
    def new(cls, attributes=None):
        return cls(**(attributes or {}))


class GizmosController(Controller):
    collection_actions = {"search": "get"}

    def index(self):
        self.gizmos = Gizmo.find("all")

    def show(self):
        self.gizmo = Gizmo.find(self.params["id"])

    def search(self):
        self.gizmos = Gizmo.find("all", conditions={"name": self.params.get("q")})
        return self.render("index")


class GizmoGroup(ControllerSpec):
    controller_class = GizmosController
    models = {"gizmo": Gizmo}
    settings = Settings()


class SearchGroup(GizmoGroup):
    the_request = define_request("get", "search", q="spring")


def started(group):
    spec = group()
    spec.setup_context()
    return spec


@pytest.fixture
def spec():
    instance = started(GizmoGroup)
    yield instance
    instance.teardown_context()


class TestCollections:
    """stub_index / stub_find_all."""

    @staticmethod
    def test_stub_index(spec) -> None:
        gizmos = spec.stub_index(Gizmo)
        assert isinstance(gizmos, StubCollection)
        assert len(gizmos) == 3
        assert len({gizmo.id for gizmo in gizmos}) == 3
        assert str(spec.request_definition()) == "GET index"
        spec.eval_request()
        assert spec.assigns["gizmos"] is gizmos

    @staticmethod
    def test_size(spec) -> None:
        assert spec.stub_find_all(Gizmo, size=0) == []

    @staticmethod
    def test_format(spec) -> None:
        gizmos = spec.stub_index(Gizmo, format="xml")
        assert spec.params["format"] == "xml"
        assert gizmos.to_xml() == "Gizmo formatted as xml"

    @staticmethod
    def test_record_stubs(spec) -> None:
        gizmos = spec.stub_find_all(Gizmo, stub={"label": "spring"})
        assert [gizmo.label() for gizmo in gizmos] == ["spring"] * 3

    @staticmethod
    def test_finder_options_restrict_the_stub(spec) -> None:
        gizmos = spec.stub_find_all(Gizmo, conditions={"name": "spring"})
        assert Gizmo.find("all", conditions={"name": "spring"}) is gizmos
        assert Gizmo.find("all") is None

    @staticmethod
    def test_declared_request_wins() -> None:
        spec = started(SearchGroup)
        try:
            gizmos = spec.stub_index(Gizmo, conditions={"name": "spring"})
            assert str(spec.request_definition()) == "GET search"
            spec.eval_request()
            assert spec.assigns["gizmos"] is gizmos
            assert spec.harness.rendered_template == "gizmos/index.html"
        finally:
            spec.teardown_context()


class TestMembers:
    """stub_show / stub_edit / stub_update / stub_destroy."""

    @staticmethod
    def test_stub_show(spec) -> None:
        gizmo = spec.stub_show(Gizmo)
        assert spec.params["id"] == gizmo.id
        assert Gizmo.find(gizmo.id) is gizmo
        spec.eval_request()
        assert spec.assigns["gizmo"] is gizmo

    @staticmethod
    def test_stub_find_one_without_current_object(spec) -> None:
        gizmo = spec.stub_find_one(Gizmo)
        assert "id" not in spec.params
        assert Gizmo.find(gizmo.id) is gizmo

    @staticmethod
    def test_stub_edit(spec) -> None:
        spec.stub_edit(Gizmo)
        assert str(spec.request_definition()) == "GET edit"

    @staticmethod
    @pytest.mark.parametrize("result", [True, False])
    def test_stub_update(spec, result) -> None:
        gizmo = spec.stub_update(Gizmo, stub_ar_return=result)
        assert str(spec.request_definition()) == "PUT update"
        assert gizmo.update_attributes({"name": "x"}) is result

    @staticmethod
    def test_stub_destroy(spec) -> None:
        gizmo = spec.stub_destroy(Gizmo)
        assert str(spec.request_definition()) == "DELETE destroy"
        assert gizmo.destroy() is True

    @staticmethod
    def test_formatted_record(spec) -> None:
        gizmo = spec.stub_show(Gizmo, format="json")
        assert gizmo.to_json() == "Gizmo formatted as json"
        assert spec.params == {"format": "json", "id": gizmo.id}


class TestNewRecords:
    """stub_new / stub_create / stub_initialize."""

    @staticmethod
    def test_stub_new(spec) -> None:
        gizmo = spec.stub_new(Gizmo)
        assert str(spec.request_definition()) == "GET new"
        assert gizmo.id is None
        assert Gizmo.new({"name": "anything"}) is gizmo

    @staticmethod
    @pytest.mark.parametrize("result", [True, False])
    def test_stub_create(spec, result) -> None:
        gizmo = spec.stub_create(Gizmo, save_result=result)
        assert str(spec.request_definition()) == "POST create"
        assert gizmo.save() is result


def test_stub_out_returns_the_target(spec):
    gizmo = Gizmo()
    assert spec.stub_out(gizmo, {"label": "a", "size": 3}) is gizmo
    assert (gizmo.label(), gizmo.size()) == ("a", 3)
    spec.teardown_context()
    assert not hasattr(gizmo, "label")


def test_stubs_are_removed_on_teardown(spec):
    spec.stub_index(Gizmo)
    spec.teardown_context()
    with pytest.raises(RuntimeError, match="no database"):
        Gizmo.find("all")
