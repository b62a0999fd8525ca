import pytest

from apicdn.component import Component, ComponentRegistry


# Mock Pulumi resource for testing
class MockResource:
    def __init__(self, name="test-resource"):
        self.name = name
        self.id = f"{name}-id"


# Concrete implementation of Component for testing
class MockComponent(Component[MockResource]):
    def __init__(self, name: str, resource: MockResource | None = None):
        super().__init__(name)
        self._mock_resource = resource or MockResource(name)
        self.create_resources_calls = 0

    def _create_resources(self) -> MockResource:
        self.create_resources_calls += 1
        return self._mock_resource


class OtherComponent(MockComponent):
    pass


def test_component_initialization():
    component = MockComponent("test-component")

    assert component.name == "test-component"
    assert component in ComponentRegistry._instances[MockComponent]
    assert not component.materialized


def test_resources_created_once():
    test_resource = MockResource("test-resource")
    component = MockComponent("test-component", test_resource)

    first = component.resources
    second = component.resources

    assert first is test_resource
    assert second is test_resource
    assert component.create_resources_calls == 1
    assert component.materialized


def test_duplicate_names_rejected_across_types():
    MockComponent("shared")

    with pytest.raises(ValueError, match="Duplicate component name detected: 'shared'"):
        OtherComponent("shared")


def test_all_instances_in_registration_order_per_type():
    a = MockComponent("a")
    b = OtherComponent("b")
    c = MockComponent("c")

    assert list(ComponentRegistry.all_instances()) == [a, c, b]
