import pytest

from imgate.naming import DefaultService, Naming, ServiceNotFoundError, new_entry


def test_dial_url_tcp_has_no_scheme():
    svc = new_entry("test_1", "for_test", "tcp", "localhost", 8000)
    assert svc.dial_url() == "localhost:8000"


def test_dial_url_ws_has_scheme():
    svc = new_entry("test_1", "for_test", "ws", "localhost", 8000)
    assert svc.dial_url() == "ws://localhost:8000"


def test_new_entry_fields():
    svc = new_entry("test_2", "for_test", "ws", "localhost", 8001)
    assert svc.id == "test_2"
    assert svc.name == "for_test"
    assert svc.protocol == "ws"
    assert svc.address == "localhost"
    assert svc.port == 8001
    assert svc.namespace == ""
    assert svc.tags == []
    assert svc.meta == {}


def test_meta_is_independent_per_instance():
    a = new_entry("a", "n", "tcp", "h", 1)
    b = new_entry("b", "n", "tcp", "h", 1)
    a.meta["k"] = "v"
    assert b.meta == {}


def test_str_format():
    svc = DefaultService(
        id="test_1",
        name="for_test",
        address="localhost",
        port=8000,
        protocol="ws",
        tags=["tab1", "gate"],
        meta={"b": "2", "a": "1"},
    )
    text = str(svc)
    assert text.startswith("Id:test_1,Name:for_test,Address:localhost,Port:8000,Ns:,")
    assert "Tags:[tab1 gate]" in text
    assert text.endswith("Meta:map[a:1 b:2]")


def test_not_found_error_message():
    err = ServiceNotFoundError()
    assert str(err) == "service no found"
    assert isinstance(err, LookupError)


def test_naming_is_abstract():
    with pytest.raises(TypeError):
        Naming()


class MemoryNaming(Naming):
    def __init__(self):
        self.services = {}
        self.watches = {}

    def find(self, service_name, *tags):
        return [
            s
            for s in self.services.values()
            if s.name == service_name and all(t in s.tags for t in tags)
        ]

    def subscribe(self, service_name, callback):
        self.watches[service_name] = callback

    def unsubscribe(self, service_name):
        self.watches.pop(service_name, None)

    def register(self, service):
        self.services[service.id] = service
        cb = self.watches.get(service.name)
        if cb:
            cb(self.find(service.name))

    def deregister(self, service_id):
        if service_id not in self.services:
            raise ServiceNotFoundError()
        del self.services[service_id]


def test_naming_subclass_flow():
    ns = MemoryNaming()
    ns.register(DefaultService(id="test_1", name="for_test", address="localhost",
                               port=8000, protocol="ws", tags=["tab1", "gate"]))
    assert len(ns.find("for_test")) == 1
    seen = []
    ns.subscribe("for_test", lambda services: seen.append(len(services)))
    ns.register(DefaultService(id="test_2", name="for_test", address="localhost",
                               port=8001, protocol="ws", tags=["tab2", "gate"]))
    assert seen == [2]
    ns.unsubscribe("for_test")
    assert len(ns.find("for_test", "gate")) == 2
    found = ns.find("for_test", "tab2")
    assert [s.id for s in found] == ["test_2"]
    ns.deregister("test_2")
    assert [s.id for s in ns.find("for_test")] == ["test_1"]
    with pytest.raises(ServiceNotFoundError):
        ns.deregister("test_2")