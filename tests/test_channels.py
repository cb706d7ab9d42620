import threading
import uuid
from dataclasses import dataclass

from imgate.channels import ChannelMap


@dataclass
class FakeChannel:
    id: str


def test_add_and_get_many_unique_channels():
    chs = ChannelMap()
    ids = [uuid.uuid4().hex for _ in range(200)]
    for cid in ids:
        chs.add(FakeChannel(cid))
    for cid in ids:
        assert chs.get(cid).id == cid


def test_parallel_add_and_get():
    chs = ChannelMap()
    failures = []

    def worker():
        for _ in range(100):
            cid = uuid.uuid4().hex
            ch = FakeChannel(cid)
            chs.add(ch)
            if chs.get(cid) is not ch:
                failures.append(cid)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert failures == []
    assert len(chs.all()) == 800


def test_channel_without_id_is_not_stored():
    chs = ChannelMap()
    chs.add(FakeChannel(""))
    assert chs.all() == []


def test_get_with_empty_id_returns_none():
    chs = ChannelMap()
    assert chs.get("") is None


def test_get_missing_returns_none():
    chs = ChannelMap()
    chs.add(FakeChannel("a"))
    assert chs.get("b") is None


def test_remove():
    chs = ChannelMap()
    chs.add(FakeChannel("a"))
    chs.add(FakeChannel("b"))
    chs.remove("a")
    assert chs.get("a") is None
    assert [c.id for c in chs.all()] == ["b"]


def test_remove_missing_is_harmless():
    chs = ChannelMap()
    chs.add(FakeChannel("a"))
    chs.remove("zzz")
    assert len(chs) == 1


def test_add_replaces_same_id():
    chs = ChannelMap()
    first = FakeChannel("a")
    second = FakeChannel("a")
    chs.add(first)
    chs.add(second)
    assert chs.get("a") is second
    assert len(chs.all()) == 1