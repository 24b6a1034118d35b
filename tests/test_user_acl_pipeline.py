import asyncio
import json

import pytest

from core.services.concurrency import configure_concurrency
from core.services.run_context import PipelineHooks, RunState
from core.services.user_acl_pipeline import (
    backup_user_acls,
    extract_usernames,
    is_safe_username,
    load_user_acls,
    restore_user_acls,
)

ACL = {
    "read": {"actors": ["pivotal", "alice"], "groups": ["admins"]},
    "grant": {"actors": ["pivotal"], "groups": []},
}


class FakeChefApi:
    def __init__(self, users, acls, broken: set[str] | None = None) -> None:
        self.users = users
        self.acls = acls
        self.broken = broken or set()
        self.puts: list[tuple[str, object]] = []

    async def get_json(self, path: str):
        if path == "users":
            return self.users
        name = path.split("/")[1]
        if name in self.broken:
            raise RuntimeError("500 Internal Server Error")
        return self.acls[name]

    async def put_json(self, path: str, body):
        name = path.split("/")[1]
        if name in self.broken:
            raise RuntimeError("403 Forbidden")
        self.puts.append((path, body))
        return None


def _state(settings, *, threads: int = 3, skip: bool = False, progress=None) -> RunState:
    return RunState(
        settings=settings,
        concurrency=configure_concurrency(threads),
        skip_useracl=skip,
        hooks=PipelineHooks(progress=progress),
    )


def test_extract_usernames_accepts_both_payload_shapes():
    assert extract_usernames({"bob": "https://x/users/bob", "alice": "https://x/users/alice"}) == [
        "alice",
        "bob",
    ]
    assert extract_usernames([{"user": {"username": "carol"}}, {"username": "dave"}, "erin", 42]) == [
        "carol",
        "dave",
        "erin",
    ]
    assert extract_usernames(None) == []


def test_backup_writes_one_file_per_user(make_settings, tmp_path):
    api = FakeChefApi({"alice": "u", "bob": "u"}, {"alice": ACL, "bob": ACL})
    ticks: list[tuple[int, int, str]] = []
    state = _state(make_settings(), progress=lambda done, total, name: ticks.append((done, total, name)))

    result = asyncio.run(backup_user_acls(state=state, client=api, dest_dir=tmp_path / "out"))

    assert result.transferred == ["alice", "bob"]
    assert result.failed == {}
    saved = json.loads((tmp_path / "out" / "user_acls" / "alice.json").read_text(encoding="utf-8"))
    assert saved == ACL
    assert [t[0] for t in ticks] == [1, 2]
    assert all(t[1] == 2 for t in ticks)


def test_backup_failure_becomes_warning(make_settings, tmp_path):
    api = FakeChefApi({"alice": "u", "bob": "u"}, {"alice": ACL}, broken={"bob"})
    state = _state(make_settings(), threads=1)

    result = asyncio.run(backup_user_acls(state=state, client=api, dest_dir=tmp_path))

    assert result.transferred == ["alice"]
    assert "bob" in result.failed
    assert len(state.warnings) == 1
    assert "bob" in state.warnings[0]
    assert not (tmp_path / "user_acls" / "bob.json").exists()


def test_backup_skipped_when_flag_set(make_settings, tmp_path):
    api = FakeChefApi({"alice": "u"}, {"alice": ACL})

    result = asyncio.run(backup_user_acls(state=_state(make_settings(), skip=True), client=api, dest_dir=tmp_path))

    assert result.skipped is True
    assert not (tmp_path / "user_acls").exists()


def test_restore_puts_each_permission(make_settings, tmp_path):
    acl_dir = tmp_path / "user_acls"
    acl_dir.mkdir()
    (acl_dir / "alice.json").write_text(json.dumps(ACL), encoding="utf-8")
    api = FakeChefApi({}, {})

    result = asyncio.run(restore_user_acls(state=_state(make_settings()), client=api, source_dir=tmp_path))

    assert result.transferred == ["alice"]
    assert sorted(api.puts, key=lambda p: p[0]) == [
        ("users/alice/_acl/grant", {"grant": ACL["grant"]}),
        ("users/alice/_acl/read", {"read": ACL["read"]}),
    ]


def test_restore_failure_becomes_warning(make_settings, tmp_path):
    acl_dir = tmp_path / "user_acls"
    acl_dir.mkdir()
    for name in ("alice", "bob"):
        (acl_dir / f"{name}.json").write_text(json.dumps(ACL), encoding="utf-8")
    api = FakeChefApi({}, {}, broken={"bob"})
    state = _state(make_settings())

    result = asyncio.run(restore_user_acls(state=state, client=api, source_dir=tmp_path))

    assert result.transferred == ["alice"]
    assert list(result.failed) == ["bob"]
    assert len(state.warnings) == 1


def test_load_user_acls_without_directory(tmp_path):
    assert load_user_acls(tmp_path) == []


def test_unsafe_usernames_are_never_written(make_settings, tmp_path):
    dest = tmp_path / "backup"
    names = {"alice": "u", "../escape": "u", "a/b": "u", "..": "u", "c\\d": "u"}
    api = FakeChefApi(names, {"alice": ACL})
    state = _state(make_settings())

    result = asyncio.run(backup_user_acls(state=state, client=api, dest_dir=dest))

    assert result.transferred == ["alice"]
    assert set(result.failed) == {"../escape", "a/b", "..", "c\\d"}
    assert not (tmp_path / "escape.json").exists()
    assert not (dest / "escape.json").exists()
    assert sorted(p.name for p in (dest / "user_acls").iterdir()) == ["alice.json"]
    assert len(state.warnings) == 4


@pytest.mark.parametrize(
    ("name", "expected"),
    [("alice", True), ("first.last", True), ("..", False), ("../x", False), ("a/b", False), ("a\\b", False)],
)
def test_is_safe_username(name, expected):
    assert is_safe_username(name) is expected
