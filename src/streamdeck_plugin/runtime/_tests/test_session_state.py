from __future__ import annotations

import asyncio

from streamdeck_plugin.runtime.session_state import SessionStateStore


def test_instance_settings_replace_not_merge() -> None:
    async def runner() -> None:
        store = SessionStateStore()
        assert await store.instance_settings("ctx") is None

        await store.set_instance_settings("ctx", {"a": 1, "b": 2})
        await store.set_instance_settings("ctx", {"c": 3})

        assert await store.instance_settings("ctx") == {"c": 3}

    asyncio.run(runner())


def test_instance_settings_are_copied() -> None:
    async def runner() -> None:
        store = SessionStateStore()
        source = {"nested": {"x": 1}}
        await store.set_instance_settings("ctx", source)
        source["nested"]["x"] = 99

        snapshot = await store.instance_settings("ctx")
        snapshot["nested"]["x"] = 42

        assert await store.instance_settings("ctx") == {"nested": {"x": 1}}

    asyncio.run(runner())


def test_global_merge_is_field_level_and_idempotent() -> None:
    async def runner() -> None:
        store = SessionStateStore()
        await store.merge_global_settings({"a": 1, "b": 2})
        once = await store.merge_global_settings({"b": 3, "c": 4})
        twice = await store.merge_global_settings({"b": 3, "c": 4})

        assert once == {"a": 1, "b": 3, "c": 4}
        assert twice == once
        assert await store.global_settings() == once

    asyncio.run(runner())


def test_visibility_index_appear_then_disappear() -> None:
    async def runner() -> None:
        store = SessionStateStore()
        await store.mark_visible("act.a", "ctx-1")
        await store.mark_visible("act.a", "ctx-2")
        await store.mark_visible("act.b", "ctx-3")

        assert await store.contexts_of("act.a") == ["ctx-1", "ctx-2"]
        assert await store.owner_of("ctx-3") == "act.b"

        assert await store.mark_hidden("ctx-1") == "act.a"
        assert await store.contexts_of("act.a") == ["ctx-2"]
        assert await store.mark_hidden("ctx-1") is None
        assert await store.contexts_of("unknown") == []

    asyncio.run(runner())


def test_context_belongs_to_one_action_at_a_time() -> None:
    async def runner() -> None:
        store = SessionStateStore()
        await store.mark_visible("act.a", "ctx")
        await store.mark_visible("act.a", "ctx")
        await store.mark_visible("act.b", "ctx")

        assert await store.contexts_of("act.a") == []
        assert await store.contexts_of("act.b") == ["ctx"]

        await store.mark_hidden("ctx")
        assert await store.contexts_of("act.b") == []

    asyncio.run(runner())


def test_concurrent_appear_disappear_leaves_no_dangling_entries() -> None:
    async def runner() -> None:
        store = SessionStateStore()
        contexts = [f"ctx-{i}" for i in range(50)]
        await asyncio.gather(*(store.mark_visible("act", c) for c in contexts))
        await asyncio.gather(*(store.mark_hidden(c) for c in contexts))
        assert await store.contexts_of("act") == []
        assert store.dump_debug()["visible"] == {"act": []}

    asyncio.run(runner())
