"""Repository, resolver and database tests run directly against SQLite."""
import pytest

from openbook.db.migrations import MIGRATIONS, get_current_version
from openbook.db.repositories import (
    CommentRepository,
    PermissionRepository,
    TagRepository,
    UserRepository,
    WikiPageRepository,
)
from openbook.db.seed import DEFAULT_PERMISSIONS, seed_default_data
from openbook.services.permission_resolver import resolve_guest_permissions, resolve_permissions


async def _tag_with(name, permission_names):
    tag = await TagRepository.create(name, "#123456")
    ids = [(await PermissionRepository.get_by_name(p)).id for p in permission_names]
    await TagRepository.replace_permissions(tag.id, ids)
    return tag


class TestPermissionResolver:

    @pytest.mark.asyncio
    async def test_union_of_tag_permissions(self, database):
        await _tag_with("Writers", ["create_pages", "edit_pages"])
        await _tag_with("Cleaners", ["edit_pages", "delete_pages"])
        user = await UserRepository.create("writer", "writer@test.com", "pw123456", tags=["Writers", "Cleaners"])

        assert await resolve_permissions(user.id) == {"create_pages", "edit_pages", "delete_pages"}

    @pytest.mark.asyncio
    async def test_admin_gets_everything_regardless_of_tags(self, database):
        user = await UserRepository.create("boss", "boss@test.com", "pw123456", is_admin=True, tags=[])
        assert await resolve_permissions(user.id) == {name for name, _, _ in DEFAULT_PERMISSIONS}

    @pytest.mark.asyncio
    async def test_user_without_tags(self, database):
        user = await UserRepository.create("nobody", "nobody@test.com", "pw123456")
        assert await resolve_permissions(user.id) == set()

    @pytest.mark.asyncio
    async def test_unknown_user_and_guest(self, database):
        assert await resolve_permissions(424242) == set()
        assert await resolve_permissions(None) == {"view_activity"}
        assert await resolve_guest_permissions() == {"view_activity"}

    @pytest.mark.asyncio
    async def test_changes_apply_without_caching(self, database):
        tag = await _tag_with("Temp", ["edit_pages"])
        user = await UserRepository.create("temp", "temp@test.com", "pw123456", tags=["Temp"])
        assert await resolve_permissions(user.id) == {"edit_pages"}

        await TagRepository.replace_permissions(tag.id, [])
        assert await resolve_permissions(user.id) == set()


class TestPageHistory:

    @pytest.mark.asyncio
    async def test_k_updates_give_k_entries_newest_first(self, database):
        author = await UserRepository.get_by_username("admin")
        page = await WikiPageRepository.create("History", "v0", author.id)

        for k in range(1, 6):
            await WikiPageRepository.update_content(page.id, {"content": f"v{k}"}, author.id)

        history = await WikiPageRepository.get_history_for_page(page.id)
        assert len(history) == 5
        assert await WikiPageRepository.count_history(page.id) == 5

        newest = await WikiPageRepository.get_history_detail(history[0].id)
        oldest = await WikiPageRepository.get_history_detail(history[-1].id)
        assert newest.content == "v4"
        assert oldest.content == "v0"
        assert (await WikiPageRepository.get_by_id(page.id)).content == "v5"

    @pytest.mark.asyncio
    async def test_icon_only_update_keeps_content(self, database):
        page = await WikiPageRepository.create("Icons", "body", None)
        updated = await WikiPageRepository.update_content(page.id, {"icon": "star"}, None)
        assert updated.content == "body"
        assert updated.icon == "star"
        assert await WikiPageRepository.count_history(page.id) == 1

    @pytest.mark.asyncio
    async def test_resolve_by_id_then_title(self, database):
        numeric = await WikiPageRepository.create("2024", "numeric title", None)
        assert (await WikiPageRepository.resolve(str(numeric.id))).id == numeric.id
        assert (await WikiPageRepository.resolve("2024")).id == numeric.id
        assert await WikiPageRepository.resolve("missing") is None

    @pytest.mark.asyncio
    async def test_delete_cascades_history(self, database):
        page = await WikiPageRepository.create("Gone", "a", None)
        await WikiPageRepository.update_content(page.id, {"content": "b"}, None)
        assert await WikiPageRepository.delete(page.id) is True
        assert await WikiPageRepository.count_history(page.id) == 0


class TestDatabase:

    @pytest.mark.asyncio
    async def test_transaction_rolls_back(self, database):
        with pytest.raises(RuntimeError):
            async with database.transaction():
                await database.execute("INSERT INTO tags (name, color) VALUES (?, ?)", ("Ghost", "#000"))
                raise RuntimeError("boom")

        assert await TagRepository.get_by_name("Ghost") is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("failing_statement", ["INSERT INTO wiki_page_history", "UPDATE wiki_pages SET"])
    async def test_failed_update_leaves_page_unchanged(self, database, monkeypatch, failing_statement):
        page = await WikiPageRepository.create("Stable", "original", None)
        execute = database.execute

        async def failing_execute(query, params=()):
            if failing_statement in query:
                raise RuntimeError("disk full")
            return await execute(query, params)

        monkeypatch.setattr(database, "execute", failing_execute)
        with pytest.raises(RuntimeError):
            await WikiPageRepository.update_content(page.id, {"content": "changed"}, None)
        monkeypatch.undo()

        assert (await WikiPageRepository.get_by_id(page.id)).content == "original"
        assert await WikiPageRepository.count_history(page.id) == 0

    @pytest.mark.asyncio
    async def test_migrations_are_recorded(self, database):
        assert await get_current_version() == max(version for version, _, _, _ in MIGRATIONS)

    @pytest.mark.asyncio
    async def test_seed_is_idempotent(self, database):
        before = await database.fetch_one("SELECT COUNT(*) as count FROM tag_permissions")
        await seed_default_data()
        after = await database.fetch_one("SELECT COUNT(*) as count FROM tag_permissions")
        assert before == after
        assert len(await UserRepository.list_all()) == 3


class TestUsersAndComments:

    @pytest.mark.asyncio
    async def test_set_tags_replaces_all(self, database):
        user = await UserRepository.create("multi", "multi@test.com", "pw123456", tags=["Visitor"])
        await UserRepository.set_tags(user.id, ["Contributor", "Visitor", "Not A Tag"])
        assert await UserRepository.get_tag_names(user.id) == ["Contributor", "Visitor"]

        await UserRepository.set_tags(user.id, [])
        assert await UserRepository.get_tag_names(user.id) == []

    @pytest.mark.asyncio
    async def test_set_admin(self, database):
        user = await UserRepository.create("promoted", "promoted@test.com", "pw123456")
        assert (await UserRepository.set_admin(user.id, True)).is_admin is True
        assert (await UserRepository.set_admin(user.id, False)).is_admin is False

    @pytest.mark.asyncio
    async def test_deleting_author_keeps_page(self, database):
        user = await UserRepository.create("author", "author@test.com", "pw123456")
        page = await WikiPageRepository.create("Orphan", "text", user.id)
        await UserRepository.delete(user.id)

        page = await WikiPageRepository.get_by_id(page.id)
        assert page is not None
        assert page.author_id is None

    @pytest.mark.asyncio
    async def test_comment_count_follows_cascade(self, database):
        author = await UserRepository.get_by_username("contributor")
        page = await WikiPageRepository.create("Talk", "text", author.id)
        root = await CommentRepository.create(page.id, author.id, "root")
        await CommentRepository.create(page.id, author.id, "reply", parent_id=root.id)
        assert await CommentRepository.count_for_page(page.id) == 2

        await CommentRepository.delete(root.id)
        assert await CommentRepository.count_for_page(page.id) == 0
