"""Tests for userhub.services.users and the SQL user store: lookups, admin edits, listing, seeding."""

import unittest
from datetime import datetime, timedelta
from unittest.mock import MagicMock

from pydantic import SecretStr

from support import add_user, make_session, make_settings
from userhub.core.errors import Conflict, Forbidden, NotFound
from userhub.core.security import verify_password
from userhub.models.user import UserRole
from userhub.repositories.users import SqlUserStore, total_pages
from userhub.schemas.user import UpdateUserRequest, UserQuery
from userhub.services.users import UserService, authorize_deletion, ensure_superadmin


class StoreTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.db = make_session()
        self.store = SqlUserStore(self.db)
        self.service = UserService(self.store)

    def tearDown(self) -> None:
        self.db.close()


class TestLookups(StoreTestCase):
    def test_get_user_not_found_message(self) -> None:
        with self.assertRaises(NotFound) as ctx:
            self.service.get_user("missing")
        self.assertEqual(ctx.exception.message, "User with id missing not found")

    def test_created_user_gets_uuid_and_default_role(self) -> None:
        user = add_user(self.store, "a@example.com")
        self.assertEqual(len(user.id), 36)
        self.assertEqual(user.role, "user")
        self.assertIsNotNone(user.created_at)

    def test_duplicate_email_on_create_conflicts(self) -> None:
        add_user(self.store, "a@example.com")
        with self.assertRaises(Conflict):
            add_user(self.store, "a@example.com")

    def test_update_rejects_unknown_fields(self) -> None:
        user = add_user(self.store, "a@example.com")
        with self.assertRaises(ValueError):
            self.store.update(user.id, id="other")

    def test_delete_missing_returns_false(self) -> None:
        self.assertFalse(self.store.delete("missing"))


class TestUpdateUser(StoreTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.root = add_user(self.store, "root@example.com", role=UserRole.superadmin)
        self.admin = add_user(self.store, "admin@example.com", role=UserRole.admin)
        self.user = add_user(self.store, "a@example.com")

    def test_email_branch_returns_immediately(self) -> None:
        body = UpdateUserRequest(email="new@example.com", role=UserRole.admin)
        result = self.service.update_user(self.user.id, body, self.root)
        self.assertEqual(result.message, "User a@example.com updated successfully")
        self.assertEqual(result.data.email, "new@example.com")
        self.assertEqual(self.store.find_by_id(self.user.id).role, "user")

    def test_email_to_taken_address_conflicts(self) -> None:
        body = UpdateUserRequest(email="admin@example.com")
        with self.assertRaises(Conflict):
            self.service.update_user(self.user.id, body, self.root)

    def test_superadmin_changes_role_of_other(self) -> None:
        result = self.service.update_user(self.user.id, UpdateUserRequest(role=UserRole.admin), self.root)
        self.assertEqual(result.data.role, UserRole.admin)

    def test_admin_role_change_ignored(self) -> None:
        result = self.service.update_user(self.user.id, UpdateUserRequest(role=UserRole.admin), self.admin)
        self.assertEqual(result.data.role, UserRole.user)

    def test_superadmin_cannot_change_own_role(self) -> None:
        result = self.service.update_user(self.root.id, UpdateUserRequest(role=UserRole.user), self.root)
        self.assertEqual(result.data.role, UserRole.superadmin)

    def test_password_is_hashed(self) -> None:
        self.service.update_user(self.user.id, UpdateUserRequest(password="newpass1"), self.admin)
        stored = self.store.find_by_id(self.user.id)
        self.assertNotEqual(stored.password_hash, "newpass1")
        self.assertTrue(verify_password("newpass1", stored.password_hash))

    def test_unknown_target_not_found(self) -> None:
        with self.assertRaises(NotFound):
            self.service.update_user("missing", UpdateUserRequest(role=UserRole.admin), self.root)

    def test_admin_cannot_edit_superadmin(self) -> None:
        bodies = [
            UpdateUserRequest(password="takeover1"),
            UpdateUserRequest(email="mine@example.com"),
            UpdateUserRequest(role=UserRole.user),
        ]
        old_hash = self.store.find_by_id(self.root.id).password_hash
        for body in bodies:
            with self.subTest(body=body), self.assertRaises(Forbidden):
                self.service.update_user(self.root.id, body, self.admin)
        stored = self.store.find_by_id(self.root.id)
        self.assertEqual(stored.password_hash, old_hash)
        self.assertEqual(stored.email, "root@example.com")

    def test_superadmin_edits_own_password(self) -> None:
        self.service.update_user(self.root.id, UpdateUserRequest(password="newroot1"), self.root)
        self.assertTrue(verify_password("newroot1", self.store.find_by_id(self.root.id).password_hash))


class TestDeleteUser(StoreTestCase):
    def test_superadmin_deletes_other(self) -> None:
        root = add_user(self.store, "root@example.com", role=UserRole.superadmin)
        user = add_user(self.store, "a@example.com")
        result = self.service.delete_user(root, user.id)
        self.assertEqual(result.message, "All user data a@example.com has been deleted successfully")
        self.assertIsNone(self.store.find_by_id(user.id))

    def test_superadmin_cannot_delete_self(self) -> None:
        root = add_user(self.store, "root@example.com", role=UserRole.superadmin)
        with self.assertRaises(Forbidden):
            self.service.delete_user(root, root.id)

    def test_superadmin_cannot_delete_other_superadmin(self) -> None:
        root = add_user(self.store, "root@example.com", role=UserRole.superadmin)
        other_root = add_user(self.store, "root2@example.com", role=UserRole.superadmin)
        with self.assertRaises(Forbidden):
            self.service.delete_user(root, other_root.id)
        self.assertIsNotNone(self.store.find_by_id(other_root.id))


class TestAuthorizeDeletion(unittest.TestCase):
    """Pure rule check on author/target pairs."""

    def _user(self, user_id: str, role: UserRole) -> MagicMock:
        user = MagicMock()
        user.id = user_id
        user.role = role.value
        return user

    def test_rules(self) -> None:
        cases = [
            (UserRole.user, "1", "1", True),
            (UserRole.user, "1", "2", False),
            (UserRole.admin, "1", "1", True),
            (UserRole.admin, "1", "2", False),
            (UserRole.superadmin, "1", "2", True),
            (UserRole.superadmin, "1", "1", False),
        ]
        for role, author_id, target_id, allowed in cases:
            with self.subTest(role=role, author=author_id, target=target_id):
                author = self._user(author_id, role)
                target_role = role if author_id == target_id else UserRole.user
                target = self._user(target_id, target_role)
                if allowed:
                    authorize_deletion(author, target)
                else:
                    with self.assertRaises(Forbidden):
                        authorize_deletion(author, target)

    def test_superadmin_target_always_forbidden(self) -> None:
        target = self._user("2", UserRole.superadmin)
        for role in UserRole:
            with self.subTest(role=role), self.assertRaises(Forbidden):
                authorize_deletion(self._user("1", role), target)


class TestListUsers(StoreTestCase):
    def setUp(self) -> None:
        super().setUp()
        base = datetime(2024, 1, 1, 12, 0, 0)
        emails = ["carol@example.com", "alice@example.com", "bob@other.org"]
        for offset, email in enumerate(emails):
            user = add_user(self.store, email)
            user.created_at = base + timedelta(days=offset)
        admin = add_user(self.store, "admin@example.com", role=UserRole.admin)
        admin.created_at = base + timedelta(days=10)
        self.db.commit()

    def test_default_order_is_newest_first(self) -> None:
        page = self.service.list_users(UserQuery())
        self.assertEqual(page.total, 4)
        self.assertEqual(page.total_pages, 1)
        self.assertEqual(page.limit_per_page, 10)
        self.assertEqual(page.current_page, 1)
        self.assertEqual(
            [u.email for u in page.data],
            ["admin@example.com", "bob@other.org", "alice@example.com", "carol@example.com"],
        )

    def test_ascending_order(self) -> None:
        page = self.service.list_users(UserQuery(order="asc"))
        self.assertEqual(page.data[0].email, "carol@example.com")

    def test_email_filter_is_case_insensitive_substring(self) -> None:
        page = self.service.list_users(UserQuery(email="EXAMPLE"))
        self.assertEqual(page.total, 3)

    def test_role_filter(self) -> None:
        page = self.service.list_users(UserQuery(role=UserRole.admin))
        self.assertEqual([u.email for u in page.data], ["admin@example.com"])

    def test_pagination(self) -> None:
        page = self.service.list_users(UserQuery(limit=3, page=2))
        self.assertEqual(page.total, 4)
        self.assertEqual(page.total_pages, 2)
        self.assertEqual(page.current_page, 2)
        self.assertEqual([u.email for u in page.data], ["carol@example.com"])

    def test_page_past_end_is_empty(self) -> None:
        page = self.service.list_users(UserQuery(limit=10, page=5))
        self.assertEqual(page.total, 4)
        self.assertEqual(page.data, [])

    def test_total_pages(self) -> None:
        self.assertEqual(total_pages(0, 10), 0)
        self.assertEqual(total_pages(10, 10), 1)
        self.assertEqual(total_pages(11, 10), 2)


class TestEnsureSuperadmin(StoreTestCase):
    def test_seeds_once(self) -> None:
        settings = make_settings(SUPERADMIN_EMAIL="root@example.com", SUPERADMIN_PASSWORD=SecretStr("rootpass1"))
        created = ensure_superadmin(self.store, settings)
        self.assertIsNotNone(created)
        self.assertEqual(created.role, UserRole.superadmin.value)
        self.assertIsNone(ensure_superadmin(self.store, settings))

    def test_not_configured_does_nothing(self) -> None:
        self.assertIsNone(ensure_superadmin(self.store, make_settings()))
        self.assertFalse(self.store.has_role(UserRole.superadmin))


if __name__ == "__main__":
    unittest.main()
