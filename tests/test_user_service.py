import shutil
import tempfile
import unittest
from pathlib import Path
from unittest.mock import MagicMock

from pymongo.errors import DuplicateKeyError

from app.core.exceptions import ConfigurationError, ConflictError, ValidationError
from app.dtos.auth import LoginRequest
from app.services.token_service import TokenConfig, TokenService
from app.services.user_service import UserService
from tests.fakes import FakeAssetHost, FakeUserRepository, make_settings


class TestUserService(unittest.TestCase):
    def setUp(self):
        self.temp_dir = Path(tempfile.mkdtemp())
        self.avatar = self.temp_dir / "avatar.png"
        self.avatar.write_bytes(b"png")
        self.users = FakeUserRepository()
        self.assets = FakeAssetHost()
        self.tokens = TokenService(TokenConfig.from_settings(make_settings()), self.users)
        self.service = UserService(self.users, self.tokens, self.assets)

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def register(self, service=None, **overrides):
        fields = dict(
            name="amy",
            email="a@x.com",
            full_name="Amy A",
            password="p1",
            avatar_path=self.avatar,
        )
        fields.update(overrides)
        return (service or self.service).register(**fields)

    def test_register_uploads_before_persisting(self):
        created = self.register(role="Artist")
        self.assertEqual(created.role, "artist")
        self.assertTrue(self.assets.uploads[0]["existed"])
        self.assertFalse(self.avatar.exists())

    def test_blank_fields_are_missing(self):
        with self.assertRaises(ValidationError):
            self.register(full_name="   ")
        self.assertEqual(self.assets.uploads, [])

    def test_cover_upload_failure_is_not_fatal(self):
        cover = self.temp_dir / "cover.png"
        cover.write_bytes(b"png")
        class CoverFails(FakeAssetHost):
            def upload(self, local_path, folder, asset_type="image"):
                asset = super().upload(local_path, folder, asset_type)
                return None if folder.endswith("coverImage") else asset

        service = UserService(self.users, self.tokens, CoverFails())
        with self.assertLogs("app.services.user_service", level="WARNING"):
            created = self.register(service=service, cover_image_path=cover)
        self.assertIsNone(created.cover_image)

    def test_concurrent_registration_discards_uploads(self):
        users = MagicMock(wraps=self.users)
        users.find_by_name_or_email.return_value = None
        users.create_user.side_effect = DuplicateKeyError("E11000")
        service = UserService(users, self.tokens, self.assets)

        with self.assertRaises(ConflictError):
            self.register(service=service)

        self.assertEqual(self.assets.deleted, ["music-share/users/amy/avatar/avatar"])

    def test_register_without_asset_host(self):
        service = UserService(self.users, self.tokens)
        with self.assertRaises(ConfigurationError):
            self.register(service=service)

    def test_login_does_not_need_asset_host(self):
        self.users.add(name="amy", email="a@x.com", password="p1")
        service = UserService(self.users, self.tokens)

        user, tokens = service.login(LoginRequest(name="AMY", password="p1"))

        self.assertEqual(user.name, "amy")
        self.assertTrue(tokens.access_token)

    def test_login_without_token_service(self):
        self.users.add(name="amy", email="a@x.com", password="p1")
        service = UserService(self.users, assets=self.assets)
        with self.assertRaises(ConfigurationError):
            service.login(LoginRequest(name="amy", password="p1"))

    def test_logout_clears_refresh_token(self):
        user = self.users.add(name="amy", email="a@x.com", password="p1")
        self.tokens.issue_tokens(user.id)
        self.service.logout(str(user.id))
        self.assertIsNone(self.users.find_by_id(user.id).refresh_token)


if __name__ == "__main__":
    unittest.main()
