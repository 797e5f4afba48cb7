import unittest
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

from bson import ObjectId
from jose import jwt

from app.config import parse_expiry
from app.core.exceptions import (
    ConfigurationError,
    InvalidTokenError,
    NotFoundError,
    TokenExpiredError,
)
from app.models.entities.user import User
from app.services.token_service import (
    TokenConfig,
    TokenService,
    decode_access_token,
    decode_refresh_token,
    generate_access_token,
    generate_refresh_token,
)
from tests.fakes import make_settings


class TestParseExpiry(unittest.TestCase):
    def test_units(self):
        self.assertEqual(parse_expiry("900"), timedelta(seconds=900))
        self.assertEqual(parse_expiry("15m"), timedelta(minutes=15))
        self.assertEqual(parse_expiry("1d"), timedelta(days=1))
        self.assertEqual(parse_expiry("10D"), timedelta(days=10))
        self.assertEqual(parse_expiry("2w"), timedelta(weeks=2))

    def test_rejects_garbage(self):
        for value in ("", "ten days", "5y", "0", "-1d"):
            with self.assertRaises(ValueError, msg=value):
                parse_expiry(value)


class TestTokenConfig(unittest.TestCase):
    def test_from_settings(self):
        config = TokenConfig.from_settings(make_settings())
        self.assertEqual(config.access_expiry, timedelta(minutes=15))
        self.assertEqual(config.refresh_expiry, timedelta(days=10))
        self.assertEqual(config.algorithm, "HS256")

    def test_missing_secret_is_configuration_error(self):
        with self.assertRaises(ConfigurationError) as ctx:
            TokenConfig.from_settings(make_settings(REFRESH_TOKEN_SECRET=None))
        self.assertEqual(ctx.exception.message, "JWT configurations are missing")

    def test_missing_expiry_is_configuration_error(self):
        with self.assertRaises(ConfigurationError):
            TokenConfig.from_settings(make_settings(ACCESS_TOKEN_EXPIRY=None))

    def test_bad_expiry_is_configuration_error(self):
        with self.assertRaises(ConfigurationError):
            TokenConfig.from_settings(make_settings(ACCESS_TOKEN_EXPIRY="soon"))

    def test_config_is_immutable(self):
        config = TokenConfig.from_settings(make_settings())
        with self.assertRaises(Exception):
            config.access_secret = "other"


class TestTokens(unittest.TestCase):
    def setUp(self):
        self.config = TokenConfig.from_settings(make_settings())
        self.user_id = ObjectId()

    def test_access_token_carries_identity(self):
        token = generate_access_token(
            self.config,
            user_id=self.user_id,
            name="amy",
            email="a@x.com",
            role="artist",
        )
        payload = decode_access_token(self.config, token)
        self.assertEqual(payload["_id"], str(self.user_id))
        self.assertEqual(payload["name"], "amy")
        self.assertEqual(payload["email"], "a@x.com")
        self.assertEqual(payload["role"], "artist")
        self.assertEqual(payload["exp"] - payload["iat"], 15 * 60)

    def test_refresh_token_carries_only_id(self):
        token = generate_refresh_token(self.config, user_id=self.user_id)
        payload = decode_refresh_token(self.config, token)
        self.assertEqual(payload["_id"], str(self.user_id))
        self.assertNotIn("email", payload)
        self.assertEqual(payload["exp"] - payload["iat"], 10 * 24 * 3600)

    def test_tokens_use_distinct_secrets(self):
        refresh = generate_refresh_token(self.config, user_id=self.user_id)
        with self.assertRaises(InvalidTokenError):
            decode_access_token(self.config, refresh)

        access = generate_access_token(
            self.config, user_id=self.user_id, name="amy", email="a@x.com", role="user"
        )
        with self.assertRaises(InvalidTokenError):
            decode_refresh_token(self.config, access)

    def test_expired_token(self):
        issued = datetime.now(timezone.utc) - timedelta(days=30)
        token = generate_refresh_token(self.config, user_id=self.user_id, now=issued)
        with self.assertRaises(TokenExpiredError):
            decode_refresh_token(self.config, token)

    def test_tampered_token(self):
        token = generate_refresh_token(self.config, user_id=self.user_id)
        header, payload, signature = token.split(".")
        tampered = ".".join([header, payload, signature[::-1]])
        with self.assertRaises(InvalidTokenError):
            decode_refresh_token(self.config, tampered)

    def test_garbage_token(self):
        with self.assertRaises(InvalidTokenError):
            decode_access_token(self.config, "not-a-jwt")

    def test_token_without_subject(self):
        token = jwt.encode({"name": "amy"}, self.config.access_secret, algorithm="HS256")
        with self.assertRaises(InvalidTokenError):
            decode_access_token(self.config, token)

    def test_expired_is_an_invalid_token(self):
        self.assertTrue(issubclass(TokenExpiredError, InvalidTokenError))


class TestTokenService(unittest.TestCase):
    def setUp(self):
        self.config = TokenConfig.from_settings(make_settings())
        self.users = MagicMock()
        self.service = TokenService(self.config, self.users)

    def test_issue_tokens_persists_refresh_token(self):
        user = User(
            _id=ObjectId(),
            name="amy",
            email="a@x.com",
            fullName="Amy A",
            password="hash",
            avatar="https://res.example/a.png",
            role="artist",
        )
        self.users.find_by_id.return_value = user

        pair = self.service.issue_tokens(user.id)

        self.users.set_refresh_token.assert_called_once_with(user.id, pair.refresh_token)
        access = decode_access_token(self.config, pair.access_token)
        self.assertEqual(access["role"], "artist")
        refresh = decode_refresh_token(self.config, pair.refresh_token)
        self.assertEqual(refresh["_id"], str(user.id))

    def test_issue_tokens_for_unknown_user(self):
        self.users.find_by_id.return_value = None
        with self.assertRaises(NotFoundError):
            self.service.issue_tokens(ObjectId())
        self.users.set_refresh_token.assert_not_called()


if __name__ == "__main__":
    unittest.main()
