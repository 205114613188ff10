"""Tests for CredentialService and the JWT signer."""

from datetime import timedelta

import pytest
from fakes import FakeRbacReader, make_role, make_subscription
from jose import jwt

from accessgate.application.dtos.identity import IdentitySource
from accessgate.application.services.authorization_service import AuthorizationService
from accessgate.application.services.credential_service import CredentialService
from accessgate.domain.enums import SubscriptionStatus, SubscriptionType, SystemRole
from accessgate.domain.exceptions import CredentialExpired, InvalidCredential
from accessgate.infrastructure.security.jwt import JwtTokenSigner
from accessgate.shared.utils.datetime import utc_now

SECRET = "unit-test-secret"
ADMIN = make_role("r-admin", "Admin", SystemRole.ADMIN)


@pytest.fixture
def reader() -> FakeRbacReader:
    return FakeRbacReader()


@pytest.fixture
def signer() -> JwtTokenSigner:
    return JwtTokenSigner(SECRET, issuer="accessgate", audience="accessgate-users")


@pytest.fixture
def credentials(reader: FakeRbacReader, signer: JwtTokenSigner) -> CredentialService:
    return CredentialService(reader, signer, lifetime=timedelta(minutes=30))


class TestIssueAndValidate:
    async def test_round_trip_carries_snapshot(
        self, reader: FakeRbacReader, credentials: CredentialService
    ) -> None:
        reader.give_role("u1", ADMIN)
        reader.subscriptions["u1"] = [make_subscription("u1", SubscriptionType.IELTS_ONLY)]

        issued = await credentials.issue("u1")
        identity = credentials.validate(issued.token)

        assert identity.user_id == "u1"
        assert identity.role_ids == {"r-admin"}
        assert identity.role_names == {"Admin"}
        assert identity.system_roles == {SystemRole.ADMIN}
        assert identity.subscription_type is SubscriptionType.IELTS_ONLY
        assert identity.subscription_status is SubscriptionStatus.ACTIVE
        assert identity.source is IdentitySource.CREDENTIAL
        assert identity.expires_at == issued.expires_at
        assert issued.identity == identity

    async def test_expiry_uses_lifetime(self, credentials: CredentialService) -> None:
        before = utc_now().replace(microsecond=0)
        issued = await credentials.issue("u1")
        assert before + timedelta(minutes=30) <= issued.expires_at
        assert issued.expires_at <= utc_now() + timedelta(minutes=30)
        assert issued.to_dict()["token_type"] == "bearer"

    async def test_user_without_roles(self, credentials: CredentialService) -> None:
        identity = credentials.validate((await credentials.issue("u1")).token)
        assert identity.is_anonymous_equivalent
        assert identity.subscription_type is None

    async def test_each_credential_has_unique_id(
        self, credentials: CredentialService
    ) -> None:
        first = jwt.get_unverified_claims((await credentials.issue("u1")).token)
        second = jwt.get_unverified_claims((await credentials.issue("u1")).token)
        assert first["jti"] != second["jti"]

    async def test_store_errors_propagate_from_issue(
        self, reader: FakeRbacReader, credentials: CredentialService
    ) -> None:
        reader.error = RuntimeError("down")
        with pytest.raises(RuntimeError):
            await credentials.issue("u1")

    def test_non_positive_lifetime_rejected(
        self, reader: FakeRbacReader, signer: JwtTokenSigner
    ) -> None:
        with pytest.raises(ValueError):
            CredentialService(reader, signer, lifetime=timedelta(0))


class TestSnapshotStaleness:
    async def test_revoked_role_still_in_credential_but_not_live(
        self, reader: FakeRbacReader, credentials: CredentialService
    ) -> None:
        reader.give_role("u1", ADMIN)
        token = (await credentials.issue("u1")).token

        reader.roles["u1"].clear()

        assert credentials.validate(token).system_roles == {SystemRole.ADMIN}
        assert not await AuthorizationService(reader).has_any_role("u1", [SystemRole.ADMIN])

    async def test_validate_does_not_read_store(
        self, reader: FakeRbacReader, credentials: CredentialService
    ) -> None:
        token = (await credentials.issue("u1")).token
        reader.error = RuntimeError("store must not be touched")
        assert credentials.validate(token).user_id == "u1"


class TestRejection:
    def _token(self, **claims) -> str:
        now = utc_now()
        payload = {
            "sub": "u1",
            "iat": now,
            "exp": now + timedelta(minutes=5),
            "iss": "accessgate",
            "aud": "accessgate-users",
            **claims,
        }
        return jwt.encode(payload, SECRET, algorithm="HS256")

    def test_expired(self, credentials: CredentialService) -> None:
        token = self._token(exp=utc_now() - timedelta(minutes=1))
        with pytest.raises(CredentialExpired) as exc_info:
            credentials.validate(token)
        assert exc_info.value.error_code == "CREDENTIAL_EXPIRED"

    def test_bad_signature(self, credentials: CredentialService) -> None:
        token = jwt.encode(
            {"sub": "u1", "exp": utc_now() + timedelta(minutes=5)}, "other", algorithm="HS256"
        )
        with pytest.raises(InvalidCredential):
            credentials.validate(token)

    def test_wrong_audience(self, credentials: CredentialService) -> None:
        with pytest.raises(InvalidCredential):
            credentials.validate(self._token(aud="someone-else"))

    def test_garbage(self, credentials: CredentialService) -> None:
        with pytest.raises(InvalidCredential):
            credentials.validate("not.a.jwt")
        with pytest.raises(InvalidCredential):
            credentials.validate("")

    def test_malformed_claims(self, credentials: CredentialService) -> None:
        with pytest.raises(InvalidCredential, match="emperor"):
            credentials.validate(self._token(system_roles=["emperor"]))
        with pytest.raises(InvalidCredential, match="role_ids"):
            credentials.validate(self._token(role_ids="r1"))
        with pytest.raises(InvalidCredential):
            credentials.validate(self._token(subscription_type="platinum"))
