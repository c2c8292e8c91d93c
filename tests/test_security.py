import jwt
import pytest

from app.constants.constants import ActorRole
from app.core.security import actor_from_claims, create_jwt_token, decode_jwt_token


def test_token_round_trip_resolves_the_actor():
    token = create_jwt_token({"sub": "lead@softechinc.ai", "role": "manager"})

    actor = actor_from_claims(decode_jwt_token(token))

    assert actor.email == "lead@softechinc.ai"
    assert actor.role == ActorRole.manager
    assert actor.is_manager


def test_email_claim_wins_and_role_defaults_to_user():
    actor = actor_from_claims({"sub": "user-123", "email": "dev@softechinc.ai"})

    assert actor.email == "dev@softechinc.ai"
    assert actor.role == ActorRole.user


def test_claims_without_an_email_are_rejected():
    with pytest.raises(ValueError):
        actor_from_claims({"role": "manager"})


def test_tampered_token_is_rejected():
    token = jwt.encode({"sub": "x@softechinc.ai"}, "some-other-secret", algorithm="HS256")

    with pytest.raises(jwt.InvalidTokenError):
        decode_jwt_token(token)
