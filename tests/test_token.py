import time

import jwt
import pytest

from notify_client import SigningError
from notify_client.token import sign_token

SERVICE_ID = "95b3b534-bdd6-4f26-ad91-84b4e2301cca"
SECRET = "e8a5f59a-b445-4dc0-9513-c5831615f937"


def test_token_claims_are_issuer_and_issued_at():
    before = time.time()
    token = sign_token(SERVICE_ID, SECRET)
    after = time.time()

    claims = jwt.decode(token, SECRET, algorithms=["HS256"])

    assert set(claims) == {"iss", "iat"}
    assert claims["iss"] == SERVICE_ID
    assert before - 1 <= claims["iat"] <= after + 1


def test_tokens_signed_back_to_back_differ():
    tokens = [sign_token(SERVICE_ID, SECRET) for _ in range(20)]

    assert len(set(tokens)) == 20
    issued = [jwt.decode(token, SECRET, algorithms=["HS256"])["iat"] for token in tokens]
    assert issued == sorted(issued)


def test_token_header_is_hs256_jwt():
    header = jwt.get_unverified_header(sign_token(SERVICE_ID, SECRET))

    assert header["alg"] == "HS256"
    assert header["typ"] == "JWT"


def test_token_is_rejected_with_wrong_secret():
    token = sign_token(SERVICE_ID, SECRET)

    with pytest.raises(jwt.InvalidSignatureError):
        jwt.decode(token, "another-secret-that-is-long-enough-to-sign", algorithms=["HS256"])


@pytest.mark.parametrize("secret", ["", None])
def test_degenerate_secret_raises_signing_error(secret):
    with pytest.raises(SigningError):
        sign_token(SERVICE_ID, secret)


def test_library_failure_raises_signing_error(monkeypatch):
    def broken_encode(*args, **kwargs):
        raise jwt.PyJWTError("boom")

    monkeypatch.setattr(jwt, "encode", broken_encode)

    with pytest.raises(SigningError) as excinfo:
        sign_token(SERVICE_ID, SECRET)

    assert isinstance(excinfo.value.__cause__, jwt.PyJWTError)
