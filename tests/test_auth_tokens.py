from campaign_manager.auth.auth_utils import create_access_token, create_refresh_token, decode_token

def test_access_refresh_distinct_jti():
    access = create_access_token({"sub": "ada@example.com", "role": "user"})
    refresh = create_refresh_token({"sub": "ada@example.com", "role": "user"})
    a_payload = decode_token(access)
    r_payload = decode_token(refresh)
    assert a_payload["jti"] != r_payload["jti"]
    assert a_payload["token_type"] == "access"
    assert r_payload["token_type"] == "refresh"
    assert a_payload["role"] == "user"

def test_tampered_token_is_rejected():
    token = create_access_token({"sub": "ada@example.com"})
    assert decode_token(token + "x") is None
