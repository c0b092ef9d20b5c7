from anonbox.core.security import (
    codes_match,
    create_session_cookie,
    generate_verify_code,
    hash_password,
    load_session_cookie,
    verify_password,
)


def test_password_hash_and_verify():
    hashed = hash_password("S3cure!")
    assert hashed != "S3cure!"
    assert verify_password("S3cure!", hashed)
    assert not verify_password("wrong", hashed)
    assert not verify_password("S3cure!", "")


def test_verify_code_shape():
    for _ in range(50):
        code = generate_verify_code()
        assert len(code) == 6
        assert code.isdigit()
        assert code[0] != "0"


def test_codes_match_is_exact():
    assert codes_match("123456", "123456")
    assert not codes_match("123456 ", "123456")
    assert not codes_match("12345", "123456")
    assert not codes_match("123456", "")
    assert not codes_match("123456", None)


def test_session_cookie_roundtrip():
    cookie = create_session_cookie({"user_id": "abc", "username": "alice"})
    assert load_session_cookie(cookie) == {"user_id": "abc", "username": "alice"}


def test_session_cookie_tampered():
    cookie = create_session_cookie({"user_id": "abc"})
    assert load_session_cookie(cookie[:-2] + "xx") is None
    assert load_session_cookie("garbage") is None


def test_session_cookie_expired():
    cookie = create_session_cookie({"user_id": "abc"})
    assert load_session_cookie(cookie, max_age_seconds=-1) is None
