from app.domain.services import code_digest, generate_code


def test_generate_code_is_urlsafe_and_unique():
    codes = {generate_code() for _ in range(200)}
    assert len(codes) == 200
    for c in codes:
        assert len(c) >= 43
        assert all(ch.isalnum() or ch in "-_" for ch in c), c


def test_code_digest_is_stable_and_hides_the_code():
    d1 = code_digest("abc")
    assert d1 == code_digest("abc")
    assert d1 != code_digest("abd")
    assert "abc" not in d1
    assert "=" not in d1
