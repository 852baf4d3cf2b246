import pytest

from rolewallet.core.security import check_password, hash_password

ROUNDS = 4


def test_hash_round_trip():
    hashed = hash_password("open sesame", rounds=ROUNDS)

    assert hashed != "open sesame"
    assert check_password("open sesame", hashed)
    assert not check_password("open sesame!", hashed)


def test_hashes_are_salted():
    assert hash_password("same", rounds=ROUNDS) != hash_password("same", rounds=ROUNDS)


def test_rounds_recorded_in_hash():
    assert hash_password("pw", rounds=ROUNDS).startswith("$2b$04$")


def test_over_long_password_rejected():
    with pytest.raises(ValueError):
        hash_password("x" * 73, rounds=ROUNDS)


@pytest.mark.parametrize("stored", ["", "not-a-bcrypt-hash"])
def test_malformed_hash_does_not_verify(stored):
    assert check_password("anything", stored) is False


def test_over_long_candidate_does_not_verify():
    hashed = hash_password("x" * 72, rounds=ROUNDS)

    assert check_password("x" * 73, hashed) is False
