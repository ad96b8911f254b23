"""Tests for container id disambiguation."""

from cove.naming import disambiguate, generate_bis


def test_generate_bis_unused_id():
    assert generate_bis("ubuntu", []) == 0


def test_generate_bis_other_ids_ignored():
    assert generate_bis("ubuntu", ["debian", "ubuntu2", "my-ubuntu"]) == 0


def test_generate_bis_second_use():
    assert generate_bis("ubuntu", ["ubuntu"]) == 2


def test_generate_bis_third_use():
    assert generate_bis("ubuntu", ["ubuntu", "ubuntu-2"]) == 3


def test_generate_bis_skips_past_highest_suffix():
    assert generate_bis("ubuntu", ["ubuntu", "ubuntu-7"]) == 8


def test_generate_bis_after_base_deleted():
    # Only a suffixed entry remains; the base must not be handed out again.
    assert generate_bis("ubuntu", ["ubuntu-2"]) == 3


def test_generate_bis_order_independent():
    ids = ["ubuntu-5", "ubuntu", "ubuntu-2"]
    assert generate_bis("ubuntu", ids) == 6
    assert generate_bis("ubuntu", list(reversed(ids))) == 6


def test_generate_bis_non_numeric_suffix_ignored():
    assert generate_bis("ubuntu", ["ubuntu-beta"]) == 0


def test_generate_bis_hyphenated_base():
    assert generate_bis("my-box", ["my-box"]) == 2
    assert generate_bis("my-box", ["my-box", "my-box-2"]) == 3


def test_generate_bis_regex_characters_escaped():
    assert generate_bis("a.b", ["axb"]) == 0
    assert generate_bis("a.b", ["a.b"]) == 2


def test_generate_bis_case_sensitive():
    assert generate_bis("Ubuntu", ["ubuntu"]) == 0


def test_disambiguate_no_suffix():
    assert disambiguate("ubuntu", "Ubuntu", 0) == ("ubuntu", "Ubuntu")


def test_disambiguate_with_suffix():
    assert disambiguate("ubuntu", "Ubuntu", 2) == ("ubuntu-2", "Ubuntu (2)")
