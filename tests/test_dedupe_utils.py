from src.utils.dedupe import dedupe_by_key, sha256_hex


def test_first_occurrence_wins_and_order_is_kept():
    items = [
        {"link": "a", "n": 1},
        {"link": "b", "n": 2},
        {"link": "a", "n": 3},
        {"link": "c", "n": 4},
    ]
    result = dedupe_by_key(items, lambda item: item["link"])
    assert [item["n"] for item in result] == [1, 2, 4]


def test_none_keys_are_never_collapsed():
    items = [{"link": None}, {"link": None}, {"link": "x"}]
    assert len(dedupe_by_key(items, lambda item: item["link"])) == 3


def test_sha256_hex_is_stable():
    assert sha256_hex("abc") == "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"
