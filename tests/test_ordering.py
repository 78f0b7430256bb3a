import random

from appwire._utils._ordering import hash_code, reorder_by_hash_code


class TestHashCode:
    def test_known_values(self):
        assert hash_code("") == 0
        assert hash_code("a") == 97
        assert hash_code("ab") == 3105
        assert hash_code("hello") == 99162322

    def test_wraps_to_signed_32_bits(self):
        # 31**n overflow for long keys must fold into the signed range
        value = hash_code("_csrftoken_and_a_rather_long_field_name")
        assert -(2**31) <= value < 2**31

    def test_negative_hash(self):
        assert hash_code("polygenelubricants") == -2147483648

    def test_utf8_bytes_are_hashed(self):
        assert hash_code("é") == (0xC3 * 31 + 0xA9)


class TestReorderByHashCode:
    def test_orders_by_hash_not_lexically(self):
        ordered = reorder_by_hash_code({"b": "2", "a": "1", "ab": "3"})

        assert [key for key, _ in ordered] == ["a", "b", "ab"]

    def test_is_independent_of_insertion_order(self):
        pairs = [(f"field_{i}", str(i)) for i in range(50)]
        pairs += [("_uuid", "u"), ("_csrftoken", "c"), ("upload_id", "1")]
        expected = reorder_by_hash_code(dict(pairs))

        for _ in range(10):
            shuffled = pairs[:]
            random.shuffle(shuffled)
            assert reorder_by_hash_code(dict(shuffled)) == expected
            assert reorder_by_hash_code(shuffled) == expected

    def test_ties_broken_by_key(self):
        # "Aa" and "BB" share the same hash
        assert hash_code("Aa") == hash_code("BB")

        assert reorder_by_hash_code({"BB": "2", "Aa": "1"}) == [
            ("Aa", "1"),
            ("BB", "2"),
        ]

    def test_does_not_mutate_input(self):
        data = {"z": "1", "a": "2"}
        reorder_by_hash_code(data)

        assert list(data) == ["z", "a"]

    def test_empty(self):
        assert reorder_by_hash_code({}) == []
