"""Tests for the KVLM codec: parsing, serialization, continuation lines, messages."""

import unittest

from gitcore.errors import SerializeInputError, UnsupportedValueTypeError
from gitcore.kvlm import MESSAGE_KEY, kvlm_parse, kvlm_serialize
from gitcore.ordereddict import OrderedMap


def od(*pairs) -> OrderedMap:
    m = OrderedMap()
    for k, v in pairs:
        m.set(k, v)
    return m


class TestKvlmParse(unittest.TestCase):
    def test_empty_input(self) -> None:
        self.assertEqual(kvlm_parse(b""), OrderedMap())

    def test_single_pair(self) -> None:
        self.assertEqual(kvlm_parse(b"key value\n"), od(("key", b"value")))

    def test_multiple_pairs(self) -> None:
        got = kvlm_parse(b"key1 value1\nkey2 value2\nkey3 value3\n")
        self.assertEqual(got, od(("key1", b"value1"), ("key2", b"value2"), ("key3", b"value3")))

    def test_continuation_lines(self) -> None:
        got = kvlm_parse(b"key1 value1\nkey2 line1\n line2\n line3\nkey3 value3\n")
        self.assertEqual(
            got,
            od(("key1", b"value1"), ("key2", b"line1\nline2\nline3"), ("key3", b"value3")),
        )

    def test_message_without_trailing_newline(self) -> None:
        got = kvlm_parse(b"key1 value1\nkey2 value2\n\nThis is a message")
        self.assertEqual(got.get(MESSAGE_KEY), b"This is a message")
        self.assertEqual(got.keys(), ["key1", "key2", MESSAGE_KEY])

    def test_message_loses_one_trailing_newline(self) -> None:
        got = kvlm_parse(b"k v\n\nline one\nline two\n\n")
        self.assertEqual(got[MESSAGE_KEY], b"line one\nline two\n")

    def test_duplicate_keys_accumulate(self) -> None:
        got = kvlm_parse(b"key1 value1\nkey1 value2\nkey1 value3\n")
        self.assertEqual(got["key1"], [b"value1", b"value2", b"value3"])

    def test_no_newline_at_end(self) -> None:
        self.assertEqual(kvlm_parse(b"key value"), od(("key", b"value")))

    def test_only_message(self) -> None:
        self.assertEqual(kvlm_parse(b"\nThis is only a message"), od((MESSAGE_KEY, b"This is only a message")))

    def test_continuation_without_final_newline(self) -> None:
        got = kvlm_parse(b"key1 value1\nkey2 line1\n line2\n line3")
        self.assertEqual(got["key2"], b"line1\nline2\nline3")

    def test_start_offset(self) -> None:
        self.assertEqual(kvlm_parse(b"ignore this\nkey value\n", 12), od(("key", b"value")))

    def test_parses_into_given_map(self) -> None:
        existing = od(("parent", b"p1"))
        kvlm_parse(b"parent p2\n", kvlm=existing)
        self.assertEqual(existing["parent"], [b"p1", b"p2"])

    def test_gpgsig_block(self) -> None:
        raw = (
            b"tree 29ff16c9c14e2652b22f8b78bb08a5a07930c147\n"
            b"gpgsig -----BEGIN PGP SIGNATURE-----\n"
            b" \n"
            b" iQIzBAABCAAdFiEExwXquOM8bWb4Q2zVGxM2FxoLkGQFAlsEjZQACgkQGxM2FxoL\n"
            b" -----END PGP SIGNATURE-----\n"
            b"\n"
            b"Create first draft\n"
        )
        got = kvlm_parse(raw)
        self.assertTrue(got["gpgsig"].startswith(b"-----BEGIN PGP SIGNATURE-----\n\n"))
        self.assertTrue(got["gpgsig"].endswith(b"\n-----END PGP SIGNATURE-----"))
        self.assertEqual(kvlm_serialize(got), raw)


class TestKvlmSerialize(unittest.TestCase):
    def test_none_input(self) -> None:
        with self.assertRaises(SerializeInputError):
            kvlm_serialize(None)

    def test_empty_input(self) -> None:
        self.assertEqual(kvlm_serialize(OrderedMap()), b"")

    def test_pairs_in_insertion_order(self) -> None:
        self.assertEqual(
            kvlm_serialize(od(("key1", b"value1"), ("key2", b"value2"))),
            b"key1 value1\nkey2 value2\n",
        )

    def test_multiline_value_gets_continuation_space(self) -> None:
        self.assertEqual(kvlm_serialize(od(("key1", b"line1\nline2"))), b"key1 line1\n line2\n")

    def test_message_after_blank_line(self) -> None:
        got = kvlm_serialize(od(("key1", b"value1"), (MESSAGE_KEY, b"This is a message")))
        self.assertEqual(got, b"key1 value1\n\nThis is a message\n")

    def test_list_value_emits_one_line_each(self) -> None:
        got = kvlm_serialize(od(("key1", [b"value1", b"value2"])))
        self.assertEqual(got, b"key1 value1\nkey1 value2\n")

    def test_unsupported_value_type(self) -> None:
        with self.assertRaises(UnsupportedValueTypeError) as ctx:
            kvlm_serialize(od(("key1", 123)))
        self.assertEqual(ctx.exception.key, "key1")
        self.assertIs(ctx.exception.value_type, int)

    def test_list_with_non_bytes_rejected(self) -> None:
        with self.assertRaises(UnsupportedValueTypeError):
            kvlm_serialize(od(("key1", [b"ok", "text"])))

    def test_parse_of_serialized_is_identity(self) -> None:
        expected = od(
            ("tree", b"a" * 40),
            ("parent", [b"b" * 40, b"c" * 40]),
            ("note", b"two\nlines"),
            (MESSAGE_KEY, b"subject\n\nbody\n"),
        )
        self.assertEqual(kvlm_parse(kvlm_serialize(expected)), expected)


if __name__ == "__main__":
    unittest.main()
