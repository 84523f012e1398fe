"""Tests for tree objects: entry parsing, canonical ordering, mode classification, errors."""

import unittest

from gitcore.errors import MalformedTreeEntryError, UnknownObjectTypeError
from gitcore.tree import Tree, TreeEntry, parse_tree, parse_tree_entry, serialize_tree
from gitcore.util import sha1_hash

SHA_A = "a" * 40
SHA_B = "b" * 40
SHA_C = "c" * 40


def entry_bytes(mode: str, path: str, sha: str) -> bytes:
    return f"{mode} {path}\0".encode() + bytes.fromhex(sha)


class TestTreeEntryParse(unittest.TestCase):
    def test_parse_single_entry(self) -> None:
        raw = entry_bytes("100644", "hello.txt", SHA_A)
        end, entry = parse_tree_entry(raw, 0)
        self.assertEqual(end, len(raw))
        self.assertEqual(entry, TreeEntry("100644", "hello.txt", SHA_A))

    def test_five_digit_mode_kept_as_stored(self) -> None:
        raw = entry_bytes("40000", "src", SHA_B)
        _, entry = parse_tree_entry(raw, 0)
        self.assertEqual(entry.mode, "40000")
        self.assertEqual(entry.normalized_mode, "040000")
        self.assertEqual(entry.object_type, "tree")
        self.assertEqual(entry.to_bytes(), raw)

    def test_parse_many_entries(self) -> None:
        raw = entry_bytes("100644", "a", SHA_A) + entry_bytes("40000", "b", SHA_B) + entry_bytes("100755", "c", SHA_C)
        entries = parse_tree(raw)
        self.assertEqual([e.path for e in entries], ["a", "b", "c"])
        self.assertEqual([e.sha for e in entries], [SHA_A, SHA_B, SHA_C])

    def test_empty_tree(self) -> None:
        self.assertEqual(parse_tree(b""), [])
        self.assertEqual(Tree().raw(), b"tree 0\x00")
        # well known hash of the empty tree
        self.assertEqual(Tree().hash_id(), "4b825dc642cb6eb9a060e54bf8d69288fbee4904")

    def test_missing_space(self) -> None:
        with self.assertRaises(MalformedTreeEntryError):
            parse_tree_entry(b"100644", 0)

    def test_bad_mode_length(self) -> None:
        with self.assertRaises(MalformedTreeEntryError) as ctx:
            parse_tree_entry(entry_bytes("644", "x", SHA_A), 0)
        self.assertEqual(ctx.exception.offset, 0)

    def test_non_digit_mode(self) -> None:
        for mode in ("1x064", "-1006", "+10064", "abcdef"):
            with self.assertRaises(MalformedTreeEntryError, msg=mode):
                parse_tree_entry(entry_bytes(mode, "x", SHA_A), 0)

    def test_missing_nul(self) -> None:
        with self.assertRaises(MalformedTreeEntryError):
            parse_tree_entry(b"100644 name-without-terminator", 0)

    def test_truncated_hash(self) -> None:
        raw = entry_bytes("100644", "x", SHA_A)[:-5]
        with self.assertRaises(MalformedTreeEntryError):
            parse_tree(raw)

    def test_error_offset_points_at_bad_entry(self) -> None:
        good = entry_bytes("100644", "a", SHA_A)
        with self.assertRaises(MalformedTreeEntryError) as ctx:
            parse_tree(good + b"12 b\0")
        self.assertEqual(ctx.exception.offset, len(good))


class TestTreeEntryClassification(unittest.TestCase):
    def test_object_types(self) -> None:
        self.assertEqual(TreeEntry("100644", "f", SHA_A).object_type, "blob")
        self.assertEqual(TreeEntry("100755", "f", SHA_A).object_type, "blob")
        self.assertEqual(TreeEntry("120000", "l", SHA_A).object_type, "blob")
        self.assertEqual(TreeEntry("040000", "d", SHA_A).object_type, "tree")
        self.assertEqual(TreeEntry("160000", "m", SHA_A).object_type, "commit")

    def test_unknown_mode(self) -> None:
        with self.assertRaises(UnknownObjectTypeError):
            TreeEntry("999999", "?", SHA_A).object_type

    def test_invalid_hash_on_serialize(self) -> None:
        with self.assertRaises(MalformedTreeEntryError):
            TreeEntry("100644", "f", "xyz").to_bytes()
        with self.assertRaises(MalformedTreeEntryError):
            TreeEntry("100644", "f", "ab" * 10).to_bytes()


class TestTreeOrdering(unittest.TestCase):
    def test_directory_sorts_as_path_with_slash(self) -> None:
        # "foo.c" < "foo/" because '.' (0x2e) < '/' (0x2f); "foo/" < "foo0"
        entries = [
            TreeEntry("100644", "foo0", SHA_A),
            TreeEntry("40000", "foo", SHA_B),
            TreeEntry("100644", "foo.c", SHA_C),
        ]
        ordered = parse_tree(serialize_tree(entries))
        self.assertEqual([e.path for e in ordered], ["foo.c", "foo", "foo0"])

    def test_file_beats_same_named_directory(self) -> None:
        entries = [
            TreeEntry("100644", "b", SHA_A),
            TreeEntry("40000", "a", SHA_B),
            TreeEntry("100644", "a", SHA_C),
        ]
        ordered = parse_tree(serialize_tree(entries))
        self.assertEqual([(e.path, e.object_type) for e in ordered], [("a", "blob"), ("a", "tree"), ("b", "blob")])

    def test_file_and_dir_with_same_prefix(self) -> None:
        entries = [TreeEntry("40000", "a", SHA_A), TreeEntry("100644", "a-b", SHA_B)]
        self.assertEqual([e.path for e in parse_tree(serialize_tree(entries))], ["a-b", "a"])

    def test_order_does_not_depend_on_input_order(self) -> None:
        entries = [
            TreeEntry("100644", "z", SHA_A),
            TreeEntry("100644", "b", SHA_B),
            TreeEntry("40000", "m", SHA_C),
        ]
        self.assertEqual(serialize_tree(entries), serialize_tree(list(reversed(entries))))

    def test_tree_object_hash(self) -> None:
        tree = Tree([TreeEntry("100644", "b.txt", SHA_B), TreeEntry("100644", "a.txt", SHA_A)])
        payload = entry_bytes("100644", "a.txt", SHA_A) + entry_bytes("100644", "b.txt", SHA_B)
        self.assertEqual(tree.serialize(), payload)
        self.assertEqual(tree.hash_id(), sha1_hash(b"tree " + str(len(payload)).encode() + b"\0" + payload))
        self.assertEqual(Tree.deserialize(payload).serialize(), payload)


if __name__ == "__main__":
    unittest.main()
