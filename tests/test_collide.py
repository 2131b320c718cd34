import io
import os
import shutil
import tempfile
import unittest
from contextlib import redirect_stdout
from unittest import mock

import collide
from collide import Session
from errors import PreconditionViolation

SCENARIO_PAIRS = [(key, i) for i, key in enumerate(["aa", "ab", "ac", "ad", "ae", "af", "ag", "ah", "ai", "aj", "ak"])]


class TempDirTestCase(unittest.TestCase):
    def setUp(self):
        self.directory = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.directory)

    def write(self, name, text):
        path = os.path.join(self.directory, name)
        with open(path, "w", newline="") as file:
            file.write(text)
        return path


class TestReadPairs(TempDirTestCase):
    def test_reads_key_value_rows(self):
        path = self.write("keys.csv", "apple,3\npear, 5\n\nplum,-2\n")
        self.assertEqual(collide.read_pairs(path), [("apple", 3), ("pear", 5), ("plum", -2)])

    def test_rejects_bad_value(self):
        path = self.write("keys.csv", "apple,three\n")
        with self.assertRaises(PreconditionViolation):
            collide.read_pairs(path)

    def test_rejects_file_that_is_not_utf8(self):
        path = os.path.join(self.directory, "keys.csv")
        with open(path, "wb") as file:
            file.write(b"\xff\xfe,1\n")
        with self.assertRaises(PreconditionViolation):
            collide.read_pairs(path)

    def test_reads_utf8_keys(self):
        path = os.path.join(self.directory, "keys.csv")
        with open(path, "wb") as file:
            file.write("caf\u00e9,4\n".encode("utf-8"))
        self.assertEqual(collide.read_pairs(path), [("caf\u00e9", 4)])

    def test_rejects_wrong_column_count(self):
        path = self.write("keys.csv", "apple,1,2\n")
        with self.assertRaises(PreconditionViolation):
            collide.read_pairs(path)


class TestSession(unittest.TestCase):
    def test_build_table(self):
        table = Session(SCENARIO_PAIRS, 8).build_table("combined")
        self.assertEqual(len(table), 11)
        self.assertEqual(table.collisions(), 3)

    def test_duplicate_keys_in_input_update(self):
        table = Session([("a", 1), ("a", 2)], 4).build_table("combined")
        self.assertEqual(len(table), 1)
        self.assertEqual(table["a"], 2)


class TestCompareHashFunctions(unittest.TestCase):
    def test_report(self):
        report = collide.compare_hash_functions(Session(SCENARIO_PAIRS, 8))
        lines = report.splitlines()
        self.assertEqual(lines[0], "Table size: 8, keys: 11")
        rows = {line.split("|")[0].strip(): [cell.strip() for cell in line.split("|")[1:]] for line in lines[2:]}
        self.assertEqual(rows["combined"], ["11", "3", "2"])
        self.assertEqual(rows["masked_combined"], ["11", "3", "2"])
        self.assertEqual(rows["first_char"], ["11", "10", "11"])

    def test_reports_unusable_hash_function(self):
        report = collide.compare_hash_functions(Session(SCENARIO_PAIRS, 6))
        masked = [line for line in report.splitlines() if line.startswith("masked_combined")][0]
        self.assertIn("power-of-two", masked)


class TestMenu(unittest.TestCase):
    def setUp(self):
        self.session = Session(SCENARIO_PAIRS, 8)

    def run_quietly(self, function, *args):
        output = io.StringIO()
        with redirect_stdout(output):
            result = function(*args)
        return result, output.getvalue()

    def test_exit(self):
        run_again, _ = self.run_quietly(collide.parse_menu_selection, "4", self.session)
        self.assertFalse(run_again)

    def test_invalid_selection(self):
        run_again, output = self.run_quietly(collide.parse_menu_selection, "9", self.session)
        self.assertTrue(run_again)
        self.assertIn("invalid selection", output)

    def test_compare(self):
        _, output = self.run_quietly(collide.parse_menu_selection, "1", self.session)
        self.assertIn("Collisions", output)

    def test_display_one_hash_function(self):
        table, output = self.run_quietly(collide.parse_hash_function_selection, "combined", self.session)
        self.assertEqual(len(table), 11)
        self.assertIn("Hash table, size=8, total=11", output)
        self.assertIn("Collisions: 3", output)

    def test_display_unknown_hash_function(self):
        table, output = self.run_quietly(collide.parse_hash_function_selection, "md5", self.session)
        self.assertIsNone(table)
        self.assertIn("unknown hash function", output)

    def test_change_size(self):
        accepted, _ = self.run_quietly(collide.parse_size_selection, "16", self.session)
        self.assertTrue(accepted)
        self.assertEqual(self.session.size, 16)

    def test_reject_bad_size(self):
        for text in ("0", "-3", "eight"):
            accepted, output = self.run_quietly(collide.parse_size_selection, text, self.session)
            self.assertFalse(accepted)
            self.assertIn("positive integer", output)
        self.assertEqual(self.session.size, 8)

    def test_size_through_menu(self):
        with mock.patch("builtins.input", return_value="32"):
            self.run_quietly(collide.parse_menu_selection, "3", self.session)
        self.assertEqual(self.session.size, 32)


class TestMain(TempDirTestCase):
    def test_runs_until_exit(self):
        path = self.write("keys.csv", "aa,1\nab,2\n")
        output = io.StringIO()
        with mock.patch("builtins.input", side_effect=["1", "2", "first_char", "4"]), redirect_stdout(output):
            self.assertEqual(collide.main([path]), 0)
        self.assertIn("Table size: 8, keys: 2", output.getvalue())
        self.assertIn("array[1]->(key=ab,value=2)->(key=aa,value=1)-|", output.getvalue())

    def test_missing_file(self):
        output = io.StringIO()
        with redirect_stdout(output):
            self.assertEqual(collide.main([os.path.join(self.directory, "missing.csv")]), 1)
        self.assertIn("Could not load keys", output.getvalue())

    def test_file_that_is_not_utf8(self):
        path = os.path.join(self.directory, "keys.csv")
        with open(path, "wb") as file:
            file.write(b"\xff\xfe,1\n")
        output = io.StringIO()
        with redirect_stdout(output):
            self.assertEqual(collide.main([path]), 1)
        self.assertIn("Could not load keys", output.getvalue())
        self.assertIn("not valid UTF-8", output.getvalue())


if __name__ == "__main__":
    unittest.main()
