#!/usr/bin/env python3
"""
Tests for request decoding.

This module tests action selection, continuation decoding, timeouts and
the bad-data messages returned for malformed requests.
"""

import unittest

from query_engine.constants import MAX_TIMEOUT
from query_engine.engine import decode_request
from query_engine.errors import BadDataError
from query_engine.models import FETCH_COLUMNS, FETCH_ROWS, PoolStats, Request, RowInsert, RowMutation, RowQuery

TOP_LEVEL_CHOICES = "`query_rows`, `insert_rows`, `affected_rows`, or `get_db_stats`"
NESTED_CHOICES = "`query_rows`, `insert_rows`, or `affected_rows`"


class TestDecodeActions(unittest.TestCase):
    """Test cases for selecting the single action of a request."""

    def test_query_rows(self):
        request = decode_request({"query_rows": {"query": "SELECT * FROM users WHERE name = 'Ted';"}})

        self.assertEqual(request, Request(
            action=RowQuery(query="SELECT * FROM users WHERE name = 'Ted';"),
            transaction=False,
            timeout=10,
        ))

    def test_insert_rows_with_params(self):
        request = decode_request({
            "insert_rows": {"query": "INSERT INTO users VALUES(%s, %s);", "params": [4, "Tom"]},
        })

        self.assertIsInstance(request.action, RowInsert)
        self.assertEqual(request.action.params, (4, "Tom"))

    def test_param_scalar_types_are_kept(self):
        request = decode_request({
            "affected_rows": {"query": "UPDATE t SET a = %s, b = %s, c = %s, d = %s", "params": [None, True, 1.5, "x"]},
        })

        self.assertIsInstance(request.action, RowMutation)
        self.assertEqual(request.action.params, (None, True, 1.5, "x"))
        self.assertIs(request.action.params[1], True)

    def test_null_params_mean_no_params(self):
        request = decode_request({"query_rows": {"query": "SELECT 1", "params": None}})
        self.assertEqual(request.action, RowQuery(query="SELECT 1", params=()))

    def test_query_rows_column_fetch(self):
        request = decode_request({"query_rows": {"query": "SELECT * FROM users;", "fetch": "columns"}})

        self.assertEqual(request.action, RowQuery(query="SELECT * FROM users;", fetch=FETCH_COLUMNS))
        self.assertEqual(decode_request({"query_rows": {"query": "SELECT 1"}}).action.fetch, FETCH_ROWS)

    def test_fetch_on_other_statements(self):
        with self.assertRaises(BadDataError) as cm:
            decode_request({"insert_rows": {"query": "INSERT INTO t VALUES(1);", "fetch": "columns"}})
        self.assertEqual(str(cm.exception), "Error: `fetch` is only supported by `query_rows`")

    def test_unknown_fetch_mode(self):
        with self.assertRaises(BadDataError) as cm:
            decode_request({"query_rows": {"query": "SELECT 1", "fetch": "types"}})
        self.assertTrue(str(cm.exception).startswith("Error: failed to unpack request: query_rows.fetch"))

    def test_get_db_stats(self):
        request = decode_request({"get_db_stats": True})
        self.assertEqual(request.action, PoolStats())

    def test_get_db_stats_false_selects_nothing(self):
        with self.assertRaises(BadDataError) as cm:
            decode_request({"get_db_stats": False})
        self.assertEqual(str(cm.exception), f"Error: requires one of {TOP_LEVEL_CHOICES}")

    def test_no_action(self):
        with self.assertRaises(BadDataError) as cm:
            decode_request({"transaction": True})
        self.assertEqual(str(cm.exception), f"Error: requires one of {TOP_LEVEL_CHOICES}")

    def test_more_than_one_action(self):
        with self.assertRaises(BadDataError) as cm:
            decode_request({
                "query_rows": {"query": "SELECT 1"},
                "get_db_stats": True,
            })
        self.assertEqual(str(cm.exception), f"Error: requires one of {TOP_LEVEL_CHOICES}, not more than one")

    def test_missing_query(self):
        for body in [{}, {"query": ""}, {"query": "   "}, {"params": [1]}]:
            with self.subTest(body=body):
                with self.assertRaises(BadDataError) as cm:
                    decode_request({"insert_rows": body})
                self.assertEqual(str(cm.exception), "Error: `insert_rows` requires `query`")

    def test_unknown_fields_are_ignored(self):
        request = decode_request({"query_rows": {"query": "SELECT 1", "fetch": "rows"}, "trace": "abc"})
        self.assertEqual(request.action, RowQuery(query="SELECT 1"))


class TestDecodeContinuations(unittest.TestCase):
    """Test cases for nested continuations."""

    def test_continuation_chain(self):
        request = decode_request({
            "transaction": True,
            "insert_rows": {
                "query": "INSERT INTO users VALUES(%s, %s);",
                "params": [4, "Tom"],
                "next": {
                    "affected_rows": {
                        "query": "UPDATE users SET name = 'Teddy' WHERE name = 'Ted';",
                        "next": {"query_rows": {"query": "SELECT * FROM users ORDER BY id;"}},
                    },
                },
            },
        })

        self.assertTrue(request.transaction)
        self.assertEqual(
            [type(action) for action in request.action.chain()],
            [RowInsert, RowMutation, RowQuery],
        )
        self.assertEqual(request.action.next.next.query, "SELECT * FROM users ORDER BY id;")

    def test_continuation_without_action(self):
        with self.assertRaises(BadDataError) as cm:
            decode_request({"query_rows": {"query": "SELECT 1", "next": {}}})
        self.assertEqual(str(cm.exception), f"Error: requires one of {NESTED_CHOICES}")

    def test_pool_stats_is_not_a_continuation(self):
        with self.assertRaises(BadDataError) as cm:
            decode_request({"query_rows": {"query": "SELECT 1", "next": {"get_db_stats": True}}})
        self.assertEqual(str(cm.exception), f"Error: requires one of {NESTED_CHOICES}")

    def test_continuation_with_two_actions(self):
        with self.assertRaises(BadDataError) as cm:
            decode_request({
                "query_rows": {
                    "query": "SELECT 1",
                    "next": {
                        "query_rows": {"query": "SELECT 2"},
                        "affected_rows": {"query": "DELETE FROM t"},
                    },
                },
            })
        self.assertEqual(str(cm.exception), f"Error: requires one of {NESTED_CHOICES}, not more than one")

    def test_continuation_missing_query(self):
        with self.assertRaises(BadDataError) as cm:
            decode_request({"query_rows": {"query": "SELECT 1", "next": {"affected_rows": {}}}})
        self.assertEqual(str(cm.exception), "Error: `affected_rows` requires `query`")


class TestDecodeTimeout(unittest.TestCase):
    """Test cases for request timeouts."""

    def test_explicit_timeout(self):
        request = decode_request({"get_db_stats": True, "timeout": 3})
        self.assertEqual(request.timeout, 3)

    def test_zero_or_missing_timeout_uses_default(self):
        self.assertEqual(decode_request({"get_db_stats": True, "timeout": 0}, default_timeout=7).timeout, 7)
        self.assertEqual(decode_request({"get_db_stats": True}, default_timeout=7).timeout, 7)

    def test_negative_timeout(self):
        with self.assertRaises(BadDataError) as cm:
            decode_request({"get_db_stats": True, "timeout": -1})
        self.assertTrue(str(cm.exception).startswith("Error: failed to unpack request: timeout"))

    def test_timeout_limit(self):
        self.assertEqual(decode_request({"get_db_stats": True, "timeout": MAX_TIMEOUT}).timeout, MAX_TIMEOUT)

        for timeout in [MAX_TIMEOUT + 1, 10 ** 12]:
            with self.subTest(timeout=timeout):
                with self.assertRaises(BadDataError) as cm:
                    decode_request({"get_db_stats": True, "timeout": timeout})
                self.assertTrue(str(cm.exception).startswith("Error: failed to unpack request: timeout"))


class TestDecodeMalformed(unittest.TestCase):
    """Test cases for requests that cannot be unpacked."""

    def test_not_a_mapping(self):
        for data in [None, [1, 2], "query_rows"]:
            with self.subTest(data=data):
                with self.assertRaises(BadDataError) as cm:
                    decode_request(data)
                self.assertEqual(str(cm.exception), "Error: failed to unpack request: expected a mapping")

    def test_wrong_field_types(self):
        for data in [
            {"query_rows": {"query": "SELECT 1", "params": "abc"}},
            {"query_rows": "SELECT 1"},
            {"query_rows": {"query": "SELECT 1"}, "transaction": "maybe"},
            {"query_rows": {"query": "SELECT %s", "params": [{"nested": 1}]}},
        ]:
            with self.subTest(data=data):
                with self.assertRaises(BadDataError) as cm:
                    decode_request(data)
                self.assertTrue(str(cm.exception).startswith("Error: failed to unpack request: "))


if __name__ == "__main__":
    unittest.main()
