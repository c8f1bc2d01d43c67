#!/usr/bin/env python3
"""
Tests for database utilities.
"""

import unittest
from unittest.mock import MagicMock

import psycopg
from psycopg import errors, postgres
from psycopg.adapt import AdaptersMap
from psycopg.pq import Format
from psycopg.types.string import TextLoader

from query_engine.database import classify_database_error, register_text_loaders


class TestClassifyDatabaseError(unittest.TestCase):
    """Test cases for database error classification."""

    def test_prepare_errors(self):
        for error in [
            errors.SyntaxError('syntax error at or near "SELEC"'),
            errors.UndefinedTable('relation "missing" does not exist'),
            errors.InsufficientPrivilege("permission denied for table users"),
        ]:
            with self.subTest(error=type(error).__name__):
                self.assertEqual(classify_database_error(error), "prepare")

    def test_prepare_errors_are_matched_by_sqlstate(self):
        """Test that class 42 errors are detected although psycopg maps them to ProgrammingError."""
        error = errors.SyntaxError('syntax error at or near ";"')

        self.assertIsInstance(error, psycopg.ProgrammingError)
        self.assertEqual(error.sqlstate, "42601")
        self.assertEqual(classify_database_error(error), "prepare")

    def test_errors_without_sqlstate(self):
        self.assertEqual(classify_database_error(psycopg.ProgrammingError("bad call")), "execution")
        self.assertEqual(classify_database_error(ValueError("not a driver error")), "execution")

    def test_canceled(self):
        error = errors.QueryCanceled("canceling statement due to user request")
        self.assertEqual(classify_database_error(error), "canceled")

    def test_connection_errors(self):
        self.assertEqual(classify_database_error(psycopg.OperationalError("server closed")), "connection")

    def test_execution_errors(self):
        self.assertEqual(classify_database_error(errors.UniqueViolation("duplicate key")), "execution")
        self.assertEqual(classify_database_error(errors.DivisionByZero("division by zero")), "execution")


class TestRegisterTextLoaders(unittest.TestCase):
    """Test cases for raw-text loading."""

    def test_builtin_types_and_arrays_load_as_text(self):
        adapters = MagicMock()

        register_text_loaders(adapters)

        int4 = postgres.types["int4"]
        adapters.register_loader.assert_any_call(int4.oid, TextLoader)
        adapters.register_loader.assert_any_call(int4.array_oid, TextLoader)
        adapters.register_loader.assert_any_call(postgres.types["timestamptz"].oid, TextLoader)

    def test_bytea_keeps_the_driver_loader(self):
        adapters = MagicMock()

        register_text_loaders(adapters)

        bytea = postgres.types["bytea"]
        registered = [c.args[0] for c in adapters.register_loader.call_args_list]
        self.assertNotIn(bytea.oid, registered)
        self.assertIn(bytea.array_oid, registered)


class TestLoadersOnRealAdapters(unittest.TestCase):
    """Test cases for loading values through a real adapters map."""

    def setUp(self):
        self.adapters = AdaptersMap(psycopg.adapters)
        register_text_loaders(self.adapters)

    def load(self, type_name, data):
        oid = postgres.types[type_name].oid
        loader = self.adapters.get_loader(oid, Format.TEXT)(oid, None)
        return loader.load(data)

    def test_numbers_and_dates_stay_raw_text(self):
        self.assertEqual(self.load("int4", b"42"), "42")
        self.assertEqual(self.load("numeric", b"1.50"), "1.50")
        self.assertEqual(self.load("timestamptz", b"2024-01-02 03:04:05+00"), "2024-01-02 03:04:05+00")

    def test_bytea_loads_the_stored_bytes(self):
        self.assertEqual(bytes(self.load("bytea", b"\\x6869")), b"hi")


if __name__ == "__main__":
    unittest.main()
