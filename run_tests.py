#!/usr/bin/env python3
"""
Test runner script for the query engine project.

This script runs all tests under tests/ (including subdirectories) and
provides a summary of results.
"""

import importlib.util
import sys
import unittest
from pathlib import Path


def load_test_module(test_file: Path, test_dir: Path):
    """Import a test file by path; helpers are importable from the tests directory."""
    if str(test_dir) not in sys.path:
        sys.path.insert(0, str(test_dir))

    module_name = "_".join(test_file.relative_to(test_dir).with_suffix("").parts)
    spec = importlib.util.spec_from_file_location(module_name, test_file)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def discover_and_run_tests():
    """Discover and run all tests in the project."""
    script_dir = Path(__file__).parent
    test_dir = script_dir / 'tests'

    if not test_dir.exists():
        print(f"Tests directory not found: {test_dir}")
        return False

    test_files = sorted(test_dir.rglob('test_*.py'))
    print(f"Found test files: {[str(f.relative_to(test_dir)) for f in test_files]}")

    loader = unittest.TestLoader()
    suite = unittest.TestSuite()
    failed_imports = []
    for test_file in test_files:
        try:
            module = load_test_module(test_file, test_dir)
            suite.addTests(loader.loadTestsFromModule(module))
            print(f"Loaded tests from {test_file.relative_to(test_dir)}")
        except ImportError as e:
            print(f"Failed to import {test_file}: {e}")
            failed_imports.append(test_file)

    runner = unittest.TextTestRunner(
        verbosity=2,
        stream=sys.stdout,
        descriptions=True,
        failfast=False
    )

    print("\n" + "="*70)
    print("RUNNING TESTS")
    print("="*70)

    result = runner.run(suite)

    print("\n" + "="*70)
    print("TEST SUMMARY")
    print("="*70)
    print(f"Tests run: {result.testsRun}")
    print(f"Failures: {len(result.failures)}")
    print(f"Errors: {len(result.errors)}")
    print(f"Skipped: {len(result.skipped)}")
    print(f"Import failures: {len(failed_imports)}")

    success = result.wasSuccessful() and not failed_imports
    print(f"\nOverall result: {'PASSED' if success else 'FAILED'}")

    return success


def run_specific_test_file(test_file):
    """Run tests from a specific test file, given relative to tests/."""
    if not test_file.endswith('.py'):
        test_file += '.py'

    test_dir = Path(__file__).parent / 'tests'
    test_file_path = test_dir / test_file

    if not test_file_path.exists():
        print(f"Test file {test_file} not found in {test_dir}")
        return False

    try:
        module = load_test_module(test_file_path, test_dir)
    except ImportError as e:
        print(f"Failed to import {test_file}: {e}")
        return False

    suite = unittest.TestLoader().loadTestsFromModule(module)
    result = unittest.TextTestRunner(verbosity=2).run(suite)
    return result.wasSuccessful()


def main():
    """Main entry point for the test runner."""
    if len(sys.argv) > 1:
        test_file = sys.argv[1]
        print(f"Running tests from {test_file}")
        success = run_specific_test_file(test_file)
    else:
        print("Running all tests...")
        success = discover_and_run_tests()

    sys.exit(0 if success else 1)


if __name__ == '__main__':
    main()
