"""Safety tests to ensure the test suite doesn't modify production data.

These tests verify that running the test suite does NOT touch:
- ./data directory (configuration and seed files)
- ./db directory (user's database)

All tests MUST use temporary directories via pytest fixtures.
"""

import hashlib
import os
import re
from pathlib import Path

import pytest

TESTS_DIR = Path(__file__).parent


def _hash_directory(path: Path) -> str | None:
    """Create a hash of directory structure and file metadata.

    Returns None if directory doesn't exist.
    """
    if not path.exists():
        return None

    hasher = hashlib.sha256()

    for root, dirs, files in os.walk(path):
        dirs.sort()
        files.sort()

        for filename in files:
            filepath = Path(root) / filename
            hasher.update(str(filepath.relative_to(path)).encode())

            # Size and mtime, not content, for speed
            stat = filepath.stat()
            hasher.update(str(stat.st_size).encode())
            hasher.update(str(int(stat.st_mtime)).encode())

    return hasher.hexdigest()


class TestDataDirectorySafety:
    """Tests ensuring ./data is never modified by test suite."""

    @pytest.fixture(scope="class")
    def data_dir_state_before(self):
        """Capture state of ./data before tests."""
        return _hash_directory(Path("data"))

    def test_data_directory_not_modified(self, data_dir_state_before):
        """Test suite should not modify ./data."""
        if _hash_directory(Path("data")) != data_dir_state_before:
            pytest.fail(
                "./data directory was modified during test run. "
                "All tests MUST use temporary directories."
            )


class TestDatabaseDirectorySafety:
    """Tests ensuring ./db is never modified by test suite."""

    @pytest.fixture(scope="class")
    def db_dir_state_before(self):
        """Capture state of ./db before tests."""
        db_path = Path("db")
        return {
            "exists": db_path.exists(),
            "hash": _hash_directory(db_path),
        }

    def test_db_directory_not_created(self, db_dir_state_before):
        """Test suite should not create ./db if it didn't exist."""
        if not db_dir_state_before["exists"] and Path("db").exists():
            pytest.fail(
                "./db directory was created during test run. "
                "All tests MUST use temporary directories for databases."
            )

    def test_db_directory_not_modified(self, db_dir_state_before):
        """Test suite should not modify ./db if it existed."""
        if db_dir_state_before["exists"]:
            if _hash_directory(Path("db")) != db_dir_state_before["hash"]:
                pytest.fail(
                    "./db directory was modified during test run. "
                    "All tests MUST use temporary directories for databases."
                )


class TestTestIsolation:
    """Meta-tests ensuring test fixtures use temp directories."""

    def test_no_default_database_handles(self):
        """No test opens Database() on the default path."""
        violations = []

        for test_file in sorted(TESTS_DIR.rglob("test_*.py")):
            if test_file.name == Path(__file__).name:
                continue
            content = test_file.read_text(encoding="utf-8")
            if re.search(r"Database\(\s*\)", content):
                violations.append(f"{test_file.name}: Database() without explicit temp path")
            if "create_app()" in content:
                violations.append(f"{test_file.name}: create_app() without a temp config")

        if violations:
            pytest.fail(
                "Test files may not be properly isolated:\n"
                + "\n".join(f"  - {v}" for v in violations)
            )
