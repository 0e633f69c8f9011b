"""
pytest configuration and fixtures for datesort tests.
"""

import io
import os
import sys
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

import pytest

from datesort.metadata import StaticMetadataProvider


FIXED_NOW = datetime(2024, 3, 9, 14, 5, 30)


@dataclass
class CliResult:
    """Result from running CLI command."""
    exit_code: int
    output: str
    error: str
    prompts: List[str]


@pytest.fixture
def fixed_clock():
    """Clock that always returns the same instant."""
    return lambda: FIXED_NOW


@pytest.fixture
def test_config_path(tmp_path):
    """Test-specific config path inside a fresh program root."""
    root = tmp_path / "datesort_home"
    root.mkdir()
    return root / "config.yml"


@pytest.fixture
def create_test_files(tmp_path):
    """Helper to create test files with specific properties."""

    def create_files(file_specs: List[dict], folder: str = "target") -> Path:
        """Create test files based on specifications.

        Args:
            file_specs: List of dicts with keys:
                - name: filename
                - content: file content (optional)
                - mtime: modification time as datetime (optional)

        Returns:
            Path to directory containing created files
        """
        test_dir = tmp_path / folder
        test_dir.mkdir(exist_ok=True)

        for spec in file_specs:
            file_path = test_dir / spec['name']
            file_path.parent.mkdir(parents=True, exist_ok=True)

            content = spec.get('content', b'test file content')
            if isinstance(content, str):
                file_path.write_text(content)
            else:
                file_path.write_bytes(content)

            if 'mtime' in spec:
                mtime = spec['mtime'].timestamp()
                os.utime(file_path, (mtime, mtime))

        return test_dir

    return create_files


@pytest.fixture
def static_provider():
    """Factory for in-memory metadata providers."""

    def make(values: Optional[Dict[str, Dict[str, object]]] = None) -> StaticMetadataProvider:
        return StaticMetadataProvider(values or {})

    return make


@pytest.fixture
def cli_runner(monkeypatch, fixed_clock):
    """Create a CLI runner that captures output and scripts prompt answers."""

    def run_cli(*args, config_path=None, provider=None, answers=()):
        """Run datesort CLI with given arguments.

        Args:
            *args: Command line arguments (target, --flags, etc)
            config_path: Optional config path for test isolation
            provider: Metadata provider (default: no metadata at all)
            answers: Responses given to console prompts, in order

        Returns:
            CliResult with exit_code, output, error and the prompts shown
        """
        from datesort.cli import main
        from datesort.constants import get_console

        remaining = list(answers)
        prompts: List[str] = []

        def mock_input(prompt=""):
            prompts.append(prompt)
            # Default to "no" once the scripted answers run out
            return remaining.pop(0) if remaining else "n"

        monkeypatch.setattr(get_console(), "input", mock_input)
        monkeypatch.setattr(sys, "argv", ['datesort'] + [str(a) for a in args])

        stdout = io.StringIO()
        stderr = io.StringIO()
        monkeypatch.setattr(sys, "stdout", stdout)
        monkeypatch.setattr(sys, "stderr", stderr)

        if provider is None:
            provider = StaticMetadataProvider()

        try:
            exit_code = main(config_path=config_path, provider=provider, clock=fixed_clock)
        except SystemExit as e:
            exit_code = e.code if e.code is not None else 0

        return CliResult(
            exit_code=exit_code,
            output=stdout.getvalue(),
            error=stderr.getvalue(),
            prompts=prompts,
        )

    return run_cli


@pytest.fixture
def assert_file_structure():
    """Helper to assert expected file structure."""

    def check_structure(base_path: Path, expected_structure: dict):
        """Assert that directory has expected structure.

        Args:
            base_path: Root directory to check
            expected_structure: Dict describing expected structure
                e.g., {
                    "2024": {
                        "01": ["file1.jpg", "file2.jpg"],
                        "02": ["file3.jpg"]
                    }
                }
        """
        def check_level(path: Path, structure: dict):
            for name, value in structure.items():
                item_path = path / name
                assert item_path.exists(), f"Expected {item_path} to exist"

                if isinstance(value, dict):
                    assert item_path.is_dir(), f"Expected {item_path} to be a directory"
                    check_level(item_path, value)
                elif isinstance(value, list):
                    assert item_path.is_dir(), f"Expected {item_path} to be a directory"
                    actual_files = sorted([f.name for f in item_path.iterdir() if f.is_file()])
                    expected_files = sorted(value)
                    assert actual_files == expected_files, \
                        f"Expected files {expected_files} in {item_path}, got {actual_files}"

        check_level(base_path, expected_structure)

    return check_structure
