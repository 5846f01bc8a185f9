"""Unit tests for console helpers (express_ddd_gen.utils).

Tests cover:
- set_verbose / is_verbose and print_debug gating
- print_success / print_error / print_warning / print_info
- print_file_table rows and empty-table suppression
- print_banner
"""

from __future__ import annotations

import pytest

from express_ddd_gen.utils import (
    console,
    is_verbose,
    print_banner,
    print_debug,
    print_error,
    print_file_table,
    print_info,
    print_success,
    print_warning,
    set_verbose,
)

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Verbosity
# ---------------------------------------------------------------------------


class TestVerbose:
    def test_default_is_quiet(self):
        assert is_verbose() is False

    def test_debug_suppressed_when_quiet(self):
        with console.capture() as capture:
            print_debug("hidden detail")
        assert capture.get() == ""

    def test_debug_printed_when_verbose(self):
        set_verbose(True)
        assert is_verbose() is True
        with console.capture() as capture:
            print_debug("visible detail")
        assert "visible detail" in capture.get()


# ---------------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------------


class TestMessages:
    @pytest.mark.parametrize("fn", [print_success, print_error, print_warning, print_info])
    def test_message_is_printed(self, fn):
        with console.capture() as capture:
            fn("something happened")
        assert "something happened" in capture.get()

    def test_banner(self):
        with console.capture() as capture:
            print_banner("Domain 'order' generated successfully", True)
        assert "Domain 'order' generated successfully" in capture.get()


# ---------------------------------------------------------------------------
# File table
# ---------------------------------------------------------------------------


class TestFileTable:
    def test_rows_for_each_status(self):
        with console.capture() as capture:
            print_file_table(
                ["src/a.ts"],
                skipped=["src/b.ts"],
                updated=["src/infrastructure/types.ts"],
                title="Domain 'order'",
            )
        output = capture.get()
        assert "created" in output
        assert "skipped" in output
        assert "updated" in output
        assert "src/a.ts" in output

    def test_empty_table_prints_nothing(self):
        with console.capture() as capture:
            print_file_table([])
        assert capture.get() == ""
