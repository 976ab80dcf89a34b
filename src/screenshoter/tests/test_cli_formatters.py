#!/usr/bin/env python3
"""
Unit tests for cli/formatters.py and cli/schemas.py
"""

import os
import sys
import unittest
from io import StringIO

# Add parent directory to path to import module
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from screenshoter.cli.formatters import (
    console,
    print_capture_result,
    print_collections_table,
    print_error,
    print_export_results,
    print_info,
    print_json,
    print_warning,
)
from screenshoter.cli.schemas import (
    ErrorResponse,
    SuccessResponse,
    format_cli_response,
    response_from_result,
    validate_output_against_schema,
)


class TestCliFormatters(unittest.TestCase):
    """Test cases for rich output helpers"""

    def setUp(self):
        """Set up test environment"""
        # Redirect rich console output to StringIO
        self.console_output = StringIO()
        console.file = self.console_output

    def tearDown(self):
        """Tear down test environment"""
        # Back to whatever sys.stdout is at print time
        console.file = None

    def test_print_error(self):
        """Test error printing"""
        print_error("Test error")
        output = self.console_output.getvalue()

        self.assertIn("Error", output)
        self.assertIn("Test error", output)

    def test_print_warning(self):
        """Test warning printing"""
        print_warning("Test warning")
        output = self.console_output.getvalue()

        self.assertIn("Warning", output)
        self.assertIn("Test warning", output)

    def test_print_info(self):
        """Test info printing"""
        print_info("Test info")
        output = self.console_output.getvalue()

        self.assertIn("Info", output)
        self.assertIn("Test info", output)

    def test_print_json(self):
        """Test JSON printing"""
        print_json({"key": "value"})
        output = self.console_output.getvalue()

        self.assertIn("JSON Output", output)
        self.assertIn('"key"', output)

    def test_print_capture_result_saved(self):
        """Test saved screenshot panel"""
        print_capture_result({
            "success": True,
            "staged": False,
            "collection_key": "movies",
            "file": "/tmp/shots/Screenshot_1.png",
        })
        output = self.console_output.getvalue()

        self.assertIn("Screenshot Saved", output)
        self.assertIn("Screenshot_1.png", output)
        self.assertIn("movies", output)

    def test_print_capture_result_staged(self):
        """Test review panel for a staged capture"""
        print_capture_result({"success": True, "staged": True, "collection_key": "", "width": 8, "height": 6})
        output = self.console_output.getvalue()

        self.assertIn("Awaiting Review", output)
        self.assertIn("default", output)
        self.assertIn("8x6", output)

    def test_print_capture_result_error(self):
        """Test failed capture"""
        print_capture_result({"success": False, "error": "No frame"})
        self.assertIn("No frame", self.console_output.getvalue())

    def test_print_collections_table(self):
        """Test collections table with the selected row marked"""
        print_collections_table(
            [{"key": "", "label": "Default", "count": 2}, {"key": "food", "label": "Food", "count": 0}],
            current_key="food"
        )
        output = self.console_output.getvalue()

        self.assertIn("Collections", output)
        self.assertIn("Default", output)
        self.assertIn("Food", output)
        self.assertIn("*", output)

    def test_print_export_results_partial(self):
        """Test partial export summary"""
        print_export_results({
            "success": True,
            "outcome": "partial",
            "success_count": 1,
            "failure_count": 1,
            "results": [
                {"label": "Movies", "file_count": 3, "success": True, "file": "/x/a-movies-3.zip", "error": None},
                {"label": "Food", "file_count": 1, "success": False, "file": None, "error": "Disk"},
            ],
        })
        output = self.console_output.getvalue()

        self.assertIn("a-movies-3.zip", output)
        self.assertIn("Disk", output)
        self.assertIn("Export Incomplete", output)

    def test_print_export_results_nothing(self):
        """Test export with no screenshots"""
        print_export_results({"success": True, "outcome": "nothing_to_export", "results": []})
        self.assertIn("no screenshots", self.console_output.getvalue())


class TestCliSchemas(unittest.TestCase):
    """Test cases for JSON response models"""

    def test_format_cli_response(self):
        """Test success and error responses"""
        self.assertEqual(format_cli_response(True, data={"a": 1}), {"success": True, "data": {"a": 1}})
        self.assertEqual(format_cli_response(False, error="bad"), {"success": False, "error": "bad"})
        self.assertEqual(format_cli_response(True), {"success": True})

    def test_response_from_result(self):
        """Test core results keep their error kind"""
        ok = response_from_result({"success": True, "file": "x.png"})
        self.assertEqual(ok["data"]["file"], "x.png")

        failed = response_from_result({
            "success": False,
            "error": "Capture session is not running.",
            "error_kind": "session_not_active",
            "error_category": "resource_unavailable",
        })
        self.assertFalse(failed["success"])
        self.assertEqual(failed["details"]["error_kind"], "session_not_active")

    def test_validate_output_against_schema(self):
        """Test schema validation"""
        valid, error = validate_output_against_schema({"success": True, "data": {}}, SuccessResponse)
        self.assertTrue(valid)
        self.assertIsNone(error)

        valid, error = validate_output_against_schema({"success": False}, ErrorResponse)
        self.assertFalse(valid)
        self.assertIsNotNone(error)


if __name__ == "__main__":
    unittest.main()
