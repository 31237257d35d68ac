"""
Submission validator test suite.
"""

import unittest

from aegis.validation import (
    ValidationError,
    validate_boolean,
    validate_finite_number,
    validate_submission,
    validate_submission_id,
)


VALID = {"labName": "OMEGA-LABS-SF", "modelName": "TITAN-V9", "compute": 5e24, "cbrnSafeguards": True}


class TestValidateSubmission(unittest.TestCase):

    def test_valid_payload_normalized(self):
        out = validate_submission(dict(VALID, labName="  OMEGA-LABS-SF "))
        self.assertEqual(out, VALID)
        self.assertIsInstance(out["compute"], float)

    def test_server_fields_dropped(self):
        out = validate_submission(dict(VALID, id=5, signature="abc", createdAt="x", extra=1))
        self.assertEqual(set(out), {"labName", "modelName", "compute", "cbrnSafeguards"})

    def test_empty_names_rejected(self):
        for field in ("labName", "modelName"):
            with self.assertRaises(ValidationError) as ctx:
                validate_submission(dict(VALID, **{field: "   "}))
            self.assertEqual(ctx.exception.field, field)

    def test_missing_name_rejected(self):
        payload = dict(VALID)
        del payload["modelName"]
        with self.assertRaises(ValidationError) as ctx:
            validate_submission(payload)
        self.assertEqual(ctx.exception.field, "modelName")

    def test_non_string_name_rejected(self):
        with self.assertRaises(ValidationError) as ctx:
            validate_submission(dict(VALID, labName=12))
        self.assertEqual(ctx.exception.field, "labName")

    def test_first_violation_wins(self):
        with self.assertRaises(ValidationError) as ctx:
            validate_submission({"labName": "L", "modelName": "", "compute": None, "cbrnSafeguards": "x"})
        self.assertEqual(ctx.exception.field, "modelName")

    def test_cbrn_defaults_false(self):
        payload = dict(VALID)
        del payload["cbrnSafeguards"]
        self.assertFalse(validate_submission(payload)["cbrnSafeguards"])

    def test_non_object_rejected(self):
        with self.assertRaises(ValidationError) as ctx:
            validate_submission(["labName"])
        self.assertEqual(ctx.exception.field, "body")


class TestValidateNumber(unittest.TestCase):

    def test_numeric_forms_accepted(self):
        self.assertEqual(validate_finite_number(5, "compute"), 5.0)
        self.assertEqual(validate_finite_number("5e24", "compute"), 5e24)
        self.assertEqual(validate_finite_number(-1.5, "compute"), -1.5)

    def test_non_finite_rejected(self):
        for value in ("nan", "inf", "-Infinity", float("nan"), "1e400"):
            with self.assertRaises(ValidationError):
                validate_finite_number(value, "compute")

    def test_non_numeric_rejected(self):
        for value in ("lots", "", None, True, [1], {"a": 1}):
            with self.assertRaises(ValidationError):
                validate_finite_number(value, "compute")


class TestValidateBoolean(unittest.TestCase):

    def test_accepted_forms(self):
        self.assertTrue(validate_boolean(True, "cbrnSafeguards"))
        self.assertTrue(validate_boolean("TRUE", "cbrnSafeguards"))
        self.assertTrue(validate_boolean(1, "cbrnSafeguards"))
        self.assertFalse(validate_boolean("false", "cbrnSafeguards"))
        self.assertFalse(validate_boolean(0, "cbrnSafeguards"))
        self.assertFalse(validate_boolean(None, "cbrnSafeguards"))

    def test_rejected_forms(self):
        for value in ("maybe", 2, 1.5, []):
            with self.assertRaises(ValidationError):
                validate_boolean(value, "cbrnSafeguards")


class TestValidateSubmissionId(unittest.TestCase):

    def test_integers_accepted(self):
        self.assertEqual(validate_submission_id(7), 7)
        self.assertEqual(validate_submission_id(7.0), 7)

    def test_numeric_strings_accepted(self):
        """Ids sent as JSON strings resolve like their numeric form."""
        self.assertEqual(validate_submission_id("7"), 7)
        self.assertEqual(validate_submission_id(" 12 "), 12)
        self.assertEqual(validate_submission_id("7.0"), 7)

    def test_other_values_rejected(self):
        for value in (None, True, 1.5, "abc", "", "1.5", "inf", [7]):
            with self.assertRaises(ValidationError) as ctx:
                validate_submission_id(value)
            self.assertEqual(ctx.exception.field, "submissionId")


if __name__ == "__main__":
    unittest.main()
