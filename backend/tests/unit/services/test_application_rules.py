"""
Unit Tests for application type rules and form helpers
"""
import pytest

from scholarship.core.exceptions import FileTooLargeError, InvalidFileTypeError, ValidationError
from scholarship.models import APPLICATION_DOCUMENT_SLOTS, ApplicationType
from scholarship.schemas.application import SchoolFeesFields, StudyBooksFields, TravelExpensesFields
from scholarship.services.application_service import APPLICATION_RULES
from scholarship.services.storage_service import UploadedDocument
from scholarship.utils.forms import check_document, missing_slots, slot_lookup, validate_form


class TestApplicationRules:

    def test_every_type_has_a_rule(self):
        assert set(APPLICATION_RULES) == set(ApplicationType)

    def test_school_fees_documents(self):
        rule = APPLICATION_RULES[ApplicationType.SCHOOL_FEES]

        assert rule.fields_schema is SchoolFeesFields
        assert set(rule.required_documents) == {
            "birth_certificate", "leaving_certificate", "marksheet",
            "admission_proof", "income_proof", "bank_account",
        }
        assert rule.optional_documents == ("ration_card",)

    def test_travel_expenses_requires_id_card(self):
        rule = APPLICATION_RULES[ApplicationType.TRAVEL_EXPENSES]

        assert rule.fields_schema is TravelExpensesFields
        assert rule.allowed_documents == ("id_card",)

    def test_study_books_takes_no_documents(self):
        rule = APPLICATION_RULES[ApplicationType.STUDY_BOOKS]

        assert rule.fields_schema is StudyBooksFields
        assert rule.allowed_documents == ()

    def test_rule_documents_are_application_columns(self):
        for rule in APPLICATION_RULES.values():
            assert set(rule.allowed_documents) <= set(APPLICATION_DOCUMENT_SLOTS)


class TestFormHelpers:

    def test_slot_lookup_accepts_both_spellings(self):
        lookup = slot_lookup(["passport_size_photo"])

        assert lookup["passportSizePhoto"] == "passport_size_photo"
        assert lookup["passport_size_photo"] == "passport_size_photo"

    def test_missing_slots_named_in_camel_case(self):
        documents = {"aadhar_card": object()}

        assert missing_slots(["aadhar_card", "house_image"], documents) == ["houseImage"]

    def test_validate_form_wraps_errors(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_form(StudyBooksFields, {"yearOfStudy": "First"})

        fields = {error["field"] for error in exc_info.value.details["errors"]}
        assert fields == {"field", "booksRequired"}
        assert exc_info.value.status_code == 400

    def test_disallowed_extension(self):
        document = UploadedDocument("marksheet", "marks.exe", b"MZ", "application/octet-stream")

        with pytest.raises(InvalidFileTypeError):
            check_document(document)

    def test_empty_file(self):
        document = UploadedDocument("marksheet", "marks.pdf", b"", "application/pdf")

        with pytest.raises(ValidationError):
            check_document(document)

    def test_oversized_file(self, monkeypatch):
        from scholarship.core.config import settings
        monkeypatch.setattr(settings, "MAX_UPLOAD_SIZE", 4)
        document = UploadedDocument("marksheet", "marks.pdf", b"12345", "application/pdf")

        with pytest.raises(FileTooLargeError):
            check_document(document)
