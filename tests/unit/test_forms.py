"""
Unit Tests for form validation
"""
from datetime import date

from app.schemas.forms import NewUserForm, ProjectForm, UserForm, WordLogForm, validate_form


class TestProjectForm:
    def test_blank_optional_fields_use_defaults(self):
        result = validate_form(
            ProjectForm,
            {"title": "  Novel  ", "genre": "", "description": "  ", "target_words": "10000",
             "current_words": "", "daily_goal": "", "start_date": ""},
        )

        assert result.ok
        form = result.value
        assert form.title == "Novel"
        assert form.description is None
        assert form.current_words is None
        assert form.daily_goal == 1000
        assert form.start_date == date.today()

    def test_missing_and_malformed_numbers_are_reported(self):
        result = validate_form(ProjectForm, {"title": "Novel", "target_words": "", "daily_goal": "lots"})

        assert not result.ok
        assert result.value is None
        assert any(e.startswith("Target words:") for e in result.errors)
        assert any(e.startswith("Daily goal:") for e in result.errors)

    def test_negative_current_words_rejected(self):
        result = validate_form(ProjectForm, {"title": "Novel", "target_words": "100", "current_words": "-3"})

        assert not result.ok
        assert any(e.startswith("Current words:") for e in result.errors)

    def test_zero_target_rejected(self):
        result = validate_form(ProjectForm, {"title": "Novel", "target_words": "0"})

        assert not result.ok

    def test_numbers_beyond_column_range_rejected(self):
        result = validate_form(
            ProjectForm,
            {"title": "Novel", "target_words": "3000000000", "current_words": "99999999999999999999",
             "daily_goal": "2147483648"},
        )

        assert not result.ok
        assert any(e.startswith("Target words:") for e in result.errors)
        assert any(e.startswith("Current words:") for e in result.errors)
        assert any(e.startswith("Daily goal:") for e in result.errors)


class TestWordLogForm:
    def test_text_is_tokenized(self):
        result = validate_form(WordLogForm, {"text": "one two three", "manual_count": ""})

        assert result.ok
        assert result.value.word_count == 3

    def test_manual_count_wins_over_text(self):
        result = validate_form(WordLogForm, {"text": "one two three", "manual_count": "47"})

        assert result.value.word_count == 47

    def test_zero_manual_count_falls_back_to_text(self):
        result = validate_form(WordLogForm, {"text": "a b", "manual_count": "0"})

        assert result.value.word_count == 2

    def test_nothing_submitted(self):
        result = validate_form(WordLogForm, {"text": "   ", "manual_count": ""})

        assert not result.ok
        assert result.errors == ["Please enter text or a word count"]

    def test_malformed_count(self):
        result = validate_form(WordLogForm, {"manual_count": "many"})

        assert not result.ok
        assert result.errors[0].startswith("Word count:")

    def test_oversized_count(self):
        result = validate_form(WordLogForm, {"manual_count": "99999999999999999999"})

        assert not result.ok
        assert result.errors[0].startswith("Word count:")


class TestUserForms:
    def test_role_defaults_to_member(self):
        result = validate_form(UserForm, {"username": "writer"})

        assert result.ok
        assert result.value.role == "member"
        assert result.value.password is None

    def test_unknown_role_rejected(self):
        result = validate_form(UserForm, {"username": "writer", "role": "admin"})

        assert not result.ok
        assert result.errors[0].startswith("Role:")

    def test_bad_email_rejected(self):
        result = validate_form(UserForm, {"username": "writer", "email": "not-an-email"})

        assert result.errors == ["Email: not a valid email address"]

    def test_new_user_requires_password(self):
        result = validate_form(NewUserForm, {"username": "writer"})

        assert not result.ok
        assert result.errors[0].startswith("Password:")

    def test_password_over_bcrypt_limit(self):
        result = validate_form(NewUserForm, {"username": "writer", "password": "é" * 40})

        assert not result.ok
