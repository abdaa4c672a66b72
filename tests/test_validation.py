"""Unit tests for the declarative profile field rules."""
import pytest

from app.errors import ValidationError
from app.services.validation import is_strong_password, validate_fields

VALID_SIGNUP = {
    "firstName": "  Jeff  ",
    "lastName": " Doe ",
    "emailId": "  Jeff@X.com ",
    "password": "Str0ng!Pass",
}


class TestSignupRules:

    def test_normalises_valid_payload(self):
        cleaned = validate_fields(VALID_SIGNUP, partial=False)
        assert cleaned == {
            "first_name": "Jeff",
            "last_name": "Doe",
            "email_id": "jeff@x.com",
            "password": "Str0ng!Pass",
        }

    @pytest.mark.parametrize("missing", ["firstName", "emailId", "password"])
    def test_required_fields(self, missing):
        payload = {k: v for k, v in VALID_SIGNUP.items() if k != missing}
        with pytest.raises(ValidationError) as exc_info:
            validate_fields(payload, partial=False)
        assert exc_info.value.field == missing

    def test_last_name_optional(self):
        payload = {k: v for k, v in VALID_SIGNUP.items() if k != "lastName"}
        assert "last_name" not in validate_fields(payload, partial=False)

    @pytest.mark.parametrize("name", ["Jo", "   Bob   ", "A" * 21])
    def test_first_name_length_after_trim(self, name):
        with pytest.raises(ValidationError) as exc_info:
            validate_fields({**VALID_SIGNUP, "firstName": name}, partial=False)
        assert exc_info.value.field == "firstName"

    def test_invalid_email(self):
        with pytest.raises(ValidationError, match="Email is not valid"):
            validate_fields({**VALID_SIGNUP, "emailId": "not-an-email"}, partial=False)

    def test_first_failing_field_reported(self):
        payload = {**VALID_SIGNUP, "firstName": "Al", "emailId": "bad"}
        with pytest.raises(ValidationError) as exc_info:
            validate_fields(payload, partial=False)
        assert exc_info.value.field == "firstName"

    def test_unknown_field(self):
        with pytest.raises(ValidationError, match="Unknown field"):
            validate_fields({**VALID_SIGNUP, "isAdmin": True}, partial=False)


class TestPartialRules:

    def test_only_touched_fields_checked(self):
        assert validate_fields({"about": "Rustacean"}, partial=True) == {"about": "Rustacean"}

    @pytest.mark.parametrize("age,expected", [(18, 18), ("30", 30), (25.0, 25)])
    def test_age_coercion(self, age, expected):
        assert validate_fields({"age": age}, partial=True) == {"age": expected}

    @pytest.mark.parametrize("age", [17, 151, 10**20, 1e20, "100000000000000000000", True, "abc", 18.5])
    def test_age_rejected(self, age):
        with pytest.raises(ValidationError) as exc_info:
            validate_fields({"age": age}, partial=True)
        assert exc_info.value.field == "age"

    @pytest.mark.parametrize("field", ["about", "gender", "age", "password"])
    def test_explicit_null_rejected(self, field):
        with pytest.raises(ValidationError) as exc_info:
            validate_fields({field: None}, partial=True)
        assert exc_info.value.field == field

    def test_null_on_signup_means_absent(self):
        cleaned = validate_fields({**VALID_SIGNUP, "about": None}, partial=False)
        assert "about" not in cleaned

    def test_gender_enum(self):
        assert validate_fields({"gender": "Female"}, partial=True) == {"gender": "female"}
        with pytest.raises(ValidationError):
            validate_fields({"gender": "robot"}, partial=True)


class TestPasswordPolicy:

    @pytest.mark.parametrize("password", ["Str0ng!Pass", "aB3$efgh", "Pässwört1A!", "Secret 1a", "Str0ng!" + "x" * 65])
    def test_strong(self, password):
        assert is_strong_password(password)

    @pytest.mark.parametrize(
        "password",
        [
            "Sh0rt!a", "alllowercase1!", "ALLUPPER1!", "NoDigits!!", "NoSymbol123",
            # non-ASCII letters satisfy neither the case classes nor the symbol class
            "Pässwört1A", "ÄÖÜstark1!", "ÀÉÎõüñ1!",
            "Str0ng!" + "x" * 66,
            "", None,
        ],
    )
    def test_weak(self, password):
        assert not is_strong_password(password)
