"""Request schemas for the JSON API.

Every endpoint that accepts a body declares a ``FlaskForm``. Bodies arrive as
camelCase JSON and are flattened into form data so the usual WTForms
validators apply unchanged.
"""

from __future__ import annotations

import re
from typing import Any, Optional as Opt

from flask import abort, request
from flask_wtf import FlaskForm
from werkzeug.datastructures import MultiDict
from werkzeug.exceptions import BadRequest
from wtforms import BooleanField, Field, IntegerField, PasswordField, SelectField, StringField, TextAreaField
from wtforms.validators import DataRequired, Email, InputRequired, Length, NumberRange, Optional
from wtforms.widgets import TextInput

from ..models.entities import (
    DAYS_OF_WEEK,
    MESSAGE_TYPES,
    REPORT_STATUSES,
    SKILL_LEVELS,
    SKILL_TYPES,
    SWAP_STATUSES,
    TIME_SLOTS,
)

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def to_snake_case(key: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", key).lower()


def to_camel_case(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def _clean_text(value: Any) -> Opt[str]:
    if value is None:
        return None
    return str(value).strip()


def _lower(value: Any) -> Any:
    return value.lower() if isinstance(value, str) else value


class ValidationFailed(BadRequest):
    """400 carrying per-field error messages."""

    def __init__(self, errors: dict):
        super().__init__(description="Validation failed")
        self.errors = {to_camel_case(name): messages for name, messages in errors.items()}


class StringListField(Field):
    """A list of strings sent as a JSON array."""

    widget = TextInput()

    def _value(self) -> str:
        return ", ".join(self.data) if self.data else ""

    def process_formdata(self, valuelist):
        if valuelist:
            self.data = [str(value).strip() for value in valuelist if str(value).strip()]


class JsonBooleanField(BooleanField):
    """Boolean that keeps its default when the key is missing from the body."""

    def __init__(self, label=None, validators=None, **kwargs):
        kwargs.setdefault("false_values", (False, "false", "False", "0", ""))
        super().__init__(label, validators, **kwargs)

    def process_formdata(self, valuelist):
        if valuelist:
            super().process_formdata(valuelist)


class StrictIntegerField(IntegerField):
    """Integer that refuses JSON booleans and fractional numbers instead of truncating them."""

    def process_formdata(self, valuelist):
        if valuelist:
            value = valuelist[0]
            if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
                self.data = None
                raise ValueError(self.gettext("Not a valid integer value."))
        super().process_formdata(valuelist)


class ApiForm(FlaskForm):
    """Base form bound to a JSON request body."""

    class Meta:
        # CSRFProtect checks the X-CSRFToken header for the whole app.
        csrf = False

    submitted: set[str]

    @classmethod
    def from_json(cls, payload: Any = None) -> "ApiForm":
        if payload is None:
            payload = request.get_json(silent=True)
        if payload is None:
            payload = {}
        if not isinstance(payload, dict):
            abort(400, description="Request body must be a JSON object.")

        formdata = MultiDict()
        nested: dict[str, list[str]] = {}
        for key, value in payload.items():
            if value is None:
                continue
            name = to_snake_case(key)
            items = value if isinstance(value, (list, tuple)) else [value]
            if any(isinstance(item, (dict, list, tuple)) for item in items):
                nested[name] = ["Nested objects and arrays are not accepted."]
                continue
            for item in items:
                formdata.add(name, item)
        if nested:
            raise ValidationFailed(nested)

        form = cls(formdata=formdata)
        form.submitted = {to_snake_case(key) for key in payload}
        return form

    def validate_or_abort(self) -> "ApiForm":
        if not self.validate():
            errors = {(name or "form"): list(messages) for name, messages in self.errors.items()}
            raise ValidationFailed(errors)
        return self

    def submitted_data(self) -> dict[str, Any]:
        """Field values for keys the client actually sent."""

        return {name: field.data for name, field in self._fields.items() if name in self.submitted}


class RegistrationForm(ApiForm):
    username = StringField("Username", validators=[DataRequired(), Length(min=3, max=50)], filters=[_clean_text])
    email = StringField("Email", validators=[DataRequired(), Email(), Length(max=255)], filters=[_clean_text])
    password = PasswordField("Password", validators=[DataRequired(), Length(min=8, max=128)])
    first_name = StringField("First name", validators=[Optional(), Length(max=100)], filters=[_clean_text])
    last_name = StringField("Last name", validators=[Optional(), Length(max=100)], filters=[_clean_text])


class LoginForm(ApiForm):
    username = StringField("Username", validators=[DataRequired()], filters=[_clean_text])
    password = PasswordField("Password", validators=[DataRequired()])


class ProfileForm(ApiForm):
    """Partial profile update; only submitted keys are written."""

    first_name = StringField("First name", validators=[Optional(), Length(max=100)], filters=[_clean_text])
    last_name = StringField("Last name", validators=[Optional(), Length(max=100)], filters=[_clean_text])
    profile_image_url = StringField("Image URL", validators=[Optional(), Length(max=500)], filters=[_clean_text])
    location = StringField("Location", validators=[Optional(), Length(max=120)], filters=[_clean_text])
    bio = TextAreaField("Bio", validators=[Optional(), Length(max=1000)], filters=[_clean_text])
    is_public = JsonBooleanField("Public profile", default=True)


class SkillForm(ApiForm):
    name = StringField("Name", validators=[DataRequired(), Length(max=120)], filters=[_clean_text])
    description = TextAreaField("Description", validators=[Optional(), Length(max=2000)], filters=[_clean_text])
    category = StringField("Category", validators=[DataRequired(), Length(max=80)], filters=[_clean_text])
    level = SelectField(
        "Level",
        choices=[(level, level.title()) for level in SKILL_LEVELS],
        validators=[InputRequired()],
        filters=[_lower],
    )
    type = SelectField(
        "Type",
        choices=[(skill_type, skill_type.title()) for skill_type in SKILL_TYPES],
        validators=[InputRequired()],
        filters=[_lower],
    )
    tags = StringListField("Tags", default=list)
    is_active = JsonBooleanField("Active", default=True)


class SkillUpdateForm(ApiForm):
    """Partial skill update; ownership is never editable."""

    name = StringField("Name", validators=[Optional(), Length(min=1, max=120)], filters=[_clean_text])
    description = TextAreaField("Description", validators=[Optional(), Length(max=2000)], filters=[_clean_text])
    category = StringField("Category", validators=[Optional(), Length(min=1, max=80)], filters=[_clean_text])
    level = SelectField(
        "Level",
        choices=[(level, level.title()) for level in SKILL_LEVELS],
        validators=[Optional()],
        filters=[_lower],
    )
    type = SelectField(
        "Type",
        choices=[(skill_type, skill_type.title()) for skill_type in SKILL_TYPES],
        validators=[Optional()],
        filters=[_lower],
    )
    tags = StringListField("Tags", default=list)
    is_active = JsonBooleanField("Active", default=True)

    def validate(self, extra_validators=None) -> bool:
        valid = super().validate(extra_validators=extra_validators)
        for field in (self.name, self.category, self.level, self.type):
            if field.name in self.submitted and not field.data:
                field.errors.append("This field cannot be empty.")
                valid = False
        return valid


class AvailabilityForm(ApiForm):
    day_of_week = SelectField(
        "Day",
        choices=[(day, day.title()) for day in DAYS_OF_WEEK],
        validators=[InputRequired()],
        filters=[_lower],
    )
    time_slot = SelectField(
        "Time slot",
        choices=[(slot, slot.title()) for slot in TIME_SLOTS],
        validators=[InputRequired()],
        filters=[_lower],
    )
    is_available = JsonBooleanField("Available", default=True)


class SwapRequestForm(ApiForm):
    offered_skill_id = StrictIntegerField("Offered skill", validators=[InputRequired()])
    requested_skill_id = StrictIntegerField("Requested skill", validators=[InputRequired()])
    provider_id = StrictIntegerField("Provider", validators=[Optional()])
    message = TextAreaField("Message", validators=[Optional(), Length(max=1000)], filters=[_clean_text])
    preferred_times = StringListField("Preferred times", default=list)


class StatusForm(ApiForm):
    status = SelectField(
        "Status",
        choices=[(status, status.title()) for status in SWAP_STATUSES],
        validators=[InputRequired()],
        filters=[_lower],
    )


class RatingForm(ApiForm):
    swap_request_id = StrictIntegerField("Swap request", validators=[InputRequired()])
    rating = StrictIntegerField("Rating", validators=[InputRequired(), NumberRange(min=1, max=5)])
    comment = TextAreaField("Comment", validators=[Optional(), Length(max=1000)], filters=[_clean_text])
    ratee_id = StrictIntegerField("Ratee", validators=[Optional()])


class AdminMessageForm(ApiForm):
    title = StringField("Title", validators=[DataRequired(), Length(max=200)], filters=[_clean_text])
    content = TextAreaField("Content", validators=[DataRequired(), Length(max=5000)], filters=[_clean_text])
    type = SelectField(
        "Type",
        choices=[(message_type, message_type.replace("_", " ").title()) for message_type in MESSAGE_TYPES],
        validators=[InputRequired()],
        filters=[_lower],
    )


class ReportForm(ApiForm):
    reported_user_id = StrictIntegerField("Reported user", validators=[Optional()])
    reported_skill_id = StrictIntegerField("Reported skill", validators=[Optional()])
    reported_request_id = StrictIntegerField("Reported request", validators=[Optional()])
    reason = StringField("Reason", validators=[DataRequired(), Length(max=200)], filters=[_clean_text])
    description = TextAreaField("Description", validators=[Optional(), Length(max=2000)], filters=[_clean_text])

    def validate(self, extra_validators=None) -> bool:
        if not super().validate(extra_validators=extra_validators):
            return False
        targets = (self.reported_user_id.data, self.reported_skill_id.data, self.reported_request_id.data)
        if all(target is None for target in targets):
            self.reported_user_id.errors.append("Report a user, a skill or a swap request.")
            return False
        return True


class ReportStatusForm(ApiForm):
    status = SelectField(
        "Status",
        choices=[(status, status.title()) for status in REPORT_STATUSES],
        validators=[InputRequired()],
        filters=[_lower],
    )
