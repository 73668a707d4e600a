# Third-party imports
from flask_wtf import FlaskForm
from wtforms import StringField, PasswordField
from wtforms.validators import DataRequired, Email, Length, Optional


class ApiForm(FlaskForm):
    """
    Base form for JSON endpoints.

    Callers pass ``formdata=json_formdata()``. CSRF tokens do not apply to
    the JSON API.
    """
    class Meta:
        csrf = False


class RegistrationForm(ApiForm):
    username = StringField('Username', validators=[
        DataRequired(message='Username is required.'),
        Length(min=1, max=64, message='Username must be between 1 and 64 characters.')
    ])
    password = PasswordField('Password', validators=[
        DataRequired(message='Password is required.')
    ])
    email = StringField('Email', validators=[
        Optional(),
        Email(message='Invalid email address.'),
        Length(max=120, message='Email must be 120 characters or less.')
    ])


class LoginForm(ApiForm):
    username = StringField('Username', validators=[DataRequired(message='Username is required.')])
    password = PasswordField('Password', validators=[DataRequired(message='Password is required.')])
