# ==============================================================================
# payhub/main/forms.py
# ------------------------------------------------------------------------------
# Defines input forms using Flask-WTF for request validation. The API accepts
# form posts and JSON bodies alike; CSRF does not apply to it.
# ==============================================================================

from flask_wtf import FlaskForm
from flask_wtf.file import FileField, FileRequired
from wtforms import StringField, FloatField, SelectField, SelectMultipleField, PasswordField, TextAreaField
from wtforms.validators import DataRequired, InputRequired, Length, Optional, Regexp, ValidationError

CYCLE_ID_VALIDATOR = Regexp(r'^\d{4}-(0[1-9]|1[0-2])$', message='Billing cycle must look like YYYY-MM.')

class ApiForm(FlaskForm):
    class Meta:
        csrf = False

    def error_list(self):
        """Flattens field errors into a {field: [messages]} dict."""
        return {name: list(messages) for name, messages in self.errors.items()}

class AppSettingForm(ApiForm):
    """Form for editing a single application setting."""
    value = TextAreaField('Value', validators=[DataRequired()])

class AdminLoginForm(ApiForm):
    """Form for admin login."""
    password = PasswordField('Password', validators=[InputRequired(message='Password is required.')])

class PayoutSheetUploadForm(ApiForm):
    """Form for uploading a payout snapshot for one billing cycle."""
    file = FileField('Payout sheet', validators=[FileRequired(message='No file was selected.')])
    cycle_id = StringField('Billing cycle', validators=[InputRequired(message='Billing cycle is required.'),
                                                       CYCLE_ID_VALIDATOR])

class FeedbackForm(ApiForm):
    """A walker confirming a payout, or raising a concern about it."""
    feid = StringField('FEID', validators=[DataRequired(message='FEID is required.'), Length(max=64)])
    cycle_id = StringField('Billing cycle', validators=[InputRequired(message='Billing cycle is required.'),
                                                       CYCLE_ID_VALIDATOR])
    satisfied = SelectField('Satisfied', choices=[('yes', 'Yes'), ('no', 'No')],
                            validators=[InputRequired(message='Please say whether you are satisfied.')])
    concerns = SelectMultipleField('Concerns', choices=[], validate_choice=True)
    description = TextAreaField('Description', validators=[Length(max=2000)])
    total_payout = FloatField('Total payout', validators=[Optional()])

    def __init__(self, *args, concern_categories=(), **kwargs):
        super().__init__(*args, **kwargs)
        self.concerns.choices = list(concern_categories)

    def validate_description(self, field):
        if self.satisfied.data == 'no' and not self.concerns.data and not (field.data or '').strip():
            raise ValidationError('Please pick a concern or describe the issue.')
