from flask_wtf import FlaskForm
from flask_wtf.file import FileField, FileRequired, FileAllowed
from wtforms import SubmitField


class ImportBooksForm(FlaskForm):
    books_file = FileField('Import Books', validators=[
        FileRequired(message='Please choose a JSON file to import.'),
        FileAllowed(['json'], message='Only .json files can be imported.')
    ])
    submit = SubmitField('Import Books')


class ResetShelvesForm(FlaskForm):
    submit = SubmitField('Yes, reset shelves')


class DarkModeForm(FlaskForm):
    submit = SubmitField('Toggle dark mode')
