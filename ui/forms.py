from datetime import date

from flask_wtf import FlaskForm
from werkzeug.datastructures import MultiDict
from wtforms import FieldList, SelectField, StringField
from wtforms.validators import URL, Length, Optional, Regexp

from citation_manager.models import SourceRecord, normalize_source_type

# Everything the manual entry form offers; the last four are stored as articles
SOURCE_TYPE_CHOICES = [
    ('article', 'Article'),
    ('journal', 'Journal Article'),
    ('website', 'Website'),
    ('book', 'Book'),
    ('newspaper', 'Newspaper'),
    ('thesis', 'Thesis'),
    ('conference', 'Conference Paper'),
    ('report', 'Report'),
]

_CONTAINER_REQUIRED = ('title', 'authors', 'year', 'source')
_PUBLISHER_REQUIRED = ('title', 'authors', 'year', 'publisher')

REQUIRED_FIELDS = {
    'website': ('title', 'url', 'date_accessed'),
    'book': _PUBLISHER_REQUIRED,
    'thesis': _PUBLISHER_REQUIRED,
    'report': _PUBLISHER_REQUIRED,
    'article': _CONTAINER_REQUIRED,
    'journal': _CONTAINER_REQUIRED,
    'newspaper': _CONTAINER_REQUIRED,
    'conference': _CONTAINER_REQUIRED,
}

FIELD_LABELS = {
    'title': 'Title',
    'authors': 'Authors',
    'year': 'Year',
    'source': 'Source',
    'publisher': 'Publisher',
    'url': 'URL',
    'date_accessed': 'Date accessed',
}

# Payload keys accepted besides the form's own field names
_PAYLOAD_ALIASES = {
    'dateAccessed': 'date_accessed',
    'access_date': 'date_accessed',
    'type': 'source_type',
    'pub_type': 'source_type',
    'journal': 'source',
}

_TEXT_FIELDS = (
    'title', 'year', 'source', 'publisher', 'url', 'doi',
    'pages', 'volume', 'issue', 'date_accessed',
)


def split_authors(raw):
    """Split a free-form authors value into a list of author strings.

    Accepts a list, or a string with one author per line or separated by
    semicolons. Commas are left alone since they separate surname and
    given names ("Smith, John").
    """
    if not raw:
        return []
    if isinstance(raw, (list, tuple)):
        parts = raw
    elif ';' in raw:
        parts = raw.split(';')
    else:
        parts = raw.splitlines()
    return [str(p).strip() for p in parts if p is not None and str(p).strip()]


def _today():
    return date.today().isoformat()


class SourceForm(FlaskForm):
    """Manual citation entry.

    Built from a JSON payload rather than request.form:
    ``SourceForm.from_payload(request.get_json())``.
    """

    class Meta:
        csrf = False

    source_type = SelectField('Source type', choices=SOURCE_TYPE_CHOICES, default='article')
    title = StringField('Title', validators=[
        Length(max=500, message="Title must be at most 500 characters")
    ])
    authors = FieldList(StringField('Author', validators=[
        Length(max=200, message="Author name is too long (max 200 characters)")
    ]))
    year = StringField('Year', validators=[
        Optional(),
        Length(max=20, message="Year is too long (max 20 characters)")
    ])
    source = StringField('Journal / Website / Container', validators=[
        Optional(),
        Length(max=300, message="Source name is too long (max 300 characters)")
    ])
    publisher = StringField('Publisher', validators=[
        Optional(),
        Length(max=200, message="Publisher name is too long (max 200 characters)")
    ])
    url = StringField('URL', validators=[
        Optional(),
        URL(message="Invalid URL format (e.g., https://example.com)")
    ])
    doi = StringField('DOI', validators=[
        Optional(),
        Regexp(
            r'^10\.\d{4,9}/\S+$',
            message="Invalid DOI format (should start with 10., e.g., 10.1234/example)"
        )
    ])
    pages = StringField('Pages', validators=[
        Optional(),
        Length(max=50, message="Pages is too long (max 50 characters)")
    ])
    volume = StringField('Volume', validators=[
        Optional(),
        Length(max=20, message="Volume is too long (max 20 characters)")
    ])
    issue = StringField('Issue', validators=[
        Optional(),
        Length(max=20, message="Issue is too long (max 20 characters)")
    ])
    date_accessed = StringField('Date accessed', default=_today, validators=[
        Optional(),
        Regexp(r'^\d{4}-\d{2}-\d{2}$', message="Date accessed must be an ISO date (YYYY-MM-DD)")
    ])

    @classmethod
    def from_payload(cls, payload):
        """Create a form from a dictionary such as a parsed JSON body.

        The payload is flattened into form data (``authors-0``,
        ``authors-1``, ...) so every field validator runs exactly as it
        would for a posted HTML form.
        """
        values = {}
        for key, value in (payload or {}).items():
            name = _PAYLOAD_ALIASES.get(key, key)
            if name not in values and value is not None:
                values[name] = value

        formdata = MultiDict()
        for index, author in enumerate(split_authors(values.pop('authors', None))):
            formdata.add(f'authors-{index}', author)
        if 'source_type' in values:
            formdata.add('source_type', str(values.pop('source_type')).strip().lower())
        for name, value in values.items():
            if name in _TEXT_FIELDS:
                formdata.add(name, str(value).strip())
        return cls(formdata=formdata)

    def validate(self, extra_validators=None):
        valid = super().validate(extra_validators=extra_validators)

        for name in REQUIRED_FIELDS.get(self.source_type.data, ()):
            if name == 'authors':
                if not self.author_list():
                    self.authors.errors.append(f"{FIELD_LABELS[name]} is required")
                    valid = False
                continue
            field = getattr(self, name)
            if not (field.data or '').strip():
                field.errors = list(field.errors) + [f"{FIELD_LABELS[name]} is required"]
                valid = False

        return valid

    def author_list(self):
        return [a.strip() for a in self.authors.data if a and a.strip()]

    def to_record(self, record_id=None):
        """Build the stored record from validated form data.

        Form-only source types are stored as articles, a missing source
        falls back to the publisher and a missing access date to today.
        """
        data = {
            'title': self.title.data.strip(),
            'type': normalize_source_type(self.source_type.data),
            'authors': self.author_list(),
            'year': self.year.data,
            'source': self.source.data or self.publisher.data,
            'url': self.url.data,
            'doi': self.doi.data,
            'pages': self.pages.data,
            'volume': self.volume.data,
            'issue': self.issue.data,
            'publisher': self.publisher.data,
            'date_accessed': self.date_accessed.data or _today(),
        }
        if record_id:
            data['id'] = record_id
        return SourceRecord(**data)
