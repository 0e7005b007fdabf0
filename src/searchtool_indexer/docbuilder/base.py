"""
Base classes shared by the document builders.
"""
import logging
import re
from types import MappingProxyType

from searchtool_indexer.common.utils import normalize_whitespace

logger = logging.getLogger(__name__)


class AbstractDocBuilder:
    """
    Collects the values for one index document and turns them into a
    Document: an immutable mapping of field name to string value.

    Builders are reused: a gatherer fills one in, calls ``get_document``,
    pushes the result and calls ``clear``. Setting a field to None flags the
    builder as being in error; the document is still produced, and the
    error is logged when it is built.
    """

    # Field names this builder knows about, in the order they are reported.
    FIELDS = ('db_key', 'data')

    # Whoosh schema of the index the documents go into.
    SCHEMA = None

    def __init__(self):
        self.fields = {}
        self.has_error = False
        self.clear()

    def clear(self):
        """Reset every field so the builder can be reused."""
        self.fields = dict.fromkeys(self.FIELDS, '')
        self.has_error = False

    def set_field(self, name, value):
        if name not in self.fields:
            raise KeyError(f"{type(self).__name__} has no field '{name}'")
        if value is None:
            self.has_error = True
            return
        self.fields[name] = str(value)

    def set(self, **values):
        """Set several fields at once: builder.set(db_key=..., data=...)."""
        for name, value in values.items():
            self.set_field(name, value)

    def append_data(self, value):
        """Data in the database can be split over several rows; glue it back together."""
        if value is None:
            self.has_error = True
            return
        self.fields['data'] += str(value)

    def append_id(self, name, value):
        """Add an id to a comma separated list of ids held in one field."""
        if value is None:
            return
        ids = self.fields[name]
        self.fields[name] = f"{ids},{value}" if ids else str(value)

    def __getitem__(self, name):
        return self.fields[name]

    def get_document(self):
        self.check_errors()
        return MappingProxyType(self.prepare_document())

    def check_errors(self):
        if self.has_error:
            logger.error(f"Error while indexing: {self}")

    def prepare_document(self):
        """Return the field mapping for the document; empty fields are left out."""
        return {name: value for name, value in self.fields.items() if value != ''}

    def __str__(self):
        return '  '.join(f"{name}: {value}" for name, value in self.fields.items())


class ExactDocBuilder(AbstractDocBuilder):
    """
    Builder for the exact match indexes. The data field is matched as a
    whole, so whitespace is collapsed and it is lowercased; raw_data keeps
    the text as given for display.
    """

    FIELDS = ('db_key', 'data', 'raw_data')

    def prepare_document(self):
        doc = super().prepare_document()
        doc.pop('data', None)
        data = normalize_whitespace(self.fields['data']).lower()
        if data:
            doc['data'] = data
            doc.setdefault('raw_data', self.fields['data'])
        return doc


class InexactDocBuilder(AbstractDocBuilder):
    """
    Builder for the inexact (small token) indexes. Punctuation becomes
    whitespace, and the text goes into both the unstemmed ``data`` and the
    stemmed ``sdata`` fields.
    """

    FIELDS = ('db_key', 'data', 'raw_data', 'sdata')

    def prepare_document(self):
        doc = super().prepare_document()
        doc.pop('data', None)
        tokens = normalize_whitespace(re.sub(r'[\W_]', ' ', self.fields['data']))
        if tokens:
            doc['data'] = tokens
            doc['sdata'] = tokens
            doc.setdefault('raw_data', self.fields['data'])
        return doc
