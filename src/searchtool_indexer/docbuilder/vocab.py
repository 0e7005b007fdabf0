"""
Document builders for the vocabulary indexes.
"""
from whoosh.fields import ID, STORED, TEXT, Schema

from searchtool_indexer.docbuilder.base import AbstractDocBuilder, ExactDocBuilder, InexactDocBuilder
from searchtool_indexer.indexer.analysis import MGI_ANALYZER, STEMMED_MGI_ANALYZER

# Vocabulary names are shortened so they match across the indexes.
VOCABULARY_ALIASES = {
    'Mammalian Phenotype': 'MP',
    'InterPro Domains': 'IP',
    'PIR Superfamily': 'PS',
}


def vocabulary_alias(name):
    return VOCABULARY_ALIASES.get(name, name)


class _VocabularyAliasMixin:

    def set_field(self, name, value):
        if name == 'vocabulary' and value is not None:
            value = vocabulary_alias(value)
        super().set_field(name, value)


class VocabExactDocBuilder(_VocabularyAliasMixin, ExactDocBuilder):
    """Large token (whole term) documents for the vocabExact index."""

    FIELDS = ('db_key', 'data', 'raw_data', 'vocabulary', 'data_type',
              'display_type', 'provider', 'unique_key')

    SCHEMA = Schema(
        data=ID(stored=True),
        raw_data=STORED,
        vocabulary=ID(stored=True),
        data_type=ID(stored=True),
        db_key=ID(stored=True),
        display_type=STORED,
        provider=STORED,
        unique_key=ID(stored=True),
    )


class VocabAccIDDocBuilder(VocabExactDocBuilder):
    """Accession ID documents for the vocabAccID index. Same layout as vocabExact."""


class VocabInexactDocBuilder(_VocabularyAliasMixin, InexactDocBuilder):
    """Small token documents for the vocabInexact index, stemmed and unstemmed."""

    FIELDS = ('db_key', 'data', 'raw_data', 'sdata', 'vocabulary', 'data_type',
              'display_type', 'provider', 'unique_key')

    SCHEMA = Schema(
        data=TEXT(analyzer=MGI_ANALYZER, stored=True),
        sdata=TEXT(analyzer=STEMMED_MGI_ANALYZER, stored=True),
        raw_data=STORED,
        vocabulary=ID(stored=True),
        data_type=ID(stored=True),
        db_key=ID(stored=True),
        display_type=STORED,
        provider=STORED,
        unique_key=ID(stored=True),
    )


class VocabDisplayDocBuilder(_VocabularyAliasMixin, AbstractDocBuilder):
    """One display document per vocabulary term, looked up by db_key."""

    FIELDS = ('db_key', 'data', 'vocabulary', 'acc_id', 'gene_ids',
              'child_ids', 'marker_count', 'annotation_count',
              'annotation_objects', 'annotation_object_type', 'type_display')

    SCHEMA = Schema(
        db_key=ID(stored=True),
        vocabulary=ID(stored=True),
        contents=STORED,
        acc_id=STORED,
        gene_ids=STORED,
        child_ids=STORED,
        marker_count=STORED,
        annotation_count=STORED,
        annotation_objects=STORED,
        annotation_object_type=STORED,
        type_display=STORED,
    )

    def append_child_id(self, child_id):
        self.append_id('child_ids', child_id)

    def prepare_document(self):
        doc = super().prepare_document()
        # The term text is shown, not searched.
        contents = doc.pop('data', '')
        if contents:
            doc['contents'] = contents
        return doc


class GenomeFeatureVocabExactDocBuilder(VocabExactDocBuilder):
    """
    Terms, synonyms and definitions of the vocabulary terms that genome
    features are annotated to, matched as a whole. The display type names
    the kind of annotation (Phenotype, Function, ...).
    """


class GenomeFeatureVocabAccIDDocBuilder(VocabExactDocBuilder):
    """Accession IDs of the vocabulary terms that genome features are annotated to."""


class GenomeFeatureVocabDagDocBuilder(_VocabularyAliasMixin, AbstractDocBuilder):
    """
    One document per annotated term and object type: the genome features
    annotated to the term, and its annotated descendant terms.
    """

    FIELDS = ('db_key', 'vocabulary', 'acc_id', 'gene_ids', 'child_ids',
              'unique_key', 'object_type')

    SCHEMA = Schema(
        db_key=ID(stored=True),
        vocabulary=ID(stored=True),
        acc_id=STORED,
        gene_ids=STORED,
        child_ids=STORED,
        unique_key=ID(stored=True),
        object_type=ID(stored=True),
    )

    def append_gene_id(self, gene_id):
        self.append_id('gene_ids', gene_id)

    def append_child_id(self, child_id):
        self.append_id('child_ids', child_id)
