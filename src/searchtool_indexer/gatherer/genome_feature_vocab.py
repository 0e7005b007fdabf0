"""
Gatherers for the vocabulary terms that genome features are annotated to.

These feed the indexes the search tool uses to go from a vocabulary match
to the markers and alleles behind it: only terms with at least one
annotation are gathered, and every document says what kind of annotation
it stands for (Phenotype, Function, Disease Model, ...).
"""
import logging

from searchtool_indexer.common import constants
from searchtool_indexer.docbuilder import (
    GenomeFeatureVocabAccIDDocBuilder,
    GenomeFeatureVocabDagDocBuilder,
    GenomeFeatureVocabExactDocBuilder,
)
from searchtool_indexer.gatherer.base import DatabaseGatherer
from searchtool_indexer.gatherer.vocab import VocabTermGatherer

logger = logging.getLogger(__name__)

ANNOTATED_TABLE = 'annotated_terms'

_ANNOTATION_FILTER = '\n           or '.join(
    f"(tv._Vocab_key = {vocab_key} and vacc.annotType = '{annot_type}')"
    for vocab_key, annot_type in constants.FEATURE_ANNOTATION_TYPES
)

# Current terms with annotations to genome features. DO terms annotated to
# human markers come back a second time under the ortholog vocabulary.
WITH_ANNOTATED_TERMS = f"""
    with {ANNOTATED_TABLE} as (
        select distinct tv._Term_key, tv.term, tv.accID, vacc.annotType,
            case when vacc.annotType = '{constants.DO_ORTHOLOG_ANNOTATION_TYPE}'
                 then '{constants.DO_ORTHOLOG_VOCAB}'
                 else tv.vocabName end as vocabName
        from VOC_Term_View tv, VOC_Annot_Count_Cache vacc
        where tv.isObsolete != 1
          and tv._Term_key = vacc._Term_key
          and ({_ANNOTATION_FILTER})
    )
"""

GF_VOC_TERM_QUERY = WITH_ANNOTATED_TERMS + f"""
    select distinct _Term_key, term, vocabName
    from {ANNOTATED_TABLE}
"""

GF_VOC_SYNONYM_QUERY = WITH_ANNOTATED_TERMS + f"""
    select distinct ann._Term_key, s._Synonym_key, s.synonym, ann.vocabName
    from {ANNOTATED_TABLE} ann, MGI_Synonym s
    where ann._Term_key = s._Object_key
      and s._MGIType_key = {constants.MGI_TYPE_TERM}
"""

GF_VOC_NOTE_QUERY = WITH_ANNOTATED_TERMS + f"""
    select distinct ann._Term_key, ann.vocabName, t.note, t.sequenceNum
    from {ANNOTATED_TABLE} ann, VOC_Text t
    where ann._Term_key = t._Term_key
    order by ann._Term_key, ann.vocabName, t.sequenceNum
"""

# Preferred IDs come with the term; secondary IDs (for DO, the OMIM ids
# among them) from the accession table.
GF_VOC_ACCID_QUERY = WITH_ANNOTATED_TERMS + f"""
    select _Term_key, accID, vocabName, term
    from {ANNOTATED_TABLE}
    union
    select ann._Term_key, a.accID, ann.vocabName, ann.term
    from {ANNOTATED_TABLE} ann, ACC_Accession a
    where ann._Term_key = a._Object_key
      and a._MGIType_key = {constants.MGI_TYPE_TERM}
      and a.preferred = 0
"""

_ALLELE_ANNOTATION_TYPES = ', '.join(f"'{annot_type}'" for annot_type in constants.ALLELE_ANNOTATION_TYPES)

GF_VOC_DAG_QUERY = WITH_ANNOTATED_TERMS + f"""
    select _Term_key, accID, vocabName, annotType, '{constants.MARKER_TYPE_NAME}' as object_type
    from {ANNOTATED_TABLE}
    union
    select tv._Term_key, tv.accID, tv.vocabName, vac.annotType, '{constants.ALLELE_TYPE_NAME}'
    from VOC_Term_View tv, VOC_Allele_Cache vac
    where tv.isObsolete != 1
      and tv._Term_key = vac._Term_key
      and vac.annotType in ({_ALLELE_ANNOTATION_TYPES})
    order by 1, 5
"""

GF_VOC_FEATURE_QUERY = f"""
    select distinct _Term_key, annotType, _Marker_key as feature_key,
        '{constants.MARKER_TYPE_NAME}' as object_type
    from VOC_Marker_Cache
    union
    select distinct _Term_key, annotType, _Allele_key, '{constants.ALLELE_TYPE_NAME}'
    from VOC_Allele_Cache
    order by 1, 3
"""

# Descendants only count when they carry annotations of the same type.
GF_VOC_CHILD_QUERY = f"""
    select distinct dc._AncestorObject_key as parent_key,
        dc._DescendentObject_key as child_key, vacc.annotType,
        '{constants.MARKER_TYPE_NAME}' as object_type
    from DAG_Closure dc, VOC_Annot_Count_Cache vacc, VOC_Term_View ct
    where dc._MGIType_key = {constants.MGI_TYPE_TERM}
      and dc._DescendentObject_key = vacc._Term_key
      and dc._DescendentObject_key = ct._Term_key
      and ct.isObsolete != 1
    union
    select distinct dc._AncestorObject_key, dc._DescendentObject_key, vac.annotType,
        '{constants.ALLELE_TYPE_NAME}'
    from DAG_Closure dc, VOC_Allele_Cache vac, VOC_Term_View ct
    where dc._MGIType_key = {constants.MGI_TYPE_TERM}
      and dc._DescendentObject_key = vac._Term_key
      and dc._DescendentObject_key = ct._Term_key
      and ct.isObsolete != 1
    order by 1, 2
"""

# What a match on a term from each vocabulary is shown as.
ANNOTATION_DISPLAY_TYPES = {
    'GO': 'Function',
    'Mammalian Phenotype': 'Phenotype',
    'InterPro Domains': 'Protein Domain',
    'PIR Superfamily': 'Protein Family',
    'Disease Ontology': 'Disease Model',
    constants.DO_ORTHOLOG_VOCAB: 'Disease Ortholog',
}


def annotation_display_type(vocab_name):
    """None for a vocabulary without a display type, which marks the document in error."""
    return ANNOTATION_DISPLAY_TYPES.get(vocab_name)


class GenomeFeatureVocabExactGatherer(VocabTermGatherer):
    """Terms, synonyms and definitions of annotated terms, matched as a whole."""

    builder_class = GenomeFeatureVocabExactDocBuilder

    term_query = GF_VOC_TERM_QUERY
    synonym_query = GF_VOC_SYNONYM_QUERY
    note_query = GF_VOC_NOTE_QUERY

    def describe(self, row, data_type):
        vocab_name = row['vocabName']
        if data_type == constants.VOCAB_TERM:
            unique_key = f"{row['_Term_key']}{vocab_name}"
        elif data_type == constants.VOCAB_SYNONYM:
            unique_key = f"{row['_Synonym_key']}{data_type}{vocab_name}"
        else:
            unique_key = f"{row['_Term_key']}{data_type}{vocab_name}"
        return {
            'db_key': row['_Term_key'],
            'vocabulary': vocab_name,
            'data_type': data_type,
            'display_type': annotation_display_type(vocab_name),
            'unique_key': unique_key,
        }


class GenomeFeatureVocabAccIDGatherer(DatabaseGatherer):
    """Accession IDs of annotated terms; the ID is shown in brackets after the term."""

    builder_class = GenomeFeatureVocabAccIDDocBuilder

    def subtasks(self):
        return [self.do_vocab_accession_id]

    def do_vocab_accession_id(self):
        for row in self.gather(GF_VOC_ACCID_QUERY, 'genome feature vocab accession id'):
            self.builder.set(
                data=row['accID'],
                raw_data=row['term'],
                db_key=row['_Term_key'],
                vocabulary=row['vocabName'],
                data_type=constants.ACCESSION_ID,
                display_type=annotation_display_type(row['vocabName']),
                provider=f"({row['accID']})",
            )
            self.push_builder()
        logger.info("Done collecting Genome Feature Vocab Accession IDs!")


class GenomeFeatureVocabDagGatherer(DatabaseGatherer):
    """
    One document per annotated term and object type (marker or allele),
    listing the annotated features and the term's annotated descendants.
    Features and descendants are looked up by term key, annotation type
    and object type, so the DO ortholog documents only list human marker
    annotations.
    """

    builder_class = GenomeFeatureVocabDagDocBuilder

    def __init__(self, config, document_stack):
        super().__init__(config, document_stack)
        self.feature_ids = {}
        self.child_ids = {}

    def subtasks(self):
        return [self.do_feature_ids, self.do_child_ids, self.do_vocab_dag]

    def do_feature_ids(self):
        self.feature_ids = {}
        for row in self.gather(GF_VOC_FEATURE_QUERY, 'annotated features'):
            key = (row['_Term_key'], row['annotType'], row['object_type'])
            self.feature_ids.setdefault(key, []).append(row['feature_key'])
        logger.info(f"Done collecting annotated features for {len(self.feature_ids)} terms!")

    def do_child_ids(self):
        self.child_ids = {}
        for row in self.gather(GF_VOC_CHILD_QUERY, 'genome feature vocab dag'):
            key = (row['parent_key'], row['annotType'], row['object_type'])
            self.child_ids.setdefault(key, []).append(row['child_key'])
        logger.info(f"Done collecting descendants for {len(self.child_ids)} terms!")

    def do_vocab_dag(self):
        for row in self.gather(GF_VOC_DAG_QUERY, 'genome feature vocab terms'):
            key = (row['_Term_key'], row['annotType'], row['object_type'])
            self.builder.set(
                db_key=row['_Term_key'],
                vocabulary=row['vocabName'],
                acc_id=row['accID'],
                unique_key=f"{row['_Term_key']}{row['vocabName']}{row['object_type']}",
                object_type=row['object_type'],
            )
            for feature_key in self.feature_ids.get(key, []):
                self.builder.append_gene_id(feature_key)
            for child_key in self.child_ids.get(key, []):
                self.builder.append_child_id(child_key)
            self.push_builder()
        logger.info("Done collecting Genome Feature Vocab Dag information!")
