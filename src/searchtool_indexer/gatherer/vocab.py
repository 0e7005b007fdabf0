"""
Gatherers for the vocabulary indexes.

Each gatherer runs through a group of subtasks, one per kind of
vocabulary data (terms, synonyms, definitions, IDs). Every subtask queries
the database, builds a document per row and pushes it onto the shared
document stack. Strains are treated as a vocabulary.
"""
import itertools
import logging
import re

from searchtool_indexer.common import constants
from searchtool_indexer.common.utils import STRAIN_DATA_SET, get_document_key
from searchtool_indexer.docbuilder import (
    VocabAccIDDocBuilder,
    VocabDisplayDocBuilder,
    VocabExactDocBuilder,
    VocabInexactDocBuilder,
)
from searchtool_indexer.gatherer.base import DatabaseGatherer

logger = logging.getLogger(__name__)

VOCAB_KEYS = ', '.join(str(key) for key in constants.INDEXED_VOCABS)

STRAIN_TABLE = 'selected_strains'

# Public strains with a real strain attribute, and a name that isn't a
# combination of other strains.
WITH_STRAINS = f"""
    with {STRAIN_TABLE} as (
        select s._Strain_key
        from PRB_Strain s
        where s.private = 0
          and lower(s.strain) not like '%involves%'
          and lower(s.strain) not like '%either%'
          and lower(s.strain) not like '% and %'
          and lower(s.strain) not like '% or %'
          and exists (select 1 from VOC_Annot va, VOC_Term t
              where va._AnnotType_key = 1009
                and va._Term_key = t._Term_key
                and t.term != 'Not Applicable'
                and t.term != 'Not Specified'
                and va._Object_key = s._Strain_key)
    )
"""

VOC_TERM_QUERY = WITH_STRAINS + f"""
    select _Term_key, term, vocabName
    from VOC_Term_View
    where isObsolete != 1 and _Vocab_key in ({VOCAB_KEYS})
    union
    select t._Strain_key, s.strain, '{STRAIN_DATA_SET}'
    from {STRAIN_TABLE} t, PRB_Strain s
    where t._Strain_key = s._Strain_key
"""

VOC_SYNONYM_QUERY = WITH_STRAINS + f"""
    select tv._Term_key, s.synonym, tv.vocabName
    from VOC_Term_View tv, MGI_Synonym s
    where tv._Term_key = s._Object_key and tv.isObsolete != 1
      and tv._Vocab_key in ({VOCAB_KEYS})
      and s._MGIType_key = {constants.MGI_TYPE_TERM}
    union
    select s._Object_key, s.synonym, '{STRAIN_DATA_SET}'
    from MGI_Synonym s
    inner join MGI_SynonymType st on (s._SynonymType_key = st._SynonymType_key
        and st._MGIType_key = {constants.MGI_TYPE_STRAIN})
    inner join {STRAIN_TABLE} ps on (s._Object_key = ps._Strain_key)
"""

VOC_NOTE_QUERY = f"""
    select tv._Term_key, t.note, tv.vocabName
    from VOC_Term_View tv, VOC_Text t
    where tv._Term_key = t._Term_key and tv.isObsolete != 1
      and tv._Vocab_key in ({VOCAB_KEYS})
    order by tv._Term_key, t.sequenceNum
"""

VOC_ACCID_QUERY = WITH_STRAINS + f"""
    select tv._Term_key, a.accID, tv.vocabName, a._LogicalDB_key
    from VOC_Term_View tv, ACC_Accession a
    where tv.isObsolete != 1
      and tv._Vocab_key in ({VOCAB_KEYS})
      and tv._Term_key = a._Object_key
      and a._MGIType_key = {constants.MGI_TYPE_TERM}
    union
    select t._Strain_key, a.accID, '{STRAIN_DATA_SET}', a._LogicalDB_key
    from {STRAIN_TABLE} t, ACC_Accession a
    where t._Strain_key = a._Object_key
      and a._MGIType_key = {constants.MGI_TYPE_STRAIN}
"""

VOC_DISPLAY_QUERY = f"""
    select tv._Term_key, tv.term, tv.vocabName, tv.accID,
        (select count(distinct va._Object_key) from VOC_Annot va
         where va._Term_key = tv._Term_key) as annotation_count
    from VOC_Term_View tv
    where tv.isObsolete != 1 and tv._Vocab_key in ({VOCAB_KEYS})
    order by tv._Term_key
"""

VOC_CHILD_QUERY = f"""
    select p._Object_key as parent_key, ct.accID as child_id
    from DAG_Edge e, DAG_Node p, DAG_Node c, VOC_Term_View ct
    where e._Parent_key = p._Node_key
      and e._Child_key = c._Node_key
      and c._Object_key = ct._Term_key
      and ct.isObsolete != 1
      and ct._Vocab_key in ({VOCAB_KEYS})
    order by p._Object_key, ct.accID
"""

DISEASE_ONTOLOGY = 'Disease Ontology'


class VocabTermGatherer(DatabaseGatherer):
    """
    Shared run logic for the vocabExact and vocabInexact indexes: both take
    terms, synonyms and definitions, they only differ in how the documents
    are analyzed.
    """

    term_query = VOC_TERM_QUERY
    synonym_query = VOC_SYNONYM_QUERY
    note_query = VOC_NOTE_QUERY

    display_types = {
        constants.VOCAB_TERM: 'Term',
        constants.VOCAB_SYNONYM: 'Synonym',
        constants.VOCAB_NOTE: 'Definition',
    }

    def subtasks(self):
        return [self.do_vocab_term, self.do_vocab_synonym, self.do_vocab_note]

    def describe(self, row, data_type):
        """Fields of a document built from this row, other than its text."""
        return {
            'db_key': get_document_key(row['_Term_key'], row['vocabName']),
            'vocabulary': row['vocabName'],
            'data_type': data_type,
            'display_type': self.display_types[data_type],
        }

    def _push_row(self, row, text_column, data_type):
        self.builder.set(
            data=row[text_column],
            raw_data=row[text_column],
            **self.describe(row, data_type)
        )
        self.push_builder()

    def do_vocab_term(self):
        for row in self.gather(self.term_query, 'vocab term'):
            self._push_row(row, 'term', constants.VOCAB_TERM)
        logger.info("Done collecting Vocab Terms!")

    def do_vocab_synonym(self):
        for row in self.gather(self.synonym_query, 'vocab synonym'):
            self._push_row(row, 'synonym', constants.VOCAB_SYNONYM)
        logger.info("Done collecting Vocab Synonyms!")

    def do_vocab_note(self):
        # Definitions are stored in chunks, one row each; glue them back
        # together into one document per term.
        rows = self.gather(self.note_query, 'vocab notes/definitions')
        for _, chunks in itertools.groupby(rows, key=lambda row: (row['_Term_key'], row['vocabName'])):
            for chunk in chunks:
                self.builder.set(**self.describe(chunk, constants.VOCAB_NOTE))
                self.builder.append_data(chunk['note'])
            self.builder.set(raw_data=self.builder['data'])
            self.push_builder()
        logger.info("Done collecting Vocab Notes/Definitions!")


class VocabExactGatherer(VocabTermGatherer):
    """Large token (whole term) data for the vocabExact index."""

    builder_class = VocabExactDocBuilder


class VocabInexactGatherer(VocabTermGatherer):
    """Small token data for the vocabInexact index."""

    builder_class = VocabInexactDocBuilder


class VocabAccIDGatherer(DatabaseGatherer):
    """Accession IDs of vocabulary terms and strains."""

    builder_class = VocabAccIDDocBuilder

    def subtasks(self):
        return [self.do_vocab_accession_id]

    def do_vocab_accession_id(self):
        for row in self.gather(VOC_ACCID_QUERY, 'vocab accession id'):
            self.builder.set(
                data=row['accID'],
                raw_data=row['accID'],
                db_key=get_document_key(row['_Term_key'], row['vocabName']),
                vocabulary=row['vocabName'],
                data_type=constants.ACCESSION_ID,
                display_type='ID',
            )
            if is_omim_id(row['vocabName'], row['_LogicalDB_key'], row['accID']):
                self.builder.set(provider='(OMIM)')
            self.push_builder()
        logger.info("Done collecting Vocab Accession IDs!")


def is_omim_id(vocab_name, logical_db_key, acc_id):
    """Disease Ontology terms carry bare numeric OMIM ids."""
    return (
        vocab_name == DISEASE_ONTOLOGY
        and logical_db_key == constants.OMIM_LOGICAL_DB
        and re.fullmatch(r'[0-9]+', acc_id or '') is not None
    )


class VocabDisplayGatherer(DatabaseGatherer):
    """One display document per vocabulary term."""

    builder_class = VocabDisplayDocBuilder

    def __init__(self, config, document_stack):
        super().__init__(config, document_stack)
        self.child_ids = {}

    def subtasks(self):
        return [self.do_child_ids, self.do_vocab_display]

    def do_child_ids(self):
        """Child term IDs per parent term key, attached to the display documents."""
        self.child_ids = {}
        for row in self.gather(VOC_CHILD_QUERY, 'vocab dag children'):
            self.child_ids.setdefault(row['parent_key'], []).append(row['child_id'])
        logger.info(f"Done collecting children for {len(self.child_ids)} terms!")

    def do_vocab_display(self):
        for row in self.gather(VOC_DISPLAY_QUERY, 'vocab display'):
            self.builder.set(
                db_key=row['_Term_key'],
                data=row['term'],
                vocabulary=row['vocabName'],
                acc_id=row['accID'],
                annotation_count=row['annotation_count'],
                type_display='Term',
            )
            for child_id in self.child_ids.get(row['_Term_key'], []):
                self.builder.append_child_id(child_id)
            self.push_builder()
        logger.info("Done collecting Vocab Display information!")
