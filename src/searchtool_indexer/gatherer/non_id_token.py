"""
Gatherer for the non-ID token index: every piece of free text the other
indexes search on, so the search tool can tell whether a query token is a
known word or should be treated as an ID.
"""
import itertools
import logging

from searchtool_indexer.docbuilder import NonIDTokenDocBuilder
from searchtool_indexer.gatherer.base import DatabaseGatherer
from searchtool_indexer.gatherer.genome_feature import MARKER_LABEL_QUERY
from searchtool_indexer.gatherer.vocab import VOC_NOTE_QUERY, VOC_SYNONYM_QUERY, VOC_TERM_QUERY

logger = logging.getLogger(__name__)

ALLELE_SYNONYM_QUERY = """
    select s._Object_key, s.synonym
    from MGI_Synonym s, MGI_SynonymType st
    where s._SynonymType_key = st._SynonymType_key
      and st._MGIType_key = 11
"""


class NonIDTokenGatherer(DatabaseGatherer):

    builder_class = NonIDTokenDocBuilder

    def subtasks(self):
        return [
            self.do_marker_labels,
            self.do_vocab_terms,
            self.do_vocab_synonyms,
            self.do_vocab_notes,
            self.do_allele_synonyms,
        ]

    def _push_text(self, text):
        self.builder.set(data=text)
        self.push_builder()

    def do_marker_labels(self):
        for row in self.gather(MARKER_LABEL_QUERY, 'marker label'):
            self._push_text(row['label'])
            # Allele symbols are also searched without their superscript brackets
            if row['labelType'] == 'AS' and row['label']:
                self._push_text(row['label'].replace('<', '').replace('>', ''))
        logger.info("Done Marker Labels!")

    def do_vocab_terms(self):
        for row in self.gather(VOC_TERM_QUERY, 'vocab term'):
            self._push_text(row['term'])
        logger.info("Done Vocab Terms!")

    def do_vocab_synonyms(self):
        for row in self.gather(VOC_SYNONYM_QUERY, 'vocab synonym'):
            self._push_text(row['synonym'])
        logger.info("Done Vocab Synonyms!")

    def do_vocab_notes(self):
        rows = self.gather(VOC_NOTE_QUERY, 'vocab notes/definition')
        for _, chunks in itertools.groupby(rows, key=lambda row: row['_Term_key']):
            for chunk in chunks:
                self.builder.append_data(chunk['note'])
            self.push_builder()
        logger.info("Done Vocab Notes/Definitions!")

    def do_allele_synonyms(self):
        for row in self.gather(ALLELE_SYNONYM_QUERY, 'allele synonym'):
            self._push_text(row['synonym'])
        logger.info("Done Allele Synonyms!")
