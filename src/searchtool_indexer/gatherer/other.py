"""
Gatherers for the "other" indexes: the object types that the search tool
only finds by accession ID (references, probes, sequences, antibodies and
so on), plus the display information shown for them.
"""
import logging

from searchtool_indexer.common import constants
from searchtool_indexer.docbuilder import OtherDisplayDocBuilder, OtherExactDocBuilder
from searchtool_indexer.gatherer.base import DatabaseGatherer

logger = logging.getLogger(__name__)

OTHER_TYPE_KEYS = ', '.join(str(key) for key in sorted(constants.OTHER_TYPES))

OTHER_ACCID_QUERY = f"""
    select a._Accession_key, a._Object_key, a._MGIType_key, a.accID,
        a.preferred, ldb.name as logicalDB
    from ACC_Accession a, ACC_LogicalDB ldb
    where a._MGIType_key in ({OTHER_TYPE_KEYS})
      and a.private = 0
      and a._LogicalDB_key = ldb._LogicalDB_key
"""

PROBE_DISPLAY_QUERY = """
    select p._Probe_key, p.name, vt.term as segmentType
    from PRB_Probe p, VOC_Term vt
    where p._SegmentType_key = vt._Term_key
"""

REFERENCE_DISPLAY_QUERY = """
    select r._Refs_key, r.short_citation
    from BIB_Citation_Cache r
"""

SEQUENCE_DISPLAY_QUERY = """
    select s._Sequence_key, s.description, vt.term as sequenceType
    from SEQ_Sequence s, VOC_Term vt
    where s._SequenceType_key = vt._Term_key
"""

ANTIBODY_DISPLAY_QUERY = """
    select a._Antibody_key, a.antibodyName
    from GXD_Antibody a
"""


class OtherExactGatherer(DatabaseGatherer):
    """Accession IDs of every ID-only object type."""

    builder_class = OtherExactDocBuilder

    def subtasks(self):
        return [self.do_other_accession_ids]

    def do_other_accession_ids(self):
        skipped = 0
        for row in self.gather(OTHER_ACCID_QUERY, 'other accession id'):
            data_type = constants.OTHER_TYPES.get(row['_MGIType_key'])
            if data_type is None:
                skipped += 1
                continue
            self.builder.set(
                db_key=row['_Object_key'],
                data=row['accID'],
                accession_key=row['_Accession_key'],
                data_type=data_type,
                preferred=row['preferred'],
                provider=row['logicalDB'],
                display_type=f"{data_type.title()} ID",
            )
            self.push_builder()
        if skipped:
            logger.warning(f"Skipped {skipped} accession ids of unknown object types")
        logger.info("Done collecting Other Accession IDs!")


class OtherDisplayGatherer(DatabaseGatherer):
    """Names shown in the search results for the ID-only object types."""

    builder_class = OtherDisplayDocBuilder

    def subtasks(self):
        return [self.do_probes, self.do_references, self.do_sequences, self.do_antibodies]

    def _push_display(self, db_key, data_type, name, qualifier=''):
        self.builder.set(db_key=db_key, data_type=data_type, name=name, qualifier=qualifier)
        self.push_builder()

    def do_probes(self):
        for row in self.gather(PROBE_DISPLAY_QUERY, 'probe display'):
            self._push_display(row['_Probe_key'], 'PROBE', row['name'], row['segmentType'])
        logger.info("Done collecting Probe Display information!")

    def do_references(self):
        for row in self.gather(REFERENCE_DISPLAY_QUERY, 'reference display'):
            self._push_display(row['_Refs_key'], 'REFERENCE', row['short_citation'])
        logger.info("Done collecting Reference Display information!")

    def do_sequences(self):
        for row in self.gather(SEQUENCE_DISPLAY_QUERY, 'sequence display'):
            self._push_display(row['_Sequence_key'], 'SEQUENCE', row['description'], row['sequenceType'])
        logger.info("Done collecting Sequence Display information!")

    def do_antibodies(self):
        for row in self.gather(ANTIBODY_DISPLAY_QUERY, 'antibody display'):
            self._push_display(row['_Antibody_key'], 'ANTIBODY', row['antibodyName'])
        logger.info("Done collecting Antibody Display information!")
