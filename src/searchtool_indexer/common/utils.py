"""
Utility functions for the search tool indexer.
"""
import logging
import re

import psutil

logger = logging.getLogger(__name__)

STRAIN_DATA_SET = 'Strain'


def normalize_whitespace(text):
    """Collapse runs of whitespace into a single space and trim the ends."""
    if not text:
        return ''
    return re.sub(r'\s+', ' ', text).strip()


def init_cap(text):
    """Capitalize the first letter of every word, lowercase the rest."""
    if not text:
        return text
    chars = []
    capitalize = True
    for char in text:
        if char.isspace():
            capitalize = True
            chars.append(char)
        elif capitalize:
            chars.append(char.upper())
            capitalize = False
        else:
            chars.append(char.lower())
    return ''.join(chars)


def get_document_key(db_key, data_set):
    """Strain keys share a number space with term keys, so prefix them."""
    if data_set == STRAIN_DATA_SET:
        return f"{data_set}{db_key}"
    return db_key


def get_memory_usage():
    """Resident memory of this process in MB."""
    try:
        return psutil.Process().memory_info().rss / (1024 * 1024)
    except psutil.Error as e:
        logger.warning(f"Could not read memory usage: {e}")
        return 0.0


def time_report(start, end):
    """Log how long the indexing run took. Times are from time.time()."""
    millis = int((end - start) * 1000)
    seconds = millis / 1000.0
    minutes = seconds / 60.0

    logger.info("=================================================")
    logger.info("Completed Indexing")
    logger.info("Total Time Taken: ")
    logger.info(f"({millis}) Milliseconds Total")
    logger.info(f"({seconds}) Seconds Total")
    logger.info(f"({minutes}) Minutes Total")
    logger.info(f"Memory in use: {get_memory_usage():.1f} MB")
    logger.info("=================================================")
    return millis
