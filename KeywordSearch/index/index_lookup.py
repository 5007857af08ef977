import json
import os
from abc import ABC, abstractmethod
from collections import Counter
from typing import Dict, Mapping, Optional


class IndexFormatError(ValueError):
    """Raised when a prebuilt index file does not have the expected layout."""


class IndexLookup(ABC):
    """
    Access to an externally built inverted index.
    Maps a single query term to the frequency of that term per document.
    """

    def __init__(self, lowercase: bool = False):
        self.lowercase = lowercase

    def normalize_term(self, term: str) -> str:
        term = term.strip()
        return term.lower() if self.lowercase else term

    @abstractmethod
    def get_counts(self, term: str) -> Dict[str, int]:
        """
        Look up a term in the index.

        Args:
            term: Query term

        Returns:
            Dictionary {document_id: frequency}, empty if the term is unknown
        """
        raise NotImplementedError()


class InMemoryIndex(IndexLookup):
    """Index lookup over a prebuilt {term: {doc_id: count}} dictionary."""

    def __init__(self, index: Optional[Mapping[str, Mapping[str, int]]] = None, lowercase: bool = False):
        super().__init__(lowercase=lowercase)
        self.index = {term: dict(counts) for term, counts in (index or {}).items()}

    def get_counts(self, term: str) -> Dict[str, int]:
        # Return a copy so callers never hold on to the index storage
        return dict(self.index.get(self.normalize_term(term), {}))

    @property
    def all_docs(self):
        docs = set()
        for counts in self.index.values():
            docs.update(counts)
        return docs

    def __len__(self):
        return len(self.index)


class JsonIndex(InMemoryIndex):
    """
    Index lookup backed by a prebuilt inverted index JSON file.

    Expected layout:
        {"metadata": {...}, "index": {term: {doc_id: count}}}
    A term may also map to a list of document IDs, in which case every
    occurrence of an ID counts as frequency 1.
    """

    def __init__(self, index_file: str, lowercase: bool = False):
        self.index_file = index_file
        self.metadata = {}
        super().__init__(lowercase=lowercase)
        self.load_index_from_file(index_file)

    def load_index_from_file(self, index_file: str):
        """Load an inverted index from a JSON file"""
        if not os.path.exists(index_file):
            raise FileNotFoundError(f"Index file not found: {index_file}")

        print(f"Loading inverted index from {index_file}...")
        with open(index_file, 'r', encoding='utf-8') as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise IndexFormatError(f"Index file {index_file} is not valid JSON: {e}") from e

        self.load_index_from_dict(data)

    def load_index_from_dict(self, data):
        """Load an inverted index from a dictionary"""
        if not isinstance(data, dict) or not isinstance(data.get('index'), dict):
            raise IndexFormatError("Index data must be an object with an 'index' mapping")

        self.metadata = data.get('metadata', {})

        self.index = {}
        for term, postings in data['index'].items():
            self.index[term] = self._parse_postings(term, postings)

        print(f"Loaded index with {len(self.index)} terms and {len(self.all_docs)} documents")

    @staticmethod
    def _parse_postings(term, postings):
        if isinstance(postings, list):
            # Boolean index format: a plain list of document IDs
            return dict(Counter(str(doc_id) for doc_id in postings))

        if not isinstance(postings, dict):
            raise IndexFormatError(f"Postings for term {term!r} must be a list or an object")

        counts = {}
        for doc_id, count in postings.items():
            if isinstance(count, bool) or not isinstance(count, int) or count < 0:
                raise IndexFormatError(
                    f"Frequency of {term!r} in document {doc_id!r} must be a non-negative integer"
                )
            counts[str(doc_id)] = count
        return counts
