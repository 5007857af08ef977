import os
import time

from KeywordSearch.config import load_config, get_combine_rule
from KeywordSearch.relevance.relevance_set import RelevanceSet
from .parser import BooleanParser, QuerySyntaxError


class BooleanSearchEngine:
    def __init__(self, index_lookup, config=None):
        """
        Initialize the search engine on top of an index lookup.

        Args:
            index_lookup: Object providing get_counts(term) -> {doc_id: count}
            config: Optional configuration dictionary (loaded from config.json if omitted)
        """
        self.index_lookup = index_lookup
        self.config = config if config is not None else load_config()
        self.combine = get_combine_rule(self.config.get("scoring", {}).get("combine", "sum"))
        self.use_cache = self.config.get("cache", {}).get("enabled", True)
        self.cache_size = self.config.get("cache", {}).get("max_size", 128)
        self.query_cache = {}

    def search_term(self, term):
        """Look up a single term and wrap it as a RelevanceSet"""
        return RelevanceSet.search(term, self.index_lookup, combine=self.combine)

    def parse(self, query_string):
        return BooleanParser(query_string).parse()

    def evaluate(self, query_ast):
        """Evaluate a query AST, returning a RelevanceSet"""
        return query_ast.evaluate(self)

    def search(self, query_string, debug=False):
        """
        Execute a boolean search query

        Args:
            query_string: Boolean query string (AND, OR, NOT, parentheses)
            debug: Enable debug output

        Returns:
            tuple: (RelevanceSet, execution_time)

        Raises:
            QuerySyntaxError: If the query cannot be parsed
        """
        query_string = query_string.strip()

        # Check cache
        if self.use_cache and query_string in self.query_cache:
            results, execution_time = self.query_cache[query_string]
            if debug:
                print(f"Cache hit for query: '{query_string}'")
                print(f"Cached results: {len(results)} documents")
            return results, execution_time

        start_time = time.time()

        query_ast = self.parse(query_string)
        if debug:
            print(f"\nQuery AST: {query_ast}")

        results = self.evaluate(query_ast)
        execution_time = time.time() - start_time

        if self.use_cache and self.cache_size > 0:
            # Evict the oldest query once the cache is full
            if len(self.query_cache) >= self.cache_size:
                del self.query_cache[next(iter(self.query_cache))]
            self.query_cache[query_string] = (results, execution_time)
        return results, execution_time

    def clear_cache(self):
        self.query_cache.clear()

    def batch_search(self, query_file, output_file=None, top_k=None):
        """
        Process multiple queries from a file, one query per line.
        Empty lines and lines starting with '//' are skipped.

        Args:
            query_file: Path to the file with queries
            output_file: Optional path for a ranked results report
            top_k: Number of documents per query written to the report (all if None)

        Returns:
            tuple: (list of (query, RelevanceSet, execution_time), total_time)
        """
        print(f"Processing queries from {query_file}")

        with open(query_file, 'r', encoding='utf-8') as f:
            lines = f.readlines()

        queries = [line.strip() for line in lines if line.strip() and not line.strip().startswith('//')]

        results = []
        total_time = 0

        for i, query in enumerate(queries):
            try:
                result_set, execution_time = self.search(query)
            except QuerySyntaxError as e:
                print(f"Error processing query {i+1}: '{query}' - {e}")
                results.append((query, RelevanceSet(), 0))
                continue

            results.append((query, result_set, execution_time))
            total_time += execution_time
            print(f"Query {i+1}: '{query}' - Found {len(result_set)} documents in {execution_time:.6f} seconds")

        zero_results = sum(1 for _, docs, _ in results if not docs)
        print(f"Total queries: {len(queries)}, queries with no results: {zero_results}")

        if output_file:
            self._write_report(output_file, results, total_time, top_k)

        return results, total_time

    def _write_report(self, output_file, results, total_time, top_k=None):
        output_dir = os.path.dirname(output_file)
        if output_dir and not os.path.exists(output_dir):
            os.makedirs(output_dir)

        with open(output_file, 'w', encoding='utf-8') as f:
            f.write("Keyword Search Results\n")
            f.write("======================\n\n")

            for query, docs, time_taken in results:
                f.write(f"Query: {query}\n")
                f.write(f"Matching documents: {len(docs)}\n")
                f.write(f"Time: {time_taken:.6f} seconds\n")

                ranked = docs.rank(descending=True)
                if top_k is not None:
                    ranked = ranked[:top_k]
                for doc_id, score in ranked:
                    f.write(f"  {doc_id}\t{score}\n")
                f.write("\n")

            f.write(f"Total queries: {len(results)}\n")
            f.write(f"Total execution time: {total_time:.6f} seconds\n")

        print(f"\nResults written to {output_file}")
