#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
KeywordSearch - command-line interface
Runs single-term searches and boolean queries against a prebuilt inverted index
and displays the ranked results.
"""

import argparse
import sys
from functools import reduce

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from KeywordSearch.boolean_search.boolean_search import BooleanSearchEngine
from KeywordSearch.boolean_search.parser import QuerySyntaxError
from KeywordSearch.config import load_config
from KeywordSearch.index.index_lookup import JsonIndex

console = Console()


def display_results(title, results, top_k=10, descending=True):
    """Display a RelevanceSet as a ranked table"""
    title = escape(title)
    if not results:
        console.print(f"[yellow]No results found for {title}[/yellow]")
        return

    ranked = results.rank(descending=descending)[:top_k]

    console.print(f"\n[bold cyan]{title}[/bold cyan] [dim]({len(results)} document(s))[/dim]")
    table = Table(box=box.SIMPLE_HEAVY, show_header=True, header_style="bold magenta")
    table.add_column("#", style="dim", width=4)
    table.add_column("Document", style="cyan", overflow="fold")
    table.add_column("Score", style="green", justify="right")

    for i, (doc_id, score) in enumerate(ranked):
        table.add_row(str(i + 1), escape(doc_id), str(score))

    console.print(table)
    if len(results) > len(ranked):
        console.print(f"[dim]... {len(results) - len(ranked)} more[/dim]")


def run_demo(engine, terms, top_k, descending):
    """Search each term separately, then show their AND / OR combinations"""
    searches = []
    for term in terms:
        result = engine.search_term(term)
        display_results(f"Query: {term}", result, top_k, descending)
        searches.append(result)

    if len(searches) < 2:
        return

    display_results(f"Query: {' AND '.join(terms)}",
                    reduce(lambda a, b: a.intersection(b), searches), top_k, descending)
    display_results(f"Query: {' OR '.join(terms)}",
                    reduce(lambda a, b: a.union(b), searches), top_k, descending)
    if len(searches) == 2:
        display_results(f"Query: {terms[0]} NOT {terms[1]}",
                        searches[0].difference(searches[1]), top_k, descending)


def run_query(engine, query, top_k, descending, debug=False):
    result_set, execution_time = engine.search(query, debug=debug)
    console.print(f"[green]Found {len(result_set)} documents in {execution_time:.6f} seconds[/green]")
    display_results(f"Query: {query}", result_set, top_k, descending)


def run_interactive(engine, top_k, descending, debug=False):
    console.print(Panel(
        "[bold blue]KeywordSearch[/bold blue] interactive mode",
        border_style="blue",
        subtitle="Use AND, OR, NOT and parentheses. Type 'quit' to exit"
    ))

    while True:
        try:
            query = console.input("\n[bold]Enter query:[/bold] ")
        except EOFError:
            break
        if query.strip().lower() == 'quit':
            break
        if not query.strip():
            continue

        try:
            run_query(engine, query, top_k, descending, debug)
        except QuerySyntaxError as e:
            console.print(f"[bold red]Invalid query:[/bold red] {escape(str(e))}")


def non_negative_int(value):
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must not be negative, got {number}")
    return number


def build_parser():
    parser = argparse.ArgumentParser(description='KeywordSearch - boolean keyword search with relevance ranking')
    parser.add_argument('index', help='Path to inverted index JSON file')
    parser.add_argument('terms', nargs='*', help='Terms to search separately and combine with AND / OR')
    parser.add_argument('--query', help='Boolean query to execute, e.g. "java AND (coffee OR tea)"')
    parser.add_argument('--queries', help='Path to file with multiple queries')
    parser.add_argument('--output', help='Path to output results file (with --queries)')
    parser.add_argument('--config', help='Path to config JSON file')
    parser.add_argument('--combine', help='Combine rule for overlapping documents (sum, max, min)')
    parser.add_argument('--top', type=non_negative_int, help='Number of results to display')
    parser.add_argument('--ascending', action='store_true', help='List least relevant documents first')
    parser.add_argument('--debug', action='store_true', help='Enable debug output')
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config)
        if args.combine:
            config["scoring"]["combine"] = args.combine

        top_k = args.top if args.top is not None else config["results"]["top"]
        descending = not args.ascending and config["results"]["order"] != "ascending"

        index = JsonIndex(args.index, lowercase=config["lookup"]["lowercase"])
        engine = BooleanSearchEngine(index, config=config)

        if args.query:
            run_query(engine, args.query, top_k, descending, args.debug)
        elif args.queries:
            engine.batch_search(args.queries, args.output, top_k=top_k)
        elif args.terms:
            run_demo(engine, args.terms, top_k, descending)
        else:
            run_interactive(engine, top_k, descending, args.debug)

    except (OSError, ValueError, QuerySyntaxError) as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        sys.exit(1)


if __name__ == "__main__":
    main()
