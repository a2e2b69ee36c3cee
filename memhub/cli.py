# memhub/cli.py
"""
CLI commands for the memory brain.

Usage:
    # Embed every event that has no vector yet
    python -m memhub.cli backfill

    # Semantic search
    python -m memhub.cli search "auth middleware" --project api --limit 5

    # Ask a question
    python -m memhub.cli ask "what did I change in auth?"

    # Known providers and models
    python -m memhub.cli providers --kind embedding
"""

import argparse
import logging
import sys

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def cmd_backfill(args):
    """Embed events that have no embedding."""
    from memhub.db.session import init_database
    from memhub.knowledge_base.embedding import get_embedding_service

    init_database()
    print("Starting embedding backfill...")
    stats = get_embedding_service().backfill_embeddings()

    print("\nBackfill complete!")
    print(f"  Candidates: {stats.candidates}")
    print(f"  Embedded: {stats.embedded}")
    print(f"  Skipped (short text): {stats.skipped}")
    print(f"  Failed: {stats.failed}")

    if stats.errors:
        print(f"\nErrors ({len(stats.errors)}):")
        for error in stats.errors[:5]:  # Show first 5
            print(f"  - {error['event_id']}: {error['error']}")


def cmd_search(args):
    """Rank events by similarity to a query."""
    from memhub.knowledge_base.retrieval import get_retrieval_service

    results = get_retrieval_service().find_similar_events(
        args.query,
        project=args.project,
        limit=args.limit,
    )

    if not results:
        print("No results found.")
        return

    print(f"Found {len(results)} results:\n")
    for i, result in enumerate(results, 1):
        print(f"{i}. [{result.project or '-'}] {result.type}: {result.id}")
        print(f"   Similarity: {result.similarity:.3f}")
        print(f"   Date: {result.timestamp}")
        if result.text:
            text = result.text[:100] + ('...' if len(result.text) > 100 else '')
            print(f"   Text: {text}")
        print()


def cmd_ask(args):
    """Answer a question from memories."""
    from memhub.knowledge_base.brain import get_brain_service

    answer = get_brain_service().ask_brain(args.question, project=args.project)
    print(answer.user_response)

    if answer.related_memories:
        print("\nRelated memories:")
        for memory in answer.related_memories:
            print(f"  [{memory['id']}] ({memory['date']}) [{memory['type']}]: {memory['excerpt']}")

    if answer.degraded:
        print(f"\n(degraded: {answer.error})", file=sys.stderr)


def cmd_providers(args):
    """List known providers and their models."""
    from memhub.services.llm_providers import PROVIDER_CATALOG, list_models

    for provider_id, info in PROVIDER_CATALOG.items():
        embedding = info.default_embedding_model or "none (falls back to gemini)"
        print(f"{provider_id}: {info.display_name}")
        print(f"  Default chat model: {info.default_chat_model}")
        print(f"  Default embedding model: {embedding}")
        for model in list_models(provider_id, kind=args.kind):
            print(f"    - {model['id']} ({model['type']})")
        print()


def _positive_int(value):
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return number


def main():
    parser = argparse.ArgumentParser(description='Memory brain CLI')
    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Backfill command
    backfill_parser = subparsers.add_parser('backfill', help='Embed events missing an embedding')
    backfill_parser.set_defaults(func=cmd_backfill)

    # Search command
    search_parser = subparsers.add_parser('search', help='Find events similar to a query')
    search_parser.add_argument('query', help='Search query')
    search_parser.add_argument('--project', '-p', help='Filter by project name')
    search_parser.add_argument('--limit', '-l', type=_positive_int, default=5, help='Number of results')
    search_parser.set_defaults(func=cmd_search)

    # Ask command
    ask_parser = subparsers.add_parser('ask', help='Ask a question about your memories')
    ask_parser.add_argument('question', help='Question to answer')
    ask_parser.add_argument('--project', '-p', help='Filter by project name')
    ask_parser.set_defaults(func=cmd_ask)

    # Providers command
    providers_parser = subparsers.add_parser('providers', help='List known AI providers')
    providers_parser.add_argument('--kind', '-k', choices=['chat', 'embedding'], help='Filter models by type')
    providers_parser.set_defaults(func=cmd_providers)

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    args.func(args)


if __name__ == '__main__':
    main()
