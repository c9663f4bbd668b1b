"""
VERIFY blog publisher - publishes the next pending topic as a static article.
Key Features: Claude-written Polish articles, structural validation, index and sitemap updates.
"""

import logging
import os
import sys
from collections import Counter
from typing import Dict, List, Optional

from dotenv import load_dotenv

from .clients.anthropic import AnthropicClient
from .config import Settings, load_settings, resolve_root, topics_path_for
from .errors import ConfigError, QueueError
from .generator import ArticleGenerator
from .models import TopicStatus
from .publisher import Publisher
from .storage import JsonTopicRepository, StaticSite, select_pending

# Set up logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


# --- INITIALIZATION ---
def initialize_system(settings: Settings) -> Dict:
    """Wire the client, generator, storage and publisher."""
    client = AnthropicClient(settings.api_key, model=settings.model)
    generator = ArticleGenerator(client)
    repository = JsonTopicRepository(settings.topics_path)
    site = StaticSite(settings.root)

    publisher = Publisher(
        repository=repository,
        generator=generator,
        site=site,
        site_url=settings.site_url,
        main_url=settings.main_url,
    )

    return {
        "client": client,
        "generator": generator,
        "repository": repository,
        "site": site,
        "publisher": publisher,
    }


# --- PROCESSES ---

def run_publish(components: Dict) -> int:
    """Publish the next pending topic. Returns the process exit code."""
    logger.info("🚀 Starting publishing run...")
    try:
        result = components["publisher"].run()
    except QueueError as e:
        logger.error(f"❌ {e}")
        return 1
    except Exception as e:
        logger.error(f"❌ Unexpected error during publishing run: {e}")
        return 1
    finally:
        components["client"].close()

    if result.error is not None:
        logger.error(f"❌ Publishing failed: {result.error}")
    return result.exit_code


def show_status(repository: JsonTopicRepository) -> int:
    """Log how many topics are in each state and which one runs next."""
    try:
        topics = repository.load()
    except QueueError as e:
        logger.error(f"❌ {e}")
        return 1

    counts = Counter(topic.status for topic in topics)
    for status in TopicStatus:
        logger.info(f"{status.value}: {counts.get(status, 0)}")

    upcoming = select_pending(topics)
    if upcoming:
        logger.info(f"Next: \"{upcoming.title_hint}\" (id: {upcoming.id}, slug: {upcoming.slug})")
    else:
        logger.info("Next: none")
    return 0


def show_help():
    """Display usage information."""
    help_text = """
VERIFY Blog Publisher - Usage Guide

Commands:
  python main.py                    Publish the next pending topic (default)
  python main.py run                Publish the next pending topic
  python main.py status             Show queue counts and the next topic
  python main.py help               Show this help message

Environment Variables (Required):
  ANTHROPIC_API_KEY       Anthropic API key

Environment Variables (Optional):
  ANTHROPIC_MODEL         Model id (default: claude-sonnet-4-5-20250929)
  BLOG_ROOT               Site directory with index.html, sitemap.xml, data/topics.json (default: cwd)
  SITE_URL                Blog URL (default: https://blog.verify24.pl)
  MAIN_URL                Main site URL (default: https://verify24.pl)

Exit codes:
  0  published, or nothing to publish
  1  missing configuration, unreadable queue, or the topic was marked failed
"""
    print(help_text)


def cli(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    command = argv[0].lower() if argv else "run"

    if command in ["help", "-h", "--help"]:
        show_help()
        return 0

    if command == "status":
        load_dotenv()
        return show_status(JsonTopicRepository(topics_path_for(resolve_root(os.environ))))

    if command != "run":
        logger.error(f"Unknown command: {command}")
        show_help()
        return 2

    try:
        settings = load_settings()
    except ConfigError as e:
        logger.error(f"ERROR: {e}")
        return 1

    return run_publish(initialize_system(settings))


if __name__ == "__main__":
    sys.exit(cli())
