#!/usr/bin/env python
"""
Command-line driver for minisearch.
Uses Fire for CLI and Hydra for configuration management.
"""

import os
import logging
from pathlib import Path

import fire
import hydra
from omegaconf import OmegaConf
from dotenv import load_dotenv

from .engine import SearchEngine
from .serialization import load_snapshot, save_snapshot

# Load .env variables and register resolver
load_dotenv()
if not OmegaConf.has_resolver("env"):
    OmegaConf.register_new_resolver("env", os.getenv)

DEMO_DOCUMENTS = [
    ("Introduction to PHP",
     "PHP is a popular programming language for web development. It's easy to learn and widely used."),
    ("Python Programming Basics",
     "Python is another programming language known for its simplicity and readability. Great for beginners."),
    ("JavaScript Fundamentals",
     "JavaScript is essential for web development, running both in browsers and on servers with Node.js."),
    ("Web Development Overview",
     "Web development involves creating websites and web applications using various technologies like HTML, CSS, and JavaScript."),
    ("Database Management Systems",
     "Database management is crucial for storing and retrieving data in web applications. MySQL and PostgreSQL are popular choices."),
]

DEMO_QUERIES = ["programming", "web development", "JavaScript Node", "database"]


class SearchCLI:
    """CLI for the minisearch engine."""

    def __init__(self, config_path: str = "conf", config_name: str = "config"):
        """
        Initialize CLI with configuration.

        Args:
            config_path: Path to config directory, relative to this module
            config_name: Name of main config file
        """
        self.config_path = config_path
        self.config_name = config_name
        self.config = None
        self.logger = None

    def _init_config(self, overrides=None):
        """Initialize Hydra configuration."""
        with hydra.initialize(version_base=None, config_path=self.config_path):
            self.config = hydra.compose(config_name=self.config_name, overrides=overrides or [])

        # Setup logging
        logging.basicConfig(
            level=getattr(logging, self.config.logging.level),
            format=self.config.logging.format
        )
        self.logger = logging.getLogger(__name__)

    def _load_engine(self, snapshot=None):
        """Create an engine, restoring the snapshot file when it exists."""
        engine = SearchEngine(self.config)
        snapshot_path = Path(snapshot or self.config.storage.snapshot_path)

        if snapshot_path.exists():
            result = engine.import_index(load_snapshot(snapshot_path))
            if not result:
                raise ValueError(f"Cannot load snapshot {snapshot_path}: {result.reason}")
            self.logger.info(f"Loaded snapshot from {snapshot_path}")

        return engine, snapshot_path

    def demo(self, *overrides):
        """Index the sample documents and run the demonstration queries."""
        self._init_config(list(overrides))
        engine = SearchEngine(self.config)

        self.logger.info("Adding documents to index...")
        for title, content in DEMO_DOCUMENTS:
            doc_id = engine.add_document(content, title)
            self.logger.info(f"Added: {title} (ID: {doc_id})")

        stats = engine.stats()
        self.logger.info(f"Total Documents: {stats['total_documents']}")
        self.logger.info(f"Total Terms: {stats['total_terms']}")
        self.logger.info(f"Average Document Length: {stats['average_document_length']:.2f} words")

        report = {}
        for query in DEMO_QUERIES:
            results = engine.search(query)
            if not results:
                self.logger.info(f"Query '{query}': no results found")
            for result in results:
                self.logger.info(f"Query '{query}': {result.title} (Score: {result.score})")
            report[query] = [r.to_dict() for r in results]

        return report

    def add(self, content: str, title: str = '', snapshot: str = None):
        """
        Add a document to the snapshot file.

        Args:
            content: Document text
            title: Optional document title
            snapshot: Snapshot path (default: storage.snapshot_path)
        """
        self._init_config()

        if not content:
            self.logger.error("Content cannot be empty")
            return {'success': False, 'error': 'Content cannot be empty'}

        engine, snapshot_path = self._load_engine(snapshot)
        doc_id = engine.add_document(content, title)
        save_snapshot(engine.export_index(), snapshot_path)

        return {'success': True, 'document_id': doc_id}

    def search(self, query: str, snapshot: str = None, limit: int = None):
        """
        Search the snapshot file.

        Args:
            query: Query string
            snapshot: Snapshot path (default: storage.snapshot_path)
            limit: Maximum number of results
        """
        self._init_config()

        engine, snapshot_path = self._load_engine(snapshot)
        if not snapshot_path.exists():
            return {'success': False, 'error': 'No documents indexed'}

        results = engine.search(query, limit=limit)
        return {'success': True, 'results': [r.to_dict() for r in results]}

    def stats(self, snapshot: str = None):
        """Show statistics for the snapshot file."""
        self._init_config()

        engine, _ = self._load_engine(snapshot)
        return engine.stats()


def main():
    fire.Fire(SearchCLI)


if __name__ == "__main__":
    main()
