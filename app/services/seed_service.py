"""
Startup seeding of default categories, subjects and questions
"""
import json
import logging
import os
from typing import Optional

import aiofiles

from app.services.question_service import question_service
from app.storage import Storage

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = [
    {"name": "JavaScript", "color": "#f7df1e"},
    {"name": "React", "color": "#61dafb"},
    {"name": "Python", "color": "#3776ab"},
    {"name": "Data Structures", "color": "#4caf50"},
    {"name": "Algorithms", "color": "#ff5722"},
]

DEFAULT_SUBJECTS = [
    {"name": "JavaScript", "description": "JavaScript programming language questions"},
    {"name": "React", "description": "React framework and library questions"},
    {"name": "Data Structures", "description": "Common data structures and algorithms"},
]


class SeedService:
    """Fills an empty store with starter content"""

    def seed_defaults(self, storage: Storage) -> None:
        if not storage.list_categories():
            for category in DEFAULT_CATEGORIES:
                storage.create_category(**category)
            logger.info(f"Created {len(DEFAULT_CATEGORIES)} default categories")

        if not storage.list_subjects():
            for subject in DEFAULT_SUBJECTS:
                storage.create_subject(**subject)
            logger.info(f"Created {len(DEFAULT_SUBJECTS)} default subjects")

    async def seed_questions(self, storage: Storage, path: Optional[str]) -> int:
        """
        Import questions from a JSON array file when the bank is empty

        Returns:
            Number of questions imported
        """
        if not path or storage.list_questions():
            return 0
        if not os.path.exists(path):
            logger.warning(f"Seed file not found: {path}")
            return 0

        async with aiofiles.open(path, "r", encoding="utf-8") as f:
            content = await f.read()

        items = json.loads(content)
        if not isinstance(items, list) or not items:
            logger.warning(f"Seed file {path} holds no question list")
            return 0

        imported, skipped = question_service.import_questions(storage, items)
        logger.info(f"Seeded {len(imported)} questions from {path} ({skipped} skipped)")
        return len(imported)


# Global instance
seed_service = SeedService()
