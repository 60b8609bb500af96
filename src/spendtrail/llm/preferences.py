"""Per-user labelling preferences with fuzzy merchant matching."""
import json
import re
from dataclasses import asdict
from pathlib import Path
from typing import Dict, List, Optional
import Levenshtein

from .models import CATEGORIES, TYPES, Preference
from spendtrail.config import get_settings
from spendtrail.utils import get_logger, PreferenceError

logger = get_logger()

_SAFE_USER_ID = re.compile(r"^[A-Za-z0-9_.@-]+$")

MAX_CONFIDENCE = 100
SIMILAR_LIMIT = 5


class PreferenceBook:
    """Stores how each user wants merchants described and classified."""

    def __init__(self, store_dir: Optional[Path] = None):
        """
        Initialize preference book.

        Args:
            store_dir: Directory holding one JSON file per user
        """
        settings = get_settings()
        self.store_dir = Path(store_dir) if store_dir else settings.preferences_path
        self.initial_confidence = settings.preference_initial_confidence
        self.confidence_step = settings.preference_confidence_step
        self.fuzzy_threshold = settings.preference_fuzzy_threshold
        self.example_limit = settings.preference_example_limit
        self.store_dir.mkdir(parents=True, exist_ok=True)

    def save_preference(
        self,
        user_id: str,
        merchant: str,
        description: str,
        category: str,
        txn_type: str,
        tags: Optional[List[str]] = None
    ) -> Preference:
        """
        Create or update a preference.

        Repeated saves for the same merchant bump the usage count and raise
        confidence by one step, capped at 100.

        Raises:
            PreferenceError: On unknown labels, empty merchant or write failure
        """
        if category not in CATEGORIES:
            raise PreferenceError(f"Unknown category: {category}")
        if txn_type not in TYPES:
            raise PreferenceError(f"Unknown type: {txn_type}")

        key = self._normalize_merchant(merchant)
        if not key:
            raise PreferenceError("Merchant must not be empty")

        preferences = self._load(user_id)
        existing = preferences.get(key)

        if existing:
            existing.description = description
            existing.category = category
            existing.type = txn_type
            existing.tags = list(tags or [])
            existing.usage_count += 1
            existing.confidence = min(MAX_CONFIDENCE, existing.confidence + self.confidence_step)
            preference = existing
        else:
            preference = Preference(
                merchant=key,
                description=description,
                category=category,
                type=txn_type,
                tags=list(tags or []),
                usage_count=1,
                confidence=self.initial_confidence
            )
            preferences[key] = preference

        self._save(user_id, preferences)
        logger.debug(f"Saved preference: {key} -> {description} ({category}/{txn_type})")
        return preference

    def get_preferences(self, user_id: str, limit: int = 20) -> List[Preference]:
        """Most used preferences first."""
        preferences = sorted(
            self._load(user_id).values(),
            key=lambda p: (-p.usage_count, -p.confidence)
        )
        return preferences[:limit]

    def get_examples(self, user_id: str, limit: Optional[int] = None) -> List[Preference]:
        """Most trusted preferences, for seeding prompts."""
        preferences = sorted(
            self._load(user_id).values(),
            key=lambda p: (-p.confidence, -p.usage_count)
        )
        return preferences[:limit or self.example_limit]

    def find_similar(self, user_id: str, term: str) -> List[Preference]:
        """
        Find preferences whose merchant or description resembles term.

        Substring matches and merchants within the fuzzy threshold count.
        """
        needle = self._normalize_merchant(term)
        if not needle:
            return []

        matches = []
        for preference in self._load(user_id).values():
            if needle in preference.merchant or needle in preference.description.lower():
                matches.append(preference)
            elif Levenshtein.distance(needle, preference.merchant) <= self.fuzzy_threshold:
                matches.append(preference)

        matches.sort(key=lambda p: (-p.confidence, -p.usage_count))
        return matches[:SIMILAR_LIMIT]

    def delete_preference(self, user_id: str, merchant: str) -> bool:
        """Remove a preference; False if it did not exist."""
        preferences = self._load(user_id)
        if preferences.pop(self._normalize_merchant(merchant), None) is None:
            return False
        self._save(user_id, preferences)
        return True

    def _user_file(self, user_id: str) -> Path:
        if not user_id or not _SAFE_USER_ID.match(user_id):
            raise PreferenceError(f"Invalid user id: {user_id!r}")
        return self.store_dir / f"{user_id}.json"

    def _load(self, user_id: str) -> Dict[str, Preference]:
        """Load preferences from file."""
        user_file = self._user_file(user_id)

        if not user_file.exists():
            return {}

        try:
            with open(user_file, "r", encoding="utf-8") as f:
                raw = json.load(f)
            return {key: Preference(**value) for key, value in raw.items()}
        except (OSError, ValueError, TypeError) as e:
            logger.warning(f"Failed to load preferences for {user_id}: {e}")
            return {}

    def _save(self, user_id: str, preferences: Dict[str, Preference]) -> None:
        """Save preferences to file."""
        user_file = self._user_file(user_id)

        try:
            with open(user_file, "w", encoding="utf-8") as f:
                json.dump(
                    {key: asdict(value) for key, value in preferences.items()},
                    f,
                    ensure_ascii=False,
                    indent=2
                )
        except OSError as e:
            raise PreferenceError(f"Failed to save preferences for {user_id}: {e}")

    @staticmethod
    def _normalize_merchant(merchant: str) -> str:
        """Normalize merchant name for matching."""
        return " ".join(merchant.split()).lower()
