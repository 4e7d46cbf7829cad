"""Fuzzy name matching using RapidFuzz.

Maps raw coach/student names from titles and folders onto roster entries.
Handles aliases, concatenated names ("JennyDuan"), and name order
independence (Jenny Duan = Duan, Jenny).
"""

from rapidfuzz import fuzz, process, utils

from recording_identity.identity.schemas import PersonEntry, PersonRole

CONCATENATED_SCORE = 0.95


class FuzzyMatcher:
    """Fuzzy name matching using RapidFuzz.

    Uses token_sort_ratio for name order independence. Searches
    canonical names, first names, and aliases.
    """

    def __init__(self, threshold: float = 0.8):
        """Initialize matcher with confidence threshold.

        Args:
            threshold: Minimum score (0-1) for a match to be returned.
                      Scores below this return None.
        """
        self._threshold = threshold

    @staticmethod
    def _choices(
        roster: list[PersonEntry], role: PersonRole | None
    ) -> dict[str, PersonEntry]:
        # Map each searchable name -> entry; first entry wins on collisions
        choices: dict[str, PersonEntry] = {}
        for entry in roster:
            if role is not None and entry.role is not role:
                continue
            for variant in (entry.name, entry.first_name, *entry.aliases):
                choices.setdefault(variant, entry)
        return choices

    def find_best_match(
        self,
        query: str,
        roster: list[PersonEntry],
        role: PersonRole | None = None,
    ) -> tuple[PersonEntry | None, float]:
        """Find best matching roster entry for a name.

        Order: exact (case-insensitive) name/alias, concatenated name,
        then token_sort_ratio.

        Args:
            query: Name to search for (from title or folder)
            roster: Roster entries to match against
            role: Restrict the search to coaches or students

        Returns:
            Tuple of (matched_entry, score) or (None, 0.0) if no match
            above threshold.
        """
        if not query or not query.strip():
            return None, 0.0

        choices = self._choices(roster, role)
        if not choices:
            return None, 0.0

        normalized = query.strip().casefold()
        for variant, entry in choices.items():
            if variant.strip().casefold() == normalized:
                return entry, 1.0

        squashed = normalized.replace(" ", "")
        for entry in choices.values():
            if " " in entry.name and entry.name.replace(" ", "").casefold() == squashed:
                return entry, CONCATENATED_SCORE

        result = process.extractOne(
            query,
            list(choices.keys()),
            scorer=fuzz.token_sort_ratio,
            processor=utils.default_process,
            score_cutoff=self._threshold * 100,  # fuzz uses 0-100 scale
        )

        if result:
            matched_name, score, _index = result
            return choices[matched_name], score / 100  # Normalize to 0-1

        return None, 0.0
