"""
Index writer: projects Challenge records into Redis.

Updates are always remove-then-insert. The memberships of a record are
computed once by `build_entry`, and both insert and remove apply that
same entry, so removal is the exact inverse of insertion for the values
the record had when it was written.

Writes go through non-transactional pipelines. An interrupted write can
leave the index partially updated; BulkReconciler repairs that.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

import redis

from config.constants import PUBLIC_COMMUNITY
from core.logging import get_logger
from core.utils import as_text, normalize_string_list
from challenge_search.keys import KeyBuilder
from challenge_search.models import Challenge
from challenge_search.phonetics import PhoneticNormalizer

logger = get_logger(__name__)


@dataclass
class IndexEntry:
    """Every index artifact one record occupies."""
    record_id: str
    facet_sets: List[str] = field(default_factory=list)
    # registry key -> names to register
    registries: Dict[str, List[str]] = field(default_factory=dict)
    # sorted set key -> score
    scores: Dict[str, float] = field(default_factory=dict)
    # sort value key -> value
    sort_values: Dict[str, Union[str, int, float]] = field(default_factory=dict)


class IndexWriter:
    """Inserts, updates and removes challenges in the search index."""

    def __init__(
        self,
        client: redis.Redis,
        keys: KeyBuilder,
        normalizer: Optional[PhoneticNormalizer] = None,
    ):
        self._redis = client
        self.keys = keys
        self.normalizer = normalizer or PhoneticNormalizer()

    # =========================================================================
    # Entry construction
    # =========================================================================

    def keywords(self, challenge: Challenge) -> List[str]:
        """Words indexed phonetically: title, platforms, technologies, community."""
        return self.normalizer.words(
            challenge.name,
            *challenge.platforms,
            *challenge.technologies,
            challenge.community_name,
        )

    def build_entry(self, challenge: Challenge) -> IndexEntry:
        k = self.keys
        cid = challenge.challenge_id
        entry = IndexEntry(record_id=cid)

        entry.facet_sets.append(k.all_ids)

        for code in self.normalizer.codes(*self.keywords(challenge)):
            entry.facet_sets.append(k.facet("keyword", code))

        category = challenge.challenge_type.strip().lower()
        entry.facet_sets.append(k.facet("category", category))
        entry.registries[k.registry("category")] = [category]

        for facet, names in (
            ("platform", challenge.platforms),
            ("technology", challenge.technologies),
        ):
            normalized = normalize_string_list(names)
            entry.facet_sets.extend(k.facet(facet, name) for name in normalized)
            if normalized:
                entry.registries[k.registry(facet)] = normalized

        entry.facet_sets.append(k.state(challenge.is_open))

        community = (challenge.community_name or PUBLIC_COMMUNITY).strip().lower()
        entry.facet_sets.append(k.facet("community", community))
        entry.registries[k.registry("community")] = [community]

        prize = challenge.total_prize_money
        participants = challenge.participant_count
        entry.scores[k.scores("prize_money")] = prize
        entry.facet_sets.append(k.facet("prize_money", prize))
        entry.scores[k.scores("participants")] = participants
        entry.facet_sets.append(k.facet("participants", participants))

        entry.sort_values[k.sort_value("title", cid)] = challenge.name
        entry.sort_values[k.sort_value("end_date", cid)] = challenge.end_date_sort_value
        entry.sort_values[k.sort_value("prize_money", cid)] = prize
        entry.sort_values[k.sort_value("participants", cid)] = participants
        entry.sort_values[k.sort_value("category", cid)] = category

        return entry

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def upsert(self, challenge: Challenge) -> None:
        """Index `challenge`, first removing whatever was indexed under its id."""
        if self._redis.hexists(self.keys.raw_data, challenge.challenge_id):
            logger.info("Updating challenge, removing first", challenge_id=challenge.challenge_id)
            self.remove(challenge.challenge_id)
        self.insert(challenge)

    def insert(self, challenge: Challenge) -> None:
        logger.info("Inserting challenge", challenge_id=challenge.challenge_id)
        entry = self.build_entry(challenge)

        pipe = self._redis.pipeline(transaction=False)
        pipe.hset(self.keys.raw_data, challenge.challenge_id, challenge.to_json())
        for set_key in entry.facet_sets:
            pipe.sadd(set_key, entry.record_id)
        for registry_key, names in entry.registries.items():
            pipe.sadd(registry_key, *names)
        for zset_key, score in entry.scores.items():
            pipe.zadd(zset_key, {entry.record_id: score})
        for value_key, value in entry.sort_values.items():
            pipe.set(value_key, value)
        pipe.execute()

    def remove(self, record_id: str) -> bool:
        """
        Remove every artifact of `record_id`, based on its stored payload.

        Returns False when the id has no raw data (nothing is known about
        it, so nothing can be removed).
        """
        challenge = self.find(record_id)
        if challenge is None:
            logger.debug("Nothing to remove", challenge_id=record_id)
            return False
        self.remove_entry(self.build_entry(challenge))
        return True

    def remove_entry(self, entry: IndexEntry) -> None:
        logger.info("Removing challenge", challenge_id=entry.record_id)
        pipe = self._redis.pipeline(transaction=False)
        for set_key in entry.facet_sets:
            pipe.srem(set_key, entry.record_id)
        for zset_key in entry.scores:
            pipe.zrem(zset_key, entry.record_id)
        if entry.sort_values:
            pipe.delete(*entry.sort_values)
        # raw data last: an interrupted removal stays visible to the reconciler
        pipe.hdel(self.keys.raw_data, entry.record_id)
        pipe.execute()

    # =========================================================================
    # Reads
    # =========================================================================

    def find(self, record_id: str) -> Optional[Challenge]:
        data = self._redis.hget(self.keys.raw_data, record_id)
        if not data:
            return None
        return Challenge.from_json(data)

    def indexed_ids(self) -> List[str]:
        return [as_text(record_id) for record_id in self._redis.hkeys(self.keys.raw_data)]

    def facet_values(self, facet: str) -> List[str]:
        """Known names for a registry-backed facet, sorted."""
        return sorted(as_text(name) for name in self._redis.smembers(self.keys.registry(facet)))
