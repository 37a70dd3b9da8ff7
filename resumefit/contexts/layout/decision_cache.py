"""
Content-addressed cache for layout decisions.

A stored decision is keyed by a hash of its block set, its template
constraints and the engine version, so any edit to those yields a different
key and the stale entry is simply never read again.
"""

import hashlib
import json
import os
from pathlib import Path
from typing import Optional, Sequence, Tuple

from dotenv import load_dotenv

from resumefit.contexts.blocks.block_data_structure import ContentBlock
from resumefit.contexts.layout.constraints import TemplateConstraints
from resumefit.contexts.layout.decision import LayoutDecision
from resumefit.contexts.layout.engine import ENGINE_VERSION, decide_layout
from resumefit.contexts.layout.logger import _log_debug, _log_warning

load_dotenv()
LAYOUT_CACHE_PATH = Path(os.getenv("LAYOUT_CACHE_PATH", "outs/cache/layout"))


def compute_cache_key(blocks: Sequence[ContentBlock], constraints: TemplateConstraints) -> str:
    """SHA-256 over the canonical JSON of the block set, constraints and engine version."""
    payload = {
        "engine": ENGINE_VERSION,
        "blocks": [block.to_dict() for block in blocks],
        "template": constraints.to_dict(),
    }
    canonical = json.dumps(payload, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


class DecisionCache:
    """
    Directory of JSON-serialized LayoutDecisions, one file per cache key.
    """

    def __init__(self, cache_dir: Optional[Path] = None):
        """
        Args:
            cache_dir: Cache directory. Defaults to LAYOUT_CACHE_PATH from environment.
        """
        self.cache_dir = Path(cache_dir) if cache_dir is not None else LAYOUT_CACHE_PATH

    def path_for(self, key: str) -> Path:
        return self.cache_dir / f"{key}.json"

    def get(self, key: str) -> Optional[LayoutDecision]:
        """Stored decision for `key`, or None on a miss or an unreadable entry."""
        path = self.path_for(key)
        if not path.exists():
            return None

        try:
            with open(path, "r", encoding="utf-8") as f:
                return LayoutDecision.from_dict(json.load(f))
        except (json.JSONDecodeError, KeyError, TypeError, AttributeError) as e:
            _log_warning(f"Ignoring unreadable cache entry {path.name}: {e}")
            return None

    def put(self, key: str, decision: LayoutDecision) -> Path:
        """Store a decision, replacing any existing entry for `key`."""
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        path = self.path_for(key)
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_text(decision.to_json(), encoding="utf-8")
        tmp_path.replace(path)
        return path

    def get_or_decide(
        self, blocks: Sequence[ContentBlock], constraints: TemplateConstraints
    ) -> Tuple[LayoutDecision, bool]:
        """
        Return the cached decision for (blocks, constraints), deciding and
        storing it on a miss.

        Returns:
            (decision, cache_hit)
        """
        key = compute_cache_key(blocks, constraints)
        cached = self.get(key)
        if cached is not None:
            _log_debug(f"Cache hit {key[:12]}")
            return cached, True

        decision = decide_layout(blocks, constraints)
        self.put(key, decision)
        _log_debug(f"Cache miss {key[:12]}, stored")
        return decision, False

    def clear(self) -> int:
        """Delete all cache entries. Returns the number removed."""
        if not self.cache_dir.exists():
            return 0
        removed = 0
        for path in self.cache_dir.glob("*.json"):
            path.unlink()
            removed += 1
        return removed
