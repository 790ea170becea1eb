from __future__ import annotations

from typing import Any, ClassVar, Optional

from app.core.config import Settings
from app.models.cache import CacheSnapshot
from app.models.finding import CheckRun


class RuleCheck:
    """Base class for a rule check run against a collected cache snapshot."""

    key: ClassVar[str] = ""
    title: ClassVar[str] = ""
    category: ClassVar[str] = ""
    domain: ClassVar[str] = ""
    description: ClassVar[str] = ""
    more_info: ClassVar[str] = ""
    link: ClassVar[str] = ""
    recommended_action: ClassVar[str] = ""
    apis: ClassVar[tuple[str, ...]] = ()

    def describe(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "title": self.title,
            "category": self.category,
            "domain": self.domain,
            "description": self.description,
            "more_info": self.more_info,
            "link": self.link,
            "recommended_action": self.recommended_action,
            "apis": list(self.apis),
        }

    def run(self, cache: CacheSnapshot, settings: Optional[Settings] = None) -> CheckRun:
        raise NotImplementedError
