"""Static registry of trusted source links.

Each descriptor holds a pure function from the encoded query to a URL. The
registry and the validator encode the same allow-list independently; every
URL built here must also pass ``filter_valid_links``.
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable, Iterable, List, Literal, Optional, Tuple
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from ..observability.metrics import record_source_dropped
from .validator import filter_valid_links

logger = logging.getLogger(__name__)

SourceTier = Literal["official", "reference"]
SourceKind = Literal["direct", "search"]
SourceLang = Literal["ko", "en"]

# Every citation id the service recognises. "nice" has no registry entry.
CITE_ALIASES: Tuple[str, ...] = (
    "kdca",
    "who",
    "cdc",
    "pubmed",
    "medlineplus",
    "mfds",
    "e-gen",
    "nice",
)


class SourceItem(BaseModel):
    """One candidate reference link, constructed per request."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    id: str
    cite_alias: str
    name: str
    tier: SourceTier
    kind: SourceKind
    lang: SourceLang
    visible_by_default: bool
    url: str


@dataclass(frozen=True)
class SourceDescriptor:
    id: str
    cite_alias: str
    name: str
    tier: SourceTier
    kind: SourceKind
    lang: SourceLang
    visible_by_default: bool
    build_url: Callable[[str], str]

    def to_item(self, encoded_query: str) -> SourceItem:
        return SourceItem(
            id=self.id,
            cite_alias=self.cite_alias,
            name=self.name,
            tier=self.tier,
            kind=self.kind,
            lang=self.lang,
            visible_by_default=self.visible_by_default,
            url=self.build_url(encoded_query),
        )


def _site_search(domain: str) -> Callable[[str], str]:
    return lambda q: f"https://www.google.com/search?q=site%3A{domain}+{q}"


# Declaration order is the tie-breaker inside each (lang, kind) group.
REGISTRY: Tuple[SourceDescriptor, ...] = (
    SourceDescriptor(
        id="kdca_direct",
        cite_alias="kdca",
        name="질병관리청 건강정보포털",
        tier="official",
        kind="direct",
        lang="ko",
        visible_by_default=True,
        build_url=lambda q: (
            "https://health.kdca.go.kr/healthinfo/biz/health/gnrlzHealthInfo/"
            "gnrlzHealthInfo/gnrlzHealthInfoMain.do"
        ),
    ),
    SourceDescriptor(
        id="kdca_search",
        cite_alias="kdca",
        name="질병관리청 (검색)",
        tier="official",
        kind="search",
        lang="ko",
        visible_by_default=True,
        build_url=_site_search("kdca.go.kr"),
    ),
    SourceDescriptor(
        id="mfds_search",
        cite_alias="mfds",
        name="식품의약품안전처 (검색)",
        tier="official",
        kind="search",
        lang="ko",
        visible_by_default=True,
        build_url=_site_search("mfds.go.kr"),
    ),
    SourceDescriptor(
        id="egen_search",
        cite_alias="e-gen",
        name="응급의료포털 (검색)",
        tier="official",
        kind="search",
        lang="ko",
        visible_by_default=True,
        build_url=_site_search("e-gen.or.kr"),
    ),
    SourceDescriptor(
        id="pubmed_direct",
        cite_alias="pubmed",
        name="PubMed",
        tier="reference",
        kind="direct",
        lang="en",
        visible_by_default=False,
        build_url=lambda q: f"https://pubmed.ncbi.nlm.nih.gov/?term={q}",
    ),
    SourceDescriptor(
        id="who_search",
        cite_alias="who",
        name="WHO (검색)",
        tier="official",
        kind="search",
        lang="en",
        visible_by_default=False,
        build_url=_site_search("who.int"),
    ),
    SourceDescriptor(
        id="cdc_search",
        cite_alias="cdc",
        name="CDC (검색)",
        tier="reference",
        kind="search",
        lang="en",
        visible_by_default=False,
        build_url=_site_search("cdc.gov"),
    ),
    SourceDescriptor(
        id="medlineplus_search",
        cite_alias="medlineplus",
        name="MedlinePlus (검색)",
        tier="reference",
        kind="search",
        lang="en",
        visible_by_default=False,
        build_url=lambda q: (
            "https://vsearch.nlm.nih.gov/vivisimo/cgi-bin/query-meta"
            f"?query={q}&v%3Aproject=medlineplus&v%3Asources=medlineplus-bundle"
        ),
    ),
)

_WHITESPACE_RE = re.compile(r"\s+")
_LANG_RANK = {"ko": 0, "en": 1}
_KIND_RANK = {"direct": 0, "search": 1}


def normalize_query(query: str) -> str:
    """Trim and collapse internal whitespace to single spaces."""
    return _WHITESPACE_RE.sub(" ", query.strip())


def encode_query(query: str) -> str:
    """Normalize then percent-encode exactly once."""
    return quote(normalize_query(query), safe="")


def _sort_key(item: SourceItem) -> Tuple[int, int]:
    return _LANG_RANK[item.lang], _KIND_RANK[item.kind]


def build_sources(
    query: str, cite_aliases: Optional[Iterable[str]] = None
) -> List[SourceItem]:
    """Build the ordered candidate source list for a query.

    Without aliases, only default-visible entries are returned. With aliases,
    alias matches are unioned with the default-visible entries so a cited but
    otherwise hidden source still surfaces. Output order is ko/direct,
    ko/search, en/direct, en/search, stable within each group.
    """
    encoded = encode_query(query)
    aliases = set(cite_aliases or ()) & set(CITE_ALIASES)

    items: List[SourceItem] = []
    seen = set()
    for descriptor in REGISTRY:
        if not (descriptor.visible_by_default or descriptor.cite_alias in aliases):
            continue
        if descriptor.id in seen:
            continue
        seen.add(descriptor.id)
        items.append(descriptor.to_item(encoded))

    items.sort(key=_sort_key)
    return items


def safe_sources(
    query: str, cite_aliases: Optional[Iterable[str]] = None
) -> List[SourceItem]:
    """Build sources and keep only those whose URL passes the validator."""
    items = build_sources(query, cite_aliases)
    valid_urls = set(filter_valid_links([item.url for item in items]))

    kept = []
    for item in items:
        if item.url in valid_urls:
            kept.append(item)
        else:
            # Registry and validator disagree: a construction defect
            logger.warning("Dropped registry source %s that failed link validation", item.id)
            record_source_dropped()
    return kept
