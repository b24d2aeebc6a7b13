"""Article repository backed by Postgres."""

import logging
from typing import Any, Dict, Iterable, List, Optional, Set

from psycopg import errors
from psycopg.types.json import Jsonb

from ..exceptions import DuplicateArticleError
from ..models import Article
from .connection import get_connection

logger = logging.getLogger(__name__)

ARTICLE_COLUMNS = """
    id, url, title, content, content_key, source, published_at,
    geopolitical_tags, metadata, created_at, updated_at
"""


def _to_article(row: Dict[str, Any]) -> Article:
    return Article.model_validate(row)


class ArticleRepository:
    """Handle article persistence, deduplication and read queries."""

    def __init__(self, db_config: Dict[str, Any]) -> None:
        """Initialize repository with a resolved database config."""
        self.db_config = db_config

    def _fetch_articles(self, query: str, params: tuple = ()) -> List[Article]:
        with get_connection(self.db_config) as conn:
            with conn.cursor() as cur:
                cur.execute(query, params)
                return [_to_article(row) for row in cur.fetchall()]

    # Crawl path

    def find_existing_urls(self, urls: Iterable[str]) -> Set[str]:
        """Return the subset of urls already stored, in one round-trip."""
        url_list = list(dict.fromkeys(urls))
        if not url_list:
            return set()

        with get_connection(self.db_config) as conn:
            with conn.cursor() as cur:
                cur.execute(
                    "SELECT url FROM articles WHERE url = ANY(%s)",
                    (url_list,),
                )
                return {row["url"] for row in cur.fetchall()}

    def insert(self, article: Article) -> Article:
        """
        Insert a new article.

        Raises:
            DuplicateArticleError: an article with the same URL exists. The
                existing row is left untouched.
        """
        try:
            with get_connection(self.db_config) as conn:
                with conn.cursor() as cur:
                    cur.execute(
                        f"""
                        INSERT INTO articles (
                            url, title, content, content_key, source,
                            published_at, geopolitical_tags, metadata
                        ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
                        RETURNING {ARTICLE_COLUMNS}
                        """,
                        (
                            article.url,
                            article.title,
                            article.content,
                            article.content_key,
                            article.source,
                            article.published_at,
                            Jsonb(article.geopolitical_tags.model_dump()),
                            Jsonb(article.metadata),
                        ),
                    )
                    return _to_article(cur.fetchone())
        except errors.UniqueViolation as e:
            raise DuplicateArticleError(article.url) from e

    # Read path

    def list_all(self, limit: Optional[int] = None) -> List[Article]:
        """All articles, newest first."""
        query = f"SELECT {ARTICLE_COLUMNS} FROM articles ORDER BY published_at DESC, id DESC"
        if limit is not None:
            return self._fetch_articles(query + " LIMIT %s", (limit,))
        return self._fetch_articles(query)

    def get_by_id(self, article_id: int) -> Optional[Article]:
        """Get one article by primary key."""
        with get_connection(self.db_config) as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"SELECT {ARTICLE_COLUMNS} FROM articles WHERE id = %s",
                    (article_id,),
                )
                row = cur.fetchone()
                return _to_article(row) if row else None

    def list_by_source(self, source: str) -> List[Article]:
        """Articles from one source, newest first."""
        return self._fetch_articles(
            f"""
            SELECT {ARTICLE_COLUMNS} FROM articles
            WHERE source = %s
            ORDER BY published_at DESC, id DESC
            """,
            (source,),
        )

    def search(self, query: str) -> List[Article]:
        """Full-text search over titles; a blank query returns everything."""
        if not query or not query.strip():
            return self.list_all()

        return self._fetch_articles(
            f"""
            SELECT {ARTICLE_COLUMNS} FROM articles
            WHERE to_tsvector('simple', title) @@ plainto_tsquery('simple', %s)
            ORDER BY ts_rank(to_tsvector('simple', title), plainto_tsquery('simple', %s)) DESC,
                     published_at DESC
            """,
            (query, query),
        )

    def list_by_country(self, country: str) -> List[Article]:
        """Articles tagged with exactly this country name."""
        return self._fetch_articles(
            f"""
            SELECT {ARTICLE_COLUMNS} FROM articles
            WHERE geopolitical_tags -> 'countries' @> %s
            ORDER BY published_at DESC, id DESC
            """,
            (Jsonb([country]),),
        )

    def list_geopolitical(self) -> List[Article]:
        """Articles with at least one non-empty tag category."""
        return self._fetch_articles(
            f"""
            SELECT {ARTICLE_COLUMNS} FROM articles
            WHERE jsonb_array_length(COALESCE(geopolitical_tags -> 'countries', '[]'::jsonb)) > 0
               OR jsonb_array_length(COALESCE(geopolitical_tags -> 'regions', '[]'::jsonb)) > 0
               OR jsonb_array_length(COALESCE(geopolitical_tags -> 'organizations', '[]'::jsonb)) > 0
               OR jsonb_array_length(COALESCE(geopolitical_tags -> 'events', '[]'::jsonb)) > 0
            ORDER BY published_at DESC, id DESC
            """
        )

    def statistics(self, top_countries: int = 10) -> Dict[str, Any]:
        """Total count, per-source counts and the most-tagged countries."""
        with get_connection(self.db_config) as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT COUNT(*) AS total FROM articles")
                total = cur.fetchone()["total"]

                cur.execute(
                    """
                    SELECT source, COUNT(*) AS count
                    FROM articles
                    GROUP BY source
                    ORDER BY count DESC, source
                    """
                )
                by_source = [dict(row) for row in cur.fetchall()]

                cur.execute(
                    """
                    SELECT country, COUNT(*) AS count
                    FROM articles,
                         jsonb_array_elements_text(
                             COALESCE(geopolitical_tags -> 'countries', '[]'::jsonb)
                         ) AS country
                    GROUP BY country
                    ORDER BY count DESC, country
                    LIMIT %s
                    """,
                    (top_countries,),
                )
                countries = [dict(row) for row in cur.fetchall()]

        return {
            "total_articles": total,
            "by_source": by_source,
            "top_countries": countries,
        }

    # Migration path

    def list_legacy(self, limit: int = 100) -> List[Article]:
        """Rows that still carry their body inline and have no content key."""
        return self._fetch_articles(
            f"""
            SELECT {ARTICLE_COLUMNS} FROM articles
            WHERE content_key IS NULL AND content <> ''
            ORDER BY id
            LIMIT %s
            """,
            (limit,),
        )

    def attach_content_key(self, article_id: int, content_key: str, excerpt: str) -> bool:
        """
        Record an offloaded body on a legacy row.

        Only rows without a content key are touched, so a concurrent migration
        cannot overwrite an existing key.

        Returns:
            True if the row was updated
        """
        with get_connection(self.db_config) as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    UPDATE articles
                    SET content_key = %s, content = %s
                    WHERE id = %s AND content_key IS NULL
                    """,
                    (content_key, excerpt, article_id),
                )
                return cur.rowcount == 1

    def referenced_content_keys(self) -> Set[str]:
        """Every content key referenced by a metadata row."""
        with get_connection(self.db_config) as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT content_key FROM articles WHERE content_key IS NOT NULL")
                return {row["content_key"] for row in cur.fetchall()}
