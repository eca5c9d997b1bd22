"""Schema Order Registry: the static, dependency-ordered list of tables.

The table structure and FK relationships are declared here once and checked
into the source -- nothing is discovered from a live database.  For every
foreign key ``A.column -> B.id``, ``B`` precedes ``A``.  The order is used
forward for export and insert, and reversed for truncation so dependents are
cleared before the rows they reference.

Usage:
    from site_snapshot.registry import ordered_tables, DEFAULT_SCHEMA

    ordered_tables()                 # ["users", "translation_keys", ...]
    DEFAULT_SCHEMA.reversed_names()  # truncate order

    # Projects with a different schema declare their own order
    schema = SchemaOrder(tables=[
        TableDef(name="authors"),
        TableDef(name="books", references=[ForeignKey(table="authors", field="author_id")]),
    ])
"""

from pydantic import BaseModel, Field, model_validator

IDENTITY_TABLE = "users"


class ForeignKey(BaseModel):
    """Foreign key from a column of this table to a referenced table."""

    table: str          # referenced table name
    field: str          # FK column in this table
    column: str = "id"  # referenced column


class TableDef(BaseModel):
    """Definition of a table for export/import operations."""

    name: str
    pk: str | None = "id"       # None for pivot tables without a sequence
    references: list[ForeignKey] = Field(default_factory=list)


class SchemaOrder(BaseModel):
    """Declarative table order. Tables ordered by dependency (referenced first)."""

    tables: list[TableDef]

    @model_validator(mode="after")
    def _check_topological_order(self) -> "SchemaOrder":
        seen: set[str] = set()
        known = {t.name for t in self.tables}
        for table in self.tables:
            if table.name in seen:
                raise ValueError(f"Table '{table.name}' declared twice")
            for ref in table.references:
                if ref.table not in known:
                    raise ValueError(
                        f"{table.name}.{ref.field} references unknown table '{ref.table}'"
                    )
                if ref.table != table.name and ref.table not in seen:
                    raise ValueError(
                        f"{table.name}.{ref.field} references '{ref.table}', "
                        f"which must come before '{table.name}'"
                    )
            seen.add(table.name)
        return self

    def names(self) -> list[str]:
        """Table names in insert order."""
        return [t.name for t in self.tables]

    def reversed_names(self) -> list[str]:
        """Table names in truncate order."""
        return [t.name for t in reversed(self.tables)]

    def get(self, name: str) -> TableDef | None:
        """Find a TableDef by name."""
        for t in self.tables:
            if t.name == name:
                return t
        return None


def _refs(**fields: str) -> list[ForeignKey]:
    return [ForeignKey(table=table, field=field) for field, table in fields.items()]


def _pivot(name: str, **fields: str) -> TableDef:
    return TableDef(name=name, pk=None, references=_refs(**fields))


# Core reference tables come first, pivot and metadata tables last.
DEFAULT_SCHEMA = SchemaOrder(
    tables=[
        TableDef(name=IDENTITY_TABLE),
        TableDef(name="translation_keys"),
        TableDef(name="pictures"),
        TableDef(name="optimized_pictures", references=_refs(picture_id="pictures")),
        TableDef(name="custom_emojis", references=_refs(picture_id="pictures")),
        TableDef(name="people", references=_refs(picture_id="pictures")),
        TableDef(name="tags"),
        TableDef(name="videos", references=_refs(cover_picture_id="pictures")),
        TableDef(name="social_media_links"),
        TableDef(name="technologies", references=_refs(icon_picture_id="pictures")),
        TableDef(
            name="technology_experiences",
            references=_refs(
                technology_id="technologies",
                description_translation_key_id="translation_keys",
            ),
        ),
        TableDef(name="certifications", references=_refs(picture_id="pictures")),
        TableDef(
            name="experiences",
            references=_refs(
                logo_id="pictures",
                title_translation_key_id="translation_keys",
                short_description_translation_key_id="translation_keys",
                full_description_translation_key_id="translation_keys",
            ),
        ),
        # Blog reference tables
        TableDef(
            name="blog_categories",
            references=_refs(name_translation_key_id="translation_keys"),
        ),
        TableDef(
            name="content_markdowns",
            references=_refs(translation_key_id="translation_keys"),
        ),
        TableDef(name="content_galleries"),
        TableDef(
            name="content_videos",
            references=_refs(
                video_id="videos",
                caption_translation_key_id="translation_keys",
            ),
        ),
        # Content tables
        TableDef(
            name="translations",
            references=_refs(translation_key_id="translation_keys"),
        ),
        TableDef(
            name="creations",
            references=_refs(
                logo_id="pictures",
                cover_image_id="pictures",
                short_description_translation_key_id="translation_keys",
                full_description_translation_key_id="translation_keys",
            ),
        ),
        TableDef(
            name="features",
            references=_refs(
                creation_id="creations",
                picture_id="pictures",
                title_translation_key_id="translation_keys",
                description_translation_key_id="translation_keys",
            ),
        ),
        TableDef(
            name="screenshots",
            references=_refs(
                creation_id="creations",
                picture_id="pictures",
                caption_translation_key_id="translation_keys",
            ),
        ),
        TableDef(
            name="creation_drafts",
            references=_refs(
                original_creation_id="creations",
                logo_id="pictures",
                cover_image_id="pictures",
                short_description_translation_key_id="translation_keys",
                full_description_translation_key_id="translation_keys",
            ),
        ),
        TableDef(
            name="creation_draft_features",
            references=_refs(
                creation_draft_id="creation_drafts",
                picture_id="pictures",
                title_translation_key_id="translation_keys",
                description_translation_key_id="translation_keys",
            ),
        ),
        TableDef(
            name="creation_draft_screenshots",
            references=_refs(
                creation_draft_id="creation_drafts",
                picture_id="pictures",
                caption_translation_key_id="translation_keys",
            ),
        ),
        # Blog content tables
        TableDef(
            name="blog_posts",
            references=_refs(
                category_id="blog_categories",
                cover_picture_id="pictures",
                title_translation_key_id="translation_keys",
            ),
        ),
        TableDef(
            name="blog_post_drafts",
            references=_refs(
                original_blog_post_id="blog_posts",
                category_id="blog_categories",
                cover_picture_id="pictures",
                title_translation_key_id="translation_keys",
            ),
        ),
        TableDef(name="blog_post_contents", references=_refs(blog_post_id="blog_posts")),
        TableDef(
            name="blog_post_draft_contents",
            references=_refs(blog_post_draft_id="blog_post_drafts"),
        ),
        # Pivot tables
        _pivot("creation_technology", creation_id="creations", technology_id="technologies"),
        _pivot("creation_person", creation_id="creations", person_id="people"),
        _pivot("creation_tag", creation_id="creations", tag_id="tags"),
        _pivot("creation_video", creation_id="creations", video_id="videos"),
        _pivot(
            "creation_draft_technology",
            creation_draft_id="creation_drafts",
            technology_id="technologies",
        ),
        _pivot("creation_draft_person", creation_draft_id="creation_drafts", person_id="people"),
        _pivot("creation_draft_tag", creation_draft_id="creation_drafts", tag_id="tags"),
        _pivot("creation_draft_video", creation_draft_id="creation_drafts", video_id="videos"),
        _pivot(
            "content_gallery_pictures",
            gallery_id="content_galleries",
            picture_id="pictures",
        ),
        # Request metadata
        TableDef(name="user_agent_metadata"),
        TableDef(name="ip_address_metadata"),
    ]
)


def ordered_tables() -> list[str]:
    """Return the dependency-respecting table order (referenced tables first)."""
    return DEFAULT_SCHEMA.names()


def table_defs() -> list[TableDef]:
    """Return the full table definitions of the default registry."""
    return list(DEFAULT_SCHEMA.tables)


def get_table(name: str) -> TableDef | None:
    """Find a table of the default registry by name."""
    return DEFAULT_SCHEMA.get(name)
