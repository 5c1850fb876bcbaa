"""Application constants and configuration values."""

from typing import Any, Final

# Field definition markers
PRIMARY_KEY_MARKER: Final[str] = "pk"
FOREIGN_KEY_PREFIX: Final[str] = "fk:"
ENUM_TYPE: Final[str] = "enum"
GENERATOR_PREFIX: Final[str] = "faker."

# Relation token suffixes stripped from foreign key field names
RELATION_SUFFIXES: Final[tuple[str, ...]] = ("Id", "_id")

# Query parameters with a reserved meaning on list endpoints
INCLUDE_PARAM: Final[str] = "include"
PAGE_PARAM: Final[str] = "page"
LIMIT_PARAM: Final[str] = "limit"
RESERVED_QUERY_PARAMS: Final[frozenset[str]] = frozenset(
    {INCLUDE_PARAM, PAGE_PARAM, LIMIT_PARAM}
)
ID_PARAM: Final[str] = "id"

# Pagination defaults
DEFAULT_PAGE: Final[int] = 1
DEFAULT_LIMIT: Final[int] = 10

# Route names a table may not shadow
RESERVED_TABLE_NAMES: Final[frozenset[str]] = frozenset(
    {"health", "docs", "redoc", "openapi.json", "_admin"}
)

CONFIG_FILE_NAME: Final[str] = "mocklite.config.json"
DEFAULT_DB_PATH: Final[str] = ".mocklite/db.sqlite"

DEFAULT_CONFIG: Final[dict[str, Any]] = {
    "port": 3000,
    "database": "sqlite",
    "schema": [
        {
            "table": "users",
            "seed": 5,
            "fields": {
                "id": "pk",
                "name": "faker.person.fullName",
                "email": "faker.internet.email",
                "role": {
                    "type": "enum",
                    "values": ["admin", "editor", "viewer"],
                },
                "isActive": {
                    "type": "faker.datatype.boolean",
                    "options": 0.8,
                },
            },
        },
        {
            "table": "posts",
            "seed": 10,
            "fields": {
                "id": "pk",
                "title": "faker.lorem.sentence",
                "content": "faker.lorem.paragraph",
                "authorId": "fk:users.id",
            },
        },
    ],
}
