"""Registry of generator paths backed by Faker.

Schema fields name generators with Faker.js-style dotted paths
(``faker.person.fullName``). Each path is registered here against a function
taking a ``Faker`` instance and the field's option bag, so unknown paths can
be rejected when the schema is compiled instead of while rows are generated.
"""

import re
from collections.abc import Callable
from functools import lru_cache
from typing import Any, TypeAlias

from faker import Faker

from core.constants import GENERATOR_PREFIX
from core.exceptions import ConfigError
from core.log import get_logger
from core.types import StorageType

logger = get_logger(__name__)

GeneratorFunc: TypeAlias = Callable[[Faker, Any], Any]

# Global generator registry
_generators: dict[str, GeneratorFunc] = {}

INTEGER_TOKENS = frozenset({"number", "int", "integer"})
BOOLEAN_TOKENS = frozenset({"boolean", "bool"})

_CAMEL_CASE_PATTERN = re.compile(r"[A-Z]?[a-z]+|[A-Z]+(?![a-z])|\d+")


def register_generator(*paths: str) -> Callable[[GeneratorFunc], GeneratorFunc]:
    """Register a generator function under one or more dotted paths."""

    def decorator(func: GeneratorFunc) -> GeneratorFunc:
        for path in paths:
            if not path.startswith(GENERATOR_PREFIX):
                raise ValueError(f"Generator path must start with {GENERATOR_PREFIX}")
            _generators[path] = func
        return func

    return decorator


def is_generator_path(value: str) -> bool:
    """Check whether a definition string names a generator (registered or not)."""
    return value.startswith(GENERATOR_PREFIX)


def is_registered(path: str) -> bool:
    return path in _generators


def registered_paths() -> list[str]:
    return sorted(_generators)


def get_generator(path: str) -> GeneratorFunc:
    """Get the generator function for a path.

    Raises:
        ConfigError: If the path is not registered
    """
    if path not in _generators:
        raise ConfigError(f"Unknown generator path: {path}")
    return _generators[path]


def path_tokens(path: str) -> list[str]:
    """Split a dotted, camelCase generator path into lower-cased words."""
    tokens: list[str] = []
    for segment in path.split("."):
        tokens.extend(word.lower() for word in _CAMEL_CASE_PATTERN.findall(segment))
    return tokens


@lru_cache(maxsize=None)
def storage_type_for_path(path: str) -> StorageType:
    """Resolve the column storage type implied by a generator path.

    Integer wins over boolean, and anything else is stored as text.
    """
    # Whole words only: a bare "int" substring would make internet.* paths
    # INTEGER and turn their LIKE filters into equality
    tokens = set(path_tokens(path))
    if tokens & INTEGER_TOKENS:
        return StorageType.INTEGER
    if tokens & BOOLEAN_TOKENS:
        return StorageType.BOOLEAN
    return StorageType.TEXT


def _option(options: Any, key: str, default: Any) -> Any:
    """Read a key from a dict option bag, falling back to the default."""
    if isinstance(options, dict):
        return options.get(key, default)
    return default


def _scalar_option(options: Any, key: str, default: Any) -> Any:
    """Accept either a bare scalar option or a dict carrying it under key."""
    if isinstance(options, (int, float)) and not isinstance(options, bool):
        return options
    return _option(options, key, default)


def _decimal_string(faker: Faker, options: Any, low: float, high: float) -> str:
    lo = float(_option(options, "min", low))
    hi = float(_option(options, "max", high))
    digits = int(_option(options, "dec", 2))
    return f"{faker.random.uniform(lo, hi):.{digits}f}"


# Person
@register_generator("faker.person.fullName")
def _full_name(faker: Faker, options: Any) -> str:
    return faker.name()


@register_generator("faker.person.firstName")
def _first_name(faker: Faker, options: Any) -> str:
    return faker.first_name()


@register_generator("faker.person.lastName")
def _last_name(faker: Faker, options: Any) -> str:
    return faker.last_name()


@register_generator("faker.person.jobTitle")
def _job_title(faker: Faker, options: Any) -> str:
    return faker.job()


@register_generator("faker.person.prefix")
def _prefix(faker: Faker, options: Any) -> str:
    return faker.prefix()


# Internet
@register_generator("faker.internet.email")
def _email(faker: Faker, options: Any) -> str:
    return faker.email()


@register_generator("faker.internet.userName", "faker.internet.username")
def _user_name(faker: Faker, options: Any) -> str:
    return faker.user_name()


@register_generator("faker.internet.url")
def _url(faker: Faker, options: Any) -> str:
    return faker.url()


@register_generator("faker.internet.domainName")
def _domain_name(faker: Faker, options: Any) -> str:
    return faker.domain_name()


@register_generator("faker.internet.ipv4", "faker.internet.ip")
def _ipv4(faker: Faker, options: Any) -> str:
    return faker.ipv4()


@register_generator("faker.internet.password")
def _password(faker: Faker, options: Any) -> str:
    return faker.password(length=int(_scalar_option(options, "length", 12)))


# Lorem
@register_generator("faker.lorem.word")
def _word(faker: Faker, options: Any) -> str:
    return faker.word()


@register_generator("faker.lorem.words")
def _words(faker: Faker, options: Any) -> str:
    return " ".join(faker.words(nb=int(_scalar_option(options, "count", 3))))


@register_generator("faker.lorem.sentence")
def _sentence(faker: Faker, options: Any) -> str:
    return faker.sentence(nb_words=int(_scalar_option(options, "wordCount", 6)))


@register_generator("faker.lorem.sentences")
def _sentences(faker: Faker, options: Any) -> str:
    return " ".join(faker.sentences(nb=int(_scalar_option(options, "count", 3))))


@register_generator("faker.lorem.paragraph")
def _paragraph(faker: Faker, options: Any) -> str:
    return faker.paragraph(
        nb_sentences=int(_scalar_option(options, "sentenceCount", 3))
    )


@register_generator("faker.lorem.paragraphs")
def _paragraphs(faker: Faker, options: Any) -> str:
    return "\n".join(faker.paragraphs(nb=int(_scalar_option(options, "count", 3))))


@register_generator("faker.lorem.text")
def _text(faker: Faker, options: Any) -> str:
    return faker.text(max_nb_chars=int(_scalar_option(options, "maxChars", 200)))


@register_generator("faker.lorem.slug")
def _slug(faker: Faker, options: Any) -> str:
    return faker.slug()


# Numbers and datatypes
@register_generator("faker.number.int")
def _number_int(faker: Faker, options: Any) -> int:
    low = int(_option(options, "min", 0))
    high = int(_scalar_option(options, "max", 99999))
    return faker.random_int(min=low, max=high)


@register_generator("faker.number.float")
def _number_float(faker: Faker, options: Any) -> float:
    low = float(_option(options, "min", 0.0))
    high = float(_scalar_option(options, "max", 1000.0))
    digits = int(_option(options, "fractionDigits", 2))
    return round(faker.random.uniform(low, high), digits)


@register_generator("faker.datatype.boolean")
def _boolean(faker: Faker, options: Any) -> bool:
    probability = float(_scalar_option(options, "probability", 0.5))
    return faker.random.random() < probability


@register_generator("faker.string.uuid", "faker.datatype.uuid")
def _uuid(faker: Faker, options: Any) -> str:
    return faker.uuid4()


# Dates (ISO 8601 strings)
@register_generator("faker.date.past")
def _date_past(faker: Faker, options: Any) -> str:
    years = int(_scalar_option(options, "years", 1))
    return faker.date_time_between(start_date=f"-{years}y", end_date="now").isoformat()


@register_generator("faker.date.future")
def _date_future(faker: Faker, options: Any) -> str:
    years = int(_scalar_option(options, "years", 1))
    return faker.date_time_between(start_date="now", end_date=f"+{years}y").isoformat()


@register_generator("faker.date.recent")
def _date_recent(faker: Faker, options: Any) -> str:
    days = int(_scalar_option(options, "days", 1))
    return faker.date_time_between(start_date=f"-{days}d", end_date="now").isoformat()


@register_generator("faker.date.birthdate")
def _birthdate(faker: Faker, options: Any) -> str:
    return faker.date_of_birth(
        minimum_age=int(_option(options, "min", 18)),
        maximum_age=int(_option(options, "max", 80)),
    ).isoformat()


@register_generator("faker.date.anytime")
def _date_anytime(faker: Faker, options: Any) -> str:
    return faker.date_time().isoformat()


# Location
@register_generator("faker.location.city")
def _city(faker: Faker, options: Any) -> str:
    return faker.city()


@register_generator("faker.location.country")
def _country(faker: Faker, options: Any) -> str:
    return faker.country()


@register_generator("faker.location.streetAddress")
def _street_address(faker: Faker, options: Any) -> str:
    return faker.street_address()


@register_generator("faker.location.zipCode")
def _zip_code(faker: Faker, options: Any) -> str:
    return faker.postcode()


@register_generator("faker.location.state")
def _state(faker: Faker, options: Any) -> str:
    return faker.state()


@register_generator("faker.location.latitude")
def _latitude(faker: Faker, options: Any) -> float:
    return float(faker.latitude())


@register_generator("faker.location.longitude")
def _longitude(faker: Faker, options: Any) -> float:
    return float(faker.longitude())


# Phone and company
@register_generator("faker.phone.number")
def _phone_number(faker: Faker, options: Any) -> str:
    return faker.phone_number()


@register_generator("faker.company.name")
def _company_name(faker: Faker, options: Any) -> str:
    return faker.company()


@register_generator("faker.company.catchPhrase")
def _catch_phrase(faker: Faker, options: Any) -> str:
    return faker.catch_phrase()


@register_generator("faker.company.buzzPhrase")
def _buzz_phrase(faker: Faker, options: Any) -> str:
    return faker.bs()


# Commerce and finance (amounts are decimal strings, as in Faker.js)
@register_generator("faker.commerce.price")
def _price(faker: Faker, options: Any) -> str:
    return _decimal_string(faker, options, 1.0, 1000.0)


@register_generator("faker.finance.amount")
def _amount(faker: Faker, options: Any) -> str:
    return _decimal_string(faker, options, 0.0, 1000.0)


@register_generator("faker.finance.currencyCode")
def _currency_code(faker: Faker, options: Any) -> str:
    return faker.currency_code()


@register_generator("faker.finance.iban")
def _iban(faker: Faker, options: Any) -> str:
    return faker.iban()


@register_generator("faker.finance.creditCardNumber")
def _credit_card_number(faker: Faker, options: Any) -> str:
    return faker.credit_card_number()


# Color and image
@register_generator("faker.color.human")
def _color_name(faker: Faker, options: Any) -> str:
    return faker.color_name()


@register_generator("faker.color.rgb")
def _color_rgb(faker: Faker, options: Any) -> str:
    return faker.hex_color()


@register_generator("faker.image.url")
def _image_url(faker: Faker, options: Any) -> str:
    return faker.image_url()


@register_generator("faker.image.avatar")
def _avatar(faker: Faker, options: Any) -> str:
    return faker.image_url(width=128, height=128)
