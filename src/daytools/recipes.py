# daytools/recipes.py
"""
Recipe database loading and XML <-> JSON conversion.

Responsibilities:
- Read a recipe database from an XML or JSON file.
- Validate JSON input against RECIPE_DB_SCHEMA with jsonschema.
- Expose typed dataclasses (RecipeCollection / Recipe / Ingredient).
- Serialize a collection to the other format, indented by 4 spaces.

Field mapping (canonical -> XML / JSON):

    Recipe.name          name         / name
    Recipe.cook_time     stovetime    / time
    Recipe.ingredients   ingredients>item / ingredients
    Ingredient.name      itemname     / ingredient_name
    Ingredient.count     itemcount    / ingredient_count
    Ingredient.unit      itemunit     / ingredient_unit
    collection           cake (repeated) / cake (array)
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import jsonschema
from lxml import etree

from .errors import (
    DatabaseIOError,
    ParseError,
    SerializationError,
    UnsupportedFormatError,
)

logger = logging.getLogger(__name__)

INDENT = "    "
XML_ROOT_TAG = "recipes"
COLLECTION_KEY = "cake"


# --------------------------------------------------------------------
# Dataclasses
# --------------------------------------------------------------------


@dataclass
class Ingredient:
    """One ingredient line. All fields are free-form strings."""

    name: str = ""
    count: str = ""
    unit: str = ""


@dataclass
class Recipe:
    """One cake: name, cooking time and ingredients in file order."""

    name: str = ""
    cook_time: str = ""
    ingredients: List[Ingredient] = field(default_factory=list)


@dataclass
class RecipeCollection:
    """The whole database: recipes in file order."""

    recipes: List[Recipe] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.recipes)


# --------------------------------------------------------------------
# JSON schema
# --------------------------------------------------------------------

_NULLABLE_STRING = {"type": ["string", "null"]}

RECIPE_DB_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "recipe database",
    "type": "object",
    "properties": {
        COLLECTION_KEY: {
            "type": ["array", "null"],
            "items": {
                "type": "object",
                "properties": {
                    "name": _NULLABLE_STRING,
                    "time": _NULLABLE_STRING,
                    "ingredients": {
                        "type": ["array", "null"],
                        "items": {
                            "type": "object",
                            "properties": {
                                "ingredient_name": _NULLABLE_STRING,
                                "ingredient_count": _NULLABLE_STRING,
                                "ingredient_unit": _NULLABLE_STRING,
                            },
                        },
                    },
                },
            },
        },
    },
}


def _validate_db_dict(data: Any) -> None:
    """
    Validate a decoded JSON document against RECIPE_DB_SCHEMA.

    Raises:
        ParseError wrapping the jsonschema.ValidationError.
    """
    try:
        jsonschema.validate(instance=data, schema=RECIPE_DB_SCHEMA)
    except jsonschema.ValidationError as exc:
        where = "/".join(str(p) for p in exc.absolute_path) or "<root>"
        raise ParseError(f"invalid recipe database at {where}: {exc.message}") from exc


# --------------------------------------------------------------------
# JSON: dict <-> dataclasses
# --------------------------------------------------------------------


def _ingredient_from_dict(entry: Dict[str, Any]) -> Ingredient:
    return Ingredient(
        name=entry.get("ingredient_name") or "",
        count=entry.get("ingredient_count") or "",
        unit=entry.get("ingredient_unit") or "",
    )


def _recipe_from_dict(entry: Dict[str, Any]) -> Recipe:
    """Convert a single validated `cake` entry into a Recipe."""
    ingredients_raw = entry.get("ingredients") or []
    return Recipe(
        name=entry.get("name") or "",
        cook_time=entry.get("time") or "",
        ingredients=[_ingredient_from_dict(i) for i in ingredients_raw],
    )


def _parse_json(data: bytes) -> RecipeCollection:
    try:
        doc = json.loads(data.decode("utf-8"))
    except UnicodeDecodeError as exc:
        raise ParseError(f"JSON database is not valid UTF-8: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ParseError(f"malformed JSON: {exc}") from exc

    _validate_db_dict(doc)

    cakes = doc.get(COLLECTION_KEY) or []
    return RecipeCollection(recipes=[_recipe_from_dict(c) for c in cakes])


def _serialize_json(collection: RecipeCollection) -> bytes:
    doc = {
        COLLECTION_KEY: [
            {
                "name": recipe.name,
                "time": recipe.cook_time,
                "ingredients": [
                    {
                        "ingredient_name": item.name,
                        "ingredient_count": item.count,
                        "ingredient_unit": item.unit,
                    }
                    for item in recipe.ingredients
                ],
            }
            for recipe in collection.recipes
        ]
    }
    try:
        return json.dumps(doc, indent=len(INDENT), ensure_ascii=False).encode("utf-8")
    except (TypeError, ValueError) as exc:
        # UnicodeEncodeError (lone surrogates) is a ValueError
        raise SerializationError(f"cannot encode database as JSON: {exc}") from exc


# --------------------------------------------------------------------
# XML: element tree <-> dataclasses
# --------------------------------------------------------------------


def _xml_parser() -> etree.XMLParser:
    # No DTD entity expansion, no network fetches. Comments and PIs are
    # dropped so text on both sides of them stays in the element text.
    return etree.XMLParser(
        resolve_entities=False,
        no_network=True,
        remove_comments=True,
        remove_pis=True,
    )


def _child_text(element: etree._Element, tag: str) -> str:
    return element.findtext(tag) or ""


def _recipe_from_element(cake: etree._Element) -> Recipe:
    ingredients: List[Ingredient] = []
    container = cake.find("ingredients")
    if container is not None:
        for item in container.findall("item"):
            ingredients.append(
                Ingredient(
                    name=_child_text(item, "itemname"),
                    count=_child_text(item, "itemcount"),
                    unit=_child_text(item, "itemunit"),
                )
            )

    return Recipe(
        name=_child_text(cake, "name"),
        cook_time=_child_text(cake, "stovetime"),
        ingredients=ingredients,
    )


def _parse_xml(data: bytes) -> RecipeCollection:
    """
    Parse an XML database. The root tag is not checked; every direct
    <cake> child is one recipe and unknown elements are skipped.
    """
    try:
        root = etree.fromstring(data, parser=_xml_parser())
    except (etree.XMLSyntaxError, ValueError) as exc:
        raise ParseError(f"malformed XML: {exc}") from exc

    return RecipeCollection(
        recipes=[_recipe_from_element(c) for c in root.findall(COLLECTION_KEY)]
    )


def _sub(parent: etree._Element, tag: str, text: str) -> etree._Element:
    child = etree.SubElement(parent, tag)
    child.text = text
    return child


def _serialize_xml(collection: RecipeCollection) -> bytes:
    try:
        root = etree.Element(XML_ROOT_TAG)
        for recipe in collection.recipes:
            cake = etree.SubElement(root, COLLECTION_KEY)
            _sub(cake, "name", recipe.name)
            _sub(cake, "stovetime", recipe.cook_time)
            container = etree.SubElement(cake, "ingredients")
            for ingredient in recipe.ingredients:
                item = etree.SubElement(container, "item")
                _sub(item, "itemname", ingredient.name)
                _sub(item, "itemcount", ingredient.count)
                _sub(item, "itemunit", ingredient.unit)
    except ValueError as exc:
        # lxml rejects control characters and other non-XML text
        raise SerializationError(f"cannot encode database as XML: {exc}") from exc

    etree.indent(root, space=INDENT)
    return etree.tostring(root, encoding="utf-8")


# --------------------------------------------------------------------
# Format dispatch
# --------------------------------------------------------------------


class RecipeFormat(str, Enum):
    """Supported database formats, keyed by file extension."""

    XML = "xml"
    JSON = "json"

    @classmethod
    def from_filename(cls, filename: Union[str, Path]) -> "RecipeFormat":
        """Pick the format from the text after the last '.' (case-sensitive)."""
        name = str(filename)
        extension = name.rsplit(".", 1)[1] if "." in name else ""
        try:
            return cls(extension)
        except ValueError:
            raise UnsupportedFormatError(name) from None

    @property
    def opposite(self) -> "RecipeFormat":
        return RecipeFormat.JSON if self is RecipeFormat.XML else RecipeFormat.XML

    def parse(self, data: bytes) -> RecipeCollection:
        if self is RecipeFormat.XML:
            return _parse_xml(data)
        return _parse_json(data)

    def serialize(self, collection: RecipeCollection) -> bytes:
        if self is RecipeFormat.XML:
            return _serialize_xml(collection)
        return _serialize_json(collection)


# --------------------------------------------------------------------
# Public API
# --------------------------------------------------------------------


def load_collection(
    path: Union[str, Path],
    fmt: Optional[RecipeFormat] = None,
) -> Tuple[RecipeCollection, RecipeFormat]:
    """
    Load a recipe database file.

    Args:
        path: database file, e.g. databases/original_database.xml.
        fmt: format to parse with. If None, picked from the file extension.

    Returns:
        (collection, format the file was read as)
    """
    if fmt is None:
        fmt = RecipeFormat.from_filename(path)

    try:
        data = Path(path).read_bytes()
    except OSError as exc:
        raise DatabaseIOError(f"Error reading database: {exc}") from exc

    collection = fmt.parse(data)
    logger.debug("loaded %d recipes from %s (%s)", len(collection), path, fmt.value)
    return collection, fmt


def convert(path: Union[str, Path], fmt: Optional[RecipeFormat] = None) -> bytes:
    """Read `path` and return its contents serialized in the other format."""
    collection, fmt = load_collection(path, fmt)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("%s", format_collection(collection))
    return fmt.opposite.serialize(collection)


def format_collection(collection: RecipeCollection) -> str:
    """
    Return a human-readable summary of a database, for debug logs.

    Example layout:

    Recipes: 2

      Red Velvet Strawberry Cake (40 min)
        item                   count    unit
        ----------------------------------------
        Flour                  3        cups
        Vanilla extract        1.5      tablespoons
        ...
    """
    lines: List[str] = [f"Recipes: {len(collection)}"]

    for recipe in collection.recipes:
        lines.append("")
        lines.append(f"  {recipe.name} ({recipe.cook_time})")
        lines.append(
            "    {name:<22} {count:<8} {unit}".format(name="item", count="count", unit="unit")
        )
        lines.append("    " + "-" * 40)
        for item in recipe.ingredients:
            lines.append(
                "    {name:<22} {count:<8} {unit}".format(
                    name=item.name[:22],
                    count=item.count,
                    unit=item.unit,
                )
            )

    return "\n".join(lines)
