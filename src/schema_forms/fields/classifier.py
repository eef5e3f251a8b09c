"""
Field classification.

Maps a field name and descriptor to the kind of control it represents.
Several signals can match the same field, so the checks run in a fixed
order and the first match wins:

1. Name heuristics (geometry, color, file, image, password)
2. Explicit ``format``
3. ``isManyToMany``
4. Choice detection
5. Boolean type
6. String type (long strings become textareas)
7. Integer / number types
8. Text
"""

from schema_forms.fields.choices import ChoiceSetResolver
from schema_forms.models.field_descriptor import FieldDescriptor
from schema_forms.models.field_kind import FieldKind, Kind, kind_from_tag

MAP_NAME_TOKENS = ("geojson", "geometry", "map")
COLOR_NAME_TOKENS = ("color", "colour")
FILE_NAME_TOKENS = ("file", "attachment")
IMAGE_NAME_TOKENS = ("image", "photo", "picture")
PASSWORD_NAME_TOKENS = ("password",)

FORMAT_KINDS: dict[str, FieldKind] = {
    "multiselect": FieldKind.MULTISELECT,
    "select": FieldKind.SELECT,
    "switch": FieldKind.BOOLEAN,
    "date-time": FieldKind.DATETIME,
    "date": FieldKind.DATE,
    "email": FieldKind.EMAIL,
    "textarea": FieldKind.TEXTAREA,
    "range": FieldKind.RANGE,
}


def _name_has(name: str, tokens: tuple[str, ...]) -> bool:
    return any(token in name for token in tokens)


class FieldClassifier:
    """Deterministic field name + descriptor -> kind mapping."""

    def __init__(
        self,
        choices: ChoiceSetResolver | None = None,
        large_text_threshold: int = 255,
    ):
        self._choices = choices or ChoiceSetResolver()
        self._large_text_threshold = large_text_threshold

    def classify(self, field_name: str, descriptor: FieldDescriptor) -> Kind:
        """
        Classify one field.

        Never raises: descriptors with an unknown ``type`` become text fields.

        Args:
            field_name: The field's key in the schema.
            descriptor: The field's descriptor.

        Returns:
            A ``FieldKind`` member, or a ``CustomKind`` for unknown formats.
        """
        kind = self._classify_by_name(field_name.lower(), descriptor.format)
        if kind is not None:
            return kind

        if descriptor.format:
            return FORMAT_KINDS.get(descriptor.format) or kind_from_tag(descriptor.format)

        if descriptor.is_many_to_many:
            return FieldKind.MULTISELECT

        if self._choices.is_choice(descriptor):
            return FieldKind.SELECT

        json_type = descriptor.effective_type
        if json_type == "boolean":
            return FieldKind.BOOLEAN
        if json_type == "string":
            max_length = descriptor.max_length
            if max_length is not None and max_length > self._large_text_threshold:
                return FieldKind.TEXTAREA
            return FieldKind.TEXT
        if json_type == "integer":
            return FieldKind.INTEGER
        if json_type == "number":
            return FieldKind.NUMBER

        return FieldKind.TEXT

    @staticmethod
    def _classify_by_name(name: str, fmt: str | None) -> FieldKind | None:
        if name == "polygon" or _name_has(name, MAP_NAME_TOKENS):
            return FieldKind.MAP
        if _name_has(name, COLOR_NAME_TOKENS) or fmt == "color":
            return FieldKind.COLOR
        if _name_has(name, FILE_NAME_TOKENS) or fmt in ("binary", "file"):
            return FieldKind.FILE
        if _name_has(name, IMAGE_NAME_TOKENS) or fmt == "image":
            return FieldKind.IMAGE
        if _name_has(name, PASSWORD_NAME_TOKENS) or fmt == "password":
            return FieldKind.PASSWORD
        return None
