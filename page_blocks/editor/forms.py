"""
Formulaire éditable d'un bloc.

Un BlockForm n'est qu'une vue liée à (store, block_id) : chaque modification
calcule la nouvelle config complète et passe par store.update(). Le formulaire
ne détient ni ne mutate jamais le bloc lui-même.
"""
from typing import Any, ClassVar, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel

from ..blocks import Block, BlockConfig
from ..errors import InvalidConfig
from ..store import BlockStore

FieldKind = Literal["text", "textarea", "choice", "list", "items", "asset"]


class FieldSpec(BaseModel):
    """Description d'un champ éditable (nom d'attribut Python + rendu)."""
    name: str
    label: str
    kind: FieldKind = "text"
    required: bool = False
    optional: bool = False
    placeholder: str = ""
    choices: Optional[Tuple[Any, ...]] = None
    # kind="items" : sous-champs de chaque élément + élément vide ajouté par add_item
    item_fields: List["FieldSpec"] = []
    item_default: Dict[str, Any] = {}
    # kind="list" dont chaque élément est un slot d'upload (images de galerie)
    asset_slots: bool = False


class BlockForm:
    """Formulaire de base — les sous-classes déclarent `block_type` et `fields`."""

    block_type: ClassVar[str] = ""
    fields: ClassVar[List[FieldSpec]] = []

    def __init__(self, store: BlockStore, block_id: str):
        self.store = store
        self.block_id = block_id

    # ── Lecture ─────────────────────────────────────────────────────────────

    @property
    def block(self) -> Block:
        return self.store.get(self.block_id)

    @property
    def config(self) -> BlockConfig:
        return self.block.config

    def value(self, name: str) -> Any:
        self.spec(name)
        return getattr(self.config, name)

    def spec(self, name: str) -> FieldSpec:
        for f in self.fields:
            if f.name == name:
                return f
        raise InvalidConfig(self.block_type, f"champ non éditable : {name!r}")

    def missing_fields(self) -> List[str]:
        """Champs obligatoires encore vides (affichés en erreur par la surface d'édition)."""
        return self.config.missing_fields()

    # ── Modifications (toutes via store.update) ─────────────────────────────

    def set_field(self, name: str, value: Any) -> Block:
        spec = self.spec(name)
        if spec.kind in ("list", "items"):
            raise InvalidConfig(self.block_type, f"{name!r} est une collection : utiliser add_item/remove_item")
        data = self._data()
        data[name] = self._coerce(spec, value)
        return self._commit(data)

    def add_item(self, collection: str, item: Any = None) -> Block:
        spec = self._collection(collection)
        data = self._data()
        if item is None:
            item = dict(spec.item_default) if spec.kind == "items" else ""
        data[collection] = data[collection] + [item]
        return self._commit(data)

    def remove_item(self, collection: str, index: int) -> Block:
        self._collection(collection)
        data = self._data()
        items = data[collection]
        self._check_index(collection, items, index)
        data[collection] = items[:index] + items[index + 1:]
        return self._commit(data)

    def set_item(self, collection: str, index: int, value: Any) -> Block:
        """Remplace l'élément `index` d'une liste simple (achievements, images)."""
        spec = self._collection(collection)
        if spec.kind != "list":
            raise InvalidConfig(self.block_type, f"{collection!r} : utiliser set_item_field")
        data = self._data()
        self._check_index(collection, data[collection], index)
        data[collection][index] = value
        return self._commit(data)

    def set_item_field(self, collection: str, index: int, name: str, value: Any) -> Block:
        """Modifie le sous-champ `name` de l'élément `index` (events, members, stats)."""
        spec = self._collection(collection)
        sub = next((f for f in spec.item_fields if f.name == name), None)
        if sub is None:
            raise InvalidConfig(self.block_type, f"sous-champ non éditable : {collection}.{name}")
        data = self._data()
        self._check_index(collection, data[collection], index)
        data[collection][index][name] = self._coerce(sub, value)
        return self._commit(data)

    def move_item(self, collection: str, index: int, new_index: int) -> Block:
        self._collection(collection)
        data = self._data()
        items = data[collection]
        self._check_index(collection, items, index)
        self._check_index(collection, items, new_index)
        items.insert(new_index, items.pop(index))
        return self._commit(data)

    # ── Interne ─────────────────────────────────────────────────────────────

    def _data(self) -> Dict[str, Any]:
        return self.config.model_dump()

    def _commit(self, data: Dict[str, Any]) -> Block:
        return self.store.update(self.block_id, data)

    def _collection(self, name: str) -> FieldSpec:
        spec = self.spec(name)
        if spec.kind not in ("list", "items"):
            raise InvalidConfig(self.block_type, f"{name!r} n'est pas une collection")
        return spec

    def _check_index(self, collection: str, items: list, index: int) -> None:
        if not 0 <= index < len(items):
            raise InvalidConfig(self.block_type, f"{collection}[{index}] hors limites ({len(items)} éléments)")

    def _coerce(self, spec: FieldSpec, value: Any) -> Any:
        # Les valeurs de formulaire HTML arrivent en str : "4" → 4 pour gridView
        if spec.choices is not None:
            for choice in spec.choices:
                if value == choice or str(value) == str(choice):
                    return choice
            raise InvalidConfig(
                self.block_type, f"{spec.name}={value!r} hors choix {list(spec.choices)}"
            )
        if spec.optional and (value is None or value == ""):
            return None
        return value
