"""
Erreurs du modèle de blocs.

Toutes héritent de ValueError (même convention que le parser de manifest) :
elles restent locales à une opération sur un bloc, jamais fatales.
"""


class BlockError(ValueError):
    """Erreur de base du modèle de blocs."""


class NotFound(BlockError):
    """Opération sur un id de bloc absent du store."""

    def __init__(self, block_id: str):
        self.block_id = block_id
        super().__init__(f"Bloc introuvable : {block_id!r}")


class InvalidConfig(BlockError):
    """Config de bloc incompatible avec le schéma de sa variante (ou incomplète au rendu)."""

    def __init__(self, block_type: str, message: str):
        self.block_type = block_type
        super().__init__(f"Config invalide pour le bloc {block_type!r} : {message}")


class SerializationMismatch(BlockError):
    """Bloc persisté illisible : type hors de l'ensemble connu ou enregistrement malformé."""

    def __init__(self, raw: object, message: str):
        self.raw = raw
        super().__init__(message)


class VersionConflict(BlockError):
    """Sauvegarde rejetée : la version du document a changé depuis le chargement."""

    def __init__(self, page_id: str, expected: int, actual: int):
        self.page_id, self.expected, self.actual = page_id, expected, actual
        super().__init__(
            f"Page {page_id!r} modifiée entre-temps (version attendue {expected}, actuelle {actual})"
        )
