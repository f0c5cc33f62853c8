"""
Client stockage objet (API REST type Supabase Storage) pour les images des blocs.

Le modèle de blocs ne manipule que la référence retournée (URL publique),
jamais les octets.
"""
import logging
import time
import uuid
from typing import Optional

import requests as http

from .. import config

log = logging.getLogger(__name__)


class UploadRejected(ValueError):
    """Fichier refusé avant tout appel réseau (type ou taille)."""


class StorageError(RuntimeError):
    """Échec d'un appel au stockage objet."""


class ObjectStorage:
    """
    Accès au bucket d'assets.

    Args:
        base_url: Racine de l'API stockage (ex: https://xyz.supabase.co/storage/v1)
        bucket: Nom du bucket
        api_key: Clé service (header Authorization)
        timeout: Timeout HTTP en secondes
        session: Session requests (injectable pour les tests)
    """

    def __init__(
        self,
        base_url: str = config.STORAGE_URL,
        bucket: str = config.STORAGE_BUCKET,
        api_key: str = config.STORAGE_KEY,
        timeout: float = config.UPLOAD_TIMEOUT,
        session: Optional[http.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.bucket = bucket
        self.api_key = api_key
        self.timeout = timeout
        self.http = session or http.Session()

    @property
    def public_prefix(self) -> str:
        return f"{self.base_url}/object/public/{self.bucket}/"

    def _headers(self, content_type: Optional[str] = None) -> dict:
        headers = {"Authorization": f"Bearer {self.api_key}", "apikey": self.api_key}
        if content_type:
            headers["Content-Type"] = content_type
        return headers

    # ── Références ──────────────────────────────────────────────────────────

    def is_managed(self, ref: str) -> bool:
        """True si `ref` pointe dans notre bucket (sinon : URL externe, jamais supprimée)."""
        return bool(ref) and ref.startswith(self.public_prefix)

    def path_from_ref(self, ref: str) -> str:
        """https://…/object/public/cca-assets/blocks/123-abc.png → blocks/123-abc.png"""
        if not self.is_managed(ref):
            raise ValueError(f"Référence hors bucket {self.bucket!r} : {ref}")
        return ref[len(self.public_prefix):]

    def public_url(self, path: str) -> str:
        return self.public_prefix + path

    @staticmethod
    def new_path(filename: str, folder: str = "blocks") -> str:
        ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else "bin"
        return f"{folder}/{int(time.time() * 1000)}-{uuid.uuid4().hex[:7]}.{ext}"

    # ── Opérations ──────────────────────────────────────────────────────────

    @staticmethod
    def validate(content: bytes, content_type: str) -> None:
        if content_type not in config.ALLOWED_CONTENT_TYPES:
            raise UploadRejected("Invalid file type. Only JPG, PNG, and WebP images are allowed.")
        if len(content) > config.UPLOAD_MAX_BYTES:
            raise UploadRejected(
                f"File too large. Maximum size is {config.UPLOAD_MAX_BYTES // (1024 * 1024)}MB."
            )

    def upload(self, path: str, content: bytes, content_type: str) -> str:
        """Envoie le fichier (upsert), retourne son URL publique."""
        self.validate(content, content_type)
        url = f"{self.base_url}/object/{self.bucket}/{path}"
        headers = self._headers(content_type)
        headers["x-upsert"] = "true"
        try:
            resp = self.http.post(url, headers=headers, data=content, timeout=self.timeout)
        except http.RequestException as e:
            raise StorageError(f"Upload {path} impossible : {e}") from e
        if resp.status_code not in (200, 201):
            log.error("Storage upload error %s: %s", resp.status_code, resp.text)
            raise StorageError(f"Storage API error {resp.status_code}")
        return self.public_url(path)

    def delete(self, path: str) -> None:
        url = f"{self.base_url}/object/{self.bucket}"
        try:
            resp = self.http.delete(
                url, headers=self._headers("application/json"),
                json={"prefixes": [path]}, timeout=self.timeout,
            )
        except http.RequestException as e:
            raise StorageError(f"Suppression {path} impossible : {e}") from e
        if resp.status_code not in (200, 204):
            log.error("Storage delete error %s: %s", resp.status_code, resp.text)
            raise StorageError(f"Storage API error {resp.status_code}")
