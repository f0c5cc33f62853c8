"""Configuration — variables d'environnement (valeurs par défaut pour le dev local)."""
import os
from pathlib import Path

DATA_DIR = Path(__file__).parent.parent / "data"

DB_PATH = os.getenv("DB_PATH", str(DATA_DIR / "page_blocks.db"))

# Stockage objet des images (API REST type Supabase Storage)
STORAGE_URL    = os.getenv("STORAGE_URL", "http://localhost:54321/storage/v1")
STORAGE_BUCKET = os.getenv("STORAGE_BUCKET", "cca-assets")
STORAGE_KEY    = os.getenv("STORAGE_KEY", "")

UPLOAD_MAX_BYTES = int(os.getenv("UPLOAD_MAX_BYTES", str(5 * 1024 * 1024)))
UPLOAD_TIMEOUT   = float(os.getenv("UPLOAD_TIMEOUT", "10"))
ALLOWED_CONTENT_TYPES = ("image/jpeg", "image/png", "image/webp")

