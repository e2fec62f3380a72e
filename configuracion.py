# configuracion.py
import os
from decimal import Decimal
from pathlib import Path

try:
    # Cargar variables de entorno si existe .env (opcional)
    from dotenv import load_dotenv, find_dotenv
    load_dotenv(find_dotenv())
except ImportError:
    pass


def _normalizar_url_pg(url: str) -> str:
    """Usa el driver psycopg3 si está instalado y la URL es 'postgresql://' sin driver."""
    try:
        import psycopg  # noqa: F401
    except ImportError:
        return url
    if url.startswith("postgresql://") and "+" not in url.split("://", 1)[0]:
        return url.replace("postgresql://", "postgresql+psycopg://", 1)
    return url


class Config:
    """
    Configuración global de la aplicación Flask.
    Por defecto guarda los pedidos en 'db_pedidos.sqlite' en la raíz del proyecto.
    """

    # -------------------- Flask / SQLAlchemy --------------------
    BASE_DIR = Path(__file__).resolve().parent
    DB_PATH = BASE_DIR / "db_pedidos.sqlite"
    # Prefer explicit SQLALCHEMY_DATABASE_URI, then DATABASE_URL (e.g., Neon), else local SQLite
    SQLALCHEMY_DATABASE_URI = _normalizar_url_pg(
        os.getenv("SQLALCHEMY_DATABASE_URI")
        or os.getenv("DATABASE_URL")
        or f"sqlite:///{DB_PATH}"
    )
    # Respuestas JSON con acentos sin escapar (app.json.ensure_ascii)
    JSON_ENSURE_ASCII = False

    # -------------------- Logging / CORS --------------------
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")

    # -------------------- Pedidos --------------------
    # Cabecera con la empresa dueña de los pedidos (la identidad la resuelve el portal)
    EMPRESA_HEADER = os.getenv("EMPRESA_HEADER", "X-Empresa-Id")
    MONEDA = os.getenv("MONEDA", "BRL")

    # -------------------- Flete simulado --------------------
    FRETE_BASE = Decimal(os.getenv("FRETE_BASE", "15.00"))
    FRETE_VARIACION_MAX = Decimal(os.getenv("FRETE_VARIACION_MAX", "20.00"))
