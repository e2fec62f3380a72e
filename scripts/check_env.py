import os
from dotenv import load_dotenv, find_dotenv


def mask(v: str | None, keep: int = 4) -> str:
    if not v:
        return "<EMPTY>"
    if len(v) <= keep * 2:
        return v[0:keep] + "…"
    return v[0:keep] + "…" + v[-keep:]


SECRETOS = {"DATABASE_URL", "SQLALCHEMY_DATABASE_URI"}


def main() -> None:
    load_dotenv(find_dotenv())
    keys = [
        "DATABASE_URL",
        "SQLALCHEMY_DATABASE_URI",
        "LOG_LEVEL",
        "CORS_ORIGINS",
        "EMPRESA_HEADER",
        "MONEDA",
        "FRETE_BASE",
        "FRETE_VARIACION_MAX",
    ]
    print("Loaded environment summary:")
    for k in keys:
        v = os.getenv(k)
        shown = mask(v) if k in SECRETOS else (v or "")
        print(f"- {k}: {'SET' if v else 'MISSING'} ({shown})")


if __name__ == "__main__":
    main()
