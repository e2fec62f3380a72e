from functools import wraps
from flask import current_app, g, request, jsonify


def _get_empresa_id() -> str | None:
    header = current_app.config.get("EMPRESA_HEADER", "X-Empresa-Id")
    empresa_id = (request.headers.get(header) or "").strip()
    return empresa_id or None


def empresa_requerida(fn):
    """Exige la cabecera con la empresa dueña de los pedidos y la deja en g.empresa_id."""
    @wraps(fn)
    def wrapper(*args, **kwargs):
        empresa_id = _get_empresa_id()
        if not empresa_id:
            header = current_app.config.get("EMPRESA_HEADER", "X-Empresa-Id")
            return jsonify({"ok": False, "error": f"Cabecera {header} requerida"}), 400
        g.empresa_id = empresa_id
        return fn(*args, **kwargs)
    return wrapper
