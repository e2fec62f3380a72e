import pytest

from app import crear_app
from servicios.servicio_pedidos.dominio.excepciones import ErrorRepositorio

EMPRESA = {"X-Empresa-Id": "empresa-1"}


@pytest.fixture
def app(repositorio, estimador, reloj):
    return crear_app(config_extra={"TESTING": True}, repositorio=repositorio, estimador=estimador, reloj=reloj)


@pytest.fixture
def client(app):
    return app.test_client()


def _payload(**cambios):
    data = {
        "recogida": {"direccion": "Rua das Flores, 120", "ciudad": "São Paulo", "barrio": "Centro"},
        "entrega": {"direccion": "Av. Atlântica, 500", "ciudad": "Rio de Janeiro"},
        "descripcion_producto": "Documentos",
        "valor_producto": "50.00",
        "valor_frete": "21.40",
    }
    data.update(cambios)
    return data


def _crear(client, **cambios):
    resp = client.post("/api/v1/pedidos", json=_payload(**cambios), headers=EMPRESA)
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()["pedido"]


def test_salud(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.get_json()["status"] == "ok"


def test_cabecera_de_empresa_requerida(client):
    resp = client.get("/api/v1/pedidos")
    assert resp.status_code == 400
    assert resp.get_json()["ok"] is False


def test_calcular_frete(client):
    resp = client.post("/api/v1/pedidos/frete", json={"ciudad_recogida": "Campinas", "ciudad_entrega": "Santos"},
                       headers=EMPRESA)
    data = resp.get_json()
    assert resp.status_code == 200
    assert float(data["valor_frete"]) >= 15.0
    assert data["moneda"] == "BRL"


def test_calcular_frete_sin_ciudad(client):
    resp = client.post("/api/v1/pedidos/frete", json={"ciudad_recogida": "Campinas"}, headers=EMPRESA)
    assert resp.status_code == 400


def test_crear_y_obtener_pedido(client):
    pedido = _crear(client)
    assert pedido["numero_pedido"] == "PED-000001"
    assert pedido["status"] == "recibido"
    assert pedido["valor_total"] == "71.40"
    assert pedido["empresa_id"] == "empresa-1"

    resp = client.get(f"/api/v1/pedidos/{pedido['id']}", headers=EMPRESA)
    assert resp.status_code == 200
    assert resp.get_json()["pedido"]["id"] == pedido["id"]


def test_crear_sin_frete_reporta_motivo(client, repositorio):
    resp = client.post("/api/v1/pedidos", json=_payload(valor_frete=None), headers=EMPRESA)
    assert resp.status_code == 400
    assert resp.get_json()["motivo"] == "frete_no_calculado"
    assert repositorio.total_guardados() == 0


def test_crear_sin_direccion_de_entrega(client):
    resp = client.post("/api/v1/pedidos", json=_payload(entrega={"ciudad": "Rio de Janeiro"}), headers=EMPRESA)
    assert resp.status_code == 400
    assert resp.get_json()["motivo"] == "entrega_incompleta"


@pytest.mark.parametrize("cambios", [
    {"recogida": "Rua A"},
    {"entrega": ["Av. Atlântica, 500", "Rio de Janeiro"]},
])
def test_crear_con_direccion_que_no_es_objeto(client, repositorio, cambios):
    resp = client.post("/api/v1/pedidos", json=_payload(**cambios), headers=EMPRESA)
    assert resp.status_code == 400
    assert resp.get_json()["ok"] is False
    assert repositorio.total_guardados() == 0


@pytest.mark.parametrize("cambios", [{"valor_frete": "1e30"}, {"valor_producto": "1e30"}])
def test_crear_con_monto_desmedido(client, repositorio, cambios):
    resp = client.post("/api/v1/pedidos", json=_payload(**cambios), headers=EMPRESA)
    assert resp.status_code == 400
    assert repositorio.total_guardados() == 0


def test_pedido_de_otra_empresa_es_404(client):
    pedido = _crear(client)
    resp = client.get(f"/api/v1/pedidos/{pedido['id']}", headers={"X-Empresa-Id": "empresa-2"})
    assert resp.status_code == 404


def test_listar_con_filtro_de_estado(client):
    primero = _crear(client)
    _crear(client)
    client.post(f"/api/v1/pedidos/{primero['id']}/estado", json={"status": "cancelado"}, headers=EMPRESA)

    todos = client.get("/api/v1/pedidos", headers=EMPRESA).get_json()["items"]
    cancelados = client.get("/api/v1/pedidos?status=cancelado", headers=EMPRESA).get_json()["items"]
    otra = client.get("/api/v1/pedidos", headers={"X-Empresa-Id": "otra"}).get_json()["items"]

    assert len(todos) == 2
    assert [p["id"] for p in cancelados] == [primero["id"]]
    assert otra == []


def test_listar_con_estado_desconocido(client):
    resp = client.get("/api/v1/pedidos?status=perdido", headers=EMPRESA)
    assert resp.status_code == 400


def test_cambiar_estado_y_transicion_ilegal(client):
    pedido = _crear(client)
    url = f"/api/v1/pedidos/{pedido['id']}/estado"

    resp = client.post(url, json={"status": "enviado", "entregador_id": "moto-3"}, headers=EMPRESA)
    assert resp.status_code == 200
    assert resp.get_json()["pedido"]["entregador_id"] == "moto-3"
    assert resp.get_json()["pedido"]["asignado_en"] == "2026-10-18T10:30:00"

    resp = client.post(url, json={"status": "entregado"}, headers=EMPRESA)
    data = resp.get_json()
    assert resp.status_code == 409
    assert data["estado_actual"] == "enviado"
    assert data["estado_solicitado"] == "entregado"


def test_cambiar_estado_sin_status(client):
    pedido = _crear(client)
    resp = client.post(f"/api/v1/pedidos/{pedido['id']}/estado", json={}, headers=EMPRESA)
    assert resp.status_code == 400


def test_estadisticas(client):
    p1 = _crear(client)
    _crear(client)
    for estado in ("enviado", "en_camino", "entregado"):
        client.post(f"/api/v1/pedidos/{p1['id']}/estado", json={"status": estado}, headers=EMPRESA)

    resp = client.get("/api/v1/pedidos/estadisticas", headers=EMPRESA)
    assert resp.status_code == 200
    assert resp.get_json() == {"ok": True, "activos": 1, "entregados_hoy": 1, "total": 2}

    resp = client.get("/api/v1/pedidos/estadisticas?referencia=2026-10-19T08:00:00", headers=EMPRESA)
    assert resp.get_json()["entregados_hoy"] == 0


def test_estadisticas_referencia_invalida(client):
    resp = client.get("/api/v1/pedidos/estadisticas?referencia=ayer", headers=EMPRESA)
    assert resp.status_code == 400


def test_estadisticas_no_disponibles_es_503(repositorio, estimador, reloj, monkeypatch):
    def _caido(*args, **kwargs):
        raise ErrorRepositorio("sin conexión")

    monkeypatch.setattr(repositorio, "contar_por_empresa", _caido)
    client = crear_app(config_extra={"TESTING": True}, repositorio=repositorio,
                       estimador=estimador, reloj=reloj).test_client()

    resp = client.get("/api/v1/pedidos/estadisticas", headers=EMPRESA)
    assert resp.status_code == 503
    assert resp.get_json()["reintentar"] is True


def test_ruta_inexistente(client):
    resp = client.get("/api/v1/nada")
    assert resp.status_code == 404


def test_json_conserva_acentos(client):
    resp = client.delete("/")
    assert resp.status_code == 405
    assert "Método no permitido".encode("utf-8") in resp.data
