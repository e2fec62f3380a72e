import random
from decimal import Decimal

import pytest

from configuracion import Config
from servicios.servicio_pedidos.dominio.excepciones import EntradaInvalidaError
from servicios.servicio_pedidos.infraestructura.logistica.estimador_frete_simulado import EstimadorFreteSimulado


@pytest.mark.parametrize("semilla", range(25))
def test_frete_siempre_positivo_y_acotado(semilla):
    estimador = EstimadorFreteSimulado(base=Decimal("15.00"), variacion_maxima=Decimal("20.00"),
                                       generador=random.Random(semilla))
    frete = estimador.estimar("Campinas", "Santos")
    assert frete > 0
    assert Decimal("15.00") <= frete <= Decimal("35.00")
    assert frete.as_tuple().exponent == -2


@pytest.mark.parametrize("recogida, entrega", [("", "Santos"), ("Campinas", ""), ("   ", "Santos"), (None, "Santos")])
def test_ciudad_vacia_es_entrada_invalida(estimador, recogida, entrega):
    with pytest.raises(EntradaInvalidaError):
        estimador.estimar(recogida, entrega)


def test_misma_semilla_mismo_frete():
    a = EstimadorFreteSimulado(generador=random.Random(7))
    b = EstimadorFreteSimulado(generador=random.Random(7))
    assert a.estimar("Curitiba", "Londrina") == b.estimar("Curitiba", "Londrina")


def test_sin_variacion_devuelve_la_base():
    estimador = EstimadorFreteSimulado(base=Decimal("12.50"), variacion_maxima=Decimal("0"))
    assert estimador.estimar("Recife", "Olinda") == Decimal("12.50")


def test_base_no_positiva_se_rechaza():
    with pytest.raises(ValueError):
        EstimadorFreteSimulado(base=Decimal("0"))


def test_valores_por_defecto_de_configuracion():
    estimador = EstimadorFreteSimulado()
    assert estimador.base == Config.FRETE_BASE
    assert estimador.variacion_maxima == Config.FRETE_VARIACION_MAX
