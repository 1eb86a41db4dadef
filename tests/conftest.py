# Configuración central de pytest y fixtures compartidos

import pytest
import os
import sys
from unittest.mock import AsyncMock, MagicMock, patch

# Asegurar que el directorio raíz esté en el path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.domain.query import (  # noqa: E402
    ConnectionStatus,
    FetchResult,
    FieldInfo,
    QueryOutcome,
    QueryResult,
    SQLGenerationResponse,
)
from core.domain.schema import (  # noqa: E402
    DatabaseSchema,
    ForeignKey,
    TableColumn,
    TableSchema,
)
from utils.metrics import get_metrics  # noqa: E402


# MARKERS PERSONALIZADOS

def pytest_configure(config):
    """Registrar markers personalizados"""
    config.addinivalue_line(
        "markers", "unit: Tests unitarios rápidos (sin servicios externos)"
    )
    config.addinivalue_line(
        "markers", "integration: Tests de integración (requieren PostgreSQL)"
    )


@pytest.fixture(autouse=True)
def reset_metrics():
    """Métricas limpias en cada test (el colector es singleton)"""
    get_metrics().reset()
    yield
    get_metrics().reset()


# FIXTURES DE DOMINIO

@pytest.fixture
def sample_schema():
    """Schema de ejemplo: users -> orders"""
    users = TableSchema(
        name="users",
        schema="public",
        columns=(
            TableColumn("id", "int4", is_nullable=False, is_primary=True),
            TableColumn("email", "varchar", is_nullable=False, comment="Login"),
            TableColumn("name", "text"),
        ),
        primary_keys=("id",),
        comment="Registered users",
    )
    orders = TableSchema(
        name="orders",
        schema="public",
        columns=(
            TableColumn("id", "int4", is_nullable=False, is_primary=True),
            TableColumn("user_id", "int4"),
            TableColumn("total", "numeric"),
        ),
        primary_keys=("id",),
        foreign_keys=(ForeignKey("user_id", "users", "id"),),
    )
    return DatabaseSchema(tables=(orders, users))


@pytest.fixture
def sample_generation():
    return SQLGenerationResponse(
        sql="SELECT COUNT(*) AS total FROM users",
        explanation="Cuenta los usuarios",
        confidence="high",
        provider="gemini",
        model="gemini-2.0-flash",
    )


# FIXTURES DE MOCK PARA TESTS UNITARIOS

@pytest.fixture
def fake_db():
    """DatabasePort mockeado: fetch devuelve una fila"""
    db = MagicMock()
    db.fetch = AsyncMock(
        return_value=FetchResult(
            rows=[{"total": 3}], fields=[FieldInfo("total", 20)], row_count=1
        )
    )
    db.test_connection = AsyncMock(
        return_value=ConnectionStatus(connected=True, database="shop", server="127.0.0.1")
    )
    db.close = AsyncMock()
    return db


@pytest.fixture
def make_provider():
    """Fábrica de proveedores mock que cumplen el protocolo SQLProvider"""

    def _make(name: str, response=None, error: Exception = None, configured=True):
        provider = MagicMock()
        provider.name = name
        provider.is_configured = configured
        if error is not None:
            provider.generate = AsyncMock(side_effect=error)
        else:
            provider.generate = AsyncMock(return_value=response)
        return provider

    return _make


@pytest.fixture
def mock_deps(sample_schema, sample_generation):
    """Mock completo de AppDependencies para tests de API"""
    mock = MagicMock()
    mock.pipeline.run = AsyncMock(
        return_value=QueryOutcome(
            question="¿Cuántos usuarios hay?",
            generation=sample_generation,
            result=QueryResult(
                rows=[{"total": 3}],
                row_count=1,
                fields=[FieldInfo("total", 20)],
                execution_time=12,
            ),
        )
    )
    mock.pipeline.get_schema = AsyncMock(return_value=sample_schema)
    mock.pipeline.connection_status = AsyncMock(
        return_value={
            "database": {
                "connected": True,
                "database": "shop",
                "server": "127.0.0.1",
                "error": None,
            },
            "llm": {"configuredProviders": ["gemini"], "hasProvider": True},
        }
    )
    mock.pipeline.db.test_connection = AsyncMock(
        return_value=ConnectionStatus(connected=True, database="shop", server="127.0.0.1")
    )
    mock.shutdown = AsyncMock()
    return mock


# FIXTURES PARA TESTS DE API

@pytest.fixture
def api_client(mock_deps):
    """Cliente de API con dependencias mockeadas"""
    from fastapi.testclient import TestClient

    with patch("adapters.inbound.dependencies.AppDependencies") as MockDeps:
        MockDeps.get_instance.return_value = mock_deps

        from adapters.inbound.api import app
        yield TestClient(app, raise_server_exceptions=False)


# FIXTURES DE INTEGRACIÓN

@pytest.fixture(scope="session")
def pg_settings():
    """Settings reales; se saltan los tests si PostgreSQL no responde"""
    import psycopg2
    from config import settings

    try:
        conn = psycopg2.connect(**settings.db.connect_kwargs())
        conn.close()
    except Exception as e:
        pytest.skip(f"PostgreSQL no disponible: {e}")
    return settings
