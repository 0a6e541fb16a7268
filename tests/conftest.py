import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-0123456789")
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["ADMIN_SENHA"] = ""

import pytest
from fastapi.testclient import TestClient

from app.db import sqlite
from app.domain.auth_domain import auth_domain
from app.main import app
from app.models.common import Perfil


@pytest.fixture
def client(tmp_path):
    # Banco exclusivo por teste
    sqlite.connect(tmp_path / "biblioteca_test.db")
    with TestClient(app) as test_client:
        yield test_client
    sqlite.close()


def _login(client, usuario, senha):
    response = client.post("/api/auth/login", json={"usuario": usuario, "senha": senha})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['accessToken']}"}


@pytest.fixture
def admin(client):
    user = auth_domain.register_user("admin", "Administrador", "admin@biblioteca.com", "admin123", perfil=Perfil.ADMIN)
    return {"user": user, "headers": _login(client, "admin", "admin123")}


@pytest.fixture
def leitor(client):
    user = auth_domain.register_user("joao123", "João Silva", "joao@email.com", "senha123")
    return {"user": user, "headers": _login(client, "joao123", "senha123")}


@pytest.fixture
def login(client):
    return lambda usuario, senha: _login(client, usuario, senha)


@pytest.fixture
def livro(client, admin):
    autor = client.post(
        "/api/autores",
        headers=admin["headers"],
        json={"nome": "Machado de Assis", "nacionalidade": "Brasileira", "dataNascimento": "1839-06-21"},
    ).json()
    response = client.post(
        "/api/livros",
        headers=admin["headers"],
        json={
            "titulo": "Dom Casmurro",
            "isbn": "978-85-359-0277-7",
            "anoPublicacao": 1899,
            "editora": "Garnier",
            "autorId": autor["id"],
            "quantidadeTotal": 2,
        },
    )
    assert response.status_code == 201, response.text
    return response.json()
