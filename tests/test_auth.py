from datetime import timedelta

from app.config.settings import settings
from app.domain.auth_domain import auth_domain


def _registro(**overrides):
    payload = {"usuario": "maria", "nome": "Maria Souza", "email": "maria@email.com", "senha": "segredo1"}
    payload.update(overrides)
    return payload


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_register_creates_active_user(client):
    response = client.post("/api/auth/register", json=_registro())
    assert response.status_code == 201
    body = response.json()
    assert body["usuario"] == "maria"
    assert body["perfil"] == "USER"
    assert body["status"] == "Ativo"
    assert "senha" not in body
    assert len(body["dataCriacao"]) == len("2025-11-10T19:30:00")


def test_register_duplicate_username(client):
    client.post("/api/auth/register", json=_registro())
    response = client.post("/api/auth/register", json=_registro(email="outra@email.com"))
    assert response.status_code == 400
    assert response.json()["detail"] == "Usuário já existe"


def test_register_duplicate_email(client):
    client.post("/api/auth/register", json=_registro())
    response = client.post("/api/auth/register", json=_registro(usuario="maria2", email="MARIA@email.com"))
    assert response.status_code == 400
    assert response.json()["detail"] == "Email já cadastrado"


def test_register_validation_messages(client):
    response = client.post("/api/auth/register", json=_registro(usuario="ab", email="invalido", senha="123"))
    assert response.status_code == 400
    body = response.json()
    assert body["erro"] == "Requisição inválida"
    assert body["mensagens"] == {
        "usuario": "Usuário deve ter entre 3 e 50 caracteres",
        "email": "Email inválido",
        "senha": "Senha deve ter no mínimo 6 caracteres",
    }


def test_login_returns_bearer_token(client, leitor):
    response = client.post("/api/auth/login", json={"usuario": "joao123", "senha": "senha123"})
    assert response.status_code == 200
    body = response.json()
    assert body["tokenType"] == "Bearer"
    assert body["usuario"]["usuario"] == "joao123"
    claims = auth_domain.decode_token(body["accessToken"])
    assert claims["sub"] == str(leitor["user"]["id"])
    assert claims["perfil"] == "USER"


def test_login_wrong_password(client, leitor):
    response = client.post("/api/auth/login", json={"usuario": "joao123", "senha": "errada"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Usuário ou senha inválidos"


def test_login_unknown_user(client):
    response = client.post("/api/auth/login", json={"usuario": "ninguem", "senha": "qualquer"})
    assert response.status_code == 401


def test_login_inactive_user(client, admin, leitor):
    client.patch(f"/api/usuarios/{leitor['user']['id']}/desativar", headers=admin["headers"])
    response = client.post("/api/auth/login", json={"usuario": "joao123", "senha": "senha123"})
    assert response.status_code == 403
    assert response.json()["detail"] == "Usuário inativo"


def test_me(client, leitor):
    response = client.get("/api/auth/me", headers=leitor["headers"])
    assert response.status_code == 200
    assert response.json()["email"] == "joao@email.com"


def test_me_without_token(client):
    response = client.get("/api/auth/me")
    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


def test_me_with_invalid_token(client):
    response = client.get("/api/auth/me", headers={"Authorization": "Bearer nao-e-um-jwt"})
    assert response.status_code == 401


def test_me_with_expired_token(client, leitor):
    token = auth_domain.create_access_token(
        {"sub": str(leitor["user"]["id"]), "perfil": "USER"}, timedelta(seconds=-1)
    )
    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_token_of_deactivated_user_is_rejected(client, admin, leitor):
    client.patch(f"/api/usuarios/{leitor['user']['id']}/desativar", headers=admin["headers"])
    response = client.get("/api/auth/me", headers=leitor["headers"])
    assert response.status_code == 401


def test_token_follows_account_after_rename(client, leitor):
    renamed = client.put(
        f"/api/usuarios/{leitor['user']['id']}", headers=leitor["headers"], json={"usuario": "joao_novo"}
    )
    assert renamed.status_code == 200
    client.post("/api/auth/register", json=_registro(usuario="joao123", nome="Outro João"))

    response = client.get("/api/auth/me", headers=leitor["headers"])
    assert response.status_code == 200
    assert response.json()["id"] == leitor["user"]["id"]
    assert response.json()["usuario"] == "joao_novo"


def test_token_with_non_numeric_subject(client, leitor):
    token = auth_domain.create_access_token({"sub": "joao123", "perfil": "USER"})
    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_no_admin_seeded_without_password(client, monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_SENHA", "")
    assert auth_domain.ensure_admin() is None
    assert auth_domain.repo.get_by_username(settings.ADMIN_USUARIO) is None


def test_admin_seeded_from_settings(client, monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_SENHA", "senha-forte-1")
    admin = auth_domain.ensure_admin()
    assert admin["perfil"] == "ADMIN"
    assert auth_domain.ensure_admin() is None
