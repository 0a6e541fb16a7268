import pytest
from fastapi import HTTPException

from app.db.dto.usuario_dto import UsuarioDTO


def test_list_requires_admin(client, leitor):
    response = client.get("/api/usuarios", headers=leitor["headers"])
    assert response.status_code == 403


def test_admin_lists_users(client, admin, leitor):
    response = client.get("/api/usuarios", headers=admin["headers"])
    assert response.status_code == 200
    assert [u["usuario"] for u in response.json()] == ["admin", "joao123"]
    assert {u["perfil"] for u in response.json()} <= {"USER", "ADMIN"}


def test_admin_lists_only_inactive(client, admin, leitor):
    client.patch(f"/api/usuarios/{leitor['user']['id']}/desativar", headers=admin["headers"])
    response = client.get("/api/usuarios", params={"ativo": False}, headers=admin["headers"])
    assert [u["usuario"] for u in response.json()] == ["joao123"]
    assert response.json()[0]["status"] == "Inativo"


def test_user_reads_self_but_not_others(client, admin, leitor):
    own = client.get(f"/api/usuarios/{leitor['user']['id']}", headers=leitor["headers"])
    other = client.get(f"/api/usuarios/{admin['user']['id']}", headers=leitor["headers"])
    assert own.status_code == 200
    assert other.status_code == 403


def test_get_missing_user(client, admin):
    assert client.get("/api/usuarios/999", headers=admin["headers"]).status_code == 404


def test_user_updates_own_data(client, leitor, login):
    response = client.put(
        f"/api/usuarios/{leitor['user']['id']}",
        headers=leitor["headers"],
        json={"nome": "João da Silva", "senha": "novaSenha123"},
    )
    assert response.status_code == 200
    assert response.json()["nome"] == "João da Silva"
    assert response.json()["email"] == "joao@email.com"
    assert login("joao123", "novaSenha123")


def test_user_cannot_change_own_role(client, leitor):
    response = client.put(
        f"/api/usuarios/{leitor['user']['id']}",
        headers=leitor["headers"],
        json={"perfil": "ADMIN"},
    )
    assert response.status_code == 403


def test_admin_promotes_user(client, admin, leitor):
    response = client.put(
        f"/api/usuarios/{leitor['user']['id']}",
        headers=admin["headers"],
        json={"perfil": "ADMIN", "ativo": True},
    )
    assert response.status_code == 200
    assert response.json()["perfil"] == "ADMIN"


def test_admin_cannot_demote_self(client, admin):
    response = client.put(
        f"/api/usuarios/{admin['user']['id']}",
        headers=admin["headers"],
        json={"perfil": "USER"},
    )
    assert response.status_code == 400


def test_update_rejects_taken_username(client, admin, leitor):
    response = client.put(
        f"/api/usuarios/{leitor['user']['id']}",
        headers=leitor["headers"],
        json={"usuario": "admin"},
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Usuário já existe"


def test_repository_rejects_duplicates(admin, leitor):
    repo = UsuarioDTO()
    with pytest.raises(HTTPException) as exc:
        repo.create_user("outro", "Outro", "joao@email.com", "hash", "USER", "2025-01-01T10:00:00")
    assert exc.value.status_code == 400
    assert exc.value.detail == "Email já cadastrado"

    with pytest.raises(HTTPException) as exc:
        repo.update_user(leitor["user"]["id"], {"usuario": "admin"})
    assert exc.value.detail == "Usuário já existe"
    assert repo.get_by_id(leitor["user"]["id"])["usuario"] == "joao123"


def test_update_validation_errors(client, leitor):
    response = client.put(
        f"/api/usuarios/{leitor['user']['id']}",
        headers=leitor["headers"],
        json={"usuario": "jo", "email": "joao.email.com", "senha": "123"},
    )
    assert response.status_code == 400
    assert set(response.json()["mensagens"]) == {"usuario", "email", "senha"}


def test_activate_and_deactivate(client, admin, leitor):
    user_id = leitor["user"]["id"]
    off = client.patch(f"/api/usuarios/{user_id}/desativar", headers=admin["headers"])
    assert off.json()["status"] == "Inativo"
    on = client.patch(f"/api/usuarios/{user_id}/ativar", headers=admin["headers"])
    assert on.json()["status"] == "Ativo"


def test_admin_cannot_deactivate_self(client, admin):
    response = client.patch(f"/api/usuarios/{admin['user']['id']}/desativar", headers=admin["headers"])
    assert response.status_code == 400


def test_delete_user(client, admin, leitor):
    user_id = leitor["user"]["id"]
    assert client.delete(f"/api/usuarios/{user_id}", headers=admin["headers"]).status_code == 204
    assert client.get(f"/api/usuarios/{user_id}", headers=admin["headers"]).status_code == 404


def test_delete_user_with_open_loan(client, admin, leitor, livro):
    client.post("/api/emprestimos", headers=leitor["headers"], json={"livroId": livro["id"]})
    response = client.delete(f"/api/usuarios/{leitor['user']['id']}", headers=admin["headers"])
    assert response.status_code == 400
