import pytest
from fastapi import HTTPException

from app.db.dto.livro_dto import LivroDTO


def _autor(client, admin, nome="Clarice Lispector"):
    response = client.post("/api/autores", headers=admin["headers"], json={"nome": nome})
    assert response.status_code == 201
    return response.json()


def test_create_book_starts_fully_available(livro):
    assert livro["isbn"] == "9788535902777"
    assert livro["autorNome"] == "Machado de Assis"
    assert livro["quantidadeTotal"] == 2
    assert livro["quantidadeDisponivel"] == 2
    assert livro["disponivel"] is True


def test_create_book_requires_admin(client, leitor, livro):
    response = client.post(
        "/api/livros",
        headers=leitor["headers"],
        json={"titulo": "Outro", "isbn": "0306406152", "autorId": livro["autorId"]},
    )
    assert response.status_code == 403


def test_create_book_unknown_author(client, admin):
    response = client.post(
        "/api/livros",
        headers=admin["headers"],
        json={"titulo": "Sem autor", "isbn": "0306406152", "autorId": 42},
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Autor não encontrado"


def test_create_book_duplicate_isbn(client, admin, livro):
    response = client.post(
        "/api/livros",
        headers=admin["headers"],
        json={"titulo": "Cópia", "isbn": "9788535902777", "autorId": livro["autorId"]},
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "ISBN já cadastrado"


def test_repository_rejects_duplicate_isbn(livro):
    dados = {"titulo": "Cópia", "isbn": livro["isbn"], "autor_id": livro["autorId"], "quantidade_total": 1}
    with pytest.raises(HTTPException) as exc:
        LivroDTO().create(dados, "2025-01-01T10:00:00")
    assert exc.value.status_code == 400
    assert exc.value.detail == "ISBN já cadastrado"


def test_repository_rejects_total_below_loaned(client, admin, leitor, livro):
    for headers in (leitor["headers"], admin["headers"]):
        client.post("/api/emprestimos", headers=headers, json={"livroId": livro["id"]})
    with pytest.raises(HTTPException) as exc:
        LivroDTO().update(livro["id"], {"quantidade_total": 1})
    assert exc.value.status_code == 400
    assert LivroDTO().get_by_id(livro["id"])["quantidade_total"] == 2


def test_books_require_authentication(client, livro):
    assert client.get("/api/livros").status_code == 401


def test_search_books(client, admin, leitor, livro):
    autor = _autor(client, admin)
    client.post(
        "/api/livros",
        headers=admin["headers"],
        json={"titulo": "A Hora da Estrela", "isbn": "0306406152", "autorId": autor["id"]},
    )
    headers = leitor["headers"]

    by_title = client.get("/api/livros", params={"titulo": "casmurro"}, headers=headers).json()
    assert [b["titulo"] for b in by_title] == ["Dom Casmurro"]

    by_author = client.get("/api/livros", params={"autor": "clarice"}, headers=headers).json()
    assert [b["titulo"] for b in by_author] == ["A Hora da Estrela"]

    by_isbn = client.get("/api/livros", params={"isbn": "978-85-359-0277-7"}, headers=headers).json()
    assert [b["id"] for b in by_isbn] == [livro["id"]]

    everything = client.get("/api/livros", headers=headers).json()
    assert len(everything) == 2


def test_get_book_by_id_and_isbn(client, leitor, livro):
    assert client.get(f"/api/livros/{livro['id']}", headers=leitor["headers"]).json()["titulo"] == "Dom Casmurro"
    by_isbn = client.get("/api/livros/isbn/978-85-359-0277-7", headers=leitor["headers"])
    assert by_isbn.status_code == 200
    assert by_isbn.json()["id"] == livro["id"]
    assert client.get("/api/livros/999", headers=leitor["headers"]).status_code == 404


def test_update_total_shifts_available(client, admin, leitor, livro):
    client.post("/api/emprestimos", headers=leitor["headers"], json={"livroId": livro["id"]})
    response = client.put(f"/api/livros/{livro['id']}", headers=admin["headers"], json={"quantidadeTotal": 5})
    assert response.status_code == 200
    assert response.json()["quantidadeTotal"] == 5
    assert response.json()["quantidadeDisponivel"] == 4


def test_update_total_below_loaned_copies(client, admin, leitor, livro):
    client.post("/api/emprestimos", headers=leitor["headers"], json={"livroId": livro["id"]})
    client.post("/api/emprestimos", headers=admin["headers"], json={"livroId": livro["id"]})
    response = client.put(f"/api/livros/{livro['id']}", headers=admin["headers"], json={"quantidadeTotal": 1})
    assert response.status_code == 400


def test_update_book_fields(client, admin, livro):
    response = client.put(
        f"/api/livros/{livro['id']}",
        headers=admin["headers"],
        json={"titulo": "Dom Casmurro (edição revista)", "editora": "Nova"},
    )
    assert response.json()["titulo"] == "Dom Casmurro (edição revista)"
    assert response.json()["isbn"] == livro["isbn"]


def test_filter_by_availability(client, admin, leitor, livro):
    client.post("/api/emprestimos", headers=leitor["headers"], json={"livroId": livro["id"]})
    client.post("/api/emprestimos", headers=admin["headers"], json={"livroId": livro["id"]})
    indisponiveis = client.get("/api/livros", params={"disponivel": False}, headers=leitor["headers"]).json()
    assert [b["id"] for b in indisponiveis] == [livro["id"]]
    assert indisponiveis[0]["disponivel"] is False
    assert client.get("/api/livros", params={"disponivel": True}, headers=leitor["headers"]).json() == []


def test_delete_book(client, admin, livro):
    assert client.delete(f"/api/livros/{livro['id']}", headers=admin["headers"]).status_code == 204
    assert client.get(f"/api/livros/{livro['id']}", headers=admin["headers"]).status_code == 404


def test_delete_book_with_open_loan(client, admin, leitor, livro):
    client.post("/api/emprestimos", headers=leitor["headers"], json={"livroId": livro["id"]})
    assert client.delete(f"/api/livros/{livro['id']}", headers=admin["headers"]).status_code == 400


def test_author_crud(client, admin, leitor):
    autor = _autor(client, admin)
    assert autor["quantidadeLivros"] == 0

    updated = client.put(
        f"/api/autores/{autor['id']}",
        headers=admin["headers"],
        json={"biografia": "Escritora e jornalista.", "dataNascimento": "1920-12-10"},
    )
    assert updated.status_code == 200
    assert updated.json()["biografia"] == "Escritora e jornalista."
    assert updated.json()["dataNascimento"] == "1920-12-10"
    assert updated.json()["nome"] == "Clarice Lispector"

    found = client.get("/api/autores", params={"nome": "lispector"}, headers=leitor["headers"]).json()
    assert [a["id"] for a in found] == [autor["id"]]

    assert client.delete(f"/api/autores/{autor['id']}", headers=admin["headers"]).status_code == 204
    assert client.get(f"/api/autores/{autor['id']}", headers=leitor["headers"]).status_code == 404


def test_author_books_and_delete_guard(client, admin, leitor, livro):
    autor_id = livro["autorId"]
    books = client.get(f"/api/autores/{autor_id}/livros", headers=leitor["headers"]).json()
    assert [b["id"] for b in books] == [livro["id"]]
    assert client.get(f"/api/autores/{autor_id}", headers=leitor["headers"]).json()["quantidadeLivros"] == 1
    assert client.delete(f"/api/autores/{autor_id}", headers=admin["headers"]).status_code == 400


def test_author_requires_admin_to_create(client, leitor):
    response = client.post("/api/autores", headers=leitor["headers"], json={"nome": "Alguém"})
    assert response.status_code == 403


@pytest.mark.parametrize("livro_id", ["99999999999999999999", "0"])
def test_book_id_out_of_range(client, leitor, livro_id):
    response = client.get(f"/api/livros/{livro_id}", headers=leitor["headers"])
    assert response.status_code == 400
    assert "livro_id" in response.json()["mensagens"]
