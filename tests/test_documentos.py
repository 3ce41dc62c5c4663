from pathlib import Path

from tests.conftest import PDF_BYTES, PNG_BYTES


def _upload(client, auth, **data):
    files = {"arquivo": ("oficio.pdf", PDF_BYTES, "application/pdf")}
    form = {"nome": "Ofício padrão", "descricao": "Modelo de ofício"}
    form.update(data)
    return client.post("/api/documentos", headers=auth, data=form, files=files)


def _stored(settings):
    return list(Path(settings.UPLOADS_DIR).iterdir())


def test_upload_pdf_creates_record_and_file(client, auth, settings):
    r = _upload(client, auth)

    assert r.status_code == 200
    doc = r.json()
    assert doc["id"] == 1
    assert doc["nome"] == "Ofício padrão"
    assert doc["tipo"] == "modelo"
    assert doc["descricao"] == "Modelo de ofício"
    assert doc["nomeArquivo"] == "oficio.pdf"
    assert doc["createdBy"] == 1
    assert doc["arquivo"].startswith("/uploads/arquivo-")
    assert doc["arquivo"].endswith(".pdf")

    files = _stored(settings)
    assert [f.name for f in files] == [doc["arquivo"].rsplit("/", 1)[-1]]
    assert files[0].read_bytes() == PDF_BYTES

    listed = client.get("/api/documentos", headers=auth).json()
    assert listed == [doc]


def test_uploaded_file_is_served(client, auth):
    doc = _upload(client, auth).json()
    r = client.get(doc["arquivo"])
    assert r.status_code == 200
    assert r.content == PDF_BYTES


def test_upload_trims_and_keeps_tipo(client, auth):
    doc = _upload(client, auth, nome="  Termo  ", tipo="formulario", descricao="  x ").json()
    assert doc["nome"] == "Termo"
    assert doc["tipo"] == "formulario"
    assert doc["descricao"] == "x"


def test_non_pdf_rejected_without_side_effects(client, auth, settings):
    r = client.post(
        "/api/documentos",
        headers=auth,
        data={"nome": "Foto"},
        files={"arquivo": ("foto.png", PNG_BYTES, "image/png")},
    )

    assert r.status_code == 400
    assert r.json() == {"error": "Apenas arquivos PDF são permitidos"}
    assert client.get("/api/documentos", headers=auth).json() == []
    assert _stored(settings) == []


def test_pdf_over_limit_rejected(client, auth, settings):
    big = b"%PDF" + b"\x00" * (10 * 1024 * 1024)
    r = client.post(
        "/api/documentos",
        headers=auth,
        data={"nome": "Grande"},
        files={"arquivo": ("grande.pdf", big, "application/pdf")},
    )

    assert r.status_code == 400
    assert client.get("/api/documentos", headers=auth).json() == []
    assert _stored(settings) == []


def test_missing_nome_is_400(client, auth, settings):
    r = _upload(client, auth, nome="   ")
    assert r.status_code == 400
    assert r.json() == {"error": "Nome do documento é obrigatório"}
    assert _stored(settings) == []


def test_missing_file_is_400(client, auth):
    r = client.post("/api/documentos", headers=auth, data={"nome": "Sem arquivo"})
    assert r.status_code == 400
    assert r.json() == {"error": "Arquivo PDF é obrigatório"}


def test_upload_requires_token(client, settings):
    r = client.post(
        "/api/documentos",
        data={"nome": "X"},
        files={"arquivo": ("x.pdf", PDF_BYTES, "application/pdf")},
    )
    assert r.status_code == 401
    assert _stored(settings) == []


def test_delete_removes_record_and_file(client, auth, settings):
    doc = _upload(client, auth).json()

    r = client.delete(f"/api/documentos/{doc['id']}", headers=auth)

    assert r.status_code == 200
    assert r.json() == {"success": True}
    assert client.get("/api/documentos", headers=auth).json() == []
    assert _stored(settings) == []


def test_delete_with_missing_file_still_succeeds(client, auth, settings):
    doc = _upload(client, auth).json()
    for f in _stored(settings):
        f.unlink()

    r = client.delete(f"/api/documentos/{doc['id']}", headers=auth)

    assert r.status_code == 200
    assert client.get("/api/documentos", headers=auth).json() == []


def test_delete_unknown_document_is_404(client, auth):
    r = client.delete("/api/documentos/3", headers=auth)
    assert r.status_code == 404
    assert r.json() == {"error": "Documento não encontrado"}
